"""API tests for /api/classes and class-targeted task creation."""
import uuid

from conftest import auth_headers

TASK = {"title": "Lab report", "description": "Experiment 2", "dueDate": "2024-06-15"}


def _create_class(client, actor, student_ids=(), **extra):
    r = client.post(
        "/api/classes",
        json={"name": "Physics 1A", "studentIds": [str(s) for s in student_ids], **extra},
        headers=auth_headers(actor),
    )
    assert r.status_code == 201, r.text
    return r.json()["class"]


def test_teacher_creates_class_with_students(client, teacher, student, other_student):
    c = _create_class(client, teacher, [student.id, other_student.id])
    assert c["teacherId"] == str(teacher.id)
    assert set(c["studentIds"]) == {str(student.id), str(other_student.id)}


def test_student_cannot_create_class(client, student):
    r = client.post("/api/classes", json={"name": "Mine"}, headers=auth_headers(student))
    assert r.status_code == 403


def test_admin_assigns_class_to_teacher(client, admin, teacher, student):
    c = _create_class(client, admin, teacherId=str(teacher.id))
    assert c["teacherId"] == str(teacher.id)
    r = client.post("/api/classes", json={"name": "Bad", "teacherId": str(student.id)}, headers=auth_headers(admin))
    assert r.status_code == 400


def test_create_rejects_non_student_members(client, teacher, other_teacher):
    r = client.post(
        "/api/classes",
        json={"name": "Mixed", "studentIds": [str(other_teacher.id)]},
        headers=auth_headers(teacher),
    )
    assert r.status_code == 400
    assert client.get("/api/classes", headers=auth_headers(teacher)).json()["classes"] == []


def test_listing_is_scoped(client, admin, teacher, other_teacher, student, other_student):
    mine = _create_class(client, teacher, [student.id])["id"]
    theirs = _create_class(client, other_teacher, [other_student.id])["id"]

    def ids(actor):
        return {c["id"] for c in client.get("/api/classes", headers=auth_headers(actor)).json()["classes"]}

    assert ids(admin) == {mine, theirs}
    assert ids(teacher) == {mine}
    assert ids(student) == {mine}
    assert ids(other_student) == {theirs}


def test_get_class_access(client, teacher, other_teacher, student, other_student):
    c = _create_class(client, teacher, [student.id])
    url = f"/api/classes/{c['id']}"
    assert client.get(url, headers=auth_headers(student)).status_code == 200
    assert client.get(url, headers=auth_headers(other_student)).status_code == 403
    assert client.get(url, headers=auth_headers(other_teacher)).status_code == 403
    assert client.get(f"/api/classes/{uuid.uuid4()}", headers=auth_headers(teacher)).status_code == 404


def test_rename_and_delete(client, teacher, other_teacher):
    c = _create_class(client, teacher)
    url = f"/api/classes/{c['id']}"
    assert client.put(url, json={"name": "Physics 1B"}, headers=auth_headers(other_teacher)).status_code == 403
    r = client.put(url, json={"name": "Physics 1B"}, headers=auth_headers(teacher))
    assert r.json()["class"]["name"] == "Physics 1B"
    assert client.delete(url, headers=auth_headers(other_teacher)).status_code == 403
    assert client.delete(url, headers=auth_headers(teacher)).json() == {"success": True, "message": "Class deleted"}
    assert client.get(url, headers=auth_headers(teacher)).status_code == 404


def test_membership(client, teacher, student, other_student):
    c = _create_class(client, teacher, [student.id])
    url = f"/api/classes/{c['id']}/students"
    r = client.post(url, json={"studentIds": [str(student.id), str(other_student.id)]}, headers=auth_headers(teacher))
    assert r.status_code == 200
    assert sorted(r.json()["class"]["studentIds"]) == sorted([str(student.id), str(other_student.id)])
    r = client.request("DELETE", url, json={"studentId": str(student.id)}, headers=auth_headers(teacher))
    assert r.json()["class"]["studentIds"] == [str(other_student.id)]
    r = client.request("DELETE", url, json={"studentId": str(student.id)}, headers=auth_headers(teacher))
    assert r.status_code == 200


def test_class_broadcast_creates_task_per_member(client, teacher, student, other_student, make_user):
    outsider = make_user("student")
    c = _create_class(client, teacher, [student.id, other_student.id])
    r = client.post("/api/tasks", json={**TASK, "classId": c["id"]}, headers=auth_headers(teacher))
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["count"] == 2
    assert {t["studentId"] for t in data["tasks"]} == {str(student.id), str(other_student.id)}
    assert client.get("/api/tasks", headers=auth_headers(outsider)).json()["tasks"] == []


def test_class_broadcast_requires_own_class(client, teacher, other_teacher, student):
    c = _create_class(client, teacher, [student.id])
    r = client.post("/api/tasks", json={**TASK, "classId": c["id"]}, headers=auth_headers(other_teacher))
    assert r.status_code == 403
    r = client.post("/api/tasks", json={**TASK, "classId": str(uuid.uuid4())}, headers=auth_headers(teacher))
    assert r.status_code == 404


def test_empty_class_broadcast_is_400(client, teacher):
    c = _create_class(client, teacher)
    r = client.post("/api/tasks", json={**TASK, "classId": c["id"]}, headers=auth_headers(teacher))
    assert r.status_code == 400
