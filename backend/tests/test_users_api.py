"""API tests for /api/users: staff-only listing without secrets, admin create/update."""
import uuid

import pytest

from conftest import PASSWORD, auth_headers


def test_list_never_exposes_password_hash(client, admin, teacher, student):
    r = client.get("/api/users", headers=auth_headers(admin))
    assert r.status_code == 200
    users = r.json()["users"]
    assert {u["id"] for u in users} == {str(admin.id), str(teacher.id), str(student.id)}
    for u in users:
        assert set(u) == {"id", "email", "name", "role"}


def test_teacher_lists_users_with_role_filter(client, teacher, student, other_student):
    r = client.get("/api/users", params={"role": "student"}, headers=auth_headers(teacher))
    assert r.status_code == 200
    assert {u["id"] for u in r.json()["users"]} == {str(student.id), str(other_student.id)}


def test_student_cannot_list_users(client, student):
    r = client.get("/api/users", headers=auth_headers(student))
    assert r.status_code == 403
    assert r.json()["success"] is False


def test_unknown_role_filter_is_400(client, admin):
    assert client.get("/api/users", params={"role": "enseignant"}, headers=auth_headers(admin)).status_code == 400


def test_admin_creates_teacher(client, admin):
    r = client.post(
        "/api/users",
        json={"email": "Prof@Tests.Example.com", "password": "longenough", "name": "Prof", "role": "teacher"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 201, r.text
    user = r.json()["user"]
    assert user["role"] == "teacher"
    assert user["email"] == "prof@tests.example.com"
    login = client.post("/api/auth/login", json={"email": "prof@tests.example.com", "password": "longenough"})
    assert login.status_code == 200


def test_legacy_role_name_is_rejected(client, admin):
    r = client.post(
        "/api/users",
        json={"email": "old@tests.example.com", "password": "longenough", "name": "Old", "role": "enseignant"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 400


@pytest.mark.parametrize("role_fixture", ["teacher", "student"])
def test_only_admin_creates_users(request, client, role_fixture):
    actor = request.getfixturevalue(role_fixture)
    r = client.post(
        "/api/users",
        json={"email": "x@tests.example.com", "password": "longenough", "name": "X", "role": "admin"},
        headers=auth_headers(actor),
    )
    assert r.status_code == 403


def test_duplicate_email_is_400(client, admin, student):
    r = client.post(
        "/api/users",
        json={"email": student.email, "password": "longenough", "name": "Dup"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 400


def test_admin_updates_role_and_password(client, admin, student):
    r = client.put(
        f"/api/users/{student.id}",
        json={"role": "teacher", "password": "brand-new-pass"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200, r.text
    assert r.json()["user"]["role"] == "teacher"
    assert client.post("/api/auth/login", json={"email": student.email, "password": "brand-new-pass"}).status_code == 200
    assert client.post("/api/auth/login", json={"email": student.email, "password": PASSWORD}).status_code == 401


def test_role_change_refused_for_students_referenced_by_tasks(client, admin, teacher, student, other_student):
    r = client.post(
        "/api/tasks",
        json={"title": "Essay", "description": "500 words", "dueDate": "2024-06-01", "studentId": str(student.id)},
        headers=auth_headers(teacher),
    )
    task_id = r.json()["task"]["id"]
    client.post(f"/api/tasks/{task_id}/share", json={"studentIds": [str(other_student.id)]}, headers=auth_headers(teacher))

    r = client.put(f"/api/users/{student.id}", json={"role": "teacher"}, headers=auth_headers(admin))
    assert r.status_code == 400
    r = client.put(f"/api/users/{other_student.id}", json={"role": "admin"}, headers=auth_headers(admin))
    assert r.status_code == 400
    roles = {u["id"]: u["role"] for u in client.get("/api/users", headers=auth_headers(admin)).json()["users"]}
    assert roles[str(student.id)] == roles[str(other_student.id)] == "student"
    # Other fields stay editable
    r = client.put(f"/api/users/{student.id}", json={"name": "Renamed", "role": "student"}, headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Renamed"


def test_role_change_refused_for_class_members(client, admin, teacher, student):
    client.post("/api/classes", json={"name": "Physics", "studentIds": [str(student.id)]}, headers=auth_headers(teacher))
    r = client.put(f"/api/users/{student.id}", json={"role": "teacher"}, headers=auth_headers(admin))
    assert r.status_code == 400


def test_teacher_cannot_update_users(client, teacher, student):
    r = client.put(f"/api/users/{student.id}", json={"name": "Renamed"}, headers=auth_headers(teacher))
    assert r.status_code == 403


def test_update_unknown_user_is_404(client, admin):
    r = client.put(f"/api/users/{uuid.uuid4()}", json={"name": "Nobody"}, headers=auth_headers(admin))
    assert r.status_code == 404
