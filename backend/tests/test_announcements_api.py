"""API tests for /api/announcements: admin-only writes, newest-first reads."""
import uuid

from conftest import auth_headers

ANNOUNCEMENT = {"title": "Campus closed", "content": "Closed on Friday for maintenance."}


def _create(client, actor, **fields):
    return client.post("/api/announcements", json={**ANNOUNCEMENT, **fields}, headers=auth_headers(actor))


def test_admin_creates_announcement(client, admin):
    r = _create(client, admin)
    assert r.status_code == 201, r.text
    a = r.json()["announcement"]
    assert a["authorId"] == str(admin.id)
    assert a["authorName"] == "Admin"
    assert a["priority"] == "medium"


def test_non_admins_cannot_write(client, admin, teacher, student):
    created = _create(client, admin).json()["announcement"]
    for actor in (teacher, student):
        r = _create(client, actor)
        assert r.status_code == 403
        assert r.json() == {"success": False, "message": "Access denied - admin only"}
        url = f"/api/announcements/{created['id']}"
        assert client.put(url, json={"title": "x"}, headers=auth_headers(actor)).status_code == 403
        assert client.delete(url, headers=auth_headers(actor)).status_code == 403


def test_everyone_reads_newest_first(client, admin, student):
    first = _create(client, admin, title="First").json()["announcement"]["id"]
    second = _create(client, admin, title="Second").json()["announcement"]["id"]
    r = client.get("/api/announcements", headers=auth_headers(student))
    assert r.status_code == 200
    assert [a["id"] for a in r.json()["announcements"]] == [second, first]


def test_any_admin_edits_and_deletes(client, admin, make_user):
    created = _create(client, admin).json()["announcement"]
    another_admin = make_user("admin")
    url = f"/api/announcements/{created['id']}"
    r = client.put(url, json={"priority": "high"}, headers=auth_headers(another_admin))
    assert r.status_code == 200
    assert r.json()["announcement"]["priority"] == "high"
    assert r.json()["announcement"]["title"] == ANNOUNCEMENT["title"]
    assert client.delete(url, headers=auth_headers(another_admin)).status_code == 200
    assert client.get("/api/announcements", headers=auth_headers(admin)).json()["announcements"] == []


def test_missing_content_is_400(client, admin):
    r = client.post("/api/announcements", json={"title": "No body"}, headers=auth_headers(admin))
    assert r.status_code == 400


def test_unknown_announcement_is_404(client, admin):
    url = f"/api/announcements/{uuid.uuid4()}"
    assert client.put(url, json={"title": "x"}, headers=auth_headers(admin)).status_code == 404
    r = client.delete(url, headers=auth_headers(admin))
    assert r.status_code == 404
    assert r.json()["message"] == "Announcement not found"
