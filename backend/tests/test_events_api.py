"""
API tests for /api/events: forced visibility, visibility-filtered listing, date-range queries,
creator/admin mutation.
"""
import uuid

import pytest

from conftest import auth_headers


def _create(client, actor, **fields):
    body = {"title": "Exam", "startDate": "2024-05-01", "endDate": "2024-05-03", **fields}
    r = client.post("/api/events", json=body, headers=auth_headers(actor))
    assert r.status_code == 201, r.text
    return r.json()["event"]


def _ids(client, actor, **params):
    r = client.get("/api/events", params=params, headers=auth_headers(actor))
    assert r.status_code == 200, r.text
    return [e["id"] for e in r.json()["events"]]


@pytest.mark.parametrize("role_fixture", ["student", "teacher"])
def test_non_admin_events_are_forced_private(request, client, role_fixture):
    actor = request.getfixturevalue(role_fixture)
    event = _create(client, actor, visibility="public")
    assert event["visibility"] == "private"
    assert event["createdBy"] == str(actor.id)
    assert event["createdByName"] == actor.name


def test_admin_visibility_is_preserved(client, admin):
    assert _create(client, admin, visibility="private")["visibility"] == "private"
    assert _create(client, admin, visibility="public")["visibility"] == "public"
    assert _create(client, admin)["visibility"] == "public"


def test_defaults(client, student):
    event = _create(client, student, startTime="09:00", endTime="10:30")
    assert event["color"] == "#3b82f6"
    assert event["description"] == ""
    assert event["startTime"] == "09:00:00"
    assert event["endTime"] == "10:30:00"


def test_end_before_start_is_400(client, student):
    r = client.post(
        "/api/events",
        json={"title": "Backwards", "startDate": "2024-05-03", "endDate": "2024-05-01"},
        headers=auth_headers(student),
    )
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_missing_dates_is_400(client, student):
    r = client.post("/api/events", json={"title": "Undated"}, headers=auth_headers(student))
    assert r.status_code == 400
    assert "startDate" in r.json()["message"]


def test_listing_by_visibility(client, admin, student, other_student):
    public = _create(client, admin, visibility="public")["id"]
    admin_private = _create(client, admin, visibility="private")["id"]
    mine = _create(client, student)["id"]
    theirs = _create(client, other_student)["id"]
    assert set(_ids(client, admin)) == {public, admin_private, mine, theirs}
    assert set(_ids(client, student)) == {public, mine}
    assert set(_ids(client, other_student)) == {public, theirs}


def test_listing_is_soonest_first(client, admin):
    late = _create(client, admin, startDate="2024-06-10", endDate="2024-06-10")["id"]
    early = _create(client, admin, startDate="2024-06-01", endDate="2024-06-02")["id"]
    assert _ids(client, admin) == [early, late]


def test_range_overlap_is_inclusive(client, admin):
    event = _create(client, admin, startDate="2024-05-01", endDate="2024-05-03")["id"]
    assert _ids(client, admin, start="2024-05-03", end="2024-05-10") == [event]
    assert _ids(client, admin, start="2024-04-20", end="2024-05-01") == [event]
    assert _ids(client, admin, start="2024-05-04", end="2024-05-10") == []


def test_range_respects_visibility(client, admin, student):
    _create(client, admin, visibility="private")
    mine = _create(client, student)["id"]
    assert _ids(client, student, start="2024-05-01", end="2024-05-31") == [mine]


def test_range_needs_both_bounds(client, student):
    r = client.get("/api/events", params={"start": "2024-05-01"}, headers=auth_headers(student))
    assert r.status_code == 400
    r = client.get("/api/events", params={"end": "2024-05-01"}, headers=auth_headers(student))
    assert r.status_code == 400


def test_range_rejects_bad_dates(client, student):
    r = client.get("/api/events", params={"start": "May 1", "end": "2024-05-02"}, headers=auth_headers(student))
    assert r.status_code == 400
    r = client.get("/api/events", params={"start": "2024-05-10", "end": "2024-05-01"}, headers=auth_headers(student))
    assert r.status_code == 400


def test_creator_updates_and_cannot_go_public(client, student):
    event = _create(client, student)
    r = client.put(
        f"/api/events/{event['id']}",
        json={"title": "Study group", "visibility": "public"},
        headers=auth_headers(student),
    )
    assert r.status_code == 200, r.text
    updated = r.json()["event"]
    assert updated["title"] == "Study group"
    assert updated["visibility"] == "private"


def test_update_clears_times_with_explicit_null(client, student):
    event = _create(client, student, startTime="09:00")
    r = client.put(f"/api/events/{event['id']}", json={"startTime": None}, headers=auth_headers(student))
    assert r.status_code == 200
    assert r.json()["event"]["startTime"] is None


def test_update_rejects_end_before_existing_start(client, student):
    event = _create(client, student, startDate="2024-05-05", endDate="2024-05-06")
    r = client.put(f"/api/events/{event['id']}", json={"endDate": "2024-05-01"}, headers=auth_headers(student))
    assert r.status_code == 400


def test_admin_can_make_event_public(client, admin, student):
    event = _create(client, student)
    r = client.put(f"/api/events/{event['id']}", json={"visibility": "public"}, headers=auth_headers(admin))
    assert r.json()["event"]["visibility"] == "public"


def test_non_creator_cannot_update_or_delete(client, admin, teacher, student):
    public = _create(client, admin, visibility="public")
    private = _create(client, student)
    assert client.put(f"/api/events/{public['id']}", json={"title": "x"}, headers=auth_headers(teacher)).status_code == 403
    assert client.delete(f"/api/events/{public['id']}", headers=auth_headers(student)).status_code == 403
    assert client.delete(f"/api/events/{private['id']}", headers=auth_headers(teacher)).status_code == 403


def test_private_event_hidden_from_others(client, student, other_student):
    event = _create(client, student)
    assert client.get(f"/api/events/{event['id']}", headers=auth_headers(student)).status_code == 200
    assert client.get(f"/api/events/{event['id']}", headers=auth_headers(other_student)).status_code == 403


def test_delete(client, admin, student):
    own = _create(client, student)
    assert client.delete(f"/api/events/{own['id']}", headers=auth_headers(student)).json() == {
        "success": True,
        "message": "Event deleted",
    }
    other = _create(client, student)
    assert client.delete(f"/api/events/{other['id']}", headers=auth_headers(admin)).status_code == 200
    assert _ids(client, admin) == []


def test_unknown_event_is_404(client, admin):
    missing = uuid.uuid4()
    assert client.put(f"/api/events/{missing}", json={"title": "x"}, headers=auth_headers(admin)).status_code == 404
    r = client.delete(f"/api/events/{missing}", headers=auth_headers(admin))
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Event not found"}
