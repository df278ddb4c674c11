from __future__ import annotations

import pytest

pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from participium.database import get_db
from participium.main import app
from participium.models.report import ReportCategory, ReportStatus
from participium.utils.security import create_access_token

from helpers import (
    CITIZEN,
    EXTERNAL,
    MILAN,
    PIAZZA_CASTELLO,
    PNG_DATA_URI,
    PRO,
    ROAD_TECH,
    make_report,
    make_user,
    map_category,
)


@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _auth(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


def _payload(location=PIAZZA_CASTELLO, photos=None):
    return {
        "title": "Overflowing bin",
        "description": "Not emptied for a week",
        "category": "Waste",
        "location": {"latitude": location[0], "longitude": location[1]},
        "photos": photos if photos is not None else [PNG_DATA_URI],
        "isAnonymous": False,
    }


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_me_and_missing_token(client, db_session):
    pro = make_user(db_session, "pro", PRO)

    response = client.get("/auth/me", headers=_auth(pro))
    assert response.status_code == 200
    assert response.json()["roles"] == [PRO]
    assert response.json()["firstName"] == "Pro"

    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["name"] == "UnauthorizedError"


def test_login_with_unknown_user(client):
    response = client.post("/auth/login", json={"username": "nobody", "password": "secret"})
    assert response.status_code == 401
    assert response.json() == {
        "code": 401,
        "name": "UnauthorizedError",
        "message": "Invalid username or password",
    }


def test_categories_are_public(client):
    response = client.get("/api/reports/categories")
    assert response.status_code == 200
    assert "Public Lighting" in response.json()


def test_citizen_submits_report(client, db_session):
    citizen = make_user(db_session, "alice", CITIZEN)

    response = client.post("/api/reports/", json=_payload(), headers=_auth(citizen))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "Pending Approval"
    assert body["reporterId"] == citizen.id
    assert body["location"] == {"latitude": PIAZZA_CASTELLO[0], "longitude": PIAZZA_CASTELLO[1]}
    assert len(body["photos"]) == 1
    assert body["photos"][0]["storageUrl"].startswith("/uploads/reports/")


def test_submission_errors_use_error_body(client, db_session):
    citizen = make_user(db_session, "alice", CITIZEN)
    pro = make_user(db_session, "pro", PRO)

    outside = client.post("/api/reports/", json=_payload(location=MILAN), headers=_auth(citizen))
    assert outside.status_code == 400
    assert outside.json()["message"] == "Location is outside Turin city boundaries"

    missing_title = _payload()
    del missing_title["title"]
    invalid = client.post("/api/reports/", json=missing_title, headers=_auth(citizen))
    assert invalid.status_code == 400
    assert invalid.json()["name"] == "BadRequestError"

    forbidden = client.post("/api/reports/", json=_payload(), headers=_auth(pro))
    assert forbidden.status_code == 403


def test_approval_flow_over_http(client, db_session):
    map_category(db_session, ReportCategory.ROADS, ROAD_TECH)
    staff = make_user(db_session, "bob", ROAD_TECH)
    pro = make_user(db_session, "pro", PRO)
    report = make_report(db_session)

    response = client.put(
        f"/api/reports/{report.id}/status",
        json={"newStatus": "Assigned"},
        headers=_auth(pro),
    )
    assert response.status_code == 200
    assert response.json()["assigneeId"] == staff.id

    again = client.put(
        f"/api/reports/{report.id}/status",
        json={"newStatus": "Rejected", "reason": "Duplicate"},
        headers=_auth(pro),
    )
    assert again.status_code == 400
    assert again.json()["message"].startswith("Cannot reject report with status Assigned.")

    mine = client.get("/api/reports/assigned/me", headers=_auth(staff))
    assert [r["id"] for r in mine.json()] == [report.id]


def test_pending_listing_requires_pro(client, db_session):
    citizen = make_user(db_session, "alice", CITIZEN)
    make_report(db_session)

    response = client.get("/api/reports/", params={"status": "Pending Approval"}, headers=_auth(citizen))
    assert response.status_code == 403
    assert response.json()["message"] == "Only Municipal Public Relations Officers can view pending reports"


def test_unknown_report_and_bad_id(client, db_session):
    citizen = make_user(db_session, "alice", CITIZEN)
    assert client.get("/api/reports/12345", headers=_auth(citizen)).status_code == 404
    assert client.get("/api/reports/abc", headers=_auth(citizen)).status_code == 400


def test_map_endpoint(client, db_session):
    viewer = make_user(db_session, "alice", CITIZEN)
    make_report(db_session, status=ReportStatus.ASSIGNED, is_anonymous=True)
    make_report(db_session, status=ReportStatus.PENDING_APPROVAL)
    headers = _auth(viewer)

    assert client.get("/api/reports/map").status_code == 401

    individual = client.get("/api/reports/map", headers=headers)
    assert individual.status_code == 200
    assert [r["reporterName"] for r in individual.json()] == ["Anonymous"]

    clustered = client.get(
        "/api/reports/map",
        params={"zoom": 10, "minLat": 45.0, "maxLat": 45.2, "minLng": 7.5, "maxLng": 7.8},
        headers=headers,
    )
    assert clustered.status_code == 200
    assert clustered.json()[0]["reportCount"] == 1
    assert clustered.json()[0]["clusterId"].startswith("cluster_")

    bad = client.get("/api/reports/map", params={"minLat": 45.0}, headers=headers)
    assert bad.status_code == 400
    assert client.get("/api/reports/map", params={"zoom": 25}, headers=headers).status_code == 400


def test_internal_comments_hidden_from_citizens(client, db_session):
    citizen = make_user(db_session, "alice", CITIZEN)
    staff = make_user(db_session, "bob", ROAD_TECH)
    report = make_report(db_session, reporter=citizen, status=ReportStatus.ASSIGNED, assignee=staff)

    created = client.post(
        f"/api/reports/{report.id}/internal-comments",
        json={"content": "Check the drain too"},
        headers=_auth(staff),
    )
    assert created.status_code == 201

    assert client.get(f"/api/reports/{report.id}/internal-comments", headers=_auth(citizen)).status_code == 403

    comment_id = created.json()["id"]
    deleted = client.delete(
        f"/api/reports/{report.id}/internal-comments/{comment_id}",
        headers=_auth(staff),
    )
    assert deleted.status_code == 204


def test_external_listing_is_staff_only(client, db_session):
    citizen = make_user(db_session, "alice", CITIZEN)
    staff = make_user(db_session, "bob", ROAD_TECH)
    pro = make_user(db_session, "paula", PRO)
    maintainer = make_user(db_session, "max", EXTERNAL)

    url = f"/api/reports/assigned/external/{maintainer.id}"
    assert client.get(url, headers=_auth(citizen)).status_code == 403
    assert client.get(url, headers=_auth(maintainer)).status_code == 403
    assert client.get(url, headers=_auth(staff)).json() == []
    assert client.get(url, headers=_auth(pro)).json() == []


def test_messages_and_notifications(client, db_session):
    citizen = make_user(db_session, "alice", CITIZEN)
    staff = make_user(db_session, "bob", ROAD_TECH)
    report = make_report(db_session, reporter=citizen, status=ReportStatus.ASSIGNED, assignee=staff)

    sent = client.post(
        f"/api/reports/{report.id}/messages",
        json={"content": "We will fix it tomorrow"},
        headers=_auth(staff),
    )
    assert sent.status_code == 201
    assert sent.json()["author"]["username"] == "bob"

    count = client.get("/api/notifications/unread-count", headers=_auth(citizen))
    assert count.json() == {"unreadCount": 1}

    notifications = client.get("/api/notifications/", headers=_auth(citizen)).json()
    assert notifications[0]["reportId"] == report.id

    read = client.patch(f"/api/notifications/{notifications[0]['id']}/read", headers=_auth(citizen))
    assert read.json()["isRead"] is True
    assert client.patch("/api/notifications/999/read", headers=_auth(citizen)).status_code == 404
