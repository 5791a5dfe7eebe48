import json

import pytest

from conftest import IMAGE_URL, event_fields
from eventhub.config import settings
from eventhub.routers import events as events_router

IMAGE = {"image": ("banner.png", b"\x89PNG fake image bytes", "image/png")}


def form_data(**overrides):
    fields = event_fields(**overrides)
    fields.pop("image")
    fields["agenda"] = json.dumps(fields["agenda"])
    fields["tags"] = json.dumps(fields["tags"])
    return fields


def create(client, **overrides):
    return client.post("/api/events", data=form_data(**overrides), files=IMAGE)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_event(client, uploader):
    resp = create(client, time="2:30 PM")

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Event created successfully"
    event = body["event"]
    assert event["slug"] == "pycon-lithuania-2026"
    assert event["time"] == "14:30"
    assert event["image"] == IMAGE_URL
    assert event["agenda"] == ["Registration", "Keynote", "Talks"]
    assert uploader.calls == [("banner.png", b"\x89PNG fake image bytes")]


def test_create_event_reports_all_missing_fields(client, uploader):
    data = form_data(title="", venue="   ")
    del data["organizer"]

    resp = client.post("/api/events", data=data, files=IMAGE)

    assert resp.status_code == 400
    body = resp.json()
    assert body["missingFields"] == ["title", "venue", "organizer"]
    assert body["message"] == "Missing required fields: title, venue, organizer"
    assert uploader.calls == []


def test_create_event_requires_image(client):
    resp = client.post("/api/events", data=form_data())

    assert resp.status_code == 400
    assert resp.json() == {"message": "Image is required"}


def test_create_event_rejects_non_json_tags(client):
    data = form_data()
    data["tags"] = "python, web"

    resp = client.post("/api/events", data=data, files=IMAGE)

    assert resp.status_code == 400
    assert "tags" in resp.json()["message"]


def test_create_event_invalid_time(client):
    resp = create(client, time="13:00 PM")

    assert resp.status_code == 400
    assert "Invalid time format" in resp.json()["message"]


def test_create_event_duplicate_slug(client):
    assert create(client, title="Dev Days").status_code == 201

    resp = create(client, title="dev days!")

    assert resp.status_code == 409
    assert client.get("/api/events/dev-days").status_code == 200


def test_create_event_upload_failure(client, uploader, monkeypatch):
    from eventhub.errors import UpstreamServiceError

    def boom(content, filename="image"):
        raise UpstreamServiceError("Upload failed: 401 Unauthorized")

    monkeypatch.setattr(uploader, "upload", boom)

    resp = create(client)

    assert resp.status_code == 500
    assert resp.json()["message"] == "Failed to create event"
    assert client.get("/api/events").json()["events"] == []


def test_list_events_newest_first(client):
    for title in ("Older", "Newer"):
        assert create(client, title=title).status_code == 201

    resp = client.get("/api/events")

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Events fetched successfully"
    assert [e["title"] for e in body["events"]] == ["Newer", "Older"]


def test_get_event_by_slug(client):
    create(client)

    resp = client.get("/api/events/pycon-lithuania-2026")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["event"]["title"] == "PyCon Lithuania 2026"


def test_get_event_not_found(client):
    resp = client.get("/api/events/missing-event")

    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_get_event_rejects_bad_slug_before_db_access(client, monkeypatch):
    calls = []

    async def tracking_connection():
        calls.append(1)
        raise AssertionError("database must not be touched")

    monkeypatch.setattr(events_router, "get_connection", tracking_connection)

    resp = client.get("/api/events/Has Upper")

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert calls == []


def test_get_event_without_database_config(client, monkeypatch):
    monkeypatch.setattr(settings, "database_url", None)

    resp = client.get("/api/events/some-event")

    assert resp.status_code == 503
    body = resp.json()
    assert body["message"] == "Database connection error"
    assert "DATABASE_URL" in body["error"]


def test_error_detail_hidden_outside_development(client, monkeypatch):
    monkeypatch.setattr(settings, "database_url", None)
    monkeypatch.setattr(settings, "app_env", "production")

    resp = client.get("/api/events/some-event")

    assert resp.status_code == 503
    assert "error" not in resp.json()

    resp = client.get("/api/events")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to fetch events"}


def test_update_event(client):
    create(client)

    resp = client.patch(
        "/api/events/pycon-lithuania-2026",
        json={"title": "PyCon LT Sprint Day", "date": "May 2, 2026"},
    )

    assert resp.status_code == 200
    event = resp.json()["event"]
    assert event["slug"] == "pycon-lt-sprint-day"
    assert event["date"] == "2026-05-02"
    assert client.get("/api/events/pycon-lithuania-2026").status_code == 404


@pytest.mark.parametrize(
    "payload, status",
    [
        ({"mode": "teleport"}, 400),
        ({"tags": []}, 400),
        ({"title": "Other Event"}, 409),
    ],
)
def test_update_event_errors(client, payload, status):
    create(client)
    create(client, title="Other Event")

    resp = client.patch("/api/events/pycon-lithuania-2026", json=payload)

    assert resp.status_code == status


def test_update_unknown_event(client):
    resp = client.patch("/api/events/nope", json={"venue": "Hall C"})
    assert resp.status_code == 404


def test_similar_events(client):
    create(client, title="Base", tags=["python", "web"])
    create(client, title="Web Summit", tags=["web"])
    create(client, title="Go Day", tags=["golang"])

    resp = client.get("/api/events/base/similar")

    assert resp.status_code == 200
    assert [e["slug"] for e in resp.json()["events"]] == ["web-summit"]
    assert client.get("/api/events/unknown/similar").json()["events"] == []
