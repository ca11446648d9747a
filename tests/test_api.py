"""
Tests for the HTTP endpoints over the event and booking layer
"""

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.db import get_db
from app.services.repositories import BookingRepo, EventRepo
from app.utils import security
from main import app

ADMIN_HEADERS = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    security.rate_limiter.clear()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def broken_client(broken_session):
    def override_get_db():
        yield broken_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_event_requires_admin_token(client, event_payload):
    response = client.post("/admin/events", json=event_payload(),
                           headers={"Authorization": "Bearer wrong"})

    assert response.status_code == 401


def test_create_and_fetch_event(client, event_payload):
    response = client.post("/admin/events", json=event_payload(tags="react, webdev"),
                           headers=ADMIN_HEADERS)

    assert response.status_code == 201
    created = response.json()["data"]
    assert created["slug"] == "devfest-2024"
    assert created["tags"] == ["react", "webdev"]
    assert created["mode"] == "hybrid"

    detail = client.get("/api/events/devfest-2024")
    assert detail.status_code == 200
    assert detail.json()["data"]["id"] == created["id"]


def test_create_event_slug_conflict(client, event_payload):
    client.post("/admin/events", json=event_payload(slug="react-meetup"), headers=ADMIN_HEADERS)

    response = client.post("/admin/events", json=event_payload(slug="react-meetup"),
                           headers=ADMIN_HEADERS)

    assert response.status_code == 409
    assert response.json()["error_code"] == "SLUG_CONFLICT"


def test_create_event_invalid_payload(client, event_payload):
    response = client.post("/admin/events", json=event_payload(mode="in-person"),
                           headers=ADMIN_HEADERS)

    assert response.status_code == 422


def test_list_and_similar(client, db_session, event_payload):
    EventRepo.create(db_session, event_payload(slug="devfest-2024", tags=["react", "webdev"]))
    EventRepo.create(db_session, event_payload(title="React Meetup", slug="react-meetup", tags=["react"]))

    listing = client.get("/api/events")
    similar = client.get("/api/events/devfest-2024/similar")

    assert listing.status_code == 200
    assert "X-Data-Degraded" not in listing.headers
    assert len(listing.json()["data"]) == 2
    assert [e["slug"] for e in similar.json()["data"]] == ["react-meetup"]
    assert set(similar.json()["data"][0]) == {"id", "title", "slug", "image", "location", "date", "time"}


def test_event_not_found(client):
    response = client.get("/api/events/missing")

    assert response.status_code == 404


def test_book_event(client, db_session, event_payload):
    event = EventRepo.create(db_session, event_payload())

    response = client.post("/api/bookings", json={"event_id": event.id, "email": " User@Example.COM "})

    assert response.status_code == 201
    assert response.json()["data"]["email"] == "user@example.com"

    count = client.get("/api/events/devfest-2024/bookings/count")
    assert count.json()["data"] == {"count": 1}


def test_book_missing_event(client, db_session):
    response = client.post("/api/bookings", json={"event_id": "nonexistent-id", "email": "a@b.com"})

    body = response.json()
    assert response.status_code == 404
    assert body["success"] is False
    assert body["error_code"] == "EVENT_NOT_FOUND"
    assert body["message"] == "Event not found"
    assert BookingRepo.count(db_session) == 0


def test_book_with_bad_email(client, db_session, event_payload):
    event = EventRepo.create(db_session, event_payload())

    response = client.post("/api/bookings", json={"event_id": event.id, "email": "nope"})

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_booking_rate_limit(client, db_session, event_payload, monkeypatch):
    event = EventRepo.create(db_session, event_payload())
    monkeypatch.setattr(settings, "RATE_LIMIT_PER_MINUTE", 2)

    statuses = [
        client.post("/api/bookings", json={"event_id": event.id, "email": f"u{i}@b.com"}).status_code
        for i in range(3)
    ]

    assert statuses == [201, 201, 429]


def test_update_booking_event(client, db_session, event_payload):
    first = EventRepo.create(db_session, event_payload())
    second = EventRepo.create(db_session, event_payload(title="Other Conf"))
    booking = BookingRepo.create(db_session, first.id, "a@b.com")

    moved = client.patch(f"/api/bookings/{booking.id}", json={"event_id": second.id})
    missing = client.patch(f"/api/bookings/{booking.id}", json={"event_id": "nonexistent-id"})

    assert moved.status_code == 200
    assert moved.json()["data"]["event_id"] == second.id
    assert missing.status_code == 404


def test_admin_lists_bookings(client, db_session, event_payload):
    event = EventRepo.create(db_session, event_payload())
    BookingRepo.create(db_session, event.id, "a@b.com")

    response = client.get("/admin/events/devfest-2024/bookings", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert response.json()["data"]["total_bookings"] == 1


def test_unreachable_storage_degrades_reads(broken_client):
    """Listing with storage down is an empty, flagged result instead of an error"""
    listing = broken_client.get("/api/events")
    similar = broken_client.get("/api/events/devfest-2024/similar")
    detail = broken_client.get("/api/events/devfest-2024")

    assert listing.status_code == 200
    assert listing.json()["data"] == []
    assert listing.headers["X-Data-Degraded"] == "true"
    assert similar.json()["data"] == []
    assert similar.headers["X-Data-Degraded"] == "true"
    assert detail.status_code == 200
    assert detail.json()["data"] is None
    assert detail.headers["X-Data-Degraded"] == "true"


def test_unreachable_storage_booking_asks_to_retry(broken_client):
    response = broken_client.post("/api/bookings", json={"event_id": "some-event", "email": "a@b.com"})

    assert response.status_code == 503
    assert response.json()["error_code"] == "EVENT_VERIFICATION_FAILED"


def test_unreachable_storage_admin_bookings_is_unavailable(broken_client):
    """The admin view reports an outage instead of a missing event"""
    response = broken_client.get("/admin/events/devfest-2024/bookings", headers=ADMIN_HEADERS)

    assert response.status_code == 503
    assert response.json()["error_code"] == "STORAGE_UNAVAILABLE"


def test_admin_bookings_unknown_event(client):
    response = client.get("/admin/events/missing/bookings", headers=ADMIN_HEADERS)

    assert response.status_code == 404
