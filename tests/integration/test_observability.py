from datetime import UTC, datetime, timedelta


def test_request_id_header_is_present(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers.get("X-Request-ID")


def test_incoming_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers.get("X-Request-ID") == "req-123"


def test_metrics_endpoint_returns_prometheus_text(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers.get("content-type", "")
    body = response.text
    assert "http_requests_total" in body
    assert "http_request_duration_seconds" in body


def test_booking_counters_are_exported(client):
    owner_id = client.post("/users", json={"name": "Owner", "email": "owner@example.com"}).json()["id"]
    booker_id = client.post("/users", json={"name": "Booker", "email": "booker@example.com"}).json()["id"]
    item_id = client.post(
        "/items",
        headers={"X-Sharer-User-Id": str(owner_id)},
        json={"name": "Drill", "description": "Cordless", "available": True},
    ).json()["id"]
    start = datetime.now(UTC) + timedelta(days=1)
    booking_id = client.post(
        "/bookings",
        headers={"X-Sharer-User-Id": str(booker_id)},
        json={"itemId": item_id, "start": start.isoformat(), "end": (start + timedelta(days=1)).isoformat()},
    ).json()["id"]
    client.patch(f"/bookings/{booking_id}?approved=true", headers={"X-Sharer-User-Id": str(owner_id)})

    body = client.get("/metrics").text

    assert "shareit_bookings_created_total" in body
    assert 'shareit_booking_decisions_total{status="APPROVED"}' in body
