def test_health_endpoint_returns_ok_and_request_id(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers.get("X-Request-ID")


def test_request_id_is_echoed_in_error_body(client):
    response = client.get("/histories/1", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 404
    assert response.headers["X-Request-ID"] == "req-123"
    body = response.json()
    assert body["request_id"] == "req-123"
    assert "code" in body["error"]
    assert "message" in body["error"]


def test_metrics_endpoint_exposes_queue_counters(client, specialization_id):
    client.post(
        "/reservations",
        json={
            "specialization_id": specialization_id,
            "patient_name": "Metric Patient",
            "appointment_date": "2025-06-01",
            "appointment_time": "10:00",
        },
    )

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers.get("content-type", "")
    body = response.text
    assert "http_requests_total" in body
    assert "reservations_created_total" in body
    assert "queue_conflicts_total" in body
