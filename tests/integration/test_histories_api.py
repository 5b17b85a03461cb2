def _book(client, specialization_id: int, appointment_date: str = "2025-06-01") -> dict:
    response = client.post(
        "/reservations",
        json={
            "specialization_id": specialization_id,
            "patient_name": "Pasien A",
            "appointment_date": appointment_date,
            "appointment_time": "08:30",
        },
    )
    assert response.status_code == 201
    return response.json()["history"]


def test_queue_list_for_today_includes_canceled_entries(client, specialization_id):
    entries = [_book(client, specialization_id) for _ in range(3)]
    cancel = client.patch(f"/histories/{entries[2]['id']}/cancel")

    response = client.get(f"/histories/queue/{specialization_id}")

    assert cancel.status_code == 200
    assert response.status_code == 200
    data = response.json()
    assert data["service_date"] == "2025-06-01"
    assert [entry["queue_number"] for entry in data["entries"]] == [1, 2, 3]
    assert [entry["status"] for entry in data["entries"]] == ["pending", "pending", "canceled"]


def test_queue_list_accepts_explicit_date(client, specialization_id):
    _book(client, specialization_id, appointment_date="2025-06-03")

    today = client.get(f"/histories/queue/{specialization_id}")
    other_day = client.get(f"/histories/queue/{specialization_id}?date=2025-06-03")

    assert today.status_code == 404
    assert today.json()["error"]["message"] == "Data not found"
    assert other_day.status_code == 200
    assert len(other_day.json()["entries"]) == 1


def test_cancel_keeps_queue_number_and_is_idempotent(client, specialization_id):
    _book(client, specialization_id)
    entry = _book(client, specialization_id)

    first = client.patch(f"/histories/{entry['id']}/cancel")
    second = client.patch(f"/histories/{entry['id']}/cancel")

    assert first.status_code == 200
    assert first.json()["status"] == "canceled"
    assert first.json()["queue_number"] == 2
    assert second.status_code == 200
    assert second.json()["status"] == "canceled"


def test_cancel_missing_entry_returns_404(client):
    response = client.patch("/histories/99/cancel")

    assert response.status_code == 404
    body = response.json()
    assert body["detail"]["entity"] == "history_entry"
    assert body["error"]["message"] == "History entry not found"


def test_cancel_completed_entry_returns_conflict(client, specialization_id):
    entry = _book(client, specialization_id)

    completed = client.patch(f"/histories/{entry['id']}/complete")
    cancel = client.patch(f"/histories/{entry['id']}/cancel")

    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert cancel.status_code == 409
    assert cancel.json()["detail"]["current_status"] == "completed"


def test_delete_history_entry_keeps_reservation(client, specialization_id):
    entry = _book(client, specialization_id)

    deleted = client.delete(f"/histories/{entry['id']}")
    reservation = client.get(f"/reservations/{entry['reservation_id']}")
    again = client.delete(f"/histories/{entry['id']}")

    assert deleted.status_code == 200
    assert reservation.status_code == 200
    assert again.status_code == 404


def test_list_histories_filters_by_status(client, specialization_id):
    entries = [_book(client, specialization_id) for _ in range(2)]
    client.patch(f"/histories/{entries[0]['id']}/cancel")

    canceled = client.get("/histories?status=canceled")
    invalid = client.get("/histories?status=proses")

    assert [entry["id"] for entry in canceled.json()] == [entries[0]["id"]]
    assert invalid.status_code == 422
