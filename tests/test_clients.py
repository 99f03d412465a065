"""
Tests for client registration and booking history.
"""


def test_create_client_normalizes_input(client):
    response = client.post(
        "/clients",
        json={
            "firstName": "  Léa ",
            "lastName": "Moreau",
            "email": "Lea.Moreau@Example.com",
            "phone": "+33 6 12 34 56 78",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["firstName"] == "Léa"
    assert body["email"] == "lea.moreau@example.com"
    assert body["phone"] == "+33612345678"


def test_duplicate_email_is_a_conflict(client, seeded):
    response = client.post(
        "/clients",
        json={"firstName": "Chloé", "lastName": "Durand", "email": "CHLOE@example.com"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "ConfigurationConflict"


def test_invalid_client_payloads(client):
    assert client.post(
        "/clients", json={"firstName": "A", "lastName": "B", "email": "not-an-email"}
    ).status_code == 422
    assert client.post(
        "/clients", json={"firstName": "A", "lastName": "B", "email": "a@b.fr", "phone": "12"}
    ).status_code == 422
    assert client.post(
        "/clients", json={"firstName": " ", "lastName": "B", "email": "a@b.fr"}
    ).status_code == 422


def test_get_client(client, seeded):
    response = client.get(f"/clients/{seeded.client_id}")
    assert response.status_code == 200
    assert response.json()["email"] == "chloe@example.com"
    assert client.get("/clients/999").status_code == 404


def test_booking_history_most_recent_first(client, seeded):
    for start in ("2030-06-03T09:00:00", "2030-06-04T09:00:00"):
        created = client.post(
            "/bookings",
            json={
                "salonId": seeded.salon_id,
                "clientId": seeded.client_id,
                "startTime": start,
                "services": [{"serviceId": seeded.haircut_id, "staffId": seeded.staff_id}],
            },
        )
        assert created.status_code == 201

    history = client.get(f"/clients/{seeded.client_id}/bookings").json()
    assert [b["startTime"] for b in history] == ["2030-06-04T09:00:00", "2030-06-03T09:00:00"]

    canceled = client.get(f"/clients/{seeded.client_id}/bookings", params={"status": "canceled"})
    assert canceled.json() == []
    assert client.get("/clients/999/bookings").status_code == 404
