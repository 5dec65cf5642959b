import pytest


@pytest.fixture
def book(client, admin_headers, customer, dog, training_service):
    def _book(when="2026-03-02T10:00:00Z", **extra):
        payload = {
            "clientId": customer["id"],
            "dogId": dog["id"],
            "serviceId": training_service["id"],
            "appointmentDate": when,
            **extra,
        }
        r = client.post("/appointments", json=payload, headers=admin_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _book


def test_price_defaults_to_service_price(book, training_service):
    appointment = book()
    assert appointment["price"] == training_service["price"] == "50.00"
    assert appointment["status"] == "pending"
    assert appointment["dog"]["name"] == "Rocky"
    assert appointment["client"]["name"] == "Carla Cliente"


def test_explicit_price_and_timezone_normalised(book):
    appointment = book(when="2026-03-02T12:00:00+02:00", price="42.5")
    assert appointment["price"] == "42.50"
    assert appointment["appointmentDate"].startswith("2026-03-02T10:00:00")


def test_dog_must_belong_to_client(client, admin_headers, dog, training_service):
    other = client.post(
        "/clients", json={"firstName": "Otro", "lastName": "Cliente", "email": "o@mail.test"}, headers=admin_headers
    ).json()
    r = client.post(
        "/appointments",
        json={
            "clientId": other["id"],
            "dogId": dog["id"],
            "serviceId": training_service["id"],
            "appointmentDate": "2026-03-02T10:00:00Z",
        },
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Dog does not belong to the selected client"


def test_inactive_service_rejected(client, admin_headers, customer, dog, training_service):
    client.delete(f"/services/{training_service['id']}", headers=admin_headers)
    r = client.post(
        "/appointments",
        json={
            "clientId": customer["id"],
            "dogId": dog["id"],
            "serviceId": training_service["id"],
            "appointmentDate": "2026-03-02T10:00:00Z",
        },
        headers=admin_headers,
    )
    assert r.status_code == 400


def test_invalid_status_rejected(client, admin_headers, book):
    appointment = book()
    r = client.patch(f"/appointments/{appointment['id']}", json={"status": "lost"}, headers=admin_headers)
    assert r.status_code == 422


def test_final_status_cannot_return_to_pending(client, admin_headers, book):
    appointment = book()
    r = client.patch(f"/appointments/{appointment['id']}", json={"status": "completed"}, headers=admin_headers)
    assert r.status_code == 200
    r = client.patch(f"/appointments/{appointment['id']}", json={"status": "pending"}, headers=admin_headers)
    assert r.status_code == 400


def test_changing_service_resets_price(client, admin_headers, book):
    appointment = book()
    services = client.get("/services", headers=admin_headers).json()
    boarding = next(s for s in services if s["type"] == "boarding")
    r = client.patch(
        f"/appointments/{appointment['id']}", json={"serviceId": boarding["id"]}, headers=admin_headers
    )
    assert r.status_code == 200
    assert r.json()["price"] == "80.00"


def test_list_newest_first_and_range_ascending(client, admin_headers, book):
    early = book(when="2026-03-01T09:00:00Z")
    late = book(when="2026-03-20T09:00:00Z")
    book(when="2026-05-01T09:00:00Z")

    listed = client.get("/appointments", headers=admin_headers).json()
    assert listed[-1]["id"] == early["id"]

    r = client.get(
        "/appointments/range",
        params={"start": "2026-03-01T00:00:00", "end": "2026-03-31T23:59:59"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert [a["id"] for a in r.json()] == [early["id"], late["id"]]


def test_range_requires_valid_bounds(client, admin_headers):
    assert client.get("/appointments/range", headers=admin_headers).status_code == 400
    r = client.get(
        "/appointments/range",
        params={"start": "2026-04-01T00:00:00", "end": "2026-03-01T00:00:00"},
        headers=admin_headers,
    )
    assert r.status_code == 400


def test_calendar_month_groups_by_day(client, admin_headers, book, teacher):
    book(when="2026-03-02T09:00:00Z")
    book(when="2026-03-02T15:00:00Z")
    book(when="2026-03-10T09:00:00Z")
    book(when="2026-04-01T09:00:00Z")
    client.post(
        "/tasks",
        json={"title": "Limpiar patio", "startAt": "2026-03-10T08:00:00Z", "assignedTo": teacher["id"]},
        headers=admin_headers,
    )

    r = client.get("/calendar/2026/3", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["totalAppointments"] == 3
    assert body["totalTasks"] == 1
    days = {d["date"]: d for d in body["days"]}
    assert set(days) == {"2026-03-02", "2026-03-10"}
    assert days["2026-03-02"]["appointmentCount"] == 2
    assert days["2026-03-10"]["taskCount"] == 1


def test_calendar_rejects_bad_month(client, admin_headers):
    assert client.get("/calendar/2026/13", headers=admin_headers).status_code == 400


def test_calendar_rejects_out_of_range_year(client, admin_headers):
    assert client.get("/calendar/9999/12", headers=admin_headers).status_code == 400
    assert client.get("/calendar/0/1", headers=admin_headers).status_code == 400
    assert client.get("/calendar/9998/12", headers=admin_headers).status_code == 200


def test_teacher_creates_but_cannot_delete(client, teacher_headers, admin_headers, book):
    appointment = book()
    assert client.delete(f"/appointments/{appointment['id']}", headers=teacher_headers).status_code == 403
    assert client.delete(f"/appointments/{appointment['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/appointments/{appointment['id']}", headers=admin_headers).status_code == 404
