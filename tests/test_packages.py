def sell(client, headers, customer_id, total=5, **extra):
    r = client.post(
        "/packages",
        json={"clientId": customer_id, "packageName": "Bono 5 clases", "totalSessions": total, **extra},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_create_package(client, admin_headers, customer, dog):
    package = sell(client, admin_headers, customer["id"], dogId=dog["id"], price="200")
    assert package["usedSessions"] == 0
    assert package["remainingSessions"] == 5
    assert package["status"] == "active"
    assert package["price"] == "200.00"
    assert package["dogName"] == "Rocky"
    assert package["clientName"] == "Carla Cliente"


def test_create_package_validation(client, admin_headers, customer):
    r = client.post(
        "/packages",
        json={"clientId": customer["id"], "packageName": "Vacio", "totalSessions": 0},
        headers=admin_headers,
    )
    assert r.status_code == 422
    r = client.post(
        "/packages",
        json={"clientId": 999, "packageName": "Bono", "totalSessions": 3},
        headers=admin_headers,
    )
    assert r.status_code == 404


def test_consume_until_completed(client, teacher_headers, admin_headers, customer):
    package = sell(client, admin_headers, customer["id"])
    statuses = []
    for _ in range(5):
        r = client.post(f"/packages/{package['id']}/consume", json={}, headers=teacher_headers)
        assert r.status_code == 200, r.text
        statuses.append(r.json()["package"]["status"])
        assert r.json()["session"]["status"] == "attended"

    assert statuses == ["active", "active", "active", "finishing", "completed"]

    r = client.post(f"/packages/{package['id']}/consume", json={}, headers=teacher_headers)
    assert r.status_code == 409
    assert r.json()["detail"] == "No sessions remaining in this package"

    sessions = client.get(f"/packages/{package['id']}/sessions", headers=admin_headers).json()
    assert len(sessions) == 5


def test_expired_package_cannot_be_consumed(client, admin_headers, customer):
    package = sell(client, admin_headers, customer["id"], expiryDate="2020-01-01T00:00:00Z")
    r = client.post(f"/packages/{package['id']}/consume", json={}, headers=admin_headers)
    assert r.status_code == 409
    assert r.json()["detail"] == "Package has expired"
    assert client.get(f"/packages/{package['id']}", headers=admin_headers).json()["status"] == "expired"


def test_total_cannot_drop_below_used(client, admin_headers, customer):
    package = sell(client, admin_headers, customer["id"], total=3)
    client.post(f"/packages/{package['id']}/consume", json={}, headers=admin_headers)
    client.post(f"/packages/{package['id']}/consume", json={}, headers=admin_headers)

    r = client.patch(f"/packages/{package['id']}", json={"totalSessions": 1}, headers=admin_headers)
    assert r.status_code == 400

    r = client.patch(f"/packages/{package['id']}", json={"totalSessions": 10}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["remainingSessions"] == 8
    assert r.json()["status"] == "active"


def test_filter_by_client_and_delete(client, admin_headers, customer):
    package = sell(client, admin_headers, customer["id"])
    assert len(client.get("/packages", params={"clientId": customer["id"]}, headers=admin_headers).json()) == 1
    assert client.get("/packages", params={"clientId": 999}, headers=admin_headers).json() == []

    assert client.delete(f"/packages/{package['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/packages/{package['id']}", headers=admin_headers).status_code == 404


def test_consume_with_foreign_dog_rejected(client, admin_headers, customer, dog):
    other = client.post(
        "/clients", json={"firstName": "O", "lastName": "C", "email": "o@mail.test"}, headers=admin_headers
    ).json()
    package = sell(client, admin_headers, other["id"])
    r = client.post(f"/packages/{package['id']}/consume", json={"dogId": dog["id"]}, headers=admin_headers)
    assert r.status_code == 400
