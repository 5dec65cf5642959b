from conftest import PASSWORD, bearer, register_business


def test_register_creates_business_admin_and_default_services(client):
    data = register_business(client)
    assert data["tokenType"] == "bearer"
    assert data["user"]["role"] == "admin"
    assert data["user"]["businessName"] == "Happy Paws"

    services = client.get("/services", headers=bearer(data["accessToken"])).json()
    assert {s["name"] for s in services} == {
        "Entrenamiento Básico",
        "Guardería Diaria",
        "Pensión Nocturna",
        "Consulta de Comportamiento",
    }
    boarding = next(s for s in services if s["type"] == "boarding")
    assert boarding["price"] == "80.00"
    assert boarding["duration"] == 1440


def test_register_duplicate_email_conflict(client):
    register_business(client)
    r = client.post(
        "/auth/register",
        json={
            "email": "OWNER@dogs.test",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "firstName": "Ana",
            "lastName": "Owner",
            "businessName": "Second",
        },
    )
    assert r.status_code == 409


def test_register_validation(client):
    base = {
        "email": "new@dogs.test",
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
        "firstName": "Ana",
        "lastName": "Owner",
        "businessName": "Biz",
    }
    assert client.post("/auth/register", json={**base, "confirmPassword": "different1"}).status_code == 422
    assert client.post("/auth/register", json={**base, "password": "short", "confirmPassword": "short"}).status_code == 422
    assert client.post("/auth/register", json={**base, "email": "not-an-email"}).status_code == 422
    assert client.post("/auth/register", json={**base, "email": ""}).status_code == 422
    assert client.post("/auth/register", json={**base, "email": "   "}).status_code == 422
    assert client.post("/auth/register", json={**base, "firstName": "  "}).status_code == 422


def test_login_and_me(client):
    register_business(client)
    r = client.post("/auth/login", json={"email": "owner@dogs.test", "password": PASSWORD})
    assert r.status_code == 200
    token = r.json()["accessToken"]

    me = client.get("/auth/me", headers=bearer(token))
    assert me.status_code == 200
    assert me.json()["email"] == "owner@dogs.test"
    assert me.json()["fullName"] == "Ana Owner"

    assert client.post("/auth/logout", headers=bearer(token)).status_code == 200


def test_login_failures_are_indistinguishable(client):
    register_business(client)
    wrong = client.post("/auth/login", json={"email": "owner@dogs.test", "password": "wrongpass1"})
    unknown = client.post("/auth/login", json={"email": "nobody@dogs.test", "password": PASSWORD})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"] == "Invalid email or password"


def test_missing_or_bad_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers=bearer("garbage")).status_code == 401
    assert client.get("/auth/me", headers=bearer("a.b.c")).status_code == 401


def test_inactive_user_cannot_login_or_use_token(client, admin_headers, teacher):
    token = client.post(
        "/auth/login", json={"email": teacher["email"], "password": PASSWORD}
    ).json()["accessToken"]

    assert client.delete(f"/users/{teacher['id']}", headers=admin_headers).status_code == 200

    r = client.post("/auth/login", json={"email": teacher["email"], "password": PASSWORD})
    assert r.status_code == 401
    assert client.get("/auth/me", headers=bearer(token)).status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_register_assigns_business_slug(client):
    first = register_business(client)
    assert first["user"]["businessSlug"] == "happy-paws"

    second = register_business(client, "second@dogs.test", "Happy Paws")
    assert second["user"]["businessSlug"].startswith("happy-paws-")
    assert second["user"]["businessSlug"] != first["user"]["businessSlug"]
