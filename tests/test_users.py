from conftest import PASSWORD, login


def test_admin_creates_teacher_and_lists_users(client, admin_headers, teacher):
    assert teacher["role"] == "teacher"
    users = client.get("/users", headers=admin_headers).json()
    assert {u["email"] for u in users} == {"owner@dogs.test", "teacher@dogs.test"}

    teachers = client.get("/users/teachers", headers=admin_headers).json()
    assert {t["role"] for t in teachers} <= {"admin", "teacher"}
    assert any(t["id"] == teacher["id"] for t in teachers)


def test_duplicate_email_conflict(client, admin_headers, teacher):
    r = client.post(
        "/users",
        json={"email": teacher["email"], "firstName": "X", "lastName": "Y", "role": "teacher"},
        headers=admin_headers,
    )
    assert r.status_code == 409


def test_short_password_rejected(client, admin_headers):
    r = client.post(
        "/users",
        json={"email": "t2@dogs.test", "firstName": "X", "lastName": "Y", "role": "teacher", "password": "short"},
        headers=admin_headers,
    )
    assert r.status_code == 422


def test_teacher_cannot_manage_users(client, teacher_headers):
    r = client.get("/users", headers=teacher_headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "Access denied. Admin role required."


def test_admin_cannot_demote_or_deactivate_self(client, admin_headers):
    me = client.get("/auth/me", headers=admin_headers).json()
    assert client.patch(f"/users/{me['id']}/role", json={"role": "teacher"}, headers=admin_headers).status_code == 400
    assert client.delete(f"/users/{me['id']}", headers=admin_headers).status_code == 400


def test_update_role_and_password(client, admin_headers, teacher):
    r = client.patch(f"/users/{teacher['id']}/role", json={"role": "admin"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["role"] == "admin"

    r = client.patch(
        f"/users/{teacher['id']}/password", json={"password": "brandnew99"}, headers=admin_headers
    )
    assert r.status_code == 200
    login(client, teacher["email"], "brandnew99")


def test_link_client_user(client, admin_headers, customer):
    r = client.post(
        "/users",
        json={
            "email": "owner2@mail.test",
            "firstName": "Carla",
            "lastName": "Cliente",
            "role": "client",
            "password": PASSWORD,
            "clientId": customer["id"],
        },
        headers=admin_headers,
    )
    assert r.status_code == 201
    assert r.json()["clientId"] == customer["id"]

    # A client record has at most one portal user
    again = client.post(
        "/users",
        json={"email": "owner3@mail.test", "firstName": "C", "lastName": "C", "role": "client", "clientId": customer["id"]},
        headers=admin_headers,
    )
    assert again.status_code == 400

    teacher_link = client.post(
        "/users",
        json={"email": "owner4@mail.test", "firstName": "C", "lastName": "C", "role": "teacher", "clientId": customer["id"]},
        headers=admin_headers,
    )
    assert teacher_link.status_code == 400


def test_other_business_user_is_not_found(client, admin_headers, teacher, other_admin_headers):
    r = client.patch(f"/users/{teacher['id']}/role", json={"role": "admin"}, headers=other_admin_headers)
    assert r.status_code == 404


def test_blank_email_rejected(client, admin_headers):
    r = client.post(
        "/users",
        json={"email": "", "firstName": "X", "lastName": "Y", "role": "teacher", "password": PASSWORD},
        headers=admin_headers,
    )
    assert r.status_code == 422
    assert {u["email"] for u in client.get("/users", headers=admin_headers).json()} == {"owner@dogs.test"}
