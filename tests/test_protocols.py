def create(client, headers, **extra):
    payload = {
        "name": "Paseo sin tirones",
        "category": "obediencia_basica",
        "objectives": "Correa floja en paseos de 10 minutos",
        "steps": [
            {"title": "Cambio de direccion", "duration": "5 min"},
            {"title": "Premiar junto a la pierna"},
        ],
        **extra,
    }
    r = client.post("/protocols", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_protocol_with_steps(client, admin_headers):
    protocol = create(client, admin_headers)
    assert protocol["isActive"] is True
    assert [s["title"] for s in protocol["steps"]] == ["Cambio de direccion", "Premiar junto a la pierna"]
    assert protocol["steps"][0]["duration"] == "5 min"
    assert protocol["createdBy"] == 1


def test_protocol_validation(client, admin_headers):
    r = client.post("/protocols", json={"name": "X", "category": "cocina"}, headers=admin_headers)
    assert r.status_code == 422
    r = client.post(
        "/protocols",
        json={"name": "X", "category": "agilidad", "steps": [{"title": "  "}]},
        headers=admin_headers,
    )
    assert r.status_code == 422


def test_filters(client, admin_headers, teacher_headers):
    create(client, admin_headers)
    create(client, admin_headers, name="Presentacion a perros", category="socializacion", isActive=False)

    everything = client.get("/protocols", headers=teacher_headers).json()
    assert [p["name"] for p in everything] == ["Paseo sin tirones", "Presentacion a perros"]

    active = client.get("/protocols", params={"includeInactive": "false"}, headers=teacher_headers).json()
    assert [p["name"] for p in active] == ["Paseo sin tirones"]

    social = client.get("/protocols", params={"category": "socializacion"}, headers=teacher_headers).json()
    assert len(social) == 1


def test_update_replaces_steps(client, admin_headers):
    protocol = create(client, admin_headers)
    r = client.patch(
        f"/protocols/{protocol['id']}",
        json={"steps": [{"title": "Solo un paso"}], "isActive": False},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert [s["title"] for s in r.json()["steps"]] == ["Solo un paso"]
    assert r.json()["isActive"] is False


def test_teacher_cannot_manage_protocols(client, admin_headers, teacher_headers):
    protocol = create(client, admin_headers)
    assert client.post("/protocols", json={"name": "X", "category": "otro"}, headers=teacher_headers).status_code == 403
    assert client.delete(f"/protocols/{protocol['id']}", headers=teacher_headers).status_code == 403
    assert client.delete(f"/protocols/{protocol['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/protocols/{protocol['id']}", headers=admin_headers).status_code == 404


def test_protocols_are_tenant_scoped(client, admin_headers, other_admin_headers):
    protocol = create(client, admin_headers)
    assert client.get(f"/protocols/{protocol['id']}", headers=other_admin_headers).status_code == 404
    assert client.get("/protocols", headers=other_admin_headers).json() == []
