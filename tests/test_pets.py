PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_pet_type_unique_per_business(client, admin_headers, pet_type, other_admin_headers):
    assert client.post("/pet-types", json={"name": "perro"}, headers=admin_headers).status_code == 409
    # Same name is fine in another business
    assert client.post("/pet-types", json={"name": "Perro"}, headers=other_admin_headers).status_code == 201
    names = [p["name"] for p in client.get("/pet-types", headers=admin_headers).json()]
    assert names == ["Perro"]


def test_create_dog(dog, customer):
    assert dog["clientId"] == customer["id"]
    assert dog["clientName"] == "Carla Cliente"
    assert dog["petTypeName"] == "Perro"
    assert dog["weight"] == "28.50"
    assert dog["imageUrl"] is None


def test_dog_validation(client, admin_headers, customer):
    base = {"clientId": customer["id"], "name": "Luna"}
    assert client.post("/dogs", json={**base, "age": -1}, headers=admin_headers).status_code == 422
    assert client.post("/dogs", json={**base, "weight": "-2"}, headers=admin_headers).status_code == 422
    assert client.post("/dogs", json={**base, "name": " "}, headers=admin_headers).status_code == 422
    assert client.post("/dogs", json={**base, "clientId": 999}, headers=admin_headers).status_code == 404
    assert client.post("/dogs", json={**base, "petTypeId": 999}, headers=admin_headers).status_code == 404


def test_dog_teacher_must_be_staff(client, admin_headers, customer, teacher, portal_headers):
    me = client.get("/auth/me", headers=portal_headers).json()
    r = client.post(
        "/dogs", json={"clientId": customer["id"], "name": "Luna", "teacherId": me["id"]}, headers=admin_headers
    )
    assert r.status_code == 400

    r = client.post(
        "/dogs", json={"clientId": customer["id"], "name": "Luna", "teacherId": teacher["id"]}, headers=admin_headers
    )
    assert r.status_code == 201
    assert r.json()["teacherName"] == "Tomas Trainer"


def test_list_dogs_by_client(client, admin_headers, dog, customer):
    other = client.post(
        "/clients", json={"firstName": "Otro", "lastName": "Dueño", "email": "otro@mail.test"}, headers=admin_headers
    ).json()
    client.post("/dogs", json={"clientId": other["id"], "name": "Max"}, headers=admin_headers)

    assert len(client.get("/dogs", headers=admin_headers).json()) == 2
    mine = client.get("/dogs", params={"clientId": customer["id"]}, headers=admin_headers).json()
    assert [d["name"] for d in mine] == ["Rocky"]
    nested = client.get(f"/clients/{customer['id']}/dogs", headers=admin_headers).json()
    assert [d["id"] for d in nested] == [dog["id"]]
    assert client.get("/clients/999/dogs", headers=admin_headers).status_code == 404


def test_teacher_may_only_edit_notes_and_image(client, teacher_headers, dog):
    r = client.patch(f"/dogs/{dog['id']}", json={"notes": "Pulls on the leash"}, headers=teacher_headers)
    assert r.status_code == 200
    assert r.json()["notes"] == "Pulls on the leash"

    r = client.patch(f"/dogs/{dog['id']}", json={"name": "Renamed"}, headers=teacher_headers)
    assert r.status_code == 403


def test_admin_updates_dog(client, admin_headers, dog):
    r = client.patch(f"/dogs/{dog['id']}", json={"breed": "Mestizo", "age": 4}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["breed"] == "Mestizo"
    assert r.json()["name"] == "Rocky"


def test_upload_dog_image_and_fetch_it(client, admin_headers, dog):
    r = client.post(
        f"/dogs/{dog['id']}/image",
        files={"file": ("rocky.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["imageKey"].startswith("1/dog-images/")
    assert body["imageKey"].endswith(".png")
    assert body["imageUrl"] == f"/uploads/files/{body['imageKey']}"

    served = client.get(body["imageUrl"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_dog_image_rejects_video(client, admin_headers, dog):
    r = client.post(
        f"/dogs/{dog['id']}/image",
        files={"file": ("clip.mp4", b"\x00" * 32, "video/mp4")},
        headers=admin_headers,
    )
    assert r.status_code == 415


def test_complete_record(client, admin_headers, dog, customer, training_service):
    client.post(
        "/appointments",
        json={
            "clientId": customer["id"],
            "dogId": dog["id"],
            "serviceId": training_service["id"],
            "appointmentDate": "2026-03-02T10:00:00Z",
        },
        headers=admin_headers,
    )
    client.post(
        "/medical-records",
        json={"dogId": dog["id"], "recordDate": "2026-01-10T00:00:00", "recordType": "vacuna", "title": "Rabia"},
        headers=admin_headers,
    )
    client.post(
        "/training-sessions",
        json={"dogId": dog["id"], "sessionDate": "2026-03-02T10:00:00", "objective": "Sit"},
        headers=admin_headers,
    )
    client.post(
        "/packages",
        json={"clientId": customer["id"], "dogId": dog["id"], "packageName": "Pack 5", "totalSessions": 5},
        headers=admin_headers,
    )

    r = client.get(f"/dogs/{dog['id']}/record", headers=admin_headers)
    assert r.status_code == 200
    record = r.json()
    assert record["dog"]["name"] == "Rocky"
    assert record["client"]["id"] == customer["id"]
    assert record["appointments"][0]["service"]["name"] == training_service["name"]
    assert record["medicalRecords"][0]["title"] == "Rabia"
    assert record["trainingSessions"][0]["objective"] == "Sit"
    assert record["packages"][0]["packageName"] == "Pack 5"
    assert record["evidence"] == [] and record["assessments"] == [] and record["progressEntries"] == []


def test_delete_dog_cascades_records(client, admin_headers, dog):
    rec = client.post(
        "/medical-records",
        json={"dogId": dog["id"], "recordDate": "2026-01-10T00:00:00", "recordType": "revision", "title": "Chequeo"},
        headers=admin_headers,
    ).json()
    assert client.delete(f"/dogs/{dog['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/medical-records/{rec['id']}", headers=admin_headers).status_code == 404


def test_dog_tenant_isolation(client, dog, other_admin_headers):
    assert client.get(f"/dogs/{dog['id']}", headers=other_admin_headers).status_code == 404
    assert client.get(f"/dogs/{dog['id']}/record", headers=other_admin_headers).status_code == 404


def test_dog_with_bookings_cannot_change_client(client, admin_headers, dog, customer, training_service):
    other = client.post(
        "/clients", json={"firstName": "Pablo", "lastName": "Otro", "email": "pablo@mail.test"}, headers=admin_headers
    ).json()
    r = client.patch(f"/dogs/{dog['id']}", json={"clientId": other["id"]}, headers=admin_headers)
    assert r.status_code == 200
    r = client.patch(f"/dogs/{dog['id']}", json={"clientId": customer["id"]}, headers=admin_headers)
    assert r.status_code == 200

    booked = client.post(
        "/appointments",
        json={
            "clientId": customer["id"],
            "dogId": dog["id"],
            "serviceId": training_service["id"],
            "appointmentDate": "2026-03-02T10:00:00Z",
        },
        headers=admin_headers,
    )
    assert booked.status_code == 201, booked.text

    r = client.patch(f"/dogs/{dog['id']}", json={"clientId": other["id"]}, headers=admin_headers)
    assert r.status_code == 400
    assert client.get(f"/dogs/{dog['id']}", headers=admin_headers).json()["clientId"] == customer["id"]

    r = client.patch(f"/dogs/{dog['id']}", json={"clientId": customer["id"], "breed": "Mestizo"}, headers=admin_headers)
    assert r.status_code == 200


def test_dog_image_key_must_belong_to_the_business(client, admin_headers, teacher_headers, dog):
    r = client.patch(f"/dogs/{dog['id']}", json={"imageKey": "2/dog-images/other.png"}, headers=teacher_headers)
    assert r.status_code == 400
    r = client.patch(f"/dogs/{dog['id']}", json={"imageKey": "1/dog-images/../../2/x.png"}, headers=admin_headers)
    assert r.status_code == 400
    r = client.patch(f"/dogs/{dog['id']}", json={"imageKey": "1/dog-images/rocky.png"}, headers=teacher_headers)
    assert r.status_code == 200
    assert r.json()["imageUrl"] == "/uploads/files/1/dog-images/rocky.png"


def test_oversized_dog_image_rejected(client, admin_headers, dog, monkeypatch):
    monkeypatch.setattr("pawtrack.utils.storage.MAX_IMAGE_SIZE_BYTES", 16)
    r = client.post(
        f"/dogs/{dog['id']}/image",
        files={"file": ("rocky.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )
    assert r.status_code == 413
    assert client.get(f"/dogs/{dog['id']}", headers=admin_headers).json()["imageKey"] is None
