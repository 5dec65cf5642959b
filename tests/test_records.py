import pytest


@pytest.fixture
def session(client, teacher_headers, dog):
    r = client.post(
        "/training-sessions",
        json={
            "dogId": dog["id"],
            "sessionDate": "2026-03-05T10:00:00Z",
            "duration": 45,
            "objective": "Sentado y quieto",
            "rating": 4,
        },
        headers=teacher_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_medical_records_newest_first(client, admin_headers, dog):
    for date, title in (("2026-01-10T00:00:00Z", "Rabia"), ("2026-02-10T00:00:00Z", "Revision anual")):
        r = client.post(
            "/medical-records",
            json={"dogId": dog["id"], "recordDate": date, "recordType": "vacuna", "title": title},
            headers=admin_headers,
        )
        assert r.status_code == 201, r.text

    records = client.get(f"/dogs/{dog['id']}/medical-records", headers=admin_headers).json()
    assert [r["title"] for r in records] == ["Revision anual", "Rabia"]

    r = client.patch(f"/medical-records/{records[0]['id']}", json={"veterinarian": "Dra. Paz"}, headers=admin_headers)
    assert r.json()["veterinarian"] == "Dra. Paz"
    assert client.delete(f"/medical-records/{records[0]['id']}", headers=admin_headers).status_code == 200
    assert len(client.get(f"/dogs/{dog['id']}/medical-records", headers=admin_headers).json()) == 1


def test_medical_record_type_validated(client, admin_headers, dog):
    r = client.post(
        "/medical-records",
        json={"dogId": dog["id"], "recordDate": "2026-01-10T00:00:00Z", "recordType": "spa", "title": "x"},
        headers=admin_headers,
    )
    assert r.status_code == 422


def test_training_session_defaults_to_current_teacher(session, teacher):
    assert session["teacherId"] == teacher["id"]
    assert session["teacherName"] == "Tomas Trainer"
    assert session["dogName"] == "Rocky"


def test_training_session_rating_range(client, teacher_headers, dog):
    r = client.post(
        "/training-sessions",
        json={"dogId": dog["id"], "sessionDate": "2026-03-05T10:00:00Z", "rating": 6},
        headers=teacher_headers,
    )
    assert r.status_code == 422


def test_evidence_requires_file_unless_note(client, teacher_headers, dog, session):
    base = {"dogId": dog["id"], "trainingSessionId": session["id"], "title": "Primer sentado"}
    assert client.post("/evidence", json={**base, "type": "photo"}, headers=teacher_headers).status_code == 422

    r = client.post("/evidence", json={**base, "type": "note", "description": "Muy bien"}, headers=teacher_headers)
    assert r.status_code == 201
    assert r.json()["fileUrl"] is None

    r = client.post("/evidence", json={**base, "type": "photo", "fileKey": "1/evidence/abc.jpg"}, headers=teacher_headers)
    assert r.status_code == 201
    assert r.json()["fileUrl"] == "/uploads/files/1/evidence/abc.jpg"

    listed = client.get(f"/training-sessions/{session['id']}/evidence", headers=teacher_headers).json()
    assert len(listed) == 2


def test_evidence_session_must_match_dog(client, admin_headers, customer, pet_type, session):
    other_dog = client.post(
        "/dogs",
        json={"clientId": customer["id"], "name": "Luna", "petTypeId": pet_type["id"]},
        headers=admin_headers,
    ).json()
    r = client.post(
        "/evidence",
        json={"dogId": other_dog["id"], "trainingSessionId": session["id"], "type": "note", "title": "x"},
        headers=admin_headers,
    )
    assert r.status_code == 400


def test_deleting_session_keeps_evidence(client, teacher_headers, dog, session):
    client.post(
        "/evidence",
        json={"dogId": dog["id"], "trainingSessionId": session["id"], "type": "note", "title": "Nota"},
        headers=teacher_headers,
    )
    assert client.delete(f"/training-sessions/{session['id']}", headers=teacher_headers).status_code == 200
    evidence = client.get(f"/dogs/{dog['id']}/evidence", headers=teacher_headers).json()
    assert len(evidence) == 1
    assert evidence[0]["trainingSessionId"] is None


def test_progress_entry_strips_markup(client, teacher_headers, dog):
    r = client.post(
        "/progress",
        json={
            "dogId": dog["id"],
            "title": "Semana 1",
            "description": "<script>alert(1)</script>Camina <b>sin tirar</b>",
            "photos": ["1/progress/a.jpg"],
        },
        headers=teacher_headers,
    )
    assert r.status_code == 201, r.text
    entry = r.json()
    assert "<" not in entry["description"]
    assert "sin tirar" in entry["description"]
    assert entry["photoUrls"] == ["/uploads/files/1/progress/a.jpg"]


def test_assessment_scores_and_summary(client, teacher_headers, dog):
    r = client.post(
        "/assessments",
        json={
            "dogId": dog["id"],
            "assessmentDate": "2026-03-01T00:00:00Z",
            "scores": {"movBalance": 4, "movGait": 2, "calmYawning": 5},
            "comments": {"general": "Nervioso al llegar"},
        },
        headers=teacher_headers,
    )
    assert r.status_code == 201, r.text
    assessment = r.json()

    summary = client.get(f"/assessments/{assessment['id']}/summary", headers=teacher_headers).json()
    assert summary["sections"]["movement"] == 3.0
    assert summary["sections"]["calming"] == 5.0
    assert summary["sections"]["posture"] is None
    assert summary["overall"] == 3.67


@pytest.mark.parametrize(
    "payload",
    [
        {"scores": {"movBalance": 6}},
        {"scores": {"notAThing": 3}},
        {"comments": {"mood": "x"}},
    ],
)
def test_assessment_validation(client, teacher_headers, dog, payload):
    r = client.post(
        "/assessments",
        json={"dogId": dog["id"], "assessmentDate": "2026-03-01T00:00:00Z", **payload},
        headers=teacher_headers,
    )
    assert r.status_code == 422


def test_records_are_tenant_scoped(client, other_admin_headers, dog, session):
    assert client.get(f"/dogs/{dog['id']}/medical-records", headers=other_admin_headers).status_code == 404
    assert client.get(f"/training-sessions/{session['id']}", headers=other_admin_headers).status_code == 404


def test_client_role_cannot_write_records(client, portal_headers, dog):
    r = client.post(
        "/medical-records",
        json={"dogId": dog["id"], "recordDate": "2026-01-10T00:00:00Z", "recordType": "vacuna", "title": "x"},
        headers=portal_headers,
    )
    assert r.status_code == 403


def test_record_media_keys_must_belong_to_the_business(client, teacher_headers, dog):
    evidence = {"dogId": dog["id"], "title": "Quieto", "type": "photo", "fileKey": "2/evidence/theirs.jpg"}
    r = client.post("/evidence", json=evidence, headers=teacher_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "File does not belong to this business"

    progress = {"dogId": dog["id"], "title": "Semana 2", "photos": ["1/progress/a.jpg"], "videos": ["2/progress/b.mp4"]}
    assert client.post("/progress", json=progress, headers=teacher_headers).status_code == 400

    entry = client.post("/progress", json={**progress, "videos": []}, headers=teacher_headers).json()
    r = client.patch(f"/progress/{entry['id']}", json={"photos": ["2/progress/c.jpg"]}, headers=teacher_headers)
    assert r.status_code == 400
    r = client.patch(f"/progress/{entry['id']}", json={"photos": ["1/progress/c.jpg"]}, headers=teacher_headers)
    assert r.status_code == 200
    assert r.json()["photos"] == ["1/progress/c.jpg"]
