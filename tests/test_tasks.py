import pytest


@pytest.fixture
def assigned_task(client, admin_headers, teacher):
    r = client.post(
        "/tasks",
        json={
            "title": "Preparar clase grupal",
            "type": "class",
            "assignedTo": teacher["id"],
            "startAt": "2026-03-10T09:00:00Z",
            "endAt": "2026-03-10T10:00:00Z",
            "priority": "high",
        },
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def test_create_task_defaults(client, admin_headers):
    r = client.post("/tasks", json={"title": "Pedir pienso", "startAt": "2026-03-11T09:00:00Z"}, headers=admin_headers)
    assert r.status_code == 201
    task = r.json()
    assert (task["type"], task["status"], task["priority"]) == ("other", "pending", "medium")
    assert task["assigneeName"] is None


def test_assigned_task_shows_assignee(assigned_task):
    assert assigned_task["assigneeName"] == "Tomas Trainer"


def test_end_before_start_rejected(client, admin_headers, assigned_task):
    r = client.post(
        "/tasks",
        json={"title": "Mal", "startAt": "2026-03-10T09:00:00Z", "endAt": "2026-03-10T08:00:00Z"},
        headers=admin_headers,
    )
    assert r.status_code == 422

    r = client.patch(
        f"/tasks/{assigned_task['id']}", json={"endAt": "2026-03-10T08:00:00Z"}, headers=admin_headers
    )
    assert r.status_code == 400


def test_unknown_assignee(client, admin_headers):
    r = client.post(
        "/tasks", json={"title": "X", "startAt": "2026-03-10T09:00:00Z", "assignedTo": 999}, headers=admin_headers
    )
    assert r.status_code == 404


def test_teacher_sees_only_own_tasks(client, admin_headers, teacher_headers, assigned_task):
    other = client.post(
        "/tasks", json={"title": "Solo admin", "startAt": "2026-03-12T09:00:00Z"}, headers=admin_headers
    ).json()

    assert [t["id"] for t in client.get("/tasks", headers=teacher_headers).json()] == [assigned_task["id"]]
    assert len(client.get("/tasks", headers=admin_headers).json()) == 2
    assert client.get(f"/tasks/{other['id']}", headers=teacher_headers).status_code == 404


def test_teacher_may_only_change_status(client, teacher_headers, assigned_task):
    r = client.patch(f"/tasks/{assigned_task['id']}", json={"status": "in_progress"}, headers=teacher_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "in_progress"

    r = client.patch(f"/tasks/{assigned_task['id']}", json={"title": "Otra cosa"}, headers=teacher_headers)
    assert r.status_code == 403

    assert client.delete(f"/tasks/{assigned_task['id']}", headers=teacher_headers).status_code == 403


def test_range_and_status_filter(client, admin_headers, assigned_task):
    client.post("/tasks", json={"title": "Abril", "startAt": "2026-04-02T09:00:00Z"}, headers=admin_headers)

    r = client.get(
        "/tasks/range",
        params={"start": "2026-03-01T00:00:00", "end": "2026-03-31T23:59:59"},
        headers=admin_headers,
    )
    assert [t["id"] for t in r.json()] == [assigned_task["id"]]
    assert client.get("/tasks/range", headers=admin_headers).status_code == 400

    client.patch(f"/tasks/{assigned_task['id']}", json={"status": "completed"}, headers=admin_headers)
    done = client.get("/tasks", params={"status": "completed"}, headers=admin_headers).json()
    assert [t["id"] for t in done] == [assigned_task["id"]]
