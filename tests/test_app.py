# tests/test_app.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from .helpers import ISO_TIMESTAMP


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.text == "Ok"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/v1/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["message"] == "Not Found"
    assert ISO_TIMESTAMP.match(body["timestamp"])


@pytest.mark.parametrize(
    ("environment", "message"),
    [("production", "An unexpected error occurred"), ("development", "kaboom")],
)
def test_unhandled_error(app, monkeypatch, environment, message):
    monkeypatch.setenv("ENVIRONMENT", environment)

    async def explode():
        raise RuntimeError("kaboom")

    app.add_api_route("/api/v1/explode", explode)
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/v1/explode")

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["message"] == message


def test_membership_lifecycle(client):
    contact = client.post(
        "/api/v1/contact",
        json={"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"},
    ).json()["data"]
    project = client.post("/api/v1/project/create", json={"name": "Engine"}).json()["data"]
    members_url = f"/api/v1/project/{project['id']}/members"

    first = client.post(members_url, json={"contact_id": contact["id"], "role": "lead"})
    again = client.post(members_url, json={"contact_id": contact["id"]})

    assert first.status_code == 201
    assert first.json()["data"]["role"] == "lead"
    assert again.status_code == 400
    assert again.json()["message"] == "Contact is already a member of this project"

    members = client.get(members_url).json()["data"]
    assert [m["contact"]["email"] for m in members] == ["ada@example.com"]

    removed = client.delete(f"{members_url}/{contact['id']}")
    missing = client.delete(f"{members_url}/{contact['id']}")
    assert removed.status_code == 200
    assert missing.status_code == 404


def test_project_delete_takes_tasks_along(client):
    project = client.post("/api/v1/project/create", json={"name": "Short lived"}).json()["data"]
    task = client.post(
        "/api/v1/task/create",
        json={"title": "Orphan", "project_id": project["id"], "priority": "HIGH"},
    ).json()["data"]

    stats = client.get(f"/api/v1/project/{project['id']}/stats").json()["data"]
    assert stats == {"total_tasks": 1, "total_members": 0, "tasks_by_status": {"TODO": 1}}

    assert client.delete(f"/api/v1/project/{project['id']}").status_code == 200
    assert client.get(f"/api/v1/task/{task['id']}").status_code == 404
    assert client.get(f"/api/v1/project/{project['id']}").status_code == 404


def test_duplicate_contact_email(client):
    payload = {"first_name": "Grace", "last_name": "Hopper", "email": "grace@example.com"}

    assert client.post("/api/v1/contact", json=payload).status_code == 201
    response = client.post("/api/v1/contact", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "A contact with this email already exists"
