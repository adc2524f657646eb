# tests/test_api.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from taskreward.api.main import create_app


@pytest.fixture()
def client(database) -> TestClient:
    # No context manager: tables already exist and logging stays unconfigured
    return TestClient(create_app(database))


def _register(client: TestClient, username: str, refer_code: str | None = None) -> dict:
    resp = client.post(
        "/api/v1/auth/register",
        json={"username": username, "password": "pw-" + username, "refer_code": refer_code},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _login(client: TestClient, username: str) -> dict[str, str]:
    resp = client.post("/api/v1/auth/login", json={"username": username, "password": "pw-" + username})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def test_health(client) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_complete_task_flow_with_referral(client) -> None:
    alice = _register(client, "alice")
    bob = _register(client, "bob", refer_code=alice["refer_code"])
    assert bob["refer_from"] == alice["user_id"]
    headers = _login(client, "bob")

    created = client.post("/api/v1/tasks", json={"title": "T", "description": "D", "price": 50}, headers=headers)
    assert created.status_code == 201
    task_id = created.json()["task_id"]

    done = client.post(f"/api/v1/tasks/{task_id}/complete", headers=headers)
    assert done.status_code == 200
    assert done.json() == {"ok": True, "task_id": task_id, "reward": 50, "referral_bonus": 6}

    again = client.post(f"/api/v1/tasks/{task_id}/complete", headers=headers)
    assert again.status_code == 409
    assert again.json()["error"] == "conflict"

    me = client.get("/api/v1/users/me", headers=headers).json()
    assert me["balance"] == 50
    assert me["tasks_completed"] == 1

    status = client.get(f"/api/v1/users/{alice['user_id']}/status", headers=headers).json()
    assert status["balance"] == 6

    board = client.get("/api/v1/users/leaderboard", headers=headers).json()["users"]
    assert [u["username"] for u in board] == ["bob", "alice"]


def test_list_tasks(client) -> None:
    _register(client, "alice")
    headers = _login(client, "alice")
    client.post("/api/v1/tasks", json={"title": "T", "description": "D", "price": 20}, headers=headers)

    tasks = client.get("/api/v1/tasks").json()["tasks"]

    assert len(tasks) == 1
    assert {k: tasks[0][k] for k in ("title", "description", "price")} == {"title": "T", "description": "D", "price": 20}


def test_task_validation_and_duplicates(client) -> None:
    _register(client, "alice")
    headers = _login(client, "alice")

    empty_title = client.post("/api/v1/tasks", json={"title": "", "description": "D", "price": 20}, headers=headers)
    zero_price = client.post("/api/v1/tasks", json={"title": "T", "description": "D", "price": 0}, headers=headers)
    assert empty_title.status_code == 422
    assert empty_title.json()["error"] == "validation"
    assert zero_price.status_code == 422

    assert client.post("/api/v1/tasks", json={"title": "T", "description": "D", "price": 20}, headers=headers).status_code == 201
    dup = client.post("/api/v1/tasks", json={"title": "T", "description": "D", "price": 20}, headers=headers)
    assert dup.status_code == 409


def test_complete_missing_task(client) -> None:
    _register(client, "alice")
    headers = _login(client, "alice")

    resp = client.post("/api/v1/tasks/404/complete", headers=headers)

    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_requires_authentication(client) -> None:
    assert client.post("/api/v1/tasks/1/complete").status_code == 401
    assert client.get("/api/v1/users/me", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_link_referrer_once(client) -> None:
    alice = _register(client, "alice")
    carol = _register(client, "carol")
    _register(client, "bob")
    headers = _login(client, "bob")

    first = client.post("/api/v1/users/me/referrer", json={"refer_code": alice["refer_code"]}, headers=headers)
    assert first.status_code == 200
    assert first.json()["referrer_id"] == alice["user_id"]

    second = client.post("/api/v1/users/me/referrer", json={"refer_code": carol["refer_code"]}, headers=headers)
    assert second.status_code == 409

    unknown = client.post("/api/v1/users/me/referrer", json={"refer_code": "zzzz"}, headers=headers)
    assert unknown.status_code == 404


def test_bad_login(client) -> None:
    _register(client, "alice")

    resp = client.post("/api/v1/auth/login", json={"username": "alice", "password": "wrong"})

    assert resp.status_code == 401


def test_leaderboard_limit(client) -> None:
    for name in ("alice", "bob", "carol"):
        _register(client, name)
    headers = _login(client, "alice")

    resp = client.get("/api/v1/users/leaderboard", params={"limit": 2}, headers=headers)
    out_of_range = client.get("/api/v1/users/leaderboard", params={"limit": 0}, headers=headers)

    assert resp.status_code == 200
    # all balances are 0, so ids break the tie
    assert [u["username"] for u in resp.json()["users"]] == ["alice", "bob"]
    assert out_of_range.status_code == 422
