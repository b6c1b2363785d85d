"""Tests for the root and /alive endpoints."""
# pylint: disable=missing-function-docstring,redefined-outer-name

from http import HTTPStatus

import pytest
from fastapi.testclient import TestClient

from times_table_trainer.apps.api.app import create_app
from times_table_trainer.core import config as config_module
from times_table_trainer.services import ServiceContainer


@pytest.fixture
def client(services: ServiceContainer) -> TestClient:
    return TestClient(create_app(services))


def test_root_returns_welcome(client: TestClient) -> None:
    resp = client.get("/")

    assert resp.status_code == HTTPStatus.OK
    assert "times table trainer" in resp.json()["message"]


def test_alive_reports_lock_stats(client: TestClient) -> None:
    resp = client.get("/alive")

    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert set(data["conversation_locks"]) == {"conversations", "busy"}


def test_alive_requires_healthcheck_token(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(config_module.config, "ENABLE_AUTH", True)
    monkeypatch.setattr(config_module.config, "HEALTHCHECK_API_TOKEN", "health")

    assert client.get("/alive").status_code == HTTPStatus.UNAUTHORIZED
    resp = client.get("/alive", headers={"X-Api-Token": "health"})
    assert resp.status_code == HTTPStatus.OK


def test_alive_counts_conversations_that_took_turns(client: TestClient) -> None:
    for conversation_id in ("conv-1", "conv-2", "conv-1"):
        client.post(
            "/api/v1/turns", json={"conversation_id": conversation_id, "intent": "input.welcome"}
        )

    locks = client.get("/alive").json()["conversation_locks"]
    assert locks == {"conversations": 2, "busy": 0}
