"""Tests for the /api/v1/turns endpoint."""
# pylint: disable=missing-function-docstring,redefined-outer-name

from http import HTTPStatus

import pytest
from fastapi.testclient import TestClient

from times_table_trainer.apps.api.app import create_app
from times_table_trainer.core import config as config_module
from times_table_trainer.services import ServiceContainer


@pytest.fixture
def client(services: ServiceContainer) -> TestClient:
    """Create a test client around the deterministic service container."""
    return TestClient(create_app(services))


def _turn(client: TestClient, intent: str, conversation_id: str = "conv-1", **body):
    payload = {"conversation_id": conversation_id, "intent": intent, **body}
    return client.post("/api/v1/turns", json=payload)


class TestTurnFlow:
    """A full game played over HTTP."""

    def test_welcome_starts_game(self, client: TestClient, scripted_random) -> None:
        scripted_random.ints = [3, 4]

        resp = _turn(client, "input.welcome")

        assert resp.status_code == HTTPStatus.OK
        assert resp.json() == {
            "text": "Hello. What is 3 times 4?",
            "continuation": "continue",
            "session": {
                "multiplicand": 3,
                "multiplier": 4,
                "current_streak": 0,
                "best_streak": 0,
            },
            "intent_processed": "input.welcome",
        }

    def test_guess_uses_stored_session(self, client: TestClient, scripted_random) -> None:
        scripted_random.ints = [3, 4, 5, 6]
        _turn(client, "input.welcome")

        resp = _turn(client, "check.guess", arguments={"guess": "12"})

        data = resp.json()
        assert data["text"] == "Correct! 3 times 4 is 12. What is 5 times 6?"
        assert data["session"]["current_streak"] == 1
        assert data["intent_processed"] == "check.guess"

    def test_quit_ends_conversation(self, client: TestClient, scripted_random) -> None:
        scripted_random.ints = [3, 4, 5, 6]
        _turn(client, "input.welcome")
        _turn(client, "check.guess", arguments={"guess": 12})

        resp = _turn(client, "quit.game")

        data = resp.json()
        assert data["text"] == "Best streak 1. Bye."
        assert data["continuation"] == "end"
        assert data["session"] is None

    def test_locale_selects_prompt_pool(self, client: TestClient, scripted_random) -> None:
        scripted_random.ints = [3, 4]

        resp = _turn(client, "input.welcome", locale="de-DE")

        assert resp.json()["text"] == "Hallo. Was ist 3 mal 4?"

    def test_unknown_intent_is_reported(self, client: TestClient) -> None:
        resp = _turn(client, "book.flight")

        assert resp.status_code == HTTPStatus.OK
        assert resp.json()["text"] == "Huh?"
        assert resp.json()["intent_processed"] == "unknown"

    def test_request_id_is_echoed(self, client: TestClient) -> None:
        resp = client.post(
            "/api/v1/turns",
            json={"conversation_id": "conv-1", "intent": "input.welcome"},
            headers={"X-Request-ID": "req-123"},
        )

        assert resp.headers["X-Request-ID"] == "req-123"
        assert "X-Correlation-ID" not in resp.headers

    def test_upstream_correlation_id_becomes_request_id(self, client: TestClient) -> None:
        resp = client.post(
            "/api/v1/turns",
            json={"conversation_id": "conv-1", "intent": "input.welcome"},
            headers={"X-Correlation-ID": "upstream-7"},
        )

        assert resp.headers["X-Request-ID"] == "upstream-7"

    def test_request_id_is_generated_when_absent(self, client: TestClient) -> None:
        resp = _turn(client, "input.welcome")

        assert len(resp.headers["X-Request-ID"]) == 32


class TestTurnValidation:
    """Malformed turn requests."""

    @pytest.mark.parametrize(
        "body",
        [
            {"conversation_id": "  ", "intent": "input.welcome"},
            {"conversation_id": "conv-1", "intent": " "},
        ],
    )
    def test_blank_fields_are_rejected(self, client: TestClient, body: dict) -> None:
        resp = client.post("/api/v1/turns", json=body)

        assert resp.status_code == HTTPStatus.BAD_REQUEST

    @pytest.mark.parametrize(
        "body",
        [
            {"intent": "input.welcome"},
            {"conversation_id": "conv-1"},
            {"conversation_id": "conv-1", "intent": "check.guess", "arguments": "12"},
        ],
    )
    def test_schema_violations_are_rejected(self, client: TestClient, body: dict) -> None:
        resp = client.post("/api/v1/turns", json=body)

        assert resp.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


class TestTurnAuth:
    """Token guard on the turn endpoint."""

    @pytest.fixture(autouse=True)
    def _enable_auth(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config_module.config, "ENABLE_AUTH", True)
        monkeypatch.setattr(config_module.config, "API_TOKEN", "turn-token")

    def test_missing_token(self, client: TestClient) -> None:
        resp = _turn(client, "input.welcome")

        assert resp.status_code == HTTPStatus.UNAUTHORIZED
        assert resp.json()["detail"] == "Missing credentials"

    def test_wrong_token(self, client: TestClient) -> None:
        resp = client.post(
            "/api/v1/turns",
            json={"conversation_id": "conv-1", "intent": "input.welcome"},
            headers={"Authorization": "Bearer nope"},
        )

        assert resp.status_code == HTTPStatus.UNAUTHORIZED
        assert resp.json()["detail"] == "Invalid credentials"

    @pytest.mark.parametrize(
        "headers",
        [{"Authorization": "Bearer turn-token"}, {"X-Api-Token": "turn-token"}],
    )
    def test_valid_token(self, client: TestClient, headers: dict) -> None:
        resp = client.post(
            "/api/v1/turns",
            json={"conversation_id": "conv-1", "intent": "input.welcome"},
            headers=headers,
        )

        assert resp.status_code == HTTPStatus.OK
