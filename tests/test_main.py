"""
HTTP-level tests for the Brenda API: status codes and error bodies of
/session, /realtime-key and /chat, plus the informational endpoints.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import requests

from brenda.config.settings import Settings
from brenda.main import app, get_settings
from brenda.services import token_codec
from brenda.services.session_minting import mint_session_token


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.text = text
    response.json.return_value = json_data
    return response


def _use_settings(settings):
    app.dependency_overrides[get_settings] = lambda: settings


def test_root(test_client):
    response = test_client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Brenda Voice Assistant"
    assert "/session" in data["endpoints"]


def test_health_reports_configuration(test_client):
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "openai_api_key_configured": True,
        "session_secret_configured": True,
    }


def test_session_returns_verifiable_token(test_client, secret):
    response = test_client.post("/session", json={"userId": "u1"})

    assert response.status_code == 200
    data = response.json()
    assert data["expiresIn"] == 600
    assert token_codec.verify(data["sessionToken"], secret).user_id == "u1"


def test_session_without_body_is_anonymous(test_client, secret):
    response = test_client.post("/session")

    assert response.status_code == 200
    assert token_codec.verify(response.json()["sessionToken"], secret).user_id == "anon"


def test_session_without_secret_is_500(test_client):
    _use_settings(Settings(openai_api_key="sk-test"))
    response = test_client.post("/session", json={"userId": "u1"})

    assert response.status_code == 500
    assert response.json() == {"error": "VOICE_SESSION_SECRET not set"}


def test_get_on_post_endpoint_is_405(test_client):
    response = test_client.get("/session")

    assert response.status_code == 405
    assert "error" in response.json()


def test_realtime_key_success(test_client, secret):
    token, _ = mint_session_token("u1", secret)
    upstream = _response(json_data={
        "id": "sess_1",
        "client_secret": {"value": "ek_abc", "expires_at": 1700000060},
    })

    with patch("brenda.services.openai_client.create_realtime_session", new=AsyncMock(return_value=upstream)) as mock_create:
        response = test_client.post("/realtime-key", json={"sessionToken": token})

    assert response.status_code == 200
    assert response.json() == {
        "ephemeralKey": "ek_abc",
        "sessionId": "sess_1",
        "expiresAt": 1700000060,
        "userId": "u1",
    }
    api_key, payload = mock_create.call_args.args
    assert api_key == "sk-test-api-key"
    assert payload["turn_detection"]["type"] == "server_vad"


def test_realtime_key_missing_token_is_400(test_client):
    response = test_client.post("/realtime-key", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "sessionToken is required"}


def test_realtime_key_tampered_token_is_401(test_client, secret):
    token, _ = mint_session_token("u1", secret)
    tampered = token[:-1] + ("A" if token[-1] != "A" else "B")

    with patch("brenda.services.openai_client.create_realtime_session", new=AsyncMock()) as mock_create:
        response = test_client.post("/realtime-key", json={"sessionToken": tampered})

    assert response.status_code == 401
    assert response.json() == {"error": "Bad signature"}
    mock_create.assert_not_called()


def test_realtime_key_expired_token_is_401(test_client, secret):
    token, _ = mint_session_token("u1", secret, now=1_000)

    response = test_client.post("/realtime-key", json={"sessionToken": token})

    assert response.status_code == 401
    assert response.json() == {"error": "Expired token"}


def test_realtime_key_malformed_token_is_401(test_client):
    response = test_client.post("/realtime-key", json={"sessionToken": "abc"})

    assert response.status_code == 401
    assert response.json() == {"error": "Bad token"}


def test_realtime_key_upstream_rejection_is_502(test_client, secret):
    token, _ = mint_session_token("u1", secret)
    upstream = _response(status_code=401, text="invalid api key")

    with patch("brenda.services.openai_client.create_realtime_session", new=AsyncMock(return_value=upstream)):
        response = test_client.post("/realtime-key", json={"sessionToken": token})

    assert response.status_code == 502
    assert response.json() == {"error": "OpenAI error", "status": 401, "detail": "invalid api key"}


def test_realtime_key_upstream_unreachable_is_502(test_client, secret):
    token, _ = mint_session_token("u1", secret)
    failing = AsyncMock(side_effect=requests.ConnectionError("connection refused"))

    with patch("brenda.services.openai_client.create_realtime_session", new=failing):
        response = test_client.post("/realtime-key", json={"sessionToken": token})

    assert response.status_code == 502
    assert response.json()["error"] == "OpenAI request failed"


def test_realtime_key_without_api_key_is_500(test_client, secret):
    _use_settings(Settings(session_secret=secret))
    token, _ = mint_session_token("u1", secret)

    response = test_client.post("/realtime-key", json={"sessionToken": token})

    assert response.status_code == 500
    assert response.json() == {"error": "OPENAI_API_KEY not set"}


def test_chat_success(test_client):
    upstream = _response(json_data={"output_text": "Hello there!"})

    with patch("brenda.services.openai_client.create_response", new=AsyncMock(return_value=upstream)) as mock_create:
        response = test_client.post("/chat", json={
            "localeVariant": "en-GB",
            "messages": [{"role": "user", "content": "Hi"}],
        })

    assert response.status_code == 200
    assert response.json() == {"reply": "Hello there!"}
    payload = mock_create.call_args.args[1]
    assert payload["input"][0]["role"] == "system"
    assert "British English" in payload["input"][0]["content"]


def test_chat_empty_messages_is_400(test_client):
    response = test_client.post("/chat", json={"localeVariant": "en-US", "messages": []})

    assert response.status_code == 400
    assert response.json() == {"error": "messages[] required"}


def test_chat_empty_messages_checked_before_configuration(test_client):
    _use_settings(Settings())
    response = test_client.post("/chat", json={"messages": []})

    assert response.status_code == 400


def test_chat_invalid_role_is_400(test_client):
    response = test_client.post("/chat", json={"messages": [{"role": "system", "content": "x"}]})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_chat_upstream_failure_is_500(test_client):
    upstream = _response(status_code=429, text="rate limited")

    with patch("brenda.services.openai_client.create_response", new=AsyncMock(return_value=upstream)):
        response = test_client.post("/chat", json={"messages": [{"role": "user", "content": "Hi"}]})

    assert response.status_code == 500
    assert response.json() == {"error": "Chat failed", "detail": "429: rate limited"}


def test_chat_without_api_key_is_500(test_client):
    _use_settings(Settings(session_secret="s"))
    response = test_client.post("/chat", json={"messages": [{"role": "user", "content": "Hi"}]})

    assert response.status_code == 500
    assert response.json() == {"error": "OPENAI_API_KEY not set"}


def test_realtime_key_unexpected_expiry_is_502(test_client, secret):
    token, _ = mint_session_token("u1", secret)
    upstream = _response(json_data={"id": "sess_1", "client_secret": {"value": "ek", "expires_at": "tomorrow"}})

    with patch("brenda.services.openai_client.create_realtime_session", new=AsyncMock(return_value=upstream)):
        response = test_client.post("/realtime-key", json={"sessionToken": token})

    assert response.status_code == 502
    assert response.json()["error"] == "Invalid session response"
