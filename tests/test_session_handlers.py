from unittest.mock import AsyncMock, patch

import pytest

from brenda.config.settings import Settings
from brenda.errors import ConfigurationError, ValidationFailure
from brenda.handlers import handle_chat, handle_create_session, handle_realtime_key
from brenda.models.api_schemas import ChatRequest, ChatTurn, RealtimeKeyRequest, SessionRequest
from brenda.services import token_codec


@pytest.mark.asyncio
class TestSessionHandlers:

    async def test_create_session(self, settings, secret):
        response = await handle_create_session(SessionRequest(userId="caller-1"), settings)

        assert response.expiresIn == 600
        assert token_codec.verify(response.sessionToken, secret).user_id == "caller-1"

    async def test_create_session_without_request(self, settings, secret):
        response = await handle_create_session(None, settings)

        assert token_codec.verify(response.sessionToken, secret).user_id == "anon"

    async def test_create_session_requires_secret(self):
        with pytest.raises(ConfigurationError, match="VOICE_SESSION_SECRET not set"):
            await handle_create_session(SessionRequest(), Settings(openai_api_key="sk"))

    async def test_realtime_key_checks_configuration_first(self):
        # a missing token is not reported while the server is misconfigured
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY not set"):
            await handle_realtime_key(RealtimeKeyRequest(), Settings(session_secret="s"))

        with pytest.raises(ConfigurationError, match="VOICE_SESSION_SECRET not set"):
            await handle_realtime_key(RealtimeKeyRequest(), Settings(openai_api_key="sk"))

    async def test_realtime_key_delegates(self, settings):
        with patch("brenda.handlers.session_handlers.issue_ephemeral_key", new=AsyncMock()) as mock_issue:
            request = RealtimeKeyRequest(sessionToken="t")
            result = await handle_realtime_key(request, settings)

        assert result is mock_issue.return_value
        mock_issue.assert_awaited_once_with(
            request,
            api_key=settings.openai_api_key,
            secret=settings.session_secret,
            settings=settings,
        )


@pytest.mark.asyncio
class TestChatHandler:

    async def test_empty_messages(self, settings):
        with pytest.raises(ValidationFailure, match=r"messages\[\] required"):
            await handle_chat(ChatRequest(messages=[]), settings)

    async def test_requires_api_key(self):
        request = ChatRequest(messages=[ChatTurn(role="user", content="Hi")])
        with pytest.raises(ConfigurationError):
            await handle_chat(request, Settings())

    async def test_relays_with_chat_model(self, settings):
        request = ChatRequest(localeVariant="es-ES", messages=[ChatTurn(role="user", content="Hola")])

        with patch("brenda.handlers.chat_handlers.relay_chat", new=AsyncMock(return_value="¡Hola!")) as mock_relay:
            response = await handle_chat(request, settings)

        assert response.reply == "¡Hola!"
        mock_relay.assert_awaited_once_with(
            "es-ES",
            request.messages,
            api_key=settings.openai_api_key,
            model=settings.chat_model,
        )
