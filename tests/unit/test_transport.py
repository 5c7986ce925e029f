"""Unit tests for the chat-completion transport."""

import asyncio
import json
import logging
from unittest.mock import patch

import aiohttp
import pytest

from fridgechef.models.errors import (
    ApiError,
    EmptyResponseError,
    MalformedEnvelopeError,
    MissingCredentialError,
    NetworkError,
    TransportError,
)
from fridgechef.models.models import ContentPart, RecipeGenerationRequest, RequestMessage
from fridgechef.services.transport import Transport, parse_completion_body


class FakeResponse:
    def __init__(self, status: int, body: str, gate: asyncio.Event = None):
        self.status = status
        self._body = body.encode("utf-8")
        self._gate = gate

    async def read(self) -> bytes:
        if self._gate is not None:
            await self._gate.wait()
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Records every POST and answers with a canned response or error."""

    def __init__(self, status: int = 200, body: str = "", error: Exception = None, gate: asyncio.Event = None):
        self.status = status
        self.body = body
        self.error = error
        self.gate = gate
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, self.body, self.gate)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


@pytest.fixture
def envelope() -> RecipeGenerationRequest:
    return RecipeGenerationRequest(
        model="gpt-4",
        messages=[RequestMessage(content=[ContentPart.from_text("Based on these available ingredients: Eggs")])],
        max_tokens=2000,
    )


class TestParseCompletionBody:
    """Test status/body mapping to message text or TransportError."""

    def test_returns_first_choice_content(self, completion_body):
        assert parse_completion_body(200, completion_body("Hello [1]")) == "Hello [1]"

    def test_only_first_choice_is_used(self):
        body = json.dumps(
            {"choices": [{"message": {"role": "assistant", "content": "one"}}, {"message": {"content": "two"}}]}
        )
        assert parse_completion_body(200, body) == "one"

    @pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
    def test_non_success_status_is_api_error(self, status):
        with pytest.raises(ApiError) as exc_info:
            parse_completion_body(status, '{"error": {"message": "nope"}}')
        assert exc_info.value.status == status
        assert "nope" in exc_info.value.body

    def test_api_error_body_is_truncated_and_redacted(self):
        body = "Incorrect API key provided: sk-abcdef1234567890. " + "x" * 1000

        with pytest.raises(ApiError) as exc_info:
            parse_completion_body(401, body)

        assert "sk-abcdef1234567890" not in exc_info.value.body
        assert len(exc_info.value.body) <= 301

    @pytest.mark.parametrize("body", ["", "   \n"])
    def test_empty_body(self, body):
        with pytest.raises(EmptyResponseError):
            parse_completion_body(200, body)

    @pytest.mark.parametrize(
        "body",
        [
            "<html>Bad gateway</html>",
            '{"result": "ok"}',
            '{"choices": []}',
            '{"choices": [{"message": {"role": "assistant"}}]}',
            '{"choices": [{"message": {"role": "assistant", "content": null}}]}',
            '{"choices": [{"text": "legacy completion"}]}',
        ],
    )
    def test_malformed_envelope(self, body):
        with pytest.raises(MalformedEnvelopeError):
            parse_completion_body(200, body)

    def test_all_failures_are_transport_errors(self):
        for status, body in [(500, ""), (200, ""), (200, "{}")]:
            with pytest.raises(TransportError):
                parse_completion_body(status, body)


class TestTransportSend:
    """Test Transport.send against a fake aiohttp session."""

    @pytest.mark.asyncio
    async def test_send_posts_once_and_returns_content(self, config, envelope, completion_body):
        session = FakeSession(200, completion_body("[]"))
        transport = Transport(config, session=session)

        assert await transport.send(envelope) == "[]"

        assert len(session.calls) == 1
        call = session.calls[0]
        assert call["url"] == "https://api.test/v1/chat/completions"
        assert call["headers"]["Authorization"] == f"Bearer {config.OPENAI_API_KEY}"
        assert call["headers"]["Content-Type"] == "application/json"
        assert call["timeout"].total == config.REQUEST_TIMEOUT_SECONDS
        assert json.loads(call["data"]) == envelope.to_wire()

    @pytest.mark.asyncio
    async def test_missing_credential_sends_nothing(self, unconfigured_config, envelope):
        session = FakeSession(200, "{}")

        with pytest.raises(MissingCredentialError):
            await Transport(unconfigured_config, session=session).send(envelope)

        assert session.calls == []

    @pytest.mark.asyncio
    async def test_client_error_is_network_error(self, config, envelope):
        session = FakeSession(error=aiohttp.ClientConnectionError("connection refused"))

        with pytest.raises(NetworkError) as exc_info:
            await Transport(config, session=session).send(envelope)

        assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self, config, envelope):
        session = FakeSession(error=asyncio.TimeoutError())

        with pytest.raises(NetworkError, match="timed out"):
            await Transport(config, session=session).send(envelope)

    @pytest.mark.asyncio
    async def test_http_error_status(self, config, envelope):
        session = FakeSession(429, '{"error": {"message": "Rate limit reached"}}')

        with pytest.raises(ApiError) as exc_info:
            await Transport(config, session=session).send(envelope)

        assert exc_info.value.status == 429

    @pytest.mark.asyncio
    async def test_opens_own_session_when_none_given(self, config, envelope, completion_body):
        session = FakeSession(200, completion_body("text"))

        with patch("fridgechef.services.transport.aiohttp.ClientSession", return_value=session) as factory:
            result = await Transport(config).send(envelope)

        assert result == "text"
        factory.assert_called_once_with()
        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_api_key_never_logged(self, config, envelope, completion_body, caplog):
        session = FakeSession(200, completion_body("ok"))

        with caplog.at_level(logging.DEBUG, logger="fridgechef"):
            await Transport(config, session=session).send(envelope)

        assert config.OPENAI_API_KEY not in caplog.text
        assert "****cdef" in caplog.text

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, config, envelope, completion_body):
        gate = asyncio.Event()
        session = FakeSession(200, completion_body("late"), gate=gate)
        task = asyncio.create_task(Transport(config, session=session).send(envelope))

        await asyncio.sleep(0)
        assert len(session.calls) == 1
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
