"""HTTP transport to the chat-completion endpoint.

Transport owns the API key and performs exactly one POST per call to
{OPENAI_BASE_URL}/chat/completions. Transport-level outcomes are mapped into
the TransportError taxonomy:

- connectivity / DNS / timeout       → NetworkError
- non-2xx HTTP status                → ApiError(status, body snippet)
- empty body                         → EmptyResponseError
- body not shaped like a completion  → MalformedEnvelopeError

On success the first choice's message content is returned verbatim; turning
it into records is the extractor's job. There are no retries here: a caller
that wants retry/backoff wraps the whole operation.

Cancellation: asyncio.CancelledError is never caught, so cancelling the task
awaiting send() aborts the in-flight request and nothing else is delivered.
"""

import asyncio
import json
from typing import Optional

import aiohttp
from pydantic import ValidationError

from fridgechef.models.errors import (
    ApiError,
    EmptyResponseError,
    MalformedEnvelopeError,
    MissingCredentialError,
    NetworkError,
)
from fridgechef.models.models import ChatCompletionRequest, ChatCompletionResponse
from fridgechef.utils.config import Config
from fridgechef.utils.logger import logger, mask_secret, redact

BODY_SNIPPET_LENGTH = 300


def _snippet(text: str) -> str:
    text = redact(text.strip())
    if len(text) > BODY_SNIPPET_LENGTH:
        return text[:BODY_SNIPPET_LENGTH] + "…"
    return text


def parse_completion_body(status: int, body: str) -> str:
    """Map an HTTP status and body to the first choice's message text.

    Args:
        status: HTTP status code.
        body: Decoded response body.

    Returns:
        Message content of the first choice, unmodified.

    Raises:
        ApiError: Status outside 2xx.
        EmptyResponseError: Blank body.
        MalformedEnvelopeError: Body is not {choices:[{message:{role, content}}]}
            with a text content in the first choice.
    """
    if not 200 <= status < 300:
        raise ApiError(status, _snippet(body))

    if not body or not body.strip():
        raise EmptyResponseError()

    try:
        completion = ChatCompletionResponse.model_validate_json(body)
    except ValidationError as e:
        raise MalformedEnvelopeError(
            f"Response body is not a chat completion ({e.error_count()} validation error(s))"
        ) from e

    if not completion.choices:
        raise MalformedEnvelopeError("Response contained no choices")

    content = completion.choices[0].message.content
    if content is None:
        raise MalformedEnvelopeError("First choice has no text content")

    return content


class Transport:
    """Send request envelopes to the chat-completion endpoint.

    Args:
        config: Immutable application configuration (API key, base URL, timeout).
        session: Optional shared aiohttp session. When omitted a session is
            opened and closed around each call.
    """

    def __init__(self, config: Config, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.config = config
        self.session = session

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.OPENAI_API_KEY}",
            "Content-Type": "application/json",
        }

    async def _post(self, session: aiohttp.ClientSession, url: str, payload: str) -> tuple[int, str]:
        timeout = aiohttp.ClientTimeout(total=self.config.REQUEST_TIMEOUT_SECONDS)
        async with session.post(url, data=payload, headers=self._headers(), timeout=timeout) as response:
            raw = await response.read()
            return response.status, raw.decode("utf-8", errors="replace")

    async def send(self, envelope: ChatCompletionRequest) -> str:
        """POST the envelope once and return the raw model text.

        Args:
            envelope: Image-analysis or recipe-generation request.

        Returns:
            The first choice's message content (still unstructured text).

        Raises:
            MissingCredentialError: No API key configured (no request is made).
            NetworkError: Connection, DNS or timeout failure.
            ApiError: Non-2xx response.
            EmptyResponseError: Empty response body.
            MalformedEnvelopeError: Body is not a usable chat completion.
        """
        if not self.config.is_openai_configured:
            raise MissingCredentialError()

        url = self.config.chat_completions_url
        payload = json.dumps(envelope.to_wire())
        log_context = {"task": envelope.task.value, "model": envelope.model}

        logger.info(f"POST {url} ({len(payload) / 1024:.1f}KB)", extra=log_context)
        logger.debug(f"Authorization: Bearer {mask_secret(self.config.OPENAI_API_KEY)}", extra=log_context)

        try:
            if self.session is not None:
                status, body = await self._post(self.session, url, payload)
            else:
                async with aiohttp.ClientSession() as session:
                    status, body = await self._post(session, url, payload)
        except asyncio.TimeoutError as e:
            logger.warning(
                f"Request timed out after {self.config.REQUEST_TIMEOUT_SECONDS}s", extra=log_context
            )
            raise NetworkError(f"Request to {url} timed out") from e
        except aiohttp.ClientError as e:
            logger.warning(f"Request failed: {e}", extra=log_context)
            raise NetworkError(f"Request to {url} failed: {e}") from e

        logger.info(f"Response HTTP {status} ({len(body)} chars)", extra=log_context)
        return parse_completion_body(status, body)
