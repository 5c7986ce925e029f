"""Error taxonomy for FridgeChef.

Every failure of an image-analysis or recipe-generation call surfaces as
exactly one FridgeChefError subclass. None of them are retried inside the
core; the `user_message` attribute is what an interface shows to people.
"""

from typing import Optional


class FridgeChefError(Exception):
    """Base class for all errors raised by the core."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)


class MissingCredentialError(FridgeChefError):
    """No usable API key is configured; no request was sent."""

    user_message = "OpenAI API key not configured. Please set OPENAI_API_KEY in your environment or .env file."


class InvalidImageError(FridgeChefError):
    """Image bytes could not be validated or encoded for upload."""

    user_message = "Error processing image. Please try again."


class TransportError(FridgeChefError):
    """Failure while talking to the chat-completion endpoint."""


class NetworkError(TransportError):
    """Connectivity, DNS or timeout failure before a response arrived."""

    user_message = "Network error. Please check your internet connection."


class ApiError(TransportError):
    """The endpoint answered with a non-success HTTP status."""

    user_message = "API error. Please try again later."

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(f"API returned HTTP {status}: {body}" if body else f"API returned HTTP {status}")


class EmptyResponseError(TransportError):
    """The endpoint answered with an empty body."""

    user_message = "No data received from the API."


class MalformedEnvelopeError(TransportError):
    """The body is not a chat-completion response with a text message."""

    user_message = "Invalid response from API."


class ExtractionError(FridgeChefError):
    """The model reply did not contain the expected structured data."""

    user_message = "Error parsing response."


class NoStructuredPayloadError(ExtractionError):
    """No JSON array could be located in the model reply."""

    user_message = "The model reply did not contain a list of results."


class SchemaMismatchError(ExtractionError):
    """The located JSON array does not match the expected record schema."""

    user_message = "Error parsing response."
