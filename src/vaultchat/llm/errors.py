"""Errors raised by the Gemini client.

Messages are user-facing: the chat panel shows ``str(error)`` as-is.
"""

from ..errors import VaultChatError


class GeminiError(VaultChatError):
    """Base class for Gemini API errors."""


class GeminiAPIError(GeminiError):
    """The provider answered with an ``error`` object."""

    def __init__(self, message: str, code: int | str | None):
        self.provider_message = message
        self.code = code
        super().__init__(f"{message} (code: {code})")


class InvalidApiKeyError(GeminiError):
    """HTTP 403: bad or unauthorised API key."""

    def __init__(self) -> None:
        super().__init__("The API key is invalid or does not have permission.")


class ModelNotFoundError(GeminiError):
    """HTTP 404: unknown model name."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Model '{model}' was not found.")


class QuotaExceededError(GeminiError):
    """HTTP 429: quota exhausted."""

    def __init__(self) -> None:
        super().__init__("API quota exceeded.")


class EmptyResponseError(GeminiError):
    """No candidates and no block reason."""

    def __init__(self) -> None:
        super().__init__("No valid response was received from the API.")
