"""Google Gemini REST client.

Talks to the generative-language API directly over HTTPS with httpx.
Reference: https://ai.google.dev/api/generate-content

Hidden design decisions:
- URL layout (model and API key are read from the live settings per call)
- Request envelope (the prompt travels as a single content part)
- Response interpretation: which outcomes are errors and which are
  informational replies (blocked prompts, stopped generations)
- Mapping of HTTP 403/404/429 to fixed user-facing errors
"""

from typing import Any

import httpx

from ..settings import Settings
from .errors import (
    EmptyResponseError,
    GeminiAPIError,
    InvalidApiKeyError,
    ModelNotFoundError,
    QuotaExceededError,
)
from .models import (
    GENERATE_CONTENT_METHOD,
    STOP_FINISH_REASON,
    ConnectionResult,
    GeminiModel,
    GenerateContentResponse,
    ListModelsResponse,
    build_generate_request,
)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
CONNECTION_TEST_PROMPT = "Hello"
MODELS_PAGE_SIZE = 1000


def _strip_models_prefix(name: str) -> str:
    return name.removeprefix("models/")


class GeminiClient:
    """Single request/response client for Gemini content generation.

    Supports async context manager protocol for proper resource cleanup:
        async with GeminiClient(settings) as client:
            text = await client.generate(prompt)
    """

    def __init__(
        self,
        settings: Settings,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Live settings object; key and model are read on every call
            base_url: API root (override for proxies and tests)
            timeout: Request timeout in seconds, None waits indefinitely
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._debug_callback: Any | None = None

    @property
    def model(self) -> str:
        """Get the configured model name."""
        return _strip_models_prefix(self._settings.model_name)

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "LLM", message)

    async def _post_generate(self, prompt: str) -> httpx.Response:
        model = self.model
        self._debug("debug", f"POST models/{model}:generateContent ({len(prompt):,} chars)")
        response = await self._client.post(
            f"/models/{model}:{GENERATE_CONTENT_METHOD}",
            params={"key": self._settings.api_key},
            json=build_generate_request(prompt),
        )
        self._debug("debug", f"HTTP {response.status_code}")
        return response

    def _raise_for_known_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status == 403:
            raise InvalidApiKeyError()
        if status == 404:
            raise ModelNotFoundError(self.model)
        if status == 429:
            raise QuotaExceededError()

    async def generate(self, prompt: str) -> str:
        """Generate a reply for a prompt.

        Args:
            prompt: Full prompt text (context + question)

        Returns:
            The first candidate's text, or an informational notice when the
            prompt was blocked or the generation stopped without content

        Raises:
            InvalidApiKeyError: HTTP 403
            ModelNotFoundError: HTTP 404
            QuotaExceededError: HTTP 429
            GeminiAPIError: Response carries an ``error`` object
            EmptyResponseError: No candidates and no block reason
            httpx.HTTPStatusError: Any other HTTP error status
            httpx.TransportError: Network failures
        """
        response = await self._post_generate(prompt)
        self._raise_for_known_status(response)

        try:
            payload = response.json()
        except ValueError:
            response.raise_for_status()
            raise

        envelope = GenerateContentResponse.model_validate(
            payload if isinstance(payload, dict) else {}
        )
        if envelope.error is not None:
            self._debug("error", f"Provider error {envelope.error.code}: {envelope.error.message}")
            raise GeminiAPIError(envelope.error.message, envelope.error.code)

        response.raise_for_status()
        return self._interpret(envelope)

    def _interpret(self, envelope: GenerateContentResponse) -> str:
        if not envelope.candidates:
            feedback = envelope.prompt_feedback
            if feedback is not None and feedback.block_reason:
                self._debug("warning", f"Prompt blocked: {feedback.block_reason}")
                return f"Response blocked. Reason: {feedback.block_reason}"
            raise EmptyResponseError()

        candidate = envelope.candidates[0]
        text = candidate.content.joined_text() if candidate.content is not None else ""

        if not text:
            if candidate.finish_reason != STOP_FINISH_REASON:
                self._debug("warning", f"Generation stopped: {candidate.finish_reason}")
                return f"Response generation stopped. Reason: {candidate.finish_reason}"
            raise EmptyResponseError()

        return text

    async def test_connection(self) -> ConnectionResult:
        """Send a trivial prompt and report whether it worked.

        Never raises.
        """
        if not self._settings.api_key:
            return ConnectionResult(success=False, message="Enter an API key first.")

        model = self.model
        try:
            response = await self._post_generate(CONNECTION_TEST_PROMPT)
        except Exception as e:
            self._debug("error", f"Connection test failed: {e}")
            return ConnectionResult(success=False, message=f"Connection error: {e}")

        status = response.status_code
        if status == 200:
            return ConnectionResult(success=True, message=f"Connected ({model})")
        if status == 403:
            return ConnectionResult(success=False, message="The API key is invalid.")
        if status == 404:
            return ConnectionResult(success=False, message=f"Model '{model}' was not found.")
        return ConnectionResult(success=False, message=f"Connection failed (status code: {status})")

    async def list_models(self) -> list[GeminiModel]:
        """List models that support content generation.

        Returns:
            Models sorted by name, descending. Empty when no API key is set
            or the request fails.
        """
        if not self._settings.api_key:
            return []

        try:
            response = await self._client.get(
                "/models",
                params={"key": self._settings.api_key, "pageSize": MODELS_PAGE_SIZE},
            )
        except httpx.HTTPError as e:
            self._debug("error", f"Failed to fetch models: {e}")
            return []

        if response.status_code != 200:
            self._debug("error", f"Failed to fetch models: HTTP {response.status_code}")
            return []

        try:
            catalog = ListModelsResponse.model_validate(response.json())
        except ValueError as e:
            self._debug("error", f"Unexpected model list payload: {e}")
            return []

        models = []
        for info in catalog.models:
            if GENERATE_CONTENT_METHOD not in info.supported_generation_methods:
                continue
            name = _strip_models_prefix(info.name)
            models.append(GeminiModel(
                name=name,
                display_name=info.display_name or name,
                description=info.description,
            ))

        models.sort(key=lambda m: m.name, reverse=True)
        self._debug("info", f"Fetched {len(models)} generation models")
        return models

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup."""
        await self.close()
