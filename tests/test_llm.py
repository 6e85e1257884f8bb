"""Unit tests for the Gemini client."""
import json

import httpx
import pytest
from conftest import gemini_reply
from hypothesis import HealthCheck, given, settings as hypothesis_settings
from hypothesis import strategies as st

from vaultchat.llm import (
    EmptyResponseError,
    GeminiAPIError,
    GeminiClient,
    InvalidApiKeyError,
    ModelNotFoundError,
    QuotaExceededError,
)
from vaultchat.llm.models import GenerateContentResponse
from vaultchat.settings import Settings


class TestGenerateRequest:
    """Tests for the outgoing request."""

    @pytest.mark.asyncio
    async def test_posts_prompt_as_single_part(self, make_client):
        """The prompt travels as one text part to the model's endpoint."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["key"] = request.url.params["key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_reply("hi"))

        client = make_client(handler)
        try:
            await client.generate("What is in my notes?")
        finally:
            await client.close()

        assert seen["method"] == "POST"
        assert seen["path"] == "/v1beta/models/gemini-test:generateContent"
        assert seen["key"] == "test-key"
        assert seen["body"] == {"contents": [{"parts": [{"text": "What is in my notes?"}]}]}

    @pytest.mark.asyncio
    async def test_reads_settings_at_call_time(self, make_client, settings):
        """Changing the model after construction affects the next request."""
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json=gemini_reply("ok"))

        client = make_client(handler)
        try:
            await client.generate("a")
            settings.model_name = "models/gemini-other"
            await client.generate("b")
        finally:
            await client.close()

        assert paths == [
            "/v1beta/models/gemini-test:generateContent",
            "/v1beta/models/gemini-other:generateContent",
        ]


class TestGenerateResponse:
    """Tests for response interpretation."""

    @pytest.mark.asyncio
    async def test_returns_first_candidate_text(self, make_client):
        payload = gemini_reply("First answer")
        payload["candidates"].append(gemini_reply("Second answer")["candidates"][0])
        client = make_client(lambda request: httpx.Response(200, json=payload))
        try:
            assert await client.generate("q") == "First answer"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_error_object_raises_with_message_and_code(self, make_client):
        payload = {"error": {"message": "API key expired", "code": 400, "status": "INVALID_ARGUMENT"}}
        client = make_client(lambda request: httpx.Response(400, json=payload))
        try:
            with pytest.raises(GeminiAPIError) as exc_info:
                await client.generate("q")
        finally:
            await client.close()

        assert "API key expired" in str(exc_info.value)
        assert "400" in str(exc_info.value)
        assert exc_info.value.code == 400

    @pytest.mark.asyncio
    async def test_error_object_on_success_status(self, make_client):
        payload = {"error": {"message": "Internal", "code": 500}}
        client = make_client(lambda request: httpx.Response(200, json=payload))
        try:
            with pytest.raises(GeminiAPIError, match=r"Internal \(code: 500\)"):
                await client.generate("q")
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_block_reason_is_returned_not_raised(self, make_client):
        payload = {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}}
        client = make_client(lambda request: httpx.Response(200, json=payload))
        try:
            reply = await client.generate("q")
        finally:
            await client.close()

        assert "blocked" in reply
        assert "SAFETY" in reply

    @pytest.mark.asyncio
    async def test_no_candidates_without_block_reason_raises(self, make_client):
        client = make_client(lambda request: httpx.Response(200, json={}))
        try:
            with pytest.raises(EmptyResponseError):
                await client.generate("q")
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_stopped_generation_without_content(self, make_client):
        payload = {"candidates": [{"finishReason": "MAX_TOKENS"}]}
        client = make_client(lambda request: httpx.Response(200, json=payload))
        try:
            reply = await client.generate("q")
        finally:
            await client.close()

        assert reply == "Response generation stopped. Reason: MAX_TOKENS"

    @pytest.mark.asyncio
    async def test_stopped_generation_with_content_returns_text(self, make_client):
        payload = gemini_reply("Partial answer", finish_reason="MAX_TOKENS")
        client = make_client(lambda request: httpx.Response(200, json=payload))
        try:
            assert await client.generate("q") == "Partial answer"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_joins_text_parts(self, make_client):
        payload = {
            "candidates": [{
                "content": {"parts": [{"text": "Hello, "}, {"text": "world"}]},
                "finishReason": "STOP",
            }]
        }
        client = make_client(lambda request: httpx.Response(200, json=payload))
        try:
            assert await client.generate("q") == "Hello, world"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_unmapped_status_propagates(self, make_client):
        client = make_client(lambda request: httpx.Response(500, text="upstream down"))
        try:
            with pytest.raises(httpx.HTTPStatusError):
                await client.generate("q")
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host", request=request)

        client = make_client(handler)
        try:
            with pytest.raises(httpx.ConnectError):
                await client.generate("q")
        finally:
            await client.close()


class TestStatusMapping:
    """HTTP 403/404/429 map to fixed errors whatever the body says."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error_type", "message"),
        [
            (403, InvalidApiKeyError, "The API key is invalid or does not have permission."),
            (404, ModelNotFoundError, "Model 'gemini-test' was not found."),
            (429, QuotaExceededError, "API quota exceeded."),
        ],
    )
    async def test_known_status(self, make_client, status, error_type, message):
        payload = {"error": {"message": "provider text", "code": status}}
        client = make_client(lambda request: httpx.Response(status, json=payload))
        try:
            with pytest.raises(error_type) as exc_info:
                await client.generate("q")
        finally:
            await client.close()

        assert str(exc_info.value) == message

    @hypothesis_settings(max_examples=25, suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(
        status=st.sampled_from([403, 404, 429]),
        body=st.one_of(st.text(max_size=50), st.binary(max_size=50).map(lambda b: b.hex())),
    )
    def test_known_status_ignores_body(self, status, body):
        """Property test: the mapped message never depends on the body."""
        import asyncio

        expected = {
            403: InvalidApiKeyError,
            404: ModelNotFoundError,
            429: QuotaExceededError,
        }[status]

        async def _run():
            client = GeminiClient(
                Settings(api_key="k", model_name="m"),
                transport=httpx.MockTransport(lambda request: httpx.Response(status, text=body)),
            )
            try:
                with pytest.raises(expected):
                    await client.generate("q")
            finally:
                await client.close()

        asyncio.run(_run())


class TestConnectionTest:
    """Tests for test_connection."""

    @pytest.mark.asyncio
    async def test_success(self, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_reply("Hi"))

        client = make_client(handler)
        try:
            result = await client.test_connection()
        finally:
            await client.close()

        assert result.success
        assert "gemini-test" in result.message
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "Hello"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "fragment"),
        [(403, "invalid"), (404, "gemini-test"), (500, "500")],
    )
    async def test_failure_statuses(self, make_client, status, fragment):
        client = make_client(lambda request: httpx.Response(status, json={}))
        try:
            result = await client.test_connection()
        finally:
            await client.close()

        assert not result.success
        assert fragment in result.message

    @pytest.mark.asyncio
    async def test_missing_key_does_not_call_api(self, make_client):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=gemini_reply("Hi"))

        client = make_client(handler, Settings(api_key="", model_name="m"))
        try:
            result = await client.test_connection()
        finally:
            await client.close()

        assert not result.success
        assert calls == []

    @pytest.mark.asyncio
    async def test_transport_error_is_reported(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client = make_client(handler)
        try:
            result = await client.test_connection()
        finally:
            await client.close()

        assert not result.success
        assert "timed out" in result.message


class TestListModels:
    """Tests for list_models."""

    CATALOG = {
        "models": [
            {
                "name": "models/gemini-1.5-flash",
                "displayName": "Gemini 1.5 Flash",
                "description": "Fast model",
                "supportedGenerationMethods": ["generateContent", "countTokens"],
            },
            {
                "name": "models/text-embedding-004",
                "displayName": "Text Embedding 004",
                "supportedGenerationMethods": ["embedContent"],
            },
            {
                "name": "models/gemini-2.0-flash",
                "supportedGenerationMethods": ["generateContent"],
            },
            {
                "name": "models/aqa",
                "displayName": "AQA",
            },
        ]
    }

    @pytest.mark.asyncio
    async def test_filters_and_sorts_descending(self, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            return httpx.Response(200, json=self.CATALOG)

        client = make_client(handler)
        try:
            models = await client.list_models()
        finally:
            await client.close()

        assert seen == {"method": "GET", "path": "/v1beta/models"}
        assert [m.name for m in models] == ["gemini-2.0-flash", "gemini-1.5-flash"]
        assert models[0].display_name == "gemini-2.0-flash"
        assert models[1].display_name == "Gemini 1.5 Flash"
        assert models[1].description == "Fast model"

    @pytest.mark.asyncio
    async def test_failure_returns_empty_list(self, make_client):
        client = make_client(lambda request: httpx.Response(403, json={}))
        try:
            assert await client.list_models() == []
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_missing_key_returns_empty_list(self, make_client):
        client = make_client(
            lambda request: httpx.Response(200, json=self.CATALOG),
            Settings(api_key=""),
        )
        try:
            assert await client.list_models() == []
        finally:
            await client.close()


class TestEnvelopeModel:
    """Tests for the response envelope model."""

    def test_ignores_unknown_fields(self):
        envelope = GenerateContentResponse.model_validate({
            "candidates": [{"content": {"parts": [{"text": "x"}]}, "safetyRatings": []}],
            "usageMetadata": {"totalTokenCount": 3},
        })
        assert envelope.candidates[0].content.joined_text() == "x"
        assert envelope.error is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_generate_real_api(api_keys):
    """Integration test: one real request."""
    if not api_keys["gemini"]:
        pytest.skip("GEMINI_API_KEY not set")

    async with GeminiClient(Settings(api_key=api_keys["gemini"], model_name="gemini-2.0-flash")) as client:
        reply = await client.generate("Reply with the single word: pong")

    assert reply
