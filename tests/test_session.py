"""Unit tests for the chat session."""
import asyncio
import json

import httpx
import pytest
from conftest import gemini_reply

from vaultchat.chat import (
    ChatBusyError,
    ChatRole,
    ChatSession,
    ChatState,
    EmptyQuestionError,
    EmptySelectionError,
    MissingApiKeyError,
    preview,
)
from vaultchat.settings import Settings


def _prompt_of(request: httpx.Request) -> str:
    return json.loads(request.content)["contents"][0]["parts"][0]["text"]


class TestSend:
    """Tests for the send cycle."""

    @pytest.mark.asyncio
    async def test_success_appends_and_clears_context(self, make_client, settings, vault):
        prompts = []

        def handler(request: httpx.Request) -> httpx.Response:
            prompts.append(_prompt_of(request))
            return httpx.Response(200, json=gemini_reply("It says to walk the dog."))

        session = ChatSession(settings, make_client(handler), vault)
        session.start_chat_with_selection("Walked the dog.")
        await session.add_reference(vault.get_note("ideas"))

        reply = await session.send("  What did I do?  ")
        await session.client.close()

        assert reply.role is ChatRole.ASSISTANT
        assert reply.content == "It says to walk the dog."
        assert [m.role for m in session.transcript] == [
            ChatRole.CONTEXT,
            ChatRole.USER,
            ChatRole.ASSISTANT,
        ]
        assert session.transcript[1].content == "What did I do?"
        assert prompts == [
            "[Context From Vault: Selected text]\nWalked the dog.\n\n[User Question]: What did I do?"
        ]
        assert session.context.selection == ""
        assert session.context.referenced == {}
        assert session.state is ChatState.IDLE

    @pytest.mark.asyncio
    async def test_failure_keeps_context(self, make_client, settings, vault):
        session = ChatSession(settings, make_client(lambda request: httpx.Response(429)), vault)
        session.start_chat_with_selection("keep me")

        reply = await session.send("q")
        await session.client.close()

        assert reply.role is ChatRole.ERROR
        assert reply.content == "Error: API quota exceeded."
        assert session.context.selection == "keep me"
        assert session.state is ChatState.IDLE

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_error_entry(self, make_client, settings, vault):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("network down", request=request)

        session = ChatSession(settings, make_client(handler), vault)
        reply = await session.send("q")
        await session.client.close()

        assert reply.role is ChatRole.ERROR
        assert "network down" in reply.content
        assert not session.is_sending

    @pytest.mark.asyncio
    async def test_mode_survives_send(self, make_client, settings, vault):
        prompts = []

        def handler(request: httpx.Request) -> httpx.Response:
            prompts.append(_prompt_of(request))
            return httpx.Response(200, json=gemini_reply("ok"))

        session = ChatSession(settings, make_client(handler), vault)
        assert session.toggle_all_notes() is True

        await session.send("first")
        await session.send("second")
        await session.client.close()

        assert session.use_all_notes
        assert all(p.startswith("[Context From Vault: Entire vault (3 files)]") for p in prompts)

    @pytest.mark.asyncio
    async def test_current_note_context(self, make_client, settings, vault):
        prompts = []

        def handler(request: httpx.Request) -> httpx.Response:
            prompts.append(_prompt_of(request))
            return httpx.Response(200, json=gemini_reply("ok"))

        session = ChatSession(settings, make_client(handler), vault)
        session.set_active_note(vault.get_note("roadmap"))
        await session.send("When?")
        await session.client.close()

        assert prompts[0].startswith("[Context From Vault: projects/roadmap.md]\nQ1: ship it.\n")


class TestInputValidation:
    """Rejected sends never reach the API."""

    @pytest.mark.asyncio
    async def test_empty_question(self, make_client, settings, vault):
        calls = []
        session = ChatSession(settings, make_client(lambda request: calls.append(request)), vault)

        with pytest.raises(EmptyQuestionError):
            await session.send("   ")
        await session.client.close()

        assert calls == []
        assert session.transcript == []

    @pytest.mark.asyncio
    async def test_missing_api_key(self, make_client, vault):
        no_key = Settings(api_key="")
        session = ChatSession(no_key, make_client(lambda request: None, no_key), vault)

        with pytest.raises(MissingApiKeyError, match="API key"):
            await session.send("q")
        await session.client.close()

    @pytest.mark.asyncio
    async def test_busy(self, make_client, settings, vault):
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json=gemini_reply("done"))

        session = ChatSession(settings, make_client(handler), vault)
        first = asyncio.create_task(session.send("one"))
        await asyncio.sleep(0.05)

        assert session.is_sending
        with pytest.raises(ChatBusyError):
            await session.send("two")

        release.set()
        reply = await first
        await session.client.close()

        assert reply.content == "done"
        assert session.state is ChatState.IDLE

    def test_empty_selection(self, make_client, settings, vault):
        session = ChatSession(settings, make_client(lambda request: None), vault)
        with pytest.raises(EmptySelectionError):
            session.start_chat_with_selection("")


class TestSelection:
    """Tests for selection context entries."""

    def test_context_entry_preview(self, make_client, settings, vault):
        session = ChatSession(settings, make_client(lambda request: None), vault)
        received = []
        session.set_message_callback(received.append)

        entry = session.start_chat_with_selection("a" * 150)

        assert entry.role is ChatRole.CONTEXT
        assert entry.content == f"Selected text added as context.\n\n\"{'a' * 100}...\""
        assert received == [entry]
        assert session.context.selection == "a" * 150

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("short", "short"), ("x" * 5, "x" * 5), ("x" * 6, "x" * 5 + "...")],
    )
    def test_preview(self, text, expected):
        assert preview(text, 5) == expected


class TestDebugCallback:
    """The session's debug callback reaches its collaborators."""

    @pytest.mark.asyncio
    async def test_propagates(self, make_client, settings, vault):
        components = set()
        session = ChatSession(
            settings,
            make_client(lambda request: httpx.Response(200, json=gemini_reply("ok"))),
            vault,
        )
        session.set_debug_callback(lambda level, component, message: components.add(component))
        session.toggle_all_notes()

        await session.send("q")
        await session.client.close()

        assert {"Chat", "Context", "Vault", "LLM"} <= components
