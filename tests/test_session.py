"""
Tests for the chat turn workflow and the design document session
"""
import asyncio
from datetime import datetime

import pytest

from nightshift.chat import DesignDocumentSession, DocumentStatus, MessageRole
from nightshift.chat.session import SEED_MESSAGE_ID, UNTITLED_PROJECT
from nightshift.exceptions import CompletionError, SessionBusyError
from nightshift.schemas import CompletionPayload, CompletionResponse
from nightshift.workflow import run_turn


def reply_with(content):
    """Build a fake completion transport that records its payloads."""
    calls = []

    async def fake_completion(payload):
        calls.append(payload)
        return CompletionResponse(content=content)

    fake_completion.calls = calls
    return fake_completion


def held_reply(content):
    """Build a fake transport that waits until released."""
    started = asyncio.Event()
    release = asyncio.Event()

    async def fake_completion(payload):
        started.set()
        await release.wait()
        return CompletionResponse(content=content)

    return fake_completion, started, release


async def failing_completion(payload):
    raise RuntimeError("service unavailable")


def assistant_replies(session):
    return [
        message
        for message in session.get_state().messages
        if message.role == MessageRole.ASSISTANT and message.id != SEED_MESSAGE_ID
    ]


class TestRunTurn:
    """Test the single-turn workflow."""

    @pytest.mark.asyncio
    async def test_replaces_document_without_plan(self):
        """Without a plan the returned document is used as-is."""
        completion = reply_with("Chat:\nDone.\n\nDocument:\n# Intro\n\n\n\nWelcome.")
        payload = CompletionPayload(system_prompt="sys")

        result = await run_turn(payload, "# Old", completion)

        assert result["reply"].chat == "Done."
        assert result["document"] == "# Intro\n\nWelcome."
        assert result["document_changed"] is True

    @pytest.mark.asyncio
    async def test_merges_with_plan(self, small_plan):
        """With a plan the reply is merged into the planned sections."""
        document = "# T\n\n## Product Vision\n\nKeep me.\n\n## Success Metrics\n\n_Track signals._\n"
        completion = reply_with("Chat: ok\n\nDocument:\n# New\n\n## Success Metrics\n\n- Deploys")

        result = await run_turn(CompletionPayload(system_prompt="sys"), document, completion, small_plan)

        assert result["document"] == (
            "# T\n\n## Product Vision\n\nKeep me.\n\n## Success Metrics\n\n- Deploys\n"
        )

    @pytest.mark.asyncio
    async def test_chat_only_reply_keeps_document(self):
        """A reply without a document leaves the draft alone."""
        result = await run_turn(
            CompletionPayload(system_prompt="sys"), "# Draft", reply_with("Chat: Who is it for?")
        )

        assert result["document"] == "# Draft"
        assert result["document_changed"] is False

    @pytest.mark.asyncio
    async def test_completion_failure_stops_turn(self):
        """Transport errors end the turn with an error."""
        result = await run_turn(CompletionPayload(system_prompt="sys"), "# Draft", failing_completion)

        assert result["error"] == "service unavailable"
        assert "reply" not in result
        assert result["document"] == "# Draft"


class TestDesignDocumentSession:
    """Test the chat session that owns one document."""

    def test_initial_state(self):
        """A new session is seeded and untouched."""
        session = DesignDocumentSession(project_name="Lunar Interfaces", document="# Hello\n")
        state = session.get_state()

        assert state.document == "# Hello"
        assert state.status == DocumentStatus.DRAFT
        assert not state.has_user_interacted
        assert state.messages[0].id == SEED_MESSAGE_ID
        assert "Lunar Interfaces" in state.messages[0].content

    def test_blank_project_name(self):
        """Blank names fall back to a default."""
        assert DesignDocumentSession(project_name="  ").project_name == UNTITLED_PROJECT

    @pytest.mark.asyncio
    async def test_send_message(self):
        """A turn records both messages and updates the document."""
        completion = reply_with("Chat:\nGreat start!\n\nDocument:\n# Intro\n\nWelcome to the doc.")
        session = DesignDocumentSession(project_name="Glow Deck", request_completion=completion)

        reply = await session.send_message(" outline the kickoff ")

        state = session.get_state()
        assert reply.content == "Great start!"
        assert state.messages[1].role == MessageRole.USER
        assert state.messages[1].content == "outline the kickoff"
        assert state.document == "# Intro\n\nWelcome to the doc."
        assert state.has_user_interacted
        assert not state.is_generating

        assert len(completion.calls) == 1
        payload = completion.calls[0]
        assert "Speak like a friendly product partner" in payload.system_prompt
        assert "Document section must be valid Markdown" in payload.system_prompt
        assert payload.existing_document == ""
        assert payload.messages[-1].content == "outline the kickoff"

    @pytest.mark.asyncio
    async def test_duplicate_headings_are_dropped(self):
        """Returned documents are normalized."""
        completion = reply_with("Chat:\nCleaned.\n\nDocument:\n# Intro\n\n# Intro\nRepeated")
        session = DesignDocumentSession(project_name="Glow Deck", request_completion=completion)

        await session.send_message("please polish the intro")

        lines = session.document.split("\n")
        assert len([line for line in lines if line.lower().startswith("# intro")]) == 1

    @pytest.mark.asyncio
    async def test_blank_message_is_ignored(self):
        """Blank input does not start a turn."""
        completion = reply_with("Chat: hi")
        session = DesignDocumentSession(project_name="Glow Deck", request_completion=completion)

        assert await session.send_message("   ") is None
        assert completion.calls == []
        assert len(session.messages) == 1

    @pytest.mark.asyncio
    async def test_mock_reply_fills_first_section(self, plan, context):
        """Offline turns still land in a planned section."""
        session = DesignDocumentSession.for_plan(context, plan)

        await session.send_message("Nightly builds for squads")

        assert "## Product Vision\n\n- Nightly builds for squads" in session.document
        assert "_Capture the mission and why the work matters._" not in session.document
        assert "## Target Users" in session.document
        assert session.document.index("## Open Questions") > session.document.index(
            "## Risks & Open Questions"
        )
        assert "- What decisions still need feedback?" in session.document

    @pytest.mark.asyncio
    async def test_planned_prompt_lists_sections(self, plan, context):
        """The system prompt names every planned heading."""
        completion = reply_with("Chat: ok")
        session = DesignDocumentSession.for_plan(context, plan, request_completion=completion)

        await session.send_message("hello")

        prompt = completion.calls[0].system_prompt
        assert "- ## Risks & Open Questions" in prompt
        assert "Current design document draft" in prompt

    @pytest.mark.asyncio
    async def test_completion_error(self):
        """Transport failures surface as CompletionError."""
        session = DesignDocumentSession(
            project_name="Glow Deck", document="# Draft", request_completion=failing_completion
        )

        with pytest.raises(CompletionError):
            await session.send_message("hello")

        assert not session.is_generating
        assert session.document == "# Draft"
        assert assistant_replies(session) == []

    @pytest.mark.asyncio
    async def test_busy_session_rejects_messages(self):
        """Only one reply is generated at a time."""
        completion, started, release = held_reply("Chat: done")
        session = DesignDocumentSession(project_name="Glow Deck", request_completion=completion)

        pending = asyncio.create_task(session.send_message("first"))
        await started.wait()

        with pytest.raises(SessionBusyError):
            await session.send_message("second")

        release.set()
        reply = await pending
        assert reply.content == "done"

    @pytest.mark.asyncio
    async def test_reset_discards_pending_reply(self):
        """A reply that arrives after a reset is dropped."""
        completion, started, release = held_reply("Chat:\nAll set.\n\nDocument:\n# Should not appear")
        session = DesignDocumentSession(project_name="Glow Deck", request_completion=completion)

        pending = asyncio.create_task(session.send_message("Capture the main flows"))
        await started.wait()
        session.reset()
        release.set()

        assert await pending is None
        state = session.get_state()
        assert state.document == ""
        assert len(state.messages) == 1
        assert state.messages[0].id == SEED_MESSAGE_ID
        assert not state.is_generating
        assert not state.has_user_interacted

    @pytest.mark.asyncio
    async def test_finalize_discards_pending_reply(self):
        """Finalizing keeps the document as it was."""
        completion, started, release = held_reply("Chat:\nDone!\n\nDocument:\n# Replacement draft")
        session = DesignDocumentSession(
            project_name="Glow Deck", document="# Draft", request_completion=completion
        )
        finalized_at = datetime(2024, 5, 1, 12, 0)

        pending = asyncio.create_task(session.send_message("Please finalize the plan"))
        await started.wait()
        session.finalize(finalized_at)
        release.set()
        await pending

        state = session.get_state()
        assert state.status == DocumentStatus.COMPLETE
        assert state.last_saved_at == finalized_at
        assert state.document == "# Draft"
        assert assistant_replies(session) == []
        assert not state.is_generating

    def test_save_reset_and_finalize(self):
        """Lifecycle changes are reflected in the state."""
        session = DesignDocumentSession(project_name="Glow Deck", document="# Draft")

        session.mark_saved(datetime(2024, 4, 1, 8, 0))
        session.finalize(datetime(2024, 4, 2, 10, 30))
        assert session.get_state().status == DocumentStatus.COMPLETE
        assert session.get_state().last_saved_at == datetime(2024, 4, 2, 10, 30)

        session.reset()
        state = session.get_state()
        assert state.document == ""
        assert state.status == DocumentStatus.DRAFT
        assert state.last_saved_at is None

    def test_reset_with_plan_restores_template(self, plan, context):
        """Planned sessions reset to the template."""
        session = DesignDocumentSession.for_plan(context, plan)
        session.set_document("# Scratch")

        session.reset()

        assert session.document.startswith("# Aurora — Design Document")
        assert "## Product Vision" in session.document

    def test_subscribe(self):
        """Listeners get the current state and every change until unsubscribed."""
        session = DesignDocumentSession(project_name="Glow Deck")
        states = []

        unsubscribe = session.subscribe(states.append)
        session.set_document("# Edited")
        unsubscribe()
        session.set_document("# Again")

        assert len(states) == 2
        assert states[1].document == "# Edited"
        assert states[1].has_user_interacted
