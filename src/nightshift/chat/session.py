"""DesignDocumentSession class for chat-driven design document editing."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

import logfire

from ..design_doc import Plan, create_design_doc_template
from ..design_doc.plan import PlanContext
from ..exceptions import CompletionError, SessionBusyError
from ..nodes.completion import RequestCompletion
from ..prompts import CURRENT_DOCUMENT, DESIGN_DOC_SYSTEM_PROMPT, EMPTY_DOCUMENT, SECTION_GUIDE
from ..schemas import CompletionPayload, PayloadMessage
from ..workflow import run_turn
from .models import ChatMessage, DocumentStatus, MessageRole, SessionState, create_id
from .response import normalize_document

SEED_MESSAGE_ID = "seed"
UNTITLED_PROJECT = "Untitled project"

Listener = Callable[[SessionState], None]


def _create_seed_message(project_name: str) -> ChatMessage:
    return ChatMessage(
        id=SEED_MESSAGE_ID,
        role=MessageRole.ASSISTANT,
        content=(
            f"Hey there! Let's capture the essentials for {project_name}. "
            "Share what you are building, who it is for, and any must-have outcomes. "
            "I'll turn it into a clean design doc."
        ),
    )


@dataclass
class DesignDocumentSession:
    """Manages a chat session that co-authors one design document.

    Only one reply can be generated at a time. Listeners receive a fresh
    SessionState after every change.
    """

    project_name: str
    plan: Plan | None = None
    document: str = ""
    request_completion: RequestCompletion | None = None
    status: DocumentStatus = DocumentStatus.DRAFT
    last_saved_at: datetime | None = None
    messages: list[ChatMessage] = field(default_factory=list)
    is_generating: bool = False
    has_user_interacted: bool = False
    context: PlanContext | None = None
    _listeners: list[Listener] = field(default_factory=list, init=False, repr=False)
    _active_request_id: str | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Normalize inputs and seed the conversation."""
        self.project_name = self.project_name.strip() or UNTITLED_PROJECT
        self.document = normalize_document(self.document)
        if not self.messages:
            self.messages = [_create_seed_message(self.project_name)]

    @classmethod
    def for_plan(
        cls,
        context: PlanContext,
        plan: Plan,
        document: str = "",
        request_completion: RequestCompletion | None = None,
    ) -> "DesignDocumentSession":
        """Create a session whose replies are merged into a planned document."""
        return cls(
            project_name=context.project_name,
            plan=plan,
            document=document or create_design_doc_template(plan, context),
            request_completion=request_completion,
            context=context,
        )

    def get_state(self) -> SessionState:
        """Snapshot the session for listeners."""
        return SessionState(
            messages=tuple(self.messages),
            document=self.document,
            status=self.status,
            is_generating=self.is_generating,
            has_user_interacted=self.has_user_interacted,
            last_saved_at=self.last_saved_at,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and immediately call it with the current state.

        Returns:
            A callable that unsubscribes the listener.
        """
        self._listeners.append(listener)
        listener(self.get_state())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        state = self.get_state()
        for listener in list(self._listeners):
            listener(state)

    def build_system_prompt(self) -> str:
        """Build the system prompt, including the current draft."""
        existing = self.document.strip()
        document_section = (
            CURRENT_DOCUMENT.format(document=existing) if existing else EMPTY_DOCUMENT
        )
        prompt = DESIGN_DOC_SYSTEM_PROMPT.format(
            project_name=self.project_name,
            document_section=document_section,
        )
        if self.plan:
            headings = "\n".join(f"- ## {step.heading}" for step in self.plan)
            prompt += "\n" + SECTION_GUIDE.format(headings=headings)
        return prompt

    @logfire.instrument("design_doc_message")
    async def send_message(self, content: str) -> ChatMessage | None:
        """Send a user message and fold the reply into the document.

        Returns:
            The assistant's message, or None for blank input or a reply that
            arrived after the session was reset.

        Raises:
            SessionBusyError: If a reply is already being generated.
            CompletionError: If the completion service fails.
        """
        trimmed = content.strip()
        if not trimmed:
            return None

        if self.is_generating:
            raise SessionBusyError("A response is already being generated.")

        request_id = create_id("completion")
        self._active_request_id = request_id

        self.messages.append(ChatMessage(role=MessageRole.USER, content=trimmed))
        self.has_user_interacted = True
        self.is_generating = True
        self._emit()

        payload = CompletionPayload(
            system_prompt=self.build_system_prompt(),
            messages=[
                PayloadMessage(role=message.role.value, content=message.content)
                for message in self.messages
            ],
            existing_document=self.document,
        )

        try:
            result = await run_turn(payload, self.document, self.request_completion, self.plan)
        except Exception:
            self._finish_request(request_id)
            raise

        if self._active_request_id != request_id:
            logfire.info("Discarding reply for a superseded request", request_id=request_id)
            return None

        if result.get("error"):
            self._finish_request(request_id)
            raise CompletionError(result["error"])

        reply = result["reply"]
        assistant_message = ChatMessage(role=MessageRole.ASSISTANT, content=reply.chat)
        self.messages.append(assistant_message)
        self.document = result.get("document", self.document)
        self._active_request_id = None
        self.is_generating = False
        self._emit()

        logfire.info(
            "Design doc turn complete",
            document_changed=result.get("document_changed", False),
            is_mock=result.get("is_mock", False),
        )
        return assistant_message

    def _finish_request(self, request_id: str) -> None:
        if self._active_request_id == request_id:
            self._active_request_id = None
            self.is_generating = False
            self._emit()

    def set_document(self, content: str) -> None:
        """Replace the document with a user edit."""
        normalized = normalize_document(content)
        self.document = normalized
        self.has_user_interacted = self.has_user_interacted or bool(normalized)
        self._emit()

    def mark_saved(self, timestamp: datetime) -> None:
        """Record when the document was last persisted."""
        self.last_saved_at = timestamp
        self._emit()

    def finalize(self, timestamp: datetime) -> None:
        """Mark the document complete."""
        self._active_request_id = None
        self.status = DocumentStatus.COMPLETE
        self.last_saved_at = timestamp
        self.is_generating = False
        self._emit()

    def reset(self) -> None:
        """Start over with an empty document and a fresh conversation."""
        self._active_request_id = None
        self.messages = [_create_seed_message(self.project_name)]
        self.document = (
            normalize_document(create_design_doc_template(self.plan, self.context))
            if self.plan and self.context
            else ""
        )
        self.status = DocumentStatus.DRAFT
        self.is_generating = False
        self.has_user_interacted = False
        self.last_saved_at = None
        self._emit()
