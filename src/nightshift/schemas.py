"""Pydantic models and workflow state for Nightshift."""

from typing import Literal, TypedDict

from pydantic import BaseModel, Field


class AssistantReply(BaseModel):
    """An assistant response split into its chat and document parts."""

    chat: str = Field(description="Conversational part shown in the chat")
    document: str = Field(
        default="", description="Markdown design document, empty when none was sent"
    )


class PayloadMessage(BaseModel):
    """A chat message as sent to the completion service."""

    role: Literal["user", "assistant"]
    content: str


class CompletionPayload(BaseModel):
    """Everything the completion transport needs for one turn."""

    system_prompt: str
    messages: list[PayloadMessage] = Field(default_factory=list)
    existing_document: str = ""


class CompletionResponse(BaseModel):
    """Raw text returned by the completion transport."""

    content: str
    is_mock: bool = False


class DocTurnState(TypedDict, total=False):
    """LangGraph state for a single design document chat turn."""

    payload: CompletionPayload
    document: str  # Current document, replaced by the merge node
    raw_response: str
    is_mock: bool
    reply: AssistantReply | None
    document_changed: bool
    error: str | None
