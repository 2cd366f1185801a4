"""Chat interface for the design document assistant."""

from .models import ChatMessage, DocumentStatus, MessageRole, SessionState
from .response import normalize_document, parse_assistant_response
from .runner import run_chat_session
from .session import DesignDocumentSession

__all__ = [
    "ChatMessage",
    "DesignDocumentSession",
    "DocumentStatus",
    "MessageRole",
    "SessionState",
    "normalize_document",
    "parse_assistant_response",
    "run_chat_session",
]
