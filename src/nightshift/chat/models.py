"""Data models for the chat system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4


class MessageRole(str, Enum):
    """Role of a message in the chat."""

    USER = "user"
    ASSISTANT = "assistant"


class DocumentStatus(str, Enum):
    """Lifecycle of a design document."""

    DRAFT = "draft"
    COMPLETE = "complete"


def create_id(prefix: str) -> str:
    """Create a short unique message id."""
    return f"{prefix}-{uuid4().hex[:7]}"


@dataclass
class ChatMessage:
    """A single message in the chat history."""

    role: MessageRole
    content: str
    id: str = field(default="")

    def __post_init__(self) -> None:
        """Assign an id based on the role."""
        if not self.id:
            self.id = create_id(self.role.value)


@dataclass(frozen=True)
class SessionState:
    """Snapshot of a design document session handed to listeners."""

    messages: tuple[ChatMessage, ...]
    document: str
    status: DocumentStatus
    is_generating: bool
    has_user_interacted: bool
    last_saved_at: datetime | None
