"""Split assistant replies into chat and document parts."""

import re

from ..design_doc.parser import fenced_lines, is_fence_line, normalize_line_endings
from ..schemas import AssistantReply

EMPTY_REPLY = "I captured your notes."
DEFAULT_CHAT = "Here's the latest update."

# "Document:" label, optionally quoted, listed, made a heading or emphasised
_DOCUMENT_LABEL = re.compile(
    r"^[ \t]*(?:>[ \t]?)*?(?:[-*+][ \t]+|\d+\.[ \t]+|#{1,6}[ \t]+)?"
    r"(?:[*_`~]{0,3})?Document(?:[*_`~]{0,3})?[ \t]*:",
    re.IGNORECASE | re.MULTILINE,
)
_CHAT_LABEL = re.compile(r"^Chat\s*:", re.IGNORECASE)
_HEADING = re.compile(r"^#{1,6}\s+")
_WHITESPACE = re.compile(r"\s+")


def parse_assistant_response(raw: str) -> AssistantReply:
    """Split a `Chat: ... Document: ...` reply.

    Without a Document label the whole reply is chat.
    """
    normalized = normalize_line_endings(raw).strip()
    if not normalized:
        return AssistantReply(chat=EMPTY_REPLY)

    match = _DOCUMENT_LABEL.search(normalized)
    if match is None:
        chat = _CHAT_LABEL.sub("", normalized).strip() or normalized
        return AssistantReply(chat=chat)

    chat = _CHAT_LABEL.sub("", normalized[: match.start()]).strip() or DEFAULT_CHAT
    document = normalized[match.end() :].strip()
    return AssistantReply(chat=chat, document=document)


def normalize_document(markdown: str) -> str:
    """Tidy a document returned by the model.

    Strips trailing whitespace, collapses runs of blank lines and drops a
    heading that repeats the heading right before it. Fenced code blocks are
    left as they are.
    """
    result: list[str] = []
    previous_blank = False
    last_heading: str | None = None
    lines = normalize_line_endings(markdown).split("\n")

    for raw_line, fenced in zip(lines, fenced_lines(lines)):
        if fenced:
            result.append(raw_line.rstrip() if is_fence_line(raw_line) else raw_line)
            previous_blank = False
            last_heading = None
            continue

        line = raw_line.rstrip()
        stripped = line.strip()

        if not stripped:
            if not previous_blank and result:
                result.append("")
            previous_blank = True
            continue

        if _HEADING.match(stripped):
            slug = _WHITESPACE.sub(" ", stripped).lower()
            if slug == last_heading:
                continue
            last_heading = slug
        else:
            last_heading = None

        result.append(line)
        previous_blank = False

    return "\n".join(result).strip()
