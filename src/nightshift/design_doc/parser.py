"""Parse a markdown design document into sections against a plan."""

import re
from dataclasses import dataclass, field, replace

from .headings import normalize_heading
from .plan import Plan

DEFAULT_TITLE = "Design Document"

_TITLE = re.compile(r"^[ \t]*#[ \t]+(.+?)[ \t]*$")
_SECTION_HEADING = re.compile(r"^##[ \t]+(.+?)[ \t]*$")
_FENCE = re.compile(r"^[ \t]*(```|~~~)")


@dataclass(frozen=True)
class ParsedDesignDoc:
    """Structured view of a design document.

    Produced fresh on every parse. `sections` maps every plan key to its
    trimmed body ("" when the section never appeared or is empty).
    """

    title: str = DEFAULT_TITLE
    preface: str = ""
    appendix: str = ""
    sections: dict[str, str] = field(default_factory=dict)

    def with_section(self, key: str, content: str) -> "ParsedDesignDoc":
        """Return a copy with one section's content replaced."""
        return replace(self, sections={**self.sections, key: content})


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and bare CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def is_fence_line(line: str) -> bool:
    """Whether a line opens or closes a fenced code block."""
    return bool(_FENCE.match(line))


def fenced_lines(lines: list[str]) -> list[bool]:
    """Flag the lines that belong to a fenced code block, fences included.

    A fence that is never closed is treated as plain text so a stray marker
    cannot swallow the rest of a document.
    """
    flags = [False] * len(lines)
    opened: int | None = None

    for index, line in enumerate(lines):
        if not is_fence_line(line):
            continue
        if opened is None:
            opened = index
        else:
            flags[opened : index + 1] = [True] * (index + 1 - opened)
            opened = None

    return flags


def parse_design_doc(markdown: str, plan: Plan) -> ParsedDesignDoc:
    """Extract title, preface, planned sections and appendix from markdown.

    `##` headings that match the plan open a section. Any other `##` heading
    line is kept verbatim in the preface (before the first planned section)
    or the appendix (after it). A planned heading seen twice keeps only the
    last occurrence's body. Lines inside fenced code blocks are never
    headings.

    Args:
        markdown: Full markdown document
        plan: Ordered section plan

    Returns:
        ParsedDesignDoc with an entry for every plan key
    """
    lines = normalize_line_endings(markdown).split("\n")

    title = DEFAULT_TITLE
    for index, (line, fenced) in enumerate(zip(lines, fenced_lines(lines))):
        title_match = None if fenced else _TITLE.match(line)
        if title_match:
            title = title_match.group(1).strip()
            lines[index] = ""
            break
    text = "\n".join(lines).lstrip()

    heading_map = {normalize_heading(step.heading): step.key for step in plan}
    sections = {step.key: "" for step in plan}

    preface: list[str] = []
    appendix: list[str] = []
    current_key: str | None = None
    current: list[str] = []
    seen_known_section = False
    body_lines = text.split("\n")

    for line, fenced in zip(body_lines, fenced_lines(body_lines)):
        match = None if fenced else _SECTION_HEADING.match(line)
        heading = match.group(1).strip() if match else ""

        # A bare "##" is ordinary body text
        if heading:
            if current_key is not None:
                sections[current_key] = "\n".join(current).strip()
                current_key = None
                current = []

            key = heading_map.get(normalize_heading(heading))
            if key is not None:
                current_key = key
                seen_known_section = True
            elif seen_known_section:
                appendix.append(line)
            else:
                preface.append(line)
            continue

        if current_key is not None:
            current.append(line)
        elif seen_known_section:
            appendix.append(line)
        else:
            preface.append(line)

    if current_key is not None:
        sections[current_key] = "\n".join(current).strip()

    return ParsedDesignDoc(
        title=title,
        preface="\n".join(preface).strip(),
        appendix="\n".join(appendix).strip(),
        sections=sections,
    )
