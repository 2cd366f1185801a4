"""Blank-line delimited blocks: the unit of deduplication and merging."""

import re

from .parser import fenced_lines

_MARKERS = re.compile(r"[*_`~]")
_WHITESPACE = re.compile(r"\s+")


def split_blocks(text: str) -> list[str]:
    """Split text into trimmed, non-empty blocks on blank lines.

    Blank lines inside fenced code blocks do not end a block.
    """
    blocks: list[str] = []
    current: list[str] = []
    lines = text.split("\n")

    for line, fenced in zip(lines, fenced_lines(lines)):
        if line or fenced:
            current.append(line)
            continue
        blocks.append("\n".join(current).strip())
        current = []

    blocks.append("\n".join(current).strip())
    return [block for block in blocks if block]


def normalize_block(block: str) -> str:
    """Build the deduplication key for a block."""
    return _WHITESPACE.sub(" ", block).strip().lower()


def normalize_content(text: str) -> str:
    """Normalize text for meaning-level comparison.

    Like normalize_block, but markdown emphasis and code markers are dropped
    first so `**North star**` and `North star` compare equal.
    """
    return normalize_block(_MARKERS.sub("", text))


def join_blocks(blocks: list[str]) -> str:
    """Join blocks back together with a single blank line between them."""
    return "\n\n".join(blocks)


def strip_placeholder_blocks(text: str, placeholder: str) -> str:
    """Remove every block that is just the placeholder text."""
    if not text.strip():
        return ""

    placeholder_key = normalize_content(placeholder)
    if not placeholder_key:
        return join_blocks(split_blocks(text))
    return join_blocks(
        [block for block in split_blocks(text) if normalize_content(block) != placeholder_key]
    )


def dedupe_blocks(text: str) -> str:
    """Remove repeated blocks, keeping the first occurrence."""
    if not text.strip():
        return ""

    seen: set[str] = set()
    result: list[str] = []
    for block in split_blocks(text):
        key = normalize_block(block)
        if key in seen:
            continue
        seen.add(key)
        result.append(block)

    return join_blocks(result)
