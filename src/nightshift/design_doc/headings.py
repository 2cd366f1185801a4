"""Heading normalization for matching markdown headings against a plan."""

import re

# Emphasis and inline code markers
_MARKERS = re.compile(r"[*_`~]")
# Blockquote and ATX heading prefixes
_LEADING = re.compile(r"^[\s>#]+")
_TRAILING = re.compile(r"[\s:-]+$")
_WHITESPACE = re.compile(r"\s+")


def normalize_heading(text: str) -> str:
    """Canonicalize a heading line for comparison.

    Strips emphasis/code markers, leading blockquote and heading markers,
    trailing colons and dashes, collapses whitespace and lower-cases.

    Examples:
        >>> normalize_heading("## **Product Vision**:")
        'product vision'
        >>> normalize_heading("> ###  Target   Users -")
        'target users'
    """
    value = _MARKERS.sub("", text)
    value = _LEADING.sub("", value)
    value = _TRAILING.sub("", value)
    return _WHITESPACE.sub(" ", value).strip().lower()
