"""Merge chat-produced content into a single section of a design document.

Language model output arrives in every shape: a bare paragraph, the section
with its heading echoed back, or the whole document restated. The routines
here narrow that text down to one section and fold it into what is already
there without duplicating blocks or letting placeholders turn into content.
None of them raise for string input.
"""

import re
from dataclasses import replace

import logfire

from .blocks import (
    dedupe_blocks,
    join_blocks,
    normalize_block,
    normalize_content,
    split_blocks,
    strip_placeholder_blocks,
)
from .builder import build_design_doc
from .headings import normalize_heading
from .parser import ParsedDesignDoc, fenced_lines, parse_design_doc
from .plan import Plan, SectionDefinition, get_step

_DOC_HEADING = re.compile(r"^##?[ \t]+")
_SECTION_HEADING = re.compile(r"^##[ \t]+")
_EXTRA_HEADING = re.compile(r"^##[ \t]+\S")


def _has_heading(text: str, pattern: re.Pattern[str]) -> bool:
    """Whether a line outside fenced code blocks matches `pattern`."""
    lines = text.split("\n")
    return any(
        not fenced and pattern.match(line) for line, fenced in zip(lines, fenced_lines(lines))
    )


def extract_section_content(content: str, plan: Plan, key: str) -> str:
    """Isolate the part of `content` that belongs to section `key`.

    Text without `#` or `##` headings outside fenced code is assumed to be
    scoped to the section already. Otherwise it is parsed as a (partial)
    document and the body under `key` is returned, which may be empty. If
    parsing fails the whole trimmed input is returned and deduplication
    downstream cleans up.
    """
    trimmed = content.strip()
    if not trimmed:
        return ""

    if not _has_heading(trimmed, _DOC_HEADING):
        return trimmed

    try:
        parsed = parse_design_doc(trimmed, plan)
    except Exception as e:
        logfire.warn("Failed to isolate section from addition", key=key, error=str(e))
        return trimmed

    section = parsed.sections.get(key)
    if section is None:
        return trimmed
    return section.strip()


def remove_leading_headings(content: str, heading: str) -> str:
    """Drop document titles and an echoed section heading from the top."""
    lines = content.split("\n")
    target = normalize_heading(heading)

    def skip_blank() -> None:
        while lines and not lines[0].strip():
            lines.pop(0)

    skip_blank()
    while lines and re.match(r"^#[ \t]+", lines[0].strip()):
        lines.pop(0)
        skip_blank()

    if lines and normalize_heading(lines[0]) == target:
        lines.pop(0)
        skip_blank()

    return "\n".join(lines)


def strip_section_artifacts(content: str, heading: str, placeholder: str) -> str:
    """Clean an addition before merging.

    Removes echoed headings and placeholder blocks, then duplicate blocks.
    """
    without_heading = remove_leading_headings(content, heading)
    without_placeholder = strip_placeholder_blocks(without_heading, placeholder)
    return dedupe_blocks(without_placeholder).strip()


def merge_section_content(existing: str, addition: str, placeholder: str) -> str:
    """Combine a section's current content with newly contributed content.

    Checks run cheapest first:

    1. placeholder blocks are dropped from both sides
    2. an empty side yields the other side
    3. identical normalized text keeps the existing content
    4. an addition containing the existing text is a rewrite and wins
    5. existing text containing the addition already covers it
    6. otherwise new blocks are appended after the existing ones

    Args:
        existing: Current section body
        addition: Content believed to belong to this section
        placeholder: The section's placeholder text

    Returns:
        Merged section body, possibly empty
    """
    cleaned_existing = dedupe_blocks(strip_placeholder_blocks(existing, placeholder)).strip()
    cleaned_addition = dedupe_blocks(strip_placeholder_blocks(addition, placeholder)).strip()

    if not cleaned_addition:
        return cleaned_existing
    if not cleaned_existing:
        return cleaned_addition

    normalized_existing = normalize_content(cleaned_existing)
    normalized_addition = normalize_content(cleaned_addition)

    if normalized_existing == normalized_addition:
        return cleaned_existing
    if normalized_existing in normalized_addition:
        return cleaned_addition
    if normalized_addition in normalized_existing:
        return cleaned_existing

    merged = split_blocks(cleaned_existing)
    keys = {normalize_block(block) for block in merged}
    for block in split_blocks(cleaned_addition):
        block_key = normalize_block(block)
        if block_key in keys:
            continue
        keys.add(block_key)
        merged.append(block)

    return join_blocks(merged).strip()


def append_section_content(markdown: str, plan: Plan, key: str, addition: str) -> str:
    """Merge `addition` into section `key` and rebuild the document.

    Unknown keys leave the document untouched. The result is canonical, so
    applying the same addition twice yields the same string.

    Args:
        markdown: Current document
        plan: Ordered section plan
        key: Section the addition belongs to
        addition: Raw text from a chat turn

    Returns:
        The next document
    """
    step = get_step(plan, key)
    if step is None:
        logfire.warn("Ignoring addition for unknown section", key=key)
        return markdown

    parsed = parse_design_doc(markdown, plan)
    targeted = extract_section_content(addition, plan, key)
    return build_design_doc(_merge_step(parsed, step, targeted), plan)


def _merge_step(
    parsed: ParsedDesignDoc, step: SectionDefinition, targeted: str
) -> ParsedDesignDoc:
    placeholder = step.placeholder.strip()
    existing = parsed.sections.get(step.key, "").strip()
    if existing == placeholder:
        existing = ""

    cleaned = strip_section_artifacts(targeted, step.heading, placeholder)
    merged = merge_section_content(existing, cleaned, placeholder)
    return parsed.with_section(step.key, merged or placeholder)


def _split_extra_sections(text: str) -> tuple[str, list[tuple[str, str, str]]]:
    """Split unplanned markdown into leading text and `##` sections.

    Each section is a `(heading line, body, original text)` triple.
    """
    lead: list[str] = []
    chunks: list[tuple[str, list[str]]] = []
    lines = text.split("\n")

    for line, fenced in zip(lines, fenced_lines(lines)):
        if not fenced and _EXTRA_HEADING.match(line):
            chunks.append((line.strip(), []))
        elif chunks:
            chunks[-1][1].append(line)
        else:
            lead.append(line)

    sections = [
        (heading, "\n".join(body).strip(), "\n".join([heading, *body]).strip())
        for heading, body in chunks
    ]
    return "\n".join(lead).strip(), sections


def merge_extra_sections(existing: str, incoming: str) -> str:
    """Fold unplanned `##` sections from `incoming` into `existing`.

    Sections are matched by normalized heading and their bodies merged with
    the same block rules as planned sections. New sections are appended in
    order. Sections nothing was added to keep their original text.
    """
    if not incoming.strip():
        return existing.strip()

    lead, sections = _split_extra_sections(existing)
    incoming_lead, incoming_sections = _split_extra_sections(incoming)
    if incoming_lead:
        lead = merge_section_content(lead, incoming_lead, "")

    positions = {
        normalize_heading(heading): index for index, (heading, _, _) in enumerate(sections)
    }
    for heading, body, original in incoming_sections:
        key = normalize_heading(heading)
        index = positions.get(key)
        if index is None:
            positions[key] = len(sections)
            sections.append((heading, body, original))
            continue

        current_heading, current_body, _ = sections[index]
        merged = merge_section_content(current_body, body, "")
        if merged != current_body:
            sections[index] = (
                current_heading,
                merged,
                join_blocks([current_heading, merged]) if merged else current_heading,
            )

    parts = [lead] if lead else []
    parts.extend(original for _, _, original in sections)
    return join_blocks(parts)


def merge_document_sections(markdown: str, plan: Plan, incoming: str) -> str:
    """Merge an incoming document into `markdown`.

    Each planned section of the incoming document is merged into its
    section. Unplanned `##` sections, whether they came before or after the
    planned ones, are merged into the appendix. Incoming text without `##`
    headings cannot be attributed to a section and leaves the document as it
    is.
    """
    if not _has_heading(incoming.strip(), _SECTION_HEADING):
        return markdown

    parsed = parse_design_doc(markdown, plan)
    returned = parse_design_doc(incoming, plan)
    for step in plan:
        parsed = _merge_step(parsed, step, returned.sections.get(step.key, ""))

    _, preface_sections = _split_extra_sections(returned.preface)
    extra = join_blocks(
        [original for _, _, original in preface_sections]
        + ([returned.appendix] if returned.appendix else [])
    )
    parsed = replace(parsed, appendix=merge_extra_sections(parsed.appendix, extra))
    return build_design_doc(parsed, plan)
