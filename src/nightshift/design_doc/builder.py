"""Serialize parsed design documents back to canonical markdown."""

from .parser import DEFAULT_TITLE, ParsedDesignDoc, fenced_lines
from .plan import Plan, PlanContext

DEFAULT_PLACEHOLDER = "_Add notes from the chat to build out this section._"
DEFAULT_INTRO = "> Use the chat to capture context, decisions, and rationale."


def _collapse_blank_lines(parts: list[str]) -> str:
    """Join parts, keeping at most one blank line in a row outside code fences."""
    lines: list[str] = []
    source = "\n".join(parts).split("\n")

    for line, fenced in zip(source, fenced_lines(source)):
        if not fenced and not line and lines and not lines[-1]:
            continue
        lines.append(line)

    return "\n".join(lines)


def build_design_doc(parsed: ParsedDesignDoc, plan: Plan) -> str:
    """Render a canonical markdown document from a parsed structure.

    Sections are emitted in plan order; blank sections fall back to the
    step's placeholder. Rebuilding an already canonical document is a no-op.

    Args:
        parsed: Title, preface, section contents and appendix
        plan: Ordered section plan

    Returns:
        Markdown ending in a single newline
    """
    title = parsed.title.strip() if parsed.title and parsed.title.strip() else DEFAULT_TITLE
    lines = [f"# {title}", ""]

    if parsed.preface.strip():
        lines.extend([parsed.preface.strip(), ""])

    for step in plan:
        content = parsed.sections.get(step.key, "").strip()
        if not content:
            content = step.placeholder.strip() or DEFAULT_PLACEHOLDER
        lines.extend([f"## {step.heading}", "", content, ""])

    if parsed.appendix.strip():
        lines.extend([parsed.appendix.strip(), ""])

    document = _collapse_blank_lines(lines)
    return document.rstrip("\n") + "\n"


def create_design_doc_template(plan: Plan, context: PlanContext) -> str:
    """Create an empty design document with every section on its placeholder."""
    title = (
        f"{context.project_name.strip()} — Design Document"
        if context.project_name.strip()
        else DEFAULT_TITLE
    )
    summary = (context.project_summary or "").strip()
    intro = f"> {summary}" if summary else DEFAULT_INTRO

    return build_design_doc(ParsedDesignDoc(title=title, preface=intro), plan)
