"""Section plans: the ordered list of sections a design document is built from."""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

from ..exceptions import PlanError
from .headings import normalize_heading

Answers = dict[str, str]


class PlanContext(BaseModel):
    """Project-level context a plan and its template are derived from."""

    project_name: str = Field(default="", description="Display name of the project")
    project_summary: str | None = Field(
        default=None, description="One-line pitch shown under the document title"
    )
    project_focus: str | None = Field(
        default=None, description="Theme the interview keeps coming back to"
    )


QuestionFn = Callable[[int, Answers, PlanContext], str]
FormatFn = Callable[[str, Answers, PlanContext], str]


@dataclass(frozen=True)
class SectionDefinition:
    """A single planned section of the design document.

    `key` is an opaque identifier never shown to the user, `heading` is the
    literal `##` heading text and `placeholder` doubles as the sentinel for
    "nothing real has been written here yet".
    """

    key: str
    heading: str
    placeholder: str
    question: QuestionFn | None = None
    acknowledgement: FormatFn | None = None
    format_content: FormatFn | None = None


Plan = list[SectionDefinition]


def get_step(plan: Plan, key: str) -> SectionDefinition | None:
    """Find the plan entry for a section key."""
    for step in plan:
        if step.key == key:
            return step
    return None


def validate_plan(plan: Plan) -> Plan:
    """Check that keys and normalized headings are unique.

    Raises:
        PlanError: If two steps share a key or a heading.
    """
    keys: set[str] = set()
    headings: set[str] = set()

    for step in plan:
        if step.key in keys:
            raise PlanError(f"Duplicate section key '{step.key}'", step.key)
        heading = normalize_heading(step.heading)
        if heading in headings:
            raise PlanError(f"Duplicate section heading '{step.heading}'", step.key)
        keys.add(step.key)
        headings.add(heading)

    return plan


def _friendly_project_name(context: PlanContext) -> str:
    return f"**{context.project_name}**" if context.project_name else "your project"


def as_list(answer: str, marker: Literal["-", "1."]) -> str:
    """Render a free-form answer as a bulleted or numbered list."""
    items = [line.strip() for line in re.split(r"\n+", answer) if line.strip()]

    if not items:
        return answer.strip()

    rendered = []
    for index, item in enumerate(items, start=1):
        if marker == "1.":
            rendered.append(f"{index}. " + re.sub(r"^\d+[.)]\s*", "", item))
        elif item.startswith(("- ", "* ")):
            rendered.append(item)
        else:
            rendered.append("- " + re.sub(r"^[-*]\s*", "", item))

    return "\n".join(rendered)


def as_paragraph(answer: str) -> str:
    """Collapse an answer into a single paragraph."""
    return re.sub(r"\s+", " ", answer.strip())


def combine(parts: list[str]) -> str:
    """Join non-empty parts as separate blocks."""
    return "\n\n".join(part.strip() for part in parts if part.strip())


def create_design_doc_plan(context: PlanContext) -> Plan:
    """Create the standard seven-section design document plan.

    Args:
        context: Project context used to personalise the interview questions.

    Returns:
        Ordered list of section definitions.
    """
    name = _friendly_project_name(context)

    def journeys_question(index: int, answers: Answers, context: PlanContext) -> str:
        callout = (
            " Based on those personas, what outcomes do they need from the experience?"
            if answers.get("users")
            else ""
        )
        return (
            "Map the pivotal use cases or experience pillars that define a "
            f"successful session.{callout}"
        )

    def tech_question(index: int, answers: Answers, context: PlanContext) -> str:
        focus = (
            f" Be sure to note anything that protects the focus on {context.project_focus}."
            if context.project_focus
            else ""
        )
        return (
            "What does the technical stack look like: frameworks, integrations, "
            f"data sources, or constraints to watch?{focus}"
        )

    plan = [
        SectionDefinition(
            key="vision",
            heading="Product Vision",
            placeholder="_Capture the mission and why the work matters._",
            question=lambda index, answers, context: (
                f"Let's start with the north star. What problem is {name} obsessed "
                "with solving and what change do you want to see?"
            ),
            acknowledgement=lambda answer, answers, context: (
                f"Great, I'll frame the vision section around that mission: {answer.strip()}."
            ),
            format_content=lambda answer, answers, context: combine(
                ["**North star**", as_paragraph(answer)]
            ),
        ),
        SectionDefinition(
            key="users",
            heading="Target Users",
            placeholder="_Describe the primary personas and their needs._",
            question=lambda index, answers, context: (
                f"Who are the core users that {name} serves? List personas, segments, "
                "or customers and what they care about."
            ),
            acknowledgement=lambda answer, answers, context: (
                "Perfect, those personas will anchor the user section."
            ),
            format_content=lambda answer, answers, context: combine(
                ["**Primary users**", as_list(answer, "-")]
            ),
        ),
        SectionDefinition(
            key="journeys",
            heading="Experience Pillars",
            placeholder="_Outline the flows or jobs-to-be-done that matter most._",
            question=journeys_question,
            acknowledgement=lambda answer, answers, context: (
                "Awesome, those pillars will shape the UX flows and scope."
            ),
            format_content=lambda answer, answers, context: combine(
                ["**Experience pillars**", as_list(answer, "-")]
            ),
        ),
        SectionDefinition(
            key="tech",
            heading="Technical Foundations",
            placeholder="_List the stack, services, and constraints to honor._",
            question=tech_question,
            acknowledgement=lambda answer, answers, context: (
                "Nice, the implementation section will call out that stack."
            ),
            format_content=lambda answer, answers, context: combine(
                ["**Stack snapshot**", as_list(answer, "-")]
            ),
        ),
        SectionDefinition(
            key="roadmap",
            heading="Launch Roadmap",
            placeholder="_Lay out phases, milestones, and owners._",
            question=lambda index, answers, context: (
                "Sketch the next few milestones or phases. Include timelines, owners, "
                "or deliverables if you know them."
            ),
            acknowledgement=lambda answer, answers, context: (
                "Got it, I'll drop those milestones into the roadmap."
            ),
            format_content=lambda answer, answers, context: combine(
                ["**Milestones**", as_list(answer, "1.")]
            ),
        ),
        SectionDefinition(
            key="metrics",
            heading="Success Metrics",
            placeholder="_Track signals that prove the design is working._",
            question=lambda index, answers, context: (
                "What signals, metrics, or qualitative reads will tell you the launch "
                "is working? List both leading and lagging indicators if possible."
            ),
            acknowledgement=lambda answer, answers, context: (
                "Excellent, those indicators will become the success criteria."
            ),
            format_content=lambda answer, answers, context: combine(
                ["**Signals to watch**", as_list(answer, "-")]
            ),
        ),
        SectionDefinition(
            key="risks",
            heading="Risks & Open Questions",
            placeholder="_Capture unknowns, dependencies, and bets to validate._",
            question=lambda index, answers, context: (
                "Any open questions, dependencies, or risks we should flag while the "
                "plan is fresh?"
            ),
            acknowledgement=lambda answer, answers, context: (
                "Thanks, I'll log those so the team can follow up."
            ),
            format_content=lambda answer, answers, context: combine(
                ["**Risks & unknowns**", as_list(answer, "-")]
            ),
        ),
    ]
    return validate_plan(plan)
