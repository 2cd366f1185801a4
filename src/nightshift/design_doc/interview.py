"""Scripted design doc interview: one question per planned section."""

from dataclasses import dataclass, field

import logfire

from .builder import create_design_doc_template
from .plan import Answers, Plan, PlanContext, SectionDefinition
from .reducer import SectionContentAdded, reduce_document

COMPLETION_MESSAGE = (
    "That is a solid first pass. Keep iterating in the document or ask for "
    "more prompts whenever you need."
)


@dataclass(frozen=True)
class Question:
    """A question asked for a section."""

    key: str
    text: str


@dataclass(frozen=True)
class InterviewTurn:
    """What the assistant says back after an answer."""

    acknowledgement: str
    next_question: Question | None = None
    completion: str | None = None


def create_intro_message(context: PlanContext) -> str:
    """Build the opening message of the interview."""
    name = context.project_name or "your project"
    summary = (context.project_summary or "").strip()
    focus = (context.project_focus or "").strip()

    parts = [
        f"I am your design doc copilot for {name}. "
        "Let us capture the decisions that will unblock your build."
    ]
    if summary:
        parts.append(f"Current context: {summary}")
    if focus:
        parts.append(f"We will keep an eye on {focus} as we go.")
    parts.append("Answer each prompt and I will stitch the details into the document.")

    return " ".join(parts)


def _ask(step: SectionDefinition, index: int, answers: Answers, context: PlanContext) -> Question:
    text = step.question(index, answers, context) if step.question else step.heading
    return Question(key=step.key, text=text)


@dataclass
class DesignDocInterview:
    """Walks the plan in order, folding each answer into the document."""

    plan: Plan
    context: PlanContext
    document: str = ""
    answers: Answers = field(default_factory=dict)
    step_index: int = 0

    def __post_init__(self) -> None:
        """Start from the template when no document is given."""
        if not self.document.strip():
            self.document = create_design_doc_template(self.plan, self.context)

    @property
    def is_complete(self) -> bool:
        """Whether every planned section has been asked about."""
        return self.step_index >= len(self.plan)

    @property
    def current_step(self) -> SectionDefinition | None:
        """The section the next answer goes to."""
        return None if self.is_complete else self.plan[self.step_index]

    def first_question(self) -> Question | None:
        """Question for the section the interview is currently on."""
        step = self.current_step
        if step is None:
            return None
        return _ask(step, self.step_index, self.answers, self.context)

    def submit_answer(self, answer: str) -> InterviewTurn | None:
        """Record an answer, merge it into the document and move on.

        Returns:
            The assistant's reply, or None for a blank answer or a finished
            interview.
        """
        trimmed = answer.strip()
        step = self.current_step
        if not trimmed or step is None:
            return None

        answers = {**self.answers, step.key: trimmed}
        addition = (
            step.format_content(trimmed, answers, self.context)
            if step.format_content
            else trimmed
        )
        self.document = reduce_document(
            self.document, SectionContentAdded(key=step.key, content=addition), self.plan
        )
        self.answers = answers
        logfire.info("Interview answer recorded", key=step.key, step=self.step_index)

        acknowledgement = (
            step.acknowledgement(trimmed, answers, self.context) if step.acknowledgement else ""
        )
        self.step_index += 1

        next_step = self.current_step
        if next_step is None:
            return InterviewTurn(acknowledgement=acknowledgement, completion=COMPLETION_MESSAGE)
        return InterviewTurn(
            acknowledgement=acknowledgement,
            next_question=_ask(next_step, self.step_index, answers, self.context),
        )
