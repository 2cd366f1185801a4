"""Pure document reducer: (document, event) -> next document."""

from dataclasses import dataclass

from .builder import create_design_doc_template
from .merger import append_section_content, merge_document_sections
from .plan import Plan, PlanContext


@dataclass(frozen=True)
class SectionContentAdded:
    """A chat turn produced content for one section."""

    key: str
    content: str


@dataclass(frozen=True)
class AssistantDocumentReceived:
    """The assistant returned a full or partial document."""

    markdown: str


@dataclass(frozen=True)
class DocumentEdited:
    """The user edited the markdown directly."""

    markdown: str


@dataclass(frozen=True)
class DocumentReset:
    """Start over from an empty template."""

    context: PlanContext


DocumentEvent = SectionContentAdded | AssistantDocumentReceived | DocumentEdited | DocumentReset


def reduce_document(document: str, event: DocumentEvent, plan: Plan) -> str:
    """Compute the next document for an event.

    The caller owns the loop and must apply events for one document one at a
    time: reducing two events against the same snapshot loses one of them.
    """
    match event:
        case SectionContentAdded(key=key, content=content):
            return append_section_content(document, plan, key, content)
        case AssistantDocumentReceived(markdown=markdown):
            return merge_document_sections(document, plan, markdown)
        case DocumentEdited(markdown=markdown):
            return markdown
        case DocumentReset(context=context):
            return create_design_doc_template(plan, context)

    raise TypeError(f"Unsupported document event: {type(event).__name__}")
