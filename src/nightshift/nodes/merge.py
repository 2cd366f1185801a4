"""Merge node - folds the assistant's document into the current one."""

import logfire

from ..chat.response import normalize_document
from ..design_doc import AssistantDocumentReceived, Plan, reduce_document
from ..schemas import DocTurnState


def merge_node(state: DocTurnState, plan: Plan | None = None) -> DocTurnState:
    """Update the document from the parsed reply.

    With a plan the reply is merged section by section so earlier answers
    survive a model that forgets them. Without one the reply replaces the
    document, as long as it sent one.
    """
    if state.get("error"):
        return state

    current = state.get("document", "")
    reply = state.get("reply")
    if reply is None or not reply.document.strip():
        return {**state, "document_changed": False}

    incoming = normalize_document(reply.document)
    if plan:
        document = reduce_document(current, AssistantDocumentReceived(markdown=incoming), plan)
    else:
        document = incoming

    changed = document != current
    logfire.info("Merged assistant document", changed=changed, planned=bool(plan))
    return {**state, "document": document, "document_changed": changed}
