"""Response node - splits the raw reply into chat and document."""

from ..chat.response import parse_assistant_response
from ..schemas import DocTurnState


def response_node(state: DocTurnState) -> DocTurnState:
    """Parse the raw completion text."""
    if state.get("error"):
        return state

    reply = parse_assistant_response(state.get("raw_response", ""))
    return {**state, "reply": reply}
