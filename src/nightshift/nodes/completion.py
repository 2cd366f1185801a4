"""Completion node - asks the model for the next assistant reply."""

from collections.abc import Awaitable, Callable

import logfire

from ..schemas import CompletionPayload, CompletionResponse, DocTurnState

RequestCompletion = Callable[[CompletionPayload], Awaitable[CompletionResponse]]


@logfire.instrument("completion_node")
async def completion_node(
    state: DocTurnState, request_completion: RequestCompletion
) -> DocTurnState:
    """Call the completion transport with the turn's payload."""
    if state.get("error"):
        return state

    payload = state.get("payload")
    if payload is None:
        return {**state, "error": "No completion payload provided"}

    try:
        response = await request_completion(payload)
    except Exception as e:
        logfire.error("Completion node failed", error=str(e))
        return {**state, "error": str(e)}

    return {**state, "raw_response": response.content, "is_mock": response.is_mock}
