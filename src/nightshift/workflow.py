"""LangGraph workflow for a single design document chat turn."""

from functools import partial

import logfire
from langgraph.graph import END, START, StateGraph

from .chat.completion import request_completion as default_request_completion
from .design_doc import Plan
from .nodes import completion_node, merge_node, response_node
from .nodes.completion import RequestCompletion
from .schemas import CompletionPayload, DocTurnState


def _should_continue(state: DocTurnState) -> str:
    """Determine if workflow should continue or end due to error."""
    if state.get("error"):
        logfire.warn("Turn stopped early", error=state["error"])
        return "end"
    return "continue"


def create_workflow(
    request_completion: RequestCompletion | None = None,
    plan: Plan | None = None,
) -> StateGraph:
    """Create the chat turn workflow graph.

    Args:
        request_completion: Transport used to reach the model. Defaults to
            the environment-configured pydantic-ai transport.
        plan: Section plan. When given, replies are merged section by section.

    Returns:
        Compiled LangGraph StateGraph
    """
    if request_completion is None:
        request_completion = default_request_completion

    graph = StateGraph(DocTurnState)

    graph.add_node(
        "completion", partial(completion_node, request_completion=request_completion)
    )
    graph.add_node("response", response_node)
    graph.add_node("merge", partial(merge_node, plan=plan))

    graph.add_edge(START, "completion")
    graph.add_conditional_edges(
        "completion",
        _should_continue,
        {"continue": "response", "end": END},
    )
    graph.add_edge("response", "merge")
    graph.add_edge("merge", END)

    return graph.compile()


async def run_turn(
    payload: CompletionPayload,
    document: str,
    request_completion: RequestCompletion | None = None,
    plan: Plan | None = None,
) -> DocTurnState:
    """Run one chat turn.

    Args:
        payload: System prompt and message history
        document: Current design document
        request_completion: Optional transport override
        plan: Optional section plan

    Returns:
        Final workflow state
    """
    workflow = create_workflow(request_completion, plan)
    initial_state: DocTurnState = {"payload": payload, "document": document}
    return await workflow.ainvoke(initial_state)
