"""Node functions for the chat turn LangGraph workflow."""

from .completion import completion_node
from .merge import merge_node
from .response import response_node

__all__ = [
    "completion_node",
    "response_node",
    "merge_node",
]
