"""Chat completion transport for the design document assistant."""

import logfire

from ..config import CompletionConfig, create_agent
from ..exceptions import CompletionError
from ..schemas import CompletionPayload, CompletionResponse, PayloadMessage


def _build_chat_context(history: list[PayloadMessage], max_messages: int = 10) -> str:
    """Build context string from recent chat history."""
    if max_messages <= 0:
        return ""

    recent = history[-max_messages:] if len(history) > max_messages else history

    if not recent:
        return ""

    parts = ["## Recent Conversation\n"]
    for msg in recent:
        role_label = "User" if msg.role == "user" else "Assistant"
        parts.append(f"**{role_label}:** {msg.content}\n")

    return "\n".join(parts)


def build_user_prompt(messages: list[PayloadMessage], max_messages: int = 10) -> str:
    """Turn the message history into a single user prompt.

    The latest user message is the one being answered; everything before it
    is context.
    """
    latest_index = next(
        (i for i in range(len(messages) - 1, -1, -1) if messages[i].role == "user"),
        None,
    )
    if latest_index is None:
        return _build_chat_context(messages, max_messages)

    context = _build_chat_context(messages[:latest_index], max_messages)
    current = f"## Current Message\n{messages[latest_index].content}"
    return f"{context}\n\n{current}" if context else current


def build_mock_response(messages: list[PayloadMessage], existing_document: str = "") -> str:
    """Canned reply used when no model is configured.

    The outline lands under the first `##` heading of the existing document
    so offline drafts still flow into a planned section.
    """
    heading = next(
        (
            line[3:].strip()
            for line in existing_document.split("\n")
            if line.startswith("## ") and line[3:].strip()
        ),
        "Summary",
    )
    latest = next((m for m in reversed(messages) if m.role == "user"), None)
    snippet = latest.content if latest else ""
    points = [f"- {line.strip()}" for line in snippet.split("\n") if line.strip()][:4]

    outline = (
        "\n".join(points)
        if points
        else "- Outline the purpose of this release.\n"
        "- Capture who benefits and how success is measured."
    )

    return "\n".join(
        [
            "Chat:",
            "Here's a quick draft so you can keep working while the live AI connection is offline.",
            "Add more detail and I'll reshape the sections for you.",
            "",
            "Document:",
            "# Design Overview",
            "",
            f"## {heading}",
            outline,
            "",
            "## Open Questions",
            "- What decisions still need feedback?",
            "- Which risks should we call out for stakeholders?",
        ]
    )


async def request_completion(
    payload: CompletionPayload, config: CompletionConfig | None = None
) -> CompletionResponse:
    """Ask the configured model for the next assistant reply.

    Falls back to a mock reply when no model is configured.

    Args:
        payload: System prompt, history and current document
        config: Completion settings. Defaults to the environment.

    Returns:
        The raw reply text

    Raises:
        CompletionError: If the model fails or returns nothing.
    """
    if config is None:
        config = CompletionConfig.from_env()

    if config.is_mock:
        logfire.info("No model configured, using mock reply")
        return CompletionResponse(
            content=build_mock_response(payload.messages, payload.existing_document),
            is_mock=True,
        )

    agent = create_agent(system_prompt=payload.system_prompt, config=config)
    prompt = build_user_prompt(payload.messages, config.history_limit)

    try:
        result = await agent.run(prompt)
    except Exception as e:
        logfire.error("Completion failed", model=config.model, error=str(e))
        raise CompletionError(f"Unable to reach the completion service: {e}") from e

    content = (result.output or "").strip()
    if not content:
        raise CompletionError("The completion service returned an empty response. Try again shortly.")

    logfire.info("Completion received", model=config.model, length=len(content))
    return CompletionResponse(content=content)
