"""Configuration for Nightshift."""

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

# Maximum number of retries for failed agent runs
MAX_RETRIES = 3

# Where project documents live unless overridden
DATA_DIR = Path("data")

COMPLETION_SETTINGS: ModelSettings = {
    "temperature": 0.4,  # Some warmth in chat, stable document structure
    "max_tokens": 4096,  # Room for the full document
}


@dataclass(frozen=True)
class CompletionConfig:
    """Explicit settings for the chat completion transport.

    The merge engine never reads these; only the component that calls the
    model does.
    """

    model: str | None = None
    temperature: float = COMPLETION_SETTINGS["temperature"]
    max_tokens: int = COMPLETION_SETTINGS["max_tokens"]
    history_limit: int = 10

    @classmethod
    def from_env(cls) -> "CompletionConfig":
        """Build a config from the environment.

        `MODEL` selects the pydantic-ai model (e.g. `openai:gpt-4o`). When it
        is unset the transport answers with canned mock replies.
        """
        model = os.environ.get("MODEL", "").strip() or None
        history_limit = int(os.environ.get("NIGHTSHIFT_HISTORY_LIMIT", "10"))
        return cls(model=model, history_limit=history_limit)

    @property
    def is_mock(self) -> bool:
        """Whether no model is configured."""
        return self.model is None

    def model_settings(self) -> ModelSettings:
        """Model settings for the pydantic-ai agent."""
        return {"temperature": self.temperature, "max_tokens": self.max_tokens}


def get_data_dir() -> Path:
    """Get the data directory path."""
    return Path(os.environ.get("NIGHTSHIFT_DATA_DIR", str(DATA_DIR)))


def create_agent(
    system_prompt: str,
    config: CompletionConfig,
    output_type: type | None = None,
) -> Agent:
    """Create a pydantic-ai Agent with standard configuration.

    Args:
        system_prompt: System prompt for the agent.
        config: Completion settings; `config.model` must be set.
        output_type: Optional structured output type.

    Returns:
        Configured Agent instance.
    """
    if config.model is None:
        raise ValueError("No model configured. Set MODEL, e.g. MODEL=openai:gpt-4o")

    kwargs: dict = {
        "system_prompt": system_prompt,
        "retries": MAX_RETRIES,
        "model_settings": config.model_settings(),
    }
    if output_type is not None:
        kwargs["output_type"] = output_type
    return Agent(config.model, **kwargs)
