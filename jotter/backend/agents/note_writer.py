"""
Note Writer Agent.

Drafts a Markdown note from a handful of optional hints (title,
synopsis, audience, tone, length). Model, instructions, and length
targets are read from config/agents/note_writer.yaml.

Usage:
    from jotter.backend.agents.note_writer import NoteDraftRequest, write_note
    text = await write_note(NoteDraftRequest(title="Photosynthesis", length="short"))
"""

from dataclasses import dataclass
from typing import Any

import yaml
from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.settings import ModelSettings

from jotter.backend.core.config import find_project_root, get_app_config, get_settings
from jotter.backend.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NoteDraftRequest:
    """What the user asked the writer for. Every field is optional."""

    title: str | None = None
    synopsis: str | None = None
    audience: str | None = None
    tone: str | None = None
    length: str | None = None


def _load_agent_config() -> dict[str, Any]:
    """Load note writer configuration from YAML."""
    config_path = find_project_root() / "config" / "agents" / "note_writer.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Agent config not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def build_prompt(request: NoteDraftRequest, config: dict[str, Any]) -> str:
    """Compose the user prompt from the request, falling back to configured defaults."""
    defaults = config.get("defaults", {})
    lengths = config.get("lengths", {})

    length = request.length or defaults.get("length", "medium")
    audience = request.audience or defaults.get("audience", "a general reader")
    tone = request.tone or defaults.get("tone", "clear and informative")

    lines = []
    if request.title:
        lines.append(f"Write a note titled \"{request.title}\".")
    else:
        lines.append("Write a note on a topic of your choice and give it a title.")
    if request.synopsis:
        lines.append(f"It should cover: {request.synopsis}")
    lines.append(f"Audience: {audience}.")
    lines.append(f"Tone: {tone}.")
    if length in lengths:
        lines.append(f"Length: {length}, roughly {lengths[length]} words.")
    else:
        lines.append(f"Length: {length}.")
    return "\n".join(lines)


def build_agent(
    model: Model | str,
    instructions: str,
    timeout: float | None = None,
) -> Agent[None, str]:
    """Create a note writer agent for the given model."""
    model_settings = ModelSettings(timeout=timeout) if timeout else None
    return Agent(
        model,
        output_type=str,
        instructions=instructions,
        model_settings=model_settings,
    )


_agent: Agent[None, str] | None = None
_config: dict[str, Any] | None = None


def _get_agent() -> tuple[Agent[None, str], dict[str, Any]]:
    """Create the agent on first use."""
    global _agent, _config
    if _agent is not None and _config is not None:
        return _agent, _config

    config = _load_agent_config()
    provider = AnthropicProvider(api_key=get_settings().anthropic_api_key)
    model = AnthropicModel(config["model"], provider=provider)

    _agent = build_agent(
        model,
        config["instructions"],
        timeout=get_app_config().application.timeouts.external_api,
    )
    _config = config
    logger.info("Note writer agent initialized", extra={"model": config["model"]})
    return _agent, _config


async def write_note(
    request: NoteDraftRequest,
    agent: Agent[None, str] | None = None,
    config: dict[str, Any] | None = None,
) -> str:
    """
    Draft a note.

    Args:
        request: Drafting hints
        agent: Agent to run; defaults to the configured note writer
        config: Agent configuration; defaults to note_writer.yaml

    Returns:
        The note as Markdown text
    """
    if agent is None:
        agent, loaded_config = _get_agent()
        config = config or loaded_config

    prompt = build_prompt(request, config or {})
    logger.info(
        "Note writer invoked",
        extra={"source": "agent", "title": request.title, "length": request.length},
    )

    result = await agent.run(prompt)

    logger.info(
        "Note writer completed",
        extra={
            "source": "agent",
            "usage": {
                "requests": result.usage().requests,
                "input_tokens": result.usage().input_tokens,
                "output_tokens": result.usage().output_tokens,
            },
        },
    )
    return result.output.strip()
