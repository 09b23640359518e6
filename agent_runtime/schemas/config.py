"""Domain models for agent configuration."""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, Field

from .base import BaseSchema


class ModelRuntimeConfig(BaseSchema):
    """Model selection passed through to ``call_llm`` instructions."""

    model: Optional[str] = Field(default=None, description="Model name (e.g., gpt-4o, claude-3-5-sonnet)")
    provider: Optional[str] = Field(default=None, description="Model provider (openai, anthropic, google)")


class GeneralAgentConfig(BaseSchema):
    """Static configuration of a ``GeneralAgent``.

    Only ``session_id`` is required. An absent ``model_runtime_config`` is
    passed through as unset model/provider, never defaulted or rejected.
    """

    model_config = ConfigDict(protected_namespaces=())

    model_runtime_config: Optional[ModelRuntimeConfig] = Field(default=None, description="Model settings")
    session_id: str = Field(..., description="Session identifier")
    user_id: Optional[str] = Field(default=None, description="Owning user identifier")
