"""Usage and cost accounting models carried on ``AgentState``.

``ModelUsage`` is the sparse per-call delta reported by a model runtime.
``UsageStats`` and ``CostStats`` are the running aggregates folded by
``agent_runtime.usage``.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from .base import BaseSchema

DEFAULT_CURRENCY = "USD"


class ModelUsage(BaseSchema):
    """Sparse token/cost breakdown of one or more model calls.

    Every field is optional; a field that was never reported stays ``None`` and
    is omitted from ``to_wire()``.
    """

    model_config = ConfigDict(extra="ignore")

    input_cached_tokens: Optional[int] = None
    input_cache_miss_tokens: Optional[int] = None
    input_write_cache_tokens: Optional[int] = None
    input_text_tokens: Optional[int] = None
    input_image_tokens: Optional[int] = None
    input_audio_tokens: Optional[int] = None
    input_citation_tokens: Optional[int] = None
    output_text_tokens: Optional[int] = None
    output_image_tokens: Optional[int] = None
    output_audio_tokens: Optional[int] = None
    output_reasoning_tokens: Optional[int] = None
    accepted_prediction_tokens: Optional[int] = None
    rejected_prediction_tokens: Optional[int] = None
    total_input_tokens: Optional[int] = None
    total_output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    cost: Optional[float] = None


class TokenCounts(BaseSchema):
    input: int = Field(default=0, ge=0)
    output: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class LLMUsage(BaseSchema):
    tokens: TokenCounts = Field(default_factory=TokenCounts)
    api_calls: int = Field(default=0, ge=0)


class ToolUsageEntry(BaseSchema):
    """Per-tool usage counters, unique by ``name``."""

    name: str
    calls: int = 0
    errors: int = 0
    total_time_ms: float = 0


class ToolsUsage(BaseSchema):
    total_calls: int = 0
    total_time_ms: float = 0
    by_tool: List[ToolUsageEntry] = Field(default_factory=list)


class UsageStats(BaseSchema):
    """Running token and invocation counters for one agent session."""

    llm: LLMUsage = Field(default_factory=LLMUsage)
    tools: ToolsUsage = Field(default_factory=ToolsUsage)


class ModelCostEntry(BaseSchema):
    """Per-model cost entry keyed by ``id`` (``"<provider>/<model>"``)."""

    id: str
    provider: str
    model: str
    total_cost: float = 0.0
    usage: ModelUsage = Field(default_factory=ModelUsage)


class ToolCostEntry(BaseSchema):
    """Per-tool cost entry, unique by ``name``."""

    name: str
    calls: int = 0
    total_cost: float = 0.0
    currency: str = DEFAULT_CURRENCY


class LLMCost(BaseSchema):
    total: float = 0.0
    by_model: List[ModelCostEntry] = Field(default_factory=list)
    currency: str = DEFAULT_CURRENCY


class ToolsCost(BaseSchema):
    total: float = 0.0
    by_tool: List[ToolCostEntry] = Field(default_factory=list)
    currency: str = DEFAULT_CURRENCY


class CostStats(BaseSchema):
    """Running monetary totals. ``total`` always equals ``llm.total + tools.total``."""

    llm: LLMCost = Field(default_factory=LLMCost)
    tools: ToolsCost = Field(default_factory=ToolsCost)
    total: float = 0.0
    currency: str = DEFAULT_CURRENCY
    calculated_at: Optional[datetime] = None
