"""``AgentState``: the value threaded through dispatch/execute/accumulate cycles.

The state is treated as immutable at every step. Operations that "change" it
return a new instance built from ``model_copy`` and leave the input untouched.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import Field

from ..core.config import get_settings
from .base import BaseSchema
from .instructions import ToolCallRequest
from .manifest import ToolManifest
from .usage import CostStats, LLMCost, ToolsCost, UsageStats


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AgentStatus(str, Enum):
    idle = "idle"
    running = "running"
    waiting_for_human_input = "waiting_for_human_input"
    done = "done"
    error = "error"
    interrupted = "interrupted"


class AgentState(BaseSchema):
    session_id: str
    status: AgentStatus = AgentStatus.idle
    step_count: int = 0

    messages: List[Dict[str, Any]] = Field(default_factory=list)
    tools: List[Dict[str, Any]] = Field(default_factory=list)
    tool_manifest_map: Dict[str, ToolManifest] = Field(default_factory=dict)

    usage: Optional[UsageStats] = None
    cost: Optional[CostStats] = None

    max_steps: Optional[int] = Field(default=None, ge=1)
    pending_tools_calling: List[ToolCallRequest] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=_utc_now)
    last_modified: datetime = Field(default_factory=_utc_now)


def create_initial_state(
    session_id: str,
    *,
    messages: Iterable[Mapping[str, Any]] = (),
    tools: Iterable[Mapping[str, Any]] = (),
    tool_manifest_map: Optional[Mapping[str, Any]] = None,
    max_steps: Optional[int] = None,
    currency: Optional[str] = None,
) -> AgentState:
    """Create a fresh session state with zeroed usage and cost counters.

    ``tool_manifest_map`` values may be ``ToolManifest`` instances or raw
    mappings; raw mappings are validated here, once. ``currency`` defaults to the
    ``cost_currency`` setting.
    """
    if currency is None:
        currency = get_settings().cost_currency
    now = _utc_now()
    return AgentState.model_validate(
        {
            "session_id": session_id,
            "status": AgentStatus.idle,
            "step_count": 0,
            "messages": [dict(m) for m in messages],
            "tools": [dict(t) for t in tools],
            "tool_manifest_map": dict(tool_manifest_map or {}),
            "usage": UsageStats(),
            "cost": CostStats(
                llm=LLMCost(currency=currency),
                tools=ToolsCost(currency=currency),
                currency=currency,
            ),
            "max_steps": max_steps,
            "created_at": now,
            "last_modified": now,
        }
    )
