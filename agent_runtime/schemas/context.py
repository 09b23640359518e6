"""Dispatch input: the phase-tagged context handed to the dispatcher."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import Field

from .base import BaseSchema
from .instructions import ToolCallRequest
from .state import AgentStatus


class AgentPhase(str, Enum):
    """Phases the dispatcher recognises. Any other string is accepted and
    routed to error recovery."""

    user_input = "user_input"
    llm_result = "llm_result"
    tool_result = "tool_result"
    tools_batch_result = "tools_batch_result"


class SessionContext(BaseSchema):
    session_id: str
    status: AgentStatus = AgentStatus.running
    step_count: int = 0
    message_count: int = 0


class LLMResultPayload(BaseSchema):
    """Payload of the ``llm_result`` phase."""

    has_tools_calling: bool = False
    result: Any = None
    tools_calling: List[ToolCallRequest] = Field(default_factory=list)


class AgentRuntimeContext(BaseSchema):
    phase: str
    session: Optional[SessionContext] = None
    payload: Any = None
