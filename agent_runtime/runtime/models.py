from __future__ import annotations

"""Executor contract, call results and LangGraph state types.

The step loop is dependency-injected:

- ``InstructionExecutor`` performs the model and tool calls the dispatcher
  asks for. It is the only place where I/O or concurrency happens.
- ``LLMCallResult`` / ``ToolCallResult`` are what the executor reports back;
  the loop folds them into the state with the usage accumulator.
- ``_GraphState`` is the state passed between LangGraph nodes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, NotRequired, Optional, Protocol, Required, TypedDict

from pydantic import Field

from ..schemas.base import BaseSchema
from ..schemas.context import AgentRuntimeContext
from ..schemas.instructions import CallLLMPayload, ToolCallRequest
from ..schemas.state import AgentState
from ..schemas.usage import ModelUsage


class LLMCallResult(BaseSchema):
    """Outcome of a ``call_llm`` instruction.

    ``provider`` and ``model`` override the values from the instruction
    payload when the executor resolved a concrete model.
    """

    message: Optional[Dict[str, Any]] = None
    tools_calling: List[ToolCallRequest] = Field(default_factory=list)
    usage: Optional[ModelUsage] = None
    provider: Optional[str] = None
    model: Optional[str] = None


class ToolCallResult(BaseSchema):
    """Outcome of one tool execution."""

    call_id: str
    message: Optional[Dict[str, Any]] = None
    execution_time_ms: float = 0
    success: bool = True
    cost: Optional[float] = None


class InstructionExecutor(Protocol):
    """Performs the external work behind each instruction."""

    async def call_llm(self, payload: CallLLMPayload, state: AgentState) -> LLMCallResult: ...

    async def call_tool(self, tool_call: ToolCallRequest, state: AgentState) -> ToolCallResult: ...

    async def call_tools_batch(
        self, tool_calls: List[ToolCallRequest], state: AgentState
    ) -> List[ToolCallResult]: ...


@dataclass(frozen=True)
class RuntimeOutcome:
    """Final state of a run and the last instruction that ended it."""

    state: AgentState
    instruction: Any


class _GraphState(TypedDict):
    """LangGraph state for a single runtime invocation.

    Required keys:

    - ``agent_state``: the current ``AgentState`` value (replaced, never mutated).
    - ``context``: the phase-tagged context for the next dispatch.

    Optional keys:

    - ``instruction``: the instruction produced by the latest dispatch.
    """

    agent_state: Required[AgentState]
    context: Required[AgentRuntimeContext]
    instruction: NotRequired[Any]
