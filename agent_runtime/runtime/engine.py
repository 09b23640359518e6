from __future__ import annotations

"""LangGraph step loop around ``GeneralAgent``.

``AgentRuntime`` runs the dispatch/execute/accumulate cycle for one session:

1. ``dispatch`` asks the agent for the next instruction.
2. ``call_llm`` / ``call_tool`` / ``call_tools_batch`` hand the instruction to
   the injected ``InstructionExecutor``, append the resulting messages, fold
   usage and cost into the state and build the next phase context.
3. ``request_human_approve`` parks the pending calls on the state and ends the
   graph with status ``waiting_for_human_input``. ``AgentRuntime.resume`` runs
   the approved ones and re-enters the loop.
4. ``finish`` ends the graph with status ``done`` (``error`` for error recovery).

The loop itself performs no I/O and schedules nothing concurrently; batch
concurrency is up to the executor. Every node replaces ``agent_state`` with a
new value instead of mutating it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from langgraph.graph import END, StateGraph

from ..core.config import Settings, get_settings
from ..schemas.context import AgentPhase, AgentRuntimeContext, LLMResultPayload, SessionContext
from ..schemas.instructions import FinishInstruction, ToolCallRequest
from ..schemas.state import AgentState, AgentStatus
from ..usage.accumulator import accumulate_llm, accumulate_tool
from .agent import ERROR_RECOVERY_REASON, GeneralAgent
from .models import InstructionExecutor, LLMCallResult, RuntimeOutcome, ToolCallResult, _GraphState

logger = logging.getLogger(__name__)

MAX_STEPS_REASON = "max_steps_exceeded"
UNKNOWN_MODEL_PART = "unknown"
REJECTED_CONTENT = "Tool call was not approved by the reviewer"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def tool_usage_name(tool_call: ToolCallRequest) -> str:
    """Name under which a tool call is accounted: ``<identifier>/<api_name>``."""
    return f"{tool_call.identifier}/{tool_call.api_name}"


def rejection_message(tool_call: ToolCallRequest) -> Dict[str, Any]:
    """Tool message answering a call the reviewer did not approve."""
    return {"role": "tool", "tool_call_id": tool_call.id, "content": REJECTED_CONTENT}


def session_context(state: AgentState) -> SessionContext:
    return SessionContext(
        session_id=state.session_id,
        status=state.status,
        step_count=state.step_count,
        message_count=len(state.messages),
    )


class AgentRuntime:
    """Drive a ``GeneralAgent`` until it finishes or pauses for approval.

    The runtime is orchestration only: decisions come from the agent, work is
    done by the executor, and accounting goes through ``agent_runtime.usage``.
    """

    def __init__(
        self,
        *,
        agent: GeneralAgent,
        executor: InstructionExecutor,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the AgentRuntime.

        Args:
            agent: The phase dispatcher deciding each step.
            executor: Performs model and tool calls.
            settings: Runtime settings; process settings are used when omitted.
        """
        self._agent = agent
        self._executor = executor
        self._settings = settings or get_settings()
        self._graph = self._build_graph()

    def _build_graph(self):
        """Build and compile the LangGraph state machine."""
        g: StateGraph = StateGraph(_GraphState)
        g.add_node("dispatch", self._node_dispatch)
        g.add_node("call_llm", self._node_call_llm)
        g.add_node("call_tool", self._node_call_tool)
        g.add_node("call_tools_batch", self._node_call_tools_batch)
        g.add_node("request_human_approve", self._node_request_human_approve)
        g.add_node("finish", self._node_finish)

        g.set_entry_point("dispatch")
        g.add_conditional_edges(
            "dispatch",
            self._route_after_dispatch,
            {
                "call_llm": "call_llm",
                "call_tool": "call_tool",
                "call_tools_batch": "call_tools_batch",
                "request_human_approve": "request_human_approve",
                "finish": "finish",
            },
        )
        g.add_edge("call_llm", "dispatch")
        g.add_edge("call_tool", "dispatch")
        g.add_edge("call_tools_batch", "dispatch")
        g.add_edge("request_human_approve", END)
        g.add_edge("finish", END)
        return g.compile()

    def _step_limit(self, state: AgentState) -> int:
        return state.max_steps if state.max_steps is not None else self._settings.max_steps

    async def run(
        self,
        state: AgentState,
        context: Optional[AgentRuntimeContext] = None,
    ) -> RuntimeOutcome:
        """
        Run the step loop from ``context`` (``user_input`` when omitted).

        Returns:
            The final state and the instruction that ended the loop.
        """
        ctx = context or AgentRuntimeContext(phase=AgentPhase.user_input.value, session=session_context(state))
        logger.info(f"Starting runtime loop for session {state.session_id} at phase '{ctx.phase}'")
        return await self._invoke(state, ctx)

    async def resume(self, state: AgentState, approved_ids: Iterable[str]) -> RuntimeOutcome:
        """Resume a run paused for human approval.

        Pending calls whose id is in ``approved_ids`` are executed through the
        executor and accounted like any other tool call. The remaining pending
        calls are answered with a rejection tool message so the model sees the
        outcome of every call it requested. ``pending_tools_calling`` is then
        cleared and the loop continues at ``tool_result`` (or
        ``tools_batch_result`` when more than one call ran).

        Raises:
            ValueError: If the state is not waiting for approval, or an id in
                ``approved_ids`` is not one of the pending calls.
        """
        if state.status != AgentStatus.waiting_for_human_input or not state.pending_tools_calling:
            raise ValueError("no tool calls awaiting approval")
        approved = set(approved_ids)
        unknown = approved - {c.id for c in state.pending_tools_calling}
        if unknown:
            raise ValueError(f"unknown pending tool call id(s): {', '.join(sorted(unknown))}")

        to_run = [c for c in state.pending_tools_calling if c.id in approved]
        rejected = [c for c in state.pending_tools_calling if c.id not in approved]
        logger.info(
            f"Resuming session {state.session_id}: {len(to_run)} approved, {len(rejected)} rejected tool call(s)"
        )

        agent_state = state.model_copy(
            update={
                "status": AgentStatus.running,
                "pending_tools_calling": [],
                "messages": [*state.messages, *(rejection_message(c) for c in rejected)],
                "last_modified": _utc_now(),
            }
        )
        if len(to_run) == 1:
            result = await self._executor.call_tool(to_run[0], agent_state)
            agent_state = self._apply_tool_result(agent_state, to_run[0], result)
        elif to_run:
            agent_state = await self._execute_batch(agent_state, to_run)

        phase = AgentPhase.tools_batch_result if len(to_run) > 1 else AgentPhase.tool_result
        ctx = AgentRuntimeContext(phase=phase.value, session=session_context(agent_state))
        return await self._invoke(agent_state, ctx)

    async def _invoke(self, state: AgentState, ctx: AgentRuntimeContext) -> RuntimeOutcome:
        # dispatch + execute per step, plus the terminal node
        recursion_limit = 2 * self._step_limit(state) + 10
        initial: _GraphState = {"agent_state": state, "context": ctx, "instruction": None}
        result = await self._graph.ainvoke(initial, config={"recursion_limit": recursion_limit})
        return RuntimeOutcome(state=result["agent_state"], instruction=result.get("instruction"))

    async def _node_dispatch(self, state: _GraphState) -> Dict[str, Any]:
        """Ask the agent for the next instruction, enforcing the step limit."""
        agent_state = state["agent_state"]
        limit = self._step_limit(agent_state)
        if agent_state.step_count >= limit:
            logger.warning(f"Session {agent_state.session_id} reached the step limit ({limit})")
            return {
                "instruction": FinishInstruction(
                    reason=MAX_STEPS_REASON, reason_detail=f"Maximum steps exceeded: {limit}"
                )
            }

        instruction = self._agent.runner(state["context"], agent_state)
        next_state = agent_state.model_copy(
            update={
                "status": AgentStatus.running,
                "step_count": agent_state.step_count + 1,
                "last_modified": _utc_now(),
            }
        )
        logger.debug(f"Step {next_state.step_count} of session {next_state.session_id}: {instruction.type}")
        return {"agent_state": next_state, "instruction": instruction}

    def _route_after_dispatch(self, state: _GraphState) -> str:
        return state["instruction"].type

    async def _node_call_llm(self, state: _GraphState) -> Dict[str, Any]:
        """Execute the model call and fold its usage into the state."""
        payload = state["instruction"].payload
        agent_state = state["agent_state"]
        result = await self._executor.call_llm(payload, agent_state)
        if not isinstance(result, LLMCallResult):
            result = LLMCallResult.model_validate(result)

        if result.message is not None:
            agent_state = agent_state.model_copy(update={"messages": [*agent_state.messages, result.message]})
        if result.usage is not None:
            agent_state = accumulate_llm(
                agent_state,
                result.provider or payload.provider or UNKNOWN_MODEL_PART,
                result.model or payload.model or UNKNOWN_MODEL_PART,
                result.usage,
            )

        context = AgentRuntimeContext(
            phase=AgentPhase.llm_result.value,
            session=session_context(agent_state),
            payload=LLMResultPayload(
                has_tools_calling=bool(result.tools_calling),
                result=result.message,
                tools_calling=result.tools_calling,
            ),
        )
        return {"agent_state": agent_state, "context": context}

    def _apply_tool_result(self, agent_state: AgentState, tool_call: ToolCallRequest, result: Any) -> AgentState:
        if not isinstance(result, ToolCallResult):
            result = ToolCallResult.model_validate(result)
        if result.message is not None:
            agent_state = agent_state.model_copy(update={"messages": [*agent_state.messages, result.message]})
        return accumulate_tool(
            agent_state,
            tool_usage_name(tool_call),
            result.execution_time_ms,
            result.success,
            result.cost,
        )

    async def _execute_batch(self, agent_state: AgentState, tool_calls: List[ToolCallRequest]) -> AgentState:
        results = await self._executor.call_tools_batch(tool_calls, agent_state)
        if len(results) != len(tool_calls):
            raise ValueError(f"executor returned {len(results)} results for {len(tool_calls)} tool calls")
        for tool_call, result in zip(tool_calls, results):
            agent_state = self._apply_tool_result(agent_state, tool_call, result)
        return agent_state

    async def _node_call_tool(self, state: _GraphState) -> Dict[str, Any]:
        """Execute a single tool call."""
        tool_call = state["instruction"].payload
        agent_state = state["agent_state"]
        result = await self._executor.call_tool(tool_call, agent_state)
        agent_state = self._apply_tool_result(agent_state, tool_call, result)
        context = AgentRuntimeContext(phase=AgentPhase.tool_result.value, session=session_context(agent_state))
        return {"agent_state": agent_state, "context": context}

    async def _node_call_tools_batch(self, state: _GraphState) -> Dict[str, Any]:
        """Execute a batch of tool calls; results must come back in request order."""
        agent_state = await self._execute_batch(state["agent_state"], state["instruction"].payload)
        context = AgentRuntimeContext(
            phase=AgentPhase.tools_batch_result.value, session=session_context(agent_state)
        )
        return {"agent_state": agent_state, "context": context}

    async def _node_request_human_approve(self, state: _GraphState) -> Dict[str, Any]:
        """Park the pending calls on the state and stop."""
        instruction = state["instruction"]
        agent_state = state["agent_state"].model_copy(
            update={
                "status": AgentStatus.waiting_for_human_input,
                "pending_tools_calling": list(instruction.pending_tools_calling),
                "last_modified": _utc_now(),
            }
        )
        logger.info(
            f"Session {agent_state.session_id} waiting for approval of "
            f"{len(instruction.pending_tools_calling)} tool call(s)"
        )
        return {"agent_state": agent_state}

    async def _node_finish(self, state: _GraphState) -> Dict[str, Any]:
        """Mark the run finished."""
        instruction = state["instruction"]
        status = AgentStatus.error if instruction.reason == ERROR_RECOVERY_REASON else AgentStatus.done
        agent_state = state["agent_state"].model_copy(update={"status": status, "last_modified": _utc_now()})
        logger.info(f"Session {agent_state.session_id} finished: {instruction.reason}")
        return {"agent_state": agent_state}
