from __future__ import annotations

"""Phase dispatcher for a general-purpose tool-using agent.

``GeneralAgent.runner`` maps ``(context, state)`` to the next ``Instruction``:

- ``user_input`` / ``tool_result`` / ``tools_batch_result``: it is the model's
  turn, so emit ``call_llm`` with the full message history and tool schema.
- ``llm_result`` without tool calls: ``finish`` (completed).
- ``llm_result`` with tool calls: evaluate intervention per call. If any call
  needs approval, emit ``request_human_approve`` carrying only those calls.
  Calls that did not need approval are not part of that instruction and are
  not executed in this step; after the human decision the executor hands the
  turn back to the model, which re-issues whatever is still needed. Without
  pending calls, one call becomes ``call_tool`` and several become
  ``call_tools_batch`` in their original order.
- anything else: ``finish`` (error_recovery). Unknown phases never raise.

The dispatcher never mutates the state and performs no I/O.
"""

import logging
from typing import Any, Mapping, Optional, Union

from ..policy.intervention import InterventionPolicyEngine
from ..schemas.config import GeneralAgentConfig
from ..schemas.context import AgentPhase, AgentRuntimeContext, LLMResultPayload
from ..schemas.instructions import (
    CallLLMInstruction,
    CallLLMPayload,
    CallToolInstruction,
    CallToolsBatchInstruction,
    FinishInstruction,
    Instruction,
    RequestHumanApproveInstruction,
    ToolCallRequest,
)
from ..schemas.state import AgentState

logger = logging.getLogger(__name__)

COMPLETED_REASON = "completed"
COMPLETED_DETAIL = "General agent completed successfully"
ERROR_RECOVERY_REASON = "error_recovery"
HUMAN_APPROVAL_REASON = "Tools require human approval"

_MODEL_TURN_PHASES = frozenset(
    {AgentPhase.user_input.value, AgentPhase.tool_result.value, AgentPhase.tools_batch_result.value}
)


class GeneralAgent:
    """Decide the next action of a step-wise LLM agent.

    The agent owns only its static ``GeneralAgentConfig`` and an
    ``InterventionPolicyEngine``; everything else comes from the state passed
    to ``runner``, so identical inputs always yield identical instructions.
    """

    def __init__(
        self,
        config: Union[GeneralAgentConfig, Mapping[str, Any]],
        *,
        policy_engine: Optional[InterventionPolicyEngine] = None,
    ) -> None:
        """
        Initialize the GeneralAgent.

        Args:
            config: Agent configuration (model runtime config, session and user ids).
            policy_engine: Intervention engine; a default engine is used when omitted.
        """
        self._config = config if isinstance(config, GeneralAgentConfig) else GeneralAgentConfig.model_validate(config)
        self._policy = policy_engine or InterventionPolicyEngine()

    def get_config(self) -> GeneralAgentConfig:
        """Return the underlying configuration object."""
        return self._config

    def check_tool_intervention(self, tool_call: Union[ToolCallRequest, Mapping[str, Any]], state: AgentState) -> str:
        """Resolve the intervention policy for a single tool call."""
        call = tool_call if isinstance(tool_call, ToolCallRequest) else ToolCallRequest.model_validate(tool_call)
        return self._policy.evaluate(call, state)

    def runner(self, context: Union[AgentRuntimeContext, Mapping[str, Any]], state: AgentState) -> Instruction:
        """
        Produce the next instruction for the given phase.

        Args:
            context: Phase-tagged dispatch context (model or plain mapping).
            state: Current agent state; read, never modified.

        Returns:
            Exactly one ``Instruction``.
        """
        ctx = context if isinstance(context, AgentRuntimeContext) else AgentRuntimeContext.model_validate(context)
        phase = ctx.phase.value if isinstance(ctx.phase, AgentPhase) else str(ctx.phase)
        logger.debug(f"Dispatching phase '{phase}' for session {self._config.session_id}")

        if phase in _MODEL_TURN_PHASES:
            return self._call_llm(state)

        if phase == AgentPhase.llm_result.value:
            return self._handle_llm_result(ctx.payload, state)

        logger.warning(f"Unknown phase '{phase}' for session {self._config.session_id}, finishing")
        return FinishInstruction(reason=ERROR_RECOVERY_REASON, reason_detail=f"Unknown phase: {phase}")

    def _call_llm(self, state: AgentState) -> CallLLMInstruction:
        runtime = self._config.model_runtime_config
        return CallLLMInstruction(
            payload=CallLLMPayload(
                messages=state.messages,
                model=runtime.model if runtime is not None else None,
                provider=runtime.provider if runtime is not None else None,
                tools=state.tools,
            )
        )

    def _handle_llm_result(self, payload: Any, state: AgentState) -> Instruction:
        result = self._as_llm_result(payload)
        if result is None or not result.has_tools_calling or not result.tools_calling:
            return FinishInstruction(reason=COMPLETED_REASON, reason_detail=COMPLETED_DETAIL)

        pending, approved = self._policy.partition(result.tools_calling, state)
        if pending:
            logger.info(
                f"{len(pending)} tool call(s) require human approval, "
                f"{len(approved)} approved call(s) deferred for session {self._config.session_id}"
            )
            return RequestHumanApproveInstruction(pending_tools_calling=pending, reason=HUMAN_APPROVAL_REASON)

        if len(approved) == 1:
            return CallToolInstruction(payload=approved[0])
        return CallToolsBatchInstruction(payload=list(approved))

    @staticmethod
    def _as_llm_result(payload: Any) -> Optional[LLMResultPayload]:
        if payload is None or isinstance(payload, LLMResultPayload):
            return payload
        return LLMResultPayload.model_validate(payload)
