"""Decision engine of a step-wise LLM agent.

This package decides what an agent does next; it never does the work itself.

Design overview
---------------

- ``runtime.GeneralAgent`` (phase dispatcher): maps a phase-tagged context and
  the current ``AgentState`` to exactly one ``Instruction``: ``call_llm``,
  ``call_tool``, ``call_tools_batch``, ``request_human_approve`` or ``finish``.
- ``policy`` (intervention policy engine): decides per tool call whether a
  human must approve it, from the tool manifest's
  ``human_intervention_config``.
- ``usage`` (usage/cost accumulator): folds token, tool and cost deltas into
  the state, returning a new state each time.

Typical usage
-------------

An external executor loops:

1. ``instruction = agent.runner(context, state)``
2. perform the model or tool call the instruction asks for,
3. ``state = accumulate_llm(...)`` / ``accumulate_tool(...)``,
4. build the next context and repeat until ``finish``.

``runtime.AgentRuntime`` packages that loop as a LangGraph graph around an
injected ``InstructionExecutor``.
"""

from .errors import AgentRuntimeError, CostNotInitializedError, UsageNotInitializedError
from .policy import InterventionPolicyEngine, evaluate_intervention, match_pattern
from .runtime import AgentRuntime, GeneralAgent
from .schemas import (
    AgentRuntimeContext,
    AgentState,
    AgentStatus,
    GeneralAgentConfig,
    Instruction,
    ToolCallRequest,
    ToolManifest,
    create_initial_state,
)
from .usage import accumulate_llm, accumulate_tool, merge_model_usage

__all__ = [
    "AgentState",
    "AgentStatus",
    "AgentRuntimeContext",
    "GeneralAgentConfig",
    "Instruction",
    "ToolCallRequest",
    "ToolManifest",
    "create_initial_state",
    "GeneralAgent",
    "AgentRuntime",
    "InterventionPolicyEngine",
    "evaluate_intervention",
    "match_pattern",
    "accumulate_llm",
    "accumulate_tool",
    "merge_model_usage",
    # Errors
    "AgentRuntimeError",
    "UsageNotInitializedError",
    "CostNotInitializedError",
]
