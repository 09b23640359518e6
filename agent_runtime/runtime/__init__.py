"""Phase dispatch and the step loop built on it.

- ``GeneralAgent`` is the dispatcher: given ``(context, state)`` it returns the
  next ``Instruction`` (call the model, call tools, request human approval, or
  finish). It is pure and synchronous.
- ``AgentRuntime`` is an optional LangGraph loop that feeds instructions to an
  ``InstructionExecutor`` and folds results back into the state through
  ``agent_runtime.usage``.
"""

from .agent import GeneralAgent
from .engine import AgentRuntime
from .models import InstructionExecutor, LLMCallResult, RuntimeOutcome, ToolCallResult

__all__ = [
    "GeneralAgent",
    "AgentRuntime",
    "InstructionExecutor",
    "LLMCallResult",
    "ToolCallResult",
    "RuntimeOutcome",
]
