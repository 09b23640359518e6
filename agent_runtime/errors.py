"""Error types for the agent runtime package.

Only caller-side precondition violations are raised. Runtime conditions such
as unknown phases, unknown tools, or malformed tool arguments are handled by
graceful degradation and never surface as exceptions.
"""

from __future__ import annotations


class AgentRuntimeError(Exception):
    """Base error for all agent runtime exceptions."""


class UsageNotInitializedError(AgentRuntimeError):
    """Raised when an accumulation is applied to a state without usage stats."""

    def __init__(self) -> None:
        super().__init__("AgentState.usage is not initialized")


class CostNotInitializedError(AgentRuntimeError):
    """Raised when a cost is supplied but the state carries no cost stats."""

    def __init__(self) -> None:
        super().__init__("AgentState.cost is not initialized")
