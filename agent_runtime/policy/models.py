from __future__ import annotations

from dataclasses import dataclass

from ..schemas.instructions import ToolCallRequest
from ..schemas.manifest import InterventionPolicy


@dataclass(frozen=True)
class InterventionDecision:
    """
    Result of an intervention evaluation for a single tool call.

    Attributes:
        tool_call: The evaluated tool call request.
        policy: The resolved policy token (``always``, ``never``, or a raw rule token).
    """
    tool_call: ToolCallRequest
    policy: str

    @property
    def require_approval(self) -> bool:
        """Only ``always`` gates a call; every other token lets it proceed."""
        return self.policy == InterventionPolicy.always.value
