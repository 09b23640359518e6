"""Human intervention policy for tool calls.

The policy layer decides, per tool call, whether execution must pause for a
human. It is kept separate from dispatch so that:

- tool registries own the approval rules (``ToolManifest.human_intervention_config``),
- the decision is a standalone, testable pure function.

Components
----------

- ``evaluate_intervention``: resolve the policy token for one tool call.
- ``match_pattern``: ``:``-segmented wildcard matching used by rule lists.
- ``InterventionPolicyEngine``: evaluates and partitions a batch of tool calls
  into pending (``always``) and approved calls.
"""

from .intervention import (
    InterventionPolicyEngine,
    evaluate_intervention,
    evaluate_rules,
    match_pattern,
)
from .models import InterventionDecision

__all__ = [
    "InterventionPolicyEngine",
    "InterventionDecision",
    "evaluate_intervention",
    "evaluate_rules",
    "match_pattern",
]
