from __future__ import annotations

"""Human intervention policy evaluation for tool calls.

``evaluate_intervention`` decides whether one tool call must pause for human
approval. It is a pure function of the call and the state's manifest map and
is exposed on its own so it can be tested without going through dispatch.

Resolution order
----------------

1. No manifest for ``tool_call.identifier``: ``never``.
2. No ``human_intervention_config`` on the manifest: ``never``.
3. Literal config (``always``/``never``): returned as-is.
4. Rule list: arguments are JSON-decoded and rules are tried in declaration
   order. The first rule whose ``match`` holds (or that has no ``match``)
   wins. If nothing fires the result is ``never``.

Unknown tools and undecodable arguments both resolve permissively. That
matches the behaviour tool registries have relied on so far.
"""

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from ..schemas.instructions import ToolCallRequest
from ..schemas.manifest import InterventionPolicy, InterventionRule, ToolManifest
from ..schemas.state import AgentState
from .models import InterventionDecision

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = ":"
WILDCARD = "*"


def _segment_matches(value: str, segment: str) -> bool:
    if WILDCARD not in segment:
        return value == segment
    regex = ".*".join(re.escape(part) for part in segment.split(WILDCARD))
    return re.fullmatch(regex, value, flags=re.DOTALL) is not None


def match_pattern(value: str, pattern: str) -> bool:
    """
    Match an argument value against a ``:``-segmented pattern.

    Both strings are split on ``:`` and compared segment by segment. A ``*``
    segment matches any value segment, and when it is the final pattern
    segment it also absorbs any extra trailing value segments. Other segments
    must match exactly, with ``*`` inside them acting as a glob wildcard.

    Examples:
        ``match_pattern("ls:", "ls:*")`` is True,
        ``match_pattern("rm:-rf", "rm:*")`` is True,
        ``match_pattern("npm install", "ls:*")`` is False.
    """
    pattern_segments = pattern.split(SEGMENT_SEPARATOR)
    value_segments = value.split(SEGMENT_SEPARATOR)

    if len(pattern_segments) > len(value_segments):
        return False
    if len(pattern_segments) < len(value_segments) and pattern_segments[-1] != WILDCARD:
        return False

    last = len(pattern_segments) - 1
    for idx, segment in enumerate(pattern_segments):
        if segment == WILDCARD:
            if idx == last:
                return True
            continue
        if not _segment_matches(value_segments[idx], segment):
            return False
    return True


def _parse_arguments(raw: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(raw) if raw else {}
    except (TypeError, ValueError) as e:
        logger.debug(f"Tool arguments are not valid JSON, evaluating without argument context: {e}")
        return {}
    if not isinstance(parsed, dict):
        logger.debug(f"Tool arguments decoded to {type(parsed).__name__}, evaluating without argument context")
        return {}
    return parsed


def _rule_matches(match: Mapping[str, str], args: Mapping[str, Any]) -> bool:
    for key, pattern in match.items():
        if key not in args:
            return False
        value = args[key]
        if not match_pattern(value if isinstance(value, str) else str(value), pattern):
            return False
    return True


def _manifest_for(tool_call: ToolCallRequest, state: AgentState) -> ToolManifest | None:
    manifest = state.tool_manifest_map.get(tool_call.identifier)
    if manifest is None or isinstance(manifest, ToolManifest):
        return manifest
    # States assembled with model_copy(update=...) skip validation.
    return ToolManifest.model_validate(manifest)


def evaluate_rules(rules: Iterable[InterventionRule], args: Mapping[str, Any]) -> str:
    """Return the policy of the first rule that fires, else ``never``."""
    for rule in rules:
        if rule.match is None or _rule_matches(rule.match, args):
            return rule.policy
    return InterventionPolicy.never.value


def evaluate_intervention(tool_call: ToolCallRequest, state: AgentState) -> str:
    """
    Resolve the intervention policy for one tool call.

    Args:
        tool_call: The tool call requested by the model.
        state: The agent state holding ``tool_manifest_map``.

    Returns:
        ``"always"``, ``"never"``, or the raw policy token of the rule that fired.
    """
    manifest = _manifest_for(tool_call, state)
    if manifest is None:
        return InterventionPolicy.never.value

    config = manifest.human_intervention_config
    if config is None:
        return InterventionPolicy.never.value
    if isinstance(config, InterventionPolicy):
        return config.value

    return evaluate_rules(config, _parse_arguments(tool_call.arguments))


class InterventionPolicyEngine:
    """Evaluate and partition tool calls by their intervention policy.

    The engine holds no state of its own; every decision is a function of the
    tool call and the ``AgentState`` passed in.
    """

    def evaluate(self, tool_call: ToolCallRequest, state: AgentState) -> str:
        """Return the resolved policy token for ``tool_call``."""
        return evaluate_intervention(tool_call, state)

    def decide(self, tool_call: ToolCallRequest, state: AgentState) -> InterventionDecision:
        """Evaluate ``tool_call`` and wrap the result in an ``InterventionDecision``."""
        return InterventionDecision(tool_call=tool_call, policy=self.evaluate(tool_call, state))

    def partition(
        self,
        tool_calls: Iterable[Union[ToolCallRequest, Mapping[str, Any]]],
        state: AgentState,
    ) -> Tuple[List[ToolCallRequest], List[ToolCallRequest]]:
        """
        Split tool calls into those needing approval and those that may run.

        Both lists preserve the original order.

        Returns:
            ``(pending, approved)`` where ``pending`` holds the ``always`` calls.
        """
        pending: List[ToolCallRequest] = []
        approved: List[ToolCallRequest] = []
        for raw in tool_calls:
            call = raw if isinstance(raw, ToolCallRequest) else ToolCallRequest.model_validate(raw)
            decision = self.decide(call, state)
            if decision.require_approval:
                pending.append(call)
            else:
                approved.append(call)
            logger.debug(f"Intervention policy for {call.identifier}/{call.api_name} ({call.id}): {decision.policy}")
        return pending, approved
