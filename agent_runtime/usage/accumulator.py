"""Usage and cost accumulation for ``AgentState``.

Every function here returns a new ``AgentState``. The input is deep-copied
before anything is written, so callers holding the previous state never see
it change.

Both accumulation paths share one precondition policy: a state without
``usage`` raises ``UsageNotInitializedError``, and a truthy cost applied to a
state without ``cost`` raises ``CostNotInitializedError``. A zero or missing
cost records nothing on the cost side.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from ..errors import CostNotInitializedError, UsageNotInitializedError
from ..schemas.state import AgentState
from ..schemas.usage import ModelCostEntry, ModelUsage, ToolCostEntry, ToolUsageEntry

logger = logging.getLogger(__name__)

UsageInput = Union[ModelUsage, Mapping[str, Any]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_model_usage(usage: UsageInput) -> ModelUsage:
    if isinstance(usage, ModelUsage):
        return usage
    return ModelUsage.model_validate(dict(usage))


def merge_model_usage(previous: Optional[ModelUsage], current: ModelUsage) -> ModelUsage:
    """
    Merge two usage breakdowns field by field.

    A field present on either side is summed with the missing side counted as
    zero. A field absent from both stays absent.

    Args:
        previous: Accumulated breakdown so far, if any.
        current: Breakdown of the call being folded in.

    Returns:
        A new ``ModelUsage``; neither argument is modified.
    """
    if previous is None:
        return current.model_copy()

    merged: dict[str, Any] = {}
    for field in ModelUsage.model_fields:
        prev_value = getattr(previous, field)
        curr_value = getattr(current, field)
        if prev_value is None and curr_value is None:
            continue
        merged[field] = (prev_value or 0) + (curr_value or 0)
    return ModelUsage(**merged)


def accumulate_llm(state: AgentState, provider: str, model: str, usage: UsageInput) -> AgentState:
    """
    Fold one model call's usage and cost into the state.

    Token counters and ``api_calls`` always advance. The ``by_model`` cost
    entry ``"<provider>/<model>"`` is created or updated only when the usage
    carries a truthy ``cost``.

    Raises:
        UsageNotInitializedError: If ``state.usage`` is absent.
        CostNotInitializedError: If a cost is present but ``state.cost`` is absent.
    """
    delta = _as_model_usage(usage)
    new_state = state.model_copy(deep=True)

    if new_state.usage is None:
        raise UsageNotInitializedError()

    tokens = new_state.usage.llm.tokens
    tokens.input += delta.total_input_tokens or 0
    tokens.output += delta.total_output_tokens or 0
    tokens.total += delta.total_tokens or 0
    new_state.usage.llm.api_calls += 1

    if delta.cost:
        if new_state.cost is None:
            raise CostNotInitializedError()

        model_id = f"{provider}/{model}"
        entry = next((e for e in new_state.cost.llm.by_model if e.id == model_id), None)
        if entry is None:
            entry = ModelCostEntry(id=model_id, provider=provider, model=model)
            new_state.cost.llm.by_model.append(entry)

        entry.usage = merge_model_usage(entry.usage, delta)
        entry.total_cost += delta.cost
        new_state.cost.llm.total += delta.cost
        new_state.cost.total += delta.cost
        new_state.cost.calculated_at = _utc_now()

    new_state.last_modified = _utc_now()
    logger.debug(
        f"Accumulated LLM usage for {provider}/{model}: tokens={delta.total_tokens or 0}, cost={delta.cost or 0}"
    )
    return new_state


def accumulate_tool(
    state: AgentState,
    tool_name: str,
    execution_time_ms: float,
    success: bool,
    cost: Optional[float] = None,
) -> AgentState:
    """
    Fold one tool execution into the state.

    The per-tool usage entry (keyed by exact ``tool_name``) and the aggregate
    tool counters always advance; ``errors`` only when ``success`` is false.
    A truthy ``cost`` also updates the per-tool cost entry and the totals.

    Raises:
        UsageNotInitializedError: If ``state.usage`` is absent.
        CostNotInitializedError: If ``cost`` is truthy but ``state.cost`` is absent.
    """
    new_state = state.model_copy(deep=True)

    if new_state.usage is None:
        raise UsageNotInitializedError()

    tools_usage = new_state.usage.tools
    entry = next((e for e in tools_usage.by_tool if e.name == tool_name), None)
    if entry is None:
        entry = ToolUsageEntry(name=tool_name)
        tools_usage.by_tool.append(entry)

    entry.calls += 1
    entry.total_time_ms += execution_time_ms
    if not success:
        entry.errors += 1

    tools_usage.total_calls += 1
    tools_usage.total_time_ms += execution_time_ms

    if cost:
        if new_state.cost is None:
            raise CostNotInitializedError()

        cost_entry = next((e for e in new_state.cost.tools.by_tool if e.name == tool_name), None)
        if cost_entry is None:
            cost_entry = ToolCostEntry(name=tool_name, currency=new_state.cost.tools.currency)
            new_state.cost.tools.by_tool.append(cost_entry)

        cost_entry.calls += 1
        cost_entry.total_cost += cost
        new_state.cost.tools.total += cost
        new_state.cost.total += cost
        new_state.cost.calculated_at = _utc_now()

    new_state.last_modified = _utc_now()
    logger.debug(f"Accumulated tool usage for {tool_name}: time_ms={execution_time_ms}, success={success}, cost={cost or 0}")
    return new_state
