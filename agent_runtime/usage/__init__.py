"""Running token and cost accounting.

The external executor calls these functions once a model or tool call has
resolved and feeds the returned state into the next dispatch step.
"""

from .accumulator import accumulate_llm, accumulate_tool, merge_model_usage

__all__ = [
    "accumulate_llm",
    "accumulate_tool",
    "merge_model_usage",
]
