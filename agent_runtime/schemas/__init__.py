"""Schemas and DTOs for the agent runtime."""

from .config import GeneralAgentConfig, ModelRuntimeConfig
from .context import AgentPhase, AgentRuntimeContext, LLMResultPayload, SessionContext
from .instructions import (
    CallLLMInstruction,
    CallLLMPayload,
    CallToolInstruction,
    CallToolsBatchInstruction,
    FinishInstruction,
    Instruction,
    RequestHumanApproveInstruction,
    ToolCallRequest,
)
from .manifest import (
    HumanInterventionConfig,
    InterventionPolicy,
    InterventionRule,
    ToolManifest,
    ToolManifestApi,
)
from .state import AgentState, AgentStatus, create_initial_state
from .usage import (
    CostStats,
    ModelCostEntry,
    ModelUsage,
    ToolCostEntry,
    ToolUsageEntry,
    UsageStats,
)

__all__ = [
    "AgentState",
    "AgentStatus",
    "create_initial_state",
    "AgentPhase",
    "AgentRuntimeContext",
    "LLMResultPayload",
    "SessionContext",
    "GeneralAgentConfig",
    "ModelRuntimeConfig",
    "Instruction",
    "CallLLMInstruction",
    "CallLLMPayload",
    "CallToolInstruction",
    "CallToolsBatchInstruction",
    "RequestHumanApproveInstruction",
    "FinishInstruction",
    "ToolCallRequest",
    "HumanInterventionConfig",
    "InterventionPolicy",
    "InterventionRule",
    "ToolManifest",
    "ToolManifestApi",
    "ModelUsage",
    "UsageStats",
    "CostStats",
    "ModelCostEntry",
    "ToolCostEntry",
    "ToolUsageEntry",
]
