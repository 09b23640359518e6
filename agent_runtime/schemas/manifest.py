"""Tool manifest and human intervention configuration models.

A manifest's ``human_intervention_config`` arrives either as a literal policy
token or as an ordered rule list. Pydantic decodes it once, when the manifest
is loaded, into ``InterventionPolicy`` or ``list[InterventionRule]`` so the
policy engine never has to re-inspect raw shapes.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import ConfigDict, Field

from .base import BaseSchema


class InterventionPolicy(str, Enum):
    """Whether a tool invocation must pause for human approval."""

    always = "always"
    never = "never"


class InterventionRule(BaseSchema):
    """One entry of a rule-based intervention config.

    ``match`` maps argument keys to ``:``-segmented patterns; every key must
    match for the rule to fire. A rule without ``match`` fires unconditionally.
    ``policy`` is kept as a raw token: anything other than ``"always"`` lets the
    call proceed.
    """

    match: Optional[Dict[str, str]] = None
    policy: str


HumanInterventionConfig = Union[InterventionPolicy, List[InterventionRule]]


class ToolManifestApi(BaseSchema):
    model_config = ConfigDict(extra="allow")

    name: str
    description: Optional[str] = None


class ToolManifest(BaseSchema):
    """Static metadata of a tool as supplied by the tool registry."""

    model_config = ConfigDict(extra="allow")

    identifier: str
    api: List[ToolManifestApi] = Field(default_factory=list)
    human_intervention_config: Optional[HumanInterventionConfig] = None
