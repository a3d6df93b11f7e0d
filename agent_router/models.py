"""
Pydantic models: the persisted configuration schema, the manual plan schema
and the request/response bodies of the agent-router API.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from agent_router.catalog import (
    DiscoveredModel,
    DynamicModelPlan,
    ExternalSignal,
    InstallConfig,
)
from agent_router.roles import AgentRole
from agent_router.scoring_v2 import ScoredCandidate


# ---------------------------------------------------------------------------
# Manual plan
# ---------------------------------------------------------------------------

class ManualAgentPlan(BaseModel):
    model_config = ConfigDict(extra="forbid")

    primary: str = Field(..., min_length=1, description="provider/model id")
    fallback1: str = Field(..., min_length=1)
    fallback2: str = Field(..., min_length=1)
    fallback3: str = Field(..., min_length=1)

    def as_chain(self) -> list[str]:
        return [self.primary, self.fallback1, self.fallback2, self.fallback3]

    @classmethod
    def from_chain(cls, chain: list[str]) -> "ManualAgentPlan":
        primary, fallback1, fallback2, fallback3 = chain
        return cls(primary=primary, fallback1=fallback1, fallback2=fallback2, fallback3=fallback3)


class ManualPlan(BaseModel):
    """One ManualAgentPlan per role; all six roles are required."""

    model_config = ConfigDict(extra="forbid")

    orchestrator: ManualAgentPlan
    oracle: ManualAgentPlan
    designer: ManualAgentPlan
    explorer: ManualAgentPlan
    librarian: ManualAgentPlan
    fixer: ManualAgentPlan

    def for_role(self, role: AgentRole) -> ManualAgentPlan:
        return getattr(self, role.value)


# ---------------------------------------------------------------------------
# Persisted configuration
#
# Every level allows extra keys: fields this service does not own are read
# and written back untouched.
# ---------------------------------------------------------------------------

class AgentOverrideConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    model: Optional[str] = None


# Preset: agent name → override
Preset = dict[str, AgentOverrideConfig]


class FallbackConfig(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    enabled: bool = True
    timeout_ms: int = Field(default=15_000, alias="timeoutMs", ge=0)
    chains: dict[str, list[str]] = Field(default_factory=dict)


class PluginConfig(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    preset: Optional[str] = None
    agents: Optional[dict[str, AgentOverrideConfig]] = None
    presets: Optional[dict[str, Preset]] = None
    fallback: Optional[FallbackConfig] = None
    manual_plan: Optional[ManualPlan] = Field(default=None, alias="manualPlan")

    def to_json_dict(self) -> dict[str, Any]:
        """Serialisable form: camelCase keys, only the keys actually present."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# ---------------------------------------------------------------------------
# API request / response
# ---------------------------------------------------------------------------

class DynamicPlanRequest(BaseModel):
    catalog: list[DiscoveredModel] = Field(..., description="Discovered candidate models.")
    signals: dict[str, ExternalSignal] = Field(
        default_factory=dict,
        description="Benchmark signals keyed by lowercased model id.",
    )
    install: InstallConfig = Field(default_factory=InstallConfig)
    engine: Literal["v1", "v2"] = "v1"


class DynamicPlanResponse(BaseModel):
    plan: Optional[DynamicModelPlan] = None


class ScoreRequest(BaseModel):
    catalog: list[DiscoveredModel]
    signals: dict[str, ExternalSignal] = Field(default_factory=dict)
    role: AgentRole


class ScoreResponse(BaseModel):
    role: AgentRole
    ranked: list[ScoredCandidate]


class RoleInfo(BaseModel):
    name: AgentRole
    variant: Optional[str]
    tool_dependent: bool


class RolesResponse(BaseModel):
    roles: list[RoleInfo]


class PreferencesRequest(BaseModel):
    operation: str = Field(..., description="show | plan | apply | reset-agent")
    plan: Optional[Any] = Field(default=None, description="Candidate manual plan payload.")
    agent: Optional[str] = Field(default=None, description="Role name for reset-agent.")
    confirm: Optional[StrictBool] = Field(default=None, description="Must be the JSON literal true for apply.")


class PreferencesResponse(BaseModel):
    result: str
