"""
Candidate catalog types and the helpers that shape a candidate pool before
ranking.

All records are frozen: the catalog, the signal map and the install config
are immutable inputs supplied by the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Literal, Mapping, Optional

from agent_router.config import SYNTHETIC_CONTEXT_LIMIT, SYNTHETIC_OUTPUT_LIMIT
from agent_router.roles import AgentRole

logger = logging.getLogger(__name__)

ModelStatus = Literal["active", "beta", "alpha", "deprecated"]


@dataclass(frozen=True)
class DiscoveredModel:
    provider_id: str
    model: str                      # fully-qualified "provider/id"
    name: str
    status: ModelStatus = "active"
    context_limit: int = 0
    output_limit: int = 0
    reasoning: bool = False
    toolcall: bool = False
    attachment: bool = False
    daily_request_limit: Optional[int] = None
    cost_input: Optional[float] = None
    cost_output: Optional[float] = None

    @property
    def model_id(self) -> str:
        """Bare id with the provider prefix removed."""
        _, _, bare = self.model.partition("/")
        return bare


@dataclass(frozen=True)
class ExternalSignal:
    source: str = "unknown"
    quality_score: Optional[float] = None     # 0–100
    coding_score: Optional[float] = None      # 0–100
    latency_seconds: Optional[float] = None
    input_price_per_1m: Optional[float] = None
    output_price_per_1m: Optional[float] = None


# Lookup key (lowercased full id, bare id or provider variant) → signal.
ExternalSignalMap = Mapping[str, ExternalSignal]


@dataclass(frozen=True)
class InstallConfig:
    has_openai: bool = False
    has_anthropic: bool = False
    has_copilot: bool = False
    has_zai_plan: bool = False
    has_kimi: bool = False
    has_antigravity: bool = False
    has_chutes: bool = False
    use_opencode_free_models: bool = False
    selected_chutes_primary_model: Optional[str] = None
    selected_chutes_secondary_model: Optional[str] = None
    selected_opencode_primary_model: Optional[str] = None
    selected_opencode_secondary_model: Optional[str] = None

    def selected_models(self) -> list[str]:
        return [
            model_id
            for model_id in (
                self.selected_chutes_primary_model,
                self.selected_chutes_secondary_model,
                self.selected_opencode_primary_model,
                self.selected_opencode_secondary_model,
            )
            if model_id
        ]


@dataclass(frozen=True)
class RoleAssignment:
    model: str
    variant: Optional[str] = None


@dataclass(frozen=True)
class DynamicModelPlan:
    agents: dict[AgentRole, RoleAssignment] = field(default_factory=dict)
    chains: dict[AgentRole, list[str]] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Provider gating
# ---------------------------------------------------------------------------

# Install flag → provider id, in the order providers are reported.
_PROVIDER_FLAGS: tuple[tuple[str, str], ...] = (
    ("has_openai", "openai"),
    ("has_anthropic", "anthropic"),
    ("has_copilot", "github-copilot"),
    ("has_zai_plan", "zai-coding-plan"),
    ("has_kimi", "kimi-for-coding"),
    ("has_antigravity", "google"),
    ("has_chutes", "chutes"),
    ("use_opencode_free_models", "opencode"),
)


def enabled_providers(config: InstallConfig) -> list[str]:
    return [provider for flag, provider in _PROVIDER_FLAGS if getattr(config, flag)]


# ---------------------------------------------------------------------------
# Pool shaping
# ---------------------------------------------------------------------------

def dedupe_catalog(models: Iterable[DiscoveredModel]) -> list[DiscoveredModel]:
    """Merge candidate sets, keeping the first record seen for each model id."""
    seen: set[str] = set()
    result: list[DiscoveredModel] = []
    for model in models:
        if model.model in seen:
            continue
        seen.add(model.model)
        result.append(model)
    return result


def ensure_synthetic_model(
    models: list[DiscoveredModel],
    full_model_id: Optional[str],
) -> list[DiscoveredModel]:
    """
    Return models plus a synthetic candidate for full_model_id when the
    catalog has not indexed it. Ids that are not "provider/id" are ignored.
    The input list is never modified.
    """
    if not full_model_id:
        return models
    if any(model.model == full_model_id for model in models):
        return models

    provider_id, _, model_id = full_model_id.partition("/")
    if not provider_id or not model_id:
        return models

    logger.debug("Injecting synthetic candidate | model=%s", full_model_id)
    return [
        *models,
        DiscoveredModel(
            provider_id=provider_id,
            model=full_model_id,
            name=model_id,
            status="active",
            context_limit=SYNTHETIC_CONTEXT_LIMIT,
            output_limit=SYNTHETIC_OUTPUT_LIMIT,
            reasoning=True,
            toolcall=True,
            attachment=False,
        ),
    ]


def candidate_pool(
    catalog: Iterable[DiscoveredModel],
    config: InstallConfig,
) -> list[DiscoveredModel]:
    """Catalog + synthetic picks, filtered to the enabled providers."""
    pool = dedupe_catalog(catalog)
    for model_id in config.selected_models():
        pool = ensure_synthetic_model(pool, model_id)

    enabled = set(enabled_providers(config))
    return [model for model in pool if model.provider_id in enabled]


def normalize_signal_map(signals: Mapping[str, ExternalSignal]) -> dict[str, ExternalSignal]:
    """Lowercase lookup keys; the first key wins when two collide."""
    normalized: dict[str, ExternalSignal] = {}
    for key, signal in signals.items():
        normalized.setdefault(key.strip().lower(), signal)
    return normalized
