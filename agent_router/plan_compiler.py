"""
Plan compiler: folds a per-role manual plan into the persisted configuration.

For each role the manual [primary, fallback1, fallback2, fallback3] is
resolved against the system default chain, the primary is written into the
root agents map and into the "manual" preset, and the resolved chain is
overlaid on the fallback chains. Everything the plan does not touch is
carried over unchanged, and the input config is never mutated.
"""

import logging
from typing import Any, Optional

from agent_router.chains import dedupe
from agent_router.config import (
    DEFAULT_CHAIN_FILL,
    DEFAULT_FALLBACK_ENABLED,
    DEFAULT_FALLBACK_TIMEOUT_MS,
    MANUAL_CHAIN_WIDTH,
    MANUAL_PRESET_NAME,
    SYSTEM_DEFAULT_CHAIN,
)
from agent_router.models import (
    AgentOverrideConfig,
    FallbackConfig,
    ManualAgentPlan,
    ManualPlan,
    PluginConfig,
)
from agent_router.precedence import resolve_agent_with_precedence
from agent_router.roles import AGENT_ROLES, AgentRole

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Read side: default resolution
# ---------------------------------------------------------------------------

def active_preset_agents(config: PluginConfig) -> dict[str, AgentOverrideConfig]:
    """The active preset's agents, or the root agents map when none is active."""
    if config.preset and config.presets and config.preset in config.presets:
        return config.presets[config.preset]
    return config.agents or {}


def agent_primary(config: PluginConfig, role: AgentRole) -> Optional[str]:
    """Root agents map wins; the active preset is consulted second."""
    root = (config.agents or {}).get(role.value)
    if root is not None and root.model:
        return root.model
    entry = active_preset_agents(config).get(role.value)
    return entry.model if entry is not None else None


def derive_agent_chain(config: PluginConfig, role: AgentRole) -> list[str]:
    primary = agent_primary(config, role)
    configured = config.fallback.chains.get(role.value, []) if config.fallback else []
    resolved = dedupe([primary, *configured])
    return dedupe([*resolved, *DEFAULT_CHAIN_FILL])[:MANUAL_CHAIN_WIDTH]


def derive_agent_plan(config: PluginConfig, role: AgentRole) -> ManualAgentPlan:
    return ManualAgentPlan.from_chain(derive_agent_chain(config, role))


def derive_manual_plan_from_config(config: PluginConfig) -> ManualPlan:
    return ManualPlan(**{role.value: derive_agent_plan(config, role) for role in AGENT_ROLES})


# ---------------------------------------------------------------------------
# Write side: compile
# ---------------------------------------------------------------------------

def _with_model(existing: Optional[AgentOverrideConfig], model: str) -> dict[str, Any]:
    data = existing.model_dump(mode="json", by_alias=True, exclude_unset=True) if existing else {}
    return {**data, "model": model}


def _dump(entries: dict[str, AgentOverrideConfig]) -> dict[str, Any]:
    return {
        name: entry.model_dump(mode="json", by_alias=True, exclude_unset=True)
        for name, entry in entries.items()
    }


def compile_manual_plan_to_config(config: PluginConfig, manual_plan: ManualPlan) -> PluginConfig:
    root_agents = _dump(config.agents or {})
    active_agents = active_preset_agents(config)
    manual_preset: dict[str, Any] = {}
    chains: dict[str, list[str]] = {}

    for role in AGENT_ROLES:
        plan = manual_plan.for_role(role)
        resolved = resolve_agent_with_precedence(role, plan.as_chain(), SYSTEM_DEFAULT_CHAIN)
        chains[role.value] = resolved.chain

        root_agents[role.value] = _with_model((config.agents or {}).get(role.value), plan.primary)
        manual_preset[role.value] = _with_model(active_agents.get(role.value), plan.primary)

    prior_fallback = config.fallback or FallbackConfig()
    fallback = prior_fallback.model_dump(mode="json", by_alias=True, exclude_unset=True)
    fallback.update({
        "enabled": prior_fallback.enabled if config.fallback else DEFAULT_FALLBACK_ENABLED,
        "timeoutMs": prior_fallback.timeout_ms if config.fallback else DEFAULT_FALLBACK_TIMEOUT_MS,
        "chains": {**prior_fallback.chains, **chains},
    })

    presets = {
        name: _dump(preset) for name, preset in (config.presets or {}).items()
    }
    presets[MANUAL_PRESET_NAME] = manual_preset

    data = config.to_json_dict()
    data.update({
        "preset": MANUAL_PRESET_NAME,
        "manualPlan": manual_plan.model_dump(mode="json"),
        "agents": root_agents,
        "presets": presets,
        "fallback": fallback,
    })

    logger.debug("Compiled manual plan | roles=%d preset=%s", len(chains), MANUAL_PRESET_NAME)
    return PluginConfig.model_validate(data)
