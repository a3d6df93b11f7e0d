"""
Dynamic plan builder: catalog + signals + install config → per-role model
and fallback chain.

The plan is recomputed on every call and never persisted here. When no
provider is enabled, or no role can be resolved, the result is None so the
caller can fall back to a static default configuration.
"""

import logging
from typing import Iterable, Literal, Optional

from agent_router.catalog import (
    DiscoveredModel,
    DynamicModelPlan,
    ExternalSignalMap,
    InstallConfig,
    RoleAssignment,
    candidate_pool,
)
from agent_router.chains import build_fallback_chain
from agent_router.ranker import rank_models, rank_models_v2
from agent_router.roles import AGENT_ROLES, ROLE_VARIANT, AgentRole

logger = logging.getLogger(__name__)

ScoringEngine = Literal["v1", "v2"]


def _rank(
    pool: list[DiscoveredModel],
    role: AgentRole,
    external_signals: Optional[ExternalSignalMap],
    engine: ScoringEngine,
) -> list[DiscoveredModel]:
    if engine == "v2":
        return [scored.model for scored in rank_models_v2(pool, role, external_signals)]
    if engine == "v1":
        return rank_models(pool, role, external_signals)
    raise ValueError(f"Unknown scoring engine: {engine!r}")


def build_dynamic_model_plan(
    catalog: Iterable[DiscoveredModel],
    config: InstallConfig,
    external_signals: Optional[ExternalSignalMap] = None,
    engine: ScoringEngine = "v1",
) -> Optional[DynamicModelPlan]:
    pool = candidate_pool(catalog, config)
    if not pool:
        logger.info("No dynamic plan | reason=no candidates from enabled providers")
        return None

    agents: dict[AgentRole, RoleAssignment] = {}
    chains: dict[AgentRole, list[str]] = {}

    for role in AGENT_ROLES:
        ranked = _rank(pool, role, external_signals, engine)
        chain = build_fallback_chain(ranked, role, config)
        if not chain:
            continue
        agents[role] = RoleAssignment(model=chain[0], variant=ROLE_VARIANT[role])
        chains[role] = chain
        logger.debug("Role resolved | role=%s model=%s chain_len=%d", role.value, chain[0], len(chain))

    if not agents:
        logger.info("No dynamic plan | reason=no role could be resolved")
        return None

    logger.info(
        "Dynamic plan built | engine=%s candidates=%d roles=%d",
        engine, len(pool), len(agents),
    )
    return DynamicModelPlan(agents=agents, chains=chains)
