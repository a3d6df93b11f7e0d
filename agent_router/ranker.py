"""
Ranker: total, stable order over a candidate set for one role.

Ordering key is (score descending, provider id ascending, model id
ascending). Identifiers are compared by code point, not locale, so the
result is the same on every machine and independent of input order.
"""

import logging
from typing import Iterable, Optional

from agent_router.catalog import DiscoveredModel, ExternalSignalMap
from agent_router.roles import AgentRole
from agent_router.scoring import combined_score
from agent_router.scoring_v2 import ScoredCandidate, score_candidate_v2

logger = logging.getLogger(__name__)


def _order_key(score: float, model: DiscoveredModel) -> tuple[float, str, str]:
    return (-score, model.provider_id, model.model)


def rank_models(
    models: Iterable[DiscoveredModel],
    role: AgentRole,
    external_signals: Optional[ExternalSignalMap] = None,
) -> list[DiscoveredModel]:
    """Rank with the legacy capability scorer."""
    scored = [(combined_score(role, model, external_signals), model) for model in models]
    scored.sort(key=lambda item: _order_key(item[0], item[1]))
    return [model for _, model in scored]


def rank_models_v2(
    models: Iterable[DiscoveredModel],
    role: AgentRole,
    external_signals: Optional[ExternalSignalMap] = None,
) -> list[ScoredCandidate]:
    """Rank with the v2 engine, keeping each candidate's breakdown."""
    scored = [score_candidate_v2(model, role, external_signals) for model in models]
    scored.sort(key=lambda item: _order_key(item.total_score, item.model))
    if scored:
        logger.debug(
            "Ranked v2 | role=%s top=%s score=%.4f candidates=%d",
            role.value, scored[0].model.model, scored[0].total_score, len(scored),
        )
    return scored
