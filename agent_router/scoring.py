"""
Capability scorer (legacy engine).

Scores a candidate for a role from its raw attributes normalised to [0, 1],
plus an additive boost from third-party benchmark data. Latency and price
enter the boost with negative weights, so the boost may be negative.

Both parts are pure functions of their inputs.
"""

import logging
import math
from typing import Optional

from agent_router.catalog import DiscoveredModel, ExternalSignalMap
from agent_router.config import (
    CONTEXT_LIMIT_CEILING,
    DISQUALIFIED_SCORE,
    OUTPUT_LIMIT_CEILING,
)
from agent_router.features import blended_price, find_signal, finite_or_none
from agent_router.roles import TOOL_DEPENDENT_ROLES, AgentRole

logger = logging.getLogger(__name__)

_STATUS_MULTIPLIER = {
    "active": 1.0,
    "beta": 0.7,
    "alpha": 0.4,
    "deprecated": 0.0,
}

# Role → attribute weights over normalised intrinsic attributes.
CAPABILITY_WEIGHTS: dict[AgentRole, dict[str, float]] = {
    AgentRole.ORCHESTRATOR: {"status": 20, "reasoning": 22, "toolcall": 24, "context": 20, "output": 8},
    AgentRole.ORACLE: {"status": 20, "context": 28, "reasoning": 26, "toolcall": 10, "output": 8},
    AgentRole.DESIGNER: {
        "status": 20, "attachment": 24, "output": 20, "reasoning": 14, "toolcall": 10, "context": 8,
    },
    AgentRole.EXPLORER: {"status": 20, "toolcall": 20, "output": 14, "context": 10, "reasoning": 8},
    AgentRole.LIBRARIAN: {"status": 20, "context": 30, "output": 20, "toolcall": 16, "reasoning": 8},
    AgentRole.FIXER: {"status": 20, "toolcall": 24, "reasoning": 18, "output": 16, "context": 12},
}

# Role → (quality, coding, latency, price) weights. Latency and price subtract.
SIGNAL_WEIGHTS: dict[AgentRole, tuple[float, float, float, float]] = {
    AgentRole.ORCHESTRATOR: (14, 12, 8, 10),
    AgentRole.ORACLE: (14, 12, 8, 10),
    AgentRole.DESIGNER: (10, 6, 8, 8),
    AgentRole.EXPLORER: (10, 8, 18, 12),
    AgentRole.LIBRARIAN: (12, 8, 6, 8),
    AgentRole.FIXER: (10, 14, 8, 8),
}


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def normalize(value: float, maximum: float) -> float:
    if not math.isfinite(value) or maximum <= 0:
        return 0.0
    return clamp01(value / maximum)


def is_disqualified(role: AgentRole, model: DiscoveredModel) -> bool:
    """Deprecated, or missing tool calling for a role that needs it."""
    if model.status == "deprecated":
        return True
    return role in TOOL_DEPENDENT_ROLES and not model.toolcall


def capability_score(role: AgentRole, model: DiscoveredModel) -> float:
    if is_disqualified(role, model):
        return DISQUALIFIED_SCORE

    attributes = {
        "status": _STATUS_MULTIPLIER.get(model.status, 0.0),
        "context": normalize(min(model.context_limit, CONTEXT_LIMIT_CEILING), CONTEXT_LIMIT_CEILING),
        "output": normalize(min(model.output_limit, OUTPUT_LIMIT_CEILING), OUTPUT_LIMIT_CEILING),
        "reasoning": 1.0 if model.reasoning else 0.0,
        "toolcall": 1.0 if model.toolcall else 0.0,
        "attachment": 1.0 if model.attachment else 0.0,
    }
    return sum(attributes[name] * weight for name, weight in CAPABILITY_WEIGHTS[role].items())


def external_signal_boost(
    role: AgentRole,
    model: DiscoveredModel,
    external_signals: Optional[ExternalSignalMap] = None,
) -> float:
    signal = find_signal(model, external_signals)
    if signal is None:
        return 0.0

    quality = clamp01((finite_or_none(signal.quality_score) or 0.0) / 100)
    coding = clamp01((finite_or_none(signal.coding_score) or 0.0) / 100)
    latency = clamp01((finite_or_none(signal.latency_seconds) or 0.0) / 20)
    price = clamp01(blended_price(signal) / 30)

    w_quality, w_coding, w_latency, w_price = SIGNAL_WEIGHTS[role]
    return quality * w_quality + coding * w_coding - latency * w_latency - price * w_price


def combined_score(
    role: AgentRole,
    model: DiscoveredModel,
    external_signals: Optional[ExternalSignalMap] = None,
) -> float:
    score = capability_score(role, model) + external_signal_boost(role, model, external_signals)
    logger.debug("Scored candidate | role=%s model=%s score=%.4f", role.value, model.model, score)
    return score
