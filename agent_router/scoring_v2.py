"""
Scoring engine v2: per-role linear combination over the extracted feature
vector, with a per-feature breakdown so every ranking can be explained.

    total = Σ weight[f] · feature[f]  −  Σ weight[p] · penalty[p]
            (+ DISQUALIFIED_SCORE when the candidate hits a floor)

Weights are all positive; latency and price are the penalty features and
are subtracted. Features are summed in FEATURE_NAMES order so the float
total is reproducible bit for bit.
"""

from dataclasses import dataclass
from typing import Optional

from agent_router.catalog import DiscoveredModel, ExternalSignalMap
from agent_router.config import DISQUALIFIED_SCORE
from agent_router.features import FEATURE_NAMES, extract_feature_vector
from agent_router.roles import AgentRole
from agent_router.scoring import is_disqualified

PENALTY_FEATURES: frozenset[str] = frozenset({"latency_penalty", "price_penalty"})

ROLE_WEIGHTS: dict[AgentRole, dict[str, float]] = {
    AgentRole.ORCHESTRATOR: {
        "status": 3.0, "context": 1.5, "output": 0.6, "reasoning": 3.0, "toolcall": 3.5,
        "quality": 4.0, "coding": 3.0, "latency_penalty": 0.6, "price_penalty": 0.8,
    },
    AgentRole.ORACLE: {
        "status": 3.0, "context": 2.2, "output": 0.6, "reasoning": 4.0, "toolcall": 1.2,
        "quality": 4.5, "coding": 3.0, "latency_penalty": 0.4, "price_penalty": 0.6,
    },
    AgentRole.DESIGNER: {
        "status": 3.0, "context": 0.6, "output": 1.6, "reasoning": 2.0, "toolcall": 1.2,
        "attachment": 4.0, "quality": 3.5, "coding": 2.0, "latency_penalty": 0.5, "price_penalty": 0.6,
    },
    AgentRole.EXPLORER: {
        "status": 3.0, "context": 0.8, "output": 1.0, "reasoning": 1.0, "toolcall": 3.0,
        "quality": 2.5, "coding": 2.5, "latency_penalty": 1.0, "price_penalty": 1.2,
    },
    AgentRole.LIBRARIAN: {
        "status": 3.0, "context": 2.5, "output": 1.4, "reasoning": 1.0, "toolcall": 2.5,
        "quality": 3.5, "coding": 2.5, "latency_penalty": 0.4, "price_penalty": 0.8,
    },
    AgentRole.FIXER: {
        "status": 3.0, "context": 1.0, "output": 1.2, "reasoning": 2.5, "toolcall": 3.5,
        "quality": 3.0, "coding": 4.5, "latency_penalty": 0.5, "price_penalty": 0.8,
    },
}


@dataclass(frozen=True)
class ScoreBreakdown:
    features: dict[str, float]
    weighted: dict[str, float]
    floor: float = 0.0


@dataclass(frozen=True)
class ScoredCandidate:
    model: DiscoveredModel
    total_score: float
    score_breakdown: ScoreBreakdown


def score_candidate_v2(
    model: DiscoveredModel,
    role: AgentRole,
    external_signals: Optional[ExternalSignalMap] = None,
) -> ScoredCandidate:
    features = extract_feature_vector(model, role, external_signals).as_dict()
    weights = ROLE_WEIGHTS[role]

    weighted: dict[str, float] = {}
    for name in FEATURE_NAMES:
        weight = weights.get(name, 0.0)
        contribution = features[name] * weight
        weighted[name] = -contribution if name in PENALTY_FEATURES else contribution

    floor = DISQUALIFIED_SCORE if is_disqualified(role, model) else 0.0
    total = sum(weighted[name] for name in FEATURE_NAMES) + floor

    return ScoredCandidate(
        model=model,
        total_score=total,
        score_breakdown=ScoreBreakdown(features=features, weighted=weighted, floor=floor),
    )
