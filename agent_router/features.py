"""
Feature extraction: raw candidate + optional benchmark signal → bounded
feature vector.

Every field is clipped before normalisation so that no single claim (a
ten-million-token context window, a 200 s latency sample) can dominate a
score. Missing signal data defaults to zero.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from agent_router.catalog import DiscoveredModel, ExternalSignal, ExternalSignalMap
from agent_router.config import CONTEXT_LIMIT_CEILING, OUTPUT_LIMIT_CEILING
from agent_router.roles import AgentRole

LATENCY_CEILING_SECONDS = 20.0
PRICE_CEILING_PER_1M = 50.0

# Latency-sensitive roles pay more for slow models.
ROLE_LATENCY_MULTIPLIER: dict[AgentRole, float] = {
    AgentRole.ORCHESTRATOR: 1.0,
    AgentRole.ORACLE: 1.0,
    AgentRole.DESIGNER: 1.0,
    AgentRole.EXPLORER: 1.4,
    AgentRole.LIBRARIAN: 1.0,
    AgentRole.FIXER: 1.0,
}

_STATUS_VALUE = {
    "active": 1.0,
    "beta": 0.4,
    "alpha": -0.25,
    "deprecated": -1.0,
}

_FREE_SUFFIX_RE = re.compile(r"-(free|flash)$", re.IGNORECASE)


@dataclass(frozen=True)
class FeatureVector:
    status: float
    context: float
    output: float
    reasoning: float
    toolcall: float
    attachment: float
    quality: float
    coding: float
    latency_penalty: float
    price_penalty: float

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in FEATURE_NAMES}


FEATURE_NAMES: tuple[str, ...] = (
    "status",
    "context",
    "output",
    "reasoning",
    "toolcall",
    "attachment",
    "quality",
    "coding",
    "latency_penalty",
    "price_penalty",
)


# ---------------------------------------------------------------------------
# Signal lookup
# ---------------------------------------------------------------------------

def model_lookup_keys(model: DiscoveredModel) -> list[str]:
    """
    Signal-map keys for a candidate in priority order: full id, bare id,
    then provider-specific variants.
    """
    full_key = model.model.lower()
    parts = model.model.split("/")
    id_key = parts[1].lower() if len(parts) > 1 and parts[1] else None

    keys = [full_key]
    if id_key:
        keys.append(id_key)
    if model.provider_id == "chutes" and id_key:
        keys.append(f"chutes/{id_key}")
        keys.append(_FREE_SUFFIX_RE.sub("", id_key))

    # Order-preserving dedupe; a key never appears twice.
    return list(dict.fromkeys(keys))


def find_signal(
    model: DiscoveredModel,
    external_signals: Optional[ExternalSignalMap] = None,
) -> Optional[ExternalSignal]:
    if not external_signals:
        return None
    for key in model_lookup_keys(model):
        signal = external_signals.get(key)
        if signal is not None:
            return signal
    return None


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """NaN and infinities count as missing data."""
    if value is None or not math.isfinite(value):
        return None
    return value


def blended_price(signal: Optional[ExternalSignal]) -> float:
    """Input cost weighted 75 %, output 25 %; whichever exists otherwise."""
    if signal is None:
        return 0.0
    input_price = finite_or_none(signal.input_price_per_1m)
    output_price = finite_or_none(signal.output_price_per_1m)
    if input_price is not None and output_price is not None:
        return input_price * 0.75 + output_price * 0.25
    if input_price is not None:
        return input_price
    if output_price is not None:
        return output_price
    return 0.0


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _capability(value: bool) -> float:
    return 1.0 if value else -1.0


def extract_feature_vector(
    model: DiscoveredModel,
    role: AgentRole,
    external_signals: Optional[ExternalSignalMap] = None,
) -> FeatureVector:
    signal = find_signal(model, external_signals)

    latency = (finite_or_none(signal.latency_seconds) if signal else None) or 0.0
    quality = (finite_or_none(signal.quality_score) if signal else None) or 0.0
    coding = (finite_or_none(signal.coding_score) if signal else None) or 0.0

    return FeatureVector(
        status=_STATUS_VALUE.get(model.status, -1.0),
        context=min(model.context_limit, CONTEXT_LIMIT_CEILING) / 100_000,
        output=min(model.output_limit, OUTPUT_LIMIT_CEILING) / 30_000,
        reasoning=_capability(model.reasoning),
        toolcall=_capability(model.toolcall),
        attachment=_capability(model.attachment),
        quality=quality / 100,
        coding=coding / 100,
        latency_penalty=min(latency, LATENCY_CEILING_SECONDS) * ROLE_LATENCY_MULTIPLIER[role],
        price_penalty=min(blended_price(signal), PRICE_CEILING_PER_1M) / 10,
    )
