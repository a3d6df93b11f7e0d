"""
Fallback chain construction.

A chain is the ordered list of model ids a role tries in turn. Chains are
always duplicate-free in first-occurrence order.
"""

from typing import Iterable, Optional, Sequence

from agent_router.catalog import DiscoveredModel, InstallConfig
from agent_router.config import MAX_CHAIN_LENGTH, RANKED_CHAIN_DEPTH, TERMINAL_DEFAULT_MODEL
from agent_router.roles import SECONDARY_PICK_ROLES, AgentRole


def dedupe(models: Iterable[Optional[str]]) -> list[str]:
    """Drop empty entries and repeats, keeping the first occurrence."""
    seen: set[str] = set()
    result: list[str] = []
    for model in models:
        if not model or model in seen:
            continue
        seen.add(model)
        result.append(model)
    return result


def provider_picks(role: AgentRole, config: InstallConfig) -> tuple[Optional[str], Optional[str]]:
    """
    Explicit (chutes, opencode) picks for a role. Roles in
    SECONDARY_PICK_ROLES take the secondary pick when one is configured.
    """
    if role in SECONDARY_PICK_ROLES:
        chutes = config.selected_chutes_secondary_model or config.selected_chutes_primary_model
        opencode = config.selected_opencode_secondary_model or config.selected_opencode_primary_model
    else:
        chutes = config.selected_chutes_primary_model
        opencode = config.selected_opencode_primary_model
    return chutes, opencode


def build_fallback_chain(
    ranked: Sequence[DiscoveredModel],
    role: AgentRole,
    config: InstallConfig,
    terminal_default: str = TERMINAL_DEFAULT_MODEL,
    max_length: int = MAX_CHAIN_LENGTH,
) -> list[str]:
    if not ranked:
        return []
    chutes, opencode = provider_picks(role, config)
    chain = dedupe([
        ranked[0].model,
        *(model.model for model in ranked[:RANKED_CHAIN_DEPTH]),
        chutes,
        opencode,
        terminal_default,
    ])
    return chain[:max_length]
