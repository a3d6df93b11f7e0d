"""
Precedence resolver: merges a user-authored chain with the system default.

    resolved = dedupe(manual + system_default)

Every manual entry precedes every entry that only the system default
contributes. The result is empty only when both inputs are.
"""

from dataclasses import dataclass
from typing import Literal, Sequence

from agent_router.chains import dedupe
from agent_router.roles import AgentRole

Provenance = Literal["manual", "system-default"]


@dataclass(frozen=True)
class ResolvedAgentChain:
    role: AgentRole
    chain: list[str]
    provenance: dict[str, Provenance]


def resolve_agent_with_precedence(
    role: AgentRole,
    manual_user_plan: Sequence[str],
    system_default: Sequence[str],
) -> ResolvedAgentChain:
    chain = dedupe([*manual_user_plan, *system_default])
    manual = set(manual_user_plan)
    provenance: dict[str, Provenance] = {
        model: "manual" if model in manual else "system-default" for model in chain
    }
    return ResolvedAgentChain(role=role, chain=chain, provenance=provenance)
