"""
Agent roles: the closed set of functional responsibilities that each need
a model assignment.

Every per-role table in the package is keyed by the full enum so a role
added here shows up as a missing key everywhere it has to be handled.
"""

from enum import Enum
from typing import Optional


class AgentRole(str, Enum):
    ORCHESTRATOR = "orchestrator"
    ORACLE = "oracle"
    DESIGNER = "designer"
    EXPLORER = "explorer"
    LIBRARIAN = "librarian"
    FIXER = "fixer"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AgentRole"]:
        """Return the role named by value, or None for unknown names."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# Fixed iteration order used by every plan builder.
AGENT_ROLES: tuple[AgentRole, ...] = tuple(AgentRole)

ROLE_NAMES: tuple[str, ...] = tuple(role.value for role in AGENT_ROLES)

# Reasoning-effort hint handed to the runtime. Never consulted by scoring.
ROLE_VARIANT: dict[AgentRole, Optional[str]] = {
    AgentRole.ORCHESTRATOR: None,
    AgentRole.ORACLE: "high",
    AgentRole.DESIGNER: "medium",
    AgentRole.EXPLORER: "low",
    AgentRole.LIBRARIAN: "low",
    AgentRole.FIXER: "low",
}

# Roles that cannot do their job without tool calling.
TOOL_DEPENDENT_ROLES: frozenset[AgentRole] = frozenset({
    AgentRole.ORCHESTRATOR,
    AgentRole.EXPLORER,
    AgentRole.LIBRARIAN,
    AgentRole.FIXER,
})

# Roles that take the "secondary" explicit provider pick before the primary.
SECONDARY_PICK_ROLES: frozenset[AgentRole] = frozenset({
    AgentRole.EXPLORER,
    AgentRole.LIBRARIAN,
    AgentRole.FIXER,
})
