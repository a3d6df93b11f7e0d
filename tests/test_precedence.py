from agent_router.precedence import resolve_agent_with_precedence
from agent_router.roles import AgentRole


def test_manual_chain_absorbs_overlapping_default() -> None:
    resolved = resolve_agent_with_precedence(AgentRole.ORACLE, ["a/A", "b/B", "c/C", "d/D"], ["d/D"])
    assert resolved.chain == ["a/A", "b/B", "c/C", "d/D"]
    assert resolved.role is AgentRole.ORACLE


def test_system_default_pads_short_manual_chain() -> None:
    resolved = resolve_agent_with_precedence(AgentRole.FIXER, ["a/A"], ["x/X"])
    assert resolved.chain == ["a/A", "x/X"]
    assert resolved.provenance == {"a/A": "manual", "x/X": "system-default"}


def test_manual_entries_precede_system_entries() -> None:
    resolved = resolve_agent_with_precedence(
        AgentRole.EXPLORER, ["a/A", "b/B", "a/A"], ["x/X", "b/B", "y/Y"]
    )
    assert resolved.chain == ["a/A", "b/B", "x/X", "y/Y"]
    assert resolved.provenance["b/B"] == "manual"


def test_never_empty_when_either_side_has_entries() -> None:
    assert resolve_agent_with_precedence(AgentRole.ORACLE, [], ["x/X"]).chain == ["x/X"]
    assert resolve_agent_with_precedence(AgentRole.ORACLE, ["a/A"], []).chain == ["a/A"]
    assert resolve_agent_with_precedence(AgentRole.ORACLE, [], []).chain == []
