import itertools

import pytest

from agent_router.ranker import rank_models, rank_models_v2
from agent_router.roles import AgentRole


def _ids(models) -> list[str]:
    return [model.model for model in models]


def test_tie_break_orders_by_provider_then_model(make_model) -> None:
    ranked = rank_models_v2(
        [
            make_model("zai-coding-plan/glm-4.7", reasoning=False),
            make_model("openai/gpt-5.3-codex", reasoning=False),
        ],
        AgentRole.EXPLORER,
    )

    assert ranked[0].model.provider_id == "openai"
    assert ranked[1].model.provider_id == "zai-coding-plan"
    assert ranked[0].total_score == ranked[1].total_score


def test_legacy_ranker_uses_same_tie_break(make_model) -> None:
    ranked = rank_models(
        [make_model("zai-coding-plan/glm-4.7"), make_model("openai/gpt-5.3-codex")],
        AgentRole.EXPLORER,
    )
    assert _ids(ranked) == ["openai/gpt-5.3-codex", "zai-coding-plan/glm-4.7"]


def test_tie_within_provider_falls_back_to_model_id(make_model) -> None:
    ranked = rank_models([make_model("openai/gpt-b"), make_model("openai/gpt-a")], AgentRole.ORACLE)
    assert _ids(ranked) == ["openai/gpt-a", "openai/gpt-b"]


@pytest.mark.parametrize("ranker", [rank_models, lambda m, r, s=None: [c.model for c in rank_models_v2(m, r, s)]])
def test_ranking_is_independent_of_input_order(make_model, make_signal, ranker) -> None:
    catalog = [
        make_model("openai/gpt-5", context_limit=400_000),
        make_model("anthropic/claude-opus-4-6", attachment=True),
        make_model("zai-coding-plan/glm-4.7"),
        make_model("opencode/big-pickle", reasoning=False),
    ]
    signals = {"gpt-5": make_signal(quality_score=80, latency_seconds=4)}

    expected = _ids(ranker(catalog, AgentRole.FIXER, signals))
    for permutation in itertools.permutations(catalog):
        assert _ids(ranker(list(permutation), AgentRole.FIXER, signals)) == expected


def test_toolless_candidate_never_first_despite_signal_boost(make_model, make_signal) -> None:
    strong_but_toolless = make_model(
        "openai/o1-pro", toolcall=False, context_limit=1_000_000, output_limit=300_000
    )
    weak_but_capable = make_model("opencode/sonic", reasoning=False, context_limit=8_000, output_limit=4_000)
    signals = {
        "openai/o1-pro": make_signal(quality_score=100, coding_score=100),
        "opencode/sonic": make_signal(quality_score=0, latency_seconds=60, input_price_per_1m=80),
    }

    for role in (AgentRole.ORCHESTRATOR, AgentRole.EXPLORER, AgentRole.LIBRARIAN, AgentRole.FIXER):
        assert rank_models([strong_but_toolless, weak_but_capable], role, signals)[0] is weak_but_capable
        assert rank_models_v2([strong_but_toolless, weak_but_capable], role, signals)[0].model is weak_but_capable


def test_deprecated_sorts_last_but_stays_selectable(make_model) -> None:
    deprecated = make_model("openai/gpt-4", status="deprecated", context_limit=1_000_000)
    alpha = make_model("openai/gpt-6-preview", status="alpha")

    assert _ids(rank_models([deprecated, alpha], AgentRole.ORACLE)) == ["openai/gpt-6-preview", "openai/gpt-4"]
    assert _ids(rank_models([deprecated], AgentRole.ORACLE)) == ["openai/gpt-4"]


def test_nan_signal_does_not_make_order_input_dependent(make_model, make_signal) -> None:
    models = [
        make_model("openai/gpt-5.3-codex"),
        make_model("anthropic/claude-opus-4-6"),
        make_model("opencode/big-pickle", reasoning=False),
    ]
    signals = {
        "anthropic/claude-opus-4-6": make_signal(latency_seconds=float("nan"), input_price_per_1m=float("nan")),
        "openai/gpt-5.3-codex": make_signal(quality_score=80),
    }

    orders = {
        tuple(scored.model.model for scored in rank_models_v2(list(perm), AgentRole.EXPLORER, signals))
        for perm in itertools.permutations(models)
    }

    assert len(orders) == 1
