import random

import pytest

from agent_router.catalog import InstallConfig, candidate_pool, dedupe_catalog, ensure_synthetic_model
from agent_router.config import MAX_CHAIN_LENGTH, SYNTHETIC_CONTEXT_LIMIT, SYNTHETIC_OUTPUT_LIMIT
from agent_router.planner import build_dynamic_model_plan
from agent_router.roles import AGENT_ROLES, ROLE_VARIANT, AgentRole


@pytest.fixture
def catalog(make_model):
    return [
        make_model("openai/gpt-5.3-codex", context_limit=400_000, output_limit=128_000),
        make_model("openai/gpt-5-mini", reasoning=False),
        make_model("anthropic/claude-opus-4-6", attachment=True, output_limit=64_000),
        make_model("anthropic/claude-haiku-4-5", reasoning=False, attachment=True),
        make_model("opencode/big-pickle"),
        make_model("opencode/legacy", status="deprecated"),
        make_model("google/gemini-3-pro", context_limit=1_000_000, attachment=True),
    ]


@pytest.fixture
def install() -> InstallConfig:
    return InstallConfig(has_openai=True, has_anthropic=True, use_opencode_free_models=True)


def test_no_enabled_provider_yields_no_plan(catalog) -> None:
    assert build_dynamic_model_plan(catalog, InstallConfig()) is None


def test_empty_filtered_pool_yields_no_plan(make_model) -> None:
    catalog = [make_model("anthropic/claude-opus-4-6")]
    assert build_dynamic_model_plan(catalog, InstallConfig(has_openai=True)) is None


def test_plan_covers_every_role_with_variant(catalog, install) -> None:
    plan = build_dynamic_model_plan(catalog, install)

    assert plan is not None
    assert list(plan.agents) == list(AGENT_ROLES)
    for role in AGENT_ROLES:
        chain = plan.chains[role]
        assert plan.agents[role].model == chain[0]
        assert plan.agents[role].variant == ROLE_VARIANT[role]
        assert len(chain) <= MAX_CHAIN_LENGTH
        assert len(chain) == len(set(chain))


def test_disabled_provider_candidates_are_excluded(catalog, install) -> None:
    plan = build_dynamic_model_plan(catalog, install)
    assert all(not model.startswith("google/") for chain in plan.chains.values() for model in chain)


def test_deprecated_candidate_is_ranked_after_everything_else(catalog, install) -> None:
    plan = build_dynamic_model_plan(catalog, install)
    for chain in plan.chains.values():
        if "opencode/legacy" in chain:
            assert chain.index("opencode/legacy") > chain.index("opencode/big-pickle")


def test_designer_prefers_attachment_support(catalog, install) -> None:
    plan = build_dynamic_model_plan(catalog, install)
    assert plan.agents[AgentRole.DESIGNER].model == "anthropic/claude-opus-4-6"


@pytest.mark.parametrize("engine", ["v1", "v2"])
def test_plan_is_independent_of_catalog_order(catalog, install, engine) -> None:
    expected = build_dynamic_model_plan(catalog, install, engine=engine)
    rng = random.Random(7)
    for _ in range(10):
        shuffled = list(catalog)
        rng.shuffle(shuffled)
        assert build_dynamic_model_plan(shuffled, install, engine=engine) == expected


def test_unknown_engine_is_rejected(catalog, install) -> None:
    with pytest.raises(ValueError, match="Unknown scoring engine"):
        build_dynamic_model_plan(catalog, install, engine="v3")


def test_selected_model_missing_from_catalog_is_synthesised(catalog) -> None:
    install = InstallConfig(
        use_opencode_free_models=True,
        selected_opencode_primary_model="opencode/glm-4.7-free",
    )

    pool = candidate_pool(catalog, install)
    synthetic = next(model for model in pool if model.model == "opencode/glm-4.7-free")

    assert synthetic.provider_id == "opencode"
    assert synthetic.status == "active"
    assert synthetic.context_limit == SYNTHETIC_CONTEXT_LIMIT
    assert synthetic.output_limit == SYNTHETIC_OUTPUT_LIMIT
    assert synthetic.reasoning and synthetic.toolcall and not synthetic.attachment

    plan = build_dynamic_model_plan(catalog, install)
    assert all("opencode/glm-4.7-free" in chain for chain in plan.chains.values())


def test_synthetic_injection_ignores_malformed_ids_and_known_models(make_model) -> None:
    known = [make_model("opencode/sonic")]
    assert ensure_synthetic_model(known, "opencode/sonic") is known
    assert ensure_synthetic_model(known, "no-slash") is known
    assert ensure_synthetic_model(known, None) is known
    assert len(ensure_synthetic_model(known, "opencode/new")) == 2
    assert len(known) == 1


def test_duplicate_catalog_entries_keep_first_record(make_model) -> None:
    first = make_model("openai/gpt-5", context_limit=100)
    merged = dedupe_catalog([first, make_model("openai/gpt-5", context_limit=999), make_model("openai/o3")])
    assert [model.model for model in merged] == ["openai/gpt-5", "openai/o3"]
    assert merged[0] is first
