"""
Shared fixtures: candidate/signal factories, a full manual plan and a
config store rooted in the test's tmp_path.
"""

from pathlib import Path
from typing import Callable

import pytest

from agent_router.catalog import DiscoveredModel, ExternalSignal
from agent_router.config_io import ConfigStore
from agent_router.roles import ROLE_NAMES


def build_model(model: str, **overrides) -> DiscoveredModel:
    provider_id, _, bare = model.partition("/")
    fields = {
        "provider_id": provider_id or "openai",
        "model": model,
        "name": bare or model,
        "status": "active",
        "context_limit": 200_000,
        "output_limit": 32_000,
        "reasoning": True,
        "toolcall": True,
        "attachment": False,
    }
    fields.update(overrides)
    return DiscoveredModel(**fields)


@pytest.fixture
def make_model() -> Callable[..., DiscoveredModel]:
    return build_model


@pytest.fixture
def make_signal() -> Callable[..., ExternalSignal]:
    def _make(**overrides) -> ExternalSignal:
        fields = {"source": "artificial-analysis"}
        fields.update(overrides)
        return ExternalSignal(**fields)

    return _make


@pytest.fixture
def manual_plan_payload() -> dict:
    entry = {
        "primary": "openai/gpt-5.3-codex",
        "fallback1": "anthropic/claude-opus-4-6",
        "fallback2": "chutes/kimi-k2.5",
        "fallback3": "opencode/gpt-5-nano",
    }
    return {role: dict(entry) for role in ROLE_NAMES}


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "opencode" / "agent-router.json"


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    return ConfigStore(config_path)
