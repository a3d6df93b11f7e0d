#!/usr/bin/env python3
"""
Build and print the dynamic per-role model plan from catalog/signal files.

Usage:
    python scripts/build_plan.py --catalog catalog.json [--signals signals.json]
        [--providers openai,anthropic,opencode] [--engine v2]
        [--opencode-primary opencode/glm-4.7-free] [--chutes-primary chutes/kimi-k2.5]

catalog.json is a list of candidate records (provider_id, model, name, status,
context_limit, output_limit, reasoning, toolcall, attachment); signals.json
maps a model id to {source, quality_score, coding_score, latency_seconds,
input_price_per_1m, output_price_per_1m}.
"""

import argparse
import json
import logging
import pathlib
import sys

# Ensure the project root is on sys.path so `agent_router.*` imports work when
# the script is run directly.
_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from pydantic import TypeAdapter, ValidationError

from agent_router.catalog import DiscoveredModel, ExternalSignal, InstallConfig, normalize_signal_map
from agent_router.planner import build_dynamic_model_plan

logger = logging.getLogger("build_plan")

_PROVIDER_FLAGS = {
    "openai": "has_openai",
    "anthropic": "has_anthropic",
    "github-copilot": "has_copilot",
    "zai-coding-plan": "has_zai_plan",
    "kimi-for-coding": "has_kimi",
    "google": "has_antigravity",
    "chutes": "has_chutes",
    "opencode": "use_opencode_free_models",
}


def _load_json(path: pathlib.Path):
    return json.loads(path.read_text(encoding="utf-8"))


def main() -> int:
    parser = argparse.ArgumentParser(description="Build the dynamic per-role model plan")
    parser.add_argument("--catalog", type=pathlib.Path, required=True)
    parser.add_argument("--signals", type=pathlib.Path, default=None)
    parser.add_argument(
        "--providers",
        default="opencode",
        help=f"Comma-separated enabled providers ({', '.join(_PROVIDER_FLAGS)})",
    )
    parser.add_argument("--engine", choices=("v1", "v2"), default="v1")
    parser.add_argument("--chutes-primary", default=None)
    parser.add_argument("--chutes-secondary", default=None)
    parser.add_argument("--opencode-primary", default=None)
    parser.add_argument("--opencode-secondary", default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    providers = {name.strip() for name in args.providers.split(",") if name.strip()}
    unknown = providers - set(_PROVIDER_FLAGS)
    if unknown:
        parser.error(f"unknown provider(s): {', '.join(sorted(unknown))}")

    try:
        catalog = TypeAdapter(list[DiscoveredModel]).validate_python(_load_json(args.catalog))
        signals = (
            TypeAdapter(dict[str, ExternalSignal]).validate_python(_load_json(args.signals))
            if args.signals
            else {}
        )
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("Could not load inputs: %s", exc)
        return 1

    install = InstallConfig(
        **{_PROVIDER_FLAGS[name]: True for name in providers},
        selected_chutes_primary_model=args.chutes_primary,
        selected_chutes_secondary_model=args.chutes_secondary,
        selected_opencode_primary_model=args.opencode_primary,
        selected_opencode_secondary_model=args.opencode_secondary,
    )

    plan = build_dynamic_model_plan(catalog, install, normalize_signal_map(signals), args.engine)
    if plan is None:
        print("No plan: no enabled provider has candidates.")
        return 2

    payload = {
        "agents": {role.value: {"model": a.model, "variant": a.variant} for role, a in plan.agents.items()},
        "chains": {role.value: chain for role, chain in plan.chains.items()},
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
