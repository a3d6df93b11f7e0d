"""
Model-preferences tool surface.

Operations
──────────
show         Derive and display the current manual plan from the config.
plan         Validate a manual plan and preview the compiled config (no write).
apply        Same compile as `plan`, then persist. Requires confirm=true.
reset-agent  Recompute one role's manual plan from policy defaults and persist.

Every operation returns human-readable text. Validation failures and
refusals are reported in the text and never touch the file; a config that
cannot be parsed raises ConfigError.
"""

import json
import logging
from typing import Any, Optional

from agent_router.config_io import ConfigStore
from agent_router.models import ManualPlan, PluginConfig
from agent_router.plan_compiler import (
    compile_manual_plan_to_config,
    derive_manual_plan_from_config,
)
from agent_router.roles import AGENT_ROLES, ROLE_NAMES, AgentRole
from agent_router.validation import ValidationReport, validate_manual_plan

logger = logging.getLogger(__name__)

OPERATIONS: tuple[str, ...] = ("show", "plan", "apply", "reset-agent")

TOOL_DESCRIPTION = """Manage model preferences.

Operations:
- show: show current per-agent primary + 3 fallbacks
- plan: validate and preview manual plan compile (no write)
- apply: validate and write manual plan atomically
- reset-agent: reset one agent manual chain from policy defaults"""


def _stringify(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _invalid_plan(report: ValidationReport) -> str:
    errors = [{"path": err.path, "message": err.message} for err in report.errors]
    return f"Invalid plan:\n{_stringify(errors)}"


def compile_preview(config: PluginConfig, plan: ManualPlan) -> PluginConfig:
    """The config `apply` would persist for this plan."""
    return compile_manual_plan_to_config(config, plan)


def preview_summary(config: PluginConfig) -> dict[str, Any]:
    agents = config.agents or {}
    return {
        "agents": {
            role.value: {"model": agents[role.value].model if role.value in agents else None}
            for role in AGENT_ROLES
        },
        "fallback": config.fallback.model_dump(mode="json", by_alias=True) if config.fallback else None,
    }


class PreferencesTool:
    def __init__(self, store: ConfigStore) -> None:
        self.store = store

    def execute(
        self,
        operation: str,
        plan: Optional[Any] = None,
        agent: Optional[str] = None,
        confirm: Optional[bool] = None,
    ) -> str:
        if operation not in OPERATIONS:
            return f"Unsupported operation {operation!r}. Expected one of: {', '.join(OPERATIONS)}"

        logger.info("Preferences operation | op=%s agent=%s", operation, agent)

        if operation == "show":
            return self._show()
        if operation == "plan":
            return self._plan(plan)
        if operation == "apply":
            return self._apply(plan, confirm)
        return self._reset_agent(agent)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _show(self) -> str:
        config = self.store.read()
        manual_plan = derive_manual_plan_from_config(config)
        return f"Loaded: {self.store.path}\n\n{_stringify({'manualPlan': manual_plan.model_dump()})}"

    def _plan(self, payload: Optional[Any]) -> str:
        config = self.store.read()
        report = validate_manual_plan(payload)
        if not report.ok:
            return _invalid_plan(report)

        preview = compile_preview(config, report.plan)
        return f"Plan preview (no write):\n\n{_stringify(preview_summary(preview))}"

    def _apply(self, payload: Optional[Any], confirm: Optional[bool]) -> str:
        if confirm is not True:
            return "Refusing apply without confirm=true."

        report = validate_manual_plan(payload)
        if not report.ok:
            return _invalid_plan(report)

        self.store.update(lambda config: compile_preview(config, report.plan))
        logger.info("Manual plan applied | path=%s", self.store.path)
        return (
            f"Applied manual plan to {self.store.path}. "
            f"Backup written as {self.store.backup_path}. Restart OpenCode for new sessions."
        )

    def _reset_agent(self, agent: Optional[str]) -> str:
        role = AgentRole.parse(agent)
        if role is None:
            return f"Invalid agent. Expected one of: {', '.join(ROLE_NAMES)}"

        def reset(config: PluginConfig) -> PluginConfig:
            return compile_manual_plan_to_config(config, derive_manual_plan_from_config(config))

        self.store.update(reset)
        logger.info("Agent reset | role=%s path=%s", role.value, self.store.path)
        return f"Reset agent {role.value} and wrote updated plan to {self.store.path}."
