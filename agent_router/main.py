"""
FastAPI application: per-role model selection for a multi-agent system.

Endpoints
─────────
GET  /health         Health check.
GET  /roles          Agent roles with their variant tag and tool dependency.
POST /dynamic-plan   Rank a catalog and build the per-role plan + fallback chains.
POST /score          Explain the v2 ranking of a catalog for one role.
POST /preferences    Manual-plan tool surface: show | plan | apply | reset-agent.
GET  /system         opencode / tmux discovery and latest published version.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from agent_router.catalog import normalize_signal_map
from agent_router.config import Settings
from agent_router.config_io import ConfigError, ConfigStore
from agent_router.models import (
    DynamicPlanRequest,
    DynamicPlanResponse,
    PreferencesRequest,
    PreferencesResponse,
    RoleInfo,
    RolesResponse,
    ScoreRequest,
    ScoreResponse,
)
from agent_router.planner import build_dynamic_model_plan
from agent_router.preferences import PreferencesTool
from agent_router.ranker import rank_models_v2
from agent_router.roles import AGENT_ROLES, ROLE_VARIANT, TOOL_DEPENDENT_ROLES
from agent_router.system import OpenCodeLocator, fetch_latest_version, is_tmux_installed

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

load_dotenv()
settings = Settings.from_env()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lifespan: config sanity check
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Using config file %s", config_store.path)
    try:
        config_store.read()
    except ConfigError as exc:
        logger.warning("Config file is unreadable, /preferences will fail until fixed: %s", exc)
    yield


# ---------------------------------------------------------------------------
# App + singletons
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Agent Model Router",
    description="Deterministic per-role model selection with manual overrides.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:4173"],
    allow_methods=["*"],
    allow_headers=["*"],
)

config_store     = ConfigStore(settings.config_path)
preferences_tool = PreferencesTool(config_store)
locator          = OpenCodeLocator()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    """Health check."""
    return {"status": "ok", "config_path": str(config_store.path)}


@app.get("/roles", response_model=RolesResponse)
def list_roles() -> RolesResponse:
    return RolesResponse(
        roles=[
            RoleInfo(name=role, variant=ROLE_VARIANT[role], tool_dependent=role in TOOL_DEPENDENT_ROLES)
            for role in AGENT_ROLES
        ]
    )


@app.post("/dynamic-plan", response_model=DynamicPlanResponse)
def dynamic_plan(request: DynamicPlanRequest) -> DynamicPlanResponse:
    """
    Build the per-role plan from the supplied catalog, signals and install
    flags. `plan` is null when no provider is enabled or no role resolves;
    callers then fall back to their static defaults.
    """
    logger.info(
        "Received /dynamic-plan request | candidates=%d signals=%d engine=%s",
        len(request.catalog), len(request.signals), request.engine,
    )
    signals = normalize_signal_map(request.signals)
    plan = build_dynamic_model_plan(request.catalog, request.install, signals, request.engine)
    return DynamicPlanResponse(plan=plan)


@app.post("/score", response_model=ScoreResponse)
def score(request: ScoreRequest) -> ScoreResponse:
    """v2 ranking for one role with the per-feature breakdown of each candidate."""
    ranked = rank_models_v2(request.catalog, request.role, normalize_signal_map(request.signals))
    return ScoreResponse(role=request.role, ranked=ranked)


@app.post("/preferences", response_model=PreferencesResponse)
def preferences(request: PreferencesRequest) -> PreferencesResponse:
    """
    Tool surface for manual model preferences. Validation failures and
    refusals come back as text in `result`; an unreadable config is a 422.
    """
    try:
        result = preferences_tool.execute(
            request.operation,
            plan=request.plan,
            agent=request.agent,
            confirm=request.confirm,
        )
    except ConfigError as exc:
        logger.error("Preferences %s failed: %s", request.operation, exc)
        raise HTTPException(status_code=422, detail=str(exc))
    return PreferencesResponse(result=result)


@app.get("/system")
def system_info(
    package: Optional[str] = Query(default=None, description="npm package to look up the latest version of."),
) -> dict:
    return {
        "opencode_installed": locator.is_installed(),
        "opencode_path": locator.path(),
        "opencode_version": locator.version(),
        "tmux_installed": is_tmux_installed(),
        "latest_version": (
            fetch_latest_version(package, registry_url=settings.npm_registry_url) if package else None
        ),
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "agent_router.main:app",
        host=os.getenv("AGENT_ROUTER_HOST", "127.0.0.1"),
        port=int(os.getenv("AGENT_ROUTER_PORT", "8000")),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
