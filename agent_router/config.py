"""
Selection constants and service settings.

Constants here are the fixed policy of the selector (chain widths, terminal
default, default fill). Settings are read from the environment once at
service start-up; the scoring code never touches the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# ---------------------------------------------------------------------------
# Chain policy
# ---------------------------------------------------------------------------

# Always-available model appended to every automatically built chain and used
# as the system default when resolving manual chains.
TERMINAL_DEFAULT_MODEL = "opencode/big-pickle"

SYSTEM_DEFAULT_CHAIN: tuple[str, ...] = (TERMINAL_DEFAULT_MODEL,)

# Automatic chains: top pick + up to RANKED_CHAIN_DEPTH ranked entries,
# then provider picks and the terminal default, truncated to MAX_CHAIN_LENGTH.
MAX_CHAIN_LENGTH = 10
RANKED_CHAIN_DEPTH = 7

# Manual plans are exactly one primary plus three fallbacks.
MANUAL_CHAIN_WIDTH = 4

# Used to pad a chain derived from an existing config up to MANUAL_CHAIN_WIDTH.
DEFAULT_CHAIN_FILL: tuple[str, ...] = (
    "opencode/gpt-5-nano",
    "opencode/glm-4.7-free",
    "opencode/big-pickle",
    "opencode/sonic",
)

MANUAL_PRESET_NAME = "manual"

DEFAULT_FALLBACK_ENABLED = True
DEFAULT_FALLBACK_TIMEOUT_MS = 15_000

# ---------------------------------------------------------------------------
# Candidate normalisation ceilings
# ---------------------------------------------------------------------------

CONTEXT_LIMIT_CEILING = 1_000_000
OUTPUT_LIMIT_CEILING = 300_000

# Conservative capabilities given to an explicitly selected model that the
# catalog has not indexed yet.
SYNTHETIC_CONTEXT_LIMIT = 200_000
SYNTHETIC_OUTPUT_LIMIT = 32_000

# Score assigned on top of the weighted sum to deprecated candidates and to
# candidates missing a capability their role requires.
DISQUALIFIED_SCORE = -10_000.0

# ---------------------------------------------------------------------------
# Service settings
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "opencode" / "oh-my-opencode-slim.json"
DEFAULT_NPM_REGISTRY_URL = "https://registry.npmjs.org"


@dataclass(frozen=True)
class Settings:
    config_path: Path
    log_level: str
    npm_registry_url: str

    @classmethod
    def from_env(cls) -> "Settings":
        raw_path = os.getenv("AGENT_ROUTER_CONFIG_PATH", "").strip()
        return cls(
            config_path=Path(raw_path).expanduser() if raw_path else DEFAULT_CONFIG_PATH,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            npm_registry_url=os.getenv("NPM_REGISTRY_URL", DEFAULT_NPM_REGISTRY_URL).rstrip("/"),
        )
