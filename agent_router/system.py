"""
Host-system collaborators: locating the `opencode` binary and looking up the
latest published package version.

Nothing in the scoring or planning code calls into this module.
"""

import logging
import os
import subprocess
from typing import Optional, Sequence

import httpx

from agent_router.config import DEFAULT_NPM_REGISTRY_URL

logger = logging.getLogger(__name__)

_PROBE_TIMEOUT_S = 10


def default_opencode_paths() -> list[str]:
    home = os.path.expanduser("~")
    return [
        "opencode",
        f"{home}/.local/bin/opencode",
        f"{home}/.opencode/bin/opencode",
        "/usr/local/bin/opencode",
        "/opt/opencode/bin/opencode",
        f"{home}/bin/opencode",
    ]


def _probe(command: Sequence[str]) -> Optional[subprocess.CompletedProcess]:
    try:
        return subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            timeout=_PROBE_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("Probe failed | cmd=%s error=%s", command[0], exc)
        return None


class OpenCodeLocator:
    """
    Finds a working `opencode` executable and caches the result.

    The cache lives on the instance; call invalidate() after installing or
    moving the binary.
    """

    def __init__(self, candidates: Optional[Sequence[str]] = None) -> None:
        self._candidates = list(candidates) if candidates is not None else default_opencode_paths()
        self._cached: Optional[str] = None
        self._searched = False

    def invalidate(self) -> None:
        self._cached = None
        self._searched = False

    def resolve(self) -> Optional[str]:
        """First candidate answering `--version` with exit code 0, or None. A miss is cached too."""
        if self._searched:
            return self._cached
        for candidate in self._candidates:
            result = _probe([candidate, "--version"])
            if result is not None and result.returncode == 0:
                self._cached = candidate
                logger.debug("Located opencode | path=%s", candidate)
                break
        else:
            logger.debug("opencode not found | candidates=%d", len(self._candidates))
        self._searched = True
        return self._cached

    def is_installed(self) -> bool:
        return self.resolve() is not None

    def command(self) -> str:
        """Executable to invoke; falls back to relying on PATH."""
        return self.resolve() or "opencode"

    def path(self) -> Optional[str]:
        """Resolved location when it is not the bare PATH lookup."""
        resolved = self.resolve()
        return None if resolved in (None, "opencode") else resolved

    def version(self) -> Optional[str]:
        result = _probe([self.command(), "--version"])
        if result is None or result.returncode != 0:
            return None
        return result.stdout.strip() or None


def is_tmux_installed() -> bool:
    result = _probe(["tmux", "-V"])
    return result is not None and result.returncode == 0


def fetch_latest_version(
    package_name: str,
    client: Optional[httpx.Client] = None,
    registry_url: str = DEFAULT_NPM_REGISTRY_URL,
) -> Optional[str]:
    """Latest published version of an npm package, or None on any failure."""
    url = f"{registry_url.rstrip('/')}/{package_name}/latest"
    owns_client = client is None
    http = client or httpx.Client(timeout=10)
    try:
        response = http.get(url)
        if response.status_code != 200:
            logger.warning("Version lookup failed | package=%s status=%d", package_name, response.status_code)
            return None
        data = response.json()
        version = data.get("version") if isinstance(data, dict) else None
        return version if isinstance(version, str) else None
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Version lookup failed | package=%s error=%s", package_name, exc)
        return None
    finally:
        if owns_client:
            http.close()
