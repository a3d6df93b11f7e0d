"""
Persisted configuration I/O.

Reads JSON (with // and /* */ comments tolerated), validates it against
PluginConfig, and writes it back atomically: the previous file is copied to
"<path>.bak", the new content goes to a temp file in the same directory and
replaces the target with os.replace, so readers see either the old or the
new file, never a partial one.

Read-modify-write cycles in this process are serialised by a lock per
resolved path. Locks are kept for the life of the process, one per path ever
used; the service touches a single path. Writers in other processes must be
serialised by the caller.
"""

import json
import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from agent_router.models import PluginConfig

logger = logging.getLogger(__name__)


class AgentRouterError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(AgentRouterError):
    """Configuration file is unreadable, unparsable or fails the schema."""


_LOCKS: dict[Path, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(key, threading.Lock())


def strip_json_comments(text: str) -> str:
    """Remove // line comments and /* */ block comments outside of strings."""
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def serialize_config(config: PluginConfig) -> str:
    """Pretty-printed, newline-terminated JSON."""
    return json.dumps(config.to_json_dict(), indent=2, ensure_ascii=False) + "\n"


def parse_config_text(text: str) -> PluginConfig:
    try:
        raw: Any = json.loads(strip_json_comments(text)) if text.strip() else {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("top-level value must be a JSON object")
    try:
        return PluginConfig.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
        raise ConfigError(f"schema error at {where}: {first.get('msg')}") from exc


class ConfigStore:
    """Owns one configuration file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(self.path.name + ".bak")

    def read(self) -> PluginConfig:
        if not self.path.exists():
            logger.info("Config not found, starting empty | path=%s", self.path)
            return PluginConfig()
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot read {self.path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigError(
                f"Failed to parse config {self.path}: not valid UTF-8 ({exc.reason} at byte {exc.start})"
            ) from exc
        try:
            return parse_config_text(text)
        except ConfigError as exc:
            raise ConfigError(f"Failed to parse config {self.path}: {exc}") from exc

    def write(self, config: PluginConfig) -> None:
        content = serialize_config(config)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.path.exists():
            shutil.copy2(self.path, self.backup_path)

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Config written | path=%s backup=%s", self.path, self.backup_path)

    def update(self, compute: Callable[[PluginConfig], PluginConfig]) -> PluginConfig:
        """Read the config, compute its successor and write it back under the path lock."""
        with _lock_for(self.path):
            current = self.read()
            next_config = compute(current)
            self.write(next_config)
            return next_config
