"""Constants and environment readers shared across bundlex."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

MANIFEST_FILENAME = "package.json"
DEPENDENCY_DIRNAME = "node_modules"
SOURCE_DIRNAME = "src"
POLICY_KEY = "rollup"

# Probe order for conventional entry files.
ENTRY_EXTENSIONS: tuple[str, ...] = (".js", ".jsx")

TEST_DIRNAMES: frozenset[str] = frozenset({"__tests__", "__mocks__", "test", "tests"})
TEST_FILE_PATTERN = re.compile(r"(?:[.\-_](?:test|spec))\.[^.]+$")

LERNA_FILENAME = "lerna.json"
PNPM_WORKSPACE_FILENAME = "pnpm-workspace.yaml"
DEFAULT_WORKSPACE_PATTERNS: tuple[str, ...] = ("packages/*",)

WATCH_ENV_VAR = "ROLLUP_WATCH"
LOG_LEVEL_ENV_VAR = "BUNDLEX_LOG_LEVEL"

_FALSY = {"", "0", "false", "no", "off"}


def watch_signaled_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Return True when an external watch process announced itself."""
    env = os.environ if environ is None else environ
    value = env.get(WATCH_ENV_VAR)
    if value is None:
        return False
    return value.strip().lower() not in _FALSY


def log_level_from_env(environ: Mapping[str, str] | None = None, default: str = "WARNING") -> str:
    """Return the configured log level name, falling back to ``default``."""
    env = os.environ if environ is None else environ
    value = env.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    if value in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        return value
    return default
