"""Workspace root validation and package glob loading.

Glob patterns are read from the first source present at the workspace root:

  1. ``lerna.json`` ``packages``
  2. ``pnpm-workspace.yaml`` ``packages``
  3. ``package.json`` ``workspaces`` (list, or mapping with ``packages``)
  4. ``DEFAULT_WORKSPACE_PATTERNS``
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from bundlex.config import (
    DEFAULT_WORKSPACE_PATTERNS,
    LERNA_FILENAME,
    MANIFEST_FILENAME,
    PNPM_WORKSPACE_FILENAME,
)
from bundlex.fs import DEFAULT_FS, FileSystem

logger = logging.getLogger(__name__)

WORKSPACE_REASON_UNREADABLE = "WORKSPACE_UNREADABLE"
WORKSPACE_REASON_MANIFEST_INVALID = "WORKSPACE_MANIFEST_INVALID"
WORKSPACE_REASON_PATTERN_INVALID = "PATTERN_INVALID"


class WorkspaceError(RuntimeError):
    """The workspace as a whole cannot be resolved."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = WORKSPACE_REASON_UNREADABLE) -> None:
        super().__init__(message)
        self.reason_code = reason_code


def require_workspace_root(root: Path, fs: FileSystem = DEFAULT_FS) -> Path:
    """Return the absolute workspace root or raise if it cannot be enumerated."""
    resolved = root.absolute()
    if not fs.exists(resolved):
        raise WorkspaceError(f"Workspace root does not exist: {resolved}")
    if not fs.is_dir(resolved):
        raise WorkspaceError(f"Workspace root is not a directory: {resolved}")
    try:
        fs.list_dir(resolved)
    except OSError as exc:
        raise WorkspaceError(f"Workspace root is not readable: {resolved} ({exc.strerror or exc})") from exc
    return resolved


def load_workspace_patterns(root: Path, fs: FileSystem = DEFAULT_FS) -> tuple[str, ...]:
    """Return the ordered package glob patterns declared by the workspace."""
    lerna_path = root / LERNA_FILENAME
    if fs.is_file(lerna_path):
        data = _load_json(lerna_path, fs)
        if "packages" in data:
            return _pattern_list(data["packages"], lerna_path)

    pnpm_path = root / PNPM_WORKSPACE_FILENAME
    if fs.is_file(pnpm_path):
        try:
            raw = yaml.safe_load(fs.read_text(pnpm_path))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise WorkspaceError(
                f"{PNPM_WORKSPACE_FILENAME} parse error: {exc}",
                WORKSPACE_REASON_MANIFEST_INVALID,
            ) from exc
        if isinstance(raw, Mapping) and "packages" in raw:
            return _pattern_list(raw["packages"], pnpm_path)

    root_manifest = root / MANIFEST_FILENAME
    if fs.is_file(root_manifest):
        workspaces = _load_json(root_manifest, fs).get("workspaces")
        if isinstance(workspaces, Mapping):
            workspaces = workspaces.get("packages")
        if workspaces is not None:
            return _pattern_list(workspaces, root_manifest)

    logger.debug("no workspace globs declared under %s; using defaults", root)
    return DEFAULT_WORKSPACE_PATTERNS


def _load_json(path: Path, fs: FileSystem) -> dict[str, Any]:
    try:
        data = json.loads(fs.read_text(path))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise WorkspaceError(f"{path.name} parse error: {exc}", WORKSPACE_REASON_MANIFEST_INVALID) from exc
    if not isinstance(data, dict):
        raise WorkspaceError(
            f"{path.name} parse error: expected mapping at top level",
            WORKSPACE_REASON_MANIFEST_INVALID,
        )
    return data


def _pattern_list(value: Any, source: Path) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise WorkspaceError(
            f"{source.name}: `packages` must be a list of glob strings",
            WORKSPACE_REASON_MANIFEST_INVALID,
        )
    return tuple(value)
