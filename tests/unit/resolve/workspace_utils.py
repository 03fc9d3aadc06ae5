"""Helpers for building throwaway workspaces in resolver tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

# Fixed clock so equal-mtime boundaries are exact.
BASE_MTIME = 1_700_000_000.0


def write_file(path: Path, contents: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    return path


def write_json(path: Path, data: Any) -> Path:
    return write_file(path, json.dumps(data))


def create_workspace(root: Path, packages: list[str] | None = None) -> Path:
    """Create a lerna-style workspace root whose packages live under modules/."""
    root.mkdir(parents=True, exist_ok=True)
    write_json(root / "lerna.json", {"packages": packages or ["modules/**"]})
    write_json(root / "package.json", {"name": "monorepo", "private": True})
    return root


def write_package(
    directory: Path,
    manifest: dict[str, Any],
    files: dict[str, str] | None = None,
) -> Path:
    """Create a package directory with a manifest and extra files."""
    write_json(directory / "package.json", manifest)
    for rel, contents in (files or {}).items():
        write_file(directory / rel, contents)
    return directory


def link(link_path: Path, target: Path) -> Path:
    """Create a relative symlink at ``link_path`` pointing to ``target``."""
    link_path.parent.mkdir(parents=True, exist_ok=True)
    link_path.symlink_to(os.path.relpath(target, link_path.parent), target_is_directory=True)
    return link_path


def freeze_tree(root: Path, mtime: float = BASE_MTIME) -> None:
    """Set every regular file under ``root`` to the same mtime."""
    for dirpath, _, filenames in os.walk(root):
        for filename in filenames:
            path = Path(dirpath) / filename
            if not path.is_symlink():
                os.utime(path, (mtime, mtime))


def touch(path: Path, offset: float = 10.0) -> Path:
    """Move ``path`` ``offset`` seconds past the frozen clock."""
    mtime = BASE_MTIME + offset
    os.utime(path, (mtime, mtime))
    return path
