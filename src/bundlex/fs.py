"""Filesystem capability consumed by the resolver.

Every component takes a ``FileSystem`` so the resolution logic never reaches
for ambient filesystem state directly. ``LocalFileSystem`` is the only
implementation shipped; tests drive it against temporary directories.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Read-only filesystem operations used during resolution."""

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def is_symlink(self, path: Path) -> bool: ...

    def realpath(self, path: Path) -> Path: ...

    def mtime(self, path: Path) -> float: ...

    def read_text(self, path: Path) -> str: ...

    def walk(self, top: Path) -> Iterator[tuple[Path, list[str], list[str]]]: ...

    def list_dir(self, path: Path) -> list[str]: ...


class LocalFileSystem:
    """``FileSystem`` backed by the real disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()

    def realpath(self, path: Path) -> Path:
        return Path(os.path.realpath(path))

    def mtime(self, path: Path) -> float:
        return path.stat().st_mtime

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def walk(self, top: Path) -> Iterator[tuple[Path, list[str], list[str]]]:
        """Top-down walk; callers may prune ``dirnames`` in place."""
        for dirpath, dirnames, filenames in os.walk(top):
            yield Path(dirpath), dirnames, filenames

    def list_dir(self, path: Path) -> list[str]:
        """Entry names of ``path``; raises ``OSError`` when it cannot be listed."""
        return os.listdir(path)


DEFAULT_FS: FileSystem = LocalFileSystem()
