"""Read the package.json fields that drive build decisions."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bundlex.config import MANIFEST_FILENAME, POLICY_KEY
from bundlex.fs import DEFAULT_FS, FileSystem


class ManifestError(ValueError):
    """A package manifest is missing, unreadable, or not a JSON object."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


@dataclass(frozen=True)
class BuildPolicy:
    """Build policy block (``pkg.rollup``) of a package manifest."""

    entry_override: str | None = None
    skip: bool = False
    ignore_watch: bool = False

    @classmethod
    def from_block(cls, block: Any) -> BuildPolicy:
        if not isinstance(block, Mapping):
            return cls()
        entry = block.get("input")
        return cls(
            entry_override=entry if isinstance(entry, str) and entry else None,
            skip=bool(block.get("skip", False)),
            ignore_watch=bool(block.get("ignoreWatch", False)),
        )


@dataclass(frozen=True)
class PackageManifest:
    """Normalized view of a package.json."""

    name: str | None
    main: str | None
    module: str | None
    dependencies: tuple[str, ...]
    policy: BuildPolicy
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PackageManifest:
        deps = data.get("dependencies")
        return cls(
            name=_optional_str(data.get("name")),
            main=_optional_str(data.get("main")),
            module=_optional_str(data.get("module")),
            dependencies=tuple(deps) if isinstance(deps, Mapping) else (),
            policy=BuildPolicy.from_block(data.get(POLICY_KEY)),
            raw=data,
        )


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def manifest_path(package_dir: Path) -> Path:
    return package_dir / MANIFEST_FILENAME


def has_manifest(package_dir: Path, fs: FileSystem = DEFAULT_FS) -> bool:
    return fs.is_file(manifest_path(package_dir))


def read_manifest(package_dir: Path, fs: FileSystem = DEFAULT_FS) -> PackageManifest:
    """Load and normalize ``package_dir/package.json``.

    Raises:
        ManifestError: If the file is missing, unreadable, not UTF-8, or not a JSON object
    """
    path = manifest_path(package_dir)
    try:
        text = fs.read_text(path)
    except OSError as exc:
        raise ManifestError(path, f"unreadable manifest ({exc.strerror or exc})") from exc
    except UnicodeDecodeError as exc:
        raise ManifestError(path, f"manifest is not valid UTF-8 ({exc.reason})") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(path, f"malformed JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(path, "expected a JSON object at top level")
    return PackageManifest.from_dict(data)
