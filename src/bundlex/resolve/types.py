"""Types for workspace build resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from bundlex.manifest import PackageManifest


@dataclass(frozen=True)
class PackageDescriptor:
    """A discovered package. ``directory`` is its real path and unique key."""

    directory: Path
    manifest: PackageManifest
    is_local_link: bool = False


@dataclass(frozen=True)
class External:
    """Dependency published outside the workspace (plain directory or absent)."""

    name: str


@dataclass(frozen=True)
class Local:
    """Dependency linked to a package directory inside the workspace."""

    name: str
    directory: Path


DependencyLocation = External | Local


@dataclass(frozen=True)
class RuntimeOptions:
    """Caller-supplied switches for one resolution pass.

    ``watch`` is the explicit option; ``watch_signaled`` is the translated
    ambient signal from an already-running watch process.
    """

    watch: bool = False
    watch_signaled: bool = False

    @property
    def watch_mode_requested(self) -> bool:
        return self.watch or self.watch_signaled


class Decision(str, Enum):
    """Policy gate outcome."""

    EXCLUDED = "excluded"
    FORCE_INCLUDE = "force-include"
    PROCEED = "proceed"


@dataclass(frozen=True)
class GateResult:
    decision: Decision
    reason: str


@dataclass(frozen=True)
class StalenessVerdict:
    """Outcome of comparing a package's sources with its build output."""

    entry_path: Path
    output_path: Path
    is_stale: bool
    reason: str


@dataclass(frozen=True)
class OutputTarget:
    file: str
    format: str


@dataclass(frozen=True)
class WatchOptions:
    clear_screen: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"clearScreen": self.clear_screen}


@dataclass(frozen=True)
class BuildConfig:
    """Bundler configuration for one stale package."""

    input: str
    output: tuple[OutputTarget, ...]
    watch: WatchOptions | None = None

    def to_dict(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            "input": self.input,
            "output": [{"file": target.file, "format": target.format} for target in self.output],
        }
        if self.watch is not None:
            rendered["watch"] = self.watch.to_dict()
        return rendered


@dataclass(frozen=True)
class PackageReport:
    """Per-package trace of one resolution pass."""

    descriptor: PackageDescriptor
    gate: GateResult
    verdict: StalenessVerdict | None = None
    config: BuildConfig | None = None

    @property
    def included(self) -> bool:
        return self.config is not None
