"""Render bundler configurations for packages that need a build."""

from __future__ import annotations

import os
from pathlib import Path

from bundlex.resolve.types import (
    BuildConfig,
    Decision,
    GateResult,
    OutputTarget,
    PackageDescriptor,
    PackageReport,
    RuntimeOptions,
    StalenessVerdict,
    WatchOptions,
)

# (manifest field, bundle format) in emission order
OUTPUT_FORMATS: tuple[tuple[str, str], ...] = (("main", "cjs"), ("module", "esm"))


def relative_to_caller(path: Path, caller_cwd: Path) -> str:
    """Express ``path`` relative to the caller's working directory."""
    return Path(os.path.relpath(path.absolute(), caller_cwd.absolute())).as_posix()


def output_targets(descriptor: PackageDescriptor, caller_cwd: Path) -> tuple[OutputTarget, ...]:
    targets = []
    for field_name, fmt in OUTPUT_FORMATS:
        rel = getattr(descriptor.manifest, field_name)
        if rel:
            targets.append(OutputTarget(relative_to_caller(descriptor.directory / rel, caller_cwd), fmt))
    return tuple(targets)


def assemble(
    descriptor: PackageDescriptor,
    gate: GateResult,
    verdict: StalenessVerdict | None,
    entry: Path,
    options: RuntimeOptions,
    caller_cwd: Path,
) -> BuildConfig | None:
    """Return the package's build config, or None when it needs no build."""
    forced = gate.decision is Decision.FORCE_INCLUDE
    if not forced and (verdict is None or not verdict.is_stale):
        return None

    return BuildConfig(
        input=relative_to_caller(entry, caller_cwd),
        output=output_targets(descriptor, caller_cwd),
        watch=WatchOptions(clear_screen=False) if options.watch else None,
    )


def assemble_all(reports: list[PackageReport]) -> list[BuildConfig]:
    """Collect emitted configs, keeping discovery order."""
    return [report.config for report in reports if report.config is not None]
