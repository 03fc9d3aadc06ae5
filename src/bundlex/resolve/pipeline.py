"""Resolution pass: discover -> gate -> staleness -> configs."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from bundlex.fs import DEFAULT_FS, FileSystem
from bundlex.resolve.assemble import assemble, assemble_all
from bundlex.resolve.discover import discover
from bundlex.resolve.policy import admit
from bundlex.resolve.staleness import evaluate, resolve_entry
from bundlex.resolve.types import (
    BuildConfig,
    Decision,
    GateResult,
    PackageDescriptor,
    PackageReport,
    RuntimeOptions,
)
from bundlex.workspace import load_workspace_patterns, require_workspace_root

logger = logging.getLogger(__name__)


def evaluate_package(
    descriptor: PackageDescriptor,
    options: RuntimeOptions,
    caller_cwd: Path,
    fs: FileSystem = DEFAULT_FS,
) -> PackageReport:
    """Run one package through the gate, the oracle and the assembler."""
    gate = admit(descriptor, options)
    if gate.decision is Decision.EXCLUDED:
        logger.debug("%s excluded: %s", descriptor.directory, gate.reason)
        return PackageReport(descriptor, gate)

    entry = resolve_entry(descriptor, fs)
    if entry is None:
        gate = GateResult(Decision.EXCLUDED, "entry file not found")
        logger.debug("%s excluded: %s", descriptor.directory, gate.reason)
        return PackageReport(descriptor, gate)

    verdict = None
    if gate.decision is Decision.PROCEED:
        verdict = evaluate(descriptor, entry, fs)
        logger.debug("%s: %s", descriptor.directory, verdict.reason)

    config = assemble(descriptor, gate, verdict, entry, options, caller_cwd)
    return PackageReport(descriptor, gate, verdict, config)


def resolve_workspace(
    cwd: Path | str | None = None,
    *,
    watch: bool = False,
    watch_signaled: bool = False,
    caller_cwd: Path | str | None = None,
    patterns: tuple[str, ...] | list[str] | None = None,
    fs: FileSystem = DEFAULT_FS,
    jobs: int | None = None,
) -> list[PackageReport]:
    """Resolve every discovered package and return its trace, in discovery order.

    Args:
        cwd: Workspace root to search (defaults to the process working directory)
        watch: Explicit watch option; adds a watch block to every config
        watch_signaled: An external watch process is already running
        caller_cwd: Directory reported paths are relative to (defaults to the
            process working directory)
        patterns: Package globs (defaults to the workspace's declared globs)
        fs: Filesystem capability
        jobs: Evaluate packages on this many threads when greater than one

    Raises:
        WorkspaceError: If the workspace root or its globs cannot be used
    """
    root = require_workspace_root(Path(cwd) if cwd is not None else Path.cwd(), fs)
    reporter = Path(caller_cwd) if caller_cwd is not None else Path.cwd()
    options = RuntimeOptions(watch=watch, watch_signaled=watch_signaled)

    globs = tuple(patterns) if patterns is not None else load_workspace_patterns(root, fs)
    descriptors = discover(root, globs, fs)
    logger.debug("discovered %d package(s) under %s", len(descriptors), root)

    if jobs is not None and jobs > 1 and len(descriptors) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            return list(pool.map(lambda d: evaluate_package(d, options, reporter, fs), descriptors))
    return [evaluate_package(d, options, reporter, fs) for d in descriptors]


def find_configs(
    cwd: Path | str | None = None,
    *,
    watch: bool = False,
    watch_signaled: bool = False,
    caller_cwd: Path | str | None = None,
    patterns: tuple[str, ...] | list[str] | None = None,
    fs: FileSystem = DEFAULT_FS,
    jobs: int | None = None,
) -> list[BuildConfig]:
    """Return bundler configs for every package that needs a build right now.

    See ``resolve_workspace`` for arguments. An empty list means everything
    is up to date.
    """
    reports = resolve_workspace(
        cwd,
        watch=watch,
        watch_signaled=watch_signaled,
        caller_cwd=caller_cwd,
        patterns=patterns,
        fs=fs,
        jobs=jobs,
    )
    return assemble_all(reports)
