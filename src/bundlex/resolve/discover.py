"""Package discovery: glob seeding plus symlinked-dependency traversal."""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Iterator
from pathlib import Path

from bundlex.config import DEPENDENCY_DIRNAME
from bundlex.fs import DEFAULT_FS, FileSystem
from bundlex.manifest import ManifestError, has_manifest, read_manifest
from bundlex.resolve.types import DependencyLocation, External, Local, PackageDescriptor
from bundlex.workspace import WORKSPACE_REASON_PATTERN_INVALID, WorkspaceError

logger = logging.getLogger(__name__)

_MAGIC = re.compile(r"[*?[]")


def expand_patterns(
    root: Path,
    patterns: tuple[str, ...] | list[str],
    fs: FileSystem = DEFAULT_FS,
) -> list[Path]:
    """Expand workspace globs to package directories, in pattern order.

    Matches within one pattern are sorted by relative POSIX path. Patterns
    prefixed with ``!`` remove earlier matches. Directories under a
    dependency directory and directories without a manifest never match.

    Raises:
        WorkspaceError: If a pattern is empty, absolute, or escapes the workspace
    """
    ordered: dict[Path, Path] = {}
    for pattern in patterns:
        negated = pattern.startswith("!")
        body = pattern[1:] if negated else pattern
        matches = _glob_packages(root, body, fs)
        if negated:
            for real in [real for real, path in ordered.items() if path in matches]:
                del ordered[real]
            continue
        for path in matches:
            real = fs.realpath(path)
            if real not in ordered:
                ordered[real] = path
    return list(ordered.values())


def _glob_packages(root: Path, pattern: str, fs: FileSystem) -> list[Path]:
    segments = _pattern_segments(pattern)
    matches = {
        path
        for path in _match_segments(root, segments, fs)
        if path != root and has_manifest(path, fs)
    }
    return sorted(matches, key=lambda p: p.relative_to(root).as_posix())


def _pattern_segments(pattern: str) -> tuple[str, ...]:
    body = pattern.strip()
    if not body or Path(body).is_absolute():
        raise WorkspaceError(f"Invalid package glob: {pattern!r}", WORKSPACE_REASON_PATTERN_INVALID)
    segments = tuple(part for part in body.split("/") if part not in ("", "."))
    for part in segments:
        if part == "..":
            raise WorkspaceError(
                f"Invalid package glob {pattern!r}: '..' escapes the workspace",
                WORKSPACE_REASON_PATTERN_INVALID,
            )
        if "**" in part and part != "**":
            raise WorkspaceError(
                f"Invalid package glob {pattern!r}: '**' can only be an entire path component",
                WORKSPACE_REASON_PATTERN_INVALID,
            )
    return segments


def _match_segments(base: Path, segments: tuple[str, ...], fs: FileSystem) -> Iterator[Path]:
    """Yield directories under ``base`` matching ``segments``.

    Dependency directories are never entered. ``**`` matches zero or more
    directories and does not descend through symlinks.
    """
    if not segments:
        yield base
        return
    head, rest = segments[0], segments[1:]

    if head == "**":
        yield from _match_segments(base, rest, fs)
        for child in _child_dirs(base, fs):
            if not fs.is_symlink(child):
                yield from _match_segments(child, segments, fs)
        return

    if not _MAGIC.search(head):
        child = base / head
        if head != DEPENDENCY_DIRNAME and fs.is_dir(child):
            yield from _match_segments(child, rest, fs)
        return

    for child in _child_dirs(base, fs):
        if fnmatch.fnmatchcase(child.name, head):
            yield from _match_segments(child, rest, fs)


def _child_dirs(base: Path, fs: FileSystem) -> list[Path]:
    try:
        names = fs.list_dir(base)
    except OSError as exc:
        logger.debug("cannot list %s while expanding globs: %s", base, exc)
        return []
    return [base / name for name in sorted(names) if name != DEPENDENCY_DIRNAME and fs.is_dir(base / name)]


def resolve_dependency_location(
    package_dir: Path,
    name: str,
    workspace_root: Path,
    fs: FileSystem = DEFAULT_FS,
) -> DependencyLocation:
    """Classify a declared dependency as linked-local or external.

    Only a symlink whose target lies inside the workspace, outside any
    dependency directory, and holds a manifest counts as local. Plain
    (copied) directories and links into a package-manager store such as
    ``node_modules/.pnpm`` are published packages and are never built.
    """
    link = package_dir / DEPENDENCY_DIRNAME / name
    if not fs.is_symlink(link):
        return External(name)
    target = fs.realpath(link)
    real_root = fs.realpath(workspace_root)
    if not target.is_relative_to(real_root) or not fs.is_dir(target):
        return External(name)
    rel = target.relative_to(real_root)
    if DEPENDENCY_DIRNAME in rel.parts:
        return External(name)
    if not has_manifest(target, fs):
        return External(name)
    return Local(name, workspace_root / rel)


def discover(
    workspace_root: Path,
    patterns: tuple[str, ...] | list[str],
    fs: FileSystem = DEFAULT_FS,
) -> list[PackageDescriptor]:
    """Return packages in discovery order.

    Glob-matched packages come first in match order, followed by packages
    reached only through symlinked dependencies, depth-first in declaration
    order. Packages are keyed by real directory, so cycles terminate.
    """
    seeds: list[PackageDescriptor] = []
    visited: set[Path] = set()

    for directory in expand_patterns(workspace_root, patterns, fs):
        visited.add(fs.realpath(directory))
        try:
            manifest = read_manifest(directory, fs)
        except ManifestError as exc:
            logger.warning("skipping package with invalid manifest: %s", exc)
            continue
        seeds.append(PackageDescriptor(directory=directory, manifest=manifest))

    linked: list[PackageDescriptor] = []
    for seed in seeds:
        _walk_dependencies(seed, workspace_root, visited, linked, fs)

    return seeds + linked


def _walk_dependencies(
    owner: PackageDescriptor,
    workspace_root: Path,
    visited: set[Path],
    found: list[PackageDescriptor],
    fs: FileSystem,
) -> None:
    for name in owner.manifest.dependencies:
        location = resolve_dependency_location(owner.directory, name, workspace_root, fs)
        if isinstance(location, External):
            continue

        real = fs.realpath(location.directory)
        if real in visited:
            continue
        visited.add(real)

        try:
            manifest = read_manifest(location.directory, fs)
        except ManifestError as exc:
            logger.debug("abandoning dependency branch %s of %s: %s", name, owner.directory, exc)
            continue

        descriptor = PackageDescriptor(directory=location.directory, manifest=manifest, is_local_link=True)
        logger.debug("discovered linked package %s via %s", descriptor.directory, owner.directory)
        found.append(descriptor)
        _walk_dependencies(descriptor, workspace_root, visited, found, fs)
