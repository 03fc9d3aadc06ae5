"""Staleness oracle: compare a package's source tree with its build output."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from bundlex.config import (
    DEPENDENCY_DIRNAME,
    ENTRY_EXTENSIONS,
    SOURCE_DIRNAME,
    TEST_DIRNAMES,
    TEST_FILE_PATTERN,
)
from bundlex.fs import DEFAULT_FS, FileSystem
from bundlex.resolve.types import PackageDescriptor, StalenessVerdict

logger = logging.getLogger(__name__)

REASON_OUTPUT_MISSING = "output missing"
REASON_SOURCES_NEWER = "sources newer than output"
REASON_UP_TO_DATE = "up to date"
REASON_NO_SOURCES = "no sources"


def conventional_entry_candidates(main: str) -> list[PurePosixPath]:
    """Map a declared output path to its conventional source entry candidates.

    ``dist/index.js`` -> ``src/index.js``, ``src/index.jsx``
    """
    parts = PurePosixPath(main).parts
    if not parts:
        return []
    stem = PurePosixPath(*parts).with_suffix("")
    tail = stem.parts[1:] if len(stem.parts) > 1 else stem.parts
    base = PurePosixPath(SOURCE_DIRNAME, *tail)
    return [base.with_name(base.name + ext) for ext in ENTRY_EXTENSIONS]


def resolve_entry(descriptor: PackageDescriptor, fs: FileSystem = DEFAULT_FS) -> Path | None:
    """Return the package's bundle input, or None when it has none on disk."""
    manifest = descriptor.manifest
    override = manifest.policy.entry_override
    if override is not None:
        candidate = descriptor.directory / override
        return candidate if fs.is_file(candidate) else None

    if manifest.main is None:
        return None
    for rel in conventional_entry_candidates(manifest.main):
        candidate = descriptor.directory / rel
        if fs.is_file(candidate):
            return candidate
    return None


def output_path(descriptor: PackageDescriptor) -> Path:
    main = descriptor.manifest.main
    if main is None:
        raise ValueError(f"package at {descriptor.directory} declares no output")
    return descriptor.directory / main


def newest_source_mtime(descriptor: PackageDescriptor, fs: FileSystem = DEFAULT_FS) -> float | None:
    """Latest mtime among genuine build inputs of the package, if any.

    Excluded: declared output directories (or only the output files when the
    output sits at the package root), test directories and test-named
    files, and dependency directories at any depth.
    """
    root = descriptor.directory
    manifest = descriptor.manifest
    outputs = [root / rel for rel in (manifest.main, manifest.module) if rel]
    output_files = set(outputs)
    output_dirs = {path.parent for path in outputs} - {root}

    newest: float | None = None
    for dirpath, dirnames, filenames in fs.walk(root):
        dirnames[:] = [
            name
            for name in dirnames
            if name != DEPENDENCY_DIRNAME
            and name not in TEST_DIRNAMES
            and dirpath / name not in output_dirs
        ]
        for filename in filenames:
            if TEST_FILE_PATTERN.search(filename):
                continue
            path = dirpath / filename
            if path in output_files:
                continue
            try:
                mtime = fs.mtime(path)
            except OSError:
                logger.debug("cannot stat %s; ignoring", path)
                continue
            if newest is None or mtime > newest:
                newest = mtime
    return newest


def evaluate(
    descriptor: PackageDescriptor,
    entry: Path,
    fs: FileSystem = DEFAULT_FS,
) -> StalenessVerdict:
    """Decide whether the package's output is older than its sources.

    Equal timestamps are fresh.
    """
    output = output_path(descriptor)
    if not fs.is_file(output):
        return StalenessVerdict(entry, output, True, REASON_OUTPUT_MISSING)

    output_mtime = fs.mtime(output)
    newest = newest_source_mtime(descriptor, fs)
    if newest is None:
        return StalenessVerdict(entry, output, False, REASON_NO_SOURCES)
    if newest > output_mtime:
        return StalenessVerdict(entry, output, True, REASON_SOURCES_NEWER)
    return StalenessVerdict(entry, output, False, REASON_UP_TO_DATE)
