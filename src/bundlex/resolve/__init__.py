"""Workspace build resolution."""

from bundlex.resolve.pipeline import evaluate_package, find_configs, resolve_workspace
from bundlex.resolve.types import BuildConfig, PackageDescriptor, PackageReport, RuntimeOptions

__all__ = [
    "BuildConfig",
    "PackageDescriptor",
    "PackageReport",
    "RuntimeOptions",
    "evaluate_package",
    "find_configs",
    "resolve_workspace",
]
