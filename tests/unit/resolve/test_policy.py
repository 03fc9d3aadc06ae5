"""Unit tests for the policy gate precedence rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from bundlex.manifest import PackageManifest
from bundlex.resolve.policy import admit
from bundlex.resolve.types import Decision, PackageDescriptor, RuntimeOptions


def _descriptor(manifest: dict) -> PackageDescriptor:
    return PackageDescriptor(directory=Path("/ws/pkg"), manifest=PackageManifest.from_dict(manifest))


@pytest.mark.parametrize(
    ("manifest", "options", "expected"),
    [
        ({}, RuntimeOptions(), Decision.EXCLUDED),
        ({}, RuntimeOptions(watch=True), Decision.EXCLUDED),
        ({"main": "dist/index.js", "rollup": {"skip": True}}, RuntimeOptions(), Decision.EXCLUDED),
        ({"main": "dist/index.js", "rollup": {"skip": True}}, RuntimeOptions(watch=True), Decision.EXCLUDED),
        ({"main": "dist/index.js", "rollup": {"ignoreWatch": True}}, RuntimeOptions(), Decision.PROCEED),
        ({"main": "dist/index.js", "rollup": {"ignoreWatch": True}}, RuntimeOptions(watch=True), Decision.EXCLUDED),
        (
            {"main": "dist/index.js", "rollup": {"ignoreWatch": True}},
            RuntimeOptions(watch_signaled=True),
            Decision.EXCLUDED,
        ),
        ({"main": "dist/index.js"}, RuntimeOptions(watch=True), Decision.FORCE_INCLUDE),
        ({"main": "dist/index.js"}, RuntimeOptions(watch_signaled=True), Decision.FORCE_INCLUDE),
        ({"main": "dist/index.js"}, RuntimeOptions(), Decision.PROCEED),
        ({"main": "dist/index.js", "rollup": "not-a-mapping"}, RuntimeOptions(), Decision.PROCEED),
    ],
)
def test_admit_precedence(manifest: dict, options: RuntimeOptions, expected: Decision) -> None:
    assert admit(_descriptor(manifest), options).decision is expected


def test_missing_main_wins_over_skip_reason() -> None:
    result = admit(_descriptor({"rollup": {"skip": True}}), RuntimeOptions())

    assert result.reason == "no declared output (pkg.main)"


def test_watch_mode_requested_combines_explicit_and_signaled() -> None:
    assert not RuntimeOptions().watch_mode_requested
    assert RuntimeOptions(watch=True).watch_mode_requested
    assert RuntimeOptions(watch_signaled=True).watch_mode_requested
