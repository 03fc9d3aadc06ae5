"""Policy gate: skip / ignoreWatch / watch precedence rules."""

from __future__ import annotations

from bundlex.resolve.types import Decision, GateResult, PackageDescriptor, RuntimeOptions


def admit(descriptor: PackageDescriptor, options: RuntimeOptions) -> GateResult:
    """Decide whether a package is excluded, force-included, or evaluated.

    Rules, first match wins:
      1. No declared ``main`` output -> excluded
      2. ``rollup.skip`` -> excluded
      3. Watch mode with ``rollup.ignoreWatch`` -> excluded
      4. Watch mode -> force-included (staleness is not evaluated)
      5. Otherwise -> proceed to staleness evaluation
    """
    manifest = descriptor.manifest
    policy = manifest.policy

    if manifest.main is None:
        return GateResult(Decision.EXCLUDED, "no declared output (pkg.main)")
    if policy.skip:
        return GateResult(Decision.EXCLUDED, "skipped by pkg.rollup.skip")
    if options.watch_mode_requested:
        if policy.ignore_watch:
            return GateResult(Decision.EXCLUDED, "ignored in watch mode by pkg.rollup.ignoreWatch")
        return GateResult(Decision.FORCE_INCLUDE, "watch mode builds every eligible package")
    return GateResult(Decision.PROCEED, "evaluate staleness")
