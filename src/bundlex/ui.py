from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from bundlex.resolve.assemble import relative_to_caller
from bundlex.resolve.types import BuildConfig, Decision, PackageReport

console = Console()
err_console = Console(stderr=True)

_DECISION_STYLES: dict[str, str] = {
    "build": "bold yellow",
    "fresh": "green",
    Decision.EXCLUDED.value: "dim",
}


def configure_logging(level: str) -> None:
    """Route ``bundlex`` loggers to stderr through rich."""
    logger = logging.getLogger("bundlex")
    logger.handlers.clear()
    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def configs_to_json(configs: Sequence[BuildConfig]) -> str:
    return json.dumps([config.to_dict() for config in configs], indent=2, ensure_ascii=False)


def write_configs(path: Path, configs: Sequence[BuildConfig]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(configs_to_json(configs) + "\n", encoding="utf-8")


def _status_label(report: PackageReport) -> str:
    if report.gate.decision is Decision.EXCLUDED:
        return Decision.EXCLUDED.value
    return "build" if report.included else "fresh"


def _status_reason(report: PackageReport) -> str:
    if report.verdict is not None:
        return report.verdict.reason
    return report.gate.reason


def render_status_table(reports: Sequence[PackageReport], caller_cwd: Path) -> Table:
    table = Table(title="Workspace packages")
    table.add_column("Package")
    table.add_column("Directory")
    table.add_column("Linked", justify="center")
    table.add_column("Status")
    table.add_column("Reason")

    for report in reports:
        descriptor = report.descriptor
        label = _status_label(report)
        table.add_row(
            descriptor.manifest.name or "(unnamed)",
            relative_to_caller(descriptor.directory, caller_cwd),
            "yes" if descriptor.is_local_link else "",
            f"[{_DECISION_STYLES[label]}]{label}[/]",
            _status_reason(report),
        )
    return table
