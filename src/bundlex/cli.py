"""bundlex CLI - report which workspace packages need a bundle step."""

from __future__ import annotations

from pathlib import Path

import typer

from bundlex import __version__
from bundlex.config import log_level_from_env, watch_signaled_from_env
from bundlex.resolve import find_configs, resolve_workspace
from bundlex.resolve.assemble import relative_to_caller
from bundlex.resolve.discover import discover
from bundlex.ui import configs_to_json, configure_logging, console, render_status_table, write_configs
from bundlex.workspace import WorkspaceError, load_workspace_patterns, require_workspace_root

cli = typer.Typer(
    name="bundlex",
    help="bundlex - find workspace packages whose build output is stale",
    no_args_is_help=True,
)


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log resolution decisions to stderr.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show bundlex version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Configure logging for every invocation."""
    _ = version
    configure_logging("DEBUG" if verbose else log_level_from_env())


def _fail(exc: WorkspaceError) -> typer.Exit:
    typer.echo(f"error [{exc.reason_code}]: {exc}", err=True)
    return typer.Exit(1)


@cli.command("configs")
def configs_cmd(
    cwd: Path | None = typer.Option(
        None,
        "--cwd",
        help="Workspace root to search (defaults to current working directory).",
    ),
    watch: bool = typer.Option(
        False,
        "--watch",
        help="Include every eligible package and attach watch options.",
    ),
    jobs: int = typer.Option(
        1,
        "--jobs",
        "-j",
        min=1,
        help="Evaluate packages on this many threads.",
    ),
    out: Path | None = typer.Option(
        None,
        "--out",
        help="Also write the JSON configs to this file.",
    ),
) -> None:
    """Print bundler configs for packages that need a build."""
    try:
        configs = find_configs(
            cwd,
            watch=watch,
            watch_signaled=watch_signaled_from_env(),
            jobs=jobs,
        )
    except WorkspaceError as exc:
        raise _fail(exc) from exc

    if out is not None:
        write_configs(out, configs)
    typer.echo(configs_to_json(configs))


@cli.command("status")
def status_cmd(
    cwd: Path | None = typer.Option(
        None,
        "--cwd",
        help="Workspace root to search (defaults to current working directory).",
    ),
    watch: bool = typer.Option(
        False,
        "--watch",
        help="Evaluate as a watch run would.",
    ),
) -> None:
    """Show every discovered package with its build decision."""
    try:
        reports = resolve_workspace(cwd, watch=watch, watch_signaled=watch_signaled_from_env())
    except WorkspaceError as exc:
        raise _fail(exc) from exc

    if not reports:
        console.print("No packages found.")
        return
    console.print(render_status_table(reports, Path.cwd()))
    pending = sum(1 for report in reports if report.included)
    console.print(f"{pending} of {len(reports)} package(s) need a build.")


@cli.command("packages")
def packages_cmd(
    cwd: Path | None = typer.Option(
        None,
        "--cwd",
        help="Workspace root to search (defaults to current working directory).",
    ),
) -> None:
    """List discovered packages in discovery order."""
    try:
        root = require_workspace_root(cwd or Path.cwd())
        descriptors = discover(root, load_workspace_patterns(root))
    except WorkspaceError as exc:
        raise _fail(exc) from exc

    caller = Path.cwd()
    for descriptor in descriptors:
        suffix = " (linked)" if descriptor.is_local_link else ""
        typer.echo(f"{relative_to_caller(descriptor.directory, caller)}{suffix}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
