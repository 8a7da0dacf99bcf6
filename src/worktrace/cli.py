"""Command-line viewer for stored result trees.

Usage:
    worktrace list --results-dir .worktrace
    worktrace show deploy-2024-01-01 --failures-only --timings
    worktrace --config worktrace.json show deploy-2024-01-01
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import click

from worktrace.domain.exceptions import ConfigurationError, InvalidArgument
from worktrace.infrastructure.config import TrackingConfig, load_config
from worktrace.infrastructure.console import console, error_console, print_result_tree
from worktrace.infrastructure.logging_setup import setup_logging
from worktrace.infrastructure.persistence import FilesystemResultStore

logger = logging.getLogger("worktrace.cli")


def _store(config: TrackingConfig, results_dir: str | None) -> FilesystemResultStore:
    return FilesystemResultStore(Path(results_dir) if results_dir else config.results_dir)


@click.group()
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to worktrace.json",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose (DEBUG) logging to console",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Inspect result trees saved by a FilesystemResultStore."""
    try:
        config = load_config(Path(config_path)) if config_path else TrackingConfig()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(
        log_file=config.log_file,
        verbose=verbose,
        level=None if verbose else config.log_level,
    )
    ctx.obj = config


@main.command("list")
@click.option(
    "--results-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Result store directory (default: from config)",
)
@click.pass_obj
def list_runs(config: TrackingConfig, results_dir: str | None) -> None:
    """List stored run ids."""
    runs = _store(config, results_dir).list_runs()
    if not runs:
        click.echo("No stored runs.")
        return
    for run_id in runs:
        click.echo(run_id)


@main.command()
@click.argument("run_id")
@click.option(
    "--results-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Result store directory (default: from config)",
)
@click.option("--detail", is_flag=True, help="Include detail payloads")
@click.option("--timings", is_flag=True, help="Include durations")
@click.option("--failures-only", is_flag=True, help="Only show failing branches")
@click.pass_obj
def show(
    config: TrackingConfig,
    run_id: str,
    results_dir: str | None,
    detail: bool,
    timings: bool,
    failures_only: bool,
) -> None:
    """Render a stored run. Exits 1 when the run failed, 2 when it is missing."""
    store = _store(config, results_dir)
    try:
        snapshot = store.load(run_id)
    except KeyError:
        error_console.print(f"[red]Run not found:[/red] {run_id}")
        raise SystemExit(2)
    except InvalidArgument as e:
        raise click.ClickException(str(e)) from e

    defaults = config.render.to_options()
    options = dataclasses.replace(
        defaults,
        include_detail=defaults.include_detail or detail,
        include_timings=defaults.include_timings or timings,
        failures_only=defaults.failures_only or failures_only,
    )
    print_result_tree(snapshot, options, console)
    logger.debug("Rendered run '%s' (%d nodes)", run_id, snapshot.node_count)

    if snapshot.aggregate_status.is_failing:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
