"""slnsync CLI - Add missing N-order project references to Visual Studio solutions."""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from slnsync.config import RunResult, SolutionOutcome, UpdateConfig
from slnsync.errors import IgnorePatternFileUnavailableError
from slnsync.output import build_report, write_output
from slnsync.pipeline import run

# Exit codes only carry a byte
_MAX_EXIT_CODE = 255


@click.group()
def cli() -> None:
    """slnsync - Keep solution files in step with their project references."""
    pass


def _configure_logging(console: Console, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_summary(console: Console, config: UpdateConfig, result: RunResult, duration_ms: float) -> None:
    changed_label = "Changed" if config.persist else "Would change"
    table = Table(title=f"slnsync: {Path(config.target).name}", show_edge=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Solutions", str(len(result.solutions)))
    table.add_row(changed_label, str(result.changed_count))
    table.add_row("Failed", str(result.failed_count))
    table.add_row("Duration", f"{duration_ms:.1f}ms")

    console.print(table)

    if not result.solutions:
        console.print("[yellow]No solutions found.[/yellow]")
    elif result.failed_count:
        console.print(f"[red]{result.failed_count} solutions could not be analysed.[/red]")
    elif not result.changed_count:
        console.print("[green]No dependency problems found.[/green]")


def _execute(config: UpdateConfig) -> RunResult:
    console = Console()
    _configure_logging(console, config.verbose)

    def on_outcome(outcome: SolutionOutcome) -> None:
        if config.quiet:
            return
        if outcome.failed:
            console.print(f"[red]Bad solution[/red] {escape(outcome.solution)}: {escape(outcome.error)}", soft_wrap=True)
        elif outcome.modified:
            console.print(outcome.solution, soft_wrap=True, highlight=False)

    if not config.quiet:
        verb = "Updating" if config.persist else "Validating"
        suffix = f" except those filtered by `{escape(config.ignore_file)}`" if config.ignore_file else ""
        console.print(f"{verb} solutions in `{escape(str(config.target))}`{suffix}", soft_wrap=True)

    start = time.monotonic()
    try:
        result = run(config, progress_callback=on_outcome)
    except IgnorePatternFileUnavailableError as e:
        raise click.ClickException(str(e)) from e
    except re.error as e:
        raise click.ClickException(f"Invalid ignore pattern in `{config.ignore_file}`: {e}") from e
    duration_ms = (time.monotonic() - start) * 1000

    if config.output_path:
        write_output(build_report(config, result, duration_ms), config.output_path)

    if not config.quiet:
        _print_summary(console, config, result, duration_ms)
        if config.output_path:
            console.print(f"[green]Report written to:[/green] {escape(config.output_path)}")

    return result


def _common_options(fn):
    options = [
        click.argument("target", type=click.Path(exists=True)),
        click.option("--ignore-file", default=None, help="File of regular expressions for solutions to skip"),
        click.option("--filter-conditional", is_flag=True, help="Skip ProjectReferences under a Condition"),
        click.option("--workers", default=None, type=click.IntRange(min=1), help="Number of parallel workers"),
        click.option("-o", "--output", "output_path", default=None, help="Write a JSON report to this path"),
        click.option("--verbose", is_flag=True, help="Show per-project resolution detail"),
        click.option("--quiet", is_flag=True, help="Suppress all output except errors"),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _build_config(persist: bool, target: str, **kwargs) -> UpdateConfig:
    workers = kwargs.pop("workers")
    config = UpdateConfig(target=target, persist=persist, **kwargs)
    if workers is not None:
        config.workers = workers
    return config


@cli.command("update")
@_common_options
def update_cmd(target: str, **kwargs) -> None:
    """Add missing N-order references to every solution under TARGET."""
    result = _execute(_build_config(True, target, **kwargs))
    if result.failed_count:
        raise SystemExit(1)


@cli.command("validate")
@_common_options
def validate_cmd(target: str, **kwargs) -> None:
    """Report solutions under TARGET that are missing N-order references.

    The exit code is the number of solutions that would change.
    """
    result = _execute(_build_config(False, target, **kwargs))
    raise SystemExit(min(result.changed_count, _MAX_EXIT_CODE))


if __name__ == "__main__":
    cli()
