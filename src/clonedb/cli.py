"""Command line interface for cloning databases from pre-configured plans."""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from .config import CliSettings, init_config, load_configs
from .engines import build_plan
from .pipeline import ConfigurationError, ConsoleProgress, PipelineRunner, ShellExecutor
from .pipeline.logging_utils import RunLogger, RunStats
from .pipeline.types import Plan

# Rich help panels are on by default; CLONEDB_CLI_RICH=0/false turns them off.
_rich_pref = os.getenv("CLONEDB_CLI_RICH", "").strip().lower()
try:  # Typer <0.12.3 lacks rich_utils
    typer.rich_utils.USE_RICH = _rich_pref not in {  # type: ignore[attr-defined]
        "0",
        "false",
        "no",
        "off",
    }
except AttributeError:
    pass

app = typer.Typer(
    help="A utility for cloning databases using pre-configured settings.",
    add_completion=False,
)


def _fail(message: str, code: int = 1) -> typer.Exit:
    Console(stderr=True).print(f"[red]{escape(message)}[/red]", soft_wrap=True)
    return typer.Exit(code=code)


def _choose(names: list[str]) -> str:
    if not names:
        raise ConfigurationError("No configurations available.")
    return Prompt.ask("Choose the configuration.", choices=names, default=names[0])


def _print_plan(console: Console, name: str, plan: Plan) -> None:
    console.print(f"Plan for [bold]{escape(name)}[/bold] ({len(plan)} steps)")
    for index, step in enumerate(plan, start=1):
        console.print(f"{index:>3}. {escape(step.message)}")
        console.print(f"     $ {escape(step.command)}", soft_wrap=True)
        if step.skip_warnings:
            skip = escape(', '.join(step.skip_warnings))
            console.print(f"     skip: {skip}", soft_wrap=True)


def run_configuration(
    name: str,
    config: dict[str, Any],
    settings: CliSettings,
    *,
    console: Console | None = None,
) -> int:
    """Build and execute the plan for ``config``; return the process exit code."""

    plan = build_plan(config)
    run_id = uuid.uuid4().hex[:8]
    corelog = RunLogger(run_id, settings.log_file, console_level=settings.console_level)
    stats = RunStats(run_id=run_id, config_name=name)
    corelog.event("run", "start", config=name, steps=len(plan))
    runner = PipelineRunner(
        executor=ShellExecutor(timeout=settings.step_timeout),
        progress=ConsoleProgress(console=console),
        corelog=corelog,
        stats=stats,
    )
    report = runner.run(plan)
    if report.succeeded:
        return 0
    corelog.info("%d of %d steps failed", len(report.failures), len(plan))
    return settings.fail_exit_code


@app.command()
def main(
    name: str | None = typer.Argument(None, metavar="CONFIG", help="Configuration to use."),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Specify the configuration to use."
    ),
    select: bool = typer.Option(
        False, "--select", "-s", help="Choose from one of the available configurations."
    ),
    list_configs: bool = typer.Option(
        False, "--list", "-l", help="List available configurations."
    ),
    init: bool = typer.Option(
        False,
        "--init",
        "-i",
        help="Create a sample configuration file in the current user's home directory.",
    ),
    config_path: bool = typer.Option(
        False, "--config-path", "-p", help="Print configuration file path."
    ),
    config_file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        help="Configuration file (defaults to $CLONEDB_CONFIG or ~/.clonedb).",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the plan without executing any command."
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Append JSONL step events to this file."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", min=0.001, help="Per-step timeout in seconds."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log step results."),
) -> None:
    """Clone a database by running the steps of a named configuration."""

    settings = CliSettings.from_options(
        config_path=config_file, log_file=log_file, verbose=verbose, step_timeout=timeout
    )
    console = Console()

    if init:
        try:
            created = init_config(settings.config_path)
        except ConfigurationError as exc:
            raise _fail(str(exc)) from exc
        console.print(f"Config file created at {escape(str(created))}.", soft_wrap=True)
        return

    if config_path:
        typer.echo(str(settings.config_path))
        return

    try:
        configs = load_configs(settings.config_path)
    except ConfigurationError as exc:
        raise _fail(str(exc)) from exc

    if list_configs:
        for entry in configs:
            typer.echo(entry)
        return

    chosen = config or name
    if select or not chosen:
        try:
            chosen = _choose(list(configs))
        except ConfigurationError as exc:
            raise _fail(str(exc)) from exc

    if chosen not in configs:
        raise _fail("Configuration not found.")
    selected = configs[chosen]

    try:
        if dry_run:
            _print_plan(console, chosen, build_plan(selected))
            return
        code = run_configuration(chosen, selected, settings, console=console)
    except ConfigurationError as exc:
        raise _fail(str(exc)) from exc
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":  # pragma: no cover
    app()
