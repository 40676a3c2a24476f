"""
windsock CLI.

Commands:
- init: write a starter windsock.toml
- build: generate the stylesheet once
- watch: rebuild incrementally when content files change
- tokens: print the resolved token table
- explain: show how individual class tokens are interpreted
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from windsock import __version__
from windsock.assembler import render_rule
from windsock.builder import BuildResult, BuildSession
from windsock.config import BuildConfig, default_config_text, load_config
from windsock.errors import ConfigError, TokenRejection
from windsock.watch import FileWatcher, RebuildCoordinator

app = typer.Typer(
    help="Generate utility-class CSS from the classes your content actually uses",
    no_args_is_help=True,
)
console = Console()

logger = logging.getLogger(__name__)

_CONFIG_OPTION_HELP = "Config file or project directory (default: current directory)"


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("WINDSOCK_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load(config_path: Path) -> BuildConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)


def _session(config: BuildConfig, diagnostics: bool = False) -> BuildSession:
    try:
        return BuildSession(config, diagnostics=diagnostics)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)


def _report(result: BuildResult, verbose: bool) -> None:
    for warning in result.warnings:
        console.print(f"[yellow]warning[/yellow] {warning.format()}")
    if verbose and result.rejections:
        _print_rejections(result.rejections)
    target = result.output_path or "stdout"
    status = "written" if result.written else "unchanged"
    console.print(f"[green]{len(result.rules)} rule(s)[/green] -> {target} ({status}, {result.duration_ms:.1f} ms)")


def _print_rejections(rejections: list[TokenRejection]) -> None:
    table = Table(title="Discarded tokens")
    table.add_column("Token")
    table.add_column("Reason")
    for rejection in rejections:
        table.add_row(rejection.token, rejection.reason)
    console.print(table)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"windsock {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """windsock - utility-class CSS generator."""


@app.command()
def init(
    directory: Path = typer.Argument(Path("."), help="Project directory"),  # noqa: B008
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing windsock.toml"),
) -> None:
    """
    Write a starter windsock.toml.

    Examples:
        windsock init
        windsock init ./site --force
    """
    target = directory / "windsock.toml"
    if target.exists() and not force:
        typer.echo(f"{target} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(code=1)
    directory.mkdir(parents=True, exist_ok=True)
    target.write_text(default_config_text(), encoding="utf-8")
    console.print(f"Created {target}")


@app.command()
def build(
    config_path: Path = typer.Option(Path("."), "--config", "-c", help=_CONFIG_OPTION_HELP),  # noqa: B008
    output: Path | None = typer.Option(None, "--output", "-o", help="Override the output path"),  # noqa: B008
    input_css: Path | None = typer.Option(  # noqa: B008
        None, "--input", "-i", help="Stylesheet to inject the utilities into"
    ),
    minify: bool = typer.Option(False, "--minify", help="Minify the stylesheet"),
    stdout: bool = typer.Option(False, "--stdout", help="Print the stylesheet instead of writing it"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and discarded tokens"),
) -> None:
    """
    Scan content files and generate the stylesheet.

    Examples:
        windsock build
        windsock build -c site/windsock.toml --minify
        windsock build --stdout
        windsock build -i styles/input.css -o styles/output.css
    """
    _configure_logging(verbose)
    config = _load(config_path)
    updates: dict[str, object] = {}
    if output is not None:
        updates["output"] = output.resolve()
    if input_css is not None:
        updates["input"] = input_css.resolve()
    if minify:
        updates["minify"] = True
    if updates:
        config = config.model_copy(update=updates)

    session = _session(config, diagnostics=verbose)
    try:
        result = session.build(write=not stdout)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)
    if stdout:
        typer.echo(result.css, nl=False)
        return
    _report(result, verbose)


@app.command()
def watch(
    config_path: Path = typer.Option(Path("."), "--config", "-c", help=_CONFIG_OPTION_HELP),  # noqa: B008
    interval: float = typer.Option(0.5, "--interval", help="Polling interval in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Build once, then rebuild incrementally whenever content changes.

    The configuration is read once; restart to pick up config changes.
    """
    _configure_logging(verbose)
    config = _load(config_path)
    session = _session(config, diagnostics=verbose)
    try:
        _report(session.build(), verbose)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)

    coordinator = RebuildCoordinator(session, on_result=lambda result: _report(result, verbose))
    watcher = FileWatcher(session.matcher, on_change=coordinator.submit, poll_interval=interval)
    coordinator.start()
    watcher.start()
    console.print(f"Watching {len(session.files)} file(s). Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("Stopping")
    finally:
        watcher.stop()
        coordinator.stop()


@app.command()
def tokens(
    config_path: Path = typer.Option(Path("."), "--config", "-c", help=_CONFIG_OPTION_HELP),  # noqa: B008
    scope: str | None = typer.Option(None, "--scope", "-s", help="Only show one scope, e.g. colors"),
) -> None:
    """Print the resolved token table."""
    config = _load(config_path)
    table_data = _session(config).table

    table = Table(title="Theme tokens")
    table.add_column("Path")
    table.add_column("Value")
    for path, value in table_data.items():
        if scope and not path.startswith(scope + "."):
            continue
        table.add_row(path, value)
    console.print(table)


@app.command()
def explain(
    classes: list[str] = typer.Argument(..., help="Class tokens to explain"),  # noqa: B008
    config_path: Path = typer.Option(Path("."), "--config", "-c", help=_CONFIG_OPTION_HELP),  # noqa: B008
) -> None:
    """
    Show the rule generated for each class token, or why it is discarded.

    Examples:
        windsock explain bg-primary dark:bg-primary-dark
    """
    config = _load(config_path)
    session = _session(config, diagnostics=True)
    for token in classes:
        rejections: list[TokenRejection] = []
        descriptor = session.interpreter.interpret(token, rejections)
        if descriptor is None:
            reason = rejections[0].reason if rejections else "not a utility"
            console.print(f"[red]{token}[/red]: discarded ({reason})")
            continue
        rule = session.generator.rule_for(descriptor)
        console.print(f"[green]{token}[/green] ({descriptor.utility})")
        console.print(render_rule(rule), markup=False, highlight=False)
