"""Entry point for rt."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from rt_cli import __version__
from rt_cli.commands.athlete import baseline_command, profile_app, zones_command
from rt_cli.commands.classify import classify_command, reclassify_command
from rt_cli.commands.common import configure_logging
from rt_cli.core.config import (
    ConfigError,
    default_config_path,
    load_config,
    resolve_output_format,
    resolve_thresholds,
)
from rt_cli.core.state import CLIState

app = typer.Typer(
    add_completion=False,
    help="Running workout intent classifier",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log classification decisions"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
        thresholds = resolve_thresholds(cfg)
        output_format = resolve_output_format(cfg)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    if not (json_output or plain_output):
        json_output = output_format == "json"
        plain_output = output_format == "plain"

    configure_logging(verbose, plain_output)
    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
        thresholds=thresholds,
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


# Top-level commands
app.command("classify")(classify_command)
app.command("reclassify")(reclassify_command)
app.command("zones")(zones_command)
app.command("baseline")(baseline_command)
app.add_typer(profile_app, name="profile")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
