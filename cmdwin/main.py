#!/usr/bin/env python3
"""
Main CLI entry point for cmdwin
"""

import subprocess
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from cmdwin import __version__
from cmdwin.config.constants import get_default_config_path
from cmdwin.config.settings import (
    PaletteConfig,
    load_config,
    load_default_config,
    write_example_config,
)
from cmdwin.exceptions import ConfigurationError
from cmdwin.palette.engine import filter_commands
from cmdwin.utils.logging_utils import setup_logging
from cmdwin.utils.output import console, err_console

app = typer.Typer(
    name="cmdwin",
    help="Search a list of named commands and run one.",
    no_args_is_help=True,
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Palette config file (default: ~/.config/cmdwin/palette.yaml or $CMDWIN_CONFIG)",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to the log file"),
):
    """
    cmdwin - command palette for the terminal

    [bold]Examples:[/bold]

    Create a starter config:
        [cyan]cmdwin init[/cyan]

    Pick a command and print it:
        [cyan]cmdwin pick[/cyan]

    Pick a command and run it:
        [cyan]cmdwin pick --exec[/cyan]
    """
    setup_logging(verbose=verbose)


def _load(config_path: Optional[Path]) -> PaletteConfig:
    """Load the config or exit with the validation error."""
    try:
        if config_path is not None:
            return load_config(config_path)
        return load_default_config()
    except ConfigurationError as e:
        err_console.print(f"[red]Invalid palette config:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


@app.command()
def pick(
    config: Optional[Path] = CONFIG_OPTION,
    run: bool = typer.Option(False, "--exec", "-x", help="Run the chosen command through the shell"),
):
    """Open the palette once and print (or run) the chosen command."""
    from cmdwin.ui.app import PaletteApp

    palette_config = _load(config)
    if not len(palette_config.registry):
        err_console.print("[yellow]No commands configured.[/yellow] Run [cyan]cmdwin init[/cyan] first.")
        raise typer.Exit(1)

    invocation = PaletteApp(palette_config, once=True).run()
    if invocation is None:
        raise typer.Exit(1)

    if run:
        result = subprocess.run(invocation, shell=True)
        raise typer.Exit(result.returncode)

    typer.echo(invocation)


@app.command()
def launch(config: Optional[Path] = CONFIG_OPTION):
    """Keep a palette window open and start each chosen command in the background."""
    from cmdwin.ui.app import PaletteApp

    palette_config = _load(config)
    try:
        PaletteApp(palette_config).run()
    except KeyboardInterrupt:
        pass


@app.command("list")
def list_commands(
    config: Optional[Path] = CONFIG_OPTION,
    query: str = typer.Option("", "--query", "-q", help="Only show commands matching this text"),
):
    """List configured commands."""
    palette_config = _load(config)
    names = filter_commands(query, palette_config.registry)

    if not names:
        console.print("[yellow]No matching commands[/yellow]")
        return

    table = Table(title="Palette commands")
    table.add_column("Name", style="cyan")
    table.add_column("Command")
    for name in names:
        table.add_row(escape(name), escape(palette_config.registry.lookup(name) or ""))
    console.print(table)


@app.command()
def init(
    config: Optional[Path] = CONFIG_OPTION,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
):
    """Write an example config file."""
    path = config or get_default_config_path()
    if write_example_config(path, force=force):
        console.print(f"[green]✅ Created {escape(str(path))}[/green]")
    else:
        console.print(f"[yellow]{escape(str(path))} already exists[/yellow] (use --force to overwrite)")


@app.command()
def check(config: Optional[Path] = CONFIG_OPTION):
    """Validate the config file."""
    palette_config = _load(config)
    keymap = palette_config.keymap
    console.print(f"[green]✅ Config OK[/green]: {len(palette_config.registry)} commands")
    console.print(f"  toggle: {escape(keymap.toggle)}")
    console.print(f"  up:     {escape(', '.join(keymap.up))}")
    console.print(f"  down:   {escape(', '.join(keymap.down))}")


@app.command()
def version():
    """Show cmdwin version"""
    typer.echo(f"cmdwin version {__version__}")


if __name__ == "__main__":
    app()
