#!/usr/bin/env python3
"""
Main CLI entry point for paneltree
"""

from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .commands.layout import app as layout_app
from .config.settings import load_settings
from .error_handling import handle_error, setup_logging
from .exceptions import PanelTreeError

app = typer.Typer(
    name="paneltree",
    help="Split, merge and rearrange tabbed panel groups",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
    session: Optional[Path] = typer.Option(
        None, "--session", "-s", envvar="PANELTREE_SESSION", help="Session file to operate on"
    ),
):
    """
    paneltree - panel layout engine

    Keeps a layout session in a YAML file and edits it one command at a time.

    [bold]Examples:[/bold]

    Start a session:
        [cyan]paneltree init editor terminal logs[/cyan]

    Move a tab into a new split on the right:
        [cyan]paneltree move logs --from g1 --to g1 --position split-right[/cyan]

    Inspect the layout:
        [cyan]paneltree show[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    try:
        setup_logging(verbose=verbose, quiet=quiet)
        settings = load_settings()
    except PanelTreeError as e:
        handle_error(e, "startup", show_details=True)

    ctx.obj = {"session": session, "settings": settings}


@app.command()
def version():
    """Show paneltree version"""
    typer.echo(f"paneltree version {__version__}")


for command in layout_app.registered_commands:
    app.registered_commands.append(command)


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
