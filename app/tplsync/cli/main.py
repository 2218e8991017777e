"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from tplsync import __version__
from tplsync.cli.commands import init, status, sync
from tplsync.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="tplsync",
    help="Keep a template directory and its flat database in sync.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"tplsync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """tplsync - keep a template directory and its flat database in sync.

    Every template file is packed into a single database file, and
    templates missing from disk are unpacked from it. Rule profiles
    decide which templates stay on disk.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.add_typer(sync.app, name="sync")
app.add_typer(status.app, name="status")
app.add_typer(init.app, name="init")


if __name__ == "__main__":
    app()
