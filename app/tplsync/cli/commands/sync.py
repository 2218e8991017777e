"""Sync command implementation.

Reconciles the template directory with its database in one run.
"""

from typing import Annotated

import typer

from tplsync.cli.display import create_results_table, print_stats_summary
from tplsync.cli.types import ConfigOption, DatabaseOption, RootOption, TagOption, prepare_run
from tplsync.sync.database import DatabaseError
from tplsync.sync.engine import run_sync
from tplsync.sync.scanner import ScanError
from tplsync.utils.formatting import console, print_error, print_info


app = typer.Typer(
    help="Reconcile the template directory with the database.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def sync(
    ctx: typer.Context,
    tag: TagOption = None,
    root: RootOption = None,
    config_path: ConfigOption = None,
    database: DatabaseOption = None,
    show_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="List unchanged and ignored templates too.",
        ),
    ] = False,
) -> None:
    """Pack, unpack and leave out templates according to the rules.

    Included templates on disk are packed into the database, included
    templates only in the database are unpacked onto disk, and excluded
    templates on disk are packed and then deleted. Excluded templates
    only in the database are left alone.

    Examples:
        tplsync sync                   # Sync everything
        tplsync sync --tag pvp         # Apply the [profiles.pvp] rules
        tplsync sync --root ./skills   # Sync another directory
    """
    if ctx.invoked_subcommand is not None:
        return

    run_config = prepare_run(tag, root, config_path, database)
    print_info(f"Syncing {run_config.root} with {run_config.database.name}")

    try:
        report = run_sync(run_config)
    except (ScanError, DatabaseError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    shown = [r for r in report.results if show_all or r.changed or r.failed]
    if shown:
        console.print(create_results_table(shown))

    print_stats_summary(report.stats)

    if not report.database_saved:
        print_error(f"Database was not saved: {report.database_error}")
        print_info("Excluded templates were kept on disk.")
        raise typer.Exit(code=1)
