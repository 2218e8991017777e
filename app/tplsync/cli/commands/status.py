"""Status command implementation.

Shows what a sync would do without touching any file.
"""

import json
from typing import Annotated

import typer

from tplsync.cli.display import create_plan_table, print_plan_summary
from tplsync.cli.types import ConfigOption, DatabaseOption, RootOption, TagOption, prepare_run
from tplsync.sync.database import DatabaseError
from tplsync.sync.engine import build_table
from tplsync.sync.models import Record, SyncAction
from tplsync.sync.scanner import ScanError
from tplsync.utils.formatting import console, print_error

app = typer.Typer(
    help="Show the planned action for every template.",
    invoke_without_command=True,
)


def _records_to_json(records: list[Record]) -> str:
    """Serialize planned records for scripting."""
    return json.dumps(
        [
            {
                "path": record.path,
                "depth": record.depth,
                "action": record.action.value,
            }
            for record in records
        ],
        indent=2,
    )


@app.callback(invoke_without_command=True)
def status(
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
            help="List ignored templates too.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show what a sync would do.

    Examples:
        tplsync status                 # Planned actions
        tplsync status --tag pvp       # Planned actions with the pvp rules
        tplsync status --json          # Machine-readable plan
    """
    if ctx.invoked_subcommand is not None:
        return

    run_config = prepare_run(tag, root, config_path, database)

    try:
        table = build_table(run_config)
    except (ScanError, DatabaseError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    records = table.execution_order()

    if json_output:
        console.print_json(_records_to_json(records))
        return

    shown = [r for r in records if show_all or r.action != SyncAction.IGNORE]
    if shown:
        console.print(create_plan_table(shown))
    print_plan_summary(records)
