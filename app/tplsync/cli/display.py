"""Shared Rich display functions for plans and run results."""

from rich.markup import escape
from rich.table import Table

from tplsync.sync.models import ActionResult, Outcome, Record, SyncAction, SyncStats
from tplsync.utils.formatting import console, format_size, print_success

# Markup for each planned action
_ACTION_MARKUP: dict[SyncAction, str] = {
    SyncAction.PACK: "[packed]pack[/packed]",
    SyncAction.UNPACK: "[unpacked]unpack[/unpacked]",
    SyncAction.REMOVE: "[left_out]remove[/left_out]",
    SyncAction.IGNORE: "[ignored]ignore[/ignored]",
}

# Markup for each handler outcome
_OUTCOME_MARKUP: dict[Outcome, str] = {
    Outcome.ADDED: "[packed]+added[/packed]",
    Outcome.UPDATED: "[repacked]~updated[/repacked]",
    Outcome.UNCHANGED: "[muted]unchanged[/muted]",
    Outcome.UNPACKED: "[unpacked]>unpacked[/unpacked]",
    Outcome.LEFT_OUT: "[left_out]-left out[/left_out]",
    Outcome.IGNORED: "[ignored]ignored[/ignored]",
    Outcome.FAILED: "[error]FAIL[/error]",
}


def create_plan_table(records: list[Record], title: str = "Planned Actions") -> Table:
    """Create a Rich table of records and their planned actions.

    Args:
        records: Records to display, in display order.
        title: Table title.

    Returns:
        Rich Table configured for plan display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=8, justify="center")
    table.add_column("Template", no_wrap=True)
    table.add_column("Stored", style="info", justify="right")

    for record in records:
        stored = record.payload or record.stored
        table.add_row(
            _ACTION_MARKUP[record.action],
            f"[template.path]{escape(record.path)}[/template.path]",
            format_size(len(stored)) if stored else "[muted]-[/muted]",
        )

    return table


def create_results_table(results: list[ActionResult]) -> Table:
    """Create a Rich table of handler results.

    Args:
        results: Results to display.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Changes",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Result", width=12, justify="center")
    table.add_column("Template", no_wrap=True)
    table.add_column("Message")

    for result in results:
        table.add_row(
            _OUTCOME_MARKUP[result.outcome],
            escape(result.path),
            f"[muted]{escape(result.error or '')}[/muted]",
        )

    return table


def print_plan_summary(records: list[Record]) -> None:
    """Print counts of planned actions."""
    counts = {action: 0 for action in SyncAction}
    for record in records:
        counts[record.action] += 1

    parts: list[str] = []
    if counts[SyncAction.PACK]:
        parts.append(f"[packed]{counts[SyncAction.PACK]} to pack[/packed]")
    if counts[SyncAction.UNPACK]:
        parts.append(f"[unpacked]{counts[SyncAction.UNPACK]} to unpack[/unpacked]")
    if counts[SyncAction.REMOVE]:
        parts.append(f"[left_out]{counts[SyncAction.REMOVE]} to leave out[/left_out]")
    if counts[SyncAction.IGNORE]:
        parts.append(f"[ignored]{counts[SyncAction.IGNORE]} ignored[/ignored]")

    if parts:
        console.print(f"\nSummary: {', '.join(parts)}")
    else:
        console.print("\n[muted]No templates found.[/muted]")


def print_stats_summary(stats: SyncStats) -> None:
    """Print the run counters.

    Shows the summary line, then error counts if there were any.

    Args:
        stats: Counters of the finished run.
    """
    print_success(f"tplsync: {stats.summary()}")
    if stats.ignored:
        console.print(f"[ignored]{stats.ignored} ignored[/ignored]")
    if stats.error_count:
        console.print(
            f"[error]{stats.pack_read_errors} read error(s)[/error], "
            f"[error]{stats.unpack_write_errors} write error(s)[/error]"
        )
