"""Init command implementation.

Creates a starter configuration file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from tplsync.core.config import ConfigError, ProfileConfig, RuleEntry, SyncConfig, save_config
from tplsync.core.paths import get_config_path, get_default_root
from tplsync.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Create a starter configuration file.",
    invoke_without_command=True,
)


def _create_config(root: Path | None) -> SyncConfig:
    """Build the starter configuration.

    The example profile keeps everything except an ``Archive`` folder.
    """
    return SyncConfig(
        root=root,
        profiles={
            "example": ProfileConfig(rules=[RuleEntry(exclude="Archive/.*")]),
        },
    )


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for the configuration file.",
        ),
    ] = None,
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Template directory to record in the configuration.",
            file_okay=False,
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing configuration without prompting.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be created without writing files.",
        ),
    ] = False,
) -> None:
    """Create a configuration file with an example rule profile.

    Examples:
        tplsync init                        # Create config in default location
        tplsync init --root ~/templates     # Record a template directory
        tplsync init --output my.toml       # Create config at custom path
    """
    if ctx.invoked_subcommand is not None:
        return

    output_path = output or get_config_path()

    if output_path.exists():
        if dry_run:
            print_warning(f"Configuration already exists: {output_path}")
            print_info("Would be overwritten with --force.")
        elif not force:
            print_error(f"Configuration already exists: {output_path}")
            print_info("Use --force to overwrite or specify a different path with --output.")
            raise typer.Exit(code=1)
        else:
            print_warning(f"Overwriting existing configuration: {output_path}")

    config = _create_config(root)

    console.print()
    console.print("[bold]Configuration Summary[/bold]")
    console.print(f"  Templates: [info]{escape(str(config.root or get_default_root()))}[/info]")
    console.print(f"  Database: [muted]{escape(config.database)}[/muted]")
    console.print(f"  Profiles: [muted]{escape(', '.join(config.profiles))}[/muted]")
    console.print(f"  Output: [muted]{escape(str(output_path))}[/muted]")
    console.print()

    if dry_run:
        print_info("[DRY-RUN] No files were written.")
        return

    try:
        saved_path = save_config(config, output_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Configuration created: {saved_path}")
