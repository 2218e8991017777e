"""Shared option types and helpers for CLI commands.

This module provides the options common to the run commands and the
setup step that turns them into a RunConfig.
"""

from pathlib import Path
from typing import Annotated

import typer

from tplsync.core.config import ConfigError, load_config_or_default
from tplsync.sync.engine import RootNotFoundError, build_run_config
from tplsync.sync.models import RunConfig
from tplsync.utils.formatting import print_error, print_info, print_warning

TagOption = Annotated[
    str | None,
    typer.Option(
        "--tag",
        "-t",
        help="Rule profile to apply (a [profiles.<tag>] section of the config).",
    ),
]

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        "-r",
        help="Template directory (overrides TPLSYNC_ROOT and the config file).",
        file_okay=False,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Configuration file to use.",
        dir_okay=False,
    ),
]

DatabaseOption = Annotated[
    str | None,
    typer.Option(
        "--database",
        "-d",
        help="Database file name, relative to the template directory.",
    ),
]


def prepare_run(
    tag: str | None,
    root: Path | None,
    config_path: Path | None,
    database: str | None,
) -> RunConfig:
    """Load configuration and resolve the run, or exit with a message.

    Invalid rule patterns are reported as warnings and left out.

    Args:
        tag: Rule profile selected by the operator.
        root: Template directory from the command line.
        config_path: Configuration file from the command line.
        database: Database file name from the command line.

    Returns:
        Resolved RunConfig.

    Raises:
        typer.Exit: If the configuration is invalid or the template
            directory does not exist.
    """
    try:
        config = load_config_or_default(config_path)
    except ConfigError as e:
        print_error(f"Failed to load configuration: {e}")
        raise typer.Exit(code=1) from e

    if tag is not None and tag not in config.profiles:
        print_warning(f"No rules configured for tag '{tag}', every template is included.")

    try:
        run_config, rule_errors = build_run_config(config, tag, root=root, database=database)
    except RootNotFoundError as e:
        print_error(str(e))
        print_info("Set 'root' in the configuration file or pass --root.")
        raise typer.Exit(code=1) from e

    for message in rule_errors:
        print_warning(message)

    return run_config
