"""Configuration models and file I/O.

The configuration file keeps the shape of a classic INI file: run-wide
settings at the top level and one ``[profiles.<tag>]`` section per tag,
each holding an ordered list of include/exclude rules.

Example:
    root = "~/Documents/Guild Wars/Templates/Skills"
    database = "templates.csv"

    [profiles.pvp]
    rules = [
        { include = "PvP/.*" },
        { exclude = "PvP/Old/.*" },
    ]

Configuration is stored in ~/.config/tplsync/config.toml
"""

import logging
import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from tplsync.core.paths import DEFAULT_DATABASE_NAME, get_config_path

logger = logging.getLogger(__name__)


class RuleEntry(BaseModel):
    """A single include or exclude rule.

    Exactly one of ``include`` or ``exclude`` must be set.

    Attributes:
        include: Pattern of paths to keep in sync.
        exclude: Pattern of paths to leave out.
    """

    model_config = ConfigDict(extra="forbid")

    include: Annotated[str | None, Field(description="Pattern of paths to include")] = None
    exclude: Annotated[str | None, Field(description="Pattern of paths to exclude")] = None

    @model_validator(mode="after")
    def validate_single_polarity(self) -> "RuleEntry":
        """Validate that the rule names exactly one pattern."""
        if (self.include is None) == (self.exclude is None):
            msg = "Rule must set exactly one of 'include' or 'exclude'"
            raise ValueError(msg)
        return self

    @property
    def pattern(self) -> str:
        """The rule's regular expression."""
        return self.include if self.include is not None else self.exclude  # type: ignore[return-value]

    @property
    def is_include(self) -> bool:
        """Check if this rule includes matching paths."""
        return self.include is not None


class ProfileConfig(BaseModel):
    """Rules scoped to one run tag.

    Attributes:
        rules: Include/exclude rules in evaluation order.
    """

    model_config = ConfigDict(extra="forbid")

    rules: Annotated[
        list[RuleEntry],
        Field(default_factory=list, description="Rules in evaluation order"),
    ]


class SyncConfig(BaseModel):
    """Complete tplsync configuration.

    Attributes:
        root: Watched template directory (None = environment or default).
        database: Database file name, relative to the root.
        size_limit: Largest template accepted when packing, in bytes.
        profiles: Rule sets keyed by run tag.
    """

    model_config = ConfigDict(extra="forbid")

    root: Annotated[Path | None, Field(description="Watched template directory")] = None
    database: Annotated[
        str,
        Field(min_length=1, description="Database file name relative to root"),
    ] = DEFAULT_DATABASE_NAME
    size_limit: Annotated[
        int | None,
        Field(gt=0, description="Largest template accepted when packing, in bytes"),
    ] = None
    profiles: Annotated[
        dict[str, ProfileConfig],
        Field(default_factory=dict, description="Rule sets keyed by run tag"),
    ]

    def rules_for(self, tag: str | None) -> Iterator[tuple[str, bool]]:
        """Yield the ``(pattern, include)`` pairs configured for a tag.

        Args:
            tag: Run tag selected by the operator. None selects nothing.

        Yields:
            Pattern and polarity for each rule, in declaration order.
        """
        if tag is None:
            return
        profile = self.profiles.get(tag)
        if profile is None:
            logger.debug("No profile configured for tag %r", tag)
            return
        for rule in profile.rules:
            yield rule.pattern, rule.is_include


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when configuration content is invalid."""


def load_config(path: Path | None = None) -> SyncConfig:
    """Load and validate configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses default config path.

    Returns:
        Validated SyncConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Configuration not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration: {e}") from e

    try:
        return SyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration content: {e}") from e


def load_config_or_default(path: Path | None = None) -> SyncConfig:
    """Load configuration, falling back to defaults when the file is missing.

    Args:
        path: Path to the config file. If None, uses default config path.

    Returns:
        Loaded SyncConfig, or a default one if no file exists.

    Raises:
        ConfigError: If the file exists but cannot be loaded.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.warning("No configuration file found at %s, using defaults", path or get_config_path())
        return SyncConfig()


def save_config(config: SyncConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically through a temporary file in the
    same directory.

    Args:
        config: The SyncConfig to save.
        path: Path to save to. If None, uses default config path.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write configuration: {e}") from e

    return config_path


def _config_to_dict(config: SyncConfig) -> dict[str, Any]:
    """Convert a SyncConfig to a dictionary suitable for TOML serialization.

    TOML has no null, so unset optional values are omitted.
    """
    data: dict[str, Any] = {}
    if config.root is not None:
        data["root"] = str(config.root)
    data["database"] = config.database
    if config.size_limit is not None:
        data["size_limit"] = config.size_limit
    data["profiles"] = {
        tag: {"rules": [rule.model_dump(exclude_none=True) for rule in profile.rules]}
        for tag, profile in config.profiles.items()
    }
    return data
