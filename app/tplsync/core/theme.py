"""Console colors for tplsync.

The palette ships in ``tplsync/data/theme.toml``. A ``theme.toml`` next to
the configuration file may override any subset of its ``[colors]`` table.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from tplsync.core.paths import get_config_dir

logger = logging.getLogger(__name__)


def _check_hex(value: str) -> str:
    color = value.strip()
    digits = color.removeprefix("#")
    if digits == color:
        msg = f"color {value!r} must start with '#'"
        raise ValueError(msg)
    if len(digits) not in (3, 6):
        msg = f"color {value!r} must be #RGB or #RRGGBB"
        raise ValueError(msg)
    try:
        int(digits, 16)
    except ValueError:
        msg = f"color {value!r} is not a hex value"
        raise ValueError(msg) from None
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Palette used by the CLI.

    The five outcome colors mark templates that were packed, repacked,
    unpacked, left out or ignored.
    """

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    packed: HexColor = "#c1ff62"
    repacked: HexColor = "#0e8ac8"
    unpacked: HexColor = "#69B9A1"
    left_out: HexColor = "#f5b332"
    ignored: HexColor = "#636e72"


def get_user_theme_path() -> Path:
    """Get the path of the optional user theme override."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Traversable:
    """Get the theme file shipped with the package."""
    return resources.files("tplsync.data").joinpath("theme.toml")


def _read_colors(path: Path | Traversable) -> dict[str, Any]:
    """Return the ``[colors]`` table of a theme file.

    A missing, unreadable or malformed file yields an empty table.
    """
    try:
        with path.open("rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return {}
    return colors


def load_theme() -> ThemeColors:
    """Load the bundled palette with the user's overrides applied.

    Returns:
        The merged palette, or the bundled one if the overrides are
        invalid.
    """
    bundled = _read_colors(get_bundled_theme_path())
    overrides = _read_colors(get_user_theme_path())

    try:
        return ThemeColors.model_validate({**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Ignoring invalid user theme: %s", e)
        return ThemeColors.model_validate(bundled)


def get_rich_theme(colors: ThemeColors) -> Theme:
    """Build the Rich theme: one style per color plus a few emphasized ones."""
    styles: dict[str, str] = colors.model_dump()
    styles["error"] = f"bold {colors.error}"
    styles["bold_header"] = f"bold {colors.header}"
    styles["template.path"] = f"bold {colors.text}"
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Get the Rich theme, loading it on first use."""
    return get_rich_theme(load_theme())
