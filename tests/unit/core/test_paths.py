"""Unit tests for XDG path management and root resolution."""

import os
from pathlib import Path
from unittest.mock import patch

from tplsync.core.paths import (
    APP_NAME,
    ROOT_ENV_VAR,
    get_config_dir,
    get_config_path,
    get_default_root,
    resolve_root,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """Falls back to ~/.config when XDG_CONFIG_HOME is not set."""
        with patch.dict(os.environ, {"HOME": str(Path.home())}, clear=True):
            result = get_config_dir()
            expected = Path.home() / ".config" / APP_NAME

        assert result == expected

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_dir() == tmp_path / APP_NAME

    def test_config_path(self, isolated_environment: Path) -> None:
        """The configuration file is config.toml in the config directory."""
        assert get_config_path() == isolated_environment / APP_NAME / "config.toml"


class TestResolveRoot:
    """Tests for resolve_root priority."""

    def test_cli_wins(self, tmp_path: Path) -> None:
        """A command line root beats every other source."""
        with patch.dict(os.environ, {ROOT_ENV_VAR: str(tmp_path / "env")}):
            result = resolve_root(tmp_path / "cli", tmp_path / "config")

        assert result == tmp_path / "cli"

    def test_environment_beats_config(self, tmp_path: Path) -> None:
        """TPLSYNC_ROOT beats the configuration file."""
        with patch.dict(os.environ, {ROOT_ENV_VAR: str(tmp_path / "env")}):
            result = resolve_root(None, tmp_path / "config")

        assert result == tmp_path / "env"

    def test_empty_environment_ignored(self, tmp_path: Path) -> None:
        """An empty TPLSYNC_ROOT counts as unset."""
        with patch.dict(os.environ, {ROOT_ENV_VAR: ""}):
            result = resolve_root(None, tmp_path / "config")

        assert result == tmp_path / "config"

    def test_default_root(self) -> None:
        """Without any source the Guild Wars skill folder is used."""
        assert resolve_root() == get_default_root()
        assert get_default_root().parts[-2:] == ("Templates", "Skills")

    def test_expands_user(self) -> None:
        """A leading ~ is expanded."""
        assert resolve_root(Path("~/Skills")) == Path.home() / "Skills"
