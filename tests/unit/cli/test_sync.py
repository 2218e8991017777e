"""Unit tests for sync command.

Tests for the CLI sync command against real template trees.
"""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from tplsync.cli.main import app
from tplsync.sync.database import DatabaseError
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Configuration with a profile that leaves out the Archive folder."""
    path = tmp_path / "config.toml"
    path.write_text('[profiles.trim]\nrules = [{ exclude = "Archive/.*" }]\n')
    return path


class TestSyncCommand:
    """Tests for tplsync sync command."""

    def test_sync_help(self) -> None:
        """Sync command shows help."""
        result = runner.invoke(app, ["sync", "--help"])
        assert result.exit_code == 0
        assert "--tag" in result.stdout

    def test_sync_packs_templates(
        self,
        template_root: Path,
        config_file: Path,
        write_template: Callable[[str, str], Path],
    ) -> None:
        """Templates on disk end up in the database."""
        write_template("Monk.txt", "OwAT043A5i\r\n")

        result = runner.invoke(app, ["sync", "-r", str(template_root), "-c", str(config_file)])

        assert result.exit_code == 0
        assert "1 template(s) packed" in result.output
        assert (template_root / "templates.csv").read_bytes() == b"Monk.txt,OwAT043A5i\n"

    def test_sync_with_tag_leaves_out(
        self,
        template_root: Path,
        config_file: Path,
        write_template: Callable[[str, str], Path],
    ) -> None:
        """The tag's rules decide which templates leave the disk."""
        target = write_template("Archive/Old.txt", "code")

        result = runner.invoke(
            app, ["sync", "-t", "trim", "-r", str(template_root), "-c", str(config_file)]
        )

        assert result.exit_code == 0
        assert "1 left out" in result.output
        assert not target.exists()
        assert b"Archive/Old.txt,code" in (template_root / "templates.csv").read_bytes()

    def test_sync_unpacks_templates(self, template_root: Path, config_file: Path) -> None:
        """Templates only in the database are written back."""
        (template_root / "templates.csv").write_bytes(b"PvP/Spike.txt,OQBCA\n")

        result = runner.invoke(app, ["sync", "-r", str(template_root), "-c", str(config_file)])

        assert result.exit_code == 0
        assert "1 unpacked" in result.output
        assert (template_root / "PvP" / "Spike.txt").read_bytes() == b"OQBCA"

    def test_sync_unknown_tag_warns(self, template_root: Path, config_file: Path) -> None:
        """An unknown tag is reported and everything is included."""
        result = runner.invoke(
            app, ["sync", "-t", "pve", "-r", str(template_root), "-c", str(config_file)]
        )

        assert result.exit_code == 0
        assert "No rules configured" in result.output

    def test_sync_missing_root(self, tmp_path: Path, config_file: Path) -> None:
        """A missing template directory fails before any work."""
        result = runner.invoke(
            app, ["sync", "-r", str(tmp_path / "missing"), "-c", str(config_file)]
        )

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_sync_invalid_config(self, template_root: Path, tmp_path: Path) -> None:
        """An invalid configuration file fails the run."""
        bad = tmp_path / "bad.toml"
        bad.write_text("size_limit = [")

        result = runner.invoke(app, ["sync", "-r", str(template_root), "-c", str(bad)])

        assert result.exit_code == 1
        assert "Failed to load configuration" in result.output

    def test_sync_database_not_saved(
        self,
        template_root: Path,
        config_file: Path,
        write_template: Callable[[str, str], Path],
    ) -> None:
        """A failed save exits non-zero and keeps excluded templates."""
        target = write_template("Archive/Old.txt", "code")

        with patch(
            "tplsync.sync.engine.save_database", side_effect=DatabaseError("disk full")
        ):
            result = runner.invoke(
                app, ["sync", "-t", "trim", "-r", str(template_root), "-c", str(config_file)]
            )

        assert result.exit_code == 1
        assert "Database was not saved" in result.output
        assert target.exists()

    def test_sync_unreadable_database(self, template_root: Path, config_file: Path) -> None:
        """A database that cannot be read aborts the run."""
        (template_root / "templates.csv").mkdir()

        result = runner.invoke(app, ["sync", "-r", str(template_root), "-c", str(config_file)])

        assert result.exit_code == 1
        assert "Failed to read database" in result.output

    def test_sync_custom_database(
        self,
        template_root: Path,
        config_file: Path,
        write_template: Callable[[str, str], Path],
    ) -> None:
        """--database picks another file below the root."""
        write_template("a.txt", "a")

        result = runner.invoke(
            app,
            ["sync", "-r", str(template_root), "-c", str(config_file), "-d", "other.csv"],
        )

        assert result.exit_code == 0
        assert (template_root / "other.csv").read_bytes() == b"a.txt,a\n"
        assert not (template_root / "templates.csv").exists()
