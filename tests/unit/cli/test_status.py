"""Unit tests for status command."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from tplsync.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Configuration with a profile that leaves out the Archive folder."""
    path = tmp_path / "config.toml"
    path.write_text('[profiles.trim]\nrules = [{ exclude = "Archive/.*" }]\n')
    return path


@pytest.fixture
def populated_root(
    template_root: Path, write_template: Callable[[str, str], Path]
) -> Path:
    """Template tree with one record for every action under the trim profile."""
    write_template("Keep.txt", "keep")
    write_template("Archive/Old.txt", "old")
    (template_root / "templates.csv").write_bytes(b"New.txt,new\nArchive/Gone.txt,gone\n")
    return template_root


class TestStatusCommand:
    """Tests for tplsync status command."""

    def test_status_lists_plan(self, populated_root: Path, config_file: Path) -> None:
        """Status shows planned actions and a summary."""
        result = runner.invoke(
            app, ["status", "-t", "trim", "-r", str(populated_root), "-c", str(config_file)]
        )

        assert result.exit_code == 0
        assert "Keep.txt" in result.stdout
        assert "New.txt" in result.stdout
        assert "Archive/Old.txt" in result.stdout
        assert "Archive/Gone.txt" not in result.stdout
        assert "1 to pack" in result.stdout
        assert "1 to leave out" in result.stdout

    def test_status_all_lists_ignored(self, populated_root: Path, config_file: Path) -> None:
        """--all includes ignored records."""
        result = runner.invoke(
            app,
            ["status", "-t", "trim", "--all", "-r", str(populated_root), "-c", str(config_file)],
        )

        assert result.exit_code == 0
        assert "Archive/Gone.txt" in result.stdout

    def test_status_json(self, populated_root: Path, config_file: Path) -> None:
        """--json prints records in execution order."""
        result = runner.invoke(
            app,
            ["status", "-t", "trim", "--json", "-r", str(populated_root), "-c", str(config_file)],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [(item["path"], item["action"]) for item in data] == [
            ("Keep.txt", "pack"),
            ("New.txt", "unpack"),
            ("Archive/Old.txt", "remove"),
            ("Archive/Gone.txt", "ignore"),
        ]

    def test_status_changes_nothing(self, populated_root: Path, config_file: Path) -> None:
        """Status never writes, unpacks or deletes."""
        before = (populated_root / "templates.csv").read_bytes()

        runner.invoke(
            app, ["status", "-t", "trim", "-r", str(populated_root), "-c", str(config_file)]
        )

        assert (populated_root / "templates.csv").read_bytes() == before
        assert (populated_root / "Archive" / "Old.txt").exists()
        assert not (populated_root / "New.txt").exists()

    def test_status_empty_root(self, template_root: Path, config_file: Path) -> None:
        """An empty directory with no database has nothing to do."""
        result = runner.invoke(app, ["status", "-r", str(template_root), "-c", str(config_file)])

        assert result.exit_code == 0
        assert "No templates found" in result.stdout

    def test_status_missing_root(self, tmp_path: Path, config_file: Path) -> None:
        """A missing template directory is an error."""
        result = runner.invoke(
            app, ["status", "-r", str(tmp_path / "missing"), "-c", str(config_file)]
        )

        assert result.exit_code == 1
