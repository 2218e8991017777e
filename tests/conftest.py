"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from tplsync.core.paths import ROOT_ENV_VAR
from tplsync.sync.filter import InclusionFilter
from tplsync.sync.models import RunConfig


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    """Keep tests away from the real configuration and template folders."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    env = {key: value for key, value in os.environ.items() if key != ROOT_ENV_VAR}
    env["XDG_CONFIG_HOME"] = str(config_home)
    with patch.dict(os.environ, env, clear=True):
        yield config_home


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """Empty watched template directory."""
    root = tmp_path / "Skills"
    root.mkdir()
    return root


@pytest.fixture
def write_template(template_root: Path) -> Callable[[str, str | bytes], Path]:
    """Write a template below the watched directory, creating folders."""

    def _write(path: str, content: str | bytes) -> Path:
        target = template_root.joinpath(*path.split("/"))
        target.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        target.write_bytes(data)
        return target

    return _write


@pytest.fixture
def make_run_config(template_root: Path) -> Callable[..., RunConfig]:
    """Build a RunConfig for the watched directory from (pattern, include) rules."""

    def _make(
        rules: list[tuple[str, bool]] | None = None,
        size_limit: int | None = None,
    ) -> RunConfig:
        inclusion = InclusionFilter()
        for pattern, include in rules or []:
            inclusion.add_rule(pattern, include)
        return RunConfig(
            root=template_root,
            database=template_root / "templates.csv",
            inclusion=inclusion,
            size_limit=size_limit,
        )

    return _make


@pytest.fixture
def sample_database() -> bytes:
    """Database content with nested paths, commas and a malformed line."""
    return (
        b"Warrior/Tank.txt,OQcSE5Z2dVJ\n"
        b"Monk.txt,OwAT043A5i\n"
        b"\n"
        b"no separator here\n"
        b"Mesmer/PvP/Shutdown.txt,OQBCA,comma,inside\n"
    )
