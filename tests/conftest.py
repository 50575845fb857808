"""Shared test fixtures for backup-projects tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def _make_project(
    base: Path, name: str, files: dict[str, str] | None = None
) -> Path:
    """Create a project directory under *base* holding *files*."""
    project = base / name
    project.mkdir(parents=True)
    for rel, content in (files or {"README.md": f"# {name}\n"}).items():
        target = project / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return project


@pytest.fixture
def projects_root(tmp_path: Path) -> Path:
    """Return a directory holding project directories."""
    root = tmp_path / "home"
    root.mkdir()
    return root


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    """Return a (not yet created) backup destination."""
    return tmp_path / "backups"


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Return an existing scratch directory."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    return scratch


@pytest.fixture
def make_project() -> Callable[..., Path]:
    """Return a factory creating project directories with files."""
    return _make_project
