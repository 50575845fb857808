"""Backup folder layout — single source of truth for archive naming."""

from __future__ import annotations

import os
from pathlib import Path

ARCHIVE_EXTENSION = ".tar"
NAME_SEPARATOR = ":"


def archive_name(project_dir: str | Path) -> str:
    """Return the archive filename for *project_dir*.

    The path is used exactly as given: every ``/`` becomes ``:`` and the
    archive extension is appended, so ``/home/u/projA`` maps to
    ``:home:u:projA.tar``.
    """
    return str(project_dir).replace("/", NAME_SEPARATOR) + ARCHIVE_EXTENSION


def directory_exists(path: str | Path) -> bool:
    """Return ``True`` if *path* exists and is a directory."""
    return os.path.isdir(path)


class BackupLayout:
    """Resolve where candidate and committed archives live.

    The layout is::

        backup_dir/
        ├── :home:u:projA.tar   ← committed (incumbent) archives
        ├── :home:u:projB.tar
        └── backup-projects-xxxx/  ← scratch area, only during a run
            └── :home:u:projA.tar  ← candidate archives
    """

    def __init__(self, backup_dir: str | Path) -> None:
        self._backup_dir = Path(backup_dir)

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    def backup_path(self, project_dir: str | Path) -> Path:
        """Return the committed archive path for *project_dir*."""
        return self._backup_dir / archive_name(project_dir)

    def scratch_path(self, project_dir: str | Path, scratch_dir: str | Path) -> Path:
        """Return the candidate archive path for *project_dir* in *scratch_dir*."""
        return Path(scratch_dir) / archive_name(project_dir)
