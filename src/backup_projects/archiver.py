"""Build a single archive of a project directory."""

from __future__ import annotations

import logging
import os
import subprocess
import tarfile
from pathlib import Path
from typing import Protocol

from backup_projects.layout import directory_exists
from backup_projects.models import ArchiverKind, BackupConfig

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Raised when an archive cannot be built."""


class Archiver(Protocol):
    """Writes one archive holding the whole of a project directory."""

    def build(self, project_dir: str | Path, output_path: str | Path) -> Path: ...


def _split_project_dir(project_dir: str | Path) -> tuple[Path, str]:
    """Return the parent to archive from and the basename to archive."""
    if not directory_exists(project_dir):
        msg = f"Project directory not found: {project_dir}"
        raise ArchiveError(msg)
    # "." and "projA/.." have no usable basename until made absolute.
    src = Path(os.path.abspath(project_dir))
    if not src.name:
        return src, "."
    return src.parent, src.name


class TarArchiver:
    """Archives directories with the external ``tar`` executable.

    Archive members are rooted at the directory's basename, so the host path
    of the project never ends up inside the archive.
    """

    def __init__(self, command: str = "tar") -> None:
        self._command = command

    def build(self, project_dir: str | Path, output_path: str | Path) -> Path:
        """Archive *project_dir* into *output_path*.

        Args:
            project_dir: Directory to archive. Must exist.
            output_path: Archive file to write. Overwritten if present.

        Returns:
            Path to the written archive.

        Raises:
            ArchiveError: If the directory is missing or ``tar`` fails.
                A partial file may be left at *output_path*.
        """
        parent, basename = _split_project_dir(project_dir)
        out = Path(output_path)
        args = [self._command, "cf", str(out), "-C", str(parent), basename]

        logger.debug(
            "Create archive: project-dir=%s parent-dir=%s basename=%s",
            project_dir,
            parent,
            basename,
        )
        try:
            proc = subprocess.run(args, capture_output=True, text=True, check=False)
        except OSError as exc:
            msg = f"Unable to run {self._command}: {exc}"
            raise ArchiveError(msg) from exc

        if proc.returncode != 0:
            msg = (
                f"{self._command} exited with status {proc.returncode}: "
                f"{proc.stderr.strip()}"
            )
            raise ArchiveError(msg)

        logger.debug("Archive created: %s", out)
        return out


class TarfileArchiver:
    """Archives directories in-process with :mod:`tarfile`.

    Members are added in sorted order so an unchanged directory always
    produces a byte-identical archive.
    """

    def build(self, project_dir: str | Path, output_path: str | Path) -> Path:
        """Archive *project_dir* into *output_path*."""
        parent, basename = _split_project_dir(project_dir)
        root = parent / basename
        out = Path(output_path)

        logger.debug("Create archive in-process: project-dir=%s", project_dir)
        try:
            with tarfile.open(out, "w", format=tarfile.GNU_FORMAT) as tf:
                tf.add(root, arcname=basename, recursive=False)
                for dirpath, dirnames, filenames in os.walk(root):
                    dirnames.sort()
                    base = Path(dirpath)
                    for name in sorted([*dirnames, *filenames]):
                        member = base / name
                        arcname = Path(basename) / member.relative_to(root)
                        tf.add(member, arcname=str(arcname), recursive=False)
        except (OSError, tarfile.TarError) as exc:
            msg = f"Unable to archive {project_dir}: {exc}"
            raise ArchiveError(msg) from exc

        logger.debug("Archive created: %s", out)
        return out


def make_archiver(config: BackupConfig) -> Archiver:
    """Return the archiver selected by *config*."""
    if config.archiver == ArchiverKind.TARFILE:
        return TarfileArchiver()
    return TarArchiver(config.tar_command)
