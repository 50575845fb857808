"""CLI for backup-projects using click."""

from __future__ import annotations

import logging

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from backup_projects import __version__
from backup_projects.models import ArchiverKind, BackupConfig, ChecksumAlgorithm
from backup_projects.orchestrator import BackupOrchestrator, PreconditionError

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def _setup_logging(debug: bool) -> None:
    """Configure logging with rich handler on stderr."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.command()
@click.argument("project_dirs", nargs=-1, metavar="[PROJECT_DIR]...")
@click.option(
    "--backup-to",
    default="",
    envvar="BACKUP_PROJECTS_BACKUP_TO",
    help="Path to place backup archives.",
)
@click.option(
    "--debug", is_flag=True, envvar="BACKUP_PROJECTS_DEBUG", help="Debug mode."
)
@click.option(
    "--jobs",
    "-j",
    type=int,
    default=None,
    help="Maximum number of projects archived at once (default: all).",
)
@click.option(
    "--archiver",
    type=click.Choice([k.value for k in ArchiverKind]),
    default=ArchiverKind.TAR.value,
    show_default=True,
    help="Build archives with the tar executable or in-process.",
)
@click.option(
    "--tar-command",
    default="tar",
    show_default=True,
    help="tar executable used by the tar archiver.",
)
@click.option(
    "--checksum",
    type=click.Choice([a.value for a in ChecksumAlgorithm]),
    default=ChecksumAlgorithm.MD5.value,
    show_default=True,
    help="Digest used to detect changed archives.",
)
@click.option(
    "--scratch-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Where candidate archives are built (default: inside --backup-to).",
)
@click.version_option(__version__, prog_name="backup-projects")
def main(
    project_dirs: tuple[str, ...],
    backup_to: str,
    debug: bool,
    jobs: int | None,
    archiver: str,
    tar_command: str,
    checksum: str,
    scratch_dir: str | None,
) -> None:
    """Backup projects.

    Archives every PROJECT_DIR into the --backup-to directory, replacing the
    previous archive of a project only when its content changed.
    """
    _setup_logging(debug)

    if not project_dirs:
        logger.error("Project directories must be specified.")
        raise SystemExit(1)
    if not backup_to:
        logger.error("Backup directory must be specified.")
        raise SystemExit(1)

    try:
        config = BackupConfig(
            backup_to=backup_to,
            jobs=jobs,
            archiver=ArchiverKind(archiver),
            tar_command=tar_command,
            checksum=ChecksumAlgorithm(checksum),
            scratch_dir=scratch_dir,
        )
    except ValidationError as exc:
        logger.error("Invalid options: %s", exc)
        raise SystemExit(1) from exc

    try:
        BackupOrchestrator(config).run(list(project_dirs))
    except PreconditionError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc
