"""Concurrent backup of many project directories."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from backup_projects.archiver import Archiver, make_archiver
from backup_projects.layout import BackupLayout, archive_name
from backup_projects.models import BackupConfig, BackupTask, TaskState
from backup_projects.task import BackupTaskRunner

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "backup-projects-"


class PreconditionError(Exception):
    """Raised when a run cannot start at all."""


class BackupOrchestrator:
    """Backs up every given project directory in parallel."""

    def __init__(
        self, config: BackupConfig, archiver: Archiver | None = None
    ) -> None:
        self._config = config
        self._layout = BackupLayout(config.backup_to)
        self._runner = BackupTaskRunner(
            archiver if archiver is not None else make_archiver(config),
            config.checksum,
        )

    def run(self, project_dirs: Sequence[str]) -> list[BackupTask]:
        """Back up *project_dirs* and wait until all of them are done.

        One worker is started per project unless ``jobs`` caps the pool.
        A failing project never stops the others; its outcome is only
        logged and recorded in the returned task.

        Args:
            project_dirs: Project directories, as given by the user.

        Returns:
            Final task snapshots, in input order.

        Raises:
            PreconditionError: If no project is given or the backup
                directory or scratch area cannot be prepared. No task has
                run in that case.
        """
        logger.debug("Project directories are given: %s", list(project_dirs))
        if not project_dirs:
            msg = "Project directories must be specified."
            raise PreconditionError(msg)
        if not self._config.backup_to:
            msg = "Backup directory must be specified."
            raise PreconditionError(msg)

        self._ensure_backup_dir()
        unique_dirs = _unique(project_dirs)

        try:
            scratch = tempfile.TemporaryDirectory(
                prefix=SCRATCH_PREFIX,
                dir=self._config.scratch_dir or self._config.backup_to,
            )
        except OSError as exc:
            msg = f"Unable to create temporary backup directory: {exc}"
            raise PreconditionError(msg) from exc

        with scratch as scratch_dir:
            logger.debug("Temporary directory created: %s", scratch_dir)
            tasks = [self._make_task(d, scratch_dir) for d in unique_dirs]
            return self._execute(tasks)

    def _ensure_backup_dir(self) -> None:
        backup_dir = self._layout.backup_dir
        if backup_dir.is_dir():
            return
        if backup_dir.exists():
            msg = f"Backup path is not a directory: {backup_dir}"
            raise PreconditionError(msg)

        logger.info("Backup directory does not exist: %s", backup_dir)
        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Unable to create backup directory: {exc}"
            raise PreconditionError(msg) from exc

    def _make_task(self, project_dir: str, scratch_dir: str) -> BackupTask:
        return BackupTask(
            project_dir=project_dir,
            backup_dir=str(self._layout.backup_dir),
            archive_name=archive_name(project_dir),
            scratch_path=str(self._layout.scratch_path(project_dir, scratch_dir)),
            backup_path=str(self._layout.backup_path(project_dir)),
        )

    def _execute(self, tasks: list[BackupTask]) -> list[BackupTask]:
        workers = self._config.jobs or len(tasks)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._runner.run, task) for task in tasks]

        results: list[BackupTask] = []
        for task, future in zip(tasks, futures, strict=True):
            try:
                results.append(future.result())
            except Exception as exc:
                logger.error("Backup of %s failed: %s", task.project_dir, exc)
                results.append(
                    task.model_copy(
                        update={"state": TaskState.FAILED, "error": str(exc)}
                    )
                )
        return results


def _unique(project_dirs: Sequence[str]) -> list[str]:
    """Drop repeated project paths so no two tasks share an archive name."""
    seen: dict[str, str] = {}
    for project_dir in project_dirs:
        name = archive_name(project_dir)
        if name in seen:
            logger.warning(
                "Skipping %s: same archive name as %s", project_dir, seen[name]
            )
            continue
        seen[name] = project_dir
    return list(seen.values())
