"""Back up a single project directory."""

from __future__ import annotations

import logging
import os

from backup_projects.archiver import ArchiveError, Archiver
from backup_projects.fingerprint import file_checksum, incumbent_checksum
from backup_projects.layout import directory_exists
from backup_projects.models import BackupTask, ChecksumAlgorithm, TaskState

logger = logging.getLogger(__name__)

NO_FILE = "no-file"


class BackupTaskRunner:
    """Drives one :class:`BackupTask` to a terminal state.

    Build a candidate archive, compare its checksum with the committed one
    and replace the committed archive only when the content changed. Errors
    never leave :meth:`run`; they are logged and end the task as ``failed``.
    """

    def __init__(
        self,
        archiver: Archiver,
        checksum: ChecksumAlgorithm = ChecksumAlgorithm.MD5,
    ) -> None:
        self._archiver = archiver
        self._checksum = checksum

    def run(self, task: BackupTask) -> BackupTask:
        """Run *task* and return its final snapshot."""
        if not directory_exists(task.project_dir):
            logger.warning("Project directory not found: %s", task.project_dir)
            return _fail(task, f"Project directory not found: {task.project_dir}")

        task = task.model_copy(update={"state": TaskState.BUILDING})
        try:
            self._archiver.build(task.project_dir, task.scratch_path)
        except ArchiveError as exc:
            logger.warning("Unable to compress: %s: %s", task.project_dir, exc)
            return _fail(task, str(exc))

        task = task.model_copy(update={"state": TaskState.FINGERPRINTING})
        try:
            candidate = file_checksum(task.scratch_path, self._checksum)
        except OSError as exc:
            logger.error("Unable to get checksum: %s: %s", task.scratch_path, exc)
            return _fail(task, str(exc))
        logger.debug(
            "Calculate new archive checksum: input=%s output=%s",
            task.scratch_path,
            candidate,
        )

        try:
            incumbent = incumbent_checksum(task.backup_path, self._checksum)
        except OSError as exc:
            logger.error("Unable to get checksum: %s: %s", task.backup_path, exc)
            return _fail(task, str(exc))
        logger.debug(
            "Calculate previous archive checksum: input=%s output=%s",
            task.backup_path,
            incumbent or NO_FILE,
        )

        task = task.model_copy(
            update={
                "state": TaskState.DECIDING,
                "candidate_checksum": candidate,
                "incumbent_checksum": incumbent,
            }
        )
        if incumbent is not None and candidate == incumbent:
            logger.info(
                "Archive unchanged: project=%s archive=%s checksum=%s",
                task.project_dir,
                task.backup_path,
                candidate,
            )
            return task.model_copy(update={"state": TaskState.SKIPPED})

        try:
            os.replace(task.scratch_path, task.backup_path)
        except OSError as exc:
            logger.error(
                "Failed to move archive: from=%s to=%s: %s",
                task.scratch_path,
                task.backup_path,
                exc,
            )
            return _fail(task, str(exc))

        logger.info("Backup file created: %s", task.backup_path)
        return task.model_copy(update={"state": TaskState.COMMITTED})


def _fail(task: BackupTask, error: str) -> BackupTask:
    return task.model_copy(update={"state": TaskState.FAILED, "error": error})
