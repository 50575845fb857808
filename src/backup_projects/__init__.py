"""Backup Projects — archive project directories, keeping only changed backups."""

__version__ = "0.1.0"

from backup_projects.models import (
    ArchiverKind,
    BackupConfig,
    BackupTask,
    ChecksumAlgorithm,
    TaskState,
)
from backup_projects.layout import BackupLayout

__all__ = [
    "ArchiverKind",
    "BackupConfig",
    "BackupLayout",
    "BackupTask",
    "ChecksumAlgorithm",
    "TaskState",
]
