"""Pydantic models for project backups."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Task models
# ---------------------------------------------------------------------------


class TaskState(StrEnum):
    """Lifecycle state of a single project backup."""

    PENDING = "pending"
    BUILDING = "building"
    FINGERPRINTING = "fingerprinting"
    DECIDING = "deciding"
    COMMITTED = "committed"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.COMMITTED, TaskState.SKIPPED, TaskState.FAILED)


class BackupTask(BaseModel):
    """One project directory to back up, and how far it got."""

    project_dir: str
    backup_dir: str
    archive_name: str
    scratch_path: str
    backup_path: str
    state: TaskState = TaskState.PENDING
    candidate_checksum: str | None = None
    incumbent_checksum: str | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# Configuration models
# ---------------------------------------------------------------------------


class ArchiverKind(StrEnum):
    """Which archive builder to use."""

    TAR = "tar"
    TARFILE = "tarfile"


class ChecksumAlgorithm(StrEnum):
    """Digest used to compare candidate and incumbent archives."""

    MD5 = "md5"
    SHA256 = "sha256"


class BackupConfig(BaseModel):
    """Settings for one backup run."""

    backup_to: str
    jobs: int | None = Field(default=None, ge=1)
    archiver: ArchiverKind = ArchiverKind.TAR
    tar_command: str = "tar"
    checksum: ChecksumAlgorithm = ChecksumAlgorithm.MD5
    scratch_dir: str | None = None
