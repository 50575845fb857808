"""Content checksums for archive files."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from backup_projects.models import ChecksumAlgorithm

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def file_checksum(
    path: str | Path, algorithm: ChecksumAlgorithm | str = ChecksumAlgorithm.MD5
) -> str:
    """Return the hex digest of the bytes stored in *path*.

    Only the content is hashed; timestamps, permissions and the path itself
    have no influence on the result.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    digest = hashlib.new(str(algorithm))
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def incumbent_checksum(
    path: str | Path, algorithm: ChecksumAlgorithm | str = ChecksumAlgorithm.MD5
) -> str | None:
    """Return the checksum of the committed archive at *path*.

    Returns ``None`` when nothing has been committed there yet. A file that
    exists but cannot be read raises instead of being reported as absent.
    """
    p = Path(path)
    if not p.exists():
        logger.debug("No previous archive: %s", p)
        return None
    return file_checksum(p, algorithm)
