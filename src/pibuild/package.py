"""
Distributable archive creation.
"""

import logging
import zipfile
from datetime import datetime
from pathlib import Path

from .config import PACKAGE_PREFIX

logger = logging.getLogger(__name__)


class PackagingError(Exception):
    """Exception raised when the archive cannot be written."""

    pass


def archive_name(now: datetime | None = None) -> str:
    """Archive file name, timestamped to the second."""
    now = now or datetime.now()
    return f"{PACKAGE_PREFIX}-{now:%Y%m%d%H%M%S}.zip"


def create_archive(sdcard_dir: Path, out_dir: Path, now: datetime | None = None) -> Path:
    """
    Zip the contents of the SD-card directory.

    Entries are stored relative to the SD-card directory, so unzipping the
    archive onto a card gives the same layout. Directories get their own
    entries so empty ones (e.g. soundfonts/) survive.

    Args:
        sdcard_dir: Staged SD-card directory
        out_dir: Directory the archive is written to
        now: Timestamp for the file name (defaults to the current time)

    Returns:
        Path to the archive

    Raises:
        PackagingError: If the SD-card directory does not exist or the
            archive cannot be written
    """
    if not sdcard_dir.is_dir():
        raise PackagingError(f"SD-card directory not found: {sdcard_dir}")

    archive = out_dir / archive_name(now)
    logger.info(f"Creating package: {archive}")

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in sorted(sdcard_dir.rglob("*")):
                zf.write(path, path.relative_to(sdcard_dir).as_posix())
    except OSError as e:
        raise PackagingError(f"Could not write {archive}: {e.strerror or e}") from e

    return archive
