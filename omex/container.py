"""
The physical container: archives are ZIP files, unpacked into a staging
directory for reading and packed back up from it on save.
"""

import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Iterable

from loguru import logger

from .exceptions import PackError, UnpackError

STAGING_PREFIX = "omex-"


def create_staging_directory(staging_root: Path | None = None) -> Path:
    if staging_root is not None:
        Path(staging_root).mkdir(parents=True, exist_ok=True)

    return Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=staging_root))


def unpack(archive_path: Path | str, staging_root: Path | None = None) -> Path:
    """
    Extract an archive into a fresh staging directory and return it.

    Raises
    ------
    UnpackError
        If the archive cannot be opened or extracted. The staging directory
        is removed in that case.
    """

    archive_path = Path(archive_path)
    staging_directory = create_staging_directory(staging_root)

    try:
        with zipfile.ZipFile(archive_path, "r") as handle:
            handle.extractall(staging_directory)
    except (OSError, zipfile.BadZipFile) as e:
        shutil.rmtree(staging_directory, ignore_errors=True)
        raise UnpackError(f"Cannot unpack archive {archive_path}: {e}") from e

    logger.debug("Unpacked {} into {}", archive_path, staging_directory)

    return staging_directory


def pack(
    archive_path: Path | str,
    files: Iterable[Path],
    base_directory: Path | str,
    compression: int = zipfile.ZIP_DEFLATED,
):
    """
    Write the given files to a ZIP archive, storing each under its path
    relative to ``base_directory``.

    Raises
    ------
    PackError
        If a file lies outside ``base_directory`` or cannot be written. Any
        partially written archive is removed.
    """

    archive_path = Path(archive_path)
    base_directory = Path(base_directory).resolve()
    written = set()

    try:
        with zipfile.ZipFile(archive_path, "w", compression=compression) as handle:
            for filename in files:
                # Entries such as "." refer to the archive itself
                if Path(filename).is_dir():
                    continue

                arcname = Path(filename).resolve().relative_to(base_directory).as_posix()

                if arcname in written:
                    continue

                handle.write(filename, arcname)
                written.add(arcname)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        archive_path.unlink(missing_ok=True)
        raise PackError(f"Cannot pack archive {archive_path}: {e}") from e

    logger.debug("Packed {} file(s) into {}", len(written), archive_path)
