"""
Staging & publishing — get generated files onto the host atomically.

Artifacts are first written under ``<temp_dir>/staging``, mirroring
their absolute paths, so a failed run never leaves half a file set in
the live locations. Publishing copies each staged file next to its
target under a temporary name, applies the mode and renames it into
place.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from aegis.core.errors import FilesystemError
from aegis.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)

STAGING_MODE = 0o700


def staged_path(file: GeneratedFile, staging_dir: Path) -> Path:
    return staging_dir / file.path.lstrip("/")


def reset_staging(staging_dir: Path) -> None:
    """Empty (or create) the staging dir, readable by the owner only."""
    try:
        if staging_dir.exists():
            shutil.rmtree(staging_dir)
        staging_dir.mkdir(mode=STAGING_MODE, parents=True)
        os.chmod(staging_dir, STAGING_MODE)
    except OSError as e:
        raise FilesystemError(f"Cannot prepare staging area {staging_dir}: {e}") from e


def clean_staging(staging_dir: Path) -> None:
    try:
        shutil.rmtree(staging_dir)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise FilesystemError(f"Cannot remove staging area {staging_dir}: {e}") from e


def stage_files(files: list[GeneratedFile], staging_dir: Path) -> list[Path]:
    """Write ``files`` under ``staging_dir``.

    Returns:
        The staged paths, in input order.
    """
    staged: list[Path] = []
    for file in files:
        path = staged_path(file, staging_dir)
        try:
            path.parent.mkdir(mode=STAGING_MODE, parents=True, exist_ok=True)
            path.write_text(file.content, encoding="utf-8")
            os.chmod(path, file.mode)
        except OSError as e:
            raise FilesystemError(f"Cannot stage {file.path}: {e}") from e
        staged.append(path)

    logger.debug("Staged %d files in %s", len(staged), staging_dir)
    return staged


def _atomic_install(source: Path, target: Path, mode: int) -> None:
    fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "wb") as out, source.open("rb") as src:
            shutil.copyfileobj(src, out)
        os.chmod(tmp, mode)
        os.replace(tmp, target)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def publish_files(files: list[GeneratedFile], staging_dir: Path) -> list[str]:
    """Move staged ``files`` into their final locations.

    Returns:
        The published target paths.

    Raises:
        FilesystemError: A file was not staged, or could not be installed.
    """
    published: list[str] = []
    for file in files:
        source = staged_path(file, staging_dir)
        target = Path(file.path)
        if not source.is_file():
            raise FilesystemError(f"{file.path} was never staged")
        try:
            _atomic_install(source, target, file.mode)
        except OSError as e:
            raise FilesystemError(f"Cannot publish {target}: {e}") from e
        published.append(file.path)
        logger.info("Published %s", target)

    return published
