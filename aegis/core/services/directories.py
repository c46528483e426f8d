"""
Directory provisioner — create the on-host layout with the right modes.

Everything is created with the default mode first; only afterwards are
the encryption-material directory and the temp dir narrowed to
owner-only. Existing directories count as success and keep their mode,
so running the provisioner twice changes nothing.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from aegis.core.errors import FilesystemError
from aegis.core.models.config import CONFIG_SUBDIRS, SetupConfig

logger = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755
PRIVATE_DIR_MODE = 0o700


@dataclass
class ProvisionResult:
    """What the provisioner did."""

    created: list[str] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)
    tightened: list[str] = field(default_factory=list)


def required_directories(config: SetupConfig) -> list[Path]:
    """The full directory set, in creation order."""
    config_dir = Path(config.config_dir)
    return [
        config_dir,
        *(config_dir / name for name in CONFIG_SUBDIRS),
        Path(config.log_dir),
        Path(config.backup_scripts_dir),
        Path(config.temp_dir),
        Path(config.backup_root),
        Path(config.monitoring_dir),
    ]


def private_directories(config: SetupConfig) -> list[Path]:
    """Directories that must end up readable by the owner only."""
    return [config.encryption_dir, Path(config.temp_dir)]


def provision_directories(config: SetupConfig) -> ProvisionResult:
    """Create every required directory, then tighten the private ones.

    Raises:
        FilesystemError: A directory could not be created or chmod-ed.
    """
    result = ProvisionResult()

    for directory in required_directories(config):
        if directory.is_dir():
            result.existing.append(str(directory))
            continue
        try:
            directory.mkdir(mode=DEFAULT_DIR_MODE, parents=True, exist_ok=True)
            # mkdir honours the umask; pin the mode we promise
            os.chmod(directory, DEFAULT_DIR_MODE)
        except OSError as e:
            raise FilesystemError(f"Cannot create directory {directory}: {e}") from e
        result.created.append(str(directory))
        logger.debug("Created %s", directory)

    for directory in private_directories(config):
        try:
            os.chmod(directory, PRIVATE_DIR_MODE)
        except OSError as e:
            raise FilesystemError(f"Cannot restrict permissions on {directory}: {e}") from e
        result.tightened.append(str(directory))

    logger.info(
        "Directories: %d created, %d already present",
        len(result.created),
        len(result.existing),
    )
    return result
