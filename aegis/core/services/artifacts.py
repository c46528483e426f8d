"""
Artifact generation — the full file set for a finished configuration.

Checks that the configuration is complete and that every directory the
artifacts reference exists, then collects the output of each generator.
Nothing is written here; the setup pipeline stages and publishes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from aegis.core.errors import GenerationError
from aegis.core.models.config import CONFIG_SUBDIRS, SetupConfig
from aegis.core.models.template import GeneratedFile
from aegis.core.services.cron import cron_error
from aegis.core.services.generators import backup_script, cron, notify_script, settings

logger = logging.getLogger(__name__)


def referenced_directories(config: SetupConfig) -> list[Path]:
    """Directories the generated files are written to or point at."""
    directories = [
        *(Path(config.config_dir) / name for name in CONFIG_SUBDIRS),
        Path(config.backup_scripts_dir),
        Path(config.cron_dir),
        Path(config.log_dir),
        Path(config.backup_root),
    ]
    if config.monitoring and config.monitoring.enable_prometheus:
        directories.append(Path(config.monitoring_dir))
    return directories


def generate_artifacts(config: SetupConfig) -> list[GeneratedFile]:
    """Render every artifact for ``config``.

    Raises:
        ValidationError: A required section or field is unset.
        GenerationError: A referenced directory is missing, or the
            schedule is not a valid cron expression.
    """
    config.require_complete()

    missing = [str(d) for d in referenced_directories(config) if not d.is_dir()]
    if missing:
        raise GenerationError(f"Missing directories: {', '.join(missing)}")

    assert config.scheduling is not None
    problem = cron_error(config.scheduling.cron_schedule)
    if problem:
        raise GenerationError(problem)

    files: list[GeneratedFile] = []
    for generator in (backup_script, notify_script, cron, settings):
        files.extend(generator.generate(config))

    logger.debug("Rendered %d artifacts", len(files))
    return files
