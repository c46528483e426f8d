"""
Config check use case — validate a published config.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from aegis.core.config.loader import ConfigError, default_config_file, load_config
from aegis.core.models.config import SetupConfig
from aegis.core.services.artifacts import referenced_directories
from aegis.core.services.generators.settings import backend_env_path, provider_env_path


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: SetupConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        config = self.config
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "backend": config.backend.type if config and config.backend else None,
            "provider": config.provider.type if config and config.provider else None,
            "job_count": len(config.jobs) if config else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate a setup configuration file and the host state it describes.

    Args:
        config_path: Path to config.yml (default: the standard location).

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult(config_path=config_path or default_config_file())

    try:
        config = load_config(result.config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.config = config

    # Sections the generator needs
    if config.backend is None:
        result.errors.append("No backup backend configured.")
    if config.provider is None:
        result.errors.append("No cloud provider configured.")
    if not config.jobs:
        result.errors.append("No backup jobs configured.")
    if config.scheduling is None:
        result.errors.append("No backup schedule configured.")
    if config.retention is None:
        result.errors.append("No retention policy configured.")

    names = [job.name for job in config.jobs]
    dupes = {n for n in names if names.count(n) > 1}
    if dupes:
        result.errors.append(f"Duplicate job names: {', '.join(sorted(dupes))}")

    if config.monitoring is None or not config.monitoring.any_enabled:
        result.warnings.append("No monitoring channel enabled; failed backups will go unnoticed.")

    # Host state
    for directory in referenced_directories(config):
        if not directory.is_dir():
            result.warnings.append(f"Directory does not exist: {directory}")

    if config.backend is not None and not backend_env_path(config).is_file():
        result.warnings.append(f"Backend settings missing: {backend_env_path(config)}")
    if config.provider is not None and not provider_env_path(config).is_file():
        result.warnings.append(f"Provider credentials missing: {provider_env_path(config)}")

    result.valid = len(result.errors) == 0
    return result
