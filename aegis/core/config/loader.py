"""
Configuration loader — reads and writes config.yml and path overrides.

``config.yml`` holds every non-secret field of a SetupConfig. It is
produced by the Finalize step and can be validated later with
``aegis config check``. Path override files are flat YAML mappings of
path field → absolute directory, used to relocate the default layout.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from aegis.core import errors
from aegis.core.models.config import (
    CONFIG_FILE,
    DEFAULT_PATHS,
    PATH_FIELDS,
    SetupConfig,
)
from aegis.core.models.template import GeneratedFile
from aegis.core.services.generators.common import HEADER, SECRET_MODE

logger = logging.getLogger(__name__)


class ConfigError(errors.ValidationError):
    """Raised when a config or path file is missing or invalid."""

    kind = "ConfigError"


def default_config_file() -> Path:
    return Path(DEFAULT_PATHS["config_dir"]) / CONFIG_FILE


def _read_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_config(path: Path | None = None) -> SetupConfig:
    """Load and validate a published config.yml.

    Secrets are never stored in the file, so the returned config has
    empty secret fields.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = path or default_config_file()
    logger.debug("Loading setup config from %s", path)

    data = _read_mapping(path)
    try:
        config = SetupConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid setup configuration: {e}") from e

    logger.info("Loaded config with %d backup jobs", len(config.jobs))
    return config


def load_path_overrides(path: Path) -> dict[str, str]:
    """Read a path override file.

    Raises:
        ConfigError: Unknown keys, non-string values or an unreadable file.
    """
    data = _read_mapping(path)

    unknown = sorted(set(data) - set(PATH_FIELDS))
    if unknown:
        raise ConfigError(
            f"Unknown path keys in {path}: {', '.join(unknown)} "
            f"(expected some of: {', '.join(PATH_FIELDS)})"
        )

    overrides: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(value, str):
            raise ConfigError(f"Path '{key}' in {path} must be a string")
        overrides[key] = value
    return overrides


def dump_config(config: SetupConfig) -> str:
    """Render the non-secret part of ``config`` as YAML."""
    data = config.model_dump(mode="json", exclude_none=True)
    body = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return f"# {HEADER}\n{body}"


def config_artifact(config: SetupConfig) -> GeneratedFile:
    # Owner-only: may carry the Slack webhook URL.
    return GeneratedFile(
        path=str(config.config_file),
        content=dump_config(config),
        mode=SECRET_MODE,
        reason="Setup configuration for later checks",
    )


def resolve_setup_config(root: Path | None = None, paths_file: Path | None = None) -> SetupConfig:
    """Build the starting config from an optional root and override file.

    Raises:
        ConfigError: The override file is invalid or a path is not absolute.
    """
    overrides = load_path_overrides(paths_file) if paths_file else {}
    try:
        return SetupConfig.with_root(root, **overrides)
    except Exception as e:
        raise ConfigError(f"Invalid paths: {e}") from e
