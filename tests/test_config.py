"""
Tests for config loading and the config check use case.
"""

import textwrap
from pathlib import Path

import pytest
import yaml

from aegis.core.config.loader import (
    ConfigError,
    config_artifact,
    dump_config,
    load_config,
    load_path_overrides,
    resolve_setup_config,
)
from aegis.core.errors import ValidationError
from aegis.core.models.config import SetupConfig
from aegis.core.services.artifacts import generate_artifacts
from aegis.core.services.staging import publish_files, reset_staging, stage_files
from aegis.core.use_cases.config_check import check_config


def _write(path: Path, content: str) -> Path:
    path.write_text(textwrap.dedent(content))
    return path


class TestLoadConfig:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "config.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = _write(tmp_path / "config.yml", "backend: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = _write(tmp_path / "config.yml", "- one\n- two\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path):
        path = _write(tmp_path / "config.yml", "backend:\n  type: zfs\n")
        with pytest.raises(ConfigError, match="Invalid setup configuration"):
            load_config(path)

    def test_config_error_is_validation_error(self):
        assert issubclass(ConfigError, ValidationError)
        assert ConfigError.kind == "ConfigError"

    def test_dump_excludes_secrets(self, complete_config: SetupConfig):
        text = dump_config(complete_config)
        assert "hunter2" not in text
        assert "s3cr3t" not in text
        data = yaml.safe_load(text)
        assert data["provider"]["access_key"] == "AKIAEXAMPLE"
        assert "secret_key" not in data["provider"]
        assert data["config_dir"] == complete_config.config_dir

    def test_artifact_is_owner_only(self, complete_config: SetupConfig):
        artifact = config_artifact(complete_config)
        assert artifact.path == str(complete_config.config_file)
        assert artifact.secret


class TestPathOverrides:
    def test_overrides(self, tmp_path: Path):
        path = _write(tmp_path / "paths.yml", """\
            backup_root: /srv/backups
            log_dir: /var/log/backups
        """)
        assert load_path_overrides(path) == {
            "backup_root": "/srv/backups",
            "log_dir": "/var/log/backups",
        }

    def test_unknown_key(self, tmp_path: Path):
        path = _write(tmp_path / "paths.yml", "backups: /srv\n")
        with pytest.raises(ConfigError, match="Unknown path keys"):
            load_path_overrides(path)

    def test_non_string(self, tmp_path: Path):
        path = _write(tmp_path / "paths.yml", "log_dir: 42\n")
        with pytest.raises(ConfigError, match="must be a string"):
            load_path_overrides(path)

    def test_resolve_with_root_and_file(self, tmp_path: Path):
        path = _write(tmp_path / "paths.yml", "backup_root: /srv/backups\n")
        config = resolve_setup_config(tmp_path / "root", path)
        assert config.backup_root == "/srv/backups"
        assert config.config_dir == str(tmp_path / "root" / "etc" / "aegis-backup")

    def test_resolve_relative_path(self, tmp_path: Path):
        path = _write(tmp_path / "paths.yml", "backup_root: backups\n")
        with pytest.raises(ConfigError, match="Invalid paths"):
            resolve_setup_config(None, path)


class TestConfigCheck:
    def _publish(self, config: SetupConfig) -> Path:
        files = [*generate_artifacts(config), config_artifact(config)]
        reset_staging(config.staging_dir)
        stage_files(files, config.staging_dir)
        publish_files(files, config.staging_dir)
        return config.config_file

    def test_valid(self, complete_config: SetupConfig):
        path = self._publish(complete_config)
        result = check_config(path)

        assert result.valid, result.errors
        assert result.warnings == []
        data = result.to_dict()
        assert data["backend"] == "traditional"
        assert data["provider"] == "s3"
        assert data["job_count"] == 1

    def test_missing_file(self, tmp_path: Path):
        result = check_config(tmp_path / "config.yml")
        assert not result.valid
        assert "not found" in result.errors[0]

    def test_incomplete(self, tmp_path: Path):
        path = _write(tmp_path / "config.yml", f"backup_root: {tmp_path}\n")
        result = check_config(path)

        assert not result.valid
        assert "No backup backend configured." in result.errors
        assert "No backup jobs configured." in result.errors
        assert any("monitoring" in w for w in result.warnings)

    def test_missing_credentials_warned(self, complete_config: SetupConfig):
        path = self._publish(complete_config)
        (Path(complete_config.config_dir) / "providers" / "s3.env").unlink()

        result = check_config(path)
        assert result.valid
        assert any("Provider credentials missing" in w for w in result.warnings)
