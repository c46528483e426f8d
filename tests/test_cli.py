"""
Tests for CLI commands — setup, config check, config paths, and global options.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from aegis.core.config.loader import config_artifact
from aegis.core.models.config import SetupConfig
from aegis.core.services.artifacts import generate_artifacts
from aegis.core.services.staging import publish_files, reset_staging, stage_files
from aegis.main import cli

# Traditional backend without encryption, Amazon S3, defaults elsewhere.
SETUP_INPUT = [
    "1",                 # backend menu
    "",                  # gzip level
    "n",                 # encrypt
    "1",                 # provider menu
    "",                  # endpoint
    "",                  # region
    "acme-backups",      # bucket
    "",                  # prefix
    "AKIAEXAMPLE",       # access key
    "s3cr3t", "s3cr3t",  # secret key + confirmation
    "", "", "", "", "",  # job name, paths, excludes, description, another
    "", "", "",          # prometheus, email, slack
    "",                  # cron
    "", "", "", "",      # retention
]


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "offsite backups" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestSetupCommand:
    """Tests for the setup wizard command."""

    def test_mock_run(self, host_root: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["setup", "--mock", "--root", str(host_root)],
            input="\n".join(SETUP_INPUT) + "\n",
        )

        assert result.exit_code == 0, result.output
        assert "[5/13] Select backup backend..." in result.output
        assert "Setup complete" in result.output
        assert (host_root / "etc" / "aegis-backup" / "config.yml").is_file()
        assert (host_root / "etc" / "cron.d" / "aegis-backup").is_file()

    def test_abort_exits_130(self, host_root: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["setup", "--mock", "--root", str(host_root)],
            input="",
        )

        assert result.exit_code == 130
        assert "[5/13] Select backup backend..." in result.output
        assert "Error at [5/13] Select backup backend: " in result.output
        assert not (host_root / "etc" / "aegis-backup" / "config.yml").exists()

    def test_bad_paths_file(self, tmp_path: Path):
        paths = tmp_path / "paths.yml"
        paths.write_text("backups: /srv\n")

        runner = CliRunner()
        result = runner.invoke(cli, ["setup", "--mock", "--paths", str(paths)])

        assert result.exit_code == 1
        assert "Unknown path keys" in result.output


class TestConfigPaths:
    """Tests for config paths."""

    def test_json(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "paths", "--root", str(tmp_path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["config_dir"] == str(tmp_path / "etc" / "aegis-backup")
        assert data["cron_dir"] == str(tmp_path / "etc" / "cron.d")

    def test_text(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "paths", "--root", str(tmp_path)])

        assert result.exit_code == 0
        assert "backup_root" in result.output


class TestConfigCheck:
    """Tests for config check."""

    def _publish(self, config: SetupConfig) -> Path:
        files = [*generate_artifacts(config), config_artifact(config)]
        reset_staging(config.staging_dir)
        stage_files(files, config.staging_dir)
        publish_files(files, config.staging_dir)
        return config.config_file

    def test_valid(self, complete_config: SetupConfig):
        path = self._publish(complete_config)

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check", str(path)])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Backend: traditional" in result.output

    def test_valid_json(self, complete_config: SetupConfig):
        path = self._publish(complete_config)

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check", str(path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["job_count"] == 1

    def test_missing_file(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check", str(tmp_path / "config.yml")])

        assert result.exit_code == 1
        assert "Configuration errors" in result.output

    def test_incomplete(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text(f"backup_root: {tmp_path}\n")

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check", str(path)])

        assert result.exit_code == 1
        assert "No backup backend configured." in result.output
        assert "Warnings" in result.output
