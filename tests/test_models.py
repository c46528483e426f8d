"""
Tests for domain models — validation, defaults, serialization.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from aegis.core.errors import ValidationError
from aegis.core.models import (
    BorgBackend,
    GeneratedFile,
    JobConfig,
    MonitoringConfig,
    Receipt,
    ResticBackend,
    RetentionConfig,
    S3CompatibleProvider,
    SchedulingConfig,
    SetupConfig,
    StepResult,
    ToolSpec,
    TraditionalBackend,
)
from aegis.core.models.config import DEFAULT_PATHS, PATH_FIELDS


class TestSetupConfigPaths:
    def test_defaults(self):
        config = SetupConfig()
        assert config.paths() == DEFAULT_PATHS
        assert config.config_dir == "/etc/aegis-backup"
        assert config.cron_dir == "/etc/cron.d"

    def test_with_root_relocates_every_path(self, tmp_path: Path):
        config = SetupConfig.with_root(tmp_path)
        for name in PATH_FIELDS:
            assert getattr(config, name).startswith(str(tmp_path))
        assert config.config_dir == str(tmp_path / "etc" / "aegis-backup")

    def test_overrides_win_over_root(self, tmp_path: Path):
        config = SetupConfig.with_root(tmp_path, backup_root="/srv/backups")
        assert config.backup_root == "/srv/backups"
        assert config.log_dir == str(tmp_path / "var" / "log" / "aegis-backup")

    def test_relative_path_rejected(self):
        with pytest.raises(PydanticValidationError, match="absolute"):
            SetupConfig(config_dir="etc/aegis")

    def test_empty_path_rejected(self):
        with pytest.raises(PydanticValidationError, match="empty"):
            SetupConfig(log_dir="  ")

    def test_paths_are_immutable(self):
        config = SetupConfig()
        with pytest.raises(PydanticValidationError):
            config.config_dir = "/elsewhere"

    def test_trailing_slash_stripped(self):
        assert SetupConfig(backup_root="/backups/").backup_root == "/backups"

    def test_derived_locations(self):
        config = SetupConfig()
        assert config.encryption_dir == Path("/etc/aegis-backup/encryption")
        assert config.staging_dir == Path("/tmp/aegis-setup/staging")
        assert config.config_file == Path("/etc/aegis-backup/config.yml")

    def test_unknown_subdir(self):
        with pytest.raises(KeyError):
            SetupConfig().subdir("secrets")


class TestRequiredSections:
    def test_backend_required(self):
        with pytest.raises(ValidationError, match="backend"):
            SetupConfig().require_backend()

    def test_provider_required(self):
        with pytest.raises(ValidationError, match="provider"):
            SetupConfig().require_provider()

    def test_incomplete_lists_every_problem(self):
        config = SetupConfig(backend=BorgBackend(), provider=S3CompatibleProvider())
        with pytest.raises(ValidationError) as exc:
            config.require_complete()
        message = str(exc.value)
        assert "repository" in message
        assert "bucket" in message
        assert "no backup jobs" in message
        assert "no schedule" in message
        assert "no retention" in message

    def test_complete(self, complete_config: SetupConfig):
        complete_config.require_complete()

    def test_duplicate_job_rejected(self):
        config = SetupConfig()
        config.add_job(JobConfig(name="web", sources=["/var/www"]))
        with pytest.raises(ValidationError, match="Duplicate"):
            config.add_job(JobConfig(name="web", sources=["/srv"]))


class TestBackends:
    def test_traditional_needs_passphrase_only_when_encrypting(self):
        assert TraditionalBackend(encrypt=False).missing_fields() == []
        assert TraditionalBackend(encrypt=True).missing_fields() == ["passphrase"]

    def test_compression_bounds(self):
        with pytest.raises(PydanticValidationError):
            TraditionalBackend(compression_level=10)

    def test_borg_without_encryption_needs_no_passphrase(self):
        backend = BorgBackend(repository="/backups/borg", encryption="none")
        assert backend.missing_fields() == []

    def test_restic_missing_fields(self):
        assert ResticBackend().missing_fields() == ["repository", "passphrase"]

    def test_secrets_not_serialized(self):
        backend = ResticBackend(repository="/backups/restic", passphrase="topsecret")
        dumped = backend.model_dump(mode="json")
        assert "passphrase" not in dumped
        assert "topsecret" not in repr(backend)


class TestJobs:
    def test_valid(self):
        job = JobConfig(name="db_dumps", sources=["/var/lib/dumps"])
        assert job.excludes == []

    def test_bad_name(self):
        with pytest.raises(PydanticValidationError, match="job name"):
            JobConfig(name="My Job", sources=["/etc"])

    def test_relative_source(self):
        with pytest.raises(PydanticValidationError, match="absolute"):
            JobConfig(name="home", sources=["home/user"])

    def test_needs_a_source(self):
        with pytest.raises(PydanticValidationError):
            JobConfig(name="home", sources=[])


class TestMonitoring:
    def test_nothing_enabled_by_default(self):
        assert not MonitoringConfig().any_enabled

    def test_email_needs_endpoints(self):
        with pytest.raises(PydanticValidationError, match="email"):
            MonitoringConfig(enable_email_alerts=True, alert_email="ops@example.com")

    def test_slack_needs_https_webhook(self):
        with pytest.raises(PydanticValidationError, match="https"):
            MonitoringConfig(enable_slack_alerts=True, slack_webhook="http://hooks.example.com")


class TestScheduleAndRetention:
    def test_default_schedule(self):
        assert SchedulingConfig().cron_schedule == "0 2 * * *"

    def test_invalid_schedule(self):
        with pytest.raises(PydanticValidationError):
            SchedulingConfig(cron_schedule="61 * * * *")

    def test_macro_schedule(self):
        assert SchedulingConfig(cron_schedule="@daily").cron_schedule == "@daily"

    def test_retention_total(self):
        assert RetentionConfig().total == 17

    def test_retention_must_keep_something(self):
        with pytest.raises(PydanticValidationError, match="at least one"):
            RetentionConfig(hourly=0, daily=0, weekly=0, monthly=0)

    def test_retention_non_negative(self):
        with pytest.raises(PydanticValidationError):
            RetentionConfig(daily=-1)


class TestResultModels:
    def test_receipt_factories(self):
        assert Receipt.success(command="true").ok
        assert Receipt.skip(command="curl", reason="present").skipped
        failed = Receipt.failure(command="false", error="boom", return_code=1)
        assert failed.failed
        assert failed.return_code == 1

    def test_step_result(self):
        ok = StepResult.success(3, "Check dependencies", 12)
        assert ok.ok and ok.index == 3
        failed = StepResult.failure(5, "Select backup backend", "PromptAborted", "cancelled")
        assert failed.failed
        assert failed.error_kind == "PromptAborted"

    def test_generated_file_path_must_be_absolute(self):
        with pytest.raises(PydanticValidationError):
            GeneratedFile(path="etc/cron.d/aegis", content="")

    def test_generated_file_secret(self):
        assert GeneratedFile(path="/x", content="", mode=0o600).secret
        assert not GeneratedFile(path="/x", content="", mode=0o644).secret

    def test_tool_install_target(self):
        assert ToolSpec(name="crontab", binary="crontab", package="cron").install_target == "cron"
