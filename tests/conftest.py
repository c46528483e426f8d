"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from aegis.adapters.mock import MockPrompter, MockToolInstaller
from aegis.core.models.config import (
    JobConfig,
    MonitoringConfig,
    RetentionConfig,
    S3CompatibleProvider,
    SchedulingConfig,
    SetupConfig,
    TraditionalBackend,
)
from aegis.core.services.directories import provision_directories


@pytest.fixture
def host_root(tmp_path: Path) -> Path:
    """A fake host filesystem root with /etc/cron.d already present."""
    root = tmp_path / "host"
    (root / "etc" / "cron.d").mkdir(parents=True)
    return root


@pytest.fixture
def setup_config(host_root: Path) -> SetupConfig:
    """A config with every path relocated under ``host_root``."""
    return SetupConfig.with_root(host_root)


@pytest.fixture
def complete_config(setup_config: SetupConfig) -> SetupConfig:
    """A fully answered config on a provisioned host."""
    provision_directories(setup_config)
    setup_config.backend = TraditionalBackend(compression_level=9, encrypt=True, passphrase="hunter2")
    setup_config.provider = S3CompatibleProvider(
        type="s3",
        endpoint="https://s3.amazonaws.com",
        region="us-east-1",
        bucket="acme-backups",
        prefix="web01",
        access_key="AKIAEXAMPLE",
        secret_key="s3cr3t",
    )
    setup_config.add_job(JobConfig(name="system", sources=["/etc", "/root"], excludes=["*.tmp"]))
    setup_config.monitoring = MonitoringConfig(enable_prometheus=True)
    setup_config.scheduling = SchedulingConfig(cron_schedule="30 3 * * *")
    setup_config.retention = RetentionConfig()
    return setup_config


@pytest.fixture
def installer() -> MockToolInstaller:
    return MockToolInstaller()


@pytest.fixture
def wizard_answers() -> dict:
    """Answers for a full wizard run: traditional backend, Amazon S3 provider."""
    return {
        "Choose your backup backend": "Traditional (tar/gzip)",
        "Encrypt archives with OpenSSL?": False,
        "Choose your cloud storage provider": "Amazon S3",
        "Bucket name": "acme-backups",
        "Access key ID": "AKIAEXAMPLE",
        "Secret access key": "s3cr3t",
    }


@pytest.fixture
def wizard_prompter(wizard_answers: dict) -> MockPrompter:
    return MockPrompter(wizard_answers)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """``setup_logging`` replaces the root handlers; put them back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
