"""
Setup configuration — the desired end state of a provisioned host.

One ``SetupConfig`` is built incrementally by the setup pipeline:
paths are fixed at construction, the backend and provider are chosen
by their resolver steps, and the remaining sections are filled in by
the later prompts. Secrets live in ``SecretStr`` fields that are
excluded from serialization; they only ever reach disk through the
owner-only credential files written by the generator.
"""

from __future__ import annotations

import re
from enum import StrEnum
from pathlib import Path, PurePosixPath
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from aegis.core import errors
from aegis.core.services.cron import cron_error

# ── Defaults ────────────────────────────────────────────────────

DEFAULT_PATHS: dict[str, str] = {
    "config_dir": "/etc/aegis-backup",
    "log_dir": "/var/log/aegis-backup",
    "backup_scripts_dir": "/usr/local/bin/aegis",
    "cron_dir": "/etc/cron.d",
    "temp_dir": "/tmp/aegis-setup",
    "backup_root": "/backups",
    "monitoring_dir": "/var/lib/aegis-monitoring",
}

PATH_FIELDS: tuple[str, ...] = tuple(DEFAULT_PATHS)

CONFIG_SUBDIRS: tuple[str, ...] = ("providers", "backups", "encryption", "templates", "backends")

CONFIG_FILE = "config.yml"


def _secret() -> SecretStr:
    return SecretStr("")


def _is_absolute(path: str) -> bool:
    return bool(path) and PurePosixPath(path).is_absolute()


# ── Backends ────────────────────────────────────────────────────


class BackendType(StrEnum):
    TRADITIONAL = "traditional"
    BORG = "borg"
    RESTIC = "restic"


class TraditionalBackend(BaseModel):
    """Plain tar/gzip archives, optionally encrypted with openssl."""

    model_config = ConfigDict(frozen=True)

    type: Literal["traditional"] = "traditional"
    compression_level: int = Field(default=6, ge=1, le=9)
    encrypt: bool = False
    passphrase: SecretStr = Field(default_factory=_secret, exclude=True)

    def missing_fields(self) -> list[str]:
        if self.encrypt and not self.passphrase.get_secret_value():
            return ["passphrase"]
        return []


class BorgBackend(BaseModel):
    """BorgBackup deduplicating repository."""

    model_config = ConfigDict(frozen=True)

    type: Literal["borg"] = "borg"
    repository: str = ""
    encryption: Literal["repokey-blake2", "repokey", "keyfile-blake2", "none"] = "repokey-blake2"
    compression: str = "lz4"
    passphrase: SecretStr = Field(default_factory=_secret, exclude=True)

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.repository:
            missing.append("repository")
        if self.encryption != "none" and not self.passphrase.get_secret_value():
            missing.append("passphrase")
        return missing


class ResticBackend(BaseModel):
    """Restic encrypted deduplicating repository."""

    model_config = ConfigDict(frozen=True)

    type: Literal["restic"] = "restic"
    repository: str = ""
    passphrase: SecretStr = Field(default_factory=_secret, exclude=True)

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.repository:
            missing.append("repository")
        if not self.passphrase.get_secret_value():
            missing.append("passphrase")
        return missing


Backend = Annotated[
    Union[TraditionalBackend, BorgBackend, ResticBackend],
    Field(discriminator="type"),
]


# ── Providers ───────────────────────────────────────────────────


class ProviderType(StrEnum):
    S3 = "s3"
    B2 = "b2"
    GCS = "gcs"
    WASABI = "wasabi"
    DIGITALOCEAN = "digitalocean"
    MINIO = "minio"
    FTP = "ftp"
    SFTP = "sftp"


S3_COMPATIBLE: frozenset[ProviderType] = frozenset({
    ProviderType.S3,
    ProviderType.WASABI,
    ProviderType.DIGITALOCEAN,
    ProviderType.MINIO,
})


class S3CompatibleProvider(BaseModel):
    """Any storage speaking the S3 protocol (AWS, Wasabi, Spaces, MinIO)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["s3", "wasabi", "digitalocean", "minio"] = "s3"
    endpoint: str = ""
    region: str = ""
    bucket: str = ""
    prefix: str = ""
    access_key: str = ""
    secret_key: SecretStr = Field(default_factory=_secret, exclude=True)

    def missing_fields(self) -> list[str]:
        missing = [name for name in ("bucket", "access_key") if not getattr(self, name)]
        if not self.secret_key.get_secret_value():
            missing.append("secret_key")
        return missing


class B2Provider(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["b2"] = "b2"
    bucket: str = ""
    prefix: str = ""
    key_id: str = ""
    application_key: SecretStr = Field(default_factory=_secret, exclude=True)

    def missing_fields(self) -> list[str]:
        missing = [name for name in ("bucket", "key_id") if not getattr(self, name)]
        if not self.application_key.get_secret_value():
            missing.append("application_key")
        return missing


class GCSProvider(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["gcs"] = "gcs"
    project_id: str = ""
    bucket: str = ""
    prefix: str = ""
    service_account_key: str = ""

    @field_validator("service_account_key")
    @classmethod
    def _key_is_absolute(cls, v: str) -> str:
        if v and not _is_absolute(v):
            raise ValueError(f"service account key must be an absolute path: {v}")
        return v

    def missing_fields(self) -> list[str]:
        return [
            name for name in ("project_id", "bucket", "service_account_key")
            if not getattr(self, name)
        ]


class FTPProvider(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["ftp"] = "ftp"
    host: str = ""
    port: int = Field(default=21, ge=1, le=65535)
    username: str = ""
    password: SecretStr = Field(default_factory=_secret, exclude=True)
    remote_dir: str = "/backups"
    use_tls: bool = True

    def missing_fields(self) -> list[str]:
        missing = [name for name in ("host", "username") if not getattr(self, name)]
        if not self.password.get_secret_value():
            missing.append("password")
        return missing


class SFTPProvider(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["sftp"] = "sftp"
    host: str = ""
    port: int = Field(default=22, ge=1, le=65535)
    username: str = ""
    identity_file: str = "/root/.ssh/id_ed25519"
    remote_dir: str = "/backups"

    @field_validator("identity_file")
    @classmethod
    def _identity_is_absolute(cls, v: str) -> str:
        if v and not _is_absolute(v):
            raise ValueError(f"identity file must be an absolute path: {v}")
        return v

    def missing_fields(self) -> list[str]:
        return [name for name in ("host", "username", "identity_file") if not getattr(self, name)]


Provider = Annotated[
    Union[S3CompatibleProvider, B2Provider, GCSProvider, FTPProvider, SFTPProvider],
    Field(discriminator="type"),
]


# ── Jobs, monitoring, schedule, retention ───────────────────────

_JOB_NAME = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class JobConfig(BaseModel):
    """One backup job: a named set of source paths."""

    name: str
    sources: list[str] = Field(min_length=1)
    excludes: list[str] = Field(default_factory=list)
    description: str = ""

    @field_validator("name")
    @classmethod
    def _slug(cls, v: str) -> str:
        if not _JOB_NAME.match(v):
            raise ValueError(
                f"job name must be lowercase letters, digits, '-' or '_': {v!r}"
            )
        return v

    @field_validator("sources")
    @classmethod
    def _absolute_sources(cls, v: list[str]) -> list[str]:
        relative = [p for p in v if not _is_absolute(p)]
        if relative:
            raise ValueError(f"source paths must be absolute: {', '.join(relative)}")
        return v


class MonitoringConfig(BaseModel):
    enable_prometheus: bool = False
    enable_email_alerts: bool = False
    enable_slack_alerts: bool = False
    alert_email: str = ""
    smtp_server: str = ""
    smtp_port: int = Field(default=587, ge=1, le=65535)
    slack_webhook: str = ""

    @model_validator(mode="after")
    def _endpoints_for_enabled_channels(self) -> MonitoringConfig:
        if self.enable_email_alerts and not (self.alert_email and self.smtp_server):
            raise ValueError("email alerts need both alert_email and smtp_server")
        if self.enable_slack_alerts and not self.slack_webhook.startswith("https://"):
            raise ValueError("slack alerts need an https:// webhook URL")
        return self

    @property
    def any_enabled(self) -> bool:
        return self.enable_prometheus or self.enable_email_alerts or self.enable_slack_alerts


class SchedulingConfig(BaseModel):
    cron_schedule: str = "0 2 * * *"

    @field_validator("cron_schedule")
    @classmethod
    def _valid_cron(cls, v: str) -> str:
        problem = cron_error(v)
        if problem:
            raise ValueError(problem)
        return v.strip()


class RetentionConfig(BaseModel):
    """How many backups to keep per calendar bucket."""

    hourly: int = Field(default=0, ge=0)
    daily: int = Field(default=7, ge=0)
    weekly: int = Field(default=4, ge=0)
    monthly: int = Field(default=6, ge=0)

    @model_validator(mode="after")
    def _at_least_one_positive(self) -> RetentionConfig:
        if not any((self.hourly, self.daily, self.weekly, self.monthly)):
            raise ValueError("retention must keep at least one backup in some bucket")
        return self

    @property
    def total(self) -> int:
        return self.hourly + self.daily + self.weekly + self.monthly


# ── Root aggregate ──────────────────────────────────────────────


class SetupConfig(BaseModel):
    """The whole desired end state, owned by the setup pipeline."""

    model_config = ConfigDict(validate_assignment=True)

    config_dir: str = Field(default=DEFAULT_PATHS["config_dir"], frozen=True)
    log_dir: str = Field(default=DEFAULT_PATHS["log_dir"], frozen=True)
    backup_scripts_dir: str = Field(default=DEFAULT_PATHS["backup_scripts_dir"], frozen=True)
    cron_dir: str = Field(default=DEFAULT_PATHS["cron_dir"], frozen=True)
    temp_dir: str = Field(default=DEFAULT_PATHS["temp_dir"], frozen=True)
    backup_root: str = Field(default=DEFAULT_PATHS["backup_root"], frozen=True)
    monitoring_dir: str = Field(default=DEFAULT_PATHS["monitoring_dir"], frozen=True)

    backend: Backend | None = None
    provider: Provider | None = None
    jobs: list[JobConfig] = Field(default_factory=list)
    monitoring: MonitoringConfig | None = None
    scheduling: SchedulingConfig | None = None
    retention: RetentionConfig | None = None

    @field_validator(*PATH_FIELDS)
    @classmethod
    def _absolute_path(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("path must not be empty")
        if not _is_absolute(v):
            raise ValueError(f"path must be absolute: {v}")
        return v.rstrip("/") or "/"

    @classmethod
    def with_root(cls, root: Path | str | None = None, **overrides: str) -> SetupConfig:
        """Build a config whose default paths are relocated under ``root``.

        Explicit ``overrides`` win over the relocated defaults.
        """
        paths = dict(DEFAULT_PATHS)
        if root is not None:
            base = Path(root)
            paths = {key: str(base / value.lstrip("/")) for key, value in paths.items()}
        paths.update({k: v for k, v in overrides.items() if v})
        return cls(**paths)

    # ── Derived locations ───────────────────────────────────────

    def paths(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in PATH_FIELDS}

    def subdir(self, name: str) -> Path:
        """One of the named subdirectories of the config dir."""
        if name not in CONFIG_SUBDIRS:
            raise KeyError(name)
        return Path(self.config_dir) / name

    @property
    def encryption_dir(self) -> Path:
        return self.subdir("encryption")

    @property
    def staging_dir(self) -> Path:
        return Path(self.temp_dir) / "staging"

    @property
    def config_file(self) -> Path:
        return Path(self.config_dir) / CONFIG_FILE

    # ── Required-field access ───────────────────────────────────

    def require_backend(self) -> TraditionalBackend | BorgBackend | ResticBackend:
        if self.backend is None:
            raise errors.ValidationError("No backup backend selected")
        return self.backend

    def require_provider(
        self,
    ) -> S3CompatibleProvider | B2Provider | GCSProvider | FTPProvider | SFTPProvider:
        if self.provider is None:
            raise errors.ValidationError("No cloud provider selected")
        return self.provider

    def require_complete(self) -> None:
        """Raise ValidationError unless every section needed to generate is set."""
        backend = self.require_backend()
        provider = self.require_provider()
        problems = []
        if backend.missing_fields():
            problems.append(f"backend {backend.type}: missing {', '.join(backend.missing_fields())}")
        if provider.missing_fields():
            problems.append(f"provider {provider.type}: missing {', '.join(provider.missing_fields())}")
        if not self.jobs:
            problems.append("no backup jobs configured")
        if self.scheduling is None:
            problems.append("no schedule configured")
        if self.retention is None:
            problems.append("no retention policy configured")
        if problems:
            raise errors.ValidationError("Incomplete configuration: " + "; ".join(problems))

    def add_job(self, job: JobConfig) -> None:
        if any(existing.name == job.name for existing in self.jobs):
            raise errors.ValidationError(f"Duplicate job name: {job.name}")
        self.jobs.append(job)
