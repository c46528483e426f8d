"""
Settings generator — the files the backup script sources at runtime.

Secrets (passphrases, provider keys) only ever land in files under the
config dir with owner-only mode; the scripts reference them by path.
"""

from __future__ import annotations

from pathlib import Path

from aegis.core.models.config import (
    B2Provider,
    BorgBackend,
    FTPProvider,
    GCSProvider,
    ResticBackend,
    S3CompatibleProvider,
    SetupConfig,
    SFTPProvider,
    TraditionalBackend,
)
from aegis.core.models.template import GeneratedFile
from aegis.core.services.generators.common import (
    HEADER,
    PUBLIC_MODE,
    SECRET_MODE,
    env_file,
    q,
)


def passphrase_path(config: SetupConfig) -> Path:
    backend = config.require_backend()
    return config.encryption_dir / f"{backend.type}.pass"


def backend_env_path(config: SetupConfig) -> Path:
    backend = config.require_backend()
    return config.subdir("backends") / f"{backend.type}.env"


def provider_env_path(config: SetupConfig) -> Path:
    provider = config.require_provider()
    return config.subdir("providers") / f"{provider.type}.env"


def exclude_path(config: SetupConfig, job_name: str) -> Path:
    return config.subdir("backups") / f"{job_name}.exclude"


def local_store(config: SetupConfig) -> Path:
    """Where backups land on this host before the offsite sync."""
    backend = config.require_backend()
    if isinstance(backend, (BorgBackend, ResticBackend)):
        return Path(backend.repository)
    return Path(config.backup_root) / "archives"


def _backend_env(config: SetupConfig) -> dict[str, str]:
    backend = config.require_backend()
    secret = str(passphrase_path(config))

    if isinstance(backend, BorgBackend):
        values = {"BORG_REPO": backend.repository}
        if backend.encryption != "none":
            values["BORG_PASSCOMMAND"] = f"cat {q(secret)}"
        return values
    if isinstance(backend, ResticBackend):
        return {"RESTIC_REPOSITORY": backend.repository, "RESTIC_PASSWORD_FILE": secret}
    if isinstance(backend, TraditionalBackend):
        return {"ARCHIVE_DIR": str(local_store(config))}
    raise AssertionError(f"unhandled backend {backend!r}")


def _provider_env(config: SetupConfig) -> dict[str, str]:
    provider = config.require_provider()

    if isinstance(provider, S3CompatibleProvider):
        return {
            "AWS_ACCESS_KEY_ID": provider.access_key,
            "AWS_SECRET_ACCESS_KEY": provider.secret_key.get_secret_value(),
            "AWS_DEFAULT_REGION": provider.region,
        }
    if isinstance(provider, B2Provider):
        return {
            "B2_APPLICATION_KEY_ID": provider.key_id,
            "B2_APPLICATION_KEY": provider.application_key.get_secret_value(),
        }
    if isinstance(provider, GCSProvider):
        return {
            "CLOUDSDK_CORE_PROJECT": provider.project_id,
            "GOOGLE_APPLICATION_CREDENTIALS": provider.service_account_key,
        }
    if isinstance(provider, FTPProvider):
        return {
            "FTP_USER": provider.username,
            "LFTP_PASSWORD": provider.password.get_secret_value(),
        }
    if isinstance(provider, SFTPProvider):
        return {"SFTP_USER": provider.username, "SFTP_IDENTITY": provider.identity_file}
    raise AssertionError(f"unhandled provider {provider!r}")


def _passphrase(config: SetupConfig) -> str:
    backend = config.require_backend()
    return backend.passphrase.get_secret_value()


def generate(config: SetupConfig) -> list[GeneratedFile]:
    files: list[GeneratedFile] = []

    for job in config.jobs:
        body = "".join(f"{pattern}\n" for pattern in job.excludes)
        files.append(GeneratedFile(
            path=str(exclude_path(config, job.name)),
            content=f"# {HEADER}\n{body}",
            mode=PUBLIC_MODE,
            reason=f"Exclude patterns for job '{job.name}'",
        ))

    files.append(GeneratedFile(
        path=str(backend_env_path(config)),
        content=env_file(_backend_env(config)),
        mode=SECRET_MODE,
        reason="Backend environment",
    ))

    passphrase = _passphrase(config)
    if passphrase:
        files.append(GeneratedFile(
            path=str(passphrase_path(config)),
            content=passphrase,
            mode=SECRET_MODE,
            reason="Encryption passphrase",
        ))

    files.append(GeneratedFile(
        path=str(provider_env_path(config)),
        content=env_file(_provider_env(config)),
        mode=SECRET_MODE,
        reason="Provider credentials",
    ))

    return files
