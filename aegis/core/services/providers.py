"""
Provider resolver — choose and configure the offsite storage destination.

Amazon S3, Wasabi, DigitalOcean Spaces and MinIO all speak the S3
protocol, so they share one handler and the same set of fields; only
the endpoint and region hints offered as defaults differ.
"""

from __future__ import annotations

import logging
from typing import Callable

from aegis.adapters.base import Prompter
from aegis.core.models.config import (
    B2Provider,
    FTPProvider,
    GCSProvider,
    ProviderType,
    S3_COMPATIBLE,
    S3CompatibleProvider,
    SetupConfig,
    SFTPProvider,
)
from aegis.core.services.variants import (
    ask_required,
    ask_secret,
    build_variant,
    check_exhaustive,
    dispatch,
    select_variant,
)

logger = logging.getLogger(__name__)

AnyProvider = S3CompatibleProvider | B2Provider | GCSProvider | FTPProvider | SFTPProvider

PROVIDER_CHOICES: dict[str, str] = {
    ProviderType.S3: "Amazon S3",
    ProviderType.B2: "Backblaze B2",
    ProviderType.GCS: "Google Cloud Storage",
    ProviderType.WASABI: "Wasabi",
    ProviderType.DIGITALOCEAN: "DigitalOcean Spaces",
    ProviderType.MINIO: "MinIO",
    ProviderType.FTP: "FTP/FTPS",
    ProviderType.SFTP: "SFTP",
}

# (endpoint, region) offered as defaults
S3_HINTS: dict[str, tuple[str, str]] = {
    ProviderType.S3: ("https://s3.amazonaws.com", "us-east-1"),
    ProviderType.WASABI: ("https://s3.wasabisys.com", "us-east-1"),
    ProviderType.DIGITALOCEAN: ("https://nyc3.digitaloceanspaces.com", "nyc3"),
    ProviderType.MINIO: ("http://localhost:9000", "us-east-1"),
}

_PROVIDER_MODELS: dict[str, Callable[[], AnyProvider]] = {
    ProviderType.S3: lambda: S3CompatibleProvider(type="s3"),
    ProviderType.B2: B2Provider,
    ProviderType.GCS: GCSProvider,
    ProviderType.WASABI: lambda: S3CompatibleProvider(type="wasabi"),
    ProviderType.DIGITALOCEAN: lambda: S3CompatibleProvider(type="digitalocean"),
    ProviderType.MINIO: lambda: S3CompatibleProvider(type="minio"),
    ProviderType.FTP: FTPProvider,
    ProviderType.SFTP: SFTPProvider,
}


def select_provider(config: SetupConfig, prompter: Prompter) -> AnyProvider:
    """Ask which storage provider to use and record the choice on ``config``."""
    key = select_variant(prompter, "Choose your cloud storage provider", PROVIDER_CHOICES)
    provider = _PROVIDER_MODELS[key]()
    config.provider = provider
    logger.info("Cloud provider: %s", key)
    return provider


def configure_provider(config: SetupConfig, prompter: Prompter) -> AnyProvider:
    """Collect the chosen provider's endpoint and credentials.

    Raises:
        ValidationError: No provider selected yet, or an answer is invalid.
    """
    selected = config.require_provider()
    handler = dispatch("provider", selected.type, _PROVIDER_HANDLERS)
    provider = handler(config, prompter, selected.type)
    config.provider = provider
    return provider


# ── Per-variant handlers ────────────────────────────────────────


def _configure_s3_compatible(
    config: SetupConfig, prompter: Prompter, key: str
) -> S3CompatibleProvider:
    endpoint_hint, region_hint = S3_HINTS[key]
    endpoint = ask_required(prompter, "Endpoint URL", default=endpoint_hint)
    region = ask_required(prompter, "Region", default=region_hint)
    bucket = ask_required(prompter, "Bucket name")
    prefix = prompter.text("Path prefix inside the bucket", default="aegis")
    access_key = ask_required(prompter, "Access key ID")
    secret_key = ask_secret(prompter, "Secret access key")
    return build_variant(
        S3CompatibleProvider,
        type=key,
        endpoint=endpoint,
        region=region,
        bucket=bucket,
        prefix=prefix.strip("/"),
        access_key=access_key,
        secret_key=secret_key,
    )


def _configure_b2(config: SetupConfig, prompter: Prompter, key: str) -> B2Provider:
    bucket = ask_required(prompter, "Bucket name")
    prefix = prompter.text("Path prefix inside the bucket", default="aegis")
    key_id = ask_required(prompter, "Application key ID")
    application_key = ask_secret(prompter, "Application key")
    return build_variant(
        B2Provider,
        bucket=bucket,
        prefix=prefix.strip("/"),
        key_id=key_id,
        application_key=application_key,
    )


def _configure_gcs(config: SetupConfig, prompter: Prompter, key: str) -> GCSProvider:
    project_id = ask_required(prompter, "Google Cloud project ID")
    bucket = ask_required(prompter, "Bucket name")
    prefix = prompter.text("Path prefix inside the bucket", default="aegis")
    key_file = ask_required(
        prompter,
        "Service account key file",
        default=f"{config.config_dir}/providers/gcs-service-account.json",
    )
    return build_variant(
        GCSProvider,
        project_id=project_id,
        bucket=bucket,
        prefix=prefix.strip("/"),
        service_account_key=key_file,
    )


def _configure_ftp(config: SetupConfig, prompter: Prompter, key: str) -> FTPProvider:
    host = ask_required(prompter, "FTP host")
    port = prompter.integer("FTP port", default=21, minimum=1, maximum=65535)
    username = ask_required(prompter, "FTP username")
    password = ask_secret(prompter, "FTP password")
    remote_dir = ask_required(prompter, "Remote directory", default="/backups")
    use_tls = prompter.confirm("Require TLS (FTPS)?", default=True)
    return build_variant(
        FTPProvider,
        host=host,
        port=port,
        username=username,
        password=password,
        remote_dir=remote_dir,
        use_tls=use_tls,
    )


def _configure_sftp(config: SetupConfig, prompter: Prompter, key: str) -> SFTPProvider:
    host = ask_required(prompter, "SFTP host")
    port = prompter.integer("SFTP port", default=22, minimum=1, maximum=65535)
    username = ask_required(prompter, "SFTP username")
    identity_file = ask_required(prompter, "SSH private key", default="/root/.ssh/id_ed25519")
    remote_dir = ask_required(prompter, "Remote directory", default="/backups")
    return build_variant(
        SFTPProvider,
        host=host,
        port=port,
        username=username,
        identity_file=identity_file,
        remote_dir=remote_dir,
    )


_PROVIDER_HANDLERS: dict[str, Callable[[SetupConfig, Prompter, str], AnyProvider]] = {
    ProviderType.S3: _configure_s3_compatible,
    ProviderType.B2: _configure_b2,
    ProviderType.GCS: _configure_gcs,
    ProviderType.WASABI: _configure_s3_compatible,
    ProviderType.DIGITALOCEAN: _configure_s3_compatible,
    ProviderType.MINIO: _configure_s3_compatible,
    ProviderType.FTP: _configure_ftp,
    ProviderType.SFTP: _configure_sftp,
}

check_exhaustive("provider", ProviderType, PROVIDER_CHOICES)
check_exhaustive("provider", ProviderType, _PROVIDER_MODELS)
check_exhaustive("provider", ProviderType, _PROVIDER_HANDLERS)
check_exhaustive("S3-compatible provider", S3_COMPATIBLE, S3_HINTS)
