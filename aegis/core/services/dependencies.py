"""
Dependency installer — make sure every tool the generated scripts call exists.

Base tools are always required. Backend and provider tools are only
required once the corresponding variant has been chosen. Installation
is idempotent (present tools are skipped) and fail-stop: the first
failed install raises ``CommandFailed`` because later steps assume the
tools are there without checking again.
"""

from __future__ import annotations

import logging

from aegis.adapters.base import ToolInstaller
from aegis.core.errors import CommandFailed
from aegis.core.models.config import BackendType, ProviderType, SetupConfig
from aegis.core.models.receipt import Receipt
from aegis.core.models.tool import ToolSpec
from aegis.core.services.variants import check_exhaustive

logger = logging.getLogger(__name__)

BASE_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(name="curl", binary="curl", package="curl"),
    ToolSpec(name="tar", binary="tar", package="tar"),
    ToolSpec(name="gzip", binary="gzip", package="gzip"),
    ToolSpec(name="openssl", binary="openssl", package="openssl"),
    ToolSpec(name="jq", binary="jq", package="jq"),
    ToolSpec(name="crontab", binary="crontab", package="cron"),
    ToolSpec(name="parallel", binary="parallel", package="parallel"),
)

_AWS = ToolSpec(name="aws", binary="aws", package="awscli")
_LFTP = ToolSpec(name="lftp", binary="lftp", package="lftp")

BACKEND_TOOLS: dict[str, tuple[ToolSpec, ...]] = {
    BackendType.TRADITIONAL: (),
    BackendType.BORG: (ToolSpec(name="borg", binary="borg", package="borgbackup"),),
    BackendType.RESTIC: (ToolSpec(name="restic", binary="restic", method="restic"),),
}

PROVIDER_TOOLS: dict[str, tuple[ToolSpec, ...]] = {
    ProviderType.S3: (_AWS,),
    ProviderType.WASABI: (_AWS,),
    ProviderType.DIGITALOCEAN: (_AWS,),
    ProviderType.MINIO: (_AWS,),
    ProviderType.B2: (ToolSpec(name="b2", binary="backblaze-b2", package="backblaze-b2"),),
    ProviderType.GCS: (ToolSpec(name="gsutil", binary="gsutil", package="google-cloud-cli"),),
    ProviderType.FTP: (_LFTP,),
    ProviderType.SFTP: (_LFTP,),
}

check_exhaustive("backend tools", BackendType, BACKEND_TOOLS)
check_exhaustive("provider tools", ProviderType, PROVIDER_TOOLS)


def backend_tools(config: SetupConfig) -> list[ToolSpec]:
    return list(BACKEND_TOOLS[config.backend.type]) if config.backend else []


def provider_tools(config: SetupConfig) -> list[ToolSpec]:
    return list(PROVIDER_TOOLS[config.provider.type]) if config.provider else []


def required_tools(config: SetupConfig) -> list[ToolSpec]:
    """Every tool needed for the choices made so far, without duplicates."""
    tools: list[ToolSpec] = []
    seen: set[str] = set()
    for tool in (*BASE_TOOLS, *backend_tools(config), *provider_tools(config)):
        if tool.name not in seen:
            seen.add(tool.name)
            tools.append(tool)
    return tools


def ensure_tools(tools: list[ToolSpec] | tuple[ToolSpec, ...], installer: ToolInstaller) -> list[Receipt]:
    """Install whichever of ``tools`` are missing.

    Returns:
        One receipt per tool (``skipped`` for tools already present).

    Raises:
        CommandFailed: An install failed; nothing after it was attempted.
    """
    receipts: list[Receipt] = []
    for tool in tools:
        receipt = installer.ensure_installed(tool)
        receipts.append(receipt)

        if receipt.failed:
            stage = receipt.metadata.get("stage", "install")
            raise CommandFailed(
                f"Failed to install {tool.name} ({stage}): {receipt.error}",
                command=receipt.command,
                stage=stage,
            )
        if receipt.ok:
            logger.info("Installed %s", tool.name)
        else:
            logger.debug("%s already present", tool.name)

    return receipts
