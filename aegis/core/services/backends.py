"""
Backend resolver — choose and configure the backup mechanism.
"""

from __future__ import annotations

import logging
from typing import Callable

from aegis.adapters.base import Prompter
from aegis.core.models.config import (
    BackendType,
    BorgBackend,
    ResticBackend,
    SetupConfig,
    TraditionalBackend,
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

AnyBackend = TraditionalBackend | BorgBackend | ResticBackend

BACKEND_CHOICES: dict[str, str] = {
    BackendType.TRADITIONAL: "Traditional (tar/gzip)",
    BackendType.BORG: "BorgBackup (Deduplicating)",
    BackendType.RESTIC: "Restic (Encrypted Deduplication)",
}

BORG_ENCRYPTION_MODES: list[str] = ["repokey-blake2", "repokey", "keyfile-blake2", "none"]

_BACKEND_MODELS: dict[str, type[AnyBackend]] = {
    BackendType.TRADITIONAL: TraditionalBackend,
    BackendType.BORG: BorgBackend,
    BackendType.RESTIC: ResticBackend,
}


def select_backend(config: SetupConfig, prompter: Prompter) -> AnyBackend:
    """Ask which backend to use and record the choice on ``config``."""
    key = select_variant(prompter, "Choose your backup backend", BACKEND_CHOICES)
    backend = _BACKEND_MODELS[key]()
    config.backend = backend
    logger.info("Backup backend: %s", key)
    return backend


def configure_backend(config: SetupConfig, prompter: Prompter) -> AnyBackend:
    """Collect the chosen backend's settings.

    Raises:
        ValidationError: No backend selected yet, or an answer is invalid.
    """
    selected = config.require_backend()
    handler = dispatch("backend", selected.type, _BACKEND_HANDLERS)
    backend = handler(config, prompter)
    config.backend = backend
    return backend


# ── Per-variant handlers ────────────────────────────────────────


def _configure_traditional(config: SetupConfig, prompter: Prompter) -> TraditionalBackend:
    level = prompter.integer("Gzip compression level (1-9)", default=6, minimum=1, maximum=9)
    encrypt = prompter.confirm("Encrypt archives with OpenSSL?", default=True)
    passphrase = ask_secret(prompter, "Archive passphrase") if encrypt else ""
    return build_variant(
        TraditionalBackend,
        compression_level=level,
        encrypt=encrypt,
        passphrase=passphrase,
    )


def _configure_borg(config: SetupConfig, prompter: Prompter) -> BorgBackend:
    repository = ask_required(
        prompter, "Borg repository path", default=f"{config.backup_root}/borg"
    )
    encryption = prompter.select("Borg encryption mode", BORG_ENCRYPTION_MODES)
    compression = prompter.text("Borg compression", default="lz4")
    passphrase = ask_secret(prompter, "Borg passphrase") if encryption != "none" else ""
    return build_variant(
        BorgBackend,
        repository=repository,
        encryption=encryption,
        compression=compression or "lz4",
        passphrase=passphrase,
    )


def _configure_restic(config: SetupConfig, prompter: Prompter) -> ResticBackend:
    repository = ask_required(
        prompter, "Restic repository path", default=f"{config.backup_root}/restic"
    )
    passphrase = ask_secret(prompter, "Restic repository password")
    return build_variant(ResticBackend, repository=repository, passphrase=passphrase)


_BACKEND_HANDLERS: dict[str, Callable[[SetupConfig, Prompter], AnyBackend]] = {
    BackendType.TRADITIONAL: _configure_traditional,
    BackendType.BORG: _configure_borg,
    BackendType.RESTIC: _configure_restic,
}

check_exhaustive("backend", BackendType, BACKEND_CHOICES)
check_exhaustive("backend", BackendType, _BACKEND_MODELS)
check_exhaustive("backend", BackendType, _BACKEND_HANDLERS)
