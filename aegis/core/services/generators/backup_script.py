"""
Backup script generator — renders ``aegis-backup.sh``.

The script runs every job through the chosen backend, prunes each job
according to the retention policy, mirrors the local store to the
provider and finally calls the notify script with the outcome. It is
assembled from per-backend and per-provider bash fragments so that the
output depends on nothing but the configuration.

Script layout:
    header, paths, lock
    source backends/<type>.env and providers/<type>.env
    ensure_repo / backup_job / prune_job     (backend fragment)
    sync_offsite                             (provider fragment)
    one run_job line per job, then notify
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Callable

from aegis.core.models.config import (
    B2Provider,
    BackendType,
    BorgBackend,
    FTPProvider,
    GCSProvider,
    ProviderType,
    ResticBackend,
    RetentionConfig,
    S3_COMPATIBLE,
    S3CompatibleProvider,
    SetupConfig,
    SFTPProvider,
    TraditionalBackend,
)
from aegis.core.models.template import GeneratedFile
from aegis.core.services.generators.common import (
    BACKUP_SCRIPT,
    HEADER,
    NOTIFY_SCRIPT,
    SCRIPT_MODE,
    q,
)
from aegis.core.services.generators.settings import (
    backend_env_path,
    exclude_path,
    local_store,
    passphrase_path,
    provider_env_path,
)
from aegis.core.services.variants import check_exhaustive


# ── Backend fragments ───────────────────────────────────────────


def _keep_flags(retention: RetentionConfig) -> str:
    """``--keep-*`` flags shared by borg prune and restic forget."""
    buckets = (
        ("hourly", retention.hourly),
        ("daily", retention.daily),
        ("weekly", retention.weekly),
        ("monthly", retention.monthly),
    )
    return " ".join(f"--keep-{name} {count}" for name, count in buckets if count > 0)


def _traditional(config: SetupConfig) -> str:
    backend = config.backend
    assert isinstance(backend, TraditionalBackend)
    assert config.retention is not None

    encrypt = ""
    suffix = ".tar.gz"
    if backend.encrypt:
        suffix = ".tar.gz.enc"
        encrypt = f"""\
    openssl enc -aes-256-cbc -pbkdf2 -salt \\
        -pass file:{q(str(passphrase_path(config)))} \\
        -in "$archive" -out "$archive.enc" || return 1
    rm -f "$archive"
"""

    return f"""\
ensure_repo() {{
    mkdir -p "$ARCHIVE_DIR"
}}

backup_job() {{
    local name="$1" excludes="$2"
    shift 2
    local archive="$ARCHIVE_DIR/$name@$(date -u +%Y%m%dT%H%M%SZ).tar.gz"
    tar --exclude-from="$excludes" -cf - "$@" | gzip -{backend.compression_level} -n > "$archive" || return 1
{encrypt}}}

prune_job() {{
    # Keep the newest {config.retention.total} archives of this job; job names never contain "@".
    ls -1t "$ARCHIVE_DIR/$1"@*{suffix} 2>/dev/null \\
        | tail -n +{config.retention.total + 1} \\
        | xargs -r rm -f --
}}
"""


def _borg(config: SetupConfig) -> str:
    backend = config.backend
    assert isinstance(backend, BorgBackend)
    assert config.retention is not None

    return f"""\
ensure_repo() {{
    borg info >/dev/null 2>&1 || borg init --encryption={backend.encryption}
}}

backup_job() {{
    local name="$1" excludes="$2"
    shift 2
    borg create --compression {q(backend.compression)} --exclude-from "$excludes" \\
        "::$name@{{now:%Y-%m-%dT%H:%M:%S}}" "$@"
}}

prune_job() {{
    borg prune --glob-archives "$1@*" {_keep_flags(config.retention)}
}}
"""


def _restic(config: SetupConfig) -> str:
    assert isinstance(config.backend, ResticBackend)
    assert config.retention is not None

    return f"""\
ensure_repo() {{
    restic snapshots >/dev/null 2>&1 || restic init
}}

backup_job() {{
    local name="$1" excludes="$2"
    shift 2
    restic backup --tag "$name" --exclude-file "$excludes" "$@"
}}

prune_job() {{
    restic forget --tag "$1" --prune {_keep_flags(config.retention)}
}}
"""


BACKEND_FRAGMENTS: dict[str, Callable[[SetupConfig], str]] = {
    BackendType.TRADITIONAL: _traditional,
    BackendType.BORG: _borg,
    BackendType.RESTIC: _restic,
}


# ── Provider fragments ──────────────────────────────────────────


def _remote_path(bucket: str, prefix: str) -> str:
    prefix = prefix.strip("/")
    return f"{bucket}/{prefix}" if prefix else bucket


def _s3(config: SetupConfig) -> str:
    provider = config.provider
    assert isinstance(provider, S3CompatibleProvider)

    target = f"s3://{_remote_path(provider.bucket, provider.prefix)}"
    endpoint = f" \\\n        --endpoint-url {q(provider.endpoint)}" if provider.endpoint else ""
    return f"""\
sync_offsite() {{
    aws s3 sync "$SYNC_SOURCE" {q(target)} --only-show-errors{endpoint}
}}
"""


def _b2(config: SetupConfig) -> str:
    provider = config.provider
    assert isinstance(provider, B2Provider)

    target = f"b2://{_remote_path(provider.bucket, provider.prefix)}"
    return f"""\
sync_offsite() {{
    backblaze-b2 sync --noProgress "$SYNC_SOURCE" {q(target)}
}}
"""


def _gcs(config: SetupConfig) -> str:
    provider = config.provider
    assert isinstance(provider, GCSProvider)

    target = f"gs://{_remote_path(provider.bucket, provider.prefix)}"
    credentials = f"Credentials:gs_service_key_file={provider.service_account_key}"
    return f"""\
sync_offsite() {{
    gsutil -o {q(credentials)} -m rsync -r "$SYNC_SOURCE" {q(target)}
}}
"""


def _mirror(config: SetupConfig, remote_dir: str) -> str:
    return f"mirror --reverse --only-newer {shlex.quote(str(local_store(config)))} {shlex.quote(remote_dir)}"


def _ftp(config: SetupConfig) -> str:
    provider = config.provider
    assert isinstance(provider, FTPProvider)

    commands = []
    if provider.use_tls:
        commands += ["set ftp:ssl-force true", "set ftp:ssl-protect-data true"]
    commands += [_mirror(config, provider.remote_dir), "quit"]
    script = "; ".join(commands)
    return f"""\
sync_offsite() {{
    lftp -p {provider.port} --env-password -u "$FTP_USER" \\
        -e {q(script)} {q(provider.host)}
}}
"""


def _sftp(config: SetupConfig) -> str:
    provider = config.provider
    assert isinstance(provider, SFTPProvider)

    connect = f"ssh -a -x -i {shlex.quote(provider.identity_file)}"
    commands = [
        f'set sftp:connect-program "{connect}"',
        _mirror(config, provider.remote_dir),
        "quit",
    ]
    script = "; ".join(commands)
    url = f"sftp://{provider.host}"
    return f"""\
sync_offsite() {{
    lftp -p {provider.port} -u "$SFTP_USER," \\
        -e {q(script)} {q(url)}
}}
"""


PROVIDER_FRAGMENTS: dict[str, Callable[[SetupConfig], str]] = {
    **{kind: _s3 for kind in S3_COMPATIBLE},
    ProviderType.B2: _b2,
    ProviderType.GCS: _gcs,
    ProviderType.FTP: _ftp,
    ProviderType.SFTP: _sftp,
}

check_exhaustive("backend script", BackendType, BACKEND_FRAGMENTS)
check_exhaustive("provider script", ProviderType, PROVIDER_FRAGMENTS)


# ── Script ──────────────────────────────────────────────────────


def _job_lines(config: SetupConfig) -> str:
    lines = []
    for job in config.jobs:
        args = [job.name, str(exclude_path(config, job.name)), *job.sources]
        lines.append("run_job " + " ".join(q(a) for a in args))
    return "\n".join(lines)


def render(config: SetupConfig) -> str:
    backend = config.require_backend()
    provider = config.require_provider()
    scripts_dir = Path(config.backup_scripts_dir)

    return f"""\
#!/usr/bin/env bash
# aegis-backup.sh: {HEADER}
# backend: {backend.type}, provider: {provider.type}
set -uo pipefail

BACKUP_ROOT={q(config.backup_root)}
LOG_DIR={q(config.log_dir)}
NOTIFY={q(str(scripts_dir / NOTIFY_SCRIPT))}
SYNC_SOURCE={q(str(local_store(config)))}
LOCK_FILE="$BACKUP_ROOT/.aegis.lock"

log() {{
    printf '%s [%s] %s\\n' "$(date -u +%Y-%m-%dT%H:%M:%SZ)" "$1" "$2" >> "$LOG_DIR/backup.log"
}}

exec 9>"$LOCK_FILE"
if ! flock -n 9; then
    log ERROR "another backup run holds $LOCK_FILE"
    exit 1
fi

set -a
. {q(str(backend_env_path(config)))}
. {q(str(provider_env_path(config)))}
set +a

{BACKEND_FRAGMENTS[backend.type](config)}
{PROVIDER_FRAGMENTS[provider.type](config)}
status=0
failed=""

run_job() {{
    local name="$1"
    log INFO "job $name: starting"
    if backup_job "$@" && prune_job "$name"; then
        log INFO "job $name: done"
    else
        log ERROR "job $name: failed"
        status=1
        failed="$failed $name"
    fi
}}

if ! ensure_repo; then
    log ERROR "backup repository is not available"
    "$NOTIFY" failure "backup repository is not available"
    exit 1
fi

{_job_lines(config)}

if ! sync_offsite; then
    log ERROR "offsite sync failed"
    status=1
    failed="$failed offsite-sync"
fi

if [ "$status" -eq 0 ]; then
    log INFO "backup run succeeded"
    "$NOTIFY" success "all jobs completed"
else
    log ERROR "backup run failed:$failed"
    "$NOTIFY" failure "failed:$failed"
fi
exit "$status"
"""


def generate(config: SetupConfig) -> list[GeneratedFile]:
    return [GeneratedFile(
        path=str(Path(config.backup_scripts_dir) / BACKUP_SCRIPT),
        content=render(config),
        mode=SCRIPT_MODE,
        reason="Runs every backup job, prunes, syncs offsite and notifies",
    )]
