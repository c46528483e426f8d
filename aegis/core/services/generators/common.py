"""
Shared helpers for the shell-flavoured generators.
"""

from __future__ import annotations

import shlex

HEADER = "generated by `aegis setup`; re-run setup instead of editing by hand"

BACKUP_SCRIPT = "aegis-backup.sh"
NOTIFY_SCRIPT = "aegis-notify.sh"
CRON_FILE = "aegis-backup"

SCRIPT_MODE = 0o750
PRIVATE_SCRIPT_MODE = 0o700
SECRET_MODE = 0o600
PUBLIC_MODE = 0o644


def q(value: str) -> str:
    """Shell-quote ``value``."""
    return shlex.quote(value)


def env_file(values: dict[str, str]) -> str:
    """Render a ``KEY=value`` file that can be sourced by sh."""
    lines = [f"# {HEADER}"]
    lines.extend(f"{key}={q(value)}" for key, value in values.items())
    return "\n".join(lines) + "\n"
