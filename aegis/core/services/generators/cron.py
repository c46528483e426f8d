"""
Cron entry generator — a cron.d file that runs the backup script.
"""

from __future__ import annotations

from pathlib import Path

from aegis.core.models.config import SetupConfig
from aegis.core.models.template import GeneratedFile
from aegis.core.services.generators.common import (
    BACKUP_SCRIPT,
    CRON_FILE,
    HEADER,
    PUBLIC_MODE,
    q,
)

CRON_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"


def cron_line(config: SetupConfig) -> str:
    assert config.scheduling is not None
    script = Path(config.backup_scripts_dir) / BACKUP_SCRIPT
    log_file = Path(config.log_dir) / "cron.log"
    return f"{config.scheduling.cron_schedule} root {q(str(script))} >> {q(str(log_file))} 2>&1"


def generate(config: SetupConfig) -> list[GeneratedFile]:
    content = f"""\
# aegis-backup: {HEADER}
SHELL=/bin/bash
PATH={CRON_PATH}

{cron_line(config)}
"""
    return [
        GeneratedFile(
            path=str(Path(config.cron_dir) / CRON_FILE),
            content=content,
            mode=PUBLIC_MODE,
            reason="Runs the backup script on the configured schedule",
        )
    ]
