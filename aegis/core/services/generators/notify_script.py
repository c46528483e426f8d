"""
Notify script generator — renders ``aegis-notify.sh``.

Called by the backup script as ``aegis-notify.sh <success|failure> <message>``.
Only the channels enabled in the monitoring section are rendered; with
nothing enabled the script just exits 0. Alerts (email, Slack) fire on
failure only; the Prometheus textfile is rewritten on every run.
"""

from __future__ import annotations

from pathlib import Path

from aegis.core.models.config import MonitoringConfig, SetupConfig
from aegis.core.models.template import GeneratedFile
from aegis.core.services.generators.common import (
    HEADER,
    NOTIFY_SCRIPT,
    PRIVATE_SCRIPT_MODE,
    q,
)

PROM_FILE = "aegis_backup.prom"


def _prometheus(config: SetupConfig) -> str:
    prom = Path(config.monitoring_dir) / PROM_FILE
    return f"""\
PROM_FILE={q(str(prom))}
ok=0
[ "$STATUS" = "success" ] && ok=1
cat > "$PROM_FILE.tmp" <<EOF
# HELP aegis_backup_success Whether the last backup run succeeded.
# TYPE aegis_backup_success gauge
aegis_backup_success $ok
# HELP aegis_backup_last_run_timestamp_seconds Unix time of the last backup run.
# TYPE aegis_backup_last_run_timestamp_seconds gauge
aegis_backup_last_run_timestamp_seconds $(date +%s)
EOF
mv "$PROM_FILE.tmp" "$PROM_FILE"
"""


def _email(monitoring: MonitoringConfig) -> str:
    server = f"smtp://{monitoring.smtp_server}:{monitoring.smtp_port}"
    return f"""\
if [ "$STATUS" = "failure" ]; then
    printf 'Subject: [aegis] backup failed on %s\\n\\n%s\\n' "$(hostname)" "$MESSAGE" \\
        | curl -sS --ssl-reqd --url {q(server)} \\
            --mail-from "aegis@$(hostname)" --mail-rcpt {q(monitoring.alert_email)} \\
            --upload-file - || true
fi
"""


def _slack(monitoring: MonitoringConfig) -> str:
    return f"""\
if [ "$STATUS" = "failure" ]; then
    jq -n --arg text ":x: aegis backup failed on $(hostname): $MESSAGE" '{{text: $text}}' \\
        | curl -sS -X POST -H 'Content-Type: application/json' --data @- \\
            {q(monitoring.slack_webhook)} >/dev/null || true
fi
"""


def render(config: SetupConfig) -> str:
    monitoring = config.monitoring or MonitoringConfig()

    sections = []
    if monitoring.enable_prometheus:
        sections.append(_prometheus(config))
    if monitoring.enable_email_alerts:
        sections.append(_email(monitoring))
    if monitoring.enable_slack_alerts:
        sections.append(_slack(monitoring))
    if not sections:
        sections.append("# No monitoring channels enabled.\n")

    body = "\n".join(sections)
    return f"""\
#!/usr/bin/env bash
# aegis-notify.sh: {HEADER}
set -uo pipefail

STATUS="$1"
MESSAGE="${{2:-}}"

{body}
exit 0
"""


def generate(config: SetupConfig) -> list[GeneratedFile]:
    # Owner-only: the Slack webhook URL is a credential.
    return [GeneratedFile(
        path=str(Path(config.backup_scripts_dir) / NOTIFY_SCRIPT),
        content=render(config),
        mode=PRIVATE_SCRIPT_MODE,
        reason="Publishes backup status to the enabled monitoring channels",
    )]
