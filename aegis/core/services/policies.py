"""
Backup policy prompts — jobs, monitoring, schedule and retention.

These are the plain (non-variant) configuration steps that run after
the backend and provider are settled. Each one asks its questions,
validates the answers through the pydantic model and stores the result
on the shared config.
"""

from __future__ import annotations

import logging

from aegis.adapters.base import Prompter
from aegis.core.models.config import (
    JobConfig,
    MonitoringConfig,
    RetentionConfig,
    SchedulingConfig,
    SetupConfig,
)
from aegis.core.services.variants import ask_required, build_variant

logger = logging.getLogger(__name__)

DEFAULT_JOB = "system"
DEFAULT_SOURCES = "/etc /home /root"
DEFAULT_EXCLUDES = "*.tmp *.cache"


def _words(answer: str) -> list[str]:
    return answer.split()


# ── Sources ─────────────────────────────────────────────────────


def configure_sources(config: SetupConfig, prompter: Prompter) -> list[JobConfig]:
    """Ask for one or more backup jobs.

    Raises:
        ValidationError: Bad job name, relative path or duplicate name.
    """
    config.jobs = []

    while True:
        first = not config.jobs
        name = ask_required(
            prompter,
            "Backup job name",
            default=DEFAULT_JOB if first else f"job-{len(config.jobs) + 1}",
        )
        sources = ask_required(
            prompter,
            "Paths to back up (space-separated)",
            default=DEFAULT_SOURCES if first else None,
        )
        excludes = prompter.text(
            "Exclude patterns (space-separated)",
            default=DEFAULT_EXCLUDES,
        )
        description = prompter.text("Job description", default="")

        job = build_variant(
            JobConfig,
            name=name,
            sources=_words(sources),
            excludes=_words(excludes),
            description=description,
        )
        config.add_job(job)
        logger.info("Backup job '%s': %d paths", job.name, len(job.sources))

        if not prompter.confirm("Add another backup job?", default=False):
            break

    return config.jobs


# ── Monitoring ──────────────────────────────────────────────────


def configure_monitoring(config: SetupConfig, prompter: Prompter) -> MonitoringConfig:
    fields: dict = {
        "enable_prometheus": prompter.confirm("Enable Prometheus textfile metrics?", default=True),
    }

    if prompter.confirm("Enable email alerts on failure?", default=False):
        fields["enable_email_alerts"] = True
        fields["alert_email"] = ask_required(prompter, "Alert email address")
        fields["smtp_server"] = ask_required(prompter, "SMTP server")
        fields["smtp_port"] = prompter.integer("SMTP port", default=587, minimum=1, maximum=65535)

    if prompter.confirm("Enable Slack alerts on failure?", default=False):
        fields["enable_slack_alerts"] = True
        fields["slack_webhook"] = prompter.text("Slack webhook URL", secret=True)

    monitoring = build_variant(MonitoringConfig, **fields)
    config.monitoring = monitoring
    return monitoring


# ── Schedule & retention ────────────────────────────────────────


def configure_schedule(config: SetupConfig, prompter: Prompter) -> tuple[SchedulingConfig, RetentionConfig]:
    """Ask when backups run and how many are kept."""
    defaults = RetentionConfig()

    scheduling = build_variant(
        SchedulingConfig,
        cron_schedule=prompter.text(
            "Backup schedule (cron expression)",
            default=SchedulingConfig().cron_schedule,
        ),
    )
    retention = build_variant(
        RetentionConfig,
        hourly=prompter.integer("Hourly backups to keep", default=defaults.hourly),
        daily=prompter.integer("Daily backups to keep", default=defaults.daily),
        weekly=prompter.integer("Weekly backups to keep", default=defaults.weekly),
        monthly=prompter.integer("Monthly backups to keep", default=defaults.monthly),
    )

    config.scheduling = scheduling
    config.retention = retention
    logger.info("Schedule '%s', keeping %d backups", scheduling.cron_schedule, retention.total)
    return scheduling, retention
