"""
Cron expression validation.

Five-field expressions are checked with APScheduler's crontab parser.
The ``@`` macros understood by cron.d are expanded first; ``@reboot``
has no field form and is accepted as-is.
"""

from __future__ import annotations

from apscheduler.triggers.cron import CronTrigger

CRON_MACROS: dict[str, str] = {
    "@yearly": "0 0 1 1 *",
    "@annually": "0 0 1 1 *",
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@midnight": "0 0 * * *",
    "@hourly": "0 * * * *",
}

REBOOT_MACRO = "@reboot"


def expand_macro(expression: str) -> str:
    """Return the five-field form of a cron macro (or the input unchanged)."""
    return CRON_MACROS.get(expression.strip().lower(), expression.strip())


def _accept_sunday_seven(day_of_week: str) -> str:
    """Rewrite the Sunday alias 7 so the parser, which only knows 0-6, accepts it.

    Only syntax is checked, so 6 stands in for 7 in plain values and
    range bounds alike; step sizes are left alone.
    """
    parts = []
    for part in day_of_week.split(","):
        values, slash, step = part.partition("/")
        values = "-".join("6" if v == "7" else v for v in values.split("-"))
        parts.append(values + slash + step)
    return ",".join(parts)


def cron_error(expression: str) -> str | None:
    """Return a description of what is wrong with ``expression``, or None."""
    if not expression or not expression.strip():
        return "Cron expression is empty"

    normalized = expression.strip()
    if normalized.lower() == REBOOT_MACRO:
        return None
    if normalized.startswith("@") and normalized.lower() not in CRON_MACROS:
        return f"Unknown cron macro: {normalized}"

    fields = expand_macro(normalized).split()
    if len(fields) != 5:
        return f"Expected 5 cron fields, got {len(fields)}: {normalized!r}"

    fields[4] = _accept_sunday_seven(fields[4])

    try:
        CronTrigger.from_crontab(" ".join(fields), timezone="UTC")
    except ValueError as e:
        return f"Invalid cron expression {normalized!r}: {e}"
    return None


def is_valid_cron(expression: str) -> bool:
    return cron_error(expression) is None
