"""
Process executor — run an external command to completion.

Single attempt, synchronous wait, no timeout. Exit code 0 is success,
anything else (including failing to start) is a failed Receipt.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time
from pathlib import Path

from aegis.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class ProcessExecutor:
    """Thin wrapper over ``subprocess.run``."""

    def which(self, binary: str) -> str | None:
        """Path lookup for ``binary`` (None when absent)."""
        return shutil.which(binary)

    def run(self, cmd: list[str], cwd: Path | str | None = None) -> Receipt:
        """Run ``cmd``, discarding its standard output."""
        return self._execute(cmd, cwd=cwd, capture=False)

    def run_output(self, cmd: list[str], cwd: Path | str | None = None) -> Receipt:
        """Run ``cmd`` and return its stdout with trailing whitespace trimmed."""
        return self._execute(cmd, cwd=cwd, capture=True)

    def _execute(self, cmd: list[str], cwd: Path | str | None, capture: bool) -> Receipt:
        command = shlex.join(cmd)
        logger.debug("Executing: %s (cwd=%s)", command, cwd or ".")
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            return Receipt.failure(
                command=command,
                error=f"Could not start command: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                command=command,
                output=(result.stdout or "").rstrip() if capture else "",
                return_code=0,
                duration_ms=elapsed_ms,
            )

        return Receipt.failure(
            command=command,
            error=stderr or f"Command exited with code {result.returncode}",
            return_code=result.returncode,
            duration_ms=elapsed_ms,
        )
