"""
Receipt model — the result of running one external command.

The process executor never raises on a failing command: it returns
a Receipt, and the caller decides whether the failure is fatal.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Receipt(BaseModel):
    """Outcome of a single command or install attempt."""

    command: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    output: str = ""
    error: str | None = None
    return_code: int | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, command: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(command=command, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, command: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(command=command, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, command: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt (nothing needed doing)."""
        return cls(command=command, status="skipped", output=reason, **kwargs)
