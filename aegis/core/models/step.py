"""
Step result model — what one pipeline step reports back.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class StepResult(BaseModel):
    """Outcome of executing one named step.

    ``index`` is 1-based, matching the ``[i/N]`` progress lines.
    """

    index: int
    name: str
    status: Literal["ok", "failed"] = "ok"
    error_kind: str | None = None
    error: str | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, index: int, name: str, duration_ms: int = 0) -> StepResult:
        return cls(index=index, name=name, status="ok", duration_ms=duration_ms)

    @classmethod
    def failure(
        cls,
        index: int,
        name: str,
        error_kind: str,
        error: str,
        duration_ms: int = 0,
    ) -> StepResult:
        return cls(
            index=index,
            name=name,
            status="failed",
            error_kind=error_kind,
            error=error,
            duration_ms=duration_ms,
        )
