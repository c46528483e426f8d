"""
Generated file model — used by all generators.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator


class GeneratedFile(BaseModel):
    """An artifact produced by the generate step.

    Attributes:
        path:    Absolute final location on the host.
        content: Full file content.
        mode:    Permission bits applied when published.
        reason:  Why this file was generated.
    """

    path: str
    content: str
    mode: int = 0o644
    reason: str = ""

    @field_validator("path")
    @classmethod
    def _absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"generated file path must be absolute: {v}")
        return v

    @property
    def secret(self) -> bool:
        """Readable by the owner only."""
        return self.mode & 0o077 == 0
