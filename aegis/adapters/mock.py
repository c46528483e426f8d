"""
Mock adapters — test doubles for the prompt and install boundaries.

Used by the test suite and by ``aegis setup --mock`` to walk the
pipeline without a package manager. Scripted, deterministic, and
they keep a log of every call.
"""

from __future__ import annotations

from typing import Any

from aegis.adapters.base import Prompter, ToolInstaller
from aegis.core.errors import PromptAborted
from aegis.core.models.receipt import Receipt
from aegis.core.models.tool import ToolSpec

ABORT = object()
"""Scripted response that makes the prompt raise ``PromptAborted``."""


class MockPrompter(Prompter):
    """Prompter answering from a script keyed by prompt label.

    A response may be a single value (reused every time the label is
    asked) or a list (consumed one item per ask). Labels without a
    scripted response fall back to the prompt's default; a menu without
    one picks its first option.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self._responses: dict[str, Any] = {
            k: list(v) if isinstance(v, list) else v
            for k, v in (responses or {}).items()
        }
        self._asked: list[str] = []

    @property
    def asked(self) -> list[str]:
        """Every label asked, in order."""
        return self._asked

    def _answer(self, label: str, fallback: Any) -> Any:
        self._asked.append(label)
        if label not in self._responses:
            return fallback
        value = self._responses[label]
        if isinstance(value, list):
            value = value.pop(0) if value else fallback
        if value is ABORT:
            raise PromptAborted(f"Prompt cancelled: {label}")
        return value

    def select(self, label: str, options: list[str]) -> str:
        return self._answer(label, options[0])

    def text(self, label: str, default: str | None = None, secret: bool = False) -> str:
        return str(self._answer(label, default or "")).strip()

    def confirm(self, label: str, default: bool = False) -> bool:
        return bool(self._answer(label, default))

    def integer(self, label: str, default: int = 0, minimum: int = 0, maximum: int | None = None) -> int:
        return int(self._answer(label, default))


class MockToolInstaller(ToolInstaller):
    """Installer that only pretends.

    Args:
        installed: Binaries already "on PATH". ``None`` means all of them.
        failing: Tool names whose install fails.
        available: Whether the package manager is reported as usable.
    """

    def __init__(
        self,
        installed: set[str] | None = None,
        failing: set[str] | None = None,
        available: bool = True,
    ):
        self._installed = set(installed) if installed is not None else None
        self._failing = set(failing or ())
        self._available = available
        self._install_log: list[str] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def install_log(self) -> list[str]:
        """Names of tools an install was attempted for."""
        return self._install_log

    def is_available(self) -> bool:
        return self._available

    def is_installed(self, tool: ToolSpec) -> bool:
        return self._installed is None or tool.binary in self._installed

    def ensure_installed(self, tool: ToolSpec) -> Receipt:
        if self.is_installed(tool):
            return Receipt.skip(command=tool.binary, reason=f"{tool.name} already installed")

        self._install_log.append(tool.name)
        if tool.name in self._failing:
            return Receipt.failure(
                command=f"[mock] install {tool.install_target}",
                error=f"Mock install failure for {tool.name}",
                metadata={"stage": "install", "tool": tool.name},
            )

        assert self._installed is not None
        self._installed.add(tool.binary)
        return Receipt.success(
            command=f"[mock] install {tool.install_target}",
            output=f"[mock] {tool.name} installed",
        )
