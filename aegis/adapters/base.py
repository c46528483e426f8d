"""
Adapter base — the contracts between the setup core and the outside world.

The core never prompts a terminal or calls a package manager itself.
It talks to a ``Prompter`` for operator input and to a ``ToolInstaller``
for making binaries available, so both can be swapped for fakes in
tests (see ``aegis.adapters.mock``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from aegis.core.models.receipt import Receipt
from aegis.core.models.tool import ToolSpec


class Prompter(ABC):
    """Interactive operator input.

    Every method raises ``PromptAborted`` when the operator cancels.
    """

    @abstractmethod
    def select(self, label: str, options: list[str]) -> str:
        """Present a closed menu and return exactly one of ``options``."""

    @abstractmethod
    def text(self, label: str, default: str | None = None, secret: bool = False) -> str:
        """Ask for a free-text (or hidden) value."""

    @abstractmethod
    def confirm(self, label: str, default: bool = False) -> bool:
        """Ask a yes/no question."""

    @abstractmethod
    def integer(self, label: str, default: int = 0, minimum: int = 0, maximum: int | None = None) -> int:
        """Ask for a bounded integer."""


class ToolInstaller(ABC):
    """Makes an external tool available on PATH.

    ``ensure_installed`` is idempotent: a tool already on PATH yields a
    ``skipped`` receipt and nothing is installed. It never raises;
    failures come back as a failed Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Installer identifier (e.g., 'apt', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying package manager can be used."""

    @abstractmethod
    def is_installed(self, tool: ToolSpec) -> bool:
        """Whether ``tool.binary`` is already on PATH."""

    @abstractmethod
    def ensure_installed(self, tool: ToolSpec) -> Receipt:
        """Install ``tool`` unless it is present."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
