"""Adapters — bindings for the terminal, processes and package manager.

Public re-exports for convenient access.
"""

from aegis.adapters.base import Prompter, ToolInstaller
from aegis.adapters.mock import MockPrompter, MockToolInstaller

__all__ = [
    "MockPrompter",
    "MockToolInstaller",
    "Prompter",
    "ToolInstaller",
]
