"""
Tool model — an external binary the generated scripts rely on.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ToolSpec(BaseModel):
    """How to find a tool and how to get it when it is missing.

    ``binary`` is looked up on PATH. ``method`` picks the install route:
    ``apt`` installs ``package`` through the package manager, ``restic``
    downloads the upstream prebuilt binary.
    """

    name: str
    binary: str
    package: str = ""
    method: Literal["apt", "restic"] = "apt"

    @property
    def install_target(self) -> str:
        return self.package or self.binary
