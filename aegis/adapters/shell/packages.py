"""
Package installer — apt-get for packaged tools, upstream binary for restic.

Restic is not assumed to be packaged: it is downloaded as a prebuilt
``.bz2``, decompressed, marked executable and moved onto PATH. Each of
those stages aborts the chain on failure, and the failed stage is
recorded in the receipt metadata.
"""

from __future__ import annotations

import logging
from pathlib import Path

from aegis.adapters.base import ToolInstaller
from aegis.adapters.shell.command import ProcessExecutor
from aegis.core.models.receipt import Receipt
from aegis.core.models.tool import ToolSpec

logger = logging.getLogger(__name__)

PACKAGE_MANAGER = "apt-get"

RESTIC_ASSET = "restic_linux_amd64"
RESTIC_DOWNLOAD_URL = (
    f"https://github.com/restic/restic/releases/latest/download/{RESTIC_ASSET}.bz2"
)


class AptToolInstaller(ToolInstaller):
    """Install missing tools with ``apt-get install -y``.

    Args:
        executor: Process executor used for every command.
        work_dir: Scratch directory for downloads.
        bin_dir: Where downloaded binaries are placed (must be on PATH).
    """

    def __init__(
        self,
        executor: ProcessExecutor | None = None,
        work_dir: Path | str = "/tmp/aegis-setup",
        bin_dir: Path | str = "/usr/local/bin",
    ):
        self._executor = executor or ProcessExecutor()
        self._work_dir = Path(work_dir)
        self._bin_dir = Path(bin_dir)

    @property
    def name(self) -> str:
        return "apt"

    def is_available(self) -> bool:
        return self._executor.which(PACKAGE_MANAGER) is not None

    def is_installed(self, tool: ToolSpec) -> bool:
        return self._executor.which(tool.binary) is not None

    def ensure_installed(self, tool: ToolSpec) -> Receipt:
        if self.is_installed(tool):
            return Receipt.skip(
                command=tool.binary,
                reason=f"{tool.name} already installed",
            )

        logger.info("Installing %s via %s", tool.name, tool.method)
        if tool.method == "restic":
            return self._install_restic(tool)
        return self._install_package(tool)

    def _install_package(self, tool: ToolSpec) -> Receipt:
        receipt = self._executor.run([PACKAGE_MANAGER, "install", "-y", tool.install_target])
        if receipt.failed:
            receipt.metadata["stage"] = "install"
            receipt.metadata["tool"] = tool.name
        return receipt

    def _install_restic(self, tool: ToolSpec) -> Receipt:
        archive = self._work_dir / f"{RESTIC_ASSET}.bz2"
        binary = self._work_dir / RESTIC_ASSET
        target = self._bin_dir / tool.binary

        chain: list[tuple[str, list[str]]] = [
            ("download", ["wget", "-q", "-O", str(archive), RESTIC_DOWNLOAD_URL]),
            ("decompress", ["bzip2", "-d", "-f", str(archive)]),
            ("chmod", ["chmod", "+x", str(binary)]),
            ("move", ["mv", str(binary), str(target)]),
        ]

        last: Receipt | None = None
        for stage, cmd in chain:
            last = self._executor.run(cmd, cwd=self._work_dir)
            if last.failed:
                logger.warning("restic install failed at %s: %s", stage, last.error)
                last.metadata["stage"] = stage
                last.metadata["tool"] = tool.name
                return last

        assert last is not None
        return Receipt.success(
            command=last.command,
            output=f"{tool.name} installed to {target}",
            metadata={"path": str(target)},
        )
