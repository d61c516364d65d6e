"""Validated invocations of the teensy_loader_cli binary."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from teensyctl.core.errors import (
    ConflictingRebootModeError,
    FirmwareNotFoundError,
    UnsupportedSoftRebootError,
)
from teensyctl.core.mcu import MCU, has_soft_reboot
from teensyctl.core.model import (
    BootRequest,
    HelpRequest,
    ListMcusRequest,
    LoaderRequest,
    ProgramRequest,
)
from teensyctl.runners.base import ProcessExecutor

LOGGER = logging.getLogger(__name__)


class TeensyLoader:
    """Dispatcher for the four teensy_loader_cli operations.

    Every call spawns at most one process and waits for it. Invalid
    ``program`` requests raise before anything is spawned.
    """

    def __init__(
        self,
        executor: ProcessExecutor,
        binary: str,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.executor = executor
        self.binary = binary
        self.logger = logger or LOGGER

    def help(self, stream: TextIO | None = None) -> str:
        """Forward the ``--help`` text of the binary.

        The binary exits non-zero for ``--help``, so the status is ignored.
        """
        handle = self.executor.spawn([self.binary, "--help"], capture="stderr")
        status = self.executor.wait(handle)
        text = status.stderr or ""
        (stream or sys.stdout).write(text)
        return text

    def list_mcus(self, stream: TextIO | None = None) -> str:
        """Forward the MCUs the binary reports via ``--list-mcus``."""
        handle = self.executor.spawn([self.binary, "--list-mcus"], capture="stdout")
        status = self.executor.wait(handle)
        text = status.stdout or ""
        (stream or sys.stdout).write(text)
        return text

    def boot(self, wait: bool = True, verbose: bool = False) -> bool:
        """Boot the attached device without uploading a program."""
        argv = [self.binary, "-b"]
        if wait:
            argv.append("-w")
        if verbose:
            argv.append("-v")
        return self._run(argv)

    def program(
        self,
        mcu: MCU,
        file: str | Path,
        *,
        wait: bool = True,
        verbose: bool = False,
        hard: bool = False,
        soft: bool = False,
        noreboot: bool = False,
    ) -> bool:
        """Upload the ihex image at ``file`` to the attached device.

        ``hard``/``soft`` pick the reboot method used when the device is not
        online; ``soft`` is only available on Teensy 3.x and 4.x.
        """
        if hard and soft:
            raise ConflictingRebootModeError("Can only specify either hard or soft reboot!")

        if soft and not has_soft_reboot(mcu):
            raise UnsupportedSoftRebootError(
                f"Only Teensy 3.x & 4.x support soft reboot! ({mcu.value} does not)"
            )

        if noreboot and not (hard or soft):
            raise ConflictingRebootModeError("Cannot specify both to reboot and not to reboot!")

        path = Path(file)
        if not path.is_file():
            raise FirmwareNotFoundError(f"Given path is not a file! ({path})")

        argv = [self.binary, f"--mcu={mcu.value}"]
        if wait:
            argv.append("-w")
        if verbose:
            argv.append("-v")
        if hard:
            argv.append("-r")
        if soft:
            argv.append("-s")
        if noreboot:
            argv.append("-n")
        argv.append(str(path))

        if verbose:
            self.logger.info("Uploading program at `%s`", path)
        return self._run(argv)

    def run(self, request: LoaderRequest) -> str | bool:
        if isinstance(request, HelpRequest):
            return self.help()
        if isinstance(request, ListMcusRequest):
            return self.list_mcus()
        if isinstance(request, BootRequest):
            return self.boot(wait=request.wait, verbose=request.verbose)
        if isinstance(request, ProgramRequest):
            return self.program(
                request.mcu,
                request.file,
                wait=request.wait,
                verbose=request.verbose,
                hard=request.hard,
                soft=request.soft,
                noreboot=request.noreboot,
            )
        raise TypeError(f"Unsupported loader request {request!r}")

    def _run(self, argv: list[str]) -> bool:
        self.logger.debug("Running %s", " ".join(argv))
        handle = self.executor.spawn(argv)
        status = self.executor.wait(handle)
        if not status.ok:
            self.logger.debug("%s exited with status %d", self.binary, status.returncode)
        return status.ok
