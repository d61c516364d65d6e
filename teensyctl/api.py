"""Stable public API for building tooling on top of teensyctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from teensyctl.core.errors import (
    ConflictingRebootModeError,
    DownloadError,
    FirmwareNotFoundError,
    LoaderNotFoundError,
    McuResolutionError,
    PrivilegedCommandError,
    ProcessSpawnError,
    RequestValidationError,
    SettingsLoadError,
    SettingsValidationError,
    TeensyctlError,
    UnsupportedSoftRebootError,
)
from teensyctl.core.mcu import MCU, has_soft_reboot, parse_mcu
from teensyctl.core.model import (
    BootRequest,
    ExitStatus,
    HelpRequest,
    ListMcusRequest,
    PrivilegedStep,
    ProgramRequest,
    Settings,
    UdevInstallReport,
)
from teensyctl.core.service import TeensyService
from teensyctl.runners.base import Downloader, ProcessExecutor

__all__ = [
    "TeensyctlError",
    "RequestValidationError",
    "ConflictingRebootModeError",
    "UnsupportedSoftRebootError",
    "FirmwareNotFoundError",
    "ProcessSpawnError",
    "LoaderNotFoundError",
    "DownloadError",
    "PrivilegedCommandError",
    "McuResolutionError",
    "SettingsLoadError",
    "SettingsValidationError",
    "MCU",
    "has_soft_reboot",
    "parse_mcu",
    "BootRequest",
    "ExitStatus",
    "HelpRequest",
    "ListMcusRequest",
    "PrivilegedStep",
    "ProgramRequest",
    "Settings",
    "UdevInstallReport",
    "Client",
]


class Client:
    """Public client for driving teensy_loader_cli and the udev installer.

    Executor and downloader are injectable so callers can substitute their
    own process or network handling.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        executor: ProcessExecutor | None = None,
        downloader: Downloader | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._service = TeensyService(
            settings=settings,
            executor=executor,
            downloader=downloader,
            logger=logger,
        )

    @property
    def settings(self) -> Settings:
        return self._service.settings

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def help(self, stream: TextIO | None = None) -> str:
        return self._service.loader_help(stream)

    def list_mcus(self, stream: TextIO | None = None) -> str:
        return self._service.list_mcus(stream)

    def boot(self, *, wait: bool = True, verbose: bool = False) -> bool:
        return self._service.boot(wait=wait, verbose=verbose)

    def program(
        self,
        mcu: MCU | str,
        file: str | Path,
        *,
        wait: bool = True,
        verbose: bool = False,
        hard: bool = False,
        soft: bool = False,
        noreboot: bool = False,
    ) -> bool:
        target = mcu if isinstance(mcu, MCU) else parse_mcu(mcu)
        return self._service.program(
            target,
            file,
            wait=wait,
            verbose=verbose,
            hard=hard,
            soft=soft,
            noreboot=noreboot,
        )

    def install_udev(self, *, dry: bool = True) -> UdevInstallReport:
        return self._service.install_udev(dry=dry)
