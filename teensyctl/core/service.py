"""Service layer used by CLI and the public API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from teensyctl.core.loader import TeensyLoader
from teensyctl.core.mcu import MCU, has_soft_reboot
from teensyctl.core.model import Settings, UdevInstallReport
from teensyctl.core.settings import load_settings, resolve_loader, settings_warnings
from teensyctl.core.udev import UdevInstaller
from teensyctl.runners.base import Downloader, ProcessExecutor
from teensyctl.runners.download import UrlDownloader
from teensyctl.runners.process import SubprocessExecutor


class TeensyService:
    def __init__(
        self,
        *,
        settings: Settings | None = None,
        executor: ProcessExecutor | None = None,
        downloader: Downloader | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.load_warnings = settings_warnings(self.settings)
        self.executor = executor or SubprocessExecutor()
        self.downloader = downloader or UrlDownloader()
        self.logger = logger
        self._loader: TeensyLoader | None = None

    @property
    def loader(self) -> TeensyLoader:
        # Resolved lazily so catalog and udev commands work without the binary.
        if self._loader is None:
            self._loader = TeensyLoader(
                self.executor,
                resolve_loader(self.settings),
                logger=self.logger,
            )
        return self._loader

    def catalog(self) -> list[tuple[MCU, bool]]:
        return [(mcu, has_soft_reboot(mcu)) for mcu in MCU]

    def loader_help(self, stream: TextIO | None = None) -> str:
        return self.loader.help(stream)

    def list_mcus(self, stream: TextIO | None = None) -> str:
        return self.loader.list_mcus(stream)

    def boot(self, wait: bool = True, verbose: bool = False) -> bool:
        return self.loader.boot(wait=wait, verbose=verbose)

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
        return self.loader.program(
            mcu,
            file,
            wait=wait,
            verbose=verbose,
            hard=hard,
            soft=soft,
            noreboot=noreboot,
        )

    def install_udev(self, dry: bool = True) -> UdevInstallReport:
        installer = UdevInstaller(
            self.executor,
            self.downloader,
            self.settings,
            logger=self.logger,
        )
        return installer.install(dry_run=dry)
