"""Installation of the PJRC udev rules for Teensy boards."""

from __future__ import annotations

import logging
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from teensyctl.core.errors import PrivilegedCommandError, ProcessSpawnError
from teensyctl.core.model import PrivilegedStep, Settings, UdevInstallReport
from teensyctl.runners.base import Downloader, ProcessExecutor

LOGGER = logging.getLogger(__name__)


class UdevInstaller:
    """Download the rules file and install it system wide.

    The rules land in ``settings.rules_path`` (``/etc/udev/rules.d`` by
    default), which needs elevated privileges and ``udevadm``. Nothing is
    changed unless ``install`` is called with ``dry_run=False``.
    """

    def __init__(
        self,
        executor: ProcessExecutor,
        downloader: Downloader,
        settings: Settings | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self.executor = executor
        self.downloader = downloader
        self.settings = settings or Settings()
        self.sleep = sleep
        self.logger = logger or LOGGER

    def install(self, dry_run: bool = True) -> UdevInstallReport:
        rules_path = self.settings.rules_path
        if rules_path.exists():
            self.logger.warning("udev rule file already exists - aborting.")
            return UdevInstallReport(dry_run=dry_run, skipped=True, rules_path=rules_path)

        if dry_run:
            self.logger.info("Doing a dry run - no changes will occur.")
        else:
            self.logger.warning("Doing a live run - your system will be affected.")
            self.sleep(self.settings.preflight_delay_s)

        with tempfile.TemporaryDirectory(prefix="teensyctl-") as tmpdir:
            dlpath = Path(tmpdir) / rules_path.name
            self.logger.info("Downloading udev rules to `%s`", dlpath)
            self.downloader.download(
                self.settings.rules_url,
                dlpath,
                timeout_s=self.settings.download_timeout_s,
            )

            self.logger.info("Installing rules file to `%s`", rules_path)
            steps: list[PrivilegedStep] = []
            for step in self.plan(dlpath):
                self.logger.info("%s: %s", _DESCRIPTIONS[step.name], " ".join(step.argv))
                if not dry_run:
                    self._run_step(step)
                    step = PrivilegedStep(name=step.name, argv=step.argv, executed=True)
                steps.append(step)

        self.logger.info("Done!")
        return UdevInstallReport(
            dry_run=dry_run,
            skipped=False,
            rules_path=rules_path,
            steps=tuple(steps),
        )

    def plan(self, downloaded: Path) -> tuple[PrivilegedStep, ...]:
        """Privileged commands needed to install ``downloaded``, in order."""
        sudo = self.settings.privilege_command
        return (
            PrivilegedStep(
                name="install",
                argv=(
                    *sudo,
                    "install",
                    "-o",
                    "root",
                    "-g",
                    "root",
                    "-m",
                    "0664",
                    str(downloaded),
                    str(self.settings.rules_path),
                ),
            ),
            PrivilegedStep(name="reload", argv=(*sudo, "udevadm", "control", "--reload-rules")),
            PrivilegedStep(name="trigger", argv=(*sudo, "udevadm", "trigger")),
        )

    def _run_step(self, step: PrivilegedStep) -> None:
        try:
            handle = self.executor.spawn(step.argv)
        except ProcessSpawnError as exc:
            raise PrivilegedCommandError(step.name, f"Step '{step.name}' could not start: {exc}") from exc

        status = self.executor.wait(handle)
        if not status.ok:
            raise PrivilegedCommandError(
                step.name,
                f"Step '{step.name}' failed with exit status {status.returncode}: {' '.join(step.argv)}",
                returncode=status.returncode,
            )


_DESCRIPTIONS = {
    "install": "Installing rules",
    "reload": "Reloading rules",
    "trigger": "Triggering udev events",
}
