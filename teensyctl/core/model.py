"""Core data models used across dispatcher, installer, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from teensyctl.core.mcu import MCU


@dataclass(frozen=True)
class HelpRequest:
    pass


@dataclass(frozen=True)
class ListMcusRequest:
    pass


@dataclass(frozen=True)
class BootRequest:
    wait: bool = True
    verbose: bool = False


@dataclass(frozen=True)
class ProgramRequest:
    mcu: MCU
    file: str | Path
    wait: bool = True
    verbose: bool = False
    hard: bool = False
    soft: bool = False
    noreboot: bool = False


LoaderRequest = HelpRequest | ListMcusRequest | BootRequest | ProgramRequest


@dataclass(frozen=True)
class ExitStatus:
    returncode: int
    stdout: str | None = None
    stderr: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class Settings:
    loader: str | None = None
    rules_url: str = "https://www.pjrc.com/teensy/00-teensy.rules"
    rules_path: Path = Path("/etc/udev/rules.d/00-teensy.rules")
    download_timeout_s: float = 5 * 60.0
    preflight_delay_s: float = 5.0
    privilege_command: tuple[str, ...] = ("sudo",)


@dataclass(frozen=True)
class PrivilegedStep:
    name: str
    argv: tuple[str, ...]
    executed: bool = False


@dataclass(frozen=True)
class UdevInstallReport:
    dry_run: bool
    skipped: bool
    rules_path: Path
    steps: tuple[PrivilegedStep, ...] = ()
