"""Interfaces for the external collaborators teensyctl drives."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal, Protocol

from teensyctl.core.model import ExitStatus

Capture = Literal["stdout", "stderr"] | None


class ProcessExecutor(Protocol):
    def spawn(self, argv: Sequence[str], *, capture: Capture = None) -> Any:
        """Start a process and return an opaque handle for it."""

    def wait(self, handle: Any) -> ExitStatus:
        """Block until the process exits and return its status."""


class Downloader(Protocol):
    def download(self, url: str, dest: Path, *, timeout_s: float) -> Path:
        """Fetch url into dest and return dest."""
