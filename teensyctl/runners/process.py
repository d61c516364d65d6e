"""Process executor backed by subprocess.Popen."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from teensyctl.core.errors import ProcessSpawnError
from teensyctl.core.model import ExitStatus
from teensyctl.runners.base import Capture


class SubprocessExecutor:
    def spawn(self, argv: Sequence[str], *, capture: Capture = None) -> subprocess.Popen[str]:
        stdout = subprocess.PIPE if capture == "stdout" else None
        stderr = subprocess.PIPE if capture == "stderr" else None
        try:
            return subprocess.Popen(
                list(argv),
                stdout=stdout,
                stderr=stderr,
                text=True,
            )
        except OSError as exc:
            raise ProcessSpawnError(f"Could not start {argv[0]}: {exc}") from exc

    def wait(self, handle: subprocess.Popen[str]) -> ExitStatus:
        # communicate() drains the pipes fully before returning.
        stdout, stderr = handle.communicate()
        return ExitStatus(returncode=handle.returncode, stdout=stdout, stderr=stderr)
