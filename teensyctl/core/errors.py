"""Domain-specific errors for teensyctl."""


class TeensyctlError(Exception):
    """Base error for teensyctl."""


class SettingsLoadError(TeensyctlError):
    """Raised when the settings file cannot be read."""


class SettingsValidationError(TeensyctlError):
    """Raised when the settings file does not conform to schema."""


class McuResolutionError(TeensyctlError):
    """Raised when an MCU identifier is not in the catalog."""


class RequestValidationError(TeensyctlError):
    """Base error for rejected program/boot requests."""


class ConflictingRebootModeError(RequestValidationError):
    """Raised when reboot flags contradict each other."""


class UnsupportedSoftRebootError(RequestValidationError):
    """Raised when soft reboot is requested for an MCU without support."""


class FirmwareNotFoundError(RequestValidationError):
    """Raised when the firmware file to upload does not exist."""


class ProcessSpawnError(TeensyctlError):
    """Raised when an external command cannot be started."""


class LoaderNotFoundError(ProcessSpawnError):
    """Raised when no teensy_loader_cli binary can be located."""


class DownloadError(TeensyctlError):
    """Raised when fetching the udev rules file fails."""


class PrivilegedCommandError(TeensyctlError):
    """Raised when one of the elevated udev install steps fails."""

    def __init__(self, step: str, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.step = step
        self.returncode = returncode
