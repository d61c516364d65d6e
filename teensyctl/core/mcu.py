"""Catalog of microcontrollers understood by teensy_loader_cli."""

from __future__ import annotations

from enum import Enum

from teensyctl.core.errors import McuResolutionError


class MCU(str, Enum):
    """Target identifiers accepted by ``--mcu=``."""

    at90usb162 = "at90usb162"
    atmega32u4 = "atmega32u4"
    at90usb646 = "at90usb646"
    at90usb1286 = "at90usb1286"
    mkl26z64 = "mkl26z64"
    mk20dx128 = "mk20dx128"
    mk20dx256 = "mk20dx256"
    mk66fx1m0 = "mk66fx1m0"
    mk64fx512 = "mk64fx512"
    imxrt1062 = "imxrt1062"
    TEENSY2 = "TEENSY2"
    TEENSY2PP = "TEENSY2PP"
    TEENSYLC = "TEENSYLC"
    TEENSY30 = "TEENSY30"
    TEENSY31 = "TEENSY31"
    TEENSY32 = "TEENSY32"
    TEENSY35 = "TEENSY35"
    TEENSY36 = "TEENSY36"
    TEENSY40 = "TEENSY40"
    TEENSY41 = "TEENSY41"
    TEENSY_MICROMOD = "TEENSY_MICROMOD"

    def __str__(self) -> str:
        return self.value


# Teensy 3.x & 4.x
_SOFT_REBOOT = frozenset(
    {
        MCU.TEENSY31,
        MCU.TEENSY32,
        MCU.TEENSY35,
        MCU.TEENSY36,
        MCU.TEENSY40,
        MCU.TEENSY41,
    }
)


def has_soft_reboot(mcu: MCU) -> bool:
    """Whether the given MCU supports soft reboot through teensy_loader_cli."""
    return mcu in _SOFT_REBOOT


def soft_reboot_mcus() -> tuple[MCU, ...]:
    return tuple(mcu for mcu in MCU if mcu in _SOFT_REBOOT)


def parse_mcu(name: str) -> MCU:
    candidate = name.strip()
    try:
        return MCU(candidate)
    except ValueError:
        pass

    folded = candidate.lower()
    for mcu in MCU:
        if mcu.value.lower() == folded:
            return mcu

    known = ", ".join(mcu.value for mcu in MCU)
    raise McuResolutionError(f"Unknown MCU '{name}'. Known: {known}")
