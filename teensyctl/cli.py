"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from teensyctl.core.errors import TeensyctlError
from teensyctl.core.mcu import parse_mcu
from teensyctl.core.service import TeensyService

app = typer.Typer(help="Teensy firmware upload and udev setup via teensy_loader_cli")


@app.callback()
def main(
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        typer.echo(f"Error: Unknown log level '{log_level}'", err=True)
        raise typer.Exit(code=2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _build_service() -> TeensyService:
    service = TeensyService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("mcus")
def list_catalog() -> None:
    """List the MCU identifiers teensyctl knows about."""
    try:
        service = _build_service()
        for mcu, soft in service.catalog():
            marker = "  (soft-reboot)" if soft else ""
            typer.echo(f"{mcu.value}{marker}")
    except TeensyctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("loader-help")
def loader_help() -> None:
    """Print the --help text of the teensy_loader_cli binary."""
    try:
        service = _build_service()
        service.loader_help()
    except TeensyctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("list-mcus")
def list_mcus() -> None:
    """List the MCUs supported by the teensy_loader_cli binary."""
    try:
        service = _build_service()
        service.list_mcus()
    except TeensyctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("boot")
def boot(
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Wait until a device is found"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose loader output"),
) -> None:
    """Boot the attached Teensy without uploading a new program."""
    try:
        service = _build_service()
        if not service.boot(wait=wait, verbose=verbose):
            typer.echo("Error: Boot failed", err=True)
            raise typer.Exit(code=1)
    except TeensyctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("program")
def program(
    mcu: str = typer.Argument(..., help="Target MCU, see 'teensyctl mcus'"),
    file: Path = typer.Argument(..., help="Firmware image in ihex format"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Wait until a device is detected"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose loader output"),
    hard: bool = typer.Option(False, "--hard", help="Hard reboot if the device is not online"),
    soft: bool = typer.Option(False, "--soft", help="Soft reboot if the device is not online (Teensy 3.x & 4.x)"),
    noreboot: bool = typer.Option(False, "--noreboot", help="Do not reboot the Teensy after programming"),
) -> None:
    """Upload FILE to the connected Teensy."""
    try:
        service = _build_service()
        target = parse_mcu(mcu)
        ok = service.program(
            target,
            file,
            wait=wait,
            verbose=verbose,
            hard=hard,
            soft=soft,
            noreboot=noreboot,
        )
        if not ok:
            typer.echo(f"Error: Upload of {file} failed", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Programmed {file} to {target.value}")
    except TeensyctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("install-udev")
def install_udev(
    dry: bool = typer.Option(True, "--dry/--live", help="Dry run only downloads; --live changes your system"),
) -> None:
    """Install the PJRC udev rules for Teensy boards (needs sudo and udevadm)."""
    try:
        service = _build_service()
        report = service.install_udev(dry=dry)
        if report.skipped:
            typer.echo(
                f"Rules file {report.rules_path} already exists. "
                "Check it is correct for your devices, or remove it and try again."
            )
            return
        for step in report.steps:
            prefix = "ran" if step.executed else "would run"
            typer.echo(f"{step.name}: {prefix} {' '.join(step.argv)}")
    except TeensyctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
