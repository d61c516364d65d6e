from __future__ import annotations

from pathlib import Path

import pytest

from teensyctl.core.errors import DownloadError, PrivilegedCommandError, ProcessSpawnError
from teensyctl.core.model import ExitStatus, Settings
from teensyctl.core.udev import UdevInstaller


class FakeExecutor:
    def __init__(self, fail_on: str | None = None, spawn_error_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.spawn_error_on = spawn_error_on
        self.calls: list[tuple[str, ...]] = []

    def spawn(self, argv, *, capture=None):
        argv = tuple(argv)
        if self.spawn_error_on and self.spawn_error_on in argv:
            raise ProcessSpawnError(f"Could not start {argv[0]}")
        self.calls.append(argv)
        return argv

    def wait(self, handle) -> ExitStatus:
        failed = self.fail_on is not None and self.fail_on in handle
        return ExitStatus(returncode=1 if failed else 0)


class FakeDownloader:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, Path, float]] = []

    def download(self, url: str, dest: Path, *, timeout_s: float) -> Path:
        self.calls.append((url, dest, timeout_s))
        if self.error is not None:
            raise self.error
        dest.write_text('ATTRS{idVendor}=="16c0", MODE:="0666"\n', encoding="utf-8")
        return dest


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(rules_path=tmp_path / "rules.d" / "00-teensy.rules", preflight_delay_s=2.5)


def _installer(settings: Settings, executor: FakeExecutor, downloader: FakeDownloader, sleeps: list[float]):
    return UdevInstaller(executor, downloader, settings, sleep=sleeps.append)


def test_existing_rules_file_aborts(settings: Settings) -> None:
    settings.rules_path.parent.mkdir(parents=True)
    settings.rules_path.write_text("custom\n", encoding="utf-8")
    executor, downloader, sleeps = FakeExecutor(), FakeDownloader(), []

    report = _installer(settings, executor, downloader, sleeps).install(dry_run=False)

    assert report.skipped is True
    assert report.steps == ()
    assert downloader.calls == []
    assert executor.calls == []
    assert sleeps == []
    assert settings.rules_path.read_text(encoding="utf-8") == "custom\n"


def test_dry_run_downloads_once_and_runs_nothing(settings: Settings) -> None:
    executor, downloader, sleeps = FakeExecutor(), FakeDownloader(), []

    report = _installer(settings, executor, downloader, sleeps).install(dry_run=True)

    assert len(downloader.calls) == 1
    url, dest, timeout_s = downloader.calls[0]
    assert url == "https://www.pjrc.com/teensy/00-teensy.rules"
    assert timeout_s == 300.0
    assert not dest.exists()
    assert executor.calls == []
    assert sleeps == []
    assert report.dry_run is True
    assert [step.name for step in report.steps] == ["install", "reload", "trigger"]
    assert not any(step.executed for step in report.steps)


def test_live_run_runs_install_reload_trigger(settings: Settings) -> None:
    executor, downloader, sleeps = FakeExecutor(), FakeDownloader(), []

    report = _installer(settings, executor, downloader, sleeps).install(dry_run=False)

    assert sleeps == [2.5]
    assert len(downloader.calls) == 1
    dest = downloader.calls[0][1]
    assert executor.calls == [
        ("sudo", "install", "-o", "root", "-g", "root", "-m", "0664", str(dest), str(settings.rules_path)),
        ("sudo", "udevadm", "control", "--reload-rules"),
        ("sudo", "udevadm", "trigger"),
    ]
    assert all(step.executed for step in report.steps)


def test_failed_reload_skips_trigger(settings: Settings) -> None:
    executor, downloader, sleeps = FakeExecutor(fail_on="control"), FakeDownloader(), []

    with pytest.raises(PrivilegedCommandError) as excinfo:
        _installer(settings, executor, downloader, sleeps).install(dry_run=False)

    assert excinfo.value.step == "reload"
    assert excinfo.value.returncode == 1
    assert len(executor.calls) == 2
    assert executor.calls[-1][1:3] == ("udevadm", "control")


def test_unstartable_step_is_reported(settings: Settings) -> None:
    executor, downloader, sleeps = FakeExecutor(spawn_error_on="install"), FakeDownloader(), []

    with pytest.raises(PrivilegedCommandError) as excinfo:
        _installer(settings, executor, downloader, sleeps).install(dry_run=False)

    assert excinfo.value.step == "install"
    assert executor.calls == []


def test_download_failure_aborts_and_cleans_up(settings: Settings) -> None:
    executor, downloader, sleeps = FakeExecutor(), FakeDownloader(DownloadError("boom")), []

    with pytest.raises(DownloadError):
        _installer(settings, executor, downloader, sleeps).install(dry_run=False)

    assert executor.calls == []
    assert not downloader.calls[0][1].parent.exists()


def test_custom_privilege_command(tmp_path: Path) -> None:
    settings = Settings(rules_path=tmp_path / "00-teensy.rules", privilege_command=("doas",))
    installer = UdevInstaller(FakeExecutor(), FakeDownloader(), settings, sleep=lambda _: None)

    steps = installer.plan(tmp_path / "dl.rules")

    assert [step.argv[0] for step in steps] == ["doas", "doas", "doas"]
