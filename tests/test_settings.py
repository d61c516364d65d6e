from __future__ import annotations

from pathlib import Path

import pytest

from teensyctl.core.errors import LoaderNotFoundError, SettingsValidationError
from teensyctl.core.model import Settings
from teensyctl.core.settings import load_settings, resolve_loader, settings_path, settings_warnings


def _write_settings(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_missing_file_gives_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    assert settings_path() == tmp_path / "cfg" / "teensyctl" / "config.yaml"
    assert load_settings() == Settings()


def test_load_user_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    _write_settings(
        tmp_path / "cfg" / "teensyctl" / "config.yaml",
        """
loader: /opt/teensy/teensy_loader_cli
rules_path: /etc/udev/rules.d/49-teensy.rules
download_timeout_s: 30
preflight_delay_s: 0
privilege_command: [doas]
""",
    )

    settings = load_settings()

    assert settings.loader == "/opt/teensy/teensy_loader_cli"
    assert settings.rules_path == Path("/etc/udev/rules.d/49-teensy.rules")
    assert settings.rules_url == Settings().rules_url
    assert settings.download_timeout_s == 30.0
    assert settings.preflight_delay_s == 0.0
    assert settings.privilege_command == ("doas",)


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_settings(path, "")
    assert load_settings(path) == Settings()


def test_unknown_key_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_settings(path, "loder: /usr/bin/teensy_loader_cli\n")
    with pytest.raises(SettingsValidationError, match="Schema validation failed"):
        load_settings(path)


def test_relative_rules_path_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_settings(path, "rules_path: rules.d/00-teensy.rules\n")
    with pytest.raises(SettingsValidationError, match="rules_path"):
        load_settings(path)


def test_duplicate_key_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_settings(path, "loader: a\nloader: b\n")
    with pytest.raises(SettingsValidationError, match="Duplicate key"):
        load_settings(path)


def test_non_mapping_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_settings(path, "- loader\n")
    with pytest.raises(SettingsValidationError, match="mapping"):
        load_settings(path)


def test_resolve_loader_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("teensyctl.core.settings.shutil.which", lambda name: "/usr/bin/" + name)
    monkeypatch.delenv("TEENSYCTL_LOADER", raising=False)

    assert resolve_loader(Settings()) == "/usr/bin/teensy_loader_cli"
    assert resolve_loader(Settings(loader="/opt/tlc")) == "/opt/tlc"

    monkeypatch.setenv("TEENSYCTL_LOADER", "/env/tlc")
    assert resolve_loader(Settings(loader="/opt/tlc")) == "/env/tlc"


def test_resolve_loader_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("teensyctl.core.settings.shutil.which", lambda name: None)
    monkeypatch.delenv("TEENSYCTL_LOADER", raising=False)

    with pytest.raises(LoaderNotFoundError, match="TEENSYCTL_LOADER"):
        resolve_loader(Settings())


def test_env_override_of_configured_loader_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEENSYCTL_LOADER", "/env/tlc")

    warnings = settings_warnings(Settings(loader="/opt/tlc"))

    assert warnings == ("$TEENSYCTL_LOADER (/env/tlc) overrides configured loader /opt/tlc",)
    assert settings_warnings(Settings()) == ()
    assert settings_warnings(Settings(loader="/env/tlc")) == ()


def test_no_warnings_without_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TEENSYCTL_LOADER", raising=False)
    assert settings_warnings(Settings(loader="/opt/tlc")) == ()
