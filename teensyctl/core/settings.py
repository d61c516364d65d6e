"""Settings loading and validation for the optional teensyctl YAML config."""

from __future__ import annotations

import json
import logging
import os
import shutil
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from teensyctl.core.errors import LoaderNotFoundError, SettingsLoadError, SettingsValidationError
from teensyctl.core.model import Settings

LOADER_ENV = "TEENSYCTL_LOADER"
LOADER_BINARY = "teensy_loader_cli"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise SettingsValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("teensyctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def settings_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "teensyctl/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsLoadError(f"Could not read settings file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise SettingsValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise SettingsValidationError(f"Settings file {path} must contain a mapping at root")
    return loaded


def _build_settings(doc: dict[str, Any], source: Path) -> Settings:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise SettingsValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    defaults = Settings()
    return Settings(
        loader=doc.get("loader"),
        rules_url=doc.get("rules_url", defaults.rules_url),
        rules_path=Path(doc["rules_path"]) if "rules_path" in doc else defaults.rules_path,
        download_timeout_s=float(doc.get("download_timeout_s", defaults.download_timeout_s)),
        preflight_delay_s=float(doc.get("preflight_delay_s", defaults.preflight_delay_s)),
        privilege_command=tuple(doc.get("privilege_command", defaults.privilege_command)),
    )


def load_settings(path: Path | None = None) -> Settings:
    source = path or settings_path()
    if not source.exists():
        LOGGER.debug("No settings file at %s, using defaults", source)
        return Settings()

    LOGGER.debug("Loading settings from %s", source)
    return _build_settings(_read_yaml(source), source)


def settings_warnings(settings: Settings) -> tuple[str, ...]:
    warnings: list[str] = []
    override = os.environ.get(LOADER_ENV)
    if override and settings.loader and override != settings.loader:
        warning = f"${LOADER_ENV} ({override}) overrides configured loader {settings.loader}"
        LOGGER.warning(warning)
        warnings.append(warning)
    return tuple(warnings)


def resolve_loader(settings: Settings) -> str:
    """Locate the teensy_loader_cli binary.

    ``$TEENSYCTL_LOADER`` wins over the ``loader`` setting, which wins over a
    PATH lookup.
    """
    override = os.environ.get(LOADER_ENV)
    if override:
        return override
    if settings.loader:
        return settings.loader

    found = shutil.which(LOADER_BINARY)
    if found is None:
        raise LoaderNotFoundError(
            f"Could not find '{LOADER_BINARY}' on PATH. Install it or set {LOADER_ENV}."
        )
    return found
