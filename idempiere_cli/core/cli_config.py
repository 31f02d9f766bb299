"""Layered CLI configuration.

Config files are named ``.idempiere-cli.yaml`` (or ``.yml``). Layers are
applied in order, later ones overriding earlier ones key by key:

1. Global file in the user's home directory.
2. Nearest project file, searched upward from the working directory.
3. File named by ``$IDEMPIERE_CLI_CONFIG``.
4. File passed explicitly with ``--config``.

Schema::

    defaults:
      vendor: "ACME Corp"
      idempiereVersion: 13

Malformed or unreadable files are reported and skipped; they never stop
a command.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

import yaml as pyyaml
from ruamel.yaml.error import YAMLError as RoundTripYAMLError

from idempiere_cli.core.platform_version import LATEST_MAJOR, PlatformVersion, UnsupportedVersionError
from idempiere_cli.helpers.helpers_logging import print_warning
from idempiere_cli.helpers.yaml_loader import (
    ConfigDict,
    ConfigValue,
    YamlFormatError,
    load_yaml_file,
    safe_load_yaml,
    save_yaml_file,
)

CONFIG_FILE_NAMES = (".idempiere-cli.yaml", ".idempiere-cli.yml")
CONFIG_ENV_VAR = "IDEMPIERE_CLI_CONFIG"

DEFAULTS_SECTION = "defaults"
KEY_VENDOR = "defaults.vendor"
KEY_IDEMPIERE_VERSION = "defaults.idempiereVersion"
KNOWN_KEYS = (KEY_VENDOR, KEY_IDEMPIERE_VERSION)


class ConfigError(ValueError):
    """Raised for an unknown key or an invalid value in ``config set``."""


@dataclass
class CliConfig:
    """Resolved configuration plus the files it was read from."""

    vendor: str = ""
    idempiere_version: int = LATEST_MAJOR
    sources: list[Path] = field(default_factory=list)

    def get(self, key: str) -> object:
        if key == KEY_VENDOR:
            return self.vendor
        if key == KEY_IDEMPIERE_VERSION:
            return self.idempiere_version
        raise ConfigError(f"Unknown config key: {key}. Known keys: {', '.join(KNOWN_KEYS)}")

    def as_dict(self) -> dict[str, object]:
        return {key: self.get(key) for key in KNOWN_KEYS}


def _existing_config_in(directory: Path) -> Path | None:
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def global_config_path(home: Path | None = None) -> Path:
    """Global config file; the ``.yaml`` name when none exists yet."""
    home_dir = home if home is not None else Path.home()
    return _existing_config_in(home_dir) or home_dir / CONFIG_FILE_NAMES[0]


def find_project_config(start: Path, home: Path | None = None) -> Path | None:
    """Nearest config file at or above ``start``, excluding the global one."""
    global_path = global_config_path(home).resolve()
    current = start.resolve()
    for directory in [current, *current.parents]:
        found = _existing_config_in(directory)
        if found is not None and found.resolve() != global_path:
            return found
    return None


def config_layers(
    start: Path | None = None,
    explicit: Path | None = None,
    home: Path | None = None,
) -> list[Path]:
    """Config files to apply, lowest precedence first. Duplicates are dropped."""
    candidates: list[Path | None] = [
        global_config_path(home),
        find_project_config(start if start is not None else Path.cwd(), home),
    ]
    env_path = os.environ.get(CONFIG_ENV_VAR)
    candidates.append(Path(env_path).expanduser() if env_path else None)
    candidates.append(explicit)

    layers: list[Path] = []
    seen: set[Path] = set()
    for candidate in candidates:
        if candidate is None:
            continue
        resolved = candidate.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        layers.append(candidate)
    return layers


def _read_layer(path: Path, required: bool) -> ConfigDict | None:
    if not path.exists():
        if required:
            print_warning(f"Config file not found: {path}")
        return None
    try:
        return safe_load_yaml(path)
    except (pyyaml.YAMLError, YamlFormatError, OSError, UnicodeDecodeError) as exc:
        print_warning(f"Ignoring malformed config file {path}: {exc}")
        return None


def _apply_layer(config: CliConfig, data: ConfigDict, path: Path) -> None:
    defaults = data.get(DEFAULTS_SECTION)
    if defaults is None:
        return
    if not isinstance(defaults, dict):
        print_warning(f"Ignoring '{DEFAULTS_SECTION}' in {path}: expected a mapping")
        return

    section = cast(ConfigDict, defaults)
    vendor = section.get("vendor")
    if vendor is not None:
        config.vendor = str(vendor)

    version = section.get("idempiereVersion")
    if version is not None:
        try:
            config.idempiere_version = PlatformVersion.of(int(cast(int, version))).major
        except (TypeError, ValueError) as exc:
            print_warning(f"Ignoring idempiereVersion in {path}: {exc}")


def load_config(
    start: Path | None = None,
    explicit: Path | None = None,
    home: Path | None = None,
) -> CliConfig:
    """Resolve the effective configuration for a command run."""
    config = CliConfig()
    for path in config_layers(start, explicit, home):
        data = _read_layer(path, required=path == explicit)
        if data is None:
            continue
        _apply_layer(config, data, path)
        config.sources.append(path)
    return config


def _coerce(key: str, value: str) -> ConfigValue:
    if key == KEY_IDEMPIERE_VERSION:
        try:
            return PlatformVersion.of(int(value)).major
        except UnsupportedVersionError as exc:
            raise ConfigError(str(exc)) from exc
        except ValueError as exc:
            raise ConfigError(f"idempiereVersion must be a number, got '{value}'") from exc
    return value


def set_global_value(key: str, value: str, home: Path | None = None) -> Path:
    """Write one key to the global config file, keeping its comments and order.

    Returns:
        The path of the file written.

    Raises:
        ConfigError: If ``key`` is unknown or ``value`` is invalid for it.
    """
    if key not in KNOWN_KEYS:
        raise ConfigError(f"Unknown config key: {key}. Known keys: {', '.join(KNOWN_KEYS)}")
    coerced = _coerce(key, value)

    path = global_config_path(home)
    try:
        data: ConfigDict = load_yaml_file(path) if path.exists() else {}
    except RoundTripYAMLError as exc:
        raise ConfigError(f"Cannot update malformed config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Cannot update {path}: expected a mapping at the root")
    section = data.get(DEFAULTS_SECTION)
    if not isinstance(section, dict):
        section = {}
        data[DEFAULTS_SECTION] = section
    section[key.split(".", 1)[1]] = coerced
    save_yaml_file(data, path)
    return path
