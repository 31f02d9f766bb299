"""
YAML loading helpers for CLI configuration files.

Reads go through PyYAML's ``safe_load``; writes go through a ruamel.yaml
round-trip instance so comments and key order in hand-edited config
files survive ``idempiere-cli config set``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, TextIO, Union, cast

import yaml as pyyaml
from ruamel.yaml import YAML

# Recursive type for nested YAML structures
ConfigValue = Union[str, int, float, bool, None, 'ConfigDict', list['ConfigValue']]
ConfigDict = dict[str, ConfigValue]


class YAMLLoader(Protocol):
    """Protocol for YAML loader with comment preservation."""
    preserve_quotes: bool
    default_flow_style: bool

    def load(self, stream: TextIO) -> ConfigValue:
        """Load YAML from stream."""
        ...

    def dump(self, data: object, stream: TextIO) -> None:
        """Dump YAML to stream."""
        ...


def _create_yaml_loader() -> YAMLLoader:
    """Create the round-trip YAML instance used for writes."""
    yaml_obj = YAML()
    yaml_obj.preserve_quotes = True
    yaml_obj.default_flow_style = False
    yaml_obj.indent(mapping=2, sequence=4, offset=2)
    return cast(YAMLLoader, yaml_obj)


yaml: YAMLLoader = _create_yaml_loader()


class YamlFormatError(ValueError):
    """Raised when a YAML file does not contain a mapping at its root."""


def safe_load_yaml(file_path: Path) -> ConfigDict:
    """Load a YAML mapping with PyYAML's safe loader.

    An empty file yields an empty dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        YamlFormatError: If the root node is not a mapping.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with file_path.open(encoding="utf-8") as f:
        raw = pyyaml.safe_load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise YamlFormatError(f"Expected a mapping at the root of {file_path}")
    return cast(ConfigDict, raw)


def load_yaml_file(file_path: Path) -> ConfigDict:
    """Load a YAML file keeping comments, for a later ``save_yaml_file``.

    Raises:
        FileNotFoundError: If file does not exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with file_path.open(encoding="utf-8") as f:
        raw: ConfigValue = yaml.load(f)
    if raw is None:
        return {}
    return cast(ConfigDict, raw)


def save_yaml_file(data: ConfigDict, file_path: Path) -> None:
    """Save data to YAML file with comment preservation."""
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open('w', encoding='utf-8') as f:
        yaml.dump(data, f)
