"""Helper utilities shared by the CLI and the scaffolding core."""

from idempiere_cli.helpers.naming import (
    component_base_name,
    extract_plugin_name,
    to_pascal_case,
)

__all__ = [
    "component_base_name",
    "extract_plugin_name",
    "to_pascal_case",
]
