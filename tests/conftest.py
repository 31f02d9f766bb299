"""Shared fixtures for the idempiere-cli test suite.

Every test runs with ``$HOME`` and the working directory pointed into its
own ``tmp_path``, so the developer's real ``.idempiere-cli.yaml`` files
never leak into results.

``make_plugin`` writes a bare plugin (just a manifest) and
``make_project`` scaffolds a complete multi-module project through the
engine.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from idempiere_cli.core.cli_config import CONFIG_ENV_VAR
from idempiere_cli.core.plugin_descriptor import PluginDescriptor
from idempiere_cli.core.scaffold_engine import ScaffoldEngine

# Manifest with no dependency headers at all
BARE_MANIFEST = (
    "Manifest-Version: 1.0\n"
    "Bundle-ManifestVersion: 2\n"
    "Bundle-Name: Sales\n"
    "Bundle-SymbolicName: org.acme.sales;singleton:=true\n"
    "Bundle-Version: 1.0.0.qualifier\n"
    "Bundle-RequiredExecutionEnvironment: JavaSE-21\n"
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Fresh home and working directory for every test."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(work)
    return home


@pytest.fixture
def make_plugin(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing ``<tmp>/plugins/<plugin_id>/META-INF/MANIFEST.MF``."""

    def _make(plugin_id: str = "org.acme.sales", manifest: str | None = None) -> Path:
        plugin_dir = tmp_path / "plugins" / plugin_id
        (plugin_dir / "META-INF").mkdir(parents=True)
        content = manifest if manifest is not None else BARE_MANIFEST
        (plugin_dir / "META-INF" / "MANIFEST.MF").write_text(content, encoding="utf-8")
        (plugin_dir / "src" / plugin_id.replace(".", "/")).mkdir(parents=True)
        return plugin_dir

    return _make


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory scaffolding a multi-module project under ``<tmp>/projects``."""

    def _make(plugin_id: str = "org.acme.sales", **options: object) -> Path:
        descriptor = PluginDescriptor(
            plugin_id=plugin_id,
            output_dir=tmp_path / "projects",
            **options,  # type: ignore[arg-type]
        )
        result = ScaffoldEngine().create_plugin(descriptor)
        assert result.success, result.error_message
        return descriptor.root_dir

    return _make

