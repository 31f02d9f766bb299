"""Tests for retargeting plugins to another iDempiere release line."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from idempiere_cli.core.platform_migrator import migrate
from idempiere_cli.core.platform_version import PlatformVersion
from idempiere_cli.core.project_detector import detect_platform_version
from idempiere_cli.core.scaffold_result import ErrorCode, ScaffoldError

OLD = PlatformVersion.of(12)
NEW = PlatformVersion.of(13)


class TestMultiModuleMigration:
    """A 12 project moves to 13 across the root, parent and base plugin."""

    def test_parent_pom_and_manifest_are_retargeted(self, make_project: Callable[..., Path]) -> None:
        root = make_project(platform=OLD)

        result = migrate(root, OLD, NEW)

        parent_pom = (root / "org.acme.sales.parent" / "pom.xml").read_text(encoding="utf-8")
        assert "<maven.compiler.release>21</maven.compiler.release>" in parent_pom
        assert "<release>21</release>" in parent_pom
        assert "<tycho.version>4.0.8</tycho.version>" in parent_pom
        assert NEW.eclipse_repo_url in parent_pom
        assert OLD.eclipse_repo_url not in parent_pom

        manifest = (root / "org.acme.sales.base" / "META-INF" / "MANIFEST.MF").read_text(encoding="utf-8")
        assert "Bundle-RequiredExecutionEnvironment: JavaSE-21" in manifest
        assert 'bundle-version="13.0.0"' in manifest

        assert "org.acme.sales.parent/pom.xml: tycho.version 4.0.4 -> 4.0.8" in result.changes
        assert result.changed_files
        assert detect_platform_version(root) == NEW

    def test_second_run_changes_nothing(self, make_project: Callable[..., Path]) -> None:
        root = make_project(platform=OLD)
        migrate(root, OLD, NEW)

        again = migrate(root, OLD, NEW)

        assert again.changes == []
        assert again.changed_files == []

    def test_same_version_is_a_no_op(self, make_project: Callable[..., Path]) -> None:
        root = make_project(platform=NEW)
        before = (root / "org.acme.sales.parent" / "pom.xml").read_bytes()

        result = migrate(root, NEW, NEW)

        assert result.changes == []
        assert (root / "org.acme.sales.parent" / "pom.xml").read_bytes() == before


class TestSingleDirectory:
    """Standalone plugins and hand-written files."""

    def test_standalone_plugin(self, make_plugin: Callable[..., Path]) -> None:
        plugin_dir = make_plugin(
            manifest=(
                "Manifest-Version: 1.0\n"
                "Bundle-SymbolicName: org.acme.sales\n"
                'Require-Bundle: org.adempiere.base;bundle-version="12.0.0"\n'
                "Bundle-RequiredExecutionEnvironment: JavaSE-17\n"
            )
        )
        (plugin_dir / "pom.xml").write_text(
            "<project><properties>"
            "<maven.compiler.release>17</maven.compiler.release>"
            "<idempiere.version>12</idempiere.version>"
            "</properties></project>\n",
            encoding="utf-8",
        )
        (plugin_dir / "build.properties").write_text(
            "source.. = src/\njavacSource = 17\njavacTarget = 17\n", encoding="utf-8"
        )

        result = migrate(plugin_dir, OLD, NEW)

        assert "<idempiere.version>13</idempiere.version>" in (plugin_dir / "pom.xml").read_text(encoding="utf-8")
        build = (plugin_dir / "build.properties").read_text(encoding="utf-8")
        assert "javacSource = 21" in build
        assert "javacTarget = 21" in build
        assert "build.properties: javacSource 17 -> 21" in result.changes
        assert len(result.changed_files) == 3

    def test_line_endings_are_preserved(self, make_plugin: Callable[..., Path]) -> None:
        plugin_dir = make_plugin()
        manifest_path = plugin_dir / "META-INF" / "MANIFEST.MF"
        manifest_path.write_bytes(b"Manifest-Version: 1.0\r\nBundle-RequiredExecutionEnvironment: JavaSE-17\r\n")

        migrate(plugin_dir, OLD, NEW)

        assert manifest_path.read_bytes() == (
            b"Manifest-Version: 1.0\r\nBundle-RequiredExecutionEnvironment: JavaSE-21\r\n"
        )

    def test_unreadable_file_is_an_io_error(self, make_plugin: Callable[..., Path]) -> None:
        plugin_dir = make_plugin()
        (plugin_dir / "pom.xml").write_bytes(b"\xff\xfe<project/>")

        with pytest.raises(ScaffoldError) as excinfo:
            migrate(plugin_dir, OLD, NEW)

        assert excinfo.value.code == ErrorCode.IO_ERROR
