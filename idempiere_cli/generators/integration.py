"""Generators for REST extensions and plugin tests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.generators.base import ComponentGenerator, GeneratedFiles


class RestExtensionGenerator(ComponentGenerator):
    """JAX-RS resource plus the extension registering it with the REST API."""

    kind = kinds.REST_EXTENSION

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        self._create(src_dir, base, base.lower(), context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        name = self.class_name(context)
        resource_path = context.get("resourcePath") or name.lower()
        self._create(src_dir, name, str(resource_path), context, result)
        self.merge_manifest(plugin_dir, result)
        return result

    def _create(
        self,
        src_dir: Path,
        prefix: str,
        resource_path: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        names = {
            "resourceClassName": f"{prefix}Resource",
            "resourcePath": resource_path.strip("/"),
        }
        self.render_java(
            "rest-extension/ResourceExtension.java.j2", src_dir, f"{prefix}ResourceExtension", context, result, **names,
        )
        self.render_java("rest-extension/Resource.java.j2", src_dir, f"{prefix}Resource", context, result, **names)


class BaseTestGenerator(ComponentGenerator):
    """JUnit 5 test on top of ``AbstractTestCase``."""

    kind = kinds.BASE_TEST

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java(
            "test/PluginTest.java.j2", src_dir, f"{self.base_name(context)}Test", context, result,
            pluginName=self.plugin_name(context),
        )
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java(
            "test/PluginTest.java.j2", src_dir, self.class_name(context), context, result,
            pluginName=self.plugin_name(context),
        )
        self.merge_manifest(plugin_dir, result)
        return result
