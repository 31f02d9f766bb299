"""Generators for model-level components: callouts, processes and event handlers."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.core.content_detector import ACTIVATOR, CALLOUT_FACTORY, EVENT_MANAGER
from idempiere_cli.generators.base import (
    HAS_EVENT_HANDLER,
    ComponentGenerator,
    GeneratedFiles,
)

CALLOUT_FACTORY_SERVICE = "org.adempiere.base.IColumnCalloutFactory"
PROCESS_FACTORY_SERVICE = "org.adempiere.base.IProcessFactory"


class CalloutGenerator(ComponentGenerator):
    """Annotated callout plus one package-scanning callout factory per plugin."""

    kind = kinds.CALLOUT

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        self.render_java("callout/Callout.java.j2", src_dir, f"{base}Callout", context, result)
        self._create_factory(src_dir, project_root, base, context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java("callout/Callout.java.j2", src_dir, self.class_name(context), context, result)
        # One factory scans the whole package, so later callouts reuse it
        if self.ensure_infrastructure(src_dir, CALLOUT_FACTORY, result):
            self._create_factory(src_dir, plugin_dir, self.base_name(context), context, result)
        self.merge_manifest(plugin_dir, result)
        return result

    def _create_factory(
        self,
        src_dir: Path,
        plugin_dir: Path,
        base: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        factory = f"{base}CalloutFactory"
        self.render_java("callout/CalloutFactory.java.j2", src_dir, factory, context, result)
        self.register_component(plugin_dir, factory, CALLOUT_FACTORY_SERVICE, context, result)


class _EventManagerGenerator(ComponentGenerator):
    def _create_event_manager(
        self,
        src_dir: Path,
        plugin_dir: Path,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        manager = f"{self.base_name(context)}EventManager"
        self.render_java("event-handler/EventManager.java.j2", src_dir, manager, context, result)
        self.register_component(plugin_dir, manager, "", context, result, event_manager_reference=True)


class EventHandlerGenerator(_EventManagerGenerator):
    """Model event delegate, dispatched by a shared annotation-based event manager."""

    kind = kinds.EVENT_HANDLER

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        self.render_java("event-handler/EventDelegate.java.j2", src_dir, f"{base}EventDelegate", context, result)
        self._create_event_manager(src_dir, project_root, context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java("event-handler/EventDelegate.java.j2", src_dir, self.class_name(context), context, result)
        if self.ensure_infrastructure(src_dir, EVENT_MANAGER, result):
            self._create_event_manager(src_dir, plugin_dir, context, result)
        self.merge_manifest(plugin_dir, result)
        return result


class FactsValidatorGenerator(_EventManagerGenerator):
    """Accounting facts validator; shares the event manager with event handlers."""

    kind = kinds.FACTS_VALIDATOR

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        self.render_java("facts-validator/FactsValidator.java.j2", src_dir, f"{base}FactsValidator", context, result)
        if not context.get(HAS_EVENT_HANDLER):
            self._create_event_manager(src_dir, project_root, context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java("facts-validator/FactsValidator.java.j2", src_dir, self.class_name(context), context, result)
        if self.ensure_infrastructure(src_dir, EVENT_MANAGER, result):
            self._create_event_manager(src_dir, plugin_dir, context, result)
        self.merge_manifest(plugin_dir, result)
        return result


class ProcessGenerator(ComponentGenerator):
    """Server process with its own process factory."""

    kind = kinds.PROCESS

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self._create(src_dir, project_root, f"{self.base_name(context)}Process", context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self._create(src_dir, plugin_dir, self.class_name(context), context, result)
        self.merge_manifest(plugin_dir, result)
        return result

    def _create(
        self,
        src_dir: Path,
        plugin_dir: Path,
        process: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        factory = f"{process}Factory"
        self.render_java("process/Process.java.j2", src_dir, process, context, result, mapped=False)
        self.render_java("process/ProcessFactory.java.j2", src_dir, factory, context, result, processClassName=process)
        self.register_component(plugin_dir, factory, PROCESS_FACTORY_SERVICE, context, result)


class ProcessMappedGenerator(ComponentGenerator):
    """Annotated process registered by the plugin's 2Pack activator."""

    kind = kinds.PROCESS_MAPPED

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        self.render_java("process/Process.java.j2", src_dir, f"{base}Process", context, result, mapped=True)
        self.render_java("activator/Activator.java.j2", src_dir, f"{base}Activator", context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        process = f"{self.class_name(context)}Process"
        self.render_java("process/Process.java.j2", src_dir, process, context, result, mapped=True)
        if self.ensure_infrastructure(src_dir, ACTIVATOR, result):
            activator = f"{self.base_name(context)}Activator"
            self.render_java("activator/Activator.java.j2", src_dir, activator, context, result)
        self.merge_manifest(plugin_dir, result)
        return result
