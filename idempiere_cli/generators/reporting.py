"""Generators for report components."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.core.content_detector import ACTIVATOR
from idempiere_cli.generators.base import HAS_PROCESS_MAPPED, ComponentGenerator, GeneratedFiles

REPORTS_DIR = "reports"


class ReportGenerator(ComponentGenerator):
    """Report process that prints through a print format."""

    kind = kinds.REPORT

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java("report/Report.java.j2", src_dir, f"{self.base_name(context)}Report", context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java("report/Report.java.j2", src_dir, self.class_name(context), context, result)
        self.merge_manifest(plugin_dir, result)
        return result


class JasperReportGenerator(ComponentGenerator):
    """Jasper ``.jrxml`` report packed in through the shared 2Pack activator."""

    kind = kinds.JASPER_REPORT

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        # process-mapped creates the same activator when both are scaffolded
        if not context.get(HAS_PROCESS_MAPPED):
            self.render_java("activator/Activator.java.j2", src_dir, f"{base}Activator", context, result)
        self._create_report(project_root, f"{base}Report", context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        if self.ensure_infrastructure(src_dir, ACTIVATOR, result):
            activator = f"{self.base_name(context)}Activator"
            self.render_java("activator/Activator.java.j2", src_dir, activator, context, result)
        self._create_report(plugin_dir, self.class_name(context), context, result)
        self.merge_manifest(plugin_dir, result)
        return result

    def _create_report(
        self,
        plugin_dir: Path,
        report: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        self.render(
            "jasper-report/Report.jrxml.j2",
            context,
            plugin_dir / REPORTS_DIR / f"{report}.jrxml",
            result,
            className=report,
            pluginName=self.plugin_name(context),
        )
