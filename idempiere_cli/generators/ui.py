"""Generators for ZK web UI components."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.generators.base import ComponentGenerator, GeneratedFiles

FORM_FACTORY_SERVICE = "org.adempiere.webui.factory.IFormFactory"
WEB_DIR = Path("src") / "web"


class ZkFormGenerator(ComponentGenerator):
    """Programmatic ZK form with a form factory."""

    kind = kinds.ZK_FORM

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self._create(src_dir, project_root, f"{self.base_name(context)}Form", context, result)
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
        form: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        factory = f"{form}Factory"
        self.render_java("zk-form/Form.java.j2", src_dir, form, context, result)
        self.render_java("zk-form/FormFactory.java.j2", src_dir, factory, context, result, formClassName=form)
        self.register_component(plugin_dir, factory, FORM_FACTORY_SERVICE, context, result)


class ZkFormZulGenerator(ComponentGenerator):
    """ZUL-backed form: form class, controller and a ``.zul`` page.

    The page is copied verbatim because its ``${...}`` EL expressions
    clash with template syntax.
    """

    kind = kinds.ZK_FORM_ZUL

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        self._create(src_dir, project_root, f"{base}ZulForm", f"{base}ZulFormController", "form.zul", context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        name = self.class_name(context)
        self._create(src_dir, plugin_dir, name, f"{name}Controller", f"{name.lower()}.zul", context, result)
        self.merge_manifest(plugin_dir, result)
        return result

    def _create(
        self,
        src_dir: Path,
        plugin_dir: Path,
        form: str,
        controller: str,
        zul_file: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        plugin_name = self.plugin_name(context)
        self.render_java(
            "zk-form-zul/ZulForm.java.j2", src_dir, form, context, result,
            pluginName=plugin_name, zulFile=zul_file,
        )
        self.render_java(
            "zk-form-zul/FormController.java.j2", src_dir, controller, context, result,
            pluginName=plugin_name, formClassName=form,
        )
        target = plugin_dir / WEB_DIR / zul_file
        if self.renderer.copy_resource("zk-form-zul/form.zul", target):
            result.created.append(target)


class ListboxGroupGenerator(ComponentGenerator):
    """Form showing a grouped listbox, with its group model and renderer."""

    kind = kinds.LISTBOX_GROUP

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        base = self.base_name(context)
        self._create(src_dir, f"{base}ListboxGroupForm", base, context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        name = self.class_name(context)
        self._create(src_dir, f"{name}Form", name, context, result)
        self.merge_manifest(plugin_dir, result)
        return result

    def _create(
        self,
        src_dir: Path,
        form: str,
        prefix: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
    ) -> None:
        names = {
            "formClassName": form,
            "modelClassName": f"{prefix}GroupModel",
            "rendererClassName": f"{prefix}GroupRenderer",
        }
        self.render_java("listbox-group/ListboxGroupForm.java.j2", src_dir, form, context, result, **names)
        self.render_java(
            "listbox-group/GroupModel.java.j2", src_dir, names["modelClassName"], context, result, **names,
        )
        self.render_java(
            "listbox-group/GroupRenderer.java.j2", src_dir, names["rendererClassName"], context, result, **names,
        )


class WListboxEditorGenerator(ComponentGenerator):
    """Form with an editable WListbox grid."""

    kind = kinds.WLISTBOX_EDITOR

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        form = f"{self.base_name(context)}WListboxEditorForm"
        self.render_java("wlistbox-editor/WListboxEditorForm.java.j2", src_dir, form, context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        form = f"{self.class_name(context)}Form"
        self.render_java("wlistbox-editor/WListboxEditorForm.java.j2", src_dir, form, context, result)
        self.merge_manifest(plugin_dir, result)
        return result


class WindowValidatorGenerator(ComponentGenerator):
    kind = kinds.WINDOW_VALIDATOR

    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        validator = f"{self.base_name(context)}WindowValidator"
        self.render_java("window-validator/WindowValidator.java.j2", src_dir, validator, context, result)
        return result

    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        result = GeneratedFiles()
        self.render_java("window-validator/WindowValidator.java.j2", src_dir, self.class_name(context), context, result)
        self.merge_manifest(plugin_dir, result)
        return result
