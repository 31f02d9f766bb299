"""Build the template context for scaffolding a new project."""

from __future__ import annotations

from xml.sax.saxutils import escape

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.core.plugin_descriptor import PluginDescriptor
from idempiere_cli.core.structural_mutator import category_name_for
from idempiere_cli.helpers.naming import component_base_name


def module_names(descriptor: PluginDescriptor) -> list[str]:
    """Aggregator modules of a multi-module project, in build order."""
    plugin_id = descriptor.plugin_id
    modules = [f"{plugin_id}.parent", descriptor.base_plugin_id]
    if descriptor.with_test:
        modules.append(f"{descriptor.base_plugin_id}.test")
    if descriptor.with_fragment:
        modules.append(f"{plugin_id}.fragment")
    if descriptor.with_feature:
        modules.append(f"{plugin_id}.feature")
    modules.append(f"{plugin_id}.p2")
    return modules


def build_template_data(descriptor: PluginDescriptor) -> dict[str, object]:
    """Template keys shared by every project-level template.

    Component generators receive a copy of this with their own keys
    (``className`` and friends) layered on top.
    """
    platform = descriptor.platform
    data: dict[str, object] = {
        "pluginId": descriptor.plugin_id,
        "pluginName": descriptor.plugin_name,
        "projectName": descriptor.display_name,
        "componentBaseName": component_base_name(descriptor.plugin_id),
        "basePluginId": descriptor.base_plugin_id,
        "groupId": descriptor.group_id,
        "version": descriptor.version,
        "baseVersion": descriptor.base_version,
        "mavenVersion": descriptor.maven_version,
        "vendor": descriptor.vendor,
        "vendorXml": escape(descriptor.vendor, {'"': "&quot;"}),
        "packagePath": descriptor.package_path,
        "multiModule": descriptor.multi_module,
        "withFragment": descriptor.with_fragment,
        "withFeature": descriptor.with_feature,
        "withTest": descriptor.with_test,
        "fragmentHost": descriptor.fragment_host,
        "fragmentId": f"{descriptor.plugin_id}.fragment",
        "featureId": f"{descriptor.plugin_id}.feature",
        "categoryName": category_name_for(descriptor.plugin_id),
        "javaRelease": platform.java_release,
        "javaSeVersion": platform.java_se_version,
        "tychoVersion": platform.tycho_version,
        "bundleVersion": platform.bundle_version,
        "eclipseRepoUrl": platform.eclipse_repo_url,
        "idempiereVersion": platform.major,
        "modules": module_names(descriptor),
    }
    for kind in kinds.COMPONENT_KINDS:
        data[kinds.flag_name(kind)] = descriptor.has_feature(kind)

    features = descriptor.features
    data["needsZkBundle"] = bool(features & kinds.UI_KINDS)
    data["needsActivator"] = bool(features & kinds.ACTIVATOR_KINDS)
    data["needsEventImport"] = bool(features & {kinds.EVENT_HANDLER, kinds.FACTS_VALIDATOR})
    data["needsMinigridImport"] = descriptor.has_feature(kinds.WLISTBOX_EDITOR)
    return data


def module_data(data: dict[str, object], **overrides: object) -> dict[str, object]:
    """Copy of ``data`` with per-module overrides."""
    result = dict(data)
    result.update(overrides)
    return result
