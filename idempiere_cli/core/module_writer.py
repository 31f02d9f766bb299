"""Write the modules of a plugin project tree.

Each ``create_*`` function lays down one module directory: its pom, its
manifest (when it is a bundle), ``build.properties`` and any descriptor
the module owns. Component classes are not written here; the scaffolding
engine runs the component generators over the plugin module afterwards.
Existing files are skipped, never overwritten.
"""

from __future__ import annotations

from pathlib import Path

from idempiere_cli.core.project_detector import MANIFEST_PATH, POM_FILE
from idempiere_cli.core.structural_mutator import (
    CATEGORY_FILE,
    FEATURE_FILE,
    new_category_document,
    new_feature_document,
)
from idempiere_cli.core.template_data import module_data
from idempiere_cli.core.template_renderer import TemplateRenderer
from idempiere_cli.core.xml_document import XmlDocument
from idempiere_cli.helpers.helpers_logging import print_created, print_skipped
from idempiere_cli.helpers.naming import extract_plugin_name, to_pascal_case

META_INF = "META-INF"
OSGI_INF = "OSGI-INF"
PLUGIN_XML = "plugin.xml"
BUILD_PROPERTIES = "build.properties"

PLUGIN_BUILD_PROPERTIES = (
    "source.. = src/\n"
    "output.. = bin/\n"
    "bin.includes = META-INF/,\\\n"
    "               OSGI-INF/,\\\n"
    "               .,\\\n"
    "               plugin.xml\n"
)

BUNDLE_BUILD_PROPERTIES = (
    "source.. = src/\n"
    "output.. = bin/\n"
    "bin.includes = META-INF/,\\\n"
    "               .\n"
)

FEATURE_BUILD_PROPERTIES = "bin.includes = feature.xml\n"

# Tycho resolves large p2 repositories; the JDK's default XML entity limits are too low
JVM_CONFIG = (
    "-Djdk.xml.maxGeneralEntitySizeLimit=0\n"
    "-Djdk.xml.totalEntitySizeLimit=0\n"
)

GITIGNORE = """# Build output
target/
bin/

# Eclipse IDE
.settings/
.classpath

# IntelliJ IDEA
.idea/
*.iml

# OS files
.DS_Store
Thumbs.db
"""


def source_dir(module_dir: Path, plugin_id: str) -> Path:
    """Java package directory of ``plugin_id`` inside a module."""
    return module_dir / "src" / plugin_id.replace(".", "/")


def _make_dirs(*directories: Path) -> None:
    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


def _write_new_document(doc: XmlDocument, target: Path) -> bool:
    if target.exists():
        print_skipped(str(target))
        return False
    doc.save_pretty(target)
    print_created(str(target))
    return True


def create_plugin_module(
    renderer: TemplateRenderer,
    plugin_dir: Path,
    plugin_id: str,
    data: dict[str, object],
    project_name: str | None = None,
) -> Path:
    """Create a plugin module of a multi-module project.

    ``data`` is the project-level template data; ``plugin_id`` becomes the
    module's artifact id and ``Bundle-SymbolicName``, which must match the
    Java package of its classes.

    Returns:
        The module's source package directory.
    """
    src_dir = source_dir(plugin_dir, plugin_id)
    _make_dirs(plugin_dir / META_INF, plugin_dir / OSGI_INF, src_dir)

    renderer.render_to_file("multi-module/plugin-pom.xml.j2", module_data(data, moduleId=plugin_id), plugin_dir / POM_FILE)
    manifest_data = module_data(data, pluginId=plugin_id)
    if project_name is not None:
        manifest_data["projectName"] = project_name
    renderer.render_to_file("plugin/MANIFEST.MF.j2", manifest_data, plugin_dir / MANIFEST_PATH)
    renderer.render_to_file("plugin/plugin.xml.j2", data, plugin_dir / PLUGIN_XML)
    renderer.write_text(plugin_dir / BUILD_PROPERTIES, PLUGIN_BUILD_PROPERTIES)
    return src_dir


def create_test_module(renderer: TemplateRenderer, test_dir: Path, data: dict[str, object]) -> Path:
    """Create the ``*.base.test`` module with one sample test class."""
    base_plugin_id = str(data["basePluginId"])
    src_dir = source_dir(test_dir, base_plugin_id)
    _make_dirs(test_dir / META_INF, src_dir)

    renderer.render_to_file("multi-module/test-pom.xml.j2", data, test_dir / POM_FILE)
    renderer.render_to_file("multi-module/test-MANIFEST.MF.j2", data, test_dir / MANIFEST_PATH)
    renderer.write_text(test_dir / BUILD_PROPERTIES, BUNDLE_BUILD_PROPERTIES)

    class_name = f"{data['componentBaseName']}Test"
    test_data = module_data(
        data,
        pluginId=base_plugin_id,
        className=class_name,
        pluginName=extract_plugin_name(str(data["pluginId"])),
    )
    renderer.render_to_file("test/PluginTest.java.j2", test_data, src_dir / f"{class_name}.java")
    return src_dir


def create_fragment_module(renderer: TemplateRenderer, fragment_dir: Path, data: dict[str, object]) -> None:
    _make_dirs(fragment_dir / META_INF, fragment_dir / "src")
    renderer.render_to_file("fragment/pom.xml.j2", data, fragment_dir / POM_FILE)
    renderer.render_to_file("fragment/MANIFEST.MF.j2", data, fragment_dir / MANIFEST_PATH)
    renderer.write_text(fragment_dir / BUILD_PROPERTIES, BUNDLE_BUILD_PROPERTIES)


def create_feature_module(
    renderer: TemplateRenderer,
    feature_dir: Path,
    data: dict[str, object],
    plugins: list[tuple[str, bool]],
) -> None:
    """Create the feature module listing ``plugins`` (``(id, is_fragment)`` pairs)."""
    _make_dirs(feature_dir)
    renderer.render_to_file("feature/pom.xml.j2", data, feature_dir / POM_FILE)
    feature = new_feature_document(
        feature_id=str(data["featureId"]),
        label=str(data["projectName"]),
        version=str(data["version"]),
        vendor=str(data["vendor"]),
        plugins=plugins,
    )
    _write_new_document(feature, feature_dir / FEATURE_FILE)
    renderer.write_text(feature_dir / BUILD_PROPERTIES, FEATURE_BUILD_PROPERTIES)


def create_p2_module(
    renderer: TemplateRenderer,
    p2_dir: Path,
    data: dict[str, object],
    bundle_ids: list[str],
    feature_ids: list[str],
) -> None:
    """Create the p2 repository module and its ``category.xml``."""
    _make_dirs(p2_dir)
    renderer.render_to_file("multi-module/p2-pom.xml.j2", data, p2_dir / POM_FILE)
    category = new_category_document(
        category_name=str(data["categoryName"]),
        label=str(data["projectName"]),
        bundle_ids=bundle_ids,
        feature_ids=feature_ids,
    )
    _write_new_document(category, p2_dir / CATEGORY_FILE)


def create_standalone_files(renderer: TemplateRenderer, base_dir: Path, data: dict[str, object]) -> Path:
    """Create a single-module plugin: pom, manifest, ``plugin.xml`` and build files.

    Returns:
        The plugin's source package directory.
    """
    src_dir = source_dir(base_dir, str(data["pluginId"]))
    _make_dirs(base_dir / META_INF, base_dir / OSGI_INF, src_dir)

    renderer.render_to_file("plugin/pom.xml.j2", data, base_dir / POM_FILE)
    renderer.render_to_file("plugin/MANIFEST.MF.j2", data, base_dir / MANIFEST_PATH)
    renderer.render_to_file("plugin/plugin.xml.j2", data, base_dir / PLUGIN_XML)
    renderer.write_text(base_dir / BUILD_PROPERTIES, PLUGIN_BUILD_PROPERTIES)
    write_project_files(renderer, base_dir)
    return src_dir


def write_project_files(renderer: TemplateRenderer, root: Path) -> None:
    """Root-level ``.mvn/jvm.config`` and ``.gitignore``."""
    renderer.write_text(root / ".mvn" / "jvm.config", JVM_CONFIG)
    renderer.write_text(root / ".gitignore", GITIGNORE)


def module_display_name(module_id: str) -> str:
    """Bundle name for a module added later: ``org.acme.sales.extra`` -> ``Extra``."""
    return to_pascal_case(extract_plugin_name(module_id))
