"""Keep aggregator, category and feature descriptors in sync with module directories.

Every ``add_*`` operation is idempotent and additive: an entry that is
already present is reported and left alone, existing entries are never
removed or reordered, and edits are saved with
``XmlDocument.save_preserving`` so hand-maintained files only gain the new
lines. New descriptors are built as element trees and written with
``XmlDocument.save_pretty``.

Example:
    >>> from idempiere_cli.core.structural_mutator import add_module
    >>> add_module(Path("org.acme.sales"), "org.acme.sales.extra")
    True
    >>> add_module(Path("org.acme.sales"), "org.acme.sales.extra")
    False
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from idempiere_cli.core.project_detector import (
    FEATURE_SUFFIX,
    P2_SUFFIX,
    POM_FILE,
    detect_project_base_id,
)
from idempiere_cli.core.xml_document import XmlDocument
from idempiere_cli.helpers.helpers_logging import print_info, print_success, print_warning

CATEGORY_FILE = "category.xml"
FEATURE_FILE = "feature.xml"
DEFAULT_CATEGORY = "default"
ANY_VERSION = "0.0.0"


def category_name_for(plugin_id: str) -> str:
    """Category names use dashes where bundle ids use dots."""
    return plugin_id.replace(".", "-")


# ----------------------------------------------------------------------------
# Aggregator pom
# ----------------------------------------------------------------------------


def add_module(root: Path, module: str) -> bool:
    """Register ``module`` in ``root/pom.xml``'s ``<modules>`` list.

    A pom without a ``<modules>`` section gets one appended to ``<project>``.

    Returns:
        True if the pom was changed.
    """
    pom = root / POM_FILE
    if not pom.exists():
        print_warning(f"pom.xml not found at {pom}, module {module} not registered")
        return False

    doc = XmlDocument.load(pom)
    if module in doc.child_texts("project/modules/module"):
        print_info(f"  Module already registered: {module}")
        return False

    if doc.find_first("project/modules") is None:
        doc.insert_child("project", "<modules>\n</modules>", before="build")
    doc.insert_child("project/modules", f"<module>{module}</module>")
    doc.save_preserving()
    print_success(f"Registered module {module} in {pom.name}")
    return True


# ----------------------------------------------------------------------------
# p2 category
# ----------------------------------------------------------------------------


def find_category_file(root: Path) -> Path | None:
    """``category.xml`` of the first ``*.p2`` module directory under ``root``."""
    if not root.is_dir():
        return None
    for candidate in sorted(root.iterdir()):
        if candidate.is_dir() and candidate.name.endswith(P2_SUFFIX):
            category = candidate / CATEGORY_FILE
            if category.is_file():
                return category
    return None


def _category_for(doc: XmlDocument) -> str:
    return doc.first_attribute("site/category-def", "name") or DEFAULT_CATEGORY


def _site_entry(tag: str, unit_id: str, category: str) -> str:
    return (
        f'<{tag} id="{unit_id}" version="{ANY_VERSION}">\n'
        f'    <category name="{category}"/>\n'
        f"</{tag}>"
    )


def add_bundle_to_category(root: Path, bundle_id: str) -> bool:
    """Publish ``bundle_id`` in the p2 site's category.

    Returns:
        True if ``category.xml`` was changed; False if it is absent or
        already lists the bundle.
    """
    category_file = find_category_file(root)
    if category_file is None:
        return False

    doc = XmlDocument.load(category_file)
    if doc.has_element("site/bundle", id=bundle_id):
        print_info(f"  Bundle already in {CATEGORY_FILE}: {bundle_id}")
        return False

    doc.insert_child("site", _site_entry("bundle", bundle_id, _category_for(doc)), before="category-def")
    doc.save_preserving()
    print_success(f"Added {bundle_id} to {category_file.parent.name}/{CATEGORY_FILE}")
    return True


def add_feature_to_category(root: Path, feature_id: str) -> bool:
    """Publish a feature in the p2 site as its ``.feature.group`` installable unit."""
    category_file = find_category_file(root)
    if category_file is None:
        return False

    base = feature_id.removesuffix(FEATURE_SUFFIX)
    unit_id = f"{base}{FEATURE_SUFFIX}.group"
    doc = XmlDocument.load(category_file)
    if doc.has_element("site/iu", id=unit_id) or doc.has_element("site/feature", id=feature_id):
        print_info(f"  Feature already in {CATEGORY_FILE}: {feature_id}")
        return False

    doc.insert_child("site", _site_entry("iu", unit_id, _category_for(doc)), before="category-def")
    doc.save_preserving()
    print_success(f"Added {unit_id} to {category_file.parent.name}/{CATEGORY_FILE}")
    return True


# ----------------------------------------------------------------------------
# Feature descriptor
# ----------------------------------------------------------------------------


def find_feature_file(root: Path) -> Path | None:
    feature = root / f"{detect_project_base_id(root)}{FEATURE_SUFFIX}" / FEATURE_FILE
    return feature if feature.is_file() else None


def _plugin_attributes(plugin_id: str, fragment: bool) -> dict[str, str]:
    attributes = {
        "id": plugin_id,
        "download-size": "0",
        "install-size": "0",
        "version": ANY_VERSION,
    }
    if fragment:
        attributes["fragment"] = "true"
    attributes["unpack"] = "false"
    return attributes


def add_plugin_to_feature(root: Path, plugin_id: str, fragment: bool = False) -> bool:
    """List a plugin (or fragment) in the project's ``feature.xml``."""
    feature_file = find_feature_file(root)
    if feature_file is None:
        return False

    doc = XmlDocument.load(feature_file)
    if doc.has_element("feature/plugin", id=plugin_id):
        print_info(f"  Plugin already in {FEATURE_FILE}: {plugin_id}")
        return False

    attributes = " ".join(f'{name}="{value}"' for name, value in _plugin_attributes(plugin_id, fragment).items())
    doc.insert_child("feature", f"<plugin {attributes}/>")
    doc.save_preserving()
    print_success(f"Added {plugin_id} to {feature_file.parent.name}/{FEATURE_FILE}")
    return True


# ----------------------------------------------------------------------------
# New documents
# ----------------------------------------------------------------------------


def new_category_document(
    category_name: str,
    label: str,
    bundle_ids: list[str],
    feature_ids: list[str] | None = None,
) -> XmlDocument:
    """Build a ``category.xml`` listing bundles and feature groups in one category."""
    site = ET.Element("site")
    for bundle_id in bundle_ids:
        bundle = ET.SubElement(site, "bundle", {"id": bundle_id, "version": ANY_VERSION})
        ET.SubElement(bundle, "category", {"name": category_name})
    for feature_id in feature_ids or []:
        unit_id = f"{feature_id.removesuffix(FEATURE_SUFFIX)}{FEATURE_SUFFIX}.group"
        unit = ET.SubElement(site, "iu", {"id": unit_id, "version": ANY_VERSION})
        ET.SubElement(unit, "category", {"name": category_name})
    ET.SubElement(site, "category-def", {"name": category_name, "label": label})
    return XmlDocument.from_element(site)


def new_feature_document(
    feature_id: str,
    label: str,
    version: str,
    vendor: str,
    plugins: list[tuple[str, bool]],
) -> XmlDocument:
    """Build a ``feature.xml``; ``plugins`` holds ``(plugin_id, is_fragment)`` pairs."""
    attributes = {"id": feature_id, "label": label, "version": version}
    if vendor:
        attributes["provider-name"] = vendor
    feature = ET.Element("feature", attributes)
    description = ET.SubElement(feature, "description")
    description.text = f"{label} feature"
    for plugin_id, fragment in plugins:
        ET.SubElement(feature, "plugin", _plugin_attributes(plugin_id, fragment))
    return XmlDocument.from_element(feature)
