"""Derive project facts from an existing plugin tree.

Nothing here is cached: the manifest and the poms on disk are the only
source of truth, and every call re-reads them. Missing or unreadable files
yield ``None``/``False``/empty results instead of exceptions so callers can
report "cannot proceed" themselves.
"""

from __future__ import annotations

import re
from pathlib import Path

from idempiere_cli.core.platform_version import PlatformVersion
from idempiere_cli.core.scaffold_result import ScaffoldError
from idempiere_cli.core.xml_document import XmlDocument

MANIFEST_PATH = Path("META-INF") / "MANIFEST.MF"
POM_FILE = "pom.xml"

_SYMBOLIC_NAME = re.compile(r"Bundle-SymbolicName:\s*([^;\s]+)")
_BUNDLE_VERSION = re.compile(r"Bundle-Version:\s*(\S+)")
_BUNDLE_VENDOR = re.compile(r"Bundle-Vendor:[ \t]*([^\r\n]*)")
_JAVA_SE = re.compile(r"JavaSE-(\d+)")
_COMPILER_RELEASE = re.compile(r"<maven\.compiler\.release>\s*(\d+)\s*</maven\.compiler\.release>")
_TYCHO_VERSION = re.compile(r"<tycho\.version>\s*([^<\s]+)\s*</tycho\.version>")

PARENT_SUFFIX = ".parent"
BASE_SUFFIX = ".base"
TEST_SUFFIX = ".test"
FRAGMENT_SUFFIX = ".fragment"
FEATURE_SUFFIX = ".feature"
P2_SUFFIX = ".p2"


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def detect_plugin_id(plugin_dir: Path) -> str | None:
    """Read ``Bundle-SymbolicName`` from the plugin's manifest."""
    content = _read(plugin_dir / MANIFEST_PATH)
    if content is None:
        return None
    match = _SYMBOLIC_NAME.search(content)
    return match.group(1) if match else None


def detect_plugin_version(plugin_dir: Path) -> str | None:
    content = _read(plugin_dir / MANIFEST_PATH)
    if content is None:
        return None
    match = _BUNDLE_VERSION.search(content)
    return match.group(1) if match else None


def detect_plugin_vendor(plugin_dir: Path) -> str | None:
    content = _read(plugin_dir / MANIFEST_PATH)
    if content is None:
        return None
    match = _BUNDLE_VENDOR.search(content)
    return match.group(1).strip() if match else None


def is_idempiere_plugin(directory: Path) -> bool:
    return detect_plugin_id(directory) is not None


def _load_pom(directory: Path) -> XmlDocument | None:
    path = directory / POM_FILE
    if not path.is_file():
        return None
    try:
        return XmlDocument.load(path)
    except ScaffoldError:
        return None


def detect_modules(root: Path) -> list[str]:
    """Module names listed in ``root/pom.xml``, in document order.

    Only ``project/modules/module`` counts: commented-out entries and
    profile-specific module lists are not part of the default build.
    """
    doc = _load_pom(root)
    if doc is None:
        return []
    return [module for module in doc.child_texts("project/modules/module") if module]


def is_multi_module_root(directory: Path) -> bool:
    """True for an aggregator pom: ``pom`` packaging with at least one module."""
    doc = _load_pom(directory)
    if doc is None or doc.child_texts("project/packaging") != ["pom"]:
        return False
    return any(doc.child_texts("project/modules/module"))


def find_multi_module_root(start: Path) -> Path | None:
    """Walk upward from ``start`` (inclusive) to the nearest aggregator pom."""
    current = start.resolve()
    for candidate in [current, *current.parents]:
        if is_multi_module_root(candidate):
            return candidate
    return None


def detect_project_base_id(root: Path) -> str:
    """Project id of a multi-module root.

    Taken from the ``*.parent`` module name; falls back to the root
    directory name for trees without a parent module.
    """
    for module in detect_modules(root):
        if module.endswith(PARENT_SUFFIX):
            return module.removesuffix(PARENT_SUFFIX)
    return root.resolve().name


def _has_module_with_suffix(root: Path, suffix: str) -> bool:
    return any(module.endswith(suffix) for module in detect_modules(root))


def has_fragment(root: Path) -> bool:
    return _has_module_with_suffix(root, FRAGMENT_SUFFIX)


def has_feature(root: Path) -> bool:
    return _has_module_with_suffix(root, FEATURE_SUFFIX)


def has_test(root: Path) -> bool:
    return _has_module_with_suffix(root, TEST_SUFFIX)


def has_p2(root: Path) -> bool:
    return _has_module_with_suffix(root, P2_SUFFIX)


def _platform_in(content: str) -> PlatformVersion | None:
    for pattern in (_JAVA_SE, _COMPILER_RELEASE):
        match = pattern.search(content)
        if match:
            version = PlatformVersion.from_java_release(int(match.group(1)))
            if version is not None:
                return version
    match = _TYCHO_VERSION.search(content)
    if match:
        return PlatformVersion.from_tycho_version(match.group(1))
    return None


def detect_platform_version(root: Path) -> PlatformVersion:
    """Platform target of a multi-module root, newest supported if undetectable.

    Looks at the parent module pom first, then the aggregator pom, then the
    base plugin manifest.
    """
    base_id = detect_project_base_id(root)
    candidates = [
        root / f"{base_id}{PARENT_SUFFIX}" / POM_FILE,
        root / POM_FILE,
        root / f"{base_id}{BASE_SUFFIX}" / MANIFEST_PATH,
        root / MANIFEST_PATH,
    ]
    for candidate in candidates:
        content = _read(candidate)
        if content is None:
            continue
        version = _platform_in(content)
        if version is not None:
            return version
    return PlatformVersion.latest()


def find_plugin_dir(start: Path) -> Path | None:
    """Locate the plugin a component should be added to.

    ``start`` itself when it carries a manifest; otherwise, if ``start`` sits
    in a multi-module tree, that tree's ``*.base`` plugin module.
    """
    if is_idempiere_plugin(start):
        return start
    root = find_multi_module_root(start)
    if root is None:
        return None
    for module in detect_modules(root):
        candidate = root / module
        if module.endswith(BASE_SUFFIX) and is_idempiere_plugin(candidate):
            return candidate
    return None
