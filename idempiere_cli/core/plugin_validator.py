"""Static checks over a plugin directory.

Validation only reads files: the manifest, ``build.properties``, the pom,
the ``OSGI-INF`` service-component descriptors, ``plugin.xml`` and the Java
sources. Problems are collected as issues with a severity instead of being
raised, so one run reports everything that is wrong.

Usage:
    >>> from idempiere_cli.core.plugin_validator import validate_plugin
    >>> result = validate_plugin(Path("org.acme.sales"))
    >>> print(f"Errors: {result.error_count}, Warnings: {result.warning_count}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from idempiere_cli.core.manifest_merger import (
    REQUIRE_BUNDLE,
    SERVICE_COMPONENT,
    entry_name,
    parse_header_entries,
)
from idempiere_cli.core.project_detector import MANIFEST_PATH, POM_FILE, detect_plugin_id
from idempiere_cli.core.scaffold_result import ScaffoldError
from idempiere_cli.core.xml_document import XmlDocument

MANIFEST_LABEL = MANIFEST_PATH.as_posix()
BUILD_PROPERTIES = "build.properties"
PLUGIN_XML = "plugin.xml"
OSGI_INF = "OSGI-INF"
SRC_DIR = "src"

REQUIRED_HEADERS = ("Manifest-Version", "Bundle-ManifestVersion", "Bundle-SymbolicName", "Bundle-Version")
RECOMMENDED_HEADERS = ("Bundle-Name", "Bundle-Vendor")
PLUGIN_PACKAGINGS = ("eclipse-plugin", "eclipse-test-plugin", "bundle")
BASE_BUNDLE = "org.adempiere.base"

_BUNDLE_VERSION = re.compile(r"^Bundle-Version:[ \t]*(\S+)", re.MULTILINE)
_VALID_BUNDLE_VERSION = re.compile(r"^\d+\.\d+\.\d+(\.[\w-]+)?$")
_PACKAGE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_TYPE_DECLARATION = re.compile(r"\b(class|interface|enum|record)\s+\w+")


class Severity(Enum):
    """How much a validation issue matters."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ValidationIssue:
    """One finding, relative to the plugin directory.

    Attributes:
        severity: ERROR fails validation, WARNING fails only in strict mode.
        file: Path of the offending file, relative to the plugin directory.
        message: Human-readable description.
    """

    severity: Severity
    file: str
    message: str

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.file}: {self.message}"


@dataclass
class ValidationResult:
    """All issues found in one plugin."""

    plugin_dir: Path
    plugin_id: str
    issues: list[ValidationIssue] = field(default_factory=list[ValidationIssue])

    def add(self, severity: Severity, file: str, message: str) -> None:
        self.issues.append(ValidationIssue(severity, file, message))

    def _count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(Severity.WARNING)

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0

    def messages(self, severity: Severity) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == severity]

    def to_dict(self) -> dict[str, object]:
        """JSON-ready summary."""
        return {
            "pluginId": self.plugin_id,
            "path": str(self.plugin_dir),
            "valid": self.is_valid,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "issues": [
                {"severity": issue.severity.name, "file": issue.file, "message": issue.message}
                for issue in self.issues
            ],
        }


def _read(path: Path, label: str, result: ValidationResult) -> str | None:
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        result.add(Severity.ERROR, label, f"Cannot read file: {exc}")
        return None


def _load_xml(path: Path, label: str, result: ValidationResult) -> XmlDocument | None:
    try:
        return XmlDocument.load(path)
    except ScaffoldError as exc:
        result.add(Severity.ERROR, label, f"Invalid XML: {exc.message}")
        return None


def _has_header(content: str, header: str) -> bool:
    return re.search(rf"^{re.escape(header)}:", content, re.MULTILINE) is not None


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def _check_manifest(plugin_dir: Path, result: ValidationResult) -> str | None:
    manifest = plugin_dir / MANIFEST_PATH
    if not manifest.is_file():
        result.add(Severity.ERROR, MANIFEST_LABEL, "File not found - required for OSGi bundle")
        return None
    content = _read(manifest, MANIFEST_LABEL, result)
    if content is None:
        return None

    for header in REQUIRED_HEADERS:
        if not _has_header(content, header):
            result.add(Severity.ERROR, MANIFEST_LABEL, f"Missing {header} (required)")
    for header in RECOMMENDED_HEADERS:
        if not _has_header(content, header):
            result.add(Severity.WARNING, MANIFEST_LABEL, f"Missing {header} (recommended)")

    if not _has_header(content, "Bundle-RequiredExecutionEnvironment"):
        result.add(
            Severity.ERROR, MANIFEST_LABEL, "Missing Bundle-RequiredExecutionEnvironment (e.g. JavaSE-17)"
        )

    bundles = [entry_name(entry) for entry in parse_header_entries(content, REQUIRE_BUNDLE)]
    if not bundles and not _has_header(content, "Fragment-Host"):
        result.add(
            Severity.ERROR, MANIFEST_LABEL, "Missing Require-Bundle or Fragment-Host - plugin has no dependencies"
        )
    elif bundles and BASE_BUNDLE not in bundles:
        result.add(Severity.WARNING, MANIFEST_LABEL, f"{BASE_BUNDLE} not in Require-Bundle - most plugins need it")

    version = _BUNDLE_VERSION.search(content)
    if version and not _VALID_BUNDLE_VERSION.match(version.group(1)):
        result.add(
            Severity.ERROR,
            MANIFEST_LABEL,
            f"Invalid Bundle-Version format: {version.group(1)} (expected major.minor.micro[.qualifier])",
        )

    if "\r\n" in content:
        result.add(Severity.WARNING, MANIFEST_LABEL, "Contains Windows line endings (CRLF)")
    if any(line != line.rstrip(" \t") for line in content.replace("\r\n", "\n").split("\n")):
        result.add(Severity.WARNING, MANIFEST_LABEL, "Contains trailing whitespace - may break header parsing")
    return content


def _check_build_properties(plugin_dir: Path, result: ValidationResult) -> None:
    path = plugin_dir / BUILD_PROPERTIES
    if not path.is_file():
        result.add(Severity.ERROR, BUILD_PROPERTIES, "File not found - required for Tycho build")
        return
    content = _read(path, BUILD_PROPERTIES, result)
    if content is None:
        return

    if "source.." not in content:
        result.add(Severity.ERROR, BUILD_PROPERTIES, "Missing 'source..' entry")
    elif "src/" in content and not re.search(r"source\.\.\s*=\s*src/", content):
        result.add(Severity.WARNING, BUILD_PROPERTIES, "'source..' does not point at src/")
    if "output.." not in content:
        result.add(Severity.ERROR, BUILD_PROPERTIES, "Missing 'output..' entry")
    if "bin.includes" not in content:
        result.add(Severity.ERROR, BUILD_PROPERTIES, "Missing 'bin.includes' entry")
    elif "META-INF/" not in content:
        result.add(Severity.WARNING, BUILD_PROPERTIES, "bin.includes should contain META-INF/")


def _check_pom(plugin_dir: Path, result: ValidationResult) -> None:
    path = plugin_dir / POM_FILE
    if not path.is_file():
        result.add(Severity.ERROR, POM_FILE, "File not found - required for Maven/Tycho build")
        return
    doc = _load_xml(path, POM_FILE, result)
    if doc is None:
        return

    packaging = doc.child_texts("project/packaging")
    if not packaging or packaging[0] not in PLUGIN_PACKAGINGS:
        result.add(
            Severity.ERROR,
            POM_FILE,
            f"Missing or invalid packaging - expected one of: {', '.join(PLUGIN_PACKAGINGS)}",
        )

    # A module pom inherits Tycho from its parent
    has_parent = doc.find_first("project/parent") is not None
    if not has_parent and "tycho-maven-plugin" not in doc.text and "tycho.version" not in doc.text:
        result.add(Severity.WARNING, POM_FILE, "Tycho Maven plugin not found - required for OSGi builds")

    artifact_ids = doc.child_texts("project/artifactId")
    plugin_id = detect_plugin_id(plugin_dir)
    if artifact_ids and plugin_id is not None and artifact_ids[0] != plugin_id:
        result.add(
            Severity.WARNING,
            POM_FILE,
            f"artifactId '{artifact_ids[0]}' doesn't match Bundle-SymbolicName '{plugin_id}'",
        )


def _check_component_descriptor(plugin_dir: Path, xml_file: Path, result: ValidationResult) -> None:
    label = f"{OSGI_INF}/{xml_file.name}"
    doc = _load_xml(xml_file, label, result)
    if doc is None:
        return
    if doc.find_first("component") is None:
        result.add(Severity.WARNING, label, "Not a service component descriptor")
        return
    class_name = doc.first_attribute("component/implementation", "class")
    if class_name is None:
        result.add(Severity.ERROR, label, "Missing <implementation class=...>")
        return
    source = plugin_dir / SRC_DIR / (class_name.replace(".", "/") + ".java")
    if not source.is_file():
        result.add(Severity.WARNING, label, f"Implementation class not found: {class_name}")


def _check_osgi_inf(plugin_dir: Path, manifest: str | None, result: ValidationResult) -> None:
    osgi_inf = plugin_dir / OSGI_INF
    if manifest is not None:
        for entry in parse_header_entries(manifest, SERVICE_COMPONENT):
            reference = entry_name(entry)
            if "*" not in reference and not (plugin_dir / reference).is_file():
                result.add(
                    Severity.ERROR,
                    MANIFEST_LABEL,
                    f"Service-Component references a missing file: {reference}",
                )

    if not osgi_inf.exists():
        result.add(Severity.INFO, OSGI_INF, "Directory not found - OK if not using declarative services")
        return
    if not osgi_inf.is_dir():
        result.add(Severity.ERROR, OSGI_INF, "Exists but is not a directory")
        return

    descriptors = sorted(p for p in osgi_inf.iterdir() if p.is_file() and p.suffix == ".xml")
    if not descriptors:
        result.add(Severity.INFO, OSGI_INF, "No service component XML files found")
        return
    for xml_file in descriptors:
        _check_component_descriptor(plugin_dir, xml_file, result)
    if manifest is not None and not _has_header(manifest, SERVICE_COMPONENT):
        result.add(
            Severity.WARNING,
            MANIFEST_LABEL,
            "OSGI-INF has descriptors but MANIFEST.MF has no Service-Component header",
        )


def _check_plugin_xml(plugin_dir: Path, result: ValidationResult) -> None:
    path = plugin_dir / PLUGIN_XML
    if not path.is_file():
        result.add(Severity.INFO, PLUGIN_XML, "Not found - OK if not using Eclipse extensions")
        return
    doc = _load_xml(path, PLUGIN_XML, result)
    if doc is None:
        return
    if doc.find_first("plugin/extension") is None and doc.find_first("plugin/extension-point") is None:
        result.add(Severity.INFO, PLUGIN_XML, "No extensions defined")


def _check_java_sources(plugin_dir: Path, plugin_id: str, result: ValidationResult) -> None:
    src_dir = plugin_dir / SRC_DIR
    if not src_dir.is_dir():
        result.add(Severity.WARNING, SRC_DIR, "Source directory not found")
        return
    java_files = sorted(src_dir.rglob("*.java"))
    if not java_files:
        result.add(Severity.WARNING, SRC_DIR, "No Java source files found")
        return

    packages: set[str] = set()
    for java_file in java_files:
        relative = java_file.relative_to(src_dir).as_posix()
        content = _read(java_file, f"{SRC_DIR}/{relative}", result)
        if content is None:
            continue
        label = f"{SRC_DIR}/{relative}"
        package = _PACKAGE.search(content)
        if package is None:
            result.add(Severity.WARNING, label, "No package declaration found")
        else:
            name = package.group(1)
            packages.add(name)
            if java_file.parent.relative_to(src_dir).as_posix() != name.replace(".", "/"):
                result.add(Severity.ERROR, label, f"Package '{name}' doesn't match directory structure")
        if "System.out.println" in content or "System.err.println" in content:
            result.add(Severity.INFO, label, "Contains System.out/err - consider CLogger")
        if _TYPE_DECLARATION.search(content) is None:
            result.add(Severity.WARNING, label, "No class/interface/enum/record declaration found")

    if packages and not any(p.startswith(plugin_id) or plugin_id.startswith(p) for p in packages):
        result.add(Severity.WARNING, SRC_DIR, f"No package matches plugin id '{plugin_id}'")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def validate_plugin(plugin_dir: Path) -> ValidationResult:
    """Run every check against ``plugin_dir`` and collect the issues."""
    plugin_id = detect_plugin_id(plugin_dir) or plugin_dir.resolve().name
    result = ValidationResult(plugin_dir=plugin_dir, plugin_id=plugin_id)

    if not plugin_dir.exists():
        result.add(Severity.ERROR, str(plugin_dir), "Directory does not exist")
        return result
    if not plugin_dir.is_dir():
        result.add(Severity.ERROR, str(plugin_dir), "Not a directory")
        return result

    manifest = _check_manifest(plugin_dir, result)
    _check_build_properties(plugin_dir, result)
    _check_pom(plugin_dir, result)
    _check_osgi_inf(plugin_dir, manifest, result)
    _check_plugin_xml(plugin_dir, result)
    _check_java_sources(plugin_dir, plugin_id, result)
    return result
