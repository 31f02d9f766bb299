"""Retarget a plugin or project from one iDempiere release line to another.

Migration is a set of exact string replacements over the files that pin the
platform: poms (Java release, Tycho version, execution environment, Eclipse
repository), manifests (execution environment, ``org.adempiere.base``
bundle version) and ``build.properties`` (javac source/target). Anything
that does not match the source platform's values exactly is left alone, so
running the same migration twice changes nothing the second time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from idempiere_cli.core.platform_version import PlatformVersion
from idempiere_cli.core.project_detector import MANIFEST_PATH, POM_FILE, detect_modules
from idempiere_cli.core.scaffold_result import ErrorCode, ScaffoldError

BUILD_PROPERTIES = "build.properties"


@dataclass(frozen=True)
class Replacement:
    """One literal rewrite inside a file."""

    label: str
    old: str
    new: str


@dataclass
class MigrationResult:
    """Outcome of a migration.

    Attributes:
        changes: One line per applied replacement, e.g.
            ``pom.xml: tycho.version 4.0.4 -> 4.0.8``.
        changed_files: Files that were rewritten.
    """

    source: PlatformVersion
    target: PlatformVersion
    changes: list[str] = field(default_factory=list[str])
    changed_files: list[Path] = field(default_factory=list[Path])


def _pom_replacements(source: PlatformVersion, target: PlatformVersion) -> list[Replacement]:
    return [
        Replacement(
            f"maven.compiler.release {source.java_release} -> {target.java_release}",
            f"<maven.compiler.release>{source.java_release}</maven.compiler.release>",
            f"<maven.compiler.release>{target.java_release}</maven.compiler.release>",
        ),
        Replacement(
            f"compiler release {source.java_release} -> {target.java_release}",
            f"<release>{source.java_release}</release>",
            f"<release>{target.java_release}</release>",
        ),
        Replacement(
            f"tycho.version {source.tycho_version} -> {target.tycho_version}",
            f"<tycho.version>{source.tycho_version}</tycho.version>",
            f"<tycho.version>{target.tycho_version}</tycho.version>",
        ),
        Replacement(
            f"idempiere.version {source.major} -> {target.major}",
            f"<idempiere.version>{source.major}</idempiere.version>",
            f"<idempiere.version>{target.major}</idempiere.version>",
        ),
        Replacement(
            f"executionEnvironment {source.java_se_version} -> {target.java_se_version}",
            f"<executionEnvironment>{source.java_se_version}</executionEnvironment>",
            f"<executionEnvironment>{target.java_se_version}</executionEnvironment>",
        ),
        Replacement(
            f"eclipse repository {source.eclipse_repo_url} -> {target.eclipse_repo_url}",
            source.eclipse_repo_url,
            target.eclipse_repo_url,
        ),
    ]


def _manifest_replacements(source: PlatformVersion, target: PlatformVersion) -> list[Replacement]:
    return [
        Replacement(
            f"{source.java_se_version} -> {target.java_se_version}",
            f"RequiredExecutionEnvironment: {source.java_se_version}",
            f"RequiredExecutionEnvironment: {target.java_se_version}",
        ),
        Replacement(
            f"bundle-version {source.bundle_version} -> {target.bundle_version}",
            f'bundle-version="{source.bundle_version}"',
            f'bundle-version="{target.bundle_version}"',
        ),
    ]


def _build_properties_replacements(source: PlatformVersion, target: PlatformVersion) -> list[Replacement]:
    return [
        Replacement(
            f"{key} {source.java_release} -> {target.java_release}",
            f"{key} = {source.java_release}",
            f"{key} = {target.java_release}",
        )
        for key in ("javacSource", "javacTarget")
    ]


def _migrate_file(path: Path, label: str, replacements: list[Replacement], result: MigrationResult) -> None:
    if not path.is_file():
        return
    try:
        original = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScaffoldError(f"Cannot read {label}: {exc}", code=ErrorCode.IO_ERROR, path=path) from exc

    updated = original
    for replacement in replacements:
        if replacement.old in updated:
            updated = updated.replace(replacement.old, replacement.new)
            result.changes.append(f"{label}: {replacement.label}")
    if updated == original:
        return

    try:
        path.write_bytes(updated.encode("utf-8"))
    except OSError as exc:
        raise ScaffoldError(f"Cannot write {label}: {exc}", code=ErrorCode.IO_ERROR, path=path) from exc
    result.changed_files.append(path)


def migrate_directory(directory: Path, result: MigrationResult, prefix: str = "") -> None:
    """Apply the replacements to the pom, manifest and build.properties of one directory."""
    source, target = result.source, result.target
    _migrate_file(directory / POM_FILE, f"{prefix}{POM_FILE}", _pom_replacements(source, target), result)
    _migrate_file(
        directory / MANIFEST_PATH,
        f"{prefix}{MANIFEST_PATH.as_posix()}",
        _manifest_replacements(source, target),
        result,
    )
    _migrate_file(
        directory / BUILD_PROPERTIES,
        f"{prefix}{BUILD_PROPERTIES}",
        _build_properties_replacements(source, target),
        result,
    )


def migrate(base_dir: Path, source: PlatformVersion, target: PlatformVersion) -> MigrationResult:
    """Retarget ``base_dir`` and, for a multi-module root, every listed module.

    Raises:
        ScaffoldError: If a file that needs rewriting cannot be read or written.
    """
    result = MigrationResult(source=source, target=target)
    if source == target:
        return result
    migrate_directory(base_dir, result)
    for module in detect_modules(base_dir):
        module_dir = base_dir / module
        if module_dir.is_dir():
            migrate_directory(module_dir, result, prefix=f"{module}/")
    return result
