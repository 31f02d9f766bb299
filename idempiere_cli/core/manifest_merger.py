"""Merge required dependency headers into an existing MANIFEST.MF.

The manifest is edited as text rather than parsed into a structure, so
that unrelated headers and the author's line folding stay byte-identical.
Only three header families are ever touched: ``Require-Bundle``,
``Import-Package`` and ``Service-Component``. Every merge is additive and
de-duplicating, so merging the same kind twice is a no-op.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from fnmatch import fnmatchcase
from pathlib import Path

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.core.project_detector import MANIFEST_PATH
from idempiere_cli.core.scaffold_result import ScaffoldError
from idempiere_cli.helpers.helpers_logging import print_info, print_warning

REQUIRE_BUNDLE = "Require-Bundle"
IMPORT_PACKAGE = "Import-Package"
SERVICE_COMPONENT = "Service-Component"

BUNDLE_BASE = "org.adempiere.base"
BUNDLE_ZK = "org.adempiere.ui.zk"
BUNDLE_ZK_CORE = "zk"
BUNDLE_ZUL = "zul"
BUNDLE_PLUGIN_UTILS = "org.adempiere.plugin.utils"
BUNDLE_TEST = "org.idempiere.test"

IMPORT_OSGI_EVENT = 'org.osgi.service.event;version="1.4.0"'
IMPORT_OSGI_FRAMEWORK = 'org.osgi.framework;version="1.3.0"'
IMPORT_IDEMPIERE_TEST = "org.idempiere.test"
IMPORT_JUNIT = 'org.junit.jupiter.api;version="[5.9.0,6.0.0]"'
IMPORT_MINIGRID = "org.compiere.minigrid"

# Where a missing header is inserted: before the first anchor present, else at the end
_INSERT_ANCHORS: dict[str, tuple[str, ...]] = {
    REQUIRE_BUNDLE: ("Bundle-RequiredExecutionEnvironment",),
    IMPORT_PACKAGE: ("Service-Component", "Bundle-ActivationPolicy"),
    SERVICE_COMPONENT: ("Bundle-ActivationPolicy",),
}


def required_bundles(kind: str) -> list[str]:
    """Bundles a component kind needs in ``Require-Bundle``."""
    bundles = [BUNDLE_BASE]
    if kind in kinds.UI_KINDS:
        bundles += [BUNDLE_ZK, BUNDLE_ZK_CORE, BUNDLE_ZUL]
    if kind in kinds.ACTIVATOR_KINDS:
        bundles.append(BUNDLE_PLUGIN_UTILS)
    if kind == kinds.BASE_TEST:
        bundles.append(BUNDLE_TEST)
    return bundles


_IMPORTS_BY_KIND: dict[str, tuple[str, ...]] = {
    kinds.EVENT_HANDLER: (IMPORT_OSGI_EVENT,),
    kinds.FACTS_VALIDATOR: (IMPORT_OSGI_EVENT,),
    kinds.PROCESS_MAPPED: (IMPORT_OSGI_FRAMEWORK,),
    kinds.JASPER_REPORT: (IMPORT_OSGI_FRAMEWORK,),
    kinds.BASE_TEST: (IMPORT_IDEMPIERE_TEST, IMPORT_JUNIT),
    kinds.WLISTBOX_EDITOR: (IMPORT_MINIGRID,),
}


def required_imports(kind: str) -> list[str]:
    """Packages a component kind needs in ``Import-Package``."""
    return list(_IMPORTS_BY_KIND.get(kind, ()))


def _header_pattern(header: str) -> re.Pattern[str]:
    # A header value continues on lines starting with a space or tab
    return re.compile(
        rf"^({re.escape(header)}:[ \t]*)([^\n]*(?:\n[ \t][^\n]*)*)",
        re.MULTILINE,
    )


def _split_entries(value: str) -> list[str]:
    """Split a header value on commas that are not inside a quoted attribute."""
    entries: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in value:
        if char == '"':
            in_quotes = not in_quotes
        if char == "," and not in_quotes:
            entries.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    entries.append("".join(current).strip())
    return [entry for entry in entries if entry]


def _unfold(value: str) -> str:
    return re.sub(r"\n[ \t]", "", value)


def entry_name(entry: str) -> str:
    """``org.foo;bundle-version="1.0"`` -> ``org.foo``."""
    return entry.split(";", 1)[0].strip()


def parse_header_entries(content: str, header: str) -> list[str]:
    """Raw entries of a comma-separated header, empty if the header is absent."""
    match = _header_pattern(header).search(content.replace("\r\n", "\n"))
    if match is None:
        return []
    return _split_entries(_unfold(match.group(2)))


def _merge_header(
    content: str,
    header: str,
    entries: Iterable[str],
    is_present: Callable[[str, list[str]], bool],
) -> tuple[str, list[str]]:
    existing = parse_header_entries(content, header)
    to_add: list[str] = []
    for entry in entries:
        if is_present(entry, existing) or is_present(entry, to_add):
            continue
        to_add.append(entry)
    if not to_add:
        return content, []

    pattern = _header_pattern(header)
    match = pattern.search(content)
    if match is not None:
        value = match.group(2).rstrip()
        if value.endswith(","):
            value = value[:-1]
        if value.strip():
            new_value = value + "".join(f",\n {entry}" for entry in to_add)
        else:
            new_value = ",\n ".join(to_add)
        return content[: match.start(2)] + new_value + content[match.end(2):], to_add

    block = f"{header}: " + ",\n ".join(to_add) + "\n"
    for anchor in _INSERT_ANCHORS.get(header, ()):
        anchor_match = re.search(rf"^{re.escape(anchor)}:", content, re.MULTILINE)
        if anchor_match is not None:
            index = anchor_match.start()
            return content[:index] + block + content[index:], to_add

    body = content.rstrip("\n")
    trailing = content[len(body):] or "\n"
    return body + "\n" + block.rstrip("\n") + trailing, to_add


def _same_name(entry: str, existing: list[str]) -> bool:
    name = entry_name(entry)
    return any(entry_name(other) == name for other in existing)


def _covered_path(entry: str, existing: list[str]) -> bool:
    return any(other == entry or fnmatchcase(entry, other) for other in existing)


def merge_require_bundles(content: str, bundles: Iterable[str]) -> tuple[str, list[str]]:
    """Add bundles missing from ``Require-Bundle``; returns new text and the added entries."""
    return _merge_header(content, REQUIRE_BUNDLE, bundles, _same_name)


def merge_import_packages(content: str, imports: Iterable[str]) -> tuple[str, list[str]]:
    return _merge_header(content, IMPORT_PACKAGE, imports, _same_name)


def merge_service_components(content: str, paths: Iterable[str]) -> tuple[str, list[str]]:
    """Register component descriptors not already matched by an entry or wildcard."""
    return _merge_header(content, SERVICE_COMPONENT, paths, _covered_path)


def merge_manifest(
    content: str,
    kind: str,
    service_components: Iterable[str] = (),
) -> tuple[str, list[str]]:
    """Apply every header merge required by ``kind`` to manifest text.

    Returns:
        The new manifest text and a list of human-readable update notes
        (empty when nothing changed).
    """
    crlf = "\r\n" in content
    text = content.replace("\r\n", "\n")
    updates: list[str] = []

    text, bundles = merge_require_bundles(text, required_bundles(kind))
    if bundles:
        updates.append("bundles: " + ", ".join(bundles))
    text, imports = merge_import_packages(text, required_imports(kind))
    if imports:
        updates.append("imports: " + ", ".join(entry_name(i) for i in imports))
    text, components = merge_service_components(text, service_components)
    if components:
        updates.append("service components: " + ", ".join(components))

    if not updates:
        return content, []
    if crlf:
        text = text.replace("\n", "\r\n")
    return text, updates


def add_required_headers(
    plugin_dir: Path,
    kind: str,
    service_components: Iterable[str] = (),
) -> bool:
    """Merge ``kind``'s requirements into ``plugin_dir``'s manifest.

    A missing manifest is reported as a warning and left alone.

    Returns:
        True if the manifest was rewritten.

    Raises:
        ScaffoldError: If the manifest exists but cannot be read or written.
    """
    manifest = plugin_dir / MANIFEST_PATH
    if not manifest.exists():
        print_warning(f"MANIFEST.MF not found at {manifest}")
        return False

    try:
        content = manifest.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScaffoldError(f"Cannot read manifest: {exc}", path=manifest) from exc

    new_content, updates = merge_manifest(content, kind, service_components)
    if not updates:
        return False

    try:
        manifest.write_bytes(new_content.encode("utf-8"))
    except OSError as exc:
        raise ScaffoldError(f"Cannot write manifest: {exc}", path=manifest) from exc
    print_info(f"  Updated MANIFEST.MF with {'; '.join(updates)}")
    return True
