"""Detect shared plugin infrastructure by scanning Java source contents.

Detection looks at file contents, never file names, so custom-named
classes are recognised. Only ``*.java`` files directly inside the source
directory are read: generated infrastructure always lives in the plugin's
root package.

Signatures must stay specific. A false negative only costs a duplicate
class, a false positive leaves the plugin without a required class.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

ACTIVATOR = "activator"
CALLOUT_FACTORY = "callout-factory"
EVENT_MANAGER = "event-manager"

INFRASTRUCTURE_SIGNATURES: dict[str, tuple[str, ...]] = {
    ACTIVATOR: ("Incremental2PackActivator",),
    CALLOUT_FACTORY: ("AnnotationBasedColumnCalloutFactory", "IColumnCalloutFactory"),
    EVENT_MANAGER: ("AnnotationBasedEventManager",),
}

INFRASTRUCTURE_LABELS: dict[str, str] = {
    ACTIVATOR: "Activator",
    CALLOUT_FACTORY: "CalloutFactory",
    EVENT_MANAGER: "EventManager",
}


def _java_sources(src_dir: Path) -> list[Path]:
    if not src_dir.is_dir():
        return []
    return sorted(p for p in src_dir.iterdir() if p.is_file() and p.suffix == ".java")


def _contains_any(path: Path, signatures: Iterable[str]) -> bool:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False
    return any(signature in content for signature in signatures)


def has_shared_component(src_dir: Path, signatures: Iterable[str]) -> bool:
    """True if any first-level ``.java`` file in ``src_dir`` contains a signature."""
    patterns = tuple(signatures)
    return any(_contains_any(path, patterns) for path in _java_sources(src_dir))


class ContentDetector:
    """Capability queries over one source directory.

    Generators only ask ``has_infrastructure(kind)``; how the answer is
    obtained can change without touching them.
    """

    def __init__(self, src_dir: Path) -> None:
        self.src_dir = src_dir

    def has_infrastructure(self, kind: str) -> bool:
        return has_shared_component(self.src_dir, INFRASTRUCTURE_SIGNATURES[kind])

    def find_infrastructure_file(self, kind: str) -> Path | None:
        """First file (by name) carrying ``kind``'s signature."""
        signatures = INFRASTRUCTURE_SIGNATURES[kind]
        for path in _java_sources(self.src_dir):
            if _contains_any(path, signatures):
                return path
        return None
