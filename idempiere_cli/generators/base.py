"""Common protocol for component generators.

Context keys
------------
Every context passed to ``generate``/``add_to_existing`` contains:

``pluginId``
    Bundle symbolic name; also the Java package of generated classes.
``className``
    Target class name (``add_to_existing`` only).

Fresh scaffolds also pass the sibling-feature flags ``hasEventHandler`` and
``hasProcessMapped``. The engine sets them once before any generator runs,
so a generator can skip infrastructure an earlier sibling creates.

Kind-specific keys such as ``resourcePath`` (rest-extension) or ``prompt``
come from the caller or from a content source.

Generators never mutate the context they receive; they render from copies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from idempiere_cli.core.content_detector import INFRASTRUCTURE_LABELS, ContentDetector
from idempiere_cli.core.manifest_merger import add_required_headers
from idempiere_cli.core.scaffold_result import ErrorCode, ScaffoldError
from idempiere_cli.core.template_renderer import TemplateRenderer
from idempiere_cli.helpers.helpers_logging import print_info
from idempiere_cli.helpers.naming import component_base_name, extract_plugin_name

OSGI_INF = "OSGI-INF"

HAS_EVENT_HANDLER = "hasEventHandler"
HAS_PROCESS_MAPPED = "hasProcessMapped"


@dataclass
class GeneratedFiles:
    """What a generator run wrote, reused or registered."""

    created: list[Path] = field(default_factory=list)
    reused: list[Path] = field(default_factory=list)
    service_components: list[str] = field(default_factory=list)

    def extend(self, other: GeneratedFiles) -> None:
        self.created.extend(other.created)
        self.reused.extend(other.reused)
        self.service_components.extend(other.service_components)


class ComponentGenerator(ABC):
    """Emit the files of one component kind.

    Subclasses set ``kind`` and implement both modes:

    - ``generate``: fresh scaffold; class names derive from the plugin id.
    - ``add_to_existing``: incremental add; class names derive from
      ``context["className"]``, shared infrastructure is created only when
      the content detector finds none, and the manifest is merged last.
    """

    kind: ClassVar[str]

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    @abstractmethod
    def generate(self, src_dir: Path, project_root: Path, context: Mapping[str, object]) -> GeneratedFiles:
        """Create the component for a brand-new plugin."""

    @abstractmethod
    def add_to_existing(self, src_dir: Path, plugin_dir: Path, context: Mapping[str, object]) -> GeneratedFiles:
        """Add the component to an existing plugin."""

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @staticmethod
    def base_name(context: Mapping[str, object]) -> str:
        return component_base_name(_require(context, "pluginId"))

    @staticmethod
    def plugin_name(context: Mapping[str, object]) -> str:
        return extract_plugin_name(_require(context, "pluginId"))

    @staticmethod
    def class_name(context: Mapping[str, object]) -> str:
        return _require(context, "className")

    def render(
        self,
        template: str,
        context: Mapping[str, object],
        target: Path,
        result: GeneratedFiles,
        **overrides: object,
    ) -> None:
        data = {**context, **overrides}
        if self.renderer.render_to_file(template, data, target):
            result.created.append(target)

    def render_java(
        self,
        template: str,
        src_dir: Path,
        class_name: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
        **overrides: object,
    ) -> None:
        """Render ``template`` into ``src_dir/<class_name>.java``."""
        self.render(template, context, src_dir / f"{class_name}.java", result, className=class_name, **overrides)

    def register_component(
        self,
        plugin_dir: Path,
        class_name: str,
        service_interface: str,
        context: Mapping[str, object],
        result: GeneratedFiles,
        event_manager_reference: bool = False,
    ) -> None:
        """Write an ``OSGI-INF/<class>.xml`` service-component descriptor for ``class_name``."""
        relative = f"{OSGI_INF}/{class_name}.xml"
        self.render(
            "osgi/component.xml.j2",
            context,
            plugin_dir / relative,
            result,
            componentClass=class_name,
            serviceInterface=service_interface,
            eventManagerReference=event_manager_reference,
        )
        result.service_components.append(relative)

    def ensure_infrastructure(self, src_dir: Path, infrastructure: str, result: GeneratedFiles) -> bool:
        """Check for shared infrastructure before creating it.

        Returns:
            True if the caller should create it. When it already exists the
            reused file is recorded and a notice is printed instead.
        """
        detector = ContentDetector(src_dir)
        if not detector.has_infrastructure(infrastructure):
            return True
        existing = detector.find_infrastructure_file(infrastructure)
        label = INFRASTRUCTURE_LABELS[infrastructure]
        if existing is not None:
            result.reused.append(existing)
            print_info(f"  Using existing {label} ({existing.name})")
        else:
            print_info(f"  Using existing {label}")
        return False

    def merge_manifest(self, plugin_dir: Path, result: GeneratedFiles) -> None:
        add_required_headers(plugin_dir, self.kind, result.service_components)


def _require(context: Mapping[str, object], key: str) -> str:
    value = context.get(key)
    if not isinstance(value, str) or not value:
        raise ScaffoldError(f"Generation context is missing '{key}'", code=ErrorCode.INVALID_ARGUMENT)
    return value
