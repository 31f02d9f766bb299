"""Component generator registry.

The registry is closed: one generator class per component kind, keyed by
the identifiers in ``idempiere_cli.core.component_kinds``.
"""

from __future__ import annotations

from idempiere_cli.core import component_kinds as kinds
from idempiere_cli.core.template_renderer import TemplateRenderer
from idempiere_cli.generators.base import ComponentGenerator, GeneratedFiles
from idempiere_cli.generators.business import (
    CalloutGenerator,
    EventHandlerGenerator,
    FactsValidatorGenerator,
    ProcessGenerator,
    ProcessMappedGenerator,
)
from idempiere_cli.generators.integration import BaseTestGenerator, RestExtensionGenerator
from idempiere_cli.generators.reporting import JasperReportGenerator, ReportGenerator
from idempiere_cli.generators.ui import (
    ListboxGroupGenerator,
    WindowValidatorGenerator,
    WListboxEditorGenerator,
    ZkFormGenerator,
    ZkFormZulGenerator,
)

GENERATORS: dict[str, type[ComponentGenerator]] = {
    generator.kind: generator
    for generator in (
        CalloutGenerator,
        EventHandlerGenerator,
        ProcessGenerator,
        ProcessMappedGenerator,
        ZkFormGenerator,
        ZkFormZulGenerator,
        ListboxGroupGenerator,
        WListboxEditorGenerator,
        ReportGenerator,
        JasperReportGenerator,
        WindowValidatorGenerator,
        RestExtensionGenerator,
        FactsValidatorGenerator,
        BaseTestGenerator,
    )
}

if set(GENERATORS) != set(kinds.COMPONENT_KINDS):
    raise RuntimeError("generator registry out of sync with component kinds")


def get_generator(kind: str, renderer: TemplateRenderer) -> ComponentGenerator | None:
    """Instantiate the generator for ``kind``, or None for an unknown kind."""
    generator_cls = GENERATORS.get(kind)
    return generator_cls(renderer) if generator_cls is not None else None


__all__ = [
    "GENERATORS",
    "ComponentGenerator",
    "GeneratedFiles",
    "get_generator",
]
