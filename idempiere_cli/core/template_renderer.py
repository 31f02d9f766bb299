"""Jinja2 template rendering for generated plugin files.

Templates live in the package's ``templates/`` directory, addressed by a
relative logical name such as ``callout/Callout.java.j2``. Existing files
are never overwritten: a second scaffold over the same tree reports the
file as skipped and leaves it alone.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from xml.sax.saxutils import escape

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    UndefinedError,
    select_autoescape,
)

from idempiere_cli.core.scaffold_result import RenderError
from idempiere_cli.helpers.helpers_logging import print_created, print_skipped
from idempiere_cli.helpers.naming import to_pascal_case

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def _xml_escape(value: object) -> str:
    return escape(str(value), {'"': "&quot;", "'": "&apos;"})


class TemplateRenderer:
    """Render catalog templates into files under a project tree."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["pascal_case"] = to_pascal_case
        self.env.filters["xml_escape"] = _xml_escape

    def render(self, template_name: str, context: dict[str, object]) -> str:
        """Render a template to a string.

        Raises:
            RenderError: If the template is missing or references a key
                absent from ``context``.
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound as exc:
            raise RenderError(f"Template not found: {template_name}") from exc
        except UndefinedError as exc:
            raise RenderError(f"Template '{template_name}' is missing data: {exc.message}") from exc
        except TemplateError as exc:
            raise RenderError(f"Failed to render template '{template_name}': {exc}") from exc

    def render_to_file(self, template_name: str, context: dict[str, object], target: Path) -> bool:
        """Render ``template_name`` into ``target``.

        Returns:
            True if the file was written, False if it already existed.
        """
        if target.exists():
            print_skipped(str(target))
            return False
        content = self.render(template_name, context)
        self._write(target, content)
        return True

    def copy_resource(self, resource_name: str, target: Path) -> bool:
        """Copy a catalog file byte-for-byte, with no template substitution.

        Used for assets such as ``.zul`` pages whose ``${...}`` expressions
        would otherwise be read as template syntax.
        """
        source = self.templates_dir / resource_name
        if not source.is_file():
            raise RenderError(f"Resource not found: {resource_name}", path=source)
        if target.exists():
            print_skipped(str(target))
            return False
        self._ensure_parent(target)
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            raise RenderError(f"Cannot copy resource {resource_name}: {exc}", path=target) from exc
        print_created(str(target))
        return True

    def write_text(self, target: Path, content: str) -> bool:
        """Write fixed content under the same skip-if-exists rule."""
        if target.exists():
            print_skipped(str(target))
            return False
        self._write(target, content)
        return True

    def _write(self, target: Path, content: str) -> None:
        self._ensure_parent(target)
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise RenderError(f"Cannot write file: {exc}", path=target) from exc
        print_created(str(target))

    @staticmethod
    def _ensure_parent(target: Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RenderError(f"Cannot create directory: {exc}", path=target.parent) from exc
