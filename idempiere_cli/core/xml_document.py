"""Structured XML documents with format-preserving edits.

Incremental edits to poms, ``category.xml`` and ``feature.xml`` are spliced
into the original text. Only the bytes of the inserted child change, so
hand-maintained files keep their indentation, comments and attribute
quoting. ``xml.etree`` is only used to check well-formedness and to build
and pretty-print brand-new documents.

Two save operations exist and call sites pick one explicitly:

- ``save_preserving``: write the (spliced) original text back untouched.
- ``save_pretty``: re-indent the whole tree; meant for new documents.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from xml.sax.saxutils import unescape

from idempiere_cli.core.scaffold_result import ErrorCode, ScaffoldError

MAVEN_POM_NS = "http://maven.apache.org/POM/4.0.0"
ET.register_namespace("", MAVEN_POM_NS)
ET.register_namespace("xsi", "http://www.w3.org/2001/XMLSchema-instance")

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
DEFAULT_INDENT = "    "

_TOKEN = re.compile(
    r"<!--.*?-->"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|<\?.*?\?>"
    r"|<!DOCTYPE[^>]*>"
    r"|<(/?)([A-Za-z_][\w:.-]*)((?:[^>\"']|\"[^\"]*\"|'[^']*')*?)(/?)>",
    re.DOTALL,
)
_ATTRIBUTE = re.compile(r"([A-Za-z_][\w:.-]*)\s*=\s*(?:\"([^\"]*)\"|'([^']*)')")


def _local_name(tag: str) -> str:
    return tag.rsplit(":", 1)[-1]


@dataclass
class ElementSpan:
    """Location of one element in the document text.

    ``start``/``end`` bound the whole element; ``content_start`` and
    ``content_end`` bound what lies between its tags (equal to ``end`` for
    self-closing elements).
    """

    path: tuple[str, ...]
    start: int
    content_start: int
    content_end: int
    end: int
    self_closing: bool
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def tag(self) -> str:
        return self.path[-1]


def _parse_attributes(raw: str) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(raw):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attributes[_local_name(match.group(1))] = unescape(value, {"&quot;": '"', "&apos;": "'"})
    return attributes


class XmlDocument:
    """An XML document held as text, queried and edited by element path.

    Paths are slash-separated local names from the root element, e.g.
    ``project/modules`` or ``site/category-def``. Namespace prefixes and
    default namespaces are ignored for matching.
    """

    def __init__(self, text: str, path: Path | None = None) -> None:
        self.path = path
        self.newline = "\r\n" if "\r\n" in text else "\n"
        self.text = text
        self._validate()
        self._spans = self._scan()

    @classmethod
    def load(cls, path: Path) -> XmlDocument:
        """Read and validate a document.

        Raises:
            ScaffoldError: If the file cannot be read or is not well-formed XML.
        """
        try:
            text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ScaffoldError(f"Cannot read {path.name}: {exc}", code=ErrorCode.IO_ERROR, path=path) from exc
        return cls(text, path)

    @classmethod
    def from_element(cls, root: ET.Element) -> XmlDocument:
        """Wrap a freshly built element tree."""
        return cls(ET.tostring(root, encoding="unicode"))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, path: str) -> list[ElementSpan]:
        wanted = tuple(path.split("/"))
        return [span for span in self._spans if span.path == wanted]

    def find_first(self, path: str) -> ElementSpan | None:
        spans = self.find(path)
        return spans[0] if spans else None

    def text_of(self, span: ElementSpan) -> str:
        if span.self_closing:
            return ""
        return unescape(self.text[span.content_start:span.content_end]).strip()

    def child_texts(self, path: str) -> list[str]:
        """Text content of every element at ``path``."""
        return [self.text_of(span) for span in self.find(path)]

    def has_element(self, path: str, **attributes: str) -> bool:
        """True if an element at ``path`` carries all the given attribute values."""
        return any(
            all(span.attributes.get(name) == value for name, value in attributes.items())
            for span in self.find(path)
        )

    def first_attribute(self, path: str, attribute: str) -> str | None:
        for span in self.find(path):
            if attribute in span.attributes:
                return span.attributes[attribute]
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert_child(self, parent_path: str, fragment: str, before: str | None = None) -> None:
        """Splice ``fragment`` in as the last child of ``parent_path``.

        With ``before``, the fragment goes in front of the first direct child
        with that local name instead, when one exists. The fragment is
        indented like its new siblings; continuation lines of a multi-line
        fragment get the same indentation prefix.

        Raises:
            ScaffoldError: If ``parent_path`` does not exist.
        """
        parent = self.find_first(parent_path)
        if parent is None:
            raise ScaffoldError(
                f"Element <{parent_path}> not found",
                code=ErrorCode.IO_ERROR,
                path=self.path,
            )

        parent_indent = self._line_indent(parent.start)
        children = self._direct_children(parent)
        if children:
            child_indent = self._line_indent(children[0].start)
        else:
            child_indent = parent_indent + self._indent_unit(parent)
        body = self._indent_fragment(fragment, child_indent)

        if parent.self_closing:
            open_tag = self.text[parent.start:parent.end].rstrip("/>").rstrip() + ">"
            replacement = (
                f"{open_tag}{self.newline}{child_indent}{body}{self.newline}"
                f"{parent_indent}</{self._raw_tag(parent)}>"
            )
            self._replace(parent.start, parent.end, replacement)
            return

        anchor = None
        if before is not None:
            anchor = next((child for child in children if child.tag == before), None)
        position = anchor.start if anchor is not None else parent.content_end

        line_start = self.text.rfind("\n", 0, position) + 1
        if self.text[line_start:position].strip() == "" and line_start > parent.content_start:
            # Target sits on its own line: add a full line above it
            self._replace(line_start, line_start, f"{child_indent}{body}{self.newline}")
        elif anchor is not None:
            self._replace(position, position, f"{body}{self.newline}{child_indent}")
        else:
            self._replace(position, position, f"{self.newline}{child_indent}{body}{self.newline}{parent_indent}")

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def save_preserving(self, path: Path | None = None) -> None:
        """Write the document text back exactly as edited."""
        target = self._target(path)
        try:
            target.write_bytes(self.text.encode("utf-8"))
        except OSError as exc:
            raise ScaffoldError(f"Cannot write {target.name}: {exc}", code=ErrorCode.IO_ERROR, path=target) from exc

    def save_pretty(self, path: Path | None = None) -> None:
        """Re-indent the whole tree (4 spaces) and write it with an XML declaration."""
        target = self._target(path)
        root = ET.fromstring(self.text.encode("utf-8"))
        for element in root.iter():
            if element.text is not None and not element.text.strip():
                element.text = None
            if element.tail is not None and not element.tail.strip():
                element.tail = None
        ET.indent(root, space=DEFAULT_INDENT)
        content = f"{XML_DECLARATION}\n{ET.tostring(root, encoding='unicode')}\n"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ScaffoldError(f"Cannot write {target.name}: {exc}", code=ErrorCode.IO_ERROR, path=target) from exc
        self.text = content
        self.newline = "\n"
        self._spans = self._scan()
        self.path = target

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _target(self, path: Path | None) -> Path:
        target = path or self.path
        if target is None:
            raise ScaffoldError("No path to save document to", code=ErrorCode.IO_ERROR)
        return target

    def _validate(self) -> None:
        try:
            ET.fromstring(self.text.encode("utf-8"))
        except ET.ParseError as exc:
            name = self.path.name if self.path is not None else "document"
            raise ScaffoldError(f"Malformed XML in {name}: {exc}", code=ErrorCode.IO_ERROR, path=self.path) from exc

    def _scan(self) -> list[ElementSpan]:
        spans: list[ElementSpan] = []
        stack: list[ElementSpan] = []
        for match in _TOKEN.finditer(self.text):
            name = match.group(2)
            if name is None:
                continue
            local = _local_name(name)
            if match.group(1):
                if stack:
                    span = stack.pop()
                    span.content_end = match.start()
                    span.end = match.end()
                continue
            path = (*stack[-1].path, local) if stack else (local,)
            span = ElementSpan(
                path=path,
                start=match.start(),
                content_start=match.end(),
                content_end=match.end(),
                end=match.end(),
                self_closing=bool(match.group(4)),
                attributes=_parse_attributes(match.group(3)),
            )
            spans.append(span)
            if not span.self_closing:
                stack.append(span)
        return spans

    def _direct_children(self, parent: ElementSpan) -> list[ElementSpan]:
        depth = len(parent.path) + 1
        return [
            span for span in self._spans
            if len(span.path) == depth
            and span.path[:-1] == parent.path
            and parent.content_start <= span.start < parent.content_end
        ]

    def _line_indent(self, position: int) -> str:
        line_start = self.text.rfind("\n", 0, position) + 1
        prefix = self.text[line_start:position]
        return prefix if prefix.strip() == "" else ""

    def _indent_unit(self, parent: ElementSpan) -> str:
        """Indentation step used by the document, guessed from the parent's nesting."""
        depth = len(parent.path) - 1
        indent = self._line_indent(parent.start)
        if depth > 0 and indent and len(indent) % depth == 0:
            return indent[: len(indent) // depth]
        return DEFAULT_INDENT

    def _indent_fragment(self, fragment: str, indent: str) -> str:
        lines = fragment.strip("\n").split("\n")
        return (self.newline + indent).join(line.rstrip("\r") for line in lines)

    def _raw_tag(self, span: ElementSpan) -> str:
        match = _TOKEN.match(self.text, span.start)
        return match.group(2) if match is not None and match.group(2) else span.tag

    def _replace(self, start: int, end: int, replacement: str) -> None:
        self.text = self.text[:start] + replacement + self.text[end:]
        self._validate()
        self._spans = self._scan()
