"""Name derivation for generated classes and bundle identifiers."""

from __future__ import annotations

import re

_SEPARATORS = "-_."

# Trailing module segments that never name a component
_MODULE_SUFFIXES = ("base",)

JAVA_RESERVED_WORDS = frozenset({
    "abstract", "assert", "boolean", "break", "byte", "case", "catch",
    "char", "class", "const", "continue", "default", "do", "double",
    "else", "enum", "extends", "final", "finally", "float", "for", "goto",
    "if", "implements", "import", "instanceof", "int", "interface", "long",
    "native", "new", "package", "private", "protected", "public", "return",
    "short", "static", "strictfp", "super", "switch", "synchronized", "this",
    "throw", "throws", "transient", "try", "void", "volatile", "while",
    "true", "false", "null", "var", "record", "yield",
})

_JAVA_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def to_pascal_case(value: str) -> str:
    """Convert ``value`` to PascalCase, treating ``-``, ``_`` and ``.`` as separators.

    Characters after the first of each word are kept as-is, so
    ``"myPlugin"`` stays ``"MyPlugin"``.
    """
    result: list[str] = []
    capitalize_next = True
    for char in value:
        if char in _SEPARATORS:
            capitalize_next = True
        elif capitalize_next:
            result.append(char.upper())
            capitalize_next = False
        else:
            result.append(char)
    return "".join(result)


def extract_plugin_name(plugin_id: str) -> str:
    """Return the last dotted segment of a plugin identifier."""
    return plugin_id.rsplit(".", 1)[-1]


def component_base_name(plugin_id: str) -> str:
    """Return the PascalCase base used for fresh-scaffold class names.

    The ``.base`` segment of a multi-module plugin id is skipped so that
    ``org.acme.sales`` and ``org.acme.sales.base`` both yield ``Sales``.
    """
    segments = plugin_id.split(".")
    while len(segments) > 1 and segments[-1] in _MODULE_SUFFIXES:
        segments.pop()
    return to_pascal_case(segments[-1])


def is_java_identifier(name: str) -> bool:
    """Check that ``name`` can be used as a Java class name."""
    return bool(_JAVA_IDENTIFIER.match(name)) and name not in JAVA_RESERVED_WORDS


def is_valid_class_name(name: str) -> bool:
    """Check ``name`` is a Java identifier starting with an uppercase letter."""
    return is_java_identifier(name) and name[0].isupper()

