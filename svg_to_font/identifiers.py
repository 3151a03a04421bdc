"""Name normalization shared by the input scanner and the Dart emitter.

Icon file names become canonical snake_case keys, and canonical keys become
Dart identifiers. Both transforms are pure and deterministic.
"""

from __future__ import annotations

import re

PLACEHOLDER_NAME = "icon"
LEADING_PREFIX = "icon_"
RESERVED_SUFFIX = "_icon"

IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")
CLASS_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s\-.]+")
_INVALID_CHARS = re.compile(r"[^a-z0-9_]")
_UNDERSCORES = re.compile(r"_{2,}")

# Dart keywords, built-in identifiers and contextual keywords.
DART_RESERVED_WORDS = frozenset(
    {
        "abstract", "as", "assert", "async", "await", "base", "break", "case",
        "catch", "class", "const", "continue", "covariant", "default",
        "deferred", "do", "dynamic", "else", "enum", "export", "extends",
        "extension", "external", "factory", "false", "final", "finally", "for",
        "function", "get", "hide", "if", "implements", "import", "in",
        "inline", "interface", "is", "late", "library", "mixin", "native",
        "new", "null", "of", "on", "operator", "part", "patch", "required",
        "rethrow", "return", "sealed", "set", "show", "source", "static",
        "super", "switch", "sync", "this", "throw", "true", "try", "type",
        "typedef", "var", "void", "when", "while", "with", "yield",
    }
)

# Type names a generated class may not take. Icon identifiers are always
# lower case, so they never clash with these.
RESERVED_CLASS_NAMES = DART_RESERVED_WORDS | {"Function"}


def snake_case(text: str) -> str:
    """Lower-case, underscore-delimited form of ``text`` limited to ``[a-z0-9_]``.

    Camel-case humps and runs of whitespace, hyphens and dots become single
    underscores; any other character outside the allowed set is dropped.
    """
    cleaned = _CAMEL_BOUNDARY.sub("_", text.strip())
    cleaned = _SEPARATORS.sub("_", cleaned).lower()
    cleaned = _INVALID_CHARS.sub("", cleaned)
    cleaned = _UNDERSCORES.sub("_", cleaned)
    return cleaned.strip("_")


def canonical_name(stem: str) -> str:
    return snake_case(stem) or PLACEHOLDER_NAME


def sanitize_identifier(name: str) -> str:
    """Convert an icon name to a valid, non-reserved Dart identifier."""
    safe = snake_case(name)
    if not safe:
        return PLACEHOLDER_NAME
    if not (safe[0].isalpha() or safe[0] == "_"):
        safe = f"{LEADING_PREFIX}{safe}"
    if safe in DART_RESERVED_WORDS:
        safe = f"{safe}{RESERVED_SUFFIX}"
    return safe


def is_valid_class_name(name: str) -> bool:
    return bool(CLASS_NAME_PATTERN.match(name)) and name not in RESERVED_CLASS_NAMES
