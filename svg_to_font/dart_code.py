"""
Generate the Flutter icon class for a compiled icon font.

The class is first assembled as a small model (library, class, fields and
expressions), rendered to lines and then passed through ``format_dart``.
Each icon becomes a ``static const IconData`` whose code point is written in
hex and whose doc comment names the SVG it came from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .dart_format import format_dart
from .errors import DartFormatError
from .identifiers import sanitize_identifier

FLUTTER_IMPORT = "package:flutter/widgets.dart"
GENERATED_HEADER = "// GENERATED CODE - DO NOT MODIFY BY HAND"
FONT_FAMILY_FIELD = "fontFamily"
FONT_PACKAGE_FIELD = "fontPackage"
ALL_ICONS_FIELD = "all"
UNKNOWN_PATH = "unknown"

# Class members the icon constants must never shadow.
RESERVED_MEMBERS = frozenset({FONT_FAMILY_FIELD, FONT_PACKAGE_FIELD, ALL_ICONS_FIELD})

_DART_NAME = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def dart_string(value: str) -> str:
    """Single-quoted Dart string literal with escapes for ``\\``, ``'`` and ``$``."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("$", "\\$")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def _check_name(name: str, what: str) -> None:
    if not _DART_NAME.match(name):
        raise DartFormatError(f"Invalid Dart {what} name: '{name}'")


def _append(lines: List[str], suffix: str) -> List[str]:
    return lines[:-1] + [lines[-1] + suffix]


def _prefix(prefix: str, lines: List[str]) -> List[str]:
    return [prefix + lines[0]] + lines[1:]


@dataclass(frozen=True)
class Code:
    text: str

    def lines(self) -> List[str]:
        return [self.text]


@dataclass(frozen=True)
class Call:
    callee: str
    positional: Tuple["Expression", ...] = ()
    named: Tuple[Tuple[str, "Expression"], ...] = ()

    def lines(self) -> List[str]:
        out = [f"{self.callee}("]
        for arg in self.positional:
            out.extend(_append(arg.lines(), ","))
        for name, arg in self.named:
            out.extend(_append(_prefix(f"{name}: ", arg.lines()), ","))
        out.append(")")
        return out


@dataclass(frozen=True)
class MapLiteral:
    key_type: str
    value_type: str
    entries: Tuple[Tuple["Expression", "Expression"], ...] = ()

    def lines(self) -> List[str]:
        out = [f"<{self.key_type}, {self.value_type}>{{"]
        for key, value in self.entries:
            key_text = " ".join(key.lines())
            out.extend(_append(_prefix(f"{key_text}: ", value.lines()), ","))
        out.append("}")
        return out


Expression = Union[Code, Call, MapLiteral]


@dataclass(frozen=True)
class DartField:
    name: str
    type: str
    value: Expression
    docs: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_name(self.name, "field")

    def lines(self) -> List[str]:
        docs = [f"/// {doc}" for doc in self.docs]
        value = _prefix(f"static const {self.type} {self.name} = ", self.value.lines())
        return docs + _append(value, ";")


@dataclass(frozen=True)
class DartClass:
    name: str
    fields: Tuple[DartField, ...]
    docs: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_name(self.name, "class")
        seen = set()
        for item in self.fields:
            if item.name == self.name:
                raise DartFormatError(f"Field '{item.name}' cannot share the name of class {self.name}")
            if item.name in seen:
                raise DartFormatError(f"Duplicate field '{item.name}' in class {self.name}")
            seen.add(item.name)

    def lines(self) -> List[str]:
        out = [f"/// {doc}" for doc in self.docs]
        out.append(f"abstract class {self.name} {{")
        out.append(f"{self.name}._();")
        for item in self.fields:
            out.append("")
            out.extend(item.lines())
        out.append("}")
        return out


@dataclass(frozen=True)
class DartLibrary:
    classes: Tuple[DartClass, ...]
    imports: Tuple[str, ...] = ()
    header: Tuple[str, ...] = ()

    def render(self) -> str:
        lines = [f"// {line}" if not line.startswith("//") else line for line in self.header]
        if lines:
            lines.append("")
        for uri in sorted(self.imports):
            lines.append(f"import {dart_string(uri)};")
        for cls in self.classes:
            lines.append("")
            lines.extend(cls.lines())
        return "\n".join(lines) + "\n"


def assign_identifiers(names: Iterable[str], reserved: Iterable[str] = ()) -> Dict[str, str]:
    """Map glyph names to unique sanitized identifiers, in input order.

    A name whose sanitized form is already taken, or listed in ``reserved``,
    gets ``_2``, ``_3``, ...
    """
    used = set(RESERVED_MEMBERS) | set(reserved)
    identifiers: Dict[str, str] = {}
    for name in names:
        base = sanitize_identifier(name)
        ident = base
        suffix = 2
        while ident in used:
            ident = f"{base}_{suffix}"
            suffix += 1
        used.add(ident)
        identifiers[name] = ident
    return identifiers


def _single_line(text: str) -> str:
    return " ".join(text.split())


def build_icon_library(
    class_name: str,
    package_name: Optional[str],
    glyph_map: Mapping[str, int],
    original_paths: Mapping[str, str],
    include_all: bool = False,
) -> DartLibrary:
    # A member may not share the enclosing class name.
    identifiers = assign_identifiers(glyph_map, reserved=(class_name,))

    fields: List[DartField] = [
        DartField(FONT_FAMILY_FIELD, "String", Code(dart_string(class_name))),
        DartField(
            FONT_PACKAGE_FIELD,
            "String?",
            Code(dart_string(package_name) if package_name is not None else "null"),
        ),
    ]

    for name, codepoint in glyph_map.items():
        source = original_paths.get(name, UNKNOWN_PATH)
        fields.append(
            DartField(
                identifiers[name],
                "IconData",
                Call(
                    "IconData",
                    positional=(Code(f"0x{codepoint:x}"),),
                    named=(
                        ("fontFamily", Code(FONT_FAMILY_FIELD)),
                        ("fontPackage", Code(FONT_PACKAGE_FIELD)),
                    ),
                ),
                docs=(f"File: {_single_line(str(source))}",),
            )
        )

    if include_all:
        entries = tuple((Code(dart_string(name)), Code(identifiers[name])) for name in glyph_map)
        fields.append(
            DartField(
                ALL_ICONS_FIELD,
                "Map<String, IconData>",
                MapLiteral("String", "IconData", entries),
                docs=("Every icon in this font, keyed by icon name.",),
            )
        )

    icon_class = DartClass(
        class_name,
        tuple(fields),
        docs=(f"Icons from the {class_name} font. Generated by svg-to-font.",),
    )
    return DartLibrary(
        classes=(icon_class,),
        imports=(FLUTTER_IMPORT,),
        header=(GENERATED_HEADER,),
    )


def generate_dart_source(
    class_name: str,
    package_name: Optional[str],
    glyph_map: Mapping[str, int],
    original_paths: Mapping[str, str],
    include_all: bool = False,
) -> str:
    library = build_icon_library(class_name, package_name, glyph_map, original_paths, include_all)
    return format_dart(library.render())
