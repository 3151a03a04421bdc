"""Canonical layout for generated Dart code.

The emitter produces unindented lines; this pass indents them by bracket
depth (two spaces per level), trims trailing whitespace, collapses blank-line
runs and refuses input whose brackets or string literals do not balance.
Only ``//`` comments are understood, which is all the emitter writes.
"""

from __future__ import annotations

from typing import List, Tuple

from .errors import DartFormatError

INDENT = "  "
_OPENERS = "([{"
_CLOSERS = ")]}"
_PAIRS = {")": "(", "]": "[", "}": "{"}


def _brackets(line: str, lineno: int) -> List[str]:
    found: List[str] = []
    quote = None
    i = 0
    while i < len(line):
        ch = line[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif line.startswith("//", i):
            break
        elif ch in _OPENERS or ch in _CLOSERS:
            found.append(ch)
        i += 1
    if quote:
        raise DartFormatError(f"line {lineno}: unterminated string literal")
    return found


def _leading_closers(line: str) -> int:
    count = 0
    for ch in line:
        if ch not in _CLOSERS:
            break
        count += 1
    return count


def format_dart(source: str) -> str:
    stack: List[Tuple[str, int]] = []
    out: List[str] = []
    blank_pending = False

    for lineno, raw in enumerate(source.splitlines(), start=1):
        line = raw.strip()
        if not line:
            blank_pending = bool(out)
            continue

        depth = max(len(stack) - _leading_closers(line), 0)
        if blank_pending and line[0] not in _CLOSERS:
            out.append("")
        blank_pending = False
        out.append(f"{INDENT * depth}{line}")

        for ch in _brackets(line, lineno):
            if ch in _OPENERS:
                stack.append((ch, lineno))
                continue
            if not stack or stack[-1][0] != _PAIRS[ch]:
                raise DartFormatError(f"line {lineno}: unexpected '{ch}'")
            stack.pop()

    if stack:
        ch, lineno = stack[-1]
        raise DartFormatError(f"line {lineno}: unclosed '{ch}'")
    if not out:
        raise DartFormatError("nothing to format")
    return "\n".join(out) + "\n"
