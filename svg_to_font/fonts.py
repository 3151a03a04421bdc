from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Protocol

from fontTools.ttLib import TTFont

from .config import MIN_FONT_BYTES
from .errors import ToolExecutionError
from .svg_input import IconSource


@dataclass(frozen=True)
class FontArtifact:
    font_file: Path
    # glyph name -> code point, in the order constants are emitted
    glyph_map: Dict[str, int]


class FontGenerator(Protocol):
    def check_prerequisites(self) -> None:
        ...

    def generate(self, icons: List[IconSource], class_name: str) -> FontArtifact:
        ...


def check_font_file(path: Path, min_bytes: int = MIN_FONT_BYTES) -> None:
    """Reject missing, near-empty or unreadable font output.

    External tools occasionally exit with status 0 without writing a real font,
    so the exit code alone is not trusted.
    """
    if not path.is_file():
        raise ToolExecutionError(f"Font file was not produced: {path}")
    size = path.stat().st_size
    if size <= min_bytes:
        raise ToolExecutionError(f"Font file {path} is implausibly small ({size} bytes)")
    try:
        with TTFont(path) as font:
            font["head"]
    except Exception as exc:  # noqa: BLE001
        raise ToolExecutionError(f"Unable to read font {path}: {exc}") from exc


def load_cmap(path: Path) -> Dict[int, str]:
    with TTFont(path) as font:
        return dict(font.getBestCmap() or {})
