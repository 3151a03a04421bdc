"""Color icon fonts built with nanoemoji.

nanoemoji runs from a virtual environment created inside the build
workspace. It reads each glyph's code point from the file name, so icons are
copied to ``emoji_u<hex>.svg`` after code points are assigned sequentially
from the start of the private use area.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Dict, Iterable, List

from .config import (
    COLOR_ADVANCE_WIDTH,
    COLOR_ASCENDER,
    COLOR_DESCENDER,
    COLOR_FORMAT,
    COLOR_UPEM,
    PUA_START,
    FontMode,
    ToolchainConfig,
)
from .errors import PrerequisiteError, ToolExecutionError
from .fonts import FontArtifact, check_font_file
from .identifiers import snake_case
from .process import ProcessRunner
from .svg_input import IconSource

logger = logging.getLogger(__name__)

VENV_DIR_NAME = "venv"
PREPARED_DIR_NAME = "prepared_icons"
BUILD_DIR_NAME = "build"


def assign_codepoints(icons: Iterable[IconSource], start: int = PUA_START) -> Dict[str, int]:
    """Give each icon a code point, ascending in canonical-name order."""
    ordered = sorted(icons, key=lambda icon: icon.canonical_name)
    return {icon.canonical_name: start + index for index, icon in enumerate(ordered)}


def codepoint_filename(codepoint: int) -> str:
    return f"emoji_u{codepoint:04x}.svg"


def build_args(family: str, output_file: Path, build_dir: Path, svg_files: List[Path]) -> List[str]:
    return [
        f"--family={family}",
        f"--upem={COLOR_UPEM}",
        f"--ascender={COLOR_ASCENDER}",
        f"--descender={COLOR_DESCENDER}",
        f"--width={COLOR_ADVANCE_WIDTH}",
        # COLRv1 outlines: vector only, no bitmap tables.
        f"--color_format={COLOR_FORMAT}",
        f"--build_dir={build_dir}",
        f"--output_file={output_file}",
        *(str(path) for path in svg_files),
    ]


class NanoemojiGenerator:
    mode = FontMode.COLOR

    def __init__(
        self,
        runner: ProcessRunner,
        workspace: Path,
        toolchain: ToolchainConfig = ToolchainConfig(),
    ) -> None:
        self.runner = runner
        self.workspace = workspace
        self.toolchain = toolchain

    @property
    def venv_bin_dir(self) -> Path:
        return self.workspace / VENV_DIR_NAME / ("Scripts" if os.name == "nt" else "bin")

    def check_prerequisites(self) -> None:
        try:
            self.runner.execute(self.toolchain.python, ["--version"])
        except ToolExecutionError as exc:
            raise PrerequisiteError(
                "Python 3 is required for color fonts. "
                f"Install Python 3 with the venv module and make sure '{self.toolchain.python}' is on PATH."
            ) from exc

    def _install(self) -> Path:
        logger.info("Creating Python virtual environment...")
        self.runner.execute(self.toolchain.python, ["-m", "venv", self.workspace / VENV_DIR_NAME])

        bin_dir = self.venv_bin_dir
        logger.info("Installing nanoemoji (this may take a moment)...")
        self.runner.execute(
            bin_dir / "pip",
            ["install", self.toolchain.nanoemoji_package, self.toolchain.ninja_package],
            cwd=self.workspace,
        )
        return bin_dir

    def generate(self, icons: List[IconSource], class_name: str) -> FontArtifact:
        bin_dir = self._install()

        glyph_map = assign_codepoints(icons)
        by_name = {icon.canonical_name: icon for icon in icons}

        prepared_dir = self.workspace / PREPARED_DIR_NAME
        prepared_dir.mkdir(exist_ok=True)
        svg_files: List[Path] = []
        for name, codepoint in glyph_map.items():
            target = prepared_dir / codepoint_filename(codepoint)
            shutil.copyfile(by_name[name].path, target)
            svg_files.append(target)

        output_file = self.workspace / f"{snake_case(class_name)}.ttf"
        build_dir = self.workspace / BUILD_DIR_NAME

        logger.info("Running nanoemoji...")
        # ninja is installed next to nanoemoji and must be found on PATH.
        self.runner.execute(
            bin_dir / "nanoemoji",
            build_args(class_name, output_file, build_dir, svg_files),
            cwd=self.workspace,
            extra_path=[bin_dir],
        )

        check_font_file(output_file)
        # The COLR table is not read back; the assignment above is authoritative.
        return FontArtifact(output_file, glyph_map)
