"""Monochrome icon fonts built with fantasticon.

fantasticon is installed into the build workspace with npm, never globally,
and driven through a JSON configuration file. Its JSON asset maps each input
base name to the code point it assigned.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, Iterable, List

import jsonschema

from .config import FontMode, ToolchainConfig
from .errors import PrerequisiteError, ToolExecutionError
from .fonts import FontArtifact, check_font_file, load_cmap
from .process import ProcessRunner
from .svg_input import IconSource

logger = logging.getLogger(__name__)

GLYPH_MAP_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": {"type": "integer", "minimum": 0, "maximum": 0x10FFFF},
}

CONFIG_FILE_NAME = "fantasticonrc.json"
INPUT_DIR_NAME = "icons"
OUTPUT_DIR_NAME = "out"


def build_config(font_name: str, input_dir: Path, output_dir: Path) -> dict:
    return {
        "name": font_name,
        "outputDir": str(output_dir),
        "inputDir": str(input_dir),
        "fontTypes": ["ttf"],
        "assetTypes": ["json"],
        "formatOptions": {"json": {"indent": 2}},
    }


def read_glyph_map(path: Path) -> Dict[str, int]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ToolExecutionError(f"{path}: glyph map is not valid JSON: {exc}") from exc
    try:
        jsonschema.Draft202012Validator(GLYPH_MAP_SCHEMA).validate(data)
    except jsonschema.ValidationError as exc:
        raise ToolExecutionError(f"{path}: invalid glyph map: {exc.message}") from exc
    return dict(data)


def verify_glyph_names(glyph_map: Dict[str, int], expected: Iterable[str]) -> None:
    expected_names = set(expected)
    missing = sorted(expected_names - glyph_map.keys())
    unexpected = sorted(glyph_map.keys() - expected_names)
    if missing or unexpected:
        problems = []
        if missing:
            problems.append(f"missing: {', '.join(missing)}")
        if unexpected:
            problems.append(f"unexpected: {', '.join(unexpected)}")
        raise ToolExecutionError(f"fantasticon glyph map does not match the input icons ({'; '.join(problems)})")


def verify_codepoints(font_file: Path, glyph_map: Dict[str, int]) -> None:
    cmap = load_cmap(font_file)
    absent = sorted(name for name, cp in glyph_map.items() if cp not in cmap)
    if absent:
        raise ToolExecutionError(f"{font_file} has no glyphs for: {', '.join(absent)}")


class FantasticonGenerator:
    mode = FontMode.MONO

    def __init__(
        self,
        runner: ProcessRunner,
        workspace: Path,
        toolchain: ToolchainConfig = ToolchainConfig(),
    ) -> None:
        self.runner = runner
        self.workspace = workspace
        self.toolchain = toolchain

    def check_prerequisites(self) -> None:
        try:
            self.runner.execute(self.toolchain.node, ["--version"])
            self.runner.execute(self.toolchain.npm, ["--version"])
        except ToolExecutionError as exc:
            raise PrerequisiteError(
                "Node.js and npm are required for monochrome fonts. "
                "Install them from https://nodejs.org/ and make sure both are on PATH."
            ) from exc

    def _install(self) -> Path:
        package_json = self.workspace / "package.json"
        package_json.write_text(
            json.dumps({"name": "svg_to_font_build", "private": True}),
            encoding="utf-8",
        )
        logger.info("Installing fantasticon in temporary workspace...")
        self.runner.execute(
            self.toolchain.npm,
            ["install", "--no-audit", "--no-fund", self.toolchain.fantasticon_package],
            cwd=self.workspace,
        )
        binary = "fantasticon.cmd" if os.name == "nt" else "fantasticon"
        return self.workspace / "node_modules" / ".bin" / binary

    def generate(self, icons: List[IconSource], class_name: str) -> FontArtifact:
        # fantasticon uses the name for both the font family and the output files.
        font_name = class_name
        binary = self._install()

        input_dir = self.workspace / INPUT_DIR_NAME
        input_dir.mkdir(exist_ok=True)
        for icon in icons:
            shutil.copyfile(icon.path, input_dir / f"{icon.canonical_name}.svg")

        output_dir = self.workspace / OUTPUT_DIR_NAME
        output_dir.mkdir(exist_ok=True)

        config_path = self.workspace / CONFIG_FILE_NAME
        config_path.write_text(
            json.dumps(build_config(font_name, input_dir, output_dir), indent=2),
            encoding="utf-8",
        )

        logger.info("Running fantasticon...")
        self.runner.execute(binary, ["-c", config_path], cwd=self.workspace)

        font_file = output_dir / f"{font_name}.ttf"
        map_file = output_dir / f"{font_name}.json"
        missing = [path.name for path in (font_file, map_file) if not path.is_file()]
        if missing:
            raise ToolExecutionError(f"fantasticon failed to produce output files: {', '.join(missing)}")

        check_font_file(font_file)
        glyph_map = read_glyph_map(map_file)
        verify_glyph_names(glyph_map, (icon.canonical_name for icon in icons))
        verify_codepoints(font_file, glyph_map)
        logger.debug("fantasticon assigned %d code points", len(glyph_map))
        return FontArtifact(font_file, glyph_map)
