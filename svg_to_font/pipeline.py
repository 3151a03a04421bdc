"""Run one generation: stage icons, build the font, emit Dart and deliver both."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import FontMode, GenerateConfig
from .dart_code import generate_dart_source
from .errors import DeliveryError, InputNotFoundError
from .process import ProcessRunner
from .strategies import create_generator
from .svg_input import SkippedFile, prepare_icons
from .workspace import build_workspace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    font_path: Path
    dart_path: Path
    glyph_map: Dict[str, int]
    skipped: List[SkippedFile]


def deliver_artifacts(
    font_file: Path,
    dart_source: str,
    font_output_dir: Path,
    class_output_dir: Path,
    file_stem: str,
) -> Tuple[Path, Path]:
    font_target = font_output_dir / f"{file_stem}.ttf"
    dart_target = class_output_dir / f"{file_stem}.dart"
    try:
        font_output_dir.mkdir(parents=True, exist_ok=True)
        class_output_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(font_file, font_target)
        dart_target.write_text(dart_source, encoding="utf-8")
    except OSError as exc:
        raise DeliveryError(f"Failed to write generated files: {exc}") from exc

    logger.info("Checking out font: %s", font_target)
    logger.info("Checking out code: %s", dart_target)
    return font_target, dart_target


def run_generation(config: GenerateConfig, runner: Optional[ProcessRunner] = None) -> GenerationResult:
    config.validate()
    if not config.input_dir.is_dir():
        raise InputNotFoundError(config.input_dir)

    runner = runner or ProcessRunner(verbose=config.verbose, timeout=config.timeout)
    mode = FontMode(config.mode)

    with build_workspace(keep=config.keep_temp, root=config.temp_root) as workspace:
        prepared = prepare_icons(config.input_dir, workspace)

        generator = create_generator(mode, runner, workspace, config.toolchain)
        logger.info("Checking prerequisites for %s mode...", "Color" if mode is FontMode.COLOR else "Mono")
        generator.check_prerequisites()

        logger.info("Generating font...")
        artifact = generator.generate(prepared.files, config.class_name)

        logger.info("Generating Dart code...")
        dart_source = generate_dart_source(
            config.class_name,
            config.package_name,
            artifact.glyph_map,
            prepared.name_map,
            include_all=config.include_all,
        )

        font_path, dart_path = deliver_artifacts(
            artifact.font_file,
            dart_source,
            config.font_output_dir,
            config.class_output_dir,
            config.file_stem,
        )

    if config.delete_input:
        logger.info("Deleting source SVGs...")
        try:
            shutil.rmtree(config.input_dir)
        except OSError as exc:
            raise DeliveryError(f"Failed to delete input directory {config.input_dir}: {exc}") from exc

    return GenerationResult(
        font_path=font_path,
        dart_path=dart_path,
        glyph_map=dict(artifact.glyph_map),
        skipped=list(prepared.skipped),
    )
