"""Collect icon files from an input directory and stage them for the font tools."""

from __future__ import annotations

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple

from .errors import EmptyInputError, InputError, InputNotFoundError
from .identifiers import canonical_name

logger = logging.getLogger(__name__)

VECTOR_EXTENSIONS = {".svg"}
RASTER_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tif", ".tiff", ".ico"}
RASTER_REASON = "color fonts require vector input"
STAGING_DIR_NAME = "raw_icons"


class IconKind(str, Enum):
    VECTOR = "vector"
    RASTER = "raster"


@dataclass(frozen=True)
class IconSource:
    canonical_name: str
    original_path: Path
    path: Path
    kind: IconKind = IconKind.VECTOR


@dataclass(frozen=True)
class SkippedFile:
    path: Path
    reason: str


@dataclass(frozen=True)
class PreparedIcons:
    files: List[IconSource]
    # canonical name -> original file path, used for comments in generated code
    name_map: Dict[str, str]
    skipped: List[SkippedFile] = field(default_factory=list)


def classify(path: Path) -> IconKind | None:
    ext = path.suffix.lower()
    if ext in VECTOR_EXTENSIONS:
        return IconKind.VECTOR
    if ext in RASTER_EXTENSIONS:
        return IconKind.RASTER
    return None


def scan_input_dir(input_dir: Path) -> Tuple[List[Path], List[SkippedFile]]:
    """
    Recursively find accepted vector files in sorted path order.

    Raster images are returned as skipped entries; files with other
    extensions are ignored.
    """
    accepted: List[Path] = []
    skipped: List[SkippedFile] = []
    for path in sorted(input_dir.rglob("*")):
        if not path.is_file():
            continue
        kind = classify(path)
        if kind is IconKind.VECTOR:
            accepted.append(path)
        elif kind is IconKind.RASTER:
            logger.warning("Skipping %s: %s", path, RASTER_REASON)
            skipped.append(SkippedFile(path, RASTER_REASON))
    return accepted, skipped


def assign_canonical_names(paths: List[Path]) -> List[Tuple[str, Path]]:
    """
    Pair each path with a unique canonical name.

    When several files normalize to the same name, the first keeps it and the
    rest get the smallest free numeric suffix (``home``, ``home_2``, ...).
    """
    bases = [canonical_name(path.stem) for path in paths]
    taken = set(bases)
    used: set[str] = set()
    named: List[Tuple[str, Path]] = []

    for base, path in zip(bases, paths):
        name = base
        if name in used:
            suffix = 2
            while f"{base}_{suffix}" in used or f"{base}_{suffix}" in taken:
                suffix += 1
            name = f"{base}_{suffix}"
            logger.warning("Duplicate icon name '%s' from %s; renamed to '%s'", base, path, name)
        used.add(name)
        named.append((name, path))
    return named


def prepare_icons(input_dir: Path, workspace: Path, jobs: int | None = None) -> PreparedIcons:
    """
    Scan ``input_dir`` and copy every accepted icon into the workspace.

    Staged copies are named ``<canonical>.svg`` so the font tools only ever
    see safe file names.
    """
    if not input_dir.is_dir():
        raise InputNotFoundError(input_dir)

    accepted, skipped = scan_input_dir(input_dir)
    if not accepted:
        raise EmptyInputError(input_dir)

    staging_dir = workspace / STAGING_DIR_NAME
    staging_dir.mkdir(parents=True, exist_ok=True)

    files: List[IconSource] = []
    name_map: Dict[str, str] = {}
    for name, path in assign_canonical_names(accepted):
        files.append(IconSource(name, path, staging_dir / f"{name}.svg"))
        name_map[name] = str(path)

    try:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            list(pool.map(lambda icon: shutil.copyfile(icon.original_path, icon.path), files))
    except OSError as exc:
        raise InputError(f"Unable to stage input file: {exc}") from exc

    logger.info("Found %d SVG icons in %s", len(files), input_dir)
    if skipped:
        logger.warning("Skipped %d unsupported files", len(skipped))
    return PreparedIcons(files=files, name_map=name_map, skipped=skipped)
