from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import WORKSPACE_PREFIX

logger = logging.getLogger(__name__)


@contextmanager
def build_workspace(keep: bool = False, root: Path | None = None) -> Iterator[Path]:
    """Create a private, uniquely named build directory for one run.

    The directory is removed when the block exits, whether or not it raised,
    unless ``keep`` is set.
    """
    path = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=root))
    logger.debug("Workspace created at: %s", path)
    try:
        yield path
    finally:
        if keep:
            logger.info("Keeping temp workspace at: %s", path)
        else:
            try:
                shutil.rmtree(path)
                logger.debug("Workspace cleaned up.")
            except OSError as exc:
                logger.warning("Failed to clean workspace %s: %s", path, exc)
