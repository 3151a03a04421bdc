from __future__ import annotations

from pathlib import Path

from .config import FontMode, ToolchainConfig
from .fantasticon import FantasticonGenerator
from .fonts import FontGenerator
from .nanoemoji import NanoemojiGenerator
from .process import ProcessRunner

GENERATORS = {
    FontMode.MONO: FantasticonGenerator,
    FontMode.COLOR: NanoemojiGenerator,
}


def create_generator(
    mode: FontMode,
    runner: ProcessRunner,
    workspace: Path,
    toolchain: ToolchainConfig = ToolchainConfig(),
) -> FontGenerator:
    return GENERATORS[FontMode(mode)](runner, workspace, toolchain)
