from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import UsageError
from .identifiers import is_valid_class_name, snake_case

DEFAULT_CLASS_NAME = "CamusIcons"
WORKSPACE_PREFIX = "svg_to_font_build_"

# First code point of the Unicode private use area.
PUA_START = 0xE000

# Fixed metrics handed to nanoemoji so color fonts render the same everywhere.
COLOR_UPEM = 1000
COLOR_ASCENDER = 850
COLOR_DESCENDER = -150
COLOR_ADVANCE_WIDTH = 1000
COLOR_FORMAT = "glyf_colr_1"

# Anything this small cannot be a usable font.
MIN_FONT_BYTES = 256


class FontMode(str, Enum):
    MONO = "mono"
    COLOR = "color"


@dataclass(frozen=True)
class ToolchainConfig:
    node: str = "node"
    npm: str = "npm"
    python: str = "python3"
    fantasticon_package: str = "fantasticon"
    nanoemoji_package: str = "nanoemoji"
    ninja_package: str = "ninja"


@dataclass(frozen=True)
class GenerateConfig:
    input_dir: Path
    font_output_dir: Path
    class_output_dir: Path
    class_name: str = DEFAULT_CLASS_NAME
    package_name: str | None = None
    mode: FontMode = FontMode.MONO
    include_all: bool = False
    delete_input: bool = False
    keep_temp: bool = False
    verbose: bool = False
    timeout: float | None = None
    temp_root: Path | None = None
    toolchain: ToolchainConfig = ToolchainConfig()

    @property
    def file_stem(self) -> str:
        """Base name shared by the delivered font and Dart file."""
        return snake_case(self.class_name)

    def validate(self) -> None:
        if not self.class_name or not is_valid_class_name(self.class_name):
            raise UsageError(
                f"Invalid class name '{self.class_name}': use letters, digits and underscores, "
                "starting with a letter, and avoid Dart reserved words"
            )
        if self.package_name is not None and not self.package_name.strip():
            raise UsageError("Package name must not be empty when given")
        if self.timeout is not None and self.timeout <= 0:
            raise UsageError(f"Timeout must be positive, got {self.timeout:g}")
        if self.delete_input:
            source = self.input_dir.resolve()
            for target in (self.font_output_dir, self.class_output_dir):
                if target.resolve().is_relative_to(source):
                    raise UsageError(f"Refusing to delete input: output {target} is inside {self.input_dir}")
