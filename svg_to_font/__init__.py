"""Icon font and Flutter icon class generation from SVG files."""

from .config import FontMode, GenerateConfig
from .dart_code import generate_dart_source
from .identifiers import sanitize_identifier
from .pipeline import GenerationResult, run_generation

__all__ = [
    "FontMode",
    "GenerateConfig",
    "GenerationResult",
    "generate_dart_source",
    "run_generation",
    "sanitize_identifier",
]
