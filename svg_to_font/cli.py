"""Generate an icon font and a Flutter icon class from a folder of SVG files.

Example:

    svg-to-font -i assets/icons -o fonts -c lib/icons -n AppIcons --all-icons-map

Monochrome fonts are built with fantasticon (needs Node.js and npm); color
fonts (``--color``) are built with nanoemoji (needs Python 3).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_CLASS_NAME, FontMode, GenerateConfig
from .errors import SvgToFontError, UsageError
from .pipeline import run_generation

logger = logging.getLogger("svg_to_font")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svg-to-font",
        description="Generate font files and Flutter icon classes from SVGs.",
    )
    parser.add_argument("-i", "--input", type=Path, required=True, help="Input directory of SVG files")
    parser.add_argument("-o", "--font-output", type=Path, required=True, help="Output directory for the .ttf font")
    parser.add_argument("-c", "--class-output", type=Path, required=True, help="Output directory for the Dart class")
    parser.add_argument(
        "-n",
        "--name",
        default=DEFAULT_CLASS_NAME,
        help=f"Class name for the icons, also used as font family (default: {DEFAULT_CLASS_NAME})",
    )
    parser.add_argument("-p", "--package", default=None, help="Package name, when generating for a package")
    parser.add_argument(
        "--color",
        action="store_true",
        help="Build a color font with nanoemoji (requires Python 3)",
    )
    parser.add_argument(
        "--all-icons-map",
        action="store_true",
        help="Also generate an 'all' map from icon name to IconData",
    )
    parser.add_argument("--delete-input", action="store_true", help="Delete the input directory after generation")
    parser.add_argument("--keep-temp", action="store_true", help="Keep the temporary workspace for debugging")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Kill any external tool that runs longer than this many seconds (default: no limit)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed logs and tool output")
    return parser


def config_from_args(args: argparse.Namespace) -> GenerateConfig:
    return GenerateConfig(
        input_dir=args.input,
        font_output_dir=args.font_output,
        class_output_dir=args.class_output,
        class_name=args.name,
        package_name=args.package,
        mode=FontMode.COLOR if args.color else FontMode.MONO,
        include_all=args.all_icons_map,
        delete_input=args.delete_input,
        keep_temp=args.keep_temp,
        verbose=args.verbose,
        timeout=args.timeout,
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(levelname)s: %(message)s", stream=sys.stderr)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        logger.info("Starting svg-to-font generation...")
        result = run_generation(config_from_args(args))
    except UsageError as exc:
        logger.error("%s", exc)
        return 2
    except SvgToFontError as exc:
        logger.error("%s", exc)
        if args.verbose:
            logger.debug("Details:", exc_info=True)
        return 1
    except Exception as exc:  # noqa: BLE001
        logger.error("Unexpected error: %s", exc)
        if args.verbose:
            logger.debug("Details:", exc_info=True)
        return 1

    logger.info("Generation complete: %d icons", len(result.glyph_map))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
