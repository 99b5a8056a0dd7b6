"""Command-line entry point that writes dyed variants of a PNG or ZIP."""

from __future__ import annotations

import argparse
import logging
import sys
import zipfile
from pathlib import Path
from typing import List, Optional

from .config import (
    DEFAULT_CONFIG_PATH,
    SUPPORTED_EXTENSIONS,
    Config,
    DyeColor,
    load_config,
    output_name,
)
from .engine import dye_image
from .errors import ConfigError, InvalidFilterCombination
from .io import (
    decode_png_bytes,
    encode_png_bytes,
    is_png_name,
    load_image_rgba_u8,
    read_zip_entries,
    save_image_rgba_u8,
    write_zip,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amethyst-colorizer",
        description="Convert an amethyst texture into its dyed variants.")
    parser.add_argument("path", type=Path,
                        help="Path of the .png image or .zip archive to convert")
    parser.add_argument("-c", "--config", type=Path, default=DEFAULT_CONFIG_PATH,
                        metavar="PATH", help="Color configuration to load")
    parser.add_argument("-t", "--target-color", type=DyeColor, default=None,
                        choices=list(DyeColor), metavar="COLOR",
                        help="Dye color to generate; all colors if omitted")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("./out/"),
                        metavar="DIR", help="Directory to write converted files into")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def resolve_extension(parser: argparse.ArgumentParser, path: Path) -> str:
    extension = path.suffix.lower().lstrip(".")
    if not extension:
        return "zip"
    if extension not in SUPPORTED_EXTENSIONS:
        parser.error("the specified file must be either a .zip or .png file")
    return extension


def select_colors(config: Config, color: Optional[DyeColor]) -> List[DyeColor]:
    if color is not None:
        return [color]
    return [c for c in DyeColor if c in config.colors]


def run_png(path: Path, config: Config, colors: List[DyeColor], out_dir: Path) -> int:
    image = load_image_rgba_u8(path)
    failures = 0
    for color in colors:
        try:
            buffer = dye_image(config.colors[color], image)
        except InvalidFilterCombination as exc:
            logger.error("configuration error for color %s: %s", color, exc)
            failures += 1
            continue
        out_path = out_dir / output_name(color, "png")
        save_image_rgba_u8(out_path, buffer)
        logger.info("Wrote %s", out_path)
    return failures


def run_zip(path: Path, config: Config, colors: List[DyeColor], out_dir: Path) -> int:
    entries = read_zip_entries(path)
    images = {name: decode_png_bytes(data)
              for name, data in entries if is_png_name(name)}
    failures = 0
    for color in colors:
        dyed = []
        try:
            for name, data in entries:
                if name in images:
                    buffer = dye_image(config.colors[color], images[name])
                    data = encode_png_bytes(buffer)
                    logger.debug("Dyed %s for %s", name, color)
                dyed.append((name, data))
        except InvalidFilterCombination as exc:
            logger.error("configuration error for color %s: %s", color, exc)
            failures += 1
            continue
        out_path = out_dir / output_name(color, "zip")
        write_zip(out_path, dyed)
        logger.info("Wrote %s (%d images)", out_path, len(images))
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not args.config.exists():
        parser.error(f"unable to find the configuration file at {args.config}")
    if not args.path.exists():
        parser.error(f"unable to find the target file at {args.path}")

    extension = resolve_extension(parser, args.path)
    if extension == "zip" and not zipfile.is_zipfile(args.path):
        parser.error(f"{args.path} is not a readable .zip archive")

    if args.output_dir.exists():
        if not args.output_dir.is_dir():
            parser.error("the specified output path is not a directory")
    else:
        args.output_dir.mkdir(parents=True, exist_ok=True)

    try:
        config = load_config(args.config)
    except (ConfigError, OSError) as exc:
        parser.error(f"unable to load the configuration file: {exc}")

    if args.target_color is not None and args.target_color not in config.colors:
        parser.error("the given color is missing from the configuration file")

    colors = select_colors(config, args.target_color)
    if extension == "png":
        failures = run_png(args.path, config, colors, args.output_dir)
    else:
        failures = run_zip(args.path, config, colors, args.output_dir)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
