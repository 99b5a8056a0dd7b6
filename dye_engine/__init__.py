"""Shared dye engine API."""

from .config import (
    DEFAULT_CONFIG_PATH,
    Config,
    DyeColor,
    DyeColorConfig,
    Filter,
    FilterOperation,
    FilterTarget,
    FilterType,
    load_config,
    parse_config,
)
from .engine import (
    apply_image_filter,
    apply_pixel_filter,
    dye_image,
    dye_variants,
    transform_image,
)
from .errors import ConfigError, InvalidFilterCombination
from .io import load_image_rgba_u8, save_image_rgba_u8

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "Config",
    "DyeColor",
    "DyeColorConfig",
    "Filter",
    "FilterOperation",
    "FilterTarget",
    "FilterType",
    "load_config",
    "parse_config",
    "apply_image_filter",
    "apply_pixel_filter",
    "dye_image",
    "dye_variants",
    "transform_image",
    "ConfigError",
    "InvalidFilterCombination",
    "load_image_rgba_u8",
    "save_image_rgba_u8",
]
