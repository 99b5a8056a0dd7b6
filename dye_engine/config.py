"""Dye color configuration model and JSON loading."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "data" / "default.json"

OUTPUT_SUFFIX = "amethyst"
SUPPORTED_EXTENSIONS = ("png", "zip")

PathLike = Union[str, Path]


class DyeColor(str, Enum):
    WHITE = "white"
    LIGHT_GRAY = "light_gray"
    GRAY = "gray"
    BLACK = "black"
    BROWN = "brown"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    LIME = "lime"
    GREEN = "green"
    CYAN = "cyan"
    LIGHT_BLUE = "light_blue"
    BLUE = "blue"
    PURPLE = "purple"
    MAGENTA = "magenta"
    PINK = "pink"

    def __str__(self) -> str:
        return self.value


class FilterType(str, Enum):
    """Whether a filter runs per pixel or once over the whole image."""

    PIXEL = "pixel"
    IMAGE = "image"


class FilterTarget(str, Enum):
    HUE = "hue"
    SATURATION = "saturation"
    BRIGHTNESS = "brightness"
    # only meaningful for image filters
    CONTRAST = "contrast"


class FilterOperation(str, Enum):
    ADD = "add"
    MULTIPLY = "multiply"
    SET = "set"


@dataclass(frozen=True)
class Filter:
    kind: FilterType
    target: FilterTarget
    operation: FilterOperation
    value: float


@dataclass(frozen=True)
class DyeColorConfig:
    rgb: Tuple[int, int, int]
    allow_alpha: bool = True
    filters: Tuple[Filter, ...] = ()


@dataclass(frozen=True)
class Config:
    colors: Dict[DyeColor, DyeColorConfig] = field(default_factory=dict)


def _parse_enum(enum_cls, raw: Any, where: str):
    try:
        return enum_cls(raw)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(
            f"{where}: expected one of {choices}, got {raw!r}") from None


def _parse_filter(raw: Any, where: str) -> Filter:
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: expected an object")
    for key in ("type", "target", "operation", "value"):
        if key not in raw:
            raise ConfigError(f"{where}: missing '{key}'")

    value = raw["value"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}.value: expected a number, got {value!r}")

    return Filter(
        kind=_parse_enum(FilterType, raw["type"], f"{where}.type"),
        target=_parse_enum(FilterTarget, raw["target"], f"{where}.target"),
        operation=_parse_enum(FilterOperation, raw["operation"],
                              f"{where}.operation"),
        value=float(value),
    )


def _parse_rgb(raw: Any, where: str) -> Tuple[int, int, int]:
    if not isinstance(raw, (list, tuple)) or len(raw) != 3:
        raise ConfigError(f"{where}: expected [r, g, b], got {raw!r}")
    for channel in raw:
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise ConfigError(
                f"{where}: channels must be integers in 0-255, got {raw!r}")
    return (raw[0], raw[1], raw[2])


def parse_dye_color_config(raw: Any, where: str = "color") -> DyeColorConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: expected an object")
    if "rgb" not in raw:
        raise ConfigError(f"{where}: missing 'rgb'")

    allow_alpha = raw.get("allow_alpha", True)
    if not isinstance(allow_alpha, bool):
        raise ConfigError(
            f"{where}.allow_alpha: expected true or false, got {allow_alpha!r}")

    raw_filters = raw.get("filters", [])
    if not isinstance(raw_filters, list):
        raise ConfigError(f"{where}.filters: expected a list")

    filters = tuple(
        _parse_filter(item, f"{where}.filters[{index}]")
        for index, item in enumerate(raw_filters)
    )
    return DyeColorConfig(
        rgb=_parse_rgb(raw["rgb"], f"{where}.rgb"),
        allow_alpha=allow_alpha,
        filters=filters,
    )


def parse_config(data: Any) -> Config:
    """Build a :class:`Config` from decoded JSON data.

    Raises:
        ConfigError: naming the path of the first invalid entry.
    """

    if not isinstance(data, dict) or not isinstance(data.get("colors"), dict):
        raise ConfigError("configuration must be an object with a 'colors' object")

    colors: Dict[DyeColor, DyeColorConfig] = {}
    for name, raw in data["colors"].items():
        color = _parse_enum(DyeColor, name, f"colors.{name}")
        colors[color] = parse_dye_color_config(raw, f"colors.{name}")
    return Config(colors=colors)


def load_config(path: PathLike = DEFAULT_CONFIG_PATH) -> Config:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    return parse_config(data)


def filter_to_dict(filter_: Filter) -> Dict[str, Any]:
    return {
        "type": filter_.kind.value,
        "target": filter_.target.value,
        "operation": filter_.operation.value,
        "value": filter_.value,
    }


def config_to_dict(config: Config) -> Dict[str, Any]:
    """Serialize a config, leaving out fields that hold their default."""

    colors: Dict[str, Any] = {}
    for color, color_config in config.colors.items():
        entry: Dict[str, Any] = {"rgb": list(color_config.rgb)}
        if not color_config.allow_alpha:
            entry["allow_alpha"] = False
        if color_config.filters:
            entry["filters"] = [filter_to_dict(f) for f in color_config.filters]
        colors[color.value] = entry
    return {"colors": colors}


def dump_config(config: Config, path: PathLike) -> None:
    Path(path).write_text(
        json.dumps(config_to_dict(config), indent=2), encoding="utf-8")


def output_name(color: DyeColor, ext: str) -> str:
    return f"{color}_{OUTPUT_SUFFIX}.{ext}"
