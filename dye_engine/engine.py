"""Core dye processing pipeline."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np

from .color import clamp01, hsva_to_rgba, rgb_to_hsv, rgba_to_hsva, wrap_hue
from .config import (
    Config,
    DyeColor,
    DyeColorConfig,
    Filter,
    FilterOperation,
    FilterTarget,
    FilterType,
)
from .errors import InvalidFilterCombination

logger = logging.getLogger(__name__)

_IMAGE_FILTERS = {
    FilterTarget.CONTRAST: {FilterOperation.ADD, FilterOperation.MULTIPLY},
    FilterTarget.HUE: {FilterOperation.ADD},
    FilterTarget.SATURATION: set(FilterOperation),
    FilterTarget.BRIGHTNESS: {FilterOperation.ADD},
}


def round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def is_valid_filter(filter_: Filter) -> bool:
    if filter_.kind is FilterType.PIXEL:
        return filter_.target is not FilterTarget.CONTRAST
    return filter_.operation in _IMAGE_FILTERS[filter_.target]


def validate_filter(filter_: Filter) -> None:
    if not is_valid_filter(filter_):
        raise InvalidFilterCombination.from_filter(filter_)


def validate_filters(filters: Iterable[Filter]) -> None:
    for filter_ in filters:
        validate_filter(filter_)


def _check_image(image: np.ndarray) -> None:
    if not isinstance(image, np.ndarray) or image.dtype != np.uint8:
        raise ValueError("image must be a uint8 numpy array")
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError("image must have shape (H, W, 4)")


def apply_pixel_filter(filter_: Filter, hsva: np.ndarray) -> None:
    """Apply a pixel-scope filter to HSVA values in place.

    Args:
        filter_: The filter to apply. Its ``kind`` is not inspected, so image
            saturation filters can reuse this path.
        hsva: Float array whose last axis is (hue, saturation, value, alpha).

    Raises:
        InvalidFilterCombination: if the filter targets contrast.
    """

    target = filter_.target
    operation = filter_.operation
    value = filter_.value

    if target is FilterTarget.CONTRAST:
        raise InvalidFilterCombination.from_filter(filter_)

    if target is FilterTarget.HUE:
        hue = hsva[..., 0]
        if operation is FilterOperation.ADD:
            hue = hue + value
        elif operation is FilterOperation.MULTIPLY:
            hue = hue * value
        else:
            hue = np.full_like(hue, value)
        hsva[..., 0] = wrap_hue(hue)
        return

    channel = 1 if target is FilterTarget.SATURATION else 2
    current = hsva[..., channel]
    if operation is FilterOperation.ADD:
        current = current + value
    elif operation is FilterOperation.MULTIPLY:
        current = current * value
    else:
        current = np.full_like(current, value)
    hsva[..., channel] = clamp01(current)


def adjust_contrast(image: np.ndarray, delta: float) -> None:
    # delta is a percentage: 0 keeps the image, 100 quadruples the spread
    percent = ((100.0 + delta) / 100.0) ** 2
    rgb = image[..., :3].astype(np.float64) / 255.0
    rgb = ((rgb - 0.5) * percent + 0.5) * 255.0
    image[..., :3] = np.clip(rgb, 0.0, 255.0).round().astype(np.uint8)


def rotate_hue(image: np.ndarray, degrees: int) -> None:
    angle = math.radians(degrees % 360)
    cosv = math.cos(angle)
    sinv = math.sin(angle)

    # luminance preserving rotation around the gray axis
    matrix = np.array([
        [0.213 + cosv * 0.787 - sinv * 0.213,
         0.715 - cosv * 0.715 - sinv * 0.715,
         0.072 - cosv * 0.072 + sinv * 0.928],
        [0.213 - cosv * 0.213 + sinv * 0.143,
         0.715 + cosv * 0.285 + sinv * 0.140,
         0.072 - cosv * 0.072 - sinv * 0.283],
        [0.213 - cosv * 0.213 - sinv * 0.787,
         0.715 - cosv * 0.715 + sinv * 0.715,
         0.072 + cosv * 0.928 + sinv * 0.072],
    ])

    rgb = image[..., :3].astype(np.float64) @ matrix.T
    image[..., :3] = np.clip(rgb, 0.0, 255.0).round().astype(np.uint8)


def brighten(image: np.ndarray, amount: int) -> None:
    rgb = image[..., :3].astype(np.int32) + amount
    image[..., :3] = np.clip(rgb, 0, 255).astype(np.uint8)


def apply_image_filter(filter_: Filter, image: np.ndarray) -> None:
    """Apply an image-scope filter to an RGBA uint8 buffer in place.

    Raises:
        InvalidFilterCombination: if the target and operation pair has no
            image-wide meaning. The buffer is untouched in that case.
    """

    _check_image(image)

    target = filter_.target
    operation = filter_.operation
    value = filter_.value

    if target is FilterTarget.CONTRAST and operation is FilterOperation.ADD:
        adjust_contrast(image, value)
    elif target is FilterTarget.CONTRAST and operation is FilterOperation.MULTIPLY:
        adjust_contrast(image, value - 1.0)
    elif target is FilterTarget.HUE and operation is FilterOperation.ADD:
        rotate_hue(image, round_half_away(value))
    elif target is FilterTarget.SATURATION:
        hsva = rgba_to_hsva(image)
        apply_pixel_filter(filter_, hsva)
        image[...] = hsva_to_rgba(hsva)
    elif target is FilterTarget.BRIGHTNESS and operation is FilterOperation.ADD:
        brighten(image, round_half_away(value))
    else:
        raise InvalidFilterCombination.from_filter(filter_)


def transform_image(config: DyeColorConfig, image: np.ndarray) -> None:
    """Turn an RGBA image into its dyed variant, in place.

    Every pixel takes the hue of ``config.rgb``, then pixel filters run in
    their configured order, then image filters run over the whole buffer in
    their configured order.

    Args:
        config: Target color and filter chain.
        image: RGBA uint8 array with shape (H, W, 4). Mutated in place.

    Raises:
        InvalidFilterCombination: if any filter is invalid. Filters are
            checked before any pixel is written, so the image is unchanged.
        ValueError: if ``image`` is not an (H, W, 4) uint8 array.
    """

    _check_image(image)
    validate_filters(config.filters)

    target = rgb_to_hsv(np.asarray(config.rgb, dtype=np.float64) / 255.0)
    pixel_filters = [f for f in config.filters if f.kind is FilterType.PIXEL]
    image_filters = [f for f in config.filters if f.kind is FilterType.IMAGE]

    hsva = rgba_to_hsva(image)
    hsva[..., 0] = target[0]
    for filter_ in pixel_filters:
        apply_pixel_filter(filter_, hsva)

    out = hsva_to_rgba(hsva)
    for filter_ in image_filters:
        apply_image_filter(filter_, out)

    if not config.allow_alpha:
        out[..., 3] = 255

    logger.debug("Applied %d pixel and %d image filters to %dx%d image",
                 len(pixel_filters), len(image_filters),
                 image.shape[1], image.shape[0])
    image[...] = out


def dye_image(config: DyeColorConfig, image: np.ndarray) -> np.ndarray:
    """Return a dyed copy of ``image``, leaving the original untouched."""

    out = image.copy()
    transform_image(config, out)
    return out


def dye_variants(
    config: Config,
    image: np.ndarray,
    colors: Optional[Iterable[DyeColor]] = None,
) -> Iterator[Tuple[DyeColor, np.ndarray]]:
    """Yield each configured dye color with its own dyed copy of ``image``.

    Colors come out in :class:`DyeColor` order unless ``colors`` is given.

    Raises:
        KeyError: if a requested color is missing from ``config``.
        InvalidFilterCombination: when a color's filters are invalid; colors
            already yielded are unaffected.
    """

    if colors is None:
        colors = [color for color in DyeColor if color in config.colors]
    for color in colors:
        yield color, dye_image(config.colors[color], image)
