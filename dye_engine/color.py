"""Color space conversions between 8-bit RGBA and float HSVA.

All conversions work directly on gamma-encoded sRGB values; nothing is
linearized. Hue is expressed in degrees in ``[0, 360)``, saturation, value and
alpha in ``[0, 1]``. Every function is vectorized over the leading axes, so a
single pixel (shape ``(4,)``) and a whole image (shape ``(H, W, 4)``) go
through the same code.
"""

from __future__ import annotations

import numpy as np


def clamp01(arr: np.ndarray) -> np.ndarray:
    return np.clip(arr, 0.0, 1.0)


def wrap_hue(hue: np.ndarray) -> np.ndarray:
    wrapped = np.mod(hue, 360.0)
    # np.mod of a tiny negative number can land exactly on 360.0
    return np.where(wrapped >= 360.0, 0.0, wrapped)


def rgb_to_hsv(rgb: np.ndarray) -> np.ndarray:
    rgb = np.asarray(rgb, dtype=np.float64)
    r = rgb[..., 0]
    g = rgb[..., 1]
    b = rgb[..., 2]

    maxc = np.maximum(np.maximum(r, g), b)
    minc = np.minimum(np.minimum(r, g), b)
    v = maxc
    delta = maxc - minc

    s = np.where(maxc > 0, delta / np.where(maxc > 0, maxc, 1.0), 0.0)

    safe = np.where(delta != 0, delta, 1.0)
    h_r = np.mod((g - b) / safe, 6.0)
    h_g = (b - r) / safe + 2.0
    h_b = (r - g) / safe + 4.0

    h = np.where(maxc == r, h_r, np.where(maxc == g, h_g, h_b))
    h = np.where(delta != 0, h * 60.0, 0.0)

    return np.stack([wrap_hue(h), s, v], axis=-1)


def hsv_to_rgb(hsv: np.ndarray) -> np.ndarray:
    hsv = np.asarray(hsv, dtype=np.float64)
    h6 = wrap_hue(hsv[..., 0]) / 60.0
    s = hsv[..., 1]
    v = hsv[..., 2]

    c = v * s
    x = c * (1.0 - np.abs((h6 % 2.0) - 1.0))
    m = v - c
    z = np.zeros_like(h6)

    sector = np.floor(h6).astype(np.int64) % 6

    r = np.choose(sector, [c, x, z, z, x, c])
    g = np.choose(sector, [x, c, c, x, z, z])
    b = np.choose(sector, [z, z, x, c, c, x])

    return np.stack([r, g, b], axis=-1) + m[..., None]


def rgba_to_hsva(rgba_u8: np.ndarray) -> np.ndarray:
    """Convert 8-bit RGBA pixels into float HSVA values."""

    rgba = np.asarray(rgba_u8, dtype=np.float64) / 255.0
    hsv = rgb_to_hsv(rgba[..., :3])
    return np.concatenate([hsv, rgba[..., 3:4]], axis=-1)


def hsva_to_rgba(hsva: np.ndarray) -> np.ndarray:
    """Convert float HSVA values back into 8-bit RGBA pixels.

    Saturation, value and alpha are clamped to ``[0, 1]`` and the hue is
    wrapped before conversion, so any float input maps to a valid pixel.
    """

    hsva = np.asarray(hsva, dtype=np.float64)
    hsv = np.stack(
        [hsva[..., 0], clamp01(hsva[..., 1]), clamp01(hsva[..., 2])], axis=-1)
    rgb = clamp01(hsv_to_rgb(hsv))
    alpha = clamp01(hsva[..., 3:4])

    rgba = np.concatenate([rgb, alpha], axis=-1)
    return (rgba * 255.0).round().astype(np.uint8)
