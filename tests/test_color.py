"""Tests for RGBA <-> HSVA conversion."""

import numpy as np
import pytest

from dye_engine.color import (
    clamp01,
    hsv_to_rgb,
    hsva_to_rgba,
    rgb_to_hsv,
    rgba_to_hsva,
    wrap_hue,
)


class TestRgbToHsv:
    """Known values for the float conversion."""

    @pytest.mark.parametrize(
        "rgb, expected",
        [
            ((1.0, 0.0, 0.0), (0.0, 1.0, 1.0)),
            ((0.0, 1.0, 0.0), (120.0, 1.0, 1.0)),
            ((0.0, 0.0, 1.0), (240.0, 1.0, 1.0)),
            ((1.0, 1.0, 0.0), (60.0, 1.0, 1.0)),
            ((1.0, 0.0, 1.0), (300.0, 1.0, 1.0)),
            ((0.5, 0.5, 0.5), (0.0, 0.0, 0.5)),
            ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
        ],
    )
    def test_primaries(self, rgb, expected):
        np.testing.assert_allclose(rgb_to_hsv(np.array(rgb)), expected, atol=1e-9)

    def test_hue_is_in_degrees_and_wrapped(self):
        hsv = rgb_to_hsv(np.random.default_rng(0).random((32, 32, 3)))
        assert np.all(hsv[..., 0] >= 0.0)
        assert np.all(hsv[..., 0] < 360.0)

    def test_hsv_to_rgb_accepts_unwrapped_hue(self):
        np.testing.assert_allclose(
            hsv_to_rgb(np.array([480.0, 1.0, 1.0])),
            hsv_to_rgb(np.array([120.0, 1.0, 1.0])),
            atol=1e-9,
        )
        np.testing.assert_allclose(
            hsv_to_rgb(np.array([-120.0, 1.0, 1.0])), (0.0, 0.0, 1.0), atol=1e-9)


class TestRoundTrip:
    """RGBA -> HSVA -> RGBA reproduces the input."""

    def test_every_channel_value(self):
        values = np.arange(256, dtype=np.uint8)
        grid = np.stack(np.meshgrid(values, values[::5], values[::7],
                                    indexing="ij"), axis=-1)
        alpha = np.full(grid.shape[:-1] + (1,), 200, dtype=np.uint8)
        rgba = np.concatenate([grid, alpha], axis=-1)

        out = hsva_to_rgba(rgba_to_hsva(rgba))

        diff = np.abs(out.astype(np.int16) - rgba.astype(np.int16))
        assert diff.max() <= 1

    def test_single_pixel(self):
        pixel = np.array([12, 200, 77, 31], dtype=np.uint8)
        hsva = rgba_to_hsva(pixel)
        assert hsva.shape == (4,)
        np.testing.assert_array_equal(hsva_to_rgba(hsva), pixel)

    def test_alpha_is_normalized(self):
        hsva = rgba_to_hsva(np.array([0, 0, 0, 255], dtype=np.uint8))
        assert hsva[3] == pytest.approx(1.0)


class TestClamping:
    def test_out_of_range_values_are_clamped(self):
        hsva = np.array([0.0, 5.0, 3.0, -1.0])
        np.testing.assert_array_equal(hsva_to_rgba(hsva), [255, 0, 0, 0])

    def test_clamp01(self):
        np.testing.assert_array_equal(
            clamp01(np.array([-0.5, 0.25, 1.5])), [0.0, 0.25, 1.0])

    def test_wrap_hue(self):
        np.testing.assert_allclose(
            wrap_hue(np.array([-30.0, 0.0, 360.0, 725.0])), [330.0, 0.0, 0.0, 5.0])
        assert wrap_hue(np.array(-1e-20)) == 0.0
