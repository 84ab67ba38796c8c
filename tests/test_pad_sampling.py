"""
Unit tests for pad region sampling.
"""

import numpy as np
import pytest

from services.interfaces import AbsolutePixels, FractionalBounds, PadRegion, Parameter, PixelRect
from services.pipeline.steps.pad_sampling import (
    PadSamplingService,
    resolve_region,
    sample_region_mean_rgb
)


def gradient_image(width, height):
    """Image whose pixels are all distinct, so averages reveal the window used."""
    ys, xs = np.mgrid[0:height, 0:width]
    image = np.stack([xs * 10, ys * 10, xs + ys], axis=-1)
    return image.astype(np.uint8)


class TestPixelRect:
    """Test cases for PixelRect clipping."""

    def test_clip_inside_is_unchanged(self):
        rect = PixelRect(left=1, top=1, right=3, bottom=3)
        assert rect.clip(4, 4) == rect

    def test_clip_partial(self):
        rect = PixelRect(left=-2, top=2, right=6, bottom=9).clip(4, 4)
        assert rect == PixelRect(left=0, top=2, right=4, bottom=4)
        assert rect.area == 8

    def test_clip_fully_outside_is_empty(self):
        assert PixelRect(left=10, top=10, right=15, bottom=15).clip(4, 4).is_empty
        assert PixelRect(left=-8, top=0, right=-1, bottom=4).clip(4, 4).is_empty

    def test_inverted_rect_is_empty(self):
        assert PixelRect(left=3, top=3, right=1, bottom=1).clip(4, 4).is_empty


class TestResolveRegion:
    """Test cases for descriptor resolution."""

    def test_fractional_bounds_floor(self):
        bounds = FractionalBounds(x_start_ratio=0.25, x_end_ratio=0.75, y_start_ratio=0.5, y_end_ratio=1.0)
        assert resolve_region(bounds, 10, 10) == PixelRect(left=2, top=5, right=7, bottom=10)

    def test_fractional_bounds_scale_with_image(self):
        bounds = FractionalBounds(x_start_ratio=0.5, x_end_ratio=1.0, y_start_ratio=0.0, y_end_ratio=0.5)
        assert resolve_region(bounds, 400, 200) == PixelRect(left=200, top=0, right=400, bottom=100)

    def test_absolute_pixels(self):
        bounds = AbsolutePixels(x=3, y=4, width=5, height=6)
        assert resolve_region(bounds, 100, 100) == PixelRect(left=3, top=4, right=8, bottom=10)

    def test_absolute_pixels_clipped(self):
        bounds = AbsolutePixels(x=3, y=4, width=50, height=60)
        assert resolve_region(bounds, 10, 10) == PixelRect(left=3, top=4, right=10, bottom=10)


class TestSampleRegionMeanRgb:
    """Test cases for sample_region_mean_rgb."""

    def test_uniform_region(self):
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        image[:, :] = (220, 220, 90)
        assert sample_region_mean_rgb(image, AbsolutePixels(0, 0, 4, 4)) == (220.0, 220.0, 90.0)

    def test_region_past_right_edge_matches_clipped_window(self):
        """A region 2 pixels past the right edge averages only the in-bounds 2x4 window."""
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        image[:, :2] = (0, 0, 0)
        image[:, 2:] = (200, 100, 50)

        overhanging = sample_region_mean_rgb(image, AbsolutePixels(x=2, y=0, width=4, height=4))
        clipped = sample_region_mean_rgb(image, AbsolutePixels(x=2, y=0, width=2, height=4))

        assert overhanging == clipped == (200.0, 100.0, 50.0)

    def test_clipping_against_hand_computed_mean(self):
        image = gradient_image(4, 4)
        rgb = sample_region_mean_rgb(image, AbsolutePixels(x=2, y=0, width=4, height=4))
        expected = image[0:4, 2:4].reshape(-1, 3).astype(np.float64).mean(axis=0)
        assert rgb == pytest.approx(tuple(expected))
        # x in {2, 3} → mean 25 red; y in {0..3} → mean 15 green
        assert rgb[0] == pytest.approx(25.0)
        assert rgb[1] == pytest.approx(15.0)

    def test_fully_outside_returns_zero_color(self):
        image = gradient_image(4, 4) + 1
        for bounds in [
            AbsolutePixels(x=10, y=10, width=5, height=5),
            AbsolutePixels(x=-10, y=0, width=5, height=4),
            AbsolutePixels(x=0, y=4, width=4, height=1),
            FractionalBounds(1.5, 2.0, 0.0, 1.0),
        ]:
            assert sample_region_mean_rgb(image, bounds) == (0.0, 0.0, 0.0)

    def test_degenerate_region_returns_zero_color(self):
        image = gradient_image(4, 4) + 1
        assert sample_region_mean_rgb(image, AbsolutePixels(x=1, y=1, width=0, height=3)) == (0.0, 0.0, 0.0)
        assert sample_region_mean_rgb(image, FractionalBounds(0.5, 0.5, 0.0, 1.0)) == (0.0, 0.0, 0.0)

    @pytest.mark.parametrize('width,height', [(0, 0), (0, 5), (5, 0), (1, 1)])
    def test_tiny_and_empty_images(self, width, height):
        image = np.zeros((height, width, 3), dtype=np.uint8)
        rgb = sample_region_mean_rgb(image, AbsolutePixels(x=1, y=1, width=3, height=3))
        assert rgb == (0.0, 0.0, 0.0)

    def test_ignores_alpha_channel(self):
        image = np.zeros((2, 2, 4), dtype=np.uint8)
        image[:, :] = (10, 20, 30, 255)
        assert sample_region_mean_rgb(image, AbsolutePixels(0, 0, 2, 2)) == (10.0, 20.0, 30.0)


class TestPadSamplingService:
    """Test cases for PadSamplingService."""

    def setup_method(self):
        self.service = PadSamplingService()

    def test_samples_in_layout_order(self):
        image = np.zeros((10, 10, 3), dtype=np.uint8)
        image[0:5, :] = (255, 0, 0)
        image[5:10, :] = (0, 0, 255)
        layout = [
            PadRegion(Parameter.PH, FractionalBounds(0.0, 1.0, 0.5, 1.0)),
            PadRegion(Parameter.FREE_CHLORINE, AbsolutePixels(x=0, y=0, width=10, height=5)),
        ]

        samples = self.service.sample_pads(image, layout)

        assert [s.parameter for s in samples] == [Parameter.PH, Parameter.FREE_CHLORINE]
        assert samples[0].rgb == (0.0, 0.0, 255.0)
        assert samples[1].rgb == (255.0, 0.0, 0.0)
        assert samples[0].pixel_count == 50

    def test_empty_region_does_not_abort(self):
        image = np.full((10, 10, 3), 128, dtype=np.uint8)
        layout = [
            PadRegion(Parameter.PH, AbsolutePixels(x=50, y=50, width=5, height=5)),
            PadRegion(Parameter.FREE_CHLORINE, AbsolutePixels(x=0, y=0, width=2, height=2)),
        ]

        samples = self.service.sample_pads(image, layout)

        assert samples[0].rgb == (0.0, 0.0, 0.0)
        assert samples[0].pixel_count == 0
        assert samples[1].rgb == (128.0, 128.0, 128.0)
