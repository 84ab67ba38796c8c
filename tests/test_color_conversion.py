"""
Unit tests for color space conversion.
"""

import math

import numpy as np
import pytest

from utils.color_conversion import bgr_to_rgb, cie76, lab_to_dict, rgb_to_hex, rgb_to_lab


class TestRgbToLab:
    """Test cases for sRGB → Lab conversion."""

    def test_white_maps_to_full_lightness(self):
        """White should be L=100 with neutral chroma."""
        L, a, b = rgb_to_lab((255, 255, 255))
        assert L == pytest.approx(100.0, abs=0.1)
        assert a == pytest.approx(0.0, abs=0.1)
        assert b == pytest.approx(0.0, abs=0.1)

    def test_black_maps_to_zero(self):
        """Black should be the Lab origin."""
        L, a, b = rgb_to_lab((0, 0, 0))
        assert L == pytest.approx(0.0, abs=1e-6)
        assert a == pytest.approx(0.0, abs=1e-6)
        assert b == pytest.approx(0.0, abs=1e-6)

    def test_primary_red(self):
        """sRGB red is roughly (53.2, 80.1, 67.2) under D65."""
        L, a, b = rgb_to_lab((255, 0, 0))
        assert L == pytest.approx(53.24, abs=0.5)
        assert a == pytest.approx(80.09, abs=0.5)
        assert b == pytest.approx(67.20, abs=0.5)

    def test_yellow_has_positive_b(self):
        """Pad yellows sit on the +b axis."""
        _, _, b = rgb_to_lab((220, 220, 90))
        assert b > 40.0

    def test_out_of_range_input_does_not_fail(self):
        """Malformed channels are computed as given instead of raising."""
        for rgb in [(-20, 300, 1000), (256.5, -0.1, 0), (1e4, 1e4, 1e4)]:
            lab = rgb_to_lab(rgb)
            assert len(lab) == 3
            assert all(math.isfinite(channel) for channel in lab)

    def test_conversion_is_deterministic(self):
        """Repeated conversion yields identical floats."""
        assert rgb_to_lab((123.4, 56.7, 89.0)) == rgb_to_lab((123.4, 56.7, 89.0))

    def test_accepts_numpy_input(self):
        """Numpy arrays convert the same as tuples."""
        assert rgb_to_lab(np.array([10, 20, 30], dtype=np.uint8)) == rgb_to_lab((10, 20, 30))


class TestCie76:
    """Test cases for the CIE76 distance."""

    def test_identical_colors(self):
        assert cie76((50.0, 10.0, -5.0), (50.0, 10.0, -5.0)) == 0.0

    def test_euclidean_distance(self):
        assert cie76((0.0, 0.0, 0.0), (3.0, 4.0, 12.0)) == pytest.approx(13.0)

    def test_symmetric(self):
        a, b = rgb_to_lab((220, 220, 90)), rgb_to_lab((255, 180, 160))
        assert cie76(a, b) == pytest.approx(cie76(b, a))

    def test_many_references_against_one_sample(self):
        references = np.array([[0.0, 0.0, 0.0], [3.0, 4.0, 12.0], [50.0, 10.0, -5.0]])
        distances = cie76(references, (0.0, 0.0, 0.0))
        assert distances.shape == (3,)
        assert distances[1] == pytest.approx(13.0)
        assert distances[2] == pytest.approx(cie76((50.0, 10.0, -5.0), (0.0, 0.0, 0.0)))


class TestFormatting:
    """Test cases for response formatting helpers."""

    def test_rgb_to_hex(self):
        assert rgb_to_hex(164, 198, 57) == '#A4C639'
        assert rgb_to_hex(0, 0, 0) == '#000000'

    def test_lab_to_dict_rounds(self):
        assert lab_to_dict((50.1234, -3.4567, 7.0)) == {'L': 50.12, 'a': -3.46, 'b': 7.0}

    def test_bgr_to_rgb_swaps_channels(self):
        image = np.zeros((2, 2, 3), dtype=np.uint8)
        image[:, :] = (1, 2, 3)
        assert tuple(bgr_to_rgb(image)[0, 0]) == (3, 2, 1)
