"""
Shared fixtures for strip analysis tests.
"""

import os

import numpy as np
import pytest

os.environ.setdefault('RATE_LIMIT_ENABLED', 'false')
os.environ.setdefault('ADVISORY_EXTENDED', 'false')

from services.calibration.layouts import build_default_layout_registry
from services.interfaces import Brand, Parameter

# In-band chart colors for the HTH chart: FC 3.0, pH 7.2, TA 80, CYA 30
IN_BAND_COLORS = {
    Parameter.FREE_CHLORINE: (220, 220, 90),
    Parameter.PH: (255, 180, 160),
    Parameter.TOTAL_ALKALINITY: (180, 220, 110),
    Parameter.CYANURIC_ACID: (255, 200, 150),
    Parameter.TOTAL_CHLORINE: (215, 230, 170),
}


def paint_strip(width, height, brand=Brand.HTH_6WAY, colors=None, background=(0, 0, 0)):
    """Build an RGB image with every layout pad of ``brand`` filled with a flat color."""
    colors = {**IN_BAND_COLORS, **(colors or {})}
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :] = background

    layout = build_default_layout_registry().layout_for(brand)
    for region in layout:
        rect = region.resolve(width, height).clip(width, height)
        image[rect.top:rect.bottom, rect.left:rect.right] = colors[region.parameter]
    return image


@pytest.fixture
def strip_image_factory():
    return paint_strip
