"""
Pad region sampling.

Reduces each pad window of a decoded strip image to one average RGB color.
Sampling is a flat, unweighted mean with no sub-pixel interpolation, so it
assumes reasonably uniform pad coloring.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from services.interfaces import PadRegion, Parameter, PixelRect, RegionBounds, RGBColor

logger = logging.getLogger(__name__)

ZERO_COLOR: RGBColor = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class PadSample:
    """Average color read from one pad window."""
    parameter: Parameter
    rect: PixelRect
    rgb: RGBColor
    pixel_count: int


def image_dimensions(image: np.ndarray) -> tuple:
    """Return (width, height) of an image array shaped (H, W[, C])."""
    if image.ndim < 2:
        return 0, 0
    return int(image.shape[1]), int(image.shape[0])


def resolve_region(bounds: RegionBounds, width: int, height: int) -> PixelRect:
    """
    Resolve a region descriptor to a pixel rectangle clipped to the image.

    Args:
        bounds: AbsolutePixels or FractionalBounds
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        PixelRect inside [0, width) x [0, height); may be empty
    """
    return bounds.resolve(width, height).clip(width, height)


def sample_region_mean_rgb(image: np.ndarray, bounds: RegionBounds) -> RGBColor:
    """
    Average each color channel over the pixels of a region.

    Pixels outside the image are ignored. A region that resolves to zero
    pixels yields (0, 0, 0) instead of an error.

    Args:
        image: RGB image array shaped (H, W, 3)
        bounds: Region descriptor

    Returns:
        Tuple of (r, g, b) means
    """
    width, height = image_dimensions(image)
    rect = resolve_region(bounds, width, height)
    return _mean_rgb(image, rect)


def _mean_rgb(image: np.ndarray, rect: PixelRect) -> RGBColor:
    if rect.is_empty:
        return ZERO_COLOR

    window = image[rect.top:rect.bottom, rect.left:rect.right]
    if window.ndim == 2:
        # Grayscale: every channel carries the same intensity
        mean = float(window.astype(np.float64).mean())
        return mean, mean, mean

    pixels = window[..., :3].reshape(-1, 3).astype(np.float64)
    mean = pixels.mean(axis=0)
    return float(mean[0]), float(mean[1]), float(mean[2])


class PadSamplingService:
    """Samples every pad of a brand layout from a strip image."""

    def __init__(self):
        """Initialize pad sampling service."""
        self.logger = logging.getLogger(__name__)

    def sample_pads(self, image: np.ndarray, layout: Sequence[PadRegion]) -> List[PadSample]:
        """
        Sample all pads of a layout.

        Args:
            image: RGB image array shaped (H, W, 3)
            layout: Ordered pad regions for the brand

        Returns:
            One PadSample per layout entry, in layout order
        """
        width, height = image_dimensions(image)
        samples = []

        for region in layout:
            rect = resolve_region(region.bounds, width, height)
            if rect.is_empty:
                self.logger.warning(
                    f'Pad region for {region.parameter.value} is empty in a {width}x{height} image, '
                    f'using zero color'
                )
            rgb = _mean_rgb(image, rect)
            samples.append(PadSample(
                parameter=region.parameter,
                rect=rect,
                rgb=rgb,
                pixel_count=rect.area
            ))

        return samples
