"""
Color space conversion utilities for PoolStrip CV Service.
Handles conversions between BGR, RGB and CIE Lab color spaces.
"""

import logging
from typing import Sequence, Union

import cv2
import numpy as np
from colormath.color_conversions import convert_color
from colormath.color_objects import LabColor as ColormathLab, sRGBColor

from services.interfaces import LabColor, LabTriplet

logger = logging.getLogger(__name__)


def bgr_to_rgb(image: np.ndarray) -> np.ndarray:
    """
    Convert BGR image to RGB.

    Args:
        image: OpenCV image array in BGR format

    Returns:
        Image array in RGB format
    """
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def rgb_to_lab(rgb: Sequence[float]) -> LabTriplet:
    """
    Convert an RGB sample to CIE Lab.

    Chain: sRGB (0-255) → linear RGB → XYZ (D65) → Lab (D65 white point).
    The conversion is total: out-of-range channels are not clamped, they
    are simply carried through the math.

    Args:
        rgb: (r, g, b) channel intensities, nominally 0-255

    Returns:
        Tuple of (L, a, b) in standard Lab units
    """
    r, g, b = (float(channel) for channel in rgb)
    srgb = sRGBColor(r, g, b, is_upscaled=True)
    lab = convert_color(srgb, ColormathLab, target_illuminant='d65')
    return float(lab.lab_l), float(lab.lab_a), float(lab.lab_b)


def lab_to_dict(lab: Sequence[float]) -> LabColor:
    """Format a Lab triplet for JSON responses."""
    return {'L': round(float(lab[0]), 2), 'a': round(float(lab[1]), 2), 'b': round(float(lab[2]), 2)}


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to hex color string.

    Args:
        r: Red value (0-255)
        g: Green value (0-255)
        b: Blue value (0-255)

    Returns:
        Hex color string (e.g., "#A4C639")
    """
    return f'#{int(r):02X}{int(g):02X}{int(b):02X}'


def cie76(lab1, lab2) -> Union[float, np.ndarray]:
    """
    CIE76 color difference: Euclidean distance in Lab.

    Inputs broadcast, so an (N, 3) array of references against one sample
    gives N distances in one call.

    Args:
        lab1: (L, a, b) or array of them, shape (..., 3)
        lab2: (L, a, b) or array of them, shape (..., 3)

    Returns:
        A float for two single colors, otherwise an array of distances
    """
    difference = np.asarray(lab1, dtype=np.float64) - np.asarray(lab2, dtype=np.float64)
    distance = np.sqrt(np.sum(difference ** 2, axis=-1))
    if distance.ndim == 0:
        return float(distance)
    return distance
