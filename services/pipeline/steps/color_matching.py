"""
Nearest-reference color matching.

Maps a Lab sample to the value of the closest reference color in a palette
using CIE76 (Euclidean distance in Lab).

There is no interpolation between neighbouring reference points: every
estimate is exactly one of the palette values, so accuracy is bounded by
how densely the palette is calibrated.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from services.exceptions import ConfigurationError
from services.interfaces import Palette, ReferenceColor
from utils.color_conversion import cie76, rgb_to_lab

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Best palette match for one sample."""
    value: float
    delta_e: float
    index: int
    reference: ReferenceColor


def match_nearest(sample_lab: Sequence[float], palette: Palette) -> MatchResult:
    """
    Find the palette entry closest to a Lab sample.

    Ties go to the first closest entry in palette order.

    Args:
        sample_lab: (L, a, b) of the sample
        palette: Non-empty sequence of reference colors

    Returns:
        MatchResult with the matched value and its CIE76 distance

    Raises:
        ConfigurationError: If the palette is empty
    """
    if not palette:
        raise ConfigurationError('Cannot match against an empty palette')

    references = np.array([reference.lab for reference in palette], dtype=np.float64)
    sample = np.asarray(sample_lab, dtype=np.float64)

    distances = cie76(references, sample)
    # argmin returns the first minimum
    index = int(np.argmin(distances))
    reference = palette[index]

    return MatchResult(
        value=reference.value,
        delta_e=float(distances[index]),
        index=index,
        reference=reference
    )


def estimate_value(sample_rgb: Sequence[float], palette: Palette) -> float:
    """Convert an RGB sample to Lab and return the nearest palette value."""
    return match_nearest(rgb_to_lab(sample_rgb), palette).value
