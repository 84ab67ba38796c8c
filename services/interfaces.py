"""
Service interfaces and type definitions for PoolStrip CV Service.

This module defines the data structures shared by the analysis pipeline:
brands, chemical parameters, pad region descriptors, calibration points
and the final analysis result.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, TypedDict, Union

logger = logging.getLogger(__name__)

# (r, g, b) channel intensities, nominally 0-255
RGBColor = Tuple[float, float, float]

# (L, a, b) in standard CIE Lab units
LabTriplet = Tuple[float, float, float]


class LabColor(TypedDict):
    """LAB color space values."""
    L: float  # Lightness (0-100)
    a: float  # Green-Red axis
    b: float  # Blue-Yellow axis


class Brand(Enum):
    """Supported test strip products."""
    HTH_6WAY = 'hth_6way'
    CLOROX_6WAY = 'clorox_6way'
    AQUACHEK_7WAY = 'aquachek_7way'

    @classmethod
    def parse(cls, value: Optional[str], default: 'Brand') -> 'Brand':
        """
        Resolve a brand identifier supplied by a caller.

        Matching ignores case, spaces, hyphens and underscores, so
        "HTH-6way", "hth 6 way" and "hth_6way" are the same brand.
        Missing or unrecognized values resolve to ``default``.
        """
        if value is None or not str(value).strip():
            return default

        key = _normalize_brand_key(value)
        for brand in cls:
            if _normalize_brand_key(brand.value) == key:
                return brand

        logger.warning(f'Unrecognized brand "{value}", using {default.value}')
        return default


def _normalize_brand_key(value: str) -> str:
    return re.sub(r'[\s_\-]+', '', str(value)).lower()


class Parameter(Enum):
    """Measurable chemical properties. Join key between a pad and its palette."""
    FREE_CHLORINE = 'free_chlorine'
    TOTAL_CHLORINE = 'total_chlorine'
    PH = 'ph'
    TOTAL_ALKALINITY = 'total_alkalinity'
    CYANURIC_ACID = 'cyanuric_acid'
    HARDNESS = 'hardness'
    BROMINE = 'bromine'


@dataclass(frozen=True)
class PixelRect:
    """
    Canonical pixel rectangle, half-open: [left, right) x [top, bottom).

    Every region descriptor resolves to this shape before sampling.
    """
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return max(0, self.right - self.left)

    @property
    def height(self) -> int:
        return max(0, self.bottom - self.top)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.area == 0

    def clip(self, width: int, height: int) -> 'PixelRect':
        """Clip to the image bounds [0, width) x [0, height)."""
        width = max(0, width)
        height = max(0, height)
        left = min(max(self.left, 0), width)
        top = min(max(self.top, 0), height)
        right = min(max(self.right, left), width)
        bottom = min(max(self.bottom, top), height)
        return PixelRect(left=left, top=top, right=right, bottom=bottom)

    def to_dict(self) -> Dict:
        return {
            'x': self.left,
            'y': self.top,
            'width': self.width,
            'height': self.height,
            'left': self.left,
            'top': self.top,
            'right': self.right,
            'bottom': self.bottom
        }


@dataclass(frozen=True)
class AbsolutePixels:
    """Region given in absolute pixel coordinates of the (corrected) photo."""
    x: int
    y: int
    width: int
    height: int

    def resolve(self, image_width: int, image_height: int) -> PixelRect:
        return PixelRect(
            left=self.x,
            top=self.y,
            right=self.x + self.width,
            bottom=self.y + self.height
        )


@dataclass(frozen=True)
class FractionalBounds:
    """Region given as fractions of the image size. Resolution independent."""
    x_start_ratio: float
    x_end_ratio: float
    y_start_ratio: float
    y_end_ratio: float

    def resolve(self, image_width: int, image_height: int) -> PixelRect:
        return PixelRect(
            left=math.floor(self.x_start_ratio * image_width),
            top=math.floor(self.y_start_ratio * image_height),
            right=math.floor(self.x_end_ratio * image_width),
            bottom=math.floor(self.y_end_ratio * image_height)
        )


RegionBounds = Union[AbsolutePixels, FractionalBounds]


@dataclass(frozen=True)
class PadRegion:
    """One entry of a brand layout: which parameter is read from which window."""
    parameter: Parameter
    bounds: RegionBounds

    def resolve(self, image_width: int, image_height: int) -> PixelRect:
        return self.bounds.resolve(image_width, image_height)


@dataclass(frozen=True)
class ReferenceColor:
    """One calibration point: the Lab color a pad shows at a known value."""
    value: float
    lab: LabTriplet
    swatch_rgb: Optional[RGBColor] = None  # chart swatch the Lab was derived from


Palette = Tuple[ReferenceColor, ...]


@dataclass(frozen=True)
class PadReading:
    """Per-pad detail of one analysis: the sampled color and what it matched."""
    parameter: str
    value: float
    delta_e: float
    rgb: RGBColor
    lab: LabTriplet
    rect: PixelRect

    def to_dict(self) -> Dict:
        from utils.color_conversion import lab_to_dict, rgb_to_hex

        return {
            'parameter': self.parameter,
            'value': self.value,
            'delta_e': round(self.delta_e, 2),
            'rgb': [round(channel, 1) for channel in self.rgb],
            'hex': rgb_to_hex(*(round(channel) for channel in self.rgb)),
            'lab': lab_to_dict(self.lab),
            'region': self.rect.to_dict()
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Terminal output of a strip analysis.

    Built once per request and never mutated. ``readings`` holds every
    parameter the brand layout actually measured (including ones without a
    dedicated field, such as total chlorine) as a read-only mapping.
    ``pads`` keeps the per-pad colors behind those readings.
    """
    free_chlorine_ppm: float
    ph: float
    total_alkalinity_ppm: float
    cyanuric_acid_ppm: float
    notes: Tuple[str, ...] = ()
    brand: Optional[str] = None
    readings: Mapping[str, float] = field(default_factory=dict, hash=False)
    pads: Tuple[PadReading, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'notes', tuple(self.notes))
        object.__setattr__(self, 'readings', MappingProxyType(dict(self.readings)))
        object.__setattr__(self, 'pads', tuple(self.pads))

    def to_dict(self) -> Dict:
        return {
            'free_chlorine_ppm': self.free_chlorine_ppm,
            'ph': self.ph,
            'total_alkalinity_ppm': self.total_alkalinity_ppm,
            'cyanuric_acid_ppm': self.cyanuric_acid_ppm,
            'notes': list(self.notes),
            'brand': self.brand,
            'readings': dict(self.readings),
            'pads': [pad.to_dict() for pad in self.pads]
        }
