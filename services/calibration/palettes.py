"""
Reference palettes for pad color matching.

Each palette pairs a known chemical value with the color a pad shows at
that value. Swatches are authored in sRGB (as read off the product color
chart) and converted to Lab once, when the registry is built.

Calibration quality depends entirely on this data; the matcher does not
interpolate, so estimates are always one of the values listed here.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from services.interfaces import Brand, Palette, Parameter, ReferenceColor, RGBColor
from utils.color_conversion import rgb_to_lab

logger = logging.getLogger(__name__)

Swatch = Tuple[float, RGBColor]  # (value, (r, g, b))


# Shared chart, taken from the HTH 6-way bottle. Used by every brand that
# does not ship its own chart for a parameter.
BASE_SWATCHES: Dict[Parameter, List[Swatch]] = {
    Parameter.FREE_CHLORINE: [
        (0.0, (240, 240, 210)),
        (1.0, (230, 230, 140)),
        (3.0, (220, 220, 90)),
        (5.0, (210, 210, 60)),
        (10.0, (200, 200, 30)),
    ],
    Parameter.PH: [
        (6.8, (255, 220, 170)),
        (7.2, (255, 180, 160)),
        (7.5, (255, 140, 150)),
        (7.8, (255, 100, 140)),
        (8.4, (255, 60, 130)),
    ],
    Parameter.TOTAL_ALKALINITY: [
        (0.0, (220, 240, 170)),
        (40.0, (200, 230, 140)),
        (80.0, (180, 220, 110)),
        (120.0, (160, 210, 80)),
        (180.0, (140, 200, 60)),
    ],
    Parameter.CYANURIC_ACID: [
        (0.0, (255, 230, 190)),
        (30.0, (255, 200, 150)),
        (50.0, (255, 170, 120)),
        (100.0, (255, 140, 90)),
    ],
}

# Brand-specific charts. Entries here replace the base chart for that brand.
BRAND_SWATCHES: Dict[Brand, Dict[Parameter, List[Swatch]]] = {
    Brand.HTH_6WAY: {},
    Brand.CLOROX_6WAY: {},
    Brand.AQUACHEK_7WAY: {
        Parameter.TOTAL_CHLORINE: [
            (0.0, (245, 240, 215)),
            (0.5, (230, 235, 185)),
            (1.0, (215, 230, 170)),
            (3.0, (180, 215, 150)),
            (5.0, (140, 200, 140)),
            (10.0, (100, 180, 135)),
        ],
    },
}


def build_palette(swatches: List[Swatch]) -> Palette:
    """
    Convert chart swatches into a palette of Lab reference colors.

    Args:
        swatches: List of (value, (r, g, b)) pairs

    Returns:
        Tuple of ReferenceColor in the same order as the swatches
    """
    return tuple(
        ReferenceColor(value=float(value), lab=rgb_to_lab(rgb), swatch_rgb=tuple(float(c) for c in rgb))
        for value, rgb in swatches
    )


class PaletteRegistry:
    """
    Read-only lookup of palettes by (brand, parameter).

    Built once at startup and shared by every request.
    """

    def __init__(self, palettes: Mapping[Tuple[Brand, Parameter], Palette]):
        self._palettes = MappingProxyType(dict(palettes))

    def get(self, brand: Brand, parameter: Parameter) -> Optional[Palette]:
        """Return the palette for a brand/parameter pair, or None if none is registered."""
        return self._palettes.get((brand, parameter))

    def items(self):
        return self._palettes.items()

    def __len__(self) -> int:
        return len(self._palettes)


def build_default_palette_registry(
    base_swatches: Optional[Dict[Parameter, List[Swatch]]] = None,
    brand_swatches: Optional[Dict[Brand, Dict[Parameter, List[Swatch]]]] = None
) -> PaletteRegistry:
    """
    Build the palette registry from the bundled chart data.

    Each brand gets the base chart, overridden parameter-by-parameter by
    its own chart where one exists.
    """
    base_swatches = BASE_SWATCHES if base_swatches is None else base_swatches
    brand_swatches = BRAND_SWATCHES if brand_swatches is None else brand_swatches

    base_palettes = {parameter: build_palette(swatches) for parameter, swatches in base_swatches.items()}

    palettes: Dict[Tuple[Brand, Parameter], Palette] = {}
    for brand in Brand:
        for parameter, palette in base_palettes.items():
            palettes[(brand, parameter)] = palette
        for parameter, swatches in brand_swatches.get(brand, {}).items():
            palettes[(brand, parameter)] = build_palette(swatches)

    logger.debug(f'Loaded {len(palettes)} reference palettes for {len(list(Brand))} brands')
    return PaletteRegistry(palettes)
