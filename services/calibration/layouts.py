"""
Brand layout registry.

Maps each strip brand to its ordered pad regions. Layouts assume the strip
fills the (localized) photo vertically with pads stacked top to bottom;
pads are one third of the image wide, centred, and one tenth tall.

Revisit these offsets whenever the photography framing or the supported
brands change.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Sequence, Tuple

from services.exceptions import ConfigurationError
from services.interfaces import Brand, FractionalBounds, PadRegion, Parameter

logger = logging.getLogger(__name__)

PAD_X_START_RATIO = 1.0 / 3.0
PAD_X_END_RATIO = 2.0 / 3.0
PAD_HEIGHT_RATIO = 0.10

Layout = Tuple[PadRegion, ...]


def stacked_pad(parameter: Parameter, y_start_ratio: float) -> PadRegion:
    """Pad centred horizontally, starting at a fraction of the image height."""
    return PadRegion(
        parameter=parameter,
        bounds=FractionalBounds(
            x_start_ratio=PAD_X_START_RATIO,
            x_end_ratio=PAD_X_END_RATIO,
            y_start_ratio=y_start_ratio,
            y_end_ratio=y_start_ratio + PAD_HEIGHT_RATIO
        )
    )


DEFAULT_LAYOUTS: Dict[Brand, Sequence[Tuple[Parameter, float]]] = {
    Brand.HTH_6WAY: [
        (Parameter.FREE_CHLORINE, 0.20),
        (Parameter.PH, 0.32),
        (Parameter.TOTAL_ALKALINITY, 0.44),
        (Parameter.CYANURIC_ACID, 0.56),
    ],
    # Same stack as HTH, shifted up slightly
    Brand.CLOROX_6WAY: [
        (Parameter.FREE_CHLORINE, 0.18),
        (Parameter.PH, 0.30),
        (Parameter.TOTAL_ALKALINITY, 0.42),
        (Parameter.CYANURIC_ACID, 0.54),
    ],
    Brand.AQUACHEK_7WAY: [
        (Parameter.FREE_CHLORINE, 0.16),
        (Parameter.TOTAL_CHLORINE, 0.26),
        (Parameter.PH, 0.36),
        (Parameter.TOTAL_ALKALINITY, 0.46),
        (Parameter.CYANURIC_ACID, 0.56),
    ],
}


class LayoutRegistry:
    """Read-only lookup of pad layouts by brand."""

    def __init__(self, layouts: Mapping[Brand, Iterable[PadRegion]]):
        self._layouts = MappingProxyType({brand: tuple(regions) for brand, regions in layouts.items()})

    def layout_for(self, brand: Brand) -> Layout:
        """
        Return the ordered pad regions for a brand.

        Raises:
            ConfigurationError: If the brand has no registered layout
        """
        layout = self._layouts.get(brand)
        if layout is None:
            raise ConfigurationError(
                f'No pad layout registered for brand {brand.value}',
                details={'brand': brand.value}
            )
        return layout

    def brands(self):
        return list(self._layouts.keys())

    def items(self):
        return self._layouts.items()

    def __contains__(self, brand) -> bool:
        return brand in self._layouts


def build_default_layout_registry() -> LayoutRegistry:
    """Build the layout registry from the bundled pad offsets."""
    layouts = {
        brand: [stacked_pad(parameter, y_start) for parameter, y_start in pads]
        for brand, pads in DEFAULT_LAYOUTS.items()
    }
    logger.debug(f'Loaded pad layouts for {len(layouts)} brands')
    return LayoutRegistry(layouts)
