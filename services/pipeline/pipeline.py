"""
Pipeline service for analysing test strip images.

Orchestrates: Strip Localization → Pad Sampling → Lab Conversion → Palette Matching
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

import numpy as np

from config.analysis_config import (
    ADVISORY_EXTENDED,
    DEFAULT_BRAND,
    STRIP_LOCALIZER,
    get_advisory_bands,
    get_fallback_values
)
from services.calibration.layouts import LayoutRegistry, build_default_layout_registry
from services.calibration.palettes import PaletteRegistry, build_default_palette_registry
from services.exceptions import ConfigurationError
from services.interfaces import AnalysisResult, Brand, PadReading, Parameter
from services.pipeline.steps.advisories import build_advisory_notes
from services.pipeline.steps.color_matching import match_nearest
from services.pipeline.steps.pad_sampling import PadSamplingService
from services.pipeline.steps.strip_localization import BaseStripLocalizer, create_strip_localizer
from utils.color_conversion import rgb_to_lab
from utils.image_loader import decode_image_bytes, get_image_info

logger = logging.getLogger(__name__)

# Parameters with a dedicated AnalysisResult field, in field order
RESULT_PARAMETERS = (
    Parameter.FREE_CHLORINE,
    Parameter.PH,
    Parameter.TOTAL_ALKALINITY,
    Parameter.CYANURIC_ACID,
)


def unmatched_note(parameter: Parameter) -> str:
    return f'Could not determine value for {parameter.value}'


def validate_configuration(
    layouts: LayoutRegistry,
    palettes: PaletteRegistry,
    fallbacks: Dict[str, float],
    brands: Iterable[Brand] = tuple(Brand)
) -> None:
    """
    Check that every brand can be analysed.

    Raises:
        ConfigurationError: If a brand has no (or an empty) layout, a palette
            used by a layout is empty, or a layout parameter has neither a
            palette nor a fallback value
    """
    for brand in brands:
        layout = layouts.layout_for(brand)
        if not layout:
            raise ConfigurationError(f'Pad layout for {brand.value} is empty', details={'brand': brand.value})

        for region in layout:
            parameter = region.parameter
            palette = palettes.get(brand, parameter)
            if palette is None:
                if parameter.value not in fallbacks:
                    raise ConfigurationError(
                        f'Layout for {brand.value} reads {parameter.value}, '
                        f'which has neither a palette nor a fallback value',
                        details={'brand': brand.value, 'parameter': parameter.value}
                    )
                logger.warning(f'No palette for {parameter.value} on {brand.value}, fallback will be used')
            elif len(palette) == 0:
                raise ConfigurationError(
                    f'Palette for {parameter.value} on {brand.value} is empty',
                    details={'brand': brand.value, 'parameter': parameter.value}
                )


class StripAnalysisService:
    """
    Main pipeline service that estimates pool chemistry from a strip photo.

    Pipeline: Image → Strip Localization → Pad Sampling → Lab → Nearest Reference

    Layouts and palettes are read-only after construction, so one instance
    can serve concurrent requests.
    """

    def __init__(
        self,
        layouts: Optional[LayoutRegistry] = None,
        palettes: Optional[PaletteRegistry] = None,
        localizer: Optional[BaseStripLocalizer] = None,
        default_brand: Optional[Brand] = None,
        fallbacks: Optional[Dict[str, float]] = None,
        advisory_bands: Optional[Dict[str, float]] = None,
        advisory_extended: Optional[bool] = None
    ):
        """
        Initialize strip analysis service.

        Args:
            layouts: Optional pre-built layout registry
            palettes: Optional pre-built palette registry
            localizer: Optional strip localizer (defaults to STRIP_LOCALIZER)
            default_brand: Brand used when the request has none
            fallbacks: Fallback value per result field, keyed by parameter id
            advisory_bands: Thresholds for advisory notes
            advisory_extended: Also run the non-pH advisory rules

        Raises:
            ConfigurationError: If layouts and palettes are inconsistent
        """
        self.layouts = layouts if layouts is not None else build_default_layout_registry()
        self.palettes = palettes if palettes is not None else build_default_palette_registry()
        self.localizer = localizer or create_strip_localizer(STRIP_LOCALIZER)
        self.default_brand = default_brand or Brand.parse(DEFAULT_BRAND, Brand.HTH_6WAY)
        self.fallbacks = get_fallback_values() if fallbacks is None else dict(fallbacks)
        self.advisory_bands = advisory_bands or get_advisory_bands()
        self.advisory_extended = ADVISORY_EXTENDED if advisory_extended is None else advisory_extended
        self.sampling_service = PadSamplingService()

        missing = [p.value for p in RESULT_PARAMETERS if p.value not in self.fallbacks]
        if missing:
            raise ConfigurationError(f'Missing fallback values for: {", ".join(missing)}')

        validate_configuration(self.layouts, self.palettes, self.fallbacks)
        logger.info(
            f'Strip analysis ready: {len(self.layouts.brands())} brands, '
            f'{len(self.palettes)} palettes, localizer={self.localizer.get_method_name()}'
        )

    def resolve_brand(self, brand: Union[Brand, str, None]) -> Brand:
        if isinstance(brand, Brand):
            return brand
        return Brand.parse(brand, self.default_brand)

    def analyze(
        self,
        image: Optional[np.ndarray] = None,
        image_bytes: Optional[bytes] = None,
        brand: Union[Brand, str, None] = None
    ) -> AnalysisResult:
        """
        Estimate chemistry values from a strip image.

        Args:
            image: Decoded image in RGB format. Required if image_bytes is None.
            image_bytes: Encoded image bytes. Required if image is None.
            brand: Brand enum or identifier; unknown/missing uses the default brand

        Returns:
            AnalysisResult with one value per field and any notes

        Raises:
            ValueError: If neither image nor image_bytes is given
            ImageDecodeError: If image_bytes cannot be decoded
        """
        if image is None and image_bytes is None:
            raise ValueError('Either image or image_bytes must be provided')

        if image is None:
            image = decode_image_bytes(image_bytes)

        brand = self.resolve_brand(brand)
        layout = self.layouts.layout_for(brand)

        strip_image = self.localizer.localize(image)
        logger.debug(f'Analysing {brand.value} strip, image info: {get_image_info(strip_image)}')

        notes: List[str] = []
        readings: Dict[str, float] = {}
        pads: List[PadReading] = []

        for sample in self.sampling_service.sample_pads(strip_image, layout):
            parameter = sample.parameter
            palette = self.palettes.get(brand, parameter)
            if not palette:
                logger.warning(f'No palette for {parameter.value} on {brand.value}')
                _add_note(notes, unmatched_note(parameter))
                continue

            lab = rgb_to_lab(sample.rgb)
            match = match_nearest(lab, palette)
            readings.setdefault(parameter.value, match.value)
            pads.append(PadReading(
                parameter=parameter.value,
                value=match.value,
                delta_e=match.delta_e,
                rgb=sample.rgb,
                lab=lab,
                rect=sample.rect
            ))

            logger.debug(
                f'Pad {parameter.value}: rgb=({sample.rgb[0]:.1f}, {sample.rgb[1]:.1f}, {sample.rgb[2]:.1f}) '
                f'lab=({lab[0]:.2f}, {lab[1]:.2f}, {lab[2]:.2f}) '
                f'value={match.value} delta_e={match.delta_e:.2f} pixels={sample.pixel_count}'
            )

        values = {}
        for parameter in RESULT_PARAMETERS:
            if parameter.value in readings:
                values[parameter.value] = readings[parameter.value]
            else:
                values[parameter.value] = self.fallbacks[parameter.value]
                _add_note(notes, unmatched_note(parameter))

        for note in build_advisory_notes(readings, self.advisory_bands, self.advisory_extended):
            _add_note(notes, note)

        return AnalysisResult(
            free_chlorine_ppm=values[Parameter.FREE_CHLORINE.value],
            ph=values[Parameter.PH.value],
            total_alkalinity_ppm=values[Parameter.TOTAL_ALKALINITY.value],
            cyanuric_acid_ppm=values[Parameter.CYANURIC_ACID.value],
            notes=tuple(notes),
            brand=brand.value,
            readings=readings,
            pads=tuple(pads)
        )


def _add_note(notes: List[str], note: str) -> None:
    if note not in notes:
        notes.append(note)
