"""
Pipeline step services.

Steps:
- Strip localizers: put the strip upright and in frame
- PadSamplingService: averages the color of each pad region
- match_nearest: maps a Lab sample to the closest calibrated value
- build_advisory_notes: threshold advice on the estimated chemistry
"""

from services.pipeline.steps.strip_localization import (
    BaseStripLocalizer,
    ContourStripLocalizer,
    PassthroughStripLocalizer,
    create_strip_localizer
)
from services.pipeline.steps.pad_sampling import PadSamplingService, sample_region_mean_rgb
from services.pipeline.steps.color_matching import MatchResult, match_nearest
from services.pipeline.steps.advisories import build_advisory_notes

__all__ = [
    'BaseStripLocalizer',
    'ContourStripLocalizer',
    'PassthroughStripLocalizer',
    'create_strip_localizer',
    'PadSamplingService',
    'sample_region_mean_rgb',
    'MatchResult',
    'match_nearest',
    'build_advisory_notes'
]
