"""
Strip analysis configuration.

Values can be overridden through environment variables or a .env file.
"""

import os
from typing import Dict

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Brand used when the request omits one or names an unknown brand
DEFAULT_BRAND: str = os.getenv('DEFAULT_BRAND', 'hth_6way')

# Strip localizer: 'passthrough' (photo already framed) or 'contour'
STRIP_LOCALIZER: str = os.getenv('STRIP_LOCALIZER', 'passthrough')

# Values reported when the brand layout has no pad for a field
FALLBACK_FREE_CHLORINE_PPM: float = float(os.getenv('FALLBACK_FREE_CHLORINE_PPM', '0.0'))
FALLBACK_PH: float = float(os.getenv('FALLBACK_PH', '7.2'))
FALLBACK_TOTAL_ALKALINITY_PPM: float = float(os.getenv('FALLBACK_TOTAL_ALKALINITY_PPM', '80.0'))
FALLBACK_CYANURIC_ACID_PPM: float = float(os.getenv('FALLBACK_CYANURIC_ACID_PPM', '0.0'))

# Only the pH band is checked unless extended advisories are enabled
ADVISORY_EXTENDED: bool = os.getenv('ADVISORY_EXTENDED', 'false').lower() == 'true'

# Advisory bands (inclusive ideal ranges)
PH_MIN: float = float(os.getenv('ADVISORY_PH_MIN', '7.2'))
PH_MAX: float = float(os.getenv('ADVISORY_PH_MAX', '7.6'))
FREE_CHLORINE_MIN: float = float(os.getenv('ADVISORY_FREE_CHLORINE_MIN', '1.0'))
FREE_CHLORINE_MAX: float = float(os.getenv('ADVISORY_FREE_CHLORINE_MAX', '5.0'))
TOTAL_ALKALINITY_MIN: float = float(os.getenv('ADVISORY_TOTAL_ALKALINITY_MIN', '80.0'))
TOTAL_ALKALINITY_MAX: float = float(os.getenv('ADVISORY_TOTAL_ALKALINITY_MAX', '120.0'))
CYANURIC_ACID_MAX: float = float(os.getenv('ADVISORY_CYANURIC_ACID_MAX', '90.0'))
COMBINED_CHLORINE_MAX: float = float(os.getenv('ADVISORY_COMBINED_CHLORINE_MAX', '0.5'))

# HTTP layer
MAX_CONTENT_LENGTH_MB: int = int(os.getenv('MAX_CONTENT_LENGTH_MB', '10'))
ANALYZE_RATE_LIMIT: str = os.getenv('ANALYZE_RATE_LIMIT', '10 per minute')


def get_fallback_values() -> Dict[str, float]:
    """Fallback value per result field, keyed by parameter id."""
    return {
        'free_chlorine': FALLBACK_FREE_CHLORINE_PPM,
        'ph': FALLBACK_PH,
        'total_alkalinity': FALLBACK_TOTAL_ALKALINITY_PPM,
        'cyanuric_acid': FALLBACK_CYANURIC_ACID_PPM
    }


def get_advisory_bands() -> Dict[str, float]:
    """Thresholds used to generate advisory notes."""
    return {
        'ph_min': PH_MIN,
        'ph_max': PH_MAX,
        'free_chlorine_min': FREE_CHLORINE_MIN,
        'free_chlorine_max': FREE_CHLORINE_MAX,
        'total_alkalinity_min': TOTAL_ALKALINITY_MIN,
        'total_alkalinity_max': TOTAL_ALKALINITY_MAX,
        'cyanuric_acid_max': CYANURIC_ACID_MAX,
        'combined_chlorine_max': COMBINED_CHLORINE_MAX
    }

