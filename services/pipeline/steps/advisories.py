"""
Advisory notes derived from estimated chemistry.

Simple threshold rules on the aggregated values. This is guidance text for
the pool owner, not part of the estimation itself. Only the pH band is
checked by default; the chlorine, alkalinity and stabilizer rules are
enabled with ADVISORY_EXTENDED.
"""

from typing import Dict, List, Optional

from config.analysis_config import ADVISORY_EXTENDED, get_advisory_bands


def build_advisory_notes(
    values: Dict[str, float],
    bands: Optional[Dict[str, float]] = None,
    extended: Optional[bool] = None
) -> List[str]:
    """
    Generate advisory notes for out-of-band values.

    Args:
        values: Estimated values keyed by parameter id ('ph', 'free_chlorine', ...)
        bands: Thresholds; defaults to the configured advisory bands
        extended: Also check chlorine, alkalinity and cyanuric acid;
            defaults to ADVISORY_EXTENDED

    Returns:
        List of advisory strings, empty when everything is in range
    """
    bands = bands or get_advisory_bands()
    extended = ADVISORY_EXTENDED if extended is None else extended
    notes = []

    ph = values.get('ph')
    if ph is not None:
        if ph > bands['ph_max']:
            notes.append('pH is high. Consider adding acid.')
        elif ph < bands['ph_min']:
            notes.append('pH is low. Consider adding base.')

    if not extended:
        return notes

    free_chlorine = values.get('free_chlorine')
    if free_chlorine is not None:
        if free_chlorine < bands['free_chlorine_min']:
            notes.append('Free chlorine is low. Consider adding chlorine.')
        elif free_chlorine > bands['free_chlorine_max']:
            notes.append('Free chlorine is high. Hold off on chlorine and avoid swimming until it drops.')

    total_alkalinity = values.get('total_alkalinity')
    if total_alkalinity is not None:
        if total_alkalinity < bands['total_alkalinity_min']:
            notes.append('Total alkalinity is low. Consider adding alkalinity increaser.')
        elif total_alkalinity > bands['total_alkalinity_max']:
            notes.append('Total alkalinity is high. Consider lowering it with acid.')

    cyanuric_acid = values.get('cyanuric_acid')
    if cyanuric_acid is not None and cyanuric_acid > bands['cyanuric_acid_max']:
        notes.append('Cyanuric acid is high. Partial drain and refill may be needed.')

    total_chlorine = values.get('total_chlorine')
    if total_chlorine is not None and free_chlorine is not None:
        if total_chlorine - free_chlorine > bands['combined_chlorine_max']:
            notes.append('Combined chlorine is elevated. Consider shocking the pool.')

    return notes
