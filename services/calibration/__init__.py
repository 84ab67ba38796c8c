"""
Calibration data for test strip analysis.

- PaletteRegistry: per-brand, per-parameter reference colors
- LayoutRegistry: per-brand pad geometry
"""

from services.calibration.palettes import PaletteRegistry, build_default_palette_registry
from services.calibration.layouts import LayoutRegistry, build_default_layout_registry

__all__ = [
    'PaletteRegistry',
    'LayoutRegistry',
    'build_default_palette_registry',
    'build_default_layout_registry'
]
