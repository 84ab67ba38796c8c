"""
Pipeline services for test strip analysis.

Main orchestrator: StripAnalysisService
Pipeline steps: strip localization, pad sampling, color matching, advisories
"""

from services.pipeline.pipeline import StripAnalysisService

__all__ = ['StripAnalysisService']
