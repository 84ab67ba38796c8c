"""
Exceptions for the PoolStrip CV Service.

Only configuration problems are fatal. Degenerate pad regions and missing
palettes are handled inside the pipeline and never raise.
"""

from typing import Dict, Optional


class StripAnalysisError(Exception):
    """Base exception for strip analysis."""

    def __init__(self, message: str, error_code: str = 'PROCESSING_ERROR', details: Optional[Dict] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(StripAnalysisError):
    """Raised at startup when layouts and palettes are inconsistent."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, error_code='CONFIGURATION_ERROR', details=details)


class ImageDecodeError(StripAnalysisError, ValueError):
    """Raised when uploaded bytes cannot be decoded into an image."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, error_code='IMAGE_DECODE_ERROR', details=details)
