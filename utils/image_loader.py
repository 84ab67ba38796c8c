"""
Image loading utilities for PoolStrip CV Service.
Decodes uploaded image bytes into RGB arrays.
"""

import cv2
import numpy as np
import logging

from services.exceptions import ImageDecodeError
from utils.color_conversion import bgr_to_rgb

logger = logging.getLogger(__name__)


def decode_image_bytes(data: bytes) -> np.ndarray:
    """
    Decode raw image bytes (JPEG, PNG, ...) into an RGB image.

    Args:
        data: Encoded image bytes

    Returns:
        Image array in RGB format, shape (H, W, 3), dtype uint8

    Raises:
        ImageDecodeError: If the bytes are empty or cannot be decoded
    """
    if not data:
        raise ImageDecodeError('Image data is empty')

    image_array = np.frombuffer(data, np.uint8)
    image = cv2.imdecode(image_array, cv2.IMREAD_COLOR)

    if image is None or image.size == 0:
        raise ImageDecodeError(
            'Failed to decode image data',
            details={'size_bytes': len(data)}
        )

    height, width = image.shape[:2]
    logger.debug(f'Decoded image: {width}x{height} pixels')
    return bgr_to_rgb(image)


def get_image_info(image: np.ndarray) -> dict:
    """
    Get basic information about an image.

    Args:
        image: Image array

    Returns:
        Dictionary with image information (width, height, channels, dtype)
    """
    height, width = image.shape[:2]
    channels = image.shape[2] if len(image.shape) == 3 else 1

    return {
        'width': width,
        'height': height,
        'channels': channels,
        'dtype': str(image.dtype),
        'size_bytes': image.nbytes
    }
