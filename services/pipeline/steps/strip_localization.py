"""
Strip localization.

A localizer takes the decoded photo and returns an image in which the strip
is upright and fills the frame, so that brand layouts (expressed relative to
the image) line up with the physical pads.

- PassthroughStripLocalizer: returns the photo unchanged (default)
- ContourStripLocalizer: Canny edges → largest strip-shaped contour →
  perspective warp to an upright crop
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class BaseStripLocalizer(ABC):
    """Base class for all strip localization methods."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def localize(self, image: np.ndarray) -> np.ndarray:
        """
        Return a corrected image of the strip.

        Args:
            image: Input image (RGB format)

        Returns:
            Image (RGB format) with the strip upright and filling the frame
        """
        pass

    def get_method_name(self) -> str:
        return self.__class__.__name__.replace('StripLocalizer', '').lower()


class PassthroughStripLocalizer(BaseStripLocalizer):
    """Assumes the photo is already framed on the strip."""

    def localize(self, image: np.ndarray) -> np.ndarray:
        return image


class ContourStripLocalizer(BaseStripLocalizer):
    """
    Find the strip as the largest elongated contour and warp it upright.

    Falls back to the untouched image when no strip-shaped contour is found,
    so a difficult photo still gets analysed with the raw framing.
    """

    def __init__(
        self,
        canny_low: int = 50,
        canny_high: int = 150,
        min_area_ratio: float = 0.01,
        min_aspect_ratio: float = 3.0,
        max_aspect_ratio: float = 20.0
    ):
        super().__init__()
        self.canny_low = canny_low
        self.canny_high = canny_high
        self.min_area_ratio = min_area_ratio
        self.min_aspect_ratio = min_aspect_ratio
        self.max_aspect_ratio = max_aspect_ratio

    def localize(self, image: np.ndarray) -> np.ndarray:
        if image.ndim != 3 or image.shape[0] < 2 or image.shape[1] < 2:
            return image

        rect = self._find_strip_rect(image)
        if rect is None:
            self.logger.debug('No strip-shaped contour found, using full image')
            return image

        return self._warp_upright(image, rect)

    def _find_strip_rect(self, image: np.ndarray) -> Optional[tuple]:
        h, w = image.shape[:2]

        gray = cv2.cvtColor(np.ascontiguousarray(image[..., :3], dtype=np.uint8), cv2.COLOR_RGB2GRAY)
        blur = cv2.GaussianBlur(gray, (5, 5), 0)
        edges = cv2.Canny(blur, self.canny_low, self.canny_high)
        contours, _ = cv2.findContours(edges, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        min_area = w * h * self.min_area_ratio
        candidates = []
        for cnt in contours:
            rect = cv2.minAreaRect(cnt)
            (rect_w, rect_h) = rect[1]
            if rect_w == 0 or rect_h == 0:
                continue
            area = rect_w * rect_h
            if area < min_area:
                continue
            aspect_ratio = max(rect_w, rect_h) / min(rect_w, rect_h)
            if aspect_ratio < self.min_aspect_ratio or aspect_ratio > self.max_aspect_ratio:
                continue
            candidates.append((rect, area))

        if not candidates:
            return None

        candidates.sort(key=lambda c: c[1], reverse=True)
        self.logger.debug(f'Strip contour selected from {len(candidates)} candidates')
        return candidates[0][0]

    def _warp_upright(self, image: np.ndarray, rect: tuple) -> np.ndarray:
        box = cv2.boxPoints(rect).astype(np.float32)

        # Order corners: top-left, top-right, bottom-right, bottom-left
        s = box.sum(axis=1)
        d = np.diff(box, axis=1).reshape(-1)
        ordered = np.array([
            box[np.argmin(s)],
            box[np.argmin(d)],
            box[np.argmax(s)],
            box[np.argmax(d)]
        ], dtype=np.float32)

        width = int(round(max(np.linalg.norm(ordered[0] - ordered[1]), np.linalg.norm(ordered[3] - ordered[2]))))
        height = int(round(max(np.linalg.norm(ordered[0] - ordered[3]), np.linalg.norm(ordered[1] - ordered[2]))))
        if width < 1 or height < 1:
            return image

        target = np.array([[0, 0], [width - 1, 0], [width - 1, height - 1], [0, height - 1]], dtype=np.float32)
        matrix = cv2.getPerspectiveTransform(ordered, target)
        warped = cv2.warpPerspective(image, matrix, (width, height))

        # Layouts expect a vertical strip
        if width > height:
            warped = cv2.rotate(warped, cv2.ROTATE_90_CLOCKWISE)

        self.logger.debug(f'Strip warped to {warped.shape[1]}x{warped.shape[0]}')
        return warped


LOCALIZERS = {
    'passthrough': PassthroughStripLocalizer,
    'contour': ContourStripLocalizer,
}


def create_strip_localizer(name: str = 'passthrough') -> BaseStripLocalizer:
    """
    Create a localizer by name.

    Args:
        name: 'passthrough' or 'contour'

    Raises:
        ValueError: If the name is unknown
    """
    key = (name or 'passthrough').strip().lower()
    if key not in LOCALIZERS:
        raise ValueError(f'Unknown strip localizer "{name}", expected one of: {", ".join(LOCALIZERS)}')
    return LOCALIZERS[key]()
