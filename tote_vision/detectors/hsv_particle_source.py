"""
HSV Particle Source
===================

Measures tote-colored particles with OpenCV:

    1. Convert the BGR frame to HSV
    2. Threshold with the active color's hue/sat/val range
    3. Label 8-connected components
    4. Drop particles smaller than the area minimum (percent of image)
    5. Measure area, bounding rectangle and convex hull area of the rest
       (hull taken over pixel squares, so a solid rectangle fills its hull)

Particles are returned in component label order (raster scan order of
each particle's first pixel), which is the detection order the ranker
uses to break ties.

Usage:
    source = HsvParticleSource(color_range=YELLOW_RANGE, area_minimum_percent=2.0)
    source.initialize()
    result = source.measure(frame)
"""

import logging
from typing import List, Optional

import cv2
import numpy as np

from ..core.config import ColorRange, VisionConfig, YELLOW_RANGE
from .base import MeasurementResult, ParticleMeasurement, ParticleSourceBase

logger = logging.getLogger(__name__)

PIXEL_CORNERS = np.array([(0, 0), (1, 0), (0, 1), (1, 1)], dtype=np.int32)


class HsvParticleSource(ParticleSourceBase):
    """
    Particle source backed by OpenCV color thresholding.

    Args:
        color_range: HSV range to threshold with
        area_minimum_percent: Particles below this percent of the image are dropped
        connectivity: Pixel connectivity for labelling (4 or 8)
    """

    def __init__(
        self,
        color_range: ColorRange = YELLOW_RANGE,
        area_minimum_percent: float = 2.0,
        connectivity: int = 8,
        **kwargs
    ):
        super().__init__(**kwargs)
        if connectivity not in (4, 8):
            raise ValueError(f"connectivity must be 4 or 8, got {connectivity}")

        self.color_range = color_range
        self.area_minimum_percent = area_minimum_percent
        self.connectivity = connectivity
        self._last_mask: Optional[np.ndarray] = None

    @property
    def name(self) -> str:
        return "HSV Particle Source"

    @property
    def last_mask(self) -> Optional[np.ndarray]:
        """Binary image from the last measurement."""
        return self._last_mask

    def apply_config(self, vision: VisionConfig) -> None:
        """Take the color range and area minimum from a vision snapshot."""
        self.color_range = vision.active_range
        self.area_minimum_percent = vision.area_minimum_percent

    def threshold(self, frame: np.ndarray) -> np.ndarray:
        """Return the binary mask of pixels inside the color range."""
        hsv = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
        lower = np.array(self.color_range.lower, dtype=np.uint8)
        upper = np.array(self.color_range.upper, dtype=np.uint8)
        return cv2.inRange(hsv, lower, upper)

    def _measure_impl(self, frame: np.ndarray) -> MeasurementResult:
        mask = self.threshold(frame)
        self._last_mask = mask

        count, labels, stats, _ = cv2.connectedComponentsWithStats(
            mask, connectivity=self.connectivity)
        image_area = float(mask.shape[0] * mask.shape[1])

        particles: List[ParticleMeasurement] = []
        # Label 0 is the background
        for label in range(1, count):
            area = float(stats[label, cv2.CC_STAT_AREA])
            percent_area = 100.0 * area / image_area
            if percent_area < self.area_minimum_percent:
                continue

            left = float(stats[label, cv2.CC_STAT_LEFT])
            top = float(stats[label, cv2.CC_STAT_TOP])
            width = float(stats[label, cv2.CC_STAT_WIDTH])
            height = float(stats[label, cv2.CC_STAT_HEIGHT])

            particles.append(ParticleMeasurement(
                percent_area=percent_area,
                area=area,
                convex_hull_area=self._hull_area(labels, label),
                top=top,
                left=left,
                bottom=top + height,
                right=left + width,
            ))

        masked_count = count - 1
        logger.debug(f"Masked particles: {masked_count}, filtered particles: {len(particles)}")

        return MeasurementResult(
            particles=tuple(particles),
            masked_count=masked_count,
            filtered_count=len(particles),
        )

    @staticmethod
    def _hull_area(labels: np.ndarray, label: int) -> float:
        """
        Convex hull area of one labelled particle, in pixels.

        Each pixel is treated as a unit square, so the hull runs along
        pixel corners and a solid w x h blob has hull area w * h, the
        same units as its pixel count.
        """
        points = cv2.findNonZero((labels == label).astype(np.uint8))
        if points is None:
            return 0.0
        # Corners of the hull's vertex pixels span the hull of all squares
        centers = cv2.convexHull(points).reshape(-1, 2)
        corners = np.concatenate([centers + offset for offset in PIXEL_CORNERS]).astype(np.int32)
        return float(cv2.contourArea(cv2.convexHull(corners)))
