"""
Distance and Angle Estimator from Bounding Rectangle
====================================================

Converts a particle's bounding rectangle width to a range estimate using
a pinhole camera with a known horizontal field of view:

    normalized_width = 2 * (right - left) / image_width_pixels
    distance_ft = target_width_in / (normalized_width * INCHES_PER_FOOT * tan(fov / 2))

Target widths are physical tote side widths in inches; distances are
reported in feet.

Usage:
    estimator = DistanceEstimator.from_config(vision_config)
    distance_ft = estimator.estimate(particle, image_width=320, is_long=True)
    if distance_ft is UNDEFINED_DISTANCE:
        ...
"""

import math
from typing import Optional

from ..core.config import VisionConfig
from ..detectors.base import ParticleMeasurement

INCHES_PER_FOOT = 12.0

# Returned when no finite distance can be computed
UNDEFINED_DISTANCE = None


def estimate_distance(
    particle: ParticleMeasurement,
    image_width_pixels: int,
    is_long_orientation: bool,
    config: VisionConfig,
) -> Optional[float]:
    """
    Estimate range to a particle in feet.

    Returns:
        Distance in feet, or UNDEFINED_DISTANCE for a degenerate bounding
        rectangle or image width
    """
    estimator = DistanceEstimator.from_config(config, frame_width=image_width_pixels)
    return estimator.estimate(particle, is_long_orientation)


class DistanceEstimator:
    """
    Estimates distance and bearing to a tote from its bounding rectangle.

    Args:
        target_long_width_in: Tote long side width in inches
        target_short_width_in: Tote short side width in inches
        frame_width: Camera frame width in pixels
        horizontal_fov: Camera horizontal field of view in degrees
    """

    def __init__(self,
                 target_long_width_in: float = 26.9,
                 target_short_width_in: float = 16.9,
                 frame_width: int = 320,
                 horizontal_fov: float = 49.4):

        self.target_long_width_in = target_long_width_in
        self.target_short_width_in = target_short_width_in
        self.frame_width = frame_width
        self.horizontal_fov = horizontal_fov

        # Precompute
        self._fov_rad = math.radians(horizontal_fov)
        self._tan_half_fov = math.tan(self._fov_rad / 2.0)
        self._half_width = frame_width / 2.0

    @classmethod
    def from_config(cls, config: VisionConfig, frame_width: int = 320) -> 'DistanceEstimator':
        return cls(
            target_long_width_in=config.target_long_width_in,
            target_short_width_in=config.target_short_width_in,
            frame_width=frame_width,
            horizontal_fov=config.view_angle_deg,
        )

    def normalized_width(self, particle: ParticleMeasurement) -> Optional[float]:
        """Particle width as a fraction of half the frame width."""
        if self.frame_width <= 0:
            return None
        width = 2.0 * particle.width / self.frame_width
        if not math.isfinite(width) or width <= 0:
            return None
        return width

    def estimate(self, particle: ParticleMeasurement, is_long: bool) -> Optional[float]:
        """
        Estimate distance to the particle.

        Args:
            particle: Measured particle
            is_long: True if the tote's long side faces the camera

        Returns:
            Distance in feet, or UNDEFINED_DISTANCE
        """
        normalized = self.normalized_width(particle)
        if normalized is None:
            return UNDEFINED_DISTANCE

        target_width_in = self.target_long_width_in if is_long else self.target_short_width_in
        distance_ft = target_width_in / (normalized * INCHES_PER_FOOT * self._tan_half_fov)
        if not math.isfinite(distance_ft):
            return UNDEFINED_DISTANCE
        return distance_ft

    def get_normalized_position(self, particle: ParticleMeasurement) -> float:
        """
        Horizontal center of the particle in the -1 (left) to +1 (right) range.

        Useful for rotating towards a tote without a range estimate.
        """
        if self._half_width <= 0:
            return 0.0
        center_x = (particle.left + particle.right) / 2.0
        return (center_x - self._half_width) / self._half_width

    def estimate_angle(self, particle: ParticleMeasurement) -> float:
        """Horizontal angle from the camera axis in radians (+ = right)."""
        return math.atan(self.get_normalized_position(particle) * self._tan_half_fov)
