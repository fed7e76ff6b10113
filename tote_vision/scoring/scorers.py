"""
Geometric Scorers
=================

Four independent shape tests for one particle, each returning a score in
[0, 100] through ratio_to_score:

    hull_fill    How "complete" the particle is. Particles with large holes
                 score worse than a filled in shape.
    trapezoid    Convex hull area compared to the bounding box area. An ideal
                 tote's hull covers about 95.4% of its bounding box.
    long_aspect  Bounding box aspect ratio against the tote's long side.
    short_aspect Bounding box aspect ratio against the tote's short side.

A zero or negative denominator scores 0 instead of dividing.
"""

from dataclasses import dataclass

from ..core.config import VisionConfig
from ..detectors.base import ParticleMeasurement
from .normalizer import ratio_to_score

# Expected convex hull area / bounding box area of a tote silhouette
TRAPEZOID_FILL_RATIO = 0.954


@dataclass(frozen=True)
class ScoreSet:
    """Scores of one particle, each in [0, 100]."""
    hull_fill: float
    trapezoid: float
    long_aspect: float
    short_aspect: float

    def as_dict(self) -> dict:
        return {
            'hull_fill': self.hull_fill,
            'trapezoid': self.trapezoid,
            'long_aspect': self.long_aspect,
            'short_aspect': self.short_aspect,
        }


def hull_fill_score(particle: ParticleMeasurement, correction: float = 1.18) -> float:
    if particle.convex_hull_area <= 0:
        return 0.0
    return ratio_to_score(particle.area / particle.convex_hull_area * correction)


def trapezoid_score(particle: ParticleMeasurement) -> float:
    if particle.width <= 0 or particle.height <= 0:
        return 0.0
    return ratio_to_score(particle.convex_hull_area / (particle.bounding_box_area * TRAPEZOID_FILL_RATIO))


def aspect_score(particle: ParticleMeasurement, target_ratio: float) -> float:
    """Score the bounding box aspect ratio against target_ratio."""
    aspect = particle.aspect_ratio
    if aspect is None or target_ratio <= 0:
        return 0.0
    return ratio_to_score(aspect / target_ratio)


def long_aspect_score(particle: ParticleMeasurement, long_ratio: float = 2.22) -> float:
    return aspect_score(particle, long_ratio)


def short_aspect_score(particle: ParticleMeasurement, short_ratio: float = 1.4) -> float:
    return aspect_score(particle, short_ratio)


def compute_scores(particle: ParticleMeasurement, config: VisionConfig) -> ScoreSet:
    """Run all four tests on one particle."""
    return ScoreSet(
        hull_fill=hull_fill_score(particle, config.hull_fill_correction),
        trapezoid=trapezoid_score(particle),
        long_aspect=long_aspect_score(particle, config.long_ratio),
        short_aspect=short_aspect_score(particle, config.short_ratio),
    )
