"""
Tote Evaluation
===============

One evaluation cycle: rank particles, score the largest, classify it and
estimate its range. Pure function of its inputs; nothing is kept between
calls.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.config import VisionConfig
from ..detectors.base import ParticleMeasurement
from ..utils.distance_estimator import UNDEFINED_DISTANCE, estimate_distance
from .classifier import classify
from .ranker import rank_particles
from .scorers import ScoreSet, compute_scores

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of one evaluation cycle.

    Attributes:
        is_target: Primary candidate passed every shape test
        is_long_orientation: Long side of the tote faces the camera
        scores: Shape scores of the primary candidate (None without candidate)
        estimated_distance: Range in feet, or UNDEFINED_DISTANCE
        candidate: The primary (largest) particle, if any
        particle_count: Number of particles evaluated
    """
    is_target: bool = False
    is_long_orientation: bool = False
    scores: Optional[ScoreSet] = None
    estimated_distance: Optional[float] = UNDEFINED_DISTANCE
    candidate: Optional[ParticleMeasurement] = None
    particle_count: int = 0

    @property
    def has_candidate(self) -> bool:
        return self.candidate is not None

    @property
    def has_distance(self) -> bool:
        return self.estimated_distance is not UNDEFINED_DISTANCE


NO_TARGET = ClassificationResult()


def evaluate(
    particles: Sequence[ParticleMeasurement],
    image_width_pixels: int,
    config: VisionConfig,
) -> ClassificationResult:
    """
    Evaluate one frame's particles.

    Args:
        particles: Measured particles in detection order
        image_width_pixels: Horizontal resolution of the measured frame
        config: Vision configuration snapshot for this cycle

    Returns:
        ClassificationResult; NO_TARGET when there are no particles

    Raises:
        ConfigurationError: if the snapshot is invalid
    """
    config.validate()

    ranked = rank_particles(particles)
    if not ranked:
        return NO_TARGET

    primary = ranked[0]
    scores = compute_scores(primary, config)
    decision = classify(scores, config.score_minimum)
    distance = estimate_distance(
        primary, image_width_pixels, decision.is_long_orientation, config)

    logger.debug(
        f"Candidate of {len(ranked)}: trapezoid={scores.trapezoid:.1f} "
        f"long={scores.long_aspect:.1f} short={scores.short_aspect:.1f} "
        f"hull={scores.hull_fill:.1f} tote={decision.is_target} distance={distance}")

    return ClassificationResult(
        is_target=decision.is_target,
        is_long_orientation=decision.is_long_orientation,
        scores=scores,
        estimated_distance=distance,
        candidate=primary,
        particle_count=len(ranked),
    )
