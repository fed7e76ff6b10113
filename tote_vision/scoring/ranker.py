"""Candidate ranking by relative particle size."""

from typing import List, Optional, Sequence

from ..detectors.base import ParticleMeasurement


def rank_particles(particles: Sequence[ParticleMeasurement]) -> List[ParticleMeasurement]:
    """
    Order particles by descending percent_area.

    The sort is stable: particles with equal percent_area keep their
    detection order. An empty input gives an empty list.
    """
    return sorted(particles, key=lambda p: p.percent_area, reverse=True)


def select_primary(particles: Sequence[ParticleMeasurement]) -> Optional[ParticleMeasurement]:
    """
    Return the largest particle, or None when there are no candidates.

    Only this particle is scored; smaller particles are never considered
    even if the largest one fails classification.
    """
    ranked = rank_particles(particles)
    return ranked[0] if ranked else None
