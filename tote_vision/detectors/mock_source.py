"""
Mock Particle Source
====================

Mock source for testing without a camera or a tuned color threshold.
Returns configurable canned particle measurements.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union
import numpy as np

from .base import MeasurementResult, ParticleMeasurement, ParticleSourceBase

logger = logging.getLogger(__name__)

ParticleLike = Union[ParticleMeasurement, Mapping[str, Any]]


class MockParticleSource(ParticleSourceBase):
    """
    Mock particle source.

    Usage:
        # Same particles every frame
        source = MockParticleSource(particles=[ParticleMeasurement(...)])

        # Never any particles
        source = MockParticleSource(mode="never")

        # Particles on some frames only (cycles through)
        source = MockParticleSource(mode="pattern", pattern=[True, False], particles=[...])
    """

    MODES = ("fixed", "never", "pattern")

    def __init__(
        self,
        mode: str = "fixed",
        particles: Optional[Sequence[ParticleLike]] = None,
        pattern: Optional[List[bool]] = None,
        **kwargs
    ):
        """
        Args:
            mode: "fixed" | "never" | "pattern"
            particles: Measurements (or dicts) returned when a frame has particles
            pattern: List of bool for pattern mode
        """
        super().__init__(**kwargs)
        if mode not in self.MODES:
            raise ValueError(f"Unknown mock mode '{mode}', expected one of {self.MODES}")

        self.mode = mode
        self.pattern = pattern or [True, False]
        self.particles: List[ParticleMeasurement] = [
            self._coerce(p) for p in (particles or [])
        ]
        self._pattern_index = 0
        self._frame_count = 0

    @property
    def name(self) -> str:
        return f"Mock Particle Source ({self.mode})"

    @staticmethod
    def _coerce(particle: ParticleLike) -> ParticleMeasurement:
        if isinstance(particle, ParticleMeasurement):
            return particle
        return ParticleMeasurement.from_dict(particle)

    def _setup(self) -> None:
        logger.info(f"Mock particle source initialized in '{self.mode}' mode")

    def _has_particles(self) -> bool:
        if self.mode == "never":
            return False
        if self.mode == "pattern":
            result = self.pattern[self._pattern_index]
            self._pattern_index = (self._pattern_index + 1) % len(self.pattern)
            return result
        return True

    def _measure_impl(self, frame: np.ndarray) -> MeasurementResult:
        self._frame_count += 1
        particles = tuple(self.particles) if self._has_particles() else ()
        return MeasurementResult(
            particles=particles,
            masked_count=len(particles),
            filtered_count=len(particles),
        )

    def add_particle(self, particle: ParticleLike) -> None:
        """Append a particle to the canned list."""
        self.particles.append(self._coerce(particle))

    def clear_particles(self) -> None:
        self.particles = []
