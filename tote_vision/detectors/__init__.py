"""
Detectors Module
================

Particle measurement sources feeding the scoring core:
- HSV color threshold + connected components (OpenCV)
- Mock source (for testing)

Uses Strategy pattern for easy swapping between implementations.
"""

from .base import (
    MeasurementResult,
    ParticleMeasurement,
    ParticleSourceBase,
    particles_from_dicts,
)
from .hsv_particle_source import HsvParticleSource
from .mock_source import MockParticleSource
from .factory import ParticleSourceFactory, create_particle_source

__all__ = [
    'MeasurementResult',
    'ParticleMeasurement',
    'ParticleSourceBase',
    'particles_from_dicts',
    'HsvParticleSource',
    'MockParticleSource',
    'ParticleSourceFactory',
    'create_particle_source',
]
