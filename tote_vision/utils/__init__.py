"""
Utility Modules for Tote Vision
"""

from .distance_estimator import (
    DistanceEstimator,
    INCHES_PER_FOOT,
    UNDEFINED_DISTANCE,
    estimate_distance,
)

__all__ = [
    'DistanceEstimator',
    'INCHES_PER_FOOT',
    'UNDEFINED_DISTANCE',
    'estimate_distance',
]
