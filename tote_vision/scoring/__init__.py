"""
Scoring Module
==============

Tote identification from particle measurements:
- Ratio to score normalization
- Hull fill, trapezoid and aspect ratio scorers
- Largest-particle ranking
- Composite tote decision
- Per-cycle evaluation entry point
"""

from .normalizer import ratio_to_score
from .scorers import (
    ScoreSet,
    TRAPEZOID_FILL_RATIO,
    aspect_score,
    compute_scores,
    hull_fill_score,
    long_aspect_score,
    short_aspect_score,
    trapezoid_score,
)
from .ranker import rank_particles, select_primary
from .classifier import Classification, classify
from .evaluator import ClassificationResult, NO_TARGET, evaluate

__all__ = [
    'ratio_to_score',
    'ScoreSet',
    'TRAPEZOID_FILL_RATIO',
    'aspect_score',
    'compute_scores',
    'hull_fill_score',
    'long_aspect_score',
    'short_aspect_score',
    'trapezoid_score',
    'rank_particles',
    'select_primary',
    'Classification',
    'classify',
    'ClassificationResult',
    'NO_TARGET',
    'evaluate',
]
