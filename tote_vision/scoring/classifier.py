"""Composite tote decision from the four shape scores."""

from dataclasses import dataclass

from .scorers import ScoreSet

DEFAULT_SCORE_MINIMUM = 75.0


@dataclass(frozen=True)
class Classification:
    is_target: bool
    is_long_orientation: bool


def classify(scores: ScoreSet, score_minimum: float = DEFAULT_SCORE_MINIMUM) -> Classification:
    """
    Decide whether the scored particle is a tote and which side faces the camera.

    A tote must beat score_minimum on the trapezoid and hull fill tests and
    on at least one of the aspect tests. Scores equal to the minimum fail.
    """
    is_target = (
        scores.trapezoid > score_minimum
        and (scores.long_aspect > score_minimum or scores.short_aspect > score_minimum)
        and scores.hull_fill > score_minimum
    )
    return Classification(
        is_target=is_target,
        is_long_orientation=scores.long_aspect > scores.short_aspect,
    )
