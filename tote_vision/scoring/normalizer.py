"""Ratio to confidence score conversion."""

import math

MAX_SCORE = 100.0


def ratio_to_score(ratio: float) -> float:
    """
    Convert a ratio with ideal value 1 to a score in [0, 100].

    Piecewise linear from (0, 0) to (1, 100) to (2, 0), and 0 for every
    ratio outside [0, 2]. Non-finite ratios (from a zero denominator
    upstream) score 0.
    """
    if not math.isfinite(ratio):
        return 0.0
    return max(0.0, min(MAX_SCORE * (1.0 - abs(1.0 - ratio)), MAX_SCORE))
