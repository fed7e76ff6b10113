"""
Geometric Scorer Tests
======================

Unit tests for hull fill, trapezoid and aspect ratio scores.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tote_vision.core.config import VisionConfig
from tote_vision.scoring.normalizer import ratio_to_score
from tote_vision.scoring.scorers import (
    ScoreSet,
    TRAPEZOID_FILL_RATIO,
    compute_scores,
    hull_fill_score,
    long_aspect_score,
    short_aspect_score,
    trapezoid_score,
)


class TestHullFillScore:
    """Test convex hull completeness score."""

    def test_full_hull_with_default_correction(self, make_particle):
        particle = make_particle(area=5000.0, convex_hull_area=5000.0)

        assert hull_fill_score(particle) == pytest.approx(ratio_to_score(1.18))
        assert hull_fill_score(particle) == pytest.approx(82.0)

    def test_corrected_ratio_of_one_scores_100(self, make_particle):
        particle = make_particle(area=1000.0, convex_hull_area=1180.0)

        assert hull_fill_score(particle) == pytest.approx(100.0)

    def test_particle_with_holes_scores_low(self, make_particle):
        particle = make_particle(area=300.0, convex_hull_area=1000.0)

        assert hull_fill_score(particle) < 50.0

    def test_zero_hull_area_scores_zero(self, make_particle):
        particle = make_particle(area=500.0, convex_hull_area=0.0)

        assert hull_fill_score(particle) == 0.0

    def test_custom_correction(self, make_particle):
        particle = make_particle(area=1000.0, convex_hull_area=1000.0)

        assert hull_fill_score(particle, correction=1.0) == pytest.approx(100.0)


class TestTrapezoidScore:
    """Test hull area against bounding box area."""

    def test_expected_fill_scores_100(self, make_particle):
        particle = make_particle(top=0, left=0, bottom=100, right=200,
                                 convex_hull_area=TRAPEZOID_FILL_RATIO * 20000)

        assert trapezoid_score(particle) == pytest.approx(100.0)

    def test_half_fill_scores_low(self, make_particle):
        particle = make_particle(top=0, left=0, bottom=100, right=200,
                                 convex_hull_area=10000.0)

        assert trapezoid_score(particle) < 60.0

    def test_zero_height_box_scores_zero(self, make_particle):
        particle = make_particle(top=50, bottom=50, convex_hull_area=100.0, area=100.0)

        assert trapezoid_score(particle) == 0.0

    def test_zero_width_box_scores_zero(self, make_particle):
        particle = make_particle(left=10, right=10, convex_hull_area=100.0, area=100.0)

        assert trapezoid_score(particle) == 0.0


class TestAspectScores:
    """Test long and short side aspect ratio scores."""

    def test_long_side_ratio(self, make_particle):
        particle = make_particle(top=0, left=0, bottom=100, right=222)

        assert long_aspect_score(particle) == pytest.approx(100.0)
        assert short_aspect_score(particle) < 50.0

    def test_short_side_ratio(self, make_particle):
        particle = make_particle(top=0, left=0, bottom=100, right=140)

        assert short_aspect_score(particle) == pytest.approx(100.0)
        assert long_aspect_score(particle) < long_aspect_score(make_particle(right=222))

    def test_custom_target_ratio(self, make_particle):
        particle = make_particle(top=0, left=0, bottom=100, right=100)

        assert long_aspect_score(particle, long_ratio=1.0) == pytest.approx(100.0)

    def test_zero_height_scores_zero(self, make_particle):
        particle = make_particle(top=20, bottom=20, area=10.0, convex_hull_area=10.0)

        assert long_aspect_score(particle) == 0.0
        assert short_aspect_score(particle) == 0.0


class TestComputeScores:
    """Test the four scores together."""

    def test_ideal_long_tote(self, make_particle):
        scores = compute_scores(make_particle(), VisionConfig())

        assert isinstance(scores, ScoreSet)
        assert scores.trapezoid == pytest.approx(100.0)
        assert scores.hull_fill == pytest.approx(100.0)
        assert scores.long_aspect == pytest.approx(100.0)
        assert scores.short_aspect == pytest.approx(ratio_to_score(2.22 / 1.4))

    def test_uses_config_ratios(self, make_particle):
        config = VisionConfig(long_ratio=1.0, short_ratio=2.22)
        scores = compute_scores(make_particle(right=222, bottom=100), config)

        assert scores.short_aspect == pytest.approx(100.0)
        assert scores.long_aspect == 0.0

    def test_degenerate_particle_scores_are_finite(self, make_particle):
        particle = make_particle(area=0.0, convex_hull_area=0.0, top=5, bottom=5, left=5, right=5)
        scores = compute_scores(particle, VisionConfig())

        assert scores == ScoreSet(hull_fill=0.0, trapezoid=0.0, long_aspect=0.0, short_aspect=0.0)

    def test_score_set_is_immutable(self, make_particle):
        scores = compute_scores(make_particle(), VisionConfig())

        with pytest.raises(AttributeError):
            scores.trapezoid = 0.0

    def test_as_dict(self):
        scores = ScoreSet(hull_fill=1.0, trapezoid=2.0, long_aspect=3.0, short_aspect=4.0)

        assert scores.as_dict() == {
            'hull_fill': 1.0, 'trapezoid': 2.0, 'long_aspect': 3.0, 'short_aspect': 4.0,
        }


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
