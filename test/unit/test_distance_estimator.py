"""
Distance Estimator Tests
========================

Unit tests for the pinhole range estimate and bearing helpers.
"""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tote_vision.core.config import VisionConfig
from tote_vision.utils.distance_estimator import (
    DistanceEstimator,
    INCHES_PER_FOOT,
    UNDEFINED_DISTANCE,
    estimate_distance,
)


class TestEstimateDistance:
    """Test range from bounding rectangle width."""

    def test_reference_value(self, make_particle, vision_config):
        particle = make_particle(left=100, right=300)

        distance = estimate_distance(particle, 400, True, vision_config)

        assert distance == pytest.approx(4.873732882159, abs=1e-9)

    def test_matches_formula(self, make_particle, vision_config):
        particle = make_particle(left=50, right=272)
        normalized = 2 * 222 / 400
        expected = 26.9 / (normalized * INCHES_PER_FOOT * math.tan(math.radians(49.4) / 2))

        assert estimate_distance(particle, 400, True, vision_config) == pytest.approx(expected)

    def test_short_orientation_uses_short_width(self, make_particle, vision_config):
        particle = make_particle(left=100, right=300)

        long_distance = estimate_distance(particle, 400, True, vision_config)
        short_distance = estimate_distance(particle, 400, False, vision_config)

        assert short_distance == pytest.approx(3.061936271691, abs=1e-9)
        assert short_distance / long_distance == pytest.approx(16.9 / 26.9)

    def test_wider_particle_is_closer(self, make_particle, vision_config):
        near = estimate_distance(make_particle(left=0, right=300), 400, True, vision_config)
        far = estimate_distance(make_particle(left=0, right=100), 400, True, vision_config)

        assert near < far

    def test_zero_width_is_undefined(self, make_particle, vision_config):
        particle = make_particle(left=120, right=120, area=0.0, convex_hull_area=0.0)

        assert estimate_distance(particle, 400, True, vision_config) is UNDEFINED_DISTANCE

    def test_negative_width_is_undefined(self, make_particle, vision_config):
        particle = make_particle(left=200, right=100, area=0.0, convex_hull_area=0.0)

        assert estimate_distance(particle, 400, True, vision_config) is UNDEFINED_DISTANCE

    @pytest.mark.parametrize("image_width", [0, -320])
    def test_bad_image_width_is_undefined(self, make_particle, vision_config, image_width):
        particle = make_particle(left=100, right=300)

        assert estimate_distance(particle, image_width, True, vision_config) is UNDEFINED_DISTANCE

    def test_view_angle_from_config(self, make_particle):
        particle = make_particle(left=100, right=300)
        config = VisionConfig(view_angle_deg=90.0)

        # tan(45 deg) == 1
        assert estimate_distance(particle, 400, True, config) == pytest.approx(26.9 / 12.0)


class TestDistanceEstimator:
    """Test the estimator object and bearing helpers."""

    def test_from_config(self, vision_config):
        estimator = DistanceEstimator.from_config(vision_config, frame_width=640)

        assert estimator.frame_width == 640
        assert estimator.horizontal_fov == 49.4
        assert estimator.target_long_width_in == 26.9
        assert estimator.target_short_width_in == 16.9

    def test_normalized_width(self, make_particle):
        estimator = DistanceEstimator(frame_width=400)

        assert estimator.normalized_width(make_particle(left=100, right=300)) == pytest.approx(1.0)

    def test_centered_particle(self, make_particle):
        estimator = DistanceEstimator(frame_width=400)
        particle = make_particle(left=150, right=250)

        assert estimator.get_normalized_position(particle) == pytest.approx(0.0)
        assert estimator.estimate_angle(particle) == pytest.approx(0.0)

    def test_particle_at_right_edge(self, make_particle):
        estimator = DistanceEstimator(frame_width=400, horizontal_fov=60.0)
        particle = make_particle(left=380, right=420)

        assert estimator.get_normalized_position(particle) == pytest.approx(1.0)
        assert estimator.estimate_angle(particle) == pytest.approx(math.radians(30.0))

    def test_left_side_angle_is_negative(self, make_particle):
        estimator = DistanceEstimator(frame_width=400)

        assert estimator.estimate_angle(make_particle(left=0, right=100)) < 0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
