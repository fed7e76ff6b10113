"""
Pytest Configuration for Tote Vision Tests
==========================================

Provides fixtures and configuration for the test suite.
"""

import pytest
import sys
import os

# Add package to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tote_vision.core.config import Config, VisionConfig
from tote_vision.detectors.base import ParticleMeasurement


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "hardware: mark test as requiring a camera"
    )


@pytest.fixture
def vision_config():
    """Default vision configuration snapshot."""
    return VisionConfig()


@pytest.fixture
def fresh_config():
    """Config singleton reset before and after the test."""
    Config.reset()
    yield Config()
    Config.reset()


@pytest.fixture
def make_particle():
    """Factory for particles; unspecified measurements form an ideal long-side tote."""
    def _make(percent_area=10.0, area=None, convex_hull_area=None,
              top=0.0, left=0.0, bottom=100.0, right=222.0):
        box_area = (right - left) * (bottom - top)
        if convex_hull_area is None:
            convex_hull_area = box_area * 0.954
        if area is None:
            area = convex_hull_area / 1.18
        return ParticleMeasurement(
            percent_area=percent_area,
            area=area,
            convex_hull_area=convex_hull_area,
            top=top,
            left=left,
            bottom=bottom,
            right=right,
        )
    return _make
