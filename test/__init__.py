"""
Tote Vision - Test Suite
========================

Unit tests for the scoring core and its collaborators.

Test Categories:
    - unit/test_normalizer.py         : ratio to score conversion
    - unit/test_scorers.py            : hull fill, trapezoid, aspect scorers
    - unit/test_ranker.py             : largest particle selection
    - unit/test_classifier.py         : composite tote decision
    - unit/test_distance_estimator.py : pinhole range estimate
    - unit/test_evaluator.py          : full evaluation cycle
    - unit/test_config.py             : YAML config, env overrides, validation
    - unit/test_detectors.py          : particle sources and factory
    - unit/test_hardware.py           : mock camera
    - unit/test_vision_node.py        : camera -> result loop

Usage:
    # Run all tests
    pytest test/

    # Run specific test with verbose output
    pytest test/unit/test_scorers.py -v
"""

__version__ = "1.0.0"
