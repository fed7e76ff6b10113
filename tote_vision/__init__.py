"""
Tote Vision Package
===================

Tote identification and range estimation from color-thresholded camera
frames. Particles are scored against the tote's expected shape, the
largest one is classified, and its distance is estimated with a pinhole
camera model.

Subpackages:
    - scoring:   Score normalizer, shape scorers, ranker, classifier, evaluate()
    - utils:     Distance and bearing estimation from the bounding rectangle
    - detectors: Particle measurement sources (OpenCV HSV, mock)
    - hardware:  Camera capture (OpenCV, mock)
    - nodes:     Periodic vision loop entry point
    - core:      Configuration and logging setup

Example:
    from tote_vision.core import get_config
    from tote_vision.scoring import evaluate

    result = evaluate(particles, image_width_pixels=320,
                      config=get_config().vision_snapshot())
"""

__version__ = '1.0.0'
