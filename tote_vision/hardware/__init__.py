"""
Hardware Module
===============

Camera capture abstractions with pluggable implementations (OpenCV and mock).
"""

from .camera import (
    CameraBase,
    CameraCapture,
    FrameData,
    MockCamera,
    TOTE_GREEN_BGR,
    TOTE_YELLOW_BGR,
    create_camera,
)

__all__ = [
    'CameraBase',
    'CameraCapture',
    'FrameData',
    'MockCamera',
    'TOTE_GREEN_BGR',
    'TOTE_YELLOW_BGR',
    'create_camera',
]
