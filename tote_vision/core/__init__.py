"""
Core Module
===========

Contains core functionality shared across the vision system:
- Configuration management (YAML, env overrides, immutable vision snapshots)
- Logging setup
"""

from .config import (
    Config,
    ColorRange,
    ConfigurationError,
    VisionConfig,
    get_config,
    load_config,
)
from .logging_setup import setup_logging

__all__ = [
    'Config',
    'ColorRange',
    'ConfigurationError',
    'VisionConfig',
    'get_config',
    'load_config',
    'setup_logging',
]
