"""
Particle Source Factory
=======================

Factory pattern implementation for creating particle sources based on
configuration. Provides a clean way to instantiate the correct source type.
"""

import logging
from typing import Any, Dict, Optional, Type

from .base import ParticleSourceBase
from .hsv_particle_source import HsvParticleSource
from .mock_source import MockParticleSource

logger = logging.getLogger(__name__)


class ParticleSourceFactory:
    """
    Factory for creating particle source instances.

    Usage:
        # Create from config
        from tote_vision.core import get_config
        source = ParticleSourceFactory.create_from_config(get_config())

        # Create by type
        source = ParticleSourceFactory.create("mock", mode="never")

        # Register custom source
        ParticleSourceFactory.register("my_source", MySourceClass)
    """

    # Registry of source types
    _registry: Dict[str, Type[ParticleSourceBase]] = {
        'hsv': HsvParticleSource,
        'mock': MockParticleSource,
    }

    # Aliases for convenience
    _aliases: Dict[str, str] = {
        'opencv': 'hsv',
        'color': 'hsv',
        'threshold': 'hsv',
        'test': 'mock',
        'fake': 'mock',
    }

    @classmethod
    def register(cls, name: str, source_class: Type[ParticleSourceBase]) -> None:
        """
        Register a new source type.

        Args:
            name: Unique name for the source type
            source_class: Source class (must inherit from ParticleSourceBase)
        """
        if not isinstance(source_class, type) or not issubclass(source_class, ParticleSourceBase):
            raise TypeError(f"{source_class} must inherit from ParticleSourceBase")

        cls._registry[name] = source_class
        logger.info(f"Registered particle source type: {name}")

    @classmethod
    def unregister(cls, name: str) -> None:
        if name in cls._registry:
            del cls._registry[name]

    @classmethod
    def get_available_types(cls) -> list:
        """Get list of available source types."""
        return list(cls._registry.keys())

    @classmethod
    def _resolve_type(cls, source_type: str) -> str:
        """Resolve type name including aliases."""
        source_type = source_type.lower().strip()
        return cls._aliases.get(source_type, source_type)

    @classmethod
    def create(cls, source_type: str, **kwargs) -> ParticleSourceBase:
        """
        Create a source instance.

        Args:
            source_type: Type of source ("hsv", "mock")
            **kwargs: Additional arguments passed to source constructor

        Raises:
            ValueError: If source type is not registered
        """
        resolved_type = cls._resolve_type(source_type)

        if resolved_type not in cls._registry:
            available = ', '.join(cls._registry.keys())
            raise ValueError(
                f"Unknown particle source type: '{source_type}'. "
                f"Available types: {available}"
            )

        source_class = cls._registry[resolved_type]
        logger.info(f"Creating particle source: {source_class.__name__}")

        return source_class(**kwargs)

    @classmethod
    def create_from_config(cls, config: Any) -> ParticleSourceBase:
        """
        Create a source from a Config object.

        Args:
            config: Configuration object with detection and vision settings
        """
        resolved_type = cls._resolve_type(config.detection.source_type)
        kwargs: Dict[str, Any] = {}

        if resolved_type == 'hsv':
            vision = config.vision_snapshot()
            kwargs.update({
                'color_range': vision.active_range,
                'area_minimum_percent': vision.area_minimum_percent,
                'connectivity': config.detection.connectivity,
            })

        return cls.create(resolved_type, **kwargs)


# Convenience function
def create_particle_source(
    source_type: str = "hsv",
    config: Any = None,
    auto_initialize: bool = True,
    **kwargs
) -> Optional[ParticleSourceBase]:
    """
    Convenience function to create a particle source.

    Args:
        source_type: Type of source (ignored if config provided)
        config: Configuration object (optional)
        auto_initialize: Whether to initialize the source
        **kwargs: Additional arguments for the source

    Returns:
        Source instance, or None if initialization failed
    """
    if config is not None:
        source = ParticleSourceFactory.create_from_config(config)
    else:
        source = ParticleSourceFactory.create(source_type, **kwargs)

    if auto_initialize and not source.initialize():
        logger.error("Particle source initialization failed")
        return None

    return source
