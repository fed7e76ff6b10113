"""
Particle Source Base Class
==========================

Abstract base class for all particle measurement sources.
Implements Strategy pattern for pluggable measurement backends.

The scoring core never calls a source directly: it only consumes the
ParticleMeasurement sequence a source returns.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
import numpy as np

from ..core.config import VisionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParticleMeasurement:
    """
    Geometric measurements of one connected region of a binary image.

    Attributes:
        percent_area: Particle area as percent of the image area (0 - 100)
        area: Particle area in pixels
        convex_hull_area: Area of the particle's convex hull in pixels
        top: Bounding rectangle top edge
        left: Bounding rectangle left edge
        bottom: Bounding rectangle bottom edge
        right: Bounding rectangle right edge
    """
    percent_area: float
    area: float
    convex_hull_area: float
    top: float
    left: float
    bottom: float
    right: float

    @property
    def width(self) -> float:
        """Bounding rectangle width."""
        return self.right - self.left

    @property
    def height(self) -> float:
        """Bounding rectangle height."""
        return self.bottom - self.top

    @property
    def bounding_box_area(self) -> float:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> Optional[float]:
        """Width / height, or None for a flat bounding rectangle."""
        if self.height <= 0:
            return None
        return self.width / self.height

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        """Bounding rectangle as (left, top, right, bottom)."""
        return (self.left, self.top, self.right, self.bottom)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ParticleMeasurement':
        """Build a measurement from a plain dict (e.g. YAML fixtures)."""
        return cls(
            percent_area=float(data['percent_area']),
            area=float(data['area']),
            convex_hull_area=float(data['convex_hull_area']),
            top=float(data['top']),
            left=float(data['left']),
            bottom=float(data['bottom']),
            right=float(data['right']),
        )


@dataclass
class MeasurementResult:
    """
    Result of a measurement operation.

    Attributes:
        particles: Measured particles in detection order
        masked_count: Particles found in the thresholded image
        filtered_count: Particles left after the area filter
        measure_time: Time taken for measurement in seconds
        timestamp: Unix timestamp of measurement
        frame_size: Size of input frame (width, height)
        success: Whether measurement was successful
        error: Error message if measurement failed
    """
    particles: Tuple[ParticleMeasurement, ...] = ()
    masked_count: int = 0
    filtered_count: int = 0
    measure_time: float = 0.0
    timestamp: float = field(default_factory=time.time)
    frame_size: Tuple[int, int] = (0, 0)
    success: bool = True
    error: str = ""

    @property
    def has_particles(self) -> bool:
        """Check if any particles survived filtering."""
        return len(self.particles) > 0

    @property
    def image_width(self) -> int:
        """Horizontal resolution of the measured frame."""
        return self.frame_size[0]


class ParticleSourceBase(ABC):
    """
    Abstract base class for particle measurement sources.

    All source implementations must inherit from this class and implement
    the abstract methods. This allows easy swapping between different
    backends (OpenCV HSV thresholding, canned data, etc.)

    Usage:
        class MySource(ParticleSourceBase):
            def _setup(self):
                pass

            def _measure_impl(self, frame):
                return MeasurementResult(...)

        source = MySource()
        source.initialize()
        result = source.measure(frame)
    """

    def __init__(self, **kwargs):
        self._initialized = False

        # Statistics
        self._measure_count = 0
        self._total_measure_time = 0.0
        self._last_result: Optional[MeasurementResult] = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def average_measure_time(self) -> float:
        """Get average measurement time in seconds."""
        if self._measure_count == 0:
            return 0.0
        return self._total_measure_time / self._measure_count

    @property
    def last_result(self) -> Optional[MeasurementResult]:
        return self._last_result

    @property
    @abstractmethod
    def name(self) -> str:
        """Get source name."""
        pass

    def initialize(self) -> bool:
        """
        Prepare the source for measuring.

        Returns:
            True if initialization successful, False otherwise
        """
        if self._initialized:
            logger.warning(f"{self.name} already initialized")
            return True

        try:
            logger.info(f"Initializing {self.name}...")
            self._setup()
            self._initialized = True
            logger.info(f"{self.name} initialized successfully")
            return True
        except Exception as e:
            logger.error(f"Failed to initialize {self.name}: {e}")
            return False

    def shutdown(self) -> None:
        """Shutdown the source and release resources."""
        if not self._initialized:
            return

        logger.info(f"Shutting down {self.name}...")
        try:
            self._cleanup()
        finally:
            self._initialized = False
        logger.info(f"{self.name} shut down")

    def apply_config(self, vision: VisionConfig) -> None:
        """Adopt a vision snapshot before measuring. Override in subclasses if needed."""
        pass

    def _setup(self) -> None:
        """Acquire resources. Override in subclasses if needed."""
        pass

    def _cleanup(self) -> None:
        """Cleanup resources. Override in subclasses if needed."""
        pass

    @abstractmethod
    def _measure_impl(self, frame: np.ndarray) -> MeasurementResult:
        """
        Measure particles in a frame.
        Must be implemented by subclasses.

        Args:
            frame: Input image as numpy array (BGR format)

        Returns:
            MeasurementResult with measured particles
        """
        pass

    def measure(self, frame: np.ndarray) -> MeasurementResult:
        """
        Measure particles in a frame.

        Never raises: failures are reported through ``success``/``error``.

        Args:
            frame: Input image as numpy array (BGR format)

        Returns:
            MeasurementResult with measured particles
        """
        if not self._initialized:
            return MeasurementResult(
                success=False,
                error=f"{self.name} not initialized"
            )

        if frame is None or frame.size == 0:
            return MeasurementResult(
                success=False,
                error="Invalid frame"
            )

        try:
            start_time = time.time()
            result = self._measure_impl(frame)
            result.measure_time = time.time() - start_time
            result.frame_size = (frame.shape[1], frame.shape[0])

            self._measure_count += 1
            self._total_measure_time += result.measure_time
            self._last_result = result

            return result

        except Exception as e:
            logger.error(f"Measurement error: {e}")
            return MeasurementResult(
                success=False,
                error=str(e)
            )

    def get_stats(self) -> Dict[str, Any]:
        """Get source statistics."""
        return {
            'name': self.name,
            'initialized': self._initialized,
            'measure_count': self._measure_count,
            'average_measure_time': self.average_measure_time,
        }


def particles_from_dicts(items: List[Mapping[str, Any]]) -> Tuple[ParticleMeasurement, ...]:
    """Convert a list of dicts into measurements, keeping order."""
    return tuple(ParticleMeasurement.from_dict(item) for item in items)
