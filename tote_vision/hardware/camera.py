"""
Camera Capture
==============

Abstract base class and implementations for camera capture.
Supports real OpenCV capture and a mock for testing.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# BGR colors that fall inside the default yellow / green tote ranges
TOTE_YELLOW_BGR = (0, 255, 255)
TOTE_GREEN_BGR = (74, 100, 61)


@dataclass
class FrameData:
    """One captured frame with its capture metadata."""
    frame: np.ndarray
    timestamp: float
    frame_number: int
    width: int
    height: int


class CameraBase(ABC):
    """
    Frame source shared by the OpenCV and mock cameras.

    ``read()`` never raises: a missing or failed frame is reported as None.
    """

    def __init__(
        self,
        device_id: int = 0,
        width: int = 320,
        height: int = 240,
        fps: int = 30,
        auto_reconnect: bool = True,
        reconnect_delay: float = 1.0,
        **kwargs
    ):
        self.device_id = device_id
        self.width = width
        self.height = height
        self.fps = fps
        self.auto_reconnect = auto_reconnect
        self.reconnect_delay = reconnect_delay

        self._opened = False
        self._frame_count = 0

    @property
    def is_opened(self) -> bool:
        return self._opened

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @abstractmethod
    def open(self) -> bool:
        """Open the device. Returns True once frames can be read."""

    @abstractmethod
    def close(self) -> None:
        """Release the device."""

    @abstractmethod
    def read(self) -> Optional[FrameData]:
        """Capture one frame, or None if none is available."""

    def _wrap(self, frame: np.ndarray) -> FrameData:
        self._frame_count += 1
        return FrameData(
            frame=frame,
            timestamp=time.time(),
            frame_number=self._frame_count,
            width=frame.shape[1],
            height=frame.shape[0],
        )


class CameraCapture(CameraBase):
    """
    OpenCV video device.

    A device that stops delivering frames is released and, with
    ``auto_reconnect``, reopened by a later ``read()``. Reopen attempts are
    spaced at least ``reconnect_delay`` seconds apart.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._cap = None
        self._lock = threading.Lock()
        self._last_open_attempt: Optional[float] = None

    def open(self) -> bool:
        if self._opened:
            return True

        self._last_open_attempt = time.monotonic()
        try:
            cap = cv2.VideoCapture(self.device_id)
            if not cap.isOpened():
                cap.release()
                logger.error(f"Camera {self.device_id} not available")
                return False

            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
            cap.set(cv2.CAP_PROP_FPS, self.fps)
            size = (int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)), int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)))
        except Exception as e:
            logger.error(f"Failed to open camera {self.device_id}: {e}")
            return False

        self._cap = cap
        self._opened = True
        logger.info(f"Camera {self.device_id} opened at {size[0]}x{size[1]}")
        return True

    def close(self) -> None:
        self._release()
        logger.info(f"Camera {self.device_id} closed")

    def _release(self) -> None:
        if self._cap is not None:
            try:
                self._cap.release()
            except Exception as e:
                logger.warning(f"Camera {self.device_id} release failed: {e}")
            self._cap = None
        self._opened = False

    def _may_reconnect(self) -> bool:
        if not self.auto_reconnect:
            return False
        if self._last_open_attempt is None:
            return True
        return time.monotonic() - self._last_open_attempt >= self.reconnect_delay

    def read(self) -> Optional[FrameData]:
        if not self._opened:
            if not self._may_reconnect() or not self.open():
                return None

        with self._lock:
            try:
                ok, frame = self._cap.read()
            except Exception as e:
                logger.error(f"Camera {self.device_id} read error: {e}")
                ok, frame = False, None

            if not ok or frame is None:
                logger.warning(f"No frame from camera {self.device_id}")
                self._release()
                return None

            return self._wrap(frame)


class MockCamera(CameraBase):
    """
    Mock camera for testing without hardware.

    Generates blank frames, a synthetic tote, or a static image.
    """

    def __init__(
        self,
        pattern: str = "tote",
        frame_delay: float = 0.0,
        static_image: Optional[np.ndarray] = None,
        tote_rect: Optional[Tuple[int, int, int, int]] = None,
        tote_color: Tuple[int, int, int] = TOTE_YELLOW_BGR,
        **kwargs
    ):
        """
        Initialize mock camera.

        Args:
            pattern: "tote" | "blank" | "static"
            frame_delay: Delay between frames (simulates FPS)
            static_image: Static image to return (for "static" pattern)
            tote_rect: (left, top, right, bottom) of the synthetic tote,
                right/bottom exclusive. Defaults to a long-side-on tote
                centered in the frame.
            tote_color: BGR fill color of the synthetic tote
        """
        super().__init__(**kwargs)
        self.pattern = pattern
        self.frame_delay = frame_delay
        self.static_image = static_image
        self.tote_rect = tote_rect or self._default_tote_rect()
        self.tote_color = tote_color

        self._last_frame_time = 0.0

    def _default_tote_rect(self) -> Tuple[int, int, int, int]:
        # 2.22:1 rectangle, half the frame wide
        tote_w = self.width // 2
        tote_h = max(1, int(round(tote_w / 2.22)))
        left = (self.width - tote_w) // 2
        top = (self.height - tote_h) // 2
        return (left, top, left + tote_w, top + tote_h)

    def open(self) -> bool:
        """Simulate camera open."""
        self._opened = True
        logger.info(f"Mock camera opened ({self.pattern} pattern)")
        return True

    def close(self) -> None:
        """Simulate camera close."""
        self._opened = False
        logger.info("Mock camera closed")

    def read(self) -> Optional[FrameData]:
        """Generate a test frame."""
        if not self._opened:
            return None

        if self.frame_delay > 0:
            elapsed = time.time() - self._last_frame_time
            if elapsed < self.frame_delay:
                time.sleep(self.frame_delay - elapsed)

        self._last_frame_time = time.time()
        return self._wrap(self._generate_frame())

    def _generate_frame(self) -> np.ndarray:
        """Generate test pattern frame."""
        if self.pattern == "static" and self.static_image is not None:
            return self.static_image.copy()

        frame = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        if self.pattern == "tote":
            left, top, right, bottom = self.tote_rect
            frame[top:bottom, left:right] = self.tote_color
        return frame

    def set_static_image(self, image: np.ndarray) -> None:
        """Set static image to return."""
        self.static_image = image
        self.pattern = "static"


def create_camera(
    use_mock: bool = False,
    config: Optional[object] = None,
    auto_open: bool = True,
    **kwargs
) -> CameraBase:
    """
    Factory function to create camera instance.

    Args:
        use_mock: Use mock camera for testing
        config: Configuration object
        auto_open: Automatically open camera
        **kwargs: Additional arguments

    Returns:
        Camera instance
    """
    if config:
        kwargs.setdefault('device_id', config.camera.device_id)
        kwargs.setdefault('width', config.camera.width)
        kwargs.setdefault('height', config.camera.height)
        kwargs.setdefault('fps', config.camera.fps)
        kwargs.setdefault('auto_reconnect', config.camera.auto_reconnect)
        kwargs.setdefault('reconnect_delay', config.camera.reconnect_delay)

    if use_mock:
        camera = MockCamera(**kwargs)
    else:
        camera = CameraCapture(**kwargs)

    if auto_open:
        camera.open()

    return camera
