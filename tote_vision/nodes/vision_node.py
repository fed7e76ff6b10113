#!/usr/bin/env python3
"""
Tote Vision Node
================

Periodic loop that captures camera frames, measures tote-colored
particles and evaluates the largest one.

Each cycle:
    1. Take the vision config snapshot (used unchanged for the whole cycle)
    2. Grab a frame
    3. Threshold and measure particles
    4. Rank, score, classify and estimate range
    5. Hand the ClassificationResult to the on_result callback

The loop only checks for a stop request between cycles.

Usage:
    tote_vision_node --config config/tote_vision.yaml
    tote_vision_node --mock-camera --color green --cycles 10
"""

import argparse
import logging
import math
import time
from typing import Callable, Optional

from tote_vision.core import Config, ConfigurationError, get_config, load_config, setup_logging
from tote_vision.detectors import ParticleSourceBase, create_particle_source
from tote_vision.hardware import CameraBase, create_camera
from tote_vision.scoring import ClassificationResult, evaluate
from tote_vision.utils import DistanceEstimator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tote_vision.yaml"


class VisionNode:
    """
    Camera → particles → tote decision loop.

    Args:
        camera: Opened camera
        source: Initialized particle source
        config: Configuration manager; a fresh vision snapshot is read per cycle
        on_result: Called with every cycle's ClassificationResult
    """

    def __init__(
        self,
        camera: CameraBase,
        source: ParticleSourceBase,
        config: Optional[Config] = None,
        on_result: Optional[Callable[[ClassificationResult], None]] = None,
    ):
        self.camera = camera
        self.source = source
        self.config = config or get_config()
        self.on_result = on_result

        self._running = False
        self._cycle_count = 0
        self.last_result: Optional[ClassificationResult] = None

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def is_running(self) -> bool:
        return self._running

    def set_color_mode(self, color: str) -> None:
        """Switch the active tote color; takes effect on the next cycle."""
        self.config.update_vision(active_color=color)

    def run_cycle(self) -> Optional[ClassificationResult]:
        """
        Run one evaluation cycle.

        Returns:
            The cycle's result, or None if no frame or measurement was available

        Raises:
            ConfigurationError: if the vision config snapshot is invalid
        """
        vision = self.config.vision_snapshot().validate()

        data = self.camera.read()
        if data is None:
            logger.warning("No frame from camera")
            return None

        self.source.apply_config(vision)

        measurement = self.source.measure(data.frame)
        if not measurement.success:
            logger.warning(f"Measurement failed: {measurement.error}")
            return None

        result = evaluate(measurement.particles, measurement.image_width, vision)
        self._cycle_count += 1
        self.last_result = result

        self._log_result(result, measurement.image_width, vision)
        if self.on_result is not None:
            self.on_result(result)
        return result

    def _log_result(self, result: ClassificationResult, image_width: int, vision) -> None:
        if not result.has_candidate:
            logger.debug(f"Cycle {self._cycle_count}: no particles")
            return

        angle = DistanceEstimator.from_config(vision, frame_width=image_width).estimate_angle(result.candidate)
        distance = f"{result.estimated_distance:.2f}ft" if result.has_distance else "undefined"
        logger.info(
            f"Cycle {self._cycle_count}: tote={result.is_target} "
            f"long={result.is_long_orientation} distance={distance} "
            f"angle={math.degrees(angle):.1f}deg particles={result.particle_count}")

    def spin(self, period: float = 0.005, max_cycles: Optional[int] = None) -> int:
        """
        Run cycles every `period` seconds until stop() or max_cycles.

        Returns:
            Number of cycles run
        """
        self._running = True
        cycles = 0
        try:
            while self._running:
                start = time.time()
                self.run_cycle()
                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    break
                remaining = period - (time.time() - start)
                if remaining > 0:
                    time.sleep(remaining)
        finally:
            self._running = False
        return cycles

    def stop(self) -> None:
        """Request the loop to stop after the current cycle."""
        self._running = False

    def cleanup(self) -> None:
        self.stop()
        self.source.shutdown()
        self.camera.close()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tote vision loop")
    parser.add_argument('--config', default=DEFAULT_CONFIG_FILE,
                        help="YAML configuration file (searched in config/, ~/.config/tote_vision, /etc/tote_vision)")
    parser.add_argument('--mock-camera', action='store_true', help="Use a synthetic tote camera")
    parser.add_argument('--color', choices=['yellow', 'green'], help="Tote color to threshold")
    parser.add_argument('--period', type=float, help="Seconds between cycles")
    parser.add_argument('--cycles', type=int, help="Stop after this many cycles")
    return parser


def main(args=None) -> int:
    options = build_arg_parser().parse_args(args)

    try:
        config = load_config(options.config)
        if options.color:
            config.update_vision(active_color=options.color)
    except ConfigurationError as e:
        logging.basicConfig()
        logger.error(str(e))
        return 2

    setup_logging(config.logging)

    camera = create_camera(use_mock=options.mock_camera, config=config)
    if not camera.is_opened:
        logger.error("Camera not available")
        return 1

    source = create_particle_source(config=config)
    if source is None:
        camera.close()
        return 1

    node = VisionNode(camera, source, config)
    period = options.period if options.period is not None else config.detection.loop_period

    try:
        node.spin(period=period, max_cycles=options.cycles)
    except KeyboardInterrupt:
        pass
    except ConfigurationError as e:
        logger.error(str(e))
        return 2
    finally:
        node.cleanup()

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
