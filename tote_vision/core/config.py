"""
Configuration Management
========================

Provides a centralized configuration system with:
- YAML file loading
- Environment variable overrides
- Default values
- Validation of the vision parameters
- Immutable per-cycle snapshots of the vision parameters
- Singleton pattern for global access
"""

import math
import os
import threading
import yaml
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a configuration snapshot is unusable."""


@dataclass(frozen=True)
class ColorRange:
    """HSV threshold range (OpenCV scale: hue 0-180, sat/val 0-255)."""
    hue: Tuple[int, int]
    sat: Tuple[int, int]
    val: Tuple[int, int]

    @property
    def lower(self) -> Tuple[int, int, int]:
        return (self.hue[0], self.sat[0], self.val[0])

    @property
    def upper(self) -> Tuple[int, int, int]:
        return (self.hue[1], self.sat[1], self.val[1])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], default: 'ColorRange') -> 'ColorRange':
        return cls(
            hue=tuple(data.get('hue', default.hue)),
            sat=tuple(data.get('sat', default.sat)),
            val=tuple(data.get('val', default.val)),
        )


# Tote colors. Hue rescaled from the 0-255 camera scale to OpenCV's 0-180.
YELLOW_RANGE = ColorRange(hue=(28, 42), sat=(150, 255), val=(70, 255))
GREEN_RANGE = ColorRange(hue=(56, 85), sat=(70, 120), val=(20, 100))


def _default_color_ranges() -> Dict[str, ColorRange]:
    return {'yellow': YELLOW_RANGE, 'green': GREEN_RANGE}


# Upper bound per HSV channel on OpenCV's 8-bit scale
CHANNEL_LIMITS = {'hue': 180, 'sat': 255, 'val': 255}


def _color_range_problems(color: str, color_range: Any) -> List[str]:
    """List what is wrong with one color's HSV range."""
    if not isinstance(color_range, ColorRange):
        return [f"color_ranges.{color} must be a ColorRange, got {color_range!r}"]

    problems = []
    for channel, limit in CHANNEL_LIMITS.items():
        bounds = getattr(color_range, channel)
        name = f"color_ranges.{color}.{channel}"
        if (not isinstance(bounds, (tuple, list)) or len(bounds) != 2
                or any(isinstance(b, bool) or not isinstance(b, int) for b in bounds)):
            problems.append(f"{name} must be a (low, high) pair of integers, got {bounds!r}")
        elif not 0 <= bounds[0] <= bounds[1] <= limit:
            problems.append(f"{name} must satisfy 0 <= low <= high <= {limit}, got {tuple(bounds)}")
    return problems


@dataclass(frozen=True)
class VisionConfig:
    """
    Tote scoring parameters.

    Instances are immutable; one instance is used for a whole evaluation
    cycle. Use ``dataclasses.replace`` (or ``Config.update_vision``) to
    derive a changed copy.

    Attributes:
        area_minimum_percent: Smallest particle kept, as percent of image area
        score_minimum: Score every test must exceed to call a particle a tote
        long_ratio: Long side aspect ratio (26.9 / 12.1)
        short_ratio: Short side aspect ratio (16.9 / 12.1)
        hull_fill_correction: Compensates for area lost at particle edges
        target_long_width_in: Physical tote long side width in inches
        target_short_width_in: Physical tote short side width in inches
        view_angle_deg: Camera horizontal field of view in degrees
        active_color: Key into color_ranges used for thresholding
        color_ranges: HSV range per color mode
    """
    area_minimum_percent: float = 2.0
    score_minimum: float = 75.0
    long_ratio: float = 2.22
    short_ratio: float = 1.4
    hull_fill_correction: float = 1.18
    target_long_width_in: float = 26.9
    target_short_width_in: float = 16.9
    # Axis M1011. 64 for M1013, 51.7 for 206, 52 for HD3000 square, 60 for HD3000 640x480
    view_angle_deg: float = 49.4
    active_color: str = "yellow"
    color_ranges: Mapping[str, ColorRange] = field(default_factory=_default_color_ranges)

    @property
    def active_range(self) -> ColorRange:
        """HSV range for the active color mode."""
        return self.color_ranges[self.active_color]

    def validate(self) -> 'VisionConfig':
        """
        Check the snapshot before it is used.

        Returns:
            self, so the call can be chained

        Raises:
            ConfigurationError: listing every invalid field
        """
        problems: List[str] = []

        numeric = {
            'area_minimum_percent': self.area_minimum_percent,
            'score_minimum': self.score_minimum,
            'long_ratio': self.long_ratio,
            'short_ratio': self.short_ratio,
            'hull_fill_correction': self.hull_fill_correction,
            'target_long_width_in': self.target_long_width_in,
            'target_short_width_in': self.target_short_width_in,
            'view_angle_deg': self.view_angle_deg,
        }
        finite = {}
        for name, value in numeric.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                problems.append(f"{name} must be a finite number, got {value!r}")
            else:
                finite[name] = value

        for name in ('long_ratio', 'short_ratio', 'hull_fill_correction',
                     'target_long_width_in', 'target_short_width_in'):
            if name in finite and finite[name] <= 0:
                problems.append(f"{name} must be positive, got {finite[name]}")

        if 'view_angle_deg' in finite and not 0 < finite['view_angle_deg'] < 180:
            problems.append(f"view_angle_deg must be in (0, 180), got {finite['view_angle_deg']}")

        for name in ('score_minimum', 'area_minimum_percent'):
            if name in finite and not 0 <= finite[name] <= 100:
                problems.append(f"{name} must be in [0, 100], got {finite[name]}")

        if self.active_color not in self.color_ranges:
            available = ', '.join(sorted(self.color_ranges))
            problems.append(f"active_color '{self.active_color}' not in color_ranges ({available})")

        for color, color_range in self.color_ranges.items():
            problems.extend(_color_range_problems(color, color_range))

        if problems:
            raise ConfigurationError("Invalid vision configuration: " + "; ".join(problems))
        return self


@dataclass
class CameraConfig:
    """Camera configuration."""
    device_id: int = 0
    width: int = 320
    height: int = 240
    fps: int = 30
    auto_reconnect: bool = True
    reconnect_delay: float = 1.0


@dataclass
class DetectionConfig:
    """Particle measurement source configuration."""
    source_type: str = "hsv"
    connectivity: int = 8
    loop_period: float = 0.005


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file_enabled: bool = False
    file_path: str = "/var/log/tote_vision.log"
    max_file_size: int = 10485760
    backup_count: int = 3
    console_enabled: bool = True


class Config:
    """
    Central configuration manager.

    Loads configuration from YAML file with environment variable overrides.
    Uses singleton pattern for global access.

    The vision section is held as an immutable ``VisionConfig``; readers take
    a snapshot once per cycle with ``vision_snapshot()`` and writers replace
    it wholesale with ``update_vision()``, so a cycle never sees a partially
    updated configuration.

    Usage:
        config = Config.load("config/tote_vision.yaml")
        # or
        config = get_config()  # Gets existing instance

        snapshot = config.vision_snapshot()
        config.update_vision(active_color="green")
    """

    _instance: Optional['Config'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Optional[str] = None):
        if Config._initialized and config_path is None:
            return

        self._raw: Dict[str, Any] = {}
        self._config_path: Optional[Path] = None
        self._lock = threading.RLock()

        # Initialize sub-configs with defaults
        self._vision = VisionConfig()
        self.camera = CameraConfig()
        self.detection = DetectionConfig()
        self.logging = LoggingConfig()

        if config_path:
            self._load_file(config_path)

        Config._initialized = True

    @classmethod
    def load(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        instance = cls()
        instance._load_file(config_path)
        return instance

    @classmethod
    def reset(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None
        cls._initialized = False

    @property
    def vision(self) -> VisionConfig:
        return self.vision_snapshot()

    def vision_snapshot(self) -> VisionConfig:
        """Return the current, immutable vision configuration."""
        with self._lock:
            return self._vision

    def update_vision(self, **changes) -> VisionConfig:
        """
        Replace the vision configuration with a validated, changed copy.

        Raises:
            ConfigurationError: if the resulting configuration is invalid;
                the current configuration is left untouched
        """
        with self._lock:
            updated = replace(self._vision, **changes).validate()
            self._vision = updated
        logger.info(f"Vision config updated: {', '.join(sorted(changes))}")
        return updated

    def _load_file(self, config_path: str) -> None:
        """Load and parse YAML configuration file."""
        path = Path(config_path)

        # Search for config file in common locations
        search_paths = [
            path,
            Path(__file__).parent.parent.parent / "config" / path.name,
            Path.home() / ".config" / "tote_vision" / path.name,
            Path("/etc/tote_vision") / path.name,
        ]

        self._config_path = None
        for search_path in search_paths:
            if search_path.exists():
                self._config_path = search_path
                break

        if self._config_path is None:
            logger.warning(f"Config file not found: {config_path}, using defaults")
        else:
            try:
                with open(self._config_path, 'r') as f:
                    self._raw = yaml.safe_load(f) or {}
                logger.info(f"Loaded config from: {self._config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load config: {e}")
            else:
                self._parse_config()

        # Environment wins over file values and defaults alike
        self._apply_env_overrides()

    def _parse_config(self) -> None:
        """Parse raw config into typed dataclasses."""
        try:
            # Vision
            if 'vision' in self._raw:
                v = self._raw['vision']
                defaults = VisionConfig()
                ranges = dict(defaults.color_ranges)
                for name, data in (v.get('color_ranges') or {}).items():
                    ranges[name] = ColorRange.from_dict(data, ranges.get(name, YELLOW_RANGE))
                vision = VisionConfig(
                    area_minimum_percent=float(v.get('area_minimum_percent', defaults.area_minimum_percent)),
                    score_minimum=float(v.get('score_minimum', defaults.score_minimum)),
                    long_ratio=float(v.get('long_ratio', defaults.long_ratio)),
                    short_ratio=float(v.get('short_ratio', defaults.short_ratio)),
                    hull_fill_correction=float(v.get('hull_fill_correction', defaults.hull_fill_correction)),
                    target_long_width_in=float(v.get('target_long_width_in', defaults.target_long_width_in)),
                    target_short_width_in=float(v.get('target_short_width_in', defaults.target_short_width_in)),
                    view_angle_deg=float(v.get('view_angle_deg', defaults.view_angle_deg)),
                    active_color=str(v.get('active_color', defaults.active_color)),
                    color_ranges=ranges,
                )
                with self._lock:
                    self._vision = vision.validate()

            # Camera
            if 'camera' in self._raw:
                c = self._raw['camera']
                self.camera = CameraConfig(
                    device_id=int(c.get('device_id', 0)),
                    width=int(c.get('width', 320)),
                    height=int(c.get('height', 240)),
                    fps=int(c.get('fps', 30)),
                    auto_reconnect=bool(c.get('auto_reconnect', True)),
                    reconnect_delay=float(c.get('reconnect_delay', 1.0)),
                )

            # Detection
            if 'detection' in self._raw:
                d = self._raw['detection']
                self.detection = DetectionConfig(
                    source_type=str(d.get('source_type', 'hsv')),
                    connectivity=int(d.get('connectivity', 8)),
                    loop_period=float(d.get('loop_period', 0.005)),
                )

            # Logging
            if 'logging' in self._raw:
                log = self._raw['logging']
                self.logging = LoggingConfig(
                    level=str(log.get('level', 'INFO')),
                    file_enabled=bool(log.get('file_enabled', False)),
                    file_path=str(log.get('file_path', '/var/log/tote_vision.log')),
                    max_file_size=int(log.get('max_file_size', 10485760)),
                    backup_count=int(log.get('backup_count', 3)),
                    console_enabled=bool(log.get('console_enabled', True)),
                )
        except (TypeError, ValueError, AttributeError) as e:
            if isinstance(e, ConfigurationError):
                raise
            raise ConfigurationError(f"Malformed config file {self._config_path}: {e}") from e

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        vision_changes: Dict[str, Any] = {}
        try:
            if os.environ.get('TOTE_COLOR'):
                vision_changes['active_color'] = os.environ['TOTE_COLOR'].lower()
            if os.environ.get('TOTE_SCORE_MIN'):
                vision_changes['score_minimum'] = float(os.environ['TOTE_SCORE_MIN'])
            if os.environ.get('TOTE_AREA_MIN'):
                vision_changes['area_minimum_percent'] = float(os.environ['TOTE_AREA_MIN'])
            if os.environ.get('TOTE_VIEW_ANGLE'):
                vision_changes['view_angle_deg'] = float(os.environ['TOTE_VIEW_ANGLE'])

            if os.environ.get('TOTE_CAMERA_ID'):
                self.camera.device_id = int(os.environ['TOTE_CAMERA_ID'])
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment override: {e}") from e

        if os.environ.get('TOTE_SOURCE_TYPE'):
            self.detection.source_type = os.environ['TOTE_SOURCE_TYPE']
        if os.environ.get('TOTE_LOG_LEVEL'):
            self.logging.level = os.environ['TOTE_LOG_LEVEL']

        if vision_changes:
            self.update_vision(**vision_changes)

    def get(self, key: str, default: Any = None) -> Any:
        """Get raw config value by dot-notation key."""
        keys = key.split('.')
        value = self._raw
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def __repr__(self) -> str:
        return f"Config(path={self._config_path}, color={self._vision.active_color})"


# Global config accessor
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None or _config is not Config._instance:
        _config = Config()
    return _config


def load_config(config_path: str) -> Config:
    """Load configuration from file and set as global."""
    global _config
    _config = Config.load(config_path)
    return _config
