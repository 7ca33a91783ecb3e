"""Package constants and demo settings

Attributes
----------
EPSILON : float
    Constant added to every sample's distance metric.
DEFAULT_INTENSITY : float
    Default smoothing / fade parameter added to each pixel's weight sum.
DEFAULT_SIZE : int[2]
    Default canvas size (width, height) in pixels.
DEFAULT_OPACITY : float
    Opacity of the raster layer when composited onto a map.
DEBOUNCE : float
    Delay (seconds) before a requested redraw starts.
INTERACTION_DEBOUNCE : float
    Delay used while the user is still panning / zooming.
DEMO_CORNERS : (float, float)[4]
    (lon, lat) corners of the demo canvas, clockwise from top-left.
DEMO_CENTER : (float, float)
    (lon, lat) center of the demo map.
"""

import json
from dataclasses import dataclass, field, fields

from .errors import ConfigError


EPSILON = 0.001
DEFAULT_INTENSITY = 50000.0

DEFAULT_SIZE = (1200, 900)
DEFAULT_OPACITY = 0.8

DEBOUNCE = 0.05
INTERACTION_DEBOUNCE = 0.15

DEMO_CORNERS = [
    (54.6, 24.445),
    (54.644, 24.445),
    (54.644, 24.405),
    (54.6, 24.405),
]
DEMO_CENTER = (54.62234595439645, 24.431402930764484)
DEMO_ZOOM = 15.5


@dataclass
class HeatmapConfig:
    """Settings for a heatmap canvas.

    Parameters
    ----------
    corners : (float, float)[4]
        (lon, lat) corners the raster is draped over
    width, height : int
        Raster size in pixels
    intensity : float
        Default intensity for draws
    scheme : str
        Name of a preset color scheme (see ``ramp.SCHEMES``)
    opacity : float
        Overlay opacity
    center : (float, float)
        Map center (lon, lat)
    zoom : float
        Map zoom level
    """

    corners: list = field(default_factory=lambda: list(DEMO_CORNERS))
    width: int = DEFAULT_SIZE[0]
    height: int = DEFAULT_SIZE[1]
    intensity: float = DEFAULT_INTENSITY
    scheme: str = "temperature"
    opacity: float = DEFAULT_OPACITY
    center: tuple = DEMO_CENTER
    zoom: float = DEMO_ZOOM

    def __post_init__(self):
        if len(self.corners) != 4:
            raise ConfigError(
                "Exactly 4 corners are required, got {}.".format(
                    len(self.corners)))
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                "Canvas size must be positive, got {}x{}.".format(
                    self.width, self.height))
        if not 0 <= self.opacity <= 1:
            raise ConfigError("Opacity must be in [0, 1].")

        self.corners = [tuple(c) for c in self.corners]
        self.center = tuple(self.center)

    @property
    def size(self):
        return (self.width, self.height)

    @classmethod
    def from_dict(cls, data):
        """Build a config from a mapping; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(
                "Unknown config keys: {}".format(", ".join(sorted(unknown))))
        return cls(**data)

    @classmethod
    def from_json(cls, path):
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(
                    "Could not parse config {}: {}".format(path, e)) from e
        return cls.from_dict(data)
