
# Errors and configuration
from .errors import (
    HeatmapError, ConfigError, ColorFormatError, GeometryError, DrawCancelled)
from .config import HeatmapConfig

# Color ramps
from .ramp import ColorRamp, ColorStop, SCHEMES, hex_to_rgb

# Projection
from .projection import (
    CoordinateProjector, GeoPoint, PixelPoint, WebMercator, normalize)

# Interpolation
# (the GPU engine lives in heatmap_canvas.cuda; importing it needs a device)
from .raster import RasterBuffer
from .interpolate import BaseInterpolation, ProjectedSample, metric
from .idw import InterpolationEngine

# Rendering
from .renderer import DataPoint, HeatmapRenderer, clean_points
from .scheduler import DrawScheduler

# Overlay and mapping
from .overlay import to_image, interpolate_overlay, overlay_image


__all__ = [
    # Errors and configuration
    "HeatmapError",
    "ConfigError",
    "ColorFormatError",
    "GeometryError",
    "DrawCancelled",
    "HeatmapConfig",

    # Color ramps
    "ColorRamp",
    "ColorStop",
    "SCHEMES",
    "hex_to_rgb",

    # Projection
    "CoordinateProjector",
    "GeoPoint",
    "PixelPoint",
    "WebMercator",
    "normalize",

    # Interpolation
    "RasterBuffer",
    "BaseInterpolation",
    "ProjectedSample",
    "metric",
    "InterpolationEngine",

    # Rendering
    "DataPoint",
    "HeatmapRenderer",
    "clean_points",
    "DrawScheduler",

    # Overlay and mapping
    "to_image",
    "interpolate_overlay",
    "overlay_image"
]
