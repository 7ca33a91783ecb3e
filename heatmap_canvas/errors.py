"""Exception types raised by the heatmap pipeline"""


class HeatmapError(Exception):
    """Base class for all heatmap errors"""
    pass


class ConfigError(HeatmapError):
    """Invalid configuration: empty ramp, bad corners, bad intensity, ..."""
    pass


class ColorFormatError(HeatmapError, ValueError):
    """Malformed hex color string"""

    def __init__(self, color):
        self.color = color
        super().__init__("Invalid color hex code: {!r}".format(color))


class GeometryError(HeatmapError):
    """Corners project to a degenerate (zero width or height) rectangle"""
    pass


class DrawCancelled(HeatmapError):
    """Raised inside a fill when a newer draw has superseded it"""
    pass
