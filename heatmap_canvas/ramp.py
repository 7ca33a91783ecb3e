"""Threshold color ramps

Attributes
----------
SCHEMES : dict
    Preset ramps, as lists of (threshold, hex color) pairs.
ColorStop : namedtuple
    Single (threshold, rgb) ramp stop.
ColorRamp : class
    Maps scalar values to RGBA using the nearest upper threshold.
"""

import bisect
import math
import numbers
import re
from collections import namedtuple

import matplotlib
from matplotlib import colors
import numpy as np

from .errors import ColorFormatError, ConfigError


SCHEMES = {
    "temperature": [
        (15, "#1e09bb"),
        (20, "#0f25ef"),
        (25, "#1668af"),
        (32, "#0092d0"),
        (35, "#a0ddd0"),
        (40, "#f7b32b"),
        (45, "#ff5e13"),
        (50, "#d7263d"),
    ],
    "heatmap": [
        (15, "#000080"),
        (25, "#0000ff"),
        (35, "#00ffff"),
        (40, "#00ff00"),
        (45, "#ffff00"),
        (50, "#ff0000"),
    ],
    "rainbow": [
        (15, "#9400d3"),
        (25, "#0000ff"),
        (30, "#00ff00"),
        (35, "#ffff00"),
        (45, "#ff7f00"),
        (50, "#ff0000"),
    ],
}

_SHORT_HEX = re.compile(r"#?([0-9a-f])([0-9a-f])([0-9a-f])", re.IGNORECASE)
_LONG_HEX = re.compile(
    r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


def hex_to_rgb(hex_color):
    """Parse a ``#rgb`` or ``#rrggbb`` color (leading '#' optional).

    Raises
    ------
    ColorFormatError
        If the string is not a 3 or 6 digit hex color.

    Returns
    -------
    (int, int, int)
        8-bit red, green, blue.
    """
    if not isinstance(hex_color, str):
        raise ColorFormatError(hex_color)

    short = _SHORT_HEX.fullmatch(hex_color)
    if short is not None:
        color = "".join(c + c for c in short.groups())
    else:
        color = hex_color

    match = _LONG_HEX.fullmatch(color)
    if match is None:
        raise ColorFormatError(hex_color)

    return tuple(int(g, 16) for g in match.groups())


def _check_rgb(color):
    """Validate an already-parsed (r, g, b) color."""
    try:
        rgb = tuple(color)
    except TypeError:
        raise ColorFormatError(color)

    if len(rgb) != 3 or not all(
            isinstance(c, numbers.Integral) and not isinstance(c, bool) and
            0 <= c <= 255 for c in rgb):
        raise ColorFormatError(color)
    return tuple(int(c) for c in rgb)


ColorStop = namedtuple("ColorStop", ["threshold", "color"])


class ColorRamp:
    """Discrete threshold -> color mapping.

    A value takes the color of the smallest stop whose threshold is >= the
    value; values above every threshold take the largest stop's color.
    There is no blending between stops.

    Stops are sorted with a stable sort, so on equal thresholds the stop
    given first wins.

    Parameters
    ----------
    stops : iterable
        (threshold, hex color) pairs, or ColorStop instances with an
        (r, g, b) color. Need not be sorted.

    Raises
    ------
    ConfigError
        Empty ramp.
    ColorFormatError
        Any stop has a malformed hex color, or an RGB color that is not
        three integers in [0, 255].
    """

    ALPHA = 255

    def __init__(self, stops):

        parsed = []
        for threshold, color in stops:
            if isinstance(color, str):
                color = hex_to_rgb(color)
            parsed.append(ColorStop(float(threshold), _check_rgb(color)))

        if not parsed:
            raise ConfigError("Color ramp must have at least one stop.")

        self.stops = sorted(parsed, key=lambda s: s.threshold)
        self.thresholds = [s.threshold for s in self.stops]
        self.__colors = np.array(
            [s.color + (self.ALPHA,) for s in self.stops], dtype=np.uint8)

    def __len__(self):
        return len(self.stops)

    def __repr__(self):
        return "ColorRamp({})".format(
            ", ".join("{:g}:{}".format(t, colors.to_hex(
                np.array(c) / 255)) for t, c in self.stops))

    @classmethod
    def preset(cls, name):
        """Build one of the ``SCHEMES`` ramps."""
        if name not in SCHEMES:
            raise ConfigError(
                "Unknown color scheme '{}'. Available: {}".format(
                    name, ", ".join(sorted(SCHEMES))))
        return cls(SCHEMES[name])

    @classmethod
    def from_colormap(cls, name, thresholds):
        """Sample a matplotlib colormap evenly across ``thresholds``.

        Parameters
        ----------
        name : str
            Registered matplotlib colormap name (i.e. 'viridis')
        thresholds : float[]
            Stop thresholds; the lowest gets the start of the colormap and
            the highest the end.
        """
        try:
            cmap = matplotlib.colormaps[name]
        except KeyError:
            raise ConfigError("Unknown matplotlib colormap '{}'".format(name))

        thresholds = sorted(thresholds)
        samples = cmap(np.linspace(0, 1, len(thresholds)))
        return cls([
            (t, colors.to_hex(rgba, keep_alpha=False))
            for t, rgba in zip(thresholds, samples)])

    def __index(self, value):
        i = bisect.bisect_left(self.thresholds, value)
        return min(i, len(self.stops) - 1)

    def resolve(self, value):
        """Get the RGBA color for a single value.

        Returns
        -------
        (int, int, int, int)
            RGBA; alpha is always 255.
        """
        if math.isnan(value):
            raise ValueError("Cannot resolve a color for NaN")
        return tuple(int(c) for c in self.__colors[self.__index(value)])

    def resolve_many(self, values):
        """Vectorized ``resolve``.

        Parameters
        ----------
        values : np.array
            1-dimensional array of values.

        Raises
        ------
        ValueError
            Any value is NaN.

        Returns
        -------
        np.array
            (N, 4) uint8 RGBA array.
        """
        values = np.asarray(values, dtype=np.float64)
        if np.isnan(values).any():
            raise ValueError("Cannot resolve a color for NaN")
        idx = np.searchsorted(self.thresholds, values, side="left")
        return self.__colors[np.minimum(idx, len(self.stops) - 1)]


def as_ramp(ramp):
    """Accept a ColorRamp or a raw (threshold, hex) sequence."""
    if isinstance(ramp, ColorRamp):
        return ramp
    return ColorRamp(ramp)
