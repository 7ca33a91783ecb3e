"""Common interpolation routines

Attributes
----------
ProjectedSample : namedtuple
    Sample position in normalized image coordinates, with its RGBA color.
metric : function
    Aspect-corrected inverse squared distance.
KernelConfigurationException : exception
    Exception type raised by misconfigured engines
BaseInterpolation : class
    Base Interpolation class; handles argument checking and sample packing
    (extenders only need to provide ``_fill``).
"""

import logging
import math
from collections import namedtuple

import numpy as np

from .config import DEFAULT_INTENSITY
from .errors import ConfigError
from .raster import as_raster


logger = logging.getLogger(__name__)


ProjectedSample = namedtuple("ProjectedSample", ["x", "y", "color"])


def metric(px, py, sx, sy, aspect):
    """Inverse squared distance with the x axis scaled by ``aspect``.

    Works on floats or broadcastable arrays. Coincident points give inf
    for arrays (division by zero for floats).

    Parameters
    ----------
    px, py : float or np.array
        Pixel position, normalized
    sx, sy : float or np.array
        Sample position, normalized
    aspect : float
        Raster width / height
    """
    dx = sx - px
    dy = sy - py
    return 1 / (dx * dx * aspect + dy * dy / aspect)


def check_intensity(intensity):
    """Coerce intensity to float; must be finite and non-negative."""
    try:
        intensity = float(intensity)
    except (TypeError, ValueError):
        raise ConfigError(
            "Intensity must be a number, got {!r}".format(intensity))

    if not math.isfinite(intensity) or intensity < 0:
        raise ConfigError(
            "Intensity must be finite and >= 0, got {}".format(intensity))
    return intensity


class KernelConfigurationException(ConfigError):
    """Exception raised by a misconfigured interpolation kernel"""
    pass


class BaseInterpolation:
    """Base Interpolation class

    Parameters
    ----------
    fsize : int
        32 or 64; size of floating point type used for accumulation
    """

    FLOAT_SIZES = {
        32: [np.float32, "float"],
        64: [np.float64, "double"]
    }

    def __init__(self, fsize=32):

        if fsize not in self.FLOAT_SIZES:
            raise KernelConfigurationException(
                "Float size must be 32 or 64.")

        self.FLOAT_TYPE, self.FLOAT_CTYPE = self.FLOAT_SIZES[fsize]

    def _pack(self, samples):
        """Split samples into coordinate and color arrays.

        Samples with a non-finite position or color are dropped.

        Returns
        -------
        [np.array, np.array, np.array]
            [0] x coordinates (N,)
            [1] y coordinates (N,)
            [2] RGBA colors (N, 4)
        """
        samples = [ProjectedSample(*s) for s in samples]

        xs = np.array([s.x for s in samples], dtype=self.FLOAT_TYPE)
        ys = np.array([s.y for s in samples], dtype=self.FLOAT_TYPE)
        colors = np.array(
            [s.color for s in samples], dtype=self.FLOAT_TYPE
        ).reshape(-1, 4)

        finite = (
            np.isfinite(xs) & np.isfinite(ys) &
            np.isfinite(colors).all(axis=1))
        if not finite.all():
            logger.debug(
                "Dropped %d samples with non-finite fields",
                np.count_nonzero(~finite))
            xs, ys, colors = xs[finite], ys[finite], colors[finite]

        return xs, ys, colors

    def fill(self, buffer, samples, intensity=DEFAULT_INTENSITY, cancel=None):
        """Fill a raster with the distance-weighted blend of ``samples``.

        Parameters
        ----------
        buffer : RasterBuffer or np.array
            Caller-owned (height, width, 4) uint8 raster; written in place.
        samples : ProjectedSample[]
            Working set for this call only.
        intensity : float
            Added once to every pixel's weight sum. Larger values fade the
            heatmap towards transparent; smaller values sharpen it.
        cancel : threading.Event
            If set while filling, the fill stops with ``DrawCancelled``.

        Raises
        ------
        ConfigError
            Bad intensity or buffer.
        DrawCancelled
            ``cancel`` was set.

        Returns
        -------
        RasterBuffer
            The filled buffer.
        """
        raster = as_raster(buffer)
        intensity = check_intensity(intensity)
        xs, ys, colors = self._pack(samples)

        if xs.shape[0] == 0:
            # Every blend sum is empty: fully transparent
            raster.clear()
            return raster

        logger.debug(
            "Filling %dx%d raster from %d samples (intensity=%g)",
            raster.width, raster.height, xs.shape[0], intensity)

        self._fill(raster, xs, ys, colors, intensity, cancel)
        return raster

    def _fill(self, raster, xs, ys, colors, intensity, cancel):
        raise NotImplementedError(
            "Interpolation engines must implement _fill.")
