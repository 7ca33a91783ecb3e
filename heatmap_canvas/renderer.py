"""Single-draw orchestration

``HeatmapRenderer.draw`` validates the ramp, projects the corners, turns
points into a fresh working set of ``ProjectedSample``s and hands it to an
interpolation engine.
"""

import logging
import math
import numbers
from collections import namedtuple
from collections.abc import Mapping

import numpy as np

from .config import DEFAULT_INTENSITY
from .errors import ConfigError
from .idw import InterpolationEngine
from .interpolate import ProjectedSample, check_intensity
from .projection import CoordinateProjector
from .ramp import as_ramp
from .raster import RasterBuffer, as_raster


logger = logging.getLogger(__name__)


DataPoint = namedtuple("DataPoint", ["lon", "lat", "value"])


def _is_number(v):
    return (
        isinstance(v, numbers.Real) and not isinstance(v, bool) and
        math.isfinite(v))


def clean_points(points):
    """Yield well-formed DataPoints, silently skipping the rest.

    A point may be a DataPoint, a (lon, lat, value) sequence or a mapping
    with 'lon', 'lat', 'value' keys. Points with missing, non-numeric or
    non-finite fields are dropped.
    """
    dropped = 0
    for p in points:
        if isinstance(p, Mapping):
            fields = (p.get("lon"), p.get("lat"), p.get("value"))
        elif isinstance(p, (tuple, list)) and len(p) == 3:
            fields = tuple(p)
        else:
            fields = None

        if fields is not None and all(_is_number(f) for f in fields):
            yield DataPoint(*(float(f) for f in fields))
        else:
            dropped += 1

    if dropped:
        logger.debug("Dropped %d malformed data points", dropped)


class HeatmapRenderer:
    """Draws interpolated heatmaps onto a raster draped over four corners.

    Parameters
    ----------
    corners : (lon, lat)[4]
        Canvas corners, clockwise or counter-clockwise from top-left.
    project_fn : callable
        GeoPoint -> pixel point; the host map's current projection.
    buffer : RasterBuffer or np.array
        Raster to draw into. One of ``buffer`` and ``size`` is required.
    size : int[2]
        (width, height) of a raster to allocate if ``buffer`` is not given.
    engine : BaseInterpolation
        Fill kernel; defaults to ``InterpolationEngine()``.
    on_ready : callable
        Called with the buffer after each ``draw``.
    """

    def __init__(
            self, corners, project_fn, buffer=None, size=None, engine=None,
            on_ready=None):

        self.projector = CoordinateProjector(corners, project_fn)

        if buffer is None:
            if size is None:
                raise ConfigError("Either a buffer or a size is required.")
            buffer = RasterBuffer(*size)

        self.buffer = as_raster(buffer)
        self.engine = engine if engine is not None else InterpolationEngine()
        self.on_ready = on_ready

    @property
    def size(self):
        return self.buffer.size

    def working_set(self, points, ramp, frame):
        """Build the samples for one draw.

        Parameters
        ----------
        points : iterable
            Raw data points (filtered with ``clean_points``; points the
            projection puts at a non-finite position are dropped too)
        ramp : ColorRamp
            Value -> color mapping
        frame : ProjectedFrame
            Projected corner rectangle for this draw

        Returns
        -------
        ProjectedSample[]
            New list; never shared between draws.
        """
        points = list(clean_points(points))
        if not points:
            return []

        colors = ramp.resolve_many(np.array([p.value for p in points]))

        samples = []
        for p, color in zip(points, colors):
            x, y = self.projector.normalize((p.lon, p.lat), frame)
            # The host projection may not place every point
            if not (math.isfinite(x) and math.isfinite(y)):
                logger.debug("Dropped point %s: projected to (%s, %s)",
                             p, x, y)
                continue
            samples.append(ProjectedSample(x, y, tuple(int(c) for c in color)))
        return samples

    def render(
            self, points, ramp, intensity=DEFAULT_INTENSITY, buffer=None,
            cancel=None):
        """Draw into ``buffer`` (default: the renderer's own) without
        signalling ``on_ready``.

        Raises
        ------
        ConfigError
            Empty ramp, bad intensity or bad buffer
        ColorFormatError
            Malformed ramp color
        GeometryError
            Corners project to a degenerate rectangle
        DrawCancelled
            ``cancel`` was set during the fill

        Returns
        -------
        RasterBuffer
            The filled buffer
        """
        ramp = as_ramp(ramp)
        intensity = check_intensity(intensity)
        frame = self.projector.frame()

        samples = self.working_set(points, ramp, frame)

        target = self.buffer if buffer is None else as_raster(buffer)
        return self.engine.fill(target, samples, intensity, cancel=cancel)

    def draw(self, points, ramp, intensity=DEFAULT_INTENSITY):
        """Draw a heatmap into the renderer's buffer and signal ``on_ready``.

        Parameters
        ----------
        points : iterable
            (lon, lat, value) data points
        ramp : ColorRamp or (threshold, hex)[]
            Color ramp
        intensity : float
            Smoothing / fade parameter

        Returns
        -------
        RasterBuffer
            The renderer's buffer, filled.
        """
        raster = self.render(points, ramp, intensity)
        if self.on_ready is not None:
            self.on_ready(raster)
        return raster
