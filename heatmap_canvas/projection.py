"""Geographic corner rectangle -> normalized image plane

The host map supplies ``project_fn(GeoPoint) -> pixel point`` reflecting its
current pan / zoom. ``WebMercator`` is a stand-in camera with the same
projection a web map uses, for hosts (and tests) without one.
"""

import math
from collections import namedtuple

from .errors import ConfigError, GeometryError


GeoPoint = namedtuple("GeoPoint", ["lon", "lat"])
PixelPoint = namedtuple("PixelPoint", ["x", "y"])
ProjectedFrame = namedtuple(
    "ProjectedFrame", ["origin_x", "origin_y", "width", "height"])


def _as_pixel(point):
    """Accept (x, y) pairs or anything with .x / .y (i.e. a map Point)."""
    if hasattr(point, "x") and hasattr(point, "y"):
        return PixelPoint(float(point.x), float(point.y))
    x, y = point
    return PixelPoint(float(x), float(y))


class CoordinateProjector:
    """Normalizes geographic points against a projected corner rectangle.

    Parameters
    ----------
    corners : (lon, lat)[4]
        Corners of the canvas; 0=top-left, 1=top-right, 2=bottom-right,
        3=bottom-left (clockwise or counter-clockwise).
    project_fn : callable
        GeoPoint -> pixel point. Called fresh on every ``frame()``.
    """

    def __init__(self, corners, project_fn):
        corners = [GeoPoint(*c) for c in corners]
        if len(corners) != 4:
            raise ConfigError(
                "Exactly 4 corners are required, got {}.".format(
                    len(corners)))

        self.corners = corners
        self.project_fn = project_fn

    def project(self, point):
        return _as_pixel(self.project_fn(GeoPoint(*point)))

    def frame(self):
        """Project the corners and get the rectangle they span.

        Raises
        ------
        GeometryError
            Projected width or height is zero (or not finite).

        Returns
        -------
        ProjectedFrame
            Origin (corner 0) and absolute width / height in pixels.
        """
        c0, c1, _, c3 = [self.project(c) for c in self.corners]

        width = abs(c0.x - c1.x)
        height = abs(c0.y - c3.y)

        if not (math.isfinite(width) and math.isfinite(height)):
            raise GeometryError(
                "Corners project to a non-finite rectangle "
                "({} x {}).".format(width, height))
        if width == 0 or height == 0:
            raise GeometryError(
                "Corners project to a degenerate rectangle "
                "({} x {}).".format(width, height))

        return ProjectedFrame(c0.x, c0.y, width, height)

    def normalize(self, target, frame=None):
        """Get ``target``'s position relative to the corner rectangle.

        Parameters
        ----------
        target : (lon, lat)
            Point to normalize
        frame : ProjectedFrame
            Result of ``frame()``; projected fresh if not given.

        Returns
        -------
        (float, float)
            (x, y); in [0, 1] for points inside the rectangle.
        """
        if frame is None:
            frame = self.frame()
        p = self.project(target)
        return (
            (p.x - frame.origin_x) / frame.width,
            (p.y - frame.origin_y) / frame.height)


def normalize(corners, project_fn, target):
    """One-shot ``CoordinateProjector(corners, project_fn).normalize``."""
    return CoordinateProjector(corners, project_fn).normalize(target)


class WebMercator:
    """Web Mercator viewport camera.

    Parameters
    ----------
    center : (float, float)
        (lon, lat) at the middle of the viewport
    zoom : float
        Zoom level; the world is ``tile_size * 2 ** zoom`` pixels wide.
    width, height : int
        Viewport size in pixels
    tile_size : int
        512 for vector-tile maps, 256 for raster tile maps.
    """

    MAX_LAT = 85.051129

    def __init__(self, center, zoom, width, height, tile_size=512):
        self.center = GeoPoint(*center)
        self.zoom = zoom
        self.width = width
        self.height = height
        self.tile_size = tile_size

    @property
    def world_size(self):
        return self.tile_size * 2 ** self.zoom

    def __world(self, lon, lat):
        lat = max(-self.MAX_LAT, min(self.MAX_LAT, lat))
        siny = math.sin(math.radians(lat))
        x = (lon + 180) / 360
        y = 0.5 - math.log((1 + siny) / (1 - siny)) / (4 * math.pi)
        return x * self.world_size, y * self.world_size

    def project(self, point):
        """GeoPoint -> viewport PixelPoint."""
        lon, lat = point
        x, y = self.__world(lon, lat)
        cx, cy = self.__world(*self.center)
        return PixelPoint(
            x - cx + self.width / 2, y - cy + self.height / 2)

    def unproject(self, pixel):
        """Viewport (x, y) -> GeoPoint."""
        px, py = _as_pixel(pixel)
        cx, cy = self.__world(*self.center)
        x = (px - self.width / 2 + cx) / self.world_size
        y = (py - self.height / 2 + cy) / self.world_size
        lon = x * 360 - 180
        lat = math.degrees(2 * math.atan(math.exp((0.5 - y) * 2 * math.pi))
                           - math.pi / 2)
        return GeoPoint(lon, lat)

    def __call__(self, point):
        return self.project(point)
