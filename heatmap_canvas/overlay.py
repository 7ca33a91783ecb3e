"""Image overlay routines"""

import folium
from folium import raster_layers
from folium.plugins import FastMarkerCluster

import numpy as np

from .config import DEFAULT_INTENSITY, DEFAULT_OPACITY
from .raster import as_raster
from .renderer import clean_points


def to_image(buffer):
    """Copy a raster into a standalone image array.

    Parameters
    ----------
    buffer : RasterBuffer or np.array
        Filled raster

    Returns
    -------
    np.array
        (height, width, 4) uint8 RGBA array.
    """
    return np.array(as_raster(buffer).data, dtype=np.uint8, copy=True)


def corner_bounds(corners):
    """Get [[south, west], [north, east]] of (lon, lat) corners."""
    lons = [c[0] for c in corners]
    lats = [c[1] for c in corners]
    return [[min(lats), min(lons)], [max(lats), max(lons)]]


def interpolate_overlay(
        renderer, points, ramp, intensity=DEFAULT_INTENSITY, **kwargs):
    """Draw a heatmap and put it on a folium map.

    Parameters
    ----------
    renderer : HeatmapRenderer
        Renderer to draw with (its ``on_ready`` is called as usual)
    points : iterable
        (lon, lat, value) data points
    ramp : ColorRamp or (threshold, hex)[]
        Color ramp
    intensity : float
        Smoothing / fade parameter
    **kwargs : dict
        args to pass to overlay_image.

    Returns
    -------
    [folium.Map, np.array]
        [0] Created folium map. View by calling it's __repr__ (just write it
            on its own in a line), or save it with ``.save(path)``
        [1] Rendered image (uint8 RGBA)
    """
    points = list(clean_points(points))

    image = to_image(renderer.draw(points, ramp, intensity))

    map_ = overlay_image(
        image, renderer.projector.corners, points=points, **kwargs)

    return map_, image


def overlay_image(
        image, corners, points=None, opacity=DEFAULT_OPACITY,
        marker_size=1, use_fmc=True, tiles="OpenStreetMap", zoom_start=15):
    """Overlay an image onto a folium map.

    Parameters
    ----------
    image : np.array
        Image array to overlay
    corners : (lon, lat)[4]
        Corners the image is draped over
    points : DataPoint[]
        Points to mark; no markers if None.
    opacity : float
        Overlay opacity
    marker_size : float
        Size of markers. If marker_size=0, no markers are shown.
    use_fmc : bool
        If True, uses FastMarkerClusters to avoid jupyter notebook limitations.
        WARNING: if you set use_fmc to false, large datasets (>1000 points) may
        cause the map to refuse to display on Jupyter notebooks.
    tiles : str
        Tile type to use for folium map. Defaults to 'OpenStreetMap'.
    zoom_start : int
        Initial zoom level
    """

    bounds = corner_bounds(corners)

    # Base Map
    map_ = folium.Map(
        location=(
            (bounds[0][0] + bounds[1][0]) / 2,
            (bounds[0][1] + bounds[1][1]) / 2),
        tiles=tiles,
        zoom_start=zoom_start)

    # Interpolation Overlay
    map_.add_child(raster_layers.ImageOverlay(
        image, opacity=opacity, bounds=bounds))

    # Markers
    if points and marker_size > 0:
        latlons = [(p[1], p[0]) for p in points]
        if use_fmc:
            FastMarkerCluster(data=latlons).add_to(map_)
        else:
            for latlon in latlons:
                folium.CircleMarker(latlon, radius=marker_size).add_to(map_)

    return map_
