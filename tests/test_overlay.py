import folium
from folium import raster_layers
from folium.plugins import FastMarkerCluster
import numpy as np

from heatmap_canvas import (
    HeatmapRenderer, RasterBuffer, interpolate_overlay, overlay_image,
    to_image)
from heatmap_canvas.overlay import corner_bounds

from conftest import flat_project


def _children(map_, kind):
    return [c for c in map_._children.values() if isinstance(c, kind)]


def test_to_image_copies():
    buffer = RasterBuffer(3, 2)
    buffer.data[...] = 10

    image = to_image(buffer)
    image[...] = 0

    assert image.shape == (2, 3, 4)
    assert image.dtype == np.uint8
    assert (buffer.data == 10).all()


def test_corner_bounds(corners):
    assert corner_bounds(corners) == [[0, 0], [1, 2]]


def test_overlay_image(corners):
    image = np.zeros((10, 20, 4), dtype=np.uint8)
    map_ = overlay_image(image, corners, opacity=0.5)

    assert isinstance(map_, folium.Map)
    overlays = _children(map_, raster_layers.ImageOverlay)
    assert len(overlays) == 1
    assert not _children(map_, FastMarkerCluster)


def test_markers(corners):
    image = np.zeros((10, 20, 4), dtype=np.uint8)
    points = [(1, 0.5, 30), (0.5, 0.25, 20)]

    clustered = overlay_image(image, corners, points=points)
    assert len(_children(clustered, FastMarkerCluster)) == 1

    plain = overlay_image(image, corners, points=points, use_fmc=False)
    assert len(_children(plain, folium.CircleMarker)) == 2

    hidden = overlay_image(image, corners, points=points, marker_size=0)
    assert not _children(hidden, folium.CircleMarker)
    assert not _children(hidden, FastMarkerCluster)


def test_interpolate_overlay(corners, ramp):
    ready = []
    renderer = HeatmapRenderer(
        corners, flat_project, size=(20, 10), on_ready=ready.append)

    map_, image = interpolate_overlay(
        renderer, [(1, 0.5, 30), ("bad", 0, 0)], ramp, 1, use_fmc=False)

    assert image.shape == (10, 20, 4)
    assert image.any()
    assert ready == [renderer.buffer]
    assert len(_children(map_, raster_layers.ImageOverlay)) == 1
    assert len(_children(map_, folium.CircleMarker)) == 1
