import argparse
import logging

from matplotlib import pyplot as plt
import numpy as np

from heatmap_canvas import (
    ColorRamp, HeatmapConfig, HeatmapRenderer, WebMercator,
    interpolate_overlay)


def synthetic_points(corners, n=60, seed=0):
    """Temperature-like readings (15-50) scattered over the corner box."""
    rng = np.random.default_rng(seed)

    lons = [c[0] for c in corners]
    lats = [c[1] for c in corners]
    lon = rng.uniform(min(lons), max(lons), n)
    lat = rng.uniform(min(lats), max(lats), n)

    # Smooth field plus noise
    u = (lon - min(lons)) / (max(lons) - min(lons))
    v = (lat - min(lats)) / (max(lats) - min(lats))
    value = 15 + 35 * (0.5 + 0.5 * np.sin(3 * u) * np.cos(2 * v))
    value += rng.normal(0, 1.5, n)

    return list(zip(lon.tolist(), lat.tolist(), value.tolist()))


def _parse_args():
    p = argparse.ArgumentParser(
        description="Render an interpolated heatmap over a map canvas.")
    p.add_argument("--config", help="JSON file with HeatmapConfig fields")
    p.add_argument("--intensity", type=float, help="Smoothing / fade")
    p.add_argument("--scheme", help="Color scheme preset")
    p.add_argument("--points", type=int, default=60)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--html", help="Save a folium map here instead of showing")
    p.add_argument("--cuda", action="store_true", help="Use the GPU engine")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


if __name__ == '__main__':

    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    cfg = (
        HeatmapConfig.from_json(args.config) if args.config
        else HeatmapConfig())
    intensity = cfg.intensity if args.intensity is None else args.intensity
    ramp = ColorRamp.preset(args.scheme or cfg.scheme)

    engine = None
    if args.cuda:
        from heatmap_canvas.cuda import CudaInterpolationEngine
        engine = CudaInterpolationEngine()

    camera = WebMercator(cfg.center, cfg.zoom, cfg.width, cfg.height)
    renderer = HeatmapRenderer(
        cfg.corners, camera, size=cfg.size, engine=engine)

    points = synthetic_points(cfg.corners, n=args.points, seed=args.seed)

    if args.html:
        map_, _ = interpolate_overlay(
            renderer, points, ramp, intensity, opacity=cfg.opacity)
        map_.save(args.html)
        logging.info("Saved %s", args.html)
    else:
        res = renderer.draw(points, ramp, intensity)
        plt.imshow(res.data)
        plt.show()
