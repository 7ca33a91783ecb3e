"""Inverse distance weighted RGBA blending (numpy)"""

import numpy as np

from .config import EPSILON
from .errors import DrawCancelled
from .interpolate import BaseInterpolation, metric


class InterpolationEngine(BaseInterpolation):
    """CPU fill kernel.

    For each pixel, each sample gets ``dist_i = metric + EPSILON`` and a
    weight ``dist_i / (intensity + sum(dist))``; the pixel color is the
    weighted sum of sample colors, clamped to [0, 255] and floored. Weights
    sum to less than 1, so the remainder fades to transparent black.

    Pixels lying exactly on samples take the mean color of those samples
    (the limit of the weighting as the distance goes to 0).

    The loop runs over samples, each step covering the whole pixel grid,
    so memory stays O(width * height).
    """

    def __init__(self, fsize=64):
        super().__init__(fsize=fsize)

    def _fill(self, raster, xs, ys, colors, intensity, cancel):

        ft = self.FLOAT_TYPE
        shape = (raster.height, raster.width)
        aspect = ft(raster.aspect)

        px = (np.arange(raster.width, dtype=ft) / ft(raster.width))[None, :]
        py = (np.arange(raster.height, dtype=ft) / ft(raster.height))[:, None]

        total = np.full(shape, intensity, dtype=ft)
        acc = np.zeros(shape + (4,), dtype=ft)

        # Pixels sitting exactly on a sample; allocated on the first hit
        hits = None
        hit_acc = None

        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            for x, y, color in zip(xs, ys, colors):
                if cancel is not None and cancel.is_set():
                    raise DrawCancelled("Fill superseded by a newer draw.")

                dist = metric(px, py, x, y, aspect)
                hit = np.isinf(dist)
                dist = np.where(hit, 0, dist + EPSILON).astype(ft)

                total += dist
                acc += dist[..., None] * color

                if hit.any():
                    if hits is None:
                        hits = np.zeros(shape, dtype=ft)
                        hit_acc = np.zeros(shape + (4,), dtype=ft)
                    hits[hit] += 1
                    hit_acc[hit] += color

            out = acc / total[..., None]

            if hits is not None:
                covered = hits > 0
                out[covered] = hit_acc[covered] / hits[covered][:, None]

        np.clip(out, 0, 255, out=out)
        raster.data[...] = np.floor(out).astype(np.uint8)
