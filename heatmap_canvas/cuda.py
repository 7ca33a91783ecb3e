"""GPU fill kernel

Same blend as ``idw.InterpolationEngine``, one CUDA thread per pixel.
Importing this module initializes a CUDA context; it is not imported by the
package ``__init__``.

Attributes
----------
_MOD_METRIC : str
    Device metric function. Format string; must be formatted with
    {f}=float or double.
_MOD_FILL : str
    Fill kernel. Format string ({f}, {eps}).
"""

import pycuda.driver as cuda
import pycuda.autoinit
from pycuda.compiler import SourceModule

import numpy as np

from .config import EPSILON
from .errors import DrawCancelled
from .interpolate import BaseInterpolation, KernelConfigurationException


#
# -- Kernels ------------------------------------------------------------------
#

_MOD_METRIC = """
/**
 * Aspect-corrected inverse squared distance
 * px, py : pixel position (normalized)
 * sx, sy : sample position (normalized)
 * aspect : raster width / height
 */
__device__ {f} metric({f} px, {f} py, {f} sx, {f} sy, {f} aspect)
{{
    {f} dx = sx - px;
    {f} dy = sy - py;
    return 1 / (dx * dx * aspect + dy * dy / aspect);
}}
"""

_MOD_FILL = """
__global__ void fill(
        {f} *xs, {f} *ys, {f} *colors, int size,
        unsigned char *res, int width_px, int height_px,
        {f} intensity)
{{
    int px_x = threadIdx.x + blockIdx.x * blockDim.x;
    int px_y = threadIdx.y + blockIdx.y * blockDim.y;

    if((px_x < width_px) && (px_y < height_px)) {{

        {f} aspect = ({f}) width_px / ({f}) height_px;
        {f} px = ({f}) px_x / ({f}) width_px;
        {f} py = ({f}) px_y / ({f}) height_px;

        {f} total = intensity;
        {f} acc[4] = {{0, 0, 0, 0}};
        {f} hit_acc[4] = {{0, 0, 0, 0}};
        int hits = 0;
        {f} dist;

        for(int i = 0; i < size; i++) {{
            dist = metric(px, py, xs[i], ys[i], aspect);
            if(isinf(dist)) {{
                hits++;
                for(int c = 0; c < 4; c++) {{ hit_acc[c] += colors[4 * i + c]; }}
            }}
            else {{
                dist += {eps};
                total += dist;
                for(int c = 0; c < 4; c++) {{ acc[c] += dist * colors[4 * i + c]; }}
            }}
        }}

        int offset = (px_y * width_px + px_x) * 4;
        {f} v;
        for(int c = 0; c < 4; c++) {{
            v = (hits > 0) ? hit_acc[c] / hits : acc[c] / total;
            v = fmin(({f}) 255, fmax(({f}) 0, v));
            res[offset + c] = (unsigned char) floor(v);
        }}
    }}
}}
"""


#
# -- Python Wrapper -----------------------------------------------------------
#

class CudaInterpolationEngine(BaseInterpolation):
    """GPU interpolation engine

    Parameters
    ----------
    fsize : int
        32 or 64; size of floating point type
    block : int[3]
        Block size. Should be a multiple of 32 (as per NVIDIA warp size
        specifications). Defaults to 16*16 since 256 is around the recommended
        size (128-512, with 512 being the limit for some cards)
    """

    def __init__(self, fsize=32, block=(16, 16, 1)):

        super().__init__(fsize=fsize)

        if block[2] != 1:
            raise KernelConfigurationException(
                "Block size dimension 3 must be 1.")

        if (block[0] * block[1]) % 32 != 0:
            raise KernelConfigurationException(
                "Kernel size must be divisible by 32.")

        self.BLOCK_SIZE = block

        self.__kernel = SourceModule(
            (_MOD_METRIC + _MOD_FILL).format(
                f=self.FLOAT_CTYPE, eps=repr(EPSILON))
        ).get_function("fill")

    def __get_grid(self, size):
        """Get grid dimensions for a GPU operation.

        Parameters
        ----------
        size : int[2]
            Target image size (width, height)

        Returns
        -------
        int[3]
            PyCuda grid argument
        """
        return (
            int(np.ceil(size[0] / self.BLOCK_SIZE[0])),
            int(np.ceil(size[1] / self.BLOCK_SIZE[1])),
            1)

    def _fill(self, raster, xs, ys, colors, intensity, cancel):

        # Kernel launches can't be interrupted; check once up front
        if cancel is not None and cancel.is_set():
            raise DrawCancelled("Fill superseded by a newer draw.")

        colors = np.ascontiguousarray(colors)

        # Allocate and transfer data to GPU
        xs_gpu = cuda.mem_alloc(xs.nbytes)
        ys_gpu = cuda.mem_alloc(ys.nbytes)
        colors_gpu = cuda.mem_alloc(colors.nbytes)
        cuda.memcpy_htod(xs_gpu, xs)
        cuda.memcpy_htod(ys_gpu, ys)
        cuda.memcpy_htod(colors_gpu, colors)

        # Set up result
        res_cpu = np.zeros(raster.data.shape, dtype=np.uint8)
        res_gpu = cuda.mem_alloc(res_cpu.nbytes)

        # Run kernel
        self.__kernel(
            xs_gpu, ys_gpu, colors_gpu, np.int32(xs.shape[0]),
            res_gpu, np.int32(raster.width), np.int32(raster.height),
            self.FLOAT_TYPE(intensity),
            block=self.BLOCK_SIZE, grid=self.__get_grid(raster.size))

        # Fetch result
        cuda.memcpy_dtoh(res_cpu, res_gpu)
        raster.data[...] = res_cpu
