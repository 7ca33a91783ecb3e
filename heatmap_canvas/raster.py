"""Caller-owned RGBA pixel buffer"""

import numpy as np

from .errors import ConfigError


class RasterBuffer:
    """width x height x 4 uint8 RGBA buffer (row-major, interleaved).

    Parameters
    ----------
    width, height : int
        Raster size in pixels
    data : np.array
        Existing (height, width, 4) uint8 array to write into. Allocated
        (zeroed) if not given.
    """

    CHANNELS = 4

    def __init__(self, width, height, data=None):

        if width <= 0 or height <= 0:
            raise ConfigError(
                "Raster size must be positive, got {}x{}.".format(
                    width, height))

        if data is None:
            data = np.zeros((height, width, self.CHANNELS), dtype=np.uint8)
        elif (
                data.shape != (height, width, self.CHANNELS) or
                data.dtype != np.uint8):
            raise ConfigError(
                "Raster data must be a ({}, {}, 4) uint8 array; got {} "
                "{}".format(height, width, data.shape, data.dtype))

        self.width = width
        self.height = height
        self.data = data

    @classmethod
    def wrap(cls, raw, width, height):
        """Write-through view onto a flat caller buffer (i.e. a bytearray).

        Raises
        ------
        ConfigError
            Buffer length is not width * height * 4.
        """
        if len(raw) != width * height * cls.CHANNELS:
            raise ConfigError(
                "Buffer of {} bytes cannot hold a {}x{} RGBA raster.".format(
                    len(raw), width, height))
        data = np.frombuffer(raw, dtype=np.uint8).reshape(
            (height, width, cls.CHANNELS))
        if not data.flags.writeable:
            raise ConfigError("Raster buffer must be writable.")
        return cls(width, height, data=data)

    @classmethod
    def like(cls, other):
        """New zeroed buffer with the same size as ``other``."""
        return cls(other.width, other.height)

    @property
    def size(self):
        return (self.width, self.height)

    @property
    def aspect(self):
        return self.width / self.height

    def clear(self):
        self.data[...] = 0

    def tobytes(self):
        return self.data.tobytes()

    def __repr__(self):
        return "RasterBuffer({}x{})".format(self.width, self.height)


def as_raster(buffer):
    """Accept a RasterBuffer or a (height, width, 4) uint8 array."""
    if isinstance(buffer, RasterBuffer):
        return buffer
    if isinstance(buffer, np.ndarray) and buffer.ndim == 3:
        return RasterBuffer(buffer.shape[1], buffer.shape[0], data=buffer)
    raise ConfigError(
        "Expected a RasterBuffer or (height, width, 4) uint8 array, "
        "got {}".format(type(buffer).__name__))
