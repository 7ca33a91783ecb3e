import math

import numpy as np
import pytest

from heatmap_canvas import (
    ColorFormatError, ColorRamp, ColorStop, ConfigError, SCHEMES, hex_to_rgb)
from heatmap_canvas.ramp import as_ramp

from conftest import BLUE, RED


def test_nearest_upper_threshold(ramp):
    assert ramp.resolve(10) == ramp.resolve(15) == BLUE
    assert ramp.resolve(50) == ramp.resolve(60) == RED
    for v in (15.0001, 30, 49.999, 50):
        assert ramp.resolve(v) == RED


def test_unsorted_stops():
    ramp = ColorRamp([(50, "#ff0000"), (15, "#0000ff")])
    assert ramp.thresholds == [15, 50]
    assert ramp.resolve(10) == BLUE
    assert ramp.resolve(20) == RED


def test_tied_thresholds_first_given_wins():
    ramp = ColorRamp([(10, "#ff0000"), (10, "#00ff00")])
    assert ramp.resolve(5) == RED
    assert ramp.resolve(10) == RED
    assert ramp.resolve(20) == (0, 255, 0, 255)


def test_single_stop():
    ramp = ColorRamp([(0, "#123456")])
    assert ramp.resolve(-100) == ramp.resolve(100) == (0x12, 0x34, 0x56, 255)


@pytest.mark.parametrize("s", ["#0f0", "#00ff00", "0f0", "00FF00", "#0F0"])
def test_hex_forms(s):
    assert hex_to_rgb(s) == (0, 255, 0)


@pytest.mark.parametrize(
    "s", [
        "#zzzzzz", "#12345", "", "#", "#00ff00ff", "green", None, 255,
        "#00ff00\n", "#0f0\n", "\u0661\u0662\u0663", "#\u0661\u0662\u0663",
        " #00ff00",
    ])
def test_bad_hex(s):
    with pytest.raises(ColorFormatError) as e:
        hex_to_rgb(s)
    assert repr(s) in str(e.value)


def test_bad_hex_fails_ramp_construction():
    with pytest.raises(ColorFormatError, match="#zzzzzz"):
        ColorRamp([(15, "#0000ff"), (50, "#zzzzzz")])


def test_empty_ramp():
    with pytest.raises(ConfigError):
        ColorRamp([])
    with pytest.raises(ConfigError):
        as_ramp([])


def test_nan():
    with pytest.raises(ValueError):
        ColorRamp.preset("heatmap").resolve(math.nan)


def test_resolve_many_matches_resolve():
    ramp = ColorRamp.preset("temperature")
    values = np.linspace(0, 70, 281)
    many = ramp.resolve_many(values)
    assert many.shape == (len(values), 4)
    assert many.dtype == np.uint8
    for v, c in zip(values, many):
        assert tuple(c) == ramp.resolve(v)


def test_presets():
    for name, stops in SCHEMES.items():
        ramp = ColorRamp.preset(name)
        assert len(ramp) == len(stops)
        assert ramp.resolve(1000) == hex_to_rgb(stops[-1][1]) + (255,)

    with pytest.raises(ConfigError):
        ColorRamp.preset("plaid")


def test_from_colormap():
    ramp = ColorRamp.from_colormap("viridis", [20, 0, 10])
    assert ramp.thresholds == [0, 10, 20]
    assert ramp.resolve(0) == (0x44, 0x01, 0x54, 255)

    with pytest.raises(ConfigError):
        ColorRamp.from_colormap("not-a-colormap", [0, 1])


def test_as_ramp_passthrough(ramp):
    assert as_ramp(ramp) is ramp
    assert as_ramp([(1, "#fff")]).resolve(0) == (255, 255, 255, 255)


def test_resolve_many_nan(ramp):
    with pytest.raises(ValueError):
        ramp.resolve_many([10, math.nan])


@pytest.mark.parametrize("color", [
    (1, 2, 3, 4),
    (1, 2),
    (0, 256, 0),
    (-1, 0, 0),
    (0.5, 0, 0),
    (True, 0, 0),
    5,
])
def test_bad_rgb_stop(color):
    with pytest.raises(ColorFormatError):
        ColorRamp([ColorStop(10, color)])


def test_rgb_stop():
    ramp = ColorRamp([ColorStop(10, (1, 2, 3)), (20, np.array([4, 5, 6]))])
    assert ramp.resolve(0) == (1, 2, 3, 255)
    assert ramp.resolve(20) == (4, 5, 6, 255)
