import threading
import time

import pytest

from heatmap_canvas import (
    ConfigError, DrawScheduler, HeatmapRenderer, InterpolationEngine,
    RasterBuffer)

from conftest import RED, flat_project


POINTS = [(1, 0.5, 30)]


class GatedEngine(InterpolationEngine):
    """Blocks its first fill until ``gate`` is set."""

    def __init__(self, honor_cancel=True):
        super().__init__()
        self.honor_cancel = honor_cancel
        self.started = threading.Event()
        self.gate = threading.Event()
        self.calls = 0

    def _fill(self, raster, xs, ys, colors, intensity, cancel):
        self.calls += 1
        if self.calls == 1:
            self.started.set()
            self.gate.wait(5)
        super()._fill(
            raster, xs, ys, colors, intensity,
            cancel if self.honor_cancel else None)


class Recorder:

    def __init__(self):
        self.calls = []
        self.event = threading.Event()

    def __call__(self, buffer, generation):
        self.calls.append((buffer, generation))
        self.event.set()


def make_renderer(corners, engine=None):
    return HeatmapRenderer(corners, flat_project, size=(20, 10), engine=engine)


def test_submit(corners, ramp):
    ready = Recorder()
    renderer = make_renderer(corners)

    with DrawScheduler(renderer, on_ready=ready) as scheduler:
        assert scheduler.submit(POINTS, ramp, 1).result(5) == 1

    assert scheduler.displayed_generation == 1
    buffer, generation = ready.calls[0]
    assert generation == 1
    assert buffer is scheduler.displayed
    assert isinstance(buffer, RasterBuffer)
    assert buffer is not renderer.buffer
    assert tuple(buffer.data[5, 10]) == RED
    assert not renderer.buffer.data.any()


@pytest.mark.parametrize("honor_cancel", [True, False])
def test_stale_draw_never_displayed(corners, ramp, honor_cancel):
    ready = Recorder()
    engine = GatedEngine(honor_cancel=honor_cancel)

    with DrawScheduler(make_renderer(corners, engine), on_ready=ready) as s:
        slow = s.submit(POINTS, ramp, 1)
        assert engine.started.wait(5)

        fresh = s.submit([(0.5, 0.5, 10)], ramp, 1)
        engine.gate.set()

        assert slow.result(5) is None
        assert fresh.result(5) == 2

    assert [g for _, g in ready.calls] == [2]
    assert s.displayed_generation == 2
    assert s.generation == 2


def test_request_debounces(corners, ramp):
    ready = Recorder()

    with DrawScheduler(
            make_renderer(corners), on_ready=ready, debounce=0.05) as s:
        for i in range(3):
            s.request(POINTS, ramp, 1)
        assert s.generation == 3
        assert ready.event.wait(5)
        time.sleep(0.2)

    assert [g for _, g in ready.calls] == [3]


def test_interaction_debounce(corners, ramp):
    ready = Recorder()

    with DrawScheduler(
            make_renderer(corners), on_ready=ready, debounce=0.01,
            interaction_debounce=0.3) as s:
        s.request(POINTS, ramp, 1, interacting=True)
        assert not ready.event.wait(0.1)
        assert ready.event.wait(5)


def test_cancel_pending_request(corners, ramp):
    ready = Recorder()

    with DrawScheduler(
            make_renderer(corners), on_ready=ready, debounce=0.1) as s:
        s.request(POINTS, ramp, 1)
        s.cancel()
        assert not ready.event.wait(0.3)

    assert s.displayed is None


def test_failed_draw_keeps_displayed(corners, ramp):
    ready = Recorder()

    with DrawScheduler(make_renderer(corners), on_ready=ready) as s:
        assert s.submit(POINTS, ramp, 1).result(5) == 1
        shown = s.displayed

        failed = s.submit(POINTS, [], 1)
        with pytest.raises(ConfigError):
            failed.result(5)

    assert s.displayed is shown
    assert len(ready.calls) == 1
