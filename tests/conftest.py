import pytest

from heatmap_canvas import ColorRamp


# (lon, lat) corners of a 2 x 1 degree box, clockwise from top-left
CORNERS = [(0, 1), (2, 1), (2, 0), (0, 0)]

BLUE = (0, 0, 255, 255)
RED = (255, 0, 0, 255)


def flat_project(point):
    """200 x 50 px canvas; lat grows upwards, y grows downwards."""
    return (point.lon * 100, (1 - point.lat) * 50)


class CountingProject:

    def __init__(self, fn=flat_project):
        self.fn = fn
        self.calls = 0

    def __call__(self, point):
        self.calls += 1
        return self.fn(point)


@pytest.fixture
def corners():
    return list(CORNERS)


@pytest.fixture
def project():
    return CountingProject()


@pytest.fixture
def ramp():
    return ColorRamp([(15, "#0000ff"), (50, "#ff0000")])
