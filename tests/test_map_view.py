import math

import pytest

pytest.importorskip("dearpygui")

from hexworld import Feature, HexCoordinate, TerrainType  # noqa: E402
from ui.map_view import (  # noqa: E402
    FEATURE_COLORS,
    HEX_SIZE,
    TERRAIN_COLORS,
    grayscale_color,
    hex_corners,
    river_edge_segment,
    terrain_color,
)

from map_builders import make_tile  # noqa: E402


def rounded(points):
    return {(round(x, 6), round(y, 6)) for x, y in points}


def test_east_edge_is_vertical():
    (x1, y1), (x2, y2) = river_edge_segment(0.0, 0.0, 0)
    assert x1 == pytest.approx(HEX_SIZE * math.sqrt(3) / 2)
    assert x2 == pytest.approx(x1)
    assert y1 < 0 < y2


def test_neighbours_draw_the_same_shared_edge():
    origin = HexCoordinate(0, 0)
    for d in range(6):
        other = origin.neighbor(d)
        here = river_edge_segment(*origin.to_pixel(HEX_SIZE), d)
        there = river_edge_segment(*other.to_pixel(HEX_SIZE), (d + 3) % 6)
        assert rounded(here) == rounded(there), f"edge {d} does not line up"


def test_corners_lie_on_circle():
    for x, y in hex_corners(10.0, 20.0):
        assert math.hypot(x - 10.0, y - 20.0) == pytest.approx(HEX_SIZE)


def test_colors():
    tile = make_tile(HexCoordinate(0, 0), TerrainType.DESERT)
    assert terrain_color(tile) == TERRAIN_COLORS[TerrainType.DESERT]
    iced = make_tile(HexCoordinate(0, 0), TerrainType.OCEAN, features=[Feature.ICE], elevation=0.0)
    assert terrain_color(iced) == FEATURE_COLORS[Feature.ICE]
    assert grayscale_color(2.0) == (255, 255, 255, 255)
    assert grayscale_color(-1.0) == (0, 0, 0, 255)
