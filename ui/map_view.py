import math
import logging
from typing import Dict, List, Optional, Tuple

import dearpygui.dearpygui as dpg

from hexworld.coords import HexCoordinate
from hexworld.hex import Feature, TerrainType, Tile
from hexworld.world import WorldMap
from pathing import MoverCapability, PathResult, find_path

logger = logging.getLogger("hexciv.ui")
logger.addHandler(logging.NullHandler())

HEX_SIZE = 18

Color = Tuple[int, int, int, int]

TERRAIN_COLORS: Dict[TerrainType, Color] = {
    TerrainType.OCEAN: (28, 66, 140, 255),
    TerrainType.COAST: (65, 105, 225, 255),
    TerrainType.DESERT: (237, 201, 175, 255),
    TerrainType.PLAINS: (189, 183, 107, 255),
    TerrainType.GRASSLAND: (110, 205, 88, 255),
    TerrainType.TUNDRA: (160, 160, 140, 255),
    TerrainType.SNOW: (240, 240, 245, 255),
    TerrainType.HILLS: (107, 142, 35, 255),
    TerrainType.MOUNTAINS: (139, 137, 137, 255),
}

FEATURE_COLORS: Dict[Feature, Color] = {
    Feature.WOODS: (34, 139, 34, 255),
    Feature.RAINFOREST: (0, 100, 0, 255),
    Feature.OASIS: (0, 206, 209, 255),
    Feature.ICE: (220, 240, 255, 255),
}

RIVER_COLOR: Color = (30, 144, 255, 255)
PATH_COLOR: Color = (255, 69, 0, 255)

# Pointy-top corners: corner i sits between edge directions i and i + 1.
angles = [math.radians(60 * i + 30) for i in range(6)]


def hex_corners(x, y, size=HEX_SIZE):
    return [
        (x + size * math.cos(a), y + size * math.sin(a))
        for a in angles
    ]


def river_edge_segment(x, y, direction, size=HEX_SIZE):
    """Pixel endpoints of edge ``direction`` of the hex centred at (x, y)."""
    corners = hex_corners(x, y, size)
    return corners[(direction - 1) % 6], corners[direction]


def terrain_color(tile: Tile) -> Color:
    if Feature.ICE in tile.features:
        return FEATURE_COLORS[Feature.ICE]
    return TERRAIN_COLORS.get(tile.terrain, (200, 200, 200, 255))


def feature_marker_color(tile: Tile) -> Optional[Color]:
    for feature in (Feature.WOODS, Feature.RAINFOREST, Feature.OASIS):
        if feature in tile.features:
            return FEATURE_COLORS[feature]
    return None


def grayscale_color(value: float) -> Color:
    level = int(max(0.0, min(1.0, value)) * 255)
    return (level, level, level, 255)


class Camera:
    """Simple camera handling panning and zoom."""

    def __init__(self, width, height):
        self.offset_x = HEX_SIZE * 2
        self.offset_y = HEX_SIZE * 2
        self.zoom = 1.0

    def apply(self, pos):
        x, y = pos
        return (
            x * self.zoom + self.offset_x,
            y * self.zoom + self.offset_y,
        )

    def reverse(self, pos):
        x, y = pos
        return (
            (x - self.offset_x) / self.zoom,
            (y - self.offset_y) / self.zoom,
        )

    def pan(self, dx, dy):
        self.offset_x += dx
        self.offset_y += dy

    def change_zoom(self, delta, pivot):
        old = self.zoom
        self.zoom = max(0.2, min(4.0, self.zoom + delta))
        scale = self.zoom / old
        px, py = pivot
        self.offset_x = px - scale * (px - self.offset_x)
        self.offset_y = py - scale * (py - self.offset_y)


class MapView:
    """
    Preview window for a generated WorldMap.

    Left click selects a tile; with path mode on (P) the next click plans a
    land route to it and draws the result. Tab/F1–F3 switch between the
    terrain, elevation and moisture layers.
    """

    def __init__(self, world_map: WorldMap, size=(1000, 700)):
        self.world_map = world_map
        self.size = size
        self.camera = Camera(*size)
        self.path_mode = False
        self.selected: Optional[HexCoordinate] = None
        self.path: Optional[PathResult] = None
        self.layers = ["terrain", "elevation", "moisture"]
        self.layer_index = 0

        dpg.create_context()
        dpg.create_viewport(title=f"World seed {world_map.seed}", width=size[0], height=size[1])
        with dpg.window(tag="_map_window", width=size[0], height=size[1], no_move=True, no_resize=True, no_title_bar=True):
            self.canvas = dpg.add_drawlist(width=size[0], height=size[1], tag="_canvas")
        with dpg.window(tag="_layer_window", pos=(10, 10), width=150, height=150, no_resize=True, no_move=True, no_title_bar=True):
            dpg.add_text("Layers")
            dpg.add_button(label="Terrain (F1)", callback=self._select_layer, user_data=0)
            dpg.add_button(label="Elevation (F2)", callback=self._select_layer, user_data=1)
            dpg.add_button(label="Moisture (F3)", callback=self._select_layer, user_data=2)
            dpg.add_text("", tag="_status")
        dpg.set_primary_window("_map_window", True)
        with dpg.handler_registry():
            dpg.add_mouse_click_handler(callback=self._on_click)
            dpg.add_mouse_drag_handler(button=dpg.mvMouseButton_Middle, callback=self._on_drag)
            dpg.add_mouse_wheel_handler(callback=self._on_scroll)
            dpg.add_key_press_handler(callback=self._on_key)
        dpg.setup_dearpygui()
        dpg.show_viewport()

    # event callbacks
    def _on_click(self, sender, app_data):
        if app_data != dpg.mvMouseButton_Left:
            return
        tile = self.tile_at_pos(dpg.get_mouse_pos())
        if tile is None:
            return
        if self.path_mode and self.selected is not None:
            result = find_path(self.world_map, self.selected, tile.coord, MoverCapability.LAND)
            self.path = result if isinstance(result, PathResult) else None
            logger.info("Path %s -> %s: %s", self.selected, tile.coord, result)
        self.selected = tile.coord
        dpg.set_value("_status", repr(tile))

    def _on_drag(self, sender, app_data):
        dx, dy = app_data[1], app_data[2]
        self.camera.pan(dx, dy)

    def _on_scroll(self, sender, app_data):
        pos = dpg.get_mouse_pos()
        self.camera.change_zoom(app_data * 0.1, pos)

    def _on_key(self, sender, app_data):
        if app_data == dpg.mvKey_P:
            self.path_mode = not self.path_mode
            self.path = None
        elif app_data == dpg.mvKey_Tab:
            self.layer_index = (self.layer_index + 1) % len(self.layers)
        elif app_data == dpg.mvKey_F1:
            self.layer_index = 0
        elif app_data == dpg.mvKey_F2:
            self.layer_index = 1
        elif app_data == dpg.mvKey_F3:
            self.layer_index = 2

    def _select_layer(self, sender, app_data, user_data):
        """Callback from layer buttons to change the active layer."""
        self.layer_index = int(user_data)

    def _screen_centre(self, coord: HexCoordinate):
        return self.camera.apply(coord.to_pixel(HEX_SIZE))

    def draw_hex(self, coord: HexCoordinate, color, width=0):
        x, y = self._screen_centre(coord)
        corners = hex_corners(x, y, HEX_SIZE * self.camera.zoom)
        dpg.draw_polygon(corners + corners[:1], color=(0, 0, 0, 255), fill=color, thickness=width or 1, parent=self.canvas)

    def draw_tile(self, coord: HexCoordinate, tile: Tile):
        layer = self.layers[self.layer_index]
        if layer == "elevation":
            color = grayscale_color(tile.elevation)
        elif layer == "moisture":
            color = grayscale_color(tile.moisture)
        else:
            color = terrain_color(tile)
        self.draw_hex(coord, color)
        x, y = self._screen_centre(coord)
        size = HEX_SIZE * self.camera.zoom
        marker = feature_marker_color(tile)
        if marker is not None and layer == "terrain":
            dpg.draw_circle((x, y), size * 0.35, color=marker, fill=marker, parent=self.canvas)
        for direction in tile.river_directions:
            start, end = river_edge_segment(x, y, direction, size)
            dpg.draw_line(start, end, color=RIVER_COLOR, thickness=3, parent=self.canvas)

    def draw_path(self):
        if not self.path:
            return
        points = [self._screen_centre(c) for c in self.path.path]
        dpg.draw_polyline(points, color=PATH_COLOR, thickness=3, parent=self.canvas)

    def visible_coords(self) -> List[HexCoordinate]:
        tl = HexCoordinate.from_pixel(*self.camera.reverse((0, 0)), size=HEX_SIZE)
        br = HexCoordinate.from_pixel(*self.camera.reverse(self.size), size=HEX_SIZE)
        col_min, row_min = tl.to_offset()
        col_max, row_max = br.to_offset()
        coords = []
        for row in range(max(0, row_min - 1), min(self.world_map.height, row_max + 2)):
            for col in range(col_min - 1, col_max + 2):
                coords.append(HexCoordinate.from_offset(col, row))
        return coords

    def draw_map(self):
        dpg.delete_item(self.canvas, children_only=True)
        for coord in self.visible_coords():
            # Wrapped maps repeat across the seam.
            if coord in self.world_map:
                self.draw_tile(coord, self.world_map.get(coord))
        self.draw_path()
        if self.selected is not None:
            self.draw_hex(self.selected, (255, 255, 0, 120), 3)

    def tile_at_pos(self, pos) -> Optional[Tile]:
        x, y = self.camera.reverse(pos)
        coord = HexCoordinate.from_pixel(x, y, size=HEX_SIZE)
        if coord not in self.world_map:
            return None
        return self.world_map.get(coord)

    def run(self):
        while dpg.is_dearpygui_running():
            self.draw_map()
            dpg.render_dearpygui_frame()
        dpg.destroy_context()
        return self.selected


__all__ = [
    "Camera",
    "FEATURE_COLORS",
    "MapView",
    "TERRAIN_COLORS",
    "feature_marker_color",
    "grayscale_color",
    "hex_corners",
    "river_edge_segment",
    "terrain_color",
]
