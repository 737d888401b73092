from __future__ import annotations

"""
world.py – assembled hex world maps and the pipeline that builds them.

Features:
- WorldMap: immutable HexCoordinate → Tile mapping over a rectangular,
  optionally east–west wrapping, odd-row offset grid.
- WorldMapBuilder: runs elevation → terrain → features → rivers → assembly,
  logging each stage. Only the settings (seed included) decide the result.
- generate_world(): the one-call entry point used by hosts and peers.
"""

import logging
import time
from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional

from .coords import HexCoordinate, HexGrid
from .elevation import generate_elevation
from .errors import ConfigurationError, OutOfBoundsError
from .features import generate_features
from .generation import MapRng
from .hex import TerrainType, Tile
from .rivers import generate_rivers
from .settings import WorldSettings
from .terrain import generate_terrain

logger = logging.getLogger("hexciv.world")
logger.addHandler(logging.NullHandler())


# ─────────────────────────────────────────────────────────────────────────────
# == WORLD MAP ==

class WorldMap:
    """
    Read-only map holding exactly one Tile per in-bounds coordinate.

    Lookups normalize the coordinate across the wrap seam first, so on a
    wrapping map ``get(q, r)`` and ``get(q + width, r)`` return the same tile.
    """

    __slots__ = ("settings", "grid", "_tiles", "_order")

    def __init__(self, settings: WorldSettings, tiles: Dict[HexCoordinate, Tile]) -> None:
        self.settings = settings
        self.grid = HexGrid(settings.width, settings.height, settings.wrap)
        self._order: List[HexCoordinate] = list(self.grid.coords())
        if len(tiles) != len(self._order) or any(c not in tiles for c in self._order):
            raise ValueError("tiles must cover exactly the in-bounds coordinates")
        for coord in self._order:
            if tiles[coord].coord != coord:
                raise ValueError(f"tile stored at {coord} reports coordinate {tiles[coord].coord}")
        self._tiles = dict(tiles)

    @classmethod
    def from_tiles(cls, settings: WorldSettings, tiles: Iterable[Tile]) -> "WorldMap":
        """
        Assemble a map from explicit tiles.

        Raises:
            ConfigurationError: If the settings are invalid.
            ValueError: If a coordinate is missing, duplicated or out of bounds.
        """
        settings.validate()
        grid = HexGrid(settings.width, settings.height, settings.wrap)
        by_coord: Dict[HexCoordinate, Tile] = {}
        for tile in tiles:
            if tile.coord not in grid or grid.normalize(tile.coord) != tile.coord:
                raise ValueError(f"tile {tile.coord} lies outside the {settings.width}x{settings.height} map")
            if tile.coord in by_coord:
                raise ValueError(f"duplicate tile at {tile.coord}")
            by_coord[tile.coord] = tile
        return cls(settings, by_coord)

    def __repr__(self) -> str:
        return (
            f"WorldMap(seed={self.settings.seed}, width={self.width}, "
            f"height={self.height}, wrap={self.wrap})"
        )

    @property
    def seed(self) -> int:
        return self.settings.seed

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    @property
    def wrap(self) -> bool:
        return self.settings.wrap

    # ── lookups ────────────────────────────────────────────────────────────

    def get(self, coord: HexCoordinate) -> Tile:
        """
        Return the tile at ``coord`` after wrap normalization.

        Raises:
            OutOfBoundsError: If the coordinate lies outside the map.
        """
        tile = self._tiles.get(self.grid.normalize(coord))
        if tile is None:
            raise OutOfBoundsError(f"{coord} lies outside the {self.width}x{self.height} map")
        return tile

    def __getitem__(self, coord: HexCoordinate) -> Tile:
        return self.get(coord)

    def __contains__(self, coord: object) -> bool:
        return isinstance(coord, HexCoordinate) and self.grid.normalize(coord) in self._tiles

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Tile]:
        return self.tiles()

    def tiles(self) -> Iterator[Tile]:
        """Every tile, row by row."""
        return (self._tiles[c] for c in self._order)

    def coords(self) -> Iterator[HexCoordinate]:
        return iter(self._order)

    def neighbors(self, coord: HexCoordinate) -> List[Tile]:
        """In-bounds neighbouring tiles of ``coord``, clockwise from East."""
        self.get(coord)
        return [self._tiles[n] for n in self.grid.neighbors(coord)]

    def distance(self, a: HexCoordinate, b: HexCoordinate) -> int:
        return self.grid.distance(a, b)

    # ── summaries ──────────────────────────────────────────────────────────

    def starting_positions(self) -> List[HexCoordinate]:
        """Land tiles a unit may be spawned on: neither water nor mountains."""
        return [
            t.coord
            for t in self.tiles()
            if t.terrain.is_land and t.terrain is not TerrainType.MOUNTAINS
        ]

    def river_edge_count(self) -> int:
        """Distinct river edges; every edge is recorded on both of its tiles."""
        return sum(bin(t.river_edges).count("1") for t in self.tiles()) // 2

    def terrain_counts(self) -> Dict[TerrainType, int]:
        counts = Counter(t.terrain for t in self.tiles())
        return {terrain: counts.get(terrain, 0) for terrain in TerrainType}

    def to_json(self) -> Dict[str, object]:
        return {
            "settings": self.settings.to_json(),
            "tiles": [t.to_json() for t in self.tiles()],
        }


# ─────────────────────────────────────────────────────────────────────────────
# == PIPELINE ==

class WorldMapBuilder:
    """Runs the generation stages in order for one set of settings."""

    def __init__(self, settings: WorldSettings) -> None:
        self.settings = settings

    def build(self) -> WorldMap:
        """
        Generate the map.

        Raises:
            ConfigurationError: If the settings are rejected; no stage runs.
        """
        settings = self.settings
        settings.validate()
        grid = HexGrid(settings.width, settings.height, settings.wrap)
        rng = MapRng(settings.seed)
        logger.info(
            "Generating %dx%d world (seed=%d, wrap=%s)",
            settings.width,
            settings.height,
            settings.seed,
            settings.wrap,
        )
        started = time.perf_counter()

        elevations = generate_elevation(grid, settings, rng)
        logger.debug("Stage elevation done (%.2fs)", time.perf_counter() - started)

        cells = generate_terrain(grid, elevations, settings, rng)
        logger.debug("Stage terrain done (%.2fs)", time.perf_counter() - started)

        features = generate_features(grid, cells, settings, rng)
        terrain = {c: cell.terrain for c, cell in cells.items()}
        land_base = {c: cell.land_base for c, cell in cells.items()}
        rivers = generate_rivers(grid, terrain, land_base, elevations, settings, rng)
        logger.debug("Stage features done (%.2fs)", time.perf_counter() - started)

        tiles: Dict[HexCoordinate, Tile] = {}
        for coord in grid.coords():
            cell = cells[coord]
            river_edges, river_flow = rivers.river_data(coord)
            tiles[coord] = Tile(
                coord=coord,
                terrain=cell.terrain,
                elevation=elevations[coord],
                features=features[coord],
                river_edges=river_edges,
                river_flow=river_flow,
                land_base=cell.land_base if cell.terrain.is_land else None,
                moisture=cell.moisture,
            )
        world_map = WorldMap(settings, tiles)
        logger.info(
            "World ready in %.2fs: %d land tiles, %d river edges",
            time.perf_counter() - started,
            sum(1 for t in world_map.tiles() if t.terrain.is_land),
            world_map.river_edge_count(),
        )
        return world_map


def generate_world(
    seed: int,
    width: int,
    height: int,
    wrap: bool = False,
    settings: Optional[WorldSettings] = None,
) -> WorldMap:
    """
    Generate a world map from a seed and dimensions.

    ``settings`` supplies the remaining knobs; its seed and size are replaced
    by the explicit arguments.

    Raises:
        ConfigurationError: If the resulting settings are invalid.
    """
    if settings is None:
        settings = WorldSettings()
    if not isinstance(settings, WorldSettings):
        raise ConfigurationError(f"settings must be WorldSettings, not {type(settings).__name__}")
    merged = WorldSettings(**{**settings.to_json(), "seed": seed, "width": width, "height": height, "wrap": wrap})
    return WorldMapBuilder(merged).build()


__all__ = ["WorldMap", "WorldMapBuilder", "generate_world"]
