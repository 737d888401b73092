from __future__ import annotations

"""
River tracing along hex edges.

Rivers run on the lattice of tile corners. A corner ("vertex") is shared by
three tiles and identified by that set of tiles, so the same corner reached
from any of its tiles compares equal. Each step of a river follows one tile
edge downhill and is recorded on both tiles bordering that edge.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Set, Tuple

from .coords import HexCoordinate, HexGrid, opposite
from .generation import MapRng
from .hex import NO_RIVER_FLOW, RiverFlow, TerrainType
from .settings import WorldSettings

logger = logging.getLogger("hexciv.rivers")
logger.addHandler(logging.NullHandler())

Vertex = FrozenSet[HexCoordinate]
RiverData = Tuple[int, Tuple[Optional[RiverFlow], ...]]

SOURCE_TERRAIN = frozenset({TerrainType.HILLS, TerrainType.MOUNTAINS})


@dataclass(frozen=True)
class RiverStep:
    """One edge of a river: the edge ``direction`` of ``tile``, flowing ``start`` → ``end``."""

    tile: HexCoordinate
    direction: int
    start: Vertex
    end: Vertex


class RiverNetwork:
    """
    Traces and accumulates rivers over a classified map.

    ``terrain`` and ``elevations`` must hold every in-bounds coordinate of
    ``grid``. Committed edges are kept as per-tile bitmasks plus flow
    directions, always written to both tiles sharing the edge.
    """

    def __init__(
        self,
        grid: HexGrid,
        terrain: Mapping[HexCoordinate, TerrainType],
        elevations: Mapping[HexCoordinate, float],
    ) -> None:
        self.grid = grid
        self.terrain = terrain
        self.elevations = elevations
        self.river_vertices: Set[Vertex] = set()
        self._edges: Dict[HexCoordinate, int] = {}
        self._flows: Dict[HexCoordinate, List[Optional[RiverFlow]]] = {}
        self._vertex_elevation: Dict[Vertex, float] = {}

    # ── vertex geometry ────────────────────────────────────────────────────

    def corner(self, coord: HexCoordinate, index: int) -> Vertex:
        """Corner ``index`` of ``coord``, between its edges ``index`` and ``index + 1``."""
        norm = self.grid.normalize
        return frozenset(
            (norm(coord), norm(coord.neighbor(index % 6)), norm(coord.neighbor((index + 1) % 6)))
        )

    def corners(self, coord: HexCoordinate) -> List[Vertex]:
        return [self.corner(coord, i) for i in range(6)]

    def vertex_elevation(self, vertex: Vertex) -> float:
        """Mean elevation of the in-bounds tiles meeting at ``vertex``."""
        cached = self._vertex_elevation.get(vertex)
        if cached is None:
            values = [self.elevations[c] for c in vertex if c in self.grid]
            cached = math.fsum(values) / len(values) if values else 0.0
            self._vertex_elevation[vertex] = cached
        return cached

    def touches_water(self, vertex: Vertex) -> bool:
        return any(self.terrain[c].is_water for c in vertex if c in self.grid)

    def _is_dry_land(self, coord: HexCoordinate) -> bool:
        return coord in self.grid and self.terrain[coord].is_land

    def steps_from(self, vertex: Vertex) -> Iterator[RiverStep]:
        """
        Edges leaving ``vertex`` that a river may follow.

        An edge qualifies only when both tiles bordering it are in-bounds land,
        which keeps rivers off the shoreline and the map border.
        """
        tiles = sorted(vertex)
        for i, tile in enumerate(tiles):
            if not self._is_dry_land(tile):
                continue
            for other in tiles[i + 1:]:
                if not self._is_dry_land(other):
                    continue
                d = self.grid.direction_between(tile, other)
                if d is None:
                    continue
                before = self.corner(tile, d - 1)
                after = self.corner(tile, d)
                if before == vertex:
                    yield RiverStep(tile, d, vertex, after)
                elif after == vertex:
                    yield RiverStep(tile, d, vertex, before)

    # ── tracing ────────────────────────────────────────────────────────────

    def lowest_corner(self, coord: HexCoordinate) -> Vertex:
        return min(self.corners(coord), key=lambda v: (self.vertex_elevation(v), sorted(v)))

    def trace(self, source: HexCoordinate, max_length: int) -> List[RiverStep]:
        """
        Follow the steepest strictly descending edges from the source's lowest corner.

        The walk ends at a corner touching water, on meeting an earlier river,
        at a local minimum or after ``max_length`` edges. Edges are committed as
        they are walked, so a river that ends in a local minimum is kept.
        """
        current = self.lowest_corner(source)
        if self.touches_water(current) or current in self.river_vertices:
            return []

        path: List[RiverStep] = []
        visited = {current}
        while len(path) < max_length:
            height = self.vertex_elevation(current)
            candidates = [
                step
                for step in self.steps_from(current)
                if self.vertex_elevation(step.end) < height
            ]
            if not candidates:
                break
            step = min(candidates, key=lambda s: (self.vertex_elevation(s.end), sorted(s.end)))
            self._commit(step)
            path.append(step)
            current = step.end
            if self.touches_water(current) or current in self.river_vertices:
                break
            visited.add(current)
        if path:
            self.river_vertices.update(visited)
        return path

    def _commit(self, step: RiverStep) -> None:
        tile = step.tile
        other = self.grid.normalize(tile.neighbor(step.direction))
        # Corner d - 1 to corner d runs clockwise around ``tile``.
        flow = RiverFlow.CLOCKWISE if step.start == self.corner(tile, step.direction - 1) else RiverFlow.COUNTERCLOCKWISE
        self._set_edge(tile, step.direction, flow)
        self._set_edge(other, opposite(step.direction), flow.mirrored())

    def _set_edge(self, coord: HexCoordinate, direction: int, flow: RiverFlow) -> None:
        self._edges[coord] = self._edges.get(coord, 0) | (1 << direction)
        self._flows.setdefault(coord, list(NO_RIVER_FLOW))[direction] = flow

    # ── results ────────────────────────────────────────────────────────────

    def river_data(self, coord: HexCoordinate) -> RiverData:
        flows = self._flows.get(coord)
        return self._edges.get(coord, 0), tuple(flows) if flows else NO_RIVER_FLOW

    def edge_count(self) -> int:
        """Number of distinct river edges (each edge is stored on two tiles)."""
        return sum(bin(mask).count("1") for mask in self._edges.values()) // 2


def pick_sources(
    grid: HexGrid,
    terrain: Mapping[HexCoordinate, TerrainType],
    land_base: Mapping[HexCoordinate, Optional[TerrainType]],
    elevations: Mapping[HexCoordinate, float],
    settings: WorldSettings,
    rng: MapRng,
) -> List[HexCoordinate]:
    """Hill and mountain tiles off desert ground, each chosen by its own roll, highest first."""
    sources = [
        coord
        for coord in grid.coords()
        if terrain[coord] in SOURCE_TERRAIN
        and land_base[coord] is not TerrainType.DESERT
        and rng.tile(coord, "rivers.source").random() < settings.river_source_chance
    ]
    sources.sort(key=lambda c: (-elevations[c], c))
    return sources


def generate_rivers(
    grid: HexGrid,
    terrain: Mapping[HexCoordinate, TerrainType],
    land_base: Mapping[HexCoordinate, Optional[TerrainType]],
    elevations: Mapping[HexCoordinate, float],
    settings: WorldSettings,
    rng: MapRng,
) -> RiverNetwork:
    network = RiverNetwork(grid, terrain, elevations)
    sources = pick_sources(grid, terrain, land_base, elevations, settings, rng)
    rivers = 0
    for source in sources:
        if network.trace(source, settings.max_river_length):
            rivers += 1
    logger.info("Rivers: %d traced from %d sources, %d edges", rivers, len(sources), network.edge_count())
    return network


__all__ = [
    "RiverData",
    "RiverNetwork",
    "RiverStep",
    "SOURCE_TERRAIN",
    "Vertex",
    "generate_rivers",
    "pick_sources",
]
