from __future__ import annotations

"""Lazy weighted-graph view of a WorldMap for one mover capability."""

from typing import Iterator, Optional, Tuple

from hexworld.coords import HexCoordinate
from hexworld.world import WorldMap

from .costs import DEFAULT_COST_MODEL, CostModel, MoverCapability


class HexGraph:
    """
    Edges are derived from coordinate math on demand; nothing is materialized.

    ``neighbors(coord)`` yields ``(neighbour, step cost)`` for each adjacent
    tile the mover can enter, in clockwise order from East.
    """

    __slots__ = ("world_map", "capability", "cost_model", "_min_step")

    def __init__(
        self,
        world_map: WorldMap,
        capability: MoverCapability = MoverCapability.LAND,
        cost_model: Optional[CostModel] = None,
    ) -> None:
        self.world_map = world_map
        self.capability = capability
        self.cost_model = cost_model if cost_model is not None else DEFAULT_COST_MODEL
        self._min_step = self.cost_model.min_step_cost(capability)

    def __len__(self) -> int:
        return len(self.world_map)

    def __repr__(self) -> str:
        return f"HexGraph({self.world_map!r}, capability={self.capability.value})"

    def neighbors(self, coord: HexCoordinate) -> Iterator[Tuple[HexCoordinate, float]]:
        origin = self.world_map.get(coord)
        for direction, n in self.world_map.grid.neighbors_with_direction(origin.coord):
            cost = self.cost_model.step_cost(origin, direction, self.world_map.get(n), self.capability)
            if cost is not None:
                yield n, cost

    def passable(self, coord: HexCoordinate) -> bool:
        return self.cost_model.enter_cost(self.world_map.get(coord), self.capability) is not None

    def heuristic(self, a: HexCoordinate, b: HexCoordinate) -> float:
        """Lattice distance scaled by the cheapest possible step; never overestimates."""
        return self.world_map.distance(a, b) * self._min_step


__all__ = ["HexGraph"]
