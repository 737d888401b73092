from __future__ import annotations

"""A* search over a HexGraph."""

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from hexworld.coords import HexCoordinate
from hexworld.errors import InternalLimitExceededError, OutOfBoundsError
from hexworld.world import WorldMap

from .costs import CostModel, MoverCapability
from .graph import HexGraph

logger = logging.getLogger("hexciv.pathing")
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class PathQuery:
    start: HexCoordinate
    goal: HexCoordinate
    capability: MoverCapability = MoverCapability.LAND


@dataclass(frozen=True)
class PathResult:
    """Coordinates from start to goal inclusive, and the summed step cost."""

    path: Tuple[HexCoordinate, ...]
    cost: float

    @property
    def start(self) -> HexCoordinate:
        return self.path[0]

    @property
    def goal(self) -> HexCoordinate:
        return self.path[-1]

    @property
    def steps(self) -> int:
        return len(self.path) - 1

    def __len__(self) -> int:
        return len(self.path)

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class NoPathFound:
    """The goal cannot be reached from the start by this mover."""

    start: HexCoordinate
    goal: HexCoordinate
    expanded: int = 0

    def __bool__(self) -> bool:
        return False


SearchOutcome = Union[PathResult, NoPathFound]


def _reconstruct(came_from: Dict[HexCoordinate, HexCoordinate], current: HexCoordinate) -> Tuple[HexCoordinate, ...]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    return tuple(reversed(path))


def astar(
    graph: HexGraph,
    start: HexCoordinate,
    goal: HexCoordinate,
    max_expansions: Optional[int] = None,
) -> SearchOutcome:
    """
    Find a cheapest path from ``start`` to ``goal`` on ``graph``.

    Entries with equal priority pop in insertion order, so repeated searches
    return identical paths. ``start`` and ``goal`` must already be normalized
    in-bounds coordinates.

    Raises:
        InternalLimitExceededError: If more than ``max_expansions`` nodes are
            expanded (default: the number of tiles, which a correct search
            never exceeds).
    """
    if max_expansions is None:
        max_expansions = len(graph)
    if start == goal:
        return PathResult((start,), 0.0)

    counter = itertools.count()
    open_heap: List[Tuple[float, int, HexCoordinate]] = [(graph.heuristic(start, goal), next(counter), start)]
    g_score: Dict[HexCoordinate, float] = {start: 0.0}
    came_from: Dict[HexCoordinate, HexCoordinate] = {}
    closed = set()
    expanded = 0

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        if current == goal:
            path = _reconstruct(came_from, current)
            logger.debug("Path %s -> %s: cost %.1f, %d expanded", start, goal, g_score[current], expanded)
            return PathResult(path, g_score[current])
        closed.add(current)
        expanded += 1
        if expanded > max_expansions:
            raise InternalLimitExceededError(
                f"search from {start} to {goal} expanded more than {max_expansions} nodes"
            )

        for neighbor, cost in graph.neighbors(current):
            if neighbor in closed:
                continue
            tentative_g = g_score[current] + cost
            if tentative_g < g_score.get(neighbor, float("inf")):
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g
                f_score = tentative_g + graph.heuristic(neighbor, goal)
                heapq.heappush(open_heap, (f_score, next(counter), neighbor))

    logger.debug("No path %s -> %s after %d expansions", start, goal, expanded)
    return NoPathFound(start, goal, expanded)


def find_path(
    world_map: WorldMap,
    start: HexCoordinate,
    goal: HexCoordinate,
    capability: MoverCapability = MoverCapability.LAND,
    cost_model: Optional[CostModel] = None,
) -> SearchOutcome:
    """
    Cheapest route for a mover from ``start`` to ``goal``.

    Returns a PathResult, or NoPathFound when the goal is unreachable.

    Raises:
        OutOfBoundsError: If either endpoint lies outside the map.
    """
    grid = world_map.grid
    for label, coord in (("start", start), ("goal", goal)):
        if coord not in grid:
            raise OutOfBoundsError(f"{label} {coord} lies outside the {world_map.width}x{world_map.height} map")
    start = grid.normalize(start)
    goal = grid.normalize(goal)
    return astar(HexGraph(world_map, capability, cost_model), start, goal)


def find_path_for(world_map: WorldMap, query: PathQuery, cost_model: Optional[CostModel] = None) -> SearchOutcome:
    return find_path(world_map, query.start, query.goal, query.capability, cost_model)


__all__ = [
    "NoPathFound",
    "PathQuery",
    "PathResult",
    "SearchOutcome",
    "astar",
    "find_path",
    "find_path_for",
]
