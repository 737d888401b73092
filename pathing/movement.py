from __future__ import annotations

"""How far along a planned path a unit gets in the current turn."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from hexworld.coords import HexCoordinate
from hexworld.errors import InvalidArgumentError
from hexworld.world import WorldMap

from .costs import DEFAULT_COST_MODEL, CostModel, MoverCapability
from .search import PathResult


@dataclass(frozen=True)
class TurnMovement:
    """
    Outcome of spending one turn's movement points along a path.

      visited: Coordinates occupied this turn, starting with the unit's position.
      spent: Cost of the steps taken.
      remaining_points: Movement points left afterwards.
    """

    visited: Tuple[HexCoordinate, ...]
    spent: float
    remaining_points: float
    reached_goal: bool

    @property
    def position(self) -> HexCoordinate:
        return self.visited[-1]

    @property
    def steps(self) -> int:
        return len(self.visited) - 1


def steps_this_turn(
    world_map: WorldMap,
    path: Union[PathResult, Sequence[HexCoordinate]],
    movement_points: float,
    full_movement_points: float,
    capability: MoverCapability = MoverCapability.LAND,
    cost_model: Optional[CostModel] = None,
) -> TurnMovement:
    """
    Walk ``path`` until the movement points run out.

    A step costing more than the points left is still taken when the unit has
    not moved yet this turn (its points equal ``full_movement_points``); that
    step uses up every point. Otherwise the unit stops in front of it.

    Raises:
        InvalidArgumentError: On an empty path, inconsistent movement points,
            or a path with non-adjacent or impassable steps.
    """
    coords = tuple(path.path if isinstance(path, PathResult) else path)
    if not coords:
        raise InvalidArgumentError("path must contain at least the starting coordinate")
    if full_movement_points <= 0:
        raise InvalidArgumentError(f"full movement points must be positive, got {full_movement_points}")
    if not 0 <= movement_points <= full_movement_points:
        raise InvalidArgumentError(
            f"movement points {movement_points} outside [0, {full_movement_points}]"
        )
    cost_model = cost_model if cost_model is not None else DEFAULT_COST_MODEL
    grid = world_map.grid

    visited = [grid.normalize(coords[0])]
    points = movement_points
    spent = 0.0
    for nxt in coords[1:]:
        current = visited[-1]
        direction = grid.direction_between(current, nxt)
        if direction is None:
            raise InvalidArgumentError(f"path steps {current} -> {nxt} are not adjacent")
        cost = cost_model.step_cost(world_map.get(current), direction, world_map.get(nxt), capability)
        if cost is None:
            raise InvalidArgumentError(f"{capability.value} movers cannot enter {nxt}")
        if cost <= points:
            points -= cost
        elif points == full_movement_points:
            points = 0.0
        else:
            break
        spent += cost
        visited.append(grid.normalize(nxt))

    return TurnMovement(
        visited=tuple(visited),
        spent=spent,
        remaining_points=points,
        reached_goal=len(visited) == len(coords),
    )


__all__ = ["TurnMovement", "steps_this_turn"]
