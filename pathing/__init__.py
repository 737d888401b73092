"""Pathfinding over generated hex worlds."""

from .costs import DEFAULT_COST_MODEL, CostModel, MoverCapability
from .graph import HexGraph
from .movement import TurnMovement, steps_this_turn
from .search import NoPathFound, PathQuery, PathResult, astar, find_path, find_path_for

__all__ = [
    "CostModel",
    "DEFAULT_COST_MODEL",
    "HexGraph",
    "MoverCapability",
    "NoPathFound",
    "PathQuery",
    "PathResult",
    "TurnMovement",
    "astar",
    "find_path",
    "find_path_for",
    "steps_this_turn",
]
