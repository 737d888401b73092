from __future__ import annotations

"""Movement cost tables per mover capability."""

import math
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional

from hexworld.errors import ConfigurationError
from hexworld.hex import Feature, TerrainType, Tile


class MoverCapability(Enum):
    LAND = "land"
    NAVAL = "naval"


# Terrain missing from a capability's table cannot be entered.
DEFAULT_TERRAIN_COSTS: Dict[MoverCapability, Dict[TerrainType, float]] = {
    MoverCapability.LAND: {
        TerrainType.DESERT: 1.0,
        TerrainType.PLAINS: 1.0,
        TerrainType.GRASSLAND: 1.0,
        TerrainType.TUNDRA: 1.0,
        TerrainType.SNOW: 1.0,
        TerrainType.HILLS: 2.0,
    },
    MoverCapability.NAVAL: {
        TerrainType.COAST: 1.0,
        TerrainType.OCEAN: 1.0,
    },
}

# Surcharges added on top of the terrain cost.
DEFAULT_FEATURE_COSTS: Dict[MoverCapability, Dict[Feature, float]] = {
    MoverCapability.LAND: {Feature.WOODS: 1.0, Feature.RAINFOREST: 1.0},
    MoverCapability.NAVAL: {},
}

DEFAULT_BLOCKING_FEATURES: Dict[MoverCapability, FrozenSet[Feature]] = {
    MoverCapability.LAND: frozenset(),
    MoverCapability.NAVAL: frozenset({Feature.ICE}),
}

DEFAULT_RIVER_CROSSING: Dict[MoverCapability, float] = {
    MoverCapability.LAND: 3.0,
    MoverCapability.NAVAL: 0.0,
}


def _check_cost(what: str, value: float, *, allow_zero: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ConfigurationError(f"{what} must be a finite number, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigurationError(f"{what} must be {'non-negative' if allow_zero else 'positive'}, got {value}")
    return float(value)


class CostModel:
    """
    Capability-indexed movement costs.

    Entering a tile costs its terrain cost plus any feature surcharges, plus
    the river-crossing surcharge when the edge crossed carries a river.
    Terrain costs must be strictly positive so every step costs something.

    Raises:
        ConfigurationError: On a non-positive terrain cost, a negative
            surcharge or a capability with no enterable terrain.
    """

    def __init__(
        self,
        terrain_costs: Optional[Mapping[MoverCapability, Mapping[TerrainType, float]]] = None,
        feature_costs: Optional[Mapping[MoverCapability, Mapping[Feature, float]]] = None,
        blocking_features: Optional[Mapping[MoverCapability, FrozenSet[Feature]]] = None,
        river_crossing: Optional[Mapping[MoverCapability, float]] = None,
    ) -> None:
        # Capabilities left out of an override keep their default table.
        terrain_costs = {**DEFAULT_TERRAIN_COSTS, **(terrain_costs or {})}
        feature_costs = {**DEFAULT_FEATURE_COSTS, **(feature_costs or {})}
        blocking_features = {**DEFAULT_BLOCKING_FEATURES, **(blocking_features or {})}
        river_crossing = {**DEFAULT_RIVER_CROSSING, **(river_crossing or {})}

        self.terrain_costs: Dict[MoverCapability, Dict[TerrainType, float]] = {}
        self.feature_costs: Dict[MoverCapability, Dict[Feature, float]] = {}
        self.blocking_features: Dict[MoverCapability, FrozenSet[Feature]] = {}
        self.river_crossing: Dict[MoverCapability, float] = {}
        for capability in MoverCapability:
            table = terrain_costs[capability]
            if not table:
                raise ConfigurationError(f"{capability.value} movers have no enterable terrain")
            self.terrain_costs[capability] = {
                terrain: _check_cost(f"{capability.value} cost of {terrain.value}", cost, allow_zero=False)
                for terrain, cost in table.items()
            }
            self.feature_costs[capability] = {
                feature: _check_cost(f"{capability.value} surcharge for {feature.value}", cost, allow_zero=True)
                for feature, cost in feature_costs[capability].items()
            }
            self.blocking_features[capability] = frozenset(blocking_features[capability])
            self.river_crossing[capability] = _check_cost(
                f"{capability.value} river crossing", river_crossing[capability], allow_zero=True
            )

    def __repr__(self) -> str:
        return f"CostModel(capabilities={[c.value for c in self.terrain_costs]})"

    def enter_cost(self, tile: Tile, capability: MoverCapability) -> Optional[float]:
        """Cost of entering ``tile``, or None if the mover cannot enter it."""
        base = self.terrain_costs[capability].get(tile.terrain)
        if base is None or tile.features & self.blocking_features[capability]:
            return None
        surcharges = self.feature_costs[capability]
        return base + sum(surcharges.get(f, 0.0) for f in tile.features)

    def step_cost(self, origin: Tile, direction: int, target: Tile, capability: MoverCapability) -> Optional[float]:
        """Cost of moving from ``origin`` across its edge ``direction`` into ``target``."""
        cost = self.enter_cost(target, capability)
        if cost is None:
            return None
        if origin.has_river(direction):
            cost += self.river_crossing[capability]
        return cost

    def min_step_cost(self, capability: MoverCapability) -> float:
        """Lower bound on any single step, used to scale the search heuristic."""
        return min(self.terrain_costs[capability].values())


DEFAULT_COST_MODEL = CostModel()


__all__ = [
    "CostModel",
    "DEFAULT_BLOCKING_FEATURES",
    "DEFAULT_COST_MODEL",
    "DEFAULT_FEATURE_COSTS",
    "DEFAULT_RIVER_CROSSING",
    "DEFAULT_TERRAIN_COSTS",
    "MoverCapability",
]
