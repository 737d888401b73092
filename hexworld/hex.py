from __future__ import annotations

"""
Data model for a single world hex tile: base terrain, overlay features and the
river edges running along its sides.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from .coords import DIRECTION_NAMES, HexCoordinate


class TerrainType(Enum):
    OCEAN = "ocean"
    COAST = "coast"
    DESERT = "desert"
    PLAINS = "plains"
    GRASSLAND = "grassland"
    TUNDRA = "tundra"
    SNOW = "snow"
    HILLS = "hills"
    MOUNTAINS = "mountains"

    @property
    def is_water(self) -> bool:
        return self in (TerrainType.OCEAN, TerrainType.COAST)

    @property
    def is_land(self) -> bool:
        return not self.is_water


# Climate terrain that may sit beneath hills and mountains.
LAND_BASES: FrozenSet[TerrainType] = frozenset(
    {
        TerrainType.DESERT,
        TerrainType.PLAINS,
        TerrainType.GRASSLAND,
        TerrainType.TUNDRA,
        TerrainType.SNOW,
    }
)

# Ground that can carry woods or rainforest.
WOODED_GROUND_EXCLUDED: FrozenSet[TerrainType] = frozenset(
    {
        TerrainType.OCEAN,
        TerrainType.COAST,
        TerrainType.DESERT,
        TerrainType.SNOW,
        TerrainType.MOUNTAINS,
    }
)


class Feature(Enum):
    WOODS = "woods"
    RAINFOREST = "rainforest"
    OASIS = "oasis"
    ICE = "ice"


class RiverFlow(Enum):
    """Direction of flow along a river edge, seen from the tile recording it."""

    CLOCKWISE = "cw"
    COUNTERCLOCKWISE = "ccw"

    def mirrored(self) -> "RiverFlow":
        if self is RiverFlow.CLOCKWISE:
            return RiverFlow.COUNTERCLOCKWISE
        return RiverFlow.CLOCKWISE


NO_RIVER_FLOW: Tuple[Optional[RiverFlow], ...] = (None,) * 6


@dataclass(frozen=True)
class Tile:
    """
    Represents a single hex tile of a generated world.

    Core Attributes:
      coord: Axial coordinate of this tile.
      terrain: One of TerrainType.
      elevation: Normalized elevation in [0.0, 1.0].
      features: Overlay features on top of the base terrain.
      river_edges: Bitmask; bit ``d`` is set when a river runs along edge ``d``.
      river_flow: Flow direction per edge, set exactly where the bit is set.
      land_base: Climate terrain beneath hills/mountains (or the terrain itself
        for flat land). None for water.
      moisture: Per-tile moisture used to pick the climate terrain, 0.0–1.0.
    """

    coord: HexCoordinate
    terrain: TerrainType
    elevation: float = 0.0
    features: FrozenSet[Feature] = field(default_factory=frozenset)
    river_edges: int = 0
    river_flow: Tuple[Optional[RiverFlow], ...] = NO_RIVER_FLOW
    land_base: Optional[TerrainType] = None
    moisture: float = 0.0

    def __post_init__(self):
        if not isinstance(self.terrain, TerrainType):
            raise TypeError(f"terrain must be a TerrainType, not {type(self.terrain)}")
        if not isinstance(self.features, frozenset):
            raise TypeError("`features` must be a frozenset of Feature.")
        if not 0.0 <= self.elevation <= 1.0:
            raise ValueError(f"elevation {self.elevation} outside [0, 1] at {self.coord}")
        if not 0 <= self.river_edges < 64:
            raise ValueError(f"river_edges must be a 6-bit mask, got {self.river_edges}")
        if len(self.river_flow) != 6:
            raise ValueError("river_flow must hold one entry per edge.")
        for d in range(6):
            if self.has_river(d) != (self.river_flow[d] is not None):
                raise ValueError(f"river flow and river edges disagree on edge {d} at {self.coord}")
        self._check_features()

    def _check_features(self) -> None:
        terrain = self.terrain
        ground = self.land_base if terrain in (TerrainType.HILLS, TerrainType.MOUNTAINS) else terrain
        if terrain.is_water and self.land_base is not None:
            raise ValueError(f"water tile {self.coord} cannot have a land base")
        if terrain.is_land and self.land_base not in LAND_BASES:
            raise ValueError(f"land tile {self.coord} needs a climate land base, got {self.land_base}")
        if Feature.ICE in self.features and Feature.OASIS in self.features:
            raise ValueError(f"ice and oasis cannot coexist at {self.coord}")
        if Feature.WOODS in self.features and Feature.RAINFOREST in self.features:
            raise ValueError(f"woods and rainforest cannot coexist at {self.coord}")
        if self.features & {Feature.WOODS, Feature.RAINFOREST}:
            if terrain in WOODED_GROUND_EXCLUDED or ground in WOODED_GROUND_EXCLUDED:
                raise ValueError(f"{terrain.value} tile {self.coord} cannot carry woods or rainforest")
        if Feature.OASIS in self.features and terrain is not TerrainType.DESERT:
            raise ValueError(f"oasis requires desert, got {terrain.value} at {self.coord}")
        if Feature.ICE in self.features and not terrain.is_water:
            raise ValueError(f"ice requires water, got {terrain.value} at {self.coord}")

    def __getitem__(self, key: str):
        """
        Allows attribute access via indexing, e.g., tile['terrain'].

        Raises:
            AttributeError if the key is invalid.
        """
        return getattr(self, key)

    def has_river(self, direction: int) -> bool:
        return bool(self.river_edges & (1 << direction))

    @property
    def has_any_river(self) -> bool:
        return self.river_edges != 0

    def has_feature(self, feature: Feature) -> bool:
        return feature in self.features

    @property
    def river_directions(self) -> List[int]:
        return [d for d in range(6) if self.has_river(d)]

    def __repr__(self) -> str:
        """
        Debug-friendly representation focusing on key attributes.
        Shows coord, terrain, features (if any) and river edges (if any).
        """
        base = f"Tile(coord=({self.coord.q}, {self.coord.r}), terrain={self.terrain.value}"
        if self.terrain in (TerrainType.HILLS, TerrainType.MOUNTAINS) and self.land_base:
            base += f"/{self.land_base.value}"
        if self.features:
            base += ", features=[" + ", ".join(sorted(f.value for f in self.features)) + "]"
        if self.river_edges:
            base += ", rivers=" + "".join(DIRECTION_NAMES[d] + " " for d in self.river_directions).strip()
        base += ")"
        return base

    def to_json(self) -> Dict[str, Union[str, float, int, List[str], Dict[str, int], None]]:
        """
        Serializes the attributes the rendering layer reads to a JSON‐friendly dict.
        """
        return {
            "coord": {"q": self.coord.q, "r": self.coord.r},
            "terrain": self.terrain.value,
            "land_base": self.land_base.value if self.land_base else None,
            "elevation": self.elevation,
            "features": sorted(f.value for f in self.features),
            "river_edges": self.river_edges,
            "river_flow": [flow.value if flow else None for flow in self.river_flow],
        }


__all__ = [
    "Feature",
    "LAND_BASES",
    "NO_RIVER_FLOW",
    "RiverFlow",
    "TerrainType",
    "Tile",
    "WOODED_GROUND_EXCLUDED",
]
