from __future__ import annotations

from .coords import DIRECTION_NAMES, HEX_DIRECTIONS, HexCoordinate, HexGrid, opposite
from .errors import (
    ConfigurationError,
    InternalLimitExceededError,
    InvalidArgumentError,
    OutOfBoundsError,
    WorldError,
)
from .generation import MapRng, perlin_noise
from .hex import Feature, RiverFlow, TerrainType, Tile
from .settings import WorldSettings
from .terrain import ClimateBand
from .world import WorldMap, WorldMapBuilder, generate_world

__all__ = [
    "ClimateBand",
    "ConfigurationError",
    "DIRECTION_NAMES",
    "Feature",
    "HEX_DIRECTIONS",
    "HexCoordinate",
    "HexGrid",
    "InternalLimitExceededError",
    "InvalidArgumentError",
    "MapRng",
    "OutOfBoundsError",
    "RiverFlow",
    "TerrainType",
    "Tile",
    "WorldError",
    "WorldMap",
    "WorldMapBuilder",
    "WorldSettings",
    "generate_world",
    "opposite",
    "perlin_noise",
]
