from __future__ import annotations

"""Overlay features placed on classified terrain: woods, rainforest, oasis and ice."""

import logging
from typing import Dict, FrozenSet, Mapping, Set

from .coords import HexCoordinate, HexGrid
from .generation import MapRng
from .hex import Feature, TerrainType
from .settings import WorldSettings
from .terrain import ClimateBand, TerrainCell

logger = logging.getLogger("hexciv.features")
logger.addHandler(logging.NullHandler())

WOODS_GROUND = frozenset({TerrainType.PLAINS, TerrainType.GRASSLAND, TerrainType.TUNDRA})

RAINFOREST_CHANCE: Dict[ClimateBand, float] = {
    ClimateBand.POLAR: 0.0,
    ClimateBand.TEMPERATE: 0.2,
    ClimateBand.SUBTROPICAL: 0.1,
    ClimateBand.TROPICAL: 1.0 / 3.0,
}


def place_features(
    coord: HexCoordinate,
    cell: TerrainCell,
    band: ClimateBand,
    settings: WorldSettings,
    rng: MapRng,
) -> FrozenSet[Feature]:
    """
    Roll the overlay features of one tile.

    Each roll draws from its own per-tile stream, so the outcome depends only
    on the seed, the tile and its terrain.
    """
    features: Set[Feature] = set()
    terrain = cell.terrain
    if terrain.is_water:
        if band is ClimateBand.POLAR:
            features.add(Feature.ICE)
        return frozenset(features)

    if terrain is not TerrainType.MOUNTAINS:
        if cell.land_base in WOODS_GROUND and rng.tile(coord, "features.woods").random() < settings.woods_chance:
            features.add(Feature.WOODS)
        elif (
            cell.land_base is TerrainType.PLAINS
            and rng.tile(coord, "features.rainforest").random() < RAINFOREST_CHANCE[band]
        ):
            features.add(Feature.RAINFOREST)

    if terrain is TerrainType.DESERT and rng.tile(coord, "features.oasis").random() < settings.oasis_chance:
        features.add(Feature.OASIS)
    return frozenset(features)


def generate_features(
    grid: HexGrid,
    terrain: Mapping[HexCoordinate, TerrainCell],
    settings: WorldSettings,
    rng: MapRng,
) -> Dict[HexCoordinate, FrozenSet[Feature]]:
    features: Dict[HexCoordinate, FrozenSet[Feature]] = {}
    for coord, cell in terrain.items():
        band = ClimateBand.for_latitude(grid.latitude(coord))
        features[coord] = place_features(coord, cell, band, settings, rng)
    if logger.isEnabledFor(logging.DEBUG):
        for feature in Feature:
            count = sum(1 for fs in features.values() if feature in fs)
            logger.debug("Feature %s: %d tiles", feature.value, count)
    return features


__all__ = [
    "RAINFOREST_CHANCE",
    "WOODS_GROUND",
    "generate_features",
    "place_features",
]
