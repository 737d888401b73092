from __future__ import annotations

"""Terrain classification: elevation thresholds, latitude climate bands and the coast pass."""

import logging
from enum import Enum
from typing import Dict, List, Mapping, NamedTuple, Optional

import numpy as np

from .coords import HexCoordinate, HexGrid
from .generation import MapRng
from .hex import TerrainType
from .settings import WorldSettings

logger = logging.getLogger("hexciv.terrain")
logger.addHandler(logging.NullHandler())

ARCTIC_CIRCLE = 66.57
TROPIC = 23.43
TEMPERATE_LATITUDE = 35.0


class ClimateBand(Enum):
    POLAR = "polar"
    TEMPERATE = "temperate"
    SUBTROPICAL = "subtropical"
    TROPICAL = "tropical"

    @classmethod
    def for_latitude(cls, latitude: float) -> "ClimateBand":
        lat = abs(latitude)
        if lat >= ARCTIC_CIRCLE:
            return cls.POLAR
        if lat >= TEMPERATE_LATITUDE:
            return cls.TEMPERATE
        if lat >= TROPIC:
            return cls.SUBTROPICAL
        return cls.TROPICAL


# Climate terrain per band, ordered dry to wet; a tile's moisture picks the entry.
BAND_TERRAIN: Dict[ClimateBand, List[TerrainType]] = {
    ClimateBand.POLAR: [TerrainType.TUNDRA, TerrainType.SNOW],
    ClimateBand.TEMPERATE: [
        TerrainType.PLAINS,
        TerrainType.PLAINS,
        TerrainType.PLAINS,
        TerrainType.GRASSLAND,
    ],
    ClimateBand.SUBTROPICAL: [
        TerrainType.DESERT,
        TerrainType.DESERT,
        TerrainType.PLAINS,
        TerrainType.PLAINS,
        TerrainType.PLAINS,
        TerrainType.GRASSLAND,
        TerrainType.GRASSLAND,
    ],
    ClimateBand.TROPICAL: [
        TerrainType.DESERT,
        TerrainType.PLAINS,
        TerrainType.PLAINS,
        TerrainType.GRASSLAND,
        TerrainType.GRASSLAND,
        TerrainType.GRASSLAND,
        TerrainType.GRASSLAND,
    ],
}


class TerrainCell(NamedTuple):
    terrain: TerrainType
    land_base: Optional[TerrainType]
    moisture: float


def band_terrain(band: ClimateBand, moisture: float) -> TerrainType:
    choices = BAND_TERRAIN[band]
    return choices[min(int(moisture * len(choices)), len(choices) - 1)]


class Relief(NamedTuple):
    hills: float
    mountains: float


def relief_thresholds(elevations: Mapping[HexCoordinate, float], settings: WorldSettings) -> Relief:
    """
    Elevations where hills and mountains begin on this map.

    The configured thresholds are floors. Where the land is high overall they
    are raised to the land-elevation quantiles that leave ``hills_share`` of
    the land as hills or mountains and ``mountains_share`` as mountains.
    """
    land = np.array([e for e in elevations.values() if e >= settings.sea_level])
    if not len(land):
        return Relief(settings.hill_elevation, settings.mountain_elevation)
    hills = float(np.quantile(land, 1.0 - settings.hills_share))
    mountains = float(np.quantile(land, 1.0 - settings.mountains_share))
    return Relief(max(settings.hill_elevation, hills), max(settings.mountain_elevation, mountains))


def classify_base(
    elevation: float,
    band: ClimateBand,
    moisture: float,
    settings: WorldSettings,
    relief: Optional[Relief] = None,
) -> TerrainCell:
    """
    Classify one tile from its elevation, climate band and moisture.
    Order of checks:
      1. Below sea level → ocean
      2. Mountain elevation → mountains over the band terrain
      3. Hill elevation → hills over the band terrain
      4. Otherwise → the band terrain itself
    Without ``relief`` the configured thresholds apply as they are.
    """
    if relief is None:
        relief = Relief(settings.hill_elevation, settings.mountain_elevation)
    if elevation < settings.sea_level:
        return TerrainCell(TerrainType.OCEAN, None, moisture)
    ground = band_terrain(band, moisture)
    if elevation >= relief.mountains:
        return TerrainCell(TerrainType.MOUNTAINS, ground, moisture)
    if elevation >= relief.hills:
        return TerrainCell(TerrainType.HILLS, ground, moisture)
    return TerrainCell(ground, ground, moisture)


def classify_terrain(
    grid: HexGrid,
    elevations: Mapping[HexCoordinate, float],
    settings: WorldSettings,
    rng: MapRng,
) -> Dict[HexCoordinate, TerrainCell]:
    """Base classification of every tile, before the coast pass."""
    relief = relief_thresholds(elevations, settings)
    logger.debug("Relief: hills from %.3f, mountains from %.3f", relief.hills, relief.mountains)
    cells: Dict[HexCoordinate, TerrainCell] = {}
    for coord in grid.coords():
        band = ClimateBand.for_latitude(grid.latitude(coord))
        moisture = rng.tile(coord, "terrain.moisture").random()
        cells[coord] = classify_base(elevations[coord], band, moisture, settings, relief)
    return cells


def apply_coast(grid: HexGrid, snapshot: Mapping[HexCoordinate, TerrainCell]) -> Dict[HexCoordinate, TerrainCell]:
    """
    Turn ocean bordering land into coast.

    Neighbours are read from ``snapshot`` only, so a new coast tile never makes
    its own neighbours coastal. The snapshot itself is left untouched.
    """
    result: Dict[HexCoordinate, TerrainCell] = {}
    for coord, cell in snapshot.items():
        if cell.terrain is TerrainType.OCEAN and any(
            snapshot[n].terrain.is_land for n in grid.neighbors(coord)
        ):
            result[coord] = cell._replace(terrain=TerrainType.COAST)
        else:
            result[coord] = cell
    return result


def generate_terrain(
    grid: HexGrid,
    elevations: Mapping[HexCoordinate, float],
    settings: WorldSettings,
    rng: MapRng,
) -> Dict[HexCoordinate, TerrainCell]:
    base = classify_terrain(grid, elevations, settings, rng)
    terrain = apply_coast(grid, base)
    if logger.isEnabledFor(logging.DEBUG):
        coast = sum(1 for cell in terrain.values() if cell.terrain is TerrainType.COAST)
        logger.debug("Terrain: %d coast tiles", coast)
    return terrain


__all__ = [
    "ARCTIC_CIRCLE",
    "BAND_TERRAIN",
    "ClimateBand",
    "Relief",
    "TEMPERATE_LATITUDE",
    "TROPIC",
    "TerrainCell",
    "apply_coast",
    "band_terrain",
    "classify_base",
    "classify_terrain",
    "generate_terrain",
    "relief_thresholds",
]
