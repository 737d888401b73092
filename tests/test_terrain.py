import pytest

from hexworld.coords import HexCoordinate, HexGrid
from hexworld.generation import MapRng
from hexworld.hex import TerrainType
from hexworld.settings import WorldSettings
from hexworld.terrain import (
    ClimateBand,
    TerrainCell,
    apply_coast,
    band_terrain,
    classify_base,
    classify_terrain,
    relief_thresholds,
)


@pytest.mark.parametrize(
    "latitude, band",
    [
        (80.0, ClimateBand.POLAR),
        (-70.0, ClimateBand.POLAR),
        (66.57, ClimateBand.POLAR),
        (50.0, ClimateBand.TEMPERATE),
        (-35.0, ClimateBand.TEMPERATE),
        (30.0, ClimateBand.SUBTROPICAL),
        (23.43, ClimateBand.SUBTROPICAL),
        (10.0, ClimateBand.TROPICAL),
        (0.0, ClimateBand.TROPICAL),
    ],
)
def test_climate_band_by_latitude(latitude, band):
    assert ClimateBand.for_latitude(latitude) is band


def test_band_terrain_tables():
    assert band_terrain(ClimateBand.POLAR, 0.0) is TerrainType.TUNDRA
    assert band_terrain(ClimateBand.POLAR, 0.99) is TerrainType.SNOW
    assert band_terrain(ClimateBand.POLAR, 1.0) is TerrainType.SNOW
    assert band_terrain(ClimateBand.TEMPERATE, 0.5) is TerrainType.PLAINS
    assert band_terrain(ClimateBand.SUBTROPICAL, 0.1) is TerrainType.DESERT
    assert band_terrain(ClimateBand.TROPICAL, 0.9) is TerrainType.GRASSLAND


def test_classify_base_thresholds():
    settings = WorldSettings()
    ocean = classify_base(0.0, ClimateBand.TEMPERATE, 0.5, settings)
    assert ocean.terrain is TerrainType.OCEAN and ocean.land_base is None

    flat = classify_base(0.1, ClimateBand.TEMPERATE, 0.9, settings)
    assert flat.terrain is TerrainType.GRASSLAND
    assert flat.land_base is TerrainType.GRASSLAND

    hill = classify_base(settings.hill_elevation, ClimateBand.POLAR, 0.1, settings)
    assert hill.terrain is TerrainType.HILLS
    assert hill.land_base is TerrainType.TUNDRA, "hills remember the climate terrain beneath"

    peak = classify_base(0.9, ClimateBand.SUBTROPICAL, 0.0, settings)
    assert peak.terrain is TerrainType.MOUNTAINS
    assert peak.land_base is TerrainType.DESERT


def test_coast_does_not_cascade():
    grid = HexGrid(5, 1)
    coords = list(grid.coords())
    snapshot = {c: TerrainCell(TerrainType.OCEAN, None, 0.5) for c in coords}
    snapshot[coords[0]] = TerrainCell(TerrainType.PLAINS, TerrainType.PLAINS, 0.5)

    result = apply_coast(grid, snapshot)
    assert result[coords[1]].terrain is TerrainType.COAST
    assert result[coords[2]].terrain is TerrainType.OCEAN, "coast must not make its neighbours coastal"
    assert result[coords[4]].terrain is TerrainType.OCEAN
    assert snapshot[coords[1]].terrain is TerrainType.OCEAN, "the snapshot must stay untouched"


def test_coast_across_wrap_seam():
    grid = HexGrid(4, 1, wrap=True)
    coords = list(grid.coords())
    snapshot = {c: TerrainCell(TerrainType.OCEAN, None, 0.5) for c in coords}
    snapshot[coords[0]] = TerrainCell(TerrainType.GRASSLAND, TerrainType.GRASSLAND, 0.5)
    result = apply_coast(grid, snapshot)
    assert result[coords[3]].terrain is TerrainType.COAST
    assert result[coords[2]].terrain is TerrainType.OCEAN


def test_moisture_depends_only_on_seed_and_tile():
    rng = MapRng(21)
    settings = WorldSettings(seed=21)
    small = HexGrid(4, 4)
    large = HexGrid(7, 9)
    small_cells = classify_terrain(small, {c: 0.1 for c in small.coords()}, settings, rng)
    large_cells = classify_terrain(large, {c: 0.1 for c in large.coords()}, settings, rng)
    for coord, cell in small_cells.items():
        assert large_cells[coord].moisture == cell.moisture


def test_polar_rows_get_polar_terrain():
    grid = HexGrid(6, 20)
    settings = WorldSettings(seed=4)
    cells = classify_terrain(grid, {c: 0.1 for c in grid.coords()}, settings, MapRng(4))
    top_row = [HexCoordinate.from_offset(col, 0) for col in range(6)]
    assert all(cells[c].terrain in (TerrainType.TUNDRA, TerrainType.SNOW) for c in top_row)


def test_relief_thresholds_limit_high_ground_on_high_maps():
    grid = HexGrid(10, 10)
    coords = list(grid.coords())
    # Land spread evenly over [0.3, 1.0): every tile clears the configured hill floor.
    elevations = {c: 0.3 + 0.7 * i / len(coords) for i, c in enumerate(coords)}
    settings = WorldSettings(hills_share=0.3, mountains_share=0.1)
    relief = relief_thresholds(elevations, settings)
    assert relief.hills > settings.hill_elevation
    assert relief.mountains >= relief.hills

    cells = classify_terrain(grid, elevations, settings, MapRng(2))
    high = [c for c in cells.values() if c.terrain in (TerrainType.HILLS, TerrainType.MOUNTAINS)]
    peaks = [c for c in cells.values() if c.terrain is TerrainType.MOUNTAINS]
    assert len(high) <= 31
    assert len(peaks) <= 11
    assert all(elevations[c] >= settings.mountain_elevation for c, cell in cells.items() if cell.terrain is TerrainType.MOUNTAINS)


def test_relief_thresholds_keep_floors_on_low_maps():
    grid = HexGrid(6, 6)
    elevations = {c: 0.1 for c in grid.coords()}
    settings = WorldSettings()
    assert relief_thresholds(elevations, settings) == (settings.hill_elevation, settings.mountain_elevation)
    all_sea = {c: 0.0 for c in grid.coords()}
    assert relief_thresholds(all_sea, settings) == (settings.hill_elevation, settings.mountain_elevation)
