from hexworld.coords import HexCoordinate, HexGrid
from hexworld.features import generate_features, place_features
from hexworld.generation import MapRng
from hexworld.hex import Feature, TerrainType
from hexworld.settings import WorldSettings
from hexworld.terrain import ClimateBand, TerrainCell

RNG = MapRng(17)
ORIGIN = HexCoordinate(0, 0)


def cell(terrain, land_base=None):
    if land_base is None and terrain.is_land:
        land_base = terrain
    return TerrainCell(terrain, land_base, 0.5)


def test_polar_water_is_always_iced():
    settings = WorldSettings()
    for terrain in (TerrainType.OCEAN, TerrainType.COAST):
        assert place_features(ORIGIN, cell(terrain), ClimateBand.POLAR, settings, RNG) == {Feature.ICE}
        assert place_features(ORIGIN, cell(terrain), ClimateBand.TEMPERATE, settings, RNG) == frozenset()


def test_woods_on_eligible_ground_only():
    settings = WorldSettings(woods_chance=1.0, oasis_chance=0.0)
    for ground in (TerrainType.PLAINS, TerrainType.GRASSLAND, TerrainType.TUNDRA):
        assert Feature.WOODS in place_features(ORIGIN, cell(ground), ClimateBand.TEMPERATE, settings, RNG)
    tundra_hill = cell(TerrainType.HILLS, TerrainType.TUNDRA)
    assert Feature.WOODS in place_features(ORIGIN, tundra_hill, ClimateBand.POLAR, settings, RNG)
    for ground in (TerrainType.DESERT, TerrainType.SNOW):
        assert not place_features(ORIGIN, cell(ground), ClimateBand.TEMPERATE, settings, RNG)
    mountain = cell(TerrainType.MOUNTAINS, TerrainType.GRASSLAND)
    assert not place_features(ORIGIN, mountain, ClimateBand.TEMPERATE, settings, RNG)


def test_rainforest_only_without_woods_on_plains():
    settings = WorldSettings(woods_chance=0.0)
    coords = [HexCoordinate(q, 0) for q in range(60)]
    tropical = [place_features(c, cell(TerrainType.PLAINS), ClimateBand.TROPICAL, settings, RNG) for c in coords]
    assert any(Feature.RAINFOREST in fs for fs in tropical)
    polar = [place_features(c, cell(TerrainType.PLAINS), ClimateBand.POLAR, settings, RNG) for c in coords]
    assert not any(polar), "no rainforest in the polar band"
    grass = [place_features(c, cell(TerrainType.GRASSLAND), ClimateBand.TROPICAL, settings, RNG) for c in coords]
    assert not any(grass)

    always_woods = WorldSettings(woods_chance=1.0)
    for c in coords:
        fs = place_features(c, cell(TerrainType.PLAINS), ClimateBand.TROPICAL, always_woods, RNG)
        assert fs == {Feature.WOODS}


def test_oasis_on_flat_desert_only():
    settings = WorldSettings(oasis_chance=1.0)
    assert place_features(ORIGIN, cell(TerrainType.DESERT), ClimateBand.SUBTROPICAL, settings, RNG) == {Feature.OASIS}
    desert_hill = cell(TerrainType.HILLS, TerrainType.DESERT)
    assert place_features(ORIGIN, desert_hill, ClimateBand.SUBTROPICAL, settings, RNG) == frozenset()


def test_features_do_not_depend_on_iteration_order():
    grid = HexGrid(6, 6)
    settings = WorldSettings(seed=3)
    terrain = {c: cell(TerrainType.PLAINS) for c in grid.coords()}
    forward = generate_features(grid, terrain, settings, MapRng(3))
    backward = generate_features(grid, dict(reversed(list(terrain.items()))), settings, MapRng(3))
    assert forward == backward
