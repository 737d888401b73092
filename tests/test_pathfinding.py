import heapq
import random

import pytest

from hexworld import HexCoordinate, InternalLimitExceededError, OutOfBoundsError, TerrainType
from hexworld.errors import ConfigurationError
from hexworld.hex import Feature
from pathing import (
    CostModel,
    HexGraph,
    MoverCapability,
    NoPathFound,
    PathQuery,
    PathResult,
    astar,
    find_path,
    find_path_for,
)

from map_builders import add_river_edge, build_map, build_tiles, make_tile, offset


def dijkstra_cost(graph, start, goal):
    best = {start: 0.0}
    heap = [(0.0, start)]
    while heap:
        cost, current = heapq.heappop(heap)
        if current == goal:
            return cost
        if cost > best[current]:
            continue
        for n, step in graph.neighbors(current):
            if cost + step < best.get(n, float("inf")):
                best[n] = cost + step
                heapq.heappush(heap, (cost + step, n))
    return None


def assert_contiguous(world_map, path):
    for a, b in zip(path, path[1:]):
        assert world_map.grid.direction_between(a, b) is not None, f"{a} and {b} are not adjacent"


def test_uniform_map_cost_equals_distance():
    world_map = build_map(10, 10)
    start, goal = offset(0, 0), offset(9, 9)
    result = find_path(world_map, start, goal)
    assert isinstance(result, PathResult)
    distance = world_map.distance(start, goal)
    assert result.cost == distance
    assert result.steps == distance
    assert result.start == start and result.goal == goal
    assert_contiguous(world_map, result.path)


def test_start_equals_goal():
    world_map = build_map(4, 4)
    c = offset(2, 1)
    assert find_path(world_map, c, c) == PathResult((c,), 0.0)


def test_goal_ringed_by_ocean_is_unreachable():
    ring = set(HexCoordinate.from_offset(3, 3).ring(1))
    world_map = build_map(7, 7, lambda c: TerrainType.OCEAN if c in ring else TerrainType.GRASSLAND)
    result = find_path(world_map, offset(0, 0), offset(3, 3))
    assert isinstance(result, NoPathFound)
    assert not result


def test_water_goal_unreachable_for_land_mover():
    world_map = build_map(5, 1, lambda c: TerrainType.OCEAN if c == offset(4, 0) else TerrainType.PLAINS)
    assert isinstance(find_path(world_map, offset(0, 0), offset(4, 0)), NoPathFound)


def test_out_of_bounds_endpoints_raise():
    world_map = build_map(5, 5)
    with pytest.raises(OutOfBoundsError):
        find_path(world_map, offset(-1, 0), offset(2, 2))
    with pytest.raises(OutOfBoundsError):
        find_path(world_map, offset(2, 2), offset(2, 5))


def test_hills_and_woods_cost_more():
    terrain = {offset(1, 0): TerrainType.HILLS}
    world_map = build_map(3, 1, lambda c: terrain.get(c, TerrainType.GRASSLAND))
    assert find_path(world_map, offset(0, 0), offset(2, 0)).cost == 3.0

    tiles = build_tiles(3, 1)
    tiles[offset(1, 0)] = make_tile(offset(1, 0), TerrainType.HILLS, features=[Feature.WOODS])
    tiles[offset(2, 0)] = make_tile(offset(2, 0), TerrainType.PLAINS, features=[Feature.RAINFOREST])
    wooded = build_map(3, 1, tiles=tiles)
    assert find_path(wooded, offset(0, 0), offset(2, 0)).cost == 5.0


def test_mountains_block_land_movers():
    world_map = build_map(3, 1, lambda c: TerrainType.MOUNTAINS if c == offset(1, 0) else TerrainType.PLAINS)
    assert isinstance(find_path(world_map, offset(0, 0), offset(2, 0)), NoPathFound)


def test_river_crossing_surcharge_both_ways():
    tiles = build_tiles(2, 1)
    world_map = build_map(2, 1, tiles=tiles)
    add_river_edge(tiles, world_map.grid, offset(0, 0), 0)
    river_map = build_map(2, 1, tiles=tiles)
    assert find_path(river_map, offset(0, 0), offset(1, 0)).cost == 4.0
    assert find_path(river_map, offset(1, 0), offset(0, 0)).cost == 4.0


def test_search_detours_around_river_when_cheaper():
    tiles = build_tiles(2, 3)
    grid = build_map(2, 3, tiles=tiles).grid
    add_river_edge(tiles, grid, offset(0, 1), 0)
    world_map = build_map(2, 3, tiles=tiles)
    result = find_path(world_map, offset(0, 1), offset(1, 1))
    assert result.cost == 2.0, "going around the river is cheaper than crossing it"
    assert result.steps == 2


def test_naval_movers_stay_on_open_water():
    tiles = build_tiles(5, 2, lambda c: TerrainType.OCEAN if c.to_offset()[1] == 0 else TerrainType.PLAINS)
    tiles[offset(2, 0)] = make_tile(offset(2, 0), TerrainType.OCEAN, features=[Feature.ICE], elevation=0.0)
    world_map = build_map(5, 2, tiles=tiles)
    assert isinstance(find_path(world_map, offset(0, 0), offset(4, 0), MoverCapability.NAVAL), NoPathFound)

    open_sea = build_map(5, 2, lambda c: TerrainType.OCEAN if c.to_offset()[1] == 0 else TerrainType.PLAINS)
    result = find_path(open_sea, offset(0, 0), offset(4, 0), MoverCapability.NAVAL)
    assert result.cost == 4.0
    assert all(open_sea.get(c).terrain.is_water for c in result.path)


def test_wrap_seam_shortcut():
    world_map = build_map(10, 3, wrap=True)
    result = find_path(world_map, offset(0, 1), offset(9, 1))
    assert result.cost == 1.0
    assert result.path == (offset(0, 1), offset(9, 1))


def test_repeated_queries_return_identical_paths():
    world_map = build_map(9, 9)
    first = find_path(world_map, offset(0, 4), offset(8, 0))
    for _ in range(3):
        assert find_path(world_map, offset(0, 4), offset(8, 0)) == first


def test_astar_matches_dijkstra_on_mixed_terrain():
    rng = random.Random(12)
    choices = [TerrainType.PLAINS, TerrainType.GRASSLAND, TerrainType.HILLS, TerrainType.MOUNTAINS]
    world_map = build_map(12, 9, lambda c: rng.choice(choices))
    graph = HexGraph(world_map)
    passable = [c for c in world_map.coords() if graph.passable(c)]
    for start, goal in zip(passable[::7], passable[::-5]):
        expected = dijkstra_cost(graph, start, goal)
        result = astar(graph, start, goal)
        if expected is None:
            assert isinstance(result, NoPathFound)
        else:
            assert result.cost == pytest.approx(expected)
            assert_contiguous(world_map, result.path)


def test_expansion_cap_raises():
    world_map = build_map(10, 10)
    graph = HexGraph(world_map)
    with pytest.raises(InternalLimitExceededError):
        astar(graph, offset(0, 0), offset(9, 9), max_expansions=1)


def test_query_object():
    world_map = build_map(4, 4)
    query = PathQuery(offset(0, 0), offset(3, 0))
    assert find_path_for(world_map, query).cost == 3.0


def test_cost_model_rejects_non_positive_costs():
    with pytest.raises(ConfigurationError):
        CostModel(terrain_costs={MoverCapability.LAND: {TerrainType.PLAINS: 0.0}})
    with pytest.raises(ConfigurationError):
        CostModel(terrain_costs={MoverCapability.NAVAL: {}})
    with pytest.raises(ConfigurationError):
        CostModel(feature_costs={MoverCapability.LAND: {Feature.WOODS: -1.0}})
    with pytest.raises(ConfigurationError):
        CostModel(river_crossing={MoverCapability.LAND: float("nan")})


def test_custom_cost_model_changes_route_cost():
    model = CostModel(terrain_costs={MoverCapability.LAND: {TerrainType.GRASSLAND: 2.5}})
    world_map = build_map(4, 1)
    assert find_path(world_map, offset(0, 0), offset(3, 0), cost_model=model).cost == 7.5
    assert model.min_step_cost(MoverCapability.NAVAL) == 1.0
