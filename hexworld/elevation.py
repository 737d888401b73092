from __future__ import annotations

"""
Elevation synthesis by landscape evolution over a scattered sample graph.

Samples are scattered over the map, joined by a Delaunay triangulation and
eroded against uniform uplift until rivers have carved valleys down to the
sea outlets. The result is rasterized onto tile centres.
"""

import heapq
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Sequence, Tuple

import numpy as np
from scipy.spatial import Delaunay, cKDTree

from .coords import SQRT3, HexCoordinate, HexGrid
from .generation import MapRng, perlin_noise
from .settings import WorldSettings

logger = logging.getLogger("hexciv.elevation")
logger.addHandler(logging.NullHandler())

# Margin around the outermost tile centres, in hex radii.
_MARGIN = 1.0
_MIN_SAMPLES = 16
_UPLIFT = 1.0
_TIME_STEP = 1.0e4
_AREA_EXPONENT = 0.5
# Draw range for land_ratio when the settings leave it open.
LAND_RATIO_RANGE = (0.29, 0.6)
# Noise frequencies of the land/sea split, per unit hex radius.
_PLATE_FREQUENCY = 0.12
_CONTINENT_FREQUENCY = 0.03
_FAULT_FREQUENCY = 0.06


@dataclass(frozen=True)
class ElevationSample:
    """One point of the landscape simulation, discarded after rasterization."""

    x: float
    y: float
    elevation: float


class SampleGraph:
    """Scattered sample sites and their Delaunay adjacency."""

    def __init__(self, points: np.ndarray, edge_indices: Sequence[int]) -> None:
        self.points = points
        self.edge_indices = list(edge_indices)
        tri = Delaunay(points)
        indptr, indices = tri.vertex_neighbor_vertices
        self.neighbors: List[List[int]] = [
            indices[indptr[i]:indptr[i + 1]].tolist() for i in range(len(points))
        ]

    def __len__(self) -> int:
        return len(self.points)

    def distance(self, i: int, j: int) -> float:
        (xi, yi), (xj, yj) = self.points[i], self.points[j]
        return math.hypot(xi - xj, yi - yj)


def map_extent(grid: HexGrid) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Bounding box (min, max) of all tile centres plus a margin, in unit hex radii."""
    max_x = SQRT3 * (grid.width - 1 + (0.5 if grid.height > 1 else 0.0))
    max_y = 1.5 * (grid.height - 1)
    return (-_MARGIN, -_MARGIN), (max_x + _MARGIN, max_y + _MARGIN)


def _edge_points(bound_min: Tuple[float, float], bound_max: Tuple[float, float], spacing: float) -> np.ndarray:
    (x0, y0), (x1, y1) = bound_min, bound_max
    nx = max(2, int(math.ceil((x1 - x0) / spacing)) + 1)
    ny = max(2, int(math.ceil((y1 - y0) / spacing)) + 1)
    xs = np.linspace(x0, x1, nx)
    ys = np.linspace(y0, y1, ny)[1:-1]
    top = np.column_stack([xs, np.full(nx, y0)])
    bottom = np.column_stack([xs, np.full(nx, y1)])
    left = np.column_stack([np.full(len(ys), x0), ys])
    right = np.column_stack([np.full(len(ys), x1), ys])
    return np.vstack([top, bottom, left, right])


def scatter_samples(grid: HexGrid, settings: WorldSettings, rng: MapRng) -> SampleGraph:
    """Uniform random sites over the map extent followed by evenly spaced edge sites."""
    bound_min, bound_max = map_extent(grid)
    count = max(_MIN_SAMPLES, int(round(settings.sample_density * len(grid))))
    gen = rng.numpy("elevation.sites")
    interior = gen.uniform(low=bound_min, high=bound_max, size=(count, 2))
    edges = _edge_points(bound_min, bound_max, 1.0 / math.sqrt(settings.sample_density))
    points = np.vstack([interior, edges])
    return SampleGraph(points, range(count, len(points)))


def resolve_land_ratio(settings: WorldSettings, rng: MapRng) -> float:
    if settings.land_ratio is not None:
        return settings.land_ratio
    return rng.stream("elevation.land_ratio").uniform(*LAND_RATIO_RANGE)


class LandNoise(NamedTuple):
    """Noise seeds of the land/sea split, one per field."""

    plates: int
    persistence: int
    continents: int
    fault_modulus: int
    fault_x: int
    fault_y: int

    @classmethod
    def from_rng(cls, rng: MapRng) -> "LandNoise":
        return cls(*(rng.noise_seed(f"elevation.{name}") for name in cls._fields))


def _signed(value: float) -> float:
    return 2.0 * value - 1.0


def apply_fault(x: float, y: float, noise: LandNoise, fault_scale: float) -> Tuple[float, float]:
    """Displace a site along a smooth random field so plate boundaries bend like faults."""
    modulus = abs(_signed(perlin_noise(x, y, noise.fault_modulus, octaves=3, scale=_FAULT_FREQUENCY)))
    dx = _signed(perlin_noise(x, y, noise.fault_x, octaves=4, persistence=0.6, lacunarity=2.2, scale=_FAULT_FREQUENCY))
    dy = _signed(perlin_noise(x, y, noise.fault_y, octaves=4, persistence=0.6, lacunarity=2.2, scale=_FAULT_FREQUENCY))
    shift = 2.0 * fault_scale * modulus
    return x + dx * shift, y + dy * shift


def _land_score(x: float, y: float, noise: LandNoise, fault_scale: float) -> float:
    """Plate noise, rough where the persistence field is high, against broad continent noise."""
    fx, fy = apply_fault(x, y, noise, fault_scale)
    persistence = abs(_signed(perlin_noise(fx, fy, noise.persistence, octaves=2, scale=_PLATE_FREQUENCY))) * 0.7 + 0.3
    plate = perlin_noise(fx, fy, noise.plates, octaves=6, persistence=persistence, lacunarity=2.4, scale=_PLATE_FREQUENCY)
    continent = perlin_noise(fx, fy, noise.continents, octaves=3, persistence=0.5, lacunarity=1.8, scale=_CONTINENT_FREQUENCY)
    return 0.5 * _signed(plate) - 0.7 * _signed(continent)


def determine_outlets(graph: SampleGraph, sea: Sequence[bool]) -> List[bool]:
    """
    Sea samples connected to the map edge through other sea samples.

    Inland sea pockets are left as land so every outlet drains off the map.
    When no edge sample is sea, the first edge sample becomes the sole outlet.
    """
    is_outlet = [False] * len(graph)
    stack = [i for i in graph.edge_indices if sea[i]]
    while stack:
        i = stack.pop()
        if is_outlet[i]:
            continue
        is_outlet[i] = True
        stack.extend(j for j in graph.neighbors[i] if sea[j] and not is_outlet[j])
    if not any(is_outlet) and graph.edge_indices:
        is_outlet[graph.edge_indices[0]] = True
    return is_outlet


def _erodibility(graph: SampleGraph, settings: WorldSettings, seed: int) -> np.ndarray:
    values = np.empty(len(graph))
    for i, (x, y) in enumerate(graph.points):
        noise = perlin_noise(x, y, seed, octaves=5, persistence=0.7, lacunarity=2.2, scale=0.07)
        values[i] = abs(1.0 - 2.0 * noise) ** settings.erodibility_power * 0.5 + 0.1
    return values


def _route_drainage(graph: SampleGraph, heights: np.ndarray, is_outlet: Sequence[bool]) -> Tuple[List[int], List[int]]:
    """
    Priority flood from the outlets.

    Returns the receiver of every sample (outlets receive themselves) and the
    order samples were reached, which lists every receiver before its donors.
    Ties pop by sample index so the routing is deterministic.
    """
    n = len(graph)
    receivers = list(range(n))
    visited = [False] * n
    heap: List[Tuple[float, int]] = []
    for i in range(n):
        if is_outlet[i]:
            visited[i] = True
            heapq.heappush(heap, (float(heights[i]), i))
    order: List[int] = []
    while heap:
        level, i = heapq.heappop(heap)
        order.append(i)
        for j in graph.neighbors[i]:
            if visited[j]:
                continue
            visited[j] = True
            receivers[j] = i
            heapq.heappush(heap, (max(level, float(heights[j])), j))
    return receivers, order


def evolve(graph: SampleGraph, is_outlet: Sequence[bool], erodibility: np.ndarray, settings: WorldSettings) -> np.ndarray:
    """
    Implicit stream-power erosion against uniform uplift.

    Outlets stay pinned at zero. Each step recomputes drainage over the
    current surface, then solves every sample against its receiver, walking
    outward from the outlets, and clamps slopes to ``settings.max_slope``.
    """
    n = len(graph)
    heights = np.zeros(n)
    x0, y0 = graph.points.min(axis=0)
    x1, y1 = graph.points.max(axis=0)
    cell_area = (x1 - x0) * (y1 - y0) / n
    max_gradient = math.tan(settings.max_slope)

    for step in range(settings.evolution_steps):
        receivers, order = _route_drainage(graph, heights, is_outlet)
        area = np.full(n, cell_area)
        for i in reversed(order):
            r = receivers[i]
            if r != i:
                area[r] += area[i]
        for i in order:
            r = receivers[i]
            if r == i:
                heights[i] = 0.0
                continue
            dist = graph.distance(i, r)
            factor = _TIME_STEP * erodibility[i] * area[i] ** _AREA_EXPONENT / dist
            h = (heights[i] + _TIME_STEP * _UPLIFT + factor * heights[r]) / (1.0 + factor)
            heights[i] = min(h, heights[r] + dist * max_gradient)
        logger.debug("Evolution step %d: max height %.3f", step, float(heights.max()))

    unreached = n - len(order)
    if unreached:
        logger.warning("%d samples were not reached by drainage routing", unreached)
    return heights


def rasterize(grid: HexGrid, samples: Sequence[ElevationSample], neighbors: int) -> Dict[HexCoordinate, float]:
    """Inverse-distance-weighted elevation at each tile centre from the ``neighbors`` nearest samples."""
    points = np.array([(s.x, s.y) for s in samples])
    values = np.array([s.elevation for s in samples])
    coords = list(grid.coords())
    centres = np.array([c.to_pixel(1.0) for c in coords])
    k = min(neighbors, len(samples))
    dist, idx = cKDTree(points).query(centres, k=k)
    if k == 1:
        dist = dist[:, None]
        idx = idx[:, None]

    result: Dict[HexCoordinate, float] = {}
    for row, coord in enumerate(coords):
        d = dist[row]
        if d[0] < 1e-12:
            value = values[idx[row][0]]
        else:
            weights = 1.0 / d ** 2
            value = float(np.dot(weights, values[idx[row]]) / weights.sum())
        result[coord] = min(1.0, max(0.0, float(value)))
    return result


def generate_elevation(grid: HexGrid, settings: WorldSettings, rng: MapRng) -> Dict[HexCoordinate, float]:
    """
    Build the normalized elevation field for every in-bounds tile.

    Identical settings always produce identical values.
    """
    graph = scatter_samples(grid, settings, rng)
    land_ratio = resolve_land_ratio(settings, rng)
    logger.info("Elevation: %d samples, land ratio %.2f", len(graph), land_ratio)

    noise = LandNoise.from_rng(rng)
    scores = np.array([_land_score(x, y, noise, settings.fault_scale) for x, y in graph.points])
    threshold = float(np.quantile(scores, 1.0 - land_ratio))
    sea = (scores < threshold).tolist()
    is_outlet = determine_outlets(graph, sea)
    logger.debug("Outlets: %d of %d samples", sum(is_outlet), len(graph))

    erodibility = _erodibility(graph, settings, rng.noise_seed("elevation.erodibility"))
    heights = evolve(graph, is_outlet, erodibility, settings)
    peak = float(heights.max())
    if peak > 0:
        heights = heights / peak

    samples = [
        ElevationSample(float(x), float(y), float(h))
        for (x, y), h in zip(graph.points, heights)
    ]
    return rasterize(grid, samples, settings.interpolation_neighbors)


__all__ = [
    "ElevationSample",
    "LAND_RATIO_RANGE",
    "LandNoise",
    "SampleGraph",
    "apply_fault",
    "determine_outlets",
    "evolve",
    "generate_elevation",
    "map_extent",
    "rasterize",
    "resolve_land_ratio",
    "scatter_samples",
]
