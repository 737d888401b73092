from __future__ import annotations

"""Seed handling and Perlin noise shared by the generation stages."""

import math
import random
import zlib
from functools import lru_cache
from typing import Tuple

import numpy as np

from .coords import HexCoordinate


def _stable_hash(*args: int) -> int:
    """
    Deterministic 64-bit hash used for RNG seeding.
    Combines integer inputs into a reproducible 64-bit result.
    """
    x = 0x345678ABCDEF1234
    for a in args:
        a &= 0xFFFFFFFFFFFFFFFF
        a ^= a >> 33
        a = (a * 0xFF51AFD7ED558CCD) & 0xFFFFFFFFFFFFFFFF
        a ^= a >> 33
        x ^= a
        x = (x * 0xC4CEB9FE1A85EC53) & 0xFFFFFFFFFFFFFFFF
    return x


def _tag_id(tag: str) -> int:
    # str hashes are salted per process; crc32 is not.
    return zlib.crc32(tag.encode("utf-8"))


class MapRng:
    """
    Seed-derived randomness for one map.

    Nothing here keeps state between calls: every stream is rebuilt from the
    map seed and a purpose tag (plus a tile coordinate for per-tile draws), so
    the order in which stages or tiles are processed never changes a result.
    """

    __slots__ = ("seed",)

    def __init__(self, seed: int) -> None:
        self.seed = seed

    def __repr__(self) -> str:
        return f"MapRng(seed={self.seed})"

    def derive(self, tag: str, *parts: int) -> int:
        return _stable_hash(self.seed, _tag_id(tag), *parts)

    def stream(self, tag: str) -> random.Random:
        return random.Random(self.derive(tag))

    def tile(self, coord: HexCoordinate, tag: str) -> random.Random:
        return random.Random(self.derive(tag, coord.q, coord.r))

    def numpy(self, tag: str) -> np.random.Generator:
        return np.random.default_rng(self.derive(tag))

    def noise_seed(self, tag: str) -> int:
        """A 32-bit seed for :func:`perlin_noise`."""
        return self.derive(tag) & 0xFFFFFFFF


def _fade(t: float) -> float:
    """Fade function for Perlin noise interpolation."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


@lru_cache(maxsize=65536)
def _grad(ix: int, iy: int, seed: int) -> Tuple[float, float]:
    """
    Generate a pseudorandom gradient vector for integer grid point (ix, iy) using a stable hash.
    """
    rng = random.Random(_stable_hash(ix, iy, seed))
    angle = rng.random() * 2.0 * math.pi
    return math.cos(angle), math.sin(angle)


def _dot_grid_gradient(ix: int, iy: int, x: float, y: float, seed: int) -> float:
    gx, gy = _grad(ix, iy, seed)
    return gx * (x - ix) + gy * (y - iy)


def _perlin(x: float, y: float, seed: int) -> float:
    """
    Single-octave Perlin noise at coordinates (x, y) with given seed.
    Returns a value in [0, 1].
    """
    x0 = math.floor(x)
    y0 = math.floor(y)
    x1 = x0 + 1
    y1 = y0 + 1

    sx = _fade(x - x0)
    sy = _fade(y - y0)

    n00 = _dot_grid_gradient(x0, y0, x, y, seed)
    n10 = _dot_grid_gradient(x1, y0, x, y, seed)
    n01 = _dot_grid_gradient(x0, y1, x, y, seed)
    n11 = _dot_grid_gradient(x1, y1, x, y, seed)

    ix0 = _lerp(n00, n10, sx)
    ix1 = _lerp(n01, n11, sx)
    value = _lerp(ix0, ix1, sy)
    # Shift from [-1,1] to [0,1]
    return (value + 1.0) / 2.0


def perlin_noise(
    x: float,
    y: float,
    seed: int,
    octaves: int = 4,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
    scale: float = 0.05,
) -> float:
    """
    Generate fractal Perlin noise at (x, y) using multiple octaves.
    Returns a normalized value in [0, 1].
    """
    value = 0.0
    amplitude = 1.0
    frequency = scale
    max_amp = 0.0

    for i in range(octaves):
        value += _perlin(x * frequency, y * frequency, seed + i) * amplitude
        max_amp += amplitude
        amplitude *= persistence
        frequency *= lacunarity

    return value / max_amp if max_amp > 0 else 0.0


__all__ = [
    "MapRng",
    "_stable_hash",
    "perlin_noise",
]
