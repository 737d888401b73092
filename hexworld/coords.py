from __future__ import annotations

"""
Axial hex coordinates for a pointy-top lattice laid out in odd-row offset order.

Directions are numbered clockwise starting East (screen y grows downward):

    0 E, 1 SE, 2 SW, 3 W, 4 NW, 5 NE

Edge ``d`` of a tile is the side facing direction ``d``; corner ``d`` is the
vertex between edges ``d`` and ``d + 1``.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .errors import InvalidArgumentError

SQRT3 = math.sqrt(3.0)

# Axial hex directions: E, SE, SW, W, NW, NE (clockwise)
HEX_DIRECTIONS: List[Tuple[int, int]] = [
    (1, 0),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (0, -1),
    (1, -1),
]

DIRECTION_NAMES: List[str] = ["E", "SE", "SW", "W", "NW", "NE"]


def opposite(direction: int) -> int:
    """Return the direction pointing back the way ``direction`` came."""
    return (direction + 3) % 6


@dataclass(frozen=True, order=True)
class HexCoordinate:
    """
    Immutable axial coordinate (q, r).

    Equality, ordering and hashing are by value, so coordinates can be used as
    dictionary keys and sorted deterministically.
    """

    q: int
    r: int

    @property
    def s(self) -> int:
        """Third cube coordinate (q + r + s = 0)."""
        return -self.q - self.r

    def __add__(self, other: "HexCoordinate") -> "HexCoordinate":
        return HexCoordinate(self.q + other.q, self.r + other.r)

    def __sub__(self, other: "HexCoordinate") -> "HexCoordinate":
        return HexCoordinate(self.q - other.q, self.r - other.r)

    def __repr__(self) -> str:
        return f"HexCoordinate({self.q}, {self.r})"

    # ── adjacency ───────────────────────────────────────────────────────────

    def neighbor(self, direction: int) -> "HexCoordinate":
        dq, dr = HEX_DIRECTIONS[direction % 6]
        return HexCoordinate(self.q + dq, self.r + dr)

    def neighbors(self) -> List["HexCoordinate"]:
        """The six adjacent coordinates, clockwise starting East."""
        return [self.neighbor(d) for d in range(6)]

    def distance(self, other: "HexCoordinate") -> int:
        """
        Return lattice distance to ``other``.
        (|dq| + |dr| + |dq + dr|) // 2 = hex distance in axial coords.
        """
        dq = self.q - other.q
        dr = self.r - other.r
        return (abs(dq) + abs(dr) + abs(dq + dr)) // 2

    def ring(self, radius: int) -> Iterator["HexCoordinate"]:
        """
        Lazily yield every coordinate at exactly ``radius`` steps.

        Radius 0 yields only this coordinate; otherwise ``6 * radius``
        coordinates are produced, walking clockwise from the north-west corner.

        Raises:
            InvalidArgumentError: If radius is negative.
        """
        if radius < 0:
            raise InvalidArgumentError(f"ring radius must be non-negative, got {radius}")
        return self._ring(radius)

    def _ring(self, radius: int) -> Iterator["HexCoordinate"]:
        if radius == 0:
            yield self
            return
        dq, dr = HEX_DIRECTIONS[4]
        current = HexCoordinate(self.q + dq * radius, self.r + dr * radius)
        for direction in range(6):
            for _ in range(radius):
                yield current
                current = current.neighbor(direction)

    def spiral(self, radius: int) -> Iterator["HexCoordinate"]:
        """Lazily yield rings 0..radius in order."""
        if radius < 0:
            raise InvalidArgumentError(f"spiral radius must be non-negative, got {radius}")
        return (coord for k in range(radius + 1) for coord in self._ring(k))

    # ── conversions ─────────────────────────────────────────────────────────

    def to_offset(self) -> Tuple[int, int]:
        """Return (col, row) in odd-row offset layout."""
        col = self.q + (self.r - (self.r & 1)) // 2
        return col, self.r

    @classmethod
    def from_offset(cls, col: int, row: int) -> "HexCoordinate":
        return cls(col - (row - (row & 1)) // 2, row)

    def to_pixel(self, size: float = 1.0) -> Tuple[float, float]:
        """Centre of this hex in pixel space for hexes of circumradius ``size``."""
        x = size * SQRT3 * (self.q + self.r / 2.0)
        y = size * 1.5 * self.r
        return x, y

    @classmethod
    def from_pixel(cls, x: float, y: float, size: float = 1.0) -> "HexCoordinate":
        """Return the hex containing pixel (x, y)."""
        q = (SQRT3 / 3.0 * x - y / 3.0) / size
        r = (2.0 / 3.0 * y) / size
        return cls.round(q, r)

    @classmethod
    def round(cls, q: float, r: float) -> "HexCoordinate":
        """Round fractional axial coordinates to the nearest hex."""
        s = -q - r
        rq, rr, rs = round(q), round(r), round(s)

        q_diff = abs(rq - q)
        r_diff = abs(rr - r)
        s_diff = abs(rs - s)

        if q_diff > r_diff and q_diff > s_diff:
            rq = -rr - rs
        elif r_diff > s_diff:
            rr = -rq - rs

        return cls(int(rq), int(rr))


class HexGrid:
    """
    Rectangular (odd-row offset) window onto the hex lattice.

    When ``wrap`` is set the east and west edges are joined: the offset column
    is normalized modulo ``width`` before any comparison, neighbour lookup or
    distance computation.
    """

    __slots__ = ("width", "height", "wrap")

    def __init__(self, width: int, height: int, wrap: bool = False) -> None:
        self.width = width
        self.height = height
        self.wrap = wrap

    def __repr__(self) -> str:
        return f"HexGrid(width={self.width}, height={self.height}, wrap={self.wrap})"

    def normalize(self, coord: HexCoordinate) -> HexCoordinate:
        if not self.wrap:
            return coord
        col, row = coord.to_offset()
        if 0 <= col < self.width:
            return coord
        return HexCoordinate.from_offset(col % self.width, row)

    def in_bounds(self, coord: HexCoordinate) -> bool:
        col, row = self.normalize(coord).to_offset()
        return 0 <= col < self.width and 0 <= row < self.height

    def __contains__(self, coord: HexCoordinate) -> bool:
        return self.in_bounds(coord)

    def __len__(self) -> int:
        return self.width * self.height

    def coords(self) -> Iterator[HexCoordinate]:
        """Yield every in-bounds coordinate, row by row."""
        for row in range(self.height):
            for col in range(self.width):
                yield HexCoordinate.from_offset(col, row)

    def neighbors_with_direction(self, coord: HexCoordinate) -> List[Tuple[int, HexCoordinate]]:
        """In-bounds neighbours of ``coord`` as (direction, coordinate), clockwise from East."""
        result: List[Tuple[int, HexCoordinate]] = []
        for d in range(6):
            n = self.normalize(coord.neighbor(d))
            if self.in_bounds(n):
                result.append((d, n))
        return result

    def neighbors(self, coord: HexCoordinate) -> List[HexCoordinate]:
        return [n for _, n in self.neighbors_with_direction(coord)]

    def distance(self, a: HexCoordinate, b: HexCoordinate) -> int:
        """Lattice distance, taking the short way across the seam when wrapping."""
        a = self.normalize(a)
        b = self.normalize(b)
        if not self.wrap:
            return a.distance(b)
        return min(
            a.distance(HexCoordinate(b.q + shift * self.width, b.r))
            for shift in (-1, 0, 1)
        )

    def direction_between(self, a: HexCoordinate, b: HexCoordinate) -> Optional[int]:
        """Direction from ``a`` to the adjacent ``b``, or None if they are not adjacent."""
        b = self.normalize(b)
        for d in range(6):
            if self.normalize(a.neighbor(d)) == b:
                return d
        return None

    def latitude(self, coord: HexCoordinate) -> float:
        """Latitude in degrees at the tile's row: +90 above the top row, -90 below the bottom."""
        _, row = coord.to_offset()
        return 90.0 - 180.0 * (row + 0.5) / self.height


__all__ = [
    "DIRECTION_NAMES",
    "HEX_DIRECTIONS",
    "HexCoordinate",
    "HexGrid",
    "opposite",
]
