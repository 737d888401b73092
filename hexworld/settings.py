from __future__ import annotations

"""Configuration dataclass for world generation."""

import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from .errors import ConfigurationError

_SEED_LIMIT = 2 ** 64

_INT_FIELDS = ("seed", "width", "height", "evolution_steps", "interpolation_neighbors", "max_river_length")
_FLOAT_FIELDS = (
    "sample_density",
    "max_slope",
    "erodibility_power",
    "fault_scale",
    "sea_level",
    "hill_elevation",
    "mountain_elevation",
    "hills_share",
    "mountains_share",
    "woods_chance",
    "oasis_chance",
    "river_source_chance",
)


@dataclass
class WorldSettings:
    """
    Every knob of the generation pipeline.

    Two peers holding equal settings regenerate identical maps, so this is the
    only state that needs sharing in a multiplayer session.
    """

    seed: int = 0
    width: int = 40
    height: int = 24
    wrap: bool = False
    # Share of the map that ends up as land; drawn from the seed when None.
    land_ratio: Optional[float] = None
    # Landscape simulation: sample points per tile, evolution iterations,
    # steepest allowed slope (radians), the erodibility contrast and how far
    # (in hex radii) fault displacement bends the land/sea boundary.
    sample_density: float = 4.0
    evolution_steps: int = 8
    max_slope: float = 1.57
    erodibility_power: float = 4.0
    fault_scale: float = 6.0
    interpolation_neighbors: int = 6
    # Normalized elevation thresholds. Hills and mountains start at these
    # floors, raised where needed so they cover at most the given share of land.
    sea_level: float = 0.02
    hill_elevation: float = 0.2
    mountain_elevation: float = 0.55
    hills_share: float = 0.3
    mountains_share: float = 0.08
    woods_chance: float = 0.2
    oasis_chance: float = 0.2
    river_source_chance: float = 0.25
    max_river_length: int = 32

    def validate(self) -> None:
        """
        Reject settings the pipeline cannot honour.

        Raises:
            ConfigurationError: On the first invalid field found.
        """
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.wrap, bool):
            raise ConfigurationError(f"wrap must be a bool, got {self.wrap!r}")
        for name in _FLOAT_FIELDS + (("land_ratio",) if self.land_ratio is not None else ()):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(f"map size must be at least 1x1, got {self.width}x{self.height}")
        if self.wrap and self.width < 3:
            raise ConfigurationError("a wrapping map needs at least 3 columns")
        if not 0 <= self.seed < _SEED_LIMIT:
            raise ConfigurationError(f"seed must lie in [0, 2**64), got {self.seed}")
        for name in ("woods_chance", "oasis_chance", "river_source_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be a probability, got {value}")
        if self.land_ratio is not None and not 0.0 < self.land_ratio < 1.0:
            raise ConfigurationError(f"land_ratio must lie in (0, 1), got {self.land_ratio}")
        if not 0.0 < self.sea_level < self.hill_elevation < self.mountain_elevation <= 1.0:
            raise ConfigurationError(
                "elevation thresholds must satisfy 0 < sea_level < hill_elevation < mountain_elevation <= 1, "
                f"got {self.sea_level}, {self.hill_elevation}, {self.mountain_elevation}"
            )
        if not 0.0 <= self.mountains_share <= self.hills_share <= 1.0:
            raise ConfigurationError(
                "relief shares must satisfy 0 <= mountains_share <= hills_share <= 1, "
                f"got {self.mountains_share}, {self.hills_share}"
            )
        if self.sample_density <= 0:
            raise ConfigurationError(f"sample_density must be positive, got {self.sample_density}")
        if self.evolution_steps < 1:
            raise ConfigurationError("evolution_steps must be at least 1")
        if not 0.0 < self.max_slope <= math.pi / 2:
            raise ConfigurationError(f"max_slope must lie in (0, pi/2], got {self.max_slope}")
        if self.erodibility_power <= 0:
            raise ConfigurationError("erodibility_power must be positive")
        if self.fault_scale < 0:
            raise ConfigurationError(f"fault_scale must not be negative, got {self.fault_scale}")
        if self.interpolation_neighbors < 1:
            raise ConfigurationError("interpolation_neighbors must be at least 1")
        if self.max_river_length < 1:
            raise ConfigurationError("max_river_length must be at least 1")

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "WorldSettings":
        """Rebuild settings shared by a peer; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"unknown settings: {', '.join(sorted(unknown))}")
        settings = cls(**data)
        settings.validate()
        return settings


__all__ = ["WorldSettings"]
