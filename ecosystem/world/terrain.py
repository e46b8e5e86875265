"""Terrain — the material a tile is made of.

Each terrain variant carries a small set of static physical properties
used by humidity transport, particles, and plants.  The values live in a
plain lookup table so the simulation never needs to know about textures.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Terrain(Enum):
    """Tile material.  The value doubles as the save-file name."""

    AIR = "air"
    SOIL = "soil"
    ROCK = "rock"
    WATER = "water"
    SPRING = "spring"

    @property
    def porosity(self) -> float:
        """Rate (0.0-1.0) at which humidity passes into this terrain."""
        return TERRAIN_PROPERTIES[self].porosity

    @property
    def is_solid(self) -> bool:
        """Return True if falling objects stop here and roots can anchor."""
        return TERRAIN_PROPERTIES[self].is_solid

    @property
    def is_water(self) -> bool:
        """Return True for open water (seeds float, aquatic plants live)."""
        return TERRAIN_PROPERTIES[self].is_water

    @property
    def is_source(self) -> bool:
        """Return True if the tile produces water without limit."""
        return TERRAIN_PROPERTIES[self].is_source

    @classmethod
    def from_name(cls, name: str, default: Terrain | None = None) -> Terrain:
        """Look up a terrain by its save-file name.

        Args:
            name: Case-insensitive terrain name, e.g. ``"soil"``.
            default: Returned when the name is unknown.

        Returns:
            The matching Terrain, or ``default`` (``AIR`` if not given).
        """
        try:
            return cls(str(name).lower())
        except ValueError:
            return default if default is not None else cls.AIR


@dataclass(frozen=True)
class TerrainProperties:
    """Static per-terrain parameters.

    Attributes:
        porosity: How readily humidity is absorbed (0 blocks it entirely).
        is_solid: Blocks seeds and supports terrestrial plants.
        is_water: Open water surface.
        is_source: Inexhaustible humidity source.
    """

    porosity: float
    is_solid: bool = False
    is_water: bool = False
    is_source: bool = False


TERRAIN_PROPERTIES: dict[Terrain, TerrainProperties] = {
    Terrain.AIR: TerrainProperties(porosity=1.0),
    Terrain.SOIL: TerrainProperties(porosity=0.5, is_solid=True),
    Terrain.ROCK: TerrainProperties(porosity=0.0, is_solid=True),
    Terrain.WATER: TerrainProperties(porosity=1.0, is_water=True),
    Terrain.SPRING: TerrainProperties(porosity=1.0, is_water=True, is_source=True),
}
