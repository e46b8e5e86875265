"""Tile — a single cell of the world grid.

A tile holds its terrain and humidity.  Plants are stored outside the
grid; the tile only keeps the id of the plant occupying it so the
renderer and the lifecycle code can find it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ecosystem.world.terrain import Terrain


@dataclass
class Tile:
    """A single tile in the world grid.

    Attributes:
        x: Column position.
        y: Row position (row 0 is the bottom of the world).
        terrain: Material at this location.
        humidity: Water content, normally 0.0-1.0.
        plant_id: Id of the plant occupying this tile, if any.
    """

    x: int
    y: int
    terrain: Terrain = Terrain.AIR
    humidity: float = 0.0
    plant_id: int | None = None

    @property
    def is_air(self) -> bool:
        return self.terrain is Terrain.AIR

    @property
    def is_solid(self) -> bool:
        return self.terrain.is_solid

    @property
    def is_water(self) -> bool:
        return self.terrain.is_water
