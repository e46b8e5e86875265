"""Droplet -- a falling rain particle that waters whatever it lands on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecosystem.world.grid import Grid

DEFAULT_DROPLET_SPEED = 120.0  # world units / s
DEFAULT_DROPLET_WATER = 0.1


@dataclass
class Droplet:
    """A single falling water droplet.

    Droplets move at constant velocity; they are not accelerated by
    gravity.

    Attributes:
        x: Horizontal position in world units.
        y: Vertical position in world units.
        dx: Horizontal velocity.
        dy: Vertical velocity (negative is down).
        alive: Cleared once the droplet lands or leaves the world.
    """

    x: float
    y: float
    dx: float = 0.0
    dy: float = -DEFAULT_DROPLET_SPEED
    alive: bool = True

    def update(
        self,
        grid: Grid,
        dt: float,
        *,
        water: float = DEFAULT_DROPLET_WATER,
    ) -> None:
        """Move the droplet and deposit its water if it hit something.

        The struck tile soaks up as much as its remaining capacity and
        porosity allow; the rest pools in the tile above it.

        Args:
            grid: The world grid.
            dt: Elapsed seconds.
            water: Humidity carried by the droplet.
        """
        self.x += self.dx * dt
        self.y += self.dy * dt

        tile = grid.tile_at_world(self.x, self.y)
        if tile is None:
            self.alive = False
            return
        if tile.is_air:
            return

        capacity = max(0.0, 1.0 - tile.humidity)
        absorbed = min(water, capacity) * tile.terrain.porosity
        if absorbed > 0:
            grid.modify_humidity(tile, absorbed)

        leftover = water - absorbed
        above = grid.above(tile)
        if leftover > 0 and above is not None:
            grid.modify_humidity(above, leftover)
        self.alive = False
