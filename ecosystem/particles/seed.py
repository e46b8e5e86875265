"""Seed -- a falling, floating, or resting particle that may sprout.

Seeds fall under gravity through air, float on open water, and come to
rest on solid ground.  While they wait they age; once their life runs
out (or they get buried) they rot away.  A seed sitting somewhere its
species can grow has a small chance each tick of germinating into a
Plant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

    from ecosystem.world.grid import Grid
    from ecosystem.world.tile import Tile

from ecosystem.flora.plant import Plant
from ecosystem.flora.plant_types import PlantType

DEFAULT_GRAVITY = 98.0  # world units / s^2
DEFAULT_TERMINAL_VELOCITY = 150.0  # world units / s
DEFAULT_GERMINATION_CHANCE = 0.01  # per tick while eligible
DEFAULT_DRYNESS_THRESHOLD = 0.2  # water shallower than this counts as ground


@dataclass
class Seed:
    """A single seed particle.

    Attributes:
        plant_type: Species the seed grows into.
        x: Horizontal position in world units.
        y: Vertical position of the seed's base in world units.
        dx: Horizontal velocity.
        dy: Vertical velocity (positive is up).
        life: Seconds left before the seed rots.
        alive: Cleared when the seed rots, is buried, leaves the world,
            or germinates.
    """

    plant_type: PlantType
    x: float
    y: float
    dx: float = 0.0
    dy: float = 0.0
    life: float = 10.0
    alive: bool = True

    @classmethod
    def from_type(cls, plant_type: PlantType, x: float, y: float) -> Seed:
        """Create a motionless seed with its species' full lifespan."""
        return cls(plant_type=plant_type, x=x, y=y, life=plant_type.profile.seed_life)

    def update(
        self,
        grid: Grid,
        rng: Generator,
        dt: float,
        *,
        gravity: float = DEFAULT_GRAVITY,
        terminal_velocity: float = DEFAULT_TERMINAL_VELOCITY,
        germination_chance: float = DEFAULT_GERMINATION_CHANCE,
        dryness_threshold: float = DEFAULT_DRYNESS_THRESHOLD,
    ) -> Plant | None:
        """Advance the seed by one tick.

        Args:
            grid: The world grid.
            rng: Seeded random generator (used for germination).
            dt: Elapsed seconds.
            gravity: Downward acceleration while in air.
            terminal_velocity: Maximum falling speed.
            germination_chance: Probability of sprouting per eligible tick.
            dryness_threshold: Humidity below which a water tile is shallow
                enough for terrestrial seeds to root through.

        Returns:
            The Plant the seed germinated into, or None.  The caller is
            responsible for registering the plant.
        """
        self.life -= dt
        if self.life <= 0:
            self.alive = False
            return None

        prev_x = self.x
        self.x += self.dx * dt
        self.y += self.dy * dt

        tile = grid.contact_tile(self.x, self.y)
        if tile is None:
            self.alive = False
            return None

        if tile.is_solid and self.dx:
            # Hit a wall face: stay in the column the seed came from
            side = grid.contact_tile(prev_x, self.y)
            if side is not None and side is not tile and not side.is_solid:
                self.x = prev_x
                self.dx = 0.0
                tile = side

        if tile.is_air:
            self.dy = max(self.dy - gravity * dt, -terminal_velocity)
            return None

        if tile.is_solid:
            # Water pooled on top of the ground the seed rests on
            body = grid.above(tile)
            if body is not None and body.is_water:
                tile = body

        self.dx = 0.0
        self.dy = 0.0
        if tile.is_water:
            self.y = grid.surface_height(tile.x, tile.y) * grid.tile_size
            tile = grid.contact_tile(self.x, self.y) or tile
        else:
            self.y = (tile.y + 1) * grid.tile_size

        above = grid.above(tile)
        if above is not None and above.is_solid:
            self.alive = False
            return None

        cell = self._germination_cell(grid, tile, dryness_threshold)
        if cell is None or cell.plant_id is not None:
            return None
        if rng.random() >= germination_chance:
            return None

        self.alive = False
        return Plant.from_type(self.plant_type, cell.x, cell.y, rng)

    def _germination_cell(
        self,
        grid: Grid,
        resting: Tile,
        dryness_threshold: float,
    ) -> Tile | None:
        """Return the tile a plant would stand in, or None if it can't grow here.

        Args:
            grid: The world grid.
            resting: Non-air tile the seed is resting on or floating in.
            dryness_threshold: Shallow-water limit for terrestrial seeds.
        """
        if self.plant_type.profile.aquatic:
            return resting if resting.is_water else None

        if resting.is_solid:
            cell = grid.above(resting)
            return cell if cell is not None and not cell.is_solid else None

        # Terrestrial seed on a drying puddle roots into the bed beneath it
        if resting.humidity < dryness_threshold:
            ground = grid.below(resting)
            if ground is not None and ground.is_solid:
                return resting
        return None
