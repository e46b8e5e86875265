"""Plant -- a rooted (or floating) organism that grows, flowers, and seeds.

Each tick a plant runs through a small state machine:

- **Support**: terrestrial plants need a solid tile beneath them and die
  the moment it goes away.  Aquatic plants ride the water surface,
  moving to whichever tile currently holds the top of their column.
- **Drinking**: when the internal reservoir drops below the species'
  desired humidity the plant pulls water out of its ground tile.
- **Happiness**: how far the ground humidity is from what the species
  wants decides whether health regenerates, holds, or decays.
- **Growth**: a perfectly healthy plant counts down a randomised
  growth timer.  Each time it fires the plant grows a tile taller
  until it reaches its adult height, then starts dropping seeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

    from ecosystem.particles.seed import Seed
    from ecosystem.world.grid import Grid
    from ecosystem.world.tile import Tile

from ecosystem.flora.plant_types import PlantProfile, PlantType

# -- Constants ---------------------------------------------------------------

_HAPPY_BAND = 0.15  # humidity difference below which health regenerates
_NEUTRAL_BAND = 0.4  # below this health holds steady; above it decays
_DYING_RATE = 0.1  # health lost per second while unhappy
_AQUATIC_STRANDED = 0.8  # humidity difference for an aquatic plant out of water
_GROWTH_HEALTH = 0.99  # minimum health for the growth timer to run
_GROWTH_WATER_COST = 0.1
_SEED_SPEED_X = (20.0, 60.0)  # world units / s, random direction
_SEED_SPEED_Y = (60.0, 100.0)  # world units / s, upward


@dataclass
class Plant:
    """A single plant.

    Attributes:
        plant_type: Species of this plant.
        x: Column of the tile the plant stands in.
        y: Row of the tile the plant stands in (its base).
        size: Current height in tiles, 1..mature_height.
        mature_height: Adult height, drawn once when the plant sprouts.
        health: Vitality in 0.0-1.0 (dies at 0).
        water: Internal water reservoir.  Not clamped; it can run
            negative when growth costs more than the plant has drunk.
        growth_timer: Seconds until the next growth event.
        is_mature: Whether the plant has reached its adult height.
        plant_id: Identifier the occupied tile refers back to.
    """

    plant_type: PlantType
    x: int
    y: int
    size: int = 1
    mature_height: int = 1
    health: float = 1.0
    water: float = 0.0
    growth_timer: float = 0.0
    is_mature: bool = False
    plant_id: int = -1

    @property
    def profile(self) -> PlantProfile:
        return self.plant_type.profile

    @property
    def is_alive(self) -> bool:
        """Return True if this plant is still alive."""
        return self.health > 0

    @classmethod
    def from_type(
        cls,
        plant_type: PlantType,
        x: int,
        y: int,
        rng: Generator,
    ) -> Plant:
        """Create a seedling with a randomly drawn adult height.

        Args:
            plant_type: Species to create.
            x: Column of the tile the plant will stand in.
            y: Row of the tile the plant will stand in.
            rng: Seeded random generator.

        Returns:
            A new Plant of size 1 with full health and an empty reservoir.
        """
        profile = plant_type.profile
        lo, hi = profile.mature_height
        return cls(
            plant_type=plant_type,
            x=x,
            y=y,
            mature_height=int(rng.integers(lo, hi + 1)),
            growth_timer=_roll_growth_timer(profile, rng),
        )

    def ground_tile(self, grid: Grid) -> Tile | None:
        """Return the tile the plant drinks from.

        Aquatic plants drink from the water tile they float in;
        terrestrial plants from the tile their roots sit in, below them.
        """
        if self.profile.aquatic:
            return grid.tile_at(self.x, self.y)
        return grid.tile_at(self.x, self.y - 1)

    def update(self, grid: Grid, rng: Generator, dt: float) -> Seed | None:
        """Advance the plant by one tick.

        Args:
            grid: The world grid.
            rng: Seeded random generator.
            dt: Elapsed seconds.

        Returns:
            A newly released Seed if a mature plant's growth timer fired,
            otherwise None.
        """
        if not self._check_support(grid):
            self.health = 0.0
            return None

        ground = self.ground_tile(grid)
        if ground is None:
            self.health = 0.0
            return None

        self._drink(grid, ground, dt)
        self._update_health(ground, dt)
        if not self.is_alive or self.health < _GROWTH_HEALTH:
            return None
        return self._grow(grid, rng, dt)

    # -- Stages ----------------------------------------------------------------

    def _check_support(self, grid: Grid) -> bool:
        """Validate (and for aquatic plants, refresh) the plant's position."""
        tile = grid.tile_at(self.x, self.y)
        if tile is None or tile.is_solid:
            return False

        if not self.profile.aquatic:
            support = grid.tile_at(self.x, self.y - 1)
            return support is not None and support.is_solid

        # Follow the water surface; stranded plants stay where they are
        start = self.y
        if not tile.is_water:
            below = grid.below(tile)
            if below is None or not below.is_water:
                return True
            start = below.y
        row = grid.surface_row(self.x, start)
        if row != self.y:
            target = grid.tiles[row][self.x]
            if target.plant_id is None:
                if tile.plant_id == self.plant_id:
                    tile.plant_id = None
                target.plant_id = self.plant_id
                self.y = row
        return True

    def _drink(self, grid: Grid, ground: Tile, dt: float) -> None:
        profile = self.profile
        self.water -= profile.thirst * dt
        deficit = profile.desired_humidity - self.water
        if deficit <= 0:
            return
        amount = min(deficit, ground.humidity) * dt
        if amount > 0:
            grid.modify_humidity(ground, -amount)
            self.water += amount

    def _update_health(self, ground: Tile, dt: float) -> None:
        if self.profile.aquatic:
            difference = 0.0 if ground.is_water else _AQUATIC_STRANDED
        else:
            difference = abs(ground.humidity - self.profile.desired_humidity)

        if difference < _HAPPY_BAND:
            self.health = min(1.0, self.health + dt)
        elif difference >= _NEUTRAL_BAND:
            self.health = max(0.0, self.health - _DYING_RATE * dt)

    def _grow(self, grid: Grid, rng: Generator, dt: float) -> Seed | None:
        self.growth_timer -= dt
        if self.growth_timer > 0:
            return None

        self.growth_timer = _roll_growth_timer(self.profile, rng)
        self.water -= _GROWTH_WATER_COST

        if self.is_mature:
            return self._release_seed(grid, rng)
        if self.size < self.mature_height:
            self.size += 1
        # Checked after growing so a height-1 plant matures on its first step
        if self.size >= self.mature_height:
            self.size = self.mature_height
            self.is_mature = True
        return None

    def _release_seed(self, grid: Grid, rng: Generator) -> Seed:
        from ecosystem.particles.seed import Seed

        direction = 1.0 if rng.random() < 0.5 else -1.0
        return Seed(
            plant_type=self.plant_type,
            x=(self.x + 0.5) * grid.tile_size,
            y=(self.y + self.size) * grid.tile_size,
            dx=direction * float(rng.uniform(*_SEED_SPEED_X)),
            dy=float(rng.uniform(*_SEED_SPEED_Y)),
            life=self.profile.seed_life,
        )


def _roll_growth_timer(profile: PlantProfile, rng: Generator) -> float:
    lo, hi = profile.growth_time
    return float(rng.uniform(lo, hi))
