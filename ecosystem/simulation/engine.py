"""SimulationEngine — the main tick loop.

Owns all top-level simulation state and advances it in the canonical
tick order:

1. Droplets (fall, water the ground on contact)
2. Seeds (fall/float/rest, rot, germinate)
3. Humidity transport (springs, evaporation, flow)
4. Plants (support, drinking, health, growth, seeding)
5. Cleanup (drop dead particles, unregister dead plants)

Player interactions are applied between ticks through
``apply_interaction``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np
from numpy.random import Generator

from ecosystem.flora.plant import Plant
from ecosystem.flora.plant_types import PlantType
from ecosystem.particles.droplet import Droplet
from ecosystem.particles.seed import Seed
from ecosystem.simulation.config import SimulationConfig
from ecosystem.world.grid import HUMIDITY_EPSILON, Grid
from ecosystem.world.humidity import update_humidity
from ecosystem.world.terrain import Terrain
from ecosystem.world.tile import Tile

logger = logging.getLogger(__name__)


class Tool(Enum):
    """Player interactions that can be applied at a world position."""

    WATER = "water"
    SPRING = "spring"
    PLANT = "plant"
    SOIL = "soil"
    ROCK = "rock"
    DIG = "dig"


_TERRAIN_TOOLS: dict[Tool, Terrain] = {
    Tool.SPRING: Terrain.SPRING,
    Tool.SOIL: Terrain.SOIL,
    Tool.ROCK: Terrain.ROCK,
}


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        grid: The tile grid.
        droplets: Falling rain droplets.
        seeds: Seeds that have not yet sprouted or rotted.
        plants: Living plants keyed by plant id.
        rng: Master seeded random generator.
        tick: Number of ticks advanced so far.
        elapsed: Simulated seconds advanced so far.
    """

    config: SimulationConfig
    grid: Grid = field(init=False)
    droplets: list[Droplet] = field(init=False, default_factory=list)
    seeds: list[Seed] = field(init=False, default_factory=list)
    plants: dict[int, Plant] = field(init=False, default_factory=dict)
    rng: Generator = field(init=False)
    tick: int = 0
    elapsed: float = 0.0
    _next_plant_id: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        """Build the RNG and a freshly generated world from config."""
        self.regenerate()

    def regenerate(
        self,
        width: int | None = None,
        height: int | None = None,
        seed: int | None = None,
    ) -> None:
        """Replace the world with a newly generated one.

        Args:
            width: Grid columns (defaults to the config value).
            height: Grid rows (defaults to the config value).
            seed: RNG seed (defaults to the config value).
        """
        cfg = self.config
        width = cfg.world_width if width is None else width
        height = cfg.world_height if height is None else height
        seed = cfg.seed if seed is None else seed

        self.rng = np.random.default_rng(seed)
        self.grid = Grid.generate(
            width,
            height,
            self.rng,
            tile_size=cfg.tile_size,
            max_depth=cfg.max_depth,
            soil_fraction=cfg.soil_fraction,
        )
        self.droplets = []
        self.seeds = []
        self.plants = {}
        self._next_plant_id = 0
        self.tick = 0
        self.elapsed = 0.0
        logger.info("Generated %dx%d world (seed %d)", width, height, seed)

    # -- Tick ----------------------------------------------------------------

    def step(self, dt: float) -> None:
        """Advance the simulation by ``dt`` seconds.

        Follows the canonical tick order:
        1. Droplets
        2. Seeds
        3. Humidity
        4. Plants
        5. Cleanup

        Args:
            dt: Elapsed seconds since the previous step.
        """
        if dt <= 0:
            return
        cfg = self.config

        # 1. Droplets
        for droplet in self.droplets:
            droplet.update(self.grid, dt, water=cfg.droplet_water)

        # 2. Seeds
        for seed in self.seeds:
            if not seed.alive:
                continue
            sprout = seed.update(
                self.grid,
                self.rng,
                dt,
                gravity=cfg.gravity,
                terminal_velocity=cfg.terminal_velocity,
                germination_chance=cfg.germination_chance,
                dryness_threshold=cfg.dryness_threshold,
            )
            if sprout is not None:
                self.add_plant(sprout)

        # 3. Humidity
        update_humidity(
            self.grid,
            dt,
            evaporation_rate=cfg.evaporation_rate,
            spring_inflow=cfg.spring_inflow,
            lateral_damping=cfg.lateral_damping,
            seep_rate=cfg.seep_rate,
        )

        # 4. Plants (snapshot: seeds released now are handled next tick)
        released: list[Seed] = []
        for plant in list(self.plants.values()):
            seed = plant.update(self.grid, self.rng, dt)
            if seed is not None:
                released.append(seed)

        # 5. Cleanup
        self.droplets = [d for d in self.droplets if d.alive]
        self.seeds = [s for s in self.seeds if s.alive] + released
        self.remove_dead_plants()

        self.tick += 1
        self.elapsed += dt

    def run(self, ticks: int, dt: float = 1.0 / 60.0) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
            dt: Seconds per tick.
        """
        for _ in range(ticks):
            self.step(dt)

    # -- Plants --------------------------------------------------------------

    def add_plant(self, plant: Plant) -> bool:
        """Give a plant an id and register it on its tile.

        Args:
            plant: The plant to add.

        Returns:
            False if the tile is missing or already occupied.
        """
        tile = self.grid.tile_at(plant.x, plant.y)
        if tile is None or tile.plant_id is not None:
            return False
        plant.plant_id = self._next_plant_id
        self._next_plant_id += 1
        tile.plant_id = plant.plant_id
        self.plants[plant.plant_id] = plant
        return True

    def remove_dead_plants(self) -> list[Plant]:
        """Remove and return plants whose health has run out.

        Returns:
            List of plants that were removed.
        """
        dead = [p for p in self.plants.values() if not p.is_alive]
        for plant in dead:
            tile = self.grid.tile_at(plant.x, plant.y)
            if tile is not None and tile.plant_id == plant.plant_id:
                tile.plant_id = None
            del self.plants[plant.plant_id]
        return dead

    def plant_at(self, x: int, y: int) -> Plant | None:
        """Return the plant occupying tile ``(x, y)``, if any."""
        tile = self.grid.tile_at(x, y)
        if tile is None or tile.plant_id is None:
            return None
        return self.plants.get(tile.plant_id)

    # -- Interaction ---------------------------------------------------------

    def apply_interaction(
        self,
        tool: Tool,
        world_x: float,
        world_y: float,
        plant_type: PlantType | None = None,
    ) -> bool:
        """Apply a player tool at a world position.

        Args:
            tool: Which interaction to perform.
            world_x: Horizontal position in world units.
            world_y: Vertical position in world units.
            plant_type: Species to sow when ``tool`` is ``Tool.PLANT``.

        Returns:
            True if something changed; False for out-of-bounds positions.
        """
        tile = self.grid.tile_at_world(world_x, world_y)
        if tile is None:
            return False

        if tool is Tool.WATER:
            self.droplets.append(
                Droplet(x=world_x, y=world_y, dy=-self.config.droplet_speed),
            )
        elif tool is Tool.PLANT:
            if plant_type is None:
                return False
            self.seeds.append(Seed.from_type(plant_type, world_x, world_y))
        elif tool is Tool.DIG:
            self._dig(tile)
        else:
            self.grid.set_terrain(tile, _TERRAIN_TOOLS[tool])
        return True

    def _dig(self, tile: Tile) -> None:
        if tile.humidity > HUMIDITY_EPSILON:
            self.grid.set_terrain(tile, Terrain.WATER)
        else:
            self.grid.set_terrain(tile, Terrain.AIR)

    # -- Persistence ---------------------------------------------------------

    def save(self, path: str | Path) -> bool:
        """Write the world to a YAML save file.

        Returns:
            True on success; failures are logged and leave no partial state.
        """
        from ecosystem.simulation.persistence import save_world

        return save_world(self, path)

    def load(self, path: str | Path) -> bool:
        """Replace the world with the contents of a save file.

        The current world is kept untouched if the file cannot be read.

        Returns:
            True if the world was replaced.
        """
        from ecosystem.simulation.persistence import load_world

        state = load_world(path, tile_size=self.config.tile_size)
        if state is None:
            return False

        self.grid = state.grid
        self.droplets = state.droplets
        self.seeds = state.seeds
        self.tick = 0
        self.elapsed = 0.0
        self.plants = {}
        self._next_plant_id = 0
        for plant in state.plants:
            if not self.add_plant(plant):
                logger.warning(
                    "Dropping %s at (%d, %d): tile unavailable",
                    plant.plant_type.value,
                    plant.x,
                    plant.y,
                )
        return True


def generate_world(
    width: int,
    height: int,
    seed: int,
    config: SimulationConfig | None = None,
) -> SimulationEngine:
    """Create an engine holding a fresh world and no particles or plants.

    Args:
        width: Grid columns.
        height: Grid rows.
        seed: RNG seed.
        config: Remaining parameters (defaults if omitted).

    Returns:
        A ready-to-step SimulationEngine.
    """
    base = config or SimulationConfig()
    cfg = SimulationConfig.from_dict(
        {**vars(base), "world_width": width, "world_height": height, "seed": seed},
    )
    return SimulationEngine(config=cfg)
