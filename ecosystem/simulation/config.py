"""Config — load simulation parameters from YAML files.

All tunable constants (world size, humidity rates, particle physics,
germination odds) live in YAML and are parsed into a typed dataclass
here.  This keeps the simulation core data-driven and easy to
experiment with.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        world_width: Number of grid columns.
        world_height: Number of grid rows.
        tile_size: World units per tile edge.
        max_depth: Exclusive upper bound for generated ground depth.
        soil_fraction: Share of underground tiles generated as soil
            rather than rock.
        evaporation_rate: Fraction of humidity lost per second by tiles
            open to the air.
        spring_inflow: Humidity added per second by each spring.
        lateral_damping: Sideways spreading factor for open water.
        seep_rate: Exchange factor for porous ground.
        droplet_speed: Falling speed of rain droplets (world units / s).
        droplet_water: Humidity carried by one droplet.
        gravity: Downward acceleration applied to seeds in air.
        terminal_velocity: Maximum seed falling speed.
        germination_chance: Per-tick probability an eligible seed sprouts.
        dryness_threshold: Water humidity below which terrestrial seeds
            may root through a puddle.
    """

    seed: int = 42
    world_width: int = 40
    world_height: int = 30
    tile_size: float = 16.0

    # World generation
    max_depth: int = 15
    soil_fraction: float = 0.7

    # Humidity transport
    evaporation_rate: float = 0.12
    spring_inflow: float = 0.5
    lateral_damping: float = 0.2
    seep_rate: float = 0.02

    # Particles
    droplet_speed: float = 120.0
    droplet_water: float = 0.1
    gravity: float = 98.0
    terminal_velocity: float = 150.0

    # Plants
    germination_chance: float = 0.01
    dryness_threshold: float = 0.2

    @classmethod
    def from_dict(cls, data: dict) -> SimulationConfig:
        """Build a config from a mapping, ignoring unknown keys.

        Args:
            data: Parsed YAML mapping; missing keys keep their defaults.

        Returns:
            A populated SimulationConfig instance.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)
