"""Persistence — save and load worlds as YAML documents.

A save file is a flat listing of every tile followed by the plants,
seeds, and droplets living on top of them::

    version: 1
    width: 40
    height: 30
    tiles:
      - {x: 0, y: 0, terrain: soil, humidity: 0.42}
    plants:
      - {type: grass, x: 3, y: 7, size: 1, mature_height: 2, ...}
    seeds:
      - {type: lily, x: 120.0, y: 96.0, dx: 0.0, dy: 0.0, life: 4.5}
    droplets:
      - {x: 64.0, y: 300.0, dx: 0.0, dy: -120.0}

Loading is forgiving: every missing or malformed field falls back to a
default so a damaged file still produces a usable world.  Only I/O and
YAML syntax errors abort a load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ecosystem.flora.plant import Plant
from ecosystem.flora.plant_types import PlantType
from ecosystem.particles.droplet import Droplet
from ecosystem.particles.seed import Seed
from ecosystem.world.grid import HUMIDITY_EPSILON, Grid
from ecosystem.world.terrain import Terrain

if TYPE_CHECKING:
    from ecosystem.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)

SAVE_VERSION = 1
DEFAULT_WIDTH = 40
DEFAULT_HEIGHT = 30


@dataclass
class WorldState:
    """Everything needed to rebuild a running world.

    Attributes:
        grid: Tile grid with terrain and humidity restored.
        plants: Plants, not yet registered on their tiles.
        seeds: Seed particles.
        droplets: Droplet particles.
    """

    grid: Grid
    plants: list[Plant] = field(default_factory=list)
    seeds: list[Seed] = field(default_factory=list)
    droplets: list[Droplet] = field(default_factory=list)


# -- Field helpers -------------------------------------------------------------


def _float(entry: dict[str, Any], key: str, default: float = 0.0) -> float:
    try:
        return float(entry.get(key, default))
    except (TypeError, ValueError):
        return default


def _int(entry: dict[str, Any], key: str, default: int = 0) -> int:
    try:
        return int(entry.get(key, default))
    except (TypeError, ValueError):
        return default


def _bool(entry: dict[str, Any], key: str, default: bool = False) -> bool:
    value = entry.get(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list):
        logger.warning("Ignoring malformed '%s' section", key)
        return []
    return [item for item in items if isinstance(item, dict)]


# -- Snapshot --------------------------------------------------------------------


def snapshot(engine: SimulationEngine) -> dict[str, Any]:
    """Serialise an engine's world into plain Python data.

    Args:
        engine: The engine to capture.

    Returns:
        A mapping ready for ``yaml.safe_dump``.
    """
    grid = engine.grid
    return {
        "version": SAVE_VERSION,
        "width": grid.width,
        "height": grid.height,
        "tiles": [
            {
                "x": tile.x,
                "y": tile.y,
                "terrain": tile.terrain.value,
                "humidity": float(tile.humidity),
            }
            for tile in grid.iter_tiles()
        ],
        "plants": [
            {
                "type": plant.plant_type.value,
                "x": plant.x,
                "y": plant.y,
                "size": plant.size,
                "mature_height": plant.mature_height,
                "health": float(plant.health),
                "water": float(plant.water),
                "growth_timer": float(plant.growth_timer),
                "is_mature": plant.is_mature,
            }
            for plant in engine.plants.values()
        ],
        "seeds": [
            {
                "type": seed.plant_type.value,
                "x": float(seed.x),
                "y": float(seed.y),
                "dx": float(seed.dx),
                "dy": float(seed.dy),
                "life": float(seed.life),
            }
            for seed in engine.seeds
            if seed.alive
        ],
        "droplets": [
            {
                "x": float(drop.x),
                "y": float(drop.y),
                "dx": float(drop.dx),
                "dy": float(drop.dy),
            }
            for drop in engine.droplets
            if drop.alive
        ],
    }


def restore(data: dict[str, Any], *, tile_size: float = 16.0) -> WorldState:
    """Rebuild world state from a snapshot mapping.

    The grid is sized first, tiles are filled next, and plants, seeds,
    and droplets are created last.

    Args:
        data: Mapping produced by :func:`snapshot` (possibly damaged).
        tile_size: World units per tile edge.

    Returns:
        The reconstructed WorldState.
    """
    width = max(1, _int(data, "width", DEFAULT_WIDTH))
    height = max(1, _int(data, "height", DEFAULT_HEIGHT))
    grid = Grid(width=width, height=height, tile_size=tile_size)

    for entry in _entries(data, "tiles"):
        tile = grid.tile_at(_int(entry, "x", -1), _int(entry, "y", -1))
        if tile is None:
            continue
        tile.terrain = Terrain.from_name(entry.get("terrain", "air"))
        tile.humidity = min(1.0, max(0.0, _float(entry, "humidity")))
        if tile.is_air:
            tile.humidity = 0.0
        elif tile.terrain is Terrain.WATER and tile.humidity < HUMIDITY_EPSILON:
            tile.terrain = Terrain.AIR
            tile.humidity = 0.0

    state = WorldState(grid=grid)

    for entry in _entries(data, "plants"):
        plant_type = PlantType.from_name(entry.get("type", ""))
        if plant_type is None:
            logger.warning("Skipping plant of unknown type %r", entry.get("type"))
            continue
        mature_height = max(1, _int(entry, "mature_height", 1))
        state.plants.append(
            Plant(
                plant_type=plant_type,
                x=_int(entry, "x"),
                y=_int(entry, "y"),
                size=min(mature_height, max(1, _int(entry, "size", 1))),
                mature_height=mature_height,
                health=_float(entry, "health", 1.0),
                water=_float(entry, "water"),
                growth_timer=_float(entry, "growth_timer"),
                is_mature=_bool(entry, "is_mature"),
            ),
        )

    for entry in _entries(data, "seeds"):
        plant_type = PlantType.from_name(entry.get("type", ""))
        if plant_type is None:
            logger.warning("Skipping seed of unknown type %r", entry.get("type"))
            continue
        state.seeds.append(
            Seed(
                plant_type=plant_type,
                x=_float(entry, "x"),
                y=_float(entry, "y"),
                dx=_float(entry, "dx"),
                dy=_float(entry, "dy"),
                life=_float(entry, "life", plant_type.profile.seed_life),
            ),
        )

    for entry in _entries(data, "droplets"):
        state.droplets.append(
            Droplet(
                x=_float(entry, "x"),
                y=_float(entry, "y"),
                dx=_float(entry, "dx"),
                dy=_float(entry, "dy"),
            ),
        )

    return state


# -- File I/O --------------------------------------------------------------------


def save_world(engine: SimulationEngine, path: str | Path) -> bool:
    """Write an engine's world to ``path``.

    Args:
        engine: The engine to save.
        path: Destination file.

    Returns:
        True on success, False if the file could not be written.
    """
    path = Path(path)
    text = yaml.safe_dump(snapshot(engine), sort_keys=False)
    try:
        path.write_text(text)
    except OSError as e:
        logger.error("Could not save world to %s: %s", path, e)
        return False
    logger.info("Saved world to %s", path)
    return True


def load_world(path: str | Path, *, tile_size: float = 16.0) -> WorldState | None:
    """Read a world from ``path``.

    Args:
        path: Save file to read.
        tile_size: World units per tile edge.

    Returns:
        The restored WorldState, or None if the file could not be read
        or parsed.
    """
    path = Path(path)
    try:
        with path.open("r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        logger.error("Could not load world from %s: %s", path, e)
        return None
    except yaml.YAMLError as e:
        logger.error("Save file %s is not valid YAML: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Save file %s is empty or malformed; using defaults", path)
        data = {}
    if data.get("version", SAVE_VERSION) != SAVE_VERSION:
        logger.warning(
            "Save file %s has version %r, expected %d",
            path,
            data.get("version"),
            SAVE_VERSION,
        )
    logger.info("Loaded world from %s", path)
    return restore(data, tile_size=tile_size)
