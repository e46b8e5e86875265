"""Tests for ecosystem.simulation.persistence — YAML save/load."""

import logging
from pathlib import Path

import pytest
import yaml

from ecosystem.flora.plant import Plant
from ecosystem.flora.plant_types import PlantType
from ecosystem.particles.droplet import Droplet
from ecosystem.particles.seed import Seed
from ecosystem.simulation.config import SimulationConfig
from ecosystem.simulation.engine import SimulationEngine, Tool
from ecosystem.simulation.persistence import restore, snapshot
from ecosystem.world.terrain import Terrain


@pytest.fixture
def busy_engine() -> SimulationEngine:
    """A small world with a plant, a seed, and a droplet in flight."""
    config = SimulationConfig(seed=11, world_width=10, world_height=8)
    engine = SimulationEngine(config=config)
    ts = engine.grid.tile_size
    for x in range(10):
        engine.apply_interaction(Tool.SOIL, x * ts + 1, 1)
    engine.add_plant(
        Plant(
            plant_type=PlantType.FLOWER,
            x=3,
            y=7,
            size=2,
            mature_height=3,
            health=0.75,
            water=-0.125,
            growth_timer=1.5,
        ),
    )
    engine.seeds.append(
        Seed(plant_type=PlantType.LILY, x=50.0, y=100.0, dx=3.0, dy=-7.5, life=4.0),
    )
    engine.droplets.append(Droplet(x=70.0, y=110.0, dy=-120.0))
    return engine


class TestRoundTrip:
    """Saving then loading reproduces the world exactly."""

    def test_save_and_load(
        self,
        busy_engine: SimulationEngine,
        tmp_path: Path,
    ) -> None:
        path = tmp_path / "world.yaml"
        assert busy_engine.save(path)

        small = SimulationConfig(seed=1, world_width=4, world_height=4)
        other = SimulationEngine(config=small)
        assert other.load(path)

        assert (other.grid.width, other.grid.height) == (10, 8)
        tiles = zip(busy_engine.grid.iter_tiles(), other.grid.iter_tiles(), strict=True)
        for a, b in tiles:
            assert (a.x, a.y, a.terrain) == (b.x, b.y, b.terrain)
            assert a.humidity == b.humidity

        (plant,) = other.plants.values()
        assert plant.plant_type is PlantType.FLOWER
        assert (plant.x, plant.y, plant.size, plant.mature_height) == (3, 7, 2, 3)
        assert (plant.health, plant.water, plant.growth_timer) == (0.75, -0.125, 1.5)
        assert plant.is_mature is False
        assert other.grid.tiles[7][3].plant_id == plant.plant_id

        (seed,) = other.seeds
        assert (seed.plant_type, seed.x, seed.y, seed.dx, seed.dy, seed.life) == (
            PlantType.LILY,
            50.0,
            100.0,
            3.0,
            -7.5,
            4.0,
        )
        (drop,) = other.droplets
        assert (drop.x, drop.y, drop.dx, drop.dy) == (70.0, 110.0, 0.0, -120.0)

    def test_load_restarts_clock(
        self,
        busy_engine: SimulationEngine,
        tmp_path: Path,
    ) -> None:
        path = tmp_path / "world.yaml"
        assert busy_engine.save(path)
        busy_engine.run(ticks=5, dt=0.1)
        assert busy_engine.tick == 5

        assert busy_engine.load(path)
        assert busy_engine.tick == 0
        assert busy_engine.elapsed == 0.0

    def test_snapshot_is_plain_yaml(self, busy_engine: SimulationEngine) -> None:
        text = yaml.safe_dump(snapshot(busy_engine))
        data = yaml.safe_load(text)
        assert data["width"] == 10
        assert len(data["tiles"]) == 80
        assert data["plants"][0]["type"] == "flower"


class TestForgivingLoad:
    """Missing or malformed fields fall back to defaults."""

    def test_missing_fields_use_defaults(self) -> None:
        state = restore(
            {
                "width": 3,
                "height": 2,
                "tiles": [{"x": 0, "y": 0, "terrain": "soil"}],
                "plants": [{"type": "grass", "x": 0, "y": 1}],
            },
        )
        assert (state.grid.width, state.grid.height) == (3, 2)
        tile = state.grid.tiles[0][0]
        assert tile.terrain is Terrain.SOIL
        assert tile.humidity == 0.0
        (plant,) = state.plants
        assert plant.is_mature is False
        assert plant.size == 1
        assert plant.health == 1.0

    def test_bad_values_fall_back(self) -> None:
        state = restore(
            {
                "width": "wide",
                "tiles": [
                    {"x": 1, "y": 1, "terrain": "lava", "humidity": 0.4},
                    {"x": 2, "y": 1, "terrain": "soil", "humidity": "damp"},
                    {"x": 99, "y": 99, "terrain": "rock"},
                    "not a tile",
                ],
                "seeds": [{"type": "oak"}, {"type": "grass"}],
                "droplets": "nope",
            },
        )
        assert state.grid.width == 40
        assert state.grid.tiles[1][1].terrain is Terrain.AIR
        assert state.grid.tiles[1][1].humidity == 0.0
        assert state.grid.tiles[1][2].humidity == 0.0
        assert len(state.seeds) == 1
        assert state.seeds[0].life == PlantType.GRASS.profile.seed_life
        assert state.droplets == []

    def test_empty_document(self) -> None:
        state = restore({})
        assert (state.grid.width, state.grid.height) == (40, 30)
        assert all(tile.is_air for tile in state.grid.iter_tiles())

    def test_conflicting_plants_keep_first(self, tmp_path: Path) -> None:
        path = tmp_path / "dupes.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "width": 2,
                    "height": 2,
                    "plants": [
                        {"type": "grass", "x": 0, "y": 1},
                        {"type": "cactus", "x": 0, "y": 1},
                    ],
                },
            ),
        )
        config = SimulationConfig(world_width=4, world_height=4)
        engine = SimulationEngine(config=config)
        assert engine.load(path)
        (plant,) = engine.plants.values()
        assert plant.plant_type is PlantType.GRASS


class TestFailures:
    """I/O failures abort without touching the running world."""

    def test_missing_file(
        self,
        busy_engine: SimulationEngine,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        grid = busy_engine.grid
        with caplog.at_level(logging.ERROR):
            assert not busy_engine.load(tmp_path / "missing.yaml")
        assert busy_engine.grid is grid
        assert len(busy_engine.plants) == 1
        assert "Could not load" in caplog.text

    def test_invalid_yaml(
        self,
        busy_engine: SimulationEngine,
        tmp_path: Path,
    ) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("tiles: [unclosed\n")
        grid = busy_engine.grid
        assert not busy_engine.load(path)
        assert busy_engine.grid is grid

    def test_unwritable_destination(
        self,
        busy_engine: SimulationEngine,
        tmp_path: Path,
    ) -> None:
        assert not busy_engine.save(tmp_path / "no_such_dir" / "world.yaml")
