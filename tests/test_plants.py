"""Tests for ecosystem.flora — plant types and the plant lifecycle."""

import pytest
from numpy.random import Generator

from conftest import build_column
from ecosystem.flora.plant import Plant
from ecosystem.flora.plant_types import PLANT_PROFILES, PlantType
from ecosystem.world.grid import Grid
from ecosystem.world.terrain import Terrain


def _garden(humidity: float) -> Grid:
    """One soil tile at the bottom of a 1x4 column, air above."""
    return build_column([(Terrain.SOIL, humidity)], height=4)


def _grass(**kwargs: object) -> Plant:
    defaults: dict = {"plant_type": PlantType.GRASS, "x": 0, "y": 1, "water": 1.0}
    defaults.update(kwargs)
    return Plant(**defaults)


class TestPlantTypes:
    """Tests for the static species table."""

    def test_every_type_has_profile(self) -> None:
        for plant_type in PlantType:
            assert plant_type in PLANT_PROFILES

    def test_ranges_are_ordered(self) -> None:
        for profile in PLANT_PROFILES.values():
            assert profile.growth_time[0] <= profile.growth_time[1]
            assert 1 <= profile.mature_height[0] <= profile.mature_height[1]
            assert profile.seed_life > 0

    def test_lily_is_aquatic(self) -> None:
        assert PlantType.LILY.profile.aquatic
        assert not PlantType.GRASS.profile.aquatic

    def test_from_name(self) -> None:
        assert PlantType.from_name("FLOWER") is PlantType.FLOWER
        assert PlantType.from_name("oak") is None


class TestPlantCreation:
    """Tests for Plant.from_type."""

    def test_seedling_defaults(self, rng: Generator) -> None:
        plant = Plant.from_type(PlantType.SHRUB, 2, 3, rng)
        assert (plant.x, plant.y) == (2, 3)
        assert plant.size == 1
        assert plant.health == 1.0
        assert plant.water == 0.0
        assert not plant.is_mature

    def test_draws_within_ranges(self, rng: Generator) -> None:
        profile = PlantType.SHRUB.profile
        heights = set()
        for _ in range(200):
            plant = Plant.from_type(PlantType.SHRUB, 0, 0, rng)
            heights.add(plant.mature_height)
            lo, hi = profile.growth_time
            assert lo <= plant.growth_timer <= hi
        # Inclusive range: both ends are reachable
        lo, hi = profile.mature_height
        assert heights == set(range(lo, hi + 1))


class TestGrowth:
    """Tests for growth, maturity, and seeding."""

    def test_height_one_matures_on_first_growth(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(mature_height=1, growth_timer=0.05, water=0.5)
        assert plant.update(grid, rng, 0.1) is None
        assert plant.is_mature
        assert plant.size == 1

    def test_mature_plant_never_outgrows(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(mature_height=1, growth_timer=0.0)
        for _ in range(5):
            plant.growth_timer = 0.0
            plant.update(grid, rng, 0.01)
        assert plant.size == 1

    def test_grows_one_tile_per_event(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(mature_height=3, growth_timer=0.01)
        plant.update(grid, rng, 0.1)
        assert plant.size == 2
        assert not plant.is_mature

        lo, hi = PlantType.GRASS.profile.growth_time
        assert lo <= plant.growth_timer <= hi

        plant.growth_timer = 0.01
        plant.update(grid, rng, 0.1)
        assert plant.size == 3
        assert plant.is_mature

    def test_growth_costs_water(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(mature_height=3, growth_timer=0.01, water=1.0)
        plant.update(grid, rng, 0.1)
        thirst = PlantType.GRASS.profile.thirst * 0.1
        assert plant.water == pytest.approx(1.0 - thirst - 0.1)

    def test_timer_waits_for_full_health(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(mature_height=3, growth_timer=0.01, health=0.5)
        plant.update(grid, rng, 0.1)
        assert plant.size == 1
        assert plant.growth_timer == 0.01

    def test_mature_plant_releases_seed(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(mature_height=2, size=2, is_mature=True, growth_timer=0.01)
        seed = plant.update(grid, rng, 0.1)
        assert seed is not None
        assert seed.plant_type is PlantType.GRASS
        assert seed.x == pytest.approx(8.0)
        assert seed.y == pytest.approx(3 * 16.0)
        assert 20.0 <= abs(seed.dx) <= 60.0
        assert 60.0 <= seed.dy <= 100.0
        assert seed.life == PlantType.GRASS.profile.seed_life


class TestHealth:
    """Tests for the happiness bands and death."""

    def test_happy_regenerates(self, rng: Generator) -> None:
        plant = _grass(health=0.5)
        plant.update(_garden(0.5), rng, 0.2)
        assert plant.health == pytest.approx(0.7)

    def test_neutral_holds(self, rng: Generator) -> None:
        plant = _grass(health=0.5)
        plant.update(_garden(0.75), rng, 0.2)
        assert plant.health == pytest.approx(0.5)

    def test_unhappy_decays(self, rng: Generator) -> None:
        plant = _grass()
        plant.update(_garden(1.0), rng, 1.0)
        assert plant.health == pytest.approx(0.9)

    def test_lost_support_is_fatal(self, rng: Generator) -> None:
        grid = Grid(width=1, height=4)
        plant = _grass()
        plant.update(grid, rng, 0.1)
        assert not plant.is_alive

    def test_buried_plant_dies(self, rng: Generator) -> None:
        grid = build_column([(Terrain.SOIL, 0.5), (Terrain.ROCK, 0.0)], height=4)
        plant = _grass()
        plant.update(grid, rng, 0.1)
        assert not plant.is_alive


class TestWaterUptake:
    """Tests for drinking from the ground tile."""

    def test_draws_from_ground(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(water=0.0)
        plant.update(grid, rng, 0.5)
        thirst = PlantType.GRASS.profile.thirst * 0.5
        assert grid.tiles[0][0].humidity == pytest.approx(0.25)
        assert plant.water == pytest.approx(0.25 - thirst)

    def test_satisfied_plant_does_not_drink(self, rng: Generator) -> None:
        grid = _garden(0.5)
        plant = _grass(water=2.0)
        plant.update(grid, rng, 0.5)
        assert grid.tiles[0][0].humidity == pytest.approx(0.5)

    def test_dry_ground_yields_nothing(self, rng: Generator) -> None:
        grid = _garden(0.0)
        plant = _grass(water=0.0)
        plant.update(grid, rng, 0.5)
        assert grid.tiles[0][0].humidity == 0.0
        assert grid.tiles[0][0].terrain is Terrain.SOIL


class TestAquatic:
    """Tests for floating plants."""

    def test_follows_rising_surface(self, rng: Generator) -> None:
        grid = build_column(
            [(Terrain.ROCK, 0.0), (Terrain.WATER, 1.0), (Terrain.WATER, 1.0)],
            height=5,
        )
        plant = Plant(plant_type=PlantType.LILY, x=0, y=1, plant_id=0)
        grid.tiles[1][0].plant_id = 0

        plant.update(grid, rng, 0.01)

        assert plant.is_alive
        assert plant.y == 2
        assert grid.tiles[2][0].plant_id == 0
        assert grid.tiles[1][0].plant_id is None

    def test_follows_falling_surface(self, rng: Generator) -> None:
        grid = build_column([(Terrain.ROCK, 0.0), (Terrain.WATER, 0.6)], height=5)
        plant = Plant(plant_type=PlantType.LILY, x=0, y=2, plant_id=3)
        grid.tiles[2][0].plant_id = 3

        plant.update(grid, rng, 0.01)

        assert plant.y == 1
        assert grid.tiles[1][0].plant_id == 3
        assert grid.tiles[2][0].plant_id is None

    def test_stranded_plant_decays(self, rng: Generator) -> None:
        grid = build_column([(Terrain.ROCK, 0.0)], height=4)
        plant = Plant(plant_type=PlantType.LILY, x=0, y=1, water=1.0)
        plant.update(grid, rng, 1.0)
        assert plant.health == pytest.approx(0.9)

    def test_floating_plant_is_happy(self, rng: Generator) -> None:
        grid = build_column([(Terrain.ROCK, 0.0), (Terrain.WATER, 0.6)], height=4)
        plant = Plant(plant_type=PlantType.LILY, x=0, y=1, health=0.5, water=1.0)
        plant.update(grid, rng, 0.2)
        assert plant.health == pytest.approx(0.7)
