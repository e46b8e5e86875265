"""Shared fixtures for the Ecosystem test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from ecosystem.simulation.config import SimulationConfig
from ecosystem.world.grid import Grid
from ecosystem.world.terrain import Terrain


def build_column(terrains: list[tuple[Terrain, float]], height: int) -> Grid:
    """Build a one-column grid from ``(terrain, humidity)`` pairs, bottom first.

    Rows not listed are air.
    """
    grid = Grid(width=1, height=height)
    for y, (terrain, humidity) in enumerate(terrains):
        tile = grid.tiles[y][0]
        tile.terrain = terrain
        tile.humidity = humidity
    return grid


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_grid() -> Grid:
    """An all-air 8x8 grid for fast tests."""
    return Grid(width=8, height=8)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config on a small world (no YAML file needed)."""
    return SimulationConfig(world_width=16, world_height=12)
