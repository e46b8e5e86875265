"""Grid — the spatial container for the simulation.

The Grid owns tiles arranged in a 2D array and provides the spatial
queries (bounds checks, neighbours, water-surface height) and the single
humidity mutation path shared by humidity transport, droplets, and
plants.

Rows grow upward: row 0 is the bottom of the world and the tile
"above" ``(x, y)`` is ``(x, y + 1)``.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

from ecosystem.world.terrain import Terrain
from ecosystem.world.tile import Tile

# Water below this humidity drains away and the tile reverts to air.
HUMIDITY_EPSILON = 0.001
# A water tile at least this full lets the column continue upward.
FULL_WATER_THRESHOLD = 0.95

# Orthogonal offsets in evaluation order: up, down, left, right.
DIRECTIONS: tuple[tuple[int, int], ...] = ((0, 1), (0, -1), (-1, 0), (1, 0))


@dataclass
class Grid:
    """A 2D tile grid holding all terrain and humidity state.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        tile_size: World units per tile edge.
        tiles: 2D list of Tile objects indexed as ``tiles[y][x]``.
    """

    width: int
    height: int
    tile_size: float = 16.0
    tiles: list[list[Tile]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise the grid with air tiles."""
        self.tiles = [
            [Tile(x=x, y=y) for x in range(self.width)] for y in range(self.height)
        ]

    # -- Access ---------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Tile | None:
        """Return the tile at grid coordinates ``(x, y)``.

        Args:
            x: Column index.
            y: Row index.

        Returns:
            The Tile, or None if the coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            return None
        return self.tiles[y][x]

    def world_to_tile(self, wx: float, wy: float) -> tuple[int, int]:
        """Convert world units to the indices of the containing tile."""
        return math.floor(wx / self.tile_size), math.floor(wy / self.tile_size)

    def tile_at_world(self, wx: float, wy: float) -> Tile | None:
        return self.tile_at(*self.world_to_tile(wx, wy))

    def contact_tile(self, wx: float, wy: float) -> Tile | None:
        """Return the tile an object with its base at ``(wx, wy)`` touches.

        Identical to :meth:`tile_at_world` except that a base lying exactly
        on a row boundary belongs to the tile below, so an object resting
        on top of a tile keeps touching it.
        """
        tx = math.floor(wx / self.tile_size)
        ty = math.ceil(wy / self.tile_size) - 1
        return self.tile_at(tx, ty)

    def above(self, tile: Tile) -> Tile | None:
        return self.tile_at(tile.x, tile.y + 1)

    def below(self, tile: Tile) -> Tile | None:
        return self.tile_at(tile.x, tile.y - 1)

    def neighbours(self, x: int, y: int) -> list[tuple[tuple[int, int], Tile]]:
        """Return in-bounds orthogonal neighbours with their direction.

        Args:
            x: Column index.
            y: Row index.

        Returns:
            ``((dx, dy), tile)`` pairs in up, down, left, right order.
        """
        result: list[tuple[tuple[int, int], Tile]] = []
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                result.append(((dx, dy), self.tiles[ny][nx]))
        return result

    def iter_tiles(self) -> Iterator[Tile]:
        """Yield every tile, bottom row first."""
        for row in self.tiles:
            yield from row

    def total_humidity(self) -> float:
        return sum(tile.humidity for tile in self.iter_tiles())

    # -- Mutation -------------------------------------------------------------

    def set_terrain(self, tile: Tile, terrain: Terrain) -> None:
        """Change a tile's terrain, keeping humidity consistent with it."""
        tile.terrain = terrain
        if terrain is Terrain.AIR:
            tile.humidity = 0.0
        else:
            tile.humidity = min(1.0, max(0.0, tile.humidity))

    def modify_humidity(self, tile: Tile, delta: float) -> None:
        """Add ``delta`` humidity to a tile and settle the consequences.

        After the change the terrain is re-derived (air holding water
        becomes water, nearly-empty water becomes air).  Humidity above
        1.0 is clamped and the excess is pushed into the tile above,
        cascading up the column.  Overflow past the top row is lost.

        Args:
            tile: The tile to modify.
            delta: Signed humidity change.
        """
        current: Tile | None = tile
        while current is not None:
            current.humidity = max(0.0, current.humidity + delta)
            if current.terrain is Terrain.AIR and current.humidity > 0.0:
                current.terrain = Terrain.WATER
            if (
                current.terrain is Terrain.WATER
                and current.humidity < HUMIDITY_EPSILON
            ):
                current.terrain = Terrain.AIR
                current.humidity = 0.0

            if current.humidity <= 1.0:
                return
            delta = current.humidity - 1.0
            current.humidity = 1.0
            current = self.above(current)

    # -- Queries --------------------------------------------------------------

    def surface_height(self, x: int, y: int) -> float:
        """Return the fractional height of the water surface above a tile.

        Finds the contiguous water column containing ``(x, y)`` and returns
        ``top_row + top_row.humidity``, so a half-full top tile reports a
        surface halfway up it.

        Args:
            x: Column index.
            y: Row index to start the search from.

        Returns:
            The surface height in rows, or ``float(y)`` if the tile is not
            water.
        """
        tile = self.tile_at(x, y)
        if tile is None or not tile.is_water:
            return float(y)

        bottom = y
        while bottom > 0 and self.tiles[bottom - 1][x].is_water:
            bottom -= 1

        top = bottom
        while (
            top + 1 < self.height
            and self.tiles[top + 1][x].is_water
            and self.tiles[top][x].humidity > FULL_WATER_THRESHOLD
        ):
            top += 1
        return top + self.tiles[top][x].humidity

    def surface_row(self, x: int, y: int) -> int:
        """Return the row index of the top water tile reported by surface_height."""
        surface = self.surface_height(x, y)
        tile = self.tile_at(x, y)
        if tile is None or not tile.is_water:
            return y
        return max(0, math.ceil(surface) - 1)

    # -- Generation -----------------------------------------------------------

    @classmethod
    def generate(
        cls,
        width: int,
        height: int,
        rng: Generator,
        *,
        tile_size: float = 16.0,
        max_depth: int = 15,
        soil_fraction: float = 0.7,
    ) -> Grid:
        """Build a grid with a random, continuous heightmap.

        Each column keeps a running ground depth which takes a bounded
        random walk from the previous column, so hills and valleys join
        up instead of forming flat layers.  Below the ground line each
        tile is soil or rock with random humidity; the ground line itself
        holds a tile of water, and everything above it is air.

        Args:
            width: Number of columns.
            height: Number of rows.
            rng: Seeded random generator.
            tile_size: World units per tile edge.
            max_depth: Exclusive upper bound for the ground depth.
            soil_fraction: Probability that an underground tile is soil
                rather than rock.

        Returns:
            A freshly generated Grid.
        """
        grid = cls(width=width, height=height, tile_size=tile_size)
        max_depth = max(2, min(max_depth, height - 1))
        depth = int(rng.integers(1, max_depth))

        for x in range(width):
            low = max(1, depth - 2)
            high = max(low + 1, min(max_depth, depth + 3))
            depth = int(rng.integers(low, high))
            for y in range(height):
                tile = grid.tiles[y][x]
                if y < depth:
                    if rng.random() < soil_fraction:
                        tile.terrain = Terrain.SOIL
                    else:
                        tile.terrain = Terrain.ROCK
                    tile.humidity = float(rng.random())
                elif y == depth:
                    tile.terrain = Terrain.WATER
                    tile.humidity = float(rng.random())
                    if tile.humidity < HUMIDITY_EPSILON:
                        tile.terrain = Terrain.AIR
                        tile.humidity = 0.0
        return grid
