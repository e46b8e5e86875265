"""Humidity transport — springs, evaporation, and tile-to-tile flow.

Operates directly on the tiles of a ``Grid``.  Separated from ``grid.py``
so that the transfer rules can be tuned or replaced independently of the
grid's storage and its overflow bookkeeping.

The model is a cellular approximation rather than real fluid dynamics:

- Open water falls into whatever is below it and spreads sideways
  toward lower neighbours, but never climbs.
- Porous ground (soil, rock) slowly seeps toward drier porous
  neighbours in every direction, but does not push into open water or air.
- Every exchange is scaled by the porosity of the receiving tile.
"""

from __future__ import annotations

from ecosystem.world.grid import Grid
from ecosystem.world.tile import Tile

DEFAULT_EVAPORATION_RATE = 0.12  # fraction of humidity lost per second
DEFAULT_SPRING_INFLOW = 0.5  # humidity added per second by a spring
DEFAULT_LATERAL_DAMPING = 0.2
DEFAULT_SEEP_RATE = 0.02


def transfer_amount(
    source: Tile,
    dest: Tile,
    direction: tuple[int, int],
    *,
    lateral_damping: float = DEFAULT_LATERAL_DAMPING,
    seep_rate: float = DEFAULT_SEEP_RATE,
) -> float:
    """Return how much humidity flows from ``source`` into ``dest``.

    Args:
        source: The tile giving humidity.
        dest: The orthogonally adjacent tile receiving it.
        direction: ``(dx, dy)`` offset from source to dest; ``dy = 1`` is up.
        lateral_damping: Fraction of the half-difference water spreads
            sideways per tick.
        seep_rate: Fraction of the difference porous ground exchanges
            per tick.

    Returns:
        A non-negative amount (0.0 when nothing should move).
    """
    if source.is_air:
        return 0.0

    _, dy = direction
    difference = source.humidity - dest.humidity

    if source.is_water:
        if dy > 0:
            return 0.0
        if dy < 0:
            capacity = max(0.0, 1.0 - dest.humidity)
            return min(source.humidity, capacity) * dest.terrain.porosity
        if difference <= 0:
            return 0.0
        return difference / 2.0 * lateral_damping * dest.terrain.porosity

    # Porous ground
    if difference <= 0 or dest.is_air or dest.is_water:
        return 0.0
    return difference * seep_rate * dest.terrain.porosity


def evaporate(grid: Grid, tile: Tile, rate: float, dt: float) -> None:
    """Lose a fraction of a tile's humidity if it is open to the air above.

    Args:
        grid: The grid containing the tile.
        tile: The tile to evaporate from.
        rate: Fraction lost per second.
        dt: Elapsed seconds.
    """
    above = grid.above(tile)
    if above is None or not above.is_air or tile.humidity <= 0:
        return
    loss = min(tile.humidity, tile.humidity * rate * dt)
    grid.modify_humidity(tile, -loss)


def update_humidity(
    grid: Grid,
    dt: float,
    *,
    evaporation_rate: float = DEFAULT_EVAPORATION_RATE,
    spring_inflow: float = DEFAULT_SPRING_INFLOW,
    lateral_damping: float = DEFAULT_LATERAL_DAMPING,
    seep_rate: float = DEFAULT_SEEP_RATE,
) -> None:
    """Run one tick of humidity transport over the whole grid.

    Tiles are visited bottom row first, left to right, and updated in
    place.  For each non-air tile: springs inject water, exposed tiles
    evaporate, then humidity is exchanged with the up, down, left, and
    right neighbours in that order.  World edges have no neighbours.

    Args:
        grid: The grid to update.
        dt: Elapsed seconds; scales spring inflow and evaporation.
        evaporation_rate: Fraction of humidity lost per second under air.
        spring_inflow: Humidity added per second to each spring tile.
        lateral_damping: Sideways spreading factor for open water.
        seep_rate: Exchange factor for porous ground.
    """
    for row in grid.tiles:
        for tile in row:
            if tile.is_air:
                continue

            if tile.terrain.is_source:
                grid.modify_humidity(tile, spring_inflow * dt)

            evaporate(grid, tile, evaporation_rate, dt)

            for direction, neighbour in grid.neighbours(tile.x, tile.y):
                # Evaporation or an earlier transfer may have emptied it
                if tile.is_air:
                    break
                amount = transfer_amount(
                    tile,
                    neighbour,
                    direction,
                    lateral_damping=lateral_damping,
                    seep_rate=seep_rate,
                )
                if amount <= 0:
                    continue
                grid.modify_humidity(tile, -amount)
                grid.modify_humidity(neighbour, amount)
