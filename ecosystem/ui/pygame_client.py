"""Pygame 2D visualization for the Ecosystem simulation.

Renders the tile grid (tinted by humidity), plants, seeds, and
droplets in a window and turns mouse clicks into tool interactions.
The simulation steps once per frame with the real elapsed time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pygame

if TYPE_CHECKING:
    from ecosystem.simulation.engine import SimulationEngine

from ecosystem.flora.plant_types import PlantType
from ecosystem.simulation.engine import Tool
from ecosystem.world.terrain import Terrain

logger = logging.getLogger(__name__)

# Colour palette
_SKY = (113, 149, 255)
_PANEL = (30, 30, 40)
_TEXT = (220, 220, 220)
_DROPLET = (40, 90, 255)
_SEED = (120, 80, 30)

_TERRAIN_COLOURS: dict[Terrain, tuple[int, int, int]] = {
    Terrain.SOIL: (140, 100, 60),
    Terrain.ROCK: (120, 120, 120),
    Terrain.WATER: (60, 110, 230),
    Terrain.SPRING: (90, 200, 230),
}

_PLANT_COLOURS: dict[PlantType, tuple[int, int, int]] = {
    PlantType.GRASS: (90, 190, 60),
    PlantType.FLOWER: (230, 120, 180),
    PlantType.SHRUB: (40, 120, 40),
    PlantType.CACTUS: (120, 170, 80),
    PlantType.LILY: (200, 240, 200),
}

# Humidity tint (dry colour -> saturated blue)
_WET = np.array([0, 0, 255], dtype=np.float64)

_TOOL_KEYS: dict[int, Tool] = {
    pygame.K_1: Tool.WATER,
    pygame.K_2: Tool.PLANT,
    pygame.K_3: Tool.SPRING,
    pygame.K_4: Tool.SOIL,
    pygame.K_5: Tool.ROCK,
    pygame.K_6: Tool.DIG,
}


class PygameRenderer:
    """Renders a SimulationEngine state into a Pygame window.

    Attributes:
        engine: The simulation engine to visualise.
        cell_size: Pixel size of each grid tile.
        save_path: File used by the save/load keys.
        screen: The Pygame display surface.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 16,
        save_path: Path | str = "ecosystem_save.yaml",
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid tile.
            save_path: Where F5 saves and F9 loads.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.save_path = Path(save_path)
        self.tool = Tool.WATER
        self.plant_type = PlantType.GRASS
        self._message = ""

        self._panel_width = 200
        self._win_w = engine.grid.width * cell_size + self._panel_width
        self._win_h = engine.grid.height * cell_size

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Ecosystem")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def run(self, fps: int = 60) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if pygame.mouse.get_pressed()[0]:
                self._apply_tool(pygame.mouse.get_pos())
            if not self.paused:
                self.engine.step(min(dt, 0.1))
            self._draw()

        pygame.quit()

    # -- Input ----------------------------------------------------------------

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

    def _handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key in _TOOL_KEYS:
            self.tool = _TOOL_KEYS[key]
        elif key == pygame.K_p:
            types = list(PlantType)
            self.plant_type = types[(types.index(self.plant_type) + 1) % len(types)]
        elif key == pygame.K_r:
            self.engine.regenerate(seed=int(self.engine.rng.integers(0, 2**31)))
        elif key == pygame.K_F5:
            ok = self.engine.save(self.save_path)
            if ok:
                logger.info("Saved world to %s", self.save_path)
            self._message = "Saved" if ok else "Save failed"
        elif key == pygame.K_F9:
            ok = self.engine.load(self.save_path)
            if ok:
                logger.info("Loaded world from %s", self.save_path)
            self._message = "Loaded" if ok else "Load failed"

    def _apply_tool(self, pos: tuple[int, int]) -> None:
        """Convert a screen position to world units and apply the tool."""
        grid = self.engine.grid
        px, py = pos
        if px >= grid.width * self.cell_size:
            return
        scale = grid.tile_size / self.cell_size
        wx = px * scale
        wy = (grid.height * self.cell_size - py) * scale
        self.engine.apply_interaction(self.tool, wx, wy, self.plant_type)

    # -- Drawing --------------------------------------------------------------

    def _to_screen(self, wx: float, wy: float) -> tuple[int, int]:
        grid = self.engine.grid
        scale = self.cell_size / grid.tile_size
        return int(wx * scale), int(grid.height * self.cell_size - wy * scale)

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_SKY)
        self._draw_tiles()
        self._draw_plants()
        self._draw_particles()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_tiles(self) -> None:
        """Draw every non-air tile, blended toward blue by humidity."""
        cs = self.cell_size
        grid = self.engine.grid
        for tile in grid.iter_tiles():
            base = _TERRAIN_COLOURS.get(tile.terrain)
            if base is None:
                continue
            t = min(max(tile.humidity, 0.0), 1.0) * 0.6
            colour = np.array(base, dtype=np.float64) * (1.0 - t) + _WET * t
            top = (grid.height - 1 - tile.y) * cs
            if tile.is_water:
                # Partially filled water only covers the bottom of the tile
                fill = max(1, int(cs * min(tile.humidity, 1.0)))
                rect = (tile.x * cs, top + cs - fill, cs, fill)
            else:
                rect = (tile.x * cs, top, cs, cs)
            pygame.draw.rect(self.screen, colour.astype(int).tolist(), rect)

    def _draw_plants(self) -> None:
        """Draw each plant as a stem as tall as its size."""
        cs = self.cell_size
        grid = self.engine.grid
        for plant in self.engine.plants.values():
            colour = _PLANT_COLOURS.get(plant.plant_type, (0, 200, 0))
            base = float(plant.y)
            if plant.profile.aquatic:
                base = grid.surface_height(plant.x, plant.y)
            left, bottom = self._to_screen(
                plant.x * grid.tile_size,
                base * grid.tile_size,
            )
            height = plant.size * cs
            width = max(2, cs // 3)
            pygame.draw.rect(
                self.screen,
                colour,
                (left + (cs - width) // 2, bottom - height, width, height),
            )
            if plant.is_mature:
                pygame.draw.circle(
                    self.screen,
                    (255, 230, 80),
                    (left + cs // 2, bottom - height),
                    max(2, cs // 4),
                )

    def _draw_particles(self) -> None:
        radius = max(1, self.cell_size // 6)
        for seed in self.engine.seeds:
            centre = self._to_screen(seed.x, seed.y)
            pygame.draw.circle(self.screen, _SEED, centre, radius)
        for drop in self.engine.droplets:
            pygame.draw.circle(
                self.screen,
                _DROPLET,
                self._to_screen(drop.x, drop.y),
                radius,
            )

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self.engine.grid.width * self.cell_size
        pygame.draw.rect(
            self.screen,
            _PANEL,
            (panel_x, 0, self._panel_width, self._win_h),
        )
        lines = [
            f"Time: {self.engine.elapsed:.1f}s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            "",
            f"Tool: {self.tool.value}",
            f"Seed: {self.plant_type.value}",
            "",
            f"Plants: {len(self.engine.plants)}",
            f"Seeds: {len(self.engine.seeds)}",
            f"Droplets: {len(self.engine.droplets)}",
            f"Water: {self.engine.grid.total_humidity():.1f}",
            "",
            "--- Controls ---",
            "1-6: tool",
            "P: seed type",
            "LMB: apply",
            "R: new world",
            "F5/F9: save/load",
            "SPACE: pause",
            "ESC: quit",
            "",
            self._message,
        ]

        y = 10
        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x + 10, y))
            y += 18
