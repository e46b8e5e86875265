"""Entry point for ``python -m ecosystem``.

Loads the default YAML config, generates a world, and opens a Pygame
window to watch (and water) it.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from ecosystem.simulation.config import SimulationConfig
from ecosystem.simulation.engine import SimulationEngine
from ecosystem.ui.pygame_client import PygameRenderer

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main() -> None:
    """Parse CLI args, create engine, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="ecosystem",
        description="Ecosystem - humidity, rain, and plant growth sandbox",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the world seed from the config",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=16,
        help="Pixel size per grid tile (default: 16)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target frames per second (default: 60)",
    )
    parser.add_argument(
        "--save-file",
        type=pathlib.Path,
        default=pathlib.Path("ecosystem_save.yaml"),
        help="File used by the save/load keys (default: ecosystem_save.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed
    engine = SimulationEngine(config=config)

    renderer = PygameRenderer(
        engine=engine,
        cell_size=args.cell_size,
        save_path=args.save_file,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
