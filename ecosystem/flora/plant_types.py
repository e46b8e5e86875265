"""Plant types — static growth parameters per species.

Types are plain data: the simulation reads these numbers, the renderer
decides how each species looks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PlantType(Enum):
    """Plant species.  The value doubles as the save-file name."""

    GRASS = "grass"
    FLOWER = "flower"
    SHRUB = "shrub"
    CACTUS = "cactus"
    LILY = "lily"

    @property
    def profile(self) -> PlantProfile:
        return PLANT_PROFILES[self]

    @classmethod
    def from_name(cls, name: str) -> PlantType | None:
        """Return the type with the given save-file name, or None."""
        try:
            return cls(str(name).lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class PlantProfile:
    """Growth parameters shared by every plant of one type.

    Attributes:
        aquatic: Floats on open water instead of rooting in the ground.
        thirst: Water drained from the plant's reservoir per second.
        desired_humidity: Ground humidity the plant is happiest in.
        growth_time: (min, max) seconds between growth events.
        mature_height: (min, max) inclusive range the adult height is
            drawn from.
        seed_life: Seconds a seed of this type survives before rotting.
    """

    aquatic: bool
    thirst: float
    desired_humidity: float
    growth_time: tuple[float, float]
    mature_height: tuple[int, int]
    seed_life: float


PLANT_PROFILES: dict[PlantType, PlantProfile] = {
    PlantType.GRASS: PlantProfile(
        aquatic=False,
        thirst=0.02,
        desired_humidity=0.5,
        growth_time=(1.0, 3.0),
        mature_height=(1, 2),
        seed_life=8.0,
    ),
    PlantType.FLOWER: PlantProfile(
        aquatic=False,
        thirst=0.03,
        desired_humidity=0.6,
        growth_time=(2.0, 5.0),
        mature_height=(2, 3),
        seed_life=12.0,
    ),
    PlantType.SHRUB: PlantProfile(
        aquatic=False,
        thirst=0.05,
        desired_humidity=0.45,
        growth_time=(4.0, 8.0),
        mature_height=(3, 5),
        seed_life=20.0,
    ),
    PlantType.CACTUS: PlantProfile(
        aquatic=False,
        thirst=0.005,
        desired_humidity=0.1,
        growth_time=(5.0, 10.0),
        mature_height=(2, 4),
        seed_life=30.0,
    ),
    PlantType.LILY: PlantProfile(
        aquatic=True,
        thirst=0.02,
        desired_humidity=0.8,
        growth_time=(3.0, 6.0),
        mature_height=(1, 1),
        seed_life=15.0,
    ),
}
