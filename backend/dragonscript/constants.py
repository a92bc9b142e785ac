"""Game constants visible to every script."""

from enum import Enum

from .environment import Environment
from .objects import GameObject


class Direction(Enum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


class Interactable(Enum):
    DRAGON = 0
    ROAD = 1
    WALL = 2
    HOLE = 3


STANDARD_CONSTANTS = {
    "NORTH": Direction.NORTH,
    "SOUTH": Direction.SOUTH,
    "EAST": Direction.EAST,
    "WEST": Direction.WEST,
    "dragon": Interactable.DRAGON,
    "ROAD": Interactable.ROAD,
    "WALL": Interactable.WALL,
    "HOLE": Interactable.HOLE,
}


def create_standard_env() -> Environment:
    """Return a fresh environment holding the direction and target constants."""
    env = Environment()
    for name, constant in STANDARD_CONSTANTS.items():
        env.set(name, GameObject(constant))
    return env
