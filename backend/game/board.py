"""Grid board the characters walk on."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..dragonscript.constants import Direction


class Tile(Enum):
    ROAD = 0
    WALL = 1
    HOLE = 2


@dataclass(frozen=True)
class Position:
    row: int
    column: int

    def step(self, direction: Direction) -> "Position":
        """Return the neighbouring position in `direction`."""
        if direction is Direction.NORTH:
            return Position(self.row - 1, self.column)
        if direction is Direction.SOUTH:
            return Position(self.row + 1, self.column)
        if direction is Direction.EAST:
            return Position(self.row, self.column + 1)
        return Position(self.row, self.column - 1)

    def to_dict(self) -> Dict[str, int]:
        return {"row": self.row, "column": self.column}


class Level:
    def __init__(self, tiles: List[List[Tile]]):
        self.tiles = tiles

    def get_tile(self, position: Position) -> Optional[Tile]:
        """Return the tile at `position`, or None off the grid."""
        if not 0 <= position.row < len(self.tiles):
            return None
        row = self.tiles[position.row]
        if not 0 <= position.column < len(row):
            return None
        return row[position.column]

    def can_step_on(self, position: Position) -> bool:
        tile = self.get_tile(position)
        return tile is not None and tile is not Tile.HOLE

    def is_tile_on_position(self, position: Position, tile: Tile) -> bool:
        # the edge of the board reads as a wall
        found = self.get_tile(position)
        if found is None:
            found = Tile.WALL
        return found is tile

    def to_rows(self) -> List[List[str]]:
        return [[t.name for t in row] for row in self.tiles]
