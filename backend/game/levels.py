"""Level catalog.

Boards are written as rows of letters: ``R`` road, ``W`` wall, ``H`` hole.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .board import Position, Tile

_TILE_LETTERS = {"R": Tile.ROAD, "W": Tile.WALL, "H": Tile.HOLE}


def grid(*rows: str) -> List[List[Tile]]:
    return [[_TILE_LETTERS[c] for c in row] for row in rows]


class StatementExclude(Enum):
    """Statements the visual editor hides for a level."""

    MOVE = "MOVE"
    ATTACK = "ATTACK"
    SUPPORT = "SUPPORT"
    IS_NEXT_TO = "IS_NEXT_TO"
    IF = "IF"
    WHILE = "WHILE"
    NOT = "NOT"


@dataclass(frozen=True)
class CharacterDefinition:
    position: Position


@dataclass(frozen=True)
class DragonDefinition:
    positions: Tuple[Position, ...]
    hp: int


@dataclass(frozen=True)
class LevelDefinition:
    tiles: List[List[Tile]]
    knight: CharacterDefinition
    dragon: DragonDefinition
    actions: int
    mage: Optional[CharacterDefinition] = None
    excluded_statements: Tuple[StatementExclude, ...] = ()
    extends: Tuple[str, ...] = ()
    help: Optional[str] = None
    solution: Optional[str] = None

    def to_dict(self, include_solution: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "tiles": [[t.name for t in row] for row in self.tiles],
            "knight": self.knight.position.to_dict(),
            "mage": self.mage.position.to_dict() if self.mage else None,
            "dragon": {
                "positions": [p.to_dict() for p in self.dragon.positions],
                "hp": self.dragon.hp,
            },
            "actions": self.actions,
            "excluded_statements": [s.value for s in self.excluded_statements],
            "extends": list(self.extends),
            "help": self.help,
        }
        if include_solution:
            out["solution"] = self.solution
        return out


@dataclass(frozen=True)
class LevelWorld:
    name: str
    color: str
    levels: List[LevelDefinition] = field(default_factory=list)


def _at(row: int, column: int) -> CharacterDefinition:
    return CharacterDefinition(Position(row, column))


def _dragon(*positions: Tuple[int, int], hp: int = 1) -> DragonDefinition:
    return DragonDefinition(tuple(Position(r, c) for r, c in positions), hp)


_BASICS_ONLY = (
    StatementExclude.IS_NEXT_TO,
    StatementExclude.IF,
    StatementExclude.WHILE,
    StatementExclude.NOT,
)

WORLDS: List[LevelWorld] = [
    LevelWorld(
        name="World #1",
        color="#3b3c3c",
        levels=[
            LevelDefinition(
                tiles=grid("RRR"),
                knight=_at(0, 0),
                dragon=_dragon((0, 2)),
                actions=2,
                excluded_statements=_BASICS_ONLY,
            ),
            LevelDefinition(
                tiles=grid("HRR", "RRH"),
                knight=_at(1, 0),
                dragon=_dragon((0, 2)),
                actions=3,
                excluded_statements=_BASICS_ONLY,
            ),
            LevelDefinition(
                tiles=grid("HRR", "HRH", "HRH", "RRH"),
                knight=_at(0, 2),
                dragon=_dragon((3, 0)),
                actions=5,
                excluded_statements=_BASICS_ONLY,
            ),
            LevelDefinition(
                tiles=grid("WWWWW", "WRRRW", "WRHHW", "WRRRW", "WWWWW"),
                knight=_at(1, 3),
                dragon=_dragon((3, 3)),
                actions=6,
                excluded_statements=_BASICS_ONLY,
            ),
            LevelDefinition(
                tiles=grid("HHHHRRRR", "HHRRRHHH", "RRRHHHHH"),
                knight=_at(2, 0),
                dragon=_dragon((0, 7)),
                actions=9,
                excluded_statements=_BASICS_ONLY,
            ),
        ],
    ),
    LevelWorld(
        name="World #2",
        color="#3a3e3e",
        levels=[
            LevelDefinition(
                tiles=grid("HRH", "RRR", "HRH"),
                knight=_at(1, 1),
                dragon=_dragon((1, 2), (0, 1), (2, 1), (1, 0)),
                actions=4,
                help="The dragon hides on a different side every time. Look before you strike.",
                solution="""
if(knight.isNextTo(WEST,dragon)) {
    knight.attack(WEST);
}
if(knight.isNextTo(EAST,dragon)) {
    knight.attack(EAST);
}
if(knight.isNextTo(NORTH,dragon)) {
    knight.attack(NORTH);
}
if(knight.isNextTo(SOUTH,dragon)) {
    knight.attack(SOUTH);
}
""",
            ),
        ],
    ),
    LevelWorld(
        name="World #3",
        color="#282828",
        levels=[
            LevelDefinition(
                tiles=grid("WWWWWWHH", "RRRRRRRR", "WWWWWWHH"),
                knight=_at(1, 0),
                dragon=_dragon((1, 7)),
                actions=2,
                solution="""
while(not knight.isNextTo(EAST, dragon)) {
    knight.move(EAST);
}
knight.attack(EAST);
""",
            ),
            LevelDefinition(
                tiles=grid("HRH", "RRH", "RHH", "RRR", "HHR", "HRR", "HRH", "HRH"),
                knight=_at(0, 1),
                dragon=_dragon((7, 1)),
                actions=5,
                solution="""
while(not knight.isNextTo(SOUTH, dragon)) {
    if(knight.isNextTo(SOUTH, ROAD)) {
        knight.move(SOUTH);
    }
    if(knight.isNextTo(WEST, ROAD)) {
        knight.move(WEST);
        knight.move(SOUTH);
    }
    while(knight.isNextTo(EAST, ROAD)) {
        knight.move(EAST);
    }
}
knight.attack(SOUTH);
""",
            ),
            LevelDefinition(
                tiles=grid(
                    "RRRRRRRR",
                    "HHHHHHHR",
                    "RRRRRRHR",
                    "RHHHHRHR",
                    "RHRHHRHR",
                    "RHRRRRHR",
                    "RHHHHHHR",
                    "RRRRRRRR",
                ),
                knight=_at(0, 0),
                dragon=_dragon((4, 2)),
                actions=9,
                solution="""
function win() {
    while(knight.isNextTo(SOUTH,HOLE)) {
        knight.move(EAST);
    }
    knight.move(SOUTH);
    while(knight.isNextTo(WEST,HOLE)) {
        knight.move(SOUTH);
    }
    knight.move(WEST);
    while(knight.isNextTo(NORTH, HOLE)) {
        knight.move(WEST);
    }
    if(not knight.isNextTo(NORTH, dragon)) {
        knight.move(NORTH);
        while(knight.isNextTo(EAST, HOLE)) {
            knight.move(NORTH);
        }
        knight.move(EAST);
        win();
    } else {
        knight.attack(NORTH);
    }
}
win();
""",
            ),
            LevelDefinition(
                tiles=grid("HRH", "HRH", "RRR"),
                knight=_at(2, 0),
                mage=_at(0, 1),
                dragon=_dragon((2, 2), hp=2),
                actions=4,
                help="The mage can lend the knight strength with support.",
                solution="""
mage.move(SOUTH);
knight.move(EAST);
mage.support(SOUTH);
knight.attack(EAST);
""",
            ),
        ],
    ),
]


def get_level(world: int, index: int) -> LevelDefinition:
    """Return the level at `WORLDS[world].levels[index]`.

    Raises LookupError for unknown worlds or levels.
    """
    if not 0 <= world < len(WORLDS):
        raise LookupError(f"Unknown world {world}")
    levels = WORLDS[world].levels
    if not 0 <= index < len(levels):
        raise LookupError(f"Unknown level {index} in world {world}")
    return levels[index]
