"""Render queue handed to whatever draws the game.

The game only records what happened; a front end replays the entries in
order (one per action) to animate a play.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .board import Position


class RenderType(Enum):
    LEVEL = "LEVEL"
    DIALOG = "DIALOG"


@dataclass
class CharacterRender:
    position: Position
    attack: int


@dataclass
class DragonRender:
    positions: List[Position]
    hp: int


@dataclass
class RenderEntry:
    type: RenderType
    tiles: Optional[List[List[str]]] = None
    knight: Optional[CharacterRender] = None
    mage: Optional[CharacterRender] = None
    dragon: Optional[DragonRender] = None
    attack_position: Optional[Position] = None
    is_next_to_position: Optional[Position] = None
    body: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type.value}
        if self.type is RenderType.DIALOG:
            out["body"] = self.body
            return out
        out["tiles"] = self.tiles
        out["knight"] = _character(self.knight)
        out["mage"] = _character(self.mage)
        if self.dragon is not None:
            out["dragon"] = {
                "positions": [p.to_dict() for p in self.dragon.positions],
                "hp": self.dragon.hp,
            }
        out["attack_position"] = self.attack_position.to_dict() if self.attack_position else None
        out["is_next_to_position"] = self.is_next_to_position.to_dict() if self.is_next_to_position else None
        return out


def _character(render: Optional[CharacterRender]) -> Optional[Dict[str, Any]]:
    if render is None:
        return None
    return {"position": render.position.to_dict(), "attack": render.attack}


@dataclass
class RenderQueue:
    entries: List[RenderEntry] = field(default_factory=list)

    def queue(self, entry: RenderEntry) -> None:
        self.entries.append(entry)

    def dialogs(self) -> List[str]:
        return [e.body or "" for e in self.entries if e.type is RenderType.DIALOG]

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)
