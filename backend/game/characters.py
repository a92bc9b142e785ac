"""Game characters and their script-callable native methods.

Native methods receive the already-evaluated script arguments and return a
runtime object. Argument count and kind are checked here: a wrong count or
a non-constant argument is an `ErrorObject`; a constant of the wrong family
(for example ``knight.move(dragon)``) does nothing and returns null.
"""

import logging
import random
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Union

from ..dragonscript.constants import Direction, Interactable
from ..dragonscript.objects import (
    NULL,
    ErrorObject,
    GameObject,
    LangObject,
    native_boolean,
)
from .board import Position

if TYPE_CHECKING:
    from .game import Game

logger = logging.getLogger(__name__)


class Character:
    def __init__(self, row: int, column: int, attack: int):
        self.position = Position(row, column)
        self.attack = attack

    def move(self, next_position: Position) -> None:
        self.position = next_position
        logger.debug("%s moved to %s", type(self).__name__, next_position)

    def next_position(self, direction: Direction) -> Position:
        return self.position.step(direction)

    def is_on_position(self, other: Position) -> bool:
        return self.position == other


class ActionCharacter(Character):
    """A character the player controls from a script."""

    def __init__(self, game: "Game", row: int, column: int, attack: int):
        super().__init__(row, column, attack)
        self.game = game

    def native_move(self, args: List[LangObject]) -> LangObject:
        direction = self._direction_arg(args)
        if isinstance(direction, ErrorObject):
            return direction
        if direction is not None:
            self.game.move(self, direction)
        return NULL

    def native_is_next_to(self, args: List[LangObject]) -> LangObject:
        objects = self._game_objects(2, args)
        if isinstance(objects, ErrorObject):
            return objects
        direction, target = objects[0].content, objects[1].content
        if isinstance(direction, Direction) and isinstance(target, Interactable):
            return native_boolean(self.game.is_next_to(self, direction, target))
        return NULL

    def _direction_arg(self, args: List[LangObject]) -> Union[ErrorObject, Direction, None]:
        objects = self._game_objects(1, args)
        if isinstance(objects, ErrorObject):
            return objects
        content = objects[0].content
        return content if isinstance(content, Direction) else None

    @staticmethod
    def _game_objects(size: int, args: List[LangObject]) -> Union[ErrorObject, List[GameObject]]:
        if len(args) != size:
            return ErrorObject(f"Expected {size} arg, got {len(args)}")
        objects: List[GameObject] = []
        for i, arg in enumerate(args):
            if not isinstance(arg, GameObject):
                return ErrorObject(f"Arg[{i}] must be of type GAME_OBJECT.")
            objects.append(arg)
        return objects


class Knight(ActionCharacter):
    def native_attack(self, args: List[LangObject]) -> LangObject:
        direction = self._direction_arg(args)
        if isinstance(direction, ErrorObject):
            return direction
        if direction is not None:
            self.game.attack(self, direction)
        return NULL


class Mage(ActionCharacter):
    def __init__(self, game: "Game", row: int, column: int):
        super().__init__(game, row, column, 1)

    def native_support(self, args: List[LangObject]) -> LangObject:
        direction = self._direction_arg(args)
        if isinstance(direction, ErrorObject):
            return direction
        if direction is not None:
            self.game.support(self, direction)
        return NULL


class Dragon(Character):
    """The target. It may have several candidate positions, picked per play."""

    def __init__(self, positions: Sequence[Position], hp: int):
        first = positions[0]
        super().__init__(first.row, first.column, 9999)
        self.positions: Tuple[Position, ...] = tuple(positions)
        self.hp = hp

    @property
    def is_random(self) -> bool:
        return len(self.positions) > 1

    def determine_position(self, rng: Optional[random.Random] = None) -> Position:
        if self.is_random:
            self.position = (rng or random).choice(self.positions)
        else:
            self.position = self.positions[0]
        logger.debug("dragon placed at %s", self.position)
        return self.position

    def take_damage(self, damage: int) -> None:
        self.hp -= damage
