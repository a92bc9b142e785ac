"""Game rules and the `play` entry point that runs a battle plan.

`Game.play` is the only place the language pipeline is driven from:
pre-check the action budget, lex and parse, bind the characters as
instances, evaluate, then decide the outcome. Every failure is reported as
a `GameState` plus a narrative message; nothing is raised to the caller.
"""

import logging
import random
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from ..dragonscript.constants import Direction, Interactable, create_standard_env
from ..dragonscript.environment import Environment
from ..dragonscript.evaluator import evaluate
from ..dragonscript.instance import Instance
from ..dragonscript.lexer import Lexer
from ..dragonscript.objects import ErrorObject
from ..dragonscript.parser import Parser
from .board import Level, Position, Tile
from .characters import Character, Dragon, Knight, Mage
from .levels import LevelDefinition
from .render import CharacterRender, DragonRender, RenderEntry, RenderQueue, RenderType

logger = logging.getLogger(__name__)

ACTION_CALL_RE = re.compile(r"(?:move|attack|support)\(")

INTERACTABLE_TILES = {
    Interactable.ROAD: Tile.ROAD,
    Interactable.WALL: Tile.WALL,
    Interactable.HOLE: Tile.HOLE,
}


class GameState(Enum):
    WON = "WON"
    TOO_MANY_ACTIONS = "TOO_MANY_ACTIONS"
    LOST = "LOST"
    ERROR = "ERROR"


def determine_action_count(code: str) -> int:
    """Count action calls by scanning the raw source text.

    This is a plain substring count of ``move(``, ``attack(`` and
    ``support(``: calls in branches that never run still count, and so do
    names that merely end in one of those words.
    """
    return len(ACTION_CALL_RE.findall(code))


class Game:
    def __init__(self, level_def: LevelDefinition, rng: Optional[random.Random] = None):
        self.level_def = level_def
        self.rng = rng or random.Random()
        self.renders = RenderQueue()
        self.message: Optional[str] = None
        self.parse_errors: List[str] = []
        self.runtime_error: Optional[str] = None
        self.init()

    def init(self) -> None:
        d = self.level_def
        self.level = Level(d.tiles)
        self.dragon = Dragon(d.dragon.positions, d.dragon.hp)
        self.knight = Knight(self, d.knight.position.row, d.knight.position.column, 1)
        self.mage: Optional[Mage] = None
        if d.mage is not None:
            self.mage = Mage(self, d.mage.position.row, d.mage.position.column)
        self.dragon_placed = False
        self.queue_level_render()

    # --- Render helpers --------------------------------------------------
    def queue_level_render(
        self,
        attack_position: Optional[Position] = None,
        is_next_to_position: Optional[Position] = None,
    ) -> None:
        # before placement a random dragon is drawn on every candidate square
        if self.dragon.is_random and not self.dragon_placed:
            dragon_positions = list(self.dragon.positions)
        else:
            dragon_positions = [self.dragon.position]
        self.renders.queue(
            RenderEntry(
                type=RenderType.LEVEL,
                tiles=self.level.to_rows(),
                knight=CharacterRender(self.knight.position, self.knight.attack),
                mage=CharacterRender(self.mage.position, self.mage.attack) if self.mage else None,
                dragon=DragonRender(dragon_positions, self.dragon.hp),
                attack_position=attack_position,
                is_next_to_position=is_next_to_position,
            )
        )

    def queue_death(self, reason: str) -> None:
        self.message = reason
        self.renders.queue(
            RenderEntry(type=RenderType.DIALOG, body=f"{reason}\n\nThe dragon woke up and burned you!")
        )

    # --- Script entry point ----------------------------------------------
    def create_environment(self) -> Environment:
        env = Environment(create_standard_env())
        env.set("knight", Instance(self.knight))
        if self.mage is not None:
            env.set("mage", Instance(self.mage))
        return env

    def play(self, script: str) -> GameState:
        actions = determine_action_count(script)
        if actions > self.level_def.actions:
            logger.info("script rejected: %d actions, limit %d", actions, self.level_def.actions)
            self.queue_death("You used too many actions!")
            return GameState.TOO_MANY_ACTIONS

        self.dragon.determine_position(self.rng)
        self.dragon_placed = True

        parser = Parser(Lexer(script))
        program = parser.parse_program()
        if parser.errors:
            logger.debug("parse failed with %d error(s)", len(parser.errors))
            self.parse_errors = list(parser.errors)
            self.queue_death("\n".join(parser.errors))
            return GameState.ERROR

        try:
            result = evaluate(program, self.create_environment())
        except RecursionError:
            result = ErrorObject("Maximum recursion depth exceeded")
        if isinstance(result, ErrorObject):
            self.runtime_error = result.message
            self.queue_death(f"Your battle plan is erroneous!\n\nERROR: {result.message}")
            return GameState.ERROR

        state = self.resolve_game_state()
        if state is GameState.LOST:
            self.queue_death("You didn't slay the dragon!")
        logger.info("play finished: %s", state.value)
        return state

    # --- Rules called from native methods --------------------------------
    def move(self, character: Character, direction: Direction) -> None:
        desired = character.next_position(direction)
        if self.level.can_step_on(desired):
            character.move(desired)
        self.queue_level_render()

    def attack(self, character: Character, direction: Direction) -> None:
        target = character.next_position(direction)
        if self.dragon.is_on_position(target):
            self.dragon.take_damage(character.attack)
        character.attack = 0
        self.queue_level_render(attack_position=target)

    def is_next_to(self, character: Character, direction: Direction, target: Interactable) -> bool:
        position = character.next_position(direction)
        self.queue_level_render(is_next_to_position=position)
        if target is Interactable.DRAGON:
            return self.dragon.is_on_position(position)
        return self.level.is_tile_on_position(position, INTERACTABLE_TILES[target])

    def support(self, mage: Mage, direction: Direction) -> None:
        if self.knight.is_on_position(mage.next_position(direction)):
            self.knight.attack += mage.attack
            mage.attack = 0
        self.queue_level_render()

    def resolve_game_state(self) -> GameState:
        return GameState.WON if self.dragon.hp <= 0 else GameState.LOST


def play_to_dict(level_def: LevelDefinition, code: str, seed: Optional[int] = None) -> Dict[str, Any]:
    """Play `code` on a fresh game and return a JSON-ready summary.

    Shape: {"state", "message", "actions", "parse_errors",
    "runtime_error", "renders"}. Used by the HTTP API,
    the subprocess worker and the CLI so all three report plays the same way.
    """
    game = Game(level_def, rng=random.Random(seed))
    state = game.play(code)
    return {
        "state": state.value,
        "message": game.message,
        "actions": determine_action_count(code),
        "parse_errors": game.parse_errors,
        "runtime_error": game.runtime_error,
        "renders": game.renders.to_list(),
    }
