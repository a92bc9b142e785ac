"""Bridge between host game characters and script-visible instances.

A character exposes its abilities as ``native_*`` methods taking the list of
evaluated arguments and returning a `LangObject`. Which abilities a
character has is decided by the capability protocols below, and an
`Instance` only builds slots for the abilities its character provides.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .constants import create_standard_env
from .objects import ErrorObject, Function, LangObject, NativeFunction, ObjectType


@runtime_checkable
class Movable(Protocol):
    def native_move(self, args: List[LangObject]) -> LangObject: ...

    def native_is_next_to(self, args: List[LangObject]) -> LangObject: ...


@runtime_checkable
class Attacker(Protocol):
    def native_attack(self, args: List[LangObject]) -> LangObject: ...


@runtime_checkable
class Supporter(Protocol):
    def native_support(self, args: List[LangObject]) -> LangObject: ...


class Instance(LangObject):
    """Script-side wrapper around one playable character.

    Property lookup order is fixed: ``move`` and ``isNextTo``, then
    ``attack`` and ``support`` when the character has them, then methods
    added with ``extend``. Extensions therefore cannot shadow a built-in.
    """

    type = ObjectType.INSTANCE

    def __init__(self, character: Movable):
        self.character = character
        self.move = NativeFunction(character.native_move)
        self.is_next_to = NativeFunction(character.native_is_next_to)
        self.attack: Optional[NativeFunction] = None
        self.support: Optional[NativeFunction] = None
        if isinstance(character, Attacker):
            self.attack = NativeFunction(character.native_attack)
        if isinstance(character, Supporter):
            self.support = NativeFunction(character.native_support)

        self.user_defined_functions: Dict[str, Function] = {}
        # closure for every extension function
        self.instance_env = create_standard_env()
        self.instance_env.set("this", self)

    def get(self, prop: str) -> LangObject:
        if prop == "move":
            return self.move
        if prop == "attack" and self.attack is not None:
            return self.attack
        if prop == "isNextTo":
            return self.is_next_to
        if prop == "support" and self.support is not None:
            return self.support

        func = self.user_defined_functions.get(prop)
        if func is not None:
            return func
        return ErrorObject(f"{prop} is not implemented yet")

    def add_function(self, name: str, func: Function) -> None:
        self.user_defined_functions[name] = func

    def inspect(self) -> str:
        return "<Instance>"
