"""Runtime object model for DragonScript.

Every evaluation step yields exactly one `LangObject`. Errors are ordinary
values (`ErrorObject`) that composite constructs propagate by returning
them early; they are never raised.

Booleans and null are canonical singletons (`TRUE`, `FALSE`, `NULL`).
Conditions compare against `TRUE` by identity, so no other object is ever
treated as true.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable, List

if TYPE_CHECKING:
    from .environment import Environment
    from .nodes import BlockStatement


class ObjectType(Enum):
    NULL = auto()
    ERROR = auto()
    INSTANCE = auto()
    FUNCTION = auto()
    GAME_OBJECT = auto()
    BOOLEAN = auto()


class LangObject:
    type: ObjectType

    def inspect(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.type.name} {self.inspect()}>"


class ErrorObject(LangObject):
    type = ObjectType.ERROR

    def __init__(self, message: str):
        self.message = message

    def inspect(self) -> str:
        return self.message

    def __eq__(self, other):
        return isinstance(other, ErrorObject) and other.message == self.message

    def __hash__(self):
        return hash(self.message)


class BooleanObject(LangObject):
    type = ObjectType.BOOLEAN

    def __init__(self, value: bool):
        self.value = value

    def inspect(self) -> str:
        return "true" if self.value else "false"


class NullObject(LangObject):
    type = ObjectType.NULL

    def inspect(self) -> str:
        return "null"


TRUE = BooleanObject(True)
FALSE = BooleanObject(False)
NULL = NullObject()


def native_boolean(value: bool) -> BooleanObject:
    return TRUE if value else FALSE


class Function(LangObject):
    """A user-defined function closing over its defining environment."""

    type = ObjectType.FUNCTION

    def __init__(self, name: str, params: List[str], body: "BlockStatement", closure: "Environment"):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure

    def inspect(self) -> str:
        return f"function {self.name} ({', '.join(self.params)}) {{}}"


class NativeFunction(LangObject):
    """A callable whose body is a host callback taking the evaluated args."""

    type = ObjectType.FUNCTION

    def __init__(self, func: Callable[[List[LangObject]], LangObject]):
        self.func = func

    def __call__(self, args: List[LangObject]) -> LangObject:
        return self.func(args)

    def inspect(self) -> str:
        return "<native function>"


class GameObject(LangObject):
    """Wraps a game constant (a Direction or an Interactable member)."""

    type = ObjectType.GAME_OBJECT

    def __init__(self, content: Any):
        self.content = content

    def inspect(self) -> str:
        return getattr(self.content, "name", str(self.content))

    def __eq__(self, other):
        return isinstance(other, GameObject) and other.content is self.content

    def __hash__(self):
        return hash(self.content)


def is_error(obj: LangObject) -> bool:
    return obj.type is ObjectType.ERROR
