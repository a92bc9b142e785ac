"""Lexically chained name -> runtime object mapping."""

from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .objects import LangObject


class Environment:
    """A scope frame. `get` walks outward; `set` writes to this frame only."""

    def __init__(self, outer: Optional["Environment"] = None):
        self.store: Dict[str, "LangObject"] = {}
        self.outer = outer

    def get(self, name: str) -> Optional["LangObject"]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: "LangObject") -> "LangObject":
        self.store[name] = value
        return value
