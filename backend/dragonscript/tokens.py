"""Token kinds and the keyword table for DragonScript."""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    ILLEGAL = auto()
    EOF = auto()
    IDENTIFIER = auto()
    DOT = auto()
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    SEMICOLON = auto()
    COMMA = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    WHILE = auto()
    NOT = auto()
    IF = auto()
    ELSE = auto()
    FUNCTION = auto()
    EXTEND = auto()


KEYWORDS = {
    "while": TokenType.WHILE,
    "not": TokenType.NOT,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "function": TokenType.FUNCTION,
    "extend": TokenType.EXTEND,
}


@dataclass(frozen=True)
class Token:
    line: int
    type: TokenType
    literal: str


def lookup_identifier(identifier: str) -> TokenType:
    """Return the keyword kind for `identifier`, or IDENTIFIER."""
    return KEYWORDS.get(identifier, TokenType.IDENTIFIER)
