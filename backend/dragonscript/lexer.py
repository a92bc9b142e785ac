"""Pull-based lexer turning DragonScript source text into tokens.

Only letters, whitespace and the punctuation ``. ( ) ; , { }`` are
meaningful. Any other character becomes an ILLEGAL token which the parser
reports; the lexer itself never fails.
"""

import string
from typing import Optional

from .tokens import Token, TokenType, lookup_identifier

LETTERS = frozenset(string.ascii_letters)

SINGLE_CHAR_TOKENS = {
    ".": TokenType.DOT,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
}


class Lexer:
    """Produces one token per `next_token()` call.

    Once the input is exhausted every further call returns an EOF token.
    `ch` is None past the end of input.
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.read_position = 0
        self.ch: Optional[str] = None
        self.line = 1
        self._next_char()

    def __iter__(self):
        # yields every token up to and including the first EOF
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return

    def next_token(self) -> Token:
        self._skip_whitespace()
        if self.ch is None:
            return Token(self.line, TokenType.EOF, "")
        kind = SINGLE_CHAR_TOKENS.get(self.ch)
        if kind is not None:
            return self._token_and_advance(kind)
        if self.ch in LETTERS:
            return self._read_identifier()
        return self._token_and_advance(TokenType.ILLEGAL)

    def _read_identifier(self) -> Token:
        start = self.position
        line = self.line
        while self.ch is not None and self.ch in LETTERS:
            self._next_char()
        literal = self.source[start:self.position]
        return Token(line, lookup_identifier(literal), literal)

    def _token_and_advance(self, kind: TokenType) -> Token:
        token = Token(self.line, kind, self.ch or "")
        self._next_char()
        return token

    def _next_char(self) -> None:
        if self.read_position >= len(self.source):
            self.ch = None
        else:
            self.ch = self.source[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def _peek_char(self) -> Optional[str]:
        if self.read_position >= len(self.source):
            return None
        return self.source[self.read_position]

    def _skip_whitespace(self) -> None:
        while self.ch in (" ", "\t", "\n", "\r"):
            # "\r\n" is a single line break
            if self.ch == "\n" or (self.ch == "\r" and self._peek_char() != "\n"):
                self.line += 1
            self._next_char()
