"""Lexer tests: token kinds, keywords, line counting and EOF behaviour."""

from backend.dragonscript.lexer import Lexer
from backend.dragonscript.tokens import TokenType, lookup_identifier


def kinds(source):
    return [t.type for t in Lexer(source)]


def test_single_character_tokens():
    assert kinds(".();,{}") == [
        TokenType.DOT,
        TokenType.LEFT_PAREN,
        TokenType.RIGHT_PAREN,
        TokenType.SEMICOLON,
        TokenType.COMMA,
        TokenType.LEFT_BRACE,
        TokenType.RIGHT_BRACE,
        TokenType.EOF,
    ]


def test_keywords_and_identifiers():
    tokens = list(Lexer("while not if else function extend knight NORTH"))
    assert [t.type for t in tokens] == [
        TokenType.WHILE,
        TokenType.NOT,
        TokenType.IF,
        TokenType.ELSE,
        TokenType.FUNCTION,
        TokenType.EXTEND,
        TokenType.IDENTIFIER,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]
    assert tokens[6].literal == "knight"
    assert tokens[7].literal == "NORTH"


def test_lookup_identifier_is_case_sensitive():
    assert lookup_identifier("while") is TokenType.WHILE
    assert lookup_identifier("While") is TokenType.IDENTIFIER


def test_digits_and_underscores_are_illegal():
    tokens = list(Lexer("move2 a_b"))
    assert [(t.type, t.literal) for t in tokens] == [
        (TokenType.IDENTIFIER, "move"),
        (TokenType.ILLEGAL, "2"),
        (TokenType.IDENTIFIER, "a"),
        (TokenType.ILLEGAL, "_"),
        (TokenType.IDENTIFIER, "b"),
        (TokenType.EOF, ""),
    ]


def test_eof_repeats_once_reached():
    lexer = Lexer("knight")
    assert lexer.next_token().type is TokenType.IDENTIFIER
    for _ in range(3):
        assert lexer.next_token().type is TokenType.EOF


def test_empty_and_whitespace_only_input():
    assert kinds("") == [TokenType.EOF]
    assert kinds(" \t\r\n ") == [TokenType.EOF]


def test_line_numbers():
    tokens = list(Lexer("a\nb\r\nc\rd\n\n e"))
    assert [(t.literal, t.line) for t in tokens[:-1]] == [
        ("a", 1),
        ("b", 2),
        ("c", 3),
        ("d", 4),
        ("e", 6),
    ]
