"""Recursive-descent parser for DragonScript.

Statements are parsed by dedicated methods; expressions use a small
precedence-climbing loop driven by prefix and infix parselet tables.

The parser never raises on malformed input. Every unmet expectation appends
a ``Line[n]: ...`` message to `errors` and the construct being parsed is
abandoned (the method returns None). Callers must not evaluate a program
while `errors` is non-empty.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .lexer import Lexer
from .nodes import (
    BlockStatement,
    CallExpression,
    DotExpression,
    Expression,
    ExpressionStatement,
    ExtendStatement,
    FunctionStatement,
    Identifier,
    IfStatement,
    NotExpression,
    Program,
    Statement,
    WhileStatement,
)
from .tokens import Token, TokenType


class Precedence(IntEnum):
    LOWEST = 0
    NOT = 1
    CALL = 2
    DOT = 3


PRECEDENCES = {
    TokenType.DOT: Precedence.DOT,
    TokenType.LEFT_PAREN: Precedence.CALL,
    TokenType.NOT: Precedence.NOT,
}


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []
        self.cur_token: Token = lexer.next_token()
        self.peek_token: Token = lexer.next_token()

        self.prefix_parsers: Dict[TokenType, Callable[[], Optional[Expression]]] = {
            TokenType.IDENTIFIER: self.parse_identifier,
            TokenType.NOT: self.parse_not_expression,
        }
        self.infix_parsers: Dict[TokenType, Callable[[Expression], Optional[Expression]]] = {
            TokenType.DOT: self.parse_dot_expression,
            TokenType.LEFT_PAREN: self.parse_call_expression,
        }

    # --- Statements ----------------------------------------------------
    def parse_program(self) -> Program:
        statements: List[Statement] = []
        while not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Program(statements)

    def parse_statement(self) -> Optional[Statement]:
        kind = self.cur_token.type
        if kind is TokenType.WHILE:
            return self.parse_while_statement()
        if kind is TokenType.IF:
            return self.parse_if_statement()
        if kind is TokenType.EXTEND:
            return self.parse_extend_statement()
        if kind is TokenType.FUNCTION:
            return self.parse_function_statement()
        return self.parse_expression_statement()

    def _parse_condition(self) -> Optional[Expression]:
        # "(" expr ")" with the current token on the keyword
        if not self.expect_peek(TokenType.LEFT_PAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenType.RIGHT_PAREN):
            return None
        return condition

    def parse_while_statement(self) -> Optional[WhileStatement]:
        condition = self._parse_condition()
        if condition is None:
            return None
        if not self.expect_peek(TokenType.LEFT_BRACE):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None
        return WhileStatement(condition, body)

    def parse_if_statement(self) -> Optional[IfStatement]:
        condition = self._parse_condition()
        if condition is None:
            return None
        if not self.expect_peek(TokenType.LEFT_BRACE):
            return None
        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LEFT_BRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None
        return IfStatement(condition, consequence, alternative)

    def parse_extend_statement(self) -> Optional[ExtendStatement]:
        if not self.expect_peek(TokenType.IDENTIFIER):
            return None
        what_to_extend = Identifier(self.cur_token.literal)
        if not self.expect_peek(TokenType.LEFT_BRACE):
            return None

        functions: List[FunctionStatement] = []
        while not self.peek_token_is(TokenType.RIGHT_BRACE):
            if not self.expect_peek(TokenType.FUNCTION):
                return None
            func = self.parse_function_statement()
            if func is None:
                return None
            functions.append(func)
        self.next_token()
        return ExtendStatement(what_to_extend, functions)

    def parse_function_statement(self) -> Optional[FunctionStatement]:
        if not self.expect_peek(TokenType.IDENTIFIER):
            return None
        name = Identifier(self.cur_token.literal)
        if not self.expect_peek(TokenType.LEFT_PAREN):
            return None
        params = self.parse_function_parameters()
        if params is None:
            return None
        if not self.expect_peek(TokenType.LEFT_BRACE):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None
        return FunctionStatement(name, params, body)

    def parse_function_parameters(self) -> Optional[List[Identifier]]:
        params: List[Identifier] = []
        if self.peek_token_is(TokenType.RIGHT_PAREN):
            self.next_token()
            return params

        if not self.expect_peek(TokenType.IDENTIFIER):
            return None
        params.append(Identifier(self.cur_token.literal))
        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENTIFIER):
                return None
            params.append(Identifier(self.cur_token.literal))

        if not self.expect_peek(TokenType.RIGHT_PAREN):
            return None
        return params

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return ExpressionStatement(expression)

    def parse_block_statement(self) -> Optional[BlockStatement]:
        # current token is "{"; on success it ends on the matching "}"
        statements: List[Statement] = []
        self.next_token()
        while not self.cur_token_is(TokenType.RIGHT_BRACE):
            if self.cur_token_is(TokenType.EOF):
                self._add_error(self.cur_token, TokenType.RIGHT_BRACE)
                return None
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return BlockStatement(statements)

    # --- Expressions ---------------------------------------------------
    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_parsers.get(self.cur_token.type)
        if prefix is None:
            self.errors.append(
                f"Line[{self.cur_token.line}]: No prefix parser for {self.cur_token.type.name} found."
            )
            return None

        left = prefix()
        if left is None:
            return None
        while not self.cur_token_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parsers.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
            if left is None:
                return None
        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token.literal)

    def parse_not_expression(self) -> Optional[Expression]:
        self.next_token()
        right = self.parse_expression(Precedence.NOT)
        if right is None:
            return None
        return NotExpression(right)

    def parse_dot_expression(self, left: Expression) -> Optional[Expression]:
        self.next_token()
        right = self.parse_expression(Precedence.DOT)
        if right is None:
            return None
        return DotExpression(left, right)

    def parse_call_expression(self, func: Expression) -> Optional[Expression]:
        args = self.parse_expression_list(TokenType.RIGHT_PAREN)
        if args is None:
            return None
        return CallExpression(func, args)

    def parse_expression_list(self, end: TokenType) -> Optional[List[Expression]]:
        args: List[Expression] = []
        if self.peek_token_is(end):
            self.next_token()
            return args

        self.next_token()
        first = self.parse_expression(Precedence.LOWEST)
        if first is None:
            return None
        args.append(first)
        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)

        if not self.expect_peek(end):
            return None
        return args

    # --- Token helpers -------------------------------------------------
    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind: TokenType) -> bool:
        return self.cur_token.type is kind

    def peek_token_is(self, kind: TokenType) -> bool:
        return self.peek_token.type is kind

    def expect_peek(self, kind: TokenType) -> bool:
        """Advance if the peek token is `kind`, otherwise record an error."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self._add_error(self.peek_token, kind)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _add_error(self, got: Token, expected: TokenType) -> None:
        self.errors.append(
            f"Line[{got.line}]: Expected next token to be {expected.name}, got {got.type.name} instead."
        )


def parse(source: str) -> Tuple[Program, List[str]]:
    """Parse `source`, returning (program, errors)."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
