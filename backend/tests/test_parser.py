"""Parser tests covering statement shapes, precedence and error reporting."""

from backend.dragonscript.nodes import (
    BlockStatement,
    CallExpression,
    DotExpression,
    ExpressionStatement,
    ExtendStatement,
    FunctionStatement,
    Identifier,
    IfStatement,
    NotExpression,
    Program,
    WhileStatement,
)
from backend.dragonscript.parser import parse


def parse_ok(source):
    program, errors = parse(source)
    assert errors == []
    return program


def test_parse_returns_program_and_error_list():
    program, errors = parse("knight.move(NORTH);")
    assert isinstance(program, Program)
    assert isinstance(errors, list) and errors == []

    program, errors = parse(")")
    assert isinstance(program, Program)
    assert errors == ["Line[1]: No prefix parser for RIGHT_PAREN found."]


def test_call_on_member():
    program = parse_ok("knight.move(NORTH);")
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    call = stmt.expression
    assert isinstance(call, CallExpression)
    assert call.func == DotExpression(Identifier("knight"), Identifier("move"))
    assert call.args == [Identifier("NORTH")]


def test_dot_chains_left_to_right():
    call = parse_ok("a.b.c()").statements[0].expression
    assert isinstance(call, CallExpression)
    assert call.args == []
    assert call.func == DotExpression(DotExpression(Identifier("a"), Identifier("b")), Identifier("c"))
    assert str(call) == "a.b.c();"


def test_not_wraps_the_whole_call():
    expr = parse_ok("not knight.isNextTo(EAST, WALL)").statements[0].expression
    assert isinstance(expr, NotExpression)
    assert isinstance(expr.right, CallExpression)
    assert expr.right.args == [Identifier("EAST"), Identifier("WALL")]
    assert str(expr) == "not knight.isNextTo(EAST, WALL);"


def test_semicolon_is_optional():
    program = parse_ok("knight.move(NORTH) knight.move(SOUTH)")
    assert len(program.statements) == 2


def test_if_else():
    stmt = parse_ok(
        "if(knight.isNextTo(NORTH, dragon)) { knight.attack(NORTH); } else { knight.move(EAST); }"
    ).statements[0]
    assert isinstance(stmt, IfStatement)
    assert isinstance(stmt.consequence, BlockStatement)
    assert len(stmt.consequence.statements) == 1
    assert stmt.alternative is not None
    assert len(stmt.alternative.statements) == 1


def test_if_without_else_and_empty_block():
    stmt = parse_ok("if(x) {}").statements[0]
    assert isinstance(stmt, IfStatement)
    assert stmt.consequence.statements == []
    assert stmt.alternative is None


def test_nested_while():
    stmt = parse_ok(
        "while(not knight.isNextTo(SOUTH, dragon)) {\n"
        "  while(knight.isNextTo(EAST, ROAD)) { knight.move(EAST); }\n"
        "  knight.move(SOUTH);\n"
        "}"
    ).statements[0]
    assert isinstance(stmt, WhileStatement)
    assert isinstance(stmt.condition, NotExpression)
    assert isinstance(stmt.body.statements[0], WhileStatement)
    assert len(stmt.body.statements) == 2


def test_function_parameters():
    stmt = parse_ok("function go(who, dir) { who.move(dir); }").statements[0]
    assert isinstance(stmt, FunctionStatement)
    assert stmt.name == Identifier("go")
    assert stmt.params == [Identifier("who"), Identifier("dir")]
    assert len(stmt.body.statements) == 1
    assert parse_ok("function noop() {}").statements[0].params == []


def test_extend_with_several_functions():
    stmt = parse_ok(
        "extend knight {\n"
        "  function twice(d) { this.move(d); this.move(d); }\n"
        "  function rest() {}\n"
        "}\n"
        "knight.twice(EAST);"
    ).statements[0]
    assert isinstance(stmt, ExtendStatement)
    assert stmt.what_to_extend == Identifier("knight")
    assert [f.name.value for f in stmt.extensions] == ["twice", "rest"]


def test_missing_closing_brace_is_reported():
    _, errors = parse("if(knight.isNextTo(NORTH, dragon)) { knight.attack(NORTH);")
    assert errors == ["Line[1]: Expected next token to be RIGHT_BRACE, got EOF instead."]


def test_missing_paren_after_while():
    _, errors = parse("while knight.isNextTo(NORTH, ROAD) { }")
    assert errors
    assert errors[0] == "Line[1]: Expected next token to be LEFT_PAREN, got IDENTIFIER instead."


def test_illegal_character_reports_line():
    _, errors = parse("knight.move(NORTH);\n\nknight.move(1);")
    assert errors[0] == "Line[3]: No prefix parser for ILLEGAL found."


def test_extend_only_accepts_functions():
    _, errors = parse("extend knight { knight.move(NORTH); }")
    assert errors[0] == "Line[1]: Expected next token to be FUNCTION, got IDENTIFIER instead."


def test_parameters_must_be_identifiers():
    _, errors = parse("function f(a, ) {}")
    assert errors[0] == "Line[1]: Expected next token to be IDENTIFIER, got RIGHT_PAREN instead."


def test_unclosed_argument_list():
    _, errors = parse("knight.isNextTo(NORTH, ROAD")
    assert errors[0] == "Line[1]: Expected next token to be RIGHT_PAREN, got EOF instead."


def test_parsing_terminates_on_garbage():
    _, errors = parse("}}}) ( ; , . 42 {{")
    assert errors
