"""AST node classes produced by the parser.

Nodes only describe program structure. Each class carries a `type` tag the
evaluator dispatches on, and renders back to source-like text via `str()`.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, List, Optional


class NodeType(Enum):
    PROGRAM = auto()
    WHILE = auto()
    BLOCK = auto()
    IDENTIFIER = auto()
    CALL_EXPRESSION = auto()
    DOT_EXPRESSION = auto()
    EXPRESSION_STATEMENT = auto()
    EXTEND = auto()
    FUNCTION = auto()
    NOT = auto()
    IF = auto()


class Node:
    type: ClassVar[NodeType]


class Expression(Node):
    pass


class Statement(Node):
    pass


@dataclass(frozen=True)
class Program(Node):
    type: ClassVar[NodeType] = NodeType.PROGRAM
    statements: List[Statement]

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Identifier(Expression):
    type: ClassVar[NodeType] = NodeType.IDENTIFIER
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    type: ClassVar[NodeType] = NodeType.EXPRESSION_STATEMENT
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class CallExpression(Expression):
    type: ClassVar[NodeType] = NodeType.CALL_EXPRESSION
    func: Expression
    args: List[Expression]

    def __str__(self) -> str:
        return f"{self.func}({', '.join(str(a) for a in self.args)});"


@dataclass(frozen=True)
class DotExpression(Expression):
    type: ClassVar[NodeType] = NodeType.DOT_EXPRESSION
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"{self.left}.{self.right}"


@dataclass(frozen=True)
class NotExpression(Expression):
    type: ClassVar[NodeType] = NodeType.NOT
    right: Expression

    def __str__(self) -> str:
        return f"not {self.right}"


@dataclass(frozen=True)
class BlockStatement(Statement):
    type: ClassVar[NodeType] = NodeType.BLOCK
    statements: List[Statement]

    def __str__(self) -> str:
        return "{" + "\n".join(str(s) for s in self.statements) + "}"


def _condition(expression: Expression) -> str:
    return str(expression).replace(";", "")


@dataclass(frozen=True)
class IfStatement(Statement):
    type: ClassVar[NodeType] = NodeType.IF
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        text = f"if({_condition(self.condition)}) {self.consequence}"
        if self.alternative is not None:
            text += f"else {self.alternative}"
        return text


@dataclass(frozen=True)
class WhileStatement(Statement):
    type: ClassVar[NodeType] = NodeType.WHILE
    condition: Expression
    body: BlockStatement

    def __str__(self) -> str:
        return f"while({_condition(self.condition)}){self.body}"


@dataclass(frozen=True)
class FunctionStatement(Statement):
    type: ClassVar[NodeType] = NodeType.FUNCTION
    name: Identifier
    params: List[Identifier]
    body: BlockStatement

    def __str__(self) -> str:
        params = ",".join(str(p) for p in self.params)
        return f"function {self.name} ({params}) {self.body}"


@dataclass(frozen=True)
class ExtendStatement(Statement):
    type: ClassVar[NodeType] = NodeType.EXTEND
    what_to_extend: Identifier
    extensions: List[FunctionStatement]

    def __str__(self) -> str:
        body = "\n".join(str(e) for e in self.extensions)
        return f"extend {self.what_to_extend} {{{body}}}"
