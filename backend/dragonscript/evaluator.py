"""Tree-walking evaluator for DragonScript.

`Evaluator.visit` dispatches on the node's `NodeType` tag to a
``visit_<NodeClass>`` method, much like `ast.NodeVisitor`, and threads the
current `Environment` through every call. Each visit returns exactly one
`LangObject`; an `ErrorObject` from any sub-evaluation is returned
immediately by every composite construct (program, block, call arguments,
conditions), so a failing statement stops the rest of the script.
"""

from typing import Dict, List

from .environment import Environment
from .instance import Instance
from .nodes import (
    BlockStatement,
    CallExpression,
    DotExpression,
    ExpressionStatement,
    ExtendStatement,
    FunctionStatement,
    Identifier,
    IfStatement,
    Node,
    NodeType,
    NotExpression,
    Program,
    WhileStatement,
)
from .objects import (
    FALSE,
    NULL,
    TRUE,
    ErrorObject,
    Function,
    LangObject,
    NativeFunction,
    ObjectType,
    is_error,
)


class Evaluator:
    """Stateless visitor; one instance may evaluate any number of programs."""

    DISPATCH: Dict[NodeType, str] = {
        NodeType.PROGRAM: "visit_Program",
        NodeType.BLOCK: "visit_BlockStatement",
        NodeType.EXPRESSION_STATEMENT: "visit_ExpressionStatement",
        NodeType.IDENTIFIER: "visit_Identifier",
        NodeType.DOT_EXPRESSION: "visit_DotExpression",
        NodeType.CALL_EXPRESSION: "visit_CallExpression",
        NodeType.NOT: "visit_NotExpression",
        NodeType.IF: "visit_IfStatement",
        NodeType.WHILE: "visit_WhileStatement",
        NodeType.FUNCTION: "visit_FunctionStatement",
        NodeType.EXTEND: "visit_ExtendStatement",
    }

    def visit(self, node: Node, env: Environment) -> LangObject:
        name = self.DISPATCH.get(getattr(node, "type", None), "generic_visit")
        return getattr(self, name)(node, env)

    def generic_visit(self, node: Node, env: Environment) -> LangObject:
        return ErrorObject(f"Unsupported node: {type(node).__name__}")

    def visit_Program(self, node: Program, env: Environment) -> LangObject:
        result: LangObject = ErrorObject("Program is empty.")
        for statement in node.statements:
            result = self.visit(statement, env)
            if is_error(result):
                return result
        return result

    def visit_BlockStatement(self, node: BlockStatement, env: Environment) -> LangObject:
        result: LangObject = NULL
        for statement in node.statements:
            result = self.visit(statement, env)
            if is_error(result):
                return result
        return result

    def visit_ExpressionStatement(self, node: ExpressionStatement, env: Environment) -> LangObject:
        return self.visit(node.expression, env)

    def visit_Identifier(self, node: Identifier, env: Environment) -> LangObject:
        value = env.get(node.value)
        if value is None:
            return ErrorObject(f"Identifier not found: {node.value}")
        return value

    def visit_DotExpression(self, node: DotExpression, env: Environment) -> LangObject:
        left = self.visit(node.left, env)
        if is_error(left):
            return left
        if not isinstance(left, Instance):
            return ErrorObject("'left' in dot expression must be an <Instance>.")
        # the right side names a property; it is never looked up as a variable
        if not isinstance(node.right, Identifier):
            return ErrorObject("'right' in dot expression must be an <Identifier>.")
        return left.get(node.right.value)

    def visit_CallExpression(self, node: CallExpression, env: Environment) -> LangObject:
        callee = self.visit(node.func, env)
        if is_error(callee):
            return callee
        if callee.type is not ObjectType.FUNCTION:
            return ErrorObject(f"{callee.type.name} is not a function")

        args: List[LangObject] = []
        for arg in node.args:
            value = self.visit(arg, env)
            if is_error(value):
                return value
            args.append(value)

        if isinstance(callee, NativeFunction):
            return callee(args)
        return self.apply_function(callee, args)

    def apply_function(self, func: Function, args: List[LangObject]) -> LangObject:
        """Run a user function in a new frame enclosed by its closure.

        Parameters are bound positionally. Extra arguments are dropped and
        parameters without an argument stay unbound.
        """
        frame = Environment(func.closure)
        for name, value in zip(func.params, args):
            frame.set(name, value)
        return self.visit(func.body, frame)

    def visit_NotExpression(self, node: NotExpression, env: Environment) -> LangObject:
        right = self.visit(node.right, env)
        if is_error(right):
            return right
        if right is FALSE:
            return TRUE
        return FALSE

    def visit_IfStatement(self, node: IfStatement, env: Environment) -> LangObject:
        condition = self.visit(node.condition, env)
        if is_error(condition):
            return condition
        if condition is TRUE:
            return self.visit(node.consequence, env)
        if node.alternative is not None:
            return self.visit(node.alternative, env)
        return NULL

    def visit_WhileStatement(self, node: WhileStatement, env: Environment) -> LangObject:
        while True:
            condition = self.visit(node.condition, env)
            if is_error(condition):
                return condition
            if condition is not TRUE:
                return NULL
            result = self.visit(node.body, env)
            if is_error(result):
                return result

    def visit_FunctionStatement(self, node: FunctionStatement, env: Environment) -> LangObject:
        name = node.name.value
        env.set(name, Function(name, [p.value for p in node.params], node.body, env))
        return NULL

    def visit_ExtendStatement(self, node: ExtendStatement, env: Environment) -> LangObject:
        target = self.visit(node.what_to_extend, env)
        if is_error(target):
            return target
        if not isinstance(target, Instance):
            return ErrorObject(
                f"Extends only works on instances! {target.type.name} is not an instance."
            )
        for extension in node.extensions:
            name = extension.name.value
            func = Function(name, [p.value for p in extension.params], extension.body, target.instance_env)
            target.add_function(name, func)
        return NULL


_EVALUATOR = Evaluator()


def evaluate(node: Node, env: Environment) -> LangObject:
    """Evaluate `node` in `env` with the shared stateless evaluator."""
    return _EVALUATOR.visit(node, env)
