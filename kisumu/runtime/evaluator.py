"""
Tree-walking evaluator for Kisumu.

Walks AST nodes against an Environment and produces runtime Objects.
Errors are Error objects returned up the tree: any sub-evaluation that
yields one stops its parent expression, statement or block at once.

Author: xwest
"""

import logging
from typing import Callable, List, Optional

from ..parser.ast_nodes import (
    ASTNode, Program, LetStatement, PrintStatement, ReturnStatement,
    BlockStatement, IfStatement, FunctionDecl, BinaryOp, UnaryOp, FunctionCall,
    Identifier, NumberLiteral, StringLiteral, BooleanLiteral
)
from ..config import InterpreterConfig
from .environment import Environment
from .objects import (
    Object, ObjectType, ErrorKind, Integer, String, Boolean, Error, Function,
    ReturnValue, NULL, is_error, render, new_error, new_integer,
    native_bool_to_boolean
)

logger = logging.getLogger(__name__)


class Evaluator:
    """
    Evaluates AST nodes.

    The evaluator keeps no program state of its own: every binding lives in
    the Environment passed to evaluate(). Printed lines go to ``output``.
    """

    def __init__(self, output: Optional[Callable[[str], None]] = None,
                 config: Optional[InterpreterConfig] = None):
        self.config = config or InterpreterConfig()
        self.printed: List[str] = []
        self.output = output if output is not None else self.printed.append
        self._call_depth = 0

    def evaluate(self, node: ASTNode, env: Environment) -> Object:
        """
        Evaluate a node against an environment.

        Returns:
            The resulting Object; errors come back as Error objects
        """
        if isinstance(node, Program):
            results = self.evaluate_program(node, env)
            return results[-1] if results else NULL
        elif isinstance(node, LetStatement):
            return self._eval_let_statement(node, env)
        elif isinstance(node, PrintStatement):
            return self._eval_print_statement(node, env)
        elif isinstance(node, ReturnStatement):
            return self._eval_return_statement(node, env)
        elif isinstance(node, BlockStatement):
            return self._eval_block_statement(node, env)
        elif isinstance(node, IfStatement):
            return self._eval_if_statement(node, env)
        elif isinstance(node, FunctionDecl):
            return self._eval_function_decl(node, env)
        elif isinstance(node, BinaryOp):
            return self._eval_binary_op(node, env)
        elif isinstance(node, UnaryOp):
            return self._eval_unary_op(node, env)
        elif isinstance(node, FunctionCall):
            return self._eval_function_call(node, env)
        elif isinstance(node, Identifier):
            return self._eval_identifier(node, env)
        elif isinstance(node, NumberLiteral):
            return new_integer(node.value)
        elif isinstance(node, StringLiteral):
            return String(node.value)
        elif isinstance(node, BooleanLiteral):
            return native_bool_to_boolean(node.value)

        return new_error(ErrorKind.TYPE_MISMATCH, f"cannot evaluate {type(node).__name__}")

    def evaluate_program(self, program: Program, env: Environment) -> List[Object]:
        """
        Evaluate top-level statements in order.

        An error in one statement does not stop the next one.

        Returns:
            One result per statement
        """
        results = []
        for stmt in program.statements:
            results.append(self.evaluate_statement(stmt, env))
        return results

    def evaluate_statement(self, stmt: ASTNode, env: Environment) -> Object:
        """Evaluate one top-level statement; a top-level return yields its value."""
        try:
            result = self.evaluate(stmt, env)
        except RecursionError:
            # Python's stack ran out before max_call_depth did
            result = new_error(
                ErrorKind.CALL_DEPTH_EXCEEDED,
                "call depth exceeded: evaluation nested too deeply"
            )
        if isinstance(result, ReturnValue):
            result = result.value
        if is_error(result):
            logger.debug("statement at %s evaluated to error: %s", stmt.span, result.message)
        return result

    # Statements

    def _eval_let_statement(self, stmt: LetStatement, env: Environment) -> Object:
        value = self.evaluate(stmt.value, env)
        if is_error(value):
            return value
        return env.define(stmt.name, value)

    def _eval_print_statement(self, stmt: PrintStatement, env: Environment) -> Object:
        value = self.evaluate(stmt.expression, env)
        self.output(render(value))
        return NULL

    def _eval_return_statement(self, stmt: ReturnStatement, env: Environment) -> Object:
        if stmt.value is None:
            return ReturnValue(NULL)
        value = self.evaluate(stmt.value, env)
        if is_error(value):
            return value
        return ReturnValue(value)

    def _eval_block_statement(self, block: BlockStatement, env: Environment) -> Object:
        return self._eval_statements(block.statements, env.child())

    def _eval_statements(self, statements, env: Environment) -> Object:
        """Run statements in ``env``, stopping at the first error or return."""
        result: Object = NULL
        for stmt in statements:
            result = self.evaluate(stmt, env)
            if result.type in (ObjectType.ERROR, ObjectType.RETURN_VALUE):
                return result
        return result

    def _eval_if_statement(self, stmt: IfStatement, env: Environment) -> Object:
        condition = self.evaluate(stmt.condition, env)
        if is_error(condition):
            return condition
        if not isinstance(condition, Boolean):
            return new_error(
                ErrorKind.TYPE_MISMATCH,
                f"type mismatch: if condition must be BOOLEAN, got {condition.type.value}"
            )

        if condition.value:
            return self.evaluate(stmt.then_block, env)
        if stmt.else_block is not None:
            return self.evaluate(stmt.else_block, env)
        return NULL

    def _eval_function_decl(self, decl: FunctionDecl, env: Environment) -> Object:
        function = Function(decl.name, list(decl.params), decl.body, env)
        return env.define(decl.name, function)

    # Expressions

    def _eval_identifier(self, node: Identifier, env: Environment) -> Object:
        value = env.get(node.name)
        if value is None:
            return new_error(ErrorKind.UNDEFINED_VARIABLE, f"identifier not found: {node.name}")
        return value

    def _eval_unary_op(self, node: UnaryOp, env: Environment) -> Object:
        operand = self.evaluate(node.operand, env)
        if is_error(operand):
            return operand

        if node.operator != "-":
            return new_error(ErrorKind.UNKNOWN_OPERATOR, f"unknown operator: {node.operator}{operand.type.value}")
        if not isinstance(operand, Integer):
            return new_error(ErrorKind.TYPE_MISMATCH, f"type mismatch: -{operand.type.value}")
        return new_integer(-operand.value)

    def _eval_binary_op(self, node: BinaryOp, env: Environment) -> Object:
        left = self.evaluate(node.left, env)
        if is_error(left):
            return left

        right = self.evaluate(node.right, env)
        if is_error(right):
            return right

        return eval_infix(node.operator, left, right)

    def _eval_function_call(self, call: FunctionCall, env: Environment) -> Object:
        function = self.evaluate(call.function, env)
        if is_error(function):
            return function
        if not isinstance(function, Function):
            return new_error(ErrorKind.TYPE_MISMATCH, f"not a function: {function.type.value}")

        args = []
        for arg in call.args:
            value = self.evaluate(arg, env)
            if is_error(value):
                return value
            args.append(value)

        return self._apply_function(function, args)

    def _apply_function(self, function: Function, args: List[Object]) -> Object:
        if len(args) != len(function.params):
            return new_error(
                ErrorKind.WRONG_ARGUMENT_COUNT,
                f"wrong number of arguments to {function.name}: expected {len(function.params)}, got {len(args)}"
            )
        if self._call_depth >= self.config.max_call_depth:
            return new_error(
                ErrorKind.CALL_DEPTH_EXCEEDED,
                f"call depth exceeded {self.config.max_call_depth} in {function.name}"
            )

        call_env = function.env.child()
        for param, arg in zip(function.params, args):
            call_env.define(param.name, arg)

        self._call_depth += 1
        try:
            result = self._eval_statements(function.body.statements, call_env)
        finally:
            self._call_depth -= 1

        if isinstance(result, ReturnValue):
            return result.value
        if is_error(result):
            return result
        return NULL


def eval_infix(operator: str, left: Object, right: Object) -> Object:
    """
    Apply a binary operator to two evaluated operands.

    Every (tag, operator, tag) combination not listed is an error object.
    """
    if left.type != right.type:
        return new_error(
            ErrorKind.TYPE_MISMATCH,
            f"type mismatch: {left.type.value} {operator} {right.type.value}"
        )

    if isinstance(left, Integer) and isinstance(right, Integer):
        return _eval_integer_infix(operator, left.value, right.value)

    if isinstance(left, (String, Boolean)) and operator in ("==", "!="):
        equal = left.value == right.value
        return native_bool_to_boolean(equal if operator == "==" else not equal)

    return _unknown_operator(operator, left, right)


def _eval_integer_infix(operator: str, a: int, b: int) -> Object:
    if operator == "+":
        return new_integer(a + b)
    elif operator == "-":
        return new_integer(a - b)
    elif operator == "*":
        return new_integer(a * b)
    elif operator == "/":
        if b == 0:
            return new_error(ErrorKind.DIVISION_BY_ZERO, f"division by zero: {a} / 0")
        quotient = abs(a) // abs(b)
        return new_integer(quotient if (a < 0) == (b < 0) else -quotient)
    elif operator == "<":
        return native_bool_to_boolean(a < b)
    elif operator == ">":
        return native_bool_to_boolean(a > b)
    elif operator == "==":
        return native_bool_to_boolean(a == b)
    elif operator == "!=":
        return native_bool_to_boolean(a != b)

    return new_error(ErrorKind.UNKNOWN_OPERATOR, f"unknown operator: INTEGER {operator} INTEGER")


def _unknown_operator(operator: str, left: Object, right: Object) -> Error:
    return new_error(
        ErrorKind.UNKNOWN_OPERATOR,
        f"unknown operator: {left.type.value} {operator} {right.type.value}"
    )
