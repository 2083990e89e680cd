"""
Abstract Syntax Tree node definitions for Kisumu.

Each node records the source span it came from and supports the visitor
pattern. Nodes are built once by the parser and never modified afterwards;
they keep no reference to their parent, so a tree has no cycles.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any, Callable
from dataclasses import dataclass
from enum import Enum

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"

    # Statements
    LET_STATEMENT = "LetStatement"
    PRINT_STATEMENT = "PrintStatement"
    RETURN_STATEMENT = "ReturnStatement"
    BLOCK_STATEMENT = "BlockStatement"
    IF_STATEMENT = "IfStatement"
    FUNCTION_DECL = "FunctionDecl"

    # Expressions
    BINARY_OP = "BinaryOp"
    UNARY_OP = "UnaryOp"
    FUNCTION_CALL = "FunctionCall"
    IDENTIFIER = "Identifier"

    # Literals
    NUMBER_LITERAL = "NumberLiteral"
    STRING_LITERAL = "StringLiteral"
    BOOLEAN_LITERAL = "BooleanLiteral"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor(ABC):
    """Abstract visitor interface for traversing AST nodes."""

    @abstractmethod
    def visit(self, node: 'ASTNode') -> Any:
        """Visit a generic AST node."""
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, span: SourceSpan):
        self.node_type = node_type
        self.span = span

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    def evaluate(self, env, output: Optional[Callable[[str], None]] = None):
        """
        Evaluate this node against an Environment.

        Args:
            env: The Environment to read and bind names in
            output: Receives each line rendered by printline; without it
                printed lines are discarded

        Returns:
            The resulting runtime Object (possibly an Error object)
        """
        from ..runtime.evaluator import Evaluator

        return Evaluator(output=output).evaluate_statement(self, env)

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.span}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(span={self.span})"


# ============================================================================
# Top-level nodes
# ============================================================================

class Program(ASTNode):
    """Root AST node: the ordered top-level statements of a program."""
    statements: List['Statement']

    def __init__(self, statements: List['Statement'], span: SourceSpan):
        super().__init__(ASTNodeType.PROGRAM, span)
        self.statements = statements

    def children(self) -> List[ASTNode]:
        return list(self.statements)


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class LetStatement(Statement):
    """Variable binding: let name [: type] = value."""
    name: str
    type_hint: Optional[str]
    value: 'Expression'

    def __init__(self, name: str, type_hint: Optional[str], value: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.LET_STATEMENT, span)
        self.name = name
        self.type_hint = type_hint
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.value]

    def __repr__(self) -> str:
        hint = f": {self.type_hint}" if self.type_hint else ""
        return f"LetStatement({self.name}{hint} = {self.value!r})"


class PrintStatement(Statement):
    """Call of the print builtin."""
    expression: 'Expression'

    def __init__(self, expression: 'Expression', span: SourceSpan):
        super().__init__(ASTNodeType.PRINT_STATEMENT, span)
        self.expression = expression

    def children(self) -> List[ASTNode]:
        return [self.expression]

    def __repr__(self) -> str:
        return f"PrintStatement({self.expression!r})"


class ReturnStatement(Statement):
    """Return statement."""
    value: Optional['Expression']

    def __init__(self, value: Optional['Expression'], span: SourceSpan):
        super().__init__(ASTNodeType.RETURN_STATEMENT, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value else []

    def __repr__(self) -> str:
        return f"ReturnStatement({self.value!r})"


class BlockStatement(Statement):
    """Block statement containing multiple statements."""
    statements: List[Statement]

    def __init__(self, statements: List[Statement], span: SourceSpan):
        super().__init__(ASTNodeType.BLOCK_STATEMENT, span)
        self.statements = statements

    def children(self) -> List[ASTNode]:
        return list(self.statements)

    def __repr__(self) -> str:
        return f"BlockStatement({self.statements!r})"


class IfStatement(Statement):
    """If statement with optional else block."""
    condition: 'Expression'
    then_block: BlockStatement
    else_block: Optional[Statement] = None

    def __init__(self, condition: 'Expression', then_block: BlockStatement,
                 else_block: Optional[Statement], span: SourceSpan):
        super().__init__(ASTNodeType.IF_STATEMENT, span)
        self.condition = condition
        self.then_block = then_block
        self.else_block = else_block

    def children(self) -> List[ASTNode]:
        children = [self.condition, self.then_block]
        if self.else_block:
            children.append(self.else_block)
        return children

    def __repr__(self) -> str:
        return f"IfStatement({self.condition!r}, {self.then_block!r}, {self.else_block!r})"


@dataclass(frozen=True)
class Parameter:
    """Function parameter."""
    name: str
    type_hint: Optional[str] = None

    def __str__(self) -> str:
        if self.type_hint:
            return f"{self.name}: {self.type_hint}"
        return self.name


class FunctionDecl(Statement):
    """Function declaration: func name(params) { body }."""
    name: str
    params: List[Parameter]
    body: BlockStatement

    def __init__(self, name: str, params: List[Parameter], body: BlockStatement, span: SourceSpan):
        super().__init__(ASTNodeType.FUNCTION_DECL, span)
        self.name = name
        self.params = params
        self.body = body

    def children(self) -> List[ASTNode]:
        return [self.body]

    def __repr__(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        return f"FunctionDecl({self.name}({params}) {self.body!r})"


# ============================================================================
# Expressions
# ============================================================================

class Expression(Statement):
    """Base class for expressions. A bare expression is also a statement."""
    pass


class BinaryOp(Expression):
    """Binary operation expression."""
    left: Expression
    operator: str
    right: Expression

    def __init__(self, left: Expression, operator: str, right: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.BINARY_OP, span)
        self.left = left
        self.operator = operator
        self.right = right

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]

    def __repr__(self) -> str:
        return f"BinaryOp({self.left!r} {self.operator} {self.right!r})"


class UnaryOp(Expression):
    """Unary operation expression."""
    operator: str
    operand: Expression

    def __init__(self, operator: str, operand: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.UNARY_OP, span)
        self.operator = operator
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return [self.operand]

    def __repr__(self) -> str:
        return f"UnaryOp({self.operator}{self.operand!r})"


class FunctionCall(Expression):
    """Function call expression."""
    function: Expression
    args: List[Expression]

    def __init__(self, function: Expression, args: List[Expression], span: SourceSpan):
        super().__init__(ASTNodeType.FUNCTION_CALL, span)
        self.function = function
        self.args = args

    def children(self) -> List[ASTNode]:
        return [self.function] + list(self.args)

    def __repr__(self) -> str:
        return f"FunctionCall({self.function!r}, {self.args!r})"


class Identifier(Expression):
    """Identifier expression."""
    name: str

    def __init__(self, name: str, span: SourceSpan):
        super().__init__(ASTNodeType.IDENTIFIER, span)
        self.name = name

    def children(self) -> List[ASTNode]:
        return []

    def __repr__(self) -> str:
        return f"Identifier({self.name})"


class NumberLiteral(Expression):
    """Integer literal."""
    value: int

    def __init__(self, value: int, span: SourceSpan):
        super().__init__(ASTNodeType.NUMBER_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []

    def __repr__(self) -> str:
        return f"NumberLiteral({self.value})"


class StringLiteral(Expression):
    """Double-quoted string literal."""
    value: str

    def __init__(self, value: str, span: SourceSpan):
        super().__init__(ASTNodeType.STRING_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []

    def __repr__(self) -> str:
        return f"StringLiteral({self.value!r})"


class BooleanLiteral(Expression):
    """true / false."""
    value: bool

    def __init__(self, value: bool, span: SourceSpan):
        super().__init__(ASTNodeType.BOOLEAN_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []

    def __repr__(self) -> str:
        return f"BooleanLiteral({'true' if self.value else 'false'})"


# Aliases for the names used in the language documentation
Block = BlockStatement
AST = Program
