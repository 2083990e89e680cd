"""
Indented text dump of a Kisumu AST, used by ``kisumu --ast``.

Author: xwest
"""

from typing import List

from .ast_nodes import (
    ASTNode, ASTVisitor, LetStatement, FunctionDecl, BinaryOp, UnaryOp,
    Identifier, NumberLiteral, StringLiteral, BooleanLiteral
)


class ASTPrinter(ASTVisitor):
    """Renders one node per line, children indented under their parent."""

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self._depth = 0
        self._lines: List[str] = []

    def print(self, node: ASTNode) -> str:
        self._depth = 0
        self._lines = []
        node.accept(self)
        return "\n".join(self._lines)

    def visit(self, node: ASTNode):
        self._lines.append(self.indent * self._depth + self._label(node))
        self._depth += 1
        for child in node.children():
            child.accept(self)
        self._depth -= 1

    def _label(self, node: ASTNode) -> str:
        name = node.node_type.value
        if isinstance(node, LetStatement):
            hint = f": {node.type_hint}" if node.type_hint else ""
            return f"{name} {node.name}{hint}"
        if isinstance(node, FunctionDecl):
            params = ", ".join(str(p) for p in node.params)
            return f"{name} {node.name}({params})"
        if isinstance(node, (BinaryOp, UnaryOp)):
            return f"{name} {node.operator}"
        if isinstance(node, Identifier):
            return f"{name} {node.name}"
        if isinstance(node, (NumberLiteral, StringLiteral)):
            return f"{name} {node.value!r}"
        if isinstance(node, BooleanLiteral):
            return f"{name} {'true' if node.value else 'false'}"
        return name
