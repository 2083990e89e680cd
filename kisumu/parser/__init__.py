"""
Kisumu Parser Package

Implements a Pratt-based recursive descent parser for the Kisumu language.
Produces AST nodes with source location information.

Key Features:
- Top-down operator precedence (Pratt parsing)
- Lazy consumption of the lexer's token stream
- Statement-level error recovery and synchronization
- Error diagnostics with expected/found tokens

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, Precedence, parse_string, parse_file
from .printer import ASTPrinter
from .errors import ParseError, ParseErrorKind

__all__ = [
    # Core parser
    "Parser", "Precedence", "parse_string", "parse_file", "ASTPrinter",

    # AST nodes
    "AST", "ASTNode", "ASTNodeType", "ASTVisitor", "SourceSpan",
    "Program", "Statement", "Expression",
    "LetStatement", "PrintStatement", "ReturnStatement", "BlockStatement", "Block",
    "IfStatement", "FunctionDecl", "Parameter",
    "BinaryOp", "UnaryOp", "FunctionCall", "Identifier",
    "NumberLiteral", "StringLiteral", "BooleanLiteral",

    # Error handling
    "ParseError", "ParseErrorKind",
]
