"""
Kisumu Lexer Package

Implements the lexical analyzer (tokenizer) for the Kisumu scripting
language.

Key Features:
- Lazy token stream (next_token / iteration)
- Newline and ';' statement boundaries
- '//' line comments skipped, never emitted
- Keyword lookup after a complete identifier scan
- Illegal input reported as error tokens, never an abort

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import Diagnostic, LexerError, LexErrorKind

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "OPERATORS",
    "Diagnostic",
    "LexerError",
    "LexErrorKind",
    "tokenize_string",
    "tokenize_file",
]
