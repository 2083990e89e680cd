"""
Token definitions for the Kisumu lexer.

This module defines all token types supported by Kisumu, including:
- Keywords (let, func, if, else, return, printline)
- Operators (arithmetic and comparison)
- Literals (integers, strings, booleans)
- Punctuation and statement boundaries
- Error tokens produced instead of aborting on bad input

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in Kisumu.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input
    NEWLINE = auto()                # Statement boundary
    SEMICOLON = auto()              # Explicit statement boundary ;

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER = auto()                # 42
    STRING = auto()                 # "hello"
    TRUE = auto()                   # true
    FALSE = auto()                  # false

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # variable_name

    LET = auto()                    # let
    FUNC = auto()                   # func
    IF = auto()                     # if
    ELSE = auto()                   # else
    RETURN = auto()                 # return
    PRINTLINE = auto()              # printline (print builtin)

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=

    ASSIGN = auto()                 # =

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    COLON = auto()                  # :
    COMMA = auto()                  # ,

    # ========================================================================
    # Error Tokens
    # ========================================================================
    INVALID = auto()                # Unrecognized character
    UNTERMINATED_STRING = auto()    # String literal without closing quote


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Kisumu language.

    Contains the token type, lexeme (raw text), semantic value,
    and source location for error reporting.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed value (int for INTEGER, LexerError for error tokens)
    location: SourceLocation

    def __str__(self) -> str:
        if self.type in (TokenType.INTEGER, TokenType.STRING):
            return f"{self.type.name}({self.value!r})"
        if self.type == TokenType.IDENTIFIER:
            return f"{self.type.name}({self.lexeme})"
        return self.type.name

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERALS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORDS.values()

    @property
    def is_error(self) -> bool:
        """Check if this token stands for a lexical error."""
        return self.type in ERROR_TOKENS

    @property
    def is_boundary(self) -> bool:
        """Check if this token ends a statement."""
        return self.type in STATEMENT_BOUNDARIES


# Lookup tables used by the lexer for keyword/operator recognition

KEYWORDS = {
    "let": TokenType.LET,
    "func": TokenType.FUNC,
    "Func": TokenType.FUNC,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
    "printline": TokenType.PRINTLINE,
    "Printline": TokenType.PRINTLINE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

OPERATORS = {
    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,

    # Comparison
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,

    # Assignment
    "=": TokenType.ASSIGN,

    # Punctuation
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
}

LITERALS = frozenset({
    TokenType.INTEGER, TokenType.STRING, TokenType.TRUE, TokenType.FALSE,
})

ERROR_TOKENS = frozenset({
    TokenType.INVALID, TokenType.UNTERMINATED_STRING,
})

STATEMENT_BOUNDARIES = frozenset({
    TokenType.NEWLINE, TokenType.SEMICOLON, TokenType.EOF,
})
