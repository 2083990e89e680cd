"""
Error handling for the Kisumu parser.

Syntax errors are raised inside the parser, caught at statement
granularity and collected; parse() itself never raises.

Author: xwest
"""

from enum import Enum
from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation, STATEMENT_BOUNDARIES
from ..lexer.errors import Diagnostic, ErrorRecovery


class ParseErrorKind(Enum):
    """Categories of syntax errors."""
    UNEXPECTED_TOKEN = "UnexpectedToken"
    MISSING_TOKEN = "MissingToken"
    NESTING_TOO_DEEP = "NestingTooDeep"


class ParseError(Exception):
    """
    A syntax error with diagnostic information.

    Records what the parser expected and which token it found instead.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        kind: ParseErrorKind = ParseErrorKind.UNEXPECTED_TOKEN,
        expected: Optional[str] = None,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.expected = expected
        self.token = token
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def found(self) -> Optional[TokenType]:
        return self.token.type if self.token else None

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.
    """

    # Token types that end a statement; the parser resumes after them
    STATEMENT_BOUNDARIES = STATEMENT_BOUNDARIES

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
            TokenType.LEFT_PAREN: ["Add an opening parenthesis '('"],
            TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
            TokenType.LEFT_BRACE: ["Add an opening brace '{' to start a block"],
            TokenType.ASSIGN: ["Add an assignment operator '='"],
            TokenType.IDENTIFIER: ["Add a name"],
        }

        return token_suggestions.get(expected, [])

    @staticmethod
    def suggest_keyword(found: Token) -> List[str]:
        """Suggest a keyword when an identifier looks like a misspelled one."""
        if found.type != TokenType.IDENTIFIER:
            return []
        return [f"Did you mean '{keyword}'?" for keyword in ErrorRecovery.suggest_keyword_corrections(found.lexeme)]


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P005": "Invalid expression",
    "P006": "Nesting too deep",
}


def describe_token(token: Token) -> str:
    """Human-readable name of a token for messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.NEWLINE:
        return "end of line"
    return f"{token.type.name} '{token.lexeme}'"


def create_unexpected_token_error(expected: Union[TokenType, str], found: Token,
                                  suggestions: Optional[List[str]] = None) -> ParseError:
    """Create an error for an unexpected token."""
    expected_str = expected.name if isinstance(expected, TokenType) else expected
    found_str = describe_token(found)

    if suggestions is None:
        suggestions = SyntaxErrorRecovery.suggest_missing_token(expected) if isinstance(expected, TokenType) else []

    return ParseError(
        message=f"Expected {expected_str}, found {found_str}",
        location=found.location,
        kind=ParseErrorKind.UNEXPECTED_TOKEN,
        expected=expected_str,
        token=found,
        code="P001",
        help_text=f"The parser expected to see {expected_str} at this position, but found {found_str} instead.",
        suggestions=suggestions
    )


def create_missing_token_error(expected: Union[TokenType, str], found: Token) -> ParseError:
    """Create an error for a statement that ended before an expected token."""
    expected_str = expected.name if isinstance(expected, TokenType) else expected

    return ParseError(
        message=f"Expected {expected_str} before {describe_token(found)}",
        location=found.location,
        kind=ParseErrorKind.MISSING_TOKEN,
        expected=expected_str,
        token=found,
        code="P002",
        help_text=f"The statement ended before {expected_str} was found.",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(expected) if isinstance(expected, TokenType) else []
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    if found.type in STATEMENT_BOUNDARIES:
        return create_missing_token_error("expression", found)

    return ParseError(
        message=f"Invalid expression: unexpected {describe_token(found)}",
        location=found.location,
        kind=ParseErrorKind.UNEXPECTED_TOKEN,
        expected="expression",
        token=found,
        code="P005",
        help_text="An expression must start with a number, string, name, '-' or '('.",
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_nesting_too_deep_error(found: Token, limit: int) -> ParseError:
    """Create an error for brackets or blocks nested past the parser's limit."""
    return ParseError(
        message=f"Expression nested too deeply (more than {limit} levels)",
        location=found.location,
        kind=ParseErrorKind.NESTING_TOO_DEEP,
        token=found,
        code="P006",
        help_text="Split the expression or block into smaller named pieces.",
        suggestions=["Bind inner parts with 'let' first"]
    )
