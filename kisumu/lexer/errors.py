"""
Error handling for the Kisumu lexer.

Lexical errors are reported as values: the lexer builds a LexerError,
records it and hands it to the parser inside an error token. Nothing here
is raised past the parser.

Author: xwest
"""

from enum import Enum
from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation, KEYWORDS


@dataclass
class Diagnostic:
    """Base class for diagnostics (errors, warnings, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result

    def short(self) -> str:
        """One-line rendering used by the interpreter output."""
        return f"{self.message} at {self.location}"


class LexErrorKind(Enum):
    """Categories of lexical errors."""
    ILLEGAL_CHARACTER = "IllegalCharacter"
    UNTERMINATED_STRING = "UnterminatedString"


class LexerError(Exception):
    """
    A lexical error with diagnostic information.

    Carried as a value inside error tokens and collected in error lists.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        kind: LexErrorKind,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)


class ErrorRecovery:
    """
    Suggestion helpers attached to lexer diagnostics.
    """

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str) -> List[str]:
        """Suggest corrections for misspelled keywords using edit distance."""
        suggestions = []
        for keyword in KEYWORDS.keys():
            distance = ErrorRecovery._edit_distance(invalid_word.lower(), keyword.lower())
            if 0 < distance <= 2:
                suggestions.append(keyword)

        return sorted(suggestions, key=lambda k: ErrorRecovery._edit_distance(invalid_word.lower(), k.lower()))[:3]

    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery._edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Illegal character",
    "L002": "Unterminated string literal",
}


def create_illegal_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character outside the token grammar."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in Kisumu source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Illegal character: '{char}'",
        location=location,
        kind=LexErrorKind.ILLEGAL_CHARACTER,
        code="L001",
        help_text=help_text,
    )


def create_unterminated_string_error(location: SourceLocation) -> LexerError:
    """Create an error for an unterminated string literal."""
    return LexerError(
        message="Unterminated string literal",
        location=location,
        kind=LexErrorKind.UNTERMINATED_STRING,
        code="L002",
        help_text='String literals must be closed with a matching " on the same line.',
        suggestions=['Add a closing " quote'],
    )
