"""
Kisumu Lexer - turns statement text into tokens on demand

Comments are skipped and keywords are looked up only once a whole
identifier has been read. Bad input becomes an error token carrying a
LexerError; the scanner never stops early.

Author: xwest
"""

import logging
from typing import Iterator, List

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS
from .errors import (
    LexerError, create_illegal_character_error, create_unterminated_string_error
)

logger = logging.getLogger(__name__)


class Lexer:
    """
    Kisumu lexical analyzer.

    Produces tokens lazily through next_token(); iterating the lexer yields
    every token up to and including EOF.
    """

    def __init__(self, source: str, filename: str = "<input>", line: int = 1):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
            line: Line number of the first source line
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = line
        self.column = 1
        self.errors: List[LexerError] = []
        self._done = False

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """
        Tokenize the rest of the source.

        Returns:
            List of tokens ending with EOF
        """
        return list(self)

    def next_token(self) -> Token:
        """Return the next token, or EOF once the input is exhausted."""
        self._skip_whitespace_and_comments()

        if self.pos >= len(self.source):
            if not self._done:
                self._done = True
                logger.debug("%s: reached end of input with %d error(s)", self.filename, len(self.errors))
            return Token(TokenType.EOF, "", None, self._location())

        location = self._location()
        current_char = self.source[self.pos]

        if current_char == '\n':
            self._advance()
            return Token(TokenType.NEWLINE, '\n', None, location)

        if current_char.isdigit() and current_char.isascii():
            return self._tokenize_number(location)

        if self._is_identifier_start(current_char):
            return self._tokenize_identifier_or_keyword(location)

        if current_char == '"':
            return self._tokenize_string(location)

        # Operators and punctuation (two-character forms first)
        for op_len in (2, 1):
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                self._advance_by(op_len)
                return Token(OPERATORS[potential_op], potential_op, None, location)

        self._advance()
        error = create_illegal_character_error(current_char, location)
        self.errors.append(error)
        logger.debug("illegal character %r at %s", current_char, location)
        return Token(TokenType.INVALID, current_char, error, location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Tokenize a maximal run of digits."""
        start_pos = self.pos
        while self.pos < len(self.source) and self.source[self.pos].isdigit() and self.source[self.pos].isascii():
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.INTEGER, lexeme, int(lexeme), location)

    def _tokenize_identifier_or_keyword(self, location: SourceLocation) -> Token:
        """Tokenize an identifier, then classify it against the keyword table."""
        start_pos = self.pos

        # First character is already validated as identifier start
        self._advance()

        while self.pos < len(self.source) and self._is_identifier_continue(self.source[self.pos]):
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)

        if token_type == TokenType.IDENTIFIER:
            value = lexeme
        elif token_type in (TokenType.TRUE, TokenType.FALSE):
            value = token_type == TokenType.TRUE
        else:
            value = None

        return Token(token_type, lexeme, value, location)

    def _tokenize_string(self, location: SourceLocation) -> Token:
        """Tokenize a double-quoted string; no escape processing."""
        start_pos = self.pos
        self._advance()  # Skip opening quote

        while self.pos < len(self.source) and self.source[self.pos] not in '"\n':
            self._advance()

        if self.pos >= len(self.source) or self.source[self.pos] != '"':
            lexeme = self.source[start_pos:self.pos]
            error = create_unterminated_string_error(location)
            self.errors.append(error)
            logger.debug("unterminated string at %s", location)
            return Token(TokenType.UNTERMINATED_STRING, lexeme, error, location)

        self._advance()  # Skip closing quote

        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.STRING, lexeme, lexeme[1:-1], location)

    def _is_identifier_start(self, char: str) -> bool:
        """Check if character can start an identifier."""
        return char.isalpha() or char == '_'

    def _is_identifier_continue(self, char: str) -> bool:
        """Check if character can continue an identifier."""
        return char.isalpha() or char == '_' or (char.isdigit() and char.isascii())

    def _skip_whitespace_and_comments(self):
        """Skip blanks and // comments; newlines are tokens."""
        while self.pos < len(self.source):
            if self.source[self.pos] in ' \t\r\f\v':
                self._advance()
                continue

            if self.source.startswith('//', self.pos):
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            break

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Error tokens are left in the stream; inspect their value for the
    LexerError.
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
