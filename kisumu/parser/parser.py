"""
Kisumu Pratt Parser Implementation

Implements a top-down operator precedence (Pratt) parser for Kisumu.
Tokens are pulled from the lexer as they are needed; each statement
becomes one AST node and a malformed statement is reported and skipped
without stopping the rest of the program.

Author: xwest
"""

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, Iterator, List, Optional, Tuple, Union
from enum import IntEnum

from ..lexer.tokens import Token, TokenType, SourceLocation, STATEMENT_BOUNDARIES
from ..lexer.errors import LexerError
from .ast_nodes import (
    SourceSpan, Program, Statement, Expression, LetStatement, PrintStatement,
    ReturnStatement, BlockStatement, IfStatement, FunctionDecl, Parameter,
    BinaryOp, UnaryOp, FunctionCall, Identifier, NumberLiteral, StringLiteral,
    BooleanLiteral
)
from .errors import (
    ParseError, create_unexpected_token_error, create_missing_token_error,
    create_invalid_expression_error, create_nesting_too_deep_error, SyntaxErrorRecovery
)

logger = logging.getLogger(__name__)

SyntaxProblem = Union[ParseError, LexerError]

# Deepest combined nesting of blocks, brackets, calls and unary operators
MAX_NESTING_DEPTH = 100


class Precedence(IntEnum):
    """Operator precedence levels for Pratt parsing."""
    NONE = 0
    COMPARISON = 1      # <, >, ==, !=
    TERM = 2            # +, -
    FACTOR = 3          # *, /
    UNARY = 4           # -
    CALL = 5            # function calls
    PRIMARY = 6         # literals, identifiers, parentheses


class Parser:
    """
    Kisumu Pratt parser.

    Accepts any iterable of tokens; a Lexer is consumed lazily. Errors are
    collected in ``self.errors`` and never escape parse().
    """

    def __init__(self, tokens: Iterable[Token]):
        """
        Initialize parser with a token source.

        Args:
            tokens: A Lexer or any iterable of tokens ending with EOF
        """
        self._tokens: Iterator[Token] = iter(tokens)
        self._lookahead: Deque[Token] = deque()
        self._previous_token: Optional[Token] = None
        self._eof: Optional[Token] = None
        self._block_depth = 0
        self._nesting = 0
        self.errors: List[SyntaxProblem] = []

        # Initialize parsing tables
        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize operator precedence and parsing function tables."""

        # Prefix parsing functions (for tokens that can start expressions)
        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            TokenType.INTEGER: self._parse_number_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean_literal,
            TokenType.FALSE: self._parse_boolean_literal,
            TokenType.IDENTIFIER: self._parse_identifier,
            TokenType.MINUS: self._parse_unary,
            TokenType.LEFT_PAREN: self._parse_grouping,
        }

        # Infix parsing functions (for binary operators and calls)
        self.infix_parsers: Dict[TokenType, Callable[[Expression], Expression]] = {
            TokenType.PLUS: self._parse_binary,
            TokenType.MINUS: self._parse_binary,
            TokenType.MULTIPLY: self._parse_binary,
            TokenType.DIVIDE: self._parse_binary,
            TokenType.LESS_THAN: self._parse_binary,
            TokenType.GREATER_THAN: self._parse_binary,
            TokenType.EQUAL: self._parse_binary,
            TokenType.NOT_EQUAL: self._parse_binary,
            TokenType.LEFT_PAREN: self._parse_function_call,
        }

        # Operator precedence table
        self.precedences: Dict[TokenType, Precedence] = {
            TokenType.LESS_THAN: Precedence.COMPARISON,
            TokenType.GREATER_THAN: Precedence.COMPARISON,
            TokenType.EQUAL: Precedence.COMPARISON,
            TokenType.NOT_EQUAL: Precedence.COMPARISON,

            TokenType.PLUS: Precedence.TERM,
            TokenType.MINUS: Precedence.TERM,

            TokenType.MULTIPLY: Precedence.FACTOR,
            TokenType.DIVIDE: Precedence.FACTOR,

            TokenType.LEFT_PAREN: Precedence.CALL,
        }

    def parse(self) -> Program:
        """
        Parse the whole token stream.

        Returns:
            Program holding every statement that parsed cleanly; problems
            are left in ``self.errors``
        """
        start_location = self._peek().location
        statements = []

        while not self._is_at_end():
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)

        end_location = self._previous_token.location if self._previous_token else start_location
        return Program(statements, SourceSpan(start_location, end_location))

    def parse_statement(self) -> Optional[Statement]:
        """
        Parse the next statement, recovering from errors.

        Returns:
            The statement, or None when there was nothing to parse or the
            statement was malformed and skipped
        """
        while self._check(TokenType.NEWLINE) or self._check(TokenType.SEMICOLON):
            self._advance()

        if self._is_at_end() or (self._block_depth > 0 and self._check(TokenType.RIGHT_BRACE)):
            return None

        start_token = self._peek()
        try:
            stmt = self._parse_statement()
            self._consume_statement_terminator(start_token)
            return stmt
        except (ParseError, LexerError) as e:
            self.errors.append(e)
            logger.debug("recovering from syntax error at %s: %s", e.location, e.message)
            self._synchronize()
            return None
        except RecursionError:
            # Python's own stack ran out before MAX_NESTING_DEPTH did
            error = create_nesting_too_deep_error(self._peek(), MAX_NESTING_DEPTH)
            self.errors.append(error)
            logger.debug("recovering from stack exhaustion at %s", error.location)
            self._synchronize()
            return None

    def has_errors(self) -> bool:
        """Check if any statement was rejected."""
        return len(self.errors) > 0

    def at_end(self) -> bool:
        """Check if only EOF is left."""
        return self._is_at_end()

    def _parse_statement(self) -> Statement:
        """Dispatch on the token that starts a statement."""
        if self._check(TokenType.LET):
            return self._parse_let_statement()
        elif self._check(TokenType.PRINTLINE):
            return self._parse_print_statement()
        elif self._check(TokenType.RETURN):
            return self._parse_return_statement()
        elif self._check(TokenType.IF):
            return self._parse_if_statement()
        elif self._check(TokenType.FUNC):
            return self._parse_function_decl()
        elif self._check(TokenType.LEFT_BRACE):
            return self._parse_block_statement()
        return self._parse_expression()

    def _parse_let_statement(self) -> LetStatement:
        """Parse: let name [: type] = expression."""
        start_token = self._consume(TokenType.LET)

        name_token = self._consume(TokenType.IDENTIFIER)

        # Type annotation (optional, not checked)
        type_hint = None
        if self._match(TokenType.COLON):
            type_hint = self._consume(TokenType.IDENTIFIER).lexeme

        self._consume(TokenType.ASSIGN)
        value = self._parse_expression()

        span = SourceSpan(start_token.location, self._previous().location)
        return LetStatement(name_token.lexeme, type_hint, value, span)

    def _parse_print_statement(self) -> PrintStatement:
        """Parse: printline ( expression )."""
        start_token = self._consume(TokenType.PRINTLINE)
        self._consume(TokenType.LEFT_PAREN)
        expression = self._parse_expression()
        end_token = self._consume(TokenType.RIGHT_PAREN)

        return PrintStatement(expression, SourceSpan(start_token.location, end_token.location))

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse: return [expression]."""
        start_token = self._consume(TokenType.RETURN)

        value = None
        if not self._check_statement_terminator():
            value = self._parse_expression()

        span = SourceSpan(start_token.location, self._previous().location)
        return ReturnStatement(value, span)

    def _parse_block_statement(self) -> BlockStatement:
        """Parse: { statement* }."""
        self._enter_nesting()
        try:
            start_token = self._consume(TokenType.LEFT_BRACE)
            statements = []

            self._block_depth += 1
            try:
                while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
                    stmt = self.parse_statement()
                    if stmt is not None:
                        statements.append(stmt)
            finally:
                self._block_depth -= 1
        finally:
            self._nesting -= 1

        end_token = self._consume(TokenType.RIGHT_BRACE)
        return BlockStatement(statements, SourceSpan(start_token.location, end_token.location))

    def _parse_if_statement(self) -> IfStatement:
        """Parse: if ( expression ) block [else (block | if ...)]."""
        start_token = self._consume(TokenType.IF)

        self._consume(TokenType.LEFT_PAREN)
        condition = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN)

        then_block = self._parse_block_statement()

        # Else may sit on a following line
        else_block = None
        if self._skip_newlines_before(TokenType.ELSE):
            self._advance()
            if self._check(TokenType.IF):
                else_block = self._parse_if_statement()
            else:
                else_block = self._parse_block_statement()

        span = SourceSpan(start_token.location, self._previous().location)
        return IfStatement(condition, then_block, else_block, span)

    def _parse_function_decl(self) -> FunctionDecl:
        """Parse: func name ( params ) block."""
        start_token = self._consume(TokenType.FUNC)
        name_token = self._consume(TokenType.IDENTIFIER)

        self._consume(TokenType.LEFT_PAREN)
        params = self._parse_parameter_list()
        self._consume(TokenType.RIGHT_PAREN)

        body = self._parse_block_statement()

        span = SourceSpan(start_token.location, self._previous().location)
        return FunctionDecl(name_token.lexeme, params, body, span)

    def _parse_parameter_list(self) -> List[Parameter]:
        """Parse comma-separated parameters up to ')'."""
        params: List[Parameter] = []
        if self._check(TokenType.RIGHT_PAREN):
            return params

        while True:
            name_token = self._consume(TokenType.IDENTIFIER)
            type_hint = None
            if self._match(TokenType.COLON):
                type_hint = self._consume(TokenType.IDENTIFIER).lexeme
            params.append(Parameter(name_token.lexeme, type_hint))

            if not self._match(TokenType.COMMA):
                break

        return params

    # Expressions

    def _parse_expression(self) -> Expression:
        """Parse an expression using Pratt parsing."""
        return self._parse_precedence(Precedence.COMPARISON)

    def _parse_precedence(self, precedence: Precedence) -> Expression:
        """Parse expression with given minimum precedence."""
        self._enter_nesting()
        try:
            prefix_parser = self.prefix_parsers.get(self._peek().type)
            if prefix_parser is None:
                raise self._error_at_current(create_invalid_expression_error(self._peek()))

            left = prefix_parser()

            while precedence <= self._get_precedence(self._peek().type):
                infix_parser = self.infix_parsers.get(self._peek().type)
                if infix_parser is None:
                    break
                left = infix_parser(left)

            return left
        finally:
            self._nesting -= 1

    def _enter_nesting(self):
        """Count one more level of nesting; once this returns the caller must decrement ``_nesting``."""
        if self._nesting >= MAX_NESTING_DEPTH:
            raise create_nesting_too_deep_error(self._peek(), MAX_NESTING_DEPTH)
        self._nesting += 1

    def _get_precedence(self, token_type: TokenType) -> Precedence:
        """Get precedence for a token type."""
        return self.precedences.get(token_type, Precedence.NONE)

    # Prefix parsers (tokens that can start expressions)

    def _parse_number_literal(self) -> NumberLiteral:
        token = self._advance()
        return NumberLiteral(token.value, SourceSpan(token.location, token.location))

    def _parse_string_literal(self) -> StringLiteral:
        token = self._advance()
        return StringLiteral(token.value, SourceSpan(token.location, token.location))

    def _parse_boolean_literal(self) -> BooleanLiteral:
        token = self._advance()
        return BooleanLiteral(token.value, SourceSpan(token.location, token.location))

    def _parse_identifier(self) -> Identifier:
        token = self._advance()
        return Identifier(token.lexeme, SourceSpan(token.location, token.location))

    def _parse_unary(self) -> UnaryOp:
        """Parse unary minus."""
        operator_token = self._advance()

        operand = self._parse_precedence(Precedence.UNARY)

        span = SourceSpan(operator_token.location, operand.span.end)
        return UnaryOp(operator_token.lexeme, operand, span)

    def _parse_grouping(self) -> Expression:
        """Parse parenthesized expression."""
        self._advance()  # Consume (

        expr = self._parse_expression()

        self._consume(TokenType.RIGHT_PAREN)

        return expr

    # Infix parsers

    def _parse_binary(self, left: Expression) -> BinaryOp:
        """Parse a left-associative binary operation."""
        operator_token = self._advance()

        precedence = self._get_precedence(operator_token.type)
        right = self._parse_precedence(Precedence(precedence + 1))

        span = SourceSpan(left.span.start, right.span.end)
        return BinaryOp(left, operator_token.lexeme, right, span)

    def _parse_function_call(self, left: Expression) -> FunctionCall:
        """Parse call arguments after a callee expression."""
        self._advance()  # Consume (

        args = []
        if not self._check(TokenType.RIGHT_PAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())

        end_token = self._consume(TokenType.RIGHT_PAREN)

        span = SourceSpan(left.span.start, end_token.location)
        return FunctionCall(left, args, span)

    # Recovery

    def _synchronize(self):
        """
        Skip to the next statement boundary.

        Nested braces are skipped whole; a '}' closing the enclosing block
        is left for the block parser.
        """
        depth = 0
        while not self._check(TokenType.EOF):
            token = self._peek()
            if token.type == TokenType.LEFT_BRACE:
                depth += 1
            elif token.type == TokenType.RIGHT_BRACE:
                if depth > 0:
                    depth -= 1
                elif self._block_depth > 0:
                    return
            elif depth == 0 and token.type in (TokenType.NEWLINE, TokenType.SEMICOLON):
                self._advance()
                return
            self._advance()

    def _error_at_current(self, error: ParseError) -> SyntaxProblem:
        """Prefer the lexer's own error when the offending token is an error token."""
        token = self._peek()
        if token.is_error:
            return token.value
        return error

    # Utility methods

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._peek()
        if token.type != TokenType.EOF:
            self._lookahead.popleft()
        self._previous_token = token
        return token

    def _is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().type == TokenType.EOF

    def _peek(self, distance: int = 0) -> Token:
        """Return a token ahead of the cursor without consuming it."""
        while len(self._lookahead) <= distance:
            if self._eof is not None:
                return self._eof
            token = next(self._tokens, None)
            if token is None:
                location = self._previous_token.location if self._previous_token else SourceLocation("<eof>", 1, 1, 0)
                token = Token(TokenType.EOF, "", None, location)
            if token.type == TokenType.EOF:
                self._eof = token
            self._lookahead.append(token)
        return self._lookahead[distance]

    def _previous(self) -> Token:
        """Return the most recently consumed token."""
        return self._previous_token if self._previous_token else self._peek()

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()

        current_token = self._peek()
        if current_token.type in STATEMENT_BOUNDARIES:
            raise self._error_at_current(create_missing_token_error(token_type, current_token))
        raise self._error_at_current(create_unexpected_token_error(token_type, current_token))

    def _skip_newlines_before(self, token_type: TokenType) -> bool:
        """Drop newlines only if they are followed by ``token_type``."""
        distance = 0
        while self._peek(distance).type == TokenType.NEWLINE:
            distance += 1
        if self._peek(distance).type != token_type:
            return False
        for _ in range(distance):
            self._advance()
        return True

    def _check_statement_terminator(self) -> bool:
        """Check for statement terminators."""
        return self._peek().type in STATEMENT_BOUNDARIES or self._check(TokenType.RIGHT_BRACE)

    def _consume_statement_terminator(self, start_token: Token):
        """Consume the boundary after a statement; '}' and EOF are left in place."""
        if self._match(TokenType.NEWLINE) or self._match(TokenType.SEMICOLON):
            return
        if self._check_statement_terminator():
            return

        suggestions = SyntaxErrorRecovery.suggest_keyword(start_token)
        raise self._error_at_current(
            create_unexpected_token_error("end of statement", self._peek(), suggestions)
        )


def parse_string(source: str, filename: str = "<string>") -> Tuple[Program, List[SyntaxProblem]]:
    """
    Convenience function to parse a source string.

    Returns:
        The Program and the list of lexical/syntax errors
    """
    from ..lexer import Lexer

    parser = Parser(Lexer(source, filename))
    program = parser.parse()
    return program, parser.errors


def parse_file(filepath: str) -> Tuple[Program, List[SyntaxProblem]]:
    """
    Convenience function to parse a source file.

    Raises:
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return parse_string(source, filepath)
