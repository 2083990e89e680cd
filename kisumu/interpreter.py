"""
Kisumu interpreter driver.

Feeds source text through lexer, parser and evaluator one statement at a
time against a persistent root environment. The driver collects printed
lines and error messages and returns them; it never writes to stdout.

Author: xwest
"""

import functools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from .config import InterpreterConfig
from .lexer import Lexer, LexerError, TokenType
from .parser import Parser, ParseError, Expression
from .runtime import Environment, Evaluator, Object, is_error, render

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Results of executing a piece of source."""
    values: List[Object] = field(default_factory=list)
    output: List[str] = field(default_factory=list)
    errors: List[Union[LexerError, ParseError]] = field(default_factory=list)

    def has_errors(self) -> bool:
        """Check if any statement failed to parse or evaluated to an error."""
        return len(self.errors) > 0 or any(is_error(v) for v in self.values)

    @property
    def runtime_errors(self) -> List[Object]:
        return [v for v in self.values if is_error(v)]

    def extend(self, other: "ExecutionResult"):
        """Append another result after this one."""
        self.values.extend(other.values)
        self.output.extend(other.output)
        self.errors.extend(other.errors)


class Interpreter:
    """
    Runs Kisumu source against one root environment.

    Bindings made by earlier calls stay visible to later ones until reset().
    """

    def __init__(self, config: Optional[InterpreterConfig] = None,
                 output: Optional[Callable[[str], None]] = None):
        """
        Args:
            config: Interpreter settings
            output: Also receives each output line as soon as it is produced
        """
        self.config = config or InterpreterConfig()
        self.output = output
        self.env = Environment()

    def execute(self, source: str, filename: Optional[str] = None, line: int = 1) -> ExecutionResult:
        """
        Execute every statement in ``source``.

        Statements that fail to lex or parse are reported and skipped; the
        rest still run.
        """
        filename = filename or self.config.filename
        result = ExecutionResult()
        emit = functools.partial(self._emit, result)

        parser = Parser(Lexer(source, filename, line))
        evaluator = Evaluator(output=emit, config=self.config)
        reported = 0

        logger.debug("executing %s (%d chars)", filename, len(source))
        while not parser.at_end():
            stmt = parser.parse_statement()

            for error in parser.errors[reported:]:
                result.errors.append(error)
                emit(f"ERROR: {error.diagnostic.short()}")
            reported = len(parser.errors)

            if stmt is None:
                continue

            value = evaluator.evaluate_statement(stmt, self.env)
            result.values.append(value)
            if is_error(value):
                emit(render(value))
            elif self.config.echo_results and isinstance(stmt, Expression):
                emit(render(value))

        return result

    def execute_line(self, line: str) -> ExecutionResult:
        """Execute a single statement line."""
        return self.execute(line)

    def execute_file(self, path: str) -> ExecutionResult:
        """
        Execute a .ksm script line by line.

        Blank lines and lines holding the header marker are skipped. Lines are
        gathered while braces are open, and an ``else`` line joins the chunk
        before it.

        Raises:
            OSError: If file cannot be read
            UnicodeDecodeError: If file is not valid UTF-8
        """
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()

        return self.execute_script(source, path)

    def execute_script(self, source: str, filename: Optional[str] = None) -> ExecutionResult:
        """Execute the text of a .ksm script, chunked the way execute_file() does."""
        filename = filename or self.config.filename
        result = ExecutionResult()
        for start, chunk in self._split_statements(source.splitlines()):
            result.extend(self.execute(chunk, filename=filename, line=start))

        logger.debug("%s: %d statement(s), %d output line(s)", filename, len(result.values), len(result.output))
        return result

    def _split_statements(self, lines: List[str]) -> List[Tuple[int, str]]:
        """Group script lines into (first line number, source) chunks."""
        marker = self.config.header_marker
        chunks: List[Tuple[int, List[str]]] = []
        pending: List[str] = []
        start = 1

        # Chunks keep one entry per file line so diagnostics report real line numbers
        for number, text in enumerate(lines, 1):
            if marker and marker in text:
                text = ""
            if not pending:
                if not text.strip():
                    continue
                if chunks and Lexer(text).next_token().type == TokenType.ELSE:
                    start, pending = chunks.pop()
                    pending.extend([""] * (number - start - len(pending)))
                    pending.append(text)
                else:
                    start, pending = number, [text]
            else:
                pending.append(text)

            if brace_balance("\n".join(pending)) <= 0:
                chunks.append((start, pending))
                pending = []

        if pending:
            chunks.append((start, pending))

        return [(first, "\n".join(chunk)) for first, chunk in chunks]

    def reset(self):
        """Drop all bindings."""
        self.env = Environment()

    def _emit(self, result: ExecutionResult, text: str):
        result.output.append(text)
        if self.output is not None:
            self.output(text)


def brace_balance(source: str) -> int:
    """Count of unclosed '{' in ``source``; used to gather multi-line input."""
    balance = 0
    for token in Lexer(source):
        if token.type == TokenType.LEFT_BRACE:
            balance += 1
        elif token.type == TokenType.RIGHT_BRACE:
            balance -= 1
    return balance
