#!/usr/bin/env python3
"""
Kisumu command-line interface
=============================

Runs a .ksm script, or an interactive prompt when no script is given.

Usage:
    kisumu [FILE] [options]

Options:
    --tokens    Print the token stream of each line instead of running it
    --ast       Print the parsed statement tree instead of running it
    --echo      Print the value of every expression statement
    --verbose   Log pipeline activity at DEBUG level
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import InterpreterConfig
from .interpreter import Interpreter, brace_balance
from .lexer import Lexer
from .parser import Parser, ASTPrinter

logger = logging.getLogger(__name__)

PROMPT = "ksm> "
CONTINUATION_PROMPT = "...> "

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_UNREADABLE = 2


def show_tokens(source: str, filename: str = "<input>") -> bool:
    """Print one line of tokens per source line. Returns True if any token was an error."""
    had_errors = False
    for number, line in enumerate(source.splitlines(), 1):
        if not line.strip():
            continue
        tokens = [t for t in Lexer(line, filename, number) if not t.is_boundary]
        had_errors = had_errors or any(t.is_error for t in tokens)
        print(" ".join(str(t) for t in tokens))
    return had_errors


def show_ast(source: str, filename: str = "<input>") -> bool:
    """Print the statement tree. Returns True if any statement failed to parse."""
    parser = Parser(Lexer(source, filename))
    program = parser.parse()
    print(ASTPrinter().print(program))
    for error in parser.errors:
        print(f"ERROR: {error.diagnostic.short()}")
    return parser.has_errors()


def resolve_log_level(name: str) -> int:
    """Map a level name such as 'debug' to its logging level; unknown names give WARNING."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def run_file(path: str, args, config: InterpreterConfig) -> int:
    """Execute or inspect one script file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"kisumu: cannot read {path}: {e}", file=sys.stderr)
        return EXIT_UNREADABLE

    if args.tokens:
        return EXIT_ERRORS if show_tokens(source, path) else EXIT_OK
    if args.ast:
        return EXIT_ERRORS if show_ast(source, path) else EXIT_OK

    interpreter = Interpreter(config, output=print)
    result = interpreter.execute_script(source, path)
    logger.info("%s finished: %d statement(s), %d syntax error(s), %d runtime error(s)",
                path, len(result.values), len(result.errors), len(result.runtime_errors))
    return EXIT_ERRORS if result.has_errors() else EXIT_OK


def repl(args, config: InterpreterConfig) -> int:
    """Read-eval-print loop; multi-line input continues while braces are open."""
    interpreter = Interpreter(config, output=print)
    print("Kisumu REPL. Type 'exit' to leave.")

    while True:
        try:
            source = input(PROMPT)
            while brace_balance(source) > 0:
                source += "\n" + input(CONTINUATION_PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if source.strip() == "exit":
            break
        if not source.strip():
            continue

        if args.tokens:
            show_tokens(source)
        elif args.ast:
            show_ast(source)
        else:
            interpreter.execute(source)

    return EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kisumu",
        description="Kisumu scripting language interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    kisumu                       # Interactive prompt
    kisumu hello.ksm             # Run a script
    kisumu hello.ksm --tokens    # Show the token stream
    kisumu hello.ksm --ast       # Show the statement tree
        """
    )

    parser.add_argument('file', nargs='?', metavar='FILE',
                        help='Script to run (omit for the interactive prompt)')

    # Inspection options
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--tokens', action='store_true',
                      help='Print tokens instead of executing')
    mode.add_argument('--ast', action='store_true',
                      help='Print the parsed statement tree instead of executing')

    # Runtime options
    parser.add_argument('--echo', action='store_true',
                        help='Print the value of each expression statement')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the kisumu command"""
    args = build_arg_parser().parse_args(argv)

    try:
        config = InterpreterConfig.from_env()
    except ValueError as e:
        print(f"kisumu: {e}", file=sys.stderr)
        return EXIT_ERRORS

    level = logging.DEBUG if args.verbose else resolve_log_level(config.log_level)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.echo:
        config.echo_results = True

    if args.file is None:
        config.echo_results = True
        return repl(args, config)

    return run_file(args.file, args, config)


if __name__ == "__main__":
    sys.exit(main())
