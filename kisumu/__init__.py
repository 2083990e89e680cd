"""
Kisumu Scripting Language

Front end and evaluation core of the Kisumu scripting language: a
tokenizer, a recursive-descent parser producing an AST, and a tree-walking
evaluator over a small tagged object model.

Architecture:
    kisumu/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST generation
    ├── runtime/         # Objects, environments and evaluation
    ├── interpreter.py   # Statement-by-statement driver
    └── cli.py           # `kisumu` command

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__email__ = "dev@kisumu-lang.org"
__license__ = "MIT"

from .config import InterpreterConfig
from .lexer import Lexer
from .parser import Parser
from .runtime import Environment, Evaluator
from .interpreter import Interpreter, ExecutionResult

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Evaluator",
    "Environment",
    "Interpreter",
    "ExecutionResult",
    "InterpreterConfig",

    # Version info
    "__version__",
]
