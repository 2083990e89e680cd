"""
Kisumu Runtime Package

Implements evaluation of parsed programs:
- Tagged runtime objects, with errors as first-class values
- Chained environments for block and function scopes
- A tree-walking evaluator

Author: xwest
"""

from .objects import (
    Object, ObjectType, ErrorKind, Integer, String, Boolean, Null, Error,
    Function, ReturnValue, NULL, TRUE, FALSE, is_error, render
)
from .environment import Environment
from .evaluator import Evaluator, eval_infix

__all__ = [
    # Evaluation
    "Evaluator", "eval_infix",

    # Scopes
    "Environment",

    # Objects
    "Object", "ObjectType", "ErrorKind",
    "Integer", "String", "Boolean", "Null", "Error", "Function", "ReturnValue",
    "NULL", "TRUE", "FALSE", "is_error", "render",
]
