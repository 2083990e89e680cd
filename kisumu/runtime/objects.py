"""
Runtime object model for Kisumu.

Every value produced by evaluation is an Object with exactly one type tag.
Errors are ordinary objects too: they are returned, not raised, and the
evaluator propagates them by checking for them explicitly.

Author: xwest
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..parser.ast_nodes import BlockStatement, Parameter
    from .environment import Environment


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ObjectType(Enum):
    """Type tags of runtime objects."""
    INTEGER = "INTEGER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    ERROR = "ERROR"
    FUNCTION = "FUNCTION"
    RETURN_VALUE = "RETURN_VALUE"


class ErrorKind(Enum):
    """Categories of evaluation errors."""
    TYPE_MISMATCH = "TypeMismatch"
    UNKNOWN_OPERATOR = "UnknownOperator"
    DIVISION_BY_ZERO = "DivisionByZero"
    UNDEFINED_VARIABLE = "UndefinedVariable"
    WRONG_ARGUMENT_COUNT = "WrongArgumentCount"
    INTEGER_OVERFLOW = "IntegerOverflow"
    CALL_DEPTH_EXCEEDED = "CallDepthExceeded"


class Object:
    """Base class for runtime values."""

    @property
    def type(self) -> ObjectType:
        raise NotImplementedError

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.inspect()


@dataclass(frozen=True)
class Integer(Object):
    value: int

    @property
    def type(self) -> ObjectType:
        return ObjectType.INTEGER

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class String(Object):
    value: str

    @property
    def type(self) -> ObjectType:
        return ObjectType.STRING

    def inspect(self) -> str:
        return self.value


@dataclass(frozen=True)
class Boolean(Object):
    value: bool

    @property
    def type(self) -> ObjectType:
        return ObjectType.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Null(Object):

    @property
    def type(self) -> ObjectType:
        return ObjectType.NULL

    def inspect(self) -> str:
        return "null"


@dataclass(frozen=True)
class Error(Object):
    """An evaluation error carried as a value."""
    message: str
    kind: ErrorKind

    @property
    def type(self) -> ObjectType:
        return ObjectType.ERROR

    def inspect(self) -> str:
        return "ERROR: " + self.message


@dataclass(frozen=True, eq=False)
class Function(Object):
    """
    A declared function closed over its defining environment.

    Compared by identity; two declarations are never the same function.
    """
    name: str
    params: List['Parameter']
    body: 'BlockStatement'
    env: 'Environment' = field(repr=False)

    @property
    def type(self) -> ObjectType:
        return ObjectType.FUNCTION

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        return f"<func {self.name}({params})>"


@dataclass(frozen=True)
class ReturnValue(Object):
    """Wraps the value of a return statement while it unwinds a function body."""
    value: Object

    @property
    def type(self) -> ObjectType:
        return ObjectType.RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


def is_error(obj: Optional[Object]) -> bool:
    return obj is not None and obj.type == ObjectType.ERROR


def render(obj: Object) -> str:
    """Textual form used by printline and the interpreter output."""
    return obj.inspect()


def new_error(kind: ErrorKind, message: str) -> Error:
    return Error(message, kind)


def new_integer(value: int) -> Object:
    """Build an Integer, or an overflow Error outside the 64-bit range."""
    if value < INT64_MIN or value > INT64_MAX:
        return Error(f"integer overflow: {value} does not fit in 64 bits", ErrorKind.INTEGER_OVERFLOW)
    return Integer(value)
