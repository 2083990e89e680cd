"""
Test suite for Kisumu runtime objects and environments.

Tests cover:
- Object rendering and type tags
- 64-bit integer range checks
- Scope chains, shadowing and copies

Author: xwest
"""

import os
import sys
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kisumu.parser import Parameter, parse_string
from kisumu.runtime import (
    Environment, Integer, String, Boolean, Null, Error, Function, ReturnValue,
    ObjectType, ErrorKind, NULL, TRUE, FALSE, is_error, render
)
from kisumu.runtime.objects import INT64_MAX, INT64_MIN, new_integer, native_bool_to_boolean


class TestObjects(unittest.TestCase):
    """Test cases for the object model."""

    def test_rendering(self):
        self.assertEqual(render(Integer(-12)), "-12")
        self.assertEqual(render(String("habari")), "habari")
        self.assertEqual(render(TRUE), "true")
        self.assertEqual(render(FALSE), "false")
        self.assertEqual(render(NULL), "null")
        self.assertEqual(render(Error("boom", ErrorKind.TYPE_MISMATCH)), "ERROR: boom")
        self.assertEqual(render(ReturnValue(Integer(3))), "3")

    def test_type_tags(self):
        self.assertEqual(Integer(1).type, ObjectType.INTEGER)
        self.assertEqual(String("").type, ObjectType.STRING)
        self.assertEqual(Boolean(True).type, ObjectType.BOOLEAN)
        self.assertEqual(Null().type, ObjectType.NULL)
        self.assertEqual(Error("x", ErrorKind.UNKNOWN_OPERATOR).type, ObjectType.ERROR)
        self.assertEqual(ReturnValue(NULL).type, ObjectType.RETURN_VALUE)

    def test_value_equality(self):
        self.assertEqual(Integer(5), Integer(5))
        self.assertNotEqual(Integer(5), Integer(6))
        self.assertEqual(Boolean(True), TRUE)
        self.assertIs(native_bool_to_boolean(False), FALSE)

    def test_is_error(self):
        self.assertTrue(is_error(Error("x", ErrorKind.DIVISION_BY_ZERO)))
        self.assertFalse(is_error(Integer(0)))
        self.assertFalse(is_error(None))

    def test_integer_range(self):
        self.assertEqual(new_integer(INT64_MAX), Integer(INT64_MAX))
        self.assertEqual(new_integer(INT64_MIN), Integer(INT64_MIN))

        overflow = new_integer(INT64_MAX + 1)
        self.assertTrue(is_error(overflow))
        self.assertEqual(overflow.kind, ErrorKind.INTEGER_OVERFLOW)
        self.assertTrue(is_error(new_integer(INT64_MIN - 1)))

    def test_function_rendering_and_identity(self):
        program, _ = parse_string("{ }")
        body = program.statements[0]
        env = Environment()

        first = Function("add", [Parameter("a"), Parameter("b", "int")], body, env)
        second = Function("add", [Parameter("a"), Parameter("b", "int")], body, env)

        self.assertEqual(first.inspect(), "<func add(a, b: int)>")
        self.assertEqual(first.type, ObjectType.FUNCTION)
        self.assertNotEqual(first, second)
        self.assertEqual(first, first)


class TestEnvironment(unittest.TestCase):
    """Test cases for scope chains."""

    def setUp(self):
        self.root = Environment()
        self.root.define("x", Integer(1))

    def test_define_and_get(self):
        self.assertEqual(self.root.get("x"), Integer(1))
        self.assertIsNone(self.root.get("missing"))
        self.assertIn("x", self.root)
        self.assertNotIn("missing", self.root)

    def test_define_returns_value(self):
        self.assertEqual(self.root.define("y", String("v")), String("v"))

    def test_child_sees_parent(self):
        child = self.root.child()

        self.assertEqual(child.get("x"), Integer(1))
        self.assertIsNone(child.get_local("x"))
        self.assertFalse(child.contains_local("x"))
        self.assertEqual(child.depth, 1)

    def test_shadowing_does_not_touch_parent(self):
        child = self.root.child()
        child.define("x", Integer(2))

        self.assertEqual(child.get("x"), Integer(2))
        self.assertEqual(self.root.get("x"), Integer(1))

    def test_child_bindings_do_not_leak(self):
        child = self.root.child()
        child.define("inner", TRUE)

        self.assertIsNone(self.root.get("inner"))

    def test_redefine_overwrites_same_scope(self):
        self.root.define("x", Integer(9))
        self.assertEqual(self.root.get("x"), Integer(9))

    def test_copy_is_independent(self):
        clone = self.root.copy()
        clone.define("x", Integer(100))
        clone.define("z", Integer(3))

        self.assertEqual(self.root.get("x"), Integer(1))
        self.assertIsNone(self.root.get("z"))
        self.assertEqual(clone.get("x"), Integer(100))

    def test_names_innermost_first(self):
        child = self.root.child()
        child.define("y", NULL)
        child.define("x", Integer(5))

        self.assertEqual(child.names(), ["y", "x"])

    def test_str(self):
        self.assertEqual(str(self.root), "Environment(depth=0, {x=1})")


if __name__ == "__main__":
    unittest.main()
