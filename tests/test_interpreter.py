"""
Test suite for the Kisumu interpreter driver and configuration.

Tests cover:
- Output collection and error rendering
- Bindings persisting across calls, and reset
- Result echo
- Script files: header lines, brace buffering, else joining, line numbers
- Configuration from the environment

Author: xwest
"""

import os
import sys
import tempfile
import unittest
from unittest import mock

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kisumu import Interpreter, InterpreterConfig, ExecutionResult
from kisumu.interpreter import brace_balance
from kisumu.parser import ParseError
from kisumu.runtime import Integer, NULL


class TestInterpreter(unittest.TestCase):
    """Test cases for Interpreter.execute and friends."""

    def setUp(self):
        self.interpreter = Interpreter()

    def test_execute_collects_output(self):
        result = self.interpreter.execute("let x = 5\nprintline(x + 1)")

        self.assertIsInstance(result, ExecutionResult)
        self.assertEqual(result.output, ["6"])
        self.assertEqual(result.values, [Integer(5), NULL])
        self.assertFalse(result.has_errors())

    def test_bindings_persist_across_calls(self):
        self.interpreter.execute("let x = 5")
        result = self.interpreter.execute_line("printline(x)")

        self.assertEqual(result.output, ["5"])

    def test_functions_persist_across_calls(self):
        self.interpreter.execute("func double(n) { return n * 2 }")
        self.assertEqual(self.interpreter.execute("printline(double(21))").output, ["42"])

    def test_reset(self):
        self.interpreter.execute("let x = 5")
        self.interpreter.reset()
        result = self.interpreter.execute("x")

        self.assertEqual(result.output, ["ERROR: identifier not found: x"])
        self.assertTrue(result.has_errors())
        self.assertEqual(len(result.runtime_errors), 1)

    def test_runtime_error_rendered(self):
        result = self.interpreter.execute("5 / 0")
        self.assertEqual(result.output, ["ERROR: division by zero: 5 / 0"])

    def test_parse_error_does_not_stop_later_statements(self):
        result = self.interpreter.execute("let x 5\nprintline(2)")

        self.assertEqual(len(result.errors), 1)
        self.assertIsInstance(result.errors[0], ParseError)
        self.assertTrue(result.output[0].startswith("ERROR: Expected ASSIGN, found INTEGER '5'"))
        self.assertEqual(result.output[1], "2")
        self.assertTrue(result.has_errors())

    def test_lex_error_rendered(self):
        result = self.interpreter.execute("let a = 1 $ 2")

        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.output, ["ERROR: Illegal character: '$' at <input>:1:11"])

    def test_output_in_statement_order(self):
        result = self.interpreter.execute('printline("a")\nlet = 3\nprintline("b")\nboom')

        self.assertEqual(result.output[0], "a")
        self.assertTrue(result.output[1].startswith("ERROR: "))
        self.assertEqual(result.output[2], "b")
        self.assertEqual(result.output[3], "ERROR: identifier not found: boom")

    def test_expressions_not_echoed_by_default(self):
        self.assertEqual(self.interpreter.execute("1 + 2").output, [])

    def test_echo_results(self):
        interpreter = Interpreter(InterpreterConfig(echo_results=True))
        result = interpreter.execute('1 + 2\nlet y = 3\n"hi"')

        self.assertEqual(result.output, ["3", "hi"])

    def test_output_callable_receives_lines(self):
        lines = []
        interpreter = Interpreter(output=lines.append)
        result = interpreter.execute('printline("hi")\n1 / 0')

        self.assertEqual(lines, ["hi", "ERROR: division by zero: 1 / 0"])
        self.assertEqual(result.output, lines)

    def test_filename_in_diagnostics(self):
        result = self.interpreter.execute("let = 1", filename="snippet.ksm")
        self.assertIn("snippet.ksm:1:5", result.output[0])

    def test_configured_call_depth(self):
        interpreter = Interpreter(InterpreterConfig(max_call_depth=3))
        result = interpreter.execute("func f(n) { return f(n) }\nf(1)")

        self.assertTrue(result.output[0].startswith("ERROR: call depth exceeded 3"))

    def test_deep_recursion_within_call_depth(self):
        source = (
            "func f(n) { if (n > 0) { if (n > 0) { if (n > 0) { return 1 + f(n - 1) } } }; return 0 }\n"
            "printline(f(60))\n"
            "printline(1)"
        )
        result = self.interpreter.execute(source)

        self.assertTrue(result.output[0] == "60" or result.output[0].startswith("ERROR: call depth exceeded"))
        self.assertEqual(result.output[-1], "1")

    def test_deeply_nested_parentheses(self):
        result = self.interpreter.execute("(" * 400 + "1" + ")" * 400 + "\nprintline(2)")

        self.assertEqual(len(result.errors), 1)
        self.assertTrue(result.output[0].startswith("ERROR: Expression nested too deeply"))
        self.assertEqual(result.output[-1], "2")

    def test_execute_script_text(self):
        result = self.interpreter.execute_script("main library\nif (true) {\n  printline(1)\n}\nelse {\n  printline(2)\n}\n")
        self.assertEqual(result.output, ["1"])

    def test_brace_balance(self):
        self.assertEqual(brace_balance("func f() {"), 1)
        self.assertEqual(brace_balance("{ { }"), 1)
        self.assertEqual(brace_balance("{ }"), 0)
        self.assertEqual(brace_balance('printline("{")'), 0)
        self.assertEqual(brace_balance("// {"), 0)


class TestExecuteFile(unittest.TestCase):
    """Test cases for running script files."""

    def setUp(self):
        self.interpreter = Interpreter()
        self._paths = []

    def tearDown(self):
        for path in self._paths:
            os.unlink(path)

    def _script(self, text: str) -> str:
        with tempfile.NamedTemporaryFile("w", suffix=".ksm", delete=False, encoding="utf-8") as f:
            f.write(text)
        self._paths.append(f.name)
        return f.name

    def test_runs_script(self):
        path = self._script(
            "// greeting script\n"
            "main library\n"
            "\n"
            "let x = 2\n"
            "if (x > 1) {\n"
            '    printline("big")\n'
            "}\n"
            "else {\n"
            '    printline("small")\n'
            "}\n"
            "printline(x * 10)\n"
        )
        result = self.interpreter.execute_file(path)

        self.assertEqual(result.output, ["big", "20"])
        self.assertFalse(result.has_errors())

    def test_else_after_blank_line(self):
        path = self._script(
            "if (false) {\n"
            "  printline(1)\n"
            "}\n"
            "\n"
            "else {\n"
            "  printline(2)\n"
            "}\n"
        )
        self.assertEqual(self.interpreter.execute_file(path).output, ["2"])

    def test_multiline_function(self):
        path = self._script(
            "func fact(n) {\n"
            "  if (n < 2) { return 1 }\n"
            "  return n * fact(n - 1)\n"
            "}\n"
            "printline(fact(6))\n"
        )
        self.assertEqual(self.interpreter.execute_file(path).output, ["720"])

    def test_error_line_numbers_match_file(self):
        path = self._script("main library\nlet a = 1\n\nlet b 2\nprintline(a)\n")
        result = self.interpreter.execute_file(path)

        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].location.line, 4)
        self.assertEqual(result.errors[0].location.filename, path)
        self.assertEqual(result.output[-1], "1")

    def test_header_marker_configurable(self):
        interpreter = Interpreter(InterpreterConfig(header_marker="#!kisumu"))
        path = self._script("#!kisumu\nprintline(1)\n")

        self.assertEqual(interpreter.execute_file(path).output, ["1"])

    def test_unclosed_block_reported(self):
        path = self._script("func f() {\n  return 1\n")
        result = self.interpreter.execute_file(path)

        self.assertEqual(len(result.errors), 1)

    def test_missing_file_raises(self):
        with self.assertRaises(OSError):
            self.interpreter.execute_file(os.path.join(tempfile.gettempdir(), "no-such-script.ksm"))

    def test_invalid_utf8_raises(self):
        with tempfile.NamedTemporaryFile("wb", suffix=".ksm", delete=False) as f:
            f.write(b'let x = "\xff\xfe"\n')
        self._paths.append(f.name)

        with self.assertRaises(UnicodeDecodeError):
            self.interpreter.execute_file(f.name)


class TestInterpreterConfig(unittest.TestCase):
    """Test cases for configuration loading."""

    def test_defaults(self):
        config = InterpreterConfig()

        self.assertFalse(config.echo_results)
        self.assertEqual(config.max_call_depth, 64)
        self.assertEqual(config.header_marker, "main library")
        self.assertEqual(config.log_level, "WARNING")

    def test_from_env(self):
        env = {"KISUMU_ECHO": "yes", "KISUMU_MAX_CALL_DEPTH": "8", "KISUMU_LOG_LEVEL": "debug"}
        with mock.patch.dict(os.environ, env):
            config = InterpreterConfig.from_env()

        self.assertTrue(config.echo_results)
        self.assertEqual(config.max_call_depth, 8)
        self.assertEqual(config.log_level, "DEBUG")

    def test_from_env_overrides(self):
        with mock.patch.dict(os.environ, {"KISUMU_MAX_CALL_DEPTH": "8"}):
            config = InterpreterConfig.from_env(max_call_depth=2)
        self.assertEqual(config.max_call_depth, 2)

    def test_from_env_bad_depth(self):
        with mock.patch.dict(os.environ, {"KISUMU_MAX_CALL_DEPTH": "deep"}):
            with self.assertRaises(ValueError):
                InterpreterConfig.from_env()

    def test_unknown_override(self):
        with self.assertRaises(TypeError):
            InterpreterConfig.from_env(colour=True)


if __name__ == "__main__":
    unittest.main()
