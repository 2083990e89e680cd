"""
Test suite for the kisumu command.

Author: xwest
"""

import io
import logging
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr
from unittest import mock

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kisumu import cli


class TestCLI(unittest.TestCase):
    """Test cases for cli.main."""

    def setUp(self):
        self._paths = []

    def tearDown(self):
        for path in self._paths:
            os.unlink(path)

    def _script(self, text: str) -> str:
        with tempfile.NamedTemporaryFile("w", suffix=".ksm", delete=False, encoding="utf-8") as f:
            f.write(text)
        self._paths.append(f.name)
        return f.name

    def _main(self, argv, inputs=None):
        stdout = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(io.StringIO()):
            if inputs is None:
                code = cli.main(argv)
            else:
                with mock.patch("builtins.input", side_effect=inputs):
                    code = cli.main(argv)
        return code, stdout.getvalue().splitlines()

    def test_runs_file(self):
        path = self._script('main library\nlet name = "Kisumu"\nprintline(name)\nprintline(6 * 7)\n')
        code, lines = self._main([path])

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(lines, ["Kisumu", "42"])

    def test_errors_set_exit_status(self):
        path = self._script("printline(1)\nlet x 5\nprintline(1 / 0)\n")
        code, lines = self._main([path])

        self.assertEqual(code, cli.EXIT_ERRORS)
        self.assertEqual(lines[0], "1")
        self.assertTrue(lines[1].startswith("ERROR: Expected ASSIGN"))
        self.assertEqual(lines[2], "ERROR: division by zero: 1 / 0")

    def test_unreadable_file(self):
        missing = os.path.join(tempfile.gettempdir(), "kisumu-missing-script.ksm")
        code, lines = self._main([missing])

        self.assertEqual(code, cli.EXIT_UNREADABLE)
        self.assertEqual(lines, [])

    def test_invalid_utf8_file(self):
        with tempfile.NamedTemporaryFile("wb", suffix=".ksm", delete=False) as f:
            f.write(b'let x = "\xff\xfe"\n')
        self._paths.append(f.name)
        code, lines = self._main([f.name])

        self.assertEqual(code, cli.EXIT_UNREADABLE)
        self.assertEqual(lines, [])

    def test_resolve_log_level(self):
        self.assertEqual(cli.resolve_log_level("debug"), logging.DEBUG)
        self.assertEqual(cli.resolve_log_level("INFO"), logging.INFO)
        self.assertEqual(cli.resolve_log_level("basicConfig"), logging.WARNING)
        self.assertEqual(cli.resolve_log_level("BASIC_FORMAT"), logging.WARNING)
        self.assertEqual(cli.resolve_log_level("loud"), logging.WARNING)

    def test_log_level_naming_logging_attribute(self):
        path = self._script("printline(1)\n")
        with mock.patch.dict(os.environ, {"KISUMU_LOG_LEVEL": "basic_format"}):
            code, lines = self._main([path])

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(lines, ["1"])

    def test_echo_flag(self):
        path = self._script("1 + 1\n")
        _, lines = self._main([path, "--echo"])
        self.assertEqual(lines, ["2"])

    def test_tokens_flag(self):
        path = self._script("let x = 5\n\nprintline(x)\n")
        code, lines = self._main([path, "--tokens"])

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(lines, [
            "LET IDENTIFIER(x) ASSIGN INTEGER(5)",
            "PRINTLINE LEFT_PAREN IDENTIFIER(x) RIGHT_PAREN",
        ])

    def test_tokens_flag_with_bad_character(self):
        path = self._script("let x = 5 @\n")
        code, lines = self._main([path, "--tokens"])

        self.assertEqual(code, cli.EXIT_ERRORS)
        self.assertEqual(lines, ["LET IDENTIFIER(x) ASSIGN INTEGER(5) INVALID"])

    def test_ast_flag(self):
        path = self._script("let x = 1\n")
        code, lines = self._main([path, "--ast"])

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(lines, ["Program", "  LetStatement x", "    NumberLiteral 1"])

    def test_tokens_and_ast_are_exclusive(self):
        with self.assertRaises(SystemExit):
            self._main(["x.ksm", "--tokens", "--ast"])

    def test_repl_echoes_results(self):
        code, lines = self._main([], inputs=["let x = 2", "x * 3", "", "exit"])

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(lines[1:], ["6"])

    def test_repl_multiline_input(self):
        inputs = ["func f() {", "return 7", "}", "printline(f())", EOFError()]
        code, lines = self._main([], inputs=inputs)

        self.assertEqual(code, cli.EXIT_OK)
        self.assertIn("7", lines)

    def test_repl_reports_errors_and_continues(self):
        _, lines = self._main([], inputs=["nope", "1 + 1", "exit"])
        self.assertEqual(lines[1:], ["ERROR: identifier not found: nope", "2"])


if __name__ == "__main__":
    unittest.main()
