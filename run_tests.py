#!/usr/bin/env python3
"""
Main test runner for the Kisumu interpreter tests.

Author: xwest
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_all_tests():
    """Run the import smoke check, a sample program and the unittest suite."""

    print("Kisumu Interpreter Test Suite")
    print("=" * 60)

    # Test if basic imports work
    try:
        from kisumu.lexer.lexer import Lexer
        from kisumu.parser.parser import Parser
        from kisumu.runtime.evaluator import Evaluator
        from kisumu.interpreter import Interpreter

        print("All interpreter modules imported successfully")
        print()

    except ImportError as e:
        print(f"Failed to import interpreter modules: {e}")
        return False

    # Test a simple program end to end
    print("Testing simple program...")
    code = """
    func add(a, b) {
        return a + b
    }
    let result = add(5, 10)
    printline(result)
    """

    tokens = Lexer(code).tokenize()
    print(f"  Generated {len(tokens)} tokens")

    parser = Parser(tokens)
    program = parser.parse()
    print(f"  Generated AST with {len(program.statements)} top-level statements")
    if parser.has_errors():
        for error in parser.errors:
            print(f"    {error.message}")
        return False

    result = Interpreter().execute(code)
    if result.output != ["15"]:
        print(f"  Unexpected output: {result.output}")
        return False
    print("  Program output matches")
    print()

    # Run unit tests
    loader = unittest.TestLoader()
    suite = loader.discover(os.path.join(project_root, "tests"), pattern="test_*.py")
    outcome = unittest.TextTestRunner(verbosity=2).run(suite)

    print()
    print("=" * 60)
    print("All tests PASSED" if outcome.wasSuccessful() else "Some tests FAILED")
    return outcome.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
