import io
import unittest

from exprlang.lang.error import (ArgumentNumberMismatch, ArithmeticTrap, ErrorHandler, FunctionNotFound,
                                 ParameterNotFound, ParseError)
from exprlang.lang.session import interpret
from exprlang.pure.lexical import Binary, Identifier
from exprlang.pure.tokens import Token, TokenType


class InterpreterExceptionTestCase(unittest.TestCase):

    def test_render(self):
        cases = {
            "SYNTAX ERROR": ParseError("nothing parsed"),
            "PARAMETER NOT FOUND y:1": ParameterNotFound("y", 1),
            "FUNCTION NOT FOUND f:3": FunctionNotFound("f", 3),
            "ARGUMENT NUMBER MISMATCH g:2": ArgumentNumberMismatch("g", 2),
            "RUNTIME ERROR (a/b):1": ArithmeticTrap(Binary("/", Identifier("a"), Identifier("b")), 1),
        }
        for expected, error in cases.items():
            self.assertEqual(expected, str(error), expected)

    def test_parse_error_position(self):
        error = ParseError("expected COLON", Token(TokenType.COMMA, 4, 7))
        self.assertEqual((4, 7), (error.row, error.column))
        self.assertEqual("expected COLON at 4:7", error.detail)

        error = ParseError("no next token")
        self.assertIsNone(error.row)
        self.assertEqual("no next token", error.detail)


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()

    def handler(self, **kwargs):
        return ErrorHandler(out=self.out, err=self.err, **kwargs)

    def test_report_to_both_streams(self):
        with self.handler(fatal=False):
            interpret("g(x)={(x+1)}\ng(10,20)")
        self.assertEqual("ARGUMENT NUMBER MISMATCH g:2\n", self.out.getvalue())
        self.assertEqual("ARGUMENT NUMBER MISMATCH g:2\n", self.err.getvalue())

    def test_syntax_error(self):
        with self.handler(fatal=False):
            interpret("1 + 2 + 3 + 4 + 5")
        self.assertEqual("SYNTAX ERROR\n", self.out.getvalue())

    def test_fatal(self):
        with self.assertRaises(SystemExit) as context:
            with self.handler():
                interpret("(1/0)")
        self.assertEqual(1, context.exception.code)
        self.assertEqual("RUNTIME ERROR (1/0):1\n", self.out.getvalue())

    def test_no_error(self):
        with self.handler() as error_handler:
            self.assertEqual(4, interpret("(2+2)"))
        self.assertIsInstance(error_handler, ErrorHandler)
        self.assertEqual("", self.out.getvalue() + self.err.getvalue())

    def test_verbose_syntax_error(self):
        source = "(1 2)"
        with self.handler(fatal=False, verbose=True) as error_handler:
            error_handler.register_source("prog.ex", source)
            interpret(source)
        self.assertEqual("SYNTAX ERROR\n", self.out.getvalue())
        self.assertIn("prog.ex:1:5", self.err.getvalue())
        self.assertIn("expected OPERATION, got NUMBER at 1:5", self.err.getvalue())
        self.assertIn("(1 2", self.err.getvalue())

    def test_quiet_syntax_error(self):
        with self.handler(fatal=False):
            interpret("(1 2)")
        self.assertNotIn("expected", self.err.getvalue())

    def test_recursion(self):
        with self.handler(fatal=False):
            raise RecursionError("maximum recursion depth exceeded")
        self.assertIn("maximum recursion depth exceeded", self.err.getvalue())
        self.assertEqual("", self.out.getvalue())

    def test_keyboard_interrupt(self):
        with self.handler(fatal=False):
            raise KeyboardInterrupt()
        self.assertIn("keyboard interrupt", self.err.getvalue())

    def test_missing_file(self):
        with self.handler(fatal=False):
            open("/nonexistent/program.ex")
        self.assertIn("'/nonexistent/program.ex' could not be opened", self.err.getvalue())

    def test_internal(self):
        with self.assertRaises(ValueError):
            with self.handler(fatal=False):
                raise ValueError("bad")
        self.assertIn("[internal]", self.err.getvalue())
        self.assertIn("unknown error: 'ValueError: bad'", self.err.getvalue())

    def test_warn(self):
        self.handler().warn("'f' redefined", 1, 1)
        self.assertEqual("", self.err.getvalue())

        error_handler = self.handler(verbose=True)
        error_handler.register_source("prog.ex", "f(x)={1}\nf(x)={2}\nf(0)\n")
        error_handler.warn("'f' redefined", 1, 2)
        self.assertIn("warning: ", self.err.getvalue())
        self.assertIn("'f' redefined", self.err.getvalue())
        self.assertIn("prog.ex:1:2", self.err.getvalue())

    def test_diagnose(self):
        error_handler = self.handler()
        error_handler.register_source("<in>", "(1+2)\n(3 4)")
        self.assertIsNone(error_handler.diagnose(None, None))
        self.assertIsNone(error_handler.diagnose(5, 1))

        diagnosis = error_handler.diagnose(2, 4)
        first, second = diagnosis.split("\n")
        self.assertTrue(first.startswith("  (3 "), first)
        self.assertIn("^", second)
        self.assertNotIn("(1+2)", diagnosis)


if __name__ == '__main__':
    unittest.main()
