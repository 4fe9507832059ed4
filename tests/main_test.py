import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from exprlang.main import build_parser, main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.out = io.StringIO()
        self.err = io.StringIO()

    def tearDown(self):
        self.directory.cleanup()

    def write(self, source):
        path = os.path.join(self.directory.name, "program.ex")
        with open(path, "w") as file:
            file.write(source)
        return path

    def main(self, *argv):
        with redirect_stdout(self.out), redirect_stderr(self.err):
            main(list(argv))

    def test_file(self):
        self.main(self.write("g(x)={(f(x)+f((x/2)))}\nf(x)={[(x>1)]?{(f((x-1))+f((x-2)))}:{x}}\ng(10)\n"))
        self.assertEqual("60\n", self.out.getvalue())

    def test_huge_result(self):
        self.main(self.write("g(x)={(x*x)}\ng(g(g(g(g(g(g(g(g(99999999999)))))))))\n"))
        self.assertEqual(99999999999 ** 512, int(self.out.getvalue()))

    def test_file_error(self):
        with self.assertRaises(SystemExit) as context:
            self.main(self.write("g(x)={f(x)}\ng(10)\n"))
        self.assertEqual(1, context.exception.code)
        self.assertEqual("FUNCTION NOT FOUND f:1\n", self.out.getvalue())
        self.assertIn("FUNCTION NOT FOUND f:1", self.err.getvalue())

    def test_missing_file(self):
        with self.assertRaises(SystemExit):
            self.main(os.path.join(self.directory.name, "missing.ex"))
        self.assertIn("could not be opened", self.err.getvalue())

    def test_stdin(self):
        with mock.patch("sys.stdin", io.StringIO("f(x)={(x%3)}\nf(-7)\n\n(1/0)\n")):
            self.main()
        self.assertEqual("-1\n", self.out.getvalue())

    def test_stdin_syntax_error(self):
        with mock.patch("sys.stdin", io.StringIO("1 2 3\n")):
            with self.assertRaises(SystemExit):
                self.main("--verbose")
        self.assertEqual("SYNTAX ERROR\n", self.out.getvalue())
        self.assertIn("unexpected NUMBER after expression", self.err.getvalue())

    def test_debug(self):
        self.main("--debug", self.write("(1+2)"))
        self.assertIn("== Parsing ==", self.out.getvalue())
        self.assertTrue(self.out.getvalue().endswith("3\n"))

    def test_arguments(self):
        args = build_parser().parse_args(["-v", "--recursion-limit", "5000", "prog.ex"])
        self.assertTrue(args.verbose)
        self.assertFalse(args.debug)
        self.assertEqual(5000, args.recursion_limit)
        self.assertEqual("prog.ex", args.file)


if __name__ == '__main__':
    unittest.main()
