"""Session control for the expression language. Collects program source (from a file, a stream or the command line),
runs it through the tokenizer, parser and evaluator, and keeps the results.
"""

import sys

from exprlang.lang.error import InterpreterException
from exprlang.pure.grammar import Parser
from exprlang.pure.tokens import tokenize


def unlimit_int_digits():
    """Lifts the host's int/str conversion digit limit (Python >= 3.11), so any value can be rendered."""
    if hasattr(sys, "set_int_max_str_digits"):
        sys.set_int_max_str_digits(0)


def interpret(source):
    """Returns the integer value of the program in source. Raises an InterpreterException on failure."""
    return Parser(source).compute()


def run(source):
    """Returns the line reported for source: its value, or the rendered error."""
    unlimit_int_digits()
    try:
        return str(interpret(source))
    except InterpreterException as error:
        return str(error)


def read_program(stream):
    """Reads lines from stream up to the first empty line (or end of input). Each line keeps its line feed."""
    src = ""
    for line in stream:
        line = line.rstrip("\r\n")
        if not line:
            break
        src += line + "\n"
    return src


class Session:
    """Governs an interpreter session: the pending program source, the error handler and the results so far."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, debug=False, out=None):
        self.error_handler = error_handler

        self.path = path    # used for error messages
        self.debug = debug  # whether or not to dump tokens and syntax tree
        self.out = out if out is not None else error_handler.out

        self.lines = []    # lines of the pending program
        self.results = []  # values of every program run so far

        if path != Session.SH_FILE:
            with open(path, "r") as file:
                self.add(file.read())

    @property
    def source(self):
        return "".join(self.lines)

    def add(self, text):
        """Appends text to the pending program. A line feed is added if text does not end with one."""
        if text and not text.endswith("\n"):
            text += "\n"
        self.lines.append(text)

    def clear(self):
        self.lines = []

    def run(self):
        """Runs the pending program and appends its value to self.results. Errors are raised to the caller, normally
        wrapped in the session's ErrorHandler.
        """
        source = self.source
        self.error_handler.register_source(self.path, source)

        parser = Parser(source)
        program = parser.parse()

        for function in parser.redefined:
            replacement = program.functions[function.name]
            self.error_handler.warn(f"'{function.name}' redefined on line {replacement.row}", function.row,
                                    function.column)

        if self.debug:
            self.dump(source, program)

        result = parser.compute()
        self.results.append(result)
        return result

    def dump(self, source, program):
        """Prints tokens, function table and syntax tree of program."""
        print("== Lexing ==", file=self.out)
        print("  " + " ".join(str(token) for token in tokenize(source)), file=self.out)
        print(file=self.out)

        print("== Parsing ==", file=self.out)
        for function in program.functions.values():
            print(f"  {function}", file=self.out)
            print(function.body.display(2), file=self.out)
        print(f"  {program.expression}", file=self.out)
        print(program.expression.display(2), file=self.out)
        print(file=self.out)

    def pop(self):
        """Returns and removes the most recent result."""
        return self.results.pop()
