"""Error handling for the expression language. Only InterpreterExceptions should be encountered during running: if
another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every InterpreterException renders (via str) to exactly one line, which is the line the interpreter reports:

```
SYNTAX ERROR
PARAMETER NOT FOUND <name>:<row>
FUNCTION NOT FOUND <name>:<row>
ARGUMENT NUMBER MISMATCH <name>:<row>
RUNTIME ERROR <binary expr>:<row>
```
"""

import sys

from termcolor import colored


class InterpreterException(Exception):
    """Superclass of parse and runtime errors. msg is the rendered line; row/column locate the error in the source."""

    def __init__(self, msg, row=None, column=None):
        super().__init__(msg)
        self.msg = msg
        self.row = row
        self.column = column

    def __str__(self):
        return self.msg


class ParseError(InterpreterException):
    """Any grammar violation. Always renders as SYNTAX ERROR; detail and position are only kept for diagnostics."""
    MSG = "SYNTAX ERROR"

    def __init__(self, detail, token=None):
        row, column = (token.row, token.column) if token is not None else (None, None)
        super().__init__(ParseError.MSG, row, column)
        self.detail = detail if token is None else f"{detail} at {row}:{column}"


class InterpreterRuntimeError(InterpreterException):
    """Superclass for errors raised during evaluation. subject is the offending name or expression."""
    TEMPLATE = "RUNTIME ERROR {}:{}"

    def __init__(self, subject, row, column=None):
        super().__init__(self.TEMPLATE.format(subject, row), row, column)
        self.subject = subject


class ParameterNotFound(InterpreterRuntimeError):
    TEMPLATE = "PARAMETER NOT FOUND {}:{}"


class FunctionNotFound(InterpreterRuntimeError):
    TEMPLATE = "FUNCTION NOT FOUND {}:{}"


class ArgumentNumberMismatch(InterpreterRuntimeError):
    TEMPLATE = "ARGUMENT NUMBER MISMATCH {}:{}"


class ArithmeticTrap(InterpreterRuntimeError):
    """Division or remainder by zero. subject is the canonical rendering of the binary node that trapped."""


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report interpreter errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, verbose=False, out=None, err=None):
        self.fatal = fatal
        self.verbose = verbose
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

        self.path = "<in>"
        self.source = ""

    def register_source(self, path, source):
        """Registers the program currently being run. Should be called prior to Session run."""
        self.path = path
        self.source = source

    def diagnose(self, row, column, warning=False):
        """Returns offending line of self.source with column highlighted and bolded, or None if out of range."""
        lines = self.source.split("\n")
        if row is None or not 0 < row <= len(lines):
            return None

        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        line = lines[row - 1]
        start = max(min(column - 1, len(line)), 0)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:start + 1], color, attrs=["bold"])
        diagnosis += line[start + 1:] + "\n"
        diagnosis += "  " + " " * start + colored("^", color, attrs=["bold"])

        return diagnosis

    def _location(self, row, column):
        if row is None:
            return colored(f"{self.path}: ", attrs=["bold"])
        return colored(f"{self.path}:{row}:{column}: ", attrs=["bold"])

    def warn(self, msg, row, column):
        """Prints a non-fatal warning. Only shown in verbose mode."""
        if not self.verbose:
            return

        print(self._location(row, column) + colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + msg,
              file=self.err)

        diagnosis = self.diagnose(row, column, warning=True)
        if diagnosis:
            print(diagnosis, file=self.err)

    def report(self, error):
        """Reports the rendered line of an InterpreterException to both output streams."""
        print(error, file=self.out)
        print(error, file=self.err)

        if self.verbose and isinstance(error, ParseError):
            print(self._location(error.row, error.column) + colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) +
                  error.detail, file=self.err)

            diagnosis = self.diagnose(error.row, error.column)
            if diagnosis:
                print(diagnosis, file=self.err)

        if self.fatal:
            sys.exit(1)

    def throw(self, msg, internal=False):
        """Reports an error that is not part of the language (stack exhaustion, interrupts, internal errors)."""
        error_msg = ""
        if internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + msg
        print(error_msg, file=self.err)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw("keyboard interrupt")
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw("maximum recursion depth exceeded")
        elif exc_type is not None and issubclass(exc_type, InterpreterException):
            self.report(exc_val)
        elif exc_type is not None and issubclass(exc_type, OSError):
            self.throw(f"'{exc_val.filename}' could not be opened")
        elif exc_type is not None:
            self.throw(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True)
            do_exit = True

        return not do_exit
