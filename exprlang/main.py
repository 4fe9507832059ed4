"""Uses the expression language implementation to run a program file, a program read from stdin, or the interactive
shell. Also uses error handling context manager. Called from the exprlang console script.
"""

import argparse
import sys

from exprlang.lang.error import ErrorHandler
from exprlang.lang.session import Session, read_program, unlimit_int_digits
from exprlang.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="exprlang")
    parser.add_argument("file", help="file to run (if empty, reads stdin up to an empty line, or goes to command-line "
                                     "mode on a terminal)", nargs="?")
    parser.add_argument("-v", "--verbose", help="show syntax error positions and warnings", action="store_true")
    parser.add_argument("--debug", help="print tokens and syntax tree before evaluating", action="store_true")
    parser.add_argument("--recursion-limit", help="maximum host recursion depth", type=int, default=None)
    return parser


def main(argv=None):
    """Runs the interpreter. Called from the exprlang console script."""
    args = build_parser().parse_args(argv)
    unlimit_int_digits()

    if args.recursion_limit is not None:
        sys.setrecursionlimit(args.recursion_limit)

    with ErrorHandler(verbose=args.verbose) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, debug=args.debug)
            print(sess.run())

        elif not sys.stdin.isatty():
            sess = Session(error_handler, debug=args.debug)
            sess.add(read_program(sys.stdin))
            print(sess.run())

        else:
            error_handler.fatal = False
            Shell(Session(error_handler, debug=args.debug)).cmdloop()


if __name__ == "__main__":
    main()
