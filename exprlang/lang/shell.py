"""Handles interactive/command-line mode for the interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Expression language interpreter shell. Lines are collected until an empty line, which runs the program."""
    intro = "Expression language interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used while a program is pending
    _tmp_prompt = "> "       # also used for prompt swapping after a run

    COMMANDS = {"help", "?", "exit", "EOF"}

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess

    def onecmd(self, line):
        """Only bare commands are dispatched: anything else (e.g. 'exit(1)') is program text."""
        if line.strip() in Shell.COMMANDS:
            return super().onecmd(line.strip())
        elif not line.strip():
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Adds line to the pending program."""
        self.sess.add(line)
        self.prompt = self.secondary_prompt

    def emptyline(self):
        """Runs the pending program, if any. Does not repeat previous command."""
        if not self.sess.source:
            return False

        self.prompt = self._tmp_prompt
        try:
            with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
                self.sess.run()
                print(self.sess.pop(), file=self.stdout)
        finally:
            self.sess.clear()
        return False

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the expression language interpreter!\n\n"
              "Programs are a list of function definitions followed by one expression, and\n"
              "end with an empty line. Every operation must be parenthesized: try '(2+(3*4))'.\n"
              "Conditionals look like '[(x>1)]?{x}:{0}' and functions like 'f(x)={(x*x)}'\n"
              "(one per line). Try defining 'sq(x)={(x*x)}', then typing 'sq(12)' and an\n"
              "empty line. This will print 144.", file=self.stdout)

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
