"""Handles interactive/command-line mode for the Lox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def needs_continuation(line):
        """Whether line has more '{' than '}', i.e. the entry continues on the next line."""
        return line.count("{") > line.count("}")

    def default(self, line):
        """Executes arbitrary Lox input."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = f"{self._tmp_line}\n{line}" if self._tmp_line else line

            if Shell.needs_continuation(line):
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            self.sess.execute(line)

    def do_help(self, arg):
        """Prints a short intro to the language instead of per-command docs."""
        print("Welcome to the Lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with first-class functions \n"
              "and closures. Type a statement to run it, or a bare expression to see its value.\n\n"
              "Try it out by typing 'fun add(a, b) { return a + b; }'. Next, try typing \n"
              "'add(1, 2)'. This will call 'add', giving '3' as the result. Globals persist \n"
              "until you type 'exit'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
