"""Session control for Lox. Drives the scanner, parser and interpreter over one source, either a file (one command per
process) or the interactive shell (one interpreter shared by every line).

Lexical and syntax errors are reported through the session's ErrorHandler as they are found; the command then
returns EXIT_DATAERR without evaluating anything. Runtime errors are reported the same way and return EXIT_SOFTWARE.
"""

from lox.lang.error import EXIT_DATAERR, EXIT_NOINPUT, EXIT_OK, EXIT_SOFTWARE, LoxException, LoxRuntimeError
from lox.lang.interpreter import Interpreter
from lox.lang.logger import configure as configure_logger
from lox.syntax.parser import ParseStatus, Parser, parse
from lox.syntax.printer import AstPrinter
from lox.syntax.scanner import scan

LOGGER = configure_logger("lox.session")


class Session:
    """Governs a Lox session: a source, an error handler and an interpreter whose globals persist across runs."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, source=None, cmd_line=False, stdout=None, max_call_depth=None):
        self.error_handler = error_handler
        self.path = path          # used for log messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.stdout = stdout      # program output, sys.stdout if None

        self.interpreter = Interpreter(stdout=stdout, max_call_depth=max_call_depth)

        if self.cmd_line:
            self.error_handler.fatal = False

        if source is not None:
            self.source = source
        elif path != Session.SH_FILE:
            self.source = Session.read(path)
        elif cmd_line:
            self.source = ""
        else:
            raise LoxException("'<in>' is a reserved filename")

    @staticmethod
    def read(path):
        """Returns the contents of path with trailing whitespace removed."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                source = file.read().rstrip()
        except OSError:
            raise LoxException(f"'{path}' could not be opened", exit_code=EXIT_NOINPUT)

        LOGGER.debug("loaded %s (%d chars)", path, len(source))
        return source

    def scan(self, source=None):
        """Scans source (default: the session source), reporting every lexical error. Returns the token list."""
        tokens, errors = scan(self.source if source is None else source, self.error_handler)
        LOGGER.debug("%s: scanned %d tokens, %d lexical errors", self.path, len(tokens), len(errors))
        return tokens

    def tokenize(self):
        """tokenize command: prints one line per token, including those scanned after an error."""
        for token in self.scan():
            self._print(token.display())
        return self.error_handler.exit_code

    def parse(self, program=False):
        """parse command: prints the parenthesized form of a single expression, or of every statement if program."""
        printer = AstPrinter()

        if program:
            statements = self._parse_program(self.source)
            if statements is None:
                return EXIT_DATAERR
            for stmt in statements:
                self._print(printer.print(stmt))
            return EXIT_OK

        expr = self._parse_expression(self.source)
        if expr is None:
            return EXIT_DATAERR
        self._print(printer.print(expr))
        return EXIT_OK

    def evaluate(self):
        """evaluate command: prints the value of a single expression."""
        expr = self._parse_expression(self.source)
        if expr is None:
            return EXIT_DATAERR
        return self._evaluate(expr)

    def run(self, source=None):
        """run command: executes a whole program for its side effects. A program with syntax errors never runs."""
        statements = self._parse_program(self.source if source is None else source)
        if statements is None:
            return EXIT_DATAERR

        try:
            self.interpreter.interpret(statements)
        except LoxRuntimeError as error:
            self.error_handler.runtime_error(error)
            return EXIT_SOFTWARE

        LOGGER.debug("%s: run completed", self.path)
        return EXIT_OK

    def execute(self, line):
        """Runs one shell entry. A lone expression prints its value, anything else runs as statements. Errors from
        previous entries are forgotten first.
        """
        self.error_handler.reset()

        tokens = self.scan(line)
        if self.error_handler.had_error:
            return EXIT_DATAERR

        trial = Parser(tokens)  # silent: a failed trial just means the line is not a bare expression
        expr = trial.parse_expression()
        if expr is not None and trial.is_at_end() and not trial.errors:
            return self._evaluate(expr)

        return self.run(line)

    def _parse_expression(self, source):
        tokens = self.scan(source)
        if self.error_handler.had_error:
            return None
        parser = Parser(tokens, self.error_handler)
        expr = parser.parse_expression()
        return expr if parser.status is ParseStatus.SUCCESS else None

    def _parse_program(self, source):
        tokens = self.scan(source)
        if self.error_handler.had_error:
            return None

        statements, status = parse(tokens, self.error_handler)
        LOGGER.debug("%s: parsed %d statements, status %s", self.path, len(statements), status.name)
        return statements if status is ParseStatus.SUCCESS else None

    def _evaluate(self, expr):
        try:
            value = self.interpreter.interpret_expression(expr)
        except LoxRuntimeError as error:
            self.error_handler.runtime_error(error)
            return EXIT_SOFTWARE

        self._print(Interpreter.stringify(value))
        return EXIT_OK

    def _print(self, text):
        print(text, file=self.stdout)
