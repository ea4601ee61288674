"""Error handling for the Lox interpreter. Only LoxExceptions should be encountered during a run: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

There are three families of user-facing errors, each with its own exit status:
    1. ScanError: unknown character, unterminated string. Recorded as found, scanning continues.
    2. ParseError: missing token, invalid assignment target, too many arguments. Recorded, parser synchronizes.
    3. LoxRuntimeError: bad operand, undefined variable, bad call. Aborts the running script.
"""

import sys

from termcolor import colored

from lox.syntax.tokens import TokenType


EXIT_OK = 0
EXIT_DATAERR = 65    # lexical or syntax failure
EXIT_NOINPUT = 66    # source file could not be read
EXIT_SOFTWARE = 70   # runtime failure
EXIT_INTERRUPT = 130


class LoxException(Exception):
    """Templates an error message so that it can be thrown through an ErrorHandler."""
    exit_code = EXIT_SOFTWARE

    def __init__(self, message, line=None, internal=False, exit_code=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.internal = internal

        if exit_code is not None:
            self.exit_code = exit_code


class ScanError(LoxException):
    """Lexical error. Reported with its line only: the offending text is part of the message."""
    exit_code = EXIT_DATAERR

    def __init__(self, message, line):
        super().__init__(message, line)

    @property
    def where(self):
        return ""


class ParseError(LoxException):
    """Syntax error anchored at the token where it was detected."""
    exit_code = EXIT_DATAERR

    def __init__(self, token, message):
        super().__init__(message, token.line)
        self.token = token

    @property
    def where(self):
        """Human-readable location: 'at end' for EOF, otherwise the offending lexeme."""
        if self.token.type is TokenType.EOF:
            return " at end"
        return f" at '{self.token.lexeme}'"


class LoxRuntimeError(LoxException):
    """Error raised while evaluating. token is the operator/name/paren whose line is reported (may be None)."""
    exit_code = EXIT_SOFTWARE

    def __init__(self, token, message):
        super().__init__(message, token.line if token is not None else None)
        self.token = token


class ErrorHandler:
    """Context manager that formats Lox errors, tracks whether any occurred and turns them into exit statuses."""
    ERROR = "red"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream  # defaults to sys.stderr at print time

        self.had_error = False
        self.had_runtime_error = False
        self.diagnostics = []

    def reset(self):
        """Forgets previous errors. Used by the interactive shell after every line."""
        self.had_error = False
        self.had_runtime_error = False
        self.diagnostics = []

    @property
    def exit_code(self):
        if self.had_error:
            return EXIT_DATAERR
        if self.had_runtime_error:
            return EXIT_SOFTWARE
        return EXIT_OK

    @staticmethod
    def format(error):
        """Returns the printable diagnostic for error. Only the labels are coloured."""
        label = colored("Error", ErrorHandler.ERROR, attrs=["bold"])

        if isinstance(error, (ScanError, ParseError)):
            return f"[line {error.line}] {label}{error.where}: {error.message}"

        if isinstance(error, LoxRuntimeError):
            msg = colored(error.message, ErrorHandler.ERROR, attrs=["bold"])
            return msg if error.line is None else f"{msg}\n[line {error.line}]"

        prefix = colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"]) if error.internal else ""
        return f"{prefix}{colored('error: ', ErrorHandler.ERROR, attrs=['bold'])}{error.message}"

    def report(self, error):
        """Records and prints a lexical or syntax error. Never stops the current pass."""
        self.had_error = True
        self.diagnostics.append(error)
        self._print(ErrorHandler.format(error))

    def runtime_error(self, error):
        """Records and prints a runtime error."""
        self.had_runtime_error = True
        self.diagnostics.append(error)
        self._print(ErrorHandler.format(error))

    def throw(self, error):
        """Prints error, then exits with error.exit_code if this handler is fatal."""
        if isinstance(error, (ScanError, ParseError)):
            self.report(error)
        elif isinstance(error, LoxRuntimeError):
            self.runtime_error(error)
        else:
            self.diagnostics.append(error)
            self._print(ErrorHandler.format(error))

        if self.fatal:
            sys.exit(error.exit_code)

    def _print(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LoxException("keyboard interrupt", exit_code=EXIT_INTERRUPT))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LoxRuntimeError(None, "Stack overflow."))
        elif exc_type is not None and issubclass(exc_type, LoxException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LoxException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
