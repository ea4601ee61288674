import io
import os
import unittest
from unittest import mock

from lox.lang.error import (EXIT_DATAERR, EXIT_INTERRUPT, EXIT_OK, EXIT_SOFTWARE, ErrorHandler, LoxException,
                            LoxRuntimeError, ParseError, ScanError)
from lox.syntax.tokens import Token, TokenType


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.dict(os.environ, {"NO_COLOR": "1"})
        patcher.start()
        self.addCleanup(patcher.stop)

        self.stream = io.StringIO()
        self.handler = ErrorHandler(fatal=False, stream=self.stream)

    def test_format(self):
        cases = {
            "[line 3] Error: Unexpected character: $": ScanError("Unexpected character: $", 3),
            "[line 1] Error at end: Expect expression.":
                ParseError(Token(TokenType.EOF, "", None, 1), "Expect expression."),
            "[line 2] Error at ')': Expect expression.":
                ParseError(Token(TokenType.RIGHT_PAREN, ")", None, 2), "Expect expression."),
            "Operands must be numbers.\n[line 4]":
                LoxRuntimeError(Token(TokenType.MINUS, "-", None, 4), "Operands must be numbers."),
            "Stack overflow.": LoxRuntimeError(None, "Stack overflow."),
            "[internal] error: boom": LoxException("boom", internal=True),
        }
        for expected, error in cases.items():
            self.assertEqual(expected, ErrorHandler.format(error), expected)

    def test_report_keeps_going(self):
        self.handler.report(ScanError("Unexpected character: $", 1))
        self.handler.report(ScanError("Unterminated string.", 2))

        self.assertTrue(self.handler.had_error)
        self.assertEqual(EXIT_DATAERR, self.handler.exit_code)
        self.assertEqual(2, len(self.handler.diagnostics))
        self.assertEqual(
            "[line 1] Error: Unexpected character: $\n[line 2] Error: Unterminated string.\n", self.stream.getvalue()
        )

    def test_exit_codes(self):
        self.assertEqual(EXIT_OK, self.handler.exit_code)

        self.handler.runtime_error(LoxRuntimeError(None, "Stack overflow."))
        self.assertEqual(EXIT_SOFTWARE, self.handler.exit_code)

        self.handler.reset()
        self.assertEqual(EXIT_OK, self.handler.exit_code)
        self.assertEqual([], self.handler.diagnostics)

    def test_context_manager(self):
        with self.handler:
            raise LoxRuntimeError(Token(TokenType.IDENTIFIER, "x", None, 7), "Undefined variable 'x'.")
        self.assertTrue(self.handler.had_runtime_error)
        self.assertIn("[line 7]", self.stream.getvalue())

        with self.handler:
            raise RecursionError()
        self.assertIn("Stack overflow.", self.stream.getvalue())

        with self.assertRaises(ValueError):
            with self.handler:
                raise ValueError("unexpected")
        self.assertIn("[internal] error: unknown error: 'ValueError: unexpected'", self.stream.getvalue())

    def test_fatal(self):
        cases = {
            EXIT_SOFTWARE: LoxRuntimeError(None, "Stack overflow."),
            EXIT_DATAERR: ScanError("Unterminated string.", 1),
            EXIT_INTERRUPT: KeyboardInterrupt(),
        }
        for code, error in cases.items():
            with self.assertRaises(SystemExit) as ctx:
                with ErrorHandler(stream=io.StringIO()):
                    raise error
            self.assertEqual(code, ctx.exception.code, code)


if __name__ == '__main__':
    unittest.main()
