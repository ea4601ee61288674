"""Lexical analysis for Lox. Turns a source string into a list of Tokens in a single left-to-right pass.

The scanner never stops at the first error: every unknown character and unterminated string is recorded as a
ScanError and scanning resumes, so that all lexical errors in a file surface at once. A final EOF token is always
appended.
"""

import enum

from lox.lang.error import ScanError
from lox.syntax.tokens import KEYWORDS, Token, TokenType


class ScanStatus(enum.Enum):
    SUCCESS = enum.auto()
    FAILED = enum.auto()


class Scanner:
    """Single-use scanner over source. Call scan_tokens once, then read tokens, errors and status."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }
    # char: (type if followed by '=', type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source, error_handler=None):
        self.source = source
        self.error_handler = error_handler  # if given, errors are reported as soon as they are found

        self.tokens = []
        self.errors = []

        self.start = 0
        self.current = 0
        self.line = 1

    @property
    def status(self):
        return ScanStatus.FAILED if self.errors else ScanStatus.SUCCESS

    def scan_tokens(self):
        """Scans the whole source and returns the token list (always terminated by EOF)."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            with_equal, alone = Scanner.DOUBLE[char]
            self.add_token(with_equal if self.match("=") else alone)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif char in Scanner.WHITESPACE:
            pass
        elif char == "\n":
            self.line += 1
        elif char == "\"":
            self.string()
        elif Scanner.is_digit(char):
            self.number()
        elif Scanner.is_alpha(char):
            self.identifier()
        else:
            self.error(f"Unexpected character: {char}")

    def string(self):
        """Scans a string literal. The literal value excludes the surrounding quotes."""
        while self.peek() != "\"" and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        """Scans a number literal: digits with at most one interior '.' that must be followed by a digit."""
        while Scanner.is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alpha(self.peek()) or Scanner.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def error(self, message):
        error = ScanError(message, self.line)
        self.errors.append(error)
        if self.error_handler is not None:
            self.error_handler.report(error)

    def add_token(self, token_type, literal=None):
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line))

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the next character only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def is_at_end(self):
        return self.current >= len(self.source)

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def scan(source, error_handler=None):
    """Returns (tokens, errors) for source. Lexing failed iff errors is non-empty."""
    scanner = Scanner(source, error_handler)
    tokens = scanner.scan_tokens()
    return tokens, scanner.errors
