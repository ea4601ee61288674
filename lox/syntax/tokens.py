"""Token model for the Lox language. Tokens are produced once by the scanner and never mutated afterwards.

Lexical grammar, loosely:

```
<number>     ::= <digit>+ ( "." <digit>+ )?
<string>     ::= '"' <any char except '"'>* '"'        ; may span lines, no escapes
<identifier> ::= <alpha> ( <alpha> | <digit> )*         ; <alpha> includes '_'
<comment>    ::= "//" <any char except newline>*
```
"""

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Terminal categories. Names are printed verbatim by the tokenize command."""
    # single-character tokens
    LEFT_PAREN = enum.auto()
    RIGHT_PAREN = enum.auto()
    LEFT_BRACE = enum.auto()
    RIGHT_BRACE = enum.auto()
    COMMA = enum.auto()
    DOT = enum.auto()
    MINUS = enum.auto()
    PLUS = enum.auto()
    SEMICOLON = enum.auto()
    SLASH = enum.auto()
    STAR = enum.auto()

    # one or two character tokens
    BANG = enum.auto()
    BANG_EQUAL = enum.auto()
    EQUAL = enum.auto()
    EQUAL_EQUAL = enum.auto()
    GREATER = enum.auto()
    GREATER_EQUAL = enum.auto()
    LESS = enum.auto()
    LESS_EQUAL = enum.auto()

    # literals
    IDENTIFIER = enum.auto()
    STRING = enum.auto()
    NUMBER = enum.auto()

    # keywords
    AND = enum.auto()
    CLASS = enum.auto()
    ELSE = enum.auto()
    FALSE = enum.auto()
    FUN = enum.auto()
    FOR = enum.auto()
    IF = enum.auto()
    NIL = enum.auto()
    OR = enum.auto()
    PRINT = enum.auto()
    RETURN = enum.auto()
    SUPER = enum.auto()
    THIS = enum.auto()
    TRUE = enum.auto()
    VAR = enum.auto()
    WHILE = enum.auto()

    EOF = enum.auto()

    def __str__(self):
        return self.name


KEYWORDS = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


def number_literal(value):
    """Source-level form of a number literal: always keeps a decimal point or exponent (1.0, 1e16, 1e-7)."""
    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        text = f"{mantissa}e{int(exponent)}"
    return text


@dataclass(frozen=True)
class Token:
    """A classified, positioned lexical unit. literal is a float for NUMBER, a str for STRING and None otherwise."""
    type: TokenType
    lexeme: str
    literal: object
    line: int

    def display(self):
        """Returns '<TYPE> <lexeme> <literal>', the format used by the tokenize command."""
        if self.literal is None:
            literal = "null"
        elif isinstance(self.literal, float):
            literal = number_literal(self.literal)
        else:
            literal = self.literal
        return f"{self.type} {self.lexeme} {literal}"

    def __str__(self):
        return self.display()
