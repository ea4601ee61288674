"""Recursive-descent parser for Lox. See nodes.py for the grammar.

Each binary precedence level parses one operand of the next-higher level, then loops while the next token is one of
its operators, folding into a left-leaning Binary/Logical node. Assignment is the only right-associative level.

On a syntax error the parser records a ParseError, enters panic mode and synchronizes: tokens are discarded until a ';'
has just been consumed or the next token starts a new statement. Parsing then resumes, so one pass reports every
independent syntax error. A program whose status is PANICKED must not be executed.
"""

import enum

from lox.lang.error import ParseError
from lox.syntax import nodes
from lox.syntax.tokens import TokenType


class ParseStatus(enum.Enum):
    SUCCESS = enum.auto()
    PANICKED = enum.auto()


class Parser:
    """Consumes a token list (as produced by the scanner, EOF-terminated) and builds statements or an expression."""
    MAX_ARGUMENTS = 255

    SYNC_TYPES = (
        TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
        TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
    )

    class _Panic(Exception):
        """Unwinds the current declaration after an error has been recorded."""

    def __init__(self, tokens, error_handler=None):
        self.tokens = tokens
        self.error_handler = error_handler  # if given, errors are reported as soon as they are found

        self.current = 0
        self.errors = []
        self._function_depth = 0

    @property
    def status(self):
        return ParseStatus.PANICKED if self.errors else ParseStatus.SUCCESS

    def parse(self):
        """Parses a whole program. Declarations that failed are dropped, so check status before executing."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self):
        """Parses a single expression (evaluate/parse commands). Returns None if a syntax error occurred."""
        try:
            return self.expression()
        except Parser._Panic:
            return None

    # ==================== STATEMENTS ====================

    def declaration(self):
        try:
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except Parser._Panic:
            self.synchronize()
            return None

    def function(self, kind):
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGUMENTS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        self._function_depth += 1
        try:
            body = self.block()
        finally:
            self._function_depth -= 1

        return nodes.Function(name, tuple(params), tuple(body))

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return nodes.Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self):
        """Desugars 'for (init; cond; incr) body' into '{ init; while (cond) { body; incr; } }'."""
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = nodes.Block((body, nodes.Expression(increment)))
        if condition is None:
            condition = nodes.Literal(True)
        body = nodes.While(condition, body)
        if initializer is not None:
            body = nodes.Block((initializer, body))

        return body

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = self.statement() if self.match(TokenType.ELSE) else None  # binds to the nearest if

        return nodes.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return nodes.Print(value)

    def return_statement(self):
        keyword = self.previous()
        if self._function_depth == 0:
            self.error(keyword, "Can't return from top-level code.")

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self.statement())

    def block(self):
        """Parses declarations up to the closing brace. The opening brace must already be consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.Expression(expr)

    # ==================== EXPRESSIONS ====================

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)

            self.error(equals, "Invalid assignment target.")  # reported, but no need to synchronize

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            expr = nodes.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            expr = nodes.Logical(expr, operator, self.equality())
        return expr

    def equality(self):
        return self._binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self._binary(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL
        )

    def term(self):
        return self._binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self._binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def _binary(self, operand, *types):
        """Left-associative binary level: operand ( <types> operand )*."""
        expr = operand()
        while self.match(*types):
            operator = self.previous()
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return nodes.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGUMENTS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenType.FALSE):
            return nodes.Literal(False)
        if self.match(TokenType.TRUE):
            return nodes.Literal(True)
        if self.match(TokenType.NIL):
            return nodes.Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self.previous().literal)

        if self.match(TokenType.IDENTIFIER):
            return nodes.Variable(self.previous())

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # ==================== HELPERS ====================

    def synchronize(self):
        """Discards tokens until a statement boundary: just after a ';' or just before a statement keyword."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in Parser.SYNC_TYPES:
                return
            self.advance()

    def error(self, token, message):
        """Records a ParseError and returns a panic the caller may raise to unwind to the enclosing declaration."""
        error = ParseError(token, message)
        self.errors.append(error)
        if self.error_handler is not None:
            self.error_handler.report(error)
        return Parser._Panic(message)

    def consume(self, token_type, message):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def match(self, *types):
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def check(self, token_type):
        if self.is_at_end():
            return False
        return self.peek().type is token_type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]


def parse(tokens, error_handler=None):
    """Returns (statements, status) for tokens."""
    parser = Parser(tokens, error_handler)
    statements = parser.parse()
    return statements, parser.status
