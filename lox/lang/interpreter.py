"""Tree-walking evaluator for Lox. Expressions are evaluated to Python values, statements are executed for effect:

```
Lox        Python
nil        None
true       True
3.14       3.14 (always float, never bool)
"abc"      "abc"
fun f()    LoxCallable
```

Every statement execution returns an ExecutionOutcome. A `return` produces a returning outcome that blocks, ifs and
loops hand straight back to their caller; only LoxFunction.call turns it into a value. Runtime errors are the only
thing raised, and the first one aborts the running script.
"""

import math
import sys
from dataclasses import dataclass
from decimal import Decimal

from lox.lang.callable import NATIVES, LoxCallable, LoxFunction
from lox.lang.environment import Environment
from lox.lang.error import LoxRuntimeError
from lox.syntax.nodes import ExprVisitor, StmtVisitor
from lox.syntax.tokens import TokenType


@dataclass(frozen=True)
class ExecutionOutcome:
    """Either completed normally, or returning a value from the enclosing function."""
    returning: bool = False
    value: object = None

    @staticmethod
    def of_return(value):
        return ExecutionOutcome(True, value)


COMPLETED = ExecutionOutcome()


class Interpreter(ExprVisitor, StmtVisitor):
    """Holds the global frame and the currently active frame. One instance can run many programs (shell mode)."""
    MAX_CALL_DEPTH = 1000
    FRAMES_PER_CALL = 20  # host frames reserved for each nested Lox call

    def __init__(self, stdout=None, max_call_depth=None):
        self.stdout = stdout  # print statements go to sys.stdout if None
        self.max_call_depth = max_call_depth if max_call_depth is not None else Interpreter.MAX_CALL_DEPTH
        self.call_depth = 0
        sys.setrecursionlimit(max(sys.getrecursionlimit(), self.max_call_depth * Interpreter.FRAMES_PER_CALL))

        self.globals = Environment()
        self.environment = self.globals

        for native in NATIVES:
            self.globals.define(native.name, native)

    def interpret(self, statements):
        """Executes statements in order. A LoxRuntimeError stops execution and propagates to the caller."""
        try:
            for stmt in statements:
                self.execute(stmt)
        except RecursionError:
            raise LoxRuntimeError(None, "Stack overflow.") from None

    def interpret_expression(self, expr):
        """Returns the value of a top-level expression, with the same error behaviour as interpret."""
        try:
            return self.evaluate(expr)
        except RecursionError:
            raise LoxRuntimeError(None, "Stack overflow.") from None

    def evaluate(self, expr):
        return expr.accept(self)

    def execute(self, stmt):
        return stmt.accept(self)

    def execute_block(self, statements, environment):
        """Executes statements with environment as the active frame. The previous frame is restored on every exit
        path, including runtime errors.
        """
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                outcome = self.execute(stmt)
                if outcome.returning:
                    return outcome
        finally:
            self.environment = previous
        return COMPLETED

    # ==================== VALUE SEMANTICS ====================

    @staticmethod
    def is_truthy(value):
        """nil and false are falsy, everything else (0 and "" included) is truthy."""
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(left, right):
        """Values of different types are never equal, and comparing them is not an error."""
        if left is None and right is None:
            return True
        if left is None or right is None:
            return False
        if type(left) is not type(right):
            return False
        if isinstance(left, LoxCallable):
            return left is right
        return left == right

    @staticmethod
    def stringify(value):
        """Textual form used by print and the evaluate command: integral numbers drop their '.0'."""
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "inf" if value > 0 else "-inf"
            text = format(Decimal(repr(value)), "f")  # plain decimal digits, never an exponent
            return text[:-2] if text.endswith(".0") else text
        return str(value)

    @staticmethod
    def check_number_operand(operator, operand):
        if not isinstance(operand, float):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def check_number_operands(operator, left, right):
        if not (isinstance(left, float) and isinstance(right, float)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")

    @staticmethod
    def divide(left, right):
        """IEEE-754 division: x/0 is +-inf, 0/0 is nan, rather than a host ZeroDivisionError."""
        if right != 0:
            return left / right
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(1.0, left) * math.copysign(1.0, right) * math.inf

    # ==================== EXPRESSIONS ====================

    def visit_literal_expr(self, expr):
        return expr.value

    def visit_grouping_expr(self, expr):
        return self.evaluate(expr.expression)

    def visit_unary_expr(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.MINUS:
            Interpreter.check_number_operand(expr.operator, right)
            return -right
        if expr.operator.type is TokenType.BANG:
            return not Interpreter.is_truthy(right)

        raise LoxRuntimeError(expr.operator, f"Unknown unary operator '{expr.operator.lexeme}'.")

    def visit_binary_expr(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        op = operator.type

        if op is TokenType.EQUAL_EQUAL:
            return Interpreter.is_equal(left, right)
        if op is TokenType.BANG_EQUAL:
            return not Interpreter.is_equal(left, right)

        if op is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        Interpreter.check_number_operands(operator, left, right)

        if op is TokenType.MINUS:
            return left - right
        if op is TokenType.STAR:
            return left * right
        if op is TokenType.SLASH:
            return Interpreter.divide(left, right)
        if op is TokenType.GREATER:
            return left > right
        if op is TokenType.GREATER_EQUAL:
            return left >= right
        if op is TokenType.LESS:
            return left < right
        if op is TokenType.LESS_EQUAL:
            return left <= right

        raise LoxRuntimeError(operator, f"Unknown binary operator '{operator.lexeme}'.")

    def visit_logical_expr(self, expr):
        """Short-circuits and returns one of the operand values, not necessarily a bool."""
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if Interpreter.is_truthy(left):
                return left
        elif not Interpreter.is_truthy(left):
            return left

        return self.evaluate(expr.right)

    def visit_variable_expr(self, expr):
        return self.environment.get(expr.name)

    def visit_assign_expr(self, expr):
        value = self.evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_call_expr(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        if self.call_depth >= self.max_call_depth:
            raise LoxRuntimeError(expr.paren, "Stack overflow.")

        self.call_depth += 1
        try:
            return callee.call(self, arguments)
        finally:
            self.call_depth -= 1

    # ==================== STATEMENTS ====================

    def visit_expression_stmt(self, stmt):
        self.evaluate(stmt.expression)
        return COMPLETED

    def visit_print_stmt(self, stmt):
        value = self.evaluate(stmt.expression)
        print(Interpreter.stringify(value), file=self.stdout)
        return COMPLETED

    def visit_var_stmt(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)
        return COMPLETED

    def visit_block_stmt(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if_stmt(self, stmt):
        if Interpreter.is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return COMPLETED

    def visit_while_stmt(self, stmt):
        while Interpreter.is_truthy(self.evaluate(stmt.condition)):
            outcome = self.execute(stmt.body)
            if outcome.returning:
                return outcome
        return COMPLETED

    def visit_function_stmt(self, stmt):
        function = LoxFunction(stmt, self.environment)  # closes over the declaring frame, not the caller's
        self.environment.define(stmt.name.lexeme, function)
        return COMPLETED

    def visit_return_stmt(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return ExecutionOutcome.of_return(value)
