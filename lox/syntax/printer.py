"""Prints syntax trees in a fully-parenthesized prefix form, operator first: `1 + 2 * 3` becomes
`(+ 1.0 (* 2.0 3.0))`. Used by the parse command; statements are supported for `parse --program`.
"""

from lox.syntax.nodes import ExprVisitor, StmtVisitor
from lox.syntax.tokens import number_literal


class AstPrinter(ExprVisitor, StmtVisitor):
    """Walks an Expr or Stmt and returns its parenthesized string."""

    def print(self, node):
        return node.accept(self)

    @staticmethod
    def literal(value):
        """Number literals keep their decimal point (1.0), unlike runtime values."""
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return number_literal(value)
        return str(value)

    def parenthesize(self, name, *parts):
        result = f"({name}"
        for part in parts:
            result += " " + (part if isinstance(part, str) else part.accept(self))
        return result + ")"

    def visit_literal_expr(self, expr):
        return AstPrinter.literal(expr.value)

    def visit_grouping_expr(self, expr):
        return self.parenthesize("group", expr.expression)

    def visit_unary_expr(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.right)

    def visit_binary_expr(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_logical_expr(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_variable_expr(self, expr):
        return expr.name.lexeme

    def visit_assign_expr(self, expr):
        return self.parenthesize("=", expr.name.lexeme, expr.value)

    def visit_call_expr(self, expr):
        return self.parenthesize("call", expr.callee, *expr.arguments)

    def visit_expression_stmt(self, stmt):
        return self.parenthesize(";", stmt.expression)

    def visit_print_stmt(self, stmt):
        return self.parenthesize("print", stmt.expression)

    def visit_var_stmt(self, stmt):
        if stmt.initializer is None:
            return self.parenthesize("var", stmt.name.lexeme)
        return self.parenthesize("var", stmt.name.lexeme, stmt.initializer)

    def visit_block_stmt(self, stmt):
        return self.parenthesize("block", *stmt.statements)

    def visit_if_stmt(self, stmt):
        if stmt.else_branch is None:
            return self.parenthesize("if", stmt.condition, stmt.then_branch)
        return self.parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch)

    def visit_while_stmt(self, stmt):
        return self.parenthesize("while", stmt.condition, stmt.body)

    def visit_function_stmt(self, stmt):
        params = "(" + " ".join(param.lexeme for param in stmt.params) + ")"
        return self.parenthesize("fun", stmt.name.lexeme, params, *stmt.body)

    def visit_return_stmt(self, stmt):
        if stmt.value is None:
            return "(return)"
        return self.parenthesize("return", stmt.value)
