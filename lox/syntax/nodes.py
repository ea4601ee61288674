"""Abstract syntax tree for Lox. Formally, the grammar the parser accepts is

```
<program>     ::= <declaration>* EOF
<declaration> ::= "fun" <function> | "var" IDENTIFIER ( "=" <expression> )? ";" | <statement>
<function>    ::= IDENTIFIER "(" ( IDENTIFIER ( "," IDENTIFIER )* )? ")" <block>
<statement>   ::= <expression> ";" | "print" <expression> ";" | "return" <expression>? ";" | <block>
                | "if" "(" <expression> ")" <statement> ( "else" <statement> )?
                | "while" "(" <expression> ")" <statement>
                | "for" "(" ( <var decl> | <expr stmt> | ";" ) <expression>? ";" <expression>? ")" <statement>
<block>       ::= "{" <declaration>* "}"

<expression>  ::= IDENTIFIER "=" <expression> | <logic_or>      ; right associative
<logic_or>    ::= <logic_and> ( "or" <logic_and> )*
<logic_and>   ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" <arguments>? ")" )*
<primary>     ::= NUMBER | STRING | "true" | "false" | "nil" | "(" <expression> ")" | IDENTIFIER
```

Nodes are immutable and own their children exclusively. Operations over the tree (printing, evaluation) are written
as ExprVisitor/StmtVisitor subclasses: every visit method is abstract, so a visitor that forgets a node type cannot be
instantiated. Adding an operation never requires touching the node classes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from lox.syntax.tokens import Token


class Expr(ABC):
    """Superclass of every expression node."""

    @abstractmethod
    def accept(self, visitor):
        """Dispatches to the visitor method for this node type and returns its result."""


class Stmt(ABC):
    """Superclass of every statement node."""

    @abstractmethod
    def accept(self, visitor):
        """Dispatches to the visitor method for this node type and returns its result."""


# ==================== EXPRESSIONS ====================

@dataclass(frozen=True)
class Literal(Expr):
    value: object  # float, str, bool or None

    def accept(self, visitor):
        return visitor.visit_literal_expr(self)


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr

    def accept(self, visitor):
        return visitor.visit_grouping_expr(self)


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr

    def accept(self, visitor):
        return visitor.visit_unary_expr(self)


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor):
        return visitor.visit_binary_expr(self)


@dataclass(frozen=True)
class Logical(Expr):
    """'and'/'or'. Kept apart from Binary because the right operand is evaluated lazily."""
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor):
        return visitor.visit_logical_expr(self)


@dataclass(frozen=True)
class Variable(Expr):
    name: Token

    def accept(self, visitor):
        return visitor.visit_variable_expr(self)


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr

    def accept(self, visitor):
        return visitor.visit_assign_expr(self)


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, anchors runtime errors
    arguments: Tuple[Expr, ...]

    def accept(self, visitor):
        return visitor.visit_call_expr(self)


# ==================== STATEMENTS ====================

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr

    def accept(self, visitor):
        return visitor.visit_expression_stmt(self)


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

    def accept(self, visitor):
        return visitor.visit_print_stmt(self)


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]

    def accept(self, visitor):
        return visitor.visit_var_stmt(self)


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]

    def accept(self, visitor):
        return visitor.visit_block_stmt(self)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

    def accept(self, visitor):
        return visitor.visit_if_stmt(self)


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt

    def accept(self, visitor):
        return visitor.visit_while_stmt(self)


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]

    def accept(self, visitor):
        return visitor.visit_function_stmt(self)


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]

    def accept(self, visitor):
        return visitor.visit_return_stmt(self)


# ==================== VISITORS ====================

class ExprVisitor(ABC):
    """One method per Expr subclass. Subclasses must implement all of them."""

    @abstractmethod
    def visit_literal_expr(self, expr): ...

    @abstractmethod
    def visit_grouping_expr(self, expr): ...

    @abstractmethod
    def visit_unary_expr(self, expr): ...

    @abstractmethod
    def visit_binary_expr(self, expr): ...

    @abstractmethod
    def visit_logical_expr(self, expr): ...

    @abstractmethod
    def visit_variable_expr(self, expr): ...

    @abstractmethod
    def visit_assign_expr(self, expr): ...

    @abstractmethod
    def visit_call_expr(self, expr): ...


class StmtVisitor(ABC):
    """One method per Stmt subclass. Subclasses must implement all of them."""

    @abstractmethod
    def visit_expression_stmt(self, stmt): ...

    @abstractmethod
    def visit_print_stmt(self, stmt): ...

    @abstractmethod
    def visit_var_stmt(self, stmt): ...

    @abstractmethod
    def visit_block_stmt(self, stmt): ...

    @abstractmethod
    def visit_if_stmt(self, stmt): ...

    @abstractmethod
    def visit_while_stmt(self, stmt): ...

    @abstractmethod
    def visit_function_stmt(self, stmt): ...

    @abstractmethod
    def visit_return_stmt(self, stmt): ...
