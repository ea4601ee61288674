"""Scope chain for Lox. An Environment maps names to values and keeps a reference to its enclosing Environment.

Children reference parents, never the reverse, so the chain is finite and acyclic. A parent may be shared by several
children at once (sibling blocks, or every closure created in the same scope); Python's reference counting keeps a
frame alive for as long as any child or closure can still reach it.
"""

from lox.lang.error import LoxRuntimeError


class Environment:

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        """Creates or overwrites name in this frame. Re-declaring a name in the same scope is legal."""
        self.values[name] = value

    def get(self, name):
        """Returns the value bound to token name in the nearest frame that has it."""
        env = self._find(name)
        return env.values[name.lexeme]

    def assign(self, name, value):
        """Updates an existing binding in the nearest frame that has it. Never creates a binding."""
        env = self._find(name)
        env.values[name.lexeme] = value

    def _find(self, name):
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def __repr__(self):
        return f"Environment({self.values!r}, enclosing={self.enclosing!r})"
