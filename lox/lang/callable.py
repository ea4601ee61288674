"""Callable values: user functions declared in Lox and native functions provided by the host. Both are invoked
through the same contract, after the interpreter has checked that the argument count equals arity().
"""

import time
from abc import ABC, abstractmethod

from lox.lang.environment import Environment


class LoxCallable(ABC):

    @abstractmethod
    def arity(self):
        """Number of arguments this callable requires."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable with already-evaluated arguments and returns its result value."""


class LoxFunction(LoxCallable):
    """A function declaration plus the environment active where it was declared (its closure)."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        """Binds parameters in a fresh frame whose parent is the closure (never the caller's frame), then runs the
        body. A Returning outcome stops here: it is converted into the call's value. No return means nil.
        """
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        outcome = interpreter.execute_block(self.declaration.body, environment)
        return outcome.value if outcome.returning else None

    def __repr__(self):
        return f"<fn {self.declaration.name.lexeme}>"

    def __str__(self):
        return self.__repr__()


class NativeFunction(LoxCallable):
    """Host-implemented procedure with a fixed arity."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __repr__(self):
        return "<native fn>"

    def __str__(self):
        return self.__repr__()


def clock():
    """Wall-clock time in seconds, as a Lox number."""
    return float(time.time())


NATIVES = [NativeFunction("clock", 0, clock)]
