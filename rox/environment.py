from __future__ import annotations

from typing import Dict, Optional

from .errors import ErrorKind, RoxRuntimeError
from .tokens import Token
from .types import Value


class Environment:
    """One scope frame: name bindings plus a link to the enclosing frame.

    A binding holding `None` was declared without an initializer. That is
    kept apart from a binding holding `NIL`, even though both read as nil.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Optional[Value]] = {}

    def define(self, name: str, value: Optional[Value]):
        # Redefinition in the same frame is allowed and replaces the binding.
        self.values[name] = value

    def get(self, name: Token) -> Optional[Value]:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise RoxRuntimeError(ErrorKind.UNDEFINED_VARIABLE, name,
                              f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Value):
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise RoxRuntimeError(ErrorKind.INVALID_ASSIGNMENT, name,
                              f"Undefined variable '{name.lexeme}'.")

    @property
    def depth(self) -> int:
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return depth
