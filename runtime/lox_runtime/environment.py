"""
Lox Environment - Chained variable scopes

One Environment exists per lexical scope (block, call, bound method), linked
to its enclosing scope up to the global one. Closures keep their defining
Environment alive after the creating call returns.

Two lookup paths exist:
- get/assign walk the chain by name (globals, late bound)
- get_at/assign_at jump a resolver-computed distance (locals)
"""

from typing import Any, Dict, Optional

from .lox_errors import LoxRuntimeError, E_NAME_ERROR
from .lox_tokenizer import Token


class Environment:
    """Variable bindings for one scope"""

    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        """Bind name in this scope, overwriting any existing slot"""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Look a name up in this scope and then outward.

        Raises:
            LoxRuntimeError: If no scope up to the globals binds the name
        """
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.", E_NAME_ERROR)

    def assign(self, name: Token, value: Any) -> None:
        """
        Rebind an existing name in the nearest scope holding it.

        Assignment never creates a binding.

        Raises:
            LoxRuntimeError: If no scope up to the globals binds the name
        """
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.", E_NAME_ERROR)

    def ancestor(self, distance: int) -> 'Environment':
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self) -> str:
        depth = 0
        environment = self.enclosing
        while environment is not None:
            depth += 1
            environment = environment.enclosing
        return f"<Environment depth={depth} names={sorted(self.values)}>"


__all__ = ['Environment']
