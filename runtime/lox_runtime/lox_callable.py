"""
Lox Callables - Functions, classes and instances at runtime

Runtime object model:
- LoxFunction: a declaration closed over its defining Environment
- LoxClass: methods plus an optional superclass; calling it constructs
- LoxInstance: an open record of fields backed by its class's methods
- NativeFunction: a host function exposed as a Lox global
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from .environment import Environment
from .lox_ast import FunctionDef
from .lox_errors import LoxRuntimeError, E_PROPERTY_ERROR
from .lox_tokenizer import Token

if TYPE_CHECKING:
    from .interpreter import Interpreter


INITIALIZER_NAME = "init"


class LoxCallable(ABC):
    """Anything a Lox call expression may invoke"""

    @abstractmethod
    def arity(self) -> int:
        """Number of arguments the callable expects"""

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        """Invoke with already-evaluated arguments of length arity()"""


class LoxFunction(LoxCallable):
    """User-defined function or method"""

    def __init__(self, declaration: FunctionDef, closure: Environment,
                 is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        """Return a copy of this method with `this` bound to instance"""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        # Every call gets its own scope, so recursion and re-entrancy are safe
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        # init() always yields the receiver, even after a bare `return;`
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if signal is not None:
            return signal.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"

    def __repr__(self) -> str:
        return f"LoxFunction({self.declaration.name.lexeme!r}, arity={self.arity()})"


class LoxClass(LoxCallable):
    """Runtime class: calling it creates an instance"""

    def __init__(self, name: str, superclass: Optional['LoxClass'],
                 methods: Dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        """Look a method up on this class, then up the superclass chain"""
        klass: Optional[LoxClass] = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method(INITIALIZER_NAME)
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method(INITIALIZER_NAME)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        parent = self.superclass.name if self.superclass else None
        return f"LoxClass({self.name!r}, superclass={parent!r})"


class LoxInstance:
    """Instance of a LoxClass; fields are created on first assignment"""

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        """
        Resolve a property: fields shadow methods.

        Raises:
            LoxRuntimeError: If neither a field nor a method has that name
        """
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.", E_PROPERTY_ERROR)

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

    def __repr__(self) -> str:
        return f"LoxInstance({self.klass.name!r}, fields={sorted(self.fields)})"


class NativeFunction(LoxCallable):
    """Host function exposed to Lox code"""

    def __init__(self, name: str, arity: int, function: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.function(*arguments)

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"NativeFunction({self.name!r}, arity={self._arity})"


__all__ = [
    'LoxCallable',
    'LoxFunction',
    'LoxClass',
    'LoxInstance',
    'NativeFunction',
    'INITIALIZER_NAME',
]
