"""
Lox Resolver - Static scope resolution

One walk over the statement list before execution. For every local variable
reference (and every `this` / `super`) it records in the interpreter how
many scopes separate the use from its declaration. References it cannot
find on the scope stack are left unrecorded and looked up as globals at
run time.

It also reports the scoping errors the parser cannot see:
- reading a local in its own initializer
- redeclaring a local in the same scope
- `return` at top level, or with a value inside `init`
- `this` / `super` outside a class, `super` without a superclass
- a class inheriting from itself

Errors are reported, not raised, so every static error surfaces in one pass.
"""

import enum
import logging
from typing import Dict, List, Union

from .lox_ast import (
    Assign, BinaryOp, Block, Call, ClassDecl, Expr, ExpressionStmt,
    FunctionDef, GetProperty, Grouping, If, Literal, Logical, Print,
    ReturnStmt, SetProperty, Stmt, SuperRef, ThisRef, UnaryOp, VarDecl,
    Variable, While,
)
from .lox_callable import INITIALIZER_NAME
from .lox_errors import ErrorReporter
from .lox_tokenizer import Token


logger = logging.getLogger("lox.resolver")
logger.addHandler(logging.NullHandler())


class FunctionType(enum.Enum):
    NONE = 0
    FUNCTION = 1
    INITIALIZER = 2
    METHOD = 3


class ClassType(enum.Enum):
    NONE = 0
    CLASS = 1
    SUBCLASS = 2


class Resolver:
    """Compute scope distances for an interpreter"""

    def __init__(self, interpreter, reporter: ErrorReporter):
        self.interpreter = interpreter
        self.reporter = reporter
        # name -> False while declared, True once its initializer is resolved
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements: List[Stmt]) -> None:
        for statement in statements:
            self._resolve(statement)

    def _resolve(self, node: Union[Stmt, Expr]) -> None:
        """Dispatch on node type"""
        # Statements
        if isinstance(node, Block):
            self._begin_scope()
            self.resolve(node.statements)
            self._end_scope()

        elif isinstance(node, VarDecl):
            self._declare(node.name)
            if node.initializer is not None:
                self._resolve(node.initializer)
            self._define(node.name)

        elif isinstance(node, FunctionDef):
            # Defined before the body so the function can call itself
            self._declare(node.name)
            self._define(node.name)
            self._resolve_function(node, FunctionType.FUNCTION)

        elif isinstance(node, ClassDecl):
            self._resolve_class(node)

        elif isinstance(node, ExpressionStmt):
            self._resolve(node.expression)

        elif isinstance(node, If):
            self._resolve(node.condition)
            self._resolve(node.then_branch)
            if node.else_branch is not None:
                self._resolve(node.else_branch)

        elif isinstance(node, Print):
            self._resolve(node.expression)

        elif isinstance(node, ReturnStmt):
            if self.current_function == FunctionType.NONE:
                self.reporter.error_at_token(node.keyword, "Can't return from top-level code.")
            if node.value is not None:
                if self.current_function == FunctionType.INITIALIZER:
                    self.reporter.error_at_token(
                        node.keyword, "Can't return a value from an initializer.")
                self._resolve(node.value)

        elif isinstance(node, While):
            self._resolve(node.condition)
            self._resolve(node.body)

        # Expressions
        elif isinstance(node, Variable):
            if self.scopes and self.scopes[-1].get(node.name.lexeme) is False:
                self.reporter.error_at_token(
                    node.name, "Can't read local variable in its own initializer.")
            self._resolve_local(node, node.name)

        elif isinstance(node, Assign):
            self._resolve(node.value)
            self._resolve_local(node, node.name)

        elif isinstance(node, (BinaryOp, Logical)):
            self._resolve(node.left)
            self._resolve(node.right)

        elif isinstance(node, UnaryOp):
            self._resolve(node.right)

        elif isinstance(node, Grouping):
            self._resolve(node.expression)

        elif isinstance(node, Call):
            self._resolve(node.callee)
            for argument in node.arguments:
                self._resolve(argument)

        elif isinstance(node, GetProperty):
            # Property names are looked up dynamically; only the object resolves
            self._resolve(node.object)

        elif isinstance(node, SetProperty):
            self._resolve(node.value)
            self._resolve(node.object)

        elif isinstance(node, ThisRef):
            if self.current_class == ClassType.NONE:
                self.reporter.error_at_token(node.keyword, "Can't use 'this' outside of a class.")
                return
            self._resolve_local(node, node.keyword)

        elif isinstance(node, SuperRef):
            if self.current_class == ClassType.NONE:
                self.reporter.error_at_token(node.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class != ClassType.SUBCLASS:
                self.reporter.error_at_token(
                    node.keyword, "Can't use 'super' in a class with no superclass.")
            self._resolve_local(node, node.keyword)

        elif isinstance(node, Literal):
            pass

        else:
            raise TypeError(f"Unknown AST node type: {type(node).__name__}")

    def _resolve_class(self, stmt: ClassDecl) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.reporter.error_at_token(
                    stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self._resolve(stmt.superclass)

            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            if method.name.lexeme == INITIALIZER_NAME:
                declaration = FunctionType.INITIALIZER
            else:
                declaration = FunctionType.METHOD
            self._resolve_function(method, declaration)

        self._end_scope()

        if stmt.superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def _resolve_function(self, function: FunctionDef, type: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = type

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self.resolve(function.body)
        self._end_scope()

        self.current_function = enclosing_function

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.reporter.error_at_token(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: Expr, name: Token) -> None:
        for i in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[i]:
                depth = len(self.scopes) - 1 - i
                logger.debug("resolved '%s' (line %d) at depth %d", name.lexeme, name.line, depth)
                self.interpreter.resolve(expr, depth)
                return
        # Not found: global


__all__ = [
    'Resolver',
    'FunctionType',
    'ClassType',
]
