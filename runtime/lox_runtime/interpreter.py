"""
Lox Interpreter - Tree-walking evaluator

Executes resolved statement lists. Local variables are read at the fixed
distance the Resolver recorded for each reference node; unrecorded
references are globals, looked up by name when they execute.

Statement execution returns None on normal completion or a ReturnSignal
when a `return` ran; blocks, ifs and loops hand the signal straight up and
LoxFunction.call consumes it. Errors are LoxRuntimeError exceptions.
"""

import logging
import math
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TextIO

from .environment import Environment
from .lox_ast import (
    Assign, BinaryOp, Block, Call, ClassDecl, Expr, ExpressionStmt,
    FunctionDef, GetProperty, Grouping, If, Literal, Logical, Print,
    ReturnStmt, SetProperty, Stmt, SuperRef, ThisRef, UnaryOp, VarDecl,
    Variable, While,
)
from .lox_callable import (
    INITIALIZER_NAME, LoxCallable, LoxClass, LoxFunction, LoxInstance, NativeFunction,
)
from .lox_config import LoxConfig
from .lox_errors import (
    ErrorReporter, LoxRuntimeError,
    E_ARITY_MISMATCH, E_NOT_CALLABLE, E_PROPERTY_ERROR, E_STACK_OVERFLOW, E_TYPE_ERROR,
)
from .lox_tokenizer import Token, TokenType


logger = logging.getLogger("lox.interpreter")
logger.addHandler(logging.NullHandler())

# Python frames budgeted per Lox call when sizing the recursion limit
_PY_FRAMES_PER_CALL = 50


@dataclass
class ReturnSignal:
    """Result of a statement that executed `return`"""
    value: Any


class Interpreter:
    """Evaluate Lox statements"""

    def __init__(self, reporter: Optional[ErrorReporter] = None,
                 stdout: Optional[TextIO] = None,
                 config: Optional[LoxConfig] = None):
        self.reporter = reporter or ErrorReporter()
        self._stdout = stdout
        self.config = config or LoxConfig()

        self.globals = Environment()
        self.environment = self.globals
        # Expression node -> number of scopes between use and declaration
        self.locals: Dict[Expr, int] = {}
        self._call_depth = 0
        # Call paren where the host recursion limit was hit, if it was
        self._overflow_site: Optional[Token] = None

        self._setup_builtins()

    def _setup_builtins(self):
        """Setup built-in functions"""
        self.globals.define("clock", NativeFunction("clock", 0, time.time))

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def resolve(self, expr: Expr, depth: int) -> None:
        """Record the scope distance of a local reference (called by Resolver)"""
        self.locals[expr] = depth

    def interpret(self, statements: List[Stmt]) -> None:
        """
        Execute statements in order.

        The first runtime error is reported and ends the run.
        """
        self._ensure_recursion_limit()
        self._overflow_site = None
        try:
            for statement in statements:
                signal = self.execute(statement)
                if signal is not None:
                    raise RuntimeError("return signal escaped to top level")
        except LoxRuntimeError as error:
            self.reporter.runtime_error(error)
        except RecursionError:
            # Nested bodies can exhaust the host stack before max_call_depth is reached
            if self._overflow_site is None:
                raise
            logger.debug("host recursion limit hit (limit %d)", sys.getrecursionlimit())
            self.reporter.runtime_error(
                LoxRuntimeError(self._overflow_site, "Stack overflow.", E_STACK_OVERFLOW))

    def execute(self, stmt: Stmt) -> Optional[ReturnSignal]:
        """Execute one statement"""
        if isinstance(stmt, ExpressionStmt):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, Print):
            value = self.evaluate(stmt.expression)
            print(stringify(value), file=self.stdout)

        elif isinstance(stmt, VarDecl):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch)

        elif isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition)):
                signal = self.execute(stmt.body)
                if signal is not None:
                    return signal

        elif isinstance(stmt, FunctionDef):
            function = LoxFunction(stmt, self.environment)
            self.environment.define(stmt.name.lexeme, function)

        elif isinstance(stmt, ReturnStmt):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            return ReturnSignal(value)

        elif isinstance(stmt, ClassDecl):
            self._execute_class(stmt)

        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

        return None

    def execute_block(self, statements: List[Stmt],
                      environment: Environment) -> Optional[ReturnSignal]:
        """Execute statements under environment, restoring the previous one on exit"""
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                signal = self.execute(statement)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    def _execute_class(self, stmt: ClassDecl) -> None:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name,
                                      "Superclass must be a class.", E_TYPE_ERROR)

        # Bound before the methods exist so they can refer to the class by name
        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == INITIALIZER_NAME
            methods[method.name.lexeme] = LoxFunction(method, self.environment, is_initializer)

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)
        logger.debug("defined class %s (superclass=%s, methods=%s)",
                     klass.name, superclass.name if superclass else None, sorted(methods))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate(self, expr: Expr) -> Any:
        """Evaluate one expression"""
        if isinstance(expr, Literal):
            return expr.value

        elif isinstance(expr, Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, Variable):
            return self._look_up_variable(expr.name, expr)

        elif isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        elif isinstance(expr, UnaryOp):
            return self._eval_unary_op(expr)

        elif isinstance(expr, BinaryOp):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self._eval_binary_op(expr.operator, left, right)

        elif isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, Call):
            return self._eval_call(expr)

        elif isinstance(expr, GetProperty):
            obj = self.evaluate(expr.object)
            if isinstance(obj, LoxInstance):
                return obj.get(expr.name)
            raise LoxRuntimeError(expr.name, "Only instances have properties.", E_TYPE_ERROR)

        elif isinstance(expr, SetProperty):
            obj = self.evaluate(expr.object)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError(expr.name, "Only instances have fields.", E_TYPE_ERROR)
            value = self.evaluate(expr.value)
            obj.set(expr.name, value)
            return value

        elif isinstance(expr, ThisRef):
            return self._look_up_variable(expr.keyword, expr)

        elif isinstance(expr, SuperRef):
            return self._eval_super(expr)

        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _look_up_variable(self, name: Token, expr: Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _eval_unary_op(self, expr: UnaryOp) -> Any:
        right = self.evaluate(expr.right)

        if expr.operator.type == TokenType.BANG:
            return not is_truthy(right)
        if expr.operator.type == TokenType.MINUS:
            _check_number_operand(expr.operator, right)
            return -right

        raise TypeError(f"Unknown unary operator: {expr.operator.lexeme}")

    def _eval_binary_op(self, operator: Token, left: Any, right: Any) -> Any:
        op = operator.type

        if op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        elif op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        elif op == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.",
                                  E_TYPE_ERROR)

        _check_number_operands(operator, left, right)

        if op == TokenType.MINUS:
            return left - right
        elif op == TokenType.STAR:
            return left * right
        elif op == TokenType.SLASH:
            return _divide(left, right)
        elif op == TokenType.GREATER:
            return left > right
        elif op == TokenType.GREATER_EQUAL:
            return left >= right
        elif op == TokenType.LESS:
            return left < right
        elif op == TokenType.LESS_EQUAL:
            return left <= right

        raise TypeError(f"Unknown binary operator: {operator.lexeme}")

    def _eval_call(self, expr: Call) -> Any:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.",
                                  E_NOT_CALLABLE)

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                expr.paren,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
                E_ARITY_MISMATCH)

        if self._call_depth >= self.config.max_call_depth:
            raise LoxRuntimeError(expr.paren, "Stack overflow.", E_STACK_OVERFLOW)

        self._call_depth += 1
        try:
            return callee.call(self, arguments)
        except RecursionError:
            # Innermost call site wins; interpret() reports it once the stack has unwound
            if self._overflow_site is None:
                self._overflow_site = expr.paren
            raise
        finally:
            self._call_depth -= 1

    def _eval_super(self, expr: SuperRef) -> Any:
        distance = self.locals[expr]
        superclass: LoxClass = self.environment.get_at(distance, "super")
        # The `this` scope always sits directly inside the `super` scope
        instance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(expr.method, f"Undefined property '{expr.method.lexeme}'.",
                                  E_PROPERTY_ERROR)
        return method.bind(instance)

    def _ensure_recursion_limit(self) -> None:
        needed = self.config.max_call_depth * _PY_FRAMES_PER_CALL + 1000
        if sys.getrecursionlimit() < needed:
            logger.debug("raising recursion limit to %d", needed)
            sys.setrecursionlimit(needed)


# ============================================================================
# Value helpers
# ============================================================================

def is_truthy(value: Any) -> bool:
    """nil and false are falsy; everything else (0 and "" included) is truthy"""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Equality without coercion: values of different types are never equal"""
    if type(a) is not type(b):
        return False
    # Numbers compare like boxed Java doubles: NaN equals itself, 0 and -0 differ
    if isinstance(a, float):
        if math.isnan(a) or math.isnan(b):
            return math.isnan(a) and math.isnan(b)
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    return a == b


def stringify(value: Any) -> str:
    """Render a value the way `print` shows it"""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def _divide(left: float, right: float) -> float:
    """IEEE-754 division: x/0 is +-Infinity, 0/0 is NaN"""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _check_number_operand(operator: Token, operand: Any) -> None:
    if isinstance(operand, float):
        return
    raise LoxRuntimeError(operator, "Operand must be a number.", E_TYPE_ERROR)


def _check_number_operands(operator: Token, left: Any, right: Any) -> None:
    if isinstance(left, float) and isinstance(right, float):
        return
    raise LoxRuntimeError(operator, "Operands must be numbers.", E_TYPE_ERROR)


__all__ = [
    'Interpreter',
    'ReturnSignal',
    'is_truthy',
    'is_equal',
    'stringify',
]
