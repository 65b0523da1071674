"""
Lox Runtime - Tree-walking interpreter for the Lox language

**Pipeline:**
- Tokenizer: source text to tokens
- Parser: tokens to statements (for-loops desugared to while)
- Resolver: static scope distances and scoping errors
- Interpreter: evaluation over chained environments

**Object Model:**
- Functions are closures over their defining environment
- Classes with single inheritance, `init` initializers, `this` and `super`
- Instances are open records of fields

Version: 1.0.0
"""

__version__ = '1.0.0'

# ============================================================================
# Errors
# ============================================================================

from .lox_errors import (
    LoxError, LoxParseError, LoxRuntimeError, ErrorReporter,
    E_NAME_ERROR, E_PROPERTY_ERROR, E_TYPE_ERROR, E_NOT_CALLABLE,
    E_ARITY_MISMATCH, E_STACK_OVERFLOW,
    EXIT_OK, EXIT_USAGE, EXIT_DATAERR, EXIT_NOINPUT, EXIT_SOFTWARE,
)

# ============================================================================
# Front End
# ============================================================================

from .lox_tokenizer import LoxTokenizer, Token, TokenType
from .lox_parser import LoxParser
from . import lox_ast

# ============================================================================
# Core
# ============================================================================

from .environment import Environment
from .resolver import Resolver
from .lox_callable import LoxCallable, LoxFunction, LoxClass, LoxInstance, NativeFunction
from .interpreter import Interpreter, ReturnSignal, is_truthy, is_equal, stringify

# ============================================================================
# Runtime
# ============================================================================

from .lox_config import LoxConfig
from .lox_runtime import LoxRuntime, execute_lox


__all__ = [
    # Errors
    'LoxError', 'LoxParseError', 'LoxRuntimeError', 'ErrorReporter',
    'E_NAME_ERROR', 'E_PROPERTY_ERROR', 'E_TYPE_ERROR', 'E_NOT_CALLABLE',
    'E_ARITY_MISMATCH', 'E_STACK_OVERFLOW',
    'EXIT_OK', 'EXIT_USAGE', 'EXIT_DATAERR', 'EXIT_NOINPUT', 'EXIT_SOFTWARE',

    # Front end
    'LoxTokenizer', 'Token', 'TokenType', 'LoxParser', 'lox_ast',

    # Core
    'Environment', 'Resolver',
    'LoxCallable', 'LoxFunction', 'LoxClass', 'LoxInstance', 'NativeFunction',
    'Interpreter', 'ReturnSignal', 'is_truthy', 'is_equal', 'stringify',

    # Runtime
    'LoxConfig', 'LoxRuntime', 'execute_lox',
]
