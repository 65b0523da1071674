"""
Lox Errors - Error codes, exceptions and the error reporter

Two tiers of errors exist:
- Static errors (tokenizer, parser, resolver) are reported through
  ErrorReporter and accumulated so one pass surfaces all of them.
- Runtime errors are raised as LoxRuntimeError and abort the current run.
"""

import logging
import sys
from typing import List, Optional, TextIO

from .lox_tokenizer import Token, TokenType


logger = logging.getLogger("lox.errors")
logger.addHandler(logging.NullHandler())


# ============================================================================
# Error Definitions
# ============================================================================

E_SCAN_ERROR = "E_SCAN_ERROR"
E_PARSE_ERROR = "E_PARSE_ERROR"
E_RESOLVE_ERROR = "E_RESOLVE_ERROR"
E_RUNTIME_ERROR = "E_RUNTIME_ERROR"
E_NAME_ERROR = "E_NAME_ERROR"
E_PROPERTY_ERROR = "E_PROPERTY_ERROR"
E_TYPE_ERROR = "E_TYPE_ERROR"
E_NOT_CALLABLE = "E_NOT_CALLABLE"
E_ARITY_MISMATCH = "E_ARITY_MISMATCH"
E_STACK_OVERFLOW = "E_STACK_OVERFLOW"

# sysexits(3) codes used by the driver
EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_SOFTWARE = 70


class LoxError(Exception):
    """Base exception for Lox runtime errors"""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class LoxParseError(LoxError):
    """Raised inside the parser to unwind to the next statement boundary"""
    def __init__(self, message: str):
        super().__init__(E_PARSE_ERROR, message)


class LoxRuntimeError(LoxError):
    """Error raised while evaluating, bound to the offending token"""
    def __init__(self, token: Token, message: str, code: str = E_RUNTIME_ERROR):
        self.token = token
        super().__init__(code, message)


# ============================================================================
# Reporter
# ============================================================================

class ErrorReporter:
    """
    Collects and prints user-visible errors.

    The reporter owns the error flags the driver turns into exit codes.
    Output goes to `stream`, or to the process stderr at write time.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.errors: List[str] = []
        self.last_runtime_error: Optional[LoxRuntimeError] = None

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def report(self, line: int, where: str, message: str) -> None:
        """Report a static error: `[line N] Error<where>: <message>`"""
        text = f"[line {line}] Error{where}: {message}"
        logger.debug("static error: %s", text)
        print(text, file=self.stream)
        self.errors.append(text)
        self.had_error = True

    def error_at_line(self, line: int, message: str) -> None:
        self.report(line, "", message)

    def error_at_token(self, token: Token, message: str) -> None:
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error: LoxRuntimeError) -> None:
        logger.debug("runtime error (%s) at line %d: %s",
                     error.code, error.token.line, error.message)
        print(f"{error.message}\n[line {error.token.line}]", file=self.stream)
        self.last_runtime_error = error
        self.had_runtime_error = True

    def reset(self) -> None:
        """Clear error flags (between REPL lines or runs)"""
        self.had_error = False
        self.had_runtime_error = False
        self.last_runtime_error = None
        self.errors.clear()

    @property
    def exit_code(self) -> int:
        if self.had_error:
            return EXIT_DATAERR
        if self.had_runtime_error:
            return EXIT_SOFTWARE
        return EXIT_OK


__all__ = [
    'LoxError',
    'LoxParseError',
    'LoxRuntimeError',
    'ErrorReporter',
    'E_SCAN_ERROR',
    'E_PARSE_ERROR',
    'E_RESOLVE_ERROR',
    'E_RUNTIME_ERROR',
    'E_NAME_ERROR',
    'E_PROPERTY_ERROR',
    'E_TYPE_ERROR',
    'E_NOT_CALLABLE',
    'E_ARITY_MISMATCH',
    'E_STACK_OVERFLOW',
    'EXIT_OK',
    'EXIT_USAGE',
    'EXIT_DATAERR',
    'EXIT_NOINPUT',
    'EXIT_SOFTWARE',
]
