"""
Pytest configuration and fixtures for lox_runtime tests.
"""

import io
import os
import sys
from collections import namedtuple

import pytest

# Add grandparent directory to path for imports (to find lox_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lox_runtime import ErrorReporter, LoxConfig, LoxRuntime, Token, TokenType


LoxResult = namedtuple("LoxResult", ["code", "lines", "stderr"])


@pytest.fixture
def reporter():
    """ErrorReporter writing into a buffer"""
    return ErrorReporter(io.StringIO())


@pytest.fixture
def runtime():
    """Runtime with captured output streams and default settings"""
    return LoxRuntime(config=LoxConfig(), stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def run_lox():
    """
    Run a program in a fresh runtime.

    Returns LoxResult(code, printed lines, stderr text).
    """
    def _run(source, **config):
        out, err = io.StringIO(), io.StringIO()
        lox = LoxRuntime(config=LoxConfig(**config), stdout=out, stderr=err)
        code = lox.execute(source)
        return LoxResult(code, out.getvalue().splitlines(), err.getvalue())
    return _run


@pytest.fixture
def name_token():
    """Factory for identifier tokens"""
    def _token(lexeme, line=1):
        return Token(TokenType.IDENTIFIER, lexeme, None, line)
    return _token
