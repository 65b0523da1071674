"""
Lox Runtime - Source to execution

Architecture:
- Tokenizer: Tokenize Lox source into tokens
- Parser: Parse tokens into statements
- Resolver: Compute scope distances, report static errors
- Interpreter: Execute statements with environments

One LoxRuntime keeps its globals across execute() calls, which is what the
REPL relies on: a function defined on one line can be called on the next.

Exit codes follow sysexits(3): 0 ok, 65 static error, 70 runtime error.
"""

import io
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from .interpreter import Interpreter
from .lox_config import LoxConfig
from .lox_errors import ErrorReporter, LoxError, E_NAME_ERROR, EXIT_OK
from .lox_parser import LoxParser
from .lox_tokenizer import LoxTokenizer
from .resolver import Resolver


logger = logging.getLogger("lox.runtime")
logger.addHandler(logging.NullHandler())


# ============================================================================
# Runtime Interface
# ============================================================================

class LoxRuntime:
    """Main Lox runtime interface"""

    def __init__(self, config: Optional[LoxConfig] = None,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None):
        """
        Initialize Lox runtime

        Args:
            config: Runtime settings (default: read from the environment)
            stdout: Stream for `print` output (default: sys.stdout)
            stderr: Stream for error reports (default: sys.stderr)
        """
        self.config = config or LoxConfig.from_env()
        self.reporter = ErrorReporter(stderr)
        self.interpreter = Interpreter(self.reporter, stdout=stdout, config=self.config)

    def run(self, source: str) -> None:
        """
        Run one unit of source through the full pipeline.

        Error flags are left as they are so the caller decides when to reset.
        """
        tokens = LoxTokenizer(source, self.reporter).tokenize()
        statements = LoxParser(tokens, self.reporter).parse()

        # Stop if there was a syntax error
        if self.reporter.had_error:
            logger.debug("skipping resolution: syntax errors reported")
            return

        Resolver(self.interpreter, self.reporter).resolve(statements)

        # Stop if there was a resolution error
        if self.reporter.had_error:
            logger.debug("skipping execution: resolution errors reported")
            return

        self.interpreter.interpret(statements)

    def execute(self, source: str) -> int:
        """
        Execute Lox source code

        Args:
            source: Lox source code

        Returns:
            Exit code: 0 on success, 65 on a static error, 70 on a runtime error

        Example:
            >>> runtime = LoxRuntime()
            >>> runtime.execute('print 1 + 2;')
            3
            0
        """
        self.reporter.reset()
        self.run(source)
        return self.reporter.exit_code

    def execute_file(self, filepath: str) -> int:
        """
        Execute Lox source file

        Args:
            filepath: Path to .lox file

        Returns:
            Exit code as for execute()
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()
        logger.debug("running %s (%d bytes)", filepath, len(source))
        return self.execute(source)

    def repl(self, stdin: Optional[TextIO] = None) -> int:
        """
        Read-eval-print loop until end of input.

        A mistake on one line is reported and does not end the session.
        """
        stdin = stdin if stdin is not None else sys.stdin
        out = self.interpreter.stdout

        while True:
            out.write(self.config.prompt)
            out.flush()
            line = stdin.readline()
            if not line:
                break
            self.run(line)
            self.reporter.reset()

        return EXIT_OK

    def get_env(self) -> Dict[str, Any]:
        """Get global variables (including built-ins)"""
        return self.interpreter.globals.values.copy()

    def set_var(self, name: str, value: Any):
        """Define a global variable"""
        self.interpreter.globals.define(name, value)

    def get_var(self, name: str) -> Any:
        """Get a global variable"""
        if name not in self.interpreter.globals.values:
            raise LoxError(E_NAME_ERROR, f"Undefined variable '{name}'.")
        return self.interpreter.globals.values[name]


# ============================================================================
# Convenience Function
# ============================================================================

def execute_lox(source: str, config: Optional[LoxConfig] = None) -> str:
    """
    Execute Lox source code and return what it printed

    Errors are reported on sys.stderr as usual.

    Example:
        >>> execute_lox('print "hi";')
        'hi\\n'
    """
    out = io.StringIO()
    runtime = LoxRuntime(config=config, stdout=out)
    runtime.execute(source)
    return out.getvalue()


__all__ = [
    'LoxRuntime',
    'execute_lox',
]
