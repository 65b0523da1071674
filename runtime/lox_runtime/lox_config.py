"""
Lox runtime configuration

Settings come from the environment:
    LOX_MAX_CALL_DEPTH   nested Lox calls allowed before "Stack overflow." (1000)
    LOX_PROMPT           REPL prompt ("> ")
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_MAX_CALL_DEPTH = 1000
DEFAULT_PROMPT = "> "


@dataclass
class LoxConfig:
    """Runtime limits and REPL settings"""
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    prompt: str = DEFAULT_PROMPT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'LoxConfig':
        environ = os.environ if environ is None else environ
        max_call_depth = int(environ.get("LOX_MAX_CALL_DEPTH", str(DEFAULT_MAX_CALL_DEPTH)))
        if max_call_depth < 1:
            raise ValueError(f"LOX_MAX_CALL_DEPTH must be positive, got {max_call_depth}")
        return cls(
            max_call_depth=max_call_depth,
            prompt=environ.get("LOX_PROMPT", DEFAULT_PROMPT),
        )


__all__ = [
    'LoxConfig',
    'DEFAULT_MAX_CALL_DEPTH',
    'DEFAULT_PROMPT',
]
