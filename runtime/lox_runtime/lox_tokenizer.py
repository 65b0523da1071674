"""
Lox Tokenizer - Source text to token stream

Scans Lox source into Token records carrying the lexeme, the literal value
(for strings and numbers) and the source line used in error messages.

Lexical errors are reported through the reporter passed in and scanning
continues, so one pass surfaces every bad character.
"""

import logging
from typing import Any, Dict, List
from dataclasses import dataclass


logger = logging.getLogger("lox.tokenizer")
logger.addHandler(logging.NullHandler())


# ============================================================================
# Token Types
# ============================================================================

class TokenType:
    """Token type constants"""
    # Single-character tokens
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"

    # One or two character tokens
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    AND = "AND"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    # Special
    EOF = "EOF"


KEYWORDS: Dict[str, str] = {
    'and': TokenType.AND,
    'class': TokenType.CLASS,
    'else': TokenType.ELSE,
    'false': TokenType.FALSE,
    'for': TokenType.FOR,
    'fun': TokenType.FUN,
    'if': TokenType.IF,
    'nil': TokenType.NIL,
    'or': TokenType.OR,
    'print': TokenType.PRINT,
    'return': TokenType.RETURN,
    'super': TokenType.SUPER,
    'this': TokenType.THIS,
    'true': TokenType.TRUE,
    'var': TokenType.VAR,
    'while': TokenType.WHILE,
}

SINGLE_CHAR_TOKENS: Dict[str, str] = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# char -> (type when followed by '=', type otherwise)
ONE_OR_TWO_CHAR_TOKENS: Dict[str, tuple] = {
    '!': (TokenType.BANG_EQUAL, TokenType.BANG),
    '=': (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    '<': (TokenType.LESS_EQUAL, TokenType.LESS),
    '>': (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


@dataclass
class Token:
    """Token from Lox source"""
    type: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return f"{self.type} {self.lexeme} {self.literal}"


# ============================================================================
# Tokenizer
# ============================================================================

class LoxTokenizer:
    """Tokenize Lox source code"""

    def __init__(self, source: str, reporter):
        self.source = source
        self.reporter = reporter
        self.tokens: List[Token] = []
        self.start = 0
        self.pos = 0
        self.line = 1

    def tokenize(self) -> List[Token]:
        """Tokenize entire source, always ending with an EOF token"""
        while not self._is_at_end():
            self.start = self.pos
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        logger.debug("scanned %d tokens over %d lines", len(self.tokens), self.line)
        return self.tokens

    def _scan_token(self):
        ch = self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[ch])
        elif ch in ONE_OR_TWO_CHAR_TOKENS:
            with_equal, alone = ONE_OR_TWO_CHAR_TOKENS[ch]
            self._add_token(with_equal if self._match('=') else alone)
        elif ch == '/':
            if self._match('/'):
                # Comment runs to end of line
                while self._peek() != '\n' and not self._is_at_end():
                    self.pos += 1
            else:
                self._add_token(TokenType.SLASH)
        elif ch in ' \r\t':
            pass
        elif ch == '\n':
            self.line += 1
        elif ch == '"':
            self._read_string()
        elif _is_digit(ch):
            self._read_number()
        elif ch.isalpha() or ch == '_':
            self._read_identifier()
        else:
            self.reporter.error_at_line(self.line, "Unexpected character.")

    def _read_string(self):
        """Read string literal (may span lines, no escape sequences)"""
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == '\n':
                self.line += 1
            self.pos += 1

        if self._is_at_end():
            self.reporter.error_at_line(self.line, "Unterminated string.")
            return

        self.pos += 1  # Closing quote
        self._add_token(TokenType.STRING, self.source[self.start + 1:self.pos - 1])

    def _read_number(self):
        """Read numeric literal; every Lox number is a double"""
        while _is_digit(self._peek()):
            self.pos += 1

        # A trailing '.' without digits is left for the DOT token
        if self._peek() == '.' and _is_digit(self._peek_next()):
            self.pos += 1
            while _is_digit(self._peek()):
                self.pos += 1

        self._add_token(TokenType.NUMBER, float(self.source[self.start:self.pos]))

    def _read_identifier(self):
        """Read identifier or keyword"""
        while self._peek().isalnum() or self._peek() == '_':
            self.pos += 1

        text = self.source[self.start:self.pos]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    # Scanner utilities
    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return '\0'
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return '\0'
        return self.source[self.pos + 1]

    def _add_token(self, type: str, literal: Any = None):
        """Add token to list"""
        text = self.source[self.start:self.pos]
        self.tokens.append(Token(type=type, lexeme=text, literal=literal, line=self.line))


__all__ = [
    'LoxTokenizer',
    'Token',
    'TokenType',
    'KEYWORDS',
]
