"""
Test suite for the Lox tokenizer
"""

from lox_runtime import LoxTokenizer, TokenType


def scan(source, reporter):
    return LoxTokenizer(source, reporter).tokenize()


def types(tokens):
    return [token.type for token in tokens]


class TestTokens:
    """Test token recognition"""

    def test_punctuation_and_operators(self, reporter):
        tokens = scan("(){},.-+;*/ ! != = == < <= > >=", reporter)
        assert types(tokens) == [
            TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
            TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
            TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS,
            TokenType.SEMICOLON, TokenType.STAR, TokenType.SLASH,
            TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL,
            TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
            TokenType.EOF,
        ]
        assert not reporter.had_error

    def test_keywords_and_identifiers(self, reporter):
        tokens = scan("class fun var this super orchid _x1", reporter)
        assert types(tokens) == [
            TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.THIS,
            TokenType.SUPER, TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF,
        ]
        assert tokens[5].lexeme == "orchid"

    def test_numbers_are_floats(self, reporter):
        tokens = scan("12 3.5", reporter)
        assert tokens[0].literal == 12.0
        assert isinstance(tokens[0].literal, float)
        assert tokens[1].literal == 3.5

    def test_trailing_dot_is_not_part_of_number(self, reporter):
        tokens = scan("12.", reporter)
        assert types(tokens) == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]

    def test_string_literal(self, reporter):
        tokens = scan('"hello world"', reporter)
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].literal == "hello world"
        assert tokens[0].lexeme == '"hello world"'


class TestLines:
    """Test line tracking and comments"""

    def test_comment_skipped(self, reporter):
        tokens = scan("// nothing here\nvar", reporter)
        assert types(tokens) == [TokenType.VAR, TokenType.EOF]
        assert tokens[0].line == 2

    def test_multiline_string_advances_line(self, reporter):
        tokens = scan('"a\nb" x', reporter)
        assert tokens[0].literal == "a\nb"
        assert tokens[1].line == 2


class TestErrors:
    """Test lexical error reporting"""

    def test_unexpected_character_continues(self, reporter):
        tokens = scan("var @ x", reporter)
        assert reporter.had_error
        assert reporter.errors == ["[line 1] Error: Unexpected character."]
        assert types(tokens) == [TokenType.VAR, TokenType.IDENTIFIER, TokenType.EOF]

    def test_unterminated_string(self, reporter):
        scan('"open\n', reporter)
        assert reporter.errors == ["[line 2] Error: Unterminated string."]
