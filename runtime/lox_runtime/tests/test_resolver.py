"""
Test suite for the Lox resolver
Verifies recorded scope distances and static error reporting
"""

import pytest

from lox_runtime import Interpreter, LoxParser, LoxTokenizer, Resolver


def resolve(source, reporter):
    tokens = LoxTokenizer(source, reporter).tokenize()
    statements = LoxParser(tokens, reporter).parse()
    assert not reporter.had_error, reporter.errors
    interpreter = Interpreter(reporter)
    Resolver(interpreter, reporter).resolve(statements)
    return statements, interpreter


class TestDistances:
    """Test hop counts recorded in the interpreter"""

    def test_globals_are_not_recorded(self, reporter):
        statements, interpreter = resolve("var a = 1; print a;", reporter)
        assert statements[1].expression not in interpreter.locals
        assert interpreter.locals == {}

    def test_same_scope_is_distance_zero(self, reporter):
        statements, interpreter = resolve("{ var a = 1; print a; }", reporter)
        reference = statements[0].statements[1].expression
        assert interpreter.locals[reference] == 0

    def test_enclosing_block_distance(self, reporter):
        statements, interpreter = resolve("{ var a = 1; { { print a; } } }", reporter)
        reference = statements[0].statements[1].statements[0].statements[0].expression
        assert interpreter.locals[reference] == 2

    def test_parameter_inside_nested_block(self, reporter):
        statements, interpreter = resolve("fun f(p) { { return p; } }", reporter)
        reference = statements[0].body[0].statements[0].value
        assert interpreter.locals[reference] == 1

    def test_closure_captures_declaring_scope(self, reporter):
        source = """
        var a = "global";
        {
          fun show() { print a; }
          var a = "block";
        }
        """
        statements, interpreter = resolve(source, reporter)
        show = statements[1].statements[0]
        # `a` was not yet declared in the block when show() was resolved
        assert show.body[0].expression not in interpreter.locals

    def test_this_and_super_distances(self, reporter):
        source = "class A { m() {} } class B < A { m() { this; super.m(); } }"
        statements, interpreter = resolve(source, reporter)
        body = statements[1].methods[0].body
        this_ref = body[0].expression
        super_ref = body[1].expression.callee
        # method scope -> this scope -> super scope
        assert interpreter.locals[this_ref] == 1
        assert interpreter.locals[super_ref] == 2

    def test_resolution_is_stable(self, reporter):
        source = "fun outer() { var x = 1; fun inner() { return x; } return inner; }"
        statements, first = resolve(source, reporter)
        second = Interpreter(reporter)
        Resolver(second, reporter).resolve(statements)
        assert first.locals == second.locals
        assert len(first.locals) == 2


class TestStaticErrors:
    """Test scoping errors the parser cannot see"""

    @pytest.mark.parametrize("source, message", [
        ("{ var a = a; }",
         "[line 1] Error at 'a': Can't read local variable in its own initializer."),
        ("{ var a = 1; var a = 2; }",
         "[line 1] Error at 'a': Already a variable with this name in this scope."),
        ("fun f(a, a) {}",
         "[line 1] Error at 'a': Already a variable with this name in this scope."),
        ("return 1;",
         "[line 1] Error at 'return': Can't return from top-level code."),
        ("class A { init() { return 1; } }",
         "[line 1] Error at 'return': Can't return a value from an initializer."),
        ("print this;",
         "[line 1] Error at 'this': Can't use 'this' outside of a class."),
        ("fun f() { return this; }",
         "[line 1] Error at 'this': Can't use 'this' outside of a class."),
        ("super.m();",
         "[line 1] Error at 'super': Can't use 'super' outside of a class."),
        ("class A { m() { super.m(); } }",
         "[line 1] Error at 'super': Can't use 'super' in a class with no superclass."),
        ("class A < A {}",
         "[line 1] Error at 'A': A class can't inherit from itself."),
    ])
    def test_error_message(self, reporter, source, message):
        tokens = LoxTokenizer(source, reporter).tokenize()
        statements = LoxParser(tokens, reporter).parse()
        Resolver(Interpreter(reporter), reporter).resolve(statements)
        assert reporter.errors == [message]

    def test_globals_may_be_redeclared(self, reporter):
        resolve("var a = 1; var a = 2;", reporter)
        assert not reporter.had_error

    def test_bare_return_in_initializer_allowed(self, reporter):
        resolve("class A { init() { return; } }", reporter)
        assert not reporter.had_error

    def test_all_errors_reported_in_one_pass(self, reporter):
        source = "return 1;\nprint this;\n{ var b = b; }"
        tokens = LoxTokenizer(source, reporter).tokenize()
        statements = LoxParser(tokens, reporter).parse()
        Resolver(Interpreter(reporter), reporter).resolve(statements)
        assert len(reporter.errors) == 3
        assert reporter.errors[2].startswith("[line 3]")
