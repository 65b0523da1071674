"""
Test suite for the Lox runtime facade and command line
"""

import io

import pytest

from lox_runtime import (
    ErrorReporter, LoxConfig, LoxError, LoxRuntime, NativeFunction,
    EXIT_DATAERR, EXIT_NOINPUT, EXIT_OK, EXIT_SOFTWARE, EXIT_USAGE,
    execute_lox,
)
from lox_runtime.__main__ import main
from lox_runtime.lox_tokenizer import Token, TokenType


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("LOX_MAX_CALL_DEPTH", raising=False)
    monkeypatch.delenv("LOX_PROMPT", raising=False)


class TestExecute:
    """Test LoxRuntime.execute and friends"""

    def test_exit_codes(self, runtime):
        assert runtime.execute("print 1;") == EXIT_OK
        assert runtime.execute("print ;") == EXIT_DATAERR
        assert runtime.execute("print nope;") == EXIT_SOFTWARE
        assert runtime.execute("print 2;") == EXIT_OK

    def test_globals_persist_between_runs(self, runtime):
        runtime.execute("fun twice(x) { return x * 2; }")
        runtime.execute("print twice(21);")
        assert runtime.interpreter.stdout.getvalue() == "42\n"

    def test_execute_file(self, runtime, tmp_path):
        script = tmp_path / "hello.lox"
        script.write_text('var greeting = "hello";\nprint greeting;\n', encoding="utf-8")
        assert runtime.execute_file(str(script)) == EXIT_OK
        assert runtime.interpreter.stdout.getvalue() == "hello\n"

    def test_execute_lox(self):
        assert execute_lox('print "hi"; print 1 + 1;', LoxConfig()) == "hi\n2\n"


class TestVariables:
    """Test host access to globals"""

    def test_set_then_use(self, runtime):
        runtime.set_var("answer", 42.0)
        runtime.execute("print answer;")
        assert runtime.interpreter.stdout.getvalue() == "42\n"

    def test_get_var(self, runtime):
        runtime.execute('var name = "lox";')
        assert runtime.get_var("name") == "lox"

    def test_get_missing_var(self, runtime):
        with pytest.raises(LoxError) as exc_info:
            runtime.get_var("missing")
        assert exc_info.value.message == "Undefined variable 'missing'."

    def test_get_env_includes_builtins(self, runtime):
        runtime.execute("var a = 1;")
        env = runtime.get_env()
        assert env["a"] == 1.0
        assert isinstance(env["clock"], NativeFunction)

    def test_native_function_from_host(self, runtime):
        runtime.set_var("double", NativeFunction("double", 1, lambda x: x * 2))
        runtime.execute("print double(4);")
        assert runtime.interpreter.stdout.getvalue() == "8\n"


class TestRepl:
    """Test the interactive prompt"""

    def test_session(self, runtime):
        stdin = io.StringIO("var a = 1;\nprint a;\nprint b;\nprint a + 1;\n")
        assert runtime.repl(stdin) == EXIT_OK
        assert runtime.interpreter.stdout.getvalue() == "> > 1\n> > 2\n> "
        assert "Undefined variable 'b'." in runtime.reporter.stream.getvalue()

    def test_syntax_error_does_not_end_session(self, runtime):
        stdin = io.StringIO("print ;\nprint 3;\n")
        runtime.repl(stdin)
        assert runtime.interpreter.stdout.getvalue() == "> > 3\n> "
        assert "Expect expression." in runtime.reporter.stream.getvalue()
        assert not runtime.reporter.had_error

    def test_custom_prompt(self):
        out = io.StringIO()
        lox = LoxRuntime(config=LoxConfig(prompt="lox> "), stdout=out, stderr=io.StringIO())
        lox.repl(io.StringIO(""))
        assert out.getvalue() == "lox> "


class TestConfig:
    """Test environment-driven settings"""

    def test_defaults(self):
        config = LoxConfig.from_env({})
        assert config.max_call_depth == 1000
        assert config.prompt == "> "

    def test_overrides(self):
        config = LoxConfig.from_env({"LOX_MAX_CALL_DEPTH": "50", "LOX_PROMPT": ">> "})
        assert config.max_call_depth == 50
        assert config.prompt == ">> "

    @pytest.mark.parametrize("value", ["0", "-3", "deep"])
    def test_invalid_depth(self, value):
        with pytest.raises(ValueError):
            LoxConfig.from_env({"LOX_MAX_CALL_DEPTH": value})


class TestReporter:
    """Test error formatting"""

    def test_token_error(self, reporter):
        token = Token(TokenType.IDENTIFIER, "x", None, 4)
        reporter.error_at_token(token, "Something.")
        assert reporter.stream.getvalue() == "[line 4] Error at 'x': Something.\n"
        assert reporter.exit_code == EXIT_DATAERR

    def test_eof_error(self, reporter):
        reporter.error_at_token(Token(TokenType.EOF, "", None, 2), "Expect ';'.")
        assert reporter.errors == ["[line 2] Error at end: Expect ';'."]

    def test_reset(self, reporter):
        reporter.error_at_line(1, "Oops.")
        reporter.reset()
        assert reporter.exit_code == EXIT_OK
        assert reporter.errors == []

    def test_defaults_to_stderr(self, capsys):
        ErrorReporter().error_at_line(9, "Late.")
        assert capsys.readouterr().err == "[line 9] Error: Late.\n"


class TestMain:
    """Test the command line entry point"""

    def test_runs_script(self, tmp_path, capsys, clean_env):
        script = tmp_path / "ok.lox"
        script.write_text("print 1 + 2;", encoding="utf-8")
        assert main([str(script)]) == EXIT_OK
        assert capsys.readouterr().out == "3\n"

    def test_static_error(self, tmp_path, capsys, clean_env):
        script = tmp_path / "bad.lox"
        script.write_text("print 1", encoding="utf-8")
        assert main([str(script)]) == EXIT_DATAERR
        assert "Expect ';' after value." in capsys.readouterr().err

    def test_runtime_error(self, tmp_path, capsys, clean_env):
        script = tmp_path / "boom.lox"
        script.write_text("print -true;", encoding="utf-8")
        assert main([str(script)]) == EXIT_SOFTWARE
        assert capsys.readouterr().err == "Operand must be a number.\n[line 1]\n"

    def test_max_call_depth_flag(self, tmp_path, capsys, clean_env):
        script = tmp_path / "deep.lox"
        script.write_text("fun f(n) { if (n > 0) f(n - 1); } f(30);", encoding="utf-8")
        assert main(["--max-call-depth", "10", str(script)]) == EXIT_SOFTWARE
        assert "Stack overflow." in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys, clean_env):
        missing = tmp_path / "nope.lox"
        assert main([str(missing)]) == EXIT_NOINPUT
        assert "not found" in capsys.readouterr().err

    def test_too_many_arguments(self, clean_env):
        with pytest.raises(SystemExit) as exc_info:
            main(["a.lox", "b.lox"])
        assert exc_info.value.code == EXIT_USAGE

    def test_bad_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("LOX_MAX_CALL_DEPTH", "0")
        assert main(["whatever.lox"]) == EXIT_USAGE
        assert "LOX_MAX_CALL_DEPTH" in capsys.readouterr().err
