import pytest

from ratcalc.config import Settings
from ratcalc.expr import Number
from ratcalc.repl import REPL, show_help


@pytest.fixture
def repl(settings):
    return REPL(settings)


def test_evaluate_line_formats_results(repl):
    assert repl.evaluate_line("1/3 + 1/6") == (True, "1/2")
    assert repl.evaluate_line("x + 2 * 3") == (True, "x + 6")
    assert repl.evaluate_line("3 = 3") == (True, "true")


def test_assignment_and_variable_lookup(repl):
    ok, out = repl.evaluate_line("x = 3 + 4")
    assert ok and out == "7"
    ok, out = repl.evaluate_line("2 x")
    assert ok and out == "14"


def test_errors_return_false_and_message(repl):
    ok, out = repl.evaluate_line("1 / 0")
    assert not ok and out == "Error: Division by zero"
    ok, out = repl.evaluate_line("5 % 0")
    assert not ok and "Modulo by zero" in out
    ok, out = repl.evaluate_line("1 @ 2")
    assert not ok and "Unknown character" in out
    ok, out = repl.evaluate_line("* 2")
    assert not ok and out.startswith("Error: Unexpected token")


def test_circular_reference_is_reported(repl):
    repl.evaluate_line("a = b")
    repl.evaluate_line("b = a")
    ok, out = repl.evaluate_line("b")
    assert not ok and "Circular reference" in out


def test_structural_display(settings):
    repl = REPL(settings.model_copy(update={"display": "structural"}))
    assert repl.evaluate_line("x 3") == (True, "(Name('x') Adjacent Number(3))")


def test_help_commands(repl):
    assert "Rational calculator help" in repl._process_command(":help")
    assert "Rational calculator help" in repl._process_command("help")
    assert "floor" in repl._process_command(":help functions")
    assert "precedence" in repl._process_command("help operators")
    assert "No help available for topic" in show_help("nonexistent_topic")


def test_vars_unset_and_clear(repl):
    assert repl._process_command(":vars") == "(no variables)"
    repl.evaluate_line("x = 1/2")
    repl.evaluate_line("y = z + 1")
    assert repl._process_command(":vars") == "x = 1/2\ny = z + 1"
    assert repl._run_command("unset", ["x"]) == "Removed x"
    assert repl._run_command("unset", ["x"]) == "Not bound: x"
    assert repl._run_command("unset", []) == "Usage: :unset <name>"
    assert repl._process_command(":clear") == "Cleared 1 variables"
    assert len(repl.context) == 0


def test_unknown_and_empty_commands(repl):
    assert "Unknown command" in repl._process_command(":nope")
    assert "No command specified" in repl._process_command(":")


def test_exit_command_raises_eof(repl):
    with pytest.raises(EOFError):
        repl.evaluate_line(":exit")
    with pytest.raises(EOFError):
        repl._run_command("quit", [])


def test_expression_lines_are_not_commands(repl):
    assert repl._process_command("1 + 1") is None
    assert repl._process_command("   ") is None


def test_completer_includes_builtins_and_variables(repl):
    repl.context.set('speed', Number(3))
    words = repl._completer().words
    assert 'floor' in words and 'speed' in words


def test_repl_loop_runs_until_eof(repl, capsys):
    lines = iter(["x = 2", "", "x ^ 10", "1 / 0"])

    class FakePromptSession:
        def prompt(self, message, completer=None):
            assert message == repl.settings.prompt
            try:
                return next(lines)
            except StopIteration:
                raise EOFError

    repl._prompt_session = FakePromptSession()
    repl.repl_loop()
    out = capsys.readouterr().out.splitlines()
    assert out[1:] == ["2", "1024", "Error: Division by zero", "Exiting."]


def test_repl_loop_survives_ctrl_c(repl, capsys):
    events = iter([KeyboardInterrupt, ":exit"])

    class FakePromptSession:
        def prompt(self, message, completer=None):
            event = next(events)
            if event is KeyboardInterrupt:
                raise KeyboardInterrupt
            return event

    repl._prompt_session = FakePromptSession()
    repl.repl_loop()
    out = capsys.readouterr().out.splitlines()
    assert out[1:] == ["^C", "Exiting."]


def test_history_settings_pick_history_backend(tmp_path, monkeypatch):
    from prompt_toolkit.history import FileHistory, InMemoryHistory

    created = []
    monkeypatch.setattr("ratcalc.repl.PromptSession", lambda history: created.append(history) or history)

    REPL(Settings(use_history=False))._get_prompt_session()
    REPL(Settings(history_file=str(tmp_path / "h"), use_history=True))._get_prompt_session()
    assert isinstance(created[0], InMemoryHistory)
    assert isinstance(created[1], FileHistory)


def test_deeply_nested_line_is_reported_and_loop_continues(repl, capsys):
    lines = iter(["x = 2", " + ".join(["1"] * 1500), "(" * 600 + "1" + ")" * 600, "x"])

    class FakePromptSession:
        def prompt(self, message, completer=None):
            try:
                return next(lines)
            except StopIteration:
                raise EOFError

    repl._prompt_session = FakePromptSession()
    repl.repl_loop()
    out = capsys.readouterr().out.splitlines()
    assert out[1:] == [
        "2",
        "Error: Expression nested too deeply",
        "Error: Expression nested too deeply",
        "2",
        "Exiting.",
    ]
