import math

import pytest

from chaincalc.calculator import Calculator
from chaincalc.config import Settings
from chaincalc.repl import HELP_TEXT, REPL, format_result, show_help
from chaincalc.session import Session


@pytest.mark.parametrize("value,expected", [
    (5.0, "5"),
    (-3.0, "-3"),
    (0.0, "0"),
    (2.5, "2.5"),
    (1.7320508075688772, "1.7320508075688772"),
    (math.inf, "inf"),
    (-math.inf, "-inf"),
    (math.nan, "NaN"),
    (1e20, "1e+20"),
])
def test_format_result(value, expected):
    assert format_result(value) == expected


def test_repl_evaluates_and_chains():
    repl = REPL()
    assert repl.evaluate_line("10 - 5") == (True, "5")
    assert repl.evaluate_line("- 2") == (True, "3")
    assert repl.evaluate_line("* 2") == (True, "6")


def test_repl_errors_return_false_and_message():
    repl = REPL()
    ok, out = repl.evaluate_line("1 / 0")
    assert not ok
    assert out == "Error: Evaluation error: Division by zero"
    ok, out = repl.evaluate_line("2 *")
    assert not ok and out.startswith("Error: Parsing error:")
    ok, out = repl.evaluate_line("hello")
    assert not ok and "Unknown identifier: hello" in out


def test_repl_error_keeps_previous_answer():
    repl = REPL()
    repl.evaluate_line("9")
    repl.evaluate_line("sqrt -1")
    assert repl.evaluate_line("sqrt") == (True, "3")


@pytest.mark.parametrize("line", ["help", "h", "  HELP  "])
def test_repl_help_commands(line):
    ok, out = REPL().evaluate_line(line)
    assert ok and out == HELP_TEXT
    assert "quit" in show_help()


@pytest.mark.parametrize("line", ["quit", "q", "exit"])
def test_repl_quit_commands_raise_eof(line):
    with pytest.raises(EOFError):
        REPL().evaluate_line(line)


def test_repl_debug_prints_tree_before_result():
    repl = REPL(debug=True)
    ok, out = repl.evaluate_line("2 * 3")
    assert ok
    assert out == "Binary (*)\n  Number(2.0)\n  Number(3.0)\n6"


def test_repl_uses_given_calculator_and_settings(tmp_path):
    settings = Settings(history_file=str(tmp_path / "hist"), prompt="calc> ")
    calc = Calculator(Session(16.0))
    repl = REPL(settings=settings, calculator=calc)
    assert repl.settings.prompt == "calc> "
    assert repl.evaluate_line("sqrt") == (True, "4")
    assert calc.session.last_result == 4.0


class FakePromptSession:
    """Stands in for prompt_toolkit's PromptSession, replaying canned input."""

    def __init__(self, lines, **kwargs):
        self.lines = list(lines)
        self.prompts = []

    def prompt(self, message, **kwargs):
        self.prompts.append(message)
        if not self.lines:
            raise EOFError()
        line = self.lines.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line


def test_repl_loop_runs_until_quit(monkeypatch, tmp_path, capsys):
    fake = FakePromptSession(["2 + 2", "", KeyboardInterrupt(), "* 10", "1 / 0", "quit", "3"])
    printed = []
    monkeypatch.setattr("chaincalc.repl.PromptSession", lambda **kwargs: fake)
    monkeypatch.setattr(REPL, "_print", lambda self, ok, out: printed.append((ok, out)))

    repl = REPL(settings=Settings(history_file=str(tmp_path / "hist")))
    repl.repl_loop()

    assert printed == [
        (True, "4"),
        (True, "40"),
        (False, "Error: Evaluation error: Division by zero"),
    ]
    # '3' is never read after quit
    assert fake.lines == ["3"]
    out = capsys.readouterr().out
    assert "^C" in out
    assert "Exiting." in out


def test_repl_loop_exits_on_eof(monkeypatch, tmp_path, capsys):
    fake = FakePromptSession([])
    monkeypatch.setattr("chaincalc.repl.PromptSession", lambda **kwargs: fake)
    REPL(settings=Settings(history_file=str(tmp_path / "hist"))).repl_loop()
    assert fake.prompts == ["> "]
    assert "Exiting." in capsys.readouterr().out


def test_repl_survives_deeply_nested_input():
    repl = REPL()
    ok, out = repl.evaluate_line("abs " * 5000 + "1")
    assert not ok
    assert out == "Error: Parsing error: Expression nested too deeply"
    assert repl.evaluate_line("1 + 1") == (True, "2")
