import logging
import os

import pytest
from pydantic import ValidationError

from chaincalc import main as cli
from chaincalc.config import DEFAULT_HISTORY_FILE, Settings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("CHAINCALC_HISTORY_FILE", "CHAINCALC_LOG_LEVEL", "CHAINCALC_PROMPT"):
        monkeypatch.delenv(name, raising=False)
    # keep load_dotenv() from picking up a developer's .env
    monkeypatch.chdir(tmp_path)


def test_main_input_prints_result(capsys):
    assert cli.main(["--input", "2 + 3"]) == 0
    assert capsys.readouterr().out == "5\n"


def test_main_input_short_flag_and_float_result(capsys):
    assert cli.main(["-i", "10 / 4"]) == 0
    assert capsys.readouterr().out == "2.5\n"


def test_main_input_error_exit_code(capsys):
    assert cli.main(["-i", "5 / 0"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "Error: Evaluation error: Division by zero\n"


def test_main_input_deep_nesting_is_an_ordinary_error(capsys):
    assert cli.main(["-i", "(" * 5000 + "1" + ")" * 5000]) == 1
    assert capsys.readouterr().err == "Error: Parsing error: Expression nested too deeply\n"


def test_main_input_has_no_previous_result(capsys):
    assert cli.main(["-i", "- 2"]) == 1
    assert "No last result available" in capsys.readouterr().err


def test_main_input_debug_prints_tree(capsys):
    assert cli.main(["-i", "sqrt 16", "--debug"]) == 0
    assert capsys.readouterr().out == "Unary (sqrt)\n  Number(16.0)\n4\n"


def test_main_infinite_result(capsys):
    assert cli.main(["-i", "10 ^ 1000"]) == 0
    assert capsys.readouterr().out == "inf\n"


def test_main_starts_repl_without_input(monkeypatch):
    started = {}

    def fake_loop(self):
        started["settings"] = self.settings
        started["debug"] = self.debug

    monkeypatch.setattr(cli.REPL, "repl_loop", fake_loop)
    monkeypatch.setenv("CHAINCALC_PROMPT", "calc> ")
    assert cli.main(["--debug"]) == 0
    assert started["settings"].prompt == "calc> "
    assert started["debug"] is True


def test_main_log_level_flag_overrides_environment(monkeypatch):
    monkeypatch.setenv("CHAINCALC_LOG_LEVEL", "ERROR")
    assert cli.main(["-i", "1", "--log-level", "debug"]) == 0
    assert logging.getLogger().level == logging.DEBUG


def test_main_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        cli.main(["-i", "1", "--log-level", "chatty"])


def test_configure_logging_sets_root_level():
    cli.configure_logging("info")
    assert logging.getLogger().level == logging.INFO


def test_load_settings_defaults():
    settings = load_settings()
    assert settings.history_file == DEFAULT_HISTORY_FILE
    assert settings.log_level == "WARNING"
    assert settings.prompt == "> "


def test_load_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("CHAINCALC_HISTORY_FILE", str(tmp_path / "h.txt"))
    monkeypatch.setenv("CHAINCALC_LOG_LEVEL", "info")
    settings = load_settings()
    assert settings.history_file == str(tmp_path / "h.txt")
    assert settings.log_level == "INFO"


def test_load_settings_from_dotenv(tmp_path):
    (tmp_path / ".env").write_text("CHAINCALC_PROMPT=>>> \n")
    try:
        assert load_settings().prompt == ">>>"
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("CHAINCALC_PROMPT", None)


def test_settings_validation():
    with pytest.raises(ValidationError):
        Settings(log_level="LOUD")
    with pytest.raises(ValidationError):
        Settings(history_file="   ")
    assert Settings(history_file="~/calc_hist").history_file.endswith("calc_hist")
    assert not Settings(history_file="~/calc_hist").history_file.startswith("~")
