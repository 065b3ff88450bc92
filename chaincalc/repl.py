# chaincalc/repl.py
"""Interactive read-eval-print loop, help text and result formatting."""

from __future__ import annotations

import math
from typing import Optional, Tuple

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory

from chaincalc.calculator import Calculator
from chaincalc.config import Settings
from chaincalc.errors import CalculatorError
from chaincalc.lexer import KEYWORDS

HELP_TEXT = (
    "Available commands:\n"
    "  help, h        show this help message\n"
    "  quit, q, exit  exit the program\n"
    "\n"
    "Usage:\n"
    "  <expression>   calculate the result of the expression\n"
    "\n"
    "Operators (low -> high precedence): + -, * / %, ^ log, functions and !\n"
    "Functions: sqrt sin cos tan ln floor ceil abs round (radians)\n"
    "Constants: pi e\n"
    "\n"
    "Examples:\n"
    "  2 + 3          -> 5\n"
    "  (2 + 3) * 4    -> 20\n"
    "  100 log 10     -> 2\n"
    "  5!             -> 120\n"
    "  - 2            -> previous result minus 2\n"
    "  sqrt           -> square root of the previous result\n"
)

QUIT_COMMANDS = {'quit', 'q', 'exit'}
HELP_COMMANDS = {'help', 'h'}

# Integer-valued results at or above this magnitude keep float notation.
_INT_DISPLAY_LIMIT = 1e16


def format_result(value: float) -> str:
    """Format a result for display: integers without a fractional part."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer() and abs(value) < _INT_DISPLAY_LIMIT:
        return str(int(value))
    return repr(value)


def show_help() -> str:
    return HELP_TEXT


class REPL:
    """Read-Eval-Print Loop for the calculator."""

    def __init__(self, settings: Optional[Settings] = None, calculator: Optional[Calculator] = None,
                 debug: bool = False):
        self.settings = settings if settings is not None else Settings()
        self.calculator = calculator if calculator is not None else Calculator()
        self.debug = debug

    def _process_command(self, line: str) -> Optional[str]:
        """Return the response for a session command, or None if the line is an expression.

        Raises EOFError for the quit commands so the loop can shut down.
        """
        word = line.strip().lower()
        if word in QUIT_COMMANDS:
            raise EOFError()
        if word in HELP_COMMANDS:
            return show_help()
        return None

    def evaluate_line(self, line: str) -> Tuple[bool, str]:
        """Evaluate a single line (either command or expression). Returns (ok, output)."""
        cmd_out = self._process_command(line)
        if cmd_out is not None:
            return True, cmd_out
        try:
            result, dump = self.calculator.evaluate_with_debug(line, self.debug)
        except CalculatorError as e:
            return False, f"Error: {e}"
        if dump is not None:
            return True, f"{dump}\n{format_result(result)}"
        return True, format_result(result)

    def _print(self, ok: bool, out: str) -> None:
        if ok:
            print_formatted_text(out)
        else:
            print_formatted_text(FormattedText([('ansired', out)]))

    def repl_loop(self) -> None:
        """Interactive loop with prompt_toolkit history and keyword completion."""
        session = PromptSession(history=FileHistory(self.settings.history_file))
        completer = WordCompleter(list(KEYWORDS) + sorted(HELP_COMMANDS | QUIT_COMMANDS))
        print("Interactive calculator. Type help for help. Ctrl-D or quit to exit.")
        while True:
            try:
                line = session.prompt(self.settings.prompt, completer=completer)
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print("Exiting.")
                break
            if not line.strip():
                continue
            try:
                ok, out = self.evaluate_line(line)
            except EOFError:
                print("Exiting.")
                break
            self._print(ok, out)
