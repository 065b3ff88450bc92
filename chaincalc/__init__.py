"""Command-line calculator with last-result chaining."""

from chaincalc.calculator import Calculator, evaluate, format_ast
from chaincalc.errors import CalculatorError, ErrorKind, EvalError, LexerError, ParseError
from chaincalc.session import Session

__all__ = [
    "Calculator",
    "CalculatorError",
    "ErrorKind",
    "EvalError",
    "LexerError",
    "ParseError",
    "Session",
    "evaluate",
    "format_ast",
]

__version__ = "0.1.0"
