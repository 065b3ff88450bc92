# chaincalc/errors.py
"""Exception hierarchy shared by the lexer, parser and evaluator.

Every error carries a ``kind`` from :class:`ErrorKind` so callers can branch on
the category without matching message text.
"""

from __future__ import annotations


class ErrorKind:
    """Enumeration of error kinds."""
    # lexical
    UNEXPECTED_CHARACTER = 'UnexpectedCharacter'
    INVALID_NUMBER = 'InvalidNumber'
    UNKNOWN_IDENTIFIER = 'UnknownIdentifier'
    # syntactic
    EMPTY_EXPRESSION = 'EmptyExpression'
    UNEXPECTED_TOKEN = 'UnexpectedToken'
    UNEXPECTED_END_OF_INPUT = 'UnexpectedEndOfInput'
    UNMATCHED_PARENTHESIS = 'UnmatchedParenthesis'
    UNEXPECTED_TRAILING_TOKENS = 'UnexpectedTrailingTokens'
    # domain
    NEGATIVE_SQUARE_ROOT = 'NegativeSquareRoot'
    NON_POSITIVE_LOGARITHM = 'NonPositiveLogarithm'
    INVALID_FACTORIAL_OPERAND = 'InvalidFactorialOperand'
    DIVISION_BY_ZERO = 'DivisionByZero'
    MODULO_BY_ZERO = 'ModuloByZero'
    INVALID_LOGARITHM_ARGUMENTS = 'InvalidLogarithmArguments'
    NO_LAST_RESULT = 'NoLastResult'
    # limits
    EXPRESSION_TOO_DEEP = 'ExpressionTooDeep'


class CalculatorError(Exception):
    """Base class for calculator errors."""
    stage = 'Calculator'

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.stage} error: {self.message}"


class LexerError(CalculatorError):
    """Raised for errors during tokenization."""
    stage = 'Lexing'


class ParseError(CalculatorError):
    """Raised for parsing errors with optional position information."""
    stage = 'Parsing'


class EvalError(CalculatorError):
    """Raised for domain errors during evaluation."""
    stage = 'Evaluation'
