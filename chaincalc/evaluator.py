# chaincalc/evaluator.py

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Callable, Dict

from chaincalc.errors import ErrorKind, EvalError
from chaincalc.parser import (
    ASTNode,
    BinaryOp,
    BinaryOperator,
    Constant,
    LastResult,
    Number,
    UnaryOp,
    UnaryOperator,
)

if TYPE_CHECKING:
    from chaincalc.session import Session

# Largest value an unsigned 64-bit factorial accumulator can hold.
U64_MAX = 2 ** 64 - 1

CONSTANTS: Dict[str, float] = {
    'pi': math.pi,
    'e': math.e,
}


# --------------------------
# IEEE-754 helpers
# --------------------------
# The math module raises where IEEE-754 returns inf or NaN; the helpers below
# restore the IEEE results for the operations that are total.

def _trig(func: Callable[[float], float]) -> Callable[[float], float]:
    def apply(x: float) -> float:
        if not math.isfinite(x):
            return math.nan
        return func(x)
    return apply

def _floor(x: float) -> float:
    return float(math.floor(x)) if math.isfinite(x) else x

def _ceil(x: float) -> float:
    return float(math.ceil(x)) if math.isfinite(x) else x

def _round_half_away(x: float) -> float:
    """Round to nearest, ties away from zero (Python's round() ties to even)."""
    if not math.isfinite(x):
        return x
    ax = abs(x)
    whole = math.trunc(ax)
    if ax - whole >= 0.5:
        whole += 1
    return math.copysign(float(whole), x)

def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y.is_integer() and int(y) % 2 == 1

def _ieee_pow(x: float, y: float) -> float:
    try:
        return math.pow(x, y)
    except OverflowError:
        return -math.inf if x < 0 and _is_odd_integer(y) else math.inf
    except ValueError:
        # zero to a negative power, or a negative base with a fractional exponent
        if x == 0.0:
            return math.copysign(math.inf, x) if _is_odd_integer(y) else math.inf
        return math.nan

def _fmod(x: float, y: float) -> float:
    if math.isinf(x) or math.isnan(y):
        return math.nan
    return math.fmod(x, y)

def _factorial(x: float) -> float:
    """Product of 1..x in an unsigned 64-bit accumulator."""
    if x < 0 or not x.is_integer():
        raise EvalError(ErrorKind.INVALID_FACTORIAL_OPERAND,
                        f"Factorial of negative or non-integer number: {x!r}")
    product = 1
    for i in range(2, int(x) + 1):
        product *= i
        if product > U64_MAX:
            raise EvalError(ErrorKind.INVALID_FACTORIAL_OPERAND,
                            f"Factorial of {int(x)} does not fit in 64 bits")
    return float(product)


_TOTAL_UNARY: Dict[str, Callable[[float], float]] = {
    UnaryOperator.NEGATE: lambda x: -x,
    UnaryOperator.FLOOR: _floor,
    UnaryOperator.CEIL: _ceil,
    UnaryOperator.ABS: math.fabs,
    UnaryOperator.ROUND: _round_half_away,
    UnaryOperator.SIN: _trig(math.sin),
    UnaryOperator.COS: _trig(math.cos),
    UnaryOperator.TAN: _trig(math.tan),
}

_TOTAL_BINARY: Dict[str, Callable[[float, float], float]] = {
    BinaryOperator.ADD: lambda a, b: a + b,
    BinaryOperator.SUBTRACT: lambda a, b: a - b,
    BinaryOperator.MULTIPLY: lambda a, b: a * b,
    BinaryOperator.POWER: _ieee_pow,
}

# --------------------------
# Evaluator
# --------------------------

class Evaluator:
    """Evaluates AST nodes, reading the last result from a session."""

    def __init__(self, session: Session):
        self.session = session

    def eval(self, node: ASTNode) -> float:
        """Evaluate given AST node and return the result or raise EvalError."""
        if isinstance(node, Number):
            return node.value
        if isinstance(node, Constant):
            return CONSTANTS[node.name]
        if isinstance(node, LastResult):
            value = self.session.last_result
            if value is None:
                raise EvalError(ErrorKind.NO_LAST_RESULT, "No last result available")
            return value
        if isinstance(node, UnaryOp):
            return self._eval_unary(node.op, self.eval(node.operand))
        if isinstance(node, BinaryOp):
            left = self.eval(node.left)
            right = self.eval(node.right)
            return self._eval_binary(node.op, left, right)
        raise TypeError(f"Unsupported AST node: {type(node).__name__}")

    def _eval_unary(self, op: str, x: float) -> float:
        if op in _TOTAL_UNARY:
            return _TOTAL_UNARY[op](x)
        if op == UnaryOperator.SQRT:
            if x < 0:
                raise EvalError(ErrorKind.NEGATIVE_SQUARE_ROOT,
                                f"Square root of negative number: {x!r}")
            return math.sqrt(x)
        if op == UnaryOperator.LN:
            if x <= 0:
                raise EvalError(ErrorKind.NON_POSITIVE_LOGARITHM,
                                f"Natural logarithm of non-positive number: {x!r}")
            return math.log(x)
        if op == UnaryOperator.FACTORIAL:
            return _factorial(x)
        raise TypeError(f"Unknown unary operator: {op}")

    def _eval_binary(self, op: str, left: float, right: float) -> float:
        if op in _TOTAL_BINARY:
            return _TOTAL_BINARY[op](left, right)
        if op == BinaryOperator.DIVIDE:
            if right == 0.0:
                raise EvalError(ErrorKind.DIVISION_BY_ZERO, "Division by zero")
            return left / right
        if op == BinaryOperator.MODULO:
            if right == 0.0:
                raise EvalError(ErrorKind.MODULO_BY_ZERO, "Modulo by zero")
            return _fmod(left, right)
        if op == BinaryOperator.LOG:
            if left <= 0 or right <= 0 or right == 1.0:
                raise EvalError(ErrorKind.INVALID_LOGARITHM_ARGUMENTS,
                                f"Invalid logarithm base {right!r} or argument {left!r}")
            return math.log(left) / math.log(right)
        raise TypeError(f"Unknown binary operator: {op}")
