# chaincalc/calculator.py
"""
Entry point of the calculator core: text -> tokens -> AST -> float.

The previous answer lives in a :class:`~chaincalc.session.Session` owned by the
caller, so independent sessions can coexist. The session lock is held for the
whole evaluation; a failed evaluation leaves the stored result untouched.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from chaincalc.errors import CalculatorError, ErrorKind, EvalError, ParseError
from chaincalc.evaluator import Evaluator
from chaincalc.lexer import tokenize
from chaincalc.parser import ASTNode, BinaryOp, Constant, LastResult, Number, UnaryOp, parse
from chaincalc.session import Session

logger = logging.getLogger(__name__)

TOO_DEEP_MESSAGE = "Expression nested too deeply"


def format_ast(node: ASTNode) -> str:
    """Render an AST as an indented tree, one node per line."""
    lines: List[str] = []

    def walk(n: ASTNode, depth: int) -> None:
        indent = "  " * depth
        if isinstance(n, UnaryOp):
            lines.append(f"{indent}Unary ({n.op})")
            walk(n.operand, depth + 1)
        elif isinstance(n, BinaryOp):
            lines.append(f"{indent}Binary ({n.op})")
            walk(n.left, depth + 1)
            walk(n.right, depth + 1)
        elif isinstance(n, Number):
            lines.append(f"{indent}Number({n.value!r})")
        elif isinstance(n, Constant):
            lines.append(f"{indent}Constant: {n.name}")
        elif isinstance(n, LastResult):
            lines.append(f"{indent}Last Result")
        else:
            raise TypeError(f"Unsupported AST node: {type(n).__name__}")

    walk(node, 0)
    return "\n".join(lines)


class Calculator:
    """Evaluates expressions against one session."""

    def __init__(self, session: Optional[Session] = None):
        self.session = session if session is not None else Session()

    def evaluate_with_debug(self, expression: str, debug: bool = False) -> Tuple[float, Optional[str]]:
        """Evaluate ``expression``; with ``debug`` also return the AST dump."""
        with self.session.lock:
            try:
                tokens = tokenize(expression)
                try:
                    tree = parse(tokens)
                except RecursionError:
                    raise ParseError(ErrorKind.EXPRESSION_TOO_DEEP, TOO_DEEP_MESSAGE) from None
                dump = None
                try:
                    if debug:
                        dump = format_ast(tree)
                        logger.debug("AST for %r:\n%s", expression, dump)
                    result = Evaluator(self.session).eval(tree)
                except RecursionError:
                    raise EvalError(ErrorKind.EXPRESSION_TOO_DEEP, TOO_DEEP_MESSAGE) from None
            except CalculatorError as e:
                logger.info("Failed to evaluate %r: %s (%s)", expression, e, e.kind)
                raise
            self.session.store(result)
        logger.debug("Evaluated %r -> %r", expression, result)
        return result, dump

    def evaluate(self, expression: str) -> float:
        result, _ = self.evaluate_with_debug(expression)
        return result


def evaluate(expression: str, session: Session) -> float:
    """Evaluate one expression, committing the result to ``session`` on success."""
    return Calculator(session).evaluate(expression)
