# chaincalc/parser.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from chaincalc.errors import ErrorKind, ParseError
from chaincalc.lexer import Token, TokenType

# --------------------------
# AST Nodes
# --------------------------

@dataclass
class ASTNode:
    """Base AST node."""
    pass

@dataclass
class Number(ASTNode):
    value: float

@dataclass
class Constant(ASTNode):
    name: str

@dataclass
class LastResult(ASTNode):
    """Placeholder for the previous answer of the session."""
    pass

@dataclass
class UnaryOp(ASTNode):
    op: str
    operand: ASTNode

@dataclass
class BinaryOp(ASTNode):
    op: str
    left: ASTNode
    right: ASTNode


class UnaryOperator:
    NEGATE = 'neg'
    FACTORIAL = '!'
    SQRT = 'sqrt'
    SIN = 'sin'
    COS = 'cos'
    TAN = 'tan'
    LN = 'ln'
    FLOOR = 'floor'
    CEIL = 'ceil'
    ABS = 'abs'
    ROUND = 'round'


class BinaryOperator:
    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    POWER = '^'
    MODULO = '%'
    LOG = 'log'


# --------------------------
# Parser (precedence climbing)
# --------------------------

class Precedence:
    LOWEST = 0
    ADDITION = 1
    MULTIPLICATION = 2
    EXPONENTIATION = 3
    UNARY = 4


# Infix operators, all left-associative.
INFIX_PRECEDENCE: Dict[str, int] = {
    BinaryOperator.ADD: Precedence.ADDITION,
    BinaryOperator.SUBTRACT: Precedence.ADDITION,
    BinaryOperator.MULTIPLY: Precedence.MULTIPLICATION,
    BinaryOperator.DIVIDE: Precedence.MULTIPLICATION,
    BinaryOperator.MODULO: Precedence.MULTIPLICATION,
    BinaryOperator.POWER: Precedence.EXPONENTIATION,
    BinaryOperator.LOG: Precedence.EXPONENTIATION,
}

# Keywords that act as prefix functions; 'log' is infix only.
PREFIX_FUNCTIONS = {
    'sqrt': UnaryOperator.SQRT,
    'sin': UnaryOperator.SIN,
    'cos': UnaryOperator.COS,
    'tan': UnaryOperator.TAN,
    'ln': UnaryOperator.LN,
    'floor': UnaryOperator.FLOOR,
    'ceil': UnaryOperator.CEIL,
    'abs': UnaryOperator.ABS,
    'round': UnaryOperator.ROUND,
}


class Parser:
    """Precedence-climbing parser producing an AST for expressions.

    Grammar extensions over plain infix arithmetic:
      - postfix '!' (factorial), repeatable: ``3!!``
      - prefix functions taking one primary: ``sqrt 16``, ``sin(pi / 2)``;
        a function at the very end of the input applies to the last result
      - infix ``log``: ``100 log 10`` is log base 10 of 100
      - an expression that starts with an infix operator uses the last
        result as its left operand: ``* 2``, ``- 3``
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        end = self.tokens[-1].pos + 1 if self.tokens else 0
        return Token(TokenType.EOF, None, end)

    def _advance(self) -> Token:
        tok = self._current()
        self.pos += 1
        return tok

    def _at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _infix_precedence(self, tok: Token) -> int:
        if tok.type == TokenType.OP or (tok.type == TokenType.FUNC and tok.value == BinaryOperator.LOG):
            return INFIX_PRECEDENCE.get(tok.value, Precedence.LOWEST)
        return Precedence.LOWEST

    def parse(self) -> ASTNode:
        if not self.tokens:
            raise ParseError(ErrorKind.EMPTY_EXPRESSION, "Empty expression")
        node = self.parse_expression(Precedence.LOWEST, allow_implicit=True)
        if not self._at_end():
            tok = self._current()
            if tok.type == TokenType.RPAREN:
                raise ParseError(ErrorKind.UNMATCHED_PARENTHESIS, f"Unmatched ')' at pos {tok.pos}")
            raise ParseError(ErrorKind.UNEXPECTED_TRAILING_TOKENS,
                             f"Unexpected token {tok.value!r} at pos {tok.pos}")
        return node

    def parse_expression(self, precedence: int = Precedence.LOWEST, allow_implicit: bool = False) -> ASTNode:
        cur = self._current()
        if allow_implicit and self._infix_precedence(cur) > Precedence.LOWEST:
            # expression starts with a binary operator: the last result is the left operand
            self._advance()
            right = self.parse_expression(Precedence.UNARY)
            left: ASTNode = BinaryOp(cur.value, LastResult(), right)
        else:
            left = self.parse_primary()

        while True:
            cur = self._current()
            if cur.type == TokenType.OP and cur.value == '!':
                self._advance()
                left = UnaryOp(UnaryOperator.FACTORIAL, left)
                continue
            op_precedence = self._infix_precedence(cur)
            if op_precedence <= precedence:
                break
            self._advance()
            right = self.parse_expression(op_precedence)
            left = BinaryOp(cur.value, left, right)
        return left

    def parse_primary(self) -> ASTNode:
        tok = self._current()
        if tok.type == TokenType.EOF:
            raise ParseError(ErrorKind.UNEXPECTED_END_OF_INPUT, "Unexpected end of input")
        if tok.type == TokenType.NUMBER:
            self._advance()
            return Number(tok.value)
        if tok.type == TokenType.CONST:
            self._advance()
            return Constant(tok.value)
        if tok.type == TokenType.FUNC and tok.value in PREFIX_FUNCTIONS:
            self._advance()
            if self._at_end():
                operand: ASTNode = LastResult()
            else:
                operand = self.parse_primary()
            return UnaryOp(PREFIX_FUNCTIONS[tok.value], operand)
        if tok.type == TokenType.OP and tok.value == '-':
            self._advance()
            return UnaryOp(UnaryOperator.NEGATE, self.parse_primary())
        if tok.type == TokenType.LPAREN:
            self._advance()
            expr = self.parse_expression(Precedence.LOWEST)
            if self._current().type != TokenType.RPAREN:
                raise ParseError(ErrorKind.UNMATCHED_PARENTHESIS,
                                 f"Expected ')' to close '(' at pos {tok.pos}")
            self._advance()
            return expr
        raise ParseError(ErrorKind.UNEXPECTED_TOKEN, f"Unexpected token {tok.value!r} at pos {tok.pos}")


def parse(tokens: List[Token]) -> ASTNode:
    """Parse a complete token list into an AST."""
    return Parser(tokens).parse()
