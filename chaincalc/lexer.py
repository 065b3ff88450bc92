# chaincalc/lexer.py

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import List, Union

from chaincalc.errors import ErrorKind, LexerError


class TokenType:
    """Enumeration of token types."""
    NUMBER = 'NUMBER'
    OP = 'OP'
    LPAREN = 'LPAREN'
    RPAREN = 'RPAREN'
    FUNC = 'FUNC'
    CONST = 'CONST'
    EOF = 'EOF'


@dataclass(frozen=True)
class Token:
    """Represents a token with type, value, and character position."""
    type: str
    value: Union[float, str, None]
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"


FUNCTIONS = ('sqrt', 'sin', 'cos', 'tan', 'ln', 'floor', 'ceil', 'abs', 'round', 'log')
CONSTANTS = ('pi', 'e')
KEYWORDS = FUNCTIONS + CONSTANTS

_OP_CHARS = set('+-*/^%!')
_DIGITS = set(string.digits)
_LETTERS = set(string.ascii_letters)


class Lexer:
    """Tokenizer for calculator expressions.

    Produces tokens: NUMBER, OP, LPAREN, RPAREN, FUNC, CONST.
    Always tokenizes '-' as operator (no negative literal tokens) and has no
    exponent notation, so ``2e`` lexes as the number 2 followed by the constant e.
    """
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.len = len(text)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < self.len else ''

    def _advance(self) -> str:
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def _skip_whitespace(self) -> None:
        while self._peek() and self._peek().isspace():
            self._advance()

    def _read_number(self) -> Token:
        start = self.pos
        while self._peek() and (self._peek() in _DIGITS or self._peek() == '.'):
            self._advance()
        raw = self.text[start:self.pos]
        try:
            value = float(raw)
        except ValueError:
            raise LexerError(ErrorKind.INVALID_NUMBER, f"Invalid number: {raw}")
        return Token(TokenType.NUMBER, value, start)

    def _read_ident(self) -> Token:
        start = self.pos
        while self._peek() and self._peek().isalnum():
            self._advance()
        raw = self.text[start:self.pos]
        if raw in FUNCTIONS:
            return Token(TokenType.FUNC, raw, start)
        if raw in CONSTANTS:
            return Token(TokenType.CONST, raw, start)
        raise LexerError(ErrorKind.UNKNOWN_IDENTIFIER, f"Unknown identifier: {raw}")

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            self._skip_whitespace()
            ch = self._peek()
            if ch == '':
                break
            if ch in _DIGITS or ch == '.':
                tokens.append(self._read_number())
            elif ch in _LETTERS:
                tokens.append(self._read_ident())
            elif ch == '(':
                tokens.append(Token(TokenType.LPAREN, ch, self.pos))
                self._advance()
            elif ch == ')':
                tokens.append(Token(TokenType.RPAREN, ch, self.pos))
                self._advance()
            elif ch in _OP_CHARS:
                tokens.append(Token(TokenType.OP, ch, self.pos))
                self._advance()
            else:
                raise LexerError(ErrorKind.UNEXPECTED_CHARACTER,
                                 f"Unexpected character {ch!r} at pos {self.pos}")
        return tokens


def tokenize(text: str) -> List[Token]:
    """Convert an expression string into its token list."""
    return Lexer(text).tokenize()
