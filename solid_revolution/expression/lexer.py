"""
Tokenizer for rewritten formula text.

Input is the output of the rewrite pipeline in compiler.py: lower-case,
'^' already replaced by '**', implicit multiplication already explicit.
Recognized tokens: numbers, identifiers, + - * / ** ( ) and ','.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List

from solid_revolution.expression.errors import FormulaSyntaxError


class TokenType(Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    POWER = "**"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    """Single lexical token with its offset in the source text."""
    type: TokenType
    text: str
    position: int

    @property
    def value(self) -> float:
        """Numeric value of a NUMBER token."""
        return float(self.text)


_SINGLE_CHAR = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '/': TokenType.SLASH,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
}


class Lexer:
    """Converts formula text into a list of tokens.

    Usage:
        tokens = Lexer("2*sin(x)**2").tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _read_number(self) -> Token:
        start = self.pos
        seen_dot = False
        while self._peek().isdigit() or (self._peek() == '.' and not seen_dot):
            if self._peek() == '.':
                seen_dot = True
            self.pos += 1
        text = self.source[start:self.pos]
        if text == '.':
            raise FormulaSyntaxError("Lone decimal point", start)
        return Token(TokenType.NUMBER, text, start)

    def _read_identifier(self) -> Token:
        start = self.pos
        while self._peek().isalnum() or self._peek() == '_':
            self.pos += 1
        return Token(TokenType.IDENTIFIER, self.source[start:self.pos], start)

    def __iter__(self) -> Iterator[Token]:
        while self.pos < len(self.source):
            ch = self._peek()

            if ch.isspace():
                self.pos += 1
                continue

            if ch.isdigit() or (ch == '.' and self._peek(1).isdigit()):
                yield self._read_number()
                continue

            if ch.isalpha() or ch == '_':
                yield self._read_identifier()
                continue

            if ch == '*':
                if self._peek(1) == '*':
                    yield Token(TokenType.POWER, '**', self.pos)
                    self.pos += 2
                else:
                    yield Token(TokenType.STAR, '*', self.pos)
                    self.pos += 1
                continue

            token_type = _SINGLE_CHAR.get(ch)
            if token_type is None:
                raise FormulaSyntaxError(f"Unexpected character {ch!r}", self.pos)
            yield Token(token_type, ch, self.pos)
            self.pos += 1

        yield Token(TokenType.EOF, '', self.pos)

    def tokenize(self) -> List[Token]:
        """Tokenize the whole source, ending with an EOF token."""
        return list(self)


def tokenize(source: str) -> List[Token]:
    """Convenience wrapper around Lexer(source).tokenize()."""
    return Lexer(source).tokenize()
