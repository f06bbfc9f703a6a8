"""
Recursive-descent parser and tree-walking evaluator for formulas.

Grammar (after the rewrite pipeline):

    expression := term (('+' | '-') term)*
    term       := unary (('*' | '/') unary)*
    unary      := '-' unary | '+' unary | power
    power      := primary ('**' unary)?
    primary    := NUMBER | IDENTIFIER | IDENTIFIER '(' args ')' | '(' expression ')'

The grammar is implemented with precedence climbing. Identifiers are
resolved against the whitelist in functions.py while parsing, so an
expression tree can only ever contain numbers, the variable x, the
whitelisted constants, arithmetic and whitelisted function calls.
Trees deeper than MAX_FORMULA_DEPTH (nested parentheses, unary signs or
long operator chains) are rejected with FormulaSyntaxError, so neither
parsing nor evaluation can exhaust the interpreter stack.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from solid_revolution.config import MAX_FORMULA_DEPTH
from solid_revolution.expression.errors import (
    ArityError,
    FormulaSyntaxError,
    UnknownIdentifierError,
)
from solid_revolution.expression.functions import CONSTANTS, FUNCTIONS, VARIABLE
from solid_revolution.expression.lexer import Token, TokenType, tokenize


# =========================================================================
# Expression tree
# =========================================================================

class Node:
    """Base class of expression tree nodes."""

    depth = 1

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError


@dataclass(frozen=True)
class Number(Node):
    value: float

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        return np.float64(self.value)


@dataclass(frozen=True)
class Variable(Node):
    name: str = VARIABLE

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        return x


@dataclass(frozen=True)
class Constant(Node):
    name: str

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        return np.float64(CONSTANTS[self.name])


@dataclass(frozen=True)
class UnaryOp(Node):
    operator: TokenType
    operand: Node

    def __post_init__(self):
        object.__setattr__(self, "depth", self.operand.depth + 1)

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        value = self.operand.evaluate(x)
        if self.operator is TokenType.MINUS:
            return np.negative(value)
        return value


_BINARY_UFUNCS = {
    TokenType.PLUS: np.add,
    TokenType.MINUS: np.subtract,
    TokenType.STAR: np.multiply,
    TokenType.SLASH: np.true_divide,
    TokenType.POWER: np.power,
}


@dataclass(frozen=True)
class BinaryOp(Node):
    operator: TokenType
    left: Node
    right: Node

    def __post_init__(self):
        object.__setattr__(self, "depth", max(self.left.depth, self.right.depth) + 1)

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        ufunc = _BINARY_UFUNCS[self.operator]
        return ufunc(self.left.evaluate(x), self.right.evaluate(x))


@dataclass(frozen=True)
class Call(Node):
    name: str
    arguments: Tuple[Node, ...]

    def __post_init__(self):
        object.__setattr__(self, "depth", max((a.depth for a in self.arguments), default=0) + 1)

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        impl = FUNCTIONS[self.name].impl
        return impl(*(arg.evaluate(x) for arg in self.arguments))


# =========================================================================
# Parser
# =========================================================================

class Parser:
    """Precedence-climbing parser over a token list.

    Usage:
        tree = Parser(tokenize("2*sin(x)")).parse()
        tree.evaluate(np.linspace(0, 1, 5))
    """

    PRECEDENCE: Dict[TokenType, int] = {
        TokenType.PLUS: 1,
        TokenType.MINUS: 1,
        TokenType.STAR: 2,
        TokenType.SLASH: 2,
        TokenType.POWER: 4,
    }
    RIGHT_ASSOCIATIVE = {TokenType.POWER}

    # Binds tighter than * and /, looser than **: -x**2 == -(x**2)
    UNARY_PRECEDENCE = 3

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.nesting = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type is token_type

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type is not TokenType.EOF:
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        if self._check(token_type):
            return self._advance()
        token = self._current()
        found = token.text or "end of formula"
        raise FormulaSyntaxError(f"Expected {expected}, found {found!r}", token.position)

    def parse(self) -> Node:
        """Parse the whole token stream into a single expression tree."""
        tree = self._parse_binary_expr(0)
        if not self._check(TokenType.EOF):
            token = self._current()
            raise FormulaSyntaxError(f"Unexpected {token.text!r}", token.position)
        return tree

    def _check_depth(self, depth: int) -> None:
        if depth > MAX_FORMULA_DEPTH:
            raise FormulaSyntaxError(
                f"Formula nested deeper than {MAX_FORMULA_DEPTH} levels",
                self._current().position,
            )

    def _parse_binary_expr(self, min_precedence: int) -> Node:
        self.nesting += 1
        try:
            self._check_depth(self.nesting)
            return self._parse_binary_chain(min_precedence)
        finally:
            self.nesting -= 1

    def _parse_binary_chain(self, min_precedence: int) -> Node:
        left = self._parse_unary_expr()

        while True:
            op_token = self._current()
            precedence = self.PRECEDENCE.get(op_token.type)
            if precedence is None or precedence < min_precedence:
                break

            self._advance()
            if op_token.type in self.RIGHT_ASSOCIATIVE:
                right = self._parse_binary_expr(precedence)
            else:
                right = self._parse_binary_expr(precedence + 1)
            left = BinaryOp(op_token.type, left, right)
            self._check_depth(left.depth)

        return left

    def _parse_unary_expr(self) -> Node:
        if self._check(TokenType.MINUS) or self._check(TokenType.PLUS):
            op = self._advance()
            operand = self._parse_binary_expr(self.UNARY_PRECEDENCE)
            node = UnaryOp(op.type, operand)
            self._check_depth(node.depth)
            return node
        return self._parse_primary_expr()

    def _parse_primary_expr(self) -> Node:
        token = self._current()

        if token.type is TokenType.NUMBER:
            self._advance()
            return Number(token.value)

        if token.type is TokenType.IDENTIFIER:
            self._advance()
            if self._check(TokenType.LPAREN):
                return self._parse_call(token)
            return self._resolve_name(token)

        if token.type is TokenType.LPAREN:
            self._advance()
            inner = self._parse_binary_expr(0)
            self._consume(TokenType.RPAREN, "')'")
            return inner

        found = token.text or "end of formula"
        raise FormulaSyntaxError(f"Expected a value, found {found!r}", token.position)

    def _resolve_name(self, token: Token) -> Node:
        name = token.text
        if name == VARIABLE:
            return Variable()
        if name in CONSTANTS:
            return Constant(name)
        if name in FUNCTIONS:
            raise FormulaSyntaxError(f"Function {name!r} used without arguments", token.position)
        raise UnknownIdentifierError(name, token.position)

    def _parse_call(self, name_token: Token) -> Call:
        name = name_token.text
        func = FUNCTIONS.get(name)
        if func is None:
            raise UnknownIdentifierError(name, name_token.position)

        self._consume(TokenType.LPAREN, "'('")
        arguments: List[Node] = []
        if not self._check(TokenType.RPAREN):
            arguments.append(self._parse_binary_expr(0))
            while self._check(TokenType.COMMA):
                self._advance()
                arguments.append(self._parse_binary_expr(0))
        self._consume(TokenType.RPAREN, "')'")

        if len(arguments) != func.arity:
            raise ArityError(name, func.arity, len(arguments))
        node = Call(name, tuple(arguments))
        self._check_depth(node.depth)
        return node


def parse(source: str) -> Node:
    """Tokenize and parse rewritten formula text."""
    return Parser(tokenize(source)).parse()
