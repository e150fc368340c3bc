"""
Formula Parser

Turns formula text such as ``((a * b)**(e/f)) / (c * d)`` into an expression
tree. Supports ``+ - * / **``, parentheses, unary minus, integer literals and
alphabetic identifiers.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from roundme.errors import ParseError
from roundme.expression import BinaryOp, Expression, Identifier, Negative, Number, Operator


# Shown to the user when a formula cannot be parsed
PARSE_HINTS = [
    "Have the correct number of parenthesis",
    "Do not use number in the ID name (ex: do not name a variable a0)",
    "Use ** for power (and not ^)",
]

TOKEN_PATTERN = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<number>\d+)"
    r"|(?P<identifier>[a-z]+)"
    r"|(?P<operator>\*\*|[-+*/])"
    r"|(?P<paren>[()])"
)


@dataclass
class Token:
    kind: str
    text: str
    position: int


class FormulaParser:
    """Recursive descent parser for rounding formulas"""

    def __init__(self):
        # Binary operators handled by precedence climbing. '**' binds tighter
        # than unary minus and is parsed separately (right associative).
        self.precedence = {
            '+': 1, '-': 1,
            '*': 2, '/': 2,
        }
        self.operators = {
            '+': Operator.ADD,
            '-': Operator.SUB,
            '*': Operator.MUL,
            '/': Operator.DIV,
        }
        self._formula = ""
        self._tokens: List[Token] = []
        self._index = 0

    def parse(self, formula: str) -> Expression:
        """Parse formula text into an expression tree."""
        self._formula = normalize_formula(formula)
        self._tokens = self._tokenize(self._formula)
        self._index = 0

        if not self._tokens:
            raise ParseError("Empty formula", self._formula, 0)

        expr = self._parse_binary(1)

        token = self._peek()
        if token is not None:
            if token.text == ')':
                raise ParseError("Missing '('", self._formula, token.position)
            raise ParseError(f"Unexpected token '{token.text}'", self._formula, token.position)
        return expr

    def _tokenize(self, formula: str) -> List[Token]:
        tokens = []
        position = 0
        while position < len(formula):
            match = TOKEN_PATTERN.match(formula, position)
            if match is None:
                char = formula[position]
                if char == '^':
                    raise ParseError("Use ** for power (and not ^)", formula, position)
                raise ParseError(f"Unexpected character '{char}'", formula, position)
            kind = match.lastgroup
            if kind != 'space':
                tokens.append(Token(kind, match.group(), position))
            position = match.end()
        return tokens

    def _peek(self) -> Optional[Token]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise ParseError("Unexpected end of formula", self._formula, len(self._formula))
        self._index += 1
        return token

    def _parse_binary(self, min_precedence: int) -> Expression:
        left = self._parse_unary()
        while True:
            token = self._peek()
            if token is None or token.kind != 'operator' or token.text not in self.precedence:
                return left
            precedence = self.precedence[token.text]
            if precedence < min_precedence:
                return left
            self._advance()
            # Left associative: the right operand only takes tighter operators
            right = self._parse_binary(precedence + 1)
            left = BinaryOp(left, self.operators[token.text], right)

    def _parse_unary(self) -> Expression:
        token = self._peek()
        if token is not None and token.text == '-':
            self._advance()
            return Negative(self._parse_unary())
        return self._parse_power()

    def _parse_power(self) -> Expression:
        base = self._parse_atom()
        token = self._peek()
        if token is not None and token.text == '**':
            self._advance()
            return BinaryOp(base, Operator.POW, self._parse_unary())
        return base

    def _parse_atom(self) -> Expression:
        token = self._advance()
        if token.kind == 'number':
            return Number(int(token.text))
        if token.kind == 'identifier':
            return Identifier(token.text)
        if token.text == '(':
            expr = self._parse_binary(1)
            closing = self._peek()
            if closing is None or closing.text != ')':
                position = closing.position if closing else len(self._formula)
                raise ParseError("Missing ')'", self._formula, position)
            self._advance()
            return expr
        raise ParseError(f"Unexpected token '{token.text}'", self._formula, token.position)


def normalize_formula(formula: str) -> str:
    """Formulas are stored and parsed trimmed and lowercase."""
    return formula.strip().lower()


def parse(formula: str) -> Expression:
    return FormulaParser().parse(formula)
