"""
Expression tree for arithmetic formulas.

Nodes are plain dataclasses. The only state that changes after a tree is
built is the rounding direction of multiplication and division nodes, which
the rounding propagator writes in place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class Operator(Enum):
    """Binary operators understood by the analyzer"""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "**"

    @property
    def rounds(self) -> bool:
        """Only multiplication and division round their result."""
        return self in (Operator.MUL, Operator.DIV)


class Rounding(Enum):
    """Rounding direction of a multiplication or division"""
    UNSET = ""
    UP = "↑"
    DOWN = "↓"
    # Display only, never assigned by the propagator.
    UNKNOWN = "↕"


def rounding_from_bias(round_up: bool) -> Rounding:
    return Rounding.UP if round_up else Rounding.DOWN


class Expression:
    """Base class of all expression nodes."""

    def render(self, with_rounding: bool = True) -> str:
        """Fully parenthesized text form of the expression.

        With ``with_rounding=False`` the rounding arrows are left out; that
        form is stable across analyses and is used as the classification key.
        """
        raise NotImplementedError

    def walk(self) -> Iterator["Expression"]:
        """Yield this node and its descendants, parents before children, left to right."""
        yield self

    def __str__(self) -> str:
        return self.render()


@dataclass
class Number(Expression):
    value: int

    def render(self, with_rounding: bool = True) -> str:
        return str(self.value)


@dataclass
class Identifier(Expression):
    name: str

    def render(self, with_rounding: bool = True) -> str:
        return self.name


@dataclass
class Negative(Expression):
    operand: Expression

    def render(self, with_rounding: bool = True) -> str:
        return "-" + self.operand.render(with_rounding)

    def walk(self) -> Iterator[Expression]:
        yield self
        yield from self.operand.walk()


@dataclass
class BinaryOp(Expression):
    left: Expression
    operator: Operator
    right: Expression
    # Excluded from equality: two trees with the same shape are equal
    # whatever rounding has been assigned to them.
    rounding: Rounding = field(default=Rounding.UNSET, compare=False)

    def __post_init__(self):
        if not self.operator.rounds and self.rounding is not Rounding.UNSET:
            raise ValueError(f"Operator {self.operator.value} does not round")

    def symbol(self, with_rounding: bool = True) -> str:
        if with_rounding and self.operator.rounds:
            return self.operator.value + self.rounding.value
        return self.operator.value

    def render(self, with_rounding: bool = True) -> str:
        left = self.left.render(with_rounding)
        right = self.right.render(with_rounding)
        return f"({left} {self.symbol(with_rounding)} {right})"

    def walk(self) -> Iterator[Expression]:
        yield self
        yield from self.left.walk()
        yield from self.right.walk()


@dataclass
class Invalid(Expression):
    """Placeholder for a malformed sub-tree."""

    def render(self, with_rounding: bool = True) -> str:
        return "error"
