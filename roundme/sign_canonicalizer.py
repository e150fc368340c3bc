"""
Sign canonicalization.

Brings negative signs from values up to the operations, and finally out to
the expression level where possible. Additions and subtractions are
re-arranged so no operand carries a leading minus, e.g. ``(-a + b)`` becomes
``(b - a)``, and ``a ** (-e)`` becomes ``1 / (a ** e)``.

The pass never mutates its input; it always builds new nodes.
"""

import logging
from typing import Tuple

from roundme.expression import BinaryOp, Expression, Negative, Number, Operator, Rounding

logger = logging.getLogger(__name__)

# (is_negative, magnitude)
Signed = Tuple[bool, Expression]


def extract_sign(node: Expression) -> Signed:
    """Split a node into its sign and its canonical magnitude."""
    if isinstance(node, Negative):
        negative, magnitude = extract_sign(node.operand)
        return not negative, magnitude

    if isinstance(node, BinaryOp):
        simplified = simplify(node)
        if isinstance(simplified, Negative):
            return True, simplified.operand
        return False, simplified

    return False, node


def _simplify_add(left: Signed, right: Signed) -> Expression:
    (left_neg, lhs), (right_neg, rhs) = left, right
    if left_neg and right_neg:
        return Negative(BinaryOp(lhs, Operator.ADD, rhs))
    if left_neg:
        return BinaryOp(rhs, Operator.SUB, lhs)
    if right_neg:
        return BinaryOp(lhs, Operator.SUB, rhs)
    return BinaryOp(lhs, Operator.ADD, rhs)


def _simplify_sub(left: Signed, right: Signed) -> Expression:
    (left_neg, lhs), (right_neg, rhs) = left, right
    if left_neg and right_neg:
        return BinaryOp(rhs, Operator.SUB, lhs)
    if left_neg:
        return Negative(BinaryOp(lhs, Operator.ADD, rhs))
    if right_neg:
        return BinaryOp(lhs, Operator.ADD, rhs)
    return BinaryOp(lhs, Operator.SUB, rhs)


def _simplify_rounded(left: Signed, right: Signed, operator: Operator, rounding: Rounding) -> Expression:
    """Multiplication and division: the sign moves out when exactly one operand is negative."""
    (left_neg, lhs), (right_neg, rhs) = left, right
    if left_neg != right_neg:
        return Negative(BinaryOp(lhs, operator, rhs, Rounding.UNSET))
    return BinaryOp(lhs, operator, rhs, rounding)


def _simplify_pow(left: Signed, right: Signed) -> Expression:
    (left_neg, base), (right_neg, exponent) = left, right
    if left_neg:
        # TODO: fold the sign of a negative base into the result instead of dropping it
        logger.debug(f"Ignoring the negative sign of the power base {base.render(False)}")
    power = BinaryOp(base, Operator.POW, exponent)
    if right_neg:
        return BinaryOp(Number(1), Operator.DIV, power, Rounding.UNSET)
    return power


def simplify(node: Expression) -> Expression:
    """Return the sign-canonical form of ``node``."""
    if isinstance(node, Negative):
        negative, magnitude = extract_sign(node)
        return Negative(magnitude) if negative else magnitude

    if not isinstance(node, BinaryOp):
        return node

    # extract_sign canonicalizes operator children itself, so each child is
    # simplified exactly once.
    left_signed = extract_sign(node.left)
    right_signed = extract_sign(node.right)

    if node.operator is Operator.ADD:
        return _simplify_add(left_signed, right_signed)
    if node.operator is Operator.SUB:
        return _simplify_sub(left_signed, right_signed)
    if node.operator is Operator.POW:
        return _simplify_pow(left_signed, right_signed)
    return _simplify_rounded(left_signed, right_signed, node.operator, node.rounding)
