"""
Rounding direction analysis.

Walks a sign-canonical expression tree from the root down and decides, for
every multiplication and division, which way it must round so the whole
formula rounds in the requested direction:

    Add   A + B      A: same,  B: same
    Sub   A - B      A: same,  B: opposite
    Mul   A * B      op: same, A: same, B: same
    Div   A / B      op: same, A: same, B: opposite
    Pow   A ** B     A >= 1 -> A: same, B: same
                     A <  1 -> A: same, B: opposite

Whether a power base is >= 1 comes from the classification cache, or else
from asking the user through an injected answerer.
"""

import logging
from typing import Callable, Optional, Tuple

from roundme.classification_cache import ClassificationCache, cache_key
from roundme.errors import PromptFailure
from roundme.expression import BinaryOp, Expression, Negative, Operator, rounding_from_bias
from roundme.formula_config import FormulaConfig

logger = logging.getLogger(__name__)

# Receives a yes/no question, returns the answer
Answerer = Callable[[str], bool]


def base_question(key: str) -> str:
    return f"Is {key} greater than or equal to 1?"


class RoundingPropagator:
    """Assigns rounding directions to an expression tree in place."""

    def __init__(self, cache: ClassificationCache, answerer: Answerer):
        self.cache = cache
        self.answerer = answerer
        self.questions_asked = 0

    def propagate(self, node: Expression, round_up: bool) -> None:
        """Assign rounding to every multiplication and division below ``node``."""
        if isinstance(node, Negative):
            # Only a canonical root can still be negative: -x rounds up when x rounds down
            self.propagate(node.operand, not round_up)
            return

        if not isinstance(node, BinaryOp):
            return

        left_up, right_up = self._child_bias(node, round_up)
        self.propagate(node.left, left_up)
        self.propagate(node.right, right_up)

    def _child_bias(self, node: BinaryOp, round_up: bool) -> Tuple[bool, bool]:
        operator = node.operator
        if operator is Operator.ADD:
            return round_up, round_up
        if operator is Operator.SUB:
            return round_up, not round_up
        if operator is Operator.MUL:
            node.rounding = rounding_from_bias(round_up)
            return round_up, round_up
        if operator is Operator.DIV:
            node.rounding = rounding_from_bias(round_up)
            return round_up, not round_up
        # Pow
        if self.classify_base(node.left):
            return round_up, round_up
        return round_up, not round_up

    def classify_base(self, base: Expression) -> bool:
        """True if ``base`` is >= 1. Asks the answerer when the cache does not know."""
        key = cache_key(base)

        known = self.cache.lookup(key)
        if known is not None:
            logger.debug(f"Power base {key} is known to be {'>= 1' if known else '< 1'}")
            return known

        is_ge_one = self._ask(base_question(key))
        self.cache.record(key, is_ge_one)
        return is_ge_one

    def classify_bases(self, expr: Expression) -> None:
        """Classify every power base in ``expr`` without assigning any rounding."""
        for node in expr.walk():
            if isinstance(node, BinaryOp) and node.operator is Operator.POW:
                self.classify_base(node.left)

    def _ask(self, question: str) -> bool:
        self.questions_asked += 1
        logger.debug(f"Asking: {question}")
        try:
            answer: Optional[bool] = self.answerer(question)
        except PromptFailure:
            raise
        except (EOFError, KeyboardInterrupt, OSError) as e:
            raise PromptFailure(f"Could not get an answer to '{question}': {e!r}") from e

        if answer is None:
            raise PromptFailure(f"No answer was given to '{question}'")
        return bool(answer)


def propagate(expr: Expression, round_up: bool, formula_config: FormulaConfig, answerer: Answerer) -> None:
    """Assign rounding to ``expr``, recording new classifications in ``formula_config``."""
    RoundingPropagator(ClassificationCache(formula_config), answerer).propagate(expr, round_up)
