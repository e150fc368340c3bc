#!/usr/bin/env python3
"""
Classification Cache

Remembers whether a sub-expression is known to be >= 1 or < 1. Entries live
in the formula config's ``less_than_one`` / ``greater_than_one`` lists,
keyed by the canonical text of the sub-expression without rounding arrows,
so whatever is learned during an analysis is saved along with the config.
"""

import logging
from typing import Any, Dict, List, Optional

from roundme.errors import ClassificationConflict
from roundme.expression import Expression
from roundme.formula_config import FormulaConfig

logger = logging.getLogger(__name__)


def cache_key(expr: Expression) -> str:
    """Cache key of a sub-expression; independent of any rounding already assigned."""
    return expr.render(with_rounding=False)


class ClassificationCache:
    """Lookup and record >= 1 / < 1 classifications."""

    def __init__(self, formula_config: FormulaConfig):
        self.formula_config = formula_config
        self.cache_hits = 0
        self.cache_misses = 0

    @property
    def less_than_one(self) -> List[str]:
        return self.formula_config.less_than_one or []

    @property
    def greater_than_one(self) -> List[str]:
        return self.formula_config.greater_than_one or []

    def lookup(self, key: str) -> Optional[bool]:
        """
        Classification of ``key``.

        Returns:
            True if known >= 1, False if known < 1, None if unknown.
            A key listed on both sides is reported and treated as < 1.
        """
        is_less = key in self.less_than_one
        is_greater = key in self.greater_than_one

        if is_less and is_greater:
            logger.warning(f"{ClassificationConflict(key)}; treating it as less than one")

        if is_less:
            self.cache_hits += 1
            return False
        if is_greater:
            self.cache_hits += 1
            return True

        self.cache_misses += 1
        return None

    def record(self, key: str, is_ge_one: bool) -> None:
        """Store a new classification. Recording the opposite of a known one is an error."""
        opposite = self.less_than_one if is_ge_one else self.greater_than_one
        if key in opposite:
            raise ClassificationConflict(key)

        if is_ge_one:
            self.formula_config.add_greater_than_one(key)
        else:
            self.formula_config.add_less_than_one(key)
        logger.debug(f"Recorded '{key}' as {'>= 1' if is_ge_one else '< 1'}")

    def get_stats(self) -> Dict[str, Any]:
        return {
            'less_than_one': len(self.less_than_one),
            'greater_than_one': len(self.greater_than_one),
            'cache_hits': self.cache_hits,
            'cache_misses': self.cache_misses,
        }
