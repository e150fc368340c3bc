"""
Rounding analysis of a formula config: parse, canonicalize signs, then
assign a rounding direction to every multiplication and division.
"""

import logging

from roundme.classification_cache import ClassificationCache
from roundme.expression import Expression
from roundme.formula_config import FormulaConfig
from roundme.formula_parser import parse
from roundme.rounding_propagator import Answerer, RoundingPropagator
from roundme.sign_canonicalizer import simplify

logger = logging.getLogger(__name__)


def analyze(formula_config: FormulaConfig, answerer: Answerer) -> Expression:
    """
    Analyze the formula of ``formula_config``.

    Power bases missing from the config's classification lists are asked
    through ``answerer`` and the answers are added to the config, so the
    caller can save it.

    Returns:
        The canonical expression tree annotated with rounding directions.

    Raises:
        ParseError: the formula is malformed.
        PromptFailure: an unknown power base could not be classified.
    """
    ast = parse(formula_config.formula)
    logger.info(f"parsed    : {ast}")

    simplified_ast = simplify(ast)
    logger.info(f"simplified: {simplified_ast}")

    cache = ClassificationCache(formula_config)
    propagator = RoundingPropagator(cache, answerer)
    propagator.propagate(simplified_ast, formula_config.round_up)
    logger.debug(f"Classification cache: {cache.get_stats()}")

    return simplified_ast
