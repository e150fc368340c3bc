"""
Interactive prompts used by the CLI.

The yes/no prompt is the answerer handed to the rounding analysis when a
power base has to be classified; the formula prompt drives ``init``.
"""

from typing import Optional, TextIO, Tuple, Union

import questionary
from questionary import Style
from rich.console import Console
from rich.prompt import Confirm, InvalidResponse

from roundme.classification_cache import ClassificationCache
from roundme.errors import ParseError, PromptFailure
from roundme.expression import Expression
from roundme.formula_config import FormulaConfig
from roundme.formula_parser import PARSE_HINTS, normalize_formula, parse
from roundme.rounding_propagator import RoundingPropagator
from roundme.sign_canonicalizer import simplify

custom_style = Style([
    ('qmark', 'fg:#00d7ff bold'),
    ('question', 'bold'),
    ('answer', 'fg:#00d7ff bold'),
    ('instruction', ''),
    ('text', ''),
])


class YesNoPrompt(Confirm):
    """Confirm prompt accepting y / yes / n / no in any case, asking again on anything else."""

    validate_error_message = "[prompt.invalid]Invalid input. Please enter Y, N."

    @classmethod
    def get_input(cls, console: Console, prompt, password: bool, stream: Optional[TextIO] = None) -> str:
        value = super().get_input(console, prompt, password, stream=stream)
        # A stream returns "" at end of file where input() raises EOFError
        if stream is not None and value == "":
            raise EOFError("input stream closed")
        return value

    def process_response(self, value: str) -> bool:
        value = value.strip().lower()
        if value in ("y", "yes"):
            return True
        if value in ("n", "no"):
            return False
        raise InvalidResponse(self.validate_error_message)


def ask_yes_no(question: str, console: Optional[Console] = None, stream: Optional[TextIO] = None) -> bool:
    """Ask a yes/no question until a valid answer is given."""
    try:
        return YesNoPrompt.ask(question, console=console, stream=stream)
    except (KeyboardInterrupt, EOFError) as e:
        raise PromptFailure(f"No answer to '{question}': input closed") from e


class ConsoleAnswerer:
    """Answerer for the rounding analysis backed by the terminal."""

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None):
        self.console = console
        self.stream = stream

    def __call__(self, question: str) -> bool:
        return ask_yes_no(question, console=self.console, stream=self.stream)


def validate_formula(text: str) -> Union[bool, str]:
    """questionary validator: True, or the message explaining why the formula is rejected."""
    try:
        parse(text)
    except ParseError as e:
        return f"Can't parse the expression: {e.message}. Make sure to: " + "; ".join(PARSE_HINTS)
    return True


def ask_formula() -> Tuple[str, Expression]:
    """Ask for a formula until it parses. Returns the normalized text and its tree."""
    try:
        answer = questionary.text(
            "Formula to analyze:",
            validate=validate_formula,
            style=custom_style,
        ).ask()
    except (KeyboardInterrupt, EOFError) as e:
        raise PromptFailure("No formula given: input closed") from e

    # questionary returns None when the prompt is cancelled
    if answer is None:
        raise PromptFailure("No formula given")

    formula = normalize_formula(answer)
    return formula, parse(formula)


def ask_user_formula_config(console: Optional[Console] = None) -> FormulaConfig:
    """Build a formula config interactively, classifying every power base up front."""
    formula, ast = ask_formula()
    round_up = ask_yes_no("Should the formula round up?", console=console)

    formula_config = FormulaConfig(formula=formula, round_up=round_up)

    # Bases are classified on the canonical tree so the recorded keys are
    # exactly the ones the analysis will look up.
    propagator = RoundingPropagator(ClassificationCache(formula_config), ConsoleAnswerer(console))
    propagator.classify_bases(simplify(ast))

    return formula_config
