"""
Shared test fixtures for the roundme test suite.

Provides scripted answerers standing in for the interactive yes/no prompt,
formula config factories and temporary config files.
"""

from pathlib import Path
from typing import List

import pytest

from roundme.errors import PromptFailure
from roundme.formula_config import FormulaConfig


class ScriptedAnswerer:
    """Answers questions from a fixed script and remembers what was asked."""

    def __init__(self, answers: List[bool]):
        self.answers = list(answers)
        self.questions: List[str] = []

    def __call__(self, question: str) -> bool:
        self.questions.append(question)
        if not self.answers:
            raise PromptFailure(f"Unexpected question: {question}")
        return self.answers.pop(0)


def never_asked(question: str) -> bool:
    raise AssertionError(f"No question expected, got: {question}")


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def answerer():
    """Factory for scripted answerers: answerer(True, False, ...)."""
    def make(*answers: bool) -> ScriptedAnswerer:
        return ScriptedAnswerer(list(answers))
    return make


@pytest.fixture
def no_prompt():
    """Answerer failing the test if the analysis asks anything."""
    return never_asked


@pytest.fixture
def make_config():
    """Factory for FormulaConfig objects."""
    def make(formula: str, round_up: bool = True, less_than_one=None, greater_than_one=None) -> FormulaConfig:
        return FormulaConfig(
            formula=formula,
            round_up=round_up,
            less_than_one=less_than_one,
            greater_than_one=greater_than_one,
        )
    return make


@pytest.fixture
def config_path(tmp_path) -> Path:
    """Path of a formula config file that does not exist yet."""
    return tmp_path / "config.yaml"


@pytest.fixture
def written_config(config_path):
    """Write YAML text to the temporary config file and return its path."""
    def write(contents: str) -> Path:
        config_path.write_text(contents, encoding="utf-8")
        return config_path
    return write
