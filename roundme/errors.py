"""
Error types raised by roundme.

Every error carries a human readable message; parse errors also carry the
offending formula and the character position where parsing stopped.
"""

from typing import Optional


class RoundmeError(Exception):
    """Base class for all roundme errors."""

    def __init__(self, message: str, formula: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.formula = formula


class ParseError(RoundmeError):
    """The formula text could not be parsed."""

    def __init__(self, message: str, formula: Optional[str] = None, position: Optional[int] = None):
        super().__init__(message, formula)
        self.position = position

    def __str__(self) -> str:
        if self.formula is None:
            return self.message
        if self.position is None:
            return f"{self.message} in formula '{self.formula}'"
        marker = " " * self.position + "^"
        return f"{self.message} at position {self.position}\n  {self.formula}\n  {marker}"


class PromptFailure(RoundmeError):
    """The interactive collaborator could not obtain an answer."""


class ClassificationConflict(RoundmeError):
    """A sub-expression is classified both as >= 1 and as < 1."""

    def __init__(self, key: str):
        super().__init__(f"'{key}' is listed in both less_than_one and greater_than_one")
        self.key = key


class ConfigError(RoundmeError):
    """The formula configuration file is missing, malformed or already exists."""


class ReportError(RoundmeError):
    """The PDF report could not be produced."""
