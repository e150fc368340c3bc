"""
Report output: plain text on the console, or a PDF built with LaTeX.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from rich.console import Console

from roundme import latex_generator
from roundme.expression import Expression
from roundme.formula_config import FormulaConfig


class OutputFormat(Enum):
    """Supported report formats"""
    TEXT = "text"
    PDF = "pdf"


class Printer:
    """Print the result of a rounding analysis."""

    def __init__(self, output_format: OutputFormat = OutputFormat.TEXT, console: Optional[Console] = None):
        self.output_format = output_format
        self.console = console or Console()

    def print(self, ast: Expression, formula_config: FormulaConfig, output_dir: Union[str, Path] = ".") -> Optional[Path]:
        """Print or generate the report. Returns the PDF path for PDF output."""
        pdf_path = None
        if self.output_format is OutputFormat.PDF:
            pdf_path = self.print_pdf(ast, formula_config, output_dir)
        else:
            self.print_text(ast)

        self.console.print(f"[yellow]{latex_generator.DISCLAIMER}[/yellow]")
        return pdf_path

    def print_text(self, ast: Expression) -> None:
        self.console.print()
        self.console.print("[bold]Report:[/bold]")
        # Formulas are printed verbatim, no markup or highlighting
        self.console.print(ast.render(), markup=False, highlight=False)

    def print_pdf(self, ast: Expression, formula_config: FormulaConfig, output_dir: Union[str, Path]) -> Path:
        rendered = latex_generator.generate(ast, formula_config)
        pdf_path = latex_generator.write(rendered, output_dir)
        self.console.print(f"[green]Report written to {pdf_path}[/green]")
        return pdf_path
