"""
LaTeX / PDF report generation for rounding analysis results.
"""

import logging
import subprocess
from pathlib import Path
from typing import Union

from roundme.errors import ReportError
from roundme.expression import BinaryOp, Expression, Identifier, Negative, Number, Operator, Rounding
from roundme.formula_config import FormulaConfig, to_yaml_str

logger = logging.getLogger(__name__)

DISCLAIMER = "roundme is a WIP, review manually all the results."
PROJECT_URL = "https://github.com/crytic/roundme"
REPORT_NAME = "report"
LATEXMK_HELP = "latexmk command failed. Is it installed? (https://mg.readthedocs.io/latexmk.html)"

ARROWS = {
    Rounding.UNSET: "",
    Rounding.UP: r"\uparrow",
    Rounding.DOWN: r"\downarrow",
    Rounding.UNKNOWN: r"\updownarrow",
}


def to_latex(expr: Expression) -> str:
    """LaTeX math-mode form of an annotated expression."""
    if isinstance(expr, (Number, Identifier)):
        return expr.render()
    if isinstance(expr, Negative):
        return "-" + to_latex(expr.operand)
    if not isinstance(expr, BinaryOp):
        return ""

    left = to_latex(expr.left)
    right = to_latex(expr.right)
    arrow = ARROWS[expr.rounding]

    if expr.operator is Operator.DIV:
        fraction = f"\\frac{{{left}}}{{{right}}}"
        return f"({fraction}_{{{arrow}}})" if arrow else f"({fraction})"

    if expr.operator is Operator.MUL:
        op = f"*_{{{arrow}}}" if arrow else "*"
    elif expr.operator is Operator.POW:
        op = "^"
    else:
        op = expr.operator.value
    return f"({{{left}}} {op} {{{right}}})"


def generate(expr: Expression, formula_config: FormulaConfig) -> str:
    """Build the LaTeX document for an analysis: config, annotated expression, disclaimer."""
    return f"""\\documentclass{{article}}
\\usepackage{{hyperref}}
\\title{{Round me analysis}}
\\author{{roundme}}
\\begin{{document}}
\\maketitle

\\section{{Config}}
\\begin{{verbatim}}
{to_yaml_str(formula_config)}\\end{{verbatim}}

\\section{{Rounding analysis}}
Expression: ${to_latex(expr)}$

\\section{{roundme}}
{DISCLAIMER} For more details, visit \\url{{{PROJECT_URL}}}.

\\end{{document}}
"""


def write(rendered: str, output_dir: Union[str, Path] = ".") -> Path:
    """
    Write the LaTeX source and compile it with latexmk.

    Args:
        rendered: LaTeX document produced by generate()
        output_dir: Directory receiving report.tex and report.pdf

    Returns:
        Path of the generated PDF
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    tex_path = output_dir / f"{REPORT_NAME}.tex"
    tex_path.write_text(rendered, encoding='utf-8')

    _latexmk(["-pdf", tex_path.name], output_dir)
    # Remove the intermediate files, keep the .tex and .pdf
    _latexmk(["-c"], output_dir)

    pdf_path = output_dir / f"{REPORT_NAME}.pdf"
    logger.info(f"Generated {pdf_path}")
    return pdf_path


def _latexmk(args, cwd: Path) -> None:
    try:
        result = subprocess.run(
            ["latexmk", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        raise ReportError(LATEXMK_HELP)

    if result.returncode != 0:
        logger.debug(f"latexmk output:\n{result.stdout}\n{result.stderr}")
        raise ReportError(LATEXMK_HELP)
