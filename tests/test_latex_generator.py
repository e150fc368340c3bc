#!/usr/bin/env python3
"""
Tests for the LaTeX / PDF report.
"""

import subprocess
from unittest.mock import Mock, patch

import pytest

from roundme import latex_generator
from roundme.errors import ReportError
from roundme.expression import BinaryOp, Identifier, Negative, Operator, Rounding
from roundme.formula_config import FormulaConfig
from roundme.latex_generator import generate, to_latex, write


def op(operator, rounding=Rounding.UNSET, left="a", right="b"):
    return BinaryOp(Identifier(left), operator, Identifier(right), rounding)


class TestToLatex:
    """Math mode rendering of annotated expressions"""

    @pytest.mark.parametrize("expr,expected", [
        (Identifier("a"), "a"),
        (op(Operator.ADD), "({a} + {b})"),
        (op(Operator.SUB), "({a} - {b})"),
        (op(Operator.POW), "({a} ^ {b})"),
        (op(Operator.MUL), "({a} * {b})"),
        (op(Operator.MUL, Rounding.UP), "({a} *_{\\uparrow} {b})"),
        (op(Operator.MUL, Rounding.DOWN), "({a} *_{\\downarrow} {b})"),
        (op(Operator.MUL, Rounding.UNKNOWN), "({a} *_{\\updownarrow} {b})"),
        (op(Operator.DIV), "(\\frac{a}{b})"),
        (op(Operator.DIV, Rounding.UP), "(\\frac{a}{b}_{\\uparrow})"),
        (op(Operator.DIV, Rounding.DOWN), "(\\frac{a}{b}_{\\downarrow})"),
        (Negative(op(Operator.ADD)), "-({a} + {b})"),
    ])
    def test_nodes(self, expr, expected):
        assert to_latex(expr) == expected

    def test_nested(self):
        inner = op(Operator.MUL, Rounding.DOWN, "b", "c")
        power = BinaryOp(Identifier("a"), Operator.POW, inner)
        expr = BinaryOp(Identifier("x"), Operator.DIV, power, Rounding.UP)
        assert to_latex(expr) == "(\\frac{x}{({a} ^ {({b} *_{\\downarrow} {c})})}_{\\uparrow})"


class TestGenerate:

    def test_document(self):
        formula_config = FormulaConfig("a * b", True, greater_than_one=["a"])
        document = generate(op(Operator.MUL, Rounding.UP), formula_config)

        assert document.startswith("\\documentclass{article}")
        assert document.rstrip().endswith("\\end{document}")
        assert "\\section{Config}" in document
        assert "formula: a * b\nround_up: true\ngreater_than_one:\n- a\n" in document
        assert "Expression: $({a} *_{\\uparrow} {b})$" in document
        assert latex_generator.DISCLAIMER in document
        assert f"\\url{{{latex_generator.PROJECT_URL}}}" in document


class TestWrite:
    """latexmk invocation"""

    def test_compiles_and_cleans(self, tmp_path):
        with patch("roundme.latex_generator.subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
            pdf_path = write("\\documentclass{article}", tmp_path)

        assert pdf_path == tmp_path / "report.pdf"
        assert (tmp_path / "report.tex").read_text(encoding="utf-8") == "\\documentclass{article}"

        commands = [call.args[0] for call in mock_run.call_args_list]
        assert commands == [["latexmk", "-pdf", "report.tex"], ["latexmk", "-c"]]
        assert all(call.kwargs["cwd"] == tmp_path for call in mock_run.call_args_list)

    def test_latexmk_missing(self, tmp_path):
        with patch("roundme.latex_generator.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(ReportError) as exc_info:
                write("", tmp_path)
        assert "Is it installed?" in str(exc_info.value)

    def test_latexmk_fails(self, tmp_path):
        failed = subprocess.CompletedProcess(["latexmk"], 12, stdout="", stderr="! LaTeX Error")
        with patch("roundme.latex_generator.subprocess.run", return_value=failed) as mock_run:
            with pytest.raises(ReportError):
                write("", tmp_path)
        # Nothing to clean after a failed build
        assert mock_run.call_count == 1
