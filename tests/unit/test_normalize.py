"""
Unit tests for math-aware text normalization.

Run: pytest tests/unit/test_normalize.py -v
"""

import pytest

from quizengine.grading.normalize import clean_latex, flatten_exponents, normalize_math


class TestNormalizeMath:
    """Test normalize_math rewrites."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("x ** 2", "x^2"),
            ("x squared", "x^2"),
            ("y cubed", "y^3"),
            ("2 to the power of 5", "2^5"),
            ("x power of 3", "x^3"),
            ("X ^ 2", "x^2"),
            ("a / b", "a/b"),
            ("  several   spaces\there ", "several spaces here"),
        ],
    )
    def test_rewrites(self, raw, expected):
        assert normalize_math(raw) == expected

    def test_equivalent_forms_agree(self):
        forms = ["x squared", "x ** 2", "x^2", "X ^ 2"]
        assert len({normalize_math(f) for f in forms}) == 1

    def test_squared_only_as_whole_word(self):
        assert normalize_math("squaredness") == "squaredness"

    def test_empty(self):
        assert normalize_math("") == ""
        assert normalize_math(None) == ""


class TestFlattenExponents:
    """Test grouped exponent flattening."""

    def test_parenthesised_and_braced(self):
        assert flatten_exponents("x^(2)") == "x^2"
        assert flatten_exponents("x^{2} + 1") == "x^2+1"


class TestCleanLatex:
    """Test LaTeX to plain text."""

    def test_fraction(self):
        assert clean_latex(r"\frac{a}{b}") == "(a)/(b)"

    def test_sqrt_and_superscript(self):
        assert clean_latex(r"\sqrt{x} + y^{2}") == "sqrt(x) + y^2"

    def test_subscript(self):
        assert clean_latex(r"H_{2}O") == "H_2O"

    def test_command_with_argument(self):
        assert clean_latex(r"\text{mass} = 5") == "mass = 5"

    def test_bare_command(self):
        assert clean_latex(r"\pi r^{2}") == "pi r^2"

    def test_passthrough(self):
        assert clean_latex("plain text") == "plain text"
        assert clean_latex("") == ""
        assert clean_latex(None) is None
