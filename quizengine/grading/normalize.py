"""
Text normalization for free-response matching.

normalize_math() is applied to both the learner's answer and every
mark-scheme keyword, so "x squared", "x ** 2" and "x^2" compare equal.
clean_latex() turns LaTeX left in authored questions into plain text.
"""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_SPACED_OPERATOR = re.compile(r"\s*([\^/])\s*")
_GROUPED_EXPONENT = re.compile(r"\^[({]([^(){}]+)[)}]")

# Longest phrase first so "to the power of" is not half-rewritten by "power of"
_PHRASE_REWRITES = (
    (re.compile(r"\bto the power of\b"), "^"),
    (re.compile(r"\bpower of\b"), "^"),
    (re.compile(r"\bsquared\b"), "^2"),
    (re.compile(r"\bcubed\b"), "^3"),
)

_LATEX_FRACTION = re.compile(r"\\frac\{([^}]+)\}\{([^}]+)\}")
_LATEX_SQRT = re.compile(r"\\sqrt\{([^}]+)\}")
_LATEX_SUPERSCRIPT = re.compile(r"\^\{([^}]+)\}")
_LATEX_SUBSCRIPT = re.compile(r"_\{([^}]+)\}")
_LATEX_COMMAND_ARG = re.compile(r"\\[a-zA-Z]+\{([^}]*)\}")
_LATEX_BARE_COMMAND = re.compile(r"\\([a-zA-Z])")


def normalize_math(text: str | None) -> str:
    """Shared transform for answers and keywords."""
    if not text:
        return ""

    normalized = _WHITESPACE.sub(" ", text).strip()
    normalized = normalized.replace("**", "^")
    normalized = _SPACED_OPERATOR.sub(r"\1", normalized)
    normalized = normalized.lower()
    for pattern, replacement in _PHRASE_REWRITES:
        normalized = pattern.sub(replacement, normalized)
    # Rewrites can leave "x ^2"
    normalized = _SPACED_OPERATOR.sub(r"\1", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def strip_spaces(text: str) -> str:
    return _WHITESPACE.sub("", text)


def flatten_exponents(text: str) -> str:
    """x^(2) and x^{2} -> x^2, with whitespace removed."""
    return _GROUPED_EXPONENT.sub(r"^\1", strip_spaces(text))


def clean_latex(text: str | None) -> str | None:
    """Replace common LaTeX constructs with plain-text equivalents."""
    if not text:
        return text

    cleaned = _LATEX_FRACTION.sub(r"(\1)/(\2)", text)
    cleaned = _LATEX_SQRT.sub(r"sqrt(\1)", cleaned)
    cleaned = _LATEX_SUPERSCRIPT.sub(r"^\1", cleaned)
    cleaned = _LATEX_SUBSCRIPT.sub(r"_\1", cleaned)
    cleaned = _LATEX_COMMAND_ARG.sub(r"\1", cleaned)
    cleaned = _LATEX_BARE_COMMAND.sub(r"\1", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()
