"""
Keyword extraction from mark-scheme answers.

Splits a canonical answer into significant lower-cased terms: punctuation
and whitespace delimit terms, short tokens and stop-words are dropped,
remaining non-word characters are stripped, duplicates removed (first-seen
order kept for stable feedback).
"""

from __future__ import annotations

import re

DELIMITERS = re.compile(r"[,:;.\-()\[\]/\\\s]+")
NON_WORD = re.compile(r"[^\w\s]")

MIN_TOKEN_LENGTH = 3

STOP_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "are", "is", "was", "were", "has", "have", "had",
})

# Terms the Mathematics mark schemes use that name a topic rather than an answer
ABSTRACT_MATH_TERMS = frozenset({
    "differentiation", "integration", "calculus", "trigonometry",
    "algebra", "geometry", "statistics", "probability", "function",
    "equation", "graph", "plot", "sketch", "draw", "find", "calculate",
    "solve", "determine", "evaluate", "simplify", "expand", "factor",
})
MATH_EXPRESSION = re.compile(r"^[0-9x-z+\-*/^()=<>.,\s]*$|^(sin|cos|tan|log|ln|sqrt|pi|e).*$", re.IGNORECASE)


def extract_keywords(answer_text: str | None) -> list[str]:
    """Return the deduplicated significant terms of an answer."""
    if not answer_text:
        return []

    keywords: list[str] = []
    for token in DELIMITERS.split(answer_text.lower()):
        token = token.strip()
        if len(token) < MIN_TOKEN_LENGTH or token in STOP_WORDS:
            continue
        token = NON_WORD.sub("", token)
        if token and token not in keywords:
            keywords.append(token)
    return keywords


def parse_keyword_string(raw: str | None) -> list[str]:
    """Split a stored, comma separated keyword string."""
    if not raw:
        return []
    terms = []
    for part in raw.split(","):
        part = part.strip().lower()
        if part and part not in terms:
            terms.append(part)
    return terms


def filter_math_keywords(keywords: list[str], subject: str) -> list[str]:
    """Drop abstract topic words from Mathematics keyword lists; other subjects pass through."""
    if (subject or "").strip().lower() != "mathematics":
        return keywords

    kept = []
    for keyword in keywords:
        cleaned = keyword.lower().strip()
        if cleaned in ABSTRACT_MATH_TERMS:
            continue
        if MATH_EXPRESSION.match(cleaned) or len(cleaned) <= 5:
            kept.append(keyword)
    return kept
