"""
Anamnesis Text Normalizer

Folds free-text intake answers into a lowercase, accent-stripped string so
symptom keywords match regardless of case or diacritics ("Insônia" ==
"insonia").
"""
from __future__ import annotations

import re
import unicodedata
from typing import Any, Iterable, List, Mapping, Optional

# Combining Diacritical Marks block (U+0300-U+036F)
_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")


def normalize_text(value: Optional[str]) -> str:
    """Lowercase, decompose (NFD), drop combining marks, trim."""
    if not value:
        return ""
    text = unicodedata.normalize("NFD", value.lower())
    return _COMBINING_MARKS.sub("", text).strip()


def format_number(value: float) -> str:
    """Render a number the way it was typed: `15.0` -> `15`, `5.5` -> `5.5`."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def extract_response_text(responses: Any) -> str:
    """
    Flatten an intake payload into one normalized string.

    Strings are kept verbatim, numbers and booleans are stringified, lists
    are walked in order and mappings contribute their values (never their
    keys).  Anything else (None included) contributes nothing.

    The walk uses an explicit stack, so arbitrarily deep answers cannot hit
    the interpreter recursion limit.
    """
    if not responses:
        return ""

    pieces: List[str] = []
    stack: List[Iterable[Any]] = [iter((responses,))]
    while stack:
        try:
            value = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue

        if isinstance(value, str):
            pieces.append(value)
        elif isinstance(value, bool):
            pieces.append("true" if value else "false")
        elif isinstance(value, (int, float)):
            pieces.append(format_number(value))
        elif isinstance(value, Mapping):
            stack.append(iter(value.values()))
        elif isinstance(value, (list, tuple)):
            stack.append(iter(value))

    return normalize_text(" ".join(pieces))


def has_any_keyword(haystack: str, keywords: Iterable[str]) -> bool:
    """True if the normalized haystack contains any normalized keyword."""
    text = normalize_text(haystack)
    return any(normalize_text(keyword) in text for keyword in keywords)
