"""Numeric coercion between form text and canonical numbers.

Form inputs are free text so that half-typed or cleared values survive
editing. The canonical document is numeric. These two helpers are the only
place the two worlds meet.
"""

from __future__ import annotations

import math
import re

Number = int | float

# Longest numeric prefix, after leading whitespace: "12abc" reads as 12
_LEADING_NUMBER = re.compile(
    r"[+-]?(?:Infinity|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def parse_number(text: str | None) -> Number | None:
    """Parse the number at the start of form text.

    Leading whitespace is skipped and anything after the longest numeric
    prefix is ignored, so ``"12abc"`` is 12 and ``"1_000"`` is 1.

    Returns:
        The number (``int`` when integral), or None for blank text, text
        that does not start with a number, and non-finite values.
    """
    if text is None:
        return None
    match = _LEADING_NUMBER.match(text.lstrip())
    if match is None:
        return None
    value = float(match.group())
    if not math.isfinite(value):
        return None
    if value.is_integer():
        return int(value)
    return value


def numberify(text: str | None, fallback: Number) -> Number:
    """Parse form text as a number, substituting a fallback when it isn't one.

    Blank text, text that does not start with a number, and non-finite
    values (``Infinity``, ``1e999``) all yield ``fallback``. Trailing text
    after a leading number is ignored. Integral results are returned
    as ``int`` so that ``"3.0"`` and ``"3"`` encode identically.

    Args:
        text: Raw form text (may be None or empty).
        fallback: Value to use when the text is not a usable number.

    Returns:
        The parsed number or the fallback.

    Examples:
        >>> numberify("512", -1)
        512
        >>> numberify("  ", -1)
        -1
        >>> numberify("1.5", 0)
        1.5
        >>> numberify("fast", 0)
        0
        >>> numberify("12abc", -1)
        12
    """
    value = parse_number(text)
    if value is None:
        return fallback
    return value


def stringify(value: Number | None) -> str:
    """Render a canonical number as form text.

    ``None`` (an absent leaf) becomes the empty string rather than a
    fallback digit, so the form can tell "unset" apart from "explicitly 0".

    Args:
        value: Number from a policy document, or None when absent.

    Returns:
        Decimal text, without a fractional part for integral values.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
