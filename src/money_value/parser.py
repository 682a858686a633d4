"""
Default free-text parser for Money.parse().

Extracts the first amount found in the text and decides, from the shape of
the separators, which one (if any) is the decimal separator:

    "$1,234.56"   -> 1234.56      "1.234,56 €"  -> 1234.56
    "1,5"         -> 1.50         "1,234"       -> 1234.00
    "1 234,56"    -> 1234.56      "0.125"       -> 0.13
    "-$5"         -> -5.00        "(12.00)"     -> -12.00

Blank input is zero. Text with no digits at all raises InvalidAmount.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .core import Money
from .errors import InvalidAmount

logger = logging.getLogger(__name__)

# A number starting with a digit, or a bare fraction like ".50"
_AMOUNT_RE = re.compile(r"\d[\d.,]*|[.,]\d+")
# Space / apostrophe / underscore used as a thousands separator: "1 234", "1'234"
_GROUPING_RE = re.compile(r"(?<=\d)[\s'_](?=\d{3}(?!\d))")
_SEPARATORS = ".,"
# A minus sign separated from the amount only by currency symbols or spaces
_MINUS_RE = re.compile(r"-[^\w()]*$")
# Accounting negative: parentheses wrapping nothing but the amount and symbols
_WRAPPER_RE = re.compile(r"[^\d()]*")


class MoneyParser:
    """Parses amounts written with either "." or "," as decimal separator."""

    def parse(self, text: Optional[str]) -> Money:
        if text is None or not str(text).strip():
            return Money.empty()

        raw = _GROUPING_RE.sub("", str(text).strip())
        match = _AMOUNT_RE.search(raw)
        if match is None:
            raise InvalidAmount(f"No amount found in {text!r}", {"input": text})

        negative = _is_negative(raw, match)
        amount = _normalize(match.group())
        if negative:
            amount = "-" + amount

        logger.debug("Parsed %r as %s", text, amount)
        return Money(amount)


def _is_negative(raw: str, match: re.Match) -> bool:
    before, after = raw[:match.start()], raw[match.end():]
    if _MINUS_RE.search(before):
        return True
    return (
        before.startswith("(")
        and after.endswith(")")
        and _WRAPPER_RE.fullmatch(before[1:]) is not None
        and _WRAPPER_RE.fullmatch(after[:-1]) is not None
    )


def _normalize(amount: str) -> str:
    """Turn "1.234,56" / "1,234.56" / ",5" into a plain decimal literal."""
    amount = amount.rstrip(_SEPARATORS)
    if amount[0] in _SEPARATORS:
        amount = "0" + amount

    positions = [i for i, ch in enumerate(amount) if ch in _SEPARATORS]
    if not positions:
        return amount

    last = positions[-1]
    integer, fractional = amount[:last], amount[last + 1:]
    digits = _strip_separators(integer)

    if _is_decimal_separator(amount, positions, fractional, digits):
        return f"{digits}.{fractional}"
    return _strip_separators(amount)


def _is_decimal_separator(amount: str, positions: list[int], fractional: str, digits: str) -> bool:
    # Thousands groups always have exactly three digits
    if len(fractional) != 3:
        return True
    # "1.234,567": the last separator differs from the grouping one
    if len({amount[i] for i in positions}) > 1:
        return True
    # "0.125" is never a thousands group
    return len(positions) == 1 and not digits.lstrip("0")


def _strip_separators(text: str) -> str:
    return text.translate(str.maketrans("", "", _SEPARATORS))
