"""Cell input parsing.

Converts the text a user typed into a cell into the value stored on the row.
This is the only place raw text is validated: anything that cannot be parsed
raises ``CellInputError`` and no command is built from it.
"""

from __future__ import annotations

import re

from schemas.commands import CellValue

_NUMBER_RE = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")

NUMERIC_FIELDS = {"amount"}
PERCENT_FIELDS = {"pay_percent", "paid_percent"}
TEXT_FIELDS = {"name", "usually_due"}


class CellInputError(ValueError):
    """Raised when cell text cannot be converted for its field."""


def parse_currency(text: str) -> float:
    """Parse a currency cell such as ``"$1,234.50"``; empty text is zero."""
    s = text.strip().replace(",", "").replace(" ", "")
    if not s:
        return 0.0
    neg = s.startswith("-")
    if neg:
        s = s[1:]
    if s.startswith("$"):
        s = s[1:]
    if not _NUMBER_RE.match(s):
        raise CellInputError(f"Not a currency amount: {text!r}")
    value = float(s)
    return -value if neg else value


def parse_percent(text: str) -> float:
    """Parse a percentage cell into a fraction in ``[0, 1]``.

    ``"50%"`` and ``"50"`` both mean one half: a whole number above 1 without
    ``%`` is read as a percentage. Any other number without ``%`` is read as a
    fraction, so ``"0.5"`` is one half and ``"1.5"`` is rejected as out of
    range.

    Raises:
        CellInputError: The text is not a number or falls outside ``[0, 1]``.
    """
    s = text.strip().replace(" ", "")
    if not s:
        return 0.0
    whole = s.endswith("%")
    if whole:
        s = s[:-1]
    if not _NUMBER_RE.match(s):
        raise CellInputError(f"Not a percentage: {text!r}")
    value = float(s)
    if whole or (s.isdigit() and value > 1):
        value = value / 100
    if not 0.0 <= value <= 1.0:
        raise CellInputError(f"Percentage out of range: {text!r}")
    return value


def parse_cell(field: str, text: str) -> CellValue:
    """Parse ``text`` for the given row field."""
    if field in NUMERIC_FIELDS:
        return parse_currency(text)
    if field in PERCENT_FIELDS:
        return parse_percent(text)
    if field in TEXT_FIELDS:
        return text
    raise CellInputError(f"Unknown field: {field!r}")


__all__ = [
    "CellInputError",
    "parse_cell",
    "parse_currency",
    "parse_percent",
]
