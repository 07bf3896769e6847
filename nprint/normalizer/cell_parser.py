# -*- coding: utf-8 -*-
"""
Cell Parser - tolerant string to number conversion for spreadsheet cells.

Reference tables arrive as rows of strings exported from spreadsheets. Cells
may be blank, carry non-breaking spaces as thousands separators, use a
decimal comma (``"0,2"``) or trail a unit (``"12 kg"``). ``parse_number``
maps every such cell to a finite float and never raises.

Example:
    >>> parse_number("0,2")
    0.2
    >>> parse_number(" 1\\u00a0234,5 ")
    1234.5
    >>> parse_number(None)
    0.0
"""

from __future__ import annotations

import math
import re
from typing import Any

__all__ = ["parse_number", "cell_text"]

NBSP = "\u00a0"

# Leading floating-point literal; anything after it is ignored.
_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def cell_text(value: Any) -> str:
    """Return a cell as trimmed text (``None`` becomes ``""``)."""
    if value is None:
        return ""
    return str(value).strip()


def parse_number(value: Any) -> float:
    """Parse a raw cell into a finite float.

    Non-breaking spaces are removed, the text is trimmed, every comma is
    read as a decimal point and the leading numeric literal is parsed.

    Args:
        value: Raw cell (string, number or ``None``).

    Returns:
        Parsed value, or ``0.0`` when the cell is missing, unparseable or
        not finite.
    """
    if value is None:
        return 0.0

    text = str(value).replace(NBSP, "").strip().replace(",", ".")
    match = _LEADING_FLOAT.match(text)
    if match is None:
        return 0.0

    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0
