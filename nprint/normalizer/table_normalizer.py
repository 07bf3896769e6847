# -*- coding: utf-8 -*-
"""
Table Normalizer - raw row arrays to field-named records.

Each reference table arrives as a list of rows, the first of which is the
header. The header is checked against the table's fixed schema before the
remaining rows are zipped positionally onto the schema's field names, so a
reordered or renamed source column is reported instead of silently shifting
every value into the wrong field.

Supports:
    - Positional zipping against a fixed schema
    - Header validation (case-insensitive, whitespace-tolerant)
    - ``strict`` policy: raise HeaderMismatchError on mismatch
    - ``warn`` policy: log, count the mismatch, and zip positionally anyway
    - Short rows: missing trailing fields become ``""``

Example:
    >>> from nprint.normalizer import normalize, get_schema, TableName
    >>> rows = [["Income", "N_removal_rating"], ["High-income countries", "0,6"]]
    >>> normalize(rows, get_schema(TableName.SEWAGE_REMOVAL))
    [{'income': 'High-income countries', 'removal_fraction': '0,6'}]
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from nprint import metrics
from nprint.config import HEADER_POLICIES
from nprint.exceptions import HeaderMismatchError
from nprint.normalizer.cell_parser import cell_text
from nprint.normalizer.schemas import TableSchema

logger = logging.getLogger(__name__)

__all__ = ["Record", "normalize", "header_mismatches"]

Record = Dict[str, Any]


def _normalise_header(header: Any) -> str:
    """Trim, case-fold and collapse inner whitespace of a header cell."""
    return re.sub(r"\s+", " ", cell_text(header)).casefold()


def header_mismatches(
    header_row: Sequence[Any], schema: TableSchema,
) -> List[int]:
    """Return the column positions whose header does not match the schema.

    Extra trailing columns in ``header_row`` are ignored; a missing column
    counts as a mismatch.

    Args:
        header_row: First row of the raw table.
        schema: Expected layout.

    Returns:
        Zero-based positions of mismatching columns (empty when valid).
    """
    mismatched = []
    for index, expected in enumerate(schema.headers):
        actual = header_row[index] if index < len(header_row) else None
        if _normalise_header(actual) != _normalise_header(expected):
            mismatched.append(index)
    return mismatched


def normalize(
    raw_rows: Optional[Sequence[Sequence[Any]]],
    schema: TableSchema,
    policy: str = "strict",
) -> List[Record]:
    """Turn raw rows into records keyed by the schema's field names.

    Args:
        raw_rows: Rows of the raw table; the first row is the header.
        schema: Fixed layout of the table.
        policy: ``strict`` or ``warn`` handling of a mismatching header.

    Returns:
        One record per data row, in source order. Empty input (or a header
        with no data rows) yields an empty list.

    Raises:
        HeaderMismatchError: If the header does not match under ``strict``.
        ValueError: If ``policy`` is unknown.
    """
    if policy not in HEADER_POLICIES:
        raise ValueError(f"Unknown header policy: {policy}")

    if not raw_rows:
        return []

    header_row, data_rows = raw_rows[0], raw_rows[1:]

    mismatched = header_mismatches(header_row or [], schema)
    if mismatched:
        expected = [schema.headers[i] for i in mismatched]
        actual = [
            cell_text(header_row[i]) if header_row and i < len(header_row) else ""
            for i in mismatched
        ]
        metrics.record_header_mismatch(schema.table.value)
        if policy == "strict":
            raise HeaderMismatchError(
                message=(
                    f"Header row of '{schema.table.value}' does not match its "
                    f"schema at columns {mismatched}"
                ),
                table=schema.table.value,
                expected=expected,
                actual=actual,
            )
        logger.warning(
            "Header mismatch in %s at columns %s (expected %s, got %s); "
            "zipping positionally",
            schema.table.value, mismatched, expected, actual,
        )

    fields = schema.fields
    records: List[Record] = []
    for row in data_rows:
        row = row or []
        record: Record = {}
        for index, field in enumerate(fields):
            value = row[index] if index < len(row) else None
            record[field] = "" if value is None else value
        records.append(record)

    logger.debug(
        "Normalized %d rows of %s", len(records), schema.table.value,
    )
    return records
