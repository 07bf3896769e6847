# -*- coding: utf-8 -*-
"""
Reference table normalization.

Turns raw spreadsheet rows into field-named records:

- cell_parser: tolerant string to number conversion
- schemas: fixed header schemas of the seven reference tables
- table_normalizer: header validation and positional zipping
"""

from nprint.normalizer.cell_parser import cell_text, parse_number
from nprint.normalizer.schemas import (
    SCHEMAS,
    ColumnSpec,
    TableName,
    TableSchema,
    energy_field,
    get_schema,
    resolve_table_name,
)
from nprint.normalizer.table_normalizer import Record, header_mismatches, normalize

__all__ = [
    "parse_number",
    "cell_text",
    "SCHEMAS",
    "ColumnSpec",
    "TableName",
    "TableSchema",
    "energy_field",
    "get_schema",
    "resolve_table_name",
    "Record",
    "header_mismatches",
    "normalize",
]
