# -*- coding: utf-8 -*-
"""
Reference Catalog

Read-only views over a reference snapshot used to drive an input form:
the selectable countries, the serving size of each food category and the
default sewage outlook of a country before the user picks a treatment level.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from nprint.calculation.lookups import build_lookups, normalize_category
from nprint.config import get_config
from nprint.models import FoodCategory, IncomeTier
from nprint.normalizer import TableName, cell_text, parse_number

logger = logging.getLogger(__name__)

__all__ = [
    "SEWAGE_OUTLOOK_TREATED",
    "SEWAGE_OUTLOOK_UNTREATED",
    "ServingSizeRow",
    "country_sewage_outlook",
    "list_countries",
    "serving_size_rows",
]

SEWAGE_OUTLOOK_TREATED = "On average, your country has a secondary/tertiary treatment system."
SEWAGE_OUTLOOK_UNTREATED = "On average, your country has no sewage treatment system."

_TREATED_TIERS = (IncomeTier.HIGH.value, IncomeTier.UPPER_MIDDLE.value)


@dataclass(frozen=True)
class ServingSizeRow:
    """Serving size of one food category."""
    category: str
    grams: float


def list_countries(tables, excluded: Optional[Iterable[str]] = None) -> List[str]:
    """
    Countries present in the food consumption or energy tables.

    Args:
        tables: ReferenceTables snapshot
        excluded: Names to leave out (the configured exclusions if None)

    Returns:
        Sorted, de-duplicated country names
    """
    if excluded is None:
        excluded = get_config().excluded_countries
    excluded = {cell_text(name) for name in excluded}

    names = set()
    for row in tables[TableName.COUNTRY_FOOD_CONSUMPTION]:
        names.add(cell_text(row.get("country")))
    for row in tables[TableName.COUNTRY_ENERGY_PROFILE]:
        names.add(cell_text(row.get("country")))

    return sorted(name for name in names if name and name not in excluded)


def serving_size_rows(tables) -> List[ServingSizeRow]:
    """
    Serving sizes of the known food categories, in grams.

    Read from the serving size table, or from the food attribute table when
    the former is empty. Rows for unknown categories are skipped.
    """
    rows = tables[TableName.SERVING_SIZE]
    if not rows:
        logger.debug("Serving size table empty; using food attributes")
        rows = tables[TableName.FOOD_ATTRIBUTE]

    known = {category.value for category in FoodCategory}
    result = [
        ServingSizeRow(
            category=normalize_category(row.get("category")),
            grams=parse_number(row.get("serving_size")) * 1000,
        )
        for row in rows
    ]
    return sorted(
        (row for row in result if row.category in known),
        key=lambda row: row.category,
    )


def country_sewage_outlook(tables, country: str) -> Optional[str]:
    """
    Default sewage treatment description for ``country``'s income tier.

    High and upper-middle income countries are assumed to run secondary or
    tertiary treatment; all others none.

    Returns:
        The description, or None when no country is given.
    """
    if not cell_text(country):
        return None
    income = build_lookups(tables).income_for(country)
    if income in _TREATED_TIERS:
        return SEWAGE_OUTLOOK_TREATED
    return SEWAGE_OUTLOOK_UNTREATED
