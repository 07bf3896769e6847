# -*- coding: utf-8 -*-
"""
Lookup Index Builder

Derives the read-only indexes a calculation needs from a reference snapshot:

    - iso_by_country: normalized country name -> ISO3 code
    - income_by_iso: ISO3 code -> canonical income tier label
    - production_factor_by_category: category -> {tier label -> multiplier}
    - attributes_by_category: category -> FoodAttribute
    - removal_by_income: tier label -> average sewage removal fraction

Indexes are rebuilt on every calculation and never cached between snapshots.
Absent keys stay absent; callers default them explicitly.
"""

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from nprint.models import IncomeTier
from nprint.normalizer import TableName, cell_text, parse_number

logger = logging.getLogger(__name__)

__all__ = [
    "INCOME_SYNONYMS",
    "FoodAttribute",
    "LookupIndexes",
    "build_lookups",
    "canonical_income_label",
    "normalize_category",
    "normalize_country",
]

# Short income labels used by the income table, mapped to canonical tiers
INCOME_SYNONYMS: Mapping[str, str] = MappingProxyType({
    "high income": IncomeTier.HIGH.value,
    "upper middle income": IncomeTier.UPPER_MIDDLE.value,
    "lower middle income": IncomeTier.LOWER_MIDDLE.value,
    "low income": IncomeTier.LOW.value,
})


def normalize_country(name: Any) -> str:
    """Key for country lookups: trimmed, case-folded, inner whitespace collapsed."""
    return re.sub(r"\s+", " ", cell_text(name)).casefold()


def normalize_category(name: Any) -> str:
    return cell_text(name).lower()


def canonical_income_label(label: Any) -> str:
    """Map an income label to its canonical tier string.

    Canonical labels and known short forms (``High income``) resolve to the
    tier string. Matching ignores case and repeated inner whitespace, so
    ``HIGH  INCOME`` resolves too; anything else passes through trimmed.

    Example:
        >>> canonical_income_label(" Upper middle income ")
        'Upper-middle-income countries'
    """
    text = cell_text(label)
    key = re.sub(r"\s+", " ", text).lower()
    if key in INCOME_SYNONYMS:
        return INCOME_SYNONYMS[key]
    for tier in IncomeTier:
        if tier.value.lower() == key:
            return tier.value
    return text


@dataclass(frozen=True)
class FoodAttribute:
    """Per-category food attributes.

    Attributes:
        food_waste: Wasted fraction, 0-1 (percentages are divided by 100)
        fossil_fuel: kg N per weekly serving per year from fossil fuel use
        nitrogen_content: kg N per kg of food
        serving_size: kg per serving
    """
    food_waste: float = 0.0
    fossil_fuel: float = 0.0
    nitrogen_content: float = 0.0
    serving_size: float = 0.0


@dataclass(frozen=True)
class LookupIndexes:
    """Read-only indexes derived from one reference snapshot."""
    iso_by_country: Mapping[str, str] = field(default_factory=dict)
    income_by_iso: Mapping[str, str] = field(default_factory=dict)
    production_factor_by_category: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    attributes_by_category: Mapping[str, FoodAttribute] = field(default_factory=dict)
    removal_by_income: Mapping[str, float] = field(default_factory=dict)

    def iso_for(self, country: str) -> Optional[str]:
        """ISO3 code of ``country`` (any case or spacing), or None."""
        return self.iso_by_country.get(normalize_country(country))

    def income_for(self, country: str) -> Optional[str]:
        """Canonical income tier of ``country``, or None if unresolved."""
        iso = self.iso_for(country)
        if not iso:
            return None
        return self.income_by_iso.get(iso)

    def production_factor(self, category: str, income: Optional[str]) -> float:
        """Multiplier for ``category`` under ``income`` (0 when unknown)."""
        if not income:
            return 0.0
        return self.production_factor_by_category.get(category, {}).get(income, 0.0)

    def attributes(self, category: str) -> FoodAttribute:
        return self.attributes_by_category.get(category, FoodAttribute())

    def average_removal(self, income: Optional[str]) -> float:
        if not income:
            return 0.0
        return self.removal_by_income.get(income, 0.0)


def _build_iso_by_country(tables) -> Dict[str, str]:
    iso_by_country: Dict[str, str] = {}

    # Food consumption rows: later rows overwrite earlier ones
    for row in tables[TableName.COUNTRY_FOOD_CONSUMPTION]:
        country = normalize_country(row.get("country"))
        iso = cell_text(row.get("iso3")).upper()
        if country and iso:
            iso_by_country[country] = iso

    # Energy rows only fill countries the food table did not name
    for row in tables[TableName.COUNTRY_ENERGY_PROFILE]:
        country = normalize_country(row.get("country"))
        iso = cell_text(row.get("code")).upper()
        if country and iso and country not in iso_by_country:
            iso_by_country[country] = iso

    return iso_by_country


def _build_income_by_iso(tables) -> Dict[str, str]:
    income_by_iso: Dict[str, str] = {}
    for row in tables[TableName.COUNTRY_INCOME]:
        iso = cell_text(row.get("iso3")).upper()
        if iso:
            income_by_iso[iso] = canonical_income_label(row.get("income"))
    return income_by_iso


def _build_production_factors(tables) -> Dict[str, Mapping[str, float]]:
    factors: Dict[str, Mapping[str, float]] = {}
    for row in tables[TableName.PRODUCTION_FACTOR]:
        category = normalize_category(row.get("category"))
        if not category:
            continue
        factors[category] = MappingProxyType({
            tier.value: parse_number(row.get(tier.field_name)) for tier in IncomeTier
        })
    return factors


def _build_attributes(tables) -> Dict[str, FoodAttribute]:
    attributes: Dict[str, FoodAttribute] = {}
    for row in tables[TableName.FOOD_ATTRIBUTE]:
        category = normalize_category(row.get("category"))
        if not category:
            continue
        food_waste = parse_number(row.get("food_waste"))
        if food_waste > 1:
            food_waste = food_waste / 100
        attributes[category] = FoodAttribute(
            food_waste=food_waste,
            fossil_fuel=parse_number(row.get("fossil_fuel")),
            nitrogen_content=parse_number(row.get("nitrogen_content")),
            serving_size=parse_number(row.get("serving_size")),
        )
    return attributes


def _build_removal_by_income(tables) -> Dict[str, float]:
    removal: Dict[str, float] = {}
    for row in tables[TableName.SEWAGE_REMOVAL]:
        income = canonical_income_label(row.get("income"))
        # first row for a label wins
        if income and income not in removal:
            removal[income] = parse_number(row.get("removal_fraction"))
    return removal


def build_lookups(tables) -> LookupIndexes:
    """Build the lookup indexes of a reference snapshot.

    Args:
        tables: ReferenceTables snapshot (or any mapping of TableName to
            records).

    Returns:
        LookupIndexes over the snapshot's current contents.
    """
    indexes = LookupIndexes(
        iso_by_country=MappingProxyType(_build_iso_by_country(tables)),
        income_by_iso=MappingProxyType(_build_income_by_iso(tables)),
        production_factor_by_category=MappingProxyType(_build_production_factors(tables)),
        attributes_by_category=MappingProxyType(_build_attributes(tables)),
        removal_by_income=MappingProxyType(_build_removal_by_income(tables)),
    )
    logger.debug(
        "Built lookups: %d countries, %d incomes, %d factor rows, %d attribute rows",
        len(indexes.iso_by_country),
        len(indexes.income_by_iso),
        len(indexes.production_factor_by_category),
        len(indexes.attributes_by_category),
    )
    return indexes
