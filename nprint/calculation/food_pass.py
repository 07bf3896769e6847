# -*- coding: utf-8 -*-
"""
Food Pass Calculator

One pass turns weekly serving frequencies into annual nitrogen loss. The same
per-category formula serves the user profile (entered frequencies) and the
country-average profile (frequencies derived from per-capita consumption):

    consumption_n = frequency * serving_size * 52 * nitrogen_content
    production_n  = consumption_n * production_factor[income tier]
    fuel_n        = frequency * fossil_fuel

Sewage treatment only removes nitrogen from the consumption share:

    final_total = round2(consumption * (1 - removal_rate) + production + fuel)

The per-bucket sums are pre-treatment; they are rescaled so that the three
buckets add up to ``final_total``.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from nprint.calculation.lookups import LookupIndexes, normalize_category, normalize_country
from nprint.models import FoodBreakdown, FoodBucket, FoodCategory, UserInputs
from nprint.normalizer import parse_number

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 52

__all__ = [
    "WEEKS_PER_YEAR",
    "CategoryLoss",
    "FoodPassResult",
    "average_frequencies",
    "round2",
    "run_food_pass",
    "user_frequencies",
]


def round2(value: float) -> float:
    """Round half up to two decimals (``floor(x * 100 + 0.5) / 100``)."""
    return math.floor(value * 100 + 0.5) / 100


@dataclass(frozen=True)
class CategoryLoss:
    """Nitrogen loss of one category in one pass (kg N/yr, pre-treatment)."""
    category: FoodCategory
    frequency: float
    consumption_n: float
    production_n: float
    fuel_n: float

    @property
    def pre_treatment(self) -> float:
        return self.consumption_n + self.production_n + self.fuel_n


@dataclass(frozen=True)
class FoodPassResult:
    """
    Outcome of one food pass.

    Attributes:
        total_consumption: Consumption loss before sewage treatment
        total_production: Production loss
        total_fuel: Fossil fuel loss
        removal_rate: Sewage removal fraction applied to consumption
        final_total: Rounded pass total (kg N/yr)
        raw_buckets: Pre-treatment bucket sums
        breakdown: Buckets rescaled to ``final_total``
        categories: Per-category detail of the contributing categories
    """
    total_consumption: float
    total_production: float
    total_fuel: float
    removal_rate: float
    final_total: float
    raw_buckets: Dict[FoodBucket, float]
    breakdown: FoodBreakdown
    categories: List[CategoryLoss] = field(default_factory=list)

    @property
    def adjusted_consumption(self) -> float:
        return self.total_consumption * (1 - self.removal_rate)


def user_frequencies(user_inputs: UserInputs) -> Dict[FoodCategory, float]:
    """Weekly servings entered by the user, per category (0 when absent)."""
    return {
        category: float(user_inputs.servings_for(category))
        for category in FoodCategory
    }


def average_frequencies(
    consumption_rows: Iterable[Mapping[str, Any]],
    country: str,
    lookups: LookupIndexes,
) -> Dict[FoodCategory, float]:
    """
    Weekly servings of the average resident of ``country``.

    ``consumed = kg_per_capita_year * (1 - food_waste)`` and
    ``frequency = consumed / serving_size / 52``; 0 when either the serving
    size or the consumed amount is not positive.

    Args:
        consumption_rows: Records of the country food consumption table
        country: Selected country (matched case- and whitespace-insensitively)
        lookups: Indexes holding the food attributes

    Returns:
        Frequency per category
    """
    key = normalize_country(country)
    kg_per_capita: Dict[str, float] = {}
    allowed = {category.value for category in FoodCategory}

    for row in consumption_rows:
        if normalize_country(row.get("country")) != key:
            continue
        category = normalize_category(row.get("category"))
        if category in allowed:
            kg_per_capita[category] = parse_number(row.get("kg_per_capita_year"))

    frequencies: Dict[FoodCategory, float] = {}
    for category in FoodCategory:
        kg = kg_per_capita.get(category.value, 0.0)
        attributes = lookups.attributes(category.value)
        consumed = kg * (1 - attributes.food_waste)
        if attributes.serving_size > 0 and consumed > 0:
            frequencies[category] = consumed / attributes.serving_size / WEEKS_PER_YEAR
        else:
            frequencies[category] = 0.0
    return frequencies


def run_food_pass(
    frequencies: Mapping[FoodCategory, float],
    lookups: LookupIndexes,
    income: Optional[str],
    removal_rate: float,
) -> FoodPassResult:
    """
    Run one food pass.

    Args:
        frequencies: Weekly servings per category
        lookups: Lookup indexes of the current snapshot
        income: Canonical income tier of the country (None if unresolved)
        removal_rate: Sewage removal fraction applied to consumption loss

    Returns:
        FoodPassResult
    """
    total_consumption = 0.0
    total_production = 0.0
    total_fuel = 0.0
    raw_buckets: Dict[FoodBucket, float] = {bucket: 0.0 for bucket in FoodBucket}
    categories: List[CategoryLoss] = []

    for category in FoodCategory:
        frequency = frequencies.get(category, 0.0)
        if not frequency:
            continue

        attributes = lookups.attributes(category.value)
        factor = lookups.production_factor(category.value, income)

        consumption_n = frequency * attributes.serving_size * WEEKS_PER_YEAR * attributes.nitrogen_content
        production_n = consumption_n * factor
        fuel_n = frequency * attributes.fossil_fuel

        loss = CategoryLoss(category, frequency, consumption_n, production_n, fuel_n)
        categories.append(loss)

        total_consumption += consumption_n
        total_production += production_n
        total_fuel += fuel_n
        raw_buckets[category.bucket] += loss.pre_treatment

        logger.debug(
            "%s: freq=%.4f cons=%.4f prod=%.4f fuel=%.4f",
            category.value, frequency, consumption_n, production_n, fuel_n,
        )

    adjusted = total_consumption * (1 - removal_rate)
    final_total = round2(adjusted + total_production + total_fuel)

    raw_sum = sum(raw_buckets.values())
    scale = final_total / raw_sum if final_total > 0 and raw_sum > 0 else 0.0
    breakdown = FoodBreakdown(
        meat=raw_buckets[FoodBucket.MEAT] * scale,
        dairy=raw_buckets[FoodBucket.DAIRY] * scale,
        plant=raw_buckets[FoodBucket.PLANT] * scale,
    )

    return FoodPassResult(
        total_consumption=total_consumption,
        total_production=total_production,
        total_fuel=total_fuel,
        removal_rate=removal_rate,
        final_total=final_total,
        raw_buckets=raw_buckets,
        breakdown=breakdown,
        categories=categories,
    )
