# -*- coding: utf-8 -*-
"""
N-Print - Nitrogen footprint calculation engine.

Estimates the reactive nitrogen (kg N/yr) released by a person's food and
energy consumption, next to their country's average.

Example:
    >>> from nprint import ReferenceTables, UserInputs, calculate
    >>> tables = ReferenceTables.from_raw(raw_tables)
    >>> result = calculate(tables, UserInputs(food_servings={"beef": 2}), "France")
    >>> result.total_n
"""

from nprint._version import __version__
from nprint.calculation import build_chart_series, calculate
from nprint.exceptions import (
    ConfigurationError,
    DataException,
    HeaderMismatchError,
    NPrintException,
    SnapshotError,
    UnitConversionError,
)
from nprint.models import (
    CalculationFailure,
    CalculationResult,
    ChartSeries,
    EnergyInputs,
    FailureReason,
    FoodCategory,
    SewageTreatment,
    SpendingTier,
    UserInputs,
)
from nprint.snapshot import ReferenceTables, SnapshotStore, load_reference_tables

__all__ = [
    "__version__",
    "build_chart_series",
    "calculate",
    "ConfigurationError",
    "DataException",
    "HeaderMismatchError",
    "NPrintException",
    "SnapshotError",
    "UnitConversionError",
    "CalculationFailure",
    "CalculationResult",
    "ChartSeries",
    "EnergyInputs",
    "FailureReason",
    "FoodCategory",
    "SewageTreatment",
    "SpendingTier",
    "UserInputs",
    "ReferenceTables",
    "SnapshotStore",
    "load_reference_tables",
]
