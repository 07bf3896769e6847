# -*- coding: utf-8 -*-
"""
N-Print calculation engine.

Two-pass nitrogen footprint arithmetic over a reference snapshot:

- lookups: indexes derived from the reference tables
- food_pass: per-category food loss with sewage treatment and rescaling
- energy_pass: household energy, travel, spending and top-down share
- factors / unit_converter: YAML factor registry and TJ conversions
- aggregator: ``calculate`` and chart series
"""

from nprint.calculation.aggregator import (
    ENERGY_CHART_LABELS,
    FOOD_CHART_LABELS,
    CalculationOutcome,
    build_chart_series,
    calculate,
    provenance_hash,
    verify_provenance,
)
from nprint.calculation.factors import (
    EnergyFactorRegistry,
    EnergyFactors,
    get_energy_factors,
    reset_energy_factors,
)
from nprint.calculation.food_pass import FoodPassResult, round2, run_food_pass
from nprint.calculation.energy_pass import EnergyPassResult, run_energy_pass
from nprint.calculation.lookups import (
    FoodAttribute,
    LookupIndexes,
    build_lookups,
    canonical_income_label,
    normalize_country,
)
from nprint.calculation.unit_converter import UnitConverter

__all__ = [
    "CalculationOutcome",
    "ENERGY_CHART_LABELS",
    "FOOD_CHART_LABELS",
    "build_chart_series",
    "calculate",
    "provenance_hash",
    "verify_provenance",
    "EnergyFactorRegistry",
    "EnergyFactors",
    "get_energy_factors",
    "reset_energy_factors",
    "FoodPassResult",
    "round2",
    "run_food_pass",
    "EnergyPassResult",
    "run_energy_pass",
    "FoodAttribute",
    "LookupIndexes",
    "build_lookups",
    "canonical_income_label",
    "normalize_country",
    "UnitConverter",
]
