# -*- coding: utf-8 -*-
"""
Footprint Aggregator

Entry point of the engine. ``calculate`` checks its preconditions, rebuilds
the lookup indexes from the given snapshot, runs the food pass twice (user
and country average) and the energy pass once, and assembles an immutable
CalculationResult:

    total_n   = user food total + user energy total
    average_n = average food total + country energy aggregate

Failures never escape as exceptions: a missing country or an empty snapshot
is reported before any work starts, and a fault during the computation is
logged and reported as ``CalculationFailure(reason=calculation_error)``.
A partial result is never returned.
"""

import hashlib
import json
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Union

from nprint import metrics
from nprint.calculation.energy_pass import find_energy_row, run_energy_pass
from nprint.calculation.factors import EnergyFactors, get_energy_factors
from nprint.calculation.food_pass import (
    average_frequencies,
    run_food_pass,
    user_frequencies,
)
from nprint.calculation.lookups import build_lookups
from nprint.models import (
    CalculationDetails,
    CalculationFailure,
    CalculationResult,
    ChartPoint,
    ChartSeries,
    EnergyBreakdown,
    FailureReason,
    SewageTreatment,
    UserInputs,
)
from nprint.normalizer import TableName

logger = logging.getLogger(__name__)

__all__ = [
    "CalculationOutcome",
    "FOOD_CHART_LABELS",
    "ENERGY_CHART_LABELS",
    "build_chart_series",
    "calculate",
    "provenance_hash",
    "verify_provenance",
]

CalculationOutcome = Union[CalculationResult, CalculationFailure]

FOOD_CHART_LABELS: Dict[str, str] = {
    "meat": "Meat Products",
    "dairy": "Dairy & Eggs",
    "plant": "Plant-based",
}

ENERGY_CHART_LABELS: Dict[str, str] = {
    "elec": "Household Electricity",
    "ng": "Household Natural Gas",
    "flight": "Flights",
    "car": "Car Travel",
    "public_transit": "Public Transit",
    "spending": "Spending",
    "top_down": "Other (Top-down)",
}


def _coerce_sewage(selection: Union[SewageTreatment, str, None]) -> SewageTreatment:
    if selection is None or selection == "":
        return SewageTreatment.UNKNOWN
    if isinstance(selection, SewageTreatment):
        return selection
    return SewageTreatment(str(selection).strip().lower())


def provenance_hash(
    result: CalculationResult, user_inputs: UserInputs,
) -> str:
    """
    SHA-256 over the inputs and outputs of a calculation.

    Same inputs and snapshot give the same hash; the hash carries no
    timestamp.
    """
    provenance_data = {
        "inputs": user_inputs.model_dump(mode="json"),
        "result": result.model_dump(mode="json", exclude={"provenance_hash"}),
    }
    provenance_str = json.dumps(provenance_data, sort_keys=True)
    return hashlib.sha256(provenance_str.encode()).hexdigest()


def verify_provenance(result: CalculationResult, user_inputs: UserInputs) -> bool:
    """True if ``result`` carries the hash of ``user_inputs`` and its own outputs."""
    return result.provenance_hash == provenance_hash(result, user_inputs)


def _compute(
    tables,
    user_inputs: UserInputs,
    country: str,
    sewage: SewageTreatment,
    factors: EnergyFactors,
) -> CalculationResult:
    warnings: List[str] = []
    lookups = build_lookups(tables)

    iso = lookups.iso_for(country)
    income = lookups.income_for(country)
    if not income:
        metrics.record_degraded_lookup("income_tier")
        warnings.append(
            f"No income tier found for {country}; production factors and "
            f"average sewage removal count as 0"
        )
        logger.warning("Income tier unresolved for %s (iso3=%s)", country, iso)

    user_removal = sewage.removal_fraction
    average_removal = lookups.average_removal(income)

    user_food = run_food_pass(
        user_frequencies(user_inputs), lookups, income, user_removal,
    )
    average_food = run_food_pass(
        average_frequencies(tables[TableName.COUNTRY_FOOD_CONSUMPTION], country, lookups),
        lookups,
        income,
        average_removal,
    )

    energy_row = find_energy_row(tables[TableName.COUNTRY_ENERGY_PROFILE], country)
    if energy_row is None:
        metrics.record_degraded_lookup("energy_profile")
        warnings.append(
            f"No energy profile found for {country}; top-down share and "
            f"average energy count as 0"
        )
        logger.warning("No energy profile row for %s", country)
    energy = run_energy_pass(user_inputs.energy, energy_row, factors)

    result = CalculationResult(
        country=country,
        sewage_treatment=sewage,
        total_n=user_food.final_total + energy.total,
        average_n=average_food.final_total + energy.average_aggregate,
        food_breakdown=user_food.breakdown,
        average_food_breakdown=average_food.breakdown,
        energy_breakdown=energy.breakdown,
        average_energy_breakdown=EnergyBreakdown(top_down=energy.breakdown.top_down),
        details=CalculationDetails(
            total_user_food=user_food.final_total,
            total_user_energy=energy.total,
            total_average_food=average_food.final_total,
            total_average_energy=energy.average_aggregate,
            iso3=iso,
            income_tier=income,
            user_removal_rate=user_removal,
            average_removal_rate=average_removal,
            electricity_factor=energy.electricity_factor,
        ),
        warnings=tuple(warnings),
    )
    return result.model_copy(
        update={"provenance_hash": provenance_hash(result, user_inputs)}
    )


def calculate(
    reference_tables,
    user_inputs: Union[UserInputs, Mapping[str, Any]],
    selected_country: Optional[str],
    sewage_selection: Union[SewageTreatment, str, None] = SewageTreatment.UNKNOWN,
    factors: Optional[EnergyFactors] = None,
) -> CalculationOutcome:
    """
    Calculate the nitrogen footprint of a person and their country's average.

    Args:
        reference_tables: ReferenceTables snapshot
        user_inputs: UserInputs (or a mapping validated into one)
        selected_country: Country name as listed in the reference tables
        sewage_selection: Household sewage treatment level
        factors: Energy factors (the configured registry if None)

    Returns:
        CalculationResult, or CalculationFailure when a precondition fails
        or the computation faults

    Raises:
        pydantic.ValidationError: If ``user_inputs`` is a malformed mapping
        ValueError: If ``sewage_selection`` is not a treatment level
        ConfigurationError: If the factor registry cannot be loaded
    """
    country = (selected_country or "").strip()
    if not country:
        metrics.record_calculation(FailureReason.NO_COUNTRY.value)
        return CalculationFailure(
            reason=FailureReason.NO_COUNTRY,
            message="Please select a country",
        )

    if reference_tables is None or not reference_tables.is_populated:
        metrics.record_calculation(FailureReason.TABLES_NOT_LOADED.value)
        return CalculationFailure(
            reason=FailureReason.TABLES_NOT_LOADED,
            message="Reference data is not loaded",
            country=country,
        )

    if not isinstance(user_inputs, UserInputs):
        user_inputs = UserInputs.model_validate(user_inputs or {})
    sewage = _coerce_sewage(sewage_selection)
    if factors is None:
        factors = get_energy_factors()

    start = time.perf_counter()
    try:
        result = _compute(reference_tables, user_inputs, country, sewage, factors)
    except Exception as e:
        logger.exception("Calculation failed for %s", country)
        metrics.record_calculation(FailureReason.CALCULATION_ERROR.value)
        return CalculationFailure(
            reason=FailureReason.CALCULATION_ERROR,
            message=f"Calculation failed: {e}",
            country=country,
        )

    duration = time.perf_counter() - start
    metrics.record_calculation("success", duration)
    logger.info(
        "Calculation completed: %s -> %.2f kg N/yr (average %.2f, %.2fms)",
        country, result.total_n, result.average_n, duration * 1000,
    )
    return result


def build_chart_series(
    result: CalculationResult, series: Union[ChartSeries, str],
) -> List[ChartPoint]:
    """
    Turn a result breakdown into chart points.

    Percentages are relative to the matching sub-total (or 1 when it is 0);
    components that are zero or negative are left out.

    Args:
        result: Successful calculation result
        series: ``food``, ``average_food`` or ``energy``

    Returns:
        Chart points in display order
    """
    series = ChartSeries(series)
    details = result.details

    if series is ChartSeries.FOOD:
        values = result.food_breakdown.model_dump()
        labels = FOOD_CHART_LABELS
        total = details.total_user_food
    elif series is ChartSeries.AVERAGE_FOOD:
        values = result.average_food_breakdown.model_dump()
        labels = FOOD_CHART_LABELS
        total = details.total_average_food
    else:
        values = result.energy_breakdown.model_dump()
        labels = ENERGY_CHART_LABELS
        total = details.total_user_energy

    total = total or 1.0
    return [
        ChartPoint(label=label, value=values[key], percent_of_total=values[key] / total * 100)
        for key, label in labels.items()
        if values[key] > 0
    ]
