# -*- coding: utf-8 -*-
"""
Energy Pass Calculator

User energy components (kg N/yr):

    elec           = kwh_per_month * 12 * electricity_factor / household_size
    ng             = m3_per_month * 12 * gas_factor / household_size
    flight         = hours_per_year * flight_factor
    car            = km_per_week * 52 * car_factor
    public_transit = km_per_week * 52 * transit_factor
    spending       = spending tier value
    top_down       = country "Rest" sector energy per capita

The country-average aggregate sums the itemized sectors (households, road,
other transport, commerce and public services, other consumers) per capita.
Sector figures are in terajoules and are converted with the registry's
TJ -> kWh and TJ -> m3 tables.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from nprint.calculation.factors import EnergyFactors
from nprint.calculation.food_pass import WEEKS_PER_YEAR, round2
from nprint.calculation.lookups import normalize_country
from nprint.models import (
    ITEMIZED_SECTORS,
    EnergyBreakdown,
    EnergyInputs,
    EnergySector,
)
from nprint.normalizer import energy_field, parse_number

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12

__all__ = [
    "EnergyPassResult",
    "average_energy_aggregate",
    "electricity_factor",
    "find_energy_row",
    "run_energy_pass",
    "top_down_share",
]


@dataclass(frozen=True)
class EnergyPassResult:
    """User energy breakdown, its rounded total and the country aggregate."""
    breakdown: EnergyBreakdown
    total: float
    average_aggregate: float
    electricity_factor: float
    has_country_row: bool


def _finite(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    value = float(value)
    return value if math.isfinite(value) else 0.0


def find_energy_row(
    energy_rows: Iterable[Mapping[str, Any]], country: str,
) -> Optional[Mapping[str, Any]]:
    """First energy profile row of ``country``, or None."""
    key = normalize_country(country)
    for row in energy_rows:
        if normalize_country(row.get("country")) == key:
            return row
    return None


def electricity_factor(
    energy_row: Optional[Mapping[str, Any]], factors: EnergyFactors,
) -> float:
    """Country renewables-mix factor when positive, else the global default."""
    if energy_row is not None:
        renewables = parse_number(energy_row.get("renewables"))
        if renewables > 0:
            return renewables
    return factors.electricity


def _population(energy_row: Mapping[str, Any]) -> float:
    return max(1.0, parse_number(energy_row.get("population")) or 1.0)


def _per_capita(
    energy_row: Mapping[str, Any],
    sector: EnergySector,
    factors: EnergyFactors,
    elec_factor: float,
    clamp: bool = False,
) -> float:
    ng_tj = parse_number(energy_row.get(energy_field("ng", sector)))
    elec_tj = parse_number(energy_row.get(energy_field("elec", sector)))
    if clamp:
        ng_tj = max(0.0, ng_tj)
        elec_tj = max(0.0, elec_tj)
    converter = factors.converter
    ng_n = converter.convert(ng_tj, "tj", "m3") * factors.natural_gas
    elec_n = converter.convert(elec_tj, "tj", "kwh") * elec_factor
    return (elec_n + ng_n) / _population(energy_row)


def top_down_share(
    energy_row: Optional[Mapping[str, Any]],
    factors: EnergyFactors,
    elec_factor: float,
) -> float:
    """Per-capita loss of the country's unattributed ("Rest") energy use.

    Negative rest figures clamp to 0; no row gives 0.
    """
    if energy_row is None:
        return 0.0
    return _per_capita(energy_row, EnergySector.REST, factors, elec_factor, clamp=True)


def average_energy_aggregate(
    energy_row: Optional[Mapping[str, Any]],
    factors: EnergyFactors,
    elec_factor: float,
) -> float:
    """Per-capita loss of the itemized sectors; 0 without a country row."""
    if energy_row is None:
        return 0.0
    return sum(
        _per_capita(energy_row, sector, factors, elec_factor)
        for sector in ITEMIZED_SECTORS
    )


def run_energy_pass(
    inputs: EnergyInputs,
    energy_row: Optional[Mapping[str, Any]],
    factors: EnergyFactors,
) -> EnergyPassResult:
    """
    Compute the user energy breakdown and the country-average aggregate.

    Args:
        inputs: Energy, travel and spending inputs
        energy_row: The country's energy profile record (None if missing)
        factors: Resolved energy factors

    Returns:
        EnergyPassResult
    """
    elec_factor = electricity_factor(energy_row, factors)
    household = max(1.0, _finite(inputs.household_size) or 1.0)

    breakdown = EnergyBreakdown(
        elec=_finite(inputs.electricity_kwh_per_month) * MONTHS_PER_YEAR * elec_factor / household,
        ng=_finite(inputs.natural_gas_m3_per_month) * MONTHS_PER_YEAR * factors.natural_gas / household,
        flight=_finite(inputs.flying_hours_per_year) * factors.flight,
        car=_finite(inputs.car_km_per_week) * WEEKS_PER_YEAR * factors.car,
        public_transit=_finite(inputs.public_transit_km_per_week) * WEEKS_PER_YEAR * factors.public_transit,
        spending=factors.spending_for(inputs.spending),
        top_down=top_down_share(energy_row, factors, elec_factor),
    )
    total = round2(sum(_finite(v) for v in breakdown.model_dump().values()))

    aggregate = average_energy_aggregate(energy_row, factors, elec_factor)
    logger.debug(
        "Energy pass: total=%.2f top_down=%.4f aggregate=%.4f factor=%g",
        total, breakdown.top_down, aggregate, elec_factor,
    )

    return EnergyPassResult(
        breakdown=breakdown,
        total=total,
        average_aggregate=aggregate,
        electricity_factor=elec_factor,
        has_country_row=energy_row is not None,
    )
