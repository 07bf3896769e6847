# -*- coding: utf-8 -*-
"""
Reference Table Schemas

Fixed header schemas for the seven reference tables. Each schema lists the
expected header label of every column (as exported from the source
spreadsheet) and the field name the column is stored under once
normalized. ``sheet_name`` is the name of the source sheet, accepted as an
alias for the logical table name when raw tables are supplied.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from nprint.models import EnergySector, IncomeTier

__all__ = [
    "TableName",
    "ColumnSpec",
    "TableSchema",
    "SCHEMAS",
    "get_schema",
    "resolve_table_name",
    "energy_field",
]


class TableName(str, Enum):
    """Logical reference table names."""

    PRODUCTION_FACTOR = "production_factor"
    FOOD_ATTRIBUTE = "food_attribute"
    SEWAGE_REMOVAL = "sewage_removal"
    COUNTRY_FOOD_CONSUMPTION = "country_food_consumption"
    COUNTRY_INCOME = "country_income"
    COUNTRY_ENERGY_PROFILE = "country_energy_profile"
    SERVING_SIZE = "serving_size"


@dataclass(frozen=True)
class ColumnSpec:
    """A single column: expected header label and normalized field name."""

    header: str
    field: str


@dataclass(frozen=True)
class TableSchema:
    """Ordered column layout of one reference table."""

    table: TableName
    sheet_name: str
    columns: Tuple[ColumnSpec, ...]

    @property
    def headers(self) -> Tuple[str, ...]:
        return tuple(c.header for c in self.columns)

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(c.field for c in self.columns)


def energy_field(carrier: str, sector: EnergySector) -> str:
    """Field name of a sector column, e.g. ``ng_households``.

    Args:
        carrier: ``ng`` or ``elec``.
        sector: Energy sector.
    """
    return f"{carrier}_{sector.value}"


def _energy_columns() -> Tuple[ColumnSpec, ...]:
    columns = [
        ColumnSpec("Country", "country"),
        ColumnSpec("code", "code"),
        ColumnSpec("pop", "population"),
    ]
    for carrier, suffix in (("ng", "NG"), ("elec", "Elec")):
        columns.append(ColumnSpec(f"Data source ({suffix})", f"{carrier}_data_source"))
        columns.append(
            ColumnSpec(f"Final consumption ({suffix})", f"{carrier}_final_consumption")
        )
        for sector in EnergySector:
            columns.append(
                ColumnSpec(f"{sector.label} ({suffix})", energy_field(carrier, sector))
            )
    columns.extend([
        ColumnSpec("Flights per capita", "flights_per_capita"),
        ColumnSpec("flight time (hours)", "flight_time_hours"),
        ColumnSpec("renewables", "renewables"),
    ])
    return tuple(columns)


SCHEMAS: Dict[TableName, TableSchema] = {
    TableName.PRODUCTION_FACTOR: TableSchema(
        table=TableName.PRODUCTION_FACTOR,
        sheet_name="final_VNFs",
        columns=(ColumnSpec("Category", "category"),) + tuple(
            ColumnSpec(tier.value, tier.field_name) for tier in IncomeTier
        ),
    ),
    TableName.FOOD_ATTRIBUTE: TableSchema(
        table=TableName.FOOD_ATTRIBUTE,
        sheet_name="other_attributes",
        columns=(
            ColumnSpec("name", "category"),
            ColumnSpec("Food waste %", "food_waste"),
            ColumnSpec("Fossil fuel (kg N/year)", "fossil_fuel"),
            ColumnSpec("N content (kg N/kg food)", "nitrogen_content"),
            ColumnSpec("Serving size", "serving_size"),
        ),
    ),
    TableName.SEWAGE_REMOVAL: TableSchema(
        table=TableName.SEWAGE_REMOVAL,
        sheet_name="sewage_ratings",
        columns=(
            ColumnSpec("Income", "income"),
            ColumnSpec("N_removal_rating", "removal_fraction"),
        ),
    ),
    TableName.COUNTRY_FOOD_CONSUMPTION: TableSchema(
        table=TableName.COUNTRY_FOOD_CONSUMPTION,
        sheet_name="food_country_data",
        columns=(
            ColumnSpec("iso_a3", "iso3"),
            ColumnSpec("Area", "country"),
            ColumnSpec("Category", "category"),
            ColumnSpec("kg/cap/year", "kg_per_capita_year"),
        ),
    ),
    TableName.COUNTRY_INCOME: TableSchema(
        table=TableName.COUNTRY_INCOME,
        sheet_name="GDP",
        columns=(
            ColumnSpec("Country", "country"),
            ColumnSpec("iso_a3", "iso3"),
            ColumnSpec("Income", "income"),
        ),
    ),
    TableName.COUNTRY_ENERGY_PROFILE: TableSchema(
        table=TableName.COUNTRY_ENERGY_PROFILE,
        sheet_name="country_energy_consumption_data_final",
        columns=_energy_columns(),
    ),
    TableName.SERVING_SIZE: TableSchema(
        table=TableName.SERVING_SIZE,
        sheet_name="serving_sizes",
        columns=(
            ColumnSpec("name", "category"),
            ColumnSpec("Serving size", "serving_size"),
        ),
    ),
}

_BY_ALIAS: Dict[str, TableName] = {}
for _schema in SCHEMAS.values():
    _BY_ALIAS[_schema.table.value.lower()] = _schema.table
    _BY_ALIAS[_schema.sheet_name.lower()] = _schema.table


def get_schema(table: TableName) -> TableSchema:
    """Return the schema of ``table``."""
    return SCHEMAS[TableName(table)]


def resolve_table_name(name: str) -> Optional[TableName]:
    """Resolve a logical table name or source sheet name (case-insensitive).

    Returns:
        The matching TableName, or None if the name is unknown.
    """
    return _BY_ALIAS.get(str(name).strip().lower())
