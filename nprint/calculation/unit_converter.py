# -*- coding: utf-8 -*-
"""
Unit Conversion Engine

All conversions are deterministic table lookups. Unknown or incompatible
units fail loudly with UnitConversionError.

Supports:
- Energy: TJ of electricity to kWh (base: kWh)
- Natural gas: TJ of gas to m3 at the reference heating value (base: m3)

The same energy unit may appear in more than one table (``tj`` is both an
electricity quantity and a quantity of gas); the table is chosen as the one
containing both the source and the target unit.
"""

from typing import Dict, List, Mapping, Optional

from nprint.exceptions import UnitConversionError

__all__ = ["UnitConverter", "UnitConversionError"]


class UnitConverter:
    """
    Deterministic unit converter with validation.

    GUARANTEES:
    - Same input, same output (plain float arithmetic, no rounding)
    - Unknown units raise UnitConversionError
    """

    # Energy conversions (to kWh as base unit)
    ENERGY_TO_KWH: Dict[str, float] = {
        'kwh': 1.0,
        'tj': 277778.0,
    }

    # Natural gas conversions (to m3 as base unit)
    NATURAL_GAS_TO_M3: Dict[str, float] = {
        'm3': 1.0,
        'tj': 28428.0,
    }

    def __init__(self, conversion_tables: Optional[Mapping[str, Mapping[str, float]]] = None):
        """
        Initialize unit converter.

        Args:
            conversion_tables: Category name to {unit: factor to base unit}.
                Defaults to the built-in energy and natural gas tables.
        """
        if conversion_tables is None:
            conversion_tables = {
                'energy': self.ENERGY_TO_KWH,
                'natural_gas': self.NATURAL_GAS_TO_M3,
            }
        self.conversion_tables: Dict[str, Dict[str, float]] = {
            category: {unit.lower().strip(): float(factor) for unit, factor in table.items()}
            for category, table in conversion_tables.items()
        }

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        """
        Convert value from one unit to another.

        Args:
            value: Numerical value to convert
            from_unit: Source unit (e.g., 'tj')
            to_unit: Target unit (e.g., 'kwh', 'm3')

        Returns:
            Converted value as float

        Raises:
            UnitConversionError: If units unknown or incompatible
        """
        from_unit = from_unit.lower().strip()
        to_unit = to_unit.lower().strip()

        if from_unit == to_unit:
            return float(value)

        for unit in (from_unit, to_unit):
            if not self._categories_of(unit):
                raise UnitConversionError(
                    f"Unknown unit: {unit}", context={"unit": unit},
                )

        category = self._shared_category(from_unit, to_unit)
        if category is None:
            raise UnitConversionError(
                f"Cannot convert between different unit types: {from_unit} → {to_unit}",
                context={
                    "from_unit": from_unit,
                    "to_unit": to_unit,
                    "from_categories": self._categories_of(from_unit),
                    "to_categories": self._categories_of(to_unit),
                },
            )

        conversion_table = self.conversion_tables[category]

        # Convert: from_unit → base_unit → to_unit
        base_value = value * conversion_table[from_unit]
        return base_value / conversion_table[to_unit]

    def _categories_of(self, unit: str) -> List[str]:
        return [
            category
            for category, table in self.conversion_tables.items()
            if unit in table
        ]

    def _shared_category(self, unit1: str, unit2: str) -> Optional[str]:
        for category, table in self.conversion_tables.items():
            if unit1 in table and unit2 in table:
                return category
        return None
