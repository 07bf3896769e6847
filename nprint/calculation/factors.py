# -*- coding: utf-8 -*-
"""
Energy Factor Registry

Loads nitrogen loss factors for energy use, travel and spending, plus the
unit conversion tables, from the YAML registry
(``nprint/data/energy_factors.yaml`` unless configured otherwise).

Every energy entry carries one ``factor_kg_n_per_<unit>`` key; the suffix
names the activity unit the factor applies to. A missing or malformed
registry fails loudly with ConfigurationError rather than silently zeroing
the energy pass.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from nprint.calculation.unit_converter import UnitConverter
from nprint.config import get_config
from nprint.exceptions import ConfigurationError
from nprint.models import SpendingTier

logger = logging.getLogger(__name__)

_FACTOR_PREFIX = "factor_kg_n_per_"

_REQUIRED_ENERGY_FACTORS = ("electricity", "natural_gas", "car", "flight", "public_transit")


@dataclass(frozen=True)
class EnergyFactors:
    """
    Resolved nitrogen loss factors.

    Attributes:
        electricity: kg N per kWh (global default)
        natural_gas: kg N per m3
        car: kg N per km
        flight: kg N per flight hour
        public_transit: kg N per km
        spending: kg N per year by spending tier
        units: Activity unit of each energy factor
        converter: Unit converter built from the registry's conversion tables
    """
    electricity: float
    natural_gas: float
    car: float
    flight: float
    public_transit: float
    spending: Mapping[SpendingTier, float] = field(default_factory=dict)
    units: Mapping[str, str] = field(default_factory=dict)
    converter: UnitConverter = field(default_factory=UnitConverter, compare=False)

    def spending_for(self, tier: SpendingTier) -> float:
        """Annual kg N for a spending tier (0 for unlisted tiers)."""
        return self.spending.get(tier, 0.0)


class EnergyFactorRegistry:
    """
    Energy factor registry backed by a YAML file.
    """

    def __init__(self, registry_path: Optional[Path] = None):
        """
        Initialize the registry.

        Args:
            registry_path: Path to the YAML registry (configured path if None)
        """
        if registry_path is None:
            registry_path = get_config().factor_registry_path

        self.registry_path = Path(registry_path)
        self.data = self._load_registry()
        self.factors = self._resolve_factors(self.data)
        logger.info(
            "Loaded %d energy factors from %s",
            len(self.factors.units), self.registry_path,
        )

    def _load_registry(self) -> Dict[str, Any]:
        """Load the registry from YAML"""
        try:
            with open(self.registry_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            logger.error("Energy factor registry not found: %s", self.registry_path)
            raise ConfigurationError(
                f"Energy factor registry not found: {self.registry_path}",
                context={"path": str(self.registry_path)},
            ) from e
        except yaml.YAMLError as e:
            logger.error("Failed to parse energy factor registry: %s", e)
            raise ConfigurationError(
                f"Failed to parse energy factor registry: {e}",
                context={"path": str(self.registry_path)},
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get('energy'), dict):
            raise ConfigurationError(
                "Energy factor registry has no 'energy' section",
                context={"path": str(self.registry_path)},
            )
        return data

    def _resolve_factors(self, data: Dict[str, Any]) -> EnergyFactors:
        energy = data['energy']
        values: Dict[str, float] = {}
        units: Dict[str, str] = {}

        for factor_id in _REQUIRED_ENERGY_FACTORS:
            entry = energy.get(factor_id)
            if not isinstance(entry, dict):
                raise ConfigurationError(
                    f"Energy factor not found: {factor_id}",
                    context={"available": sorted(energy)},
                )
            for key, value in entry.items():
                if key.startswith(_FACTOR_PREFIX):
                    values[factor_id] = float(value)
                    units[factor_id] = key[len(_FACTOR_PREFIX):]
                    break
            else:
                raise ConfigurationError(
                    f"No factor value found for {factor_id}",
                    context={"keys": sorted(entry)},
                )

        spending: Dict[SpendingTier, float] = {}
        for label, value in (data.get('spending') or {}).items():
            try:
                spending[SpendingTier(label)] = float(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown spending tier in registry: {label}",
                    context={"valid": [t.value for t in SpendingTier]},
                ) from e

        conversions = data.get('conversions') or {}
        converter = UnitConverter({
            'energy': conversions.get('energy_to_kwh', UnitConverter.ENERGY_TO_KWH),
            'natural_gas': conversions.get('natural_gas_to_m3', UnitConverter.NATURAL_GAS_TO_M3),
        })

        return EnergyFactors(
            electricity=values['electricity'],
            natural_gas=values['natural_gas'],
            car=values['car'],
            flight=values['flight'],
            public_transit=values['public_transit'],
            spending=spending,
            units=units,
            converter=converter,
        )


_default_factors: Optional[EnergyFactors] = None
_factors_lock = threading.Lock()


def get_energy_factors() -> EnergyFactors:
    """Return the factors of the configured registry, loading them once."""
    global _default_factors
    if _default_factors is None:
        with _factors_lock:
            if _default_factors is None:
                _default_factors = EnergyFactorRegistry().factors
    return _default_factors


def reset_energy_factors() -> None:
    """Drop the cached factors (after a config change, or in tests)."""
    global _default_factors
    with _factors_lock:
        _default_factors = None


__all__ = [
    "EnergyFactors",
    "EnergyFactorRegistry",
    "get_energy_factors",
    "reset_energy_factors",
]
