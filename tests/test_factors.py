# -*- coding: utf-8 -*-
"""Tests for the energy factor registry and unit conversion."""

import pytest
import yaml

from nprint.calculation.factors import (
    EnergyFactorRegistry,
    get_energy_factors,
    reset_energy_factors,
)
from nprint.calculation.unit_converter import UnitConverter
from nprint.config import NPrintConfig, set_config
from nprint.exceptions import ConfigurationError, UnitConversionError
from nprint.models import SpendingTier


def _write_registry(tmp_path, data):
    path = tmp_path / "factors.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestEnergyFactorRegistry:
    """Tests for the packaged and custom registries."""

    def test_packaged_factors(self):
        factors = EnergyFactorRegistry().factors
        assert factors.electricity == pytest.approx(0.000906564)
        assert factors.natural_gas == pytest.approx(0.000690972)
        assert factors.car == pytest.approx(0.00012297)
        assert factors.flight == pytest.approx(0.128411244)
        assert factors.public_transit == pytest.approx(0.000575729)

    def test_units_from_factor_keys(self):
        units = EnergyFactorRegistry().factors.units
        assert units == {
            "electricity": "kwh",
            "natural_gas": "m3",
            "car": "km",
            "flight": "hour",
            "public_transit": "km",
        }

    def test_spending(self):
        factors = EnergyFactorRegistry().factors
        assert factors.spending_for(SpendingTier.HIGH) == pytest.approx(3.82)
        assert factors.spending_for(SpendingTier.MINIMAL) == pytest.approx(1.27)
        assert factors.spending_for(SpendingTier.NONE) == 0.0

    def test_missing_registry(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            EnergyFactorRegistry(tmp_path / "missing.yaml")
        assert "not found" in exc_info.value.message

    def test_malformed_registry(self, tmp_path):
        path = tmp_path / "factors.yaml"
        path.write_text("energy: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            EnergyFactorRegistry(path)

    def test_registry_without_energy_section(self, tmp_path):
        with pytest.raises(ConfigurationError):
            EnergyFactorRegistry(_write_registry(tmp_path, {"spending": {"High": 1}}))

    def test_missing_factor(self, tmp_path):
        path = _write_registry(tmp_path, {
            "energy": {"electricity": {"factor_kg_n_per_kwh": 0.001}},
        })
        with pytest.raises(ConfigurationError) as exc_info:
            EnergyFactorRegistry(path)
        assert "natural_gas" in exc_info.value.message

    def test_unknown_spending_tier(self, tmp_path):
        energy = {
            name: {f"factor_kg_n_per_{unit}": 1.0}
            for name, unit in (
                ("electricity", "kwh"), ("natural_gas", "m3"), ("car", "km"),
                ("flight", "hour"), ("public_transit", "km"),
            )
        }
        path = _write_registry(tmp_path, {"energy": energy, "spending": {"Lavish": 9}})
        with pytest.raises(ConfigurationError):
            EnergyFactorRegistry(path)

    def test_configured_registry_path(self, tmp_path):
        energy = {
            name: {f"factor_kg_n_per_{unit}": 2.0}
            for name, unit in (
                ("electricity", "kwh"), ("natural_gas", "m3"), ("car", "km"),
                ("flight", "hour"), ("public_transit", "km"),
            )
        }
        set_config(NPrintConfig(factor_registry_path=_write_registry(tmp_path, {"energy": energy})))
        reset_energy_factors()

        factors = get_energy_factors()
        assert factors.car == 2.0
        assert factors.spending_for(SpendingTier.HIGH) == 0.0
        assert get_energy_factors() is factors


class TestUnitConverter:
    """Tests for UnitConverter."""

    def test_terajoules_to_kwh(self):
        assert UnitConverter().convert(2, "TJ", "kWh") == pytest.approx(555556)

    def test_terajoules_of_gas_to_m3(self):
        assert UnitConverter().convert(1, "tj", "m3") == pytest.approx(28428)

    def test_same_unit(self):
        assert UnitConverter().convert(3.5, "kwh", "KWH") == 3.5

    def test_kwh_back_to_terajoules(self):
        assert UnitConverter().convert(555556, "kwh", "tj") == pytest.approx(2)

    def test_unknown_unit(self):
        with pytest.raises(UnitConversionError) as exc_info:
            UnitConverter().convert(1, "therm", "kwh")
        assert exc_info.value.context["unit"] == "therm"

    def test_incompatible_units(self):
        with pytest.raises(UnitConversionError):
            UnitConverter().convert(1, "m3", "kwh")

    def test_custom_tables(self):
        converter = UnitConverter({"energy": {"KWH": 1, "TJ": 277778}})
        assert converter.convert(1, "tj", "kwh") == pytest.approx(277778)
