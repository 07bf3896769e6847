# -*- coding: utf-8 -*-
"""Tests for the energy pass calculator."""

import pytest

from nprint.calculation.energy_pass import (
    average_energy_aggregate,
    electricity_factor,
    find_energy_row,
    run_energy_pass,
    top_down_share,
)
from nprint.models import EnergyInputs, SpendingTier
from nprint.normalizer import TableName

TJ_TO_KWH = 277778
TJ_TO_M3 = 28428
DEFAULT_ELEC = 0.000906564
GAS = 0.000690972


@pytest.fixture
def energy_rows(reference_tables):
    return reference_tables[TableName.COUNTRY_ENERGY_PROFILE]


@pytest.fixture
def testland(energy_rows):
    return find_energy_row(energy_rows, "Testland")


class TestFindEnergyRow:
    def test_finds_by_normalized_name(self, energy_rows):
        assert find_energy_row(energy_rows, " otherland ")["code"] == "OTH"

    def test_missing_country(self, energy_rows):
        assert find_energy_row(energy_rows, "Atlantis") is None


class TestElectricityFactor:
    """Country renewables factor replaces the global default when positive."""

    def test_default_without_renewables(self, testland, factors):
        assert electricity_factor(testland, factors) == pytest.approx(DEFAULT_ELEC)

    def test_default_without_row(self, factors):
        assert electricity_factor(None, factors) == pytest.approx(DEFAULT_ELEC)

    def test_country_factor(self, energy_rows, factors):
        row = find_energy_row(energy_rows, "Otherland")
        assert electricity_factor(row, factors) == pytest.approx(0.0005)

    def test_non_positive_renewables_ignored(self, factors):
        assert electricity_factor({"renewables": "-1"}, factors) == pytest.approx(DEFAULT_ELEC)
        assert electricity_factor({"renewables": "n/a"}, factors) == pytest.approx(DEFAULT_ELEC)


class TestUserComponents:
    """Tests for the seven user energy components."""

    def test_scenario_c_electricity(self, factors):
        inputs = EnergyInputs(electricity_kwh_per_month=300, household_size=3)
        result = run_energy_pass(inputs, None, factors)
        assert result.breakdown.elec == pytest.approx(1.0878768)
        assert result.total == pytest.approx(1.09)

    def test_all_components(self, factors):
        inputs = EnergyInputs(
            electricity_kwh_per_month=100,
            natural_gas_m3_per_month=50,
            household_size=2,
            flying_hours_per_year=10,
            public_transit_km_per_week=20,
            car_km_per_week=100,
            spending=SpendingTier.MODERATE,
        )
        b = run_energy_pass(inputs, None, factors).breakdown

        assert b.elec == pytest.approx(100 * 12 * DEFAULT_ELEC / 2)
        assert b.ng == pytest.approx(50 * 12 * GAS / 2)
        assert b.flight == pytest.approx(10 * 0.128411244)
        assert b.car == pytest.approx(100 * 52 * 0.00012297)
        assert b.public_transit == pytest.approx(20 * 52 * 0.000575729)
        assert b.spending == pytest.approx(2.54)
        assert b.top_down == 0.0

    @pytest.mark.parametrize(
        "tier,expected",
        [
            (SpendingTier.HIGH, 3.82),
            (SpendingTier.MODERATE, 2.54),
            (SpendingTier.MINIMAL, 1.27),
            (SpendingTier.NONE, 0.0),
        ],
    )
    def test_spending_tiers(self, factors, tier, expected):
        result = run_energy_pass(EnergyInputs(spending=tier), None, factors)
        assert result.breakdown.spending == pytest.approx(expected)

    @pytest.mark.parametrize("household", [None, 0, -2, 0.5])
    def test_household_size_floored_at_one(self, factors, household):
        inputs = EnergyInputs(electricity_kwh_per_month=100, household_size=household)
        result = run_energy_pass(inputs, None, factors)
        assert result.breakdown.elec == pytest.approx(100 * 12 * DEFAULT_ELEC)

    def test_blank_and_text_inputs(self, factors):
        inputs = EnergyInputs(electricity_kwh_per_month="", car_km_per_week="12,5 km")
        b = run_energy_pass(inputs, None, factors).breakdown
        assert b.elec == 0.0
        assert b.car == pytest.approx(12.5 * 52 * 0.00012297)

    def test_non_finite_inputs_count_as_zero(self, factors):
        inputs = EnergyInputs(flying_hours_per_year=float("nan"), car_km_per_week=float("inf"))
        result = run_energy_pass(inputs, None, factors)
        assert result.breakdown.flight == 0.0
        assert result.breakdown.car == 0.0
        assert result.total == 0.0

    def test_country_factor_applies_to_user_electricity(self, energy_rows, factors):
        row = find_energy_row(energy_rows, "Otherland")
        result = run_energy_pass(EnergyInputs(electricity_kwh_per_month=100), row, factors)
        assert result.breakdown.elec == pytest.approx(100 * 12 * 0.0005)
        assert result.electricity_factor == pytest.approx(0.0005)


class TestCountryFigures:
    """Top-down share and the country-average aggregate."""

    def test_top_down(self, testland, factors):
        expected = (2 * TJ_TO_KWH * DEFAULT_ELEC + 1 * TJ_TO_M3 * GAS) / 1000
        assert top_down_share(testland, factors, DEFAULT_ELEC) == pytest.approx(expected)

    def test_top_down_clamps_negative_rest(self, energy_rows, factors):
        row = find_energy_row(energy_rows, "Otherland")
        assert top_down_share(row, factors, 0.0005) == 0.0

    def test_aggregate(self, testland, factors):
        ng_tj = 1 + 0 + 0 + 2 + 0
        elec_tj = 0 + 0 + 1 + 3 + 0
        expected = (ng_tj * TJ_TO_M3 * GAS + elec_tj * TJ_TO_KWH * DEFAULT_ELEC) / 1000
        assert average_energy_aggregate(testland, factors, DEFAULT_ELEC) == pytest.approx(expected)

    def test_population_floored_at_one(self, factors):
        row = {"population": "0", "ng_households": "1"}
        assert average_energy_aggregate(row, factors, DEFAULT_ELEC) == pytest.approx(TJ_TO_M3 * GAS)

    def test_scenario_d_no_energy_row(self, factors):
        inputs = EnergyInputs(electricity_kwh_per_month=300, household_size=3)
        result = run_energy_pass(inputs, None, factors)

        assert result.breakdown.top_down == 0.0
        assert result.average_aggregate == 0.0
        assert result.breakdown.elec == pytest.approx(1.0878768)
        assert not result.has_country_row

    def test_top_down_included_in_user_total(self, testland, factors):
        result = run_energy_pass(EnergyInputs(), testland, factors)
        assert result.breakdown.top_down > 0
        assert result.total == pytest.approx(round(result.breakdown.top_down, 2), abs=0.005)
