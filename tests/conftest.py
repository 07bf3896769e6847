# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Dict, List

import pytest

from nprint.calculation.factors import get_energy_factors, reset_energy_factors
from nprint.config import reset_config
from nprint.models import UserInputs
from nprint.snapshot import ReferenceTables

ENERGY_HEADERS = [
    "Country", "code", "pop",
    "Data source (NG)", "Final consumption (NG)", "Road (NG)", "Other transport (NG)",
    "Commerce and public services (NG)", "Households (NG)", "Other consumers (NG)", "Rest (NG)",
    "Data source (Elec)", "Final consumption (Elec)", "Road (Elec)", "Other transport (Elec)",
    "Commerce and public services (Elec)", "Households (Elec)", "Other consumers (Elec)", "Rest (Elec)",
    "Flights per capita", "flight time (hours)", "renewables",
]


def _raw_tables() -> Dict[str, List[List[Any]]]:
    return {
        "final_VNFs": [
            ["Category", "High-income countries", "Upper-middle-income countries",
             "Lower-middle-income countries", "Low-income countries"],
            ["Beef", "1,5", "1.2", "1.0", "0.8"],
            ["milk", "0.8", "0.6", "0.5", "0.4"],
            ["rice", "0.3", "0.3", "0.3", "0.3"],
        ],
        "other_attributes": [
            ["name", "Food waste %", "Fossil fuel (kg N/year)",
             "N content (kg N/kg food)", "Serving size"],
            ["beef", "0", "0.2", "0.3", "0.1"],
            ["milk", "10", "0.05", "0,005", "0.25"],
            ["rice", "0.2", "0.01", "0.012", "0.075"],
        ],
        "sewage_ratings": [
            ["Income", "N_removal_rating"],
            ["High-income countries", "0,6"],
            ["Low-income countries", "0"],
            ["High income", "0.9"],
        ],
        "food_country_data": [
            ["iso_a3", "Area", "Category", "kg/cap/year"],
            ["tst", "Testland", "beef", "5,2"],
            ["TST", "Testland", "milk", "100"],
            ["TST", "Testland", "rice", "12"],
            ["TST", "Testland", "chocolate", "40"],
            ["TUV", "Tuvalu", "rice", "10"],
        ],
        "GDP": [
            ["Country", "iso_a3", "Income"],
            ["Testland", "TST", "High income"],
            ["Otherland", "oth", "Low income"],
        ],
        "country_energy_consumption_data_final": [
            ENERGY_HEADERS,
            ["Testland", "TST", "1000", "IEA", "10", "1", "0", "0", "2", "0", "1",
             "IEA", "20", "0", "0", "1", "3", "0", "2", "0.5", "3", ""],
            ["Otherland", "OTH", "500", "", "", "0", "0", "0", "0", "0", "-5",
             "", "", "0", "0", "0", "0", "0", "0", "", "", "0,0005"],
            ["Nowhere", "NWH", "0", "", "", "", "", "", "", "", "",
             "", "", "", "", "", "", "", "", "", "", ""],
        ],
        "serving_sizes": [
            ["name", "Serving size"],
            ["rice", "0.075"],
            ["Beef", "0,1"],
            ["milk", "0.25"],
            ["unknown food", "1"],
        ],
    }


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Every test starts from environment-derived config and fresh factors."""
    reset_config()
    reset_energy_factors()
    yield
    reset_config()
    reset_energy_factors()


@pytest.fixture
def raw_tables():
    """Raw reference rows keyed by source sheet name."""
    return _raw_tables()


@pytest.fixture
def energy_headers():
    """Header row of the country energy profile sheet."""
    return list(ENERGY_HEADERS)


@pytest.fixture
def reference_tables(raw_tables):
    """Normalized snapshot of the raw reference rows."""
    return ReferenceTables.from_raw(raw_tables)


@pytest.fixture
def factors():
    """Energy factors of the packaged registry."""
    return get_energy_factors()


@pytest.fixture
def beef_inputs():
    """Two weekly servings of beef and nothing else."""
    return UserInputs(food_servings={"beef": 2})


@pytest.fixture
def tables_file(tmp_path, raw_tables):
    """Raw reference rows written to a JSON file."""
    path = tmp_path / "tables.json"
    path.write_text(json.dumps(raw_tables), encoding="utf-8")
    return path
