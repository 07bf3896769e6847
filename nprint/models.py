# -*- coding: utf-8 -*-
"""
N-Print Data Models

Pydantic v2 data models and closed enumerations for the nitrogen-footprint
engine.

Enumerations:
    - IncomeTier: Canonical national income classifications
    - FoodBucket: Meat / dairy / plant reporting buckets
    - FoodCategory: The fixed food categories, each tagged with a bucket
    - SewageTreatment: Treatment levels with their nitrogen removal fraction
    - SpendingTier: Personal spending levels
    - EnergySector: Sectors of the country energy table
    - ChartSeries: Breakdown series available for charting
    - FailureReason: Why a calculation produced no result

Input Models:
    - EnergyInputs, UserInputs

Result Models:
    - FoodBreakdown, EnergyBreakdown, CalculationDetails
    - CalculationResult, CalculationFailure, ChartPoint
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# =============================================================================
# Enumerations
# =============================================================================


class IncomeTier(str, Enum):
    """Canonical income tiers.

    The values double as the production-factor column headers and the keys
    of the sewage-removal table.
    """

    HIGH = "High-income countries"
    UPPER_MIDDLE = "Upper-middle-income countries"
    LOWER_MIDDLE = "Lower-middle-income countries"
    LOW = "Low-income countries"

    @property
    def field_name(self) -> str:
        """Record field holding this tier's production factor."""
        return f"{self.name.lower()}_income"


class FoodBucket(str, Enum):
    """Mutually exclusive reporting buckets for food categories."""

    MEAT = "meat"
    DAIRY = "dairy"
    PLANT = "plant"


class FoodCategory(str, Enum):
    """Fixed food categories, each bound to exactly one bucket.

    Declaration order is the evaluation order of the food passes.
    """

    def __new__(cls, value: str, bucket: FoodBucket) -> FoodCategory:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.bucket = bucket
        return obj

    POULTRY = ("poultry", FoodBucket.MEAT)
    PORK = ("pork", FoodBucket.MEAT)
    BEEF = ("beef", FoodBucket.MEAT)
    FISH_AND_SEAFOOD = ("fish and seafood", FoodBucket.PLANT)
    MILK = ("milk", FoodBucket.DAIRY)
    CHEESE = ("cheese", FoodBucket.DAIRY)
    EGGS = ("eggs", FoodBucket.DAIRY)
    GRAINS_AND_CEREALS = ("grains and cereals", FoodBucket.PLANT)
    RICE = ("rice", FoodBucket.PLANT)
    VEGETABLES = ("vegetables", FoodBucket.PLANT)
    BEANS_AND_OTHER_LEGUMES = ("beans and other legumes", FoodBucket.PLANT)
    STARCHY_ROOTS = ("starchy roots", FoodBucket.PLANT)
    FRUIT = ("fruit", FoodBucket.PLANT)
    MUTTON_AND_GOAT_MEAT = ("mutton and goat meat", FoodBucket.MEAT)
    OFFALS = ("offals", FoodBucket.MEAT)


class SewageTreatment(str, Enum):
    """Household sewage treatment level and its nitrogen removal fraction."""

    def __new__(cls, value: str, removal_fraction: float) -> SewageTreatment:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.removal_fraction = removal_fraction
        return obj

    UNKNOWN = ("unknown", 0.0)
    NONE = ("none", 0.0)
    PRIMARY = ("primary", 0.05)
    SECONDARY = ("secondary", 0.2)
    TERTIARY = ("tertiary", 0.9)


class SpendingTier(str, Enum):
    """Personal spending level on goods and services."""

    NONE = "None"
    MINIMAL = "Minimal"
    MODERATE = "Moderate"
    HIGH = "High"


class EnergySector(str, Enum):
    """Final-consumption sectors of the country energy table.

    Declaration order matches the column order of the source table.
    """

    def __new__(cls, value: str, label: str) -> EnergySector:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.label = label
        return obj

    ROAD = ("road", "Road")
    OTHER_TRANSPORT = ("other_transport", "Other transport")
    COMMERCE_PUBLIC_SERVICES = (
        "commerce_public_services", "Commerce and public services",
    )
    HOUSEHOLDS = ("households", "Households")
    OTHER_CONSUMERS = ("other_consumers", "Other consumers")
    REST = ("rest", "Rest")


# Sectors attributed to the average person; REST feeds the top-down share.
ITEMIZED_SECTORS: Tuple[EnergySector, ...] = (
    EnergySector.HOUSEHOLDS,
    EnergySector.ROAD,
    EnergySector.OTHER_TRANSPORT,
    EnergySector.COMMERCE_PUBLIC_SERVICES,
    EnergySector.OTHER_CONSUMERS,
)


class ChartSeries(str, Enum):
    """Breakdown series that can be turned into chart points."""

    FOOD = "food"
    AVERAGE_FOOD = "average_food"
    ENERGY = "energy"


class FailureReason(str, Enum):
    """Why ``calculate`` returned no result."""

    NO_COUNTRY = "no_country"
    TABLES_NOT_LOADED = "tables_not_loaded"
    CALCULATION_ERROR = "calculation_error"


# =============================================================================
# Input Models
# =============================================================================


class EnergyInputs(BaseModel):
    """Household energy, travel and spending inputs.

    Numeric fields accept numbers or spreadsheet-style strings; blank or
    absent values count as zero in the energy pass.

    Attributes:
        electricity_kwh_per_month: Household electricity use.
        natural_gas_m3_per_month: Household natural gas use.
        household_size: People sharing the household (floored at 1).
        flying_hours_per_year: Hours spent flying per year.
        public_transit_km_per_week: Distance by public transit.
        car_km_per_week: Distance by car.
        spending: Personal spending tier.
    """

    electricity_kwh_per_month: Optional[float] = Field(
        None, description="Household electricity (kWh/month)",
    )
    natural_gas_m3_per_month: Optional[float] = Field(
        None, description="Household natural gas (m3/month)",
    )
    household_size: Optional[float] = Field(
        None, description="Number of people in the household",
    )
    flying_hours_per_year: Optional[float] = Field(
        None, description="Flying hours per year",
    )
    public_transit_km_per_week: Optional[float] = Field(
        None, description="Public transit distance (km/week)",
    )
    car_km_per_week: Optional[float] = Field(
        None, description="Car travel distance (km/week)",
    )
    spending: SpendingTier = Field(
        default=SpendingTier.NONE, description="Personal spending tier",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator(
        "electricity_kwh_per_month",
        "natural_gas_m3_per_month",
        "household_size",
        "flying_hours_per_year",
        "public_transit_km_per_week",
        "car_km_per_week",
        mode="before",
    )
    @classmethod
    def parse_text_amounts(cls, v: Any) -> Any:
        """Parse text amounts the way reference-table cells are parsed."""
        from nprint.normalizer.cell_parser import parse_number

        if isinstance(v, str):
            return parse_number(v) if v.strip() else None
        return v

    @field_validator("spending", mode="before")
    @classmethod
    def normalize_spending(cls, v: Any) -> Any:
        """Accept case-insensitive spending labels; anything else is no spending."""
        if isinstance(v, SpendingTier):
            return v
        if v is None or (isinstance(v, str) and not v.strip()):
            return SpendingTier.NONE
        if isinstance(v, str):
            for tier in SpendingTier:
                if tier.value.lower() == v.strip().lower():
                    return tier
        logger.warning("Unknown spending level %r, counting it as none", v)
        return SpendingTier.NONE


class UserInputs(BaseModel):
    """Everything a person enters for the user pass.

    Attributes:
        food_servings: Weekly servings per food category. Missing categories
            count as zero, negatives clamp to zero and fractions truncate.
        energy: Energy, travel and spending inputs.
    """

    food_servings: Dict[FoodCategory, int] = Field(
        default_factory=dict,
        description="Weekly servings per food category",
    )
    energy: EnergyInputs = Field(
        default_factory=EnergyInputs,
        description="Energy, travel and spending inputs",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("food_servings", mode="before")
    @classmethod
    def normalize_servings(cls, v: Any) -> Any:
        """Lower-case category keys and coerce counts to non-negative ints."""
        # Imported here to avoid a circular import with nprint.normalizer
        from nprint.normalizer.cell_parser import parse_number

        if v is None:
            return {}
        if not isinstance(v, dict):
            return v
        normalized: Dict[Any, int] = {}
        for key, count in v.items():
            if isinstance(key, str) and not isinstance(key, FoodCategory):
                key = key.strip().lower()
            normalized[key] = max(0, int(parse_number(count)))
        return normalized

    def servings_for(self, category: FoodCategory) -> int:
        """Weekly servings entered for ``category`` (0 if absent)."""
        return self.food_servings.get(category, 0)


# =============================================================================
# Result Models
# =============================================================================


class FoodBreakdown(BaseModel):
    """Food nitrogen loss split into buckets (kg N/yr)."""

    meat: float = 0.0
    dairy: float = 0.0
    plant: float = 0.0

    model_config = {"frozen": True}

    @property
    def total(self) -> float:
        return self.meat + self.dairy + self.plant

    def get(self, bucket: FoodBucket) -> float:
        return getattr(self, bucket.value)


class EnergyBreakdown(BaseModel):
    """Energy nitrogen loss by component (kg N/yr)."""

    elec: float = 0.0
    ng: float = 0.0
    flight: float = 0.0
    car: float = 0.0
    public_transit: float = 0.0
    spending: float = 0.0
    top_down: float = 0.0

    model_config = {"frozen": True}


class CalculationDetails(BaseModel):
    """Sub-totals and resolved lookups behind a result."""

    total_user_food: float = 0.0
    total_user_energy: float = 0.0
    total_average_food: float = 0.0
    total_average_energy: float = 0.0
    iso3: Optional[str] = None
    income_tier: Optional[str] = None
    user_removal_rate: float = 0.0
    average_removal_rate: float = 0.0
    electricity_factor: float = 0.0

    model_config = {"frozen": True}


class CalculationResult(BaseModel):
    """Immutable outcome of one footprint calculation.

    Attributes:
        country: Country the calculation was run for.
        sewage_treatment: Treatment level selected by the user.
        total_n: User footprint (kg N/yr).
        average_n: Country-average footprint (kg N/yr).
        food_breakdown: User food loss by bucket.
        average_food_breakdown: Country-average food loss by bucket.
        energy_breakdown: User energy loss by component.
        average_energy_breakdown: Country-average energy breakdown; only
            ``top_down`` is populated.
        details: Sub-totals used by the breakdowns.
        warnings: Degradations met along the way (missing tiers, rows).
        provenance_hash: SHA-256 over inputs and outputs.
    """

    country: str
    sewage_treatment: SewageTreatment
    total_n: float
    average_n: float
    food_breakdown: FoodBreakdown
    average_food_breakdown: FoodBreakdown
    energy_breakdown: EnergyBreakdown
    average_energy_breakdown: EnergyBreakdown
    details: CalculationDetails
    warnings: Tuple[str, ...] = ()
    provenance_hash: str = ""

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")


class CalculationFailure(BaseModel):
    """No result: a precondition failed or the computation faulted."""

    reason: FailureReason
    message: str
    country: str = ""

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ChartPoint(BaseModel):
    """One bar of a breakdown chart."""

    label: str
    value: float
    percent_of_total: float

    model_config = {"frozen": True}


__all__ = [
    "IncomeTier",
    "FoodBucket",
    "FoodCategory",
    "SewageTreatment",
    "SpendingTier",
    "EnergySector",
    "ITEMIZED_SECTORS",
    "ChartSeries",
    "FailureReason",
    "EnergyInputs",
    "UserInputs",
    "FoodBreakdown",
    "EnergyBreakdown",
    "CalculationDetails",
    "CalculationResult",
    "CalculationFailure",
    "ChartPoint",
]
