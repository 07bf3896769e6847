# -*- coding: utf-8 -*-
"""
Prometheus Metrics - N-Print calculation engine

Metrics:
    1. nprint_calculations_total (Counter, labels: outcome)
    2. nprint_calculation_duration_seconds (Histogram)
    3. nprint_header_mismatches_total (Counter, labels: table)
    4. nprint_degraded_lookups_total (Counter, labels: kind)
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# 1. Calculations by outcome (success, no_country, tables_not_loaded,
#    calculation_error)
calculations_total = Counter(
    "nprint_calculations_total",
    "Total footprint calculations by outcome",
    labelnames=["outcome"],
)

# 2. Duration of a full two-pass calculation
calculation_duration_seconds = Histogram(
    "nprint_calculation_duration_seconds",
    "Footprint calculation duration in seconds",
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5),
)

# 3. Header rows not matching their schema
header_mismatches_total = Counter(
    "nprint_header_mismatches_total",
    "Reference tables whose header row did not match the schema",
    labelnames=["table"],
)

# 4. Lookups that fell back to a zero default
degraded_lookups_total = Counter(
    "nprint_degraded_lookups_total",
    "Lookups resolved to a zero default (missing income tier, energy row)",
    labelnames=["kind"],
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def record_calculation(outcome: str, duration_seconds: float = 0.0) -> None:
    """Record a calculation outcome and, when it ran, its duration.

    Args:
        outcome: ``success`` or a failure reason value.
        duration_seconds: Wall-clock duration of the computation.
    """
    calculations_total.labels(outcome=outcome).inc()
    if duration_seconds > 0:
        calculation_duration_seconds.observe(duration_seconds)


def record_header_mismatch(table: str) -> None:
    """Record a header row that did not match its table schema."""
    header_mismatches_total.labels(table=table).inc()


def record_degraded_lookup(kind: str) -> None:
    """Record a lookup that defaulted to zero.

    Args:
        kind: ``income_tier`` or ``energy_profile``.
    """
    degraded_lookups_total.labels(kind=kind).inc()


__all__ = [
    "calculations_total",
    "calculation_duration_seconds",
    "header_mismatches_total",
    "degraded_lookups_total",
    "record_calculation",
    "record_header_mismatch",
    "record_degraded_lookup",
]
