# -*- coding: utf-8 -*-
"""
N-Print Configuration

Centralized configuration for the nitrogen-footprint engine covering:
- Energy factor registry location
- Reference-table header validation policy
- Countries hidden from the country list
- Logging level

All settings can be overridden via environment variables with the
``NPRINT_`` prefix (e.g. ``NPRINT_HEADER_POLICY=warn``).

Example:
    >>> from nprint.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.header_policy, cfg.log_level)
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "NPRINT_"

HEADER_POLICIES = ("strict", "warn")

DEFAULT_FACTOR_REGISTRY = Path(__file__).parent / "data" / "energy_factors.yaml"

# Territories present in the source tables without usable data.
DEFAULT_EXCLUDED_COUNTRIES: Tuple[str, ...] = (
    "China, Macao SAR",
    "Micronesia (Federated States of)",
    "Tuvalu",
)


# ---------------------------------------------------------------------------
# NPrintConfig
# ---------------------------------------------------------------------------


@dataclass
class NPrintConfig:
    """Complete configuration for the N-Print engine.

    Attributes:
        factor_registry_path: YAML file holding energy factors and unit
            conversions.
        header_policy: ``strict`` raises on a header row that does not match
            the table schema; ``warn`` logs and proceeds positionally.
        excluded_countries: Country names hidden from country listings.
            Environment override is ``;``-separated since names contain commas.
        log_level: Logging level used by the CLI.
    """

    factor_registry_path: Path = DEFAULT_FACTOR_REGISTRY
    header_policy: str = "strict"
    excluded_countries: Tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_EXCLUDED_COUNTRIES,
    )
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.header_policy not in HEADER_POLICIES:
            raise ValueError(
                f"header_policy must be one of {HEADER_POLICIES}, "
                f"got '{self.header_policy}'"
            )
        self.factor_registry_path = Path(self.factor_registry_path)
        self.excluded_countries = tuple(self.excluded_countries)

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> NPrintConfig:
        """Build an NPrintConfig from environment variables.

        Every field can be overridden via ``NPRINT_<FIELD_UPPER>``.
        Invalid values are logged and replaced by the default.

        Returns:
            Populated NPrintConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}")

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None or not val.strip():
                return default
            return val.strip()

        def _choice(name: str, default: str, choices: Tuple[str, ...]) -> str:
            val = _str(name, default).lower()
            if val not in choices:
                logger.warning(
                    "Invalid value for %s%s=%s, using default %s",
                    prefix, name, val, default,
                )
                return default
            return val

        def _list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
            val = _env(name)
            if val is None:
                return default
            return tuple(item.strip() for item in val.split(";") if item.strip())

        config = cls(
            factor_registry_path=Path(
                _str("FACTOR_REGISTRY_PATH", str(DEFAULT_FACTOR_REGISTRY))
            ),
            header_policy=_choice("HEADER_POLICY", "strict", HEADER_POLICIES),
            excluded_countries=_list(
                "EXCLUDED_COUNTRIES", DEFAULT_EXCLUDED_COUNTRIES,
            ),
            log_level=_str("LOG_LEVEL", "INFO").upper(),
        )

        logger.info(
            "NPrintConfig loaded: factor_registry=%s, header_policy=%s, "
            "excluded_countries=%d, log_level=%s",
            config.factor_registry_path,
            config.header_policy,
            len(config.excluded_countries),
            config.log_level,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[NPrintConfig] = None
_config_lock = threading.Lock()


def get_config() -> NPrintConfig:
    """Return the singleton NPrintConfig, creating from env if needed."""
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = NPrintConfig.from_env()
    return _config_instance


def set_config(config: NPrintConfig) -> None:
    """Replace the singleton NPrintConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("NPrintConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "NPrintConfig",
    "HEADER_POLICIES",
    "DEFAULT_EXCLUDED_COUNTRIES",
    "get_config",
    "set_config",
    "reset_config",
]
