from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from services.conversions import (
    CO2_KG_PER_KWH,
    TREE_CO2_ABSORPTION_KG_PER_YEAR,
    WATER_LITERS_PER_KWH,
    ImpactFactors,
)

_LOG_LEVEL_ENV = "LOG_LEVEL"
_TOP_DEVICES_ENV = "TOP_DEVICES_LIMIT"
_CO2_PER_KWH_ENV = "IMPACT_CO2_PER_KWH"
_TREE_ABSORPTION_ENV = "IMPACT_TREE_ABSORPTION_KG_PER_YEAR"
_WATER_PER_KWH_ENV = "IMPACT_WATER_LITERS_PER_KWH"


@dataclass(frozen=True)
class Settings:
    log_level: str
    top_devices_limit: int
    impact_factors: ImpactFactors


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        log_level=_read_log_level("INFO"),
        top_devices_limit=_read_positive_int(_TOP_DEVICES_ENV, 5),
        impact_factors=ImpactFactors(
            co2_per_kwh=_read_positive_float(_CO2_PER_KWH_ENV, CO2_KG_PER_KWH),
            tree_absorption_kg_per_year=_read_positive_float(
                _TREE_ABSORPTION_ENV, TREE_CO2_ABSORPTION_KG_PER_YEAR
            ),
            water_liters_per_kwh=_read_positive_float(_WATER_PER_KWH_ENV, WATER_LITERS_PER_KWH),
        ),
    )
