"""Constant-factor unit conversions.

Factors are linear approximations, not fitted models:

    kWh      = watts * hours / 1000
    CO2 kg   = kWh * 0.5      (average grid emission factor)
    trees    = CO2 kg / 21    (kg absorbed by one tree per year)
    water L  = kWh * 2        (cooling water used by generation)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from models.errors import InvalidArgument

WATTS_PER_KILOWATT = 1000.0
MAX_DAILY_USAGE_HOURS = 24.0
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365

CO2_KG_PER_KWH = 0.5
TREE_CO2_ABSORPTION_KG_PER_YEAR = 21.0
WATER_LITERS_PER_KWH = 2.0

ENERGY_WEIGHT_CAP = 40.0
DEVICE_WEIGHT_CAP = 30.0
CO2_WEIGHT_CAP = 30.0
MAX_SUSTAINABILITY_SCORE = 100

ENERGY_TARGET_KWH = 100.0
DEVICES_RECYCLED_TARGET = 10.0
CO2_TARGET_KG = 50.0


@dataclass(frozen=True)
class ImpactFactors:
    """Tunable conversion factors and scoring weights."""

    co2_per_kwh: float = CO2_KG_PER_KWH
    tree_absorption_kg_per_year: float = TREE_CO2_ABSORPTION_KG_PER_YEAR
    water_liters_per_kwh: float = WATER_LITERS_PER_KWH
    energy_weight_cap: float = ENERGY_WEIGHT_CAP
    device_weight_cap: float = DEVICE_WEIGHT_CAP
    co2_weight_cap: float = CO2_WEIGHT_CAP
    energy_target_kwh: float = ENERGY_TARGET_KWH
    devices_recycled_target: float = DEVICES_RECYCLED_TARGET
    co2_target_kg: float = CO2_TARGET_KG

    def __post_init__(self) -> None:
        for name in (
            "co2_per_kwh",
            "tree_absorption_kg_per_year",
            "water_liters_per_kwh",
            "energy_target_kwh",
            "devices_recycled_target",
            "co2_target_kg",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or not value > 0:
                raise InvalidArgument(f"{name} must be positive, got {value!r}")
        caps = (self.energy_weight_cap, self.device_weight_cap, self.co2_weight_cap)
        if any(not math.isfinite(cap) or cap < 0 for cap in caps):
            raise InvalidArgument("Scoring weight caps must be non-negative.")
        if not math.isclose(sum(caps), MAX_SUSTAINABILITY_SCORE):
            raise InvalidArgument(
                f"Scoring weight caps must sum to {MAX_SUSTAINABILITY_SCORE}, got {sum(caps)!r}"
            )


DEFAULT_FACTORS = ImpactFactors()


@dataclass(frozen=True)
class DeviceEstimate:
    daily_kwh: float
    monthly_kwh: float
    yearly_kwh: float


@dataclass(frozen=True)
class DeviceCost:
    rate_per_kwh: float
    daily: float
    monthly: float
    yearly: float


def _require_non_negative(name: str, value: float) -> float:
    if not math.isfinite(value) or value < 0:
        raise InvalidArgument(f"{name} must be a finite non-negative number, got {value!r}")
    return value


def _representable(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise InvalidArgument(f"{name} is too large to represent.")
    return value


def calculate_daily_consumption(watts: float, hours: float) -> float:
    """Daily energy in kWh for a device drawing ``watts`` for ``hours`` a day."""
    _require_non_negative("watts", watts)
    _require_non_negative("hours", hours)
    if hours > MAX_DAILY_USAGE_HOURS:
        raise InvalidArgument(
            f"Daily usage hours cannot exceed {MAX_DAILY_USAGE_HOURS:g}, got {hours!r}"
        )
    return _representable("daily_kwh", watts * hours / WATTS_PER_KILOWATT)


def calculate_monthly_consumption(daily_kwh: float, days: int = DAYS_PER_MONTH) -> float:
    _require_non_negative("daily_kwh", daily_kwh)
    _require_non_negative("days", days)
    return _representable("monthly_kwh", daily_kwh * days)


def calculate_yearly_consumption(daily_kwh: float) -> float:
    _require_non_negative("daily_kwh", daily_kwh)
    return _representable("yearly_kwh", daily_kwh * DAYS_PER_YEAR)


def calculate_energy_cost(consumption_kwh: float, rate_per_kwh: float) -> float:
    _require_non_negative("consumption_kwh", consumption_kwh)
    _require_non_negative("rate_per_kwh", rate_per_kwh)
    return _representable("cost", consumption_kwh * rate_per_kwh)


def estimate_device_consumption(watts: float, hours: float) -> DeviceEstimate:
    """Project a device's draw onto daily, monthly and yearly totals."""
    daily = calculate_daily_consumption(watts, hours)
    return DeviceEstimate(
        daily_kwh=daily,
        monthly_kwh=calculate_monthly_consumption(daily),
        yearly_kwh=calculate_yearly_consumption(daily),
    )


def estimate_device_cost(estimate: DeviceEstimate, rate_per_kwh: float) -> DeviceCost:
    """Price an estimate at a flat ``rate_per_kwh`` in the caller's currency."""
    return DeviceCost(
        rate_per_kwh=rate_per_kwh,
        daily=calculate_energy_cost(estimate.daily_kwh, rate_per_kwh),
        monthly=calculate_energy_cost(estimate.monthly_kwh, rate_per_kwh),
        yearly=calculate_energy_cost(estimate.yearly_kwh, rate_per_kwh),
    )


def calculate_energy_saved(current_kwh: float, baseline_kwh: float) -> float:
    """Baseline minus current; negative when consumption went up."""
    _require_non_negative("current_kwh", current_kwh)
    _require_non_negative("baseline_kwh", baseline_kwh)
    return baseline_kwh - current_kwh


def kwh_to_co2_kg(energy_kwh: float, factors: ImpactFactors = DEFAULT_FACTORS) -> float:
    _require_non_negative("energy_kwh", energy_kwh)
    return _representable("co2_kg", energy_kwh * factors.co2_per_kwh)


def co2_kg_to_trees(co2_kg: float, factors: ImpactFactors = DEFAULT_FACTORS) -> float:
    _require_non_negative("co2_kg", co2_kg)
    return _representable("trees", co2_kg / factors.tree_absorption_kg_per_year)


def kwh_to_water_liters(energy_kwh: float, factors: ImpactFactors = DEFAULT_FACTORS) -> float:
    _require_non_negative("energy_kwh", energy_kwh)
    return _representable("water_liters", energy_kwh * factors.water_liters_per_kwh)
