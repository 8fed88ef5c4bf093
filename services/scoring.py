"""Composite sustainability score."""

from __future__ import annotations

import math

from models.errors import InvalidArgument
from services.conversions import DEFAULT_FACTORS, MAX_SUSTAINABILITY_SCORE, ImpactFactors


def _capped(value: float, target: float, cap: float) -> float:
    return min(value / target * cap, cap)


def sustainability_score(
    energy_saved_kwh: float,
    devices_recycled: int,
    co2_reduction_kg: float,
    factors: ImpactFactors = DEFAULT_FACTORS,
) -> int:
    """Score 0-100 from independently capped sub-scores.

    With the default factors, 100 kWh saved earns the full 40 energy points,
    10 recycled devices the full 30 device points and 50 kg of CO2 the full
    30 CO2 points. Inputs must already be clamped to zero by the caller.
    """
    for name, value in (
        ("energy_saved_kwh", energy_saved_kwh),
        ("devices_recycled", devices_recycled),
        ("co2_reduction_kg", co2_reduction_kg),
    ):
        if not math.isfinite(value) or value < 0:
            raise InvalidArgument(f"{name} must be a finite non-negative number, got {value!r}")

    energy_score = _capped(energy_saved_kwh, factors.energy_target_kwh, factors.energy_weight_cap)
    device_score = _capped(devices_recycled, factors.devices_recycled_target, factors.device_weight_cap)
    co2_score = _capped(co2_reduction_kg, factors.co2_target_kg, factors.co2_weight_cap)

    total = min(energy_score + device_score + co2_score, MAX_SUSTAINABILITY_SCORE)
    # Round half up, unlike round().
    return int(math.floor(total + 0.5))
