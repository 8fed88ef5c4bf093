"""Unit tests for the constant-factor converters."""

from __future__ import annotations

import pytest

from models.errors import InvalidArgument
from services.conversions import (
    CO2_KG_PER_KWH,
    DEFAULT_FACTORS,
    TREE_CO2_ABSORPTION_KG_PER_YEAR,
    WATER_LITERS_PER_KWH,
    ImpactFactors,
    calculate_daily_consumption,
    calculate_energy_cost,
    calculate_energy_saved,
    calculate_monthly_consumption,
    calculate_yearly_consumption,
    co2_kg_to_trees,
    estimate_device_consumption,
    estimate_device_cost,
    kwh_to_co2_kg,
    kwh_to_water_liters,
)


@pytest.mark.parametrize(
    ("watts", "hours"),
    [(0.0, 0.0), (100.0, 8.0), (60.0, 24.0), (1500.0, 0.5), (3.3, 7.7)],
)
def test_daily_consumption_is_linear(watts: float, hours: float) -> None:
    assert calculate_daily_consumption(watts, hours) == watts * hours / 1000


def test_daily_consumption_rejects_hours_over_a_day() -> None:
    with pytest.raises(InvalidArgument):
        calculate_daily_consumption(100.0, 24.0001)


def test_daily_consumption_rejects_negative_watts() -> None:
    with pytest.raises(InvalidArgument):
        calculate_daily_consumption(-1.0, 1.0)


def test_daily_consumption_rejects_negative_hours() -> None:
    with pytest.raises(InvalidArgument):
        calculate_daily_consumption(100.0, -0.5)


def test_invalid_argument_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        calculate_daily_consumption(-1.0, 1.0)


def test_period_projections() -> None:
    assert calculate_monthly_consumption(2.0) == 60.0
    assert calculate_monthly_consumption(2.0, days=31) == 62.0
    assert calculate_yearly_consumption(2.0) == 730.0
    assert calculate_energy_cost(10.0, 0.25) == 2.5

    estimate = estimate_device_consumption(100.0, 10.0)
    assert estimate.daily_kwh == 1.0
    assert estimate.monthly_kwh == 30.0
    assert estimate.yearly_kwh == 365.0


@pytest.mark.parametrize(
    "call",
    [
        lambda: calculate_monthly_consumption(-1.0),
        lambda: calculate_yearly_consumption(-1.0),
        lambda: calculate_energy_cost(1.0, -0.1),
        lambda: calculate_energy_saved(-1.0, 2.0),
        lambda: kwh_to_co2_kg(-0.1),
        lambda: co2_kg_to_trees(-0.1),
        lambda: kwh_to_water_liters(-0.1),
    ],
)
def test_negative_magnitudes_are_rejected(call) -> None:
    with pytest.raises(InvalidArgument):
        call()


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
@pytest.mark.parametrize(
    "call",
    [
        lambda bad: calculate_daily_consumption(100.0, bad),
        lambda bad: calculate_daily_consumption(bad, 1.0),
        lambda bad: calculate_monthly_consumption(bad),
        lambda bad: calculate_yearly_consumption(bad),
        lambda bad: calculate_energy_cost(1.0, bad),
        lambda bad: calculate_energy_saved(bad, 1.0),
        lambda bad: kwh_to_co2_kg(bad),
        lambda bad: co2_kg_to_trees(bad),
        lambda bad: kwh_to_water_liters(bad),
        lambda bad: estimate_device_consumption(bad, 1.0),
    ],
)
def test_non_finite_inputs_are_rejected(call, bad: float) -> None:
    with pytest.raises(InvalidArgument, match="finite"):
        call(bad)


def test_results_too_large_for_a_float_are_rejected() -> None:
    with pytest.raises(InvalidArgument, match="too large"):
        calculate_yearly_consumption(1e307)
    with pytest.raises(InvalidArgument, match="too large"):
        calculate_energy_cost(1e200, 1e200)


def test_estimate_device_cost() -> None:
    cost = estimate_device_cost(estimate_device_consumption(100.0, 10.0), 0.25)

    assert cost.rate_per_kwh == 0.25
    assert cost.daily == 0.25
    assert cost.monthly == 7.5
    assert cost.yearly == 91.25


def test_energy_saved_is_signed() -> None:
    assert calculate_energy_saved(current_kwh=30.0, baseline_kwh=50.0) == 20.0
    assert calculate_energy_saved(current_kwh=50.0, baseline_kwh=30.0) == -20.0


def test_environmental_equivalents_use_default_factors() -> None:
    assert kwh_to_co2_kg(10.0) == 5.0
    assert co2_kg_to_trees(42.0) == 2.0
    assert kwh_to_water_liters(10.0) == 20.0


def test_default_factors_match_documented_values() -> None:
    assert CO2_KG_PER_KWH == 0.5
    assert TREE_CO2_ABSORPTION_KG_PER_YEAR == 21
    assert WATER_LITERS_PER_KWH == 2
    assert DEFAULT_FACTORS.energy_weight_cap == 40
    assert DEFAULT_FACTORS.device_weight_cap == 30
    assert DEFAULT_FACTORS.co2_weight_cap == 30


def test_custom_factors_flow_through_conversions() -> None:
    factors = ImpactFactors(co2_per_kwh=0.25, tree_absorption_kg_per_year=10.0, water_liters_per_kwh=3.0)

    assert kwh_to_co2_kg(8.0, factors) == 2.0
    assert co2_kg_to_trees(5.0, factors) == 0.5
    assert kwh_to_water_liters(2.0, factors) == 6.0


def test_factors_reject_caps_not_summing_to_max_score() -> None:
    with pytest.raises(InvalidArgument):
        ImpactFactors(energy_weight_cap=50.0)


def test_factors_reject_non_positive_conversion() -> None:
    with pytest.raises(InvalidArgument):
        ImpactFactors(tree_absorption_kg_per_year=0.0)


@pytest.mark.parametrize("field", ["co2_per_kwh", "energy_target_kwh", "energy_weight_cap"])
def test_factors_reject_non_finite_values(field: str) -> None:
    with pytest.raises(InvalidArgument):
        ImpactFactors(**{field: float("inf")})
