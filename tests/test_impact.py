from __future__ import annotations

from datetime import date, timedelta

import pytest

from models.errors import InvalidArgument
from models.records import (
    ConsumptionRecord,
    DateRange,
    DeviceDescriptor,
    DeviceType,
    DisposalMethod,
    Granularity,
)
from services.aggregator import Aggregator
from services.conversions import ImpactFactors
from services.impact import (
    ImpactService,
    baseline_range,
    compare_impact,
    count_recycled_devices,
)


@pytest.fixture()
def service() -> ImpactService:
    return ImpactService(aggregator=Aggregator())


def _daily(device_id: str, start: date, end: date, kwh: float) -> list[ConsumptionRecord]:
    records = []
    day = start
    while day <= end:
        records.append(ConsumptionRecord(device_id=device_id, date=day, consumption_kwh=kwh))
        day += timedelta(days=1)
    return records


def test_baseline_range_has_equal_length() -> None:
    period = DateRange(date(2024, 3, 1), date(2024, 3, 15))

    baseline = baseline_range(period)

    assert baseline == DateRange(date(2024, 2, 15), date(2024, 2, 29))
    assert baseline.days == period.days


def test_baseline_range_before_the_first_calendar_day_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        baseline_range(DateRange(date(1, 1, 1), date(1, 1, 3)))


def test_impact_metrics_from_positive_saving(service: ImpactService) -> None:
    metrics = service.impact_metrics(42.0, devices_recycled=2)

    assert metrics.energy_saved_kwh == 42.0
    assert metrics.co2_reduction_kg == 21.0
    assert metrics.trees_equivalent == 1.0
    assert metrics.water_saved_liters == 84.0
    # 42 kWh -> 16.8, 2 devices -> 6, 21 kg -> 12.6
    assert metrics.sustainability_score == 35


def test_increased_consumption_keeps_sign_but_clamps_equivalents(service: ImpactService) -> None:
    metrics = service.impact_metrics(-10.0, devices_recycled=1)

    assert metrics.energy_saved_kwh == -10.0
    assert metrics.co2_reduction_kg == 0.0
    assert metrics.trees_equivalent == 0.0
    assert metrics.water_saved_liters == 0.0
    assert metrics.sustainability_score == 3


def test_calculate_impact_against_baseline(service: ImpactService) -> None:
    period = DateRange(date(2024, 3, 1), date(2024, 3, 10))
    current = _daily("d1", period.start_date, period.end_date, 1.0)
    baseline = _daily("d1", date(2024, 2, 20), date(2024, 2, 29), 3.0)
    devices = [
        DeviceDescriptor(
            id="old",
            type=DeviceType.monitor,
            disposal_method=DisposalMethod.recycling,
            disposed_on=date(2024, 3, 5),
        ),
        DeviceDescriptor(
            id="older",
            type=DeviceType.monitor,
            disposal_method=DisposalMethod.recycling,
            disposed_on=date(2024, 1, 5),
        ),
        DeviceDescriptor(
            id="given",
            disposal_method=DisposalMethod.donation,
            disposed_on=date(2024, 3, 6),
        ),
    ]

    metrics = service.calculate_impact(current, baseline, devices, period)

    assert metrics.energy_saved_kwh == 20.0
    assert metrics.co2_reduction_kg == 10.0
    assert metrics.devices_recycled == 1
    assert metrics.period == period
    # 20 kWh -> 8, 1 device -> 3, 10 kg -> 6
    assert metrics.sustainability_score == 17


def test_count_recycled_devices() -> None:
    devices = [
        DeviceDescriptor(id="a", disposal_method=DisposalMethod.recycling, disposed_on=date(2024, 1, 1)),
        DeviceDescriptor(id="b", disposal_method=DisposalMethod.recycling),
        DeviceDescriptor(id="c", disposal_method=DisposalMethod.proper_disposal, disposed_on=date(2024, 1, 1)),
        DeviceDescriptor(id="d"),
    ]

    assert count_recycled_devices(devices) == 2
    assert count_recycled_devices(devices, DateRange(date(2024, 1, 1), date(2024, 1, 31))) == 1


def test_compare_by_month(service: ImpactService) -> None:
    # Current window 2024-03-01..03-15 against 2024-02-15..02-29;
    # previous window 2024-02-01..02-29 against 2024-01-03..01-31.
    records = (
        _daily("d1", date(2024, 1, 1), date(2024, 1, 31), 2.0)
        + _daily("d1", date(2024, 2, 1), date(2024, 2, 29), 1.0)
        + _daily("d1", date(2024, 3, 1), date(2024, 3, 15), 0.5)
    )

    comparison = service.compare(records, [], Granularity.month, date(2024, 3, 15))

    assert comparison.current.period == DateRange(date(2024, 3, 1), date(2024, 3, 15))
    assert comparison.previous.period == DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert comparison.current.energy_saved_kwh == pytest.approx(15 * 1.0 - 15 * 0.5)
    assert comparison.previous.energy_saved_kwh == pytest.approx(29 * 2.0 - 29 * 1.0)
    assert comparison.percentage_change.energy_saved == pytest.approx((7.5 - 29.0) / 29.0 * 100)


def test_compare_with_zero_previous_uses_special_case(service: ImpactService) -> None:
    current = service.impact_metrics(10.0)
    previous = service.impact_metrics(0.0)

    comparison = compare_impact(current, previous)

    assert comparison.percentage_change.energy_saved == 100
    assert comparison.percentage_change.co2_reduction == 100
    assert comparison.percentage_change.sustainability_score == 100


def test_service_uses_injected_factors() -> None:
    service = ImpactService(aggregator=Aggregator(), factors=ImpactFactors(co2_per_kwh=1.0))

    assert service.impact_metrics(10.0).co2_reduction_kg == 10.0
