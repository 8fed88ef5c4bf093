"""Environmental impact metrics and period-over-period comparison."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Union

from models.errors import InvalidArgument
from models.impact import ImpactComparison, ImpactMetrics, PercentageChange
from models.records import (
    ConsumptionRecord,
    DateRange,
    DeviceDescriptor,
    DisposalMethod,
    Granularity,
)
from services.aggregator import Aggregator, sum_kwh
from services.conversions import (
    DEFAULT_FACTORS,
    ImpactFactors,
    calculate_energy_saved,
    co2_kg_to_trees,
    kwh_to_co2_kg,
    kwh_to_water_liters,
)
from services.periods import resolve_comparison_periods
from services.scoring import sustainability_score
from services.summary import percentage_change
from settings import get_settings

logger = logging.getLogger(__name__)


def baseline_range(period: DateRange) -> DateRange:
    """Window of the same length that ends the day before ``period``."""
    try:
        end = period.start_date - timedelta(days=1)
        return DateRange(end - timedelta(days=period.days - 1), end)
    except OverflowError as exc:
        raise InvalidArgument(
            f"No baseline window fits before {period.start_date.isoformat()}."
        ) from exc


def count_recycled_devices(
    devices: Iterable[DeviceDescriptor],
    period: Optional[DateRange] = None,
) -> int:
    """Devices disposed of by recycling, optionally only within ``period``."""
    count = 0
    for device in devices:
        if device.disposal_method != DisposalMethod.recycling:
            continue
        if period is not None and (device.disposed_on is None or device.disposed_on not in period):
            continue
        count += 1
    return count


class ImpactService:
    """Turns consumption totals into environmental equivalents and a score."""

    def __init__(self, aggregator: Aggregator, factors: ImpactFactors = DEFAULT_FACTORS) -> None:
        self.aggregator = aggregator
        self.factors = factors

    def impact_metrics(
        self,
        energy_saved_kwh: float,
        devices_recycled: int = 0,
        period: Optional[DateRange] = None,
    ) -> ImpactMetrics:
        """Derive CO2, trees, water and score from a signed energy saving."""
        saved = max(0.0, energy_saved_kwh)
        co2_kg = kwh_to_co2_kg(saved, self.factors)
        return ImpactMetrics(
            energy_saved_kwh=energy_saved_kwh,
            co2_reduction_kg=co2_kg,
            trees_equivalent=co2_kg_to_trees(co2_kg, self.factors),
            water_saved_liters=kwh_to_water_liters(saved, self.factors),
            devices_recycled=devices_recycled,
            sustainability_score=sustainability_score(saved, devices_recycled, co2_kg, self.factors),
            period=period,
        )

    def calculate_impact(
        self,
        current_records: Sequence[ConsumptionRecord],
        baseline_records: Sequence[ConsumptionRecord],
        devices: Iterable[DeviceDescriptor],
        period: DateRange,
    ) -> ImpactMetrics:
        """Impact of ``period`` measured against an already-selected baseline."""
        current_total = sum_kwh(record.consumption_kwh for record in current_records)
        baseline_total = sum_kwh(record.consumption_kwh for record in baseline_records)
        energy_saved = calculate_energy_saved(current_total, baseline_total)
        return self.impact_metrics(
            energy_saved,
            devices_recycled=count_recycled_devices(devices, period),
            period=period,
        )

    def impact_for_period(
        self,
        records: Sequence[ConsumptionRecord],
        devices: Sequence[DeviceDescriptor],
        period: DateRange,
    ) -> ImpactMetrics:
        """Impact of ``period`` against the equally long window before it.

        ``records`` must cover both windows; anything outside them is ignored.
        """
        return self.calculate_impact(
            self.aggregator.filter_records(records, period),
            self.aggregator.filter_records(records, baseline_range(period)),
            devices,
            period,
        )

    def compare(
        self,
        records: Sequence[ConsumptionRecord],
        devices: Sequence[DeviceDescriptor],
        granularity: Union[Granularity, str] = Granularity.month,
        reference: Optional[date] = None,
    ) -> ImpactComparison:
        periods = resolve_comparison_periods(granularity, reference)
        current = self.impact_for_period(records, devices, periods.current)
        previous = self.impact_for_period(records, devices, periods.previous)
        logger.debug(
            "Compared impact periods",
            extra={
                "record_count": len(records),
                "period_start": periods.previous.start_date.isoformat(),
                "period_end": periods.current.end_date.isoformat(),
            },
        )
        return compare_impact(current, previous)


def compare_impact(current: ImpactMetrics, previous: ImpactMetrics) -> ImpactComparison:
    return ImpactComparison(
        current=current,
        previous=previous,
        percentage_change=PercentageChange(
            energy_saved=percentage_change(current.energy_saved_kwh, previous.energy_saved_kwh),
            co2_reduction=percentage_change(current.co2_reduction_kg, previous.co2_reduction_kg),
            sustainability_score=percentage_change(
                current.sustainability_score, previous.sustainability_score
            ),
        ),
    )


@lru_cache
def build_default_impact_service() -> ImpactService:
    """Factory that wires the service with factors from the environment."""
    return ImpactService(aggregator=Aggregator(), factors=get_settings().impact_factors)
