"""Consumption summaries and breakdowns built from raw records."""

from __future__ import annotations

import logging
from datetime import date
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence

from models.errors import InvalidArgument
from models.records import ConsumptionRecord, DateRange, DeviceDescriptor, DeviceType
from models.summaries import (
    BreakdownEntry,
    ConsumptionTrend,
    PeriodSummary,
    TopConsumingDevice,
)
from services.aggregator import Aggregator, build_device_lookup, sum_kwh
from services.ranking import breakdown, top_n
from services.summary import SummaryCalculator

logger = logging.getLogger(__name__)

UNKNOWN_DEVICE_NAME = "Unknown Device"
DEFAULT_TOP_DEVICES = 5
# Longest window a trend is built for; bounds the size of the day series.
MAX_TREND_DAYS = 366


def trend_window(
    records: Sequence[ConsumptionRecord],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> DateRange:
    """Window for :meth:`ConsumptionService.trends` over a non-empty record set.

    Explicit bounds are used as given and missing ones come from the records.
    Without any bound the window ends at the latest record and covers at most
    ``MAX_TREND_DAYS`` days.
    """
    earliest = min(record.date for record in records)
    latest = max(record.date for record in records)
    if start_date is not None or end_date is not None:
        return DateRange(start_date or earliest, end_date or latest)
    first_ordinal = max(earliest.toordinal(), latest.toordinal() - MAX_TREND_DAYS + 1)
    return DateRange(date.fromordinal(first_ordinal), latest)


class ConsumptionService:
    """Runs the bucketing, summary and ranking steps over one record set."""

    def __init__(
        self,
        aggregator: Aggregator,
        calculator: SummaryCalculator,
    ) -> None:
        self.aggregator = aggregator
        self.calculator = calculator

    def summarize(
        self,
        records: Sequence[ConsumptionRecord],
        devices: Iterable[DeviceDescriptor],
        previous_records: Optional[Sequence[ConsumptionRecord]] = None,
    ) -> PeriodSummary:
        """Summarize ``records`` and compare them with ``previous_records``.

        An empty or missing previous set means there is no baseline and the
        comparison is reported as unchanged.
        """
        lookup = build_device_lookup(devices)
        by_type = self.aggregator.by_type(records, lookup)

        baseline: Optional[float] = None
        if previous_records:
            baseline = sum_kwh(record.consumption_kwh for record in previous_records)

        summary = self.calculator.summarize(
            by_day=self.aggregator.by_day(records),
            by_device=self.aggregator.by_device(records),
            by_type=by_type.totals,
            baseline_kwh=baseline,
            unattributed_records=by_type.unattributed_records,
        )
        logger.debug(
            "Summarized consumption",
            extra={
                "record_count": len(records),
                "device_count": len(lookup),
                "unattributed_count": by_type.unattributed_records,
            },
        )
        return summary

    def breakdown_by_type(
        self,
        records: Sequence[ConsumptionRecord],
        devices: Iterable[DeviceDescriptor],
    ) -> List[BreakdownEntry]:
        buckets = self.aggregator.by_type(records, build_device_lookup(devices))
        return breakdown(buckets.totals)

    def breakdown_by_device(
        self,
        records: Sequence[ConsumptionRecord],
        devices: Iterable[DeviceDescriptor],
    ) -> List[TopConsumingDevice]:
        return self._label(breakdown(self.aggregator.by_device(records)), devices)

    def top_devices(
        self,
        records: Sequence[ConsumptionRecord],
        devices: Iterable[DeviceDescriptor],
        limit: int = DEFAULT_TOP_DEVICES,
    ) -> List[TopConsumingDevice]:
        """Highest consumers first, percentages relative to all devices.

        A negative ``limit`` raises :class:`InvalidArgument`.
        """
        ranked = top_n(self.aggregator.by_device(records), limit)
        return self._label(ranked, devices)

    def trends(
        self,
        records: Sequence[ConsumptionRecord],
        date_range: DateRange,
    ) -> ConsumptionTrend:
        """Day, week and month totals across ``date_range``.

        Windows longer than ``MAX_TREND_DAYS`` raise :class:`InvalidArgument`.
        """
        if date_range.days > MAX_TREND_DAYS:
            raise InvalidArgument(
                f"Trend window spans {date_range.days} days; the limit is {MAX_TREND_DAYS}."
            )
        return ConsumptionTrend(
            daily=self.aggregator.daily_series(records, date_range),
            weekly=self.aggregator.weekly_series(records, date_range),
            monthly=self.aggregator.monthly_series(records, date_range),
        )

    @staticmethod
    def _label(
        entries: List[BreakdownEntry],
        devices: Iterable[DeviceDescriptor],
    ) -> List[TopConsumingDevice]:
        lookup = build_device_lookup(devices)
        labelled: List[TopConsumingDevice] = []
        for entry in entries:
            device = lookup.get(entry.key)
            labelled.append(
                TopConsumingDevice(
                    device_id=entry.key,
                    device_name=(device.display_name or device.id) if device else UNKNOWN_DEVICE_NAME,
                    device_type=DeviceType(device.type) if device else DeviceType.other,
                    total_kwh=entry.total_kwh,
                    percentage=entry.percentage,
                )
            )
        return labelled


@lru_cache
def build_default_consumption_service() -> ConsumptionService:
    """Factory that wires the service with stateless collaborators."""
    return ConsumptionService(aggregator=Aggregator(), calculator=SummaryCalculator())
