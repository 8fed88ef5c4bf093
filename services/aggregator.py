"""Bucketing of consumption records into keyed kWh totals."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Mapping

from models.errors import InvalidArgument
from models.records import ConsumptionRecord, DateRange, DeviceDescriptor, DeviceType
from models.summaries import TypeBuckets

logger = logging.getLogger(__name__)

DeviceLookup = Mapping[str, DeviceDescriptor]


def day_key(day: date) -> str:
    return day.isoformat()


def week_key(day: date) -> str:
    """ISO date of the Monday that starts the week containing ``day``."""
    return (day - timedelta(days=day.weekday())).isoformat()


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def sum_kwh(values: Iterable[float]) -> float:
    """Order-independent total of kWh amounts; overflow is a caller error."""
    try:
        total = math.fsum(values)
    except OverflowError as exc:
        raise InvalidArgument("kWh total is too large to represent.") from exc
    if not math.isfinite(total):
        raise InvalidArgument(f"kWh total must be finite, got {total!r}")
    return total


def build_device_lookup(devices: Iterable[DeviceDescriptor]) -> Dict[str, DeviceDescriptor]:
    return {device.id: device for device in devices}


class Aggregator:
    """Pure bucketing component that can be unit tested in isolation.

    Totals go through :func:`sum_kwh`, which uses ``math.fsum``, so the result
    for a bucket does not depend on the order in which records arrive.
    """

    def aggregate(
        self,
        records: Iterable[ConsumptionRecord],
        key: Callable[[ConsumptionRecord], str],
    ) -> Dict[str, float]:
        values: Dict[str, List[float]] = defaultdict(list)
        for record in records:
            values[key(record)].append(record.consumption_kwh)
        return {bucket: sum_kwh(amounts) for bucket, amounts in values.items()}

    def by_day(self, records: Iterable[ConsumptionRecord]) -> Dict[str, float]:
        return self.aggregate(records, lambda record: day_key(record.date))

    def by_week(self, records: Iterable[ConsumptionRecord]) -> Dict[str, float]:
        return self.aggregate(records, lambda record: week_key(record.date))

    def by_month(self, records: Iterable[ConsumptionRecord]) -> Dict[str, float]:
        return self.aggregate(records, lambda record: month_key(record.date))

    def by_device(self, records: Iterable[ConsumptionRecord]) -> Dict[str, float]:
        return self.aggregate(records, lambda record: record.device_id)

    def by_type(
        self,
        records: Iterable[ConsumptionRecord],
        devices: DeviceLookup,
    ) -> TypeBuckets:
        """Bucket by device type; unknown device ids land in ``other``."""
        unattributed = 0

        def type_key(record: ConsumptionRecord) -> str:
            nonlocal unattributed
            device = devices.get(record.device_id)
            if device is None:
                unattributed += 1
                return DeviceType.other.value
            return DeviceType(device.type).value

        totals = self.aggregate(records, type_key)
        if unattributed:
            logger.warning(
                "Consumption records reference unknown devices; counted as other",
                extra={"unattributed_count": unattributed, "device_count": len(devices)},
            )
        return TypeBuckets(totals=totals, unattributed_records=unattributed)

    def filter_records(
        self,
        records: Iterable[ConsumptionRecord],
        date_range: DateRange,
    ) -> List[ConsumptionRecord]:
        return [record for record in records if record.date in date_range]

    def daily_series(
        self,
        records: Iterable[ConsumptionRecord],
        date_range: DateRange,
    ) -> Dict[str, float]:
        """Day totals for every day of ``date_range``, zero-filled."""
        totals = self.by_day(self.filter_records(records, date_range))
        return _zero_filled(totals, date_range, day_key)

    def weekly_series(
        self,
        records: Iterable[ConsumptionRecord],
        date_range: DateRange,
    ) -> Dict[str, float]:
        """Week totals keyed by Monday, limited to days inside ``date_range``."""
        totals = self.by_week(self.filter_records(records, date_range))
        return _zero_filled(totals, date_range, week_key)

    def monthly_series(
        self,
        records: Iterable[ConsumptionRecord],
        date_range: DateRange,
    ) -> Dict[str, float]:
        totals = self.by_month(self.filter_records(records, date_range))
        return _zero_filled(totals, date_range, month_key)


def _zero_filled(
    totals: Mapping[str, float],
    date_range: DateRange,
    key: Callable[[date], str],
) -> Dict[str, float]:
    # Keys follow calendar order; partial first and last buckets are kept.
    buckets = dict.fromkeys(key(day) for day in date_range.iter_days())
    return {bucket: totals.get(bucket, 0.0) for bucket in buckets}
