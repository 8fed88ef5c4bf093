"""Domain models shared across services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterator, Optional

from models.errors import InvalidArgument

# Ceiling for one device on one day; keeps sums over many records finite.
MAX_CONSUMPTION_KWH = 1_000_000.0


class DeviceType(str, Enum):
    """Categories used to label type buckets."""

    computer = "computer"
    monitor = "monitor"
    printer = "printer"
    appliance = "appliance"
    lighting = "lighting"
    other = "other"


class DisposalMethod(str, Enum):
    """How a retired device left the inventory."""

    recycling = "recycling"
    donation = "donation"
    proper_disposal = "proper_disposal"


class Granularity(str, Enum):
    """Calendar unit used to derive comparison periods."""

    month = "month"
    quarter = "quarter"
    year = "year"


@dataclass(frozen=True, slots=True)
class ConsumptionRecord:
    """Energy drawn by one device on one calendar day."""

    device_id: str
    date: date
    consumption_kwh: float

    def __post_init__(self) -> None:
        kwh = self.consumption_kwh
        if not math.isfinite(kwh) or kwh < 0:
            raise InvalidArgument(f"consumption_kwh must be a finite non-negative number, got {kwh!r}")
        if kwh > MAX_CONSUMPTION_KWH:
            raise InvalidArgument(
                f"consumption_kwh cannot exceed {MAX_CONSUMPTION_KWH:g}, got {kwh!r}"
            )


@dataclass(frozen=True, slots=True)
class DeviceDescriptor:
    """Labels for a registered device."""

    id: str
    type: DeviceType = DeviceType.other
    display_name: str = ""
    disposal_method: Optional[DisposalMethod] = None
    disposed_on: Optional[date] = None


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive span of calendar days."""

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise InvalidArgument(
                f"start_date {self.start_date.isoformat()} is after "
                f"end_date {self.end_date.isoformat()}"
            )

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, date):
            return False
        return self.start_date <= day <= self.end_date

    def iter_days(self) -> Iterator[date]:
        for ordinal in range(self.start_date.toordinal(), self.end_date.toordinal() + 1):
            yield date.fromordinal(ordinal)
