"""Derived consumption results returned to presentation layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from models.records import DeviceType


@dataclass(frozen=True)
class PeriodSummary:
    """Totals for one reporting window."""

    total_kwh: float
    average_daily_kwh: float
    comparison_to_previous_period_pct: float
    by_device: Dict[str, float] = field(default_factory=dict)
    by_type: Dict[str, float] = field(default_factory=dict)
    unattributed_records: int = 0


@dataclass(frozen=True)
class BreakdownEntry:
    """One bucket expressed as a share of the grand total."""

    key: str
    total_kwh: float
    percentage: float


@dataclass(frozen=True)
class TopConsumingDevice:
    """A ranked device with its display labels."""

    device_id: str
    device_name: str
    device_type: DeviceType
    total_kwh: float
    percentage: float


@dataclass(frozen=True)
class TypeBuckets:
    """Type totals together with the count of records lacking a known device."""

    totals: Dict[str, float]
    unattributed_records: int = 0


@dataclass(frozen=True)
class ConsumptionTrend:
    """Zero-filled day, week (Monday key) and month (``YYYY-MM``) totals."""

    daily: Dict[str, float] = field(default_factory=dict)
    weekly: Dict[str, float] = field(default_factory=dict)
    monthly: Dict[str, float] = field(default_factory=dict)
