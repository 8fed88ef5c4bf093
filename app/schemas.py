"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models.impact import ImpactComparison, ImpactMetrics
from models.records import (
    MAX_CONSUMPTION_KWH,
    ConsumptionRecord,
    DateRange,
    DeviceDescriptor,
    DeviceType,
    DisposalMethod,
    Granularity,
)
from models.summaries import BreakdownEntry, PeriodSummary, TopConsumingDevice
from services.conversions import DeviceCost, DeviceEstimate
from services.parser import RowError


class ConsumptionRecordIn(BaseModel):
    """Energy drawn by one device on one day."""

    device_id: str = Field(..., min_length=1)
    date: dt.date
    consumption_kwh: float = Field(..., ge=0, le=MAX_CONSUMPTION_KWH, allow_inf_nan=False)

    def to_domain(self) -> ConsumptionRecord:
        return ConsumptionRecord(
            device_id=self.device_id, date=self.date, consumption_kwh=self.consumption_kwh
        )


class DeviceIn(BaseModel):
    """Labels for a registered device."""

    id: str = Field(..., min_length=1)
    type: DeviceType = DeviceType.other
    display_name: str = ""
    disposal_method: Optional[DisposalMethod] = None
    disposed_on: Optional[dt.date] = None

    def to_domain(self) -> DeviceDescriptor:
        return DeviceDescriptor(
            id=self.id,
            type=self.type,
            display_name=self.display_name,
            disposal_method=self.disposal_method,
            disposed_on=self.disposed_on,
        )


class SummaryRequest(BaseModel):
    records: List[ConsumptionRecordIn] = Field(default_factory=list)
    devices: List[DeviceIn] = Field(default_factory=list)
    previous_records: Optional[List[ConsumptionRecordIn]] = Field(
        default=None, description="Records of the preceding period used as the baseline."
    )
    top_n: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[dt.date] = Field(
        default=None, description="First day of the trend series; defaults to the records."
    )
    end_date: Optional[dt.date] = Field(
        default=None, description="Last day of the trend series; defaults to the records."
    )


class ImpactRequest(BaseModel):
    records: List[ConsumptionRecordIn] = Field(default_factory=list)
    baseline_records: List[ConsumptionRecordIn] = Field(default_factory=list)
    devices: List[DeviceIn] = Field(default_factory=list)
    start_date: dt.date
    end_date: dt.date


class ImpactComparisonRequest(BaseModel):
    records: List[ConsumptionRecordIn] = Field(
        default_factory=list,
        description="Records covering both comparison windows and their baselines.",
    )
    devices: List[DeviceIn] = Field(default_factory=list)
    granularity: Granularity = Granularity.month
    reference_date: Optional[dt.date] = None


class DateRangeModel(BaseModel):
    start_date: dt.date
    end_date: dt.date

    @classmethod
    def from_domain(cls, value: DateRange) -> "DateRangeModel":
        return cls(start_date=value.start_date, end_date=value.end_date)


class ComparisonPeriodsResponse(BaseModel):
    granularity: Granularity
    current: DateRangeModel
    previous: DateRangeModel


class DeviceEstimateResponse(BaseModel):
    watts: float
    hours: float
    daily_kwh: float
    monthly_kwh: float
    yearly_kwh: float
    rate_per_kwh: Optional[float] = None
    daily_cost: Optional[float] = None
    monthly_cost: Optional[float] = None
    yearly_cost: Optional[float] = None

    @classmethod
    def from_domain(
        cls,
        watts: float,
        hours: float,
        estimate: DeviceEstimate,
        cost: Optional[DeviceCost] = None,
    ) -> "DeviceEstimateResponse":
        return cls(
            watts=watts,
            hours=hours,
            daily_kwh=estimate.daily_kwh,
            monthly_kwh=estimate.monthly_kwh,
            yearly_kwh=estimate.yearly_kwh,
            rate_per_kwh=cost.rate_per_kwh if cost else None,
            daily_cost=cost.daily if cost else None,
            monthly_cost=cost.monthly if cost else None,
            yearly_cost=cost.yearly if cost else None,
        )


class PeriodSummaryModel(BaseModel):
    """Totals for one reporting window."""

    total_kwh: float = Field(..., ge=0)
    average_daily_kwh: float = Field(..., ge=0)
    comparison_to_previous_period_pct: float
    by_device: Dict[str, float] = Field(default_factory=dict)
    by_type: Dict[str, float] = Field(default_factory=dict)
    unattributed_records: int = Field(
        default=0, ge=0, description="Records whose device was unknown and counted as other."
    )

    @classmethod
    def from_domain(cls, summary: PeriodSummary) -> "PeriodSummaryModel":
        return cls(
            total_kwh=summary.total_kwh,
            average_daily_kwh=summary.average_daily_kwh,
            comparison_to_previous_period_pct=summary.comparison_to_previous_period_pct,
            by_device=dict(summary.by_device),
            by_type=dict(summary.by_type),
            unattributed_records=summary.unattributed_records,
        )


class BreakdownEntryModel(BaseModel):
    key: str
    total_kwh: float = Field(..., ge=0)
    percentage: float = Field(..., ge=0)

    @classmethod
    def from_domain(cls, entry: BreakdownEntry) -> "BreakdownEntryModel":
        return cls(key=entry.key, total_kwh=entry.total_kwh, percentage=entry.percentage)


class TopDeviceModel(BaseModel):
    device_id: str
    device_name: str
    device_type: DeviceType
    total_kwh: float = Field(..., ge=0)
    percentage: float = Field(..., ge=0)

    @classmethod
    def from_domain(cls, device: TopConsumingDevice) -> "TopDeviceModel":
        return cls(
            device_id=device.device_id,
            device_name=device.device_name,
            device_type=device.device_type,
            total_kwh=device.total_kwh,
            percentage=device.percentage,
        )


class ParseErrorModel(BaseModel):
    """Details about a row that failed validation or parsing."""

    file: str
    row_number: int = Field(..., ge=1)
    reason: str

    @classmethod
    def from_domain(cls, file: str, error: RowError) -> "ParseErrorModel":
        return cls(file=file, row_number=error.row_number, reason=error.reason)


class SummaryResponse(BaseModel):
    summary: PeriodSummaryModel
    by_type: List[BreakdownEntryModel] = Field(default_factory=list)
    top_devices: List[TopDeviceModel] = Field(default_factory=list)
    daily: Dict[str, float] = Field(
        default_factory=dict, description="Zero-filled day totals across the trend window."
    )
    weekly: Dict[str, float] = Field(
        default_factory=dict, description="Week totals keyed by the Monday that starts each week."
    )
    monthly: Dict[str, float] = Field(
        default_factory=dict, description="Month totals keyed by YYYY-MM."
    )
    errors: List[ParseErrorModel] = Field(default_factory=list)


class ImpactMetricsModel(BaseModel):
    energy_saved_kwh: float = Field(..., description="Negative when consumption increased.")
    co2_reduction_kg: float = Field(..., ge=0)
    trees_equivalent: float = Field(..., ge=0)
    water_saved_liters: float = Field(..., ge=0)
    devices_recycled: int = Field(..., ge=0)
    sustainability_score: int = Field(..., ge=0, le=100)
    period: Optional[DateRangeModel] = None

    @classmethod
    def from_domain(cls, metrics: ImpactMetrics) -> "ImpactMetricsModel":
        return cls(
            energy_saved_kwh=metrics.energy_saved_kwh,
            co2_reduction_kg=metrics.co2_reduction_kg,
            trees_equivalent=metrics.trees_equivalent,
            water_saved_liters=metrics.water_saved_liters,
            devices_recycled=metrics.devices_recycled,
            sustainability_score=metrics.sustainability_score,
            period=DateRangeModel.from_domain(metrics.period) if metrics.period else None,
        )


class PercentageChangeModel(BaseModel):
    energy_saved: float
    co2_reduction: float
    sustainability_score: float


class ImpactComparisonResponse(BaseModel):
    current: ImpactMetricsModel
    previous: ImpactMetricsModel
    percentage_change: PercentageChangeModel
    errors: List[ParseErrorModel] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls,
        comparison: ImpactComparison,
        errors: Optional[List[ParseErrorModel]] = None,
    ) -> "ImpactComparisonResponse":
        change = comparison.percentage_change
        return cls(
            current=ImpactMetricsModel.from_domain(comparison.current),
            previous=ImpactMetricsModel.from_domain(comparison.previous),
            percentage_change=PercentageChangeModel(
                energy_saved=change.energy_saved,
                co2_reduction=change.co2_reduction,
                sustainability_score=change.sustainability_score,
            ),
            errors=errors or [],
        )
