"""HTTP route definitions for the service."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from app.schemas import (
    BreakdownEntryModel,
    ComparisonPeriodsResponse,
    ConsumptionRecordIn,
    DateRangeModel,
    DeviceEstimateResponse,
    DeviceIn,
    ImpactComparisonRequest,
    ImpactComparisonResponse,
    ImpactMetricsModel,
    ImpactRequest,
    ParseErrorModel,
    PeriodSummaryModel,
    SummaryRequest,
    SummaryResponse,
    TopDeviceModel,
)
from models.errors import DivisionDomainError
from models.records import ConsumptionRecord, DateRange, DeviceDescriptor, Granularity
from services.consumption import (
    ConsumptionService,
    build_default_consumption_service,
    trend_window,
)
from services.conversions import estimate_device_consumption, estimate_device_cost
from services.impact import ImpactService, build_default_impact_service
from services.parser import parse_consumption_csv, parse_devices_csv
from services.periods import resolve_comparison_periods
from settings import get_settings

router = APIRouter()


def get_consumption_service() -> ConsumptionService:
    return build_default_consumption_service()


def get_impact_service() -> ImpactService:
    return build_default_impact_service()


def _records(items: Optional[List[ConsumptionRecordIn]]) -> List[ConsumptionRecord]:
    return [item.to_domain() for item in items or []]


def _devices(items: List[DeviceIn]) -> List[DeviceDescriptor]:
    return [item.to_domain() for item in items]


async def _read_upload(upload: UploadFile) -> bytes:
    try:
        contents = await upload.read()
    finally:
        await upload.close()
    if isinstance(contents, str):
        contents = contents.encode("utf-8")
    return contents


def _build_summary(
    service: ConsumptionService,
    records: Sequence[ConsumptionRecord],
    devices: Sequence[DeviceDescriptor],
    previous_records: Optional[Sequence[ConsumptionRecord]],
    top_n: Optional[int],
    errors: Optional[List[ParseErrorModel]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> SummaryResponse:
    limit = top_n if top_n is not None else get_settings().top_devices_limit
    try:
        summary = service.summarize(records, devices, previous_records)
        by_type = service.breakdown_by_type(records, devices)
        top_devices = service.top_devices(records, devices, limit)
        trend = service.trends(records, trend_window(records, start_date, end_date))
    except DivisionDomainError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return SummaryResponse(
        summary=PeriodSummaryModel.from_domain(summary),
        by_type=[BreakdownEntryModel.from_domain(entry) for entry in by_type],
        top_devices=[TopDeviceModel.from_domain(device) for device in top_devices],
        daily=trend.daily,
        weekly=trend.weekly,
        monthly=trend.monthly,
        errors=errors or [],
    )


@router.get(
    "/devices/estimate",
    response_model=DeviceEstimateResponse,
    summary="Estimate a device's energy draw, and optionally its cost, from wattage and usage.",
)
async def estimate_device(
    watts: float = Query(..., description="Power draw in watts."),
    hours: float = Query(..., description="Daily usage in hours (0-24)."),
    rate: Optional[float] = Query(None, description="Optional price per kWh used to add costs."),
) -> DeviceEstimateResponse:
    try:
        estimate = estimate_device_consumption(watts, hours)
        cost = estimate_device_cost(estimate, rate) if rate is not None else None
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return DeviceEstimateResponse.from_domain(watts, hours, estimate, cost)


@router.post(
    "/consumption/summary",
    response_model=SummaryResponse,
    summary="Summarize consumption records with breakdowns and rankings.",
)
async def consumption_summary(
    payload: SummaryRequest,
    service: ConsumptionService = Depends(get_consumption_service),
) -> SummaryResponse:
    previous = _records(payload.previous_records) if payload.previous_records is not None else None
    return _build_summary(
        service,
        _records(payload.records),
        _devices(payload.devices),
        previous,
        payload.top_n,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )


@router.post(
    "/consumption/summary/upload",
    response_model=SummaryResponse,
    summary="Summarize consumption records uploaded as CSV files.",
)
async def consumption_summary_upload(
    records: UploadFile = File(..., description="CSV with device_id,date,consumption_kwh."),
    devices: Optional[UploadFile] = File(None, description="CSV with id,type,display_name."),
    previous: Optional[UploadFile] = File(None, description="Baseline period records CSV."),
    top_n: Optional[int] = Form(None, ge=0),
    start_date: Optional[date] = Form(None),
    end_date: Optional[date] = Form(None),
    service: ConsumptionService = Depends(get_consumption_service),
) -> SummaryResponse:
    errors: List[ParseErrorModel] = []
    try:
        parsed = parse_consumption_csv(await _read_upload(records))
        errors.extend(ParseErrorModel.from_domain("records", e) for e in parsed.errors)

        device_items: List[DeviceDescriptor] = []
        if devices is not None:
            parsed_devices = parse_devices_csv(await _read_upload(devices))
            device_items = parsed_devices.items
            errors.extend(ParseErrorModel.from_domain("devices", e) for e in parsed_devices.errors)

        previous_items: Optional[List[ConsumptionRecord]] = None
        if previous is not None:
            parsed_previous = parse_consumption_csv(await _read_upload(previous))
            previous_items = parsed_previous.items
            errors.extend(ParseErrorModel.from_domain("previous", e) for e in parsed_previous.errors)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return _build_summary(
        service,
        parsed.items,
        device_items,
        previous_items,
        top_n,
        errors,
        start_date=start_date,
        end_date=end_date,
    )


@router.post(
    "/impact",
    response_model=ImpactMetricsModel,
    summary="Environmental impact of a period against a supplied baseline.",
)
async def impact(
    payload: ImpactRequest,
    service: ImpactService = Depends(get_impact_service),
) -> ImpactMetricsModel:
    try:
        period = DateRange(payload.start_date, payload.end_date)
        metrics = service.calculate_impact(
            _records(payload.records),
            _records(payload.baseline_records),
            _devices(payload.devices),
            period,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return ImpactMetricsModel.from_domain(metrics)


@router.post(
    "/impact/comparison",
    response_model=ImpactComparisonResponse,
    summary="Compare environmental impact of the current and previous period.",
)
async def impact_comparison(
    payload: ImpactComparisonRequest,
    service: ImpactService = Depends(get_impact_service),
) -> ImpactComparisonResponse:
    try:
        comparison = service.compare(
            _records(payload.records),
            _devices(payload.devices),
            payload.granularity,
            payload.reference_date,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return ImpactComparisonResponse.from_domain(comparison)


@router.post(
    "/impact/comparison/upload",
    response_model=ImpactComparisonResponse,
    summary="Compare environmental impact using records uploaded as CSV files.",
)
async def impact_comparison_upload(
    records: UploadFile = File(..., description="CSV with device_id,date,consumption_kwh."),
    devices: Optional[UploadFile] = File(None, description="CSV with device labels and disposals."),
    granularity: Granularity = Form(Granularity.month),
    reference_date: Optional[date] = Form(None),
    service: ImpactService = Depends(get_impact_service),
) -> ImpactComparisonResponse:
    errors: List[ParseErrorModel] = []
    try:
        parsed = parse_consumption_csv(await _read_upload(records))
        errors.extend(ParseErrorModel.from_domain("records", e) for e in parsed.errors)

        device_items: List[DeviceDescriptor] = []
        if devices is not None:
            parsed_devices = parse_devices_csv(await _read_upload(devices))
            device_items = parsed_devices.items
            errors.extend(ParseErrorModel.from_domain("devices", e) for e in parsed_devices.errors)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    try:
        comparison = service.compare(parsed.items, device_items, granularity, reference_date)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return ImpactComparisonResponse.from_domain(comparison, errors)


@router.get(
    "/periods/{granularity}",
    response_model=ComparisonPeriodsResponse,
    summary="Resolve the current and previous comparison windows.",
)
async def comparison_periods(
    granularity: Granularity,
    reference: Optional[date] = Query(None, description="Reference day, defaults to today."),
) -> ComparisonPeriodsResponse:
    try:
        periods = resolve_comparison_periods(granularity, reference)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return ComparisonPeriodsResponse(
        granularity=granularity,
        current=DateRangeModel.from_domain(periods.current),
        previous=DateRangeModel.from_domain(periods.previous),
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> Dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
