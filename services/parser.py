"""CSV loading for consumption records and device descriptors."""

from __future__ import annotations

import csv
import io
import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from models.records import (
    MAX_CONSUMPTION_KWH,
    ConsumptionRecord,
    DeviceDescriptor,
    DeviceType,
    DisposalMethod,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECORD_COLUMNS = ("device_id", "date", "consumption_kwh")
DEVICE_COLUMNS = ("id", "type", "display_name")


@dataclass(frozen=True)
class RowError:
    """A row that failed validation or parsing."""

    row_number: int
    reason: str


@dataclass
class ParseResult(Generic[T]):
    items: List[T] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)


def parse_date(value: str) -> date:
    """Calendar day of an ISO date or the date part of an ISO datetime."""
    candidate = value.strip()
    if not candidate:
        raise ValueError("Date is empty.")
    if "T" in candidate:
        candidate = candidate.split("T", 1)[0]
    try:
        return date.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid date format") from exc


def _rows(raw: bytes, required: Tuple[str, ...]) -> Iterator[Tuple[int, Dict[str, str]]]:
    if not raw:
        raise ValueError("Uploaded file is empty.")
    reader = csv.DictReader(io.StringIO(raw.decode("utf-8-sig")))
    if not reader.fieldnames:
        raise ValueError("CSV file is missing a header row.")

    normalized = {name.lower().strip(): name for name in reader.fieldnames}
    missing = [column for column in required if column not in normalized]
    if missing:
        raise ValueError(f"CSV missing required columns: {', '.join(missing)}")

    for row_number, row in enumerate(reader, start=2):
        yield row_number, {
            column: (row.get(original) or "").strip()
            for column, original in normalized.items()
        }


def _log_errors(kind: str, result: ParseResult) -> None:
    if result.errors:
        logger.warning(
            "Skipped invalid %s rows",
            kind,
            extra={"error_count": len(result.errors), "record_count": len(result.items)},
        )


def parse_consumption_csv(raw: bytes) -> ParseResult[ConsumptionRecord]:
    """Parse ``device_id,date,consumption_kwh`` rows, collecting row errors."""
    result: ParseResult[ConsumptionRecord] = ParseResult()
    for row_number, row in _rows(raw, RECORD_COLUMNS):
        device_id = row["device_id"]
        if not device_id:
            result.errors.append(RowError(row_number, "missing device_id"))
            continue

        if not row["date"]:
            result.errors.append(RowError(row_number, "missing date"))
            continue
        try:
            day = parse_date(row["date"])
        except ValueError:
            result.errors.append(RowError(row_number, "invalid date"))
            continue

        if not row["consumption_kwh"]:
            result.errors.append(RowError(row_number, "missing consumption_kwh"))
            continue
        try:
            kwh = float(row["consumption_kwh"])
        except ValueError:
            result.errors.append(RowError(row_number, "invalid numeric value"))
            continue
        if not math.isfinite(kwh):
            result.errors.append(RowError(row_number, "invalid numeric value"))
            continue
        if kwh < 0:
            result.errors.append(RowError(row_number, "negative consumption_kwh"))
            continue
        if kwh > MAX_CONSUMPTION_KWH:
            result.errors.append(RowError(row_number, "consumption_kwh out of range"))
            continue

        result.items.append(ConsumptionRecord(device_id=device_id, date=day, consumption_kwh=kwh))

    _log_errors("consumption", result)
    return result


def _parse_device_type(value: str) -> DeviceType:
    try:
        return DeviceType(value.lower())
    except ValueError:
        return DeviceType.other


def parse_devices_csv(raw: bytes) -> ParseResult[DeviceDescriptor]:
    """Parse ``id,type,display_name[,disposal_method,disposed_on]`` rows."""
    result: ParseResult[DeviceDescriptor] = ParseResult()
    for row_number, row in _rows(raw, DEVICE_COLUMNS):
        device_id = row["id"]
        if not device_id:
            result.errors.append(RowError(row_number, "missing id"))
            continue

        method: Optional[DisposalMethod] = None
        method_raw = row.get("disposal_method", "")
        if method_raw:
            try:
                method = DisposalMethod(method_raw.lower())
            except ValueError:
                result.errors.append(RowError(row_number, "invalid disposal_method"))
                continue

        disposed_on: Optional[date] = None
        disposed_raw = row.get("disposed_on", "")
        if disposed_raw:
            try:
                disposed_on = parse_date(disposed_raw)
            except ValueError:
                result.errors.append(RowError(row_number, "invalid disposed_on"))
                continue

        result.items.append(
            DeviceDescriptor(
                id=device_id,
                type=_parse_device_type(row["type"]),
                display_name=row["display_name"],
                disposal_method=method,
                disposed_on=disposed_on,
            )
        )

    _log_errors("device", result)
    return result
