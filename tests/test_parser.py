from __future__ import annotations

from datetime import date

import pytest

from models.records import DeviceType, DisposalMethod
from services.parser import RowError, parse_consumption_csv, parse_date, parse_devices_csv


def test_parse_consumption_success() -> None:
    body = (
        "device_id,date,consumption_kwh\n"
        "d1,2024-01-01,1.5\n"
        "d2,2024-01-02T10:30:00Z,2.5\n"
    )

    result = parse_consumption_csv(body.encode("utf-8"))

    assert not result.errors
    assert [(r.device_id, r.date, r.consumption_kwh) for r in result.items] == [
        ("d1", date(2024, 1, 1), 1.5),
        ("d2", date(2024, 1, 2), 2.5),
    ]


def test_parse_consumption_header_is_case_insensitive() -> None:
    body = " Device_ID ,DATE,Consumption_kWh\nd1,2024-01-01,1\n"

    result = parse_consumption_csv(body.encode("utf-8"))

    assert len(result.items) == 1


def test_parse_consumption_collects_row_errors(caplog) -> None:
    body = (
        "device_id,date,consumption_kwh\n"
        ",2024-01-01,1\n"
        "d1,,1\n"
        "d1,yesterday,1\n"
        "d1,2024-01-01,\n"
        "d1,2024-01-01,abc\n"
        "d1,2024-01-01,-3\n"
        "d1,2024-01-01,4\n"
    )

    with caplog.at_level("WARNING", logger="services.parser"):
        result = parse_consumption_csv(body.encode("utf-8"))

    assert [r.consumption_kwh for r in result.items] == [4.0]
    assert result.errors == [
        RowError(2, "missing device_id"),
        RowError(3, "missing date"),
        RowError(4, "invalid date"),
        RowError(5, "missing consumption_kwh"),
        RowError(6, "invalid numeric value"),
        RowError(7, "negative consumption_kwh"),
    ]
    assert any(getattr(r, "error_count", None) == 6 for r in caplog.records)


def test_parse_consumption_rejects_empty_payload() -> None:
    with pytest.raises(ValueError, match="empty"):
        parse_consumption_csv(b"")


def test_parse_consumption_rejects_missing_columns() -> None:
    with pytest.raises(ValueError, match="consumption_kwh"):
        parse_consumption_csv(b"device_id,date\nd1,2024-01-01\n")


def test_parse_consumption_rejects_non_finite_and_oversized_values() -> None:
    body = (
        "device_id,date,consumption_kwh\n"
        "d1,2024-01-01,nan\n"
        "d1,2024-01-01,inf\n"
        "d1,2024-01-01,1e308\n"
        "d1,2024-01-01,2.5\n"
    )

    result = parse_consumption_csv(body.encode("utf-8"))

    assert [r.consumption_kwh for r in result.items] == [2.5]
    assert result.errors == [
        RowError(2, "invalid numeric value"),
        RowError(3, "invalid numeric value"),
        RowError(4, "consumption_kwh out of range"),
    ]


def test_parse_devices() -> None:
    body = (
        "id,type,display_name,disposal_method,disposed_on\n"
        "d1,Computer,Laptop,,\n"
        "d2,toaster,Toaster,recycling,2024-03-02\n"
        ",monitor,Nameless,,\n"
        "d3,monitor,Old screen,burned,\n"
    )

    result = parse_devices_csv(body.encode("utf-8"))

    assert [d.id for d in result.items] == ["d1", "d2"]
    assert result.items[0].type is DeviceType.computer
    assert result.items[1].type is DeviceType.other
    assert result.items[1].disposal_method is DisposalMethod.recycling
    assert result.items[1].disposed_on == date(2024, 3, 2)
    assert result.errors == [RowError(4, "missing id"), RowError(5, "invalid disposal_method")]


def test_parse_date() -> None:
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_date("2024-02-29T23:59:59+02:00") == date(2024, 2, 29)
    with pytest.raises(ValueError):
        parse_date("2023-02-29")
