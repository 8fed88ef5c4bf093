"""Comparison period resolution.

The current window runs from the first day of the calendar unit containing the
reference date through the reference date itself. The previous window is the
whole preceding unit, ending the day before the current window starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Union

from models.errors import InvalidArgument
from models.records import DateRange, Granularity

logger = logging.getLogger(__name__)

QUARTER_MONTHS = 3


@dataclass(frozen=True)
class ComparisonPeriods:
    current: DateRange
    previous: DateRange


def parse_granularity(value: Union[Granularity, str]) -> Granularity:
    try:
        return Granularity(value)
    except ValueError as exc:
        choices = ", ".join(item.value for item in Granularity)
        raise InvalidArgument(f"Unknown granularity {value!r}; expected one of {choices}") from exc


def unit_start(day: date, granularity: Granularity) -> date:
    """First day of the month, quarter or year containing ``day``."""
    if granularity is Granularity.month:
        return day.replace(day=1)
    if granularity is Granularity.quarter:
        first_month = (day.month - 1) // QUARTER_MONTHS * QUARTER_MONTHS + 1
        return date(day.year, first_month, 1)
    return date(day.year, 1, 1)


def resolve_comparison_periods(
    granularity: Union[Granularity, str],
    reference: Optional[date] = None,
) -> ComparisonPeriods:
    unit = parse_granularity(granularity)
    end = reference if reference is not None else date.today()

    current_start = unit_start(end, unit)
    try:
        previous_end = current_start - timedelta(days=1)
    except OverflowError as exc:
        raise InvalidArgument(
            f"No {unit.value} precedes the one starting {current_start.isoformat()}."
        ) from exc
    previous_start = unit_start(previous_end, unit)

    periods = ComparisonPeriods(
        current=DateRange(current_start, end),
        previous=DateRange(previous_start, previous_end),
    )
    logger.debug(
        "Resolved comparison periods",
        extra={
            "granularity": unit.value,
            "period_start": previous_start.isoformat(),
            "period_end": end.isoformat(),
        },
    )
    return periods
