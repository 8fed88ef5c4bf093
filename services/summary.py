"""Period summary arithmetic."""

from __future__ import annotations

import math
from typing import Mapping, Optional

from models.errors import DivisionDomainError, InvalidArgument
from models.summaries import PeriodSummary
from services.aggregator import sum_kwh

# Comparing against a zero baseline is defined rather than an error so that
# NaN or infinity never reaches a dashboard.
ZERO_BASELINE_INCREASE_PCT = 100.0
ZERO_BASELINE_UNCHANGED_PCT = 0.0
NO_BASELINE_CHANGE_PCT = 0.0


def total_kwh(bucket: Mapping[str, float]) -> float:
    return sum_kwh(bucket.values())


def average_daily_kwh(total: float, day_count: int) -> float:
    if day_count <= 0:
        raise DivisionDomainError(
            "Average daily consumption needs at least one day bucket."
        )
    return total / day_count


def percentage_change(current: float, baseline: float) -> float:
    """Change from ``baseline`` to ``current`` as a percentage."""
    if baseline == 0:
        return ZERO_BASELINE_INCREASE_PCT if current > 0 else ZERO_BASELINE_UNCHANGED_PCT
    change = (current - baseline) / baseline * 100
    if not math.isfinite(change):
        raise InvalidArgument(
            f"Change from {baseline!r} to {current!r} kWh is too large to represent."
        )
    return change


class SummaryCalculator:
    """Combines bucketed totals into a :class:`PeriodSummary`."""

    def summarize(
        self,
        by_day: Mapping[str, float],
        by_device: Optional[Mapping[str, float]] = None,
        by_type: Optional[Mapping[str, float]] = None,
        baseline_kwh: Optional[float] = None,
        unattributed_records: int = 0,
    ) -> PeriodSummary:
        """Summarize a window from its day bucket.

        ``by_day`` must hold at least one key, even a zero-valued one; the
        average is otherwise undefined and :class:`DivisionDomainError` is
        raised. A missing ``baseline_kwh`` reports no change.
        """
        if baseline_kwh is not None and (not math.isfinite(baseline_kwh) or baseline_kwh < 0):
            raise InvalidArgument(
                f"baseline_kwh must be a finite non-negative number, got {baseline_kwh!r}"
            )

        total = total_kwh(by_day)
        average = average_daily_kwh(total, len(by_day))
        if baseline_kwh is None:
            change = NO_BASELINE_CHANGE_PCT
        else:
            change = percentage_change(total, baseline_kwh)

        return PeriodSummary(
            total_kwh=total,
            average_daily_kwh=average,
            comparison_to_previous_period_pct=change,
            by_device=dict(by_device or {}),
            by_type=dict(by_type or {}),
            unattributed_records=unattributed_records,
        )
