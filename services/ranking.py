"""Percentage-of-total breakdowns and top-N rankings."""

from __future__ import annotations

import math
from typing import List, Mapping, Optional

from models.errors import InvalidArgument
from models.summaries import BreakdownEntry

ZERO_TOTAL_PERCENTAGE = 0.0


def share_of_total(value: float, grand_total: float) -> float:
    if grand_total <= 0:
        return ZERO_TOTAL_PERCENTAGE
    return value / grand_total * 100


def breakdown(
    bucket: Mapping[str, float],
    grand_total: Optional[float] = None,
) -> List[BreakdownEntry]:
    """Express every bucket as a share of ``grand_total``.

    ``grand_total`` defaults to the bucket sum. Entries come back in key order.
    """
    total = math.fsum(bucket.values()) if grand_total is None else grand_total
    if total < 0:
        raise InvalidArgument(f"grand_total must be non-negative, got {total!r}")
    return [
        BreakdownEntry(key=key, total_kwh=value, percentage=share_of_total(value, total))
        for key, value in sorted(bucket.items())
    ]


def rank(entries: List[BreakdownEntry]) -> List[BreakdownEntry]:
    """Largest total first; equal totals ordered by key."""
    return sorted(entries, key=lambda entry: (-entry.total_kwh, entry.key))


def top_n(
    bucket: Mapping[str, float],
    limit: int,
    grand_total: Optional[float] = None,
) -> List[BreakdownEntry]:
    """The ``limit`` largest buckets, with percentages of the full total."""
    if limit < 0:
        raise InvalidArgument(f"limit must be non-negative, got {limit!r}")
    return rank(breakdown(bucket, grand_total))[:limit]
