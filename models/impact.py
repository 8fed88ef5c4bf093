"""Environmental impact results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models.records import DateRange


@dataclass(frozen=True)
class ImpactMetrics:
    """Environmental equivalents of the energy saved in a window.

    ``energy_saved_kwh`` keeps its sign so callers can show increased
    consumption; the CO2, tree and water figures are derived from the value
    clamped at zero and are never negative.
    """

    energy_saved_kwh: float
    co2_reduction_kg: float
    trees_equivalent: float
    water_saved_liters: float
    devices_recycled: int = 0
    sustainability_score: int = 0
    period: Optional[DateRange] = None


@dataclass(frozen=True)
class PercentageChange:
    energy_saved: float
    co2_reduction: float
    sustainability_score: float


@dataclass(frozen=True)
class ImpactComparison:
    current: ImpactMetrics
    previous: ImpactMetrics
    percentage_change: PercentageChange
