"""Human-readable renderings of engine figures."""

from __future__ import annotations

KG_PER_TON = 1000.0
LITERS_PER_CUBIC_METER = 1000.0


def format_energy(kwh: float, decimals: int = 2) -> str:
    return f"{kwh:.{decimals}f} kWh"


def format_co2(co2_kg: float, decimals: int = 2) -> str:
    if co2_kg >= KG_PER_TON:
        return f"{co2_kg / KG_PER_TON:.{decimals}f} tons"
    return f"{co2_kg:.{decimals}f} kg"


def format_trees(trees: float, decimals: int = 1) -> str:
    return f"{trees:.{decimals}f} trees"


def format_water(liters: float, decimals: int = 0) -> str:
    if liters >= LITERS_PER_CUBIC_METER:
        return f"{liters / LITERS_PER_CUBIC_METER:.{decimals}f} m³"
    return f"{liters:.{decimals}f} liters"


def format_percentage(value: float, decimals: int = 1) -> str:
    """Signed percentage, e.g. ``+12.5%``."""
    return f"{value:+.{decimals}f}%"
