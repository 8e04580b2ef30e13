# backend/app/services/units.py
"""Metric to display-unit conversions. Pure functions, None passes through."""

from backend.app.core.config import MM_TO_INCHES, KPH_TO_MPH


def celsius_to_fahrenheit(celsius: float | None) -> float | None:
    if celsius is None:
        return None
    return round(celsius * 9 / 5 + 32, 1)


def kph_to_mph(kph: float | None) -> float | None:
    if kph is None:
        return None
    return round(kph * KPH_TO_MPH, 1)


def mm_to_inches(mm: float) -> float:
    return round(mm * MM_TO_INCHES, 2)


def sum_precipitation_mm(values: list | None) -> float:
    # Missing or null hours count as no rain
    return sum((v or 0) for v in (values or []))


def last_value(values: list | None):
    if not values:
        return None
    return values[-1]
