# backend/tests/services/test_units.py
import pytest

from backend.app.services.units import (
    celsius_to_fahrenheit,
    kph_to_mph,
    mm_to_inches,
    sum_precipitation_mm,
    last_value,
)


def test_celsius_to_fahrenheit_rounds_to_one_decimal():
    assert celsius_to_fahrenheit(20) == 68.0
    assert celsius_to_fahrenheit(0) == 32.0
    assert celsius_to_fahrenheit(-40) == -40.0
    assert celsius_to_fahrenheit(16.7) == 62.1


def test_kph_to_mph_rounds_to_one_decimal():
    assert kph_to_mph(10) == 6.2
    assert kph_to_mph(0) == 0.0


@pytest.mark.parametrize("mm, inches", [(0, 0.0), (1.5, 0.06), (25.4, 1.0), (12.7, 0.5)])
def test_mm_to_inches_rounds_to_two_decimals(mm, inches):
    assert mm_to_inches(mm) == inches


def test_none_passes_through_conversions():
    assert celsius_to_fahrenheit(None) is None
    assert kph_to_mph(None) is None


def test_precipitation_sum_treats_nulls_as_zero():
    assert sum_precipitation_mm([0, None, 0.5, 1.0, None]) == pytest.approx(1.5)
    assert sum_precipitation_mm([]) == 0
    assert sum_precipitation_mm(None) == 0


def test_last_value():
    assert last_value([1, 2, 3]) == 3
    assert last_value([]) is None
    assert last_value(None) is None
