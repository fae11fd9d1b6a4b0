"""
Whole-sign house arithmetic shared by D1 and every divisional chart.

All functions are pure and total: indices that fall outside 1-12 are
clamped or wrapped instead of raised.
"""
import math
from typing import Any

from kundali_facts.domain.kundali.tables import SIGN_LORDS


def clamp_sign(value: Any) -> int:
    """
    Clamp a sign id into [1, 12]. Non-numeric input becomes 1.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if math.isnan(number):
        return 1
    return int(min(12.0, max(1.0, number)))


def house(ascendant_sign: int, planet_sign: int) -> int:
    """
    Whole-sign house of `planet_sign` counted from `ascendant_sign`.
    """
    return ((int(planet_sign) - int(ascendant_sign) + 12) % 12) + 1


def relative_house(from_house: int, to_house: int) -> int:
    """
    House of `to_house` counted from `from_house` (1 = same house).
    """
    return ((int(to_house) - int(from_house) + 12) % 12) + 1


def sign_from_longitude(longitude: float) -> int:
    """
    Sign 1-12 holding a sidereal longitude. Non-finite input becomes 1.
    """
    if not math.isfinite(float(longitude)):
        return 1
    return int((float(longitude) % 360.0) // 30.0) + 1


def degree_in_sign(longitude: float) -> float:
    if not math.isfinite(float(longitude)):
        return 0.0
    return (float(longitude) % 360.0) % 30.0


def sign_in_house(ascendant_sign: int, house_number: int) -> int:
    """
    Sign occupying `house_number` for a given ascendant.
    """
    return ((int(ascendant_sign) - 1 + int(house_number) - 1) % 12) + 1


def house_lord(ascendant_sign: int, house_number: int) -> str:
    return SIGN_LORDS[sign_in_house(ascendant_sign, house_number)]


def ordinal(n: int) -> str:
    """
    English ordinal suffix: 1st, 2nd, 3rd, 4th ... 11th, 12th.
    """
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
