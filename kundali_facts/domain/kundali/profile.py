import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from kundali_facts.domain.kundali.errors import (
    InvalidBirthDataError,
    UnsupportedAyanamsaError,
)

SUPPORTED_AYANAMSAS = ("Lahiri", "Raman", "KP", "Yukteshwar")

MAX_OFFSET = timedelta(hours=14)

_OFFSET_PATTERN = re.compile(r"^([+-])?(\d{1,2}):?(\d{2})?$")


def parse_utc_offset(value: str) -> timedelta:
    """
    Parse an offset such as "+05:45", "-0300" or "5".
    """
    match = _OFFSET_PATTERN.match(value.strip())
    if not match:
        raise InvalidBirthDataError(f"Invalid UTC offset: {value!r}")

    sign, hours, minutes = match.groups()
    hours, minutes = int(hours), int(minutes or 0)
    if minutes >= 60:
        raise InvalidBirthDataError(f"Invalid UTC offset minutes: {value!r}")

    offset = timedelta(hours=hours, minutes=minutes)
    if sign == "-":
        offset = -offset

    if abs(offset) > MAX_OFFSET:
        raise InvalidBirthDataError(f"UTC offset out of range: {value!r}")
    return offset


@dataclass(frozen=True)
class BirthProfile:
    """
    Immutable, validated birth record.

    Validation runs at construction so every downstream engine can
    assume sane coordinates, a resolvable clock and a known ayanamsa.
    """
    birth_date: date
    birth_time: time
    latitude: float
    longitude: float
    timezone: Optional[str] = None
    utc_offset: Optional[str] = None
    ayanamsa: str = "Lahiri"

    def __post_init__(self):
        if not isinstance(self.birth_date, date) or isinstance(self.birth_date, datetime):
            raise InvalidBirthDataError("birth_date must be a date")
        if not isinstance(self.birth_time, time):
            raise InvalidBirthDataError("birth_time must be a time")

        if not self.timezone and not self.utc_offset:
            raise InvalidBirthDataError("Either timezone or utc_offset is required")

        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise InvalidBirthDataError(f"Unknown timezone: {self.timezone!r}") from e

        if self.utc_offset:
            parse_utc_offset(self.utc_offset)

        try:
            latitude = float(self.latitude)
            longitude = float(self.longitude)
        except (TypeError, ValueError) as e:
            raise InvalidBirthDataError("Latitude and longitude must be numeric") from e

        if not -90.0 <= latitude <= 90.0:
            raise InvalidBirthDataError(f"Latitude out of range: {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise InvalidBirthDataError(f"Longitude out of range: {longitude}")

        # Canonical spelling, compared case-insensitively
        canonical = next(
            (a for a in SUPPORTED_AYANAMSAS if a.lower() == str(self.ayanamsa).strip().lower()),
            None,
        )
        if canonical is None:
            raise UnsupportedAyanamsaError(f"Unsupported ayanamsa: {self.ayanamsa!r}")

        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)
        object.__setattr__(self, "ayanamsa", canonical)

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def birth_datetime_utc(self) -> datetime:
        """
        Aware UTC instant of birth. An IANA timezone wins over a fixed offset.
        """
        local_dt = datetime.combine(self.birth_date, self.birth_time)

        if self.timezone:
            aware = local_dt.replace(tzinfo=ZoneInfo(self.timezone))
        else:
            aware = local_dt.replace(tzinfo=dt_timezone(parse_utc_offset(self.utc_offset)))

        return aware.astimezone(dt_timezone.utc)
