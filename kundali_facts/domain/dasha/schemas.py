from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import cached_property
from typing import Dict, Iterator, Optional, Tuple

from kundali_facts.domain.kundali.derived.schemas import NakshatraPosition

LEVELS: Tuple[str, ...] = ("maha", "antar", "pratyantar", "sookshma", "pran")

MAX_DEPTH = len(LEVELS)


def level_index(level: str) -> int:
    return LEVELS.index(level)


def find_active(periods: Tuple["DashaPeriod", ...], starts: Tuple[datetime, ...], instant: datetime):
    """
    Binary search for the period whose half-open span holds `instant`.
    """
    i = bisect_right(starts, instant) - 1
    if i >= 0 and periods[i].contains(instant):
        return periods[i]
    return None


@dataclass(frozen=True)
class DashaPeriod:
    """
    One dasha period and its nested sub-periods.

    Children partition [start, end) exactly and sit one level deeper.
    """
    system: str
    lord: str
    start: datetime
    end: datetime
    years: float
    level: str
    ruler: Optional[str] = None
    children: Tuple["DashaPeriod", ...] = field(default=(), repr=False)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @cached_property
    def child_starts(self) -> Tuple[datetime, ...]:
        return tuple(c.start for c in self.children)

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def active_child(self, instant: datetime) -> Optional["DashaPeriod"]:
        return find_active(self.children, self.child_starts, instant)

    def iter_level(self, level: str) -> Iterator["DashaPeriod"]:
        """
        Yield this period or its descendants at `level`, in time order.
        """
        if self.level == level:
            yield self
            return
        if level_index(level) < level_index(self.level):
            return
        for child in self.children:
            yield from child.iter_level(level)


@dataclass(frozen=True)
class DashaTree:
    """
    Full dasha tree for one system, from birth to the end of the cycle.
    """
    system: str
    nakshatra: NakshatraPosition
    start: datetime
    end: datetime
    total_years: float
    year_days: float
    depth: int
    periods: Tuple[DashaPeriod, ...] = field(default=(), repr=False)

    @cached_property
    def maha_starts(self) -> Tuple[datetime, ...]:
        return tuple(p.start for p in self.periods)

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def iter_level(self, level: str) -> Iterator[DashaPeriod]:
        for period in self.periods:
            yield from period.iter_level(level)


@dataclass(frozen=True)
class ActiveStack:
    """
    Periods running at one instant, maha first.
    """
    periods: Tuple[DashaPeriod, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.periods)

    def __len__(self) -> int:
        return len(self.periods)

    def lords(self) -> Dict[str, str]:
        return {p.level: p.lord for p in self.periods}

    def at(self, level: str) -> Optional[DashaPeriod]:
        for period in self.periods:
            if period.level == level:
                return period
        return None
