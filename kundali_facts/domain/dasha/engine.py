import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from kundali_facts.config import settings
from kundali_facts.domain.dasha.cycles import LordCycle
from kundali_facts.domain.dasha.schemas import (
    LEVELS,
    MAX_DEPTH,
    ActiveStack,
    DashaPeriod,
    DashaTree,
    find_active,
    level_index,
)
from kundali_facts.domain.kundali.derived.schemas import NakshatraPosition
from kundali_facts.domain.kundali.errors import PartitionViolationError

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0

# Year totals closer than this are treated as equal
YEAR_EPSILON = 1e-9


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


# ─────────────────────────────────────────────
# Tree construction
# ─────────────────────────────────────────────

def _subdivide(
    cycle: LordCycle,
    parent_index: int,
    parent_years: float,
    start: datetime,
    end: datetime,
    level: int,
    depth: int,
) -> tuple:
    """
    Split [start, end) among the cycle's lords beginning with the parent's
    own lord. Boundaries come from cumulative fractions of the parent span
    and the last child ends exactly at `end`.
    """
    if level >= depth:
        return ()

    span = end - start
    total = cycle.total_years
    count = len(cycle)
    children = []
    cumulative = 0.0
    child_start = start

    for k in range(count):
        index = (parent_index + k) % count
        lord, years = cycle.lords[index]
        cumulative += years
        child_end = end if k == count - 1 else start + span * (cumulative / total)

        if child_end <= child_start:
            continue

        child_years = parent_years * years / total
        children.append(
            DashaPeriod(
                system=cycle.system,
                lord=lord,
                ruler=cycle.ruler(lord),
                start=child_start,
                end=child_end,
                years=child_years,
                level=LEVELS[level],
                children=_subdivide(
                    cycle, index, child_years, child_start, child_end, level + 1, depth
                ),
            )
        )
        child_start = child_end

    return tuple(children)


def build_dasha_tree(
    birth_instant: datetime,
    nakshatra: NakshatraPosition,
    cycle: LordCycle,
    depth: Optional[int] = None,
    year_days: Optional[float] = None,
    validate: bool = True,
) -> DashaTree:
    """
    Build the full nested dasha tree for one cycle.

    The first maha carries only the balance of its lord left at birth;
    the walk then continues through the cycle until the cycle total is
    reached, truncating the final maha. End instants derive from the
    cumulative year count so the last maha ends at exactly
    birth + total years.
    """
    depth = depth if depth is not None else settings.DASHA_DEPTH
    depth = max(1, min(MAX_DEPTH, int(depth)))
    year_days = float(year_days if year_days is not None else settings.DASHA_YEAR_DAYS)

    birth = _as_utc(birth_instant)
    total = cycle.total_years
    year = timedelta(days=year_days)
    tree_end = birth + year * total

    first = cycle.first_lord(nakshatra.index)
    count = len(cycle)

    periods: List[DashaPeriod] = []
    cumulative = 0.0
    step = 0

    while total - cumulative > YEAR_EPSILON:
        index = (first + step) % count
        lord, years = cycle.lords[index]
        length = years * nakshatra.fraction_remaining if step == 0 else float(years)
        length = min(length, total - cumulative)
        step += 1

        if length <= 0:
            continue

        start = birth + year * cumulative
        cumulative += length
        end = tree_end if total - cumulative <= YEAR_EPSILON else birth + year * cumulative

        if end <= start:
            continue

        periods.append(
            DashaPeriod(
                system=cycle.system,
                lord=lord,
                ruler=cycle.ruler(lord),
                start=start,
                end=end,
                years=length,
                level=LEVELS[0],
                children=_subdivide(cycle, index, length, start, end, 1, depth),
            )
        )

    tree = DashaTree(
        system=cycle.system,
        nakshatra=nakshatra,
        start=birth,
        end=tree_end,
        total_years=total,
        year_days=year_days,
        depth=depth,
        periods=tuple(periods),
    )

    logger.debug(
        f"Built {cycle.system} tree: {len(periods)} mahas, depth {depth}, "
        f"first lord {periods[0].lord if periods else None}"
    )
    if validate:
        validate_tree(tree)
    return tree


# ─────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────

def active_stack(tree: DashaTree, instant: datetime) -> ActiveStack:
    """
    Periods running at `instant`, maha first. Empty outside the tree.
    """
    instant = _as_utc(instant)
    if not tree.contains(instant):
        return ActiveStack()

    stack = []
    current = find_active(tree.periods, tree.maha_starts, instant)
    while current is not None:
        stack.append(current)
        current = current.active_child(instant)

    return ActiveStack(periods=tuple(stack))


def upcoming_changes(
    tree: DashaTree,
    after: datetime,
    level: str = "antar",
    limit: int = 5,
) -> List[DashaPeriod]:
    """
    The next `limit` periods at `level` starting strictly after `after`.
    """
    after = _as_utc(after)
    upcoming = []
    for period in tree.iter_level(level):
        if period.start > after:
            upcoming.append(period)
            if len(upcoming) >= limit:
                break
    return upcoming


def periods_in_range(
    tree: DashaTree,
    start: datetime,
    end: datetime,
    level: str = "antar",
) -> List[DashaPeriod]:
    """
    Periods at `level` overlapping the half-open window [start, end).
    """
    start, end = _as_utc(start), _as_utc(end)
    if end <= start:
        return []
    return [
        p for p in tree.iter_level(level)
        if p.start < end and p.end > start
    ]


# ─────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────

def _check_children(period: DashaPeriod, tolerance: float, problems: List[str]) -> None:
    if period.end <= period.start:
        problems.append(f"{period.level} {period.lord} at {period.start.isoformat()} has end <= start")

    if not period.children:
        return

    expected_level = level_index(period.level) + 1
    label = f"{period.level} {period.lord} at {period.start.isoformat()}"

    first, last = period.children[0], period.children[-1]
    if abs((first.start - period.start).total_seconds()) > tolerance:
        problems.append(f"{label}: first child starts off the parent start")
    if abs((last.end - period.end).total_seconds()) > tolerance:
        problems.append(f"{label}: last child ends off the parent end")

    covered = sum((c.duration for c in period.children), timedelta())
    if abs((covered - period.duration).total_seconds()) > tolerance:
        problems.append(f"{label}: children cover {covered}, parent spans {period.duration}")

    previous = None
    for child in period.children:
        if level_index(child.level) != expected_level:
            problems.append(f"{label}: child {child.lord} at level {child.level}")
        if previous is not None and abs((child.start - previous.end).total_seconds()) > tolerance:
            problems.append(f"{label}: gap or overlap before child {child.lord}")
        previous = child
        _check_children(child, tolerance, problems)


def partition_problems(tree: DashaTree, tolerance_seconds: Optional[float] = None) -> List[str]:
    """
    Every partition violation in the tree; empty when the tree is sound.
    """
    tolerance = float(
        tolerance_seconds if tolerance_seconds is not None
        else settings.PARTITION_TOLERANCE_SECONDS
    )
    problems: List[str] = []

    if not tree.periods:
        return ["tree has no maha periods"]

    year_seconds = tree.year_days * SECONDS_PER_DAY
    maha_years = sum(p.years for p in tree.periods)
    if abs(maha_years - tree.total_years) * year_seconds > tolerance:
        problems.append(f"maha periods sum to {maha_years:.6f} years, cycle is {tree.total_years}")

    span_years = (tree.end - tree.start).total_seconds() / year_seconds
    if abs(span_years - tree.total_years) * year_seconds > tolerance:
        problems.append(f"tree spans {span_years:.6f} years, cycle is {tree.total_years}")

    if abs((tree.periods[0].start - tree.start).total_seconds()) > tolerance:
        problems.append("first maha does not start at birth")
    if abs((tree.periods[-1].end - tree.end).total_seconds()) > tolerance:
        problems.append("last maha does not end at the cycle end")

    previous = None
    for period in tree.periods:
        if period.level != LEVELS[0]:
            problems.append(f"top-level period {period.lord} at level {period.level}")
        if previous is not None and abs((period.start - previous.end).total_seconds()) > tolerance:
            problems.append(f"gap or overlap before maha {period.lord}")
        previous = period
        _check_children(period, tolerance, problems)

    return problems


def validate_tree(tree: DashaTree, tolerance_seconds: Optional[float] = None) -> DashaTree:
    """
    Raise PartitionViolationError unless the tree partitions its span exactly.
    """
    problems = partition_problems(tree, tolerance_seconds)
    if problems:
        logger.error(f"{tree.system} dasha tree failed validation: {len(problems)} problem(s)")
        raise PartitionViolationError(problems)
    return tree
