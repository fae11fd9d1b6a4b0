from datetime import datetime, timezone
from typing import Iterable, List, Optional

from kundali_facts.domain.dasha.engine import active_stack
from kundali_facts.domain.dasha.schemas import LEVELS, DashaPeriod, DashaTree
from kundali_facts.domain.facts.schemas import DashaItem


def _item(period: DashaPeriod, level: str) -> DashaItem:
    return DashaItem(
        system=period.system,
        level=level,
        lord=period.lord,
        ruler=period.ruler,
        start=period.start,
        end=period.end,
        period_level=period.level if level == "current" else None,
    )


def dasha_items(
    tree: DashaTree,
    levels: Iterable[str],
    instant: Optional[datetime] = None,
) -> List[DashaItem]:
    """
    Flatten a dasha tree into fact-sheet items.

    Each named level yields every period at that level; `current` yields
    the active stack at `instant` (now, by default). Levels deeper than
    the tree yield nothing.
    """
    items: List[DashaItem] = []

    for level in dict.fromkeys(levels):
        if level == "current":
            stack = active_stack(tree, instant or datetime.now(timezone.utc))
            items.extend(_item(p, "current") for p in stack.periods)
        elif level in LEVELS:
            items.extend(_item(p, level) for p in tree.iter_level(level))

    return items
