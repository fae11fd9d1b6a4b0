import logging
import re
from typing import Iterable, List, Optional

from kundali_facts.domain.kundali.divisional.schemas import SUPPORTED_CHARTS
from kundali_facts.domain.facts.coverage import KNOWN_CATEGORIES, coverage_of, missing_for
from kundali_facts.domain.facts.keywords import ALL_DIVISIONALS, KEYWORDS, KeywordTable
from kundali_facts.domain.facts.schemas import DASHA_SYSTEMS, FactSheet, FetchPlan

logger = logging.getLogger(__name__)

DATA_NEEDED_PATTERN = re.compile(r"^DataNeeded:\s*(.+)$", re.MULTILINE)

# Group keys accepted in a DataNeeded line and what they expand to
GROUP_KEYS = {
    "divisionals": ALL_DIVISIONALS,
    "dashas.vimshottari": (
        "dashas.vimshottari.maha",
        "dashas.vimshottari.antar",
        "dashas.vimshottari.pratyantar",
    ),
    "dashas.yogini": ("dashas.yogini.maha",),
}


# ─────────────────────────────────────────────
# Category → plan
# ─────────────────────────────────────────────

def plan_for_category(category: str) -> Optional[FetchPlan]:
    """
    The fetch that satisfies one category. None for `d1` and unknown keys.
    """
    if category == "shadbala":
        return FetchPlan(kind="shadbala", detail="full")
    if category == "yogas":
        return FetchPlan(kind="yogas", findings=["yoga"])
    if category == "doshas":
        return FetchPlan(kind="yogas", findings=["dosha"])

    parts = category.split(".")
    if len(parts) == 2 and parts[0] == "divisionals" and parts[1] in SUPPORTED_CHARTS:
        return FetchPlan(kind="divisionals", charts=[parts[1]])
    if len(parts) == 3 and parts[0] == "dashas" and parts[1] in DASHA_SYSTEMS:
        if category in KNOWN_CATEGORIES:
            return FetchPlan(kind=parts[1], levels=[parts[2]])

    return None


def _plans(categories: Iterable[str]) -> List[FetchPlan]:
    plans = []
    for category in categories:
        plan = plan_for_category(category)
        if plan is not None:
            plans.append(plan)
    return plans


# ─────────────────────────────────────────────
# Question → plans
# ─────────────────────────────────────────────

def required_categories(question: str, table: KeywordTable = KEYWORDS) -> List[str]:
    """
    Categories a question needs, in first-seen order. Every locale's
    rules are checked so mixed-language questions work.
    """
    q = (question or "").lower()
    required: List[str] = []
    for rules in table.values():
        for rule in rules:
            if rule.matches(q):
                required.extend(rule.categories)
    return list(dict.fromkeys(required))


def plan_fetches(
    question: str,
    sheet: FactSheet,
    table: KeywordTable = KEYWORDS,
) -> List[FetchPlan]:
    """
    One FetchPlan per required category the sheet does not yet cover.
    """
    required = required_categories(question, table)
    missing = missing_for(required, coverage_of(sheet))
    plans = _plans(missing)
    logger.debug(f"Question needs {required}; missing {missing}; {len(plans)} plan(s)")
    return plans


# ─────────────────────────────────────────────
# DataNeeded responses
# ─────────────────────────────────────────────

def expand_key(key: str) -> List[str]:
    """
    Category keys named by a DataNeeded key. Unknown keys expand to nothing.
    """
    if key in GROUP_KEYS:
        return list(GROUP_KEYS[key])
    if key in KNOWN_CATEGORIES:
        return [key]
    return []


def parse_data_needed(text: str) -> List[str]:
    """
    Read the first `DataNeeded: a, b` line. Unknown keys are dropped.
    """
    match = DATA_NEEDED_PATTERN.search(text or "")
    if not match:
        return []

    keys = []
    for raw in match.group(1).split(","):
        key = raw.strip()
        if not key:
            continue
        if expand_key(key):
            keys.append(key)
        else:
            logger.debug(f"Dropping unknown DataNeeded key {key!r}")
    return list(dict.fromkeys(keys))


def plans_from_keys(keys: Iterable[str], sheet: Optional[FactSheet] = None) -> List[FetchPlan]:
    """
    FetchPlans for known keys, skipping categories the sheet already covers.
    """
    categories: List[str] = []
    for key in keys:
        expanded = expand_key(key)
        if not expanded:
            logger.debug(f"Dropping unknown fetch key {key!r}")
        categories.extend(expanded)

    categories = list(dict.fromkeys(categories))
    if sheet is not None:
        categories = missing_for(categories, coverage_of(sheet))
    return _plans(categories)
