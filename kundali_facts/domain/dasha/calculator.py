import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from kundali_facts.config import settings
from kundali_facts.domain.dasha.cycles import SYSTEMS, cycle_for
from kundali_facts.domain.dasha.engine import (
    active_stack,
    build_dasha_tree,
    partition_problems,
    validate_tree,
)
from kundali_facts.domain.dasha.schemas import ActiveStack, DashaTree
from kundali_facts.domain.kundali.derived.nakshatra_calculator import NakshatraCalculator
from kundali_facts.domain.kundali.derived.schemas import NakshatraPosition
from kundali_facts.domain.kundali.errors import PartitionViolationError
from kundali_facts.domain.kundali.profile import BirthProfile

logger = logging.getLogger(__name__)


class DashaValidation(BaseModel):
    """
    Totals and partition check for one dasha tree.
    """
    model_config = ConfigDict(frozen=True)

    system: str
    cycle_years: float
    maha_years: float
    span_years: float
    partition_ok: bool
    problems: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class DashaReport:
    """
    Full dasha calculation for one birth.
    """
    nakshatra: NakshatraPosition
    birth_utc: datetime
    query_instant: datetime
    trees: Dict[str, DashaTree] = field(default_factory=dict, repr=False)
    active: Dict[str, ActiveStack] = field(default_factory=dict)
    validation: Dict[str, DashaValidation] = field(default_factory=dict)

    @property
    def partition_ok(self) -> bool:
        return all(v.partition_ok for v in self.validation.values())


class DashaCalculator:
    """
    Computes Vimshottari and Yogini dasha trees for a birth profile.

    This class:
    - Resolves the Moon's nakshatra
    - Builds and validates one tree per system
    - Reports active periods at a query instant
    """

    def __init__(
        self,
        depth: Optional[int] = None,
        year_days: Optional[float] = None,
        tolerance_seconds: Optional[float] = None,
        yogini_rule: Optional[str] = None,
        yogini_start_lord: Optional[str] = None,
    ):
        self.depth = depth if depth is not None else settings.DASHA_DEPTH
        self.year_days = year_days if year_days is not None else settings.DASHA_YEAR_DAYS
        self.tolerance_seconds = (
            tolerance_seconds if tolerance_seconds is not None
            else settings.PARTITION_TOLERANCE_SECONDS
        )
        self.yogini_rule = yogini_rule or settings.YOGINI_START_RULE
        self.yogini_start_lord = yogini_start_lord or settings.YOGINI_START_LORD
        self.nakshatras = NakshatraCalculator()

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def build_tree(
        self,
        birth_utc: datetime,
        nakshatra: NakshatraPosition,
        system: str,
        validate: bool = True,
    ) -> DashaTree:
        cycle = cycle_for(system, self.yogini_rule, self.yogini_start_lord)
        tree = build_dasha_tree(
            birth_utc,
            nakshatra,
            cycle,
            depth=self.depth,
            year_days=self.year_days,
            validate=False,
        )
        if validate:
            validate_tree(tree, self.tolerance_seconds)
        return tree

    def calculate(
        self,
        profile: BirthProfile,
        moon_longitude: float,
        query_instant: Optional[datetime] = None,
        systems: Sequence[str] = SYSTEMS,
    ) -> DashaReport:
        """
        Calculate dasha trees, active stacks and validation notes.

        Raises PartitionViolationError if any tree fails validation.
        """
        birth_utc = profile.birth_datetime_utc()
        instant = query_instant or datetime.now(timezone.utc)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)

        nakshatra = self.nakshatras.calculate(moon_longitude)
        logger.info(
            f"Moon in {nakshatra.name} pada {nakshatra.pada}, "
            f"{nakshatra.fraction_remaining:.4f} remaining"
        )

        trees: Dict[str, DashaTree] = {}
        active: Dict[str, ActiveStack] = {}
        validation: Dict[str, DashaValidation] = {}

        for system in systems:
            tree = self.build_tree(birth_utc, nakshatra, system, validate=False)
            notes = self._validation(tree)
            if not notes.partition_ok:
                logger.error(f"{tree.system} dasha tree failed validation")
                raise PartitionViolationError(notes.problems)

            trees[tree.system] = tree
            active[tree.system] = active_stack(tree, instant)
            validation[tree.system] = notes

        return DashaReport(
            nakshatra=nakshatra,
            birth_utc=birth_utc,
            query_instant=instant,
            trees=trees,
            active=active,
            validation=validation,
        )

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    def _validation(self, tree: DashaTree) -> DashaValidation:
        year_seconds = tree.year_days * 86400.0
        problems = partition_problems(tree, self.tolerance_seconds)
        return DashaValidation(
            system=tree.system,
            cycle_years=tree.total_years,
            maha_years=round(sum(p.years for p in tree.periods), 9),
            span_years=round((tree.end - tree.start).total_seconds() / year_seconds, 9),
            partition_ok=not problems,
            problems=problems,
        )
