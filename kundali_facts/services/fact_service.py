import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from kundali_facts.config import settings
from kundali_facts.domain.dasha.calculator import DashaCalculator
from kundali_facts.domain.dasha.cycles import SYSTEMS
from kundali_facts.domain.dasha.items import dasha_items
from kundali_facts.domain.facts.merger import merge_patch, patch_for
from kundali_facts.domain.facts.planner import parse_data_needed, plan_fetches, plans_from_keys
from kundali_facts.domain.facts.schemas import (
    AstroPatch,
    FactSheet,
    FactSheetPatch,
    FetchPlan,
    ProvenanceSource,
)
from kundali_facts.domain.kundali.derived.shadbala import normalize_shadbala
from kundali_facts.domain.kundali.divisional.divisional_builder import DivisionalBuilder
from kundali_facts.domain.kundali.normalizer import normalize_ascendant, normalize_planets
from kundali_facts.domain.kundali.profile import BirthProfile
from kundali_facts.domain.kundali.schemas import Locale
from kundali_facts.domain.rules.rule_engine import RuleEngine

logger = logging.getLogger(__name__)

Fetcher = Callable[[FetchPlan], Awaitable[Union[AstroPatch, FactSheetPatch, None]]]

DEFAULT_DASHA_LEVELS = ("maha", "antar", "current")


class FactService:
    """
    Orchestrates fact-sheet construction and incremental completion.

    This class:
    - Builds an account fact sheet from a birth profile and a raw feed
    - Plans fetches for whatever a question needs but the sheet lacks
    - Issues fetches concurrently and merges results one at a time
    """

    def __init__(
        self,
        dasha_calculator: Optional[DashaCalculator] = None,
        rule_engine: Optional[RuleEngine] = None,
        divisional_builder: Optional[DivisionalBuilder] = None,
    ):
        self.dasha_calculator = dasha_calculator or DashaCalculator()
        self.rule_engine = rule_engine or RuleEngine()
        self.divisional_builder = divisional_builder or DivisionalBuilder()

    # ─────────────────────────────────────────────
    # Sheet construction
    # ─────────────────────────────────────────────

    def build_sheet(
        self,
        profile: BirthProfile,
        ascendant: Any,
        raw_planets: Any,
        moon_longitude: Optional[float] = None,
        locale: Optional[Locale] = None,
        dasha_levels: Sequence[str] = DEFAULT_DASHA_LEVELS,
        divisionals: Optional[Iterable[str]] = None,
        shadbala: Any = None,
        query_instant: Optional[datetime] = None,
        systems: Sequence[str] = SYSTEMS,
    ) -> FactSheet:
        """
        Run every engine over the account data and attribute the result
        to the account card.

        `moon_longitude` defaults to the Moon's sidereal longitude from
        the feed. Divisionals default to none; pass chart names to build them.
        """
        locale = Locale(locale or settings.DEFAULT_LOCALE)

        asc = normalize_ascendant(ascendant, locale)
        chart = normalize_planets(asc, raw_planets, locale)
        detection = self.rule_engine.evaluate(chart.ascendant, chart.planets, locale)

        if moon_longitude is None:
            moon = chart.find("Moon")
            if moon is not None:
                moon_longitude = (moon.sign_id - 1) * 30 + moon.degree

        dashas = []
        if moon_longitude is None:
            logger.warning("No Moon longitude available; dashas left out of the sheet")
        elif dasha_levels:
            report = self.dasha_calculator.calculate(
                profile, moon_longitude, query_instant, systems=systems
            )
            for tree in report.trees.values():
                dashas.extend(dasha_items(tree, dasha_levels, report.query_instant))

        blocks = (
            self.divisional_builder.build(chart, divisionals, locale)
            if divisionals else []
        )

        data = FactSheetPatch(
            ascendant=chart.ascendant,
            d1=list(chart.planets) or None,
            divisionals=blocks or None,
            yogas=list(detection.yogas) or None,
            doshas=list(detection.doshas) or None,
            shadbala=normalize_shadbala(shadbala) or None,
            dashas=dashas or None,
        )

        sheet = merge_patch(FactSheet(locale=locale), patch_for(data, ProvenanceSource.ACCOUNT))
        logger.info(
            f"Built fact sheet: {len(sheet.d1)} planets, {len(sheet.yogas)} yogas, "
            f"{len(sheet.doshas)} doshas, {len(sheet.dashas)} dasha items"
        )
        return sheet

    # ─────────────────────────────────────────────
    # Planning & merging
    # ─────────────────────────────────────────────

    def plan(self, question: str, sheet: FactSheet) -> List[FetchPlan]:
        plans = plan_fetches(question, sheet)
        logger.info(f"Planned {len(plans)} fetch(es): {[p.categories() for p in plans]}")
        return plans

    def apply(self, sheet: FactSheet, patch: AstroPatch) -> FactSheet:
        merged = merge_patch(sheet, patch)
        logger.info(f"Applied patch covering {[e.category for e in patch.provenance]}")
        return merged

    # ─────────────────────────────────────────────
    # Async completion
    # ─────────────────────────────────────────────

    async def complete(
        self,
        question: str,
        sheet: FactSheet,
        fetcher: Fetcher,
        timeout: Optional[float] = None,
    ) -> FactSheet:
        """
        Fetch and merge everything the question needs but the sheet lacks.
        """
        return await self._execute(self.plan(question, sheet), sheet, fetcher, timeout)

    async def complete_from_data_needed(
        self,
        response_text: str,
        sheet: FactSheet,
        fetcher: Fetcher,
        timeout: Optional[float] = None,
    ) -> FactSheet:
        """
        Same as `complete`, driven by a `DataNeeded: ...` line instead of a question.
        """
        keys = parse_data_needed(response_text)
        plans = plans_from_keys(keys, sheet)
        logger.info(f"DataNeeded keys {keys} → {len(plans)} fetch(es)")
        return await self._execute(plans, sheet, fetcher, timeout)

    async def _execute(
        self,
        plans: List[FetchPlan],
        sheet: FactSheet,
        fetcher: Fetcher,
        timeout: Optional[float],
    ) -> FactSheet:
        if not plans:
            return sheet

        timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS

        async def run(plan: FetchPlan) -> Tuple[FetchPlan, Optional[AstroPatch]]:
            try:
                result = await asyncio.wait_for(fetcher(plan), timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Fetch {plan.kind} {plan.categories()} timed out after {timeout}s")
                return plan, None
            except Exception as e:
                logger.warning(f"Fetch {plan.kind} {plan.categories()} failed: {e}")
                return plan, None

            if result is None:
                return plan, None
            if isinstance(result, FactSheetPatch):
                result = patch_for(result, ProvenanceSource.FETCH, plan.categories())
            return plan, result

        # Merges happen here, one at a time, as fetches finish
        for finished in asyncio.as_completed([run(plan) for plan in plans]):
            plan, patch = await finished
            if patch is None:
                continue
            sheet = self.apply(sheet, patch)

        return sheet
