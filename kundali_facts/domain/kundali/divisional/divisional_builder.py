import logging
from typing import Dict, Iterable, List

from kundali_facts.domain.kundali.schemas import Locale, NormalizedChart
from kundali_facts.domain.kundali.divisional.schemas import DivisionalBlock
from kundali_facts.domain.kundali.divisional.base import BaseDivisionalCalculator
from kundali_facts.domain.kundali.divisional.d2 import D2Calculator
from kundali_facts.domain.kundali.divisional.d7 import D7Calculator
from kundali_facts.domain.kundali.divisional.d9 import D9Calculator
from kundali_facts.domain.kundali.divisional.d10 import D10Calculator

logger = logging.getLogger(__name__)


class DivisionalBuilder:
    """
    Orchestrates the calculation of divisional charts
    for a normalized D1 chart.
    """

    def __init__(
        self,
        calculators: List[BaseDivisionalCalculator] | None = None
    ):
        # Default supported divisionals
        self.calculators: Dict[str, BaseDivisionalCalculator] = {
            c.chart_type: c
            for c in (calculators or [
                D2Calculator(),
                D7Calculator(),
                D9Calculator(),
                D10Calculator(),
            ])
        }

    @property
    def supported(self) -> List[str]:
        return list(self.calculators)

    def build(
        self,
        chart: NormalizedChart,
        charts: Iterable[str] | None = None,
        locale: Locale = Locale.EN,
    ) -> List[DivisionalBlock]:
        """
        Build the requested divisional charts (all supported by default).
        Unsupported chart names are skipped.
        """
        requested = list(charts) if charts is not None else self.supported
        blocks: List[DivisionalBlock] = []

        for chart_type in requested:
            calculator = self.calculators.get(str(chart_type).upper())
            if calculator is None:
                logger.warning(f"Unsupported divisional chart {chart_type!r}; skipped")
                continue
            blocks.append(calculator.calculate(chart, locale))

        return blocks
