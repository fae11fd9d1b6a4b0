from abc import ABC, abstractmethod
from typing import List, Tuple

from kundali_facts.domain.kundali import houses
from kundali_facts.domain.kundali.schemas import Ascendant, Locale, NormalizedChart
from kundali_facts.domain.kundali.divisional.schemas import DivisionalBlock, DivisionalRow
from kundali_facts.domain.kundali.tables import sign_label


class BaseDivisionalCalculator(ABC):
    """
    Abstract base class for all divisional chart calculators.

    Each divisional chart (D2, D7, D9, D10) must:
    - Declare `chart_type` and `divisions`
    - Implement `_division_sign` mapping a D1 sign + division index to a sign
    """

    chart_type: str
    divisions: int
    calculation_version: str = "v1"

    @abstractmethod
    def _division_sign(self, sign_id: int, division_index: int) -> int:
        """
        Sign id (1–12) of the given division (0-based) of a D1 sign.
        """
        raise NotImplementedError

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def position(self, sign_id: int, degree_in_sign: float) -> Tuple[int, float]:
        """
        Divisional sign and degree of a D1 sign + degree.
        """
        span = 30 / self.divisions
        degree = float(degree_in_sign) % 30.0
        division_index = min(self.divisions - 1, int(degree // span))

        d_sign = self._division_sign(houses.clamp_sign(sign_id), division_index)
        d_degree = (degree - division_index * span) * self.divisions

        return d_sign, round(d_degree, 2)

    def calculate(
        self,
        chart: NormalizedChart,
        locale: Locale = Locale.EN,
    ) -> DivisionalBlock:
        """
        Calculate the divisional chart from a normalized D1 chart.

        Houses are whole-sign from the divisional ascendant.
        """
        asc_sign, asc_degree = self.position(
            chart.ascendant.sign_id,
            chart.ascendant.degree,
        )

        ascendant = Ascendant(
            sign_id=asc_sign,
            sign_label=sign_label(asc_sign, locale),
            degree=asc_degree,
        )

        rows: List[DivisionalRow] = []
        for planet in chart.planets:
            d_sign, d_degree = self.position(planet.sign_id, planet.degree)
            rows.append(
                DivisionalRow(
                    planet=planet.planet,
                    sign_id=d_sign,
                    sign_label=sign_label(d_sign, locale),
                    house=houses.house(asc_sign, d_sign),
                    degree=d_degree,
                    retrograde=planet.retrograde,
                )
            )

        return DivisionalBlock(
            chart=self.chart_type,
            ascendant=ascendant,
            planets=rows,
            calculation_version=self.calculation_version,
        )

    # ─────────────────────────────────────────────
    # Shared helpers
    # ─────────────────────────────────────────────

    @staticmethod
    def _is_odd_sign(sign_id: int) -> bool:
        # Aries (1) is odd
        return sign_id % 2 == 1

    @staticmethod
    def _advance(sign_id: int, steps: int) -> int:
        return ((sign_id - 1 + steps) % 12) + 1
