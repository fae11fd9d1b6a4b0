from kundali_facts.domain.kundali.divisional.base import BaseDivisionalCalculator

LEO = 5
CANCER = 4


class D2Calculator(BaseDivisionalCalculator):
    """
    Calculates the Hora (D2) chart from a D1 chart.

    Every planet lands in either Leo (Sun's hora) or Cancer (Moon's hora).
    """

    chart_type = "D2"
    divisions = 2
    calculation_version = "v1"

    def _division_sign(self, sign_id: int, division_index: int) -> int:
        first_half = division_index == 0
        if self._is_odd_sign(sign_id):
            return LEO if first_half else CANCER
        return CANCER if first_half else LEO
