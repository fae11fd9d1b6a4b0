from kundali_facts.domain.kundali.divisional.base import BaseDivisionalCalculator


class D7Calculator(BaseDivisionalCalculator):
    """
    Calculates the Saptamsha (D7) chart from a D1 chart.
    Used for children and progeny.
    """

    chart_type = "D7"
    divisions = 7
    calculation_version = "v1"

    def _division_sign(self, sign_id: int, division_index: int) -> int:
        # Odd signs count from themselves, even signs from the 7th
        if self._is_odd_sign(sign_id):
            return self._advance(sign_id, division_index)
        return self._advance(sign_id, 6 + division_index)
