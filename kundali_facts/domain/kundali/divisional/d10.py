from kundali_facts.domain.kundali.divisional.base import BaseDivisionalCalculator


class D10Calculator(BaseDivisionalCalculator):
    """
    Calculates the Dashamsha (D10) chart from a D1 chart.
    Used primarily for career and professional analysis.
    """

    chart_type = "D10"
    divisions = 10
    calculation_version = "v2"

    def _division_sign(self, sign_id: int, division_index: int) -> int:
        # Odd signs count from themselves, even signs from the 9th
        if self._is_odd_sign(sign_id):
            return self._advance(sign_id, division_index)
        return self._advance(sign_id, 8 + division_index)
