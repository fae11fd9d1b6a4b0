from kundali_facts.domain.kundali.divisional.base import BaseDivisionalCalculator


class D9Calculator(BaseDivisionalCalculator):
    """
    Calculates the Navamsha (D9) chart from a D1 chart.
    """

    chart_type = "D9"
    divisions = 9
    calculation_version = "v1"

    def _division_sign(self, sign_id: int, division_index: int) -> int:
        # Navamsha sign progression: movable signs start from themselves,
        # fixed from the 9th, dual from the 5th, which reduces to this
        return (((sign_id - 1) * 9 + division_index) % 12) + 1
