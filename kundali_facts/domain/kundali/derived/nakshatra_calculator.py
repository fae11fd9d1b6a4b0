from kundali_facts.domain.kundali.derived.schemas import NakshatraPosition
from kundali_facts.domain.kundali.tables import NAKSHATRAS, sign_id_from_label

NAKSHATRA_SPAN = 360 / 27  # 13.333333...
PADA_SPAN = NAKSHATRA_SPAN / 4


class NakshatraCalculator:
    """
    Utility to resolve nakshatra and pada from a sidereal longitude.
    """

    def calculate(self, longitude: float) -> NakshatraPosition:
        """
        Resolve the nakshatra of a longitude.

        Longitudes outside [0, 360) are wrapped, and index/pada are
        clamped so floating-point edges never step past the tables.
        """
        absolute_degree = float(longitude) % 360.0

        index = min(27, int(absolute_degree // NAKSHATRA_SPAN) + 1)

        degree_within = absolute_degree - (index - 1) * NAKSHATRA_SPAN
        pada = min(4, max(1, int(degree_within // PADA_SPAN) + 1))

        fraction_used = degree_within / NAKSHATRA_SPAN
        # Keep in [0, 1) so the remaining balance is never zero
        fraction_used = min(max(fraction_used, 0.0), 1.0 - 1e-12)

        return NakshatraPosition(
            index=index,
            name=NAKSHATRAS[index - 1],
            pada=pada,
            fraction_used=fraction_used,
            fraction_remaining=1.0 - fraction_used,
        )

    def from_sign(self, sign, degree_in_sign: float) -> NakshatraPosition:
        """
        Resolve from a sign (id or label) plus degree within that sign.
        """
        if isinstance(sign, str):
            sign_id = sign_id_from_label(sign)
            if sign_id is None:
                raise ValueError(f"Invalid zodiac sign: {sign}")
        else:
            sign_id = int(sign)

        absolute_degree = (sign_id - 1) * 30 + float(degree_in_sign)
        return self.calculate(absolute_degree)


def resolve_nakshatra(longitude: float) -> NakshatraPosition:
    return NakshatraCalculator().calculate(longitude)
