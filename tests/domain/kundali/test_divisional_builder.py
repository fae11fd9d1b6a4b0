import unittest

from kundali_facts.domain.kundali.divisional.d10 import D10Calculator
from kundali_facts.domain.kundali.divisional.d2 import D2Calculator
from kundali_facts.domain.kundali.divisional.d7 import D7Calculator
from kundali_facts.domain.kundali.divisional.d9 import D9Calculator
from kundali_facts.domain.kundali.divisional.divisional_builder import DivisionalBuilder
from kundali_facts.domain.kundali.normalizer import normalize_ascendant, normalize_planets
from kundali_facts.domain.kundali.schemas import Locale


class TestDivisionalPositions(unittest.TestCase):
    def test_navamsa(self):
        d9 = D9Calculator()
        self.assertEqual(d9.position(1, 0.0)[0], 1)
        self.assertEqual(d9.position(1, 29.9)[0], 9)
        # Fixed signs start from the 9th: Taurus → Capricorn
        self.assertEqual(d9.position(2, 0.0)[0], 10)
        # Dual signs start from the 5th: Gemini → Libra
        self.assertEqual(d9.position(3, 0.0)[0], 7)

    def test_navamsa_degree(self):
        sign, degree = D9Calculator().position(1, 3.5)
        self.assertEqual(sign, 2)
        self.assertAlmostEqual(degree, 1.5)

    def test_dashamsa(self):
        d10 = D10Calculator()
        self.assertEqual(d10.position(1, 5.0)[0], 2)
        # Even signs count from the 9th: Taurus → Capricorn
        self.assertEqual(d10.position(2, 0.0)[0], 10)
        self.assertEqual(d10.position(2, 29.0)[0], 7)

    def test_saptamsa(self):
        d7 = D7Calculator()
        self.assertEqual(d7.position(1, 10.0)[0], 3)
        # Even signs count from the 7th: Taurus → Scorpio
        self.assertEqual(d7.position(2, 0.0)[0], 8)

    def test_hora(self):
        d2 = D2Calculator()
        self.assertEqual(d2.position(1, 10.0)[0], 5)
        self.assertEqual(d2.position(1, 20.0)[0], 4)
        self.assertEqual(d2.position(2, 10.0)[0], 4)
        self.assertEqual(d2.position(2, 20.0)[0], 5)


class TestDivisionalBuilder(unittest.TestCase):
    def setUp(self):
        self.chart = normalize_planets(
            normalize_ascendant({"signId": 1, "degree": 0.0}),
            [
                {"name": "Sun", "sign": 2, "degree": 0.0},
                {"name": "Moon", "sign": 1, "degree": 3.5, "retrograde": False},
                {"name": "Saturn", "sign": 7, "degree": 21.0, "retrograde": True},
            ],
        )
        self.builder = DivisionalBuilder()

    def test_builds_every_supported_chart_by_default(self):
        blocks = self.builder.build(self.chart)
        self.assertEqual([b.chart for b in blocks], ["D2", "D7", "D9", "D10"])
        self.assertEqual(self.builder.supported, ["D2", "D7", "D9", "D10"])

    def test_houses_count_from_divisional_ascendant(self):
        [d9] = self.builder.build(self.chart, ["D9"])
        self.assertEqual(d9.ascendant.sign_id, 1)

        rows = {row.planet: row for row in d9.planets}
        self.assertEqual(rows["Sun"].sign_id, 10)
        self.assertEqual(rows["Sun"].house, 10)
        self.assertEqual(rows["Moon"].sign_id, 2)
        self.assertEqual(rows["Moon"].house, 2)
        self.assertTrue(rows["Saturn"].retrograde)

    def test_unsupported_charts_are_skipped(self):
        with self.assertLogs("kundali_facts.domain.kundali.divisional.divisional_builder", level="WARNING"):
            blocks = self.builder.build(self.chart, ["d10", "D60", "D9"])
        self.assertEqual([b.chart for b in blocks], ["D10", "D9"])
        self.assertEqual(blocks[0].calculation_version, "v2")

    def test_localized_labels(self):
        [d2] = self.builder.build(self.chart, ["D2"], Locale.NE)
        self.assertTrue(all(row.sign_label in ("सिंह", "कर्क") for row in d2.planets))


if __name__ == "__main__":
    unittest.main()
