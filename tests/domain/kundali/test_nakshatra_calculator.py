import unittest

from kundali_facts.domain.kundali.derived.nakshatra_calculator import (
    NAKSHATRA_SPAN,
    NakshatraCalculator,
    resolve_nakshatra,
)


class TestNakshatraCalculator(unittest.TestCase):
    def setUp(self):
        self.calculator = NakshatraCalculator()

    def test_properties_hold_across_the_zodiac(self):
        longitude = 0.0
        while longitude < 360.0:
            position = self.calculator.calculate(longitude)
            self.assertGreaterEqual(position.index, 1)
            self.assertLessEqual(position.index, 27)
            self.assertGreaterEqual(position.pada, 1)
            self.assertLessEqual(position.pada, 4)
            self.assertGreaterEqual(position.fraction_used, 0.0)
            self.assertLess(position.fraction_used, 1.0)
            self.assertAlmostEqual(position.fraction_used + position.fraction_remaining, 1.0)
            longitude += 0.37

    def test_boundaries(self):
        first = self.calculator.calculate(0.0)
        self.assertEqual((first.index, first.name, first.pada), (1, "Ashwini", 1))
        self.assertEqual(first.fraction_remaining, 1.0)

        second = self.calculator.calculate(NAKSHATRA_SPAN)
        self.assertEqual(second.index, 2)
        self.assertEqual(second.name, "Bharani")

        last = self.calculator.calculate(359.9999999)
        self.assertEqual((last.index, last.name, last.pada), (27, "Revati", 4))
        self.assertGreater(last.fraction_remaining, 0.0)

    def test_midpoint_and_pada(self):
        # Ardra spans 66°40' to 80°00'
        position = self.calculator.calculate(74.0)
        self.assertEqual(position.name, "Ardra")
        self.assertEqual(position.pada, 3)
        self.assertAlmostEqual(position.fraction_used, 0.55)
        self.assertAlmostEqual(position.fraction_remaining, 0.45)

    def test_out_of_range_longitudes_wrap(self):
        self.assertEqual(self.calculator.calculate(360.0).index, 1)
        self.assertEqual(self.calculator.calculate(-1.0).index, 27)
        self.assertEqual(resolve_nakshatra(725.0), self.calculator.calculate(5.0))

    def test_from_sign(self):
        by_id = self.calculator.from_sign(10, 12.0)
        by_label = self.calculator.from_sign("Capricorn", 12.0)
        self.assertEqual(by_id, by_label)
        # 282° lies in Shravana
        self.assertEqual(by_id.name, "Shravana")

        with self.assertRaises(ValueError):
            self.calculator.from_sign("Ophiuchus", 3.0)


if __name__ == "__main__":
    unittest.main()
