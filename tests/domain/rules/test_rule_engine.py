import unittest
from types import MappingProxyType

from kundali_facts.domain.kundali.normalizer import normalize_planets
from kundali_facts.domain.kundali.schemas import Locale
from kundali_facts.domain.rules.detectors import DETECTORS, DetectorKind, detect_mangal
from kundali_facts.domain.rules.rule_engine import RuleEngine, dedup_by_key, detect_all
from kundali_facts.domain.rules.schemas import YogaFinding


def failing_detector(ascendant, planets, locale=Locale.EN):
    raise RuntimeError("boom")


class TestRuleEngine(unittest.TestCase):
    def setUp(self):
        # Taurus lagna with Gajakesari, Vipareeta and Mangal (Mars in H8)
        chart = normalize_planets(2, [
            {"name": "Moon", "sign": 10},
            {"name": "Jupiter", "sign": 7},
            {"name": "Mars", "sign": 9},
            {"name": "Sun", "sign": 5},
            {"name": "Mercury", "sign": 5},
        ])
        self.ascendant = chart.ascendant
        self.planets = chart.planets

    def test_detect_all(self):
        result = detect_all(self.ascendant, self.planets)

        yoga_keys = [y.key for y in result.yogas]
        dosha_keys = [d.key for d in result.doshas]
        self.assertIn("gajakesari", yoga_keys)
        self.assertIn("vipareeta-rajyoga", yoga_keys)
        self.assertIn("budha-aditya", yoga_keys)
        self.assertIn("dosha.mangal", dosha_keys)
        self.assertTrue(all(d.group == "dosha" for d in result.doshas))

    def test_deterministic_and_order_independent(self):
        first = detect_all(self.ascendant, self.planets)
        second = detect_all(self.ascendant, self.planets)
        self.assertEqual(first, second)

        reversed_engine = RuleEngine(MappingProxyType(dict(reversed(list(DETECTORS.items())))))
        result = reversed_engine.evaluate(self.ascendant, self.planets)
        self.assertEqual({y.key for y in result.yogas}, {y.key for y in first.yogas})
        self.assertEqual({d.key for d in result.doshas}, {d.key for d in first.doshas})

    def test_failing_detector_is_isolated(self):
        engine = RuleEngine({
            DetectorKind.GAJAKESARI: failing_detector,
            DetectorKind.MANGAL: detect_mangal,
        })
        with self.assertLogs("kundali_facts.domain.rules.rule_engine", level="ERROR") as logs:
            result = engine.evaluate(self.ascendant, self.planets)

        self.assertEqual(result.yogas, ())
        self.assertEqual([d.key for d in result.doshas], ["dosha.mangal"])
        self.assertIn("gajakesari", logs.output[0])

    def test_selected_kinds(self):
        engine = RuleEngine()
        result = engine.evaluate(self.ascendant, self.planets, kinds=["gajakesari"])
        self.assertEqual([y.key for y in result.yogas], ["gajakesari"])
        self.assertEqual(result.doshas, ())

    def test_localized_labels(self):
        result = detect_all(self.ascendant, self.planets, Locale.NE)
        labels = {d.key: d.label for d in result.doshas}
        self.assertEqual(labels["dosha.mangal"], "मंगल दोष")

    def test_findings_are_deduplicated_by_key(self):
        def same(ascendant, planets, locale=Locale.EN):
            return YogaFinding(key="duplicate", label="Duplicate")

        engine = RuleEngine({DetectorKind.SHASHA: same, DetectorKind.HAMSA: same})
        result = engine.evaluate(self.ascendant, self.planets)
        self.assertEqual(len(result.yogas), 1)

    def test_first_finding_per_key_wins(self):
        def strong(ascendant, planets, locale=Locale.EN):
            return YogaFinding(key="duplicate", label="Duplicate", strength="strong")

        def mild(ascendant, planets, locale=Locale.EN):
            return YogaFinding(key="duplicate", label="Duplicate", strength="mild")

        engine = RuleEngine({DetectorKind.SHASHA: strong, DetectorKind.HAMSA: mild})
        result = engine.evaluate(self.ascendant, self.planets)
        self.assertEqual([y.strength for y in result.yogas], ["strong"])

    def test_supplemented_detectors_run(self):
        chart = normalize_planets(1, [
            {"name": "Moon", "sign": 3},
            {"name": "Saturn", "sign": 10},
            {"name": "Mars", "sign": 9},
            {"name": "Jupiter", "sign": 11},
        ])
        result = detect_all(chart.ascendant, chart.planets)
        dosha_keys = [d.key for d in result.doshas]
        self.assertIn("dosha.ashtama-shani", dosha_keys)
        self.assertNotIn("dosha.papakartari.10", dosha_keys)

    def test_dedup_by_key(self):
        findings = [
            YogaFinding(key="a", label="A", strength="strong"),
            YogaFinding(key="b", label="B"),
            YogaFinding(key="a", label="A", strength="mild"),
        ]
        deduped = dedup_by_key(findings)
        self.assertEqual([f.key for f in deduped], ["a", "b"])
        self.assertEqual(deduped[0].strength, "strong")


if __name__ == "__main__":
    unittest.main()
