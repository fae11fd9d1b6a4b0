import unittest

from kundali_facts.domain.kundali.normalizer import normalize_planets
from kundali_facts.domain.kundali.schemas import Locale
from kundali_facts.domain.rules.detectors import (
    DETECTORS,
    DetectorKind,
    detect_alpa_shakti,
    detect_ashtama_shani,
    detect_budha_aditya,
    detect_daridra,
    detect_gajakesari,
    detect_grahan,
    detect_guru_chandala,
    detect_hamsa,
    detect_kaal_sarp,
    detect_kemadruma,
    detect_kendra_trikona_rajyoga,
    detect_malavya,
    detect_mangal,
    detect_papakartari_tenth,
    detect_pitri,
    detect_ruchaka,
    detect_shasha,
    detect_shrapit,
    detect_vipareeta_rajyoga,
    detect_vish,
)


def chart(ascendant, **signs):
    """Normalized positions from planet=sign keyword pairs."""
    normalized = normalize_planets(
        ascendant,
        [{"name": name, "sign": sign} for name, sign in signs.items()],
    )
    return normalized.ascendant, normalized.planets


class TestYogas(unittest.TestCase):
    def test_gajakesari_from_moon(self):
        # Taurus lagna: Moon in Capricorn (H9), Jupiter in Libra (H6)
        asc, planets = chart(2, Moon=10, Jupiter=7)
        finding = detect_gajakesari(asc, planets, Locale.EN)

        self.assertIsNotNone(finding)
        self.assertEqual(finding.key, "gajakesari")
        self.assertEqual(finding.label, "Gajakesari Yoga")
        self.assertIn("10th", finding.justification)
        self.assertEqual(finding.justification, "Jupiter is 10th from Moon (Capricorn → Libra).")
        self.assertEqual(finding.factors, ["Moon", "Jupiter"])
        self.assertEqual(finding.strength, "moderate")

    def test_gajakesari_absent(self):
        asc, planets = chart(2, Moon=10, Jupiter=11)
        self.assertIsNone(detect_gajakesari(asc, planets))
        asc, planets = chart(2, Moon=10)
        self.assertIsNone(detect_gajakesari(asc, planets))

    def test_gajakesari_nepali(self):
        asc, planets = chart(2, Moon=10, Jupiter=7)
        finding = detect_gajakesari(asc, planets, Locale.NE)
        self.assertEqual(finding.label, "गजकेसरी योग")
        self.assertIn("10औं", finding.justification)
        self.assertIn("मकर", finding.justification)

    def test_gajakesari_strength_follows_jupiter_dignity(self):
        # Jupiter exalted in Cancer, 1st from a Cancer Moon
        asc, planets = chart(1, Moon=4, Jupiter=4)
        self.assertEqual(detect_gajakesari(asc, planets).strength, "strong")

    def test_mahapurusha(self):
        asc, planets = chart(1, Saturn=10, Jupiter=4, Mars=1, Venus=12)

        shasha = detect_shasha(asc, planets)
        self.assertEqual(shasha.strength, "moderate")
        self.assertIn("own sign", shasha.justification)
        self.assertEqual(shasha.group, "Pancha-Mahapurusha")

        hamsa = detect_hamsa(asc, planets)
        self.assertEqual(hamsa.strength, "strong")
        self.assertIn("exalted", hamsa.justification)

        self.assertIsNotNone(detect_ruchaka(asc, planets))
        # Venus is exalted in Pisces but Pisces is the 12th from Aries
        self.assertIsNone(detect_malavya(asc, planets))

    def test_mahapurusha_requires_dignity(self):
        asc, planets = chart(1, Saturn=4)
        self.assertIsNone(detect_shasha(asc, planets))

    def test_vipareeta_rajyoga(self):
        # Taurus lagna: Mars rules the 12th and sits in Sagittarius, the 8th
        asc, planets = chart(2, Mars=9)
        finding = detect_vipareeta_rajyoga(asc, planets)

        self.assertEqual(finding.justification, "Mars (lord of H12th) placed in H8th")
        self.assertEqual(finding.factors, ["Mars"])
        self.assertEqual(finding.strength, "moderate")

    def test_vipareeta_aggregates_lords(self):
        asc, planets = chart(2, Mars=9, Jupiter=7)
        finding = detect_vipareeta_rajyoga(asc, planets)

        self.assertEqual(
            finding.justification,
            "Jupiter (lord of H8th) placed in H6th; Mars (lord of H12th) placed in H8th",
        )
        self.assertEqual(finding.factors, ["Jupiter", "Mars"])
        self.assertEqual(finding.strength, "strong")

    def test_vipareeta_lords_in_own_houses(self):
        # Jupiter (8th lord) sits in the 8th; Mars (12th lord) in the 12th
        asc, planets = chart(2, Mars=1, Jupiter=9)
        finding = detect_vipareeta_rajyoga(asc, planets)
        self.assertIn("Mars (lord of H12th) placed in H12th", finding.justification)

    def test_vipareeta_absent(self):
        asc, planets = chart(2, Mars=2, Jupiter=5, Venus=2)
        self.assertIsNone(detect_vipareeta_rajyoga(asc, planets))

    def test_kendra_trikona_rajyoga(self):
        # Aries lagna: Moon rules the 4th, Jupiter the 9th; both in Cancer
        asc, planets = chart(1, Moon=4, Jupiter=4)
        finding = detect_kendra_trikona_rajyoga(asc, planets)

        self.assertEqual(finding.justification, "Moon (lord of H4th) with Jupiter (lord of H9th) in H4")
        self.assertEqual(finding.factors, ["Moon", "Jupiter"])
        self.assertEqual(finding.strength, "moderate")
        self.assertEqual(finding.group, "Rajyoga")

    def test_kendra_trikona_aggregates_pairs(self):
        asc, planets = chart(1, Mars=10, Saturn=10, Sun=10)
        finding = detect_kendra_trikona_rajyoga(asc, planets)

        self.assertEqual(len(finding.justification.split("; ")), 3)
        self.assertEqual(finding.factors, ["Mars", "Sun", "Saturn"])
        self.assertEqual(finding.strength, "strong")

    def test_kendra_trikona_absent(self):
        asc, planets = chart(1, Moon=4, Jupiter=5)
        self.assertIsNone(detect_kendra_trikona_rajyoga(asc, planets))

    def test_budha_aditya(self):
        asc, planets = chart(1, Sun=5, Mercury=5)
        finding = detect_budha_aditya(asc, planets)
        self.assertEqual(finding.justification, "Mercury and Sun both in Leo.")
        asc, planets = chart(1, Sun=5, Mercury=6)
        self.assertIsNone(detect_budha_aditya(asc, planets))


class TestDoshas(unittest.TestCase):
    def test_mangal_in_seventh(self):
        asc, planets = chart(1, Mars=7, Moon=3)
        finding = detect_mangal(asc, planets)

        self.assertEqual(finding.key, "dosha.mangal")
        self.assertEqual(finding.group, "dosha")
        self.assertEqual(finding.strength, "medium")
        self.assertEqual(finding.factors, ["Mars"])
        self.assertIn("H7", finding.justification)

    def test_mangal_in_fifth_is_absent(self):
        asc, planets = chart(1, Mars=5, Moon=1)
        self.assertIsNone(detect_mangal(asc, planets))

    def test_mangal_moon_factor(self):
        asc, planets = chart(1, Mars=7, Moon=1)
        finding = detect_mangal(asc, planets)
        self.assertEqual(finding.strength, "high")
        self.assertEqual(finding.factors, ["Mars", "Moon"])
        self.assertIn("Mars is 7th from Moon", finding.justification)

    def test_kaal_sarp_with_equal_arcs(self):
        asc, planets = chart(1, Rahu=1, Sun=2, Moon=3, Mars=4, Mercury=2, Jupiter=5, Venus=3, Saturn=6)
        finding = detect_kaal_sarp(asc, planets)
        self.assertEqual(finding.key, "dosha.kaalsarpa")
        self.assertEqual(finding.factors, ["Rahu", "Ketu"])

        # Houses 3 and 9 straddle both arcs
        asc, planets = chart(1, Rahu=1, Sun=3, Moon=9)
        self.assertIsNone(detect_kaal_sarp(asc, planets))

    def test_kaal_sarp_uses_shorter_arc(self):
        asc, planets = chart(1, Rahu=1, Ketu=5, Sun=2, Moon=3)
        self.assertIsNotNone(detect_kaal_sarp(asc, planets))

        asc, planets = chart(1, Rahu=1, Ketu=5, Sun=2, Moon=9)
        self.assertIsNone(detect_kaal_sarp(asc, planets))

    def test_kaal_sarp_needs_nodes(self):
        asc, planets = chart(1, Sun=2, Moon=3)
        self.assertIsNone(detect_kaal_sarp(asc, planets))

    def test_conjunction_doshas(self):
        asc, planets = chart(1, Sun=4, Rahu=4, Saturn=4, Jupiter=10)

        grahan = detect_grahan(asc, planets)
        self.assertEqual(grahan.factors, ["Sun", "Rahu"])
        self.assertEqual(grahan.justification, "Sun with Rahu in H4")

        self.assertEqual(detect_shrapit(asc, planets).factors, ["Saturn", "Rahu"])
        # Jupiter sits with the derived Ketu in the 10th
        self.assertEqual(detect_guru_chandala(asc, planets).factors, ["Jupiter", "Ketu"])

    def test_conjunction_absent(self):
        asc, planets = chart(1, Sun=4, Moon=5, Rahu=6, Saturn=1, Jupiter=2)
        self.assertIsNone(detect_grahan(asc, planets))
        self.assertIsNone(detect_shrapit(asc, planets))
        self.assertIsNone(detect_guru_chandala(asc, planets))

    def test_kemadruma(self):
        # Nodes next to the Moon do not break the isolation
        asc, planets = chart(1, Moon=4, Rahu=3, Sun=7, Saturn=10)
        finding = detect_kemadruma(asc, planets)
        self.assertEqual(finding.strength, "low")
        self.assertIn("H4", finding.justification)

        asc, planets = chart(1, Moon=4, Sun=5)
        self.assertIsNone(detect_kemadruma(asc, planets))

    def test_pitri(self):
        asc, planets = chart(1, Sun=4, Rahu=4)
        finding = detect_pitri(asc, planets)
        self.assertEqual(finding.key, "dosha.pitri")
        self.assertEqual(finding.factors, ["Sun", "Rahu"])

        asc, planets = chart(1, Sun=4, Rahu=6)
        self.assertIsNone(detect_pitri(asc, planets))

    def test_vish(self):
        asc, planets = chart(1, Saturn=7, Moon=7)
        finding = detect_vish(asc, planets)
        self.assertEqual(finding.key, "dosha.vish-yoga")
        self.assertEqual(finding.justification, "Saturn with Moon in H7")

        asc, planets = chart(1, Saturn=7, Moon=8)
        self.assertIsNone(detect_vish(asc, planets))

    def test_daridra(self):
        asc, planets = chart(1, Mars=2, Saturn=11)
        finding = detect_daridra(asc, planets)
        self.assertEqual(finding.factors, ["Mars", "Saturn"])
        self.assertEqual(finding.justification, "Malefics in the 2nd/11th houses: Mars, Saturn.")

        # Rahu in the 2nd counts; its derived Ketu sits in the 8th
        asc, planets = chart(1, Rahu=2, Mars=11)
        self.assertEqual(detect_daridra(asc, planets).factors, ["Mars", "Rahu"])

        asc, planets = chart(1, Mars=2, Saturn=5)
        self.assertIsNone(detect_daridra(asc, planets))

    def test_papakartari_around_tenth(self):
        asc, planets = chart(1, Mars=9, Saturn=11)
        finding = detect_papakartari_tenth(asc, planets)
        self.assertEqual(finding.key, "dosha.papakartari.10")
        self.assertEqual(finding.justification, "Mars in H9 and Saturn in H11 hem the 10th house.")

        asc, planets = chart(1, Mars=9, Saturn=10)
        self.assertIsNone(detect_papakartari_tenth(asc, planets))

    def test_alpa_shakti(self):
        asc, planets = chart(1, Sun=6, Moon=8, Mars=12, Venus=6)
        finding = detect_alpa_shakti(asc, planets)
        self.assertEqual(finding.factors, ["Sun", "Moon", "Mars", "Venus"])
        self.assertEqual(finding.strength, "low")
        self.assertTrue(finding.justification.startswith("4 planets"))

        # The nodes never count towards the crowd
        asc, planets = chart(1, Sun=6, Moon=8, Mars=12, Rahu=6)
        self.assertIsNone(detect_alpa_shakti(asc, planets))

    def test_ashtama_shani(self):
        asc, planets = chart(1, Moon=3, Saturn=10)
        finding = detect_ashtama_shani(asc, planets)
        self.assertEqual(finding.justification, "Saturn (H10) is 8th from Moon (H3).")
        self.assertEqual(finding.factors, ["Saturn", "Moon"])

        asc, planets = chart(1, Moon=3, Saturn=9)
        self.assertIsNone(detect_ashtama_shani(asc, planets))

    def test_new_findings_are_localized(self):
        asc, planets = chart(1, Moon=3, Saturn=10)
        finding = detect_ashtama_shani(asc, planets, Locale.NE)
        self.assertEqual(finding.label, "अष्टम शनि")
        self.assertIn("शनि (H10)", finding.justification)


class TestRegistry(unittest.TestCase):
    def test_every_kind_is_registered(self):
        self.assertEqual(set(DETECTORS), set(DetectorKind))

    def test_registry_is_read_only(self):
        with self.assertRaises(TypeError):
            DETECTORS[DetectorKind.PITRI] = detect_vish


if __name__ == "__main__":
    unittest.main()
