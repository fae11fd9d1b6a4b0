import unittest
from datetime import datetime, timezone
from types import MappingProxyType

from kundali_facts.domain.facts.keywords import ALL_DIVISIONALS, KeywordRule
from kundali_facts.domain.facts.planner import (
    parse_data_needed,
    plan_fetches,
    plan_for_category,
    plans_from_keys,
    required_categories,
)
from kundali_facts.domain.facts.schemas import DashaItem, DivisionalBlock, FactSheet, FetchPlan
from kundali_facts.domain.kundali.schemas import Locale

START = datetime(2020, 1, 1, tzinfo=timezone.utc)
END = datetime(2036, 1, 1, tzinfo=timezone.utc)


class TestRequiredCategories(unittest.TestCase):
    def test_english_questions(self):
        self.assertEqual(
            required_categories("What does my Navamsa say about marriage?"),
            ["divisionals.D9"],
        )
        self.assertEqual(
            required_categories("When will my mahadasha change and what about my antardasha?"),
            ["dashas.vimshottari.maha", "dashas.vimshottari.antar"],
        )

    def test_nepali_questions(self):
        self.assertEqual(required_categories("मेरो महादशा कस्तो छ?"), ["dashas.vimshottari.maha"])
        self.assertEqual(required_categories("मेरो योगिनी दशा"), ["dashas.yogini.maha"])
        self.assertEqual(required_categories("मेरो कुण्डलीमा कुन योग छ?"), ["yogas"])

    def test_mixed_language(self):
        self.assertEqual(
            required_categories("navamsa र दशांश"),
            ["divisionals.D9", "divisionals.D10"],
        )

    def test_all_divisionals_phrases(self):
        self.assertEqual(required_categories("Show all divisional charts"), list(ALL_DIVISIONALS))
        self.assertEqual(required_categories("All divisionals please"), list(ALL_DIVISIONALS))
        self.assertEqual(required_categories("Explain every divisional chart"), list(ALL_DIVISIONALS))
        self.assertEqual(required_categories("Tell me all about it"), [])

    def test_all_needs_a_word_boundary(self):
        self.assertEqual(required_categories("I also want charts"), [])
        self.assertEqual(required_categories("Any small charts changes?"), [])
        self.assertEqual(required_categories("Are there small divisional effects?"), [])

    def test_word_rule(self):
        rule = KeywordRule("all charts", ("divisionals.D9",), word=True)
        self.assertTrue(rule.matches("show all charts"))
        self.assertFalse(rule.matches("show small charts"))
        self.assertTrue(KeywordRule("all charts", ("divisionals.D9",)).matches("small charts"))

    def test_no_keywords(self):
        self.assertEqual(required_categories("Hello there"), [])
        self.assertEqual(required_categories(""), [])

    def test_custom_table(self):
        table = MappingProxyType({Locale.EN: (KeywordRule("career", ("divisionals.D10",)),)})
        self.assertEqual(required_categories("How is my career?", table), ["divisionals.D10"])
        self.assertEqual(required_categories("navamsa", table), [])


class TestPlanFetches(unittest.TestCase):
    def test_covered_categories_are_not_planned(self):
        sheet = FactSheet(divisionals=[DivisionalBlock(chart="D9")])
        self.assertEqual(plan_fetches("What does my navamsa say?", sheet), [])

    def test_missing_categories_are_planned(self):
        plans = plan_fetches("What does my navamsa say?", FactSheet())
        self.assertEqual(plans, [FetchPlan(kind="divisionals", charts=["D9"])])

    def test_one_plan_per_category(self):
        plans = plan_fetches("Is there a manglik dosha? Also planet strength and any yoga.", FactSheet())
        self.assertEqual(
            plans,
            [
                FetchPlan(kind="shadbala", detail="full"),
                FetchPlan(kind="yogas", findings=["yoga"]),
                FetchPlan(kind="yogas", findings=["dosha"]),
            ],
        )

    def test_dasha_levels(self):
        sheet = FactSheet(dashas=[
            DashaItem(system="vimshottari", level="maha", lord="Jupiter", start=START, end=END),
        ])
        plans = plan_fetches("Current mahadasha and antardasha?", sheet)
        self.assertEqual(plans, [FetchPlan(kind="vimshottari", levels=["antar"])])

    def test_d1_is_never_planned(self):
        self.assertIsNone(plan_for_category("d1"))
        self.assertIsNone(plan_for_category("divisionals.D60"))
        self.assertIsNone(plan_for_category("dashas.chara.maha"))


class TestFetchPlan(unittest.TestCase):
    def test_categories(self):
        self.assertEqual(
            FetchPlan(kind="yogini", levels=["maha", "current"]).categories(),
            ["dashas.yogini.maha", "dashas.yogini.current"],
        )
        self.assertEqual(FetchPlan(kind="divisionals", charts=["D2"]).categories(), ["divisionals.D2"])
        self.assertEqual(FetchPlan(kind="shadbala").categories(), ["shadbala"])
        self.assertEqual(
            FetchPlan(kind="yogas", findings=["yoga", "dosha"]).categories(),
            ["yogas", "doshas"],
        )


class TestDataNeeded(unittest.TestCase):
    def test_parse(self):
        text = "I need more data.\nDataNeeded: dashas.vimshottari, divisionals.D9, bogus.key\n"
        self.assertEqual(parse_data_needed(text), ["dashas.vimshottari", "divisionals.D9"])

    def test_parse_without_line(self):
        self.assertEqual(parse_data_needed("All good."), [])
        self.assertEqual(parse_data_needed(None), [])

    def test_plans_from_group_keys(self):
        plans = plans_from_keys(["divisionals"])
        self.assertEqual([p.charts for p in plans], [["D2"], ["D7"], ["D9"], ["D10"]])

    def test_plans_skip_covered(self):
        sheet = FactSheet(dashas=[
            DashaItem(system="vimshottari", level="maha", lord="Jupiter", start=START, end=END),
        ])
        plans = plans_from_keys(["dashas.vimshottari", "shadbala", "nonsense"], sheet)
        self.assertEqual(
            plans,
            [
                FetchPlan(kind="vimshottari", levels=["antar"]),
                FetchPlan(kind="vimshottari", levels=["pratyantar"]),
                FetchPlan(kind="shadbala", detail="full"),
            ],
        )


if __name__ == "__main__":
    unittest.main()
