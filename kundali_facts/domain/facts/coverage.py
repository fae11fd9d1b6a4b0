from typing import Iterable, List, Set, Union

from kundali_facts.domain.kundali.divisional.schemas import SUPPORTED_CHARTS
from kundali_facts.domain.facts.schemas import (
    DASHA_LEVELS,
    DASHA_SYSTEMS,
    Coverage,
    DashaCoverage,
    FactSheet,
    FactSheetPatch,
)

# The categories a complete account card is expected to carry
STANDARD_CATEGORIES = (
    "d1",
    "yogas",
    "doshas",
    "shadbala",
    *(f"divisionals.{chart}" for chart in SUPPORTED_CHARTS),
    "dashas.vimshottari.maha",
    "dashas.vimshottari.antar",
    "dashas.vimshottari.pratyantar",
    "dashas.vimshottari.current",
    "dashas.yogini.maha",
    "dashas.yogini.current",
)

KNOWN_CATEGORIES = frozenset({
    "d1",
    "yogas",
    "doshas",
    "shadbala",
    *(f"divisionals.{chart}" for chart in SUPPORTED_CHARTS),
    *(f"dashas.{system}.{level}" for system in DASHA_SYSTEMS for level in DASHA_LEVELS),
})


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


# ─────────────────────────────────────────────
# Coverage
# ─────────────────────────────────────────────

def coverage_of(sheet: FactSheet) -> Coverage:
    """
    Pure projection of which categories a sheet holds.
    """
    return Coverage(
        d1=len(sheet.d1) > 0,
        divisionals=_unique(block.chart for block in sheet.divisionals),
        yogas=len(sheet.yogas) > 0,
        doshas=len(sheet.doshas) > 0,
        shadbala=len(sheet.shadbala) > 0,
        dashas=DashaCoverage(
            vimshottari=_unique(d.level for d in sheet.dashas if d.system == "vimshottari"),
            yogini=_unique(d.level for d in sheet.dashas if d.system == "yogini"),
        ),
    )


def covered_categories(coverage: Coverage) -> Set[str]:
    covered: Set[str] = set()
    if coverage.d1:
        covered.add("d1")
    if coverage.yogas:
        covered.add("yogas")
    if coverage.doshas:
        covered.add("doshas")
    if coverage.shadbala:
        covered.add("shadbala")
    covered.update(f"divisionals.{chart}" for chart in coverage.divisionals)
    covered.update(f"dashas.vimshottari.{level}" for level in coverage.dashas.vimshottari)
    covered.update(f"dashas.yogini.{level}" for level in coverage.dashas.yogini)
    return covered


def missing_for(required: Iterable[str], coverage: Coverage) -> List[str]:
    """
    Required categories not yet covered, in the order first required.
    """
    covered = covered_categories(coverage)
    return [category for category in _unique(required) if category not in covered]


def categories_of(data: Union[FactSheet, FactSheetPatch]) -> List[str]:
    """
    Category keys for every non-empty field of a sheet or patch.
    """
    categories: List[str] = []
    if data.d1:
        categories.append("d1")
    categories.extend(f"divisionals.{block.chart}" for block in data.divisionals or [])
    if data.yogas:
        categories.append("yogas")
    if data.doshas:
        categories.append("doshas")
    if data.shadbala:
        categories.append("shadbala")
    categories.extend(f"dashas.{d.system}.{d.level}" for d in data.dashas or [])
    return _unique(categories)


# ─────────────────────────────────────────────
# Reports
# ─────────────────────────────────────────────

def expected_missing(sheet: FactSheet) -> List[str]:
    """
    Every standard category the sheet does not yet hold.
    """
    return missing_for(STANDARD_CATEGORIES, coverage_of(sheet))


def validate_fact_sheet(sheet: FactSheet) -> List[str]:
    """
    Structural problems in a sheet. Empty when the sheet is sound.
    """
    problems: List[str] = []

    for block in sheet.divisionals:
        if block.chart not in SUPPORTED_CHARTS:
            problems.append(f"Invalid divisional chart type: {block.chart}")

    for item in sheet.dashas:
        if item.end <= item.start:
            problems.append(
                f"Dasha {item.system}.{item.level} {item.lord} ends before it starts"
            )

    if sheet.d1 and sheet.ascendant is None:
        problems.append("D1 positions present without an ascendant")

    for category in sheet.provenance:
        if category not in KNOWN_CATEGORIES:
            problems.append(f"Provenance for unknown category: {category}")

    return problems
