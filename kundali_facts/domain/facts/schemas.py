from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from kundali_facts.domain.kundali.schemas import Ascendant, Locale, PlanetPosition
from kundali_facts.domain.kundali.derived.schemas import ShadbalaRow
from kundali_facts.domain.kundali.divisional.schemas import DivisionalBlock, DivisionalRow
from kundali_facts.domain.rules.schemas import DoshaFinding, YogaFinding

__all__ = [
    "AstroPatch",
    "Coverage",
    "DashaCoverage",
    "DashaItem",
    "DivisionalBlock",
    "DivisionalRow",
    "FactSheet",
    "FactSheetPatch",
    "FetchPlan",
    "ProvenanceEntry",
    "ProvenanceSource",
    "ShadbalaRow",
]


# ─────────────────────────────────────────────
# Vocabulary
# ─────────────────────────────────────────────

DashaSystem = Literal["vimshottari", "yogini"]
DashaLevel = Literal["maha", "antar", "pratyantar", "sookshma", "pran", "current"]
FetchKind = Literal["vimshottari", "yogini", "divisionals", "shadbala", "yogas"]
FindingType = Literal["yoga", "dosha"]

DASHA_SYSTEMS = ("vimshottari", "yogini")
DASHA_LEVELS = ("maha", "antar", "pratyantar", "sookshma", "pran", "current")
FETCH_KINDS = ("vimshottari", "yogini", "divisionals", "shadbala", "yogas")


class ProvenanceSource(str, Enum):
    """
    Where a category of facts came from.
    """
    ACCOUNT = "account"  # cached account card
    FETCH = "fetch"      # fresh external fetch


class ProvenanceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    source: ProvenanceSource


# ─────────────────────────────────────────────
# Fact rows
# ─────────────────────────────────────────────

class DashaItem(BaseModel):
    """
    One flattened dasha period as carried by a fact sheet.
    """
    model_config = ConfigDict(frozen=True)

    system: DashaSystem
    level: DashaLevel
    lord: str
    start: datetime
    end: datetime
    ruler: Optional[str] = None
    period_level: Optional[str] = Field(
        None,
        description="Actual period level behind a `current` item",
    )


# ─────────────────────────────────────────────
# Fact sheet
# ─────────────────────────────────────────────

class FactSheet(BaseModel):
    """
    Everything currently known about one chart.

    Immutable: merges return a new sheet. Provenance only ever grows.
    """
    model_config = ConfigDict(frozen=True)

    locale: Locale = Locale.EN
    ascendant: Optional[Ascendant] = None
    d1: List[PlanetPosition] = Field(default_factory=list)
    divisionals: List[DivisionalBlock] = Field(default_factory=list)
    yogas: List[YogaFinding] = Field(default_factory=list)
    doshas: List[DoshaFinding] = Field(default_factory=list)
    shadbala: List[ShadbalaRow] = Field(default_factory=list)
    dashas: List[DashaItem] = Field(default_factory=list)
    provenance: Dict[str, List[ProvenanceSource]] = Field(default_factory=dict)


class FactSheetPatch(BaseModel):
    """
    Partial fact sheet: every field optional. None means "not supplied".
    """
    model_config = ConfigDict(frozen=True)

    ascendant: Optional[Ascendant] = None
    d1: Optional[List[PlanetPosition]] = None
    divisionals: Optional[List[DivisionalBlock]] = None
    yogas: Optional[List[YogaFinding]] = None
    doshas: Optional[List[DoshaFinding]] = None
    shadbala: Optional[List[ShadbalaRow]] = None
    dashas: Optional[List[DashaItem]] = None


class AstroPatch(BaseModel):
    """
    Result of one fetch: partial data plus where each category came from.
    """
    model_config = ConfigDict(frozen=True)

    data: FactSheetPatch = Field(default_factory=FactSheetPatch)
    provenance: List[ProvenanceEntry] = Field(default_factory=list)


# ─────────────────────────────────────────────
# Coverage
# ─────────────────────────────────────────────

class DashaCoverage(BaseModel):
    model_config = ConfigDict(frozen=True)

    vimshottari: List[str] = Field(default_factory=list)
    yogini: List[str] = Field(default_factory=list)


class Coverage(BaseModel):
    """
    Which fact categories a sheet already holds.
    """
    model_config = ConfigDict(frozen=True)

    d1: bool = False
    divisionals: List[str] = Field(default_factory=list)
    yogas: bool = False
    doshas: bool = False
    shadbala: bool = False
    dashas: DashaCoverage = Field(default_factory=DashaCoverage)


# ─────────────────────────────────────────────
# Fetch plans
# ─────────────────────────────────────────────

class FetchPlan(BaseModel):
    """
    One external fetch request, tagged by `kind`.

    - vimshottari / yogini: `levels`
    - divisionals: `charts`
    - shadbala: `detail`
    - yogas: `findings` (yoga and/or dosha)
    """
    model_config = ConfigDict(frozen=True)

    kind: FetchKind
    levels: List[DashaLevel] = Field(default_factory=list)
    charts: List[str] = Field(default_factory=list)
    detail: Optional[Literal["summary", "full"]] = None
    findings: List[FindingType] = Field(default_factory=list)

    def categories(self) -> List[str]:
        """
        Category keys this plan will satisfy once fetched.
        """
        if self.kind in DASHA_SYSTEMS:
            return [f"dashas.{self.kind}.{level}" for level in self.levels]
        if self.kind == "divisionals":
            return [f"divisionals.{chart}" for chart in self.charts]
        if self.kind == "shadbala":
            return ["shadbala"]
        return [f"{finding}s" for finding in self.findings]
