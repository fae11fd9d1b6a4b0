from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from kundali_facts.domain.kundali.schemas import Ascendant, PlanetName

DivisionalChartType = Literal["D2", "D7", "D9", "D10"]

SUPPORTED_CHARTS = ("D2", "D7", "D9", "D10")


class DivisionalRow(BaseModel):
    """
    A planet's placement inside a divisional chart.
    """
    model_config = ConfigDict(frozen=True)

    planet: PlanetName
    sign_id: int = Field(..., ge=1, le=12)
    sign_label: str
    house: int = Field(..., ge=1, le=12)
    degree: Optional[float] = None
    retrograde: bool = False


class DivisionalBlock(BaseModel):
    """
    Represents a single divisional chart (D2, D7, D9, D10).
    """
    model_config = ConfigDict(frozen=True)

    chart: str
    ascendant: Optional[Ascendant] = None
    planets: List[DivisionalRow] = Field(default_factory=list)
    calculation_version: str = "v1"
