from typing import Dict, Literal
from pydantic import BaseModel, ConfigDict, Field

from kundali_facts.domain.kundali.schemas import PlanetName


# ─────────────────────────────────────────────
# Atomic Derived Facts
# ─────────────────────────────────────────────

class NakshatraPosition(BaseModel):
    """
    Lunar mansion of a sidereal longitude.

    `fraction_used` is how far into the nakshatra the longitude lies;
    the remaining fraction drives the first dasha balance.
    """
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, le=27)
    name: str
    pada: int = Field(..., ge=1, le=4)
    fraction_used: float = Field(..., ge=0.0, lt=1.0)
    fraction_remaining: float = Field(..., gt=0.0, le=1.0)


ShadbalaBand = Literal["strong", "medium", "weak"]


class ShadbalaRow(BaseModel):
    """
    Represents six-fold strength of a planet, in rupas.
    """
    model_config = ConfigDict(frozen=True)

    planet: PlanetName
    value: float
    unit: str = "rupa"
    components: Dict[str, float] = Field(default_factory=dict)
    band: ShadbalaBand = "medium"
