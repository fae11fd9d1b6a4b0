from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# Vocabulary
# ─────────────────────────────────────────────

PlanetName = Literal[
    "Sun", "Moon", "Mars", "Mercury", "Jupiter",
    "Venus", "Saturn", "Rahu", "Ketu",
]


class Locale(str, Enum):
    """
    Supported output / keyword locales.
    """
    EN = "en"
    NE = "ne"


class Dignity(str, Enum):
    """
    Qualitative strength of a planet by sign placement.
    """
    OWN = "Own"
    EXALTED = "Exalted"
    DEBILITATED = "Debilitated"
    NEUTRAL = "Neutral"
    FRIEND = "Friend"
    ENEMY = "Enemy"


# ─────────────────────────────────────────────
# Core Atomic Schemas
# ─────────────────────────────────────────────

class PlanetPosition(BaseModel):
    """
    Represents a single planet's position in the D1 (Rashi) chart.

    Produced once per normalization pass and never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    planet: PlanetName
    sign_id: int = Field(..., ge=1, le=12)
    sign_label: str
    house: int = Field(..., ge=1, le=12)
    degree: float = 0.0
    retrograde: bool = False
    dignity: Dignity = Dignity.NEUTRAL


class Ascendant(BaseModel):
    """
    Represents the ascendant (Lagna).
    """
    model_config = ConfigDict(frozen=True)

    sign_id: int = Field(..., ge=1, le=12)
    sign_label: str
    degree: float = 0.0


class HouseMismatch(BaseModel):
    """
    A feed-supplied house that disagrees with the whole-sign house.
    """
    model_config = ConfigDict(frozen=True)

    planet: PlanetName
    feed_house: int
    derived_house: int


class NormalizedChart(BaseModel):
    """
    Output of one normalization pass over a raw planet feed.
    """
    model_config = ConfigDict(frozen=True)

    ascendant: Ascendant
    planets: Tuple[PlanetPosition, ...] = ()
    mismatches: Tuple[HouseMismatch, ...] = ()

    def find(self, planet: str) -> Optional[PlanetPosition]:
        for position in self.planets:
            if position.planet == planet:
                return position
        return None
