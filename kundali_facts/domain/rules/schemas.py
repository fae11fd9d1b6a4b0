from typing import List, Literal, Tuple
from pydantic import BaseModel, ConfigDict, Field


YogaStrength = Literal["strong", "moderate", "mild"]
DoshaStrength = Literal["high", "medium", "low"]


# ─────────────────────────────────────────────
# Findings
# ─────────────────────────────────────────────

class YogaFinding(BaseModel):
    """
    A yoga formed in the chart.
    """
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Stable identifier, e.g. gajakesari")
    label: str = Field(..., description="Localized display name")
    factors: List[str] = Field(default_factory=list, description="Contributing planets")
    justification: str = ""
    strength: YogaStrength = "moderate"
    group: str = Field("yoga", description="e.g. rajyoga, mahapurusha, dhana")


class DoshaFinding(BaseModel):
    """
    A dosha present in the chart.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    factors: List[str] = Field(default_factory=list)
    justification: str = ""
    strength: DoshaStrength = "medium"
    group: str = "dosha"


Finding = YogaFinding | DoshaFinding


class DetectionResult(BaseModel):
    """
    Output of running every detector over one chart.
    """
    model_config = ConfigDict(frozen=True)

    yogas: Tuple[YogaFinding, ...] = ()
    doshas: Tuple[DoshaFinding, ...] = ()
