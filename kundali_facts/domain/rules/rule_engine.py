import logging
from typing import Iterable, List, Mapping, Optional

from kundali_facts.domain.kundali.schemas import Locale
from kundali_facts.domain.rules.detectors import (
    DETECTORS,
    AscendantLike,
    Detector,
    DetectorKind,
    Positions,
)
from kundali_facts.domain.rules.schemas import DetectionResult, DoshaFinding, YogaFinding

logger = logging.getLogger(__name__)


class RuleEngine:
    """
    Runs yoga and dosha detectors against a normalized chart.

    This engine:
    - Evaluates every registered detector independently
    - Is deterministic
    - Isolates detector failures so one bad detector never hides the rest
    """

    def __init__(self, detectors: Optional[Mapping[DetectorKind, Detector]] = None):
        self.detectors = detectors if detectors is not None else DETECTORS

    def evaluate(
        self,
        ascendant: AscendantLike,
        planets: Positions,
        locale: Locale = Locale.EN,
        kinds: Optional[Iterable[DetectorKind]] = None,
    ) -> DetectionResult:
        """
        Evaluate detectors (all by default) and split findings into
        yogas and doshas, deduplicated by key.
        """
        selected = list(kinds) if kinds is not None else list(self.detectors)

        yogas: List[YogaFinding] = []
        doshas: List[DoshaFinding] = []

        for kind in selected:
            detector = self.detectors.get(DetectorKind(kind))
            if detector is None:
                continue
            try:
                finding = detector(ascendant, planets, Locale(locale))
            except Exception:
                logger.exception(f"Detector {DetectorKind(kind).value} failed; skipping")
                continue

            if finding is None:
                continue
            if isinstance(finding, DoshaFinding):
                doshas.append(finding)
            else:
                yogas.append(finding)

        result = DetectionResult(
            yogas=tuple(dedup_by_key(yogas)),
            doshas=tuple(dedup_by_key(doshas)),
        )
        logger.debug(f"Detected {len(result.yogas)} yoga(s), {len(result.doshas)} dosha(s)")
        return result


def detect_all(
    ascendant: AscendantLike,
    planets: Positions,
    locale: Locale = Locale.EN,
) -> DetectionResult:
    return RuleEngine().evaluate(ascendant, planets, locale)


def dedup_by_key(findings: Iterable) -> List:
    """
    Keep the first finding per key, preserving order.
    """
    seen = {}
    for finding in findings:
        seen.setdefault(finding.key, finding)
    return list(seen.values())
