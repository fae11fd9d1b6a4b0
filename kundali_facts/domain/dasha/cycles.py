"""
Dasha lord cycles.

A cycle is an ordered ring of (lord, years) allotments plus the rule
mapping the birth nakshatra to the lord that opens the sequence.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from kundali_facts.domain.kundali.errors import UnsupportedDashaSystemError

VIMSHOTTARI = "vimshottari"
YOGINI = "yogini"

SYSTEMS = (VIMSHOTTARI, YOGINI)

YOGINI_RULES = ("classical", "sequential")


@dataclass(frozen=True)
class LordCycle:
    """
    Immutable dasha cycle.

    `start_offset` shifts the nakshatra → first lord mapping:
    first lord = lords[(nakshatra_index - 1 + start_offset) mod n].
    `start_lord`, when set, overrides the mapping entirely.
    """
    system: str
    lords: Tuple[Tuple[str, float], ...]
    rulers: Mapping[str, str]
    start_offset: int = 0
    start_lord: Optional[str] = None

    @property
    def total_years(self) -> float:
        return float(sum(years for _, years in self.lords))

    def __len__(self) -> int:
        return len(self.lords)

    def index_of(self, lord: str) -> int:
        """
        Position of a lord, matched by lord name or ruling planet.
        """
        needle = lord.strip().lower()
        for i, (name, _) in enumerate(self.lords):
            if name.lower() == needle:
                return i
        for i, (name, _) in enumerate(self.lords):
            if self.rulers.get(name, "").lower() == needle:
                return i
        raise UnsupportedDashaSystemError(
            f"{lord!r} is not a {self.system} lord"
        )

    def first_lord(self, nakshatra_index: int) -> int:
        """
        Index into `lords` of the lord ruling the birth nakshatra (1–27).
        """
        if self.start_lord:
            return self.index_of(self.start_lord)
        return (int(nakshatra_index) - 1 + self.start_offset) % len(self.lords)

    def ruler(self, lord: str) -> str:
        return self.rulers.get(lord, lord)


# ─────────────────────────────────────────────
# Vimshottari (120 years)
# ─────────────────────────────────────────────

_VIMSHOTTARI_LORDS = (
    ("Ketu", 7), ("Venus", 20), ("Sun", 6), ("Moon", 10),
    ("Mars", 7), ("Rahu", 18), ("Jupiter", 16), ("Saturn", 19), ("Mercury", 17),
)

VIMSHOTTARI_CYCLE = LordCycle(
    system=VIMSHOTTARI,
    lords=_VIMSHOTTARI_LORDS,
    rulers=MappingProxyType({lord: lord for lord, _ in _VIMSHOTTARI_LORDS}),
)


# ─────────────────────────────────────────────
# Yogini (36 years)
# ─────────────────────────────────────────────

_YOGINI_LORDS = (
    ("Mangala", 1), ("Pingala", 2), ("Dhanya", 3), ("Bhramari", 4),
    ("Bhadrika", 5), ("Ulka", 6), ("Siddha", 7), ("Sankata", 8),
)

YOGINI_RULERS: Mapping[str, str] = MappingProxyType({
    "Mangala": "Moon",
    "Pingala": "Sun",
    "Dhanya": "Jupiter",
    "Bhramari": "Mars",
    "Bhadrika": "Mercury",
    "Ulka": "Saturn",
    "Siddha": "Venus",
    "Sankata": "Rahu",
})

# classical: (nakshatra + 3) mod 8, 0 → 8, so Ardra opens with Mangala
# sequential: Ashwini opens with Mangala
_YOGINI_OFFSETS = MappingProxyType({"classical": 3, "sequential": 0})


def yogini_cycle(rule: str = "classical", start_lord: Optional[str] = None) -> LordCycle:
    rule = (rule or "classical").strip().lower()
    if rule not in _YOGINI_OFFSETS:
        raise UnsupportedDashaSystemError(f"Unknown Yogini start rule: {rule!r}")

    cycle = LordCycle(
        system=YOGINI,
        lords=_YOGINI_LORDS,
        rulers=YOGINI_RULERS,
        start_offset=_YOGINI_OFFSETS[rule],
        start_lord=start_lord or None,
    )
    if cycle.start_lord:
        # Fail at construction rather than at first use
        cycle.index_of(cycle.start_lord)
    return cycle


YOGINI_CYCLE = yogini_cycle()


def cycle_for(
    system: str,
    yogini_rule: str = "classical",
    yogini_start_lord: Optional[str] = None,
) -> LordCycle:
    system = (system or "").strip().lower()
    if system == VIMSHOTTARI:
        return VIMSHOTTARI_CYCLE
    if system == YOGINI:
        return yogini_cycle(yogini_rule, yogini_start_lord)
    raise UnsupportedDashaSystemError(f"Unsupported dasha system: {system!r}")
