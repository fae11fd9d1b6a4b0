"""
Static lookup tables for classical Vedic astrology.

Every table is built once at import and is read-only afterwards
(tuples, frozensets and MappingProxyType views). Pure functions
receive them by reference.
"""
from types import MappingProxyType
from typing import Mapping, Tuple

from kundali_facts.domain.kundali.schemas import Locale


# ─────────────────────────────────────────────
# Planets
# ─────────────────────────────────────────────

# The nine classical grahas. The first entry doubles as the
# default planet for unrecognised feed names.
PLANETS: Tuple[str, ...] = (
    "Sun", "Moon", "Mars", "Mercury", "Jupiter",
    "Venus", "Saturn", "Rahu", "Ketu",
)

DEFAULT_PLANET = PLANETS[0]

# The seven visible planets (everything except the lunar nodes)
CLASSICAL_PLANETS: Tuple[str, ...] = PLANETS[:7]

NODES = frozenset({"Rahu", "Ketu"})

PLANET_LABELS: Mapping[Locale, Mapping[str, str]] = MappingProxyType({
    Locale.EN: MappingProxyType({p: p for p in PLANETS}),
    Locale.NE: MappingProxyType({
        "Sun": "सूर्य",
        "Moon": "चन्द्र",
        "Mars": "मंगल",
        "Mercury": "बुध",
        "Jupiter": "बृहस्पति",
        "Venus": "शुक्र",
        "Saturn": "शनि",
        "Rahu": "राहु",
        "Ketu": "केतु",
    }),
})

# Lowercased aliases seen in ephemeris feeds and account cards
PLANET_ALIASES: Mapping[str, str] = MappingProxyType({
    "sun": "Sun", "surya": "Sun", "ravi": "Sun", "su": "Sun", "सूर्य": "Sun",
    "moon": "Moon", "chandra": "Moon", "soma": "Moon", "mo": "Moon", "चन्द्र": "Moon", "चन्द्रमा": "Moon",
    "mars": "Mars", "mangal": "Mars", "mangala": "Mars", "kuja": "Mars", "ma": "Mars", "मंगल": "Mars",
    "mercury": "Mercury", "budha": "Mercury", "budh": "Mercury", "me": "Mercury", "बुध": "Mercury",
    "jupiter": "Jupiter", "guru": "Jupiter", "brihaspati": "Jupiter", "ju": "Jupiter",
    "बृहस्पति": "Jupiter", "गुरु": "Jupiter",
    "venus": "Venus", "shukra": "Venus", "sukra": "Venus", "ve": "Venus", "शुक्र": "Venus",
    "saturn": "Saturn", "shani": "Saturn", "sani": "Saturn", "sa": "Saturn", "शनि": "Saturn",
    "rahu": "Rahu", "north node": "Rahu", "mean node": "Rahu", "true node": "Rahu", "ra": "Rahu", "राहु": "Rahu",
    "ketu": "Ketu", "south node": "Ketu", "ke": "Ketu", "केतु": "Ketu",
})


# ─────────────────────────────────────────────
# Signs
# ─────────────────────────────────────────────

SIGN_LABELS: Mapping[Locale, Tuple[str, ...]] = MappingProxyType({
    Locale.EN: (
        "Aries", "Taurus", "Gemini", "Cancer",
        "Leo", "Virgo", "Libra", "Scorpio",
        "Sagittarius", "Capricorn", "Aquarius", "Pisces",
    ),
    Locale.NE: (
        "मेष", "वृष", "मिथुन", "कर्क",
        "सिंह", "कन्या", "तुला", "वृश्चिक",
        "धनु", "मकर", "कुम्भ", "मीन",
    ),
})

# Sign id (1-12) → ruling planet
SIGN_LORDS: Mapping[int, str] = MappingProxyType({
    1: "Mars", 2: "Venus", 3: "Mercury", 4: "Moon",
    5: "Sun", 6: "Mercury", 7: "Venus", 8: "Mars",
    9: "Jupiter", 10: "Saturn", 11: "Saturn", 12: "Jupiter",
})

EXALTATION_SIGNS: Mapping[str, int] = MappingProxyType({
    "Sun": 1, "Moon": 2, "Mars": 10, "Mercury": 6,
    "Jupiter": 4, "Venus": 12, "Saturn": 7,
})

DEBILITATION_SIGNS: Mapping[str, int] = MappingProxyType({
    "Sun": 7, "Moon": 8, "Mars": 4, "Mercury": 12,
    "Jupiter": 10, "Venus": 6, "Saturn": 1,
})

OWN_SIGNS: Mapping[str, frozenset] = MappingProxyType({
    "Sun": frozenset({5}),
    "Moon": frozenset({4}),
    "Mars": frozenset({1, 8}),
    "Mercury": frozenset({3, 6}),
    "Jupiter": frozenset({9, 12}),
    "Venus": frozenset({2, 7}),
    "Saturn": frozenset({10, 11}),
})


# ─────────────────────────────────────────────
# Natural relationships (Naisargika Maitri)
# ─────────────────────────────────────────────

NATURAL_FRIENDS: Mapping[str, frozenset] = MappingProxyType({
    "Sun": frozenset({"Moon", "Mars", "Jupiter"}),
    "Moon": frozenset({"Sun", "Mercury"}),
    "Mars": frozenset({"Sun", "Moon", "Jupiter"}),
    "Mercury": frozenset({"Sun", "Venus"}),
    "Jupiter": frozenset({"Sun", "Moon", "Mars"}),
    "Venus": frozenset({"Mercury", "Saturn"}),
    "Saturn": frozenset({"Mercury", "Venus"}),
    "Rahu": frozenset({"Venus", "Saturn", "Mercury"}),
    "Ketu": frozenset({"Mars", "Jupiter", "Venus"}),
})

NATURAL_ENEMIES: Mapping[str, frozenset] = MappingProxyType({
    "Sun": frozenset({"Venus", "Saturn"}),
    "Moon": frozenset(),
    "Mars": frozenset({"Mercury"}),
    "Mercury": frozenset({"Moon"}),
    "Jupiter": frozenset({"Mercury", "Venus"}),
    "Venus": frozenset({"Sun", "Moon"}),
    "Saturn": frozenset({"Sun", "Moon", "Mars"}),
    "Rahu": frozenset({"Sun", "Moon", "Mars"}),
    "Ketu": frozenset({"Sun", "Moon"}),
})


# ─────────────────────────────────────────────
# Houses
# ─────────────────────────────────────────────

KENDRA_HOUSES = frozenset({1, 4, 7, 10})
TRIKONA_HOUSES = frozenset({1, 5, 9})
DUSTHANA_HOUSES = frozenset({6, 8, 12})
MANGAL_DOSHA_HOUSES = frozenset({1, 2, 4, 7, 8, 12})


# ─────────────────────────────────────────────
# Nakshatras
# ─────────────────────────────────────────────

NAKSHATRAS: Tuple[str, ...] = (
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashirsha",
    "Ardra", "Punarvasu", "Pushya", "Ashlesha",
    "Magha", "Purva Phalguni", "Uttara Phalguni", "Hasta",
    "Chitra", "Swati", "Vishakha", "Anuradha", "Jyeshtha",
    "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana",
    "Dhanishta", "Shatabhisha", "Purva Bhadrapada",
    "Uttara Bhadrapada", "Revati",
)


# ─────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────

def sign_label(sign_id: int, locale: Locale = Locale.EN) -> str:
    labels = SIGN_LABELS[Locale(locale)]
    return labels[(int(sign_id) - 1) % 12]


def planet_label(planet: str, locale: Locale = Locale.EN) -> str:
    return PLANET_LABELS[Locale(locale)].get(planet, planet)


def sign_id_from_label(label: str) -> int | None:
    """
    Resolve an English or Nepali sign label to its id (1-12).
    """
    needle = label.strip().lower()
    for labels in SIGN_LABELS.values():
        for index, candidate in enumerate(labels):
            if candidate.lower() == needle:
                return index + 1
    return None
