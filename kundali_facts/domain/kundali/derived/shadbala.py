"""
Shadbala (six-fold strength) normalization.

Feeds report strength either in rupas or in virupas (60 virupas = 1
rupa) and sometimes omit the total. Rows are normalized to rupas with
non-negative, two-decimal components and banded against the classical
minimum requirement of each planet.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from kundali_facts.domain.kundali.derived.schemas import ShadbalaBand, ShadbalaRow
from kundali_facts.domain.kundali.normalizer import resolve_planet_name
from kundali_facts.domain.kundali.tables import PLANETS

logger = logging.getLogger(__name__)

COMPONENTS = ("sthana", "dig", "kala", "cheshta", "naisargika", "drik")

_COMPONENT_ALIASES = {
    "chestha": "cheshta",
    "chesta": "cheshta",
    "drig": "drik",
    "drishti": "drik",
}

VIRUPAS_PER_RUPA = 60.0

# Totals above this are taken to be virupas
VIRUPA_THRESHOLD = 20.0

# Minimum required strength in rupas (BPHS)
REQUIRED_RUPAS: Mapping[str, float] = {
    "Sun": 5.0,
    "Moon": 6.0,
    "Mars": 5.0,
    "Mercury": 7.0,
    "Jupiter": 6.5,
    "Venus": 5.5,
    "Saturn": 5.0,
}

STRONG_RATIO = 1.25


def band_for(planet: str, rupas: float) -> ShadbalaBand:
    required = REQUIRED_RUPAS.get(planet)
    if required is None:
        return "medium"
    if rupas >= required * STRONG_RATIO:
        return "strong"
    if rupas >= required:
        return "medium"
    return "weak"


def normalize_shadbala_row(
    planet: str,
    raw: Optional[Mapping[str, Any]],
) -> Optional[ShadbalaRow]:
    """
    Normalize one planet's raw strength mapping. Returns None for no data.
    """
    if not raw:
        return None

    components: Dict[str, float] = {}
    for key, value in raw.items():
        name = _COMPONENT_ALIASES.get(str(key).lower(), str(key).lower())
        if name not in COMPONENTS:
            continue
        try:
            components[name] = max(0.0, float(value))
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric shadbala component {key!r} for {planet}")

    total = raw.get("total", raw.get("value"))
    try:
        total = float(total) if total is not None else sum(components.values())
    except (TypeError, ValueError):
        total = sum(components.values())
    total = max(0.0, total)

    unit = str(raw.get("unit", "")).lower()
    in_virupas = unit == "virupa" or (unit != "rupa" and total > VIRUPA_THRESHOLD)
    if in_virupas:
        total /= VIRUPAS_PER_RUPA
        components = {k: v / VIRUPAS_PER_RUPA for k, v in components.items()}

    value = round(total, 2)
    return ShadbalaRow(
        planet=planet,
        value=value,
        components={k: round(v, 2) for k, v in components.items()},
        band=band_for(planet, value),
    )


def normalize_shadbala(raw_rows: Any) -> List[ShadbalaRow]:
    """
    Normalize a shadbala feed: either a mapping planet → components or
    a list of mappings carrying a `planet` key. Rows come out in graha
    order, one per planet.
    """
    if isinstance(raw_rows, Mapping):
        items: Iterable = raw_rows.items()
    else:
        items = (
            (row.get("planet") or row.get("name"), row)
            for row in (raw_rows or [])
            if isinstance(row, Mapping)
        )

    rows: Dict[str, ShadbalaRow] = {}
    for raw_name, data in items:
        planet = resolve_planet_name(raw_name)
        if planet is None:
            logger.warning(f"Unknown planet {raw_name!r} in shadbala feed; skipped")
            continue
        if planet in rows or not isinstance(data, Mapping):
            continue
        row = normalize_shadbala_row(planet, data)
        if row is not None:
            rows[planet] = row

    return [rows[p] for p in PLANETS if p in rows]
