import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from kundali_facts.domain.kundali import houses
from kundali_facts.domain.kundali.schemas import (
    Ascendant,
    Dignity,
    HouseMismatch,
    Locale,
    NormalizedChart,
    PlanetPosition,
)
from kundali_facts.domain.kundali.tables import (
    DEBILITATION_SIGNS,
    DEFAULT_PLANET,
    EXALTATION_SIGNS,
    NATURAL_ENEMIES,
    NATURAL_FRIENDS,
    OWN_SIGNS,
    PLANET_ALIASES,
    PLANETS,
    SIGN_LORDS,
    sign_id_from_label,
    sign_label,
)

logger = logging.getLogger(__name__)

RawPlanets = Union[Iterable[Mapping[str, Any]], Mapping[str, Mapping[str, Any]]]

_NAME_KEYS = ("name", "planet", "p")
_SIGN_KEYS = ("signId", "sign_id", "rasiId", "sign")
_LONGITUDE_KEYS = ("longitude", "lon", "fullDegree", "full_degree")
_RETRO_KEYS = ("retrograde", "is_retrograde", "isRetro", "retro")


# ─────────────────────────────────────────────
# Field helpers
# ─────────────────────────────────────────────

def _first(raw: Mapping[str, Any], keys) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _as_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1", "r", "retro"}
    return bool(value)


def resolve_planet_name(value: Any) -> Optional[str]:
    """
    Map a feed name or alias (English, Sanskrit, Nepali) to a graha name.
    """
    if value is None:
        return None
    text = str(value).strip()
    if text in PLANETS:
        return text
    return PLANET_ALIASES.get(text.lower())


def resolve_sign(value: Any) -> Optional[int]:
    """
    Sign id from an int-like value or an English/Nepali label.
    Returns None when the value carries no sign at all.
    """
    if value is None:
        return None
    if isinstance(value, str):
        by_label = sign_id_from_label(value)
        if by_label is not None:
            return by_label
        if _as_float(value) is None:
            return None
    return houses.clamp_sign(value)


def dignity_of(planet: str, sign_id: int) -> Dignity:
    """
    Exaltation, then debilitation, then own sign, then the planet's
    natural relationship to the sign lord.
    """
    if EXALTATION_SIGNS.get(planet) == sign_id:
        return Dignity.EXALTED
    if DEBILITATION_SIGNS.get(planet) == sign_id:
        return Dignity.DEBILITATED
    if sign_id in OWN_SIGNS.get(planet, frozenset()):
        return Dignity.OWN

    lord = SIGN_LORDS[sign_id]
    if lord in NATURAL_FRIENDS.get(planet, frozenset()):
        return Dignity.FRIEND
    if lord in NATURAL_ENEMIES.get(planet, frozenset()):
        return Dignity.ENEMY
    return Dignity.NEUTRAL


# ─────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────

def normalize_ascendant(
    raw: Union[Mapping[str, Any], int, str, None],
    locale: Locale = Locale.EN,
) -> Ascendant:
    """
    Build an Ascendant from a sign id, a label or a raw mapping.
    """
    degree = 0.0
    if isinstance(raw, Mapping):
        sign = resolve_sign(_first(raw, _SIGN_KEYS + ("ascSignId", "asc_sign_id")))
        longitude = _as_float(_first(raw, _LONGITUDE_KEYS))
        if sign is None and longitude is not None:
            sign = houses.sign_from_longitude(longitude)
        raw_degree = _as_float(raw.get("degree"))
        if raw_degree is not None:
            degree = raw_degree % 30.0
        elif longitude is not None:
            degree = houses.degree_in_sign(longitude)
    else:
        sign = resolve_sign(raw)

    if sign is None:
        logger.warning("Ascendant sign missing from feed; defaulting to Aries")
        sign = 1

    return Ascendant(
        sign_id=sign,
        sign_label=sign_label(sign, locale),
        degree=round(degree, 4),
    )


def normalize_planets(
    ascendant_sign: Union[int, Ascendant],
    raw_planets: RawPlanets,
    locale: Locale = Locale.EN,
) -> NormalizedChart:
    """
    Normalize a tolerant raw planet feed into whole-sign positions.

    This function:
    - Resolves planet aliases (unknown names fall back to the default planet)
    - Keeps the first occurrence of a duplicated planet, except that a
      named entry replaces one that fell back to the default planet
    - Clamps or derives signs, and always derives the house
    - Records feed houses that disagree with the derived house
    - Derives Ketu opposite Rahu when the feed omits it
    """
    locale = Locale(locale)
    if isinstance(ascendant_sign, Ascendant):
        ascendant = ascendant_sign
    else:
        asc_id = houses.clamp_sign(ascendant_sign)
        ascendant = Ascendant(sign_id=asc_id, sign_label=sign_label(asc_id, locale))
    asc_sign = ascendant.sign_id

    if isinstance(raw_planets, Mapping):
        entries = [
            {**data, "name": data.get("name") or name}
            for name, data in raw_planets.items()
            if isinstance(data, Mapping)
        ]
    else:
        entries = [entry for entry in (raw_planets or []) if isinstance(entry, Mapping)]

    positions: Dict[str, PlanetPosition] = {}
    defaulted = set()
    mismatches: List[HouseMismatch] = []

    for raw in entries:
        raw_name = _first(raw, _NAME_KEYS)
        planet = resolve_planet_name(raw_name)
        is_default = planet is None
        if is_default:
            logger.warning(f"Unknown planet {raw_name!r} in feed; using {DEFAULT_PLANET}")
            planet = DEFAULT_PLANET

        if planet in positions:
            # A named entry outranks one that only fell back to the default
            if is_default or planet not in defaulted:
                logger.warning(f"Duplicate {planet} in feed; keeping first occurrence")
                continue
            logger.warning(f"Replacing defaulted {planet} with the named feed entry")
            mismatches = [m for m in mismatches if m.planet != planet]
            defaulted.discard(planet)
        elif is_default:
            defaulted.add(planet)

        longitude = _as_float(_first(raw, _LONGITUDE_KEYS))
        sign = resolve_sign(_first(raw, _SIGN_KEYS))
        if sign is None:
            sign = houses.sign_from_longitude(longitude) if longitude is not None else 1

        raw_degree = _as_float(raw.get("degree"))
        if raw_degree is not None:
            degree = raw_degree % 30.0
        elif longitude is not None:
            degree = houses.degree_in_sign(longitude)
        else:
            degree = 0.0

        derived_house = houses.house(asc_sign, sign)

        feed_house = _as_float(raw.get("house"))
        if feed_house is not None and 1 <= feed_house <= 12 and int(feed_house) != derived_house:
            mismatches.append(
                HouseMismatch(
                    planet=planet,
                    feed_house=int(feed_house),
                    derived_house=derived_house,
                )
            )

        positions[planet] = PlanetPosition(
            planet=planet,
            sign_id=sign,
            sign_label=sign_label(sign, locale),
            house=derived_house,
            degree=round(degree, 4),
            retrograde=_as_bool(_first(raw, _RETRO_KEYS)),
            dignity=dignity_of(planet, sign),
        )

    if "Rahu" in positions and "Ketu" not in positions:
        rahu = positions["Rahu"]
        ketu_sign = ((rahu.sign_id - 1 + 6) % 12) + 1
        positions["Ketu"] = PlanetPosition(
            planet="Ketu",
            sign_id=ketu_sign,
            sign_label=sign_label(ketu_sign, locale),
            house=houses.house(asc_sign, ketu_sign),
            degree=rahu.degree,
            retrograde=True,
            dignity=dignity_of("Ketu", ketu_sign),
        )
        logger.debug(f"Derived Ketu in sign {ketu_sign} opposite Rahu")

    if mismatches:
        logger.info(f"{len(mismatches)} feed house(s) disagree with whole-sign houses")

    ordered = tuple(positions[p] for p in PLANETS if p in positions)

    return NormalizedChart(
        ascendant=ascendant,
        planets=ordered,
        mismatches=tuple(mismatches),
    )
