"""
Deterministic yoga and dosha detectors over normalized D1 positions.

Each detector is a pure function of (ascendant, planets, locale) and
returns a finding or None. Detectors share no state, so their order
never changes the outcome.
"""
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Sequence, Union

from kundali_facts.domain.kundali import houses
from kundali_facts.domain.kundali.schemas import Ascendant, Dignity, Locale, PlanetPosition
from kundali_facts.domain.kundali.tables import (
    CLASSICAL_PLANETS,
    DUSTHANA_HOUSES,
    EXALTATION_SIGNS,
    KENDRA_HOUSES,
    MANGAL_DOSHA_HOUSES,
    OWN_SIGNS,
    TRIKONA_HOUSES,
    planet_label,
    sign_label,
)
from kundali_facts.domain.rules.labels import finding_label, ordinal_label, render, STATUS_LABELS
from kundali_facts.domain.rules.schemas import DoshaFinding, Finding, YogaFinding

AscendantLike = Union[Ascendant, int]
Positions = Sequence[PlanetPosition]
Detector = Callable[[AscendantLike, Positions, Locale], Optional[Finding]]


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def _asc_sign(ascendant: AscendantLike) -> int:
    if isinstance(ascendant, Ascendant):
        return ascendant.sign_id
    return houses.clamp_sign(ascendant)


def _index(planets: Positions) -> Dict[str, PlanetPosition]:
    found: Dict[str, PlanetPosition] = {}
    for position in planets:
        found.setdefault(position.planet, position)
    return found


def _yoga(key: str, locale: Locale, **fields) -> YogaFinding:
    return YogaFinding(key=key, label=finding_label(key, locale), **fields)


def _dosha(key: str, locale: Locale, **fields) -> DoshaFinding:
    return DoshaFinding(key=key, label=finding_label(key, locale), **fields)


# ─────────────────────────────────────────────
# Yogas
# ─────────────────────────────────────────────

def detect_gajakesari(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Jupiter in a kendra (1/4/7/10) counted from the Moon.
    """
    p = _index(planets)
    moon, jupiter = p.get("Moon"), p.get("Jupiter")
    if not moon or not jupiter:
        return None

    rel = houses.relative_house(moon.house, jupiter.house)
    if rel not in KENDRA_HOUSES:
        return None

    if jupiter.dignity in (Dignity.EXALTED, Dignity.OWN):
        strength = "strong"
    elif jupiter.dignity == Dignity.DEBILITATED:
        strength = "mild"
    else:
        strength = "moderate"

    return _yoga(
        "gajakesari",
        locale,
        factors=["Moon", "Jupiter"],
        justification=render(
            "gajakesari",
            locale,
            rel=ordinal_label(rel, locale),
            moon_sign=sign_label(moon.sign_id, locale),
            jupiter_sign=sign_label(jupiter.sign_id, locale),
        ),
        strength=strength,
        group="Chandra-based",
    )


def _mahapurusha(planet: str, key: str) -> Detector:
    def detect(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
        position = _index(planets).get(planet)
        if not position or position.house not in KENDRA_HOUSES:
            return None

        if EXALTATION_SIGNS.get(planet) == position.sign_id:
            status = "exalted"
        elif position.sign_id in OWN_SIGNS.get(planet, frozenset()):
            status = "own"
        else:
            return None

        return _yoga(
            key,
            locale,
            factors=[planet],
            justification=render(
                "mahapurusha",
                locale,
                planet=planet_label(planet, locale),
                sign=sign_label(position.sign_id, locale),
                status=STATUS_LABELS[status][Locale(locale)],
                house=ordinal_label(position.house, locale),
            ),
            strength="strong" if status == "exalted" else "moderate",
            group="Pancha-Mahapurusha",
        )

    detect.__name__ = f"detect_{key}"
    detect.__doc__ = f"{planet} in a kendra from the ascendant, in own or exaltation sign."
    return detect


detect_shasha = _mahapurusha("Saturn", "shasha")
detect_hamsa = _mahapurusha("Jupiter", "hamsa")
detect_ruchaka = _mahapurusha("Mars", "ruchaka")
detect_bhadra = _mahapurusha("Mercury", "bhadra")
detect_malavya = _mahapurusha("Venus", "malavya")


def detect_vipareeta_rajyoga(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Lord of the 6th, 8th or 12th placed in the 6th, 8th or 12th.
    One finding aggregates every qualifying lord.
    """
    asc = _asc_sign(ascendant)
    p = _index(planets)

    lines = []
    lords = []
    for house_number in sorted(DUSTHANA_HOUSES):
        lord = houses.house_lord(asc, house_number)
        position = p.get(lord)
        if position and position.house in DUSTHANA_HOUSES:
            lords.append(lord)
            lines.append(
                render(
                    "vipareeta",
                    locale,
                    lord=planet_label(lord, locale),
                    house=ordinal_label(house_number, locale),
                    placed=ordinal_label(position.house, locale),
                )
            )

    if not lines:
        return None

    return _yoga(
        "vipareeta-rajyoga",
        locale,
        factors=list(dict.fromkeys(lords)),
        justification="; ".join(lines),
        strength="strong" if len(lines) > 1 else "moderate",
        group="Rajyoga",
    )


def detect_kendra_trikona_rajyoga(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Lord of a kendra (1/4/7/10) sharing a house with a different planet
    that lords a trikona (1/5/9). One finding aggregates every pair.
    """
    asc = _asc_sign(ascendant)
    p = _index(planets)

    pairs = []
    seen = set()
    lines = []
    for kendra in sorted(KENDRA_HOUSES):
        kendra_lord = houses.house_lord(asc, kendra)
        for trikona in sorted(TRIKONA_HOUSES):
            trikona_lord = houses.house_lord(asc, trikona)
            link = frozenset((kendra_lord, trikona_lord))
            if len(link) == 1 or link in seen:
                continue
            first, second = p.get(kendra_lord), p.get(trikona_lord)
            if not first or not second or first.house != second.house:
                continue
            seen.add(link)
            pairs.append((kendra_lord, trikona_lord))
            lines.append(
                render(
                    "kendra-trikona",
                    locale,
                    kendra_lord=planet_label(kendra_lord, locale),
                    kendra=ordinal_label(kendra, locale),
                    trikona_lord=planet_label(trikona_lord, locale),
                    trikona=ordinal_label(trikona, locale),
                    house=first.house,
                )
            )

    if not lines:
        return None

    return _yoga(
        "kendra-trikona-rajyoga",
        locale,
        factors=list(dict.fromkeys(name for pair in pairs for name in pair)),
        justification="; ".join(lines),
        strength="strong" if len(lines) > 1 else "moderate",
        group="Rajyoga",
    )


def detect_budha_aditya(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    p = _index(planets)
    sun, mercury = p.get("Sun"), p.get("Mercury")
    if not sun or not mercury or sun.sign_id != mercury.sign_id:
        return None

    return _yoga(
        "budha-aditya",
        locale,
        factors=["Sun", "Mercury"],
        justification=render("budha-aditya", locale, sign=sign_label(sun.sign_id, locale)),
        strength="moderate",
        group="General",
    )


# ─────────────────────────────────────────────
# Doshas
# ─────────────────────────────────────────────

def _arc(start: int, end: int) -> frozenset:
    """
    Houses from `start` forward to `end`, both inclusive.
    """
    length = (end - start) % 12
    return frozenset(((start - 1 + i) % 12) + 1 for i in range(length + 1))


def detect_kaal_sarp(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Every classical planet present lies on the shorter Rahu–Ketu arc.
    When both arcs are equal either one qualifies.
    """
    p = _index(planets)
    rahu, ketu = p.get("Rahu"), p.get("Ketu")
    if not rahu or not ketu:
        return None

    others = [p[name].house for name in CLASSICAL_PLANETS if name in p]
    if not others:
        return None

    forward = _arc(rahu.house, ketu.house)
    backward = _arc(ketu.house, rahu.house)
    if len(forward) < len(backward):
        arcs = (forward,)
    elif len(backward) < len(forward):
        arcs = (backward,)
    else:
        arcs = (forward, backward)

    if not any(all(h in arc for h in others) for arc in arcs):
        return None

    return _dosha(
        "dosha.kaalsarpa",
        locale,
        factors=["Rahu", "Ketu"],
        justification=render("kaalsarpa", locale, rahu=rahu.house, ketu=ketu.house),
        strength="high",
    )


def detect_mangal(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Mars in 1/2/4/7/8/12 from the ascendant. A Moon-relative placement
    in the same houses only adds a factor.
    """
    p = _index(planets)
    mars = p.get("Mars")
    if not mars or mars.house not in MANGAL_DOSHA_HOUSES:
        return None

    reasons = [render("mangal.lagna", locale, house=mars.house)]
    factors = ["Mars"]

    moon = p.get("Moon")
    if moon:
        rel = houses.relative_house(moon.house, mars.house)
        if rel in MANGAL_DOSHA_HOUSES:
            reasons.append(render("mangal.moon", locale, rel=ordinal_label(rel, locale)))
            factors.append("Moon")

    return _dosha(
        "dosha.mangal",
        locale,
        factors=factors,
        justification="; ".join(reasons),
        strength="high" if len(reasons) > 1 else "medium",
    )


def _conjunction(
    key: str,
    planet_names: Sequence[str],
    partners: Sequence[str],
    strength: str,
) -> Detector:
    """
    Dosha formed when any of `planet_names` shares a house with any of `partners`.
    """
    def detect(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
        p = _index(planets)
        factors = []
        lines = []
        for name in planet_names:
            position = p.get(name)
            if not position:
                continue
            for partner in partners:
                other = p.get(partner)
                if other and other.house == position.house:
                    factors.extend([name, partner])
                    lines.append(
                        render(
                            "conjunction",
                            locale,
                            first=planet_label(name, locale),
                            second=planet_label(partner, locale),
                            house=position.house,
                        )
                    )

        if not lines:
            return None

        return _dosha(
            key,
            locale,
            factors=list(dict.fromkeys(factors)),
            justification="; ".join(lines),
            strength=strength,
        )

    detect.__name__ = f"detect_{key.split('.')[-1].replace('-', '_')}"
    return detect


detect_grahan = _conjunction("dosha.grahan", ("Sun", "Moon"), ("Rahu", "Ketu"), "medium")
detect_shrapit = _conjunction("dosha.shrapit", ("Saturn",), ("Rahu",), "medium")
detect_guru_chandala = _conjunction("dosha.guru-chandala", ("Jupiter",), ("Rahu", "Ketu"), "medium")
detect_pitri = _conjunction("dosha.pitri", ("Sun",), ("Rahu", "Ketu"), "medium")
detect_vish = _conjunction("dosha.vish-yoga", ("Saturn",), ("Moon",), "medium")


def _labels(names: Sequence[str], locale: Locale) -> str:
    return ", ".join(planet_label(name, locale) for name in names)


def detect_daridra(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Two or more of Mars, Saturn and the nodes in the 2nd or 11th house.
    """
    p = _index(planets)
    found = [
        name for name in ("Mars", "Saturn", "Rahu", "Ketu")
        if name in p and p[name].house in (2, 11)
    ]
    if len(found) < 2:
        return None

    return _dosha(
        "dosha.daridra",
        locale,
        factors=found,
        justification=render("daridra", locale, planets=_labels(found, locale)),
        strength="medium",
    )


def detect_papakartari_tenth(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Mars or Saturn in the 9th and the other in the 11th, hemming the 10th.
    """
    p = _index(planets)
    ninth = [name for name in ("Mars", "Saturn") if name in p and p[name].house == 9]
    eleventh = [name for name in ("Mars", "Saturn") if name in p and p[name].house == 11]
    if not ninth or not eleventh:
        return None

    return _dosha(
        "dosha.papakartari.10",
        locale,
        factors=ninth + eleventh,
        justification=render(
            "papakartari",
            locale,
            ninth=planet_label(ninth[0], locale),
            eleventh=planet_label(eleventh[0], locale),
        ),
        strength="medium",
    )


def detect_alpa_shakti(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Four or more classical planets crowded into the dusthanas (6/8/12).
    """
    p = _index(planets)
    found = [name for name in CLASSICAL_PLANETS if name in p and p[name].house in DUSTHANA_HOUSES]
    if len(found) < 4:
        return None

    return _dosha(
        "dosha.alpa-shakti",
        locale,
        factors=found,
        justification=render("alpa-shakti", locale, count=len(found), planets=_labels(found, locale)),
        strength="low",
    )


def detect_ashtama_shani(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    Saturn in the 8th house counted from the Moon.
    """
    p = _index(planets)
    moon, saturn = p.get("Moon"), p.get("Saturn")
    if not moon or not saturn or houses.relative_house(moon.house, saturn.house) != 8:
        return None

    return _dosha(
        "dosha.ashtama-shani",
        locale,
        factors=["Saturn", "Moon"],
        justification=render("ashtama-shani", locale, moon=moon.house, saturn=saturn.house),
        strength="medium",
    )


def detect_kemadruma(ascendant: AscendantLike, planets: Positions, locale: Locale = Locale.EN):
    """
    No planet other than the Moon and the nodes in the houses either
    side of the Moon.
    """
    p = _index(planets)
    moon = p.get("Moon")
    if not moon:
        return None

    previous_house = ((moon.house + 10) % 12) + 1
    next_house = (moon.house % 12) + 1
    neighbours = {
        position.house for name, position in p.items()
        if name in CLASSICAL_PLANETS and name != "Moon"
    }
    if previous_house in neighbours or next_house in neighbours:
        return None

    return _dosha(
        "dosha.kemadruma",
        locale,
        factors=["Moon"],
        justification=render("kemadruma", locale, house=moon.house),
        strength="low",
    )


# ─────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────

class DetectorKind(str, Enum):
    GAJAKESARI = "gajakesari"
    SHASHA = "shasha"
    HAMSA = "hamsa"
    RUCHAKA = "ruchaka"
    BHADRA = "bhadra"
    MALAVYA = "malavya"
    VIPAREETA_RAJYOGA = "vipareeta-rajyoga"
    KENDRA_TRIKONA_RAJYOGA = "kendra-trikona-rajyoga"
    BUDHA_ADITYA = "budha-aditya"
    KAAL_SARP = "kaal-sarp"
    MANGAL = "mangal"
    GRAHAN = "grahan"
    SHRAPIT = "shrapit"
    GURU_CHANDALA = "guru-chandala"
    KEMADRUMA = "kemadruma"
    PITRI = "pitri"
    VISH = "vish"
    DARIDRA = "daridra"
    PAPAKARTARI = "papakartari"
    ALPA_SHAKTI = "alpa-shakti"
    ASHTAMA_SHANI = "ashtama-shani"


DETECTORS: Mapping[DetectorKind, Detector] = MappingProxyType({
    DetectorKind.GAJAKESARI: detect_gajakesari,
    DetectorKind.SHASHA: detect_shasha,
    DetectorKind.HAMSA: detect_hamsa,
    DetectorKind.RUCHAKA: detect_ruchaka,
    DetectorKind.BHADRA: detect_bhadra,
    DetectorKind.MALAVYA: detect_malavya,
    DetectorKind.VIPAREETA_RAJYOGA: detect_vipareeta_rajyoga,
    DetectorKind.KENDRA_TRIKONA_RAJYOGA: detect_kendra_trikona_rajyoga,
    DetectorKind.BUDHA_ADITYA: detect_budha_aditya,
    DetectorKind.KAAL_SARP: detect_kaal_sarp,
    DetectorKind.MANGAL: detect_mangal,
    DetectorKind.GRAHAN: detect_grahan,
    DetectorKind.SHRAPIT: detect_shrapit,
    DetectorKind.GURU_CHANDALA: detect_guru_chandala,
    DetectorKind.KEMADRUMA: detect_kemadruma,
    DetectorKind.PITRI: detect_pitri,
    DetectorKind.VISH: detect_vish,
    DetectorKind.DARIDRA: detect_daridra,
    DetectorKind.PAPAKARTARI: detect_papakartari_tenth,
    DetectorKind.ALPA_SHAKTI: detect_alpa_shakti,
    DetectorKind.ASHTAMA_SHANI: detect_ashtama_shani,
})
