"""
Bilingual question keywords and the fact categories they require.

Kept as data: adding a term or a locale means adding a KeywordRule,
never touching the planner. Patterns are lowercase substrings unless a
rule asks to start at a word boundary.
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from kundali_facts.domain.kundali.schemas import Locale

ALL_DIVISIONALS = ("divisionals.D2", "divisionals.D7", "divisionals.D9", "divisionals.D10")
ALL_DASHAS = (
    "dashas.vimshottari.maha",
    "dashas.vimshottari.antar",
    "dashas.vimshottari.pratyantar",
    "dashas.yogini.maha",
)


@dataclass(frozen=True)
class KeywordRule:
    """
    `pattern` must occur in the question. When `also` is non-empty, at
    least one of those substrings must occur as well. Any `unless`
    substring vetoes the match. With `word`, `pattern` must start at a
    word boundary.
    """
    pattern: str
    categories: Tuple[str, ...]
    also: Tuple[str, ...] = ()
    unless: Tuple[str, ...] = ()
    word: bool = False

    def matches(self, question: str) -> bool:
        if self.word:
            if not re.search(rf"\b{re.escape(self.pattern)}", question):
                return False
        elif self.pattern not in question:
            return False
        if any(term in question for term in self.unless):
            return False
        return not self.also or any(term in question for term in self.also)


KeywordTable = Mapping[Locale, Tuple[KeywordRule, ...]]


KEYWORDS: KeywordTable = MappingProxyType({
    Locale.EN: (
        # Vimshottari
        KeywordRule("mahadasha", ("dashas.vimshottari.maha",)),
        KeywordRule("maha dasha", ("dashas.vimshottari.maha",)),
        KeywordRule("antardasha", ("dashas.vimshottari.antar",)),
        KeywordRule("antar dasha", ("dashas.vimshottari.antar",)),
        KeywordRule("pratyantar", ("dashas.vimshottari.pratyantar",)),
        KeywordRule("sookshma", ("dashas.vimshottari.sookshma",)),
        KeywordRule("sukshma", ("dashas.vimshottari.sookshma",)),
        KeywordRule("pran dasha", ("dashas.vimshottari.pran",)),
        KeywordRule("prana dasha", ("dashas.vimshottari.pran",)),
        KeywordRule("current dasha", ("dashas.vimshottari.current",)),
        KeywordRule("running dasha", ("dashas.vimshottari.current",)),
        KeywordRule("all dashas", ALL_DASHAS),
        # Yogini
        KeywordRule("yogini", ("dashas.yogini.maha",)),
        # Divisionals
        KeywordRule("navamsa", ("divisionals.D9",)),
        KeywordRule("navamsha", ("divisionals.D9",)),
        KeywordRule("d9", ("divisionals.D9",)),
        KeywordRule("dashamsha", ("divisionals.D10",)),
        KeywordRule("dasamsa", ("divisionals.D10",)),
        KeywordRule("d10", ("divisionals.D10",)),
        KeywordRule("saptamsha", ("divisionals.D7",)),
        KeywordRule("saptamsa", ("divisionals.D7",)),
        KeywordRule("d7", ("divisionals.D7",)),
        KeywordRule("hora chart", ("divisionals.D2",)),
        KeywordRule("d2 chart", ("divisionals.D2",)),
        KeywordRule("all divisional", ALL_DIVISIONALS, word=True),
        KeywordRule("all the divisional", ALL_DIVISIONALS, word=True),
        KeywordRule("all charts", ALL_DIVISIONALS, word=True),
        KeywordRule("all the charts", ALL_DIVISIONALS, word=True),
        KeywordRule("every divisional", ALL_DIVISIONALS, word=True),
        KeywordRule("all vargas", ALL_DIVISIONALS, word=True),
        # Strength
        KeywordRule("shadbala", ("shadbala",)),
        KeywordRule("strength", ("shadbala",)),
        KeywordRule("power", ("shadbala",)),
        # Yogas
        KeywordRule("yoga", ("yogas",)),
        KeywordRule("rajyoga", ("yogas",)),
        KeywordRule("panchmahapurush", ("yogas",)),
        KeywordRule("panch mahapurush", ("yogas",)),
        KeywordRule("vipareeta", ("yogas",)),
        KeywordRule("gajakesari", ("yogas",)),
        # Doshas
        KeywordRule("dosha", ("doshas",)),
        KeywordRule("manglik", ("doshas",)),
        KeywordRule("kaal sarp", ("doshas",)),
        KeywordRule("kalsarp", ("doshas",)),
    ),
    Locale.NE: (
        # Vimshottari
        KeywordRule("महादशा", ("dashas.vimshottari.maha",)),
        KeywordRule("अन्तरदशा", ("dashas.vimshottari.antar",)),
        KeywordRule("अंतरदशा", ("dashas.vimshottari.antar",)),
        KeywordRule("प्रत्यन्तरदशा", ("dashas.vimshottari.pratyantar",)),
        KeywordRule("सूक्ष्म दशा", ("dashas.vimshottari.sookshma",)),
        KeywordRule("प्राण दशा", ("dashas.vimshottari.pran",)),
        KeywordRule("हालको दशा", ("dashas.vimshottari.current",)),
        KeywordRule("चलिरहेको दशा", ("dashas.vimshottari.current",)),
        KeywordRule("सबै दशा", ALL_DASHAS),
        KeywordRule("सभी दशा", ALL_DASHAS),
        # Yogini
        KeywordRule("योगिनी", ("dashas.yogini.maha",)),
        # Divisionals
        KeywordRule("नवांश", ("divisionals.D9",)),
        KeywordRule("नवमांश", ("divisionals.D9",)),
        KeywordRule("दशांश", ("divisionals.D10",)),
        KeywordRule("दशमांश", ("divisionals.D10",)),
        KeywordRule("सप्तांश", ("divisionals.D7",)),
        KeywordRule("सप्तमांश", ("divisionals.D7",)),
        KeywordRule("होरा", ("divisionals.D2",)),
        KeywordRule("सबै", ALL_DIVISIONALS, also=("विभाजन", "वर्ग कुण्डली")),
        # Strength
        KeywordRule("शड्बल", ("shadbala",)),
        KeywordRule("षड्बल", ("shadbala",)),
        KeywordRule("बल", ("shadbala",)),
        # Yogas
        KeywordRule("योग", ("yogas",), unless=("योगिनी",)),
        KeywordRule("राजयोग", ("yogas",)),
        KeywordRule("पञ्चमहापुरुष", ("yogas",)),
        KeywordRule("विपरीत", ("yogas",)),
        KeywordRule("गजकेसरी", ("yogas",)),
        # Doshas
        KeywordRule("दोष", ("doshas",)),
        KeywordRule("मांगलिक", ("doshas",)),
        KeywordRule("कालसर्प", ("doshas",)),
    ),
})
