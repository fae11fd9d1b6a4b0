"""
Localized names and justification templates for yogas and doshas.
"""
from types import MappingProxyType
from typing import Mapping

from kundali_facts.domain.kundali.houses import ordinal
from kundali_facts.domain.kundali.schemas import Locale

FINDING_LABELS: Mapping[str, Mapping[Locale, str]] = MappingProxyType({
    "gajakesari": {Locale.EN: "Gajakesari Yoga", Locale.NE: "गजकेसरी योग"},
    "shasha": {Locale.EN: "Shasha (Pancha Mahapurusha)", Locale.NE: "शश योग (पञ्चमहापुरुष)"},
    "hamsa": {Locale.EN: "Hamsa (Pancha Mahapurusha)", Locale.NE: "हंस योग (पञ्चमहापुरुष)"},
    "ruchaka": {Locale.EN: "Ruchaka (Pancha Mahapurusha)", Locale.NE: "रुचक योग (पञ्चमहापुरुष)"},
    "bhadra": {Locale.EN: "Bhadra (Pancha Mahapurusha)", Locale.NE: "भद्र योग (पञ्चमहापुरुष)"},
    "malavya": {Locale.EN: "Malavya (Pancha Mahapurusha)", Locale.NE: "मालव्य योग (पञ्चमहापुरुष)"},
    "vipareeta-rajyoga": {Locale.EN: "Vipareeta Rajyoga", Locale.NE: "विपरीत राजयोग"},
    "kendra-trikona-rajyoga": {Locale.EN: "Kendra-Trikona Rajyoga", Locale.NE: "केन्द्र-त्रिकोण राजयोग"},
    "budha-aditya": {Locale.EN: "Budha-Aditya Yoga", Locale.NE: "बुधादित्य योग"},
    "dosha.kaalsarpa": {Locale.EN: "Kaal-Sarpa Dosha", Locale.NE: "कालसर्प दोष"},
    "dosha.mangal": {Locale.EN: "Mangal (Kuja) Dosha", Locale.NE: "मंगल दोष"},
    "dosha.grahan": {Locale.EN: "Grahan Dosha", Locale.NE: "ग्रहण दोष"},
    "dosha.shrapit": {Locale.EN: "Shrapit Dosha", Locale.NE: "श्रापित दोष"},
    "dosha.guru-chandala": {Locale.EN: "Guru-Chandala Dosha", Locale.NE: "गुरु चाण्डाल दोष"},
    "dosha.kemadruma": {Locale.EN: "Kemadruma Dosha", Locale.NE: "केमद्रुम दोष"},
    "dosha.pitri": {Locale.EN: "Pitri Dosha", Locale.NE: "पितृ दोष"},
    "dosha.vish-yoga": {Locale.EN: "Vish (Saturn-Moon) Dosha", Locale.NE: "विष दोष"},
    "dosha.daridra": {Locale.EN: "Daridra Yoga (Dosha)", Locale.NE: "दरिद्र योग (दोष)"},
    "dosha.papakartari.10": {Locale.EN: "Papakartari (around 10th)", Locale.NE: "पापकर्तरी (दशम भाव)"},
    "dosha.alpa-shakti": {Locale.EN: "Alpa Shakti (Dusthana crowd)", Locale.NE: "अल्पशक्ति दोष"},
    "dosha.ashtama-shani": {Locale.EN: "Ashtama Shani (from Moon)", Locale.NE: "अष्टम शनि"},
})

# Keyword arguments are filled in by the detectors
TEMPLATES: Mapping[str, Mapping[Locale, str]] = MappingProxyType({
    "gajakesari": {
        Locale.EN: "Jupiter is {rel} from Moon ({moon_sign} → {jupiter_sign}).",
        Locale.NE: "बृहस्पति चन्द्रमाबाट {rel} भावमा छ ({moon_sign} → {jupiter_sign})।",
    },
    "mahapurusha": {
        Locale.EN: "{planet} in {sign} ({status}) in Kendra H{house} from Lagna.",
        Locale.NE: "{planet} {sign} ({status}) मा, लग्नबाट केन्द्र H{house} मा।",
    },
    "vipareeta": {
        Locale.EN: "{lord} (lord of H{house}) placed in H{placed}",
        Locale.NE: "{lord} (H{house} को स्वामी) H{placed} मा",
    },
    "kendra-trikona": {
        Locale.EN: "{kendra_lord} (lord of H{kendra}) with {trikona_lord} (lord of H{trikona}) in H{house}",
        Locale.NE: "{kendra_lord} (H{kendra} को स्वामी) र {trikona_lord} (H{trikona} को स्वामी) H{house} मा सँगै",
    },
    "budha-aditya": {
        Locale.EN: "Mercury and Sun both in {sign}.",
        Locale.NE: "बुध र सूर्य दुवै {sign} मा।",
    },
    "kaalsarpa": {
        Locale.EN: "All planets hemmed between Rahu (H{rahu}) and Ketu (H{ketu}).",
        Locale.NE: "सबै ग्रह राहु (H{rahu}) र केतु (H{ketu}) बीच।",
    },
    "mangal.lagna": {
        Locale.EN: "Mars in sensitive house (H{house}) from Lagna",
        Locale.NE: "मंगल लग्नबाट संवेदनशील भाव (H{house}) मा",
    },
    "mangal.moon": {
        Locale.EN: "Mars is {rel} from Moon",
        Locale.NE: "मंगल चन्द्रमाबाट {rel} भावमा",
    },
    "conjunction": {
        Locale.EN: "{first} with {second} in H{house}",
        Locale.NE: "{first} र {second} H{house} मा सँगै",
    },
    "kemadruma": {
        Locale.EN: "No classical planet on either side of Moon (H{house}).",
        Locale.NE: "चन्द्रमा (H{house}) को दुवै छेउमा कुनै ग्रह छैन।",
    },
    "daridra": {
        Locale.EN: "Malefics in the 2nd/11th houses: {planets}.",
        Locale.NE: "२ र ११ औं भावमा पापग्रह: {planets}।",
    },
    "papakartari": {
        Locale.EN: "{ninth} in H9 and {eleventh} in H11 hem the 10th house.",
        Locale.NE: "{ninth} H9 मा र {eleventh} H11 मा, दशम भाव घेरिएको।",
    },
    "alpa-shakti": {
        Locale.EN: "{count} planets in dusthana houses (6/8/12): {planets}.",
        Locale.NE: "{count} ग्रह दुःस्थान (६/८/१२) मा: {planets}।",
    },
    "ashtama-shani": {
        Locale.EN: "Saturn (H{saturn}) is 8th from Moon (H{moon}).",
        Locale.NE: "शनि (H{saturn}) चन्द्रमा (H{moon}) बाट आठौं भावमा।",
    },
})

STATUS_LABELS: Mapping[str, Mapping[Locale, str]] = MappingProxyType({
    "own": {Locale.EN: "own sign", Locale.NE: "स्वराशि"},
    "exalted": {Locale.EN: "exalted", Locale.NE: "उच्च"},
})


def finding_label(key: str, locale: Locale = Locale.EN) -> str:
    labels = FINDING_LABELS.get(key)
    if not labels:
        return key
    return labels.get(Locale(locale), labels[Locale.EN])


def render(template: str, locale: Locale = Locale.EN, **values) -> str:
    templates = TEMPLATES[template]
    return templates.get(Locale(locale), templates[Locale.EN]).format(**values)


def ordinal_label(n: int, locale: Locale = Locale.EN) -> str:
    if Locale(locale) == Locale.NE:
        return f"{n}औं"
    return ordinal(n)
