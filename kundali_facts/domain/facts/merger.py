import logging
from typing import Dict, Iterable, List, Optional, Union

from kundali_facts.domain.kundali.divisional.schemas import SUPPORTED_CHARTS
from kundali_facts.domain.facts.coverage import categories_of
from kundali_facts.domain.facts.schemas import (
    DASHA_LEVELS,
    DASHA_SYSTEMS,
    AstroPatch,
    FactSheet,
    FactSheetPatch,
    ProvenanceEntry,
    ProvenanceSource,
)

logger = logging.getLogger(__name__)


def _chart_order(block) -> int:
    # D2, D7, D9, D10, then anything unsupported
    if block.chart in SUPPORTED_CHARTS:
        return SUPPORTED_CHARTS.index(block.chart)
    return len(SUPPORTED_CHARTS)


def _dasha_order(item) -> tuple:
    return DASHA_SYSTEMS.index(item.system), DASHA_LEVELS.index(item.level), item.start


def _append_new(existing: list, incoming: Optional[list], key) -> list:
    """
    Append incoming items whose natural key is not present yet.
    """
    if not incoming:
        return list(existing)
    seen = {key(item) for item in existing}
    merged = list(existing)
    for item in incoming:
        k = key(item)
        if k not in seen:
            seen.add(k)
            merged.append(item)
    return merged


def _merge_dashas(existing: list, incoming: Optional[list]) -> list:
    """
    Dasha items merge per (system, level) group: a group already on the
    sheet is never extended or replaced by a patch.
    """
    if not incoming:
        return list(existing)
    present = {(d.system, d.level) for d in existing}
    return list(existing) + [d for d in incoming if (d.system, d.level) not in present]


def _merge_provenance(
    provenance: Dict[str, List[ProvenanceSource]],
    entries: Iterable[ProvenanceEntry],
) -> Dict[str, List[ProvenanceSource]]:
    merged = {category: list(sources) for category, sources in provenance.items()}
    for entry in entries:
        sources = merged.setdefault(entry.category, [])
        if entry.source not in sources:
            sources.append(entry.source)
    return merged


def merge_patch(sheet: FactSheet, patch: AstroPatch) -> FactSheet:
    """
    Merge a patch into a sheet, returning a new sheet.

    - divisionals dedup by chart, dashas by (system, level), yogas and
      doshas by key, shadbala by planet
    - D1 is set when the sheet has none, or when the patch brings a
      non-empty D1 together with its ascendant
    - empty patch data never replaces existing data
    - provenance entries are appended, never replaced, without duplicates

    Applying the same patch twice yields the same sheet as applying it once.
    """
    data = patch.data
    updates = {}

    if data.d1 and (not sheet.d1 or data.ascendant is not None):
        updates["d1"] = list(data.d1)
        if data.ascendant is not None:
            updates["ascendant"] = data.ascendant
    elif data.ascendant is not None and sheet.ascendant is None:
        updates["ascendant"] = data.ascendant

    updates["divisionals"] = sorted(
        _append_new(sheet.divisionals, data.divisionals, lambda b: b.chart),
        key=_chart_order,
    )
    updates["yogas"] = _append_new(sheet.yogas, data.yogas, lambda y: y.key)
    updates["doshas"] = _append_new(sheet.doshas, data.doshas, lambda d: d.key)
    updates["shadbala"] = _append_new(sheet.shadbala, data.shadbala, lambda r: r.planet)
    updates["dashas"] = sorted(_merge_dashas(sheet.dashas, data.dashas), key=_dasha_order)
    updates["provenance"] = _merge_provenance(sheet.provenance, patch.provenance)

    merged = sheet.model_copy(update=updates)
    logger.debug(
        f"Merged patch with {len(patch.provenance)} provenance entr(ies); "
        f"categories now {sorted(merged.provenance)}"
    )
    return merged


def patch_for(
    data: Union[FactSheetPatch, FactSheet],
    source: ProvenanceSource = ProvenanceSource.FETCH,
    categories: Optional[Iterable[str]] = None,
) -> AstroPatch:
    """
    Build a patch attributing every non-empty category of `data` to
    `source`. When `categories` is given only those are attributed.
    """
    if isinstance(data, FactSheet):
        data = FactSheetPatch(
            ascendant=data.ascendant,
            d1=data.d1 or None,
            divisionals=data.divisionals or None,
            yogas=data.yogas or None,
            doshas=data.doshas or None,
            shadbala=data.shadbala or None,
            dashas=data.dashas or None,
        )

    present = categories_of(data)
    if categories is not None:
        wanted = set(categories)
        present = [c for c in present if c in wanted]

    return AstroPatch(
        data=data,
        provenance=[ProvenanceEntry(category=c, source=ProvenanceSource(source)) for c in present],
    )
