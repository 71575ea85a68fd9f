"""
Sheet Router Module
===================

Tag decoded sheets with their census category before extraction.

Sheets are matched by name (rapidfuzz against known aliases) so that a
reordered workbook is still labelled correctly. The legacy fixed-order
mapping is available only on request and is checked for the expected
sheet count. Anything ambiguous raises :class:`UnknownSheetMapping`
instead of silently mislabelling data.
"""

import re
import unicodedata
from typing import Any, Dict, List, Optional, Sequence

from rapidfuzz import fuzz, process

from census.ir import POSITIONAL_ORDER, RawSheet, SheetCategory, TaggedSheet
from census.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MATCH_THRESHOLD = 80
# Minimum lead of the best category over any other category.
MATCH_MARGIN = 5

# Built-in sheet-name aliases; profiles may extend them.
DEFAULT_ALIASES: Dict[SheetCategory, List[str]] = {
    SheetCategory.OPD_TIME: [
        "OPD ในเวลา", "OPD ในเวลา & ER", "OPD ในเวลาราชการ", "OPD in hours", "OPD & ER",
    ],
    SheetCategory.OPD_SPECIAL: [
        "OPD คลินิกพิเศษ", "OPD นอกเวลา", "คลินิกพิเศษ/นอกเวลา", "OPD special", "OPD after hours",
    ],
    SheetCategory.OPD_PREMIUM: [
        "OPD Premium", "Premium Clinic", "OPD Premium Clinic", "คลินิกพรีเมียม",
    ],
    SheetCategory.IPD: [
        "IPD", "ผู้ป่วยใน", "ผู้ป่วยใน (IPD)", "Inpatient", "Ward",
    ],
}


class UnknownSheetMapping(ValueError):
    """Raised when workbook sheets cannot be tagged to categories unambiguously."""


def _normalize_name(text: Any) -> str:
    """Compact, lower-case sheet name for matching."""
    if text is None:
        return ""
    raw = unicodedata.normalize("NFC", str(text))
    raw = re.sub(r"[\s_\-&/()]+", " ", raw)
    return raw.strip().lower()


def tag_sheet(category: Any, rows: Sequence[Sequence[Any]], name: Optional[str] = None) -> TaggedSheet:
    """
    Build a :class:`TaggedSheet`, validating the category label.

    Raises:
        UnknownSheetMapping: when *category* is not a known category id
    """
    try:
        cat = SheetCategory(category.strip().lower() if isinstance(category, str) else category)
    except ValueError as e:
        raise UnknownSheetMapping(
            f"unknown sheet category {category!r}; expected one of {[c.value for c in SheetCategory]}"
        ) from e
    return TaggedSheet(category=cat, rows=[list(r or []) for r in rows], name=name)


def match_category(
    sheet_name: str,
    aliases: Optional[Dict[SheetCategory, List[str]]] = None,
    threshold: int = DEFAULT_MATCH_THRESHOLD,
) -> Optional[SheetCategory]:
    """
    Best category for *sheet_name*, or ``None`` below *threshold* or when
    another category scores within ``MATCH_MARGIN``.

    Category ids themselves ("opd_time", "ipd", ...) always match exactly.
    """
    norm = _normalize_name(sheet_name)
    if not norm:
        return None
    for cat in SheetCategory:
        if norm == _normalize_name(cat.value):
            return cat

    choices: Dict[str, SheetCategory] = {}
    for cat, names in (aliases or DEFAULT_ALIASES).items():
        for alias in names:
            key = _normalize_name(alias)
            if key and key not in choices:
                choices[key] = cat
    if not choices:
        return None
    # Whole-name scorer: partial matches ("OPD Summary", "ER") must not pass.
    ranked = process.extract(norm, list(choices.keys()), scorer=fuzz.token_sort_ratio, limit=None)
    if not ranked or ranked[0][1] < threshold:
        logger.debug("Sheet %r matched no category (best=%s)", sheet_name, ranked[:1])
        return None
    best_alias, best_score = ranked[0][0], ranked[0][1]
    best = choices[best_alias]
    runner_up = next((score for alias, score, _ in ranked[1:] if choices[alias] is not best), 0)
    if best_score < 100 and best_score - runner_up < MATCH_MARGIN:
        logger.debug("Sheet %r is ambiguous between categories (%d vs %d)", sheet_name, best_score, runner_up)
        return None
    logger.debug("Sheet %r → %s (alias %r, score %d)", sheet_name, best.value, best_alias, best_score)
    return best


def merge_aliases(extra: Optional[Dict[SheetCategory, List[str]]]) -> Dict[SheetCategory, List[str]]:
    """Built-in aliases extended with *extra* (profile-provided) names."""
    merged = {cat: list(names) for cat, names in DEFAULT_ALIASES.items()}
    for cat, names in (extra or {}).items():
        merged.setdefault(SheetCategory(cat), [])
        for n in names:
            if n not in merged[SheetCategory(cat)]:
                merged[SheetCategory(cat)].append(n)
    return merged


def tag_sheets(
    sheets: Sequence[RawSheet],
    mode: str = "name",
    aliases: Optional[Dict[SheetCategory, List[str]]] = None,
    threshold: int = DEFAULT_MATCH_THRESHOLD,
) -> List[TaggedSheet]:
    """
    Tag every census sheet of a workbook with its category.

    Args:
        sheets: decoded sheets in workbook order
        mode: ``name`` (fuzzy sheet-name matching) or ``positional``
        aliases: extra sheet-name aliases per category
        threshold: minimum rapidfuzz score for a name match

    Returns:
        one TaggedSheet per category, in category order

    Raises:
        UnknownSheetMapping: missing or duplicated categories, wrong sheet
            count in positional mode, or an unknown mode
    """
    mode = (mode or "name").strip().lower()
    if mode == "positional":
        return _tag_positional(sheets)
    if mode != "name":
        raise UnknownSheetMapping(f"unknown sheet mapping mode {mode!r}")

    merged = merge_aliases(aliases)
    found: Dict[SheetCategory, RawSheet] = {}
    ignored: List[str] = []
    for sheet in sheets:
        cat = match_category(sheet.name, merged, threshold)
        if cat is None:
            ignored.append(sheet.name)
            continue
        if cat in found:
            raise UnknownSheetMapping(
                f"sheets {found[cat].name!r} and {sheet.name!r} both map to {cat.value!r}"
            )
        found[cat] = sheet

    missing = [c.value for c in POSITIONAL_ORDER if c not in found]
    if missing:
        raise UnknownSheetMapping(
            f"no sheet found for categories {missing}; sheets were {[s.name for s in sheets]}"
        )
    if ignored:
        logger.info("Ignoring non-census sheets: %s", ignored)

    return [tag_sheet(c, found[c].rows, found[c].name) for c in POSITIONAL_ORDER]


def _tag_positional(sheets: Sequence[RawSheet]) -> List[TaggedSheet]:
    if len(sheets) != len(POSITIONAL_ORDER):
        raise UnknownSheetMapping(
            f"positional mapping needs exactly {len(POSITIONAL_ORDER)} sheets, got {len(sheets)}"
        )
    logger.info("Tagging sheets by position: %s", [s.name for s in sheets])
    return [tag_sheet(cat, sheet.rows, sheet.name) for cat, sheet in zip(POSITIONAL_ORDER, sheets)]
