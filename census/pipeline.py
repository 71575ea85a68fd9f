"""
Pipeline: thin orchestrator that composes read → tag → extract.

run_extract         – workbook path → CensusReport
extract_categories  – tagged sheets → {category: ExtractionResult}

Heavy lifting is delegated to:
  census.extractors.sheet.reader – WorkbookReader
  census.router                  – tag_sheets / tag_sheet
  census.extractors              – FlatSheetExtractor, BandedSheetExtractor
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from census.config import Settings, get_settings
from census.extractors import get_extractor
from census.extractors.sheet.reader import WorkbookReader
from census.ir import ExtractionResult, RawSheet, SheetCategory, TaggedSheet
from census.logger import get_logger
from census.profile_loader import default_profile, load_profile, profile_aliases, profile_total_row
from census.router import UnknownSheetMapping, tag_sheet, tag_sheets

logger = get_logger(__name__)


class CensusReport(BaseModel):
    """Extraction results of one workbook, keyed by category id."""
    source: str = ""
    results: Dict[SheetCategory, ExtractionResult] = Field(default_factory=dict)

    class Config:
        frozen = True

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "results": {cat.value: res.to_dict() for cat, res in self.results.items()},
        }


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def expected_total_row(
    category: SheetCategory,
    settings: Optional[Settings] = None,
    profile: Optional[dict] = None,
) -> Optional[int]:
    """Total-row hint for *category*: profile override first, then settings."""
    override = profile_total_row(profile or {}, category)
    if override is not None:
        return override
    return (settings or get_settings()).expected_total_row(category)


def extract_categories(
    tagged: Sequence[TaggedSheet],
    settings: Optional[Settings] = None,
    profile: Optional[dict] = None,
) -> Dict[SheetCategory, ExtractionResult]:
    """
    Run the layout-appropriate extractor over every tagged sheet.

    Pure: no caching, the same sheets always give equal results.
    """
    settings = settings or get_settings()
    results: Dict[SheetCategory, ExtractionResult] = {}
    for sheet in tagged:
        extractor = get_extractor(sheet.category, expected_total_row(sheet.category, settings, profile))
        result = extractor.safe_extract(sheet.rows, sheet_name=sheet.name or sheet.category.value)
        if result.warnings:
            logger.info("%s (%s): %s", sheet.category.value, sheet.name, result.warnings)
        results[sheet.category] = result
    return results


def _tag(
    sheets: List[RawSheet],
    mode: str,
    profile: dict,
    settings: Settings,
    category: Optional[str],
) -> List[TaggedSheet]:
    if category:
        if len(sheets) != 1:
            raise UnknownSheetMapping(
                f"an explicit category needs a single-sheet source, got {len(sheets)} sheets"
            )
        return [tag_sheet(category, sheets[0].rows, sheets[0].name)]
    return tag_sheets(
        sheets,
        mode=mode,
        aliases=profile_aliases(profile),
        threshold=settings.SHEET_MATCH_THRESHOLD,
    )


def run_extract(
    file_path: str,
    mode: Optional[str] = None,
    profile_path: Optional[str] = None,
    category: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> CensusReport:
    """
    Read a workbook and extract every census category it holds.

    Steps:
      1. WorkbookReader → RawSheet list
      2. Tag sheets (by name, by position, or by the explicit *category*)
      3. Extract each tagged sheet

    Raises:
        FileNotFoundError / ValueError: unreadable or unsupported workbook
        UnknownSheetMapping: sheets cannot be tagged unambiguously
    """
    settings = settings or get_settings()
    profile = load_profile(profile_path or "")
    mode = mode or profile["sheet_mapping"].get("mode") or settings.SHEET_MAPPING_MODE

    sheets = WorkbookReader().read(file_path)
    tagged = _tag(sheets, mode, profile, settings, category)
    logger.info(
        "run_extract: %s → %s",
        Path(file_path).name, [(t.name, t.category.value) for t in tagged],
    )
    results = extract_categories(tagged, settings, profile)
    return CensusReport(source=Path(file_path).name, results=results)


def run_extract_bytes(
    data: bytes,
    filename: str,
    mode: Optional[str] = None,
    category: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> CensusReport:
    """Same as :func:`run_extract` for an uploaded workbook held in memory."""
    settings = settings or get_settings()
    profile = default_profile()
    sheets = WorkbookReader().read_bytes(data, filename)
    tagged = _tag(sheets, mode or settings.SHEET_MAPPING_MODE, profile, settings, category)
    results = extract_categories(tagged, settings, profile)
    return CensusReport(source=Path(filename).name, results=results)
