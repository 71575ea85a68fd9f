"""
Extractors for census sheets.

Provides:
- BaseExtractor: abstract base class with the never-raise wrapper
- FlatSheetExtractor / extract_flat: one column per date, one total row
- BandedSheetExtractor / extract_banded: three columns per date, summed
- get_extractor: pick the extractor for a sheet category
"""

from typing import Optional

from census.extractors.base import BaseExtractor
from census.extractors.banded_extractor import BandedSheetExtractor, extract_banded
from census.extractors.flat_extractor import FlatSheetExtractor, extract_flat
from census.ir import CATEGORY_LAYOUTS, SheetCategory, SheetLayout


def get_extractor(
    category: SheetCategory,
    expected_total_row: Optional[int] = None,
) -> BaseExtractor:
    """
    Return the extractor for *category*'s layout.

    *expected_total_row* is only meaningful for flat categories.
    """
    if CATEGORY_LAYOUTS[SheetCategory(category)] is SheetLayout.BANDED:
        return BandedSheetExtractor()
    return FlatSheetExtractor(expected_total_row)


__all__ = [
    # Base class
    "BaseExtractor",
    # Extractor classes
    "FlatSheetExtractor",
    "BandedSheetExtractor",
    # Functional entry points
    "extract_flat",
    "extract_banded",
    "get_extractor",
]
