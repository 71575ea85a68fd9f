"""census: hospital patient-census extraction.

Turns hand-maintained census workbooks into per-date trends and
per-department tables for the daily dashboard.

Architecture
------------
* ``extractors.sheet``: grid scanning helpers (header/date detection, coercion, workbook reading).
* ``extractors``: flat (one column per date) and banded (three columns per date) extractors.
* ``router``: tags decoded sheets with their category.
* ``pipeline``: read → tag → extract orchestration.
* ``summary``: dashboard figures for one selected date.
"""

from census.extractors import extract_banded, extract_flat
from census.ir import DepartmentRow, ExtractionResult, SheetCategory, TrendPoint

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "DepartmentRow",
    "ExtractionResult",
    "SheetCategory",
    "TrendPoint",
    "extract_banded",
    "extract_flat",
]
