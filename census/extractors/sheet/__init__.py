"""
Sheet scanning subpackage shared by both census extractors.

Public API:
  - ExtractorConfig        (structural constants)
  - DataCleaner            (cell normalisation, numeric coercion)
  - HeaderDetector         (header row and date-column discovery)
  - WorkbookReader         (file I/O, workbook → row grids)
  - parse_date_token       (typed date-label parser)
"""

from census.extractors.sheet.config import ExtractorConfig, DEFAULT_CONFIG
from census.extractors.sheet.data_cleaner import DataCleaner
from census.extractors.sheet.date_token import (
    NO_MATCH,
    CalendarDate,
    NoMatch,
    parse_date_token,
)
from census.extractors.sheet.header_detector import DateBand, DateColumn, HeaderDetector
from census.extractors.sheet.reader import WorkbookReader

__all__ = [
    "ExtractorConfig",
    "DEFAULT_CONFIG",
    "DataCleaner",
    "HeaderDetector",
    "DateBand",
    "DateColumn",
    "WorkbookReader",
    "CalendarDate",
    "NoMatch",
    "NO_MATCH",
    "parse_date_token",
]
