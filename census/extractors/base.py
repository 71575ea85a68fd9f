"""
Base Extractor Module
=====================

Shared interface and error handling for the census sheet extractors.
"""
from abc import ABC, abstractmethod
from typing import List

from census.extractors.sheet.config import ExtractorConfig, DEFAULT_CONFIG
from census.extractors.sheet.header_detector import HeaderDetector
from census.ir import ExtractionResult, Sheet, SheetLayout
from census.logger import get_logger

logger = get_logger(__name__)

# Non-fatal condition codes carried on ExtractionResult.warnings
WARN_EMPTY_SHEET = "empty_sheet"
WARN_MISSING_HEADER_ROW = "missing_header_row"
WARN_MISSING_TOTAL_ROW = "missing_total_row"
WARN_EXTRACTION_FAILED = "extraction_failed"


class BaseExtractor(ABC):
    """
    Abstract base class of the layout-specific extractors.

    Provides:
    - extract(): abstract, implemented per layout
    - safe_extract(): wrapper that never lets an exception escape
    """

    layout: SheetLayout

    def __init__(self, cfg: ExtractorConfig = DEFAULT_CONFIG):
        self._cfg = cfg
        self._hd = HeaderDetector(cfg)

    @abstractmethod
    def extract(self, rows: Sheet) -> ExtractionResult:
        """
        Extract the trend and department table from *rows*.

        Implementations degrade malformed input to a smaller result rather
        than raising.
        """

    def safe_extract(self, rows: Sheet, sheet_name: str = "") -> ExtractionResult:
        """
        Run :meth:`extract`, turning any unexpected error into an empty result.

        The rendering pipeline must never fail on a hand-maintained sheet.
        """
        try:
            return self.extract(rows)
        except Exception as e:
            logger.error(
                "%s extraction failed for sheet %r: %s",
                self.layout.value, sheet_name, e, exc_info=True,
            )
            return ExtractionResult.empty([WARN_EXTRACTION_FAILED])

    @staticmethod
    def _normalize_rows(rows: Sheet) -> List[list]:
        """Materialize *rows* as lists; anything that is not a row becomes an empty one."""
        if not rows:
            return []
        return [list(r) if isinstance(r, (list, tuple)) else [] for r in rows]
