"""
BandedSheetExtractor: the inpatient ward sheet, three columns per date.

Sheet shape::

    Ward | Type | Bed | 2569-01-01 |        |         | 2569-01-02 | ...  <- header
         |      |     | คงเหลือ     | รับใหม่ | รับย้าย  | คงเหลือ     | ...  <- sub-header
    W1   | Med  | 30  | 2          | 1      | 0       | 3          | ...
    ...

Each date label sits in the leftmost column of its band (merged cells
flattened to sparse values). A ward's value for a date is the sum of its
carried-over, newly-admitted and transferred-in counts; the daily total is
the sum over all wards.
"""

from __future__ import annotations

from typing import List, Sequence

from census.extractors.base import (
    BaseExtractor,
    WARN_EMPTY_SHEET,
    WARN_MISSING_HEADER_ROW,
)
from census.extractors.sheet.data_cleaner import DataCleaner
from census.extractors.sheet.header_detector import DateBand
from census.ir import DepartmentRow, ExtractionResult, Sheet, SheetLayout, TrendPoint
from census.logger import get_logger

logger = get_logger(__name__)


class BandedSheetExtractor(BaseExtractor):
    """Extractor for the banded inpatient layout."""

    layout = SheetLayout.BANDED

    def extract(self, rows: Sheet) -> ExtractionResult:
        grid = self._normalize_rows(rows)
        if len(grid) < self._cfg.min_banded_rows:
            return ExtractionResult.empty([WARN_EMPTY_SHEET])

        warnings: List[str] = []
        # No loose fallback: sub-header labels contain unrelated dashes.
        header_idx, found = self._hd.find_header_row(grid, allow_loose=False)
        if not found:
            warnings.append(WARN_MISSING_HEADER_ROW)
            logger.info("No date header row found in banded sheet; falling back to row 0")

        bands = self._hd.date_bands(grid[header_idx])
        data_start = header_idx + 1 + self._cfg.subheader_rows

        table_data: List[DepartmentRow] = []
        totals = [0] * len(bands)
        for row in grid[data_start:]:
            if not self._is_ward_row(row):
                continue
            values = [self.band_sum(row, band) for band in bands]
            for i, v in enumerate(values):
                totals[i] += v
            table_data.append(
                DepartmentRow(
                    code=DataCleaner.cell_at(row, self._cfg.code_column),
                    name=DataCleaner.cell_at(row, self._cfg.name_column),
                    values=values,
                )
            )

        chart_data = [TrendPoint(date=band.label, value=total) for band, total in zip(bands, totals)]
        logger.debug(
            "Banded sheet: header=%d data_start=%d dates=%d wards=%d",
            header_idx, data_start, len(bands), len(table_data),
        )
        return ExtractionResult.build(
            chart_data,
            table_data,
            header_row_index=header_idx,
            warnings=warnings,
        )

    def _is_ward_row(self, row: Sequence) -> bool:
        """Named rows only; embedded subtotal rows carry a total keyword."""
        name = DataCleaner.cell_at(row, self._cfg.name_column)
        if DataCleaner.is_empty(name):
            return False
        return not DataCleaner.contains_total_marker(name)

    @staticmethod
    def band_sum(row: Sequence, band: DateBand) -> int:
        return sum(DataCleaner.coerce_non_negative_int(DataCleaner.cell_at(row, i)) for i in band.indices)


def extract_banded(sheet: Sheet) -> ExtractionResult:
    """Extract a banded inpatient sheet; never raises."""
    return BandedSheetExtractor().safe_extract(sheet)
