"""
FlatSheetExtractor: outpatient sheets with one column per date.

Sheet shape::

    <title / banner rows ...>
    Code | Clinic   | 2569-01-01 | 2569-01-02 | ...   <- header row
    C1   | Ward A   | 10         | 12         |
    ...
    Total| รวม      | 120        | 135        |       <- total row

The trend comes from the total row (located by a configured row hint,
then by a total keyword); the table is every named row below the header
except the total row.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from census.extractors.base import (
    BaseExtractor,
    WARN_EMPTY_SHEET,
    WARN_MISSING_HEADER_ROW,
    WARN_MISSING_TOTAL_ROW,
)
from census.extractors.sheet.config import ExtractorConfig, DEFAULT_CONFIG
from census.extractors.sheet.data_cleaner import DataCleaner
from census.extractors.sheet.header_detector import DateColumn
from census.ir import DepartmentRow, ExtractionResult, Sheet, SheetLayout, TrendPoint
from census.logger import get_logger

logger = get_logger(__name__)


class FlatSheetExtractor(BaseExtractor):
    """
    Extractor for the flat daily-total layout.

    ``expected_total_row`` is the 1-based spreadsheet row of the grand total,
    used only as a tie-break hint.
    """

    layout = SheetLayout.FLAT

    def __init__(
        self,
        expected_total_row: Optional[int] = None,
        cfg: ExtractorConfig = DEFAULT_CONFIG,
    ):
        super().__init__(cfg)
        self.expected_total_row = expected_total_row

    def extract(self, rows: Sheet) -> ExtractionResult:
        grid = self._normalize_rows(rows)
        if len(grid) < self._cfg.min_flat_rows:
            return ExtractionResult.empty([WARN_EMPTY_SHEET])

        warnings: List[str] = []
        header_idx, found = self._hd.find_header_row(grid, allow_loose=True)
        if not found:
            warnings.append(WARN_MISSING_HEADER_ROW)
            logger.info("No date header row found; falling back to row 0")

        date_cols = self._hd.date_columns(grid[header_idx])
        total_idx = self.locate_total_row(grid, header_idx, date_cols)
        if total_idx is None:
            warnings.append(WARN_MISSING_TOTAL_ROW)
            logger.warning("No total row found; trend values default to 0")

        total_row = grid[total_idx] if total_idx is not None else []
        chart_data = [
            TrendPoint(
                date=col.label,
                value=DataCleaner.coerce_non_negative_int(DataCleaner.cell_at(total_row, col.index)),
            )
            for col in date_cols
        ]
        table_data = self._build_table(grid, header_idx, total_idx, date_cols)

        logger.debug(
            "Flat sheet: header=%d total=%s dates=%d departments=%d",
            header_idx, total_idx, len(date_cols), len(table_data),
        )
        return ExtractionResult.build(
            chart_data,
            table_data,
            header_row_index=header_idx,
            total_row_index=total_idx,
            warnings=warnings,
        )

    # -----------------------------------------------------------------
    # Total row
    # -----------------------------------------------------------------

    def locate_total_row(
        self,
        grid: Sequence[Sequence],
        header_idx: int,
        date_cols: Sequence[DateColumn],
    ) -> Optional[int]:
        """
        Resolve the total row index, or ``None`` when the sheet has none.

        1. the configured row, if it exists and has a value under the first date
        2. the first row containing a total keyword; the header row is
           skipped so a "รวม" column heading is never taken as the total row
        """
        hinted = self._hinted_total_row(grid, date_cols)
        if hinted is not None:
            return hinted
        for idx, row in enumerate(grid):
            if idx == header_idx:
                continue
            if DataCleaner.row_has_total_marker(row):
                logger.debug("Total row resolved by keyword at %d", idx)
                return idx
        return None

    def _hinted_total_row(
        self,
        grid: Sequence[Sequence],
        date_cols: Sequence[DateColumn],
    ) -> Optional[int]:
        if self.expected_total_row is None or not date_cols:
            return None
        idx = self.expected_total_row - 1
        if idx < 0 or idx >= len(grid):
            return None
        if DataCleaner.is_empty(DataCleaner.cell_at(grid[idx], date_cols[0].index)):
            return None
        return idx

    # -----------------------------------------------------------------
    # Department table
    # -----------------------------------------------------------------

    def _build_table(
        self,
        grid: Sequence[Sequence],
        header_idx: int,
        total_idx: Optional[int],
        date_cols: Sequence[DateColumn],
    ) -> List[DepartmentRow]:
        code_col, name_col = self._cfg.code_column, self._cfg.name_column
        table: List[DepartmentRow] = []
        for idx in range(header_idx + 1, len(grid)):
            if idx == total_idx:
                continue
            row = grid[idx]
            name = DataCleaner.cell_at(row, name_col)
            if DataCleaner.is_empty(name):
                continue
            table.append(
                DepartmentRow(
                    code=DataCleaner.cell_at(row, code_col),
                    name=name,
                    values=[DataCleaner.cell_at(row, col.index) for col in date_cols],
                )
            )
        return table


def extract_flat(sheet: Sheet, expected_total_row_index: Optional[int] = None) -> ExtractionResult:
    """
    Extract a flat sheet; never raises.

    *expected_total_row_index* follows the 1-based spreadsheet row convention.
    """
    return FlatSheetExtractor(expected_total_row_index).safe_extract(sheet)
