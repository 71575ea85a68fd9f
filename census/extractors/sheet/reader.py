"""
WorkbookReader: low-level file I/O that turns a workbook into row grids.

Encapsulates the engine selection:
- ``.xlsx`` / ``.xlsm`` via openpyxl (cached values, formulas resolved)
- ``.xls`` via xlrd (date cells converted from Excel serials)
- ``.csv`` via pandas (single sheet named after the file)

The extractors never see a workbook object, only ``RawSheet.rows``.
"""

from __future__ import annotations

import io
import tempfile
import zipfile
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from census.extractors.sheet.data_cleaner import DataCleaner
from census.ir import RawSheet
from census.logger import get_logger

logger = get_logger(__name__)

XLSX_SUFFIXES = {".xlsx", ".xlsm"}
XLS_SUFFIXES = {".xls"}
CSV_SUFFIXES = {".csv"}
SUPPORTED_SUFFIXES = XLSX_SUFFIXES | XLS_SUFFIXES | CSV_SUFFIXES


def _trim_row(row: Sequence[Any]) -> List[Any]:
    """Drop trailing empty cells; workbooks pad rows to the sheet width."""
    cells = list(row or [])
    while cells and DataCleaner.is_empty(cells[-1]):
        cells.pop()
    return cells


def _xls_value(value: Any, ctype: int, datemode: int) -> Any:
    """Map an xlrd cell to the value openpyxl would give for the same cell."""
    import xlrd

    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate_as_datetime(value, datemode)
        except (xlrd.xldate.XLDateError, OverflowError, ValueError):
            return value
    if ctype == xlrd.XL_CELL_NUMBER and float(value).is_integer():
        return int(value)
    return value


class WorkbookReader:
    """Decode a workbook file into a list of :class:`RawSheet`."""

    def read(self, file_path: str) -> List[RawSheet]:
        path = Path(file_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Workbook not found: {path}")
        suffix = path.suffix.lower()
        if suffix in XLSX_SUFFIXES:
            sheets = self._read_xlsx(path)
        elif suffix in XLS_SUFFIXES:
            sheets = self._read_xls(path)
        elif suffix in CSV_SUFFIXES:
            sheets = self._read_csv(path)
        else:
            raise ValueError(
                f"Unsupported workbook format {suffix!r}; expected one of {sorted(SUPPORTED_SUFFIXES)}"
            )
        logger.info(
            "Read %s: %d sheet(s) %s",
            path.name, len(sheets), [s.name for s in sheets],
        )
        return sheets

    def read_bytes(self, data: bytes, filename: str) -> List[RawSheet]:
        """Decode an uploaded workbook held in memory."""
        suffix = Path(filename or "").suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise ValueError(
                f"Unsupported workbook format {suffix!r}; expected one of {sorted(SUPPORTED_SUFFIXES)}"
            )
        with tempfile.TemporaryDirectory(prefix="census_upload_") as tmp:
            dest = Path(tmp) / Path(filename).name
            dest.write_bytes(data)
            return self.read(str(dest))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _read_xlsx(path: Path) -> List[RawSheet]:
        try:
            wb = load_workbook(str(path), read_only=True, data_only=True)
        except (zipfile.BadZipFile, InvalidFileException) as e:
            raise ValueError(f"Not a readable Excel workbook: {path.name}") from e
        try:
            sheets: List[RawSheet] = []
            for ws in wb.worksheets:
                rows = [_trim_row(r) for r in ws.iter_rows(values_only=True)]
                sheets.append(RawSheet(name=ws.title, rows=rows))
            return sheets
        finally:
            wb.close()

    @staticmethod
    def _read_xls(path: Path) -> List[RawSheet]:
        import xlrd

        try:
            wb = xlrd.open_workbook(str(path))
        except xlrd.XLRDError as e:
            raise ValueError(f"Not a readable Excel workbook: {path.name}") from e
        sheets: List[RawSheet] = []
        for ws in wb.sheets():
            rows = [
                _trim_row(
                    _xls_value(value, ctype, wb.datemode)
                    for value, ctype in zip(ws.row_values(ri), ws.row_types(ri))
                )
                for ri in range(ws.nrows)
            ]
            sheets.append(RawSheet(name=ws.name, rows=rows))
        return sheets

    @staticmethod
    def _read_csv(path: Path) -> List[RawSheet]:
        text = path.read_text(encoding="utf-8-sig")
        if not text.strip():
            return [RawSheet(name=path.stem, rows=[])]
        # Exports are ragged: size the frame for the widest line, then trim.
        width = max(line.count(",") for line in text.splitlines()) + 1
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            engine="python",
        )
        rows = [
            _trim_row(None if pd.isna(v) else v for v in record)
            for record in df.itertuples(index=False, name=None)
        ]
        return [RawSheet(name=path.stem, rows=rows)]
