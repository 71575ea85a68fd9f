"""
DataCleaner: value normalisation utilities for the sheet extractors.

Responsibilities:
- Cell-level string conversion (``cell_to_str``)
- Empty-cell detection and ragged-row access
- Lenient numeric coercion (``coerce_non_negative_int``)
- Total-marker detection
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Any, Sequence

import pandas as pd

from census.extractors.sheet.config import LEADING_NUMBER_RE, TOTAL_MARKERS


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if not pd.api.types.is_scalar(value):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


class DataCleaner:
    """Stateless helper that normalises raw cell values."""

    # ----- cell → string ---------------------------------------------------

    @staticmethod
    def is_empty(value: Any) -> bool:
        if _is_missing(value):
            return True
        return DataCleaner.cell_to_str(value) == ""

    @staticmethod
    def cell_to_str(value: Any) -> str:
        """Convert an arbitrary cell value to a clean string."""
        if _is_missing(value):
            return ""
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, (datetime, pd.Timestamp)):
            if value.time() == time(0, 0):
                return value.date().isoformat()
            return value.isoformat(sep=" ", timespec="seconds")
        if isinstance(value, date):
            return value.isoformat()
        # Rich-text objects from openpyxl may expose .plain or .text
        plain_attr = getattr(value, "plain", None)
        if isinstance(plain_attr, str):
            return plain_attr.strip()
        text_attr = getattr(value, "text", None)
        if isinstance(text_attr, str):
            return text_attr.strip()
        text = str(value).strip()
        if text.lower() in {"nan", "none", "nat"}:
            return ""
        return text

    @staticmethod
    def cell_at(row: Sequence[Any], index: int) -> Any:
        """Return ``row[index]`` or ``None`` when the row is too short."""
        if row is None or index < 0 or index >= len(row):
            return None
        return row[index]

    # ----- numeric coercion ------------------------------------------------

    @staticmethod
    def coerce_non_negative_int(value: Any) -> int:
        """
        Convert a cell to a non-negative integer, never raising.

        - ``None``, blanks, booleans, NaN and infinities become 0
        - ints are kept exactly, floats are truncated toward zero
        - strings drop thousands separators and spaces, then the leading
          numeric prefix is parsed (``"1,234"`` → 1234, ``"12 ราย"`` → 12)
        - anything unparseable becomes 0; negative results clamp to 0
        """
        if _is_missing(value) or isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return max(0, value)
        if isinstance(value, float):
            number = value
        else:
            text = DataCleaner.cell_to_str(value).replace(",", "").replace(" ", "")
            match = LEADING_NUMBER_RE.match(text)
            if not match:
                return 0
            number = float(match.group(0))
        if math.isnan(number) or math.isinf(number):
            return 0
        return max(0, int(number))

    # ----- markers ---------------------------------------------------------

    @staticmethod
    def contains_total_marker(value: Any) -> bool:
        """``True`` when the cell text contains a total keyword."""
        text = DataCleaner.cell_to_str(value).lower()
        if not text:
            return False
        return any(marker in text for marker in TOTAL_MARKERS)

    @staticmethod
    def row_has_total_marker(row: Sequence[Any]) -> bool:
        return any(DataCleaner.contains_total_marker(cell) for cell in (row or []))
