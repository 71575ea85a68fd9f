"""
HeaderDetector: locate the date header row and its date columns.

Census sheets reserve their top rows for titles and merged banners, so the
header is the first row carrying a date label rather than a fixed row.
The flat layout also accepts a looser ``-`` token when no row has a full
date; the banded layout does not, since its sub-header labels contain
unrelated dashes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from census.extractors.sheet.config import ExtractorConfig, DEFAULT_CONFIG
from census.extractors.sheet.data_cleaner import DataCleaner
from census.extractors.sheet.date_token import is_date_token, is_loose_date_token


@dataclass(frozen=True)
class DateColumn:
    """A date label and the single column holding its values."""

    label: str
    index: int


@dataclass(frozen=True)
class DateBand:
    """A date label spanning ``width`` adjacent columns starting at ``start``."""

    label: str
    start: int
    width: int = 3

    @property
    def indices(self) -> Tuple[int, ...]:
        return tuple(range(self.start, self.start + self.width))


class HeaderDetector:
    """
    Stateless detector for header rows and date-column maps.

    An :class:`ExtractorConfig` can be passed in to override the band width.
    """

    def __init__(self, cfg: ExtractorConfig = DEFAULT_CONFIG):
        self._cfg = cfg

    # -----------------------------------------------------------------
    # Header row selection
    # -----------------------------------------------------------------

    @staticmethod
    def _first_row_matching(rows: Sequence[Sequence[Any]], predicate) -> int:
        for idx, row in enumerate(rows):
            if any(predicate(cell) for cell in (row or [])):
                return idx
        return -1

    def find_header_row(
        self,
        rows: Sequence[Sequence[Any]],
        allow_loose: bool = False,
    ) -> Tuple[int, bool]:
        """
        Return ``(header_idx, found)``.

        Scans top to bottom for the first row holding a full date token;
        with *allow_loose*, a second pass accepts any ``-`` separated token.
        Falls back to ``(0, False)`` when nothing qualifies.
        """
        idx = self._first_row_matching(rows, is_date_token)
        if idx < 0 and allow_loose:
            idx = self._first_row_matching(rows, is_loose_date_token)
        if idx < 0:
            return 0, False
        return idx, True

    # -----------------------------------------------------------------
    # Date-column discovery
    # -----------------------------------------------------------------

    @staticmethod
    def date_columns(header: Sequence[Any]) -> List[DateColumn]:
        """Every date-labelled cell of *header*, left to right."""
        return [
            DateColumn(label=DataCleaner.cell_to_str(cell), index=idx)
            for idx, cell in enumerate(header or [])
            if is_date_token(cell)
        ]

    def date_bands(self, header: Sequence[Any]) -> List[DateBand]:
        """
        Date triplets of a banded header.

        A label at column ``i`` claims ``i .. i + width - 1``; scanning
        resumes after the band, so the unlabeled merged columns are never
        inspected on their own.
        """
        width = self._cfg.band_width
        cells = list(header or [])
        bands: List[DateBand] = []
        idx = 0
        while idx < len(cells):
            if is_date_token(cells[idx]):
                bands.append(DateBand(label=DataCleaner.cell_to_str(cells[idx]), start=idx, width=width))
                idx += width
            else:
                idx += 1
        return bands
