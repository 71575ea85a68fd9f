"""
Date-token parser: decide whether a header cell is a date label.

``parse_date_token`` returns a typed :class:`CalendarDate` or the
``NO_MATCH`` sentinel instead of a bare boolean, so header scanning can be
tested independently of the extractors. Detection is purely lexical: any
cell whose text contains a ``YYYY-M`` or ``YYYY-M-D`` token is a date
label, whether or not the components form a real calendar day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union

from census.extractors.sheet.config import DATE_TOKEN_RE, LOOSE_DATE_TOKEN_RE
from census.extractors.sheet.data_cleaner import DataCleaner

# Thai Buddhist-era years run 543 ahead of the Gregorian calendar.
BUDDHIST_ERA_OFFSET = 543
_BUDDHIST_ERA_MIN_YEAR = 2400


@dataclass(frozen=True)
class CalendarDate:
    """A date token found in a header cell; ``day`` is ``None`` for month labels."""

    year: int
    month: int
    day: Optional[int]
    label: str

    @property
    def is_buddhist_era(self) -> bool:
        return self.year > _BUDDHIST_ERA_MIN_YEAR

    @property
    def gregorian_year(self) -> int:
        if self.is_buddhist_era:
            return self.year - BUDDHIST_ERA_OFFSET
        return self.year

    def to_date(self) -> Optional[date]:
        """Gregorian ``date``, or ``None`` when the components are not a real day."""
        try:
            return date(self.gregorian_year, self.month, self.day or 1)
        except ValueError:
            return None


class NoMatch:
    """Sentinel returned when a cell carries no date token."""

    _instance: Optional["NoMatch"] = None

    def __new__(cls) -> "NoMatch":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()

DateToken = Union[CalendarDate, NoMatch]


def parse_date_token(value: Any) -> DateToken:
    """
    Parse *value* into a :class:`CalendarDate` or return ``NO_MATCH``.

    ``date``/``datetime`` cells are rendered to ISO form first, so native
    Excel dates in a header row are detected like their text counterparts.
    """
    text = DataCleaner.cell_to_str(value)
    if not text:
        return NO_MATCH
    m = DATE_TOKEN_RE.search(text)
    if not m:
        return NO_MATCH
    return CalendarDate(
        year=int(m.group(1)),
        month=int(m.group(2)),
        day=int(m.group(3)) if m.group(3) else None,
        label=text,
    )


def is_date_token(value: Any) -> bool:
    return isinstance(parse_date_token(value), CalendarDate)


def is_loose_date_token(value: Any) -> bool:
    """Looser check used only by the flat layout's header fallback."""
    text = DataCleaner.cell_to_str(value)
    return bool(text) and LOOSE_DATE_TOKEN_RE.search(text) is not None
