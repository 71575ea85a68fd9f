"""
Intermediate Representation Module
==================================

Core data structures shared by the extractors, the pipeline and the
presentation layer: TrendPoint, DepartmentRow, ExtractionResult and the
sheet tagging types.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# A cell is untyped at rest: text, number, date or empty.
Cell = Any
Row = List[Cell]
Sheet = List[Row]


class SheetCategory(str, Enum):
    """
    Department category carried by one sheet of the census workbook.
    """
    OPD_TIME = "opd_time"
    OPD_SPECIAL = "opd_special"
    OPD_PREMIUM = "opd_premium"
    IPD = "ipd"


class SheetLayout(str, Enum):
    """Structural layout of a census sheet."""
    FLAT = "flat"
    BANDED = "banded"


# Legacy positional order of the exported workbook.
POSITIONAL_ORDER: List[SheetCategory] = [
    SheetCategory.OPD_TIME,
    SheetCategory.OPD_SPECIAL,
    SheetCategory.OPD_PREMIUM,
    SheetCategory.IPD,
]

CATEGORY_LAYOUTS: Dict[SheetCategory, SheetLayout] = {
    SheetCategory.OPD_TIME: SheetLayout.FLAT,
    SheetCategory.OPD_SPECIAL: SheetLayout.FLAT,
    SheetCategory.OPD_PREMIUM: SheetLayout.FLAT,
    SheetCategory.IPD: SheetLayout.BANDED,
}


class TrendPoint(BaseModel):
    """
    One point of the per-date total trend.

    Attributes:
        date: date label as written in the sheet header
        value: non-negative daily total
    """
    date: str
    value: int = Field(ge=0)

    class Config:
        frozen = True


class DepartmentRow(BaseModel):
    """
    One department (clinic or ward) of the detail table.

    ``values`` is aligned 1:1 with the result's ``dates``. Flat sheets keep
    the raw cells; banded sheets carry the per-date triplet sums.
    """
    code: Any = None
    name: Any = None
    values: List[Any] = Field(default_factory=list)

    class Config:
        frozen = True

    def as_row(self) -> List[Any]:
        """Flatten into ``[code, name, *values]`` for table rendering."""
        return [self.code, self.name, *self.values]


class ExtractionResult(BaseModel):
    """
    The sole artifact crossing into presentation code.

    Attributes:
        chart_data: date-ordered trend
        table_data: normalized department rows
        dates: date labels, same order as chart_data
        total_today: value of the last trend point, 0 when empty
        header_row_index: row used as the header (None when the sheet was empty)
        total_row_index: row used as the total row (flat layout only)
        warnings: non-fatal condition codes raised while extracting
    """
    chart_data: List[TrendPoint] = Field(default_factory=list)
    table_data: List[DepartmentRow] = Field(default_factory=list)
    dates: List[str] = Field(default_factory=list)
    total_today: int = 0
    header_row_index: Optional[int] = None
    total_row_index: Optional[int] = None
    warnings: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @classmethod
    def build(
        cls,
        chart_data: List[TrendPoint],
        table_data: List[DepartmentRow],
        **kwargs: Any,
    ) -> "ExtractionResult":
        """Assemble a result, deriving ``dates`` and ``total_today`` from the trend."""
        return cls(
            chart_data=chart_data,
            table_data=table_data,
            dates=[p.date for p in chart_data],
            total_today=chart_data[-1].value if chart_data else 0,
            **kwargs,
        )

    @classmethod
    def empty(cls, warnings: Optional[List[str]] = None) -> "ExtractionResult":
        return cls(warnings=list(warnings or []))

    def value_on(self, date: str) -> int:
        """Trend value for *date*, 0 when the date is not present."""
        for point in self.chart_data:
            if point.date == date:
                return point.value
        return 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the presentation contract's field names."""
        return {
            "chartData": [p.model_dump() for p in self.chart_data],
            "tableData": [r.as_row() for r in self.table_data],
            "dates": list(self.dates),
            "totalToday": self.total_today,
            "headerRowIndex": self.header_row_index,
            "totalRowIndex": self.total_row_index,
            "warnings": list(self.warnings),
        }


class RawSheet(BaseModel):
    """An untagged sheet as decoded from a workbook."""
    name: str
    rows: List[List[Any]]

    class Config:
        frozen = True


class TaggedSheet(BaseModel):
    """
    A sheet explicitly labelled with its category.

    Produced by ``census.router`` so that a reordered workbook can never be
    silently mislabelled.
    """
    category: SheetCategory
    rows: List[List[Any]]
    name: Optional[str] = None

    class Config:
        frozen = True

    @property
    def layout(self) -> SheetLayout:
        return CATEGORY_LAYOUTS[self.category]
