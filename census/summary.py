"""
Dashboard Summary Module
========================

Aggregate per-category extraction results into what the dashboard shows
for one selected date: stat cards, day-over-day change and the busiest
departments. The selected date is an explicit argument; nothing here
holds state between calls.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from census.config import Settings, get_settings
from census.extractors.sheet.data_cleaner import DataCleaner
from census.extractors.sheet.date_token import CalendarDate, parse_date_token
from census.ir import POSITIONAL_ORDER, ExtractionResult, SheetCategory

CATEGORY_LABELS: Dict[SheetCategory, str] = {
    SheetCategory.OPD_TIME: "OPD ในเวลา & ER",
    SheetCategory.OPD_SPECIAL: "OPD คลินิกพิเศษ/นอกเวลา",
    SheetCategory.OPD_PREMIUM: "OPD Premium Clinic",
    SheetCategory.IPD: "ผู้ป่วยใน (IPD)",
}

STATUS_BUSY = "busy"
STATUS_NORMAL = "normal"


class DepartmentLoad(BaseModel):
    """One department's patient count on the selected date."""
    category: SheetCategory
    name: str
    value: int
    status: str

    class Config:
        frozen = True


class DashboardSummary(BaseModel):
    """
    Figures for the dashboard header cards and ranking.

    Attributes:
        selected_date: date the figures refer to ("" when no data)
        dates: every date label present, in dashboard order
        category_totals: per-category total on the selected date
        total_patients: sum over all categories
        special_clinic_total: special plus premium clinics (one card)
        day_over_day_pct: change of total_patients against the previous date
        top_departments: busiest departments across all categories
    """
    selected_date: str = ""
    dates: List[str] = Field(default_factory=list)
    category_totals: Dict[SheetCategory, int] = Field(default_factory=dict)
    total_patients: int = 0
    special_clinic_total: int = 0
    day_over_day_pct: Optional[float] = None
    top_departments: List[DepartmentLoad] = Field(default_factory=list)

    class Config:
        frozen = True

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["category_totals"] = {c.value: v for c, v in self.category_totals.items()}
        data["top_departments"] = [
            {**d.model_dump(), "category": d.category.value} for d in self.top_departments
        ]
        return data


def _sort_key(label: str) -> Optional[date]:
    token = parse_date_token(label)
    return token.to_date() if isinstance(token, CalendarDate) else None


def collect_dates(results: Mapping[SheetCategory, ExtractionResult]) -> List[str]:
    """
    Union of the date labels of all results.

    Chronological when every label parses to a real date, otherwise in
    first-seen order (categories in workbook order, dates in sheet order).
    """
    seen: List[str] = []
    for cat in POSITIONAL_ORDER:
        res = results.get(cat)
        if res is None:
            continue
        for d in res.dates:
            if d not in seen:
                seen.append(d)
    keys = [_sort_key(d) for d in seen]
    if seen and all(k is not None for k in keys):
        return [d for _, d in sorted(zip(keys, seen), key=lambda kv: kv[0])]
    return seen


def department_loads(
    results: Mapping[SheetCategory, ExtractionResult],
    category: SheetCategory,
    selected_date: str,
    busy_threshold: Optional[int] = None,
) -> List[DepartmentLoad]:
    """Per-department counts of one category on *selected_date*, in sheet order."""
    if busy_threshold is None:
        busy_threshold = get_settings().BUSY_THRESHOLD
    res = results.get(category)
    if res is None or selected_date not in res.dates:
        return []
    pos = res.dates.index(selected_date)
    loads: List[DepartmentLoad] = []
    for row in res.table_data:
        cell = row.values[pos] if pos < len(row.values) else None
        value = DataCleaner.coerce_non_negative_int(cell)
        loads.append(
            DepartmentLoad(
                category=category,
                name=DataCleaner.cell_to_str(row.name),
                value=value,
                status=STATUS_BUSY if value > busy_threshold else STATUS_NORMAL,
            )
        )
    return loads


def build_summary(
    results: Mapping[SheetCategory, ExtractionResult],
    selected_date: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> DashboardSummary:
    """
    Summarize *results* for *selected_date* (default: the latest date).

    An unknown date yields zero counts rather than an error.
    """
    settings = settings or get_settings()
    dates = collect_dates(results)
    if not dates:
        return DashboardSummary()
    selected = selected_date or dates[-1]

    totals = {
        cat: (results[cat].value_on(selected) if cat in results else 0)
        for cat in POSITIONAL_ORDER
    }
    total_patients = sum(totals.values())

    day_over_day: Optional[float] = None
    if selected in dates and dates.index(selected) > 0:
        previous = dates[dates.index(selected) - 1]
        prev_total = sum(res.value_on(previous) for res in results.values())
        if prev_total > 0:
            day_over_day = round((total_patients - prev_total) * 100.0 / prev_total, 1)

    loads: List[DepartmentLoad] = []
    for cat in POSITIONAL_ORDER:
        loads.extend(department_loads(results, cat, selected, settings.BUSY_THRESHOLD))
    # sorted() is stable: ties keep workbook order
    top = sorted(loads, key=lambda d: d.value, reverse=True)[: settings.TOP_DEPARTMENTS]

    return DashboardSummary(
        selected_date=selected,
        dates=dates,
        category_totals=totals,
        total_patients=total_patients,
        special_clinic_total=totals[SheetCategory.OPD_SPECIAL] + totals[SheetCategory.OPD_PREMIUM],
        day_over_day_pct=day_over_day,
        top_departments=top,
    )
