"""
Dashboard summary for an explicitly selected date.
"""
from census.config import Settings
from census.ir import DepartmentRow, ExtractionResult, SheetCategory, TrendPoint
from census.summary import STATUS_BUSY, STATUS_NORMAL, build_summary, collect_dates, department_loads


def _result(points, rows=()):
    return ExtractionResult.build(
        [TrendPoint(date=d, value=v) for d, v in points],
        [DepartmentRow(code=c, name=n, values=list(vals)) for c, n, vals in rows],
    )


def _results():
    return {
        SheetCategory.OPD_TIME: _result(
            [("2569-01-01", 80), ("2569-01-02", 80)],
            [("C1", "อายุรกรรม", (50, 60)), ("C2", "ศัลยกรรม", (30, ""))],
        ),
        SheetCategory.OPD_SPECIAL: _result(
            [("2569-01-01", 10), ("2569-01-02", 15)],
            [("S1", "คลินิกเบาหวาน", (10, "15"))],
        ),
        SheetCategory.OPD_PREMIUM: _result([("2569-01-01", 5), ("2569-01-02", 5)], [("P1", "VIP", (5, 5))]),
        SheetCategory.IPD: _result([("2569-01-01", 24), ("2569-01-02", 24)], [("W1", "ICU", (24, 24))]),
    }


def test_latest_date_by_default():
    summary = build_summary(_results(), settings=Settings())

    assert summary.selected_date == "2569-01-02"
    assert summary.dates == ["2569-01-01", "2569-01-02"]
    assert summary.total_patients == 124
    assert summary.special_clinic_total == 20
    assert summary.category_totals[SheetCategory.IPD] == 24
    assert summary.day_over_day_pct == 4.2


def test_top_departments_ranked_and_flagged():
    summary = build_summary(_results(), settings=Settings(BUSY_THRESHOLD=40, TOP_DEPARTMENTS=3))
    assert [(d.name, d.value, d.status) for d in summary.top_departments] == [
        ("อายุรกรรม", 60, STATUS_BUSY),
        ("ICU", 24, STATUS_NORMAL),
        ("คลินิกเบาหวาน", 15, STATUS_NORMAL),
    ]


def test_first_date_has_no_day_over_day():
    summary = build_summary(_results(), selected_date="2569-01-01", settings=Settings())
    assert summary.total_patients == 119
    assert summary.day_over_day_pct is None


def test_previous_zero_total_has_no_day_over_day():
    results = {SheetCategory.OPD_TIME: _result([("2569-01-01", 0), ("2569-01-02", 9)])}
    summary = build_summary(results, settings=Settings())
    assert summary.total_patients == 9
    assert summary.day_over_day_pct is None


def test_unknown_date_gives_zero_counts():
    summary = build_summary(_results(), selected_date="2569-02-30", settings=Settings())
    assert summary.total_patients == 0
    assert summary.top_departments == []


def test_no_results():
    summary = build_summary({}, settings=Settings())
    assert summary.selected_date == ""
    assert summary.dates == []
    assert summary.total_patients == 0


def test_dates_sorted_chronologically_across_categories():
    results = {
        SheetCategory.OPD_TIME: _result([("2569-01-10", 1), ("2569-01-02", 1)]),
        SheetCategory.IPD: _result([("2569-01-05", 1)]),
    }
    assert collect_dates(results) == ["2569-01-02", "2569-01-05", "2569-01-10"]


def test_unparseable_dates_keep_sheet_order():
    results = {
        SheetCategory.OPD_TIME: _result([("2569-01-10", 1), ("2569-13-02", 1)]),
        SheetCategory.IPD: _result([("2569-01-05", 1)]),
    }
    assert collect_dates(results) == ["2569-01-10", "2569-13-02", "2569-01-05"]


def test_department_loads_coerce_raw_cells():
    loads = department_loads(_results(), SheetCategory.OPD_TIME, "2569-01-02", busy_threshold=40)
    assert [(d.name, d.value) for d in loads] == [("อายุรกรรม", 60), ("ศัลยกรรม", 0)]
    assert department_loads(_results(), SheetCategory.OPD_TIME, "2568-12-31") == []


def test_to_dict_uses_category_ids():
    data = build_summary(_results(), settings=Settings()).to_dict()
    assert data["category_totals"] == {"opd_time": 80, "opd_special": 15, "opd_premium": 5, "ipd": 24}
    assert data["top_departments"][0]["category"] == "opd_time"
