"""
Regression tests for the banded inpatient layout.
"""
from census.extractors import BandedSheetExtractor, extract_banded
from census.extractors.base import WARN_EMPTY_SHEET, WARN_MISSING_HEADER_ROW
from census.extractors.sheet.config import ExtractorConfig
from census.extractors.sheet.header_detector import DateBand


def test_single_ward_triplet_sum():
    sheet = [
        ["Ward", "Type", "Bed", "", "2569-01-01", "", ""],
        ["", "", "", "", "คงเหลือ", "รับใหม่", "รับย้าย"],
        ["W1", "Med", 30, "", 2, 1, 0],
    ]
    result = extract_banded(sheet)

    assert [p.model_dump() for p in result.chart_data] == [{"date": "2569-01-01", "value": 3}]
    assert [r.as_row() for r in result.table_data] == [["W1", "Med", 3]]
    assert result.total_today == 3
    assert result.total_row_index is None


def test_multi_ward_totals(banded_sheet):
    result = extract_banded(banded_sheet)

    assert result.header_row_index == 1
    assert result.dates == ["2569-01-01", "2569-01-02"]
    assert [r.as_row() for r in result.table_data] == [
        ["W1", "อายุรกรรมชาย", 24, 24],
        ["W2", "อายุรกรรมหญิง", 27, 25],
        ["W3", "ICU", 7, 7],
    ]
    assert [p.value for p in result.chart_data] == [58, 56]
    assert result.total_today == 56
    assert result.warnings == []


def test_subtotal_rows_never_counted(banded_sheet):
    result = extract_banded(banded_sheet)
    names = [r.name for r in result.table_data]
    assert "รวมอายุรกรรม" not in names
    per_date = zip(*[r.values for r in result.table_data])
    assert [sum(col) for col in per_date] == [p.value for p in result.chart_data]


def test_total_row_in_english_is_excluded():
    sheet = [
        ["Ward", "Type", "Bed", "2569-01-01", "", ""],
        ["", "", "", "a", "b", "c"],
        ["W1", "Surg", 10, 1, 1, 1],
        ["", "Grand Total", "", 3, 0, 0],
    ]
    result = extract_banded(sheet)
    assert result.total_today == 3
    assert len(result.table_data) == 1


def test_too_few_rows_is_empty():
    sheet = [
        ["Ward", "Type", "Bed", "2569-01-01", "", ""],
        ["W1", "Surg", 10, 1, 1, 1],
    ]
    result = extract_banded(sheet)
    assert result.chart_data == []
    assert result.table_data == []
    assert result.warnings == [WARN_EMPTY_SHEET]


def test_no_loose_header_fallback():
    sheet = [
        ["Ward", "Type", "1-ม.ค.", "", ""],
        ["", "", "คงเหลือ-ยกมา", "รับใหม่", "รับย้าย"],
        ["W1", "Surg", 1, 1, 1],
    ]
    result = extract_banded(sheet)
    assert WARN_MISSING_HEADER_ROW in result.warnings
    assert result.header_row_index == 0
    assert result.chart_data == []


def test_band_sum_ignores_missing_columns():
    band = DateBand(label="2569-01-01", start=3)
    assert band.indices == (3, 4, 5)
    assert BandedSheetExtractor.band_sum(["W", "x", 1, 4], band) == 4
    assert BandedSheetExtractor.band_sum(["W", "x", 1, "2", "3 ", "-"], band) == 5


def test_custom_band_width():
    sheet = [
        ["Ward", "Name", "2569-01-01", "", "2569-01-02", ""],
        ["", "", "a", "b", "a", "b"],
        ["W1", "Surg", 1, 2, 3, 4],
    ]
    result = BandedSheetExtractor(ExtractorConfig(band_width=2)).extract(sheet)
    assert [p.value for p in result.chart_data] == [3, 7]
