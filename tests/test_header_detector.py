from datetime import datetime

from census.extractors.sheet.header_detector import DateBand, DateColumn, HeaderDetector


def test_first_date_row_is_header():
    rows = [
        ["โรงพยาบาลตัวอย่าง"],
        [None, "ประจำเดือน มกราคม"],
        ["Code", "Clinic", "2569-01-01"],
        ["Code", "Clinic", "2569-01-02"],
    ]
    assert HeaderDetector().find_header_row(rows) == (2, True)


def test_not_found_defaults_to_row_zero():
    rows = [["a", "b"], ["c", "d"]]
    assert HeaderDetector().find_header_row(rows) == (0, False)
    assert HeaderDetector().find_header_row(rows, allow_loose=True) == (0, False)
    assert HeaderDetector().find_header_row([]) == (0, False)


def test_loose_pass_only_when_allowed():
    rows = [["Code", "Clinic", "1-ม.ค."]]
    assert HeaderDetector().find_header_row(rows) == (0, False)
    assert HeaderDetector().find_header_row(rows, allow_loose=True) == (0, True)


def test_date_columns_left_to_right():
    header = ["Code", "Clinic", "2569-01-01", None, "2569-01-02", "รวม", datetime(2026, 1, 3)]
    assert HeaderDetector.date_columns(header) == [
        DateColumn(label="2569-01-01", index=2),
        DateColumn(label="2569-01-02", index=4),
        DateColumn(label="2026-01-03", index=6),
    ]


def test_date_bands_skip_merged_columns():
    header = ["Ward", "Type", "Bed", "2569-01-01", "", "2569-01-01x", "2569-01-02", "", ""]
    bands = HeaderDetector().date_bands(header)
    # The label at column 5 falls inside the first band and is never inspected.
    assert bands == [
        DateBand(label="2569-01-01", start=3),
        DateBand(label="2569-01-02", start=6),
    ]
