"""
Pytest configuration and shared fixtures.
"""
import os
import sys

import pytest

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from census import config as census_config


@pytest.fixture
def flat_sheet():
    """Outpatient sheet: banner rows, header, clinics, total row at spreadsheet row 6."""
    return [
        ["รายงานผู้ป่วยนอก ในเวลาราชการ"],
        [],
        ["Code", "Clinic", "2569-01-01", "2569-01-02", "2569-01-03"],
        ["C1", "อายุรกรรม", 50, 61, 48],
        ["C2", "ศัลยกรรม", 30, "", 25],
        ["Total", "รวม", 80, 61, 73],
        ["C3", "  ", 9, 9, 9],
    ]


@pytest.fixture
def banded_sheet():
    """Inpatient sheet: two dates, three sub-columns each, one subtotal row."""
    return [
        ["ตึกผู้ป่วยใน"],
        ["Ward", "Type", "Bed", "2569-01-01", "", "", "2569-01-02", "", ""],
        ["", "", "", "คงเหลือ", "รับใหม่", "รับย้าย", "คงเหลือ", "รับใหม่", "รับย้าย"],
        ["W1", "อายุรกรรมชาย", 30, 20, 3, 1, 22, 2, 0],
        ["W2", "อายุรกรรมหญิง", 30, 25, "-", 2, 24, 1, "x"],
        ["", "รวมอายุรกรรม", "", 45, 3, 3, 46, 3, 0],
        ["W3", "ICU", 8, 6, 1, 0, 7],
    ]


@pytest.fixture
def settings(monkeypatch):
    """Fresh settings built from a clean environment."""
    for key in list(os.environ):
        if key.startswith(("EXPECTED_TOTAL_ROW_", "SHEET_", "BUSY_", "TOP_", "MAX_UPLOAD")):
            monkeypatch.delenv(key, raising=False)
    census_config.reset_settings()
    yield census_config.get_settings()
    census_config.reset_settings()


FLAT_HEADER = ["Code", "Clinic", "2569-01-01", "2569-01-02"]


def write_census_workbook(path, sheet_order=None):
    """Five-sheet workbook in a non-standard order, with one unrelated sheet."""
    from openpyxl import Workbook

    sheets = {
        "IPD": [
            ["Ward", "Type", "Bed", "2569-01-01", "", "", "2569-01-02", "", ""],
            ["", "", "", "คงเหลือ", "รับใหม่", "รับย้าย", "คงเหลือ", "รับใหม่", "รับย้าย"],
            ["W1", "อายุรกรรมชาย", 30, 20, 3, 1, 22, 2, 0],
        ],
        "OPD Premium": [FLAT_HEADER, ["P1", "VIP", 5, 5], ["Total", "รวม", 5, 5]],
        "Notes": [["updated by", "ward clerk"]],
        "OPD ในเวลา & ER": [
            FLAT_HEADER,
            ["C1", "อายุรกรรม", 50, 60],
            ["C2", "ศัลยกรรม", 30, 20],
            ["Total", "รวม", 80, 80],
        ],
        "OPD คลินิกพิเศษ": [FLAT_HEADER, ["S1", "คลินิกเบาหวาน", 10, 15], ["Total", "รวม", 10, 15]],
    }
    wb = Workbook()
    wb.remove(wb.active)
    for name in sheet_order or list(sheets):
        ws = wb.create_sheet(name)
        for row in sheets[name]:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture
def census_workbook(tmp_path):
    return write_census_workbook(tmp_path / "census.xlsx")


@pytest.fixture
def workbook_writer():
    return write_census_workbook
