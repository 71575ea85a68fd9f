from pathlib import Path

import pytest

from census.ir import SheetCategory
from census.profile_loader import default_profile, load_profile, profile_aliases, profile_total_row


def test_profile_loader_reads_aliases_and_total_rows(tmp_path: Path):
    profile_file = tmp_path / "profile.yaml"
    profile_file.write_text(
        """
profile_id: "central_hospital"
sheet_mapping:
  mode: "Positional"
categories:
  opd_time:
    aliases: ["OPD ในเวลา", "  ", 3]
    expected_total_row: 52
  OPD_Premium:
    aliases: ["VIP Clinic"]
  ipd:
    expected_total_row: 0
  er:
    aliases: ["ER"]
""".strip(),
        encoding="utf-8",
    )
    profile = load_profile(str(profile_file))

    assert profile["profile_id"] == "central_hospital"
    assert profile["sheet_mapping"] == {"mode": "positional"}
    assert profile["categories"] == {
        "opd_time": {"aliases": ["OPD ในเวลา"], "expected_total_row": 52},
        "opd_premium": {"aliases": ["VIP Clinic"]},
    }
    assert profile_aliases(profile) == {
        SheetCategory.OPD_TIME: ["OPD ในเวลา"],
        SheetCategory.OPD_PREMIUM: ["VIP Clinic"],
    }
    assert profile_total_row(profile, SheetCategory.OPD_TIME) == 52
    assert profile_total_row(profile, SheetCategory.IPD) is None


def test_profile_loader_drops_invalid_values(tmp_path: Path):
    profile_file = tmp_path / "bad.yaml"
    profile_file.write_text(
        """
sheet_mapping: "name"
categories:
  opd_special:
    expected_total_row: true
  opd_time: "oops"
""".strip(),
        encoding="utf-8",
    )
    profile = load_profile(str(profile_file))
    assert profile["sheet_mapping"] == {}
    assert profile["categories"] == {}


def test_empty_path_gives_default_profile():
    assert load_profile("") == default_profile()
    assert profile_aliases(default_profile()) == {}


def test_empty_file_gives_default_shape(tmp_path: Path):
    profile_file = tmp_path / "empty.yaml"
    profile_file.write_text("", encoding="utf-8")
    assert load_profile(str(profile_file)) == default_profile()


def test_missing_profile_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_profile(str(tmp_path / "nope.yaml"))
