import json

from app.cli import main


def test_cli_writes_json(census_workbook, settings, tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("OUTPUT_JSON_NAME", raising=False)
    monkeypatch.delenv("OUTPUT_JSON_TIMESTAMP", raising=False)
    out_dir = tmp_path / "out"

    code = main(["--input", str(census_workbook), "--output-dir", str(out_dir), "--date", "2569-01-01"])

    assert code == 0
    data = json.loads((out_dir / "census.json").read_text(encoding="utf-8"))
    assert data["summary"]["selected_date"] == "2569-01-01"
    assert data["results"]["opd_time"]["totalToday"] == 80
    assert "total patients: 119" in capsys.readouterr().out


def test_cli_custom_output_name(census_workbook, settings, tmp_path):
    code = main([
        "--input", str(census_workbook),
        "--output-dir", str(tmp_path),
        "--output-json-name", "daily.json",
    ])
    assert code == 0
    assert (tmp_path / "daily.json").exists()


def test_cli_missing_input(tmp_path, capsys):
    assert main(["--input", str(tmp_path / "missing.xlsx")]) == 1
    assert "[error]" in capsys.readouterr().out


def test_cli_mapping_error(census_workbook, settings, tmp_path, capsys):
    code = main(["--input", str(census_workbook), "--output-dir", str(tmp_path), "--mapping", "positional"])
    assert code == 1
    assert "positional mapping needs exactly 4 sheets" in capsys.readouterr().out
