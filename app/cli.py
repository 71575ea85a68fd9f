import argparse
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from app.backend.process import process_workbook, write_json_output
from census.router import UnknownSheetMapping


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract daily patient-census trends from a hospital workbook."
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Workbook path (.xlsx, .xls or .csv).",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory to write the output JSON.",
    )
    parser.add_argument(
        "--mapping",
        choices=["name", "positional"],
        default=None,
        help="How sheets are matched to categories (default: SHEET_MAPPING_MODE).",
    )
    parser.add_argument(
        "--profile-path",
        default=None,
        help="Path to a profile YAML file.",
    )
    parser.add_argument(
        "--category",
        default=None,
        help="Category of a single-sheet source such as a CSV (opd_time, opd_special, opd_premium, ipd).",
    )
    parser.add_argument(
        "--date",
        default=None,
        help="Date label to summarize (default: latest date in the workbook).",
    )
    parser.add_argument(
        "--output-json-name",
        default=None,
        help="Output JSON filename (default: census.json, or env OUTPUT_JSON_NAME).",
    )
    parser.add_argument(
        "--output-json-timestamp",
        action="store_true",
        help="Append timestamp to JSON output filename (overrides default name).",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    path = Path(args.input).expanduser()
    if not path.is_file():
        print(f"[error] input not found: {args.input}")
        return 1

    try:
        result = process_workbook(
            str(path),
            mode=args.mapping,
            profile_path=args.profile_path,
            category=args.category,
            selected_date=args.date,
        )
    except (UnknownSheetMapping, ValueError, FileNotFoundError) as e:
        print(f"[error] {e}")
        return 1

    output_json_name = args.output_json_name
    if args.output_json_timestamp and not output_json_name:
        output_json_name = f"census_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

    json_path = write_json_output(result, args.output_dir, output_filename=output_json_name)

    summary = result.get("summary", {})
    print("JSON:", json_path)
    print(f"date: {summary.get('selected_date') or '-'}  total patients: {summary.get('total_patients', 0)}")
    for key, res in result.get("results", {}).items():
        print(f"{key}: totalToday={res.get('totalToday')} dates={len(res.get('dates', []))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
