"""
Backend Process Module
======================

Shared by the CLI and the HTTP API: extract a census workbook, summarize
it for the selected date and write the JSON output.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from census.logger import get_logger
from census.pipeline import CensusReport, run_extract
from census.summary import CATEGORY_LABELS, build_summary

logger = get_logger(__name__)


def ensure_output_dir(output_dir: str) -> Path:
    """Create *output_dir* when missing and return it resolved."""
    output_path = Path(output_dir).resolve()
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def build_readable_output(report: CensusReport, selected_date: Optional[str] = None) -> Dict[str, Any]:
    """Serializable view of a report plus its dashboard summary."""
    summary = build_summary(report.results, selected_date=selected_date)
    return {
        "source": report.source,
        "categories": {cat.value: CATEGORY_LABELS[cat] for cat in report.results},
        "results": report.to_dict()["results"],
        "summary": summary.to_dict(),
        "warnings": {
            cat.value: list(res.warnings) for cat, res in report.results.items() if res.warnings
        },
    }


def process_workbook(
    file_path: str,
    mode: Optional[str] = None,
    profile_path: Optional[str] = None,
    category: Optional[str] = None,
    selected_date: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Run extraction on one workbook and return the readable output.

    Errors from reading or sheet mapping propagate to the caller.
    """
    logger.info("Processing workbook %s", file_path)
    report = run_extract(file_path, mode=mode, profile_path=profile_path, category=category)
    return build_readable_output(report, selected_date=selected_date)


_TRUTHY = {"1", "true", "yes", "on"}


def _resolve_output_json_name(output_filename: Optional[str] = None) -> str:
    """Explicit name, then ``OUTPUT_JSON_NAME``, then a timestamped or fixed default."""
    for candidate in (output_filename, os.getenv("OUTPUT_JSON_NAME")):
        if candidate and candidate.strip():
            return candidate.strip()
    if os.getenv("OUTPUT_JSON_TIMESTAMP", "").strip().lower() in _TRUTHY:
        return f"census_{datetime.now():%Y%m%d_%H%M%S}.json"
    return "census.json"


def write_json_output(
    result: Dict[str, Any],
    output_dir: str,
    output_filename: Optional[str] = None,
) -> str:
    """Write *result* as UTF-8 JSON into *output_dir* and return the file path."""
    json_path = ensure_output_dir(output_dir) / _resolve_output_json_name(output_filename)
    # Raw table cells may be dates; default=str renders them as text.
    json_path.write_text(
        json.dumps(result, ensure_ascii=False, indent=2, default=str),
        encoding="utf-8",
    )
    logger.info("Wrote %s", json_path)
    return str(json_path)
