"""
Profile Loader Module
=====================

Load an optional YAML profile describing one hospital's workbook: sheet
mapping mode, sheet-name aliases and total-row hints per category.

Example profile::

    profile_id: central_hospital
    sheet_mapping:
      mode: name
    categories:
      opd_time:
        aliases: ["OPD ในเวลา", "OPD in hours"]
        expected_total_row: 52
      ipd:
        aliases: ["IPD", "ผู้ป่วยใน"]
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from census.ir import SheetCategory

# census/profile_loader.py → parents[1] is the repository root
REPO_ROOT = Path(__file__).resolve().parents[1]

_VALID_MAPPING_MODES = {"name", "positional"}


def _ensure_dict(value: Any) -> Dict[str, Any]:
    """Return *value* when it is a dict, otherwise an empty dict."""
    if isinstance(value, dict):
        return value
    return {}


def _ensure_str_list(value: Any) -> List[str]:
    """Return the non-blank strings of *value*, or an empty list."""
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
    return out


def default_profile() -> Dict[str, Any]:
    return {
        "profile_id": None,
        "sheet_mapping": {},
        "categories": {},
    }


def load_profile(profile_path: str) -> dict:
    """
    Load a profile from YAML.

    Args:
        profile_path: profile file, relative paths resolve against the repo root

    Returns:
        dict with ``profile_id``, ``sheet_mapping`` and ``categories``;
        unknown categories and malformed entries are dropped

    Raises:
        FileNotFoundError: when the file does not exist
    """
    if not profile_path:
        return default_profile()

    path = Path(profile_path).expanduser()
    if not path.is_absolute():
        path = (REPO_ROOT / path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"profile not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    data = _ensure_dict(raw)

    mapping_raw = _ensure_dict(data.get("sheet_mapping"))
    sheet_mapping: Dict[str, Any] = {}
    mode = mapping_raw.get("mode")
    if isinstance(mode, str) and mode.strip().lower() in _VALID_MAPPING_MODES:
        sheet_mapping["mode"] = mode.strip().lower()

    categories: Dict[str, Dict[str, Any]] = {}
    valid_ids = {c.value for c in SheetCategory}
    for key, entry in _ensure_dict(data.get("categories")).items():
        if not isinstance(key, str) or key.strip().lower() not in valid_ids:
            continue
        entry = _ensure_dict(entry)
        item: Dict[str, Any] = {}
        aliases = _ensure_str_list(entry.get("aliases"))
        if aliases:
            item["aliases"] = aliases
        total_row = entry.get("expected_total_row")
        if isinstance(total_row, int) and not isinstance(total_row, bool) and total_row > 0:
            item["expected_total_row"] = total_row
        if item:
            categories[key.strip().lower()] = item

    return {
        "profile_id": data.get("profile_id"),
        "sheet_mapping": sheet_mapping,
        "categories": categories,
    }


def profile_aliases(profile: dict) -> Dict[SheetCategory, List[str]]:
    """Sheet-name aliases declared by *profile*, keyed by category."""
    out: Dict[SheetCategory, List[str]] = {}
    for key, entry in _ensure_dict((profile or {}).get("categories")).items():
        aliases = _ensure_str_list(_ensure_dict(entry).get("aliases"))
        if aliases:
            out[SheetCategory(key)] = aliases
    return out


def profile_total_row(profile: dict, category: SheetCategory) -> Any:
    """Total-row override for *category*, or ``None``."""
    categories = _ensure_dict((profile or {}).get("categories"))
    return _ensure_dict(categories.get(SheetCategory(category).value)).get("expected_total_row")
