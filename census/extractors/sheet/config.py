"""
Centralised configuration for the sheet extraction engine.

Regex patterns, marker keywords and structural constants live here so the
extractors stay free of hard-coded values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple


# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (shared across modules)
# ---------------------------------------------------------------------------

# Searched, not anchored: "2569-01-05", "2026-01-05 00:00:00",
# "วันที่ 2569-01-05" and month labels like "2569-01" are all date labels.
DATE_TOKEN_RE = re.compile(r"(\d{4})-(\d{1,2})(?:-(\d{1,2}))?")

# Looser fallback: any "-" joining two non-blank tokens ("1-ม.ค.", "05-01").
LOOSE_DATE_TOKEN_RE = re.compile(r"[^\s\-]\s*-\s*[^\s\-]")

LEADING_NUMBER_RE = re.compile(r"^[+-]?\d+(?:\.\d+)?")


# ---------------------------------------------------------------------------
# Keyword constants
# ---------------------------------------------------------------------------

# Thai "รวม" and English "total"; compared case-insensitively.
TOTAL_MARKERS: Tuple[str, ...] = ("รวม", "total")


# ---------------------------------------------------------------------------
# ExtractorConfig: structural constants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractorConfig:
    """Immutable bag of structural constants used by both extractors."""

    # Fixed columns of every data row
    code_column: int = 0
    name_column: int = 1

    # Banded layout: columns per date and rows between header and data
    band_width: int = 3
    subheader_rows: int = 1

    # Minimum row counts below which a sheet yields an empty result
    min_flat_rows: int = 1
    min_banded_rows: int = 3


# Singleton default config
DEFAULT_CONFIG = ExtractorConfig()
