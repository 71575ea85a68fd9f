from dotenv import load_dotenv
load_dotenv()

import sys
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import streamlit as st

# Ensure repo root is on sys.path for "census" imports
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from census.config import get_settings
from census.ir import ExtractionResult, SheetCategory
from census.logger import get_logger
from census.pipeline import run_extract_bytes
from census.router import UnknownSheetMapping
from census.summary import (
    CATEGORY_LABELS,
    STATUS_BUSY,
    DashboardSummary,
    build_summary,
    department_loads,
)

logger = get_logger(__name__)

# ============================================================================
# Constants
# ============================================================================
ALLOWED_EXTENSIONS = ["xlsx", "xls", "csv"]


# ============================================================================
# Helper Functions
# ============================================================================

@st.cache_data(show_spinner="กำลังประมวลผลข้อมูล...")
def load_results(
    content: bytes,
    filename: str,
    mapping: str,
    category: Optional[str] = None,
) -> Dict[SheetCategory, ExtractionResult]:
    """Extract an uploaded workbook; cached by file content, mapping mode and category."""
    report = run_extract_bytes(content, filename, mode=mapping, category=category)
    return dict(report.results)


def validate_file_size(uploaded_file) -> bool:
    """
    Reject uploads above ``MAX_UPLOAD_MB``.

    Returns:
        True if file size is valid, False otherwise.
    """
    max_mb = get_settings().MAX_UPLOAD_MB
    if uploaded_file.size > max_mb * 1024 * 1024:
        size_mb = uploaded_file.size / (1024 * 1024)
        st.error(f"ไฟล์ '{uploaded_file.name}' มีขนาด {size_mb:.1f}MB เกินขีดจำกัด {max_mb}MB")
        logger.warning("File %s rejected: %d bytes", uploaded_file.name, uploaded_file.size)
        return False
    return True


def trend_frame(results: Dict[SheetCategory, ExtractionResult], dates: List[str]) -> pd.DataFrame:
    """One column per category, one row per date."""
    data = {
        CATEGORY_LABELS[cat]: [res.value_on(d) for d in dates]
        for cat, res in results.items()
    }
    return pd.DataFrame(data, index=pd.Index(dates, name="date"))


def render_cards(summary: DashboardSummary) -> None:
    col1, col2, col3, col4 = st.columns(4)
    delta = f"{summary.day_over_day_pct}% จากเมื่อวาน" if summary.day_over_day_pct is not None else None
    col1.metric("ผู้ป่วยรวมทั้งหมด", f"{summary.total_patients:,}", delta=delta)
    col2.metric(CATEGORY_LABELS[SheetCategory.OPD_TIME], f"{summary.category_totals.get(SheetCategory.OPD_TIME, 0):,}")
    col3.metric("OPD คลินิกพิเศษ", f"{summary.special_clinic_total:,}")
    col4.metric(CATEGORY_LABELS[SheetCategory.IPD], f"{summary.category_totals.get(SheetCategory.IPD, 0):,}")


def render_department_table(
    results: Dict[SheetCategory, ExtractionResult],
    category: Optional[SheetCategory],
    summary: DashboardSummary,
) -> None:
    if category is None:
        loads = summary.top_departments
    else:
        loads = department_loads(
            results, category, summary.selected_date, get_settings().BUSY_THRESHOLD,
        )
    if not loads:
        st.info("ไม่พบข้อมูล")
        return
    df = pd.DataFrame(
        {
            "ชื่อคลินิก / แผนก": [d.name for d in loads],
            "ประเภท": [CATEGORY_LABELS[d.category] for d in loads],
            "จำนวนผู้ป่วย (ราย)": [d.value for d in loads],
            "สถานะ": ["หนาแน่น" if d.status == STATUS_BUSY else "ปกติ" for d in loads],
        }
    )
    st.bar_chart(df.set_index("ชื่อคลินิก / แผนก")["จำนวนผู้ป่วย (ราย)"])
    st.dataframe(df, use_container_width=True, hide_index=True)


# ============================================================================
# Page
# ============================================================================

st.set_page_config(page_title="Hospital Daily Dashboard", layout="wide")
st.title("Hospital Daily Dashboard")

with st.sidebar:
    st.header("นำเข้าข้อมูล")
    uploaded = st.file_uploader("Import Excel/CSV", type=ALLOWED_EXTENSIONS)
    mapping = st.radio(
        "จับคู่ชีต",
        options=["name", "positional"],
        index=0 if get_settings().SHEET_MAPPING_MODE == "name" else 1,
        help="name: ตามชื่อชีต, positional: ตามลำดับชีต",
    )

if uploaded is None:
    st.info("อัปโหลดไฟล์รายงานผู้ป่วยเพื่อแสดงผล")
    st.stop()

if not validate_file_size(uploaded):
    st.stop()

# A CSV holds a single sheet, so its category is chosen by hand.
csv_category = None
if Path(uploaded.name).suffix.lower() == ".csv":
    csv_category = st.sidebar.selectbox(
        "ประเภทข้อมูลของไฟล์ CSV",
        [c.value for c in SheetCategory],
        format_func=lambda v: CATEGORY_LABELS[SheetCategory(v)],
    )

try:
    results = load_results(uploaded.getvalue(), uploaded.name, mapping, csv_category)
except UnknownSheetMapping as e:
    st.error(f"ไม่สามารถจับคู่ชีตกับประเภทผู้ป่วยได้: {e}")
    st.stop()
except ValueError as e:
    st.error(str(e))
    st.stop()

all_dates = build_summary(results).dates
if not all_dates:
    st.warning("ไม่พบคอลัมน์วันที่ในไฟล์")
    st.stop()

selected_date = st.sidebar.selectbox("วันที่", all_dates, index=len(all_dates) - 1)
summary = build_summary(results, selected_date=selected_date)

st.caption(f"รายงานข้อมูลผู้ป่วยรายวัน (ข้อมูล ณ วันที่ {summary.selected_date})")
render_cards(summary)

st.subheader("แนวโน้มผู้ป่วยตลอดเดือน")
st.line_chart(trend_frame(results, all_dates))

st.subheader("สัดส่วนแยกตามแผนก")
category_options = [None] + list(results.keys())
category = st.selectbox(
    "แผนก",
    category_options,
    format_func=lambda c: f"แสดง Top {get_settings().TOP_DEPARTMENTS} แผนก (รวม)" if c is None else CATEGORY_LABELS[c],
)
render_department_table(results, category, summary)

warnings = {cat: res.warnings for cat, res in results.items() if res.warnings}
if warnings:
    with st.expander("คำเตือนระหว่างอ่านไฟล์", expanded=False):
        for cat, codes in warnings.items():
            st.write(f"{CATEGORY_LABELS[cat]}: {', '.join(codes)}")
