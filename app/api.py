"""
API Module
==========

FastAPI backend: ``/extract`` accepts a census workbook upload and returns
per-category extraction results plus the dashboard summary.
"""

from typing import Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.backend.process import build_readable_output
from census.config import get_settings
from census.logger import get_logger
from census.pipeline import run_extract_bytes
from census.router import UnknownSheetMapping

logger = get_logger(__name__)

app = FastAPI(title="Hospital Census Backend")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/extract")
async def extract_endpoint(
    file: UploadFile = File(...),
    mapping: Optional[str] = None,
    category: Optional[str] = None,
    date: Optional[str] = None,
):
    """
    Extract an uploaded workbook (.xlsx, .xls or .csv).

    Query parameters: ``mapping`` (name|positional), ``category`` for a
    single-sheet upload, ``date`` to summarize.
    """
    settings = get_settings()
    content = await file.read()
    logger.info("Extract request: %s (%d bytes)", file.filename, len(content))
    max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.MAX_UPLOAD_MB}MB limit",
        )

    try:
        report = run_extract_bytes(
            content, file.filename or "", mode=mapping, category=category, settings=settings,
        )
    except UnknownSheetMapping as e:
        raise HTTPException(status_code=400, detail=f"UnknownSheetMapping: {e}") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    # Table cells stay raw and may hold dates
    return JSONResponse(jsonable_encoder(build_readable_output(report, selected_date=date)))
